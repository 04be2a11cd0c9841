"""
Anyteam E2E suites package.

Kept importable so `run_tests.py`, IDEs and CI jobs can reach the shared
framework, page objects and config by module path.

Holds no credentials; live runs read them from the environment.
"""
