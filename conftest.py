"""
Repository-level pytest configuration.

  - `--run-e2e` switch for the live suite (needs the real app and a Google account)
  - `--ui-headed` / `--ui-browser` overrides for local debugging
  - Loguru set up once per test session

Credentials are never stored here; live runs read TEST_EMAIL / TEST_PASSWORD
from the environment.
"""

from __future__ import annotations

import os

from anyteam_suites.common.log_config import init_logger


def pytest_addoption(parser):
    group = parser.getgroup("anyteam", "Anyteam E2E suite")
    group.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run live E2E tests against the configured app (also enabled by RUN_E2E=1)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Show the browser window (sets HEADLESS=false)",
    )
    group.addoption(
        "--ui-browser",
        action="store",
        default=None,
        choices=["chromium", "firefox", "webkit"],
        help="Browser engine for UI tests (sets BROWSER)",
    )


def pytest_configure(config):
    if config.getoption("--ui-headed"):
        os.environ["HEADLESS"] = "false"
    if config.getoption("--ui-browser"):
        os.environ["BROWSER"] = config.getoption("--ui-browser")
    init_logger()

