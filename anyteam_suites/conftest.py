"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the project-wide markers, tags tests by directory, and keeps the
live E2E suite opt-in: it needs the real app and a Google test account, so
it only runs with `--run-e2e` or RUN_E2E=1.

================================================================================
"""

import os

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "smoke_ui: UI smoke tests"
    )
    config.addinivalue_line(
        "markers", "regression_ui: UI regression tests"
    )
    config.addinivalue_line(
        "markers", "e2e: Live end-to-end tests against the real application"
    )
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests with fakes or a local stub page"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Tests related to login and Google OAuth"
    )
    config.addinivalue_line(
        "markers", "meetings: Tests related to meetings"
    )
    config.addinivalue_line(
        "markers", "calendar: Tests related to the Anyteam and Google calendars"
    )
    config.addinivalue_line(
        "markers", "settings: Tests related to settings tabs"
    )
    config.addinivalue_line(
        "markers", "notifications: Tests related to the notifications panel"
    )


def _e2e_enabled(config) -> bool:
    flag = os.environ.get("RUN_E2E", "").strip().lower()
    return config.getoption("--run-e2e") or flag in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by directory and skip live E2E tests unless enabled.
    """
    skip_e2e = pytest.mark.skip(reason="live E2E test, enable with --run-e2e or RUN_E2E=1")
    run_e2e = _e2e_enabled(config)

    for item in items:
        path = str(item.fspath)

        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.e2e)

        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    mode = "live E2E enabled" if _e2e_enabled(config) else "live E2E skipped"
    return [
        "",
        "=" * 60,
        f"Anyteam E2E Suite ({mode})",
        "=" * 60,
        "",
    ]
