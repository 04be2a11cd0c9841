"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for the live E2E suite.

Key Features:
- One Google sign-in per test session (explicit AuthSession, replayed into a
  fresh browser context per test)
- Browser and page lifecycle management
- Page Object fixtures bound to the authenticated page
- Screenshot + URL + failed responses attached to Allure on failure

================================================================================
"""

import asyncio
from typing import AsyncGenerator

import allure
import pytest
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import BrowserContext, Page

from anyteam_suites.common.suite_data import TestData
from anyteam_suites.ui_testing.flows.login_flow import establish_session
from anyteam_suites.ui_testing.framework.browser_manager import BrowserManager, open_authenticated_page
from anyteam_suites.ui_testing.framework.screenshots import take_screenshot
from anyteam_suites.ui_testing.framework.session import AuthSession
from anyteam_suites.ui_testing.pages.calendar_page import AnyteamCalendarPage
from anyteam_suites.ui_testing.pages.google_oauth_page import GoogleOAuthPage
from anyteam_suites.ui_testing.pages.home_page import HomePage
from anyteam_suites.ui_testing.pages.linkedin_page import LinkedInPage
from anyteam_suites.ui_testing.pages.login_page import LoginPage
from anyteam_suites.ui_testing.pages.meeting_page import MeetingPage
from anyteam_suites.ui_testing.pages.notifications_page import NotificationsPage
from anyteam_suites.ui_testing.pages.profile_info_page import ProfileInfoPage
from anyteam_suites.ui_testing.pages.settings_page import SettingsPage


# ================================================================================
# Test Data and Session
# ================================================================================

@pytest.fixture(scope="session")
def test_data() -> TestData:
    """Credentials, profile, meeting data, timeouts and URLs from config / env."""
    return TestData.from_config()


async def _establish(data: TestData) -> AuthSession:
    async with BrowserManager() as manager:
        return await establish_session(manager, data)


@pytest.fixture(scope="session")
def auth_session(test_data: TestData) -> AuthSession:
    """
    Sign in once per session (or reuse a fresh stored session).

    Runs on its own event loop so every test can keep a function-scoped one.
    """
    session = asyncio.run(_establish(test_data))
    logger.info(f"Auth session ready for {session.email}")
    return session


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """Browser per test; contexts are closed with it."""
    async with BrowserManager() as manager:
        yield manager


@pytest.fixture
async def context(browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """Unauthenticated context, for the login tests."""
    yield await browser_manager.new_context()


@pytest.fixture
async def page(request, context: BrowserContext) -> AsyncGenerator[Page, None]:
    page = await context.new_page()
    yield page
    await _capture_on_failure(request, page)


@pytest.fixture
async def authenticated_page(
    request,
    browser_manager: BrowserManager,
    auth_session: AuthSession,
    test_data: TestData,
) -> AsyncGenerator[Page, None]:
    """Page in a context that replays the session, parked on /home."""
    page = await open_authenticated_page(browser_manager, auth_session, test_data.urls.home_path)
    yield page
    await _capture_on_failure(request, page)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page, test_data: TestData) -> LoginPage:
    return LoginPage(page, test_data.urls.base)


@pytest.fixture
def google_oauth_page(page: Page) -> GoogleOAuthPage:
    return GoogleOAuthPage(page)


@pytest.fixture
def home_page(authenticated_page: Page, test_data: TestData) -> HomePage:
    return HomePage(authenticated_page, test_data.urls.base)


@pytest.fixture
def meeting_page(authenticated_page: Page, test_data: TestData) -> MeetingPage:
    return MeetingPage(authenticated_page, test_data.urls.base)


@pytest.fixture
def calendar_page(authenticated_page: Page, test_data: TestData) -> AnyteamCalendarPage:
    return AnyteamCalendarPage(authenticated_page, test_data.urls.base)


@pytest.fixture
def settings_page(authenticated_page: Page, test_data: TestData) -> SettingsPage:
    return SettingsPage(authenticated_page, test_data.urls.base)


@pytest.fixture
def profile_info_page(authenticated_page: Page, test_data: TestData) -> ProfileInfoPage:
    return ProfileInfoPage(authenticated_page, test_data.urls.base)


@pytest.fixture
def linkedin_page(authenticated_page: Page, test_data: TestData) -> LinkedInPage:
    return LinkedInPage(authenticated_page, test_data.urls.base)


@pytest.fixture
def notifications_page(authenticated_page: Page, test_data: TestData) -> NotificationsPage:
    return NotificationsPage(authenticated_page, test_data.urls.base)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Keep each phase's report on the item so fixtures can see the outcome."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


async def _capture_on_failure(request, page: Page) -> None:
    """
    Attach a screenshot and the current URL when the test body failed.

    Runs in fixture teardown, on the test's own event loop.
    """
    report = getattr(request.node, "rep_call", None)
    if report is None or not report.failed or page.is_closed():
        return
    try:
        await take_screenshot(page, f"failure_{request.node.name}", full_page=True)
    except PlaywrightError as e:
        logger.warning(f"Failed to capture screenshot on failure: {e}")
    allure.attach(page.url, name="Current URL", attachment_type=allure.attachment_type.TEXT)
