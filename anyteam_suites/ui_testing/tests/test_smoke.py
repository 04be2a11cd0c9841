"""
================================================================================
Smoke Test - End to End (Async / Playwright)
================================================================================

One journey across the app in a single context:
login -> home -> notifications -> settings -> profile info -> LinkedIn.

================================================================================
"""

import allure
import pytest

from anyteam_suites.common.suite_data import TestData
from anyteam_suites.ui_testing.flows.login_flow import LoginFlow
from anyteam_suites.ui_testing.framework.browser_manager import BrowserManager
from anyteam_suites.ui_testing.pages.home_page import HomePage
from anyteam_suites.ui_testing.pages.linkedin_page import LinkedInPage
from anyteam_suites.ui_testing.pages.notifications_page import NotificationsPage
from anyteam_suites.ui_testing.pages.profile_info_page import ProfileInfoPage


@allure.epic("UI Testing")
@allure.feature("Smoke")
class TestSmoke:
    """Full journey (async)."""

    @allure.story("End to End")
    @allure.title("Login, notifications, settings, profile info and LinkedIn")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.smoke_ui
    @pytest.mark.asyncio
    async def test_full_journey(self, browser_manager: BrowserManager, test_data: TestData, tmp_path):
        base = test_data.urls.base
        context = await browser_manager.new_context()

        page, _ = await LoginFlow(context, test_data, auth_state_path=tmp_path / "auth.json").perform_login()
        assert base.split("//", 1)[-1] in page.url
        assert "accounts.google.com" not in page.url

        with allure.step("Home"):
            home = HomePage(page, base)
            await home.verify_loaded()
            assert await home.greeting_text()

        with allure.step("Notifications"):
            notifications = await NotificationsPage(page, base).open()
            assert await notifications.is_displayed()
            await notifications.press_escape()

        with allure.step("Profile Info"):
            profile = await ProfileInfoPage(page, base).open_profile_info()
            assert await profile.is_profile_info_active()
            await profile.edit_about(test_data.profile.about)
            assert test_data.profile.about in (await profile.about_text() or "")

        with allure.step("LinkedIn"):
            linkedin = await LinkedInPage(page, base).open_linkedin()
            assert await linkedin.is_linkedin_active()
            if test_data.profile.linkedin_url:
                await linkedin.edit_linkedin(test_data.profile.linkedin_url)
