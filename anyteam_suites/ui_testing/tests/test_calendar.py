"""
================================================================================
Calendar UI Tests (Async / Playwright)
================================================================================

Google Calendar event creation and the Anyteam calendar: finding the meeting,
opening it in Google Calendar and joining it.

The Google Calendar tests rely on the Google cookies stored with the auth
session; creating an event sends a real invitation to MEETING_GUEST_EMAIL.

================================================================================
"""

import allure
import pytest
from playwright.async_api import Page

from anyteam_suites.common.suite_data import TestData
from anyteam_suites.ui_testing.pages.calendar_page import GOOGLE_CALENDAR_HOST, AnyteamCalendarPage
from anyteam_suites.ui_testing.pages.google_calendar_page import GoogleCalendarPage


@allure.epic("UI Testing")
@allure.feature("Calendar")
@pytest.mark.calendar
class TestGoogleCalendar:
    """Google Calendar event creation (async)."""

    @allure.story("Google Calendar")
    @allure.title("Create a Google Calendar meeting for tomorrow")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression_ui
    @pytest.mark.asyncio
    async def test_create_google_calendar_meeting(self, authenticated_page: Page, test_data: TestData):
        google_calendar = GoogleCalendarPage(authenticated_page)
        await google_calendar.open()

        await google_calendar.create_event(test_data.meeting)

        assert await google_calendar.is_event_listed(test_data.meeting.title)


@allure.epic("UI Testing")
@allure.feature("Calendar")
@pytest.mark.calendar
class TestAnyteamCalendar:
    """Anyteam calendar (async)."""

    @allure.story("Anyteam Calendar")
    @allure.title("Calendar lists meetings")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.smoke_ui
    @pytest.mark.asyncio
    async def test_calendar_lists_meetings(self, calendar_page: AnyteamCalendarPage):
        await calendar_page.open()
        await calendar_page.click_calendar_icon()

        titles = await calendar_page.meeting_titles()

        assert titles, "No meetings on the Anyteam calendar"

    @allure.story("Anyteam Calendar")
    @allure.title("Find the configured meeting")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression_ui
    @pytest.mark.asyncio
    async def test_find_meeting(self, calendar_page: AnyteamCalendarPage, test_data: TestData):
        await calendar_page.open()
        await calendar_page.click_calendar_icon()

        meeting = await calendar_page.find_meeting(
            test_data.meeting.title,
            test_data.meeting.time_slot,
            timeout=calendar_page.timeout("long"),
        )

        assert meeting is not None

    @allure.story("Anyteam Calendar")
    @allure.title("Find and open meeting in Google Calendar")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression_ui
    @pytest.mark.asyncio
    async def test_open_meeting_in_google_calendar(self, calendar_page: AnyteamCalendarPage):
        await calendar_page.open()

        google_page = await calendar_page.open_meeting_in_google_calendar()

        assert GOOGLE_CALENDAR_HOST in google_page.url

    @allure.story("Anyteam Calendar")
    @allure.title("Join the meeting from the calendar")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_find_and_join_meeting(self, calendar_page: AnyteamCalendarPage, test_data: TestData):
        await calendar_page.open()

        meet_page = await calendar_page.find_and_join_meeting(
            test_data.meeting.title,
            test_data.meeting.time_slot,
        )

        with allure.step("Verify meeting tab"):
            target = meet_page or calendar_page.page
            assert not target.is_closed()
            allure.attach(target.url, name="Meeting URL", attachment_type=allure.attachment_type.TEXT)
