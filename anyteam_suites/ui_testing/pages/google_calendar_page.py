"""
================================================================================
Google Calendar Page Object (Async / Playwright)
================================================================================

Schedules the meeting the Anyteam calendar tests later look up and join.
Runs in the same signed-in browser context, so the Google session from the
login flow is reused.

================================================================================
"""

from __future__ import annotations

from typing import Iterable

import allure
from loguru import logger
from playwright.async_api import Page

from anyteam_suites.common.suite_data import MeetingDetails
from anyteam_suites.ui_testing.framework.exceptions import ElementNotFoundError
from anyteam_suites.ui_testing.framework.matchers import ByRole, ByText, as_chain
from anyteam_suites.ui_testing.framework.page_base import PageBase


GOOGLE_CALENDAR_URL = "https://calendar.google.com"


class GoogleCalendarPage(PageBase):
    """Google Calendar event editor (async)."""

    URL_PATH = "/calendar/u/0/r"
    PAGE_TITLE = "Google Calendar"

    LOCATORS = {
        "create_button": (
            'button[jsname="todz4c"]:has-text("Create")',
            'button:has-text("Create")',
            'button:has-text("+ Create")',
        ),
        "event_option": (
            ByText("Event", exact=True),
            '[role="option"]:has-text("Event")',
            '[role="menuitem"]:has-text("Event")',
        ),
        "title_input": (
            'input[aria-label="Add title"]',
            ByRole("textbox", name="Add title"),
        ),
        "start_date": (
            'span[data-key="startDate"]',
        ),
        "start_time": (
            'input[aria-label="Start time"]',
        ),
        "end_time": (
            'input[aria-label="End time"]',
        ),
        "add_guests_button": (
            'button:has-text("Add guests")',
        ),
        "guest_input": (
            'input[aria-label="Guests"]',
            ByRole("combobox", name="Guests"),
        ),
        "send_button": (
            'button:has-text("Send")',
            'span[jsname="V67aGc"]:has-text("Send")',
            'span.UywwFc-vQzf8d:has-text("Send")',
            'span.VfPpkd-vQzf8d:has-text("Send")',
        ),
        "save_button": (
            'button:has-text("Save")',
            'span[jsname="V67aGc"]:has-text("Save")',
            'span.UywwFc-vQzf8d:has-text("Save")',
            'span.VfPpkd-vQzf8d:has-text("Save")',
        ),
        "send_invitation_button": (
            ByRole("button", name="Send", nth=-1),
        ),
        "invite_all_guests_button": (
            'span[jsname="V67aGc"]:has-text("Invite all guests")',
            'span.mUIrbf-vQzf8d:has-text("Invite all guests")',
            'button:has-text("Invite all guests")',
        ),
        "join_with_meet_button": (
            'button:has-text("Join with Google Meet")',
            'a:has-text("Join with Google Meet")',
        ),
    }

    def __init__(self, page: Page, base_url: str = GOOGLE_CALENDAR_URL):
        super().__init__(page, base_url)

    @allure.step("Open Google Calendar")
    async def open(self) -> "GoogleCalendarPage":
        await self.navigate()
        await self.settle(timeout=15000)
        await self.locate("create_button", timeout=self.timeout("long"))
        return self

    @allure.step("Start a new event")
    async def start_event(self) -> None:
        await self.click("create_button", timeout=self.timeout("long"))
        await self.pause(2000)
        await self.click("event_option", timeout=self.timeout("medium"))
        await self.pause(2000)

    @allure.step("Set title: {title}")
    async def set_title(self, title: str) -> None:
        await self.fill("title_input", title, timeout=self.timeout("long"))

    @allure.step("Set date: {label}")
    async def set_date(self, label: str) -> None:
        await self.click("start_date")
        await self.pause(1000)
        await self.page.keyboard.press("Control+A")
        await self.page.keyboard.type(label)
        await self.page.keyboard.press("Enter")
        await self.pause(1000)

    async def _set_time(self, element: str, value: str) -> None:
        resolution = await self.locate(element)
        await self.actions.click(resolution)
        await self.pause(500)
        await self.actions.fill(resolution, value, element_name=element)
        await self.page.keyboard.press("Enter")
        await self.pause(1000)

    @allure.step("Set time: {start} - {end}")
    async def set_times(self, start: str, end: str) -> None:
        await self._set_time("start_time", start)
        await self._set_time("end_time", end)

    @allure.step("Add guests")
    async def add_guests(self, guests: Iterable[str]) -> None:
        """Type each guest and pick the suggestion, or press Enter when none shows."""
        add_guests = await self.find("add_guests_button", timeout=1000)
        if add_guests is not None:
            await self.click(add_guests)
            await self.pause(1000)

        for guest in guests:
            resolution = await self.locate("guest_input")
            await resolution.locator.click()
            await resolution.locator.fill("")
            await self.actions.press_sequentially(resolution, guest, element_name="guest_input")
            await self.pause(2000)

            suggestion = await self.find((f'div[role="option"]:has-text("{guest}")',), timeout=2000)
            if suggestion is not None:
                await self.click(suggestion, element_name="guest_suggestion")
            else:
                logger.debug(f"No suggestion for {guest}, confirming with Enter")
                await self.page.keyboard.press("Enter")
            await self.pause(1500)

    @allure.step("Save event")
    async def save_event(self) -> None:
        """
        Send (with guests) or Save, force-clicked; then the optional invitation dialogs.

        Raises:
            ElementNotFoundError: Neither Send nor Save is visible
        """
        await self.pause(self.timeout("short"))
        button = await self.find("send_button", timeout=2000) or await self.find("save_button", timeout=2000)
        if button is None:
            screenshot = await self.screenshot("save_event_not_found", full_page=True)
            candidates = [
                m.describe()
                for name in ("send_button", "save_button")
                for m in as_chain(self.LOCATORS[name])
            ]
            raise ElementNotFoundError("save_event", candidates, screenshot=screenshot)

        await button.locator.click(force=True)
        await self.pause(3000)

        invitation = await self.find("send_invitation_button", timeout=3000)
        if invitation is not None:
            await self.click(invitation, element_name="send_invitation")
            await self.pause(3000)

        invite_all = await self.find("invite_all_guests_button", timeout=2000)
        if invite_all is not None:
            await self.click(invite_all, element_name="invite_all_guests")
            await self.pause(3000)

        logger.info("✅ Event saved")

    @allure.step("Create Google Calendar event")
    async def create_event(self, details: MeetingDetails) -> None:
        await self.start_event()
        await self.set_title(details.title)
        await self.set_date(details.date_label)
        await self.set_times(details.start_time, details.end_time)
        if details.guest_email:
            await self.add_guests([details.guest_email])
        await self.save_event()

    async def is_event_listed(self, title: str, timeout: int = 10000) -> bool:
        return await self.is_visible((ByText(title),), timeout=timeout)


__all__ = ["GoogleCalendarPage", "GOOGLE_CALENDAR_URL"]
