"""
================================================================================
Meeting Form Page Object (Async / Playwright)
================================================================================

Meeting create / edit form reached from the home screen. Shared by the
meeting tests; the live meeting room has its own page object.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from anyteam_suites.common.suite_data import MeetingDetails
from anyteam_suites.ui_testing.framework.page_base import PageBase


class MeetingPage(PageBase):
    """Meeting form page object (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Meeting"

    LOCATORS = {
        "title_input": (
            'input[name="title"]',
            'input[placeholder*="title" i]',
            '[data-testid="meeting-title"]',
        ),
        "date_input": (
            'input[type="date"]',
            'input[placeholder*="date" i]',
            '[data-testid="meeting-date"]',
        ),
        "time_input": (
            'input[type="time"]',
            'input[placeholder*="time" i]',
            '[data-testid="meeting-time"]',
        ),
        "participants_input": (
            'input[placeholder*="participant" i]',
            'input[placeholder*="guest" i]',
            '[data-testid="meeting-participants"]',
        ),
        "description_input": (
            'textarea[placeholder*="description" i]',
            'textarea[name="description"]',
            '[data-testid="meeting-description"]',
        ),
        "join_button": (
            'button:has-text("Join")',
            'button:has-text("Join Meeting")',
            'a:has-text("Join")',
        ),
        "cancel_button": (
            'button:has-text("Cancel")',
            'button[aria-label*="cancel" i]',
        ),
        "save_button": (
            'button:has-text("Save")',
            'button:has-text("Create")',
            'button[type="submit"]',
        ),
    }

    def __init__(self, page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.home_path", self.URL_PATH)

    @allure.step("Open meetings")
    async def open(self) -> "MeetingPage":
        await self.navigate()
        await self.settle(timeout=self.timeout("long"))
        return self

    async def is_form_displayed(self) -> bool:
        return await self.is_visible("title_input", timeout=self.timeout("medium"))

    @allure.step("Fill meeting form")
    async def fill_meeting_form(
        self,
        title: str,
        date: Optional[str] = None,
        time: Optional[str] = None,
        participants: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Fill the title and whichever optional fields are given."""
        await self.fill("title_input", title)
        if date:
            await self.fill("date_input", date)
        if time:
            await self.fill("time_input", time)
        if participants:
            await self.fill("participants_input", participants)
            await self.page.keyboard.press("Enter")
        if description:
            await self.fill("description_input", description)
        logger.info(f"Meeting form filled for '{title}'")

    async def fill_from_details(self, details: MeetingDetails) -> None:
        await self.fill_meeting_form(
            details.title,
            time=details.start_time,
            participants=details.guest_email,
        )

    @allure.step("Save meeting")
    async def save(self) -> None:
        await self.click("save_button", timeout=self.timeout("long"))
        await self.settle(timeout=self.timeout("medium"))

    @allure.step("Join meeting")
    async def join(self) -> None:
        await self.click("join_button", timeout=self.timeout("long"))

    @allure.step("Cancel meeting form")
    async def cancel(self) -> None:
        await self.click("cancel_button")


__all__ = ["MeetingPage"]
