"""
================================================================================
Live Meeting Page Object (Async / Playwright)
================================================================================

The meeting room: media controls, side panels, leave / end, and the
meeting timer that tells an active meeting from a lobby.

`join_from_calendar` is the entry point the live-meeting tests use: it goes
through the Anyteam calendar and returns the room, which may be a new tab.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger
from playwright.async_api import Page

from anyteam_suites.ui_testing.framework.page_base import PageBase
from anyteam_suites.ui_testing.pages.calendar_page import AnyteamCalendarPage


class LiveMeetingPage(PageBase):
    """Live meeting room (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Meeting"

    LOCATORS = {
        "mute_button": (
            'button[aria-label*="microphone" i]',
            'button[aria-label*="mute" i]',
            'button:has(svg[class*="mic"])',
        ),
        "video_button": (
            'button[aria-label*="camera" i]',
            'button[aria-label*="video" i]',
            'button:has(svg[class*="video"])',
        ),
        "share_screen_button": (
            'button[aria-label*="screen" i]',
            'button[aria-label*="share" i]',
            'button:has(svg[class*="screen"])',
        ),
        "chat_button": (
            'button[aria-label*="chat" i]',
            'button:has(svg[class*="message"])',
        ),
        "participants_button": (
            'button[aria-label*="participant" i]',
            'button:has(svg[class*="user"])',
        ),
        "leave_button": (
            'button:has-text("Leave")',
            'button:has-text("Leave meeting")',
            'button[aria-label*="leave" i]',
        ),
        "end_button": (
            'button:has-text("End")',
            'button:has-text("End meeting")',
            'button[aria-label*="end" i]',
        ),
        "meeting_timer": (
            '[data-testid="meeting-timer"]',
            '[class*="timer"]',
            'span:has-text(":")',
        ),
        "meeting_title": (
            '[data-testid="meeting-title"]',
            '[class*="meeting-title"]',
            "h1",
            "h2",
        ),
    }

    @classmethod
    @allure.step("Join meeting from calendar")
    async def join_from_calendar(
        cls,
        page: Page,
        meeting_title: Optional[str] = None,
        meeting_time: Optional[str] = None,
        base_url: str = "",
    ) -> "LiveMeetingPage":
        """
        Home, calendar icon, meeting item (time, then title, then first
        item), Join.

        Returns:
            LiveMeetingPage bound to the meeting tab, or to `page` when the
            meeting opened in place
        """
        calendar = AnyteamCalendarPage(page, base_url)
        await calendar.open()
        meet_page = await calendar.find_and_join_meeting(meeting_title, meeting_time)
        room = cls(meet_page or page, base_url)
        await room.settle(timeout=room.timeout("long"))
        logger.info(f"✅ Joined meeting at {room.page.url}")
        return room

    async def wait_for_meeting_load(self, timeout: int = 10000) -> None:
        await self.page.wait_for_load_state("domcontentloaded", timeout=timeout)
        await self.settle(timeout=timeout)

    async def is_meeting_active(self) -> bool:
        """A running meeting shows its timer."""
        return await self.is_visible("meeting_timer", timeout=self.timeout("medium"))

    async def meeting_title(self) -> Optional[str]:
        return await self.get_text_or_none("meeting_title", timeout=self.timeout("medium"))

    @allure.step("Toggle microphone")
    async def toggle_mute(self) -> None:
        await self.click("mute_button")

    @allure.step("Toggle camera")
    async def toggle_video(self) -> None:
        await self.click("video_button")

    @allure.step("Share screen")
    async def share_screen(self) -> None:
        await self.click("share_screen_button")

    @allure.step("Open chat")
    async def open_chat(self) -> None:
        await self.click("chat_button")

    @allure.step("Open participants")
    async def open_participants(self) -> None:
        await self.click("participants_button")

    @allure.step("Leave meeting")
    async def leave(self) -> None:
        await self.click("leave_button", timeout=self.timeout("long"))
        await self.settle(timeout=self.timeout("medium"))

    @allure.step("End meeting")
    async def end(self) -> None:
        await self.click("end_button", timeout=self.timeout("long"))

    async def controls_visible(self) -> dict:
        """Visibility of each media control, for smoke assertions."""
        names = ("mute_button", "video_button", "share_screen_button", "chat_button", "participants_button", "leave_button")
        return {name: await self.is_visible(name, timeout=self.timeout("short")) for name in names}


__all__ = ["LiveMeetingPage"]
