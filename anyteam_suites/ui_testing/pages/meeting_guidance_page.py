"""
================================================================================
Live Meeting Guidance Page Object (Async / Playwright)
================================================================================

Tip panel shown during a live meeting. The panel is optional: every probe
returns bool / Optional so tests can skip when guidance is switched off.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from anyteam_suites.ui_testing.framework.page_base import PageBase


class MeetingGuidancePage(PageBase):
    """Live meeting guidance panel (async)."""

    PAGE_TITLE = "Meeting Guidance"

    LOCATORS = {
        "guidance_panel": (
            '[data-testid="guidance-panel"]',
            '[class*="guidance"]',
            '[class*="tip-panel"]',
        ),
        "guidance_title": (
            '[data-testid="guidance-title"]',
            'h3:has-text("Tip")',
            'h3:has-text("Guidance")',
        ),
        "guidance_content": (
            '[data-testid="guidance-content"]',
            '[class*="guidance-text"]',
            '[class*="tip-content"]',
        ),
        "close_button": (
            'button[aria-label*="close" i]',
            'button:has(svg[class*="x"])',
            'button:has(svg[class*="close"])',
        ),
        "next_tip_button": (
            'button:has-text("Next")',
            'button[aria-label*="next" i]',
            'button:has(svg[class*="chevron-right"])',
        ),
        "previous_tip_button": (
            'button:has-text("Previous")',
            'button[aria-label*="previous" i]',
            'button:has(svg[class*="chevron-left"])',
        ),
        "skip_button": (
            'button:has-text("Skip")',
            'button:has-text("Skip tips")',
            'button[aria-label*="skip" i]',
        ),
        "tip_indicator": (
            '[data-testid="guidance-indicator"]',
            '[class*="tip-indicator"]',
            'span:has-text("of")',
        ),
    }

    async def is_open(self, timeout: int = 5000) -> bool:
        return await self.is_visible("guidance_panel", timeout=timeout)

    async def title_text(self) -> Optional[str]:
        return await self.get_text_or_none("guidance_title")

    async def tip_text(self) -> Optional[str]:
        return await self.get_text_or_none("guidance_content")

    async def tip_position(self) -> Optional[str]:
        """Indicator text such as '2 of 5'."""
        return await self.get_text_or_none("tip_indicator")

    @allure.step("Next tip")
    async def next_tip(self) -> None:
        await self.click("next_tip_button")
        await self.pause(500)

    @allure.step("Previous tip")
    async def previous_tip(self) -> None:
        await self.click("previous_tip_button")
        await self.pause(500)

    @allure.step("Skip guidance")
    async def skip(self) -> None:
        await self.click("skip_button")

    @allure.step("Close guidance")
    async def close(self) -> bool:
        """Close the panel if it is open. Returns False when there was nothing to close."""
        if not await self.is_open(timeout=self.timeout("short")):
            logger.info("Guidance panel not open")
            return False
        await self.click("close_button")
        return True


__all__ = ["MeetingGuidancePage"]
