"""
================================================================================
Post-Meeting Insights Page Object (Async / Playwright)
================================================================================

Summary, key points, action items and participants generated after a
meeting. Reached from a notification ("View Meeting Insights").

================================================================================
"""

from __future__ import annotations

from typing import Dict, List, Optional

import allure

from anyteam_suites.ui_testing.framework.page_base import PageBase


INSIGHT_SECTIONS = (
    "Agenda",
    "Participants",
    "Strategic POV",
    "Recap",
    "Updates",
    "Talking Points",
)


def section_chain(name: str) -> tuple:
    """Heading first, then test id, then class fragment, then any div."""
    slug = name.lower().replace(" ", "-")
    return (
        f'h2:has-text("{name}")',
        f'h3:has-text("{name}")',
        f'[data-testid="{slug}"]',
        f'[class*="{slug}"]',
        f'div:has-text("{name}")',
    )


class MeetingInsightsPage(PageBase):
    """Post-meeting insights (async)."""

    PAGE_TITLE = "Insights"

    LOCATORS = {
        "insights_title": (
            'h1:has-text("Insights")',
            'h2:has-text("Insights")',
            '[data-testid="insights-title"]',
        ),
        "meeting_summary": (
            '[data-testid="meeting-summary"]',
            '[class*="meeting-summary"]',
            '[class*="summary"]',
        ),
        "key_points": (
            '[data-testid="key-points"]',
            '[class*="key-points"]',
            'ul:has-text("Key Points")',
        ),
        "action_items": (
            '[data-testid="action-items"]',
            '[class*="action-items"]',
            'ul:has-text("Action Items")',
        ),
        "participants": (
            '[data-testid="participants"]',
            '[class*="participants-list"]',
            'ul:has-text("Participants")',
        ),
        "duration": (
            '[data-testid="duration"]',
            '[class*="duration"]',
            'span:has-text("min")',
        ),
        "download_button": (
            'button:has-text("Download")',
            'button:has-text("Download Report")',
            'button[aria-label*="download" i]',
        ),
        "share_button": (
            'button:has-text("Share")',
            'button:has-text("Share Insights")',
            'button[aria-label*="share" i]',
        ),
        "view_details_button": (
            'button:has-text("View Details")',
            'button:has-text("See More")',
            'a:has-text("View Details")',
        ),
        "close_button": (
            'button[aria-label*="close" i]',
            'button:has(svg[class*="x"])',
            'button:has(svg[class*="close"])',
        ),
    }

    async def is_loaded(self, timeout: int = 10000) -> bool:
        return await self.is_visible("insights_title", timeout=timeout)

    async def summary_text(self) -> Optional[str]:
        return await self.get_text_or_none("meeting_summary", timeout=self.timeout("medium"))

    async def duration_text(self) -> Optional[str]:
        return await self.get_text_or_none("duration")

    async def _list_items(self, element: str) -> List[str]:
        resolution = await self.find(element, timeout=self.timeout("medium"))
        if resolution is None:
            return []
        items = await resolution.locator.locator("li").all_text_contents()
        return [item.strip() for item in items if item.strip()]

    async def action_items(self) -> List[str]:
        return await self._list_items("action_items")

    async def key_points(self) -> List[str]:
        return await self._list_items("key_points")

    async def participants(self) -> List[str]:
        return await self._list_items("participants")

    async def section_visibility(self) -> Dict[str, bool]:
        """Visibility of each insight section; absence is reported, not raised."""
        visibility = {}
        for name in INSIGHT_SECTIONS:
            visibility[name] = await self.is_visible(
                section_chain(name), timeout=self.timeout("medium")
            )
        return visibility

    @allure.step("Download insights report")
    async def download_report(self) -> None:
        await self.click("download_button")

    @allure.step("Share insights")
    async def share(self) -> None:
        await self.click("share_button")

    @allure.step("View insight details")
    async def view_details(self) -> None:
        await self.click("view_details_button")
        await self.settle(timeout=self.timeout("medium"))

    @allure.step("Close insights")
    async def close(self) -> None:
        await self.click("close_button")


__all__ = ["INSIGHT_SECTIONS", "MeetingInsightsPage", "section_chain"]
