"""
================================================================================
Notifications Page Object (Async / Playwright)
================================================================================

Notifications panel opened from the sidebar bell. Covers:
    - Notification items, "View Meeting Insights" and "View Meeting Pre-Read"
    - Lookup of one meeting's notification by title (scrolls the panel)
    - Filter dropdown with Read / Unread checkboxes, Apply / Clear all
    - Three-dotted menu with "Mark all as read"
    - Per-item context menu (right click): Mark as Read / Unread

Read state has no dedicated attribute in the markup; an item counts as read
when it is faded (opacity < 1 or an opacity class) or carries a read marker.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from anyteam_suites.ui_testing.framework.exceptions import ElementNotFoundError, InteractionBlockedError
from anyteam_suites.ui_testing.framework.matchers import ByRole, ByText, as_chain
from anyteam_suites.ui_testing.framework.page_base import PageBase
from anyteam_suites.ui_testing.pages.home_page import HomePage
from anyteam_suites.ui_testing.pages.meeting_insights_page import MeetingInsightsPage


NOTIFICATION_ITEM = "div.flex.gap-3.px-4.py-3.border-b.border-b-zinc-100.items-start.cursor-pointer"
READ_MARKER = 'svg.lucide-check, [class*="read"], [data-read="true"]'

OPACITY_JS = "el => parseFloat(window.getComputedStyle(el).opacity)"

# Scrolls the panel list, falling back to the page when no panel container is found.
PANEL_SCROLL_JS = """
(dy) => {
    const heading = [...document.querySelectorAll("h2")].find(h => h.textContent.includes("Notifications"));
    const panel = document.querySelector('[class*="notification"]') || (heading && heading.parentElement) || document.body;
    panel.scrollBy(0, dy);
}
"""


@dataclass(frozen=True)
class ReadSummary:
    """Outcome of a "mark all as read" check."""
    all_read: bool
    count: int
    read_count: int


def is_read_item(opacity: float, classes: Optional[str], has_read_marker: bool) -> bool:
    return opacity < 1 or "opacity" in (classes or "") or has_read_marker


def checkbox_checked(aria_checked: Optional[str], data_state: Optional[str]) -> bool:
    return aria_checked == "true" or data_state == "checked"


class NotificationsPage(PageBase):
    """Notifications panel (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Notifications"

    LOCATORS = {
        "sidebar_button": (
            'button[data-sidebar="menu-button"]:has(h5:has-text("Notifications"))',
            'button:has(h5:has-text("Notifications"))',
            'h5.text-grayText:has-text("Notifications")',
            'h5:has-text("Notifications")',
        ),
        "panel_heading": (
            'h2:has-text("Notifications")',
        ),
        "notification_item": (
            NOTIFICATION_ITEM,
            'div[class*="cursor-pointer"][class*="border-b"]',
            'div.cursor-pointer:has(img[alt="company-logo"])',
            'div.cursor-pointer:has-text("You have a meeting soon")',
            "div.cursor-pointer:has(svg.lucide-calendar)",
        ),
        "view_meeting_insights": (
            'div.border-t.border-t-zinc-100 span:has-text("View Meeting Insights")',
            'div[class*="border-t-zinc-100"] span:has-text("View Meeting Insights")',
            'span:has-text("View Meeting Insights")',
            'button:has-text("View Meeting Insights")',
            'a:has-text("View Meeting Insights")',
        ),
        "view_meeting_pre_read": (
            'div.border-t.border-t-zinc-100 span:has-text("View Meeting Pre-Read")',
            'div[class*="border-t-zinc-100"] span:has-text("View Meeting Pre-Read")',
            'span:has-text("View Meeting Pre-Read")',
            'button:has-text("View Meeting Pre-Read")',
            'a:has-text("View Meeting Pre-Read")',
        ),
        "filter_button": (
            "button.h-9.w-9:has(svg.lucide-list-filter)",
            "button:has(svg.lucide-list-filter.h-5.w-5)",
            "button:has(svg.lucide-list-filter)",
        ),
        "read_label": (
            'label:has-text("Read")',
        ),
        "unread_label": (
            'label:has-text("Unread")',
        ),
        "apply_filters_button": (
            'button:has-text("Apply filters")',
            'button.bg-neutral-900:has-text("Apply filters")',
        ),
        "clear_all_button": (
            'button:has-text("Clear all")',
            'button.text-xs:has-text("Clear all")',
        ),
        "three_dotted_menu": (
            'div[role="button"].p-2.rounded-full.cursor-pointer:has(svg.lucide-ellipsis-vertical)',
            'div[role="button"]:has(svg.lucide-ellipsis-vertical)',
            "button:has(svg.lucide-ellipsis-vertical)",
            '[role="button"]:has(svg.lucide-ellipsis-vertical)',
        ),
        "mark_all_as_read": (
            'button.w-full.text-left.px-4.py-3:has-text("Mark all as read")',
            'button.w-full.text-left:has-text("Mark all as read")',
            'button:has-text("Mark all as read")',
            '[role="menuitem"]:has-text("Mark all as read")',
        ),
        "mark_as_read": (
            'button:has-text("Mark as Read")',
            '[role="menuitem"]:has-text("Mark as Read")',
            ByRole("menuitem", name="Mark as Read"),
        ),
        "mark_as_unread": (
            'button:has-text("Mark Selected as Unread")',
            'button:has-text("Mark as Unread")',
            '[role="menuitem"]:has-text("Mark as Unread")',
        ),
    }

    def __init__(self, page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.home_path", self.URL_PATH)

    @staticmethod
    def checkbox(label: str) -> tuple:
        return (
            f'label:has-text("{label}") button[type="button"][role="checkbox"]',
            f'label:has-text("{label}") [role="checkbox"]',
            ByRole("checkbox", name=label, exact=True),
        )

    @staticmethod
    def meeting_notification(title: str) -> tuple:
        return (
            f'{NOTIFICATION_ITEM}:has-text("{title}")',
            f'div.cursor-pointer:has(span:has-text("{title}"))',
            f'div.cursor-pointer:has-text("{title}")',
            ByText(title),
        )

    @property
    def meeting_title(self) -> str:
        return self.config.get("meeting.title", "Team Standup Meeting", env="MEETING_TITLE")

    # =========================================================================
    # Panel
    # =========================================================================

    async def is_displayed(self, timeout: int = 5000) -> bool:
        return await self.is_visible("panel_heading", timeout=timeout)

    @allure.step("Open notifications panel")
    async def open(self) -> "NotificationsPage":
        """Sidebar bell; a panel that is already open is left as is."""
        if await self.is_displayed(timeout=1000):
            logger.info("Notifications panel already open")
            return self

        if "/home" not in self.page.url:
            await self.navigate()
        await HomePage(self.page, self.base_url).verify_loaded(timeout=self.timeout("long"))

        await self.click("sidebar_button", timeout=self.timeout("long"))
        await self.locate("panel_heading", timeout=self.timeout("long"))
        return self

    def items(self) -> Locator:
        return self.page.locator(NOTIFICATION_ITEM)

    async def notification_count(self) -> int:
        return await self.items().count()

    async def is_notification_item_visible(self) -> bool:
        return await self.is_visible("notification_item", timeout=self.timeout("medium"))

    @allure.step("Click notification item")
    async def click_notification_item(self) -> None:
        await self.click("notification_item", timeout=self.timeout("long"))
        await self.pause(1000)

    @allure.step("View meeting insights")
    async def view_meeting_insights(self) -> MeetingInsightsPage:
        resolution = await self.locate("view_meeting_insights", timeout=self.timeout("long"))
        await self.scroll_into_view(resolution)
        await self.click(resolution)
        await self.settle(timeout=self.timeout("long"))
        return MeetingInsightsPage(self.page, self.base_url)

    async def _scroll_panel(self, dy: int = 300) -> None:
        try:
            await self.page.evaluate(PANEL_SCROLL_JS, dy)
        except PlaywrightError as e:
            logger.debug(f"Notifications panel not scrollable: {e}")
        await self.pause(500)

    async def is_meeting_notification_visible(self, title: Optional[str] = None) -> bool:
        """Looks in view first, then once more after scrolling the panel."""
        chain = self.meeting_notification(title or self.meeting_title)
        if await self.is_visible(chain, timeout=2000):
            return True
        logger.info(f"'{title or self.meeting_title}' notification not in view, scrolling the panel")
        await self._scroll_panel()
        return await self.is_visible(chain, timeout=self.timeout("medium"))

    @allure.step("Open meeting notification")
    async def click_meeting_notification(self, title: Optional[str] = None) -> None:
        """
        Raises:
            ElementNotFoundError: No notification for the meeting, even after scrolling
        """
        title = title or self.meeting_title
        await self._scroll_panel()
        resolution = await self.locate(
            self.meeting_notification(title),
            timeout=self.timeout("long"),
            element_name=f"notification '{title}'",
        )
        await self.scroll_into_view(resolution)
        await self.pause(500)
        await self.click(resolution)

    async def is_view_meeting_pre_read_visible(self) -> bool:
        return await self.is_visible("view_meeting_pre_read", timeout=self.timeout("medium"))

    @allure.step("View meeting pre-read")
    async def click_view_meeting_pre_read(self) -> None:
        await self.scroll_by(0, 200)
        await self.pause(500)
        resolution = await self.locate("view_meeting_pre_read", timeout=self.timeout("long"))
        await self.scroll_into_view(resolution)
        await self.pause(500)
        await self.click(resolution)
        await self.settle(timeout=self.timeout("long"))

    # =========================================================================
    # Filters
    # =========================================================================

    async def _filter_options_visible(self) -> bool:
        return (
            await self.is_visible("read_label", timeout=3000)
            or await self.is_visible("unread_label", timeout=3000)
        )

    @allure.step("Open notification filters")
    async def click_filter_button(self) -> None:
        """
        Open the filter dropdown and check it really opened (one retry).

        Raises:
            InteractionBlockedError: The Read / Unread options never showed up
        """
        await self.press_escape()
        filter_button = await self.locate("filter_button", timeout=self.timeout("long"))

        for attempt in (1, 2):
            await self.click(filter_button, element_name="filter_button")
            await self.pause(1000)
            if await self._filter_options_visible():
                return
            logger.warning(f"⚠️ Filter dropdown not open after click {attempt}")

        await self.screenshot("filter_dropdown_failed_to_open", full_page=True)
        raise InteractionBlockedError("click", "filter_button", "filter dropdown did not open after retry")

    async def is_checkbox_checked(self, label: str) -> bool:
        resolution = await self.locate(self.checkbox(label), timeout=self.timeout("long"), element_name=f"{label} checkbox")
        return checkbox_checked(
            await resolution.locator.get_attribute("aria-checked"),
            await resolution.locator.get_attribute("data-state"),
        )

    async def set_checkbox(self, label: str, checked: bool) -> None:
        """Idempotent: clicks only when the state differs."""
        if await self.is_checkbox_checked(label) == checked:
            return
        await self.click(self.checkbox(label), element_name=f"{label} checkbox")
        await self.pause(500)

    async def check_read(self) -> None:
        await self.set_checkbox("Read", True)

    async def uncheck_read(self) -> None:
        await self.set_checkbox("Read", False)

    async def check_unread(self) -> None:
        await self.set_checkbox("Unread", True)

    async def uncheck_unread(self) -> None:
        await self.set_checkbox("Unread", False)

    @allure.step("Apply filters")
    async def apply_filters(self) -> None:
        await self.click("apply_filters_button", timeout=self.timeout("long"))
        await self.pause(1000)

    @allure.step("Clear all filters")
    async def clear_all(self) -> None:
        await self.click("clear_all_button", timeout=self.timeout("long"))
        await self.pause(1000)

    # =========================================================================
    # Mark as read
    # =========================================================================

    async def is_three_dotted_menu_visible(self) -> bool:
        return await self.is_visible("three_dotted_menu", timeout=3000)

    @allure.step("Open notifications menu")
    async def click_three_dotted_menu(self) -> None:
        await self.click("three_dotted_menu", timeout=self.timeout("medium"))
        await self.pause(500)

    @allure.step("Mark all as read")
    async def mark_all_as_read(self) -> None:
        """
        Raises:
            ElementNotFoundError: Menu entry missing (all button texts are logged)
        """
        resolution = await self.find("mark_all_as_read", timeout=self.timeout("medium"))
        if resolution is None:
            texts = await self.page.locator("button").all_text_contents()
            logger.error(f"❌ 'Mark all as read' missing. Buttons on page: {[t.strip() for t in texts if t.strip()]}")
            screenshot = await self.screenshot("mark_all_as_read_not_found", full_page=True)
            raise ElementNotFoundError(
                "mark_all_as_read",
                [m.describe() for m in as_chain(self.LOCATORS["mark_all_as_read"])],
                screenshot=screenshot,
            )
        await self.click(resolution)
        await self.pause(self.timeout("short"))

    async def _item_is_read(self, item: Locator) -> bool:
        """Items re-render after "Mark all as read"; a detached item counts as unread."""
        try:
            opacity = await item.evaluate(OPACITY_JS)
        except PlaywrightError as e:
            logger.debug(f"Opacity unavailable, assuming 1: {e}")
            opacity = 1.0
        try:
            classes = await item.get_attribute("class")
        except PlaywrightError as e:
            logger.debug(f"Class attribute unavailable: {e}")
            classes = ""
        try:
            has_marker = await item.locator(READ_MARKER).count() > 0
        except PlaywrightError as e:
            logger.debug(f"Read marker lookup failed: {e}")
            has_marker = False
        return is_read_item(opacity, classes, has_marker)

    @allure.step("Verify all notifications are read")
    async def verify_all_marked_as_read(self) -> ReadSummary:
        items = await self.items().all()
        read_count = 0
        for item in items:
            if await self._item_is_read(item):
                read_count += 1

        summary = ReadSummary(
            all_read=read_count == len(items),
            count=len(items),
            read_count=read_count,
        )
        logger.info(f"Read notifications: {summary.read_count}/{summary.count}")
        return summary

    # =========================================================================
    # Context menu
    # =========================================================================

    @allure.step("Right click notification {index}")
    async def right_click_notification(self, index: int = 0) -> None:
        """
        Raises:
            IndexError: No notification at `index`
        """
        count = await self.notification_count()
        if not 0 <= index < count:
            raise IndexError(f"Notification index {index} is out of bounds. Only {count} notifications found.")
        item = self.items().nth(index)
        await self.scroll_into_view(item)
        await self.actions.click(item, element_name=f"notification[{index}]", button="right")
        await self.pause(1000)

    @allure.step("Mark as read")
    async def mark_as_read(self) -> None:
        await self.click("mark_as_read", timeout=self.timeout("medium"))
        await self.pause(1000)

    @allure.step("Mark as unread")
    async def mark_as_unread(self) -> None:
        await self.click("mark_as_unread", timeout=self.timeout("medium"))
        await self.pause(1000)

    async def notification_texts(self) -> List[str]:
        return [t.strip() for t in await self.items().all_text_contents()]


__all__ = [
    "NotificationsPage",
    "ReadSummary",
    "checkbox_checked",
    "is_read_item",
]
