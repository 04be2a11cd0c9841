"""
================================================================================
Anyteam Calendar Page Object (Async / Playwright)
================================================================================

Scheduler view opened from the calendar icon on /home. Selecting a meeting
item reveals a small "Join" split button below it; that button renders late
and sometimes below the fold, so joining runs a fixed-delay retry loop with a
scroll nudge between attempts.

Last resort when every join candidate fails: `find_join_button_by_scan`, a
brute-force walk over all buttons matching the Join text or the Join button's
utility classes. It is brittle by nature (utility classes change with any
restyle) and kept only so a styling change degrades into a warning instead
of a lost run.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from anyteam_suites.ui_testing.framework.browser_manager import wait_for_page
from anyteam_suites.ui_testing.framework.element_actions import RetryPolicy, retry_until, scroll_nudge
from anyteam_suites.ui_testing.framework.exceptions import (
    ElementNotFoundError,
    NavigationError,
    RetryExhaustedError,
)
from anyteam_suites.ui_testing.framework.matchers import ByCss, ByText, as_chain
from anyteam_suites.ui_testing.framework.page_base import PageBase
from anyteam_suites.ui_testing.framework.smart_locator import Resolution


GOOGLE_CALENDAR_HOST = "calendar.google.com"

# Most specific first. The last two carry no text; a match counts only when it
# has the Join classes and a closed trigger state (see looks_like_join_button).
JOIN_BUTTON_CANDIDATES = (
    'button[type="button"][data-state="closed"].text-white.font-medium.rounded-l-md.h-8.px-3.text-xs.cursor-pointer:has-text("Join")',
    'button[type="button"][data-state="closed"].text-white.font-medium.rounded-l-md:has-text("Join")',
    'button[type="button"][data-state="closed"]:has-text("Join")',
    'button.text-white.font-medium.rounded-l-md.h-8.px-3:has-text("Join")',
    'button.text-white.font-medium.rounded-l-md[data-state="closed"]:has-text("Join")',
    'button.text-white.font-medium.rounded-l-md:has-text("Join")',
    'button.h-8.px-3.text-xs:has-text("Join")',
    'button[type="button"]:has-text("Join")',
    'button:has-text("Join")',
    'button[type="button"][data-state="closed"].text-white.font-medium.rounded-l-md.h-8',
    'button.text-white.font-medium.rounded-l-md.h-8.px-3.text-xs',
)

JOIN_BUTTON_CLASSES = ("text-white", "font-medium", "rounded-l-md", "h-8")


def looks_like_join_button(text: Optional[str], classes: Optional[str], data_state: Optional[str]) -> bool:
    """Join text, or the Join button's utility classes on a closed trigger."""
    if text and "join" in text.strip().lower():
        return True
    class_list = (classes or "").split()
    return all(c in class_list for c in JOIN_BUTTON_CLASSES) and data_state == "closed"


async def find_join_button_by_scan(page: Page) -> Optional[Locator]:
    """
    Walk every button on the page and return the first visible one that
    looks like the Join button. Returns None when nothing matches.
    """
    buttons = await page.locator("button").all()
    logger.warning(f"⚠️ Scanning {len(buttons)} buttons for a Join button")

    for index, button in enumerate(buttons):
        try:
            if not await button.is_visible():
                continue
            text = await button.text_content()
            classes = await button.get_attribute("class")
            data_state = await button.get_attribute("data-state")
        except PlaywrightError as e:
            logger.debug(f"Button {index} detached during scan: {e}")
            continue

        logger.debug(f"Button {index}: text={text!r} data-state={data_state!r}")
        if looks_like_join_button(text, classes, data_state):
            logger.warning(f"⚠️ Button {index} looks like Join (text={text!r})")
            return button
    return None


class AnyteamCalendarPage(PageBase):
    """Anyteam calendar / scheduler (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Calendar"

    LOCATORS = {
        "calendar_icon": (
            'svg.lucide-calendar[class*="size-[24px]"]',
            "button:has(svg.lucide-calendar)",
            "svg.lucide-calendar",
        ),
        "external_link_icon": (
            "svg.lucide-external-link",
        ),
        "any_meeting_item": (
            "div.py-3.pl-5:has(p)",
            'div[class*="py-3"][class*="pl-5"]:has(p)',
        ),
        "tomorrow_button": (
            'button:has-text("Tomorrow")',
            ByCss('button[aria-label*="Tomorrow" i]'),
        ),
        "next_day_button": (
            'button[aria-label*="Next" i]',
            "button:has(svg.lucide-chevron-right)",
        ),
    }

    def __init__(self, page: Page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.home_path", self.URL_PATH)
        self.join_policy = RetryPolicy(
            max_attempts=self.config.get("retry.join_attempts", 5),
            delay_seconds=self.config.get("retry.join_delay", 2.0),
            nudge=scroll_nudge(page, 0, self.config.get("retry.join_scroll_step", 100)),
        )

    @staticmethod
    def meeting_by_title(title: str) -> tuple:
        return (
            f'text="{title}"',
            f'span:has-text("{title}")',
            f'span.capitalize:has-text("{title}")',
            ByText(title),
        )

    @staticmethod
    def meeting_by_time(time_slot: str) -> tuple:
        return (
            f'div.py-3.pl-5:has(p:has-text("{time_slot}"))',
            f'p:has-text("{time_slot}")',
        )

    @allure.step("Open Anyteam calendar")
    async def open(self) -> "AnyteamCalendarPage":
        await self.navigate()
        await self.settle(timeout=self.timeout("long"))
        await self.pause(2000)
        return self

    @allure.step("Click calendar icon")
    async def click_calendar_icon(self) -> None:
        await self.click("calendar_icon", timeout=self.timeout("long"))
        await self.pause(2000)

    @allure.step("Find meeting item")
    async def find_meeting(
        self,
        title: Optional[str] = None,
        time_slot: Optional[str] = None,
        timeout: int = 3000,
    ) -> Optional[Resolution]:
        """Time slot first, then title, then the first meeting item."""
        if time_slot:
            resolution = await self.find(self.meeting_by_time(time_slot), timeout=timeout, element_name=f"meeting@{time_slot}")
            if resolution is not None:
                return resolution
            logger.info(f"No meeting at {time_slot}, trying by title")
        if title:
            resolution = await self.find(self.meeting_by_title(title), timeout=timeout, element_name=f"meeting:{title}")
            if resolution is not None:
                return resolution
            logger.info(f"No meeting titled '{title}', trying the first meeting item")
        return await self.find("any_meeting_item", timeout=timeout)

    @allure.step("Open meeting: {title}")
    async def open_meeting(self, title: Optional[str] = None, time_slot: Optional[str] = None) -> None:
        """
        Click a meeting item, reloading once when the calendar has not synced yet.

        Raises:
            ElementNotFoundError: No meeting item even after the reload
        """
        resolution = await self.find_meeting(title, time_slot)
        if resolution is None:
            logger.info("Meeting not listed yet, reloading the calendar once")
            await self.page.reload(wait_until="domcontentloaded")
            await self.settle(timeout=self.timeout("long"))
            await self.pause(self.timeout("short"))
            resolution = await self.find_meeting(title, time_slot, timeout=self.timeout("medium"))

        if resolution is None:
            candidates = []
            if time_slot:
                candidates.extend(m.describe() for m in as_chain(self.meeting_by_time(time_slot)))
            if title:
                candidates.extend(m.describe() for m in as_chain(self.meeting_by_title(title)))
            candidates.extend(m.describe() for m in as_chain(self.LOCATORS["any_meeting_item"]))
            screenshot = await self.screenshot("meeting_item_not_visible", full_page=True)
            raise ElementNotFoundError(title or time_slot or "meeting_item", candidates, screenshot=screenshot)

        await self.click(resolution, element_name="meeting_item")
        await self.pause(2000)

    @allure.step("Go to tomorrow")
    async def go_to_tomorrow(self) -> bool:
        for element in ("tomorrow_button", "next_day_button"):
            resolution = await self.find(element, timeout=3000)
            if resolution is not None:
                await self.click(resolution)
                await self.pause(2000)
                return True
        logger.warning("⚠️ No date navigation found, staying on the current day")
        return False

    async def _click_join_once(self) -> None:
        """One join attempt; failures are retried by the caller."""
        resolution = await self.find(JOIN_BUTTON_CANDIDATES, timeout=1500, element_name="join_button")
        if resolution is None:
            raise ElementNotFoundError("join_button", [m.describe() for m in as_chain(JOIN_BUTTON_CANDIDATES)])

        locator = resolution.locator
        text = (await locator.text_content()) or ""
        if not looks_like_join_button(text, await locator.get_attribute("class"), await locator.get_attribute("data-state")):
            raise ElementNotFoundError(
                "join_button",
                [resolution.matcher.describe()],
                errors=[f"matched a button reading {text.strip()!r} without the Join classes"],
            )

        logger.info(f"✅ Join button found via {resolution.describe()}")
        await self.scroll_into_view(resolution)
        await self.click(resolution, element_name="join_button")

    @allure.step("Click Join")
    async def click_join(self) -> None:
        """
        Join Retry Loop, then the button scan as a last resort.

        Raises:
            ElementNotFoundError: Neither the loop nor the scan found a Join button
        """
        try:
            await retry_until(self._click_join_once, self.join_policy, description="Join button")
            return
        except RetryExhaustedError as e:
            exhausted = e

        screenshot = await self.screenshot("join_button_not_found", full_page=True)
        button = await find_join_button_by_scan(self.page)
        if button is None:
            raise ElementNotFoundError(
                "join_button",
                [m.describe() for m in as_chain(JOIN_BUTTON_CANDIDATES)] + ["<button scan>"],
                errors=[str(exhausted)],
                screenshot=screenshot,
            ) from exhausted
        await self.actions.click(button, element_name="join_button (scan)")

    @allure.step("Find and join meeting")
    async def find_and_join_meeting(
        self,
        title: Optional[str] = None,
        time_slot: Optional[str] = None,
        new_page_timeout: int = 10000,
    ) -> Optional[Page]:
        """
        Calendar icon, meeting item, Join.

        Returns:
            The meeting tab if Join opened one, None if it navigated in place
        """
        await self.click_calendar_icon()
        await self.open_meeting(title, time_slot)
        await self.pause(self.timeout("short"))

        context = self.page.context
        before = list(context.pages)
        await self.click_join()

        meet_page = await wait_for_page(
            context,
            lambda p: p not in before,
            timeout=new_page_timeout,
        )
        if meet_page is None:
            logger.info(f"Join stayed in this tab: {self.page.url}")
            return None
        await meet_page.wait_for_load_state("domcontentloaded")
        logger.info(f"✅ Meeting opened in a new tab: {meet_page.url}")
        return meet_page

    @allure.step("Open meeting in Google Calendar")
    async def open_meeting_in_google_calendar(self, popup_timeout: int = 5000) -> Page:
        """
        Calendar icon, then the external link.

        Returns:
            The Google Calendar page (new tab, or this one if it navigated)

        Raises:
            NavigationError: Neither a new tab nor a Google Calendar URL
        """
        await self.click_calendar_icon()
        link = await self.locate("external_link_icon", timeout=self.timeout("long"))

        try:
            async with self.page.context.expect_page(timeout=popup_timeout) as page_info:
                await self.actions.click(link)
            calendar_page = await page_info.value
            await calendar_page.wait_for_load_state("domcontentloaded")
            logger.info(f"✅ Google Calendar opened: {calendar_page.url}")
            return calendar_page
        except PlaywrightTimeoutError:
            logger.debug("No new tab from the external link")

        await self.pause(3000)
        if GOOGLE_CALENDAR_HOST in self.page.url:
            return self.page
        raise NavigationError(f"Could not open Google Calendar via external link (at {self.page.url})")

    async def meeting_titles(self) -> List[str]:
        items = self.page.locator("div.py-3.pl-5")
        return [t.strip() for t in await items.all_text_contents() if t.strip()]


__all__ = [
    "AnyteamCalendarPage",
    "JOIN_BUTTON_CANDIDATES",
    "find_join_button_by_scan",
    "looks_like_join_button",
]
