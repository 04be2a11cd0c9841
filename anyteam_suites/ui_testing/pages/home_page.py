"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Landing screen after sign-in (/home): greeting, sidebar navigation and the
"Ask AI" entry point. Also used by the login flow to decide whether the app
has finished loading.

================================================================================
"""

from __future__ import annotations

import re

import allure
from loguru import logger

from anyteam_suites.ui_testing.framework.exceptions import NavigationError
from anyteam_suites.ui_testing.framework.matchers import ByCss, ByRole, ByText
from anyteam_suites.ui_testing.framework.page_base import PageBase


GREETING = re.compile(r"Good (Morning|Afternoon|Evening)", re.IGNORECASE)


class HomePage(PageBase):
    """Home page object (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Home"

    LOCATORS = {
        # Any of these proves the authenticated shell rendered.
        "home_indicator": (
            ByText(GREETING),
            ByCss("[data-sidebar]"),
            ByCss('button[data-sidebar="menu-button"]'),
            ByText(re.compile(r"Ask AI", re.IGNORECASE)),
        ),
        "greeting": (
            ByText(GREETING),
        ),
        "sidebar_menu_button": (
            'button[data-sidebar="menu-button"]',
        ),
        "ask_ai": (
            ByText(re.compile(r"Ask AI", re.IGNORECASE)),
            ByRole("button", name=re.compile(r"Ask AI", re.IGNORECASE)),
        ),
    }

    def __init__(self, page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.home_path", self.URL_PATH)

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        await self.navigate()
        await self.settle(timeout=self.timeout("long"))
        return self

    async def is_loaded(self, timeout: int = 5000) -> bool:
        """True once any home indicator is visible."""
        return await self.is_visible("home_indicator", timeout=timeout)

    @allure.step("Verify home page loaded")
    async def verify_loaded(self, timeout: int = 10000) -> None:
        """
        Raises:
            NavigationError: Bounced to login or nothing of the app shell rendered
        """
        if self.url_contains("/login"):
            raise NavigationError(f"Expected home page, landed on login: {self.page.url}")
        if not await self.is_loaded(timeout=timeout):
            await self.screenshot("home_not_loaded", full_page=True)
            raise NavigationError(f"Home page content not visible at {self.page.url}")
        logger.info(f"✅ Home page loaded: {self.page.url}")

    async def greeting_text(self) -> str:
        return await self.get_text("greeting", timeout=self.timeout("long"))

    def sidebar_item(self, name: str) -> tuple:
        """Chain for a sidebar entry labelled `name`."""
        return (
            f'button[data-sidebar="menu-button"]:has(h5:has-text("{name}"))',
            f'[data-sidebar] button:has-text("{name}")',
            ByRole("button", name=name),
        )

    @allure.step("Open sidebar item: {name}")
    async def open_sidebar_item(self, name: str) -> None:
        await self.click(self.sidebar_item(name), timeout=self.timeout("long"), element_name=f"sidebar:{name}")
        await self.settle(timeout=self.timeout("medium"))

    async def sidebar_item_count(self) -> int:
        return await self.page.locator('button[data-sidebar="menu-button"]').count()


__all__ = ["HomePage", "GREETING"]
