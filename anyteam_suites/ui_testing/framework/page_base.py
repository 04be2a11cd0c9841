"""
================================================================================
Base Page Object
================================================================================

Foundation class for the Page Object Model.

Provides:
    - Navigation relative to the configured app base URL
    - Named fallback chains (LOCATORS table) resolved by LocatorResolver
    - Interactions through ActionWrapper (normal, then one force retry)
    - Screenshot and failure diagnostics
    - Failed API response capture

================================================================================
"""

from __future__ import annotations

import asyncio
import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from anyteam_suites.common.config_loader import ConfigLoader

from .element_actions import ActionWrapper
from .exceptions import NavigationError
from .matchers import CandidateList
from .screenshots import take_screenshot
from .smart_locator import LocatorResolver, Resolution


class BasePage:
    """
    Base class for all page objects.

    Subclasses declare URL_PATH and a LOCATORS table of ordered fallback
    chains; element names from that table are accepted by every helper:

        class SettingsPage(BasePage):
            URL_PATH = "/home"
            LOCATORS = {
                "settings_button": (
                    'button[data-sidebar="menu-button"]:has(h5:has-text("Settings"))',
                    ByRole("button", name="Settings"),
                ),
            }

            async def open(self):
                await self.click("settings_button")
    """

    URL_PATH: str = "/"
    PAGE_TITLE: str = ""
    LOCATORS: Dict[str, CandidateList] = {}

    def __init__(
        self,
        page: Page,
        base_url: str = "",
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Application base URL, defaults to `app.base_url` / BASE_URL
        """
        self.page = page
        self.config = ConfigLoader()
        if not base_url:
            base_url = self.config.get("app.base_url", "https://app.stage.anyteam.com", env="BASE_URL")
        self.base_url = base_url.rstrip("/")
        self.resolver = LocatorResolver(page)
        self.actions = ActionWrapper(
            page,
            self.resolver,
            timeout=self.config.get("browser.action_timeout", 10000),
        )

        self._failed_responses: List[Dict[str, Any]] = []
        self._setup_response_capture()

    def _setup_response_capture(self) -> None:
        """Keep the last failed API responses for failure diagnostics."""

        def capture_response(response: Response) -> None:
            if response.status < 400:
                return
            self._failed_responses.append({
                "timestamp": datetime.now().isoformat(),
                "url": response.url,
                "status": response.status,
            })
            if len(self._failed_responses) > 20:
                self._failed_responses.pop(0)

        self.page.on("response", capture_response)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    def timeout(self, name: str) -> int:
        """Named timeout in ms: short, medium, long, very_long."""
        return int(self.config.get(f"timeouts.{name}", 5000))

    def candidates(self, element: Union[str, CandidateList]) -> CandidateList:
        """Look up a named chain; anything else is returned as an inline chain."""
        if isinstance(element, str) and element in self.LOCATORS:
            return self.LOCATORS[element]
        return element

    def _name(self, element: Union[str, CandidateList], element_name: Optional[str]) -> str:
        if element_name:
            return element_name
        if isinstance(element, str) and element in self.LOCATORS:
            return element
        return "custom_element"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        await self.navigate_to(self.URL_PATH, wait_for=wait_for)

    async def navigate_to(self, path: str, wait_for: str = "domcontentloaded") -> None:
        """Navigate to a path relative to the base URL."""
        full_url = f"{self.base_url}{path}"
        with allure.step(f"Navigate to {path}"):
            await self.page.goto(
                full_url,
                wait_until=wait_for,
                timeout=self.config.get("browser.navigation_timeout", 30000),
            )
            logger.debug(f"Navigated to: {full_url}")

    async def wait_for_page_load(
        self,
        state: str = "domcontentloaded",
        timeout: int = 15000,
    ) -> None:
        """Wait for the page to reach a load state."""
        await self.page.wait_for_load_state(state, timeout=timeout)

    async def settle(self, timeout: int = 5000) -> bool:
        """
        Wait for network idle. The app keeps sockets open on some screens,
        so not reaching idle is not an error.
        """
        try:
            await self.page.wait_for_load_state("networkidle", timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            logger.debug(f"Network not idle after {timeout}ms, continuing")
            return False

    async def wait_for_url(
        self,
        url_pattern: Union[str, Pattern[str]],
        timeout: int = 10000,
    ) -> None:
        """
        Wait for URL to match pattern.

        Raises:
            NavigationError: URL did not match within timeout
        """
        with allure.step(f"Wait for URL: {url_pattern}"):
            try:
                await self.page.wait_for_url(url_pattern, timeout=timeout)
            except PlaywrightTimeoutError as e:
                raise NavigationError(
                    f"Expected URL {url_pattern} within {timeout}ms, still at {self.page.url}"
                ) from e

    def url_contains(self, fragment: str) -> bool:
        return fragment.lower() in (self.page.url or "").lower()

    # =========================================================================
    # Element location
    # =========================================================================

    async def locate(
        self,
        element: Union[str, CandidateList],
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> Resolution:
        """Resolve a named or inline chain; raises ElementNotFoundError."""
        return await self.resolver.resolve(
            self.candidates(element),
            timeout=timeout,
            element_name=self._name(element, element_name),
        )

    async def find(
        self,
        element: Union[str, CandidateList],
        timeout: int = 2000,
        element_name: Optional[str] = None,
    ) -> Optional[Resolution]:
        """Resolve a chain or return None when it is absent."""
        return await self.resolver.find(
            self.candidates(element),
            timeout=timeout,
            element_name=self._name(element, element_name),
        )

    async def is_visible(
        self,
        element: Union[str, CandidateList],
        timeout: int = 2000,
    ) -> bool:
        """Check if element is visible."""
        return await self.find(element, timeout=timeout) is not None

    # =========================================================================
    # Interactions
    # =========================================================================

    async def click(
        self,
        element: Union[str, CandidateList, Resolution],
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> bool:
        """
        Resolve and click an element (normal, then one force retry).

        Returns:
            True if the force click was needed
        """
        if isinstance(element, Resolution):
            return await self.actions.click(element, element_name=element_name, **kwargs)
        return await self.actions.click(
            self.candidates(element),
            element_name=self._name(element, element_name),
            resolve_timeout=timeout,
            **kwargs,
        )

    async def fill(
        self,
        element: Union[str, CandidateList],
        value: str,
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> None:
        """Resolve and fill an input; values of password fields are masked."""
        name = self._name(element, element_name)
        await self.actions.fill(
            self.candidates(element),
            value,
            element_name=name,
            resolve_timeout=timeout,
            secret="password" in name.lower(),
        )

    async def hover(
        self,
        element: Union[str, CandidateList],
        timeout: int = 5000,
    ) -> None:
        await self.actions.hover(
            self.candidates(element),
            element_name=self._name(element, None),
            resolve_timeout=timeout,
        )

    async def get_text(
        self,
        element: Union[str, CandidateList],
        timeout: int = 5000,
    ) -> str:
        """Get trimmed text content of element."""
        resolution = await self.locate(element, timeout=timeout)
        return ((await resolution.locator.text_content()) or "").strip()

    async def get_text_or_none(
        self,
        element: Union[str, CandidateList],
        timeout: int = 2000,
    ) -> Optional[str]:
        """Text of an optional element, None when absent."""
        resolution = await self.find(element, timeout=timeout)
        if resolution is None:
            return None
        return ((await resolution.locator.text_content()) or "").strip()

    async def pause(self, ms: int) -> None:
        """Fixed pause for UI animations; safe on pages that close meanwhile."""
        await asyncio.sleep(ms / 1000)

    async def press_escape(self) -> None:
        await self.page.keyboard.press("Escape")

    async def scroll_by(self, dx: int = 0, dy: int = 300) -> None:
        await self.page.evaluate(f"window.scrollBy({dx}, {dy})")

    async def scroll_into_view(self, target: Union[Resolution, Locator], timeout: int = 2000) -> None:
        """Best-effort scroll; elements in fixed panels cannot scroll."""
        if isinstance(target, Resolution):
            locator, name = target.locator, target.element_name
        else:
            locator, name = target, repr(target)
        try:
            await locator.scroll_into_view_if_needed(timeout=timeout)
        except PlaywrightError as e:
            logger.debug(f"{name} not scrollable: {e}")

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """Take screenshot and optionally attach to Allure."""
        return await take_screenshot(
            self.page,
            name,
            full_page=full_page,
            attach_to_allure=attach_to_allure,
        )

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Full page screenshot
            - Current URL
            - Recent failed API responses
        """
        with allure.step("Capture failure details"):
            try:
                await self.screenshot(f"failure_{test_name}", full_page=True)
            except PlaywrightError as e:
                logger.warning(f"Failure screenshot not captured: {e}")

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

            if self._failed_responses:
                allure.attach(
                    json.dumps(self._failed_responses[-10:], indent=2),
                    name="Failed API Responses",
                    attachment_type=allure.attachment_type.JSON,
                )

    def get_locator_health_report(self) -> str:
        """Get locator health report."""
        return self.resolver.get_health_report()


def path_pattern(path: str) -> Pattern[str]:
    """Case-insensitive URL regex for a path segment (e.g. '/home')."""
    return re.compile(re.escape(path), re.IGNORECASE)


__all__ = [
    "BasePage",
    "PageBase",
    "path_pattern",
]

PageBase = BasePage
