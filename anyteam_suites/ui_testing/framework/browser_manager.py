"""
================================================================================
Browser Manager
================================================================================

Owns the Playwright driver, the launched browser and every context it hands out.

Features:
    - One browser per manager, isolated contexts per test
    - Storage state replay from an explicit AuthSession
    - Launch / context presets from config (browser.*)
    - Discovery of pages opened by the app (popups, new tabs)

================================================================================
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)
from playwright.async_api import Error as PlaywrightError

from anyteam_suites.common.config_loader import ConfigLoader

from .exceptions import NavigationError
from .session import AuthSession


ENGINES = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    One browser, many isolated contexts.

    Usage:
        async with BrowserManager(headless=False) as browsers:
            anonymous = await browsers.new_page()
            logged_in = await browsers.new_page(session=auth_session)
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
            "--use-fake-ui-for-media-stream",
            "--use-fake-device-for-media-stream",
            "--disable-blink-features=AutomationControlled",
        ],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
        "permissions": ["camera", "microphone"],
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        slow_mo: Optional[int] = None,
    ):
        """
        Args:
            headless: Run browser headless, defaults to `browser.headless` / HEADLESS
            browser_type: 'chromium', 'firefox' or 'webkit', defaults to `browser.type` / BROWSER
            slow_mo: Delay between driver operations in ms
        """
        config = ConfigLoader()
        self.headless = headless if headless is not None else config.get("browser.headless", True, env="HEADLESS")
        self.browser_type = browser_type or config.get("browser.type", "chromium", env="BROWSER")
        self.slow_mo = slow_mo if slow_mo is not None else config.get("browser.slow_mo", 0)
        self.action_timeout = config.get("browser.action_timeout", 10000)
        self.navigation_timeout = config.get("browser.navigation_timeout", 30000)
        viewport = config.get("browser.viewport")
        self.viewport = viewport or self.DEFAULT_CONTEXT_OPTIONS["viewport"]

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Boot the driver and launch the configured engine."""
        if self.browser_type not in ENGINES:
            raise ValueError(f"Unknown browser type {self.browser_type!r}, expected one of {ENGINES}")
        self._playwright = await async_playwright().start()
        engine = getattr(self._playwright, self.browser_type)

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
            "slow_mo": self.slow_mo,
        }
        if self.browser_type != "chromium":
            launch_options.pop("args")

        try:
            self._browser = await engine.launch(**launch_options)
        except PlaywrightError:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info(f"✅ {self.browser_type} launched, headless={self.headless}, slow_mo={self.slow_mo}")

    async def close(self) -> None:
        """Tear down contexts, then the browser, then the driver. Safe to call twice."""
        while self._contexts:
            context = self._contexts.pop()
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug(f"{self.browser_type} shut down")

    async def new_context(
        self,
        session: Optional[AuthSession] = None,
        **options: Any,
    ) -> BrowserContext:
        """
        Create an isolated browser context.

        Args:
            session: Replay this session's storage state when given
            **options: Overrides for DEFAULT_CONTEXT_OPTIONS (locale, viewport...)
        """
        if not self._browser:
            raise RuntimeError("BrowserManager.start() has not been awaited")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, "viewport": self.viewport, **options}

        if session is not None:
            if not session.exists():
                raise FileNotFoundError(f"Auth storage state missing: {session.storage_state_path}")
            context_options.update(session.context_options())
            logger.debug(f"Restored authentication state for {session.email}")

        context = await self._browser.new_context(**context_options)
        context.set_default_timeout(self.action_timeout)
        context.set_default_navigation_timeout(self.navigation_timeout)
        self._contexts.append(context)

        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        session: Optional[AuthSession] = None,
        **context_options: Any,
    ) -> Page:
        """Open a tab in `context`, or in a fresh context when none is given."""
        target = context or await self.new_context(session=session, **context_options)
        return await target.new_page()

    async def save_auth_state(self, context: BrowserContext, path: Path) -> Path:
        """Save cookies and localStorage for reuse by later contexts."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        await context.storage_state(path=str(path))
        logger.info(f"Authentication state saved to: {path}")
        return path

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    @property
    def contexts(self) -> List[BrowserContext]:
        return list(self._contexts)


# =============================================================================
# Page discovery
# =============================================================================

async def wait_for_page(
    context: BrowserContext,
    predicate: Callable[[Page], bool],
    timeout: int = 30000,
    interval: int = 500,
) -> Optional[Page]:
    """
    Poll the context's open pages until one satisfies `predicate`.

    Returns:
        The newest matching page, or None after timeout
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout / 1000
    while True:
        for candidate in reversed(context.pages):
            if not candidate.is_closed() and predicate(candidate):
                return candidate
        if loop.time() >= deadline:
            return None
        await asyncio.sleep(interval / 1000)


async def open_authenticated_page(
    manager: BrowserManager,
    session: AuthSession,
    home_path: str = "/home",
) -> Page:
    """
    New context + page with the session replayed, parked on the home page.

    Raises:
        NavigationError: The app bounced back to the login page
    """
    page = await manager.new_page(session=session)
    await page.goto(f"{session.base_url}{home_path}", wait_until="domcontentloaded")
    if "/login" in page.url.lower():
        raise NavigationError(
            f"Stored session for {session.email} was rejected (landed on {page.url})"
        )
    logger.info(f"Restored authenticated page for {session.email}")
    return page


__all__ = [
    "ENGINES",
    "BrowserManager",
    "wait_for_page",
    "open_authenticated_page",
]
