"""
================================================================================
Login Flow
================================================================================

End-to-end Google sign-in for the Anyteam app, producing an explicit
AuthSession that fixtures replay into fresh browser contexts.

Sequence:
    1. Clear app + auth-domain cookies (the Google session is kept)
    2. Open /onboarding/Login, click "Continue with Google" (popup or redirect)
    3. Google steps unless the app is already back in control
    4. Poll the context's pages for the redirect back to the app
    5. On /onboarding: store jwt/userId from the query in localStorage,
       wait for spinners, then for the app to leave onboarding
    6. Recover from a bounce to /Login once; fail if it repeats
    7. Verify the home page, save storage state

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

import allure
from loguru import logger
from playwright.async_api import BrowserContext, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from anyteam_suites.common.config_loader import ConfigLoader
from anyteam_suites.common.suite_data import TestData
from anyteam_suites.ui_testing.framework.browser_manager import BrowserManager, wait_for_page
from anyteam_suites.ui_testing.framework.exceptions import NavigationError
from anyteam_suites.ui_testing.framework.session import AuthSession
from anyteam_suites.ui_testing.pages.google_oauth_page import GoogleOAuthPage
from anyteam_suites.ui_testing.pages.home_page import HomePage
from anyteam_suites.ui_testing.pages.login_page import LoginPage


GOOGLE_ACCOUNTS_HOST = "accounts.google.com"

LOADING_GONE_JS = """
() => {
    const nodes = document.body.querySelectorAll(
        '[class*="loading"], [class*="spinner"], [class*="loader"], [data-testid*="loading"]'
    );
    return !Array.from(nodes).some((el) => {
        const style = window.getComputedStyle(el);
        return style.display !== 'none' && style.visibility !== 'hidden' && style.opacity !== '0';
    });
}
"""

STORE_TOKENS_JS = """
({ token, uid }) => {
    window.localStorage.setItem('jwt', token);
    window.localStorage.setItem('userId', uid);
    window.localStorage.setItem('auth_status', 'SUCCESS');
}
"""


# =============================================================================
# URL helpers
# =============================================================================

def app_host(base_url: str) -> str:
    return urlparse(base_url).hostname or ""


def auth_domain_for(host: str, auth_prefix: str = "auth.") -> str:
    """app.stage.anyteam.com -> auth.stage.anyteam.com"""
    if host.startswith("app."):
        return auth_prefix + host[len("app."):]
    return host.replace("app.", auth_prefix, 1)


def site_domain(host: str) -> str:
    """Registrable part of a host: app.stage.anyteam.com -> anyteam.com"""
    parts = host.split(".")
    return ".".join(parts[-2:]) if len(parts) >= 2 else host


def is_app_url(url: str, host: str) -> bool:
    """True for pages served by the app's site, never for Google accounts."""
    page_host = urlparse(url).hostname or ""
    if not page_host or GOOGLE_ACCOUNTS_HOST in page_host:
        return False
    domain = site_domain(host)
    return page_host == domain or page_host.endswith("." + domain)


def is_login_url(url: str, login_path: str = "/onboarding/Login") -> bool:
    path = urlparse(url).path.lower()
    return path.startswith(login_path.lower()) or path.endswith("/login")


def extract_session_tokens(url: str) -> Optional[Tuple[str, str]]:
    """(jwt, userId) from an onboarding redirect, None unless both are present."""
    query = parse_qs(urlparse(url).query)
    jwt = (query.get("jwt") or [""])[0]
    user_id = (query.get("userId") or [""])[0]
    if jwt and user_id:
        return jwt, user_id
    return None


# =============================================================================
# Flow
# =============================================================================

class LoginFlow:
    """
    Drives the full sign-in inside one browser context.

    Usage:
        flow = LoginFlow(context)
        page, session = await flow.perform_login()
    """

    def __init__(
        self,
        context: BrowserContext,
        data: Optional[TestData] = None,
        auth_state_path: Optional[Path] = None,
    ):
        config = ConfigLoader()
        self.context = context
        self.data = data or TestData.from_config(config)
        self.auth_state_path = Path(
            auth_state_path or config.get("artifacts.auth_state_file", ".auth/auth.json")
        )
        self.auth_prefix = config.get("app.auth_host_prefix", "auth.")
        self.redirect_timeout = config.get("retry.redirect_poll_timeout", 30000)
        self.redirect_interval = config.get("retry.redirect_poll_interval", 500)
        self.host = app_host(self.data.urls.base)
        self.user_id: Optional[str] = None
        self.jwt: Optional[str] = None

    @allure.step("Clear app cookies")
    async def clear_app_cookies(self) -> None:
        for domain in (self.host, auth_domain_for(self.host, self.auth_prefix)):
            await self.context.clear_cookies(domain=domain)
        logger.debug(f"Cleared cookies for {self.host} and its auth domain")

    @allure.step("Sign in through Google")
    async def start_google_sign_in(self, page: Page) -> None:
        """Steps 2-3: login page, Google button, Google form when needed."""
        login_page = LoginPage(page, self.data.urls.base)
        await login_page.open()

        if not await login_page.is_visible("continue_with_google", timeout=self.data.timeouts.medium):
            logger.info("Continue with Google not shown, assuming an existing app session")
            return

        oauth_page = await login_page.click_continue_with_google()
        await login_page.pause(1000)

        current = page if oauth_page.is_closed() else oauth_page
        if is_app_url(current.url, self.host) and not is_login_url(current.url, self.data.urls.login_path):
            logger.info("✅ Google session reused, skipping the Google form")
            return

        logger.info(f"On Google sign-in ({current.url}), completing the form")
        await GoogleOAuthPage(current).complete_oauth(
            self.data.credentials.email,
            self.data.credentials.require_password(),
        )

    @allure.step("Wait for redirect back to the app")
    async def wait_for_app_page(self) -> Page:
        """
        Step 4: poll every open page for the app domain.

        Raises:
            NavigationError: No page returned to the app
        """
        login_path = self.data.urls.login_path

        app_page = await wait_for_page(
            self.context,
            lambda p: is_app_url(p.url, self.host) and not is_login_url(p.url, login_path),
            timeout=self.redirect_timeout,
            interval=self.redirect_interval,
        )
        if app_page is None:
            # A page parked on /Login is handled by the session recovery step.
            app_page = await wait_for_page(
                self.context,
                lambda p: is_app_url(p.url, self.host),
                timeout=self.redirect_interval,
                interval=self.redirect_interval,
            )
        if app_page is None:
            urls = [p.url for p in self.context.pages]
            raise NavigationError(f"Failed to redirect to {self.host}. Open pages: {urls}")

        logger.info(f"✅ Redirected to app: {app_page.url}")
        await app_page.wait_for_load_state("load", timeout=20000)
        return app_page

    @allure.step("Finish onboarding redirect")
    async def handle_onboarding(self, page: Page) -> None:
        """Step 5."""
        if self.data.urls.onboarding_path not in page.url or is_login_url(page.url, self.data.urls.login_path):
            return

        tokens = extract_session_tokens(page.url)
        if tokens is not None:
            self.jwt, self.user_id = tokens
            await page.evaluate(STORE_TOKENS_JS, {"token": self.jwt, "uid": self.user_id})
            logger.info("Stored onboarding tokens in localStorage")

        try:
            await page.wait_for_function(LOADING_GONE_JS, timeout=self.data.timeouts.very_long)
        except PlaywrightTimeoutError:
            logger.warning("⚠️ Loading indicators still visible, continuing")

        home = HomePage(page, self.data.urls.base)
        await home.settle(timeout=20000)

        try:
            await page.wait_for_url(
                lambda url: is_app_url(url, self.host)
                and "/onboarding" not in url
                and "/login" not in url.lower(),
                timeout=self.data.timeouts.very_long,
            )
            logger.info(f"✅ Left onboarding: {page.url}")
            return
        except PlaywrightTimeoutError:
            logger.info("No automatic navigation away from onboarding")

        if await home.is_loaded(timeout=self.data.timeouts.medium):
            logger.info("Home content already rendered on the onboarding route")
            return

        await page.evaluate(f"window.location.href = '{self.data.urls.home_path}'")
        await home.pause(3000)
        await home.settle(timeout=15000)
        logger.info(f"Navigated manually to: {page.url}")

    @allure.step("Recover lost session")
    async def recover_from_login_bounce(self, page: Page) -> None:
        """
        Step 6.

        Raises:
            NavigationError: The app keeps redirecting to the login page
        """
        if not is_login_url(page.url, self.data.urls.login_path):
            return

        logger.warning("⚠️ Redirected back to login, retrying /home once")
        await page.goto(self.data.urls.home, wait_until="domcontentloaded", timeout=15000)
        await HomePage(page, self.data.urls.base).pause(3000)
        if is_login_url(page.url, self.data.urls.login_path):
            raise NavigationError(
                "Session was lost and could not be recovered. The app redirected back to login."
            )

    @allure.step("Perform login")
    async def perform_login(self, page: Optional[Page] = None) -> Tuple[Page, AuthSession]:
        """
        Run the whole sign-in.

        Returns:
            (page parked on the home screen, saved AuthSession)
        """
        logger.info(f"🔐 Starting login for {self.data.credentials.email}")
        page = page or await self.context.new_page()

        await self.clear_app_cookies()
        await self.start_google_sign_in(page)

        app_page = await self.wait_for_app_page()
        await self.handle_onboarding(app_page)
        await self.recover_from_login_bounce(app_page)

        home = HomePage(app_page, self.data.urls.base)
        if not await home.is_loaded(timeout=self.data.timeouts.medium) and "/home" not in app_page.url:
            await home.open()
        await home.verify_loaded(timeout=self.data.timeouts.long)

        self.auth_state_path.parent.mkdir(parents=True, exist_ok=True)
        await self.context.storage_state(path=str(self.auth_state_path))
        session = AuthSession(
            base_url=self.data.urls.base,
            storage_state_path=self.auth_state_path,
            email=self.data.credentials.email,
            user_id=self.user_id,
            jwt=self.jwt,
        )
        session.save_metadata()
        logger.info(f"✅ Login complete, session saved to {self.auth_state_path}")
        return app_page, session


async def establish_session(
    manager: BrowserManager,
    data: Optional[TestData] = None,
    auth_state_path: Optional[Path] = None,
    reuse: bool = True,
) -> AuthSession:
    """
    Return a usable AuthSession, logging in only when no fresh one is stored.
    """
    config = ConfigLoader()
    data = data or TestData.from_config(config)
    path = Path(auth_state_path or config.get("artifacts.auth_state_file", ".auth/auth.json"))

    if reuse:
        stored = AuthSession.load(path)
        if stored is not None and stored.is_fresh() and stored.base_url == data.urls.base:
            logger.info(f"Reusing stored session for {stored.email}")
            return stored

    context = await manager.new_context()
    try:
        _, session = await LoginFlow(context, data, path).perform_login()
    finally:
        await context.close()
    return session


__all__ = [
    "LoginFlow",
    "establish_session",
    "app_host",
    "auth_domain_for",
    "extract_session_tokens",
    "is_app_url",
    "is_login_url",
    "site_domain",
]
