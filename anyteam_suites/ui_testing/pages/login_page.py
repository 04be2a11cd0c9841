"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Anyteam login screen at /onboarding/Login. The only sign-in path is the
"Continue with Google" button, which either opens a Google popup or redirects
the current tab.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

import allure
from loguru import logger
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from anyteam_suites.ui_testing.framework.matchers import ByRole, ByText
from anyteam_suites.ui_testing.framework.page_base import PageBase


@dataclass(frozen=True)
class LoginPageElements:
    """Visibility of each static element on the login screen."""
    anyteam_logo: bool
    continue_with_google: bool
    business_email_hint: bool
    terms_of_service: bool
    privacy_policy: bool

    @property
    def all_visible(self) -> bool:
        return all(getattr(self, f.name) for f in fields(self))

    def missing(self) -> list:
        return [f.name for f in fields(self) if not getattr(self, f.name)]


class LoginPage(PageBase):
    """Login page object (async)."""

    URL_PATH = "/onboarding/Login"
    PAGE_TITLE = "Login"

    BUSINESS_EMAIL_HINT = "Use business email to unlock more features"

    LOCATORS = {
        # The header logo carries `absolute`; the form logo does not.
        "anyteam_logo": (
            'img[alt="anyteam-logo"]:not(.absolute)',
            ByRole("img", name="anyteam-logo"),
        ),
        "continue_with_google": (
            'p:has-text("Continue with Google")',
            ByText("Continue with Google"),
        ),
        "continue_with_google_button": (
            'button:has(p:has-text("Continue with Google"))',
            ByRole("button", name="Continue with Google"),
            'p:has-text("Continue with Google")',
        ),
        "business_email_hint": (
            f'h6:has-text("{BUSINESS_EMAIL_HINT}")',
            ByText(BUSINESS_EMAIL_HINT),
        ),
        "terms_of_service": (
            'span:has-text("terms of service")',
            ByText("terms of service"),
        ),
        "privacy_policy": (
            'span:has-text("privacy policy")',
            ByText("privacy policy"),
        ),
    }

    def __init__(self, page: Page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.login_path", self.URL_PATH)

    @allure.step("Open login page")
    async def open(self) -> "LoginPage":
        """Navigate to the login page and wait for the sign-in button."""
        await self.navigate()
        await self.settle(timeout=self.timeout("long"))
        await self.locate("anyteam_logo", timeout=self.timeout("long"))
        await self.locate("continue_with_google", timeout=self.timeout("long"))
        return self

    async def is_displayed(self) -> bool:
        return (
            await self.is_visible("anyteam_logo", timeout=self.timeout("medium"))
            and await self.is_visible("continue_with_google", timeout=self.timeout("medium"))
        )

    @allure.step("Verify login page elements")
    async def verify_elements_displayed(self) -> LoginPageElements:
        """Probe every static element; absence is reported, not raised."""
        timeout = self.timeout("medium")
        elements = LoginPageElements(
            anyteam_logo=await self.is_visible("anyteam_logo", timeout),
            continue_with_google=await self.is_visible("continue_with_google", timeout),
            business_email_hint=await self.is_visible("business_email_hint", timeout),
            terms_of_service=await self.is_visible("terms_of_service", timeout),
            privacy_policy=await self.is_visible("privacy_policy", timeout),
        )
        if not elements.all_visible:
            logger.warning(f"⚠️ Login page elements missing: {elements.missing()}")
        return elements

    async def continue_button_text(self) -> str:
        return await self.get_text("continue_with_google")

    async def business_email_hint_text(self) -> Optional[str]:
        return await self.get_text_or_none("business_email_hint")

    @allure.step("Click Continue with Google")
    async def click_continue_with_google(self, popup_timeout: int = 5000) -> Page:
        """
        Start the Google sign-in.

        Returns:
            The page showing the Google flow: the popup if one opened,
            otherwise this page after its redirect.
        """
        context = self.page.context
        popup: Optional[Page] = None
        try:
            async with context.expect_page(timeout=popup_timeout) as popup_info:
                await self.click("continue_with_google_button")
            popup = await popup_info.value
        except PlaywrightTimeoutError:
            logger.debug("No popup opened, Google flow continues in the same tab")

        if popup is not None:
            logger.info(f"Google sign-in popup opened: {popup.url}")
            await popup.wait_for_load_state("domcontentloaded")
            return popup

        await self.settle(timeout=self.timeout("long"))
        return self.page

    @allure.step("Open Terms of Service")
    async def click_terms_of_service(self) -> None:
        await self.click("terms_of_service")

    @allure.step("Open Privacy Policy")
    async def click_privacy_policy(self) -> None:
        await self.click("privacy_policy")


__all__ = ["LoginPage", "LoginPageElements"]
