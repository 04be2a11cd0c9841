"""
================================================================================
Google OAuth Page Object (Async / Playwright)
================================================================================

Covers every screen of the Google sign-in used by "Continue with Google":
account chooser, email step, password step, consent ("You're signing back
in") and permissions ("wants to access your Google Account").

Google's markup is obfuscated (jsname attributes), so each element carries a
fallback chain ending with a role/text matcher.

================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import allure
from loguru import logger
from playwright.async_api import Page

from anyteam_suites.ui_testing.framework.exceptions import InteractionBlockedError
from anyteam_suites.ui_testing.framework.matchers import ByAttribute, ByCss, ByRole, ByText
from anyteam_suites.ui_testing.framework.page_base import PageBase


GOOGLE_ACCOUNTS_URL = "https://accounts.google.com"


@dataclass(frozen=True)
class GoogleOAuthState:
    """Snapshot of the Google form, used by tests that stop before signing in."""
    is_form_visible: bool
    is_email_input_visible: bool
    is_next_button_enabled: bool
    has_captcha: bool


class GoogleOAuthPage(PageBase):
    """Google sign-in flow (async)."""

    URL_PATH = ""
    PAGE_TITLE = "Sign in - Google Accounts"

    LOCATORS = {
        "choose_account_heading": (
            'h1:has-text("Choose an account")',
            'span:has-text("Choose an account")',
        ),
        "saved_account": (
            ByCss('div[role="link"][jsname="MBVUVe"]'),
        ),
        "use_another_account": (
            'div[role="link"][jsname="rwl3qc"]:has-text("Use another account")',
            'div.riDSKb:has-text("Use another account")',
            'li:has-text("Use another account") div[role="link"]',
            ByRole("link", name="Use another account"),
        ),
        "email_input": (
            'input[type="email"][name="identifier"]',
            ByAttribute("id", "identifierId", tag="input"),
            ByAttribute("aria-label", "Email or phone", tag="input"),
        ),
        "password_input": (
            'input[type="password"][name="Passwd"]',
            ByAttribute("aria-label", "Enter your password", tag="input"),
        ),
        "next_button": (
            'button:has(span[jsname="V67aGc"]:has-text("Next"))',
            'button:has-text("Next")',
            ByRole("button", name="Next"),
        ),
        "create_account": (
            'button[jsname="LgbsSe"]:has(span[jsname="V67aGc"]:has-text("Create account"))',
            'button[type="button"]:has(span:has-text("Create account"))',
        ),
        "forgot_email": (
            'button[jsname="Cuz2Ue"]:has-text("Forgot email?")',
            ByRole("button", name="Forgot email?"),
        ),
        "consent_heading": (
            ByText(re.compile(r"You.*re signing back in")),
        ),
        "continue_button": (
            ByCss('span[jsname="V67aGc"].VfPpkd-vQzf8d:has-text("Continue")', nth=-1),
            ByRole("button", name="Continue", nth=-1),
        ),
        "permissions_heading": (
            ByText(re.compile(r"wants to access your Google Account")),
        ),
        "allow_button": (
            ByCss('span[jsname="V67aGc"].VfPpkd-vQzf8d:has-text("Allow")', nth=-1),
            ByRole("button", name="Allow", nth=-1),
        ),
        "captcha_image": (
            "img#captchaimg",
        ),
    }

    def __init__(self, page: Page, base_url: str = GOOGLE_ACCOUNTS_URL):
        super().__init__(page, base_url)

    async def is_choose_account_displayed(self) -> bool:
        return await self.is_visible("choose_account_heading", timeout=self.timeout("medium"))

    async def is_email_step_displayed(self) -> bool:
        return await self.is_visible("email_input", timeout=self.timeout("medium"))

    async def is_use_another_account_visible(self) -> bool:
        return await self.is_visible("use_another_account", timeout=self.timeout("medium"))

    async def has_captcha(self) -> bool:
        return await self.is_visible("captcha_image", timeout=1000)

    async def is_next_enabled(self) -> bool:
        resolution = await self.find("next_button", timeout=self.timeout("medium"))
        if resolution is None:
            return False
        return await resolution.locator.is_enabled()

    @allure.step("Read Google sign-in state")
    async def get_state(self) -> GoogleOAuthState:
        email_visible = await self.is_email_step_displayed()
        return GoogleOAuthState(
            is_form_visible=email_visible or await self.is_choose_account_displayed(),
            is_email_input_visible=email_visible,
            is_next_button_enabled=await self.is_next_enabled(),
            has_captcha=await self.has_captcha(),
        )

    @allure.step("Use another account")
    async def use_another_account(self) -> None:
        await self.click("use_another_account", timeout=self.timeout("long"))
        await self.locate("email_input", timeout=self.timeout("long"))

    @allure.step("Enter email")
    async def enter_email(self, email: str) -> None:
        resolution = await self.locate("email_input", timeout=self.timeout("long"))
        await resolution.locator.clear()
        await self.actions.fill(resolution, email, element_name="email_input")

    @allure.step("Click Next")
    async def click_next(self) -> None:
        """
        Raises:
            InteractionBlockedError: Next is rendered but disabled (invalid email)
        """
        resolution = await self.locate("next_button", timeout=self.timeout("long"))
        if await resolution.locator.is_disabled():
            raise InteractionBlockedError("click", "next_button", "button is disabled, enter a valid email first")
        await self.actions.click(resolution)
        await self.pause(1000)

    @allure.step("Enter password")
    async def enter_password(self, password: str) -> None:
        """Type the password key by key; Google ignores programmatic fill() here."""
        resolution = await self.locate("password_input", timeout=self.timeout("long"))
        await resolution.locator.click()
        await resolution.locator.clear()
        await self.actions.press_sequentially(
            resolution,
            password,
            element_name="password_input",
            delay_ms=100,
            secret=True,
        )

    @allure.step("Click Continue on consent screen")
    async def click_continue(self) -> bool:
        """Force-click Continue if the consent screen shows up. Returns False if it did not."""
        resolution = await self.find("continue_button", timeout=15000)
        if resolution is None:
            logger.info("Consent screen not shown, nothing to continue")
            return False
        await self.scroll_into_view(resolution)
        await resolution.locator.click(force=True)
        await self.pause(2000)
        return True

    @allure.step("Click Allow on permissions screen")
    async def click_allow(self) -> bool:
        """Normal click, then force, on Allow if shown. Returns False if it did not show."""
        resolution = await self.find("allow_button", timeout=15000)
        if resolution is None:
            logger.info("Permissions screen not shown, nothing to allow")
            return False
        await self.scroll_into_view(resolution)
        await self.actions.click(resolution, timeout=5000)
        await self.pause(2000)
        return True

    @allure.step("Complete Google sign-in")
    async def complete_oauth(self, email: str, password: str) -> None:
        """Account chooser (optional), email, password, consent and permissions."""
        if await self.is_use_another_account_visible():
            await self.use_another_account()

        await self.enter_email(email)
        await self.click_next()
        await self.pause(1500)

        if await self.has_captcha():
            logger.warning("⚠️ Google is showing a captcha; automated sign-in will likely fail")

        await self.enter_password(password)
        await self.click_next()
        await self.pause(3000)

        if self.page.is_closed():
            return
        await self.click_continue()
        if self.page.is_closed():
            return
        await self.click_allow()


__all__ = ["GoogleOAuthPage", "GoogleOAuthState", "GOOGLE_ACCOUNTS_URL"]
