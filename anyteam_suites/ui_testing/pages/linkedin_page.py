"""
================================================================================
LinkedIn Settings Page Object (Async / Playwright)
================================================================================

"LinkedIn" settings tab. Not every account has the LinkedIn field, so
editing reports absence with False instead of failing the test.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from anyteam_suites.ui_testing.framework.matchers import ByCss, ByRole
from anyteam_suites.ui_testing.pages.settings_page import SettingsPage


class LinkedInPage(SettingsPage):
    """LinkedIn tab (async)."""

    TAB_NAME = "LinkedIn"

    LOCATORS = {
        **SettingsPage.LOCATORS,
        "linkedin_tab": (
            'button[role="tab"][id*="trigger-linked"]',
            'button[role="tab"]:has-text("Linked")',
            ByRole("tab", name="LinkedIn"),
        ),
        "linkedin_content": (
            '[id*="content-linked"]',
            '[role="tabpanel"][data-state="active"]',
        ),
        "linkedin_edit_icon": (
            "button:has(svg.lucide-pencil)",
            ByCss("svg.lucide-pencil"),
        ),
        "linkedin_field": (
            'input[name="linkedIn"]',
            'input[placeholder*="linkedin" i]',
        ),
        "save_button": (
            'button.text-sm.flex.items-center.underline.underline-offset-2:has-text("Save")',
            ByRole("button", name="Save"),
        ),
    }

    @allure.step("Open LinkedIn tab")
    async def open_linkedin(self) -> "LinkedInPage":
        await self.open()
        await self.click("linkedin_tab", timeout=self.timeout("long"))
        await self.settle(timeout=self.timeout("medium"))
        return self

    async def is_linkedin_active(self) -> bool:
        resolution = await self.find("linkedin_tab", timeout=self.timeout("medium"))
        if resolution is None:
            return False
        return await resolution.locator.get_attribute("data-state") == "active"

    async def is_content_displayed(self) -> bool:
        return await self.is_visible("linkedin_content", timeout=self.timeout("medium"))

    @allure.step("Edit LinkedIn URL")
    async def edit_linkedin(self, url: str) -> bool:
        """
        Replace the LinkedIn URL and save.

        Returns:
            False if this account has no LinkedIn field
        """
        edit_icon = await self.find("linkedin_edit_icon", timeout=self.timeout("medium"))
        if edit_icon is not None:
            await self.click(edit_icon, element_name="linkedin_edit_icon")
            await self.pause(1000)

        field = await self.find("linkedin_field", timeout=self.timeout("medium"))
        if field is None:
            logger.warning("⚠️ LinkedIn field not present, nothing to edit")
            return False

        await self.scroll_into_view(field)
        await field.locator.clear()
        await self.actions.fill(field, url, element_name="linkedin_field")
        await self.pause(500)
        await self.click("save_button", timeout=self.timeout("long"))
        await self.pause(self.timeout("short"))
        logger.info(f"✅ LinkedIn URL saved: {url}")
        return True

    async def linkedin_url(self) -> str:
        field = await self.find("linkedin_field", timeout=self.timeout("short"))
        if field is None:
            return ""
        return await field.locator.input_value()


__all__ = ["LinkedInPage"]
