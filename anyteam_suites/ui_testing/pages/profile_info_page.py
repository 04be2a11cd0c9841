"""
================================================================================
Profile Info Page Object (Async / Playwright)
================================================================================

"Profile Info" settings tab. The "About yourself" text is read-only until the
pencil icon is clicked; the pencil sits below the fold, hence the scroll
before it.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from anyteam_suites.ui_testing.framework.matchers import ByCss, ByRole
from anyteam_suites.ui_testing.pages.settings_page import SettingsPage


class ProfileInfoPage(SettingsPage):
    """Profile Info tab (async)."""

    TAB_NAME = "Profile Info"

    LOCATORS = {
        **SettingsPage.LOCATORS,
        "profile_info_content": (
            '[id*="content-profile_info"]',
            '[role="tabpanel"][data-state="active"]',
        ),
        # Several pencils on the tab; About yourself is the last one.
        "about_edit_icon": (
            ByCss("button:has(svg.lucide-pencil)", nth=-1),
            ByCss("svg.lucide-pencil", nth=-1),
        ),
        "about_field": (
            'textarea[name="about"]',
            ByRole("textbox", name="About"),
        ),
        "save_button": (
            'button.text-sm.flex.items-center.underline.underline-offset-2:has-text("Save")',
            'button.underline:has-text("Save")',
            ByRole("button", name="Save"),
        ),
    }

    @allure.step("Open Profile Info tab")
    async def open_profile_info(self) -> "ProfileInfoPage":
        await self.open()
        await self.open_tab(self.TAB_NAME)
        await self.locate("profile_info_content", timeout=self.timeout("long"))
        return self

    async def is_profile_info_active(self) -> bool:
        return await self.is_tab_active(self.TAB_NAME)

    async def is_content_displayed(self) -> bool:
        return await self.is_visible("profile_info_content", timeout=self.timeout("medium"))

    @allure.step("Click About yourself edit icon")
    async def click_about_edit_icon(self) -> None:
        await self.scroll_by(0, 300)
        await self.pause(500)
        resolution = await self.locate("about_edit_icon", timeout=self.timeout("long"))
        await self.scroll_into_view(resolution)
        await self.click(resolution, element_name="about_edit_icon")
        await self.pause(self.timeout("short"))

    @allure.step("Edit About yourself")
    async def edit_about(self, text: str) -> None:
        """Open the editor if needed, replace the text and save."""
        if not await self.is_visible("about_field", timeout=1000):
            await self.click_about_edit_icon()
        field = await self.locate("about_field", timeout=self.timeout("long"))
        await self.scroll_into_view(field)
        await field.locator.clear()
        await self.actions.fill(field, text, element_name="about_field")
        await self.pause(500)
        await self.save()

    @allure.step("Save profile info")
    async def save(self) -> None:
        resolution = await self.locate("save_button", timeout=self.timeout("long"))
        await self.scroll_into_view(resolution)
        await self.click(resolution, element_name="save_button")
        await self.pause(self.timeout("short"))
        logger.info("✅ Profile info saved")

    async def about_text(self) -> Optional[str]:
        """Current About text: the textarea value while editing, the rendered text otherwise."""
        field = await self.find("about_field", timeout=1000)
        if field is not None:
            return await field.locator.input_value()
        return await self.get_text_or_none("profile_info_content")


__all__ = ["ProfileInfoPage"]
