"""
================================================================================
Settings Page Object (Async / Playwright)
================================================================================

Settings are opened from the sidebar and rendered as Radix tabs (Profile
Info, LinkedIn, Notifications, ...). A tab is active when its trigger has
data-state="active".

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from anyteam_suites.ui_testing.framework.matchers import ByRole
from anyteam_suites.ui_testing.framework.page_base import PageBase


class SettingsPage(PageBase):
    """Settings page object (async)."""

    URL_PATH = "/home"
    PAGE_TITLE = "Settings"

    LOCATORS = {
        "settings_button": (
            'button[data-sidebar="menu-button"]:has(h5:has-text("Settings"))',
            '[data-sidebar] button:has-text("Settings")',
            ByRole("button", name="Settings"),
        ),
        "profile_info_tab": (
            'button[role="tab"][id*="trigger-profile_info"]:has-text("Profile Info")',
            ByRole("tab", name="Profile Info"),
        ),
        "any_tab": (
            'button[role="tab"]',
        ),
    }

    def __init__(self, page, base_url: str = ""):
        super().__init__(page, base_url)
        self.URL_PATH = self.config.get("app.home_path", self.URL_PATH)

    @staticmethod
    def tab(name: str) -> tuple:
        """Chain for a settings tab by its label."""
        slug = name.lower().replace(" ", "_")
        return (
            f'button[role="tab"][id*="trigger-{slug}"]',
            f'button[role="tab"]:has-text("{name}")',
            ByRole("tab", name=name),
        )

    @allure.step("Open settings")
    async def open(self) -> "SettingsPage":
        """Home page, then the sidebar Settings button."""
        if "/home" not in self.page.url:
            await self.navigate()
            await self.settle(timeout=self.timeout("long"))
        await self.click("settings_button", timeout=self.timeout("long"))
        await self.settle(timeout=self.timeout("medium"))
        await self.locate("any_tab", timeout=self.timeout("long"))
        return self

    async def is_displayed(self) -> bool:
        return await self.is_visible("any_tab", timeout=self.timeout("medium"))

    async def is_settings_button_visible(self) -> bool:
        return await self.is_visible("settings_button", timeout=self.timeout("medium"))

    @allure.step("Open settings tab: {name}")
    async def open_tab(self, name: str) -> None:
        resolution = await self.locate(self.tab(name), timeout=self.timeout("long"), element_name=f"tab:{name}")
        await self.scroll_into_view(resolution)
        await self.click(resolution)
        await self.pause(1000)

    async def is_tab_active(self, name: str) -> bool:
        resolution = await self.find(self.tab(name), timeout=self.timeout("medium"), element_name=f"tab:{name}")
        if resolution is None:
            return False
        return await resolution.locator.get_attribute("data-state") == "active"

    async def tab_names(self) -> List[str]:
        labels = await self.page.locator('button[role="tab"]').all_text_contents()
        return [label.strip() for label in labels if label.strip()]


__all__ = ["SettingsPage"]
