"""
Screenshot capture shared by the resolver, page objects and failure hooks.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

import allure
from loguru import logger
from playwright.async_api import Page

from anyteam_suites.common.config_loader import ConfigLoader


def screenshot_dir() -> Path:
    """Configured output directory (relative paths resolve against cwd)."""
    return Path(ConfigLoader().get("artifacts.screenshot_dir", "test-results/screenshots"))


def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "screenshot"


async def take_screenshot(
    page: Page,
    name: str,
    full_page: bool = True,
    directory: Optional[Path] = None,
    attach_to_allure: bool = True,
) -> Path:
    """
    Save a PNG screenshot and optionally attach it to the Allure report.

    Args:
        page: Page to capture
        name: Screenshot name (without extension)
        full_page: Capture full scrollable page
        directory: Output directory, defaults to `artifacts.screenshot_dir`
        attach_to_allure: Whether to attach to Allure report

    Returns:
        Path to saved screenshot
    """
    target_dir = Path(directory) if directory else screenshot_dir()
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filepath = target_dir / f"{_safe_name(name)}_{timestamp}.png"

    await page.screenshot(path=str(filepath), full_page=full_page)

    if attach_to_allure:
        allure.attach.file(
            str(filepath),
            name=name,
            attachment_type=allure.attachment_type.PNG,
        )

    logger.debug(f"Screenshot saved: {filepath}")
    return filepath


__all__ = ["take_screenshot", "screenshot_dir"]
