"""
================================================================================
Locator Resolver
================================================================================

Resilient element location with ordered fallback chains:
    - Candidates are tried strictly in list order, first visible match wins
    - Each candidate gets its own bounded visibility wait
    - Attached-but-hidden elements (display:none, visibility:hidden, zero
      size) never satisfy the wait and are skipped
    - Exhausting the chain captures ONE full-page screenshot and raises
      ElementNotFoundError with every attempted candidate
    - Fallback usage is recorded for a maintenance health report

Recoverable absence goes through `find()` / `is_visible()` which return
None / False and never take a screenshot.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .exceptions import ElementNotFoundError
from .matchers import CandidateList, Matcher, Root, as_chain
from .screenshots import take_screenshot


@dataclass(frozen=True)
class Resolution:
    """Successful resolution: the live locator plus which candidate won."""
    locator: Locator
    matcher: Matcher
    index: int
    element_name: str

    @property
    def used_fallback(self) -> bool:
        return self.index > 0

    def describe(self) -> str:
        return f"{self.element_name} [{self.index}] {self.matcher.describe()}"


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: Description of the preferred candidate
        used_fallback: Whether a fallback was used
        fallback_index: Position of the winning fallback (if any)
        fallback_selector: Description of the winning fallback (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_index: Optional[int] = None
    fallback_selector: Optional[str] = None


class LocatorResolver:
    """
    Resolves an ordered candidate chain to exactly one visible element.

    Usage:
        >>> resolver = LocatorResolver(page)
        >>> resolution = await resolver.resolve(
        ...     [ByCss('button[data-state="closed"]:has-text("Join")'),
        ...      ByCss('button:has-text("Join")')],
        ...     element_name="join_button",
        ... )
        >>> await resolution.locator.click()
    """

    def __init__(
        self,
        page: Page,
        screenshot_dir: Optional[Path] = None,
        root: Optional[Root] = None,
    ):
        """
        Args:
            page: Playwright page (used for diagnostics screenshots)
            screenshot_dir: Override for the screenshot output directory
            root: Optional scope; candidates are evaluated inside it instead of the page
        """
        self.page = page
        self.root: Root = root if root is not None else page
        self.screenshot_dir = screenshot_dir
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def within(self, root: Root) -> "LocatorResolver":
        """Resolver scoped to a container locator, sharing health records."""
        scoped = LocatorResolver(self.page, screenshot_dir=self.screenshot_dir, root=root)
        scoped._health_records = self._health_records
        scoped._fallback_used = self._fallback_used
        return scoped

    async def _try_chain(
        self,
        chain: Tuple[Matcher, ...],
        timeout: int,
    ) -> Tuple[Optional[Tuple[int, Matcher, Locator]], List[str]]:
        errors: List[str] = []
        for index, matcher in enumerate(chain):
            locator = matcher.to_locator(self.root)
            try:
                await locator.wait_for(state="visible", timeout=timeout)
            except PlaywrightError as e:
                first_line = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
                errors.append(f"[{index}] {matcher.describe()} -> {first_line[:80]}")
                continue
            return (index, matcher, locator), errors
        return None, errors

    def _record(self, element_name: str, chain: Tuple[Matcher, ...], index: int, matcher: Matcher) -> None:
        used_fallback = index > 0
        health = LocatorHealth(
            element_name=element_name,
            primary_selector=chain[0].describe(),
            used_fallback=used_fallback,
            fallback_index=index if used_fallback else None,
            fallback_selector=matcher.describe() if used_fallback else None,
        )
        self._health_records.append(health)

        if used_fallback:
            logger.warning(
                f"⚠️ Element '{element_name}' used fallback: "
                f"[{index}] {matcher.describe()}"
            )
            self._fallback_used[element_name] = health
        else:
            logger.debug(f"✅ Element '{element_name}' found: {matcher.describe()}")

    async def resolve(
        self,
        candidates: CandidateList,
        timeout: int = 5000,
        element_name: str = "element",
    ) -> Resolution:
        """
        Resolve the first visible candidate.

        Args:
            candidates: Ordered matcher chain (strings are treated as CSS)
            timeout: Visibility wait per candidate, in milliseconds
            element_name: Human-readable name for logs and reports

        Returns:
            Resolution for the first visible candidate

        Raises:
            ValueError: Empty candidate chain
            ElementNotFoundError: No candidate became visible (screenshot attached)
        """
        chain = as_chain(candidates)
        if not chain:
            raise ValueError(f"No locator candidates given for '{element_name}'")

        found, errors = await self._try_chain(chain, timeout)
        if found is not None:
            index, matcher, locator = found
            self._record(element_name, chain, index, matcher)
            return Resolution(locator=locator, matcher=matcher, index=index, element_name=element_name)

        screenshot: Optional[Path] = None
        try:
            screenshot = await take_screenshot(
                self.page,
                f"element_not_found_{element_name}",
                full_page=True,
                directory=self.screenshot_dir,
            )
        except PlaywrightError as e:
            logger.warning(f"⚠️ Screenshot for '{element_name}' not captured: {e}")
        error = ElementNotFoundError(
            element_name,
            [m.describe() for m in chain],
            errors=errors,
            screenshot=screenshot,
        )
        logger.error(f"❌ {error}")
        raise error

    async def find(
        self,
        candidates: CandidateList,
        timeout: int = 2000,
        element_name: str = "element",
    ) -> Optional[Resolution]:
        """
        Like resolve() but absence is an expected outcome: returns None,
        takes no screenshot.
        """
        chain = as_chain(candidates)
        if not chain:
            raise ValueError(f"No locator candidates given for '{element_name}'")

        found, _ = await self._try_chain(chain, timeout)
        if found is None:
            logger.debug(f"Element '{element_name}' not present ({len(chain)} candidates)")
            return None
        index, matcher, locator = found
        self._record(element_name, chain, index, matcher)
        return Resolution(locator=locator, matcher=matcher, index=index, element_name=element_name)

    async def is_visible(
        self,
        candidates: CandidateList,
        timeout: int = 2000,
        element_name: str = "element",
    ) -> bool:
        """True if any candidate becomes visible within the timeout."""
        return await self.find(candidates, timeout=timeout, element_name=element_name) is not None

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback candidate; their primary
        candidates are maintenance candidates.
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        report_lines = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: [{health.fallback_index}] {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "LocatorResolver",
    "LocatorHealth",
    "Resolution",
]
