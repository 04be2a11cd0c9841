"""
================================================================================
Matcher Descriptors
================================================================================

Declarative element matchers consumed by the LocatorResolver.

A fallback chain is an ordered tuple of matchers; page objects keep their
chains in a single LOCATORS table so that UI drift is fixed in one place:

    LOCATORS = {
        "join_button": (
            ByCss('button[data-state="closed"]:has-text("Join")'),
            ByRole("button", name="Join"),
            ByText("Join"),
        ),
    }

Plain strings inside a chain are treated as ByCss.

================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple, Union

from playwright.async_api import Locator, Page


Root = Union[Page, Locator]


def _pick(locator: Locator, nth: int) -> Locator:
    if nth == 0:
        return locator.first
    if nth == -1:
        return locator.last
    return locator.nth(nth)


def _position(nth: int) -> str:
    if nth == 0:
        return ""
    if nth == -1:
        return " (last)"
    return f" (nth={nth})"


@dataclass(frozen=True)
class ByRole:
    """Match by ARIA role and optional accessible name."""
    role: str
    name: Optional[Union[str, Pattern[str]]] = None
    exact: bool = False
    nth: int = 0

    def to_locator(self, root: Root) -> Locator:
        if self.name is None:
            locator = root.get_by_role(self.role)
        else:
            locator = root.get_by_role(self.role, name=self.name, exact=self.exact)
        return _pick(locator, self.nth)

    def describe(self) -> str:
        name = f" name={_text(self.name)}" if self.name is not None else ""
        return f"role={self.role}{name}{_position(self.nth)}"


@dataclass(frozen=True)
class ByText:
    """Match by visible text (substring unless exact)."""
    text: Union[str, Pattern[str]]
    exact: bool = False
    nth: int = 0

    def to_locator(self, root: Root) -> Locator:
        return _pick(root.get_by_text(self.text, exact=self.exact), self.nth)

    def describe(self) -> str:
        return f"text={_text(self.text)}{_position(self.nth)}"


@dataclass(frozen=True)
class ByAttribute:
    """
    Match by a single attribute.

    `operator` is a CSS attribute operator: "=", "*=", "^=", "$=".
    """
    attribute: str
    value: str
    tag: str = ""
    operator: str = "="
    nth: int = 0

    @property
    def selector(self) -> str:
        escaped = self.value.replace('"', '\\"')
        return f'{self.tag}[{self.attribute}{self.operator}"{escaped}"]'

    def to_locator(self, root: Root) -> Locator:
        return _pick(root.locator(self.selector), self.nth)

    def describe(self) -> str:
        return f"attr={self.selector}{_position(self.nth)}"


@dataclass(frozen=True)
class ByCss:
    """Raw Playwright selector (CSS plus :has-text / :has extensions)."""
    selector: str
    nth: int = 0

    def to_locator(self, root: Root) -> Locator:
        return _pick(root.locator(self.selector), self.nth)

    def describe(self) -> str:
        return f"css={self.selector}{_position(self.nth)}"


Matcher = Union[ByRole, ByText, ByAttribute, ByCss]
Candidate = Union[Matcher, str]
CandidateList = Sequence[Candidate]


def _text(value: Union[str, Pattern[str]]) -> str:
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    return f'"{value}"'


def as_matcher(candidate: Candidate) -> Matcher:
    """Normalize a chain entry; strings become ByCss."""
    if isinstance(candidate, str):
        return ByCss(candidate)
    if isinstance(candidate, (ByRole, ByText, ByAttribute, ByCss)):
        return candidate
    raise TypeError(f"Unsupported locator candidate: {candidate!r}")


def as_chain(candidates: CandidateList) -> Tuple[Matcher, ...]:
    """Normalize a whole chain, preserving order."""
    if isinstance(candidates, (str, ByRole, ByText, ByAttribute, ByCss)):
        candidates = [candidates]
    return tuple(as_matcher(c) for c in candidates)


__all__ = [
    "ByRole",
    "ByText",
    "ByAttribute",
    "ByCss",
    "Matcher",
    "Candidate",
    "CandidateList",
    "as_matcher",
    "as_chain",
]
