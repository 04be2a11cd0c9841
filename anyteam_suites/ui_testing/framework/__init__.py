"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework.

Components:
    - matchers: declarative fallback chain entries (ByRole / ByText / ByAttribute / ByCss)
    - smart_locator: LocatorResolver, first visible candidate wins
    - element_actions: ActionWrapper (one force retry) and the fixed-delay retry loop
    - page_base: base page object
    - browser_manager / session: browser lifecycle and explicit auth sessions

================================================================================
"""

from .browser_manager import BrowserManager
from .element_actions import ActionWrapper, RetryPolicy, retry_until, scroll_nudge, with_retry
from .exceptions import (
    E2EError,
    ElementNotFoundError,
    InteractionBlockedError,
    NavigationError,
    RetryExhaustedError,
    WaitTimeoutError,
)
from .matchers import ByAttribute, ByCss, ByRole, ByText
from .page_base import BasePage
from .session import AuthSession
from .smart_locator import LocatorResolver, Resolution

__all__ = [
    "ActionWrapper",
    "AuthSession",
    "BasePage",
    "BrowserManager",
    "ByAttribute",
    "ByCss",
    "ByRole",
    "ByText",
    "E2EError",
    "ElementNotFoundError",
    "InteractionBlockedError",
    "LocatorResolver",
    "NavigationError",
    "Resolution",
    "RetryExhaustedError",
    "RetryPolicy",
    "WaitTimeoutError",
    "retry_until",
    "scroll_nudge",
    "with_retry",
]
