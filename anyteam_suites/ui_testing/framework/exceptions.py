"""
================================================================================
Framework Exceptions
================================================================================

Error taxonomy shared by the locator resolver, action wrapper, retry loop and
page objects.

Hierarchy:
    E2EError
    ├── ElementNotFoundError      no candidate resolved to a visible element
    ├── InteractionBlockedError   element found, normal and force attempts failed
    ├── WaitTimeoutError          a bounded wait expired
    │   └── RetryExhaustedError   retry loop ran out of attempts
    └── NavigationError           expected redirect / URL never happened

Recoverable absence is NOT an exception: page objects return bool / Optional
for that. These errors abort the current test step.

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence


class E2EError(Exception):
    """Base class for all suite errors."""
    pass


class ElementNotFoundError(E2EError):
    """Raised when every locator candidate failed to resolve."""

    def __init__(
        self,
        element_name: str,
        candidates: Sequence[str],
        errors: Optional[List[str]] = None,
        screenshot: Optional[Path] = None,
    ):
        self.element_name = element_name
        self.candidates = list(candidates)
        self.errors = list(errors or [])
        self.screenshot = screenshot

        lines = [f"All locators failed for '{element_name}':"]
        lines.extend(f"  - {err}" for err in (self.errors or self.candidates))
        if screenshot is not None:
            lines.append(f"  screenshot: {screenshot}")
        super().__init__("\n".join(lines))


class InteractionBlockedError(E2EError):
    """Raised when both the normal and the force interaction failed."""

    def __init__(self, action: str, target: str, reason: str = ""):
        self.action = action
        self.target = target
        message = f"{action} on '{target}' was blocked"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class WaitTimeoutError(E2EError):
    """Raised when a wait operation times out."""
    pass


class RetryExhaustedError(WaitTimeoutError):
    """Raised when a retry loop used up all of its attempts."""

    def __init__(self, description: str, attempts: int, last_error: Optional[BaseException] = None):
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        message = f"'{description}' failed after {attempts} attempt(s)"
        if last_error is not None:
            message = f"{message}: {str(last_error)[:200]}"
        super().__init__(message)


class NavigationError(E2EError):
    """Raised when an expected navigation or redirect did not occur."""
    pass


__all__ = [
    "E2EError",
    "ElementNotFoundError",
    "InteractionBlockedError",
    "WaitTimeoutError",
    "RetryExhaustedError",
    "NavigationError",
]
