# ================================================================================
# Element Actions Module
# ================================================================================
#
# Resilient interactions on top of the LocatorResolver.
#
# Key Features:
#   - ActionWrapper: natural click/fill/hover, then exactly ONE force retry
#   - RetryPolicy + retry_until: fixed-delay retry loop with an optional nudge
#     (e.g. scroll) that runs only between attempts
#   - with_retry: decorator form of the retry loop for page-object methods
#   - scroll_nudge: window.scrollBy helper used as a nudge
#   - Allure step integration
#
# ================================================================================

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .exceptions import E2EError, InteractionBlockedError, RetryExhaustedError
from .matchers import ByAttribute, ByCss, ByRole, ByText
from .smart_locator import LocatorResolver, Resolution


T = TypeVar("T")

Nudge = Callable[[], Awaitable[Any]]

# Failures a retry loop treats as "try again"; anything else propagates.
RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (E2EError, PlaywrightError)

# Indirection so tests can observe delays without touching asyncio itself.
_sleep = asyncio.sleep


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-delay retry configuration.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        delay_seconds: Pause between attempts, constant (no backoff, no jitter)
        nudge: Optional coroutine function awaited between attempts
    """
    max_attempts: int = 3
    delay_seconds: float = 1.0
    nudge: Optional[Nudge] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")


async def retry_until(
    work: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    description: str = "operation",
    retry_on: Tuple[Type[BaseException], ...] = RETRYABLE_ERRORS,
) -> T:
    """
    Run `work` until it succeeds or the policy is exhausted.

    Between two attempts the nudge (if any) runs first, then the fixed delay.
    Nothing runs before the first attempt or after the last one.

    Raises:
        RetryExhaustedError: All attempts failed (last error chained)
    """
    last_error: Optional[BaseException] = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await work()
        except retry_on as e:
            last_error = e

        if attempt == policy.max_attempts:
            break

        logger.warning(
            f"Attempt {attempt}/{policy.max_attempts} failed for {description}: "
            f"{str(last_error)[:120]}. Retrying in {policy.delay_seconds}s..."
        )
        if policy.nudge is not None:
            await policy.nudge()
        await _sleep(policy.delay_seconds)

    logger.error(
        f"All {policy.max_attempts} attempts failed for {description}: "
        f"{str(last_error)[:200]}"
    )
    raise RetryExhaustedError(description, policy.max_attempts, last_error) from last_error


def with_retry(policy: Optional[RetryPolicy] = None):
    """
    Decorator for adding the retry loop to async page-object methods.

    Args:
        policy: RetryPolicy controlling attempts and delay
    """
    if policy is None:
        policy = RetryPolicy()

    def decorator(func: Callable[..., Awaitable[T]]):
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await retry_until(
                lambda: func(*args, **kwargs),
                policy,
                description=func.__name__,
            )

        return wrapper
    return decorator


def scroll_nudge(page: Page, dx: int = 0, dy: int = 100) -> Nudge:
    """Nudge that scrolls the window by (dx, dy) pixels."""

    async def _scroll() -> None:
        try:
            await page.evaluate(f"window.scrollBy({dx}, {dy})")
        except PlaywrightError as e:
            logger.warning(f"Scroll nudge failed: {e}")

    return _scroll


def _first_line(error: BaseException) -> str:
    text = str(error).strip()
    return text.splitlines()[0][:120] if text else type(error).__name__


class ActionWrapper:
    """
    Performs one user-intent interaction resiliently.

    The natural interaction is attempted first; if Playwright rejects it
    (commonly "element intercepts pointer events" or an actionability
    timeout) exactly one bypass attempt with `force=True` follows. Both
    failing raises InteractionBlockedError.

    Example:
        actions = ActionWrapper(page)
        await actions.click(LOCATORS["join_button"], element_name="Join")
        await actions.fill(resolution, "hello")
    """

    def __init__(
        self,
        page: Page,
        resolver: Optional[LocatorResolver] = None,
        timeout: int = 10000,
    ):
        """
        Args:
            page: Playwright Page object
            resolver: Resolver used when a candidate chain is passed as target
            timeout: Primary interaction timeout in milliseconds
        """
        self.page = page
        self.resolver = resolver or LocatorResolver(page)
        self.timeout = timeout

    async def _target(
        self,
        target: Any,
        element_name: Optional[str],
        resolve_timeout: int,
    ) -> Tuple[Locator, str]:
        if isinstance(target, Resolution):
            return target.locator, element_name or target.element_name
        if isinstance(target, (str, list, tuple, ByRole, ByText, ByAttribute, ByCss)):
            resolution = await self.resolver.resolve(
                target,
                timeout=resolve_timeout,
                element_name=element_name or "element",
            )
            return resolution.locator, resolution.element_name
        return target, element_name or "locator"

    async def _perform(
        self,
        action: str,
        locator: Locator,
        name: str,
        timeout: Optional[int],
        *args: Any,
        **kwargs: Any,
    ) -> bool:
        """Run `locator.<action>`; returns True when the force variant was needed."""
        timeout = timeout or self.timeout
        method = getattr(locator, action)

        try:
            await method(*args, timeout=timeout, **kwargs)
            logger.debug(f"✅ {action} on '{name}'")
            return False
        except PlaywrightError as e:
            logger.warning(f"⚠️ {action} on '{name}' failed ({_first_line(e)}); retrying with force")

        try:
            await method(*args, timeout=timeout, force=True, **kwargs)
        except PlaywrightError as e:
            logger.error(f"❌ force {action} on '{name}' failed: {_first_line(e)}")
            raise InteractionBlockedError(action, name, _first_line(e)) from e

        logger.info(f"✅ {action} on '{name}' succeeded with force")
        return True

    @allure.step("Click: {element_name}")
    async def click(
        self,
        target: Any,
        element_name: Optional[str] = None,
        timeout: Optional[int] = None,
        resolve_timeout: int = 5000,
        **kwargs: Any,
    ) -> bool:
        """
        Click with one force fallback.

        Args:
            target: Resolution, Locator, or candidate chain
            element_name: Name used in logs / Allure
            timeout: Primary click timeout (ms)
            resolve_timeout: Per-candidate visibility wait when resolving a chain
            **kwargs: Extra Locator.click() options (button, modifiers, ...)

        Returns:
            True if the force click was needed
        """
        locator, name = await self._target(target, element_name, resolve_timeout)
        return await self._perform("click", locator, name, timeout, **kwargs)

    @allure.step("Fill: {element_name}")
    async def fill(
        self,
        target: Any,
        value: str,
        element_name: Optional[str] = None,
        timeout: Optional[int] = None,
        resolve_timeout: int = 5000,
        secret: bool = False,
    ) -> bool:
        """Fill an input with one force fallback. `secret` masks the value in logs."""
        locator, name = await self._target(target, element_name, resolve_timeout)
        shown = "*" * len(value) if secret else value[:50]
        logger.info(f"Filling '{name}' with '{shown}'")
        return await self._perform("fill", locator, name, timeout, value)

    @allure.step("Hover: {element_name}")
    async def hover(
        self,
        target: Any,
        element_name: Optional[str] = None,
        timeout: Optional[int] = None,
        resolve_timeout: int = 5000,
    ) -> bool:
        """Hover with one force fallback."""
        locator, name = await self._target(target, element_name, resolve_timeout)
        return await self._perform("hover", locator, name, timeout)

    @allure.step("Type: {element_name}")
    async def press_sequentially(
        self,
        target: Any,
        text: str,
        element_name: Optional[str] = None,
        delay_ms: int = 100,
        resolve_timeout: int = 5000,
        secret: bool = False,
    ) -> None:
        """
        Type text key by key (real keystrokes, for inputs that ignore fill()).

        Keystrokes have no force variant; a failure raises InteractionBlockedError.
        """
        locator, name = await self._target(target, element_name, resolve_timeout)
        shown = "*" * len(text) if secret else text[:50]
        logger.info(f"Typing into '{name}': '{shown}'")
        try:
            await locator.press_sequentially(text, delay=delay_ms, timeout=self.timeout)
        except PlaywrightError as e:
            raise InteractionBlockedError("type", name, _first_line(e)) from e


__all__ = [
    "ActionWrapper",
    "RetryPolicy",
    "RETRYABLE_ERRORS",
    "retry_until",
    "with_retry",
    "scroll_nudge",
]
