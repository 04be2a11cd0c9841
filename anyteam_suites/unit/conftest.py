"""
Fake Playwright doubles for framework unit tests.

FakePage / FakeLocator model just enough of the async API for the resolver,
the action wrapper and the retry loop: visibility is a set of keys, every
interaction is recorded in order, and interactions can be told to fail a
given number of times.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from anyteam_suites.common.config_loader import ConfigLoader


class FakeLocator:
    """Locator double keyed by its selector (or role / text description)."""

    def __init__(self, page: "FakePage", key: str, pick: str = "first"):
        self.page = page
        self.key = key
        self.pick = pick

    def __repr__(self) -> str:
        return f"FakeLocator({self.key!r}, pick={self.pick!r})"

    # Narrowing keeps the key; only the pick is remembered.
    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self.key, "first")

    @property
    def last(self) -> "FakeLocator":
        return FakeLocator(self.page, self.key, "last")

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.page, self.key, f"nth={index}")

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.key} >> {selector}")

    def get_by_role(self, role: str, name: Any = None, exact: bool = False) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.key} >> {role_key(role, name)}")

    def get_by_text(self, text: Any, exact: bool = False) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.key} >> text={text}")

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self.page.waits.append(self.key)
        if self.key not in self.page.visible:
            raise PlaywrightTimeoutError(
                f"Locator.wait_for: Timeout {timeout}ms exceeded.\n  waiting for {self.key} to be {state}"
            )

    async def is_visible(self) -> bool:
        return self.key in self.page.visible

    async def all(self) -> List["FakeLocator"]:
        return list(self.page.all_results.get(self.key, []))

    async def count(self) -> int:
        return len(self.page.all_results.get(self.key, []))

    async def text_content(self, timeout: Optional[float] = None) -> Optional[str]:
        return self.page.texts.get(self.key)

    def _detach_if_flagged(self, action: str) -> None:
        remaining = self.page.failures.get((action, self.key), 0)
        if remaining:
            self.page.failures[(action, self.key)] = remaining - 1
            raise PlaywrightError(f"Locator.{action}: Element is not attached to the DOM")

    async def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        self._detach_if_flagged("get_attribute")
        return self.page.attributes.get((self.key, name))

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self._detach_if_flagged("evaluate")
        return self.page.opacities.get(self.key, 1.0)

    async def scroll_into_view_if_needed(self, timeout: Optional[float] = None) -> None:
        self.page.record("scroll_into_view", self.key)
        self._detach_if_flagged("scroll_into_view")

    async def _interact(self, action: str, *args: Any, force: bool = False, **kwargs: Any) -> None:
        kwargs.pop("timeout", None)
        self.page.record(action, self.key, force=force, args=args, **kwargs)
        remaining = self.page.failures.get((action, self.key), 0)
        if remaining:
            self.page.failures[(action, self.key)] = remaining - 1
            raise PlaywrightError(f"Locator.{action}: <div class=\"overlay\"> intercepts pointer events")

    async def click(self, force: bool = False, **kwargs: Any) -> None:
        await self._interact("click", force=force, **kwargs)

    async def fill(self, value: str, force: bool = False, **kwargs: Any) -> None:
        await self._interact("fill", value, force=force, **kwargs)

    async def hover(self, force: bool = False, **kwargs: Any) -> None:
        await self._interact("hover", force=force, **kwargs)

    async def press_sequentially(self, text: str, delay: Optional[float] = None, timeout: Optional[float] = None) -> None:
        self.page.record("press_sequentially", self.key, args=(text,))
        if self.page.failures.get(("press_sequentially", self.key)):
            raise PlaywrightError("Locator.press_sequentially: element is not editable")


def role_key(role: str, name: Any = None) -> str:
    return f"role={role}" if name is None else f"role={role}[name={name}]"


class FakePage:
    """Page double; `visible` decides which locator keys pass wait_for()."""

    def __init__(self, visible: Optional[Set[str]] = None):
        self.visible: Set[str] = set(visible or ())
        self.texts: Dict[str, str] = {}
        self.attributes: Dict[Tuple[str, str], str] = {}
        self.all_results: Dict[str, List[FakeLocator]] = {}
        self.failures: Dict[Tuple[str, str], int] = {}
        self.waits: List[str] = []
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []
        self.screenshots: List[Path] = []
        self.evaluated: List[str] = []
        self.on_evaluate: Optional[Callable[[str], None]] = None
        self.evaluate_error: Optional[Exception] = None
        self.screenshot_error: Optional[Exception] = None
        self.opacities: Dict[str, float] = {}
        self.url = "https://app.stage.anyteam.com/home"
        self.handlers: Dict[str, List[Callable]] = {}

    def record(self, action: str, key: str, **details: Any) -> None:
        self.events.append((action, key, details))

    def actions(self, action: str) -> List[Tuple[str, Dict[str, Any]]]:
        return [(key, details) for name, key, details in self.events if name == action]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def get_by_role(self, role: str, name: Any = None, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, role_key(role, name))

    def get_by_text(self, text: Any, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"text={text}")

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def is_closed(self) -> bool:
        return False

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        self.record("load_state", state)

    async def screenshot(self, path: str, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        Path(path).write_bytes(b"\x89PNG fake")
        self.screenshots.append(Path(path))
        return b"\x89PNG fake"

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluated.append(expression)
        if self.evaluate_error is not None:
            raise self.evaluate_error
        if self.on_evaluate is not None:
            self.on_evaluate(expression)
        return None


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Screenshots go to tmp_path; the config singleton is rebuilt per test."""
    monkeypatch.setenv("ARTIFACTS_SCREENSHOT_DIR", str(tmp_path / "screenshots"))
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
