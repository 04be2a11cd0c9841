import pytest

from anyteam_suites.ui_testing.framework.element_actions import ActionWrapper
from anyteam_suites.ui_testing.framework.exceptions import ElementNotFoundError, InteractionBlockedError
from anyteam_suites.ui_testing.framework.smart_locator import LocatorResolver


@pytest.fixture
def actions(fake_page, tmp_path):
    fake_page.visible = {"#join"}
    return ActionWrapper(fake_page, LocatorResolver(fake_page, screenshot_dir=tmp_path), timeout=500)


def _forces(page, action="click"):
    return [details["force"] for _, details in page.actions(action)]


@pytest.mark.asyncio
async def test_natural_click_needs_no_force(actions, fake_page):
    used_force = await actions.click(["#join"], element_name="join")

    assert used_force is False
    assert _forces(fake_page) == [False]


@pytest.mark.asyncio
async def test_blocked_click_is_retried_once_with_force(actions, fake_page):
    fake_page.failures[("click", "#join")] = 1

    used_force = await actions.click(["#join"], element_name="join")

    assert used_force is True
    assert _forces(fake_page) == [False, True]


@pytest.mark.asyncio
async def test_both_attempts_blocked_raises(actions, fake_page):
    fake_page.failures[("click", "#join")] = 5

    with pytest.raises(InteractionBlockedError) as exc_info:
        await actions.click(["#join"], element_name="join")

    assert _forces(fake_page) == [False, True]
    assert exc_info.value.action == "click"
    assert exc_info.value.target == "join"
    assert "intercepts pointer events" in str(exc_info.value)


@pytest.mark.asyncio
async def test_click_options_reach_both_attempts(actions, fake_page):
    fake_page.failures[("click", "#join")] = 1

    await actions.click(fake_page.locator("#join"), element_name="join", button="right")

    assert [details["button"] for _, details in fake_page.actions("click")] == ["right", "right"]


@pytest.mark.asyncio
async def test_fill_falls_back_to_force(actions, fake_page):
    fake_page.visible.add('textarea[name="about"]')
    fake_page.failures[("fill", 'textarea[name="about"]')] = 1

    used_force = await actions.fill(['textarea[name="about"]'], "AI Automation Engineer", element_name="about")

    assert used_force is True
    fills = fake_page.actions("fill")
    assert [details["args"] for _, details in fills] == [("AI Automation Engineer",)] * 2
    assert _forces(fake_page, "fill") == [False, True]


@pytest.mark.asyncio
async def test_hover_on_resolution(actions, fake_page):
    resolution = await actions.resolver.resolve(["#join"], timeout=100, element_name="join")

    assert await actions.hover(resolution) is False
    assert fake_page.actions("hover") == [("#join", {"force": False, "args": ()})]


@pytest.mark.asyncio
async def test_unresolvable_target_is_never_clicked(actions, fake_page):
    with pytest.raises(ElementNotFoundError):
        await actions.click(["#missing"], element_name="missing", resolve_timeout=100)

    assert fake_page.actions("click") == []
    assert len(fake_page.screenshots) == 1


@pytest.mark.asyncio
async def test_typing_has_no_force_variant(actions, fake_page):
    fake_page.visible.add("input#identifierId")
    fake_page.failures[("press_sequentially", "input#identifierId")] = 1

    with pytest.raises(InteractionBlockedError):
        await actions.press_sequentially(["input#identifierId"], "secret", element_name="password", secret=True)

    assert len(fake_page.actions("press_sequentially")) == 1
