import pytest

from run_tests import CI_RERUNS, SUITE_PATHS, TestRunner, parse_args


def test_reruns_default_to_ci_setting(monkeypatch):
    monkeypatch.setenv("CI", "true")
    assert TestRunner(suite="unit").reruns == CI_RERUNS

    monkeypatch.delenv("CI")
    assert TestRunner(suite="unit").reruns == 0


def test_explicit_reruns_win_over_ci(monkeypatch):
    monkeypatch.setenv("CI", "true")

    command = TestRunner(suite="unit", reruns=0, with_allure=False).pytest_command()

    assert "--reruns" not in command


def test_reruns_are_passed_to_pytest(monkeypatch):
    monkeypatch.delenv("CI", raising=False)

    command = TestRunner(suite="ui", reruns=3, with_allure=False).pytest_command()

    assert command[command.index("--reruns") + 1] == "3"
    assert command[3] == SUITE_PATHS["ui"]
    assert "--run-e2e" in command


def test_unit_suite_command_has_no_live_flags(monkeypatch):
    monkeypatch.delenv("CI", raising=False)

    command = TestRunner(suite="unit", tags=["P0", "unit"], workers=4, with_allure=False).pytest_command()

    assert command[command.index("-m") + 1] == "P0 or unit"
    assert command[command.index("-n") + 1] == "4"
    assert "--run-e2e" not in command
    assert "--reruns" not in command


@pytest.mark.parametrize(
    "argv, expected",
    [
        ([], None),
        (["--reruns", "1"], 1),
    ],
)
def test_cli_reruns_option(argv, expected):
    assert parse_args(argv).reruns == expected
