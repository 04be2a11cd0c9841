from datetime import date

import pytest
import yaml

from anyteam_suites.common.config_loader import ConfigLoader, ConfigurationError
from anyteam_suites.common.suite_data import Credentials, MeetingDetails, TestData


@pytest.fixture
def loader(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({
            "app": {"base_url": "https://app.stage.anyteam.com/"},
            "meeting": {"title": "Team Standup Meeting", "start_time": "2:00pm", "end_time": "3:00pm"},
            "timeouts": {"long": 12000},
        }),
        encoding="utf-8",
    )
    ConfigLoader.reset()
    return ConfigLoader(config_path=config_path)


def test_from_config_reads_yaml_and_env(loader, monkeypatch):
    monkeypatch.setenv("TEST_EMAIL", "qa@anyteam.com")
    monkeypatch.setenv("TEST_PASSWORD", "s3cret")
    monkeypatch.setenv("MEETING_TITLE", "Weekly Sync")

    data = TestData.from_config(loader)

    assert data.urls.base == "https://app.stage.anyteam.com"
    assert data.urls.login == "https://app.stage.anyteam.com/onboarding/Login"
    assert data.urls.home == "https://app.stage.anyteam.com/home"
    assert data.credentials.email == "qa@anyteam.com"
    assert data.credentials.require_password() == "s3cret"
    assert data.meeting.title == "Weekly Sync"
    assert data.timeouts.long == 12000
    assert data.timeouts.short == 2000


def test_password_is_never_shown():
    credentials = Credentials(email="qa@anyteam.com", password="s3cret")

    assert "s3cret" not in repr(credentials)


def test_missing_password_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        Credentials(email="qa@anyteam.com").require_password()


def test_meeting_labels():
    meeting = MeetingDetails(
        title="Team Standup Meeting",
        guest_email="guest@example.com",
        start_time="2:00pm",
        end_time="3:00pm",
        day=date(2026, 3, 5),
    )

    assert meeting.date_label == "Mar 5, 2026"
    assert meeting.time_slot == "2:00pm - 3:00pm"
