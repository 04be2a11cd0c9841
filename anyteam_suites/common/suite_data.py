"""
================================================================================
Test Data
================================================================================

Typed view over the `credentials`, `profile`, `meeting`, `timeouts` and `app`
configuration sections. Every field can be overridden from the environment
using the historical variable names (TEST_EMAIL, MEETING_TITLE, ...).

The password is never included in repr() or logs.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from anyteam_suites.common.config_loader import ConfigLoader, ConfigurationError


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(default="", repr=False)
    name: str = ""

    def require_password(self) -> str:
        if not self.password:
            raise ConfigurationError("TEST_PASSWORD is not set; live login is impossible")
        return self.password


@dataclass(frozen=True)
class ProfileData:
    about: str
    linkedin_url: str


@dataclass(frozen=True)
class MeetingDetails:
    title: str
    guest_email: str
    start_time: str
    end_time: str
    day: Optional[date] = None

    @property
    def date_label(self) -> str:
        """Google Calendar style label, e.g. 'Mar 5, 2026'."""
        day = self.day or (date.today() + timedelta(days=1))
        return f"{day.strftime('%b')} {day.day}, {day.year}"

    @property
    def time_slot(self) -> str:
        """Label shown on Anyteam calendar items: '2:00pm - 3:00pm'."""
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class Timeouts:
    short: int = 2000
    medium: int = 5000
    long: int = 10000
    very_long: int = 30000


@dataclass(frozen=True)
class AppUrls:
    base: str
    login_path: str = "/onboarding/Login"
    onboarding_path: str = "/onboarding"
    home_path: str = "/home"

    @property
    def login(self) -> str:
        return f"{self.base}{self.login_path}"

    @property
    def home(self) -> str:
        return f"{self.base}{self.home_path}"


@dataclass(frozen=True)
class TestData:
    credentials: Credentials
    profile: ProfileData
    meeting: MeetingDetails
    timeouts: Timeouts
    urls: AppUrls

    __test__ = False  # not a pytest test class

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "TestData":
        config = config or ConfigLoader()
        return cls(
            credentials=Credentials(
                email=config.get("credentials.email", "", env="TEST_EMAIL"),
                password=config.get("credentials.password", "", env="TEST_PASSWORD") or "",
                name=config.get("credentials.name", "", env="TEST_NAME"),
            ),
            profile=ProfileData(
                about=config.get("profile.about", "AI Automation Engineer", env="ABOUT_YOURSELF"),
                linkedin_url=config.get("profile.linkedin_url", "", env="LINKEDIN_URL"),
            ),
            meeting=MeetingDetails(
                title=config.get("meeting.title", "Team Standup Meeting", env="MEETING_TITLE"),
                guest_email=config.get("meeting.guest_email", "", env="MEETING_GUEST_EMAIL"),
                start_time=str(config.get("meeting.start_time", "2:00pm", env="MEETING_START_TIME")),
                end_time=str(config.get("meeting.end_time", "3:00pm", env="MEETING_END_TIME")),
            ),
            timeouts=Timeouts(
                short=config.get("timeouts.short", 2000),
                medium=config.get("timeouts.medium", 5000),
                long=config.get("timeouts.long", 10000),
                very_long=config.get("timeouts.very_long", 30000),
            ),
            urls=AppUrls(
                base=config.get("app.base_url", "https://app.stage.anyteam.com", env="BASE_URL").rstrip("/"),
                login_path=config.get("app.login_path", "/onboarding/Login"),
                onboarding_path=config.get("app.onboarding_path", "/onboarding"),
                home_path=config.get("app.home_path", "/home"),
            ),
        )


__all__ = [
    "AppUrls",
    "Credentials",
    "MeetingDetails",
    "ProfileData",
    "TestData",
    "Timeouts",
]
