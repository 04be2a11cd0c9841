"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the Anyteam app and the Google pages
it hands off to.

Each page class encapsulates:
    - A LOCATORS table of ordered fallback chains
    - Page-specific actions
    - Verification methods (bool / Optional for optional UI)

================================================================================
"""

from .calendar_page import AnyteamCalendarPage
from .google_calendar_page import GoogleCalendarPage
from .google_oauth_page import GoogleOAuthPage
from .home_page import HomePage
from .linkedin_page import LinkedInPage
from .live_meeting_page import LiveMeetingPage
from .login_page import LoginPage
from .meeting_guidance_page import MeetingGuidancePage
from .meeting_insights_page import MeetingInsightsPage
from .meeting_page import MeetingPage
from .notifications_page import NotificationsPage
from .profile_info_page import ProfileInfoPage
from .settings_page import SettingsPage

__all__ = [
    "AnyteamCalendarPage",
    "GoogleCalendarPage",
    "GoogleOAuthPage",
    "HomePage",
    "LinkedInPage",
    "LiveMeetingPage",
    "LoginPage",
    "MeetingGuidancePage",
    "MeetingInsightsPage",
    "MeetingPage",
    "NotificationsPage",
    "ProfileInfoPage",
    "SettingsPage",
]
