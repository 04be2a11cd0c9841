"""Multi-page user flows built on the page objects."""

from .login_flow import LoginFlow, establish_session

__all__ = [
    "LoginFlow",
    "establish_session",
]
