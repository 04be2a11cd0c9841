import pytest

from anyteam_suites.ui_testing.flows.login_flow import (
    app_host,
    auth_domain_for,
    extract_session_tokens,
    is_app_url,
    is_login_url,
    site_domain,
)


def test_auth_domain_is_derived_from_app_host():
    assert app_host("https://app.stage.anyteam.com") == "app.stage.anyteam.com"
    assert auth_domain_for("app.stage.anyteam.com") == "auth.stage.anyteam.com"
    assert auth_domain_for("stage.app.anyteam.com") == "stage.auth.anyteam.com"
    assert site_domain("app.stage.anyteam.com") == "anyteam.com"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://app.stage.anyteam.com/home", True),
        ("https://auth.stage.anyteam.com/callback", True),
        ("https://anyteam.com/", True),
        ("https://accounts.google.com/o/oauth2/v2/auth", False),
        ("https://notanyteam.com/home", False),
        ("about:blank", False),
    ],
)
def test_is_app_url(url, expected):
    assert is_app_url(url, "app.stage.anyteam.com") is expected


def test_login_urls():
    assert is_login_url("https://app.stage.anyteam.com/onboarding/Login")
    assert is_login_url("https://app.stage.anyteam.com/login")
    assert not is_login_url("https://app.stage.anyteam.com/onboarding?jwt=x&userId=1")
    assert not is_login_url("https://app.stage.anyteam.com/home")


def test_session_tokens_need_both_params():
    url = "https://app.stage.anyteam.com/onboarding?jwt=eyJhbGciOi&userId=42"

    assert extract_session_tokens(url) == ("eyJhbGciOi", "42")
    assert extract_session_tokens("https://app.stage.anyteam.com/onboarding?jwt=eyJ") is None
    assert extract_session_tokens("https://app.stage.anyteam.com/home") is None
