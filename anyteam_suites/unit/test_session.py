import json
from datetime import datetime, timedelta

from anyteam_suites.ui_testing.framework.session import AuthSession


def _session(tmp_path, **kwargs):
    state = tmp_path / "auth.json"
    state.write_text(json.dumps({"cookies": [], "origins": []}), encoding="utf-8")
    return AuthSession(
        base_url="https://app.stage.anyteam.com",
        storage_state_path=state,
        email="qa@anyteam.com",
        **kwargs,
    )


def test_metadata_round_trip_drops_jwt(tmp_path):
    session = _session(tmp_path, user_id="42", jwt="eyJhbGciOi")
    session.save_metadata()

    assert "eyJhbGciOi" not in session.metadata_path.read_text(encoding="utf-8")

    loaded = AuthSession.load(session.storage_state_path)
    assert loaded.email == "qa@anyteam.com"
    assert loaded.user_id == "42"
    assert loaded.jwt is None
    assert loaded.context_options() == {
        "storage_state": str(session.storage_state_path),
        "base_url": "https://app.stage.anyteam.com",
    }


def test_freshness(tmp_path):
    assert _session(tmp_path).is_fresh()
    assert not _session(tmp_path, created_at=datetime.now() - timedelta(hours=9)).is_fresh()


def test_load_ignores_missing_or_broken_metadata(tmp_path):
    session = _session(tmp_path)

    assert AuthSession.load(session.storage_state_path) is None

    session.metadata_path.write_text("{not json", encoding="utf-8")
    assert AuthSession.load(session.storage_state_path) is None


def test_clear_removes_state(tmp_path):
    session = _session(tmp_path)
    session.save_metadata()

    session.clear()

    assert not session.exists()
    assert not session.metadata_path.exists()
    assert AuthSession.load(session.storage_state_path) is None
