"""
Explicit authenticated-session object.

The login flow produces an AuthSession once per run; fixtures pass it into each
test's setup, which replays its storage state into a fresh browser context.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger


@dataclass
class AuthSession:
    """
    Authentication state of one logged-in user.

    Attributes:
        base_url: App origin the session belongs to
        storage_state_path: Playwright storage state (cookies + localStorage)
        email: Account the session was created for
        user_id: `userId` handed back by the onboarding redirect
        jwt: `jwt` handed back by the onboarding redirect
        created_at: Creation time, used for freshness checks
    """
    base_url: str
    storage_state_path: Path
    email: str
    user_id: Optional[str] = None
    jwt: Optional[str] = field(default=None, repr=False)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def metadata_path(self) -> Path:
        return self.storage_state_path.with_suffix(".meta.json")

    def exists(self) -> bool:
        return self.storage_state_path.exists()

    def is_fresh(self, max_age: timedelta = timedelta(hours=8)) -> bool:
        """True if the storage state exists and is younger than max_age."""
        return self.exists() and datetime.now() - self.created_at < max_age

    def context_options(self) -> Dict[str, Any]:
        """Keyword arguments for Browser.new_context()."""
        return {
            "storage_state": str(self.storage_state_path),
            "base_url": self.base_url,
        }

    def save_metadata(self) -> None:
        data = asdict(self)
        data["storage_state_path"] = str(self.storage_state_path)
        data["created_at"] = self.created_at.isoformat()
        data.pop("jwt", None)
        self.metadata_path.parent.mkdir(parents=True, exist_ok=True)
        self.metadata_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, storage_state_path: Path) -> Optional["AuthSession"]:
        """Rebuild a session saved by an earlier run, None if unusable."""
        storage_state_path = Path(storage_state_path)
        meta_path = storage_state_path.with_suffix(".meta.json")
        if not storage_state_path.exists() or not meta_path.exists():
            return None
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
            return cls(
                base_url=data["base_url"],
                storage_state_path=storage_state_path,
                email=data["email"],
                user_id=data.get("user_id"),
                created_at=datetime.fromisoformat(data["created_at"]),
            )
        except (ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable session metadata {meta_path}: {e}")
            return None

    def clear(self) -> None:
        """Delete persisted state so the next run logs in again."""
        for path in (self.storage_state_path, self.metadata_path):
            if path.exists():
                path.unlink()
        logger.info(f"Cleared auth session for {self.email}")


__all__ = ["AuthSession"]
