"""Persist the admin session token between launches (JSON)."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from utils.path_utils import get_data_dir, write_json_atomic

log = logging.getLogger(__name__)

SESSION_FILE_NAME = "session.json"
FALLBACK_TOKEN = "authenticated"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    token: str
    issued_at: datetime

    def expires_at(self, duration: timedelta) -> datetime:
        return self.issued_at + duration

    def remaining(self, duration: timedelta, now: Optional[datetime] = None) -> timedelta:
        now = now or _utcnow()
        return max(timedelta(0), self.expires_at(duration) - now)

    def is_expired(self, duration: timedelta, now: Optional[datetime] = None) -> bool:
        return self.remaining(duration, now) <= timedelta(0)


class SessionStore:
    """Read and write ``session.json`` in the data directory."""

    def __init__(self, path: Optional[Path] = None, minutes: int = 30) -> None:
        self.path = path or get_data_dir() / SESSION_FILE_NAME
        self.duration = timedelta(minutes=minutes)

    def load(self) -> Optional[Session]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            token = str(data["token"])
            issued_at = datetime.fromisoformat(data["issued_at"])
        except (OSError, ValueError, KeyError, TypeError) as exc:
            log.warning("Discarding unreadable session file %s: %s", self.path, exc)
            return None
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        if not token:
            return None
        return Session(token=token, issued_at=issued_at)

    def save(self, token: Optional[str], now: Optional[datetime] = None) -> Session:
        session = Session(token=token or FALLBACK_TOKEN, issued_at=now or _utcnow())
        write_json_atomic(
            self.path,
            {"token": session.token, "issued_at": session.issued_at.isoformat()},
        )
        return session

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def active(self, now: Optional[datetime] = None) -> Optional[Session]:
        """Return the stored session unless it has expired (expired ones are cleared)."""
        session = self.load()
        if session is None:
            return None
        if session.is_expired(self.duration, now):
            log.info("Stored session expired at %s", session.expires_at(self.duration))
            self.clear()
            return None
        return session


__all__ = ["FALLBACK_TOKEN", "SESSION_FILE_NAME", "Session", "SessionStore"]
