"""Admin login and PIN rotation."""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from services.api_client import AdminApiClient
from services.session_store import Session, SessionStore
from services.snapshot_store import SnapshotStore
from utils.exceptions import AdminError, ValidationError

log = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"[0-9]{4}")


class LoginFailed(AdminError):
    """Raised when the backend rejects the admin credentials."""

    def user_message(self, fallback: str) -> str:
        return str(self) or fallback


def login(
    client: AdminApiClient,
    sessions: SessionStore,
    email: str,
    password: str,
) -> Session:
    """Exchange email/password for a token and persist the session."""

    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Email and password required", ["email", "password"])
    try:
        result: Any = client.admin_login(email, password)
    except AdminError as exc:
        log.warning("Admin login for %s failed: %s", email, exc)
        raise LoginFailed("Invalid credentials") from exc
    token: Optional[str] = None
    if isinstance(result, dict):
        raw = result.get("token")
        if isinstance(raw, str) and raw:
            token = raw
    session = sessions.save(token)
    client.set_token(session.token)
    log.info("Admin %s logged in", email)
    return session


def logout(client: AdminApiClient, sessions: SessionStore) -> None:
    sessions.clear()
    client.set_token(None)


def validate_pin(new_pin: str, confirm_pin: str) -> str:
    if not PIN_PATTERN.fullmatch(new_pin or ""):
        raise ValidationError("PIN must be 4 digits", ["pin"])
    if new_pin != confirm_pin:
        raise ValidationError("PINs do not match", ["confirm_pin"])
    return new_pin


def change_pin(
    client: AdminApiClient,
    snapshot: SnapshotStore,
    new_pin: str,
    confirm_pin: str,
) -> None:
    """Validate, send the new PIN to the backend, then store its hash locally."""

    pin = validate_pin(new_pin, confirm_pin)
    client.rotate_pin(pin)
    snapshot.set_pin(pin)
    log.info("PIN updated")


__all__ = [
    "LoginFailed",
    "PIN_PATTERN",
    "change_pin",
    "login",
    "logout",
    "validate_pin",
]
