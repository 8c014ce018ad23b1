"""Shared exception types for the admin panel.

Every failure the panel can recover from derives from :class:`AdminError` so
pages can catch one type at their boundary and turn it into a toast.
"""
from __future__ import annotations

from typing import Iterable, Optional


class AdminError(Exception):
    """Base class for recoverable admin panel failures."""

    def user_message(self, fallback: str) -> str:
        """Return the text shown to the user for this error."""
        return fallback


class ValidationError(AdminError):
    """Raised before any network call when form input is unusable."""

    def __init__(self, message: str, fields: Iterable[str] | None = None):
        self.fields = list(fields or [])
        super().__init__(message)

    def user_message(self, fallback: str) -> str:
        return str(self) or fallback


class TransportError(AdminError):
    """Network failure, timeout, or a non-2xx reply with no usable message."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ServerError(AdminError):
    """Non-2xx reply carrying a structured ``message`` from the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    def user_message(self, fallback: str) -> str:
        return str(self) or fallback


class MalformedResponseError(ServerError):
    """A successful reply whose body is not a list or a known envelope."""

    def user_message(self, fallback: str) -> str:
        # Shape problems are not meaningful to the user.
        return fallback


def user_message(exc: BaseException, fallback: str) -> str:
    """Return the notification text for ``exc``."""
    if isinstance(exc, AdminError):
        return exc.user_message(fallback)
    return fallback


__all__ = [
    "AdminError",
    "MalformedResponseError",
    "ServerError",
    "TransportError",
    "ValidationError",
    "user_message",
]
