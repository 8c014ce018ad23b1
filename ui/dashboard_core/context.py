"""Shared context handed to every admin page."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from services.api_client import AdminApiClient
from services.snapshot_store import SnapshotStore
from utils.settings import AdminSettings

Worker = Callable[[Callable[[], Any]], Any]
ToastFn = Callable[[str, str], None]
ConfirmFn = Callable[[str], bool]
CleanupFn = Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class DashboardContext:
    """Lightweight dependency bundle for dashboard pages/actions."""

    api: AdminApiClient
    snapshot: SnapshotStore
    settings: AdminSettings
    run_async: Worker
    show_toast: Optional[ToastFn] = None
    confirm: Optional[ConfirmFn] = None
    register_cleanup: Optional[CleanupFn] = None

    def toast(self, kind: str, message: str) -> None:
        if self.show_toast is not None:
            self.show_toast(kind, message)


__all__ = ["DashboardContext", "Worker", "ToastFn", "ConfirmFn", "CleanupFn"]
