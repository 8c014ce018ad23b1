"""Base class for admin dashboard pages."""
from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QWidget

from ui.dashboard_core import DashboardContext


class DashboardPage(QWidget):
    """QWidget bound to the shared context with refresh/dispose hooks."""

    def __init__(self, context: DashboardContext, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._context = context

    @property
    def context(self) -> DashboardContext:
        return self._context

    def refresh(self) -> None:
        """Called by the main window whenever the page becomes current."""

    def dispose(self) -> None:
        """Called once when the window closes or the admin logs out."""


__all__ = ["DashboardPage"]
