"""Shared dashboard infrastructure used by the admin window."""
from __future__ import annotations

from .context import CleanupFn, ConfirmFn, DashboardContext, ToastFn, Worker
from .navigation import NavigationController, PageFactory, PageRegistry, Section

__all__ = [
    "CleanupFn",
    "ConfirmFn",
    "DashboardContext",
    "NavigationController",
    "PageFactory",
    "PageRegistry",
    "Section",
    "ToastFn",
    "Worker",
]
