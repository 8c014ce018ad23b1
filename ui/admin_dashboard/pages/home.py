"""Admin home page: one count card per content collection."""
from __future__ import annotations

from PyQt6.QtWidgets import QVBoxLayout

from models.content import CONTENT_TYPES
from ui.dashboard_core import DashboardContext

from ...components import Card, build_metric_row, section_title
from .base import DashboardPage


class AdminHomePage(DashboardPage):
    """Landing view showing how many records each collection holds."""

    def __init__(self, context: DashboardContext, parent=None):
        super().__init__(context, parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(18)

        self.metrics_card = Card()
        self.metrics_card.layout().addWidget(section_title("Dashboard"))
        self.counts: dict[str, int] = {key: 0 for key in CONTENT_TYPES}
        self.metrics_row = build_metric_row(self._pairs())
        self.metrics_card.layout().addWidget(self.metrics_row)
        self.metrics_card.layout().addStretch()
        layout.addWidget(self.metrics_card)
        layout.addStretch()

        self.refresh()

    def _pairs(self) -> list[tuple[str, int]]:
        return [(ct.label, self.counts.get(key, 0)) for key, ct in CONTENT_TYPES.items()]

    def refresh(self) -> None:
        """Re-read counts from the local snapshot."""
        self.counts = self.context.snapshot.counts()
        self.metrics_card.layout().removeWidget(self.metrics_row)
        self.metrics_row.setParent(None)
        self.metrics_row = build_metric_row(self._pairs())
        self.metrics_card.layout().insertWidget(1, self.metrics_row)


__all__ = ["AdminHomePage"]
