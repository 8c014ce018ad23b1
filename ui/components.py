"""Reusable UI components for consistent styling."""

from typing import Any, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QToolButton,
    QFrame,
    QVBoxLayout,
    QLabel,
    QSizePolicy,
    QWidget,
    QGridLayout,
)


class NavButton(QToolButton):
    """Navigation button used in sidebars."""

    def __init__(self, text: str, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("NavButton")
        self.setText(text)
        self.setCheckable(True)
        self.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextOnly)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)


class Card(QFrame):
    """Framed container with standard padding and layout."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("Card")
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Minimum)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(10)


def section_title(text: str) -> QLabel:
    """Create a standardized section header label."""

    label = QLabel(text)
    label.setObjectName("SectionTitle")
    return label


def metric_widget(title: str, value: str, *, tooltip: Optional[str] = None) -> QWidget:
    """Return a small label/value pair used on the dashboard."""

    container = QWidget()
    layout = QVBoxLayout(container)
    layout.setContentsMargins(0, 0, 0, 0)
    layout.setSpacing(4)
    container.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)

    title_label = QLabel(title.upper())
    title_label.setObjectName("MetricLabel")

    value_label = QLabel(value)
    value_label.setObjectName("MetricValue")
    value_label.setWordWrap(True)
    if tooltip:
        value_label.setToolTip(tooltip)

    layout.addWidget(title_label)
    layout.addWidget(value_label)
    layout.addStretch()
    return container


def build_metric_row(
    pairs: list[tuple[str, Any]],
    *,
    columns: int = 3,
) -> QWidget:
    wrapper = QWidget()
    grid = QGridLayout(wrapper)
    grid.setContentsMargins(0, 0, 0, 0)
    grid.setSpacing(18)
    for idx, (title, value) in enumerate(pairs):
        text = "--" if value is None else str(value)
        grid.addWidget(metric_widget(title, text), idx // columns, idx % columns)
    for col in range(columns):
        grid.setColumnStretch(col, 1)
    return wrapper


__all__ = ["Card", "NavButton", "build_metric_row", "metric_widget", "section_title"]
