"""Table widget that shows one page of rows at a time.

Rows are plain mappings; columns describe how a cell is produced. A column
with a ``render`` callable gets a widget cell, otherwise ``accessor`` supplies
the displayed value. The page state itself lives in
:class:`services.pagination.Paginator`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from services.pagination import DEFAULT_PAGE_SIZE, Paginator

Row = Mapping[str, Any]

LOADING_TEXT = "Loading..."
DEFAULT_EMPTY_MESSAGE = "No data found"


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    accessor: Optional[Callable[[Row], Any]] = None
    render: Optional[Callable[[Row], QWidget]] = None


class PaginatedTable(QWidget):
    """QTableWidget with Prev/Next, a page-number window and a range summary."""

    pageChanged = pyqtSignal(int)
    selectionChanged = pyqtSignal()

    def __init__(
        self,
        columns: Sequence[Column],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        empty_message: str = DEFAULT_EMPTY_MESSAGE,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.columns: List[Column] = list(columns)
        self.empty_message = empty_message
        self.paginator = Paginator(page_size)
        self._rows: List[Row] = []
        self._row_keys: List[Any] = []
        self._loading = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)

        self.table = QTableWidget(0, len(self.columns))
        self.table.setHorizontalHeaderLabels([c.header for c in self.columns])
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.itemSelectionChanged.connect(self.selectionChanged.emit)
        layout.addWidget(self.table)

        pager = QHBoxLayout()
        self.summary_label = QLabel("0 items", objectName="PageSummary")
        pager.addWidget(self.summary_label)
        pager.addStretch()
        self.prev_button = QPushButton("Prev")
        self.prev_button.clicked.connect(self.previous_page)
        pager.addWidget(self.prev_button)
        self._page_buttons_host = QWidget()
        self._page_buttons_layout = QHBoxLayout(self._page_buttons_host)
        self._page_buttons_layout.setContentsMargins(0, 0, 0, 0)
        self._page_buttons_layout.setSpacing(4)
        pager.addWidget(self._page_buttons_host)
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(self.next_page)
        pager.addWidget(self.next_button)
        layout.addLayout(pager)

        self.page_buttons: List[QPushButton] = []
        self._render()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self.paginator.page

    @property
    def loading(self) -> bool:
        return self._loading

    def set_rows(self, rows: Sequence[Row]) -> None:
        """Replace the row sequence; the current page is kept and clamped."""
        self._rows = list(rows)
        self._render()

    def set_loading(self, loading: bool) -> None:
        if loading != self._loading:
            self._loading = loading
            self._render()

    def go_to(self, page: int) -> bool:
        if not self.paginator.go_to(page):
            return False
        self._render()
        self.pageChanged.emit(self.paginator.page)
        return True

    def next_page(self) -> bool:
        return self.go_to(self.paginator.page + 1)

    def previous_page(self) -> bool:
        return self.go_to(self.paginator.page - 1)

    def visible_rows(self) -> List[Row]:
        """Rows on the current page, empty while loading."""
        if self._loading:
            return []
        return self.paginator.slice(self._rows)

    def row_key(self, index: int) -> Any:
        return self._row_keys[index]

    def selected_key(self) -> Any:
        if self._loading or not self._row_keys:
            return None
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        index = selected[0].row()
        if 0 <= index < len(self._row_keys):
            return self._row_keys[index]
        return None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self) -> None:
        self.table.clearSpans()
        self.table.setRowCount(0)
        self._row_keys = []
        page_rows = self.paginator.slice(self._rows)

        if self._loading:
            self._message_row(LOADING_TEXT)
        elif not page_rows:
            self._message_row(self.empty_message)
        else:
            offset = self.paginator.bounds()[0]
            self.table.setRowCount(len(page_rows))
            for r, row in enumerate(page_rows):
                key = row.get("id")
                self._row_keys.append(key if key is not None else offset + r)
                for c, column in enumerate(self.columns):
                    self._fill_cell(r, c, column, row)

        self._render_pager()

    def _message_row(self, text: str) -> None:
        self.table.setRowCount(1)
        item = QTableWidgetItem(text)
        item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
        item.setFlags(Qt.ItemFlag.ItemIsEnabled)
        self.table.setItem(0, 0, item)
        if len(self.columns) > 1:
            self.table.setSpan(0, 0, 1, len(self.columns))

    def _fill_cell(self, r: int, c: int, column: Column, row: Row) -> None:
        if column.render is not None:
            self.table.setCellWidget(r, c, column.render(row))
            return
        value = column.accessor(row) if column.accessor is not None else None
        self.table.setItem(r, c, QTableWidgetItem("" if value is None else str(value)))

    def _render_pager(self) -> None:
        while self._page_buttons_layout.count():
            item = self._page_buttons_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self.page_buttons = []
        current = self.paginator.page
        for number in self.paginator.window():
            button = QPushButton(str(number), objectName="PageButton")
            button.setProperty("current", number == current)
            button.clicked.connect(lambda _checked=False, n=number: self.go_to(n))
            self._page_buttons_layout.addWidget(button)
            self.page_buttons.append(button)
        self.prev_button.setEnabled(self.paginator.has_previous)
        self.next_button.setEnabled(self.paginator.has_next)
        self.summary_label.setText(self.paginator.summary())


__all__ = ["Column", "DEFAULT_EMPTY_MESSAGE", "LOADING_TEXT", "PaginatedTable"]
