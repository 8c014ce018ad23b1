"""Generic manager page: search, paginated table and create/edit/delete."""
from __future__ import annotations

import logging
from typing import List, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from models.content import ContentType, Record
from services.entity_sync import EntitySync
from ui.dashboard_core import DashboardContext
from ui.paginated_table import Column, PaginatedTable

from ...components import Card, section_title
from ..actions.entity_form import EntityFormDialog
from .base import DashboardPage
from .sections import columns_for, manager_title

log = logging.getLogger(__name__)


class EntityManagerPage(DashboardPage):
    """One content collection, kept in step with the backend by an EntitySync.

    The sync calls back from worker threads; both callbacks are re-emitted as
    signals so widgets are only touched on the GUI thread.
    """

    changed = pyqtSignal()
    notified = pyqtSignal(str, str)

    def __init__(
        self,
        context: DashboardContext,
        content_type: ContentType,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(context, parent)
        self.content_type = content_type
        self.dialog: Optional[EntityFormDialog] = None

        self.sync = EntitySync(
            context.api,
            content_type,
            notify=self.notified.emit,
            confirm=context.confirm,
            run_async=context.run_async,
            on_change=self.changed.emit,
            on_loaded=self._store_snapshot,
        )
        self.changed.connect(self._on_changed)
        self.notified.connect(context.toast)
        if context.register_cleanup is not None:
            context.register_cleanup(self.dispose)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(18)

        card = Card()
        header = QHBoxLayout()
        header.addWidget(section_title(manager_title(content_type)))
        header.addStretch()
        self.reload_button = QPushButton("Refresh")
        self.add_button = QPushButton(f"Add {content_type.singular}", objectName="Primary")
        header.addWidget(self.reload_button)
        header.addWidget(self.add_button)
        card.layout().addLayout(header)

        self.search = QLineEdit()
        self.search.setPlaceholderText("Search...")
        card.layout().addWidget(self.search)

        columns: List[Column] = columns_for(content_type)
        columns.append(Column("actions", "Actions", render=self._actions_cell))
        self.table = PaginatedTable(
            columns,
            page_size=context.settings.page_size,
            empty_message=content_type.empty_message,
        )
        card.layout().addWidget(self.table)
        layout.addWidget(card)

        self.search.textChanged.connect(lambda _text: self._populate())
        self.add_button.clicked.connect(self.open_create)
        self.reload_button.clicked.connect(self.refresh)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        self.sync.fetch_all()

    def dispose(self) -> None:
        self.sync.dispose()
        if self.dialog is not None:
            self.dialog.done(0)
            self.dialog = None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def open_create(self) -> None:
        if self.sync.open_create():
            self._show_dialog()

    def open_edit(self, entity_id: str) -> None:
        record = self.sync.find(entity_id)
        if record is not None and self.sync.open_edit(record):
            self._show_dialog()

    def delete(self, entity_id: str) -> None:
        self.sync.delete(entity_id)

    def _actions_cell(self, row: Record) -> QWidget:
        host = QWidget()
        cell = QHBoxLayout(host)
        cell.setContentsMargins(4, 0, 4, 0)
        edit_btn = QPushButton("Edit")
        delete_btn = QPushButton("Delete", objectName="Danger")
        entity_id = row["id"]
        edit_btn.clicked.connect(lambda: self.open_edit(entity_id))
        delete_btn.clicked.connect(lambda: self.delete(entity_id))
        cell.addWidget(edit_btn)
        cell.addWidget(delete_btn)
        return host

    def _show_dialog(self) -> None:
        if self.dialog is None:
            self.dialog = EntityFormDialog(self.sync, self)
            self.dialog.finished.connect(self._dialog_finished)
            self.dialog.open()

    def _dialog_finished(self, _result: int) -> None:
        self.dialog = None

    # ------------------------------------------------------------------
    # State updates (GUI thread)
    # ------------------------------------------------------------------

    def _on_changed(self) -> None:
        if not self.sync.alive:
            return
        self._populate()
        form = self.sync.form
        if self.dialog is not None:
            if form.is_open:
                self.dialog.sync_from_state()
            else:
                self.dialog.accept()

    def _populate(self) -> None:
        self.table.set_loading(self.sync.is_loading)
        self.table.set_rows(self.sync.filtered(self.search.text()))

    def _store_snapshot(self, records: List[Record]) -> None:
        try:
            self.context.snapshot.save_collection(self.content_type.key, records)
        except OSError as exc:
            log.warning("Could not write %s snapshot: %s", self.content_type.key, exc)


__all__ = ["EntityManagerPage"]
