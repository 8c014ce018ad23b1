"""Create/edit dialog shared by every content manager page."""
from __future__ import annotations

from typing import Dict, List, Optional

from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from models.content import FieldSpec
from services.entity_sync import EntitySync, FormPhase

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp)"
CREDENTIAL_COLUMNS = ("role", "email", "password")


class EntityFormDialog(QDialog):
    """Form bound to the form state of an :class:`EntitySync`.

    The dialog never closes itself after Save; the owning page closes it
    once the sync reports the form as closed.
    """

    def __init__(self, sync: EntitySync, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.sync = sync
        ct = sync.content_type
        form = sync.form
        verb = "Edit" if form.is_edit else "Add"
        self.setWindowTitle(f"{verb} {ct.singular}")
        self.setMinimumWidth(520)

        layout = QVBoxLayout(self)
        self.inputs: Dict[str, QWidget] = {}
        for spec in ct.fields:
            layout.addWidget(QLabel(f"{spec.label} *" if spec.required else spec.label))
            widget = self._build_input(spec, str(form.values.get(spec.name, spec.default)))
            self.inputs[spec.name] = widget
            layout.addWidget(widget)

        layout.addWidget(QLabel("Image"))
        image_row = QHBoxLayout()
        self.image_input = QLineEdit(form.image_path or "")
        self.image_input.setReadOnly(True)
        self.image_input.setPlaceholderText("No file chosen")
        self.browse_button = QPushButton("Browse...")
        self.browse_button.clicked.connect(self._choose_image)
        image_row.addWidget(self.image_input)
        image_row.addWidget(self.browse_button)
        layout.addLayout(image_row)

        self.credentials_table: Optional[QTableWidget] = None
        if ct.supports_credentials:
            cred_header = QHBoxLayout()
            cred_header.addWidget(QLabel("Credentials (Optional)"))
            cred_header.addStretch()
            self.add_credential_button = QPushButton("Add")
            self.remove_credential_button = QPushButton("Remove")
            cred_header.addWidget(self.add_credential_button)
            cred_header.addWidget(self.remove_credential_button)
            layout.addLayout(cred_header)

            table = QTableWidget(0, len(CREDENTIAL_COLUMNS))
            table.setHorizontalHeaderLabels(["Role", "Email", "Password"])
            table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
            table.verticalHeader().setVisible(False)
            self.credentials_table = table
            for cred in form.credentials:
                self.add_credential(cred)
            layout.addWidget(table)
            self.add_credential_button.clicked.connect(lambda: self.add_credential())
            self.remove_credential_button.clicked.connect(self.remove_selected_credential)

        btn_layout = QHBoxLayout()
        self.cancel_button = QPushButton("Cancel")
        self.save_button = QPushButton("Update" if form.is_edit else "Create", objectName="Primary")
        btn_layout.addStretch()
        btn_layout.addWidget(self.cancel_button)
        btn_layout.addWidget(self.save_button)
        layout.addLayout(btn_layout)

        self.save_button.clicked.connect(self.handle_save)
        self.cancel_button.clicked.connect(self.reject)
        self.sync_from_state()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def _build_input(self, spec: FieldSpec, value: str) -> QWidget:
        if spec.choices:
            combo = QComboBox()
            for key, label in spec.choices:
                combo.addItem(label, userData=key)
            index = combo.findData(value or spec.default)
            combo.setCurrentIndex(max(index, 0))
            return combo
        if spec.multiline:
            edit = QTextEdit()
            edit.setPlainText(value)
            edit.setFixedHeight(90)
            return edit
        line = QLineEdit(value)
        line.setPlaceholderText(f"{spec.label} *" if spec.required else spec.label)
        return line

    def values(self) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for name, widget in self.inputs.items():
            if isinstance(widget, QComboBox):
                result[name] = widget.currentData() or ""
            elif isinstance(widget, QTextEdit):
                result[name] = widget.toPlainText()
            else:
                result[name] = widget.text()
        return result

    def set_value(self, name: str, value: str) -> None:
        widget = self.inputs[name]
        if isinstance(widget, QComboBox):
            widget.setCurrentIndex(max(widget.findData(value), 0))
        elif isinstance(widget, QTextEdit):
            widget.setPlainText(value)
        else:
            widget.setText(value)

    def add_credential(self, cred: Optional[Dict[str, str]] = None) -> None:
        table = self.credentials_table
        if table is None:
            return
        row = table.rowCount()
        table.insertRow(row)
        for col, key in enumerate(CREDENTIAL_COLUMNS):
            table.setItem(row, col, QTableWidgetItem((cred or {}).get(key, "")))

    def remove_selected_credential(self) -> None:
        table = self.credentials_table
        if table is None:
            return
        row = table.currentRow()
        if row >= 0:
            table.removeRow(row)

    def credentials(self) -> List[Dict[str, str]]:
        table = self.credentials_table
        if table is None:
            return []
        entries = []
        for row in range(table.rowCount()):
            entry = {}
            for col, key in enumerate(CREDENTIAL_COLUMNS):
                item = table.item(row, col)
                entry[key] = item.text().strip() if item is not None else ""
            entries.append(entry)
        return entries

    def _choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose Image", "", IMAGE_FILTER)
        if path:
            self.image_input.setText(path)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def handle_save(self) -> None:
        self.sync.edit_form(
            self.values(),
            credentials=self.credentials(),
            image_path=self.image_input.text(),
        )
        self.sync.submit_form()
        self.sync_from_state()

    def sync_from_state(self) -> None:
        """Reflect the sync's form phase in the buttons."""
        busy = self.sync.form.phase is FormPhase.SUBMITTING
        self.save_button.setEnabled(not busy)
        self.cancel_button.setEnabled(not busy)
        self.save_button.setText(
            "Saving..." if busy else ("Update" if self.sync.form.is_edit else "Create")
        )

    def reject(self) -> None:  # type: ignore[override]
        if self.sync.form.is_open and not self.sync.close_form():
            return
        super().reject()


__all__ = ["EntityFormDialog", "IMAGE_FILTER"]
