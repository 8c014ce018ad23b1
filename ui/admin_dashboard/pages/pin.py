"""PIN settings page."""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from services import auth_service
from ui.dashboard_core import DashboardContext
from utils.exceptions import AdminError, ValidationError, user_message

from ...components import Card, section_title
from .base import DashboardPage

log = logging.getLogger(__name__)

PIN_UPDATED_MESSAGE = "PIN updated successfully"
PIN_FAILED_MESSAGE = "Error updating PIN"


class PinSettingsPage(DashboardPage):
    """Rotate the four-digit PIN on the backend and remember its hash locally."""

    rotated = pyqtSignal(str, str)

    def __init__(self, context: DashboardContext, parent: Optional[QWidget] = None) -> None:
        super().__init__(context, parent)
        self._busy = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(18)

        card = Card()
        card.layout().addWidget(section_title("PIN Settings"))
        self.current_label = QLabel()
        card.layout().addWidget(self.current_label)

        card.layout().addWidget(QLabel("New PIN (4 digits)"))
        self.new_pin = QLineEdit()
        self.new_pin.setMaxLength(4)
        self.new_pin.setEchoMode(QLineEdit.EchoMode.Password)
        card.layout().addWidget(self.new_pin)

        card.layout().addWidget(QLabel("Confirm PIN"))
        self.confirm_pin = QLineEdit()
        self.confirm_pin.setMaxLength(4)
        self.confirm_pin.setEchoMode(QLineEdit.EchoMode.Password)
        card.layout().addWidget(self.confirm_pin)

        self.save_button = QPushButton("Update PIN", objectName="Primary")
        self.save_button.clicked.connect(self.handle_save)
        self.confirm_pin.returnPressed.connect(self.handle_save)
        card.layout().addWidget(self.save_button)
        card.layout().addStretch()
        layout.addWidget(card)
        layout.addStretch()

        self.rotated.connect(self._on_finished)
        self.refresh()

    def refresh(self) -> None:
        status = "Set" if self.context.snapshot.has_pin() else "****"
        self.current_label.setText(f"Current PIN: {status}")

    def handle_save(self) -> None:
        if self._busy:
            return
        new_pin = self.new_pin.text()
        confirm_pin = self.confirm_pin.text()
        try:
            auth_service.validate_pin(new_pin, confirm_pin)
        except ValidationError as exc:
            self.context.toast("error", str(exc))
            return
        self._busy = True
        self.save_button.setEnabled(False)
        self.context.run_async(lambda: self._rotate(new_pin, confirm_pin))

    def _rotate(self, new_pin: str, confirm_pin: str) -> None:
        try:
            auth_service.change_pin(
                self.context.api, self.context.snapshot, new_pin, confirm_pin
            )
        except AdminError as exc:
            log.warning("PIN update failed: %s", exc)
            self.rotated.emit("error", user_message(exc, PIN_FAILED_MESSAGE))
            return
        except OSError as exc:
            log.warning("PIN rotated but hash not stored: %s", exc)
            self.rotated.emit("error", PIN_FAILED_MESSAGE)
            return
        self.rotated.emit("success", PIN_UPDATED_MESSAGE)

    def _on_finished(self, kind: str, message: str) -> None:
        self._busy = False
        self.save_button.setEnabled(True)
        if kind == "success":
            self.new_pin.clear()
            self.confirm_pin.clear()
            self.refresh()
        self.context.toast(kind, message)


__all__ = ["PIN_FAILED_MESSAGE", "PIN_UPDATED_MESSAGE", "PinSettingsPage"]
