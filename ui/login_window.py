import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QApplication,
    QWidget,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QMessageBox,
)

from services import auth_service
from services.api_client import AdminApiClient
from services.session_store import Session, SessionStore
from services.snapshot_store import SnapshotStore
from ui.admin_dashboard import AdminMainWindow
from utils.exceptions import AdminError
from utils.settings import AdminSettings

log = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Login successful"


class LoginWindow(QWidget):
    """Email/password form that opens the admin window on success.

    The window stays alive for the whole application run: it hides while the
    admin window is open and comes back when that window logs out.
    """

    loginFinished = pyqtSignal(object, str)

    def __init__(
        self,
        api: AdminApiClient,
        sessions: SessionStore,
        snapshot: SnapshotStore,
        settings: AdminSettings,
        run_async: Optional[Callable[[Callable[[], Any]], Any]] = None,
    ):
        super().__init__()
        self.setWindowTitle("Admin Login")
        self.api = api
        self.sessions = sessions
        self.snapshot = snapshot
        self.settings = settings
        self._executor: Optional[ThreadPoolExecutor] = None
        if run_async is None:
            self._executor = ThreadPoolExecutor(max_workers=1)
            run_async = self._executor.submit
        self._run_async = run_async

        title = QLabel("Admin Login")
        title.setObjectName("Title")
        title.setAlignment(Qt.AlignmentFlag.AlignHCenter)

        self.notice_label = QLabel("")
        self.notice_label.setAlignment(Qt.AlignmentFlag.AlignHCenter)

        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("Email")

        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("Password")
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.email_input.setFocus()

        self.login_button = QPushButton("Login", objectName="Primary")
        self.login_button.setDefault(True)
        self.login_button.clicked.connect(self.handle_login)

        layout = QVBoxLayout()
        layout.addWidget(title)
        layout.addWidget(self.notice_label)
        layout.addWidget(QLabel("Email:"))
        layout.addWidget(self.email_input)
        layout.addWidget(QLabel("Password:"))
        layout.addWidget(self.password_input)
        layout.addWidget(self.login_button)
        self.setLayout(layout)

        self.email_input.returnPressed.connect(self.handle_login)
        self.password_input.returnPressed.connect(self.handle_login)
        self.loginFinished.connect(self._on_login_finished)

        self.dashboard: Optional[AdminMainWindow] = None
        self._pending = False

    def showEvent(self, event):
        super().showEvent(event)
        QTimer.singleShot(0, self._center_on_screen)

    def handle_login(self):
        if self._pending:
            return
        email = self.email_input.text()
        password = self.password_input.text()
        self._pending = True
        self.login_button.setEnabled(False)
        self._run_async(lambda: self._attempt(email, password))

    def _attempt(self, email: str, password: str) -> None:
        try:
            session = auth_service.login(self.api, self.sessions, email, password)
        except AdminError as exc:
            self.loginFinished.emit(None, str(exc) or "Invalid credentials")
            return
        except OSError as exc:
            log.warning("Could not store session: %s", exc)
            self.loginFinished.emit(None, "Could not save session")
            return
        self.loginFinished.emit(session, LOGIN_SUCCESS_MESSAGE)

    def _on_login_finished(self, session: Optional[Session], message: str) -> None:
        self._pending = False
        self.login_button.setEnabled(True)
        if session is None:
            QMessageBox.warning(self, "Login Failed", message)
            return
        self.email_input.clear()
        self.password_input.clear()
        self.accept_login(session, message)

    def accept_login(self, session: Session, message: Optional[str] = None) -> AdminMainWindow:
        """Open the admin window for ``session`` and hide the login form."""
        self.api.set_token(session.token)
        self.dashboard = AdminMainWindow(
            self.api, self.sessions, self.snapshot, self.settings, session
        )
        self.dashboard.loggedOut.connect(self.dashboard_closed)
        self.dashboard.show()
        self.dashboard.raise_()
        self.dashboard.activateWindow()
        if message:
            self.dashboard.context.toast("success", message)
        self.notice_label.clear()
        self.hide()
        return self.dashboard

    def dashboard_closed(self, message: str):
        """Bring the login form back after a logout or an expired session."""
        self.dashboard = None
        self.notice_label.setText(message)
        self.show()
        self.raise_()
        self.activateWindow()

    def closeEvent(self, event):
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        event.accept()

    def _center_on_screen(self) -> None:
        """Center the login window on the active screen."""
        screen = self.screen() or QApplication.primaryScreen()
        if screen is None:
            return
        frame = self.frameGeometry()
        frame.moveCenter(screen.availableGeometry().center())
        self.move(frame.topLeft())
