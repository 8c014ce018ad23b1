import logging
import sys

from PyQt6.QtWidgets import QApplication

from services.api_client import AdminApiClient
from services.session_store import SESSION_FILE_NAME, SessionStore
from services.snapshot_store import SNAPSHOT_FILE_NAME, SnapshotStore
from ui.login_window import LoginWindow
from ui.theme import LIGHT_QSS
from utils.settings import load_settings

log = logging.getLogger(__name__)


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setStyleSheet(LIGHT_QSS)

    api = AdminApiClient(settings.api_url, timeout=settings.timeout)
    app.aboutToQuit.connect(api.close)
    sessions = SessionStore(settings.data_dir / SESSION_FILE_NAME, settings.session_minutes)
    snapshot = SnapshotStore(settings.data_dir / SNAPSHOT_FILE_NAME)

    login = LoginWindow(api, sessions, snapshot, settings)
    session = sessions.active()
    if session is not None:
        log.info("Resuming saved admin session")
        login.accept_login(session)
    else:
        login.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
