"""Admin dashboard main window."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QTimer, pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from models.content import CONTENT_TYPES, ContentType
from services import auth_service
from services.api_client import AdminApiClient
from services.session_store import Session, SessionStore
from services.snapshot_store import SnapshotStore
from ui.dashboard_core import DashboardContext, NavigationController, PageRegistry
from utils.settings import AdminSettings

from ..components import NavButton
from ..theme import _toggle_theme
from .pages import AdminHomePage, DashboardPage, EntityManagerPage, PinSettingsPage

log = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired"
LOGGED_OUT_MESSAGE = "Logged out successfully"


def _manager_factory(content_type: ContentType) -> Callable[[DashboardContext], DashboardPage]:
    return lambda ctx: EntityManagerPage(ctx, content_type)


class AdminMainWindow(QMainWindow):
    """Sidebar navigation over the dashboard, one page per collection, and PIN settings."""

    loggedOut = pyqtSignal(str)

    def __init__(
        self,
        api: AdminApiClient,
        sessions: SessionStore,
        snapshot: SnapshotStore,
        settings: AdminSettings,
        session: Optional[Session] = None,
    ) -> None:
        super().__init__()
        self.api = api
        self.sessions = sessions
        self.settings = settings
        self._executor = ThreadPoolExecutor(max_workers=4)
        self._background_futures: set[Future[Any]] = set()
        self._cleanup_callbacks: list[Callable[[], None]] = []
        self._closed = False
        self._context = DashboardContext(
            api=api,
            snapshot=snapshot,
            settings=settings,
            run_async=self._submit_background,
            show_toast=self._show_toast,
            confirm=self._confirm,
            register_cleanup=self._register_cleanup,
        )
        self._registry = PageRegistry()
        self._registry.register("dashboard", "Dashboard", AdminHomePage)
        for key, content_type in CONTENT_TYPES.items():
            self._registry.register(key, content_type.label, _manager_factory(content_type))
        self._registry.register("pin", "PIN Settings", PinSettingsPage)
        self._navigation = NavigationController(self._registry)
        self._navigation.add_listener(self._on_nav_changed)

        self.setWindowTitle("Admin Panel")
        self.resize(1100, 720)

        # sidebar ---------------------------------------------------------
        sidebar = QFrame(objectName="Sidebar")
        side = QVBoxLayout(sidebar)
        side.setContentsMargins(10, 12, 10, 12)
        side.setSpacing(6)
        brand = QLabel("Admin Panel")
        brand.setStyleSheet("font-weight:900; font-size:18px;")
        side.addWidget(brand)
        side.addWidget(QLabel("Portfolio Management", objectName="Subtitle"))

        self.nav_buttons: Dict[str, NavButton] = {}
        for section in self._registry.sections():
            btn = NavButton(f"  {section.label}")
            btn.clicked.connect(lambda _checked=False, k=section.key: self._go(k))
            side.addWidget(btn)
            self.nav_buttons[section.key] = btn
        side.addStretch()
        self.logout_button = QPushButton("Logout", objectName="LogoutButton")
        self.logout_button.clicked.connect(self.logout)
        side.addWidget(self.logout_button)

        # header + stacked pages -----------------------------------------
        header = QWidget(objectName="Header")
        h = QHBoxLayout(header)
        h.setContentsMargins(18, 10, 18, 10)
        self.title_label = QLabel("Dashboard", objectName="Title")
        h.addWidget(self.title_label)
        h.addStretch()

        self.stack = QStackedWidget()
        self.pages: Dict[str, DashboardPage] = {}
        for key in self._registry.keys():
            page = self._registry.build(key, self._context)
            self.pages[key] = page
            self.stack.addWidget(page)

        right = QWidget()
        rv = QVBoxLayout(right)
        rv.setContentsMargins(0, 0, 0, 0)
        rv.setSpacing(0)
        rv.addWidget(header)
        rv.addWidget(self.stack)

        central = QWidget()
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)
        root.addWidget(sidebar)
        root.addWidget(right)
        root.setStretchFactor(right, 1)
        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

        self._build_menu()

        # session expiry ----------------------------------------------------
        self._session_timer = QTimer(self)
        self._session_timer.setSingleShot(True)
        self._session_timer.timeout.connect(self.expire_session)
        if session is not None:
            self.start_session_timer(session)

        self._go("dashboard")

    # ------------------------------------------------------------------
    # Menu and navigation helpers
    # ------------------------------------------------------------------

    @property
    def context(self) -> DashboardContext:
        return self._context

    @property
    def navigation(self) -> NavigationController:
        return self._navigation

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        logout_action = QAction("Logout", self)
        logout_action.triggered.connect(self.logout)
        file_menu.addAction(logout_action)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        view_menu = self.menuBar().addMenu("&View")
        theme_action = QAction("Toggle Dark Mode", self)
        theme_action.triggered.connect(lambda: _toggle_theme(self.statusBar()))
        view_menu.addAction(theme_action)

    def _go(self, key: str) -> None:
        if key not in self.pages:
            return
        self._navigation.set_current(key)

    def _on_nav_changed(self, key: Optional[str]) -> None:
        for name, btn in self.nav_buttons.items():
            btn.setChecked(name == key)
        if key is None:
            return
        page = self.pages[key]
        self.stack.setCurrentWidget(page)
        self.title_label.setText(self._registry.label(key))
        self.statusBar().showMessage(f"Ready - {self._registry.label(key)}")
        page.refresh()

    # ------------------------------------------------------------------
    # Context services
    # ------------------------------------------------------------------

    def _submit_background(self, worker: Callable[[], Any]) -> Future[Any]:
        future = self._executor.submit(worker)
        self._background_futures.add(future)

        def _cleanup(fut: Future[Any]) -> None:
            self._background_futures.discard(fut)
            if not fut.cancelled() and fut.exception() is not None:
                log.error("Background task failed", exc_info=fut.exception())

        future.add_done_callback(_cleanup)
        return future

    def _register_cleanup(self, callback: Callable[[], None]) -> None:
        if callback not in self._cleanup_callbacks:
            self._cleanup_callbacks.append(callback)

    def _show_toast(self, kind: str, message: str) -> None:
        prefixes = {
            "success": "SUCCESS",
            "error": "ERROR",
            "warning": "WARN",
            "info": "INFO",
        }
        prefix = prefixes.get(kind, kind.upper())
        self.statusBar().showMessage(f"[{prefix}] {message}", 5000)

    def _confirm(self, message: str) -> bool:
        answer = QMessageBox.question(
            self,
            "Confirm",
            message,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def start_session_timer(self, session: Session) -> None:
        duration = timedelta(minutes=self.settings.session_minutes)
        remaining = session.remaining(duration)
        msec = max(0, int(remaining.total_seconds() * 1000))
        self._session_timer.start(msec)
        log.debug("Session expires in %d ms", msec)

    def expire_session(self) -> None:
        log.info("Admin session expired")
        self._end_session(SESSION_EXPIRED_MESSAGE)

    def logout(self) -> None:
        self._end_session(LOGGED_OUT_MESSAGE)

    def _end_session(self, message: str) -> None:
        if self._closed:
            return
        self._session_timer.stop()
        auth_service.logout(self.api, self.sessions)
        self.close()
        self.loggedOut.emit(message)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        if not self._closed:
            self._closed = True
            self._session_timer.stop()
            for callback in list(self._cleanup_callbacks):
                callback()
            for fut in list(self._background_futures):
                fut.cancel()
            self._executor.shutdown(wait=False)
        super().closeEvent(event)


__all__ = ["AdminMainWindow", "LOGGED_OUT_MESSAGE", "SESSION_EXPIRED_MESSAGE"]
