"""Admin dashboard package."""
from .main_window import AdminMainWindow, LOGGED_OUT_MESSAGE, SESSION_EXPIRED_MESSAGE

__all__ = ["AdminMainWindow", "LOGGED_OUT_MESSAGE", "SESSION_EXPIRED_MESSAGE"]
