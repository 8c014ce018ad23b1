"""Pages shown in the admin dashboard stack."""
from .base import DashboardPage
from .home import AdminHomePage
from .manager import EntityManagerPage
from .pin import PinSettingsPage

__all__ = [
    "AdminHomePage",
    "DashboardPage",
    "EntityManagerPage",
    "PinSettingsPage",
]
