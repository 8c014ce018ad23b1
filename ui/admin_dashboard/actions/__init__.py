"""Dialogs opened from the admin dashboard pages."""

from .entity_form import EntityFormDialog

__all__ = ["EntityFormDialog"]
