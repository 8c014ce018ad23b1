"""Section registry and navigation state for the admin window."""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List

from .context import DashboardContext

log = logging.getLogger(__name__)

PageFactory = Callable[[DashboardContext], Any]


@dataclass(frozen=True)
class Section:
    key: str
    label: str
    factory: PageFactory


class PageRegistry:
    """Ordered mapping of section keys to labelled page factories."""

    def __init__(self) -> None:
        self._sections: Dict[str, Section] = OrderedDict()

    def register(self, key: str, label: str, factory: PageFactory) -> None:
        if key in self._sections:
            raise KeyError(f"Page '{key}' already registered")
        self._sections[key] = Section(key, label, factory)

    def keys(self) -> Iterable[str]:
        return self._sections.keys()

    def sections(self) -> List[Section]:
        return list(self._sections.values())

    def label(self, key: str) -> str:
        return self._sections[key].label

    def build(self, key: str, context: DashboardContext) -> Any:
        return self._sections[key].factory(context)


class NavigationController:
    """Tracks the active section and tells listeners when it changes."""

    def __init__(self, registry: PageRegistry) -> None:
        self._registry = registry
        self._current_key: str | None = None
        self._listeners: list[Callable[[str | None], None]] = []

    @property
    def current_key(self) -> str | None:
        return self._current_key

    def add_listener(self, callback: Callable[[str | None], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def set_current(self, key: str) -> None:
        if key not in self._registry.keys():
            raise KeyError(f"Unknown page '{key}'")
        self._current_key = key
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._current_key)
            except Exception:
                log.exception("Navigation listener failed for %s", self._current_key)


__all__ = ["NavigationController", "PageFactory", "PageRegistry", "Section"]
