"""Table columns shown by each content manager page."""
from __future__ import annotations

from typing import Dict, List

from models.content import (
    DIGITAL_CARDS,
    FIGMA_DESIGNS,
    MARKETING_CLIENTS,
    MOBILE_APPS,
    SOFTWARE,
    WEBSITES,
    ContentType,
    figma_type_label,
)
from ui.paginated_table import Column


def _credential_count(row) -> str:
    return f"{len(row.get('credentials') or [])} credentials"


def _field(name: str):
    return lambda row: row.get(name, "")


_TITLE = Column("title", "Title", accessor=_field("title"))
_LINK = Column("link", "Link", accessor=_field("link"))
_DESCRIPTION = Column("desc", "Description", accessor=_field("description"))

COLUMNS: Dict[str, List[Column]] = {
    WEBSITES.key: [
        _TITLE,
        _LINK,
        Column("creds", "Credentials", accessor=_credential_count),
    ],
    MOBILE_APPS.key: [
        _TITLE,
        Column("language", "Language", accessor=_field("language")),
        Column("software", "Software", accessor=_field("software")),
    ],
    SOFTWARE.key: [
        _TITLE,
        Column("creds", "Credentials", accessor=_credential_count),
    ],
    DIGITAL_CARDS.key: [_TITLE, _DESCRIPTION, _LINK],
    MARKETING_CLIENTS.key: [_TITLE, _DESCRIPTION, _LINK],
    FIGMA_DESIGNS.key: [
        Column("title", "Title", accessor=lambda row: row.get("title") or "Untitled"),
        Column(
            "type",
            "Type",
            accessor=lambda row: figma_type_label(row.get("type") or "application"),
        ),
        _LINK,
    ],
}


def columns_for(content_type: ContentType) -> List[Column]:
    return list(COLUMNS[content_type.key])


def manager_title(content_type: ContentType) -> str:
    if content_type is FIGMA_DESIGNS:
        return "Figma Designs"
    return f"{content_type.singular.title()} Manager"


__all__ = ["COLUMNS", "columns_for", "manager_title"]
