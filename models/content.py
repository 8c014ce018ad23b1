"""Content types managed by the admin panel.

Each :class:`ContentType` describes one REST collection: where it lives,
which form fields it has, how the backend may wrap the list, and which field
the search box matches against.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

Record = Dict[str, Any]

FIGMA_TYPES: Tuple[Tuple[str, str], ...] = (
    ("application", "Application"),
    ("web", "Web"),
    ("saas-dashboard", "SaaS Dashboard"),
)

ID_FIELDS: Tuple[str, ...] = ("_id", "id")


@dataclass(frozen=True)
class FieldSpec:
    """One editable text field of a content type."""

    name: str
    label: str
    required: bool = True
    default: str = ""
    multiline: bool = False
    aliases: Tuple[str, ...] = ()
    choices: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Credential:
    role: str = ""
    email: str = ""
    password: str = ""

    def is_complete(self) -> bool:
        return bool(self.role and self.email and self.password)

    def as_dict(self) -> Dict[str, str]:
        return {"role": self.role, "email": self.email, "password": self.password}


@dataclass(frozen=True)
class ContentType:
    key: str
    label: str
    singular: str
    endpoint: str
    fields: Tuple[FieldSpec, ...]
    envelope_keys: Tuple[str, ...] = ("data",)
    supports_credentials: bool = False
    search_field: str = "title"
    search_fallback: Optional[str] = None
    empty_message: str = "No data found"

    def search_text(self, record: Record) -> str:
        """Return the display value the search box matches against."""
        value = str(record.get(self.search_field) or "")
        if not value and self.search_fallback:
            value = str(record.get(self.search_fallback) or "")
        return value

    def blank_form(self) -> Dict[str, str]:
        return {f.name: f.default for f in self.fields}


def _text(name: str, label: str, **kwargs: Any) -> FieldSpec:
    return FieldSpec(name=name, label=label, **kwargs)


WEBSITES = ContentType(
    key="websites",
    label="Websites",
    singular="Website",
    endpoint="/projects",
    fields=(
        _text("title", "Title"),
        _text("link", "URL"),
        _text("description", "Description", multiline=True),
        _text("language", "Language"),
    ),
    supports_credentials=True,
    empty_message="No websites found",
)

MOBILE_APPS = ContentType(
    key="mobile_apps",
    label="Mobile Apps",
    singular="Mobile app",
    endpoint="/mobile-apps",
    fields=(
        _text("title", "Title"),
        _text("androidLink", "Android Link", aliases=("android_link",)),
        _text("iosLink", "iOS Link", aliases=("ios_link",)),
        _text("description", "Description", multiline=True),
        _text("language", "Language"),
        _text("software", "Software"),
    ),
    envelope_keys=("data", "apps"),
    empty_message="No apps found",
)

SOFTWARE = ContentType(
    key="software",
    label="Software",
    singular="Software",
    endpoint="/software",
    fields=(
        _text("title", "Title"),
        _text("description", "Description", multiline=True),
        _text("link", "Link"),
    ),
    supports_credentials=True,
    empty_message="No software found",
)

DIGITAL_CARDS = ContentType(
    key="digital_cards",
    label="Digital Cards",
    singular="Digital card",
    endpoint="/digital-cards",
    fields=(
        _text("title", "Title"),
        _text("description", "Description", multiline=True),
        _text("link", "Link"),
    ),
    envelope_keys=("data", "cards", "digitalCards"),
    empty_message="No digital cards found",
)

MARKETING_CLIENTS = ContentType(
    key="marketing_clients",
    label="Marketing Clients",
    singular="Marketing client",
    endpoint="/marketing-clients",
    fields=(
        _text("title", "Title"),
        _text("description", "Description", multiline=True),
        _text("link", "Link"),
    ),
    envelope_keys=("data", "marketingClients"),
    empty_message="No marketing clients found",
)

FIGMA_DESIGNS = ContentType(
    key="figma_designs",
    label="Figma",
    singular="Figma item",
    endpoint="/figma-designs",
    fields=(
        _text("title", "Title", required=False),
        _text("link", "Figma Link"),
        _text(
            "type",
            "Type",
            required=False,
            default="application",
            choices=FIGMA_TYPES,
        ),
    ),
    search_fallback="link",
    empty_message="No Figma designs found",
)

CONTENT_TYPES: "OrderedDict[str, ContentType]" = OrderedDict(
    (ct.key, ct)
    for ct in (
        WEBSITES,
        MOBILE_APPS,
        SOFTWARE,
        DIGITAL_CARDS,
        MARKETING_CLIENTS,
        FIGMA_DESIGNS,
    )
)


def figma_type_label(value: str) -> str:
    for key, label in FIGMA_TYPES:
        if key == value:
            return label
    return value or "Application"


__all__ = [
    "CONTENT_TYPES",
    "ContentType",
    "Credential",
    "DIGITAL_CARDS",
    "FIGMA_DESIGNS",
    "FIGMA_TYPES",
    "FieldSpec",
    "ID_FIELDS",
    "MARKETING_CLIENTS",
    "MOBILE_APPS",
    "Record",
    "SOFTWARE",
    "WEBSITES",
    "figma_type_label",
]
