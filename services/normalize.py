"""Turn raw backend payloads into canonical records."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from models.content import ID_FIELDS, ContentType, Credential, Record
from utils.exceptions import MalformedResponseError

log = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def resolve_id(raw: dict) -> str:
    """Return the first present identifier among ``_id`` and ``id``."""
    for name in ID_FIELDS:
        value = raw.get(name)
        if value is None:
            continue
        text = _clean(value).strip()
        if text:
            return text
    return ""


def normalize_credentials(raw: Any) -> List[dict]:
    """Return credentials as ordered ``{role, email, password}`` dicts."""
    if not isinstance(raw, list):
        return []
    out = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        cred = Credential(
            role=_clean(entry.get("role")),
            email=_clean(entry.get("email")),
            password=_clean(entry.get("password")),
        )
        out.append(cred.as_dict())
    return out


def normalize(raw: Any, content_type: ContentType) -> Optional[Record]:
    """Return the canonical record for ``raw`` or ``None`` when it has no id."""
    if not isinstance(raw, dict):
        return None
    record_id = resolve_id(raw)
    if not record_id:
        return None

    record: Record = {"id": record_id}
    for spec in content_type.fields:
        value = raw.get(spec.name)
        if value is None:
            for alias in spec.aliases:
                if raw.get(alias) is not None:
                    value = raw[alias]
                    break
        if value is None:
            value = spec.default
        record[spec.name] = _clean(value)
    record["image"] = _clean(raw.get("image"))
    if content_type.supports_credentials:
        record["credentials"] = normalize_credentials(raw.get("credentials"))
    return record


def unwrap_collection(payload: Any, envelope_keys: Iterable[str]) -> list:
    """Return the record list from a bare array or a known envelope.

    Envelope keys are probed in order; the first one holding a list wins.
    Anything else is a malformed response.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in envelope_keys:
            candidate = payload.get(key)
            if isinstance(candidate, list):
                return candidate
    raise MalformedResponseError("Unexpected response shape from server")


def normalize_collection(payload: Any, content_type: ContentType) -> List[Record]:
    records = []
    for raw in unwrap_collection(payload, content_type.envelope_keys):
        record = normalize(raw, content_type)
        if record is not None:
            records.append(record)
        else:
            log.debug("Dropping %s record without an id", content_type.key)
    return records


def filter_records(
    records: Iterable[Record], needle: str, content_type: ContentType
) -> List[Record]:
    """Case-insensitive substring match over the type's search field."""
    needle = (needle or "").lower()
    if not needle:
        return list(records)
    return [r for r in records if needle in content_type.search_text(r).lower()]


__all__ = [
    "filter_records",
    "normalize",
    "normalize_collection",
    "normalize_credentials",
    "resolve_id",
    "unwrap_collection",
]
