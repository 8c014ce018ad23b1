"""Keep a local list of one content type in step with the backend.

Every mutation goes to the server and is followed by a full re-fetch; the
local list is only ever replaced, never patched. Network work is handed to
``run_async`` (a thread pool in the app, inline in tests); validation and
delete confirmation happen on the caller's thread before anything is sent.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from models.content import ContentType, Record
from services.images import verify_image
from services.normalize import filter_records, normalize_collection
from utils.exceptions import AdminError, ValidationError, user_message

log = logging.getLogger(__name__)

NotifyFn = Callable[[str, str], None]
ConfirmFn = Callable[[str], bool]
Worker = Callable[[Callable[[], Any]], "Future[Any]"]

REQUIRED_FIELDS_MESSAGE = "Please fill all required fields"
SAVE_IN_PROGRESS_MESSAGE = "A save is already in progress"


def run_inline(fn: Callable[[], Any]) -> "Future[Any]":
    """Run ``fn`` now and return its outcome as a finished future."""
    future: "Future[Any]" = Future()
    try:
        future.set_result(fn())
    except BaseException as exc:
        future.set_exception(exc)
    return future


class SyncState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"
    SUBMITTING = "submitting"
    SUBMIT_ERROR = "submit_error"


class FormPhase(Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class FormState:
    phase: FormPhase = FormPhase.CLOSED
    values: Mapping[str, str] = field(default_factory=dict)
    entity_id: Optional[str] = None
    credentials: Tuple[Mapping[str, str], ...] = ()
    image_path: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.phase is not FormPhase.CLOSED

    @property
    def is_edit(self) -> bool:
        return self.entity_id is not None


def validate_form(content_type: ContentType, form: Mapping[str, Any]) -> Dict[str, str]:
    """Return trimmed field values ready to submit.

    Raises :class:`ValidationError` naming every blank required field.
    Blank optional fields are left out of the payload.
    """
    payload: Dict[str, str] = {}
    missing: List[str] = []
    for spec in content_type.fields:
        raw = form.get(spec.name)
        value = "" if raw is None else str(raw).strip()
        if not value:
            if spec.required:
                missing.append(spec.name)
            continue
        payload[spec.name] = value
    if missing:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE, missing)
    return payload


def _noop_notify(kind: str, message: str) -> None:
    log.info("[%s] %s", kind, message)


def _deny(_message: str) -> bool:
    return False


class EntitySync:
    """Fetch/create/update/delete cycle for one :class:`ContentType`."""

    def __init__(
        self,
        client: Any,
        content_type: ContentType,
        *,
        notify: Optional[NotifyFn] = None,
        confirm: Optional[ConfirmFn] = None,
        run_async: Optional[Worker] = None,
        on_change: Optional[Callable[[], None]] = None,
        on_loaded: Optional[Callable[[List[Record]], None]] = None,
    ) -> None:
        self.content_type = content_type
        self._client = client
        self._notify = notify or _noop_notify
        # Without a confirmation hook deletes never go out.
        self._confirm = confirm or _deny
        self._run_async = run_async or run_inline
        self._on_change = on_change
        self._on_loaded = on_loaded
        self._lock = threading.RLock()
        self._submit_lock = threading.Lock()
        self._records: List[Record] = []
        self._state = SyncState.IDLE
        self._form = FormState()
        self._fetch_seq = 0
        self._alive = True

    # -- Read-only views ----------------------------------------------------

    @property
    def records(self) -> List[Record]:
        with self._lock:
            return list(self._records)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def form(self) -> FormState:
        return self._form

    @property
    def is_loading(self) -> bool:
        return self._state is SyncState.LOADING

    @property
    def alive(self) -> bool:
        return self._alive

    def filtered(self, needle: str) -> List[Record]:
        return filter_records(self.records, needle, self.content_type)

    def find(self, entity_id: str) -> Optional[Record]:
        for record in self.records:
            if record["id"] == entity_id:
                return record
        return None

    def dispose(self) -> None:
        """Stop applying results; late responses are dropped from now on."""
        self._alive = False

    # -- Fetch ----------------------------------------------------------------

    def fetch_all(self) -> Optional["Future[Any]"]:
        if not self._alive:
            return None
        with self._lock:
            self._fetch_seq += 1
            seq = self._fetch_seq
            self._state = SyncState.LOADING
        self._changed()
        return self._run_async(lambda: self._do_fetch(seq))

    def _do_fetch(self, seq: int) -> bool:
        label = self.content_type.label.lower()
        try:
            payload = self._client.list(self.content_type.endpoint)
            records = normalize_collection(payload, self.content_type)
        except AdminError as exc:
            with self._lock:
                if not self._current(seq):
                    return False
                self._state = SyncState.ERROR
            log.warning("Loading %s failed: %s", label, exc)
            self._notify("error", user_message(exc, f"Failed to load {label}"))
            self._changed()
            return False
        except Exception:
            with self._lock:
                current = self._current(seq)
                if current:
                    self._state = SyncState.ERROR
            log.exception("Unexpected failure loading %s", label)
            if current:
                self._notify("error", f"Failed to load {label}")
                self._changed()
            raise

        with self._lock:
            if not self._current(seq):
                log.debug("Dropping stale %s response (fetch %s)", label, seq)
                return False
            self._records = records
            self._state = SyncState.LOADED
        log.info("Loaded %d %s", len(records), label)
        if self._on_loaded is not None:
            self._on_loaded(list(records))
        self._changed()
        return True

    def _current(self, seq: int) -> bool:
        return self._alive and seq == self._fetch_seq

    # -- Mutations ------------------------------------------------------------

    def create(
        self,
        form: Mapping[str, Any],
        image_path: Optional[Path | str] = None,
        *,
        credentials: Iterable[Mapping[str, str]] = (),
    ) -> Optional["Future[Any]"]:
        return self._submit(None, form, image_path, credentials)

    def update(
        self,
        entity_id: str,
        form: Mapping[str, Any],
        image_path: Optional[Path | str] = None,
        *,
        credentials: Iterable[Mapping[str, str]] = (),
    ) -> Optional["Future[Any]"]:
        return self._submit(entity_id, form, image_path, credentials)

    def delete(self, entity_id: str) -> Optional["Future[Any]"]:
        if not self._alive:
            return None
        singular = self.content_type.singular.lower()
        if not self._confirm(f"Delete this {singular}?"):
            return None
        if not self._begin_mutation():
            return None
        self._changed()
        return self._run_async(lambda: self._do_delete(entity_id))

    def _submit(
        self,
        entity_id: Optional[str],
        form: Mapping[str, Any],
        image_path: Optional[Path | str],
        credentials: Iterable[Mapping[str, str]],
    ) -> Optional["Future[Any]"]:
        if not self._alive:
            return None
        try:
            fields = validate_form(self.content_type, form)
            if image_path:
                verify_image(image_path)
        except ValidationError as exc:
            self._notify("error", str(exc))
            return None

        creds = (
            [dict(c) for c in credentials]
            if self.content_type.supports_credentials
            else []
        )
        if not self._begin_mutation():
            return None
        with self._lock:
            if self._form.phase is FormPhase.EDITING:
                self._form = replace(self._form, phase=FormPhase.SUBMITTING)
        self._changed()
        return self._run_async(
            lambda: self._do_submit(entity_id, fields, creds, image_path)
        )

    def _begin_mutation(self) -> bool:
        if not self._submit_lock.acquire(blocking=False):
            self._notify("warning", SAVE_IN_PROGRESS_MESSAGE)
            return False
        with self._lock:
            self._state = SyncState.SUBMITTING
        return True

    def _do_submit(
        self,
        entity_id: Optional[str],
        fields: Dict[str, str],
        credentials: List[Dict[str, str]],
        image_path: Optional[Path | str],
    ) -> bool:
        ct = self.content_type
        singular = ct.singular
        try:
            if entity_id is None:
                self._client.create(
                    ct.endpoint, fields, credentials=credentials, image_path=image_path
                )
            else:
                self._client.update(
                    ct.endpoint,
                    entity_id,
                    fields,
                    credentials=credentials,
                    image_path=image_path,
                )
        except AdminError as exc:
            self._submit_lock.release()
            self._mutation_failed(exc, f"Failed to save {singular.lower()}")
            return False
        except Exception:
            self._submit_lock.release()
            self._mutation_failed(None, f"Failed to save {singular.lower()}")
            raise
        self._submit_lock.release()

        if not self._alive:
            return False
        with self._lock:
            self._form = FormState()
        verb = "updated" if entity_id is not None else "added"
        log.info("%s %s %s", singular, entity_id or "", verb)
        self._notify("success", f"{singular} {verb}")
        self.fetch_all()
        return True

    def _do_delete(self, entity_id: str) -> bool:
        singular = self.content_type.singular
        try:
            self._client.delete(self.content_type.endpoint, entity_id)
        except AdminError as exc:
            self._submit_lock.release()
            self._mutation_failed(exc, f"Failed to delete {singular.lower()}")
            return False
        except Exception:
            self._submit_lock.release()
            self._mutation_failed(None, f"Failed to delete {singular.lower()}")
            raise
        self._submit_lock.release()

        if not self._alive:
            return False
        log.info("%s %s deleted", singular, entity_id)
        self._notify("success", f"{singular} deleted")
        self.fetch_all()
        return True

    def _mutation_failed(self, exc: Optional[BaseException], fallback: str) -> None:
        if not self._alive:
            return
        with self._lock:
            self._state = SyncState.SUBMIT_ERROR
            if self._form.phase is FormPhase.SUBMITTING:
                self._form = replace(self._form, phase=FormPhase.EDITING)
        if exc is None:
            log.exception(fallback)
        else:
            log.warning("%s: %s", fallback, exc)
        self._notify("error", user_message(exc, fallback) if exc else fallback)
        self._changed()

    # -- Form state -----------------------------------------------------------

    def open_create(self) -> bool:
        with self._lock:
            if self._form.phase is FormPhase.SUBMITTING:
                return False
            self._form = FormState(
                phase=FormPhase.EDITING, values=self.content_type.blank_form()
            )
        self._changed()
        return True

    def open_edit(self, record: Record) -> bool:
        with self._lock:
            if self._form.phase is FormPhase.SUBMITTING:
                return False
            values = {
                spec.name: str(record.get(spec.name) or spec.default)
                for spec in self.content_type.fields
            }
            credentials = tuple(dict(c) for c in record.get("credentials") or ())
            self._form = FormState(
                phase=FormPhase.EDITING,
                values=values,
                entity_id=record["id"],
                credentials=credentials,
            )
        self._changed()
        return True

    def edit_form(
        self,
        values: Optional[Mapping[str, str]] = None,
        *,
        credentials: Optional[Iterable[Mapping[str, str]]] = None,
        image_path: Optional[str] = None,
    ) -> bool:
        """Record the user's current input while the form is being edited."""
        with self._lock:
            if self._form.phase is not FormPhase.EDITING:
                return False
            changes: Dict[str, Any] = {}
            if values is not None:
                merged = dict(self._form.values)
                merged.update(values)
                changes["values"] = merged
            if credentials is not None:
                changes["credentials"] = tuple(dict(c) for c in credentials)
            if image_path is not None:
                changes["image_path"] = image_path or None
            self._form = replace(self._form, **changes)
        return True

    def close_form(self) -> bool:
        with self._lock:
            if self._form.phase is FormPhase.SUBMITTING:
                return False
            self._form = FormState()
        self._changed()
        return True

    def submit_form(self) -> Optional["Future[Any]"]:
        form = self._form
        if form.phase is not FormPhase.EDITING:
            return None
        return self._submit(
            form.entity_id, form.values, form.image_path, form.credentials
        )

    def _changed(self) -> None:
        if self._on_change is not None and self._alive:
            self._on_change()


__all__ = [
    "EntitySync",
    "FormPhase",
    "FormState",
    "REQUIRED_FIELDS_MESSAGE",
    "SAVE_IN_PROGRESS_MESSAGE",
    "SyncState",
    "run_inline",
    "validate_form",
]
