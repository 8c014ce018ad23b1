import pytest
from PIL import Image

from models.content import DIGITAL_CARDS, SOFTWARE, WEBSITES
from services.entity_sync import (
    REQUIRED_FIELDS_MESSAGE,
    SAVE_IN_PROGRESS_MESSAGE,
    EntitySync,
    FormPhase,
    SyncState,
    validate_form,
)
from utils.exceptions import ValidationError

CARD = {"_id": "a1", "title": "X", "link": "https://x", "description": "d"}
VALID_CARD_FORM = {"title": "Card", "description": "About", "link": "https://card"}


class Recorder:
    def __init__(self):
        self.messages = []
        self.confirmations = []
        self.changes = 0

    def notify(self, kind, message):
        self.messages.append((kind, message))

    def changed(self):
        self.changes += 1


class Deferred:
    """Worker that queues jobs until the test runs them."""

    def __init__(self):
        self.jobs = []

    def __call__(self, fn):
        self.jobs.append(fn)

    def run_next(self):
        return self.jobs.pop(0)()


def make_sync(api, content_type=DIGITAL_CARDS, confirm=None, run_async=None, **kwargs):
    rec = Recorder()
    sync = EntitySync(
        api,
        content_type,
        notify=rec.notify,
        confirm=confirm,
        run_async=run_async,
        on_change=rec.changed,
        **kwargs,
    )
    return sync, rec


def test_fetch_all_normalizes_envelope(api, backend):
    backend.reply("GET", "/digital-cards", body={"data": [CARD]})
    sync, _rec = make_sync(api)
    sync.fetch_all()
    assert sync.records == [
        {"id": "a1", "title": "X", "link": "https://x", "description": "d", "image": ""}
    ]
    assert sync.state is SyncState.LOADED


def test_fetch_failure_keeps_previous_list(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    sync, rec = make_sync(api)
    sync.fetch_all()
    backend.reply("GET", "/digital-cards", status=503)
    sync.fetch_all()
    assert [r["id"] for r in sync.records] == ["a1"]
    assert sync.state is SyncState.ERROR
    assert rec.messages[-1] == ("error", "Failed to load digital cards")


def test_server_message_shown_on_fetch_failure(api, backend):
    backend.reply("GET", "/digital-cards", status=401, body={"message": "Unauthorized"})
    sync, rec = make_sync(api)
    sync.fetch_all()
    assert rec.messages == [("error", "Unauthorized")]


def test_malformed_response_uses_generic_message(api, backend):
    backend.reply("GET", "/digital-cards", body={"unexpected": True})
    sync, rec = make_sync(api)
    sync.fetch_all()
    assert sync.state is SyncState.ERROR
    assert rec.messages == [("error", "Failed to load digital cards")]


def test_unexpected_fetch_error_is_reported_and_raised(api, backend):
    backend.fail("GET", "/digital-cards", RuntimeError("boom"))
    sync, rec = make_sync(api)
    future = sync.fetch_all()
    assert isinstance(future.exception(), RuntimeError)
    assert sync.state is SyncState.ERROR
    assert rec.messages == [("error", "Failed to load digital cards")]
    assert not sync.is_loading


def test_on_loaded_receives_fresh_records(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    seen = []
    sync, _rec = make_sync(api, on_loaded=seen.append)
    sync.fetch_all()
    assert [[r["id"] for r in batch] for batch in seen] == [["a1"]]


@pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
@pytest.mark.parametrize("field", ["title", "description", "link"])
def test_blank_required_field_never_hits_network(api, backend, field, blank):
    sync, rec = make_sync(api)
    form = dict(VALID_CARD_FORM, **{field: blank})
    assert sync.create(form) is None
    assert backend.requests == []
    assert rec.messages == [("error", REQUIRED_FIELDS_MESSAGE)]


def test_validate_form_trims_and_reports_missing():
    assert validate_form(DIGITAL_CARDS, {"title": " T ", "description": "d", "link": "l"}) == {
        "title": "T",
        "description": "d",
        "link": "l",
    }
    with pytest.raises(ValidationError) as excinfo:
        validate_form(WEBSITES, {"title": "T"})
    assert excinfo.value.fields == ["link", "description", "language"]


def test_create_refetches_once_and_closes_form(api, backend):
    backend.reply("POST", "/digital-cards", status=201, body={})
    backend.reply("GET", "/digital-cards", body=[CARD])
    sync, rec = make_sync(api)
    assert sync.open_create()
    sync.edit_form(VALID_CARD_FORM)
    sync.submit_form()
    assert [r.method for r in backend.requests] == ["POST", "GET"]
    assert sync.form.phase is FormPhase.CLOSED
    assert ("success", "Digital card added") in rec.messages
    assert [r["id"] for r in sync.records] == ["a1"]


def test_failed_create_keeps_form_open(api, backend):
    backend.reply("POST", "/digital-cards", status=400, body={"message": "Link already used"})
    sync, rec = make_sync(api)
    sync.open_create()
    sync.edit_form(VALID_CARD_FORM)
    sync.submit_form()
    assert sync.form.phase is FormPhase.EDITING
    assert sync.form.values["title"] == "Card"
    assert sync.state is SyncState.SUBMIT_ERROR
    assert rec.messages == [("error", "Link already used")]
    assert backend.calls("GET") == []


def test_failed_create_without_message_uses_fallback(api, backend):
    backend.reply("POST", "/digital-cards", status=500)
    sync, rec = make_sync(api)
    sync.create(VALID_CARD_FORM)
    assert rec.messages == [("error", "Failed to save digital card")]


def test_update_puts_to_record_path(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    backend.reply("PUT", "/digital-cards/a1", body={})
    sync, rec = make_sync(api)
    sync.fetch_all()
    assert sync.open_edit(sync.find("a1"))
    assert sync.form.is_edit
    assert sync.form.values["title"] == "X"
    sync.edit_form({"title": "Renamed"})
    sync.submit_form()
    (put,) = backend.calls("PUT")
    assert "Renamed" in put.content.decode("utf-8")
    assert ("success", "Digital card updated") in rec.messages
    assert len(backend.calls("GET")) == 2


def test_delete_without_confirmation_sends_nothing(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    sync, rec = make_sync(api)
    sync.fetch_all()
    before = sync.records
    assert sync.delete("a1") is None
    assert backend.calls("DELETE") == []
    assert len(backend.requests) == 1
    assert sync.records == before

    asked = []
    sync2, _ = make_sync(api, confirm=lambda msg: asked.append(msg) or False)
    sync2.delete("a1")
    assert asked == ["Delete this digital card?"]
    assert backend.calls("DELETE") == []


def test_confirmed_delete_refetches(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    backend.reply("DELETE", "/digital-cards/a1", status=204)
    sync, rec = make_sync(api, confirm=lambda msg: True)
    sync.fetch_all()
    backend.reply("GET", "/digital-cards", body=[])
    sync.delete("a1")
    assert [r.method for r in backend.requests] == ["GET", "DELETE", "GET"]
    assert sync.records == []
    assert ("success", "Digital card deleted") in rec.messages


def test_failed_delete_leaves_list(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    backend.reply("DELETE", "/digital-cards/a1", status=404, body={"message": "Gone"})
    sync, rec = make_sync(api, confirm=lambda msg: True)
    sync.fetch_all()
    sync.delete("a1")
    assert [r["id"] for r in sync.records] == ["a1"]
    assert rec.messages[-1] == ("error", "Gone")


def test_second_submit_while_in_flight_is_rejected(api, backend):
    backend.reply("POST", "/digital-cards", status=201, body={})
    backend.reply("GET", "/digital-cards", body=[])
    worker = Deferred()
    sync, rec = make_sync(api, run_async=worker)
    sync.create(VALID_CARD_FORM)
    sync.create(VALID_CARD_FORM)
    assert len(worker.jobs) == 1
    assert rec.messages == [("warning", SAVE_IN_PROGRESS_MESSAGE)]
    worker.run_next()
    assert len(backend.calls("POST")) == 1
    # Lock is free again once the first save finished.
    sync.create(VALID_CARD_FORM)
    assert rec.messages[-1] != ("warning", SAVE_IN_PROGRESS_MESSAGE)


def test_close_form_ignored_while_submitting(api, backend):
    worker = Deferred()
    sync, _rec = make_sync(api, run_async=worker)
    sync.open_create()
    sync.edit_form(VALID_CARD_FORM)
    sync.submit_form()
    assert sync.form.phase is FormPhase.SUBMITTING
    assert not sync.close_form()
    assert not sync.open_create()
    assert sync.form.phase is FormPhase.SUBMITTING


def test_stale_fetch_response_is_dropped(api, backend):
    worker = Deferred()
    sync, _rec = make_sync(api, run_async=worker)
    sync.fetch_all()
    sync.fetch_all()
    backend.reply("GET", "/digital-cards", body=[dict(CARD, _id="new")])
    worker.jobs.pop(1)()
    backend.reply("GET", "/digital-cards", body=[dict(CARD, _id="old")])
    worker.jobs.pop(0)()
    assert [r["id"] for r in sync.records] == ["new"]
    assert sync.state is SyncState.LOADED


def test_late_response_after_dispose_is_ignored(api, backend):
    backend.reply("GET", "/digital-cards", body=[CARD])
    worker = Deferred()
    sync, rec = make_sync(api, run_async=worker)
    sync.fetch_all()
    sync.dispose()
    changes = rec.changes
    worker.run_next()
    assert sync.records == []
    assert rec.changes == changes
    assert sync.fetch_all() is None


def test_credentials_only_sent_for_credential_types(api, backend):
    backend.reply("POST", "/software", body={})
    backend.reply("POST", "/digital-cards", body={})
    creds = [{"role": "admin", "email": "a@x", "password": "pw"}]
    software, _ = make_sync(api, SOFTWARE)
    software.create(VALID_CARD_FORM, credentials=creds)
    cards, _ = make_sync(api, DIGITAL_CARDS)
    cards.create(VALID_CARD_FORM, credentials=creds)
    (sw_post,) = backend.calls("POST", "/software")
    (card_post,) = backend.calls("POST", "/digital-cards")
    assert "credentials[0][role]" in sw_post.content.decode("utf-8")
    assert "credentials[" not in card_post.content.decode("utf-8")


def test_non_image_upload_is_rejected_before_request(api, backend, tmp_path):
    bogus = tmp_path / "notes.png"
    bogus.write_text("not an image")
    sync, rec = make_sync(api)
    sync.create(VALID_CARD_FORM, bogus)
    assert backend.requests == []
    assert rec.messages[0][0] == "error"
    assert "notes.png" in rec.messages[0][1]


def test_image_is_uploaded(api, backend, tmp_path):
    path = tmp_path / "cover.png"
    Image.new("RGB", (4, 4), "red").save(path)
    backend.reply("POST", "/digital-cards", body={})
    sync, _rec = make_sync(api)
    sync.create(VALID_CARD_FORM, path)
    (post,) = backend.calls("POST")
    assert b'filename="cover.png"' in post.content
