import pytest

pytest.importorskip("PyQt6.QtWidgets")

from models.content import FIGMA_DESIGNS, WEBSITES  # noqa: E402
from services.entity_sync import REQUIRED_FIELDS_MESSAGE, run_inline  # noqa: E402
from services.snapshot_store import SnapshotStore  # noqa: E402
from ui.admin_dashboard.pages import EntityManagerPage  # noqa: E402
from ui.dashboard_core import DashboardContext  # noqa: E402
from utils.settings import AdminSettings  # noqa: E402

SITES = [
    {"_id": "w1", "title": "Portfolio", "link": "https://p", "description": "d", "language": "py",
     "credentials": [{"role": "admin", "email": "a@x", "password": "pw"}]},
    {"_id": "w2", "title": "Shop", "link": "https://s", "description": "d", "language": "js"},
]


@pytest.fixture
def harness(qapp, api, tmp_path):
    toasts = []
    answers = []
    cleanups = []
    ctx = DashboardContext(
        api=api,
        snapshot=SnapshotStore(tmp_path / "admin_snapshot.json"),
        settings=AdminSettings(page_size=10),
        run_async=run_inline,
        show_toast=lambda kind, msg: toasts.append((kind, msg)),
        confirm=lambda msg: answers.pop(0) if answers else False,
        register_cleanup=cleanups.append,
    )
    return ctx, toasts, answers, cleanups


def test_refresh_fills_table_and_snapshot(harness, backend):
    ctx, _toasts, _answers, cleanups = harness
    backend.reply("GET", "/projects", body={"data": SITES})
    page = EntityManagerPage(ctx, WEBSITES)
    page.refresh()
    assert page.table.table.rowCount() == 2
    assert page.table.table.item(0, 0).text() == "Portfolio"
    assert page.table.table.item(0, 2).text() == "1 credentials"
    assert ctx.snapshot.counts()["websites"] == 2
    assert cleanups == [page.dispose]


def test_search_filters_rows(harness, backend):
    ctx = harness[0]
    backend.reply("GET", "/projects", body=SITES)
    page = EntityManagerPage(ctx, WEBSITES)
    page.refresh()
    page.search.setText("SHOP")
    assert page.table.table.rowCount() == 1
    assert page.table.row_key(0) == "w2"
    page.search.setText("nothing")
    assert page.table.table.item(0, 0).text() == "No websites found"


def test_create_through_dialog(harness, backend):
    ctx, toasts, _answers, _ = harness
    backend.reply("GET", "/figma-designs", body=[])
    backend.reply("POST", "/figma-designs", status=201, body={})
    page = EntityManagerPage(ctx, FIGMA_DESIGNS)
    page.open_create()
    dialog = page.dialog
    assert dialog is not None
    assert dialog.windowTitle() == "Add Figma item"
    dialog.set_value("link", "https://figma.com/file/1")
    dialog.set_value("type", "web")
    dialog.handle_save()
    (post,) = backend.calls("POST")
    body = post.content.decode("utf-8")
    assert "https://figma.com/file/1" in body
    assert 'name="type"' in body and "web" in body
    assert page.dialog is None
    assert ("success", "Figma item added") in toasts


def test_invalid_form_keeps_dialog_open(harness, backend):
    ctx, toasts, _answers, _ = harness
    page = EntityManagerPage(ctx, FIGMA_DESIGNS)
    page.open_create()
    page.dialog.handle_save()
    assert backend.requests == []
    assert page.dialog is not None
    assert toasts == [("error", REQUIRED_FIELDS_MESSAGE)]
    page.dialog.reject()
    assert page.dialog is None
    assert not page.sync.form.is_open


def test_edit_prefills_credentials(harness, backend):
    ctx = harness[0]
    backend.reply("GET", "/projects", body=SITES)
    page = EntityManagerPage(ctx, WEBSITES)
    page.refresh()
    page.open_edit("w1")
    dialog = page.dialog
    assert dialog.windowTitle() == "Edit Website"
    assert dialog.values()["title"] == "Portfolio"
    assert dialog.credentials() == [{"role": "admin", "email": "a@x", "password": "pw"}]
    dialog.reject()


def test_delete_asks_first(harness, backend):
    ctx, toasts, answers, _ = harness
    backend.reply("GET", "/projects", body=SITES)
    backend.reply("DELETE", "/projects/w2", status=204)
    page = EntityManagerPage(ctx, WEBSITES)
    page.refresh()
    page.delete("w2")
    assert backend.calls("DELETE") == []
    answers.append(True)
    page.delete("w2")
    assert len(backend.calls("DELETE")) == 1
    assert ("success", "Website deleted") in toasts


def test_dispose_stops_updates(harness, backend):
    ctx = harness[0]
    backend.reply("GET", "/projects", body=SITES)
    page = EntityManagerPage(ctx, WEBSITES)
    page.dispose()
    page.refresh()
    assert backend.requests == []
    assert not page.sync.alive
