import json
import threading

import bcrypt
import pytest

from models.content import CONTENT_TYPES
from services.snapshot_store import SnapshotStore


def test_empty_snapshot_has_every_collection(tmp_path):
    store = SnapshotStore(tmp_path / "admin_snapshot.json")
    data = store.load()
    assert set(CONTENT_TYPES) <= set(data)
    assert data["pin_hash"] is None
    assert store.counts() == {key: 0 for key in CONTENT_TYPES}


def test_save_collection_updates_counts(tmp_path):
    store = SnapshotStore(tmp_path / "admin_snapshot.json")
    store.save_collection("websites", [{"id": "1"}, {"id": "2"}])
    store.save_collection("figma_designs", [{"id": "f"}])
    counts = store.counts()
    assert counts["websites"] == 2
    assert counts["figma_designs"] == 1
    assert counts["software"] == 0


def test_unknown_collection_rejected(tmp_path):
    store = SnapshotStore(tmp_path / "admin_snapshot.json")
    with pytest.raises(KeyError):
        store.save_collection("blog_posts", [])


def test_pin_is_stored_hashed(tmp_path):
    path = tmp_path / "admin_snapshot.json"
    store = SnapshotStore(path)
    assert not store.has_pin()
    store.set_pin("4321")
    stored = json.loads(path.read_text())["pin_hash"]
    assert "4321" not in stored
    assert store.has_pin()
    assert bcrypt.checkpw(b"4321", stored.encode("utf-8"))
    assert not bcrypt.checkpw(b"1234", stored.encode("utf-8"))


def test_corrupt_snapshot_falls_back_to_empty(tmp_path):
    path = tmp_path / "admin_snapshot.json"
    path.write_text("[1, 2")
    assert SnapshotStore(path).counts()["websites"] == 0


def test_damaged_file_does_not_wipe_other_collections(tmp_path):
    path = tmp_path / "admin_snapshot.json"
    store = SnapshotStore(path)
    store.save_collection("software", [{"id": "s"}])
    store.set_pin("4321")
    path.write_text(path.read_text()[:20])
    store.save_collection("websites", [{"id": "w"}])
    counts = store.counts()
    assert counts["websites"] == 1
    assert counts["software"] == 1
    assert store.has_pin()


def test_readers_never_see_partial_writes(tmp_path):
    path = tmp_path / "admin_snapshot.json"
    writer = SnapshotStore(path)
    writer.save_collection("software", [{"id": "s"}])
    writer.set_pin("4321")
    stop = threading.Event()

    def churn():
        n = 0
        while not stop.is_set():
            n += 1
            writer.save_collection("websites", [{"id": str(i)} for i in range(n % 50)])

    thread = threading.Thread(target=churn)
    thread.start()
    bad = 0
    try:
        for _ in range(300):
            reader = SnapshotStore(path)
            if reader.counts()["software"] != 1 or not reader.has_pin():
                bad += 1
    finally:
        stop.set()
        thread.join()
    assert bad == 0
    assert [p.name for p in tmp_path.iterdir()] == ["admin_snapshot.json"]
