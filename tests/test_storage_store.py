"""Tests for the JSON-backed storage store."""

import asyncio
import json

import pytest

from storage_navigator.core import storage_store
from storage_navigator.core.errors import (
    FolderExistsError,
    FolderNotFoundError,
    IdentityRequiredError,
    InvalidFolderPathError,
    StorageNotFoundError,
)
from storage_navigator.core.models import Identity
from storage_navigator.core.storage_store import JsonStorageStore, load_storages


class _Identity:
    def __init__(self, identity=None):
        self.identity = identity

    def current_identity(self):
        return self.identity


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "storages.json"


@pytest.fixture
def storage_id(json_path):
    return storage_store.create_storage("Personal", json_path)


def test_missing_file_loads_empty(json_path):
    assert load_storages(json_path).storages == {}


def test_corrupt_file_loads_empty(json_path):
    json_path.write_text("{not json", encoding="utf-8")
    assert load_storages(json_path).storages == {}


def test_invalid_folder_entries_are_dropped(json_path):
    json_path.write_text(
        json.dumps({"storages": {"s1": {"name": "A", "folders": ["/a", "b", "/a/", "/", 3]}}}),
        encoding="utf-8",
    )
    assert load_storages(json_path).get("s1").folders == ["/a"]


def test_loading_adds_missing_parent_folders(json_path):
    json_path.write_text(
        json.dumps({"storages": {"s1": {"name": "A", "folders": ["/a/b"]}}}),
        encoding="utf-8",
    )
    assert load_storages(json_path).get("s1").folders == ["/a", "/a/b"]

    storage_store.rename_folder("s1", "/a", "/z", json_path)

    assert load_storages(json_path).get("s1").folders == ["/z", "/z/b"]


def test_create_folder_adds_missing_parents(json_path, storage_id):
    storage_store.create_folder(storage_id, "/a/b/c", json_path)
    assert load_storages(json_path).get(storage_id).folders == ["/a", "/a/b", "/a/b/c"]


def test_create_existing_folder_is_an_error(json_path, storage_id):
    storage_store.create_folder(storage_id, "/a", json_path)
    with pytest.raises(FolderExistsError):
        storage_store.create_folder(storage_id, "/a", json_path)
    with pytest.raises(FolderExistsError):
        storage_store.create_folder(storage_id, "/", json_path)


def test_create_folder_rejects_invalid_path(json_path, storage_id):
    with pytest.raises(InvalidFolderPathError):
        storage_store.create_folder(storage_id, "a/b", json_path)


def test_create_folder_unknown_storage(json_path):
    with pytest.raises(StorageNotFoundError):
        storage_store.create_folder("nope", "/a", json_path)


def test_rename_folder_moves_subtree(json_path, storage_id):
    storage_store.create_folder(storage_id, "/projects/draft/old", json_path)
    storage_store.create_folder(storage_id, "/projects/drafts", json_path)

    storage_store.rename_folder(storage_id, "/projects/draft", "/projects/final", json_path)

    assert load_storages(json_path).get(storage_id).folders == [
        "/projects",
        "/projects/drafts",
        "/projects/final",
        "/projects/final/old",
    ]


def test_rename_folder_conflict_leaves_file_unchanged(json_path, storage_id):
    storage_store.create_folder(storage_id, "/a", json_path)
    storage_store.create_folder(storage_id, "/b", json_path)
    before = json_path.read_text(encoding="utf-8")

    with pytest.raises(FolderExistsError):
        storage_store.rename_folder(storage_id, "/a", "/b", json_path)

    assert json_path.read_text(encoding="utf-8") == before


def test_rename_missing_folder(json_path, storage_id):
    with pytest.raises(FolderNotFoundError):
        storage_store.rename_folder(storage_id, "/a", "/b", json_path)


def test_rename_into_own_subtree_is_rejected(json_path, storage_id):
    storage_store.create_folder(storage_id, "/a", json_path)
    with pytest.raises(InvalidFolderPathError):
        storage_store.rename_folder(storage_id, "/a", "/a/b", json_path)


def test_rename_and_remove_storage(json_path, storage_id):
    storage_store.rename_storage(storage_id, "Work", json_path)
    assert load_storages(json_path).get(storage_id).name == "Work"

    storage_store.remove_storage(storage_id, json_path)
    assert storage_id not in load_storages(json_path).storages

    with pytest.raises(StorageNotFoundError):
        storage_store.remove_storage(storage_id, json_path)


def test_async_store_round_trip(json_path):
    store = JsonStorageStore(_Identity(), path=json_path)
    sid = store.create_storage("Personal")

    asyncio.run(store.create_folder(sid, "/projects/draft"))
    asyncio.run(store.rename_folder(sid, "/projects/draft", "/projects/final"))

    snapshot = store.get_storage(sid)
    assert snapshot.name == "Personal"
    assert snapshot.folders == ("/projects", "/projects/final")
    assert [s.id for s in store.list_storages()] == [sid]


def test_async_sync_requires_identity(json_path):
    store = JsonStorageStore(_Identity(), path=json_path, sync_base_url="http://sync.test")
    sid = store.create_storage("Personal")
    with pytest.raises(IdentityRequiredError):
        asyncio.run(store.sync_storage(sid))


def test_async_sync_pushes_snapshot(json_path, monkeypatch):
    pushed = []
    monkeypatch.setattr(
        storage_store.sync_client,
        "push_storage",
        lambda storage, identity, base_url: pushed.append((storage, identity, base_url)),
    )
    identity = Identity("Ada", token="t")
    store = JsonStorageStore(_Identity(identity), path=json_path, sync_base_url="http://sync.test")
    sid = store.create_storage("Personal")

    asyncio.run(store.sync_storage(sid))

    assert len(pushed) == 1
    storage, who, base_url = pushed[0]
    assert storage.id == sid
    assert who is identity
    assert base_url == "http://sync.test"
