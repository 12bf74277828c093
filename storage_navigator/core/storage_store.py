"""
Local storage persistence.

Design overview
---------------
A storage is a notebook-like container with a name and a folder tree.
This module persists the folder structure of every storage in a single
JSON file in the data directory (``storages.json``). The schema is
intentionally lightweight:

.. code-block:: json

    {
      "storages": {
        "k2hf8a": {
          "name": "Personal",
          "folders": ["/projects", "/projects/draft"]
        }
      },
      "version": 1
    }

Folder paths are rooted (see ``storage_navigator.core.paths``). The root
``"/"`` is implicit and never stored.

The module provides two layers of API:

- ``load_storages()`` / ``save_storages()``: work with the full
  ``LocalStorages`` mapping.

- Convenience helpers such as ``create_folder()``, ``rename_folder()``,
  ``rename_storage()`` and ``remove_storage()`` that operate on the
  on-disk JSON by loading, modifying, and re-saving it.

``JsonStorageStore`` wraps those helpers in the asynchronous store
interface the controller expects and adds ``sync_storage``, which pushes
a snapshot through ``storage_navigator.core.sync_client``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from storage_navigator.core import config, sync_client
from storage_navigator.core.collaborators import IdentityProvider
from storage_navigator.core.errors import (
    FolderExistsError,
    FolderNotFoundError,
    InvalidFolderPathError,
    StorageNotFoundError,
)
from storage_navigator.core.models import Storage
from storage_navigator.core.paths import ROOT, ancestor_paths, is_same_or_descendant, is_valid_path

logger = logging.getLogger(__name__)


def _storages_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the path to the storages JSON file.

    If ``path`` is provided it is returned as a ``Path``; otherwise the
    centralized ``config.get_storages_path()`` is used.
    """
    if path is not None:
        return Path(path)
    return config.get_storages_path()


@dataclass
class StorageEntry:
    """Persisted fields of one storage."""

    name: str
    folders: List[str] = field(default_factory=list)


@dataclass
class LocalStorages:
    """Container for everything persisted in the storages JSON file.

    Attributes:
        storages: Mapping from storage id to its ``StorageEntry``. Dict
            order is the display order of the sidebar.
    """

    storages: Dict[str, StorageEntry] = field(default_factory=dict)

    def get(self, storage_id: str) -> StorageEntry:
        entry = self.storages.get(storage_id)
        if entry is None:
            raise StorageNotFoundError(f"Storage '{storage_id}' does not exist.")
        return entry


def _entry_to_dict(entry: StorageEntry) -> Dict:
    return {"name": entry.name, "folders": list(entry.folders)}


def _entry_from_dict(data: Mapping) -> Optional[StorageEntry]:
    """Build a ``StorageEntry`` from decoded JSON, or None if unusable.

    Folder entries that are not valid rooted paths are dropped so that a
    hand-edited file cannot break the tree. Missing parents of the kept
    folders are added, as ``create_folder`` does.
    """
    name = data.get("name")
    if not isinstance(name, str):
        return None
    folders_raw = data.get("folders", [])
    folders: List[str] = []
    if isinstance(folders_raw, list):
        for folder in folders_raw:
            if not is_valid_path(folder) or folder == ROOT:
                continue
            for prefix in ancestor_paths(folder):
                if prefix not in folders:
                    folders.append(prefix)
    return StorageEntry(name=name, folders=sorted(folders))


def _decode_json_storages(raw: Mapping) -> LocalStorages:
    """Decode a raw JSON object, tolerating missing keys and odd shapes."""
    storages: Dict[str, StorageEntry] = {}
    storages_raw = raw.get("storages", {})
    if isinstance(storages_raw, Mapping):
        for storage_id, data in storages_raw.items():
            if not isinstance(storage_id, str) or not isinstance(data, Mapping):
                continue
            entry = _entry_from_dict(data)
            if entry is None:
                logger.warning("Skipping malformed storage entry %r", storage_id)
                continue
            storages[storage_id] = entry
    return LocalStorages(storages=storages)


def load_storages(path: Optional[Path] = None) -> LocalStorages:
    """Load all storages from disk.

    A missing or unreadable file gives an empty ``LocalStorages``.
    """
    storages_path = _storages_path(path)
    if not storages_path.exists():
        return LocalStorages()

    try:
        with storages_path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s, starting empty: %s", storages_path, exc)
        return LocalStorages()

    if not isinstance(raw, Mapping):
        return LocalStorages()

    return _decode_json_storages(raw)


def save_storages(local: LocalStorages, path: Optional[Path] = None) -> None:
    """Write all storages to disk."""
    storages_path = _storages_path(path)
    if storages_path.parent and not storages_path.parent.exists():
        storages_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": config.FILE_FORMAT_VERSION,
        "storages": {
            storage_id: _entry_to_dict(entry)
            for storage_id, entry in local.storages.items()
        },
    }

    tmp = storages_path.with_suffix(storages_path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    tmp.replace(storages_path)


def _require_valid(folder_path: str) -> None:
    if not is_valid_path(folder_path) or folder_path == ROOT:
        raise InvalidFolderPathError(f"'{folder_path}' is not a valid folder path.")


def create_storage(name: str, path: Optional[Path] = None) -> str:
    """Add an empty storage named ``name`` and return its new id."""
    local = load_storages(path)
    storage_id = uuid.uuid4().hex[:12]
    while storage_id in local.storages:
        storage_id = uuid.uuid4().hex[:12]
    local.storages[storage_id] = StorageEntry(name=name)
    save_storages(local, path)
    return storage_id


def create_folder(storage_id: str, folder_path: str, path: Optional[Path] = None) -> LocalStorages:
    """Create ``folder_path`` in a storage, along with any missing parents.

    Creating a folder that already exists is an error rather than a
    silent success, so the user learns that nothing new was made. The
    root always exists.

    Raises:
        StorageNotFoundError: unknown storage id.
        FolderExistsError: the folder (or the root) already exists.
        InvalidFolderPathError: ``folder_path`` is not a valid path.
    """
    local = load_storages(path)
    entry = local.get(storage_id)

    if folder_path == ROOT or folder_path in entry.folders:
        raise FolderExistsError(f"Folder '{folder_path}' already exists.")
    _require_valid(folder_path)

    for prefix in ancestor_paths(folder_path):
        if prefix not in entry.folders:
            entry.folders.append(prefix)
    entry.folders.sort()

    save_storages(local, path)
    return local


def rename_folder(
    storage_id: str,
    old_path: str,
    new_path: str,
    path: Optional[Path] = None,
) -> LocalStorages:
    """Rename a folder and its whole subtree.

    For example, renaming ``"/projects/draft"`` to ``"/projects/final"``
    updates:

    * ``"/projects/draft"`` -> ``"/projects/final"``
    * ``"/projects/draft/old"`` -> ``"/projects/final/old"``

    Raises:
        StorageNotFoundError: unknown storage id.
        FolderNotFoundError: ``old_path`` is not in the storage.
        FolderExistsError: ``new_path`` is already taken.
        InvalidFolderPathError: either path is invalid or the new path
            lies inside the old subtree.
    """
    _require_valid(old_path)
    _require_valid(new_path)
    local = load_storages(path)
    entry = local.get(storage_id)

    if old_path not in entry.folders:
        raise FolderNotFoundError(f"Folder '{old_path}' does not exist.")
    if old_path == new_path:
        return local
    if new_path in entry.folders:
        raise FolderExistsError(f"Folder '{new_path}' already exists.")
    if is_same_or_descendant(new_path, old_path):
        raise InvalidFolderPathError(
            f"Cannot move folder '{old_path}' into its own subfolder '{new_path}'."
        )

    updated: List[str] = []
    for folder in entry.folders:
        if is_same_or_descendant(folder, old_path):
            folder = new_path + folder[len(old_path):]
        updated.append(folder)
    # The new parent may not be listed yet if it was implicit.
    for prefix in ancestor_paths(new_path):
        updated.append(prefix)
    entry.folders = sorted(set(updated))

    save_storages(local, path)
    return local


def rename_storage(storage_id: str, name: str, path: Optional[Path] = None) -> LocalStorages:
    """Change the display name of a storage."""
    local = load_storages(path)
    local.get(storage_id).name = name
    save_storages(local, path)
    return local


def remove_storage(storage_id: str, path: Optional[Path] = None) -> LocalStorages:
    """Forget a storage and its folder tree."""
    local = load_storages(path)
    local.get(storage_id)
    del local.storages[storage_id]
    save_storages(local, path)
    return local


def _snapshot(storage_id: str, entry: StorageEntry) -> Storage:
    return Storage(id=storage_id, name=entry.name, folders=tuple(entry.folders))


class JsonStorageStore:
    """Asynchronous store backed by the storages JSON file.

    Folder and storage mutations are small file rewrites and run inline.
    ``sync_storage`` does network I/O in a worker thread through
    ``asyncio.to_thread``. The GUI drives each flow with ``asyncio.run``
    from a slot, so the Qt event loop still waits for the push to finish.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        path: Optional[Path] = None,
        sync_base_url: Optional[str] = None,
    ) -> None:
        self._identity_provider = identity_provider
        self._path = path
        self._sync_base_url = sync_base_url

    def list_storages(self) -> List[Storage]:
        local = load_storages(self._path)
        return [_snapshot(sid, entry) for sid, entry in local.storages.items()]

    def get_storage(self, storage_id: str) -> Storage:
        return _snapshot(storage_id, load_storages(self._path).get(storage_id))

    def create_storage(self, name: str) -> str:
        return create_storage(name, self._path)

    async def create_folder(self, storage_id: str, path: str) -> None:
        create_folder(storage_id, path, self._path)
        logger.info("Created folder %s in storage %s", path, storage_id)

    async def rename_folder(self, storage_id: str, old_path: str, new_path: str) -> None:
        rename_folder(storage_id, old_path, new_path, self._path)
        logger.info("Renamed folder %s to %s in storage %s", old_path, new_path, storage_id)

    async def rename_storage(self, storage_id: str, name: str) -> None:
        rename_storage(storage_id, name, self._path)
        logger.info("Renamed storage %s to %r", storage_id, name)

    async def remove_storage(self, storage_id: str) -> None:
        remove_storage(storage_id, self._path)
        logger.info("Removed storage %s", storage_id)

    async def sync_storage(self, storage_id: str) -> None:
        storage = self.get_storage(storage_id)
        identity = self._identity_provider.current_identity()
        await asyncio.to_thread(
            sync_client.push_storage,
            storage,
            identity,
            self._sync_base_url,
        )
        logger.info("Synced storage %s", storage_id)
