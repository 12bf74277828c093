"""
Expanded/collapsed state of folder nodes in the sidebar tree.

State is keyed by ``(storage_id, folder_path)``. The tree view reads it
when it is rebuilt and writes to it when the user expands or collapses a
node. The controller writes to it through ``open_recursively`` after a
folder is created or renamed so the new folder is visible, and through
``move_subtree`` so a renamed folder keeps its expanded descendants.
"""

from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from storage_navigator.core.models import ExpansionRequest
from storage_navigator.core.paths import is_same_or_descendant

_KEY_SEPARATOR = ":"


def expansion_key(storage_id: str, folder_path: str) -> str:
    """Flat string key, e.g. ``"k2hf8a:/projects/final"``."""
    return f"{storage_id}{_KEY_SEPARATOR}{folder_path}"


class TreeExpansionState:
    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._expanded: Set[Tuple[str, str]] = set()
        self.load_keys(keys)

    def is_expanded(self, storage_id: str, folder_path: str) -> bool:
        return (storage_id, folder_path) in self._expanded

    def set_expanded(self, storage_id: str, folder_path: str, expanded: bool) -> None:
        if expanded:
            self._expanded.add((storage_id, folder_path))
        else:
            self._expanded.discard((storage_id, folder_path))

    def open_recursively(self, request: ExpansionRequest) -> None:
        for prefix in request.paths:
            self._expanded.add((request.storage_id, prefix))

    def move_subtree(self, storage_id: str, old_path: str, new_path: str) -> None:
        """Re-key ``old_path`` and its descendants after a folder rename."""
        moved = {
            (sid, p) for sid, p in self._expanded
            if sid == storage_id and is_same_or_descendant(p, old_path)
        }
        self._expanded -= moved
        for sid, p in moved:
            self._expanded.add((sid, new_path + p[len(old_path):]))

    def expanded_paths(self, storage_id: str) -> List[str]:
        return sorted(p for sid, p in self._expanded if sid == storage_id)

    def forget_storage(self, storage_id: str) -> None:
        self._expanded = {item for item in self._expanded if item[0] != storage_id}

    # Flat string form, for QSettings.
    def to_keys(self) -> List[str]:
        return sorted(expansion_key(sid, p) for sid, p in self._expanded)

    def load_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            storage_id, sep, folder_path = str(key).partition(_KEY_SEPARATOR)
            if sep and storage_id and folder_path:
                self._expanded.add((storage_id, folder_path))
