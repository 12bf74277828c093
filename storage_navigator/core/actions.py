"""
Tagged action lists for the sidebar.

The view never builds closures for its menus. It asks this module for
a list of ``MenuAction`` entries, shows their labels, and hands the
chosen entry back to ``PathTreeController.dispatch``. Keeping the lists
static makes the available actions testable without any widgets.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from storage_navigator.core.paths import ROOT


class ActionKind(enum.Enum):
    CREATE_FOLDER = "create_folder"
    RENAME_FOLDER = "rename_folder"
    RENAME_STORAGE = "rename_storage"
    REMOVE_STORAGE = "remove_storage"
    SYNC_STORAGE = "sync_storage"
    OPEN_SETTINGS = "open_settings"


@dataclass(frozen=True)
class MenuAction:
    """One entry of a context menu or header toolbar."""

    label: str
    kind: ActionKind
    #: Folder the action applies to; ``None`` for storage-level actions.
    folder_path: Optional[str] = None


def header_actions() -> List[MenuAction]:
    """Buttons shown next to the storage name."""
    return [
        MenuAction("New folder…", ActionKind.CREATE_FOLDER, ROOT),
        MenuAction("Sync storage", ActionKind.SYNC_STORAGE),
        MenuAction("Storage settings", ActionKind.OPEN_SETTINGS),
    ]


def storage_context_actions() -> List[MenuAction]:
    """Context menu of the storage header."""
    return [
        MenuAction("Rename storage…", ActionKind.RENAME_STORAGE),
        MenuAction("Remove storage…", ActionKind.REMOVE_STORAGE),
    ]


def folder_context_actions(folder_path: str) -> List[MenuAction]:
    """Context menu of a folder node. The root cannot be renamed."""
    if folder_path == ROOT:
        return [MenuAction("New folder…", ActionKind.CREATE_FOLDER, ROOT)]
    return [
        MenuAction("New subfolder…", ActionKind.CREATE_FOLDER, folder_path),
        MenuAction("Rename folder…", ActionKind.RENAME_FOLDER, folder_path),
    ]
