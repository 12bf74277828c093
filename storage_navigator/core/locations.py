"""
Location strings for storage pages.

The navigator works with plain location strings such as
``/app/storages/<id>/notes/a/b``. This module is the single place that
knows how they are built, so that the active-page highlight and the
post-mutation navigation agree on the exact same strings.
"""

from __future__ import annotations

from storage_navigator.core.models import ActivePages, NavigationTarget
from storage_navigator.core.paths import ROOT, SEPARATOR

#: Prefix shared by every storage location.
STORAGES_PREFIX = "/app/storages"

#: Note ids appear as the last location segment with this prefix.
NOTE_ID_PREFIX = "note:"


def storage_location(storage_id: str) -> str:
    """Storage settings page."""
    return f"{STORAGES_PREFIX}/{storage_id}"


def all_notes_location(storage_id: str) -> str:
    return f"{storage_location(storage_id)}/notes"


def trashcan_location(storage_id: str) -> str:
    return f"{storage_location(storage_id)}/trashcan"


def attachments_location(storage_id: str) -> str:
    return f"{storage_location(storage_id)}/attachments"


def folder_location(storage_id: str, folder_path: str) -> str:
    """Location of a folder's note list; the root maps to All Notes."""
    if folder_path == ROOT:
        return all_notes_location(storage_id)
    return all_notes_location(storage_id) + folder_path


def target_location(target: NavigationTarget) -> str:
    return folder_location(target.storage_id, target.path)


def location_without_note_id(location: str) -> str:
    """Drop a trailing ``note:<id>`` segment, if any."""
    head, sep, last = location.rpartition(SEPARATOR)
    if sep and last.startswith(NOTE_ID_PREFIX):
        return head
    return location


def compute_active_pages(current_location: str, storage_id: str) -> ActivePages:
    """
    Decide which special page of ``storage_id`` is the current one.

    Only exact equality counts. A folder location under ``.../notes/...``
    does not make All Notes active.
    """
    return ActivePages(
        all_notes=current_location == all_notes_location(storage_id),
        trashcan=current_location == trashcan_location(storage_id),
        attachments=current_location == attachments_location(storage_id),
    )
