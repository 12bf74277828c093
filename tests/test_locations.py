"""Tests for location strings and the active-page highlight."""

from storage_navigator.core.locations import (
    all_notes_location,
    compute_active_pages,
    folder_location,
    location_without_note_id,
    target_location,
)
from storage_navigator.core.models import ActivePages, NavigationTarget


def test_folder_location():
    assert folder_location("s1", "/projects/final") == "/app/storages/s1/notes/projects/final"
    assert folder_location("s1", "/") == all_notes_location("s1") == "/app/storages/s1/notes"


def test_target_location():
    assert target_location(NavigationTarget("s1", "/a")) == "/app/storages/s1/notes/a"


def test_each_page_is_active_only_on_exact_match():
    assert compute_active_pages("/app/storages/s1/notes", "s1") == ActivePages(all_notes=True)
    assert compute_active_pages("/app/storages/s1/trashcan", "s1") == ActivePages(trashcan=True)
    assert compute_active_pages("/app/storages/s1/attachments", "s1") == ActivePages(attachments=True)


def test_prefix_does_not_make_a_page_active():
    assert compute_active_pages("/app/storages/s1/notes/projects", "s1") == ActivePages()
    assert compute_active_pages("/app/storages/s1/notes/", "s1") == ActivePages()


def test_other_storage_is_not_active():
    assert compute_active_pages("/app/storages/s2/notes", "s1") == ActivePages()


def test_location_without_note_id():
    assert (
        location_without_note_id("/app/storages/s1/notes/a/note:abc123")
        == "/app/storages/s1/notes/a"
    )
    assert location_without_note_id("/app/storages/s1/notes/a") == "/app/storages/s1/notes/a"
    assert location_without_note_id("") == ""
