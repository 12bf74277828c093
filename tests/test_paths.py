"""Tests for folder path helpers."""

import pytest

from storage_navigator.core.errors import InvalidFolderPathError
from storage_navigator.core.paths import (
    NOOP,
    ancestor_paths,
    compute_rename_target,
    create_prompt_default,
    is_same_or_descendant,
    is_valid_path,
    leaf_name,
    normalize_create_path,
    parent_path,
)


class TestIsValidPath:
    @pytest.mark.parametrize("path", ["/", "/a", "/a/b", "/notes/ideas"])
    def test_valid(self, path):
        assert is_valid_path(path)

    @pytest.mark.parametrize("path", ["", "a", "a/b", "/a/", "/a//b", "//", None])
    def test_invalid(self, path):
        assert not is_valid_path(path)


class TestNormalizeCreatePath:
    def test_root_input_gives_root(self):
        assert normalize_create_path("/anything", "/") == "/"

    def test_strips_one_trailing_separator(self):
        assert normalize_create_path("/notes", "/notes/ideas/") == "/notes/ideas"

    def test_without_trailing_separator_is_unchanged(self):
        assert normalize_create_path("/", "/a/b") == "/a/b"

    @pytest.mark.parametrize("raw", ["/a/", "/a/b/", "/x/y/z/", "/a", "/a/b"])
    def test_never_ends_with_separator(self, raw):
        result = normalize_create_path("/", raw)
        assert result != "/"
        assert not result.endswith("/")

    def test_relative_input_is_joined_to_base(self):
        assert normalize_create_path("/notes", "ideas") == "/notes/ideas"
        assert normalize_create_path("/", "ideas/") == "/ideas"

    def test_double_trailing_separator_is_rejected(self):
        with pytest.raises(InvalidFolderPathError):
            normalize_create_path("/", "/a//")

    def test_empty_input_is_rejected(self):
        with pytest.raises(InvalidFolderPathError):
            normalize_create_path("/", "")

    def test_scenario_create_under_notes(self):
        base = "/notes"
        assert create_prompt_default(base) == "/notes/"
        assert normalize_create_path(base, "/notes/ideas/") == "/notes/ideas"


class TestComputeRenameTarget:
    def test_replaces_last_segment(self):
        assert compute_rename_target("/a/b", "c") == "/a/c"

    def test_top_level_folder(self):
        assert compute_rename_target("/a", "z") == "/z"

    @pytest.mark.parametrize("path", ["/a", "/a/b", "/projects/draft"])
    def test_same_leaf_is_noop(self, path):
        assert compute_rename_target(path, leaf_name(path)) is NOOP

    @pytest.mark.parametrize("leaf", [None, ""])
    def test_missing_leaf_is_noop(self, leaf):
        assert compute_rename_target("/a/b", leaf) is NOOP

    def test_comparison_is_case_and_whitespace_sensitive(self):
        assert compute_rename_target("/a/b", "B") == "/a/B"
        assert compute_rename_target("/a/b", " b") == "/a/ b"

    def test_separator_in_leaf_is_rejected(self):
        with pytest.raises(InvalidFolderPathError):
            compute_rename_target("/a/b", "c/d")


def test_ancestor_paths():
    assert ancestor_paths("/projects/final") == ["/projects", "/projects/final"]
    assert ancestor_paths("/a") == ["/a"]
    assert ancestor_paths("/") == []


def test_parent_and_leaf():
    assert parent_path("/a/b") == "/a"
    assert parent_path("/a") == "/"
    assert parent_path("/") == "/"
    assert leaf_name("/a/b") == "b"


def test_is_same_or_descendant():
    assert is_same_or_descendant("/a", "/a")
    assert is_same_or_descendant("/a/b", "/a")
    assert not is_same_or_descendant("/ab", "/a")
    assert is_same_or_descendant("/anything", "/")


def test_create_prompt_default_for_root():
    assert create_prompt_default("/") == "/"
