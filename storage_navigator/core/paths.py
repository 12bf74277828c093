"""
Folder path helpers.

Folder paths inside a storage are rooted, ``/``-separated strings:

    "/"            the storage root
    "/a"           a top-level folder
    "/a/b"         a nested folder

A non-root path never ends with the separator and never contains an
empty segment. Every function here is pure; nothing touches a store.
"""

from __future__ import annotations

import enum
from typing import List, Optional, Union

from storage_navigator.core.errors import InvalidFolderPathError

SEPARATOR = "/"
ROOT = "/"


class NoOp(enum.Enum):
    """Marker returned when a requested change would not change anything."""

    NOOP = "noop"

    def __repr__(self) -> str:
        return "NOOP"


NOOP = NoOp.NOOP


def is_valid_path(path: object) -> bool:
    """Return True if ``path`` satisfies the folder path invariant."""
    if not isinstance(path, str) or not path.startswith(SEPARATOR):
        return False
    if path == ROOT:
        return True
    return all(segment for segment in path[1:].split(SEPARATOR))


def split_path(path: str) -> List[str]:
    """Split a path into its non-root segments (``"/a/b"`` -> ``["a", "b"]``)."""
    if path == ROOT:
        return []
    return path[1:].split(SEPARATOR)


def join_path(parent: str, name: str) -> str:
    """Append a single segment to ``parent``."""
    if parent == ROOT:
        return ROOT + name
    return parent + SEPARATOR + name


def parent_path(path: str) -> str:
    """Return the parent of ``path``; the root is its own parent."""
    if path == ROOT or SEPARATOR not in path[1:]:
        return ROOT
    return path.rsplit(SEPARATOR, 1)[0]


def leaf_name(path: str) -> str:
    """Return the last segment of ``path`` (``""`` for the root)."""
    return path.split(SEPARATOR)[-1]


def ancestor_paths(path: str) -> List[str]:
    """
    Return every prefix of ``path`` down to the path itself.

    ``"/a/b/c"`` gives ``["/a", "/a/b", "/a/b/c"]``; the root gives an
    empty list since it is always visible.
    """
    prefixes: List[str] = []
    current = ROOT
    for segment in split_path(path):
        current = join_path(current, segment)
        prefixes.append(current)
    return prefixes


def is_same_or_descendant(path: str, ancestor: str) -> bool:
    """True if ``path`` equals ``ancestor`` or lies inside its subtree."""
    if ancestor == ROOT:
        return True
    return path == ancestor or path.startswith(ancestor + SEPARATOR)


def create_prompt_default(folder_path: str) -> str:
    """Prefill for the create-folder prompt: the folder plus a separator."""
    return ROOT if folder_path == ROOT else folder_path + SEPARATOR


def normalize_create_path(base_path: str, raw_input: str) -> str:
    """
    Turn create-folder input into a folder path.

    Exactly one trailing separator is stripped; if nothing is left the
    result is the root. Input that is not rooted is taken relative to
    ``base_path``.

    Raises:
        InvalidFolderPathError: if the result still breaks the path
            invariant (empty input, doubled or trailing separators).
    """
    value = raw_input
    if value.endswith(SEPARATOR):
        value = value[:-1]
        if not value:
            return ROOT
    if not value:
        raise InvalidFolderPathError("Folder path cannot be empty.")
    if not value.startswith(SEPARATOR):
        value = join_path(base_path, value)
    if not is_valid_path(value):
        raise InvalidFolderPathError(f"'{raw_input}' is not a valid folder path.")
    return value


def compute_rename_target(old_path: str, raw_new_leaf: Optional[str]) -> Union[str, NoOp]:
    """
    Compute the path a folder ends up at when its last segment is renamed.

    Returns ``NOOP`` when ``raw_new_leaf`` is missing, empty, or exactly
    equal to the current last segment. Comparison is plain string
    equality: case and whitespace matter.

    Raises:
        InvalidFolderPathError: if the new leaf contains a separator.
    """
    segments = old_path.split(SEPARATOR)
    old_leaf = segments.pop()
    if raw_new_leaf is None or raw_new_leaf == "" or raw_new_leaf == old_leaf:
        return NOOP
    if SEPARATOR in raw_new_leaf:
        raise InvalidFolderPathError("Folder names cannot contain '/'.")
    return SEPARATOR.join(segments) + SEPARATOR + raw_new_leaf
