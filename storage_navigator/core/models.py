from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from storage_navigator.core.paths import NOOP, NoOp, ancestor_paths


#: A storage is referred to by its id everywhere in the core.
StorageRef = str

#: Result of ``compute_rename_target``: either a new path or ``NOOP``.
RenameTarget = Union[str, NoOp]


@dataclass(frozen=True)
class Storage:
    """
    Read-only snapshot of a storage as handed to the controller.

    The controller never mutates a storage itself; it only reads the id
    and name to build prompts and to address store calls.
    """

    #: Stable storage id (``StorageRef``).
    id: StorageRef

    #: Human-readable storage name shown in the sidebar header.
    name: str

    #: Folder paths known to the store, e.g. ``["/a", "/a/b"]``. The
    #: root ``"/"`` is implicit and never listed.
    folders: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Identity:
    """
    The authenticated user context.

    Only presence or absence matters to the controller. The name and
    token are used by the reference sync client.
    """

    display_name: str
    token: Optional[str] = None


@dataclass(frozen=True)
class NavigationTarget:
    """Where the view should move to after a successful mutation."""

    storage_id: StorageRef
    path: str


@dataclass(frozen=True)
class ExpansionRequest:
    """Ask the tree to show every ancestor of ``path`` expanded."""

    storage_id: StorageRef
    path: str

    @property
    def paths(self) -> List[str]:
        """Every prefix of ``path`` that must be expanded, outermost first."""
        return ancestor_paths(self.path)


class OutcomeStatus(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class NavigationOutcome:
    """
    Result of ``apply_create`` / ``apply_rename``.

    A succeeded outcome carries both the navigation target and the
    expansion request; a failed one carries only an opaque error
    description.
    """

    status: OutcomeStatus
    target: Optional[NavigationTarget] = None
    expansion: Optional[ExpansionRequest] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, storage_id: StorageRef, path: str) -> "NavigationOutcome":
        return cls(
            status=OutcomeStatus.SUCCEEDED,
            target=NavigationTarget(storage_id, path),
            expansion=ExpansionRequest(storage_id, path),
        )

    @classmethod
    def failed(cls, error: str) -> "NavigationOutcome":
        return cls(status=OutcomeStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED


@dataclass(frozen=True)
class SyncDecision:
    """Whether the sync action may run, and why not if it may not."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "SyncDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "SyncDecision":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class ActivePages:
    """Which of the storage's special pages matches the current location."""

    all_notes: bool = False
    trashcan: bool = False
    attachments: bool = False


@dataclass(frozen=True)
class PromptSpec:
    """Everything a text-input dialog needs to show itself."""

    title: str
    message: str
    default_value: str = ""
    submit_label: str = "OK"


@dataclass(frozen=True)
class ConfirmSpec:
    """
    A choice dialog with a fixed list of buttons.

    The dialog returns the index of the chosen button, or ``None`` if it
    was dismissed.
    """

    title: str
    message: str
    buttons: Sequence[str]
    default_index: int = 0
    cancel_index: Optional[int] = None
    warning: bool = False
