"""
Sidebar controller for one or more storages.

Design
------
``PathTreeController`` keeps the folder tree, the highlighted location
and the structural mutations consistent with each other. It holds no
state of its own: every flow reads what it needs from its arguments and
collaborators, makes at most one store call, and then tells the
navigator and the expansion state what to show.

Each user flow follows the same shape:

    dialog -> validate/compute -> one store call -> navigate + expand

* A dismissed dialog (``None``) ends the flow with no side effects.
* A rename to the same name ends the flow before any store call.
* A failed store call is logged and reported once through the notifier.
  Nothing is retried and nothing needs rolling back.
* Navigation and expansion happen only after the store call succeeded.

The pure gates (``gate_sync``, ``confirm_remove_storage``) and the path
helpers take every input explicitly, so they can be tested without any
collaborator at all.
"""

from __future__ import annotations

import logging
from typing import Optional

from storage_navigator.core.actions import ActionKind, MenuAction
from storage_navigator.core.collaborators import (
    Dialogs,
    ExpansionState,
    IdentityProvider,
    Navigator,
    Notifier,
    Store,
)
from storage_navigator.core.errors import InvalidFolderPathError
from storage_navigator.core.locations import (
    compute_active_pages,
    location_without_note_id,
    storage_location,
    target_location,
)
from storage_navigator.core.models import (
    NOOP,
    ActivePages,
    ConfirmSpec,
    Identity,
    NavigationOutcome,
    PromptSpec,
    Storage,
    SyncDecision,
)
from storage_navigator.core.paths import (
    ROOT,
    compute_rename_target,
    create_prompt_default,
    leaf_name,
    normalize_create_path,
)
from storage_navigator.core.sync_client import describe_sync_error

logger = logging.getLogger(__name__)

ERROR_TITLE = "Error"
NO_IDENTITY_REASON = "no authenticated identity"
NO_USER_TITLE = "No User Error"
NO_USER_DESCRIPTION = "Please login first to sync the storage."

#: Button order of the remove-storage confirmation.
REMOVE_CHOICE = 0
CANCEL_CHOICE = 1


def gate_sync(identity: Optional[Identity]) -> SyncDecision:
    """Allow sync only when someone is logged in."""
    if identity is None:
        return SyncDecision.deny(NO_IDENTITY_REASON)
    return SyncDecision.allow()


def confirm_remove_storage(choice: Optional[int]) -> bool:
    """True only if the user picked the "remove" button."""
    return choice == REMOVE_CHOICE


class PathTreeController:
    """
    Orchestrates folder and storage mutations for the sidebar.

    Args:
        store: Performs the actual mutations.
        dialogs: Shows prompt and confirmation dialogs.
        navigator: Moves the visible location and reports the current one.
        expansion: Records which tree nodes must be expanded.
        notifier: Shows user-visible failure notices.
        identity_provider: Reports the logged-in user, if any.
    """

    def __init__(
        self,
        store: Store,
        dialogs: Dialogs,
        navigator: Navigator,
        expansion: ExpansionState,
        notifier: Notifier,
        identity_provider: IdentityProvider,
    ) -> None:
        self._store = store
        self._dialogs = dialogs
        self._navigator = navigator
        self._expansion = expansion
        self._notifier = notifier
        self._identity_provider = identity_provider

    # ------------------------------------------------------------------
    # Pure operations
    # ------------------------------------------------------------------
    normalize_create_path = staticmethod(normalize_create_path)
    compute_rename_target = staticmethod(compute_rename_target)
    gate_sync = staticmethod(gate_sync)
    confirm_remove_storage = staticmethod(confirm_remove_storage)

    def active_pages(self, storage: Storage) -> ActivePages:
        """Active-page flags of ``storage`` for the navigator's location."""
        current = location_without_note_id(self._navigator.current_location())
        return compute_active_pages(current, storage.id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    async def apply_create(self, storage_id: str, path: str) -> NavigationOutcome:
        """Create ``path`` and describe where to go on success."""
        try:
            await self._store.create_folder(storage_id, path)
        except Exception as exc:
            logger.warning("Creating folder %s in %s failed: %s", path, storage_id, exc)
            return NavigationOutcome.failed(str(exc))
        return NavigationOutcome.succeeded(storage_id, path)

    async def apply_rename(self, storage_id: str, old_path: str, new_path: str) -> NavigationOutcome:
        """Rename ``old_path`` to ``new_path`` and describe where to go on success."""
        try:
            await self._store.rename_folder(storage_id, old_path, new_path)
        except Exception as exc:
            logger.warning(
                "Renaming folder %s to %s in %s failed: %s", old_path, new_path, storage_id, exc
            )
            return NavigationOutcome.failed(str(exc))
        return NavigationOutcome.succeeded(storage_id, new_path)

    def emit(self, outcome: NavigationOutcome) -> None:
        """Hand a succeeded outcome to the navigator and the expansion state."""
        if not outcome.ok:
            return
        self._navigator.push(target_location(outcome.target))
        self._expansion.open_recursively(outcome.expansion)

    # ------------------------------------------------------------------
    # User flows
    # ------------------------------------------------------------------
    async def create_folder(self, storage: Storage, base_path: str = ROOT) -> None:
        value = await self._dialogs.prompt(
            PromptSpec(
                title="Create a Folder",
                message="Enter the path where do you want to create a folder",
                default_value=create_prompt_default(base_path),
                submit_label="Create Folder",
            )
        )
        if value is None:
            return

        try:
            path = normalize_create_path(base_path, value)
        except InvalidFolderPathError as exc:
            self._notifier.push_message("Invalid folder path", str(exc))
            return

        outcome = await self.apply_create(storage.id, path)
        if not outcome.ok:
            self._notifier.push_message(
                ERROR_TITLE, f"Could not create folder '{path}'. It may already exist."
            )
            return
        self.emit(outcome)

    async def rename_folder(self, storage: Storage, folder_path: str) -> None:
        if folder_path == ROOT:
            return
        value = await self._dialogs.prompt(
            PromptSpec(
                title="Rename Folder",
                message="Enter the new name for the folder",
                default_value=leaf_name(folder_path),
                submit_label="Rename Folder",
            )
        )

        try:
            new_path = compute_rename_target(folder_path, value)
        except InvalidFolderPathError as exc:
            self._notifier.push_message("Invalid folder name", str(exc))
            return
        if new_path is NOOP:
            return

        outcome = await self.apply_rename(storage.id, folder_path, new_path)
        if not outcome.ok:
            self._notifier.push_message(
                ERROR_TITLE, "Failed to rename the folder. The name may already be in use."
            )
            return
        self._expansion.move_subtree(storage.id, folder_path, new_path)
        self.emit(outcome)

    async def rename_storage(self, storage: Storage) -> None:
        value = await self._dialogs.prompt(
            PromptSpec(
                title=f'Rename "{storage.name}" storage',
                message="Enter the new name for the storage",
                default_value=storage.name,
                submit_label="Rename Storage",
            )
        )
        if value is None or value == "" or value == storage.name:
            return

        try:
            await self._store.rename_storage(storage.id, value)
        except Exception as exc:
            logger.warning("Renaming storage %s failed: %s", storage.id, exc)
            self._notifier.push_message(ERROR_TITLE, "Failed to rename the storage.")

    async def remove_storage(self, storage: Storage) -> None:
        choice = await self._dialogs.confirm(
            ConfirmSpec(
                title=f'Remove "{storage.name}" storage',
                message="The storage will be removed from this app. This cannot be undone.",
                buttons=("Remove Storage", "Cancel"),
                default_index=REMOVE_CHOICE,
                cancel_index=CANCEL_CHOICE,
                warning=True,
            )
        )
        if not confirm_remove_storage(choice):
            return

        try:
            await self._store.remove_storage(storage.id)
        except Exception as exc:
            logger.warning("Removing storage %s failed: %s", storage.id, exc)
            self._notifier.push_message(ERROR_TITLE, "Failed to remove the storage.")

    async def sync_storage(self, storage: Storage) -> None:
        decision = gate_sync(self._identity_provider.current_identity())
        if not decision.allowed:
            logger.info("Sync of %s denied: %s", storage.id, decision.reason)
            self._notifier.push_message(NO_USER_TITLE, NO_USER_DESCRIPTION)
            return

        try:
            await self._store.sync_storage(storage.id)
        except Exception as exc:
            logger.warning("Syncing storage %s failed: %s", storage.id, exc)
            self._notifier.push_message("Sync Error", describe_sync_error(exc))

    def open_settings(self, storage: Storage) -> None:
        self._navigator.push(storage_location(storage.id))

    async def dispatch(self, storage: Storage, action: MenuAction) -> None:
        """Run the flow a menu entry stands for."""
        kind = action.kind
        if kind is ActionKind.CREATE_FOLDER:
            await self.create_folder(storage, action.folder_path or ROOT)
        elif kind is ActionKind.RENAME_FOLDER:
            if action.folder_path:
                await self.rename_folder(storage, action.folder_path)
        elif kind is ActionKind.RENAME_STORAGE:
            await self.rename_storage(storage)
        elif kind is ActionKind.REMOVE_STORAGE:
            await self.remove_storage(storage)
        elif kind is ActionKind.SYNC_STORAGE:
            await self.sync_storage(storage)
        elif kind is ActionKind.OPEN_SETTINGS:
            self.open_settings(storage)
