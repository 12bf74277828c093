"""
Exceptions raised by the storage navigator core and its reference
collaborators.

The controller never lets any of these escape a user flow: store and
sync failures are caught where the mutation is invoked and turned into
a user-visible notice. They exist so that collaborators can fail
loudly and so that the notice text can say something specific.
"""

from __future__ import annotations


class StorageNavigatorError(Exception):
    """Base class for all storage navigator errors."""


class InvalidFolderPathError(StorageNavigatorError, ValueError):
    """User input that cannot be turned into a valid folder path."""


class StoreError(StorageNavigatorError):
    """A store mutation could not be applied."""


class StorageNotFoundError(StoreError, KeyError):
    """No storage with the given id is known to the store."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class FolderExistsError(StoreError):
    """The target folder path is already present in the storage."""


class FolderNotFoundError(StoreError):
    """The folder path to act on is not present in the storage."""


class IdentityRequiredError(StorageNavigatorError):
    """An operation needs an authenticated identity and none is available."""


class SyncError(StorageNavigatorError):
    """Pushing a storage to the sync server failed."""


class SyncNotConfiguredError(SyncError):
    """No sync server URL is configured."""
