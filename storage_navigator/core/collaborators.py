"""
Contracts for everything the controller talks to but does not own.

The GUI provides Qt-backed implementations (see
``storage_navigator.gui.qt_collaborators`` and ``gui.main_window``);
the core ships reference implementations for the store, the
tree-expansion state and the identity provider. Tests use in-memory
fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol

from storage_navigator.core.models import (
    ConfirmSpec,
    ExpansionRequest,
    Identity,
    PromptSpec,
)


class Dialogs(Protocol):
    async def prompt(self, spec: PromptSpec) -> Optional[str]:
        """Ask for a line of text; ``None`` if the dialog was dismissed."""

    async def confirm(self, spec: ConfirmSpec) -> Optional[int]:
        """Ask for a choice; the button index or ``None`` if dismissed."""


class Store(Protocol):
    async def create_folder(self, storage_id: str, path: str) -> None: ...

    async def rename_folder(self, storage_id: str, old_path: str, new_path: str) -> None: ...

    async def rename_storage(self, storage_id: str, name: str) -> None: ...

    async def remove_storage(self, storage_id: str) -> None: ...

    async def sync_storage(self, storage_id: str) -> None: ...


class Navigator(Protocol):
    def push(self, location: str) -> None: ...

    def current_location(self) -> str: ...


class ExpansionState(Protocol):
    def open_recursively(self, request: ExpansionRequest) -> None:
        """Mark every ancestor of ``request.path`` as expanded."""

    def move_subtree(self, storage_id: str, old_path: str, new_path: str) -> None:
        """Carry the state of ``old_path`` and its descendants over to ``new_path``."""


class Notifier(Protocol):
    def push_message(self, title: str, description: str) -> None: ...


class IdentityProvider(Protocol):
    def current_identity(self) -> Optional[Identity]: ...
