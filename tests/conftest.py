"""Shared fakes for the controller tests."""

from __future__ import annotations

from collections import deque
from typing import List, Optional

import pytest

from storage_navigator.core.controller import PathTreeController
from storage_navigator.core.expansion import TreeExpansionState
from storage_navigator.core.models import Identity, Storage


class FakeDialogs:
    """Answers prompts and confirmations from pre-loaded queues."""

    def __init__(self) -> None:
        self.prompt_answers: deque = deque()
        self.confirm_answers: deque = deque()
        self.prompts: list = []
        self.confirms: list = []

    async def prompt(self, spec):
        self.prompts.append(spec)
        return self.prompt_answers.popleft()

    async def confirm(self, spec):
        self.confirms.append(spec)
        return self.confirm_answers.popleft()


class FakeStore:
    """Records every call; raises ``fail_with`` if set."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail_with: Optional[BaseException] = None

    async def _record(self, *call) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def create_folder(self, storage_id, path):
        await self._record("create_folder", storage_id, path)

    async def rename_folder(self, storage_id, old_path, new_path):
        await self._record("rename_folder", storage_id, old_path, new_path)

    async def rename_storage(self, storage_id, name):
        await self._record("rename_storage", storage_id, name)

    async def remove_storage(self, storage_id):
        await self._record("remove_storage", storage_id)

    async def sync_storage(self, storage_id):
        await self._record("sync_storage", storage_id)


class FakeNavigator:
    def __init__(self, location: str = "") -> None:
        self.location = location
        self.pushed: List[str] = []

    def push(self, location: str) -> None:
        self.pushed.append(location)
        self.location = location

    def current_location(self) -> str:
        return self.location


class FakeNotifier:
    def __init__(self) -> None:
        self.messages: List[tuple] = []

    def push_message(self, title: str, description: str) -> None:
        self.messages.append((title, description))


class FakeIdentityProvider:
    def __init__(self, identity: Optional[Identity] = None) -> None:
        self.identity = identity

    def current_identity(self) -> Optional[Identity]:
        return self.identity


@pytest.fixture
def storage() -> Storage:
    return Storage(id="s1", name="Personal", folders=("/projects", "/projects/draft"))


@pytest.fixture
def dialogs() -> FakeDialogs:
    return FakeDialogs()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def expansion() -> TreeExpansionState:
    return TreeExpansionState()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def controller(store, dialogs, navigator, expansion, notifier, identity_provider) -> PathTreeController:
    return PathTreeController(
        store=store,
        dialogs=dialogs,
        navigator=navigator,
        expansion=expansion,
        notifier=notifier,
        identity_provider=identity_provider,
    )


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point ``Path.home()`` at a temporary directory."""
    monkeypatch.setattr("pathlib.Path.home", classmethod(lambda cls: tmp_path))
    return tmp_path
