"""
Main window for the storage navigator GUI.

Design overview
---------------

The main window ties together the core subsystems:

Storages and configuration
--------------------------
- Storages (name + folder tree) live in ``storages.json`` inside the
  data directory chosen in ``~/.storage_navigator/config.json``.
- The saved login session lives next to it in ``identity.json``; its
  presence is what allows the sync action.

Views
-----
- Left panel: ``StorageTree``, one node per storage with All Notes,
  the folder hierarchy, Attachments and Trash.
- Right panel: the current location. Note lists are rendered by other
  parts of the application; this window only shows where you are.

Interaction flow
----------------
- Clicking a page or folder pushes its location.
- Context-menu entries are forwarded to ``PathTreeController.dispatch``.
  The controller prompts, mutates the store, and on success pushes the
  new location and expands the new folder's ancestors.
- After every flow the tree is rebuilt from the store so that it
  reflects what was actually persisted.

UI-only state (expanded folders, last location) is stored via
``QSettings`` so it survives restarts without touching the data
directory.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings, Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from storage_navigator.core.controller import PathTreeController
from storage_navigator.core.expansion import TreeExpansionState
from storage_navigator.core.identity import FileIdentityProvider, clear_identity, save_identity
from storage_navigator.core.locations import storage_location
from storage_navigator.core.models import Identity, Storage
from storage_navigator.core.storage_store import JsonStorageStore
from storage_navigator.gui.qt_collaborators import QtDialogs, QtNotifier
from storage_navigator.gui.storage_tree import StorageTree

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main window: storage tree on the left, current location on the right.

    The window also acts as the navigator collaborator of the controller
    (``push`` / ``current_location``).
    """

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        storages_path: Optional[Path] = None,
        identity_path: Optional[Path] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Storage Navigator")

        # Per-machine UI settings (expanded folders, last location).
        self._settings = QSettings("StorageNavigator", "Sidebar")

        self._location = ""
        self._storages: list[Storage] = []

        # Explicit paths override the configured data directory.
        self._identity_path = identity_path
        self._identity_provider = FileIdentityProvider(identity_path)
        self._store = JsonStorageStore(self._identity_provider, path=storages_path)
        self._expansion = TreeExpansionState(self._load_expanded_keys())
        self._controller = PathTreeController(
            store=self._store,
            dialogs=QtDialogs(self),
            navigator=self,
            expansion=self._expansion,
            notifier=QtNotifier(self),
            identity_provider=self._identity_provider,
        )

        self._tree = StorageTree(self)
        self._tree.locationRequested.connect(self.push)
        self._tree.actionRequested.connect(self._on_action_requested)
        self._tree.folderExpansionChanged.connect(self._on_folder_expansion_changed)

        self._location_label = QLabel(self)
        self._location_label.setAlignment(Qt.AlignCenter)
        self._location_label.setTextInteractionFlags(Qt.TextSelectableByMouse)

        left = QWidget(self)
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self._tree)

        splitter = QSplitter(self)
        splitter.addWidget(left)
        splitter.addWidget(self._location_label)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self._create_actions()
        self._create_toolbar()
        self._create_menus()
        self.setStatusBar(QStatusBar(self))

        self.resize(900, 600)

    # ------------------------------------------------------------------
    # Navigator
    # ------------------------------------------------------------------
    def push(self, location: str) -> None:
        """Move to ``location`` and refresh the highlight."""
        self._location = location
        self._settings.setValue("last_location", location)
        self._location_label.setText(location or "No storage selected")
        self._tree.select_location(location)
        self._refresh_active_pages()

    def current_location(self) -> str:
        return self._location

    # ------------------------------------------------------------------
    # Expansion state persistence
    # ------------------------------------------------------------------
    def _load_expanded_keys(self) -> list[str]:
        value = self._settings.value("expanded_folders", [])
        if isinstance(value, str):
            # QSettings returns a bare string for single-element lists on
            # some platforms.
            return [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [str(v) for v in value]

    def _save_expanded_keys(self) -> None:
        self._settings.setValue("expanded_folders", self._expansion.to_keys())

    def _on_folder_expansion_changed(self, storage_id: str, folder_path: str, expanded: bool) -> None:
        self._expansion.set_expanded(storage_id, folder_path, expanded)
        self._save_expanded_keys()

    # ------------------------------------------------------------------
    # Actions, toolbar and menus
    # ------------------------------------------------------------------
    def _create_actions(self) -> None:
        self._new_storage_action = QAction("New storage…", self)
        self._new_storage_action.setToolTip("Create an empty storage")
        self._new_storage_action.triggered.connect(self._on_new_storage)

        self._reload_action = QAction("Reload from disk", self)
        self._reload_action.setToolTip("Reload storages from disk (e.g., if changed from another computer)")
        self._reload_action.setShortcut("Ctrl+R")
        self._reload_action.triggered.connect(self._reload)

        self._login_action = QAction("Log in…", self)
        self._login_action.setToolTip("Save a login session used for syncing storages")
        self._login_action.triggered.connect(self._on_login)

        self._logout_action = QAction("Log out", self)
        self._logout_action.triggered.connect(self._on_logout)

    def _create_toolbar(self) -> None:
        toolbar = self.addToolBar("Main")
        toolbar.setObjectName("MainToolbar")
        toolbar.setMovable(False)
        toolbar.setFloatable(False)
        toolbar.addAction(self._new_storage_action)
        toolbar.addAction(self._reload_action)

    def _create_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction(self._new_storage_action)
        file_menu.addAction(self._reload_action)

        account_menu = menubar.addMenu("&Account")
        account_menu.addAction(self._login_action)
        account_menu.addAction(self._logout_action)

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def initialize_data(self) -> None:
        """Load storages and restore the last location."""
        self._reload()
        last = self._settings.value("last_location", "")
        self.push(last if isinstance(last, str) else "")

    def _reload(self) -> None:
        """Rebuild the tree from the store, keeping the current location if it still exists."""
        self._storages = self._store.list_storages()
        self._tree.set_storages(self._storages, self._expansion)

        known = {s.id for s in self._storages}
        location = self._location
        if location and not any(
            location == storage_location(sid) or location.startswith(storage_location(sid) + "/")
            for sid in known
        ):
            location = ""
        self.push(location)

        status = self.statusBar()
        if status is not None:
            status.showMessage(f"Loaded {len(self._storages)} storages", 3000)

    def _refresh_active_pages(self) -> None:
        for storage in self._storages:
            self._tree.set_active_pages(storage.id, self._controller.active_pages(storage))

    def _storage_by_id(self, storage_id: str) -> Optional[Storage]:
        for storage in self._storages:
            if storage.id == storage_id:
                return storage
        return None

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def _on_action_requested(self, storage_id: str, action: object) -> None:
        storage = self._storage_by_id(storage_id)
        if storage is None:
            return
        asyncio.run(self._controller.dispatch(storage, action))
        # Removed storages should not leave stale expansion keys behind.
        if storage_id not in {s.id for s in self._store.list_storages()}:
            self._expansion.forget_storage(storage_id)
        self._save_expanded_keys()
        self._reload()

    def _on_new_storage(self) -> None:
        name, ok = QInputDialog.getText(self, "New storage", "Storage name:")
        if not ok:
            return
        name = name.strip()
        if not name:
            return
        try:
            self._store.create_storage(name)
        except OSError as exc:
            QMessageBox.warning(self, "Error creating storage", f"Could not create storage '{name}':\n{exc}")
            return
        self._reload()

    def _on_login(self) -> None:
        name, ok = QInputDialog.getText(self, "Log in", "Display name:")
        if not ok or not name.strip():
            return
        token, ok = QInputDialog.getText(self, "Log in", "Access token for the sync server:")
        if not ok:
            return
        save_identity(Identity(display_name=name.strip(), token=token.strip() or None), self._identity_path)
        self.statusBar().showMessage(f"Logged in as {name.strip()}", 3000)

    def _on_logout(self) -> None:
        clear_identity(self._identity_path)
        self.statusBar().showMessage("Logged out", 3000)


# ----------------------------------------------------------------------
# Application entry points
# ----------------------------------------------------------------------


def run() -> None:
    """
    Start the Qt application and show the main window.

    This is intended for programmatic use:

        from storage_navigator.gui.main_window import run
        run()
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    window = MainWindow()
    window.show()
    window.initialize_data()

    app.exec()


def main() -> None:
    """Console-script entry point (``storage-navigator``)."""
    run()
