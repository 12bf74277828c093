"""
Tree widget for navigating storages and their folders.

Design
------
The storage tree is the sidebar on the left of the main window. Each
storage appears as a top-level node with these children:

- Special pages:
    * All Notes
    * Attachments
    * Trash

- Folder nodes:
    A nested hierarchy built from the storage's folder paths
    (e.g. "/projects", "/projects/draft").

Clicking a page or folder emits ``locationRequested`` with the location
string for it. Context menus are built from the tagged action lists in
``storage_navigator.core.actions``; choosing an entry emits
``actionRequested`` with the storage id and the ``MenuAction``. The tree
never mutates anything itself.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from PySide6.QtCore import Qt, Signal, QModelIndex
from PySide6.QtGui import QFont, QStandardItem, QStandardItemModel
from PySide6.QtWidgets import QMenu, QTreeView

from storage_navigator.core.actions import (
    MenuAction,
    folder_context_actions,
    header_actions,
    storage_context_actions,
)
from storage_navigator.core.expansion import TreeExpansionState
from storage_navigator.core.locations import (
    all_notes_location,
    attachments_location,
    folder_location,
    trashcan_location,
)
from storage_navigator.core.models import ActivePages, Storage
from storage_navigator.core.paths import ROOT, leaf_name, parent_path

# Custom roles for data stored on tree items.
KindRole = Qt.UserRole + 1
StorageIdRole = Qt.UserRole + 2
FolderPathRole = Qt.UserRole + 3
LocationRole = Qt.UserRole + 4

# Node kinds.
STORAGE_KIND = "storage"
FOLDER_KIND = "folder"
ALL_NOTES_KIND = "all_notes"
ATTACHMENTS_KIND = "attachments"
TRASHCAN_KIND = "trashcan"


class StorageTree(QTreeView):
    """
    Sidebar tree of storages, their folders and special pages.

    Emits:
        locationRequested (str): The user clicked a node that has a
            location (a page or a folder).
        actionRequested (str, object): The user chose a context-menu
            entry; carries the storage id and the ``MenuAction``.
        folderExpansionChanged (str, str, bool): A folder node was
            expanded or collapsed by the user; carries the storage id,
            the folder path and the new state.
    """

    locationRequested = Signal(str)
    actionRequested = Signal(str, object)
    folderExpansionChanged = Signal(str, str, bool)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)

        self._model = QStandardItemModel(self)
        self.setModel(self._model)
        self.setHeaderHidden(True)

        # Page items per storage, used to apply the active-page highlight.
        self._page_items: Dict[str, Dict[str, QStandardItem]] = {}

        # Rebuilding the model expands nodes programmatically; those must
        # not be reported back as user expansion changes.
        self._restoring = False

        self.clicked.connect(self._on_clicked)
        self.expanded.connect(lambda index: self._on_expansion_changed(index, True))
        self.collapsed.connect(lambda index: self._on_expansion_changed(index, False))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def set_storages(self, storages: Iterable[Storage], expansion: TreeExpansionState) -> None:
        """
        Rebuild the tree from storage snapshots.

        Args:
            storages: Storages in display order.
            expansion: Which folders should be shown expanded.
        """
        self._restoring = True
        try:
            self._model.clear()
            self._page_items = {}
            root = self._model.invisibleRootItem()

            for storage in storages:
                storage_item = QStandardItem(storage.name)
                storage_item.setEditable(False)
                storage_item.setData(STORAGE_KIND, KindRole)
                storage_item.setData(storage.id, StorageIdRole)
                root.appendRow(storage_item)

                pages = {
                    ALL_NOTES_KIND: self._add_page_node(
                        storage_item, "All Notes", ALL_NOTES_KIND, storage.id,
                        all_notes_location(storage.id),
                    ),
                }
                folder_items = self._insert_folders(storage_item, storage.id, storage.folders)
                pages[ATTACHMENTS_KIND] = self._add_page_node(
                    storage_item, "Attachments", ATTACHMENTS_KIND, storage.id,
                    attachments_location(storage.id),
                )
                pages[TRASHCAN_KIND] = self._add_page_node(
                    storage_item, "Trash", TRASHCAN_KIND, storage.id,
                    trashcan_location(storage.id),
                )
                self._page_items[storage.id] = pages

                # Storages are always open; folders follow the expansion state.
                self.expand(storage_item.index())
                for path, item in folder_items.items():
                    if expansion.is_expanded(storage.id, path):
                        self.expand(item.index())
        finally:
            self._restoring = False

    def set_active_pages(self, storage_id: str, active: ActivePages) -> None:
        """Show the storage's active special page in bold."""
        pages = self._page_items.get(storage_id, {})
        flags = {
            ALL_NOTES_KIND: active.all_notes,
            ATTACHMENTS_KIND: active.attachments,
            TRASHCAN_KIND: active.trashcan,
        }
        for kind, item in pages.items():
            font = QFont(item.font())
            font.setBold(flags.get(kind, False))
            item.setFont(font)

    def select_location(self, location: str) -> None:
        """Select the node whose location equals ``location`` exactly."""
        found = self._find_item(lambda item: item.data(LocationRole) == location)
        if found is None:
            self.clearSelection()
            return
        self.setCurrentIndex(found.index())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _add_page_node(
        self, parent: QStandardItem, label: str, kind: str, storage_id: str, location: str
    ) -> QStandardItem:
        item = QStandardItem(label)
        item.setEditable(False)
        item.setData(kind, KindRole)
        item.setData(storage_id, StorageIdRole)
        item.setData(location, LocationRole)
        parent.appendRow(item)
        return item

    def _insert_folders(
        self, storage_item: QStandardItem, storage_id: str, folders: Iterable[str]
    ) -> Dict[str, QStandardItem]:
        """Insert folder nodes, creating implicit parents as needed."""
        items: Dict[str, QStandardItem] = {}

        def _node_for(path: str) -> QStandardItem:
            if path == ROOT:
                return storage_item
            existing = items.get(path)
            if existing is not None:
                return existing
            parent = _node_for(parent_path(path))
            child = QStandardItem(leaf_name(path))
            child.setEditable(False)
            child.setData(FOLDER_KIND, KindRole)
            child.setData(storage_id, StorageIdRole)
            child.setData(path, FolderPathRole)
            child.setData(folder_location(storage_id, path), LocationRole)
            parent.appendRow(child)
            items[path] = child
            return child

        for path in sorted(folders):
            _node_for(path)
        return items

    def _find_item(self, predicate) -> Optional[QStandardItem]:
        def _dfs(item: QStandardItem) -> Optional[QStandardItem]:
            for row in range(item.rowCount()):
                child = item.child(row)
                if child is None:
                    continue
                if predicate(child):
                    return child
                found = _dfs(child)
                if found is not None:
                    return found
            return None

        return _dfs(self._model.invisibleRootItem())

    # ------------------------------------------------------------------
    # Selection and expansion handling
    # ------------------------------------------------------------------
    def _on_clicked(self, index: QModelIndex) -> None:
        item = self._model.itemFromIndex(index)
        if item is None:
            return
        location = item.data(LocationRole)
        if isinstance(location, str):
            self.locationRequested.emit(location)

    def _on_expansion_changed(self, index: QModelIndex, expanded: bool) -> None:
        if self._restoring:
            return
        item = self._model.itemFromIndex(index)
        if item is None or item.data(KindRole) != FOLDER_KIND:
            return
        self.folderExpansionChanged.emit(
            item.data(StorageIdRole), item.data(FolderPathRole), expanded
        )

    def contextMenuEvent(self, event) -> None:
        """
        Show the context menu for the node under the cursor.

        Storage nodes get the header controls plus rename/remove; folder
        nodes get new-subfolder/rename. Special pages have no menu.
        """
        index = self.indexAt(event.pos())
        item = self._model.itemFromIndex(index) if index.isValid() else None
        if item is None:
            return

        kind = item.data(KindRole)
        storage_id = item.data(StorageIdRole)
        groups: List[List[MenuAction]]
        if kind == STORAGE_KIND:
            groups = [header_actions(), storage_context_actions()]
        elif kind == FOLDER_KIND:
            groups = [folder_context_actions(item.data(FolderPathRole))]
        else:
            return

        menu = QMenu(self)
        for group in groups:
            if not menu.isEmpty():
                menu.addSeparator()
            for action in group:
                qt_action = menu.addAction(action.label)
                qt_action.triggered.connect(
                    lambda checked=False, sid=storage_id, a=action: self.actionRequested.emit(sid, a)
                )

        if not menu.isEmpty():
            menu.exec(event.globalPos())
