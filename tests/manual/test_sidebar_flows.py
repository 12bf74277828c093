"""
Manual test for the sidebar flows.

Run with:
    python tests/manual/test_sidebar_flows.py

This launches the GUI against a temporary data directory seeded with one
storage, then guides the user through the create/rename/remove/sync
flows in the console. It checks by eye that navigation and tree
expansion follow each successful change.

This is **not** an automated test. It is a developer sanity check.
"""

import tempfile
from pathlib import Path

from PySide6.QtWidgets import QApplication

from storage_navigator.core import storage_store
from storage_navigator.gui.main_window import MainWindow


def main():
    print("\n=== Sidebar Flows Manual Test ===")

    tmp = Path(tempfile.mkdtemp(prefix="storage_nav_manual_test_"))
    storages_path = tmp / "storages.json"
    identity_path = tmp / "identity.json"

    storage_id = storage_store.create_storage("Manual test", storages_path)
    storage_store.create_folder(storage_id, "/projects/draft", storages_path)
    print(f"Temporary data directory: {tmp}")

    print("\nStep 1: Right-click 'draft' and rename it to 'final'.")
    print("  - The tree SHOULD show /projects expanded with 'final' selected.")
    print("\nStep 2: Right-click the storage and choose 'New folder…'.")
    print("  Enter '/notes/ideas/'.")
    print("  - The tree SHOULD show 'notes' expanded with 'ideas' selected.")
    print("\nStep 3: Choose 'Sync storage' without logging in.")
    print("  - You SHOULD see a 'No User Error' notice.")
    print("\nStep 4: Choose 'Rename storage…' and press Cancel.")
    print("  - Nothing SHOULD change and no notice should appear.")
    print("\nClose the window to end the test.\n")

    app = QApplication([])
    win = MainWindow(storages_path=storages_path, identity_path=identity_path)
    win.show()
    win.initialize_data()

    app.exec()

    print("Test finished. Temporary data directory was:")
    print(f"  {tmp}")


if __name__ == "__main__":
    main()
