"""
Qt implementations of the dialog and notice collaborators.

Qt dialogs are modal and run their own nested event loop, so the
coroutines below simply show the dialog and return its result. A
dismissed dialog is reported as ``None``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtWidgets import QDialog, QInputDialog, QMessageBox, QWidget

from storage_navigator.core.models import ConfirmSpec, PromptSpec

logger = logging.getLogger(__name__)


class QtDialogs:
    """Prompt and confirmation dialogs parented to ``parent``."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        self._parent = parent

    async def prompt(self, spec: PromptSpec) -> Optional[str]:
        dlg = QInputDialog(self._parent)
        dlg.setWindowTitle(spec.title)
        dlg.setLabelText(spec.message)
        dlg.setTextValue(spec.default_value)
        dlg.setOkButtonText(spec.submit_label)
        if dlg.exec() != QDialog.Accepted:
            return None
        return dlg.textValue()

    async def confirm(self, spec: ConfirmSpec) -> Optional[int]:
        box = QMessageBox(self._parent)
        box.setIcon(QMessageBox.Warning if spec.warning else QMessageBox.Question)
        box.setWindowTitle(spec.title)
        box.setText(spec.message)

        buttons: List = []
        for index, label in enumerate(spec.buttons):
            role = QMessageBox.RejectRole if index == spec.cancel_index else QMessageBox.AcceptRole
            buttons.append(box.addButton(label, role))

        if 0 <= spec.default_index < len(buttons):
            box.setDefaultButton(buttons[spec.default_index])
        if spec.cancel_index is not None and 0 <= spec.cancel_index < len(buttons):
            box.setEscapeButton(buttons[spec.cancel_index])

        box.exec()

        clicked = box.clickedButton()
        for index, button in enumerate(buttons):
            if button is clicked:
                return index
        return None


class QtNotifier:
    """Show failure notices as warning message boxes."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        self._parent = parent

    def push_message(self, title: str, description: str) -> None:
        logger.info("Notice shown: %s: %s", title, description)
        QMessageBox.warning(self._parent, title, description)
