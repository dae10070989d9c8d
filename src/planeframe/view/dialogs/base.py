"""
Base class for the entity properties dialogs.

Numeric fields are line edits holding the exact float text (scientific
notation accepted), so confirming a dialog unchanged never alters a value.
"""
from __future__ import annotations

import math

from PySide6.QtCore import QLocale
from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QFormLayout, QLineEdit, QPushButton, QSizePolicy, QVBoxLayout, QWidget
)

INVALID_STYLE = "QLineEdit { background-color: #ffd8d8; }"


def format_float(value: float) -> str:
    """Shortest text that parses back to exactly `value`."""
    return repr(float(value))


class PropertiesDialogBase(QDialog):
    """OK / Cancel / Delete dialog with validated float fields."""

    def __init__(self, title: str, delete_text: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.delete_requested = False
        self._float_edits: list[QLineEdit] = []

        self.main_layout = QVBoxLayout(self)

        self.buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        self.btn_delete = QPushButton(delete_text)
        self.buttons.addButton(self.btn_delete, QDialogButtonBox.ButtonRole.DestructiveRole)
        self.btn_delete.clicked.connect(self.on_delete_clicked)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

    def _finish_layout(self) -> None:
        """Append the button row; call after all groups were added."""
        self.main_layout.addWidget(self.buttons)

    def _add_float(self, form: QFormLayout, label: str, value: float, positive: bool = False) -> QLineEdit:
        w = QLineEdit(format_float(value))
        validator = QDoubleValidator(w)
        validator.setNotation(QDoubleValidator.Notation.ScientificNotation)
        validator.setLocale(QLocale.c())
        if positive:
            validator.setBottom(0.0)
        w.setValidator(validator)
        w.setProperty("positive", positive)
        w.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        w.textChanged.connect(lambda _text, edit=w: edit.setStyleSheet(""))
        form.addRow(label, w)
        self._float_edits.append(w)
        return w

    @staticmethod
    def _value(edit: QLineEdit) -> float:
        return float(edit.text().strip())

    def invalid_fields(self) -> list[QLineEdit]:
        invalid = []
        for edit in self._float_edits:
            try:
                value = self._value(edit)
            except ValueError:
                invalid.append(edit)
                continue
            if not math.isfinite(value) or (edit.property("positive") and value <= 0.0):
                invalid.append(edit)
        return invalid

    def accept(self) -> None:
        invalid = self.invalid_fields()
        if invalid:
            for edit in invalid:
                edit.setStyleSheet(INVALID_STYLE)
            invalid[0].setFocus()
            return
        super().accept()

    def on_delete_clicked(self) -> None:
        self.delete_requested = True
        # deleting does not need valid field values
        QDialog.accept(self)
