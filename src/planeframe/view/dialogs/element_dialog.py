"""
Modal Dialog for Line Element Properties
"""
from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QComboBox, QFormLayout, QGroupBox, QLineEdit, QWidget

from planeframe.model.structure import ElementKind, LineElement
from planeframe.view.dialogs.base import PropertiesDialogBase

MATERIALS = ["steel", "concrete", "wood"]
SECTIONS = ["rectangular", "circular", "i-beam"]

# property key -> form label
NUMERIC_PROPERTIES = {
    "elasticModulus": "Elastic Modulus (E):",
    "width": "Width:",
    "height": "Height:",
    "momentOfInertia": "Moment of Inertia (I):",
}


def _combo(items: list[str], current: str) -> QComboBox:
    combo = QComboBox()
    combo.addItems(items)
    if current not in items:
        # keep values written by other tools selectable
        combo.addItem(current)
    combo.setCurrentText(current)
    return combo


class ElementDialog(PropertiesDialogBase):
    """Edit kind, label and section properties of one beam or truss."""

    def __init__(self, element: LineElement, parent: QWidget | None = None) -> None:
        super().__init__(f"Element Properties - {element.label or element.id}", "Delete Element", parent)
        self.element_id = element.id
        self._original = dict(element.properties)

        # --- General ---
        grp_general = QGroupBox("General")
        form = QFormLayout(grp_general)
        self.edit_label = QLineEdit(element.label)
        form.addRow("Label:", self.edit_label)
        self.combo_kind = QComboBox()
        for kind in ElementKind:
            self.combo_kind.addItem(kind.capitalize(), str(kind))
        self.combo_kind.setCurrentIndex(self.combo_kind.findData(str(element.kind)))
        form.addRow("Type:", self.combo_kind)
        form.addRow("Nodes:", QLineEdit(f"{element.start_node} -> {element.end_node}", readOnly=True))
        self.main_layout.addWidget(grp_general)

        # --- Material & section ---
        grp_section = QGroupBox("Material & Cross Section")
        form_section = QFormLayout(grp_section)
        self.combo_material = _combo(MATERIALS, str(self._original.get("material", MATERIALS[0])))
        form_section.addRow("Material:", self.combo_material)
        self.combo_section = _combo(SECTIONS, str(self._original.get("section", SECTIONS[0])))
        form_section.addRow("Section:", self.combo_section)
        self.numeric_edits = {
            key: self._add_float(form_section, label, self._original.get(key, 1.0), positive=True)
            for key, label in NUMERIC_PROPERTIES.items()
        }
        self.main_layout.addWidget(grp_section)

        self._finish_layout()

    def kind(self) -> ElementKind:
        return ElementKind(self.combo_kind.currentData())

    def label(self) -> str:
        return self.edit_label.text().strip()

    def properties(self) -> dict[str, Any]:
        """The edited properties; keys the dialog does not show are kept."""
        props = dict(self._original)
        props["material"] = self.combo_material.currentText()
        props["section"] = self.combo_section.currentText()
        for key, edit in self.numeric_edits.items():
            value = self._value(edit)
            if props.get(key) != value:
                props[key] = value
        return props
