"""
Modal Dialog for Node Properties
"""
from __future__ import annotations

from PySide6.QtWidgets import QCheckBox, QFormLayout, QGroupBox, QHBoxLayout, QLineEdit, QWidget

from planeframe.model.geometry_primitives import WorldPoint
from planeframe.model.structure import Constraints, Loads, Node
from planeframe.view.dialogs.base import PropertiesDialogBase


class NodeDialog(PropertiesDialogBase):
    """Edit coordinates, supports and loads of one node."""

    def __init__(self, node: Node, parent: QWidget | None = None) -> None:
        super().__init__(f"Node Properties - {node.label or node.id}", "Delete Node", parent)
        self.node_id = node.id

        # --- General ---
        grp_general = QGroupBox("General")
        form = QFormLayout(grp_general)
        self.edit_label = QLineEdit(node.label)
        form.addRow("Label:", self.edit_label)
        self.edit_x = self._add_float(form, "X:", node.coordinates.x)
        self.edit_z = self._add_float(form, "Z:", node.coordinates.z)
        self.main_layout.addWidget(grp_general)

        # --- Supports ---
        grp_supports = QGroupBox("Constraints")
        row = QHBoxLayout(grp_supports)
        self.chk_x = QCheckBox("X")
        self.chk_x.setChecked(node.constraints.x)
        self.chk_z = QCheckBox("Z")
        self.chk_z.setChecked(node.constraints.z)
        self.chk_r = QCheckBox("R")
        self.chk_r.setChecked(node.constraints.r)
        for chk in (self.chk_x, self.chk_z, self.chk_r):
            row.addWidget(chk)
        self.main_layout.addWidget(grp_supports)

        # --- Loads ---
        grp_loads = QGroupBox("Loads")
        form_loads = QFormLayout(grp_loads)
        self.edit_fx = self._add_float(form_loads, "Fx:", node.loads.fx)
        self.edit_fz = self._add_float(form_loads, "Fz:", node.loads.fz)
        self.edit_m = self._add_float(form_loads, "M:", node.loads.m)
        self.main_layout.addWidget(grp_loads)

        self._finish_layout()

    def coordinates(self) -> WorldPoint:
        return WorldPoint(self._value(self.edit_x), self._value(self.edit_z))

    def constraints(self) -> Constraints:
        return Constraints(x=self.chk_x.isChecked(), z=self.chk_z.isChecked(), r=self.chk_r.isChecked())

    def loads(self) -> Loads:
        return Loads(fx=self._value(self.edit_fx), fz=self._value(self.edit_fz), m=self._value(self.edit_m))

    def label(self) -> str:
        return self.edit_label.text().strip()
