from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from planeframe.model.errors import UnresolvedReferenceError
from planeframe.model.geometry_primitives import WorldPoint
from planeframe.model.state import ProjectState
from planeframe.model import structure
from planeframe.model.structure import (
    Constraints, ElementKind, LineElement, Loads, ModelSnapshot, Node, StructuralModel
)

logger = logging.getLogger(__name__)


class ModelStore(QObject):
    """
    Central model store with signals for canvas/window sync.

    All mutations of the structural model go through this object; the input
    dispatcher only hands it intents. `model_changed` carries the new
    `ModelSnapshot`.
    """
    model_changed = Signal(object)
    modified_changed = Signal(bool)

    def __init__(self, project: Optional[ProjectState] = None) -> None:
        super().__init__()
        self.project = project if project is not None else ProjectState()

    @property
    def model(self) -> StructuralModel:
        return self.project.model

    def snapshot(self) -> ModelSnapshot:
        return self.project.model.snapshot()

    def node(self, node_id: str) -> Node:
        node = self.project.model.find_node(node_id)
        if node is None:
            raise UnresolvedReferenceError(f"Node '{node_id}' not found.")
        return node

    def element(self, element_id: str) -> LineElement:
        element = self.project.model.find_element(element_id)
        if element is None:
            raise UnresolvedReferenceError(f"Element '{element_id}' not found.")
        return element

    # ---- mutations ----

    def create_node(self, position: WorldPoint) -> str:
        node = structure.add_node(self.project.model, position)
        logger.info(f"Created node {node.id} at ({position.x:g}, {position.z:g})")
        self._emit_changed()
        return node.id

    def create_line_element(self, start_id: str, end_id: str, kind: ElementKind = ElementKind.TRUSS) -> str:
        element = structure.add_line_element(self.project.model, start_id, end_id, kind)
        logger.info(f"Created {kind} {element.id} ({start_id} -> {end_id})")
        self._emit_changed()
        return element.id

    def update_node(
        self,
        node_id: str,
        *,
        coordinates: Optional[WorldPoint] = None,
        constraints: Optional[Constraints] = None,
        loads: Optional[Loads] = None,
        label: Optional[str] = None
    ) -> Node:
        node = structure.update_node(
            self.project.model, node_id,
            coordinates=coordinates, constraints=constraints, loads=loads, label=label
        )
        self._emit_changed()
        return node

    def remove_node(self, node_id: str) -> None:
        removed = structure.remove_node(self.project.model, node_id)
        logger.info(f"Removed node {node_id} and {len(removed)} attached element(s)")
        self._emit_changed()

    def update_line_element(
        self,
        element_id: str,
        *,
        kind: Optional[ElementKind] = None,
        label: Optional[str] = None,
        properties: Optional[Mapping[str, Any]] = None
    ) -> LineElement:
        element = structure.update_line_element(
            self.project.model, element_id, kind=kind, label=label, properties=properties
        )
        self._emit_changed()
        return element

    def remove_line_element(self, element_id: str) -> None:
        structure.remove_line_element(self.project.model, element_id)
        logger.info(f"Removed element {element_id}")
        self._emit_changed()

    def set_model(self, model: StructuralModel, filepath: Optional[str] = None) -> None:
        """Replace the whole model, e.g. after loading a file."""
        self.project.model = model
        self.project.filepath = filepath
        self.project.is_modified = False
        self.model_changed.emit(self.snapshot())
        self.modified_changed.emit(False)

    def mark_saved(self, filepath: str) -> None:
        self.project.filepath = filepath
        self.project.is_modified = False
        self.modified_changed.emit(False)

    def reset(self) -> None:
        self.project.reset()
        self.model_changed.emit(self.snapshot())
        self.modified_changed.emit(False)

    def _emit_changed(self) -> None:
        self.model_changed.emit(self.snapshot())
        if not self.project.is_modified:
            self.project.is_modified = True
            self.modified_changed.emit(True)
