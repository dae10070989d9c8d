"""
Structural Model
================
Entities of a plane frame / truss model and the pure functions operating on
them.

Classes:
    Node: A joint with support constraints and nodal loads.
    LineElement: A beam or truss connecting two nodes.
    StructuralModel: Ordered container of nodes and elements.
    ModelSnapshot: Immutable read view handed to hit-testing and rendering.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
import logging
import math
from types import MappingProxyType
import uuid
from typing import Any, Mapping, Optional

from planeframe.model.errors import InvalidArgumentError, UnresolvedReferenceError
from planeframe.model.geometry_primitives import Bounds, WorldPoint
from planeframe.model.geometry_utils import points_bounds

logger = logging.getLogger(__name__)

# Loads with a smaller magnitude do not count as applied.
LOAD_EPSILON = 0.001


class ElementKind(StrEnum):
    BEAM = "beam"
    TRUSS = "truss"


@dataclass(frozen=True)
class Constraints:
    """Support conditions: True means the degree of freedom is fixed."""
    x: bool = False
    z: bool = False
    r: bool = False


@dataclass(frozen=True)
class Loads:
    """Nodal forces (fx, fz) and moment (m)."""
    fx: float = 0.0
    fz: float = 0.0
    m: float = 0.0


@dataclass(frozen=True)
class Node:
    id: str
    coordinates: WorldPoint
    constraints: Constraints = field(default_factory=Constraints)
    loads: Loads = field(default_factory=Loads)
    label: str = ""


def default_element_properties() -> dict[str, Any]:
    return {
        "material": "steel",
        "section": "rectangular",
        "width": 1.0,
        "height": 1.0,
        "elasticModulus": 200000,
        "momentOfInertia": 1.0,
    }


@dataclass(frozen=True)
class LineElement:
    id: str
    kind: ElementKind
    start_node: str
    end_node: str
    label: str = ""
    properties: Mapping[str, Any] = field(default_factory=default_element_properties, compare=False)

    def __post_init__(self) -> None:
        # read-only copy, snapshots share element instances
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def endpoint_ids(self) -> tuple[str, str]:
        return self.start_node, self.end_node


@dataclass(frozen=True)
class ModelSnapshot:
    nodes: tuple[Node, ...] = ()
    elements: tuple[LineElement, ...] = ()


@dataclass
class StructuralModel:
    """
    Container of the model entities.

    Insertion order of `nodes` and `elements` is significant: hit-testing
    scans them in this order and reports the first match.
    """
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    name: str = ""
    version: str = "1.0"
    nodes: list[Node] = field(default_factory=list)
    elements: list[LineElement] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Model {self.id}"

    def snapshot(self) -> ModelSnapshot:
        return ModelSnapshot(tuple(self.nodes), tuple(self.elements))

    def find_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def find_element(self, element_id: str) -> Optional[LineElement]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


# -------------------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_node(node: Node) -> list[str]:
    """Return a list of problems with the node, empty if it is valid."""
    errors = []
    if not node.id:
        errors.append("Node must have an ID")
    if not (_is_number(node.coordinates.x) and _is_number(node.coordinates.z)):
        errors.append("Node must have valid coordinates")
    c = node.constraints
    if not all(isinstance(v, bool) for v in (c.x, c.z, c.r)):
        errors.append("Node must have valid constraints")
    if not _is_number(node.loads.fx):
        errors.append("Invalid horizontal force (Fx)")
    if not _is_number(node.loads.fz):
        errors.append("Invalid vertical force (Fz)")
    if not _is_number(node.loads.m):
        errors.append("Invalid moment (M)")
    return errors


def validate_line_element(element: LineElement, nodes: list[Node] | tuple[Node, ...]) -> list[str]:
    """Return a list of problems with the element against the given node set."""
    errors = []
    if not element.id:
        errors.append("Element must have an ID")
    if not element.start_node or not element.end_node:
        errors.append("Element must have start and end nodes")
    if element.start_node == element.end_node:
        errors.append("Element start and end nodes cannot be the same")

    node_ids = {n.id for n in nodes}
    if element.start_node not in node_ids:
        errors.append("Element start node does not exist")
    if element.end_node not in node_ids:
        errors.append("Element end node does not exist")
    return errors


def validate_element_properties(properties: Mapping[str, Any]) -> list[str]:
    """Numeric section and material values must be positive finite numbers."""
    errors = []
    for key, default in default_element_properties().items():
        if isinstance(default, str) or key not in properties:
            continue
        value = properties[key]
        if not (_is_number(value) and value > 0):
            errors.append(f"Invalid {key}")
    return errors


def validate_model(model: StructuralModel) -> list[str]:
    errors = []
    if not model.id:
        errors.append("Model must have an ID")
    if not model.version:
        errors.append("Model must have a version")

    seen: set[str] = set()
    for i, node in enumerate(model.nodes):
        node_errors = validate_node(node)
        if node.id in seen:
            node_errors.append(f"Duplicate node ID '{node.id}'")
        seen.add(node.id)
        if node_errors:
            errors.append(f"Node {i}: {', '.join(node_errors)}")

    for i, element in enumerate(model.elements):
        element_errors = validate_line_element(element, model.nodes)
        if element_errors:
            errors.append(f"Element {i}: {', '.join(element_errors)}")
    return errors


# -------------------------------------------------------------------------------
# Mutations
# -------------------------------------------------------------------------------

def new_node_id() -> str:
    return f"node-{uuid.uuid4().hex[:12]}"


def new_element_id() -> str:
    return f"element-{uuid.uuid4().hex[:12]}"


def add_node(model: StructuralModel, coordinates: WorldPoint) -> Node:
    node = Node(id=new_node_id(), coordinates=coordinates)
    model.nodes.append(node)
    logger.debug(f"Added node {node.id} at ({coordinates.x:g}, {coordinates.z:g})")
    return node


def add_line_element(
    model: StructuralModel,
    start_node: str,
    end_node: str,
    kind: ElementKind = ElementKind.TRUSS
) -> LineElement:
    """
    Append a line element between two existing, distinct nodes.

    Raises:
        InvalidArgumentError: If the endpoints are equal or do not exist.
    """
    element = LineElement(id=new_element_id(), kind=kind, start_node=start_node, end_node=end_node)
    errors = validate_line_element(element, model.nodes)
    if errors:
        raise InvalidArgumentError(f"Invalid element: {', '.join(errors)}")
    model.elements.append(element)
    logger.debug(f"Added {kind} {element.id} between {start_node} and {end_node}")
    return element


def update_node(
    model: StructuralModel,
    node_id: str,
    *,
    coordinates: Optional[WorldPoint] = None,
    constraints: Optional[Constraints] = None,
    loads: Optional[Loads] = None,
    label: Optional[str] = None
) -> Node:
    """Replace the given properties of a node, validating the result first."""
    for i, node in enumerate(model.nodes):
        if node.id != node_id:
            continue
        changes: dict[str, Any] = {}
        if coordinates is not None:
            changes["coordinates"] = coordinates
        if constraints is not None:
            changes["constraints"] = constraints
        if loads is not None:
            changes["loads"] = loads
        if label is not None:
            changes["label"] = label
        updated = replace(node, **changes)
        errors = validate_node(updated)
        if errors:
            raise InvalidArgumentError(f"Invalid node properties: {', '.join(errors)}")
        model.nodes[i] = updated
        return updated
    raise UnresolvedReferenceError(f"Node '{node_id}' not found.")


def update_line_element(
    model: StructuralModel,
    element_id: str,
    *,
    kind: Optional[ElementKind] = None,
    label: Optional[str] = None,
    properties: Optional[Mapping[str, Any]] = None
) -> LineElement:
    """Replace kind, label or section properties of an element; endpoints are kept."""
    for i, element in enumerate(model.elements):
        if element.id != element_id:
            continue
        changes: dict[str, Any] = {}
        if kind is not None:
            try:
                changes["kind"] = ElementKind(kind)
            except ValueError as e:
                raise InvalidArgumentError(f"Unknown element kind {kind!r}.") from e
        if label is not None:
            changes["label"] = label
        if properties is not None:
            errors = validate_element_properties(properties)
            if errors:
                raise InvalidArgumentError(f"Invalid element properties: {', '.join(errors)}")
            changes["properties"] = properties
        updated = replace(element, **changes)
        model.elements[i] = updated
        return updated
    raise UnresolvedReferenceError(f"Element '{element_id}' not found.")


def remove_node(model: StructuralModel, node_id: str) -> list[LineElement]:
    """
    Remove a node together with all elements attached to it.

    Returns:
        The removed elements.
    """
    if model.find_node(node_id) is None:
        raise UnresolvedReferenceError(f"Node '{node_id}' not found.")
    model.nodes = [n for n in model.nodes if n.id != node_id]
    removed = [e for e in model.elements if node_id in e.endpoint_ids]
    model.elements = [e for e in model.elements if node_id not in e.endpoint_ids]
    return removed


def remove_line_element(model: StructuralModel, element_id: str) -> None:
    if model.find_element(element_id) is None:
        raise UnresolvedReferenceError(f"Element '{element_id}' not found.")
    model.elements = [e for e in model.elements if e.id != element_id]


# -------------------------------------------------------------------------------
# Queries
# -------------------------------------------------------------------------------

def model_bounds(model: StructuralModel | ModelSnapshot) -> Optional[Bounds]:
    """Bounding box of all node coordinates, None for a model without nodes."""
    return points_bounds(n.coordinates for n in model.nodes)


@dataclass(frozen=True)
class ModelStatistics:
    node_count: int
    element_count: int
    beam_count: int
    truss_count: int
    constraint_count: int
    applied_loads: int


def model_statistics(model: StructuralModel | ModelSnapshot) -> ModelStatistics:
    constraint_count = sum(
        int(n.constraints.x) + int(n.constraints.z) + int(n.constraints.r) for n in model.nodes
    )
    applied_loads = sum(
        sum(abs(v) > LOAD_EPSILON for v in (n.loads.fx, n.loads.fz, n.loads.m)) for n in model.nodes
    )
    return ModelStatistics(
        node_count=len(model.nodes),
        element_count=len(model.elements),
        beam_count=sum(e.kind == ElementKind.BEAM for e in model.elements),
        truss_count=sum(e.kind == ElementKind.TRUSS for e in model.elements),
        constraint_count=constraint_count,
        applied_loads=applied_loads,
    )
