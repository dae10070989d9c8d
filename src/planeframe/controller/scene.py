"""
Screen-space geometry for the renderer.

The canvas draws exactly what these functions return; none of them paint.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

import numpy as np

from planeframe.config import BASE_GRID_SIZE, MAX_GRID_POINTS
from planeframe.controller.hit_testing import index_nodes
from planeframe.model.geometry_primitives import ScreenPoint, ViewDimensions, Viewport
from planeframe.model.geometry_utils import grid_points, world_to_screen
from planeframe.model.structure import ElementKind, LineElement, Node

if TYPE_CHECKING:
    import numpy.typing as npt
    from planeframe.controller.dispatcher import EditorSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementSegment:
    element_id: str
    kind: ElementKind
    start: ScreenPoint
    end: ScreenPoint


def grid_screen_points(
    viewport: Viewport,
    dims: ViewDimensions,
    base_size: float = BASE_GRID_SIZE,
    max_points: int = MAX_GRID_POINTS
) -> npt.NDArray[np.float64]:
    """Grid points of the visible area as an (N, 2) array of pixel coordinates."""
    world = grid_points(viewport, dims, base_size=base_size, max_points=max_points)
    if world.size == 0:
        return world
    offset = np.array([viewport.pan.x, viewport.pan.z])
    center = np.array([dims.width / 2, dims.height / 2])
    return (world - offset) * viewport.zoom + center


def node_screen_positions(
    nodes: Iterable[Node],
    viewport: Viewport,
    dims: ViewDimensions
) -> list[tuple[Node, ScreenPoint]]:
    return [(node, world_to_screen(node.coordinates, viewport, dims)) for node in nodes]


def element_segments(
    elements: Iterable[LineElement],
    nodes: Sequence[Node],
    viewport: Viewport,
    dims: ViewDimensions
) -> list[ElementSegment]:
    """Screen segments of all renderable elements; unresolved ones are skipped."""
    index = index_nodes(nodes)
    segments = []
    for element in elements:
        start = index.get(element.start_node)
        end = index.get(element.end_node)
        if start is None or end is None:
            logger.warning(f"Element {element.id} references a missing node, not rendered.")
            continue
        segments.append(ElementSegment(
            element_id=element.id,
            kind=element.kind,
            start=world_to_screen(start.coordinates, viewport, dims),
            end=world_to_screen(end.coordinates, viewport, dims),
        ))
    return segments


def preview_segment(session: EditorSession, nodes: Sequence[Node]) -> Optional[tuple[ScreenPoint, ScreenPoint]]:
    """Rubber-band line from the pending start node to the cursor, if any."""
    interaction = session.interaction
    start_id = interaction.pending_start_node
    if start_id is None or interaction.preview_point is None:
        return None

    start = index_nodes(nodes).get(start_id)
    if start is None:
        return None
    return world_to_screen(start.coordinates, session.viewport, session.dimensions), interaction.preview_point
