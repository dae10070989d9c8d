"""
Hit testing of screen points against model entities.

Both tests scan the entities in the order given (model insertion order) and
return the FIRST entity within tolerance, not the nearest one. On overlapping
entities the one added earlier wins.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

from planeframe.config import ELEMENT_TOLERANCE_PX, NODE_TOLERANCE_PX
from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import ScreenPoint, ViewDimensions, Viewport
from planeframe.model.geometry_utils import point_to_segment_distance, world_to_screen
from planeframe.model.structure import LineElement, Node

logger = logging.getLogger(__name__)


def _check_tolerance(tolerance_px: float) -> None:
    if not tolerance_px >= 0.0:
        raise InvalidArgumentError(f"Tolerance must be non-negative, got {tolerance_px}.")


def index_nodes(nodes: Iterable[Node]) -> dict[str, Node]:
    """Map node ids to nodes; on duplicate ids the first node is kept."""
    index: dict[str, Node] = {}
    for node in nodes:
        index.setdefault(node.id, node)
    return index


def hit_test_node(
    screen_point: ScreenPoint,
    nodes: Iterable[Node],
    viewport: Viewport,
    dims: ViewDimensions,
    tolerance_px: float = NODE_TOLERANCE_PX
) -> Optional[str]:
    """
    Find the node under a screen point.

    Args:
        screen_point: Pointer position in pixels.
        nodes: Candidate nodes, in priority order.
        viewport: Current pan/zoom state.
        dims: Pixel size of the surface.
        tolerance_px: Maximum screen distance counting as a hit.

    Returns:
        Id of the first node within tolerance, or None.
    """
    _check_tolerance(tolerance_px)
    for node in nodes:
        node_screen = world_to_screen(node.coordinates, viewport, dims)
        if screen_point.distance_to(node_screen) <= tolerance_px:
            return node.id
    return None


def hit_test_line_element(
    screen_point: ScreenPoint,
    elements: Iterable[LineElement],
    nodes: Sequence[Node] | Mapping[str, Node],
    viewport: Viewport,
    dims: ViewDimensions,
    tolerance_px: float = ELEMENT_TOLERANCE_PX
) -> Optional[str]:
    """
    Find the line element under a screen point.

    Elements whose endpoints cannot be resolved in `nodes` are skipped with a
    warning.

    Args:
        screen_point: Pointer position in pixels.
        elements: Candidate elements, in priority order.
        nodes: The node set (sequence or id mapping) used to resolve endpoints.
        viewport: Current pan/zoom state.
        dims: Pixel size of the surface.
        tolerance_px: Maximum screen distance to the element's segment.

    Returns:
        Id of the first element within tolerance, or None.
    """
    _check_tolerance(tolerance_px)
    index = nodes if isinstance(nodes, Mapping) else index_nodes(nodes)

    for element in elements:
        start = index.get(element.start_node)
        end = index.get(element.end_node)
        if start is None or end is None:
            logger.warning(f"Element {element.id} references a missing node, skipped in hit test.")
            continue

        a = world_to_screen(start.coordinates, viewport, dims)
        b = world_to_screen(end.coordinates, viewport, dims)
        if point_to_segment_distance(screen_point, a, b) <= tolerance_px:
            return element.id
    return None
