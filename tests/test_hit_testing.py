import logging

import pytest

from planeframe.controller.hit_testing import hit_test_line_element, hit_test_node, index_nodes
from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import ScreenPoint, Viewport, WorldPoint
from planeframe.model.structure import ElementKind, LineElement, Node


def node(node_id, x, z):
    return Node(id=node_id, coordinates=WorldPoint(x, z))


def truss(element_id, start, end):
    return LineElement(id=element_id, kind=ElementKind.TRUSS, start_node=start, end_node=end)


def test_node_hit_within_tolerance(viewport, dims):
    nodes = [node("a", 0.0, 0.0)]

    assert hit_test_node(ScreenPoint(415.0, 300.0), nodes, viewport, dims) == "a"
    assert hit_test_node(ScreenPoint(416.0, 300.0), nodes, viewport, dims) is None


def test_node_tolerance_is_in_pixels(dims):
    zoomed = Viewport(zoom=10.0)
    nodes = [node("a", 1.0, 0.0)]  # at screen (410, 300)

    assert hit_test_node(ScreenPoint(424.0, 300.0), nodes, zoomed, dims) == "a"
    assert hit_test_node(ScreenPoint(426.0, 300.0), nodes, zoomed, dims) is None


def test_first_node_within_tolerance_wins(viewport, dims):
    nodes = [node("a", 0.0, 0.0), node("b", 5.0, 0.0)]

    # b is closer, but a comes first
    assert hit_test_node(ScreenPoint(403.0, 300.0), nodes, viewport, dims) == "a"
    assert hit_test_node(ScreenPoint(403.0, 300.0), list(reversed(nodes)), viewport, dims) == "b"


def test_node_custom_tolerance(viewport, dims):
    nodes = [node("a", 0.0, 0.0)]
    assert hit_test_node(ScreenPoint(402.0, 300.0), nodes, viewport, dims, tolerance_px=1.0) is None


def test_negative_tolerance_is_rejected(viewport, dims):
    with pytest.raises(InvalidArgumentError):
        hit_test_node(ScreenPoint(0.0, 0.0), [], viewport, dims, tolerance_px=-1.0)
    with pytest.raises(InvalidArgumentError):
        hit_test_line_element(ScreenPoint(0.0, 0.0), [], [], viewport, dims, tolerance_px=-1.0)


def test_line_element_hit_within_tolerance(viewport, dims):
    nodes = [node("a", 0.0, 0.0), node("b", 100.0, 0.0)]
    elements = [truss("e1", "a", "b")]

    assert hit_test_line_element(ScreenPoint(450.0, 305.0), elements, nodes, viewport, dims) == "e1"
    assert hit_test_line_element(ScreenPoint(450.0, 306.0), elements, nodes, viewport, dims) is None


def test_line_element_beyond_endpoint(viewport, dims):
    nodes = [node("a", 0.0, 0.0), node("b", 100.0, 0.0)]
    elements = [truss("e1", "a", "b")]

    assert hit_test_line_element(ScreenPoint(504.0, 303.0), elements, nodes, viewport, dims) == "e1"
    assert hit_test_line_element(ScreenPoint(506.0, 300.0), elements, nodes, viewport, dims) is None


def test_unresolved_element_is_skipped(viewport, dims, caplog):
    nodes = [node("a", 0.0, 0.0), node("b", 100.0, 0.0)]
    elements = [truss("ghost", "a", "missing"), truss("e1", "a", "b")]

    with caplog.at_level(logging.WARNING):
        hit = hit_test_line_element(ScreenPoint(450.0, 300.0), elements, nodes, viewport, dims)

    assert hit == "e1"
    assert "ghost" in caplog.text


def test_line_element_accepts_node_mapping(viewport, dims):
    nodes = index_nodes([node("a", 0.0, 0.0), node("b", 0.0, 100.0)])
    elements = [truss("e1", "a", "b")]

    assert hit_test_line_element(ScreenPoint(400.0, 350.0), elements, nodes, viewport, dims) == "e1"


def test_index_nodes_keeps_first_duplicate():
    first = node("a", 0.0, 0.0)
    index = index_nodes([first, node("a", 9.0, 9.0)])
    assert index["a"] is first
