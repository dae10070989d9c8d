import numpy as np

from planeframe.controller import scene
from planeframe.controller.dispatcher import EditorSession
from planeframe.controller.interaction import InteractionMode
from planeframe.model.geometry_primitives import ScreenPoint, Viewport, WorldPoint
from planeframe.model.structure import ElementKind, LineElement, Node

NODES = (Node("a", WorldPoint(0.0, 0.0)), Node("b", WorldPoint(100.0, 50.0)))


def test_grid_screen_points_are_inside_surface(dims):
    viewport = Viewport(pan=WorldPoint(13.0, -7.0), zoom=2.0)

    pts = scene.grid_screen_points(viewport, dims)

    assert pts.shape[1] == 2 and len(pts) > 0
    # the first row and column may start up to one spacing (<= 100 px) before the edge
    assert np.all(pts[:, 0] > -100.0) and np.all(pts[:, 0] <= dims.width + 1e-9)
    assert np.all(pts[:, 1] > -100.0) and np.all(pts[:, 1] <= dims.height + 1e-9)


def test_grid_screen_points_empty_above_limit(viewport, dims):
    assert scene.grid_screen_points(viewport, dims, max_points=10).shape == (0, 2)


def test_element_segments_skip_unresolved(viewport, dims):
    elements = [
        LineElement("e1", ElementKind.BEAM, "a", "b"),
        LineElement("e2", ElementKind.TRUSS, "a", "ghost"),
    ]

    segments = scene.element_segments(elements, NODES, viewport, dims)

    assert [s.element_id for s in segments] == ["e1"]
    assert segments[0].start == ScreenPoint(400.0, 300.0)
    assert segments[0].end == ScreenPoint(500.0, 350.0)


def test_preview_segment_follows_pending_line():
    session = EditorSession()
    assert scene.preview_segment(session, NODES) is None

    session.interaction.set_mode(InteractionMode.PLACE_LINE_ELEMENT)
    session.interaction.click(WorldPoint(0.0, 0.0), ScreenPoint(400.0, 300.0), "a")
    session.interaction.pointer_moved(ScreenPoint(420.0, 330.0))

    assert scene.preview_segment(session, NODES) == (ScreenPoint(400.0, 300.0), ScreenPoint(420.0, 330.0))
