import math

import numpy as np
import pytest

from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import Bounds, ScreenPoint, ViewDimensions, Viewport, WorldPoint
from planeframe.model.geometry_utils import (
    grid_points, grid_spacing, point_to_segment_distance, points_bounds, screen_to_world,
    visible_world_bounds, world_to_screen
)


def test_origin_maps_to_surface_center(viewport, dims):
    assert world_to_screen(WorldPoint(0.0, 0.0), viewport, dims) == ScreenPoint(400.0, 300.0)


@pytest.mark.parametrize("zoom", [1e-8, 1e-3, 2.5, 1e3, 1e8])
def test_screen_to_world_inverts_world_to_screen(dims, zoom):
    # points a few pixels from the center at every zoom level
    vp = Viewport(pan=WorldPoint(3.0 / zoom, -2.0 / zoom), zoom=zoom)
    world = WorldPoint(10.0 / zoom, 4.0 / zoom)

    back = screen_to_world(world_to_screen(world, vp, dims), vp, dims)

    assert back.x == pytest.approx(world.x, rel=1e-9)
    assert back.z == pytest.approx(world.z, rel=1e-9)


@pytest.mark.parametrize("zoom", [1e-8, 1.0, 1e8])
def test_world_to_screen_inverts_screen_to_world(dims, zoom):
    vp = Viewport(pan=WorldPoint(0.5, -7.0), zoom=zoom)
    screen = ScreenPoint(123.0, 456.0)

    back = world_to_screen(screen_to_world(screen, vp, dims), vp, dims)

    assert back.x == pytest.approx(screen.x, rel=1e-9)
    assert back.z == pytest.approx(screen.z, rel=1e-9)


def test_z_axis_points_down_on_screen(viewport, dims):
    below = world_to_screen(WorldPoint(0.0, 10.0), viewport, dims)
    assert below.z > dims.height / 2


def test_non_finite_points_are_rejected():
    with pytest.raises(InvalidArgumentError):
        WorldPoint(math.nan, 0.0)
    with pytest.raises(InvalidArgumentError):
        ScreenPoint(0.0, math.inf)


def test_view_dimensions_must_be_positive():
    with pytest.raises(InvalidArgumentError):
        ViewDimensions(0.0, 600.0)


def test_viewport_rejects_zoom_outside_bounds():
    with pytest.raises(InvalidArgumentError):
        Viewport(zoom=5.0, min_zoom=0.1, max_zoom=2.0)
    with pytest.raises(InvalidArgumentError):
        Viewport(zoom=1.0, min_zoom=2.0, max_zoom=1.0)


@pytest.mark.parametrize("zoom", [1e-4, 0.01, 0.37, 1.0, 7.3, 120.0, 1e4, 1e6, 1e8])
def test_grid_spacing_stays_in_pixel_band(zoom):
    spacing = grid_spacing(20.0, zoom)
    assert 20.0 <= spacing * zoom <= 100.0


def test_grid_spacing_is_quantized_by_powers_of_two():
    assert grid_spacing(20.0, 1.0) == 20.0
    assert grid_spacing(20.0, 0.1) == 320.0
    assert grid_spacing(20.0, 10.0) == 10.0


def test_grid_spacing_respects_absolute_clamp():
    # at the zoom limits the clamp wins over the pixel band
    coarse = grid_spacing(20.0, 1e-8)
    assert 1e6 <= coarse < 2e6
    assert coarse * 1e-8 < 20.0

    fine = grid_spacing(20.0, 1e8)
    assert 0.5e-6 < fine <= 1e-6
    assert 20.0 <= fine * 1e8 <= 100.0


@pytest.mark.parametrize("base, zoom", [(0.0, 1.0), (20.0, -1.0), (-5.0, 2.0)])
def test_grid_spacing_rejects_non_positive_input(base, zoom):
    with pytest.raises(InvalidArgumentError):
        grid_spacing(base, zoom)


def test_distance_to_segment_interior():
    d = point_to_segment_distance(ScreenPoint(5.0, 3.0), ScreenPoint(0.0, 0.0), ScreenPoint(10.0, 0.0))
    assert d == pytest.approx(3.0)


def test_distance_to_segment_is_clamped_to_endpoints():
    d = point_to_segment_distance(ScreenPoint(13.0, 4.0), ScreenPoint(0.0, 0.0), ScreenPoint(10.0, 0.0))
    assert d == pytest.approx(5.0)


def test_distance_to_degenerate_segment():
    a = ScreenPoint(1.0, 1.0)
    assert point_to_segment_distance(ScreenPoint(4.0, 5.0), a, a) == pytest.approx(5.0)


def test_visible_world_bounds(viewport, dims):
    assert visible_world_bounds(viewport, dims) == Bounds(-400.0, 400.0, -300.0, 300.0)


def test_grid_points_cover_visible_area(viewport, dims):
    pts = grid_points(viewport, dims, base_size=20.0)

    assert pts.shape == (41 * 31, 2)
    assert pts[:, 0].min() == pytest.approx(-400.0)
    assert pts[:, 0].max() == pytest.approx(400.0)
    assert pts[:, 1].min() == pytest.approx(-300.0)
    assert pts[:, 1].max() == pytest.approx(300.0)
    assert np.allclose(np.mod(pts, 20.0), 0.0)


def test_grid_points_above_limit_are_skipped(viewport, dims):
    pts = grid_points(viewport, dims, base_size=20.0, max_points=100)
    assert pts.shape == (0, 2)


def test_points_bounds():
    assert points_bounds([]) is None
    b = points_bounds([WorldPoint(1.0, -2.0), WorldPoint(-3.0, 5.0)])
    assert b == Bounds(-3.0, 1.0, -2.0, 5.0)
    assert b.center == WorldPoint(-1.0, 1.5)
