from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, TYPE_CHECKING

import numpy as np

from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import (
    Bounds, ScreenPoint, ViewDimensions, Viewport, WorldPoint
)

if TYPE_CHECKING:
    from numpy import typing as npt

logger = logging.getLogger(__name__)

# On-screen band (pixels) the adaptive grid spacing is kept in.
GRID_MIN_PX = 20.0
GRID_MAX_PX = 100.0
# Absolute clamp of the grid spacing in world units.
GRID_SPACING_MAX = 1e6
GRID_SPACING_MIN = 1e-6


def world_to_screen(world: WorldPoint, viewport: Viewport, dims: ViewDimensions) -> ScreenPoint:
    """
    Map a world point to pixel coordinates of the rendering surface.

    Args:
        world: Point in model units.
        viewport: Current pan/zoom state.
        dims: Pixel size of the surface.

    Returns:
        The screen point, origin top-left.
    """
    return ScreenPoint(
        (world.x - viewport.pan.x) * viewport.zoom + dims.width / 2,
        (world.z - viewport.pan.z) * viewport.zoom + dims.height / 2,
    )


def screen_to_world(screen: ScreenPoint, viewport: Viewport, dims: ViewDimensions) -> WorldPoint:
    """Exact inverse of `world_to_screen`."""
    return WorldPoint(
        (screen.x - dims.width / 2) / viewport.zoom + viewport.pan.x,
        (screen.z - dims.height / 2) / viewport.zoom + viewport.pan.z,
    )


def point_to_segment_distance(p: ScreenPoint, a: ScreenPoint, b: ScreenPoint) -> float:
    """
    Distance of point `p` to the segment a-b.

    The projection parameter is clamped to [0, 1], so a degenerate segment
    (a == b) yields the plain point-to-point distance.

    Args:
        p: The query point.
        a: Segment start.
        b: Segment end.

    Returns:
        Euclidean distance in the units of the inputs.
    """
    cx, cz = b.x - a.x, b.z - a.z
    len_sq = cx * cx + cz * cz

    t = 0.0
    if len_sq != 0.0:
        t = ((p.x - a.x) * cx + (p.z - a.z) * cz) / len_sq
        t = max(0.0, min(1.0, t))

    return math.hypot(p.x - (a.x + t * cx), p.z - (a.z + t * cz))


def grid_spacing(base_size: float, zoom: float) -> float:
    """
    Quantize the grid spacing so that grid lines stay 20-100 px apart.

    The spacing is doubled while it is too dense on screen and halved while it
    is too coarse, both limited by an absolute clamp of [1e-6, 1e6] world
    units. The two loop conditions exclude each other, so at most one of the
    loops does any work.

    Args:
        base_size: Starting spacing in world units.
        zoom: Pixels per world unit.

    Returns:
        The spacing in world units.

    Raises:
        InvalidArgumentError: If `base_size` or `zoom` is not positive.
    """
    if not (base_size > 0.0 and zoom > 0.0) or not math.isfinite(base_size * zoom):
        raise InvalidArgumentError(f"Grid spacing needs positive inputs, got base={base_size}, zoom={zoom}.")

    spacing = base_size
    while spacing * zoom < GRID_MIN_PX and spacing < GRID_SPACING_MAX:
        spacing *= 2
    while spacing * zoom > GRID_MAX_PX and spacing > GRID_SPACING_MIN:
        spacing /= 2
    return spacing


def visible_world_bounds(viewport: Viewport, dims: ViewDimensions) -> Bounds:
    """World rectangle covered by the rendering surface."""
    top_left = screen_to_world(ScreenPoint(0.0, 0.0), viewport, dims)
    bottom_right = screen_to_world(ScreenPoint(dims.width, dims.height), viewport, dims)
    return Bounds(top_left.x, bottom_right.x, top_left.z, bottom_right.z)


def grid_points(
    viewport: Viewport,
    dims: ViewDimensions,
    base_size: float = 20.0,
    max_points: int = 20_000
) -> npt.NDArray[np.float64]:
    """
    World coordinates of the grid points inside the visible area.

    Args:
        viewport: Current pan/zoom state.
        dims: Pixel size of the surface.
        base_size: Base grid size in world units, see `grid_spacing`.
        max_points: Upper limit of generated points. When the absolute spacing
            clamp makes the grid denser than this, nothing is returned.

    Returns:
        Array of shape (N, 2) with (x, z) pairs.
    """
    spacing = grid_spacing(base_size, viewport.zoom)
    bounds = visible_world_bounds(viewport, dims)

    x0 = math.floor(bounds.min_x / spacing) * spacing
    z0 = math.floor(bounds.min_z / spacing) * spacing
    nx = int(math.floor((bounds.max_x - x0) / spacing)) + 1
    nz = int(math.floor((bounds.max_z - z0) / spacing)) + 1

    if nx * nz > max_points:
        logger.debug(f"Grid of {nx}x{nz} points exceeds limit {max_points}, skipped.")
        return np.empty((0, 2), dtype=np.float64)

    xs = x0 + spacing * np.arange(nx, dtype=np.float64)
    zs = z0 + spacing * np.arange(nz, dtype=np.float64)
    gx, gz = np.meshgrid(xs, zs, indexing="ij")
    return np.column_stack((gx.ravel(), gz.ravel()))


def points_bounds(points: Iterable[WorldPoint]) -> Optional[Bounds]:
    """Bounding box of the given points, None if there are none."""
    arr = np.array([(p.x, p.z) for p in points], dtype=np.float64).reshape(-1, 2)
    if arr.shape[0] == 0:
        return None
    (min_x, min_z), (max_x, max_z) = arr.min(axis=0), arr.max(axis=0)
    return Bounds(float(min_x), float(max_x), float(min_z), float(max_z))
