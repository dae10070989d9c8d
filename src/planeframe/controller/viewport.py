"""
Viewport Controller
===================
Pan and zoom operations on an immutable `Viewport`.

Every function returns a new value; the caller (the input dispatcher's
session) decides where the result is stored. Zoom is always clamped into
[min_zoom, max_zoom], a clamp is a normal outcome and not an error.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import math
from typing import Optional

from planeframe.config import FIT_PADDING, TOOLBAR_ZOOM_STEP, WHEEL_ZOOM_IN, WHEEL_ZOOM_OUT
from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import Bounds, ScreenPoint, ViewDimensions, Viewport, WorldPoint
from planeframe.model.geometry_utils import screen_to_world

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanGesture:
    """
    A running pan drag.

    The anchor viewport is captured by value when the gesture starts, so later
    viewport or surface-size changes do not move the anchor.
    """
    anchor_screen_point: ScreenPoint
    anchor_viewport: Viewport


def _check_factor(factor: float) -> None:
    if not (math.isfinite(factor) and factor > 0.0):
        raise InvalidArgumentError(f"Zoom factor must be a positive finite number, got {factor}.")


def zoom_at_screen_point(
    viewport: Viewport,
    dims: ViewDimensions,
    anchor: ScreenPoint,
    factor: float
) -> Viewport:
    """
    Zoom by `factor` keeping the world point under `anchor` in place.

    Args:
        viewport: Current viewport.
        dims: Pixel size of the surface.
        anchor: Screen point that stays fixed (usually the cursor).
        factor: Multiplicative zoom change, > 0.

    Returns:
        The updated viewport. When the zoom clamp binds, the anchor stays as
        close to its world point as the clamped zoom allows.

    Raises:
        InvalidArgumentError: If `factor` is not a positive finite number.
    """
    _check_factor(factor)
    world_before = screen_to_world(anchor, viewport, dims)
    zoomed = replace(viewport, zoom=viewport.clamp_zoom(viewport.zoom * factor))
    world_after = screen_to_world(anchor, zoomed, dims)
    return replace(zoomed, pan=zoomed.pan + (world_before - world_after))


def begin_pan(viewport: Viewport, screen_point: ScreenPoint) -> PanGesture:
    return PanGesture(anchor_screen_point=screen_point, anchor_viewport=viewport)


def continue_pan(gesture: PanGesture, screen_point: ScreenPoint, zoom: float) -> WorldPoint:
    """
    New pan for a drag that reached `screen_point`.

    The world under the cursor follows the drag. The live `zoom` is used, a
    gesture does not lock the zoom level.
    """
    if not (math.isfinite(zoom) and zoom > 0.0):
        raise InvalidArgumentError(f"Zoom must be a positive finite number, got {zoom}.")
    delta = screen_point - gesture.anchor_screen_point
    return WorldPoint(
        gesture.anchor_viewport.pan.x - delta.x / zoom,
        gesture.anchor_viewport.pan.z - delta.z / zoom,
    )


def apply_pan(viewport: Viewport, gesture: PanGesture, screen_point: ScreenPoint) -> Viewport:
    return replace(viewport, pan=continue_pan(gesture, screen_point, viewport.zoom))


def zoom_to_fit_bounds(
    viewport: Viewport,
    bounds: Optional[Bounds],
    dims: ViewDimensions,
    padding: float = FIT_PADDING
) -> Viewport:
    """
    Center on `bounds` and choose the largest zoom showing all of it.

    Args:
        viewport: Current viewport, provides the zoom limits.
        bounds: World bounds of the content; None when there is no content.
        dims: Pixel size of the surface.
        padding: Margin around the bounds in world units.

    Returns:
        The fitted viewport, or zoom 1.0 at the origin when `bounds` is None.
    """
    if bounds is None:
        return replace(viewport, zoom=viewport.clamp_zoom(1.0), pan=WorldPoint(0.0, 0.0))

    if not (math.isfinite(padding) and padding >= 0.0):
        raise InvalidArgumentError(f"Padding must be a non-negative finite number, got {padding}.")

    width = bounds.width + 2 * padding
    height = bounds.height + 2 * padding
    candidates = [viewport.max_zoom]
    if width > 0.0:
        candidates.append(dims.width / width)
    if height > 0.0:
        candidates.append(dims.height / height)
    zoom = max(viewport.min_zoom, min(candidates))

    logger.debug(f"Fit zoom {zoom:g} centered at ({bounds.center.x:g}, {bounds.center.z:g})")
    return replace(viewport, zoom=zoom, pan=bounds.center)


def zoom_step(viewport: Viewport, factor: float) -> Viewport:
    """Zoom without an anchor; pan stays unchanged."""
    _check_factor(factor)
    return replace(viewport, zoom=viewport.clamp_zoom(viewport.zoom * factor))


def zoom_in(viewport: Viewport) -> Viewport:
    return zoom_step(viewport, TOOLBAR_ZOOM_STEP)


def zoom_out(viewport: Viewport) -> Viewport:
    return zoom_step(viewport, 1 / TOOLBAR_ZOOM_STEP)


def zoom_to_actual_size(viewport: Viewport) -> Viewport:
    return replace(viewport, zoom=viewport.clamp_zoom(1.0))


def wheel_zoom_factor(delta_y: float) -> Optional[float]:
    """Zoom factor for a wheel step: scrolling down zooms out, up zooms in."""
    if delta_y > 0:
        return WHEEL_ZOOM_OUT
    if delta_y < 0:
        return WHEEL_ZOOM_IN
    return None
