"""
Geometric primitives of the editing plane.

World points live in model units, screen points in pixels of the rendering
surface (origin top-left). Both use the (x, z) naming of the structural
model: z is the vertical world axis and maps to screen-down.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TypeVar, TYPE_CHECKING

import numpy as np

from planeframe.model.errors import InvalidArgumentError

if TYPE_CHECKING:
    import numpy.typing as npt

_P = TypeVar("_P", bound="_PlanePoint")


def _require_finite(name: str, *values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise InvalidArgumentError(f"{name} requires finite values, got {values}.")


@dataclass(frozen=True)
class _PlanePoint:
    """Shared arithmetic of world and screen points."""
    x: float
    z: float

    def __post_init__(self) -> None:
        _require_finite(type(self).__name__, self.x, self.z)

    def __add__(self: _P, other: _PlanePoint) -> _P:
        return type(self)(self.x + other.x, self.z + other.z)

    def __sub__(self: _P, other: _PlanePoint) -> _P:
        return type(self)(self.x - other.x, self.z - other.z)

    def __mul__(self: _P, scalar: float) -> _P:
        return type(self)(self.x * scalar, self.z * scalar)

    def __truediv__(self: _P, scalar: float) -> _P:
        if scalar == 0.0:
            raise ZeroDivisionError("Division of a point by zero.")
        return type(self)(self.x / scalar, self.z / scalar)

    def __neg__(self: _P) -> _P:
        return type(self)(-self.x, -self.z)

    def distance_to(self, other: _PlanePoint) -> float:
        return math.hypot(self.x - other.x, self.z - other.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.z])


@dataclass(frozen=True)
class WorldPoint(_PlanePoint):
    """A point in model units."""


@dataclass(frozen=True)
class ScreenPoint(_PlanePoint):
    """A point in pixels of the rendering surface."""


@dataclass(frozen=True)
class ViewDimensions:
    """Pixel size of the rendering surface."""
    width: float
    height: float

    def __post_init__(self) -> None:
        _require_finite("ViewDimensions", self.width, self.height)
        if self.width <= 0.0 or self.height <= 0.0:
            raise InvalidArgumentError(
                f"View dimensions must be positive, got {self.width}x{self.height}."
            )

    @property
    def center(self) -> ScreenPoint:
        return ScreenPoint(self.width / 2, self.height / 2)


@dataclass(frozen=True)
class Bounds:
    """Axis aligned rectangle in world coordinates."""
    min_x: float
    max_x: float
    min_z: float
    max_z: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_z - self.min_z

    @property
    def center(self) -> WorldPoint:
        return WorldPoint((self.min_x + self.max_x) / 2, (self.min_z + self.max_z) / 2)


@dataclass(frozen=True)
class Viewport:
    """
    Pan/zoom state of the editing surface.

    `pan` is the world point shown at the center of the surface, `zoom` the
    number of pixels per world unit. Instances are immutable, every update
    goes through `dataclasses.replace` so the bounds are re-checked.
    """
    pan: WorldPoint = WorldPoint(0.0, 0.0)
    zoom: float = 1.0
    min_zoom: float = 1e-8
    max_zoom: float = 1e8

    def __post_init__(self) -> None:
        _require_finite("Viewport", self.zoom, self.min_zoom, self.max_zoom)
        if not 0.0 < self.min_zoom <= self.max_zoom:
            raise InvalidArgumentError(
                f"Zoom bounds must satisfy 0 < min_zoom <= max_zoom, got [{self.min_zoom}, {self.max_zoom}]."
            )
        if not self.min_zoom <= self.zoom <= self.max_zoom:
            raise InvalidArgumentError(
                f"Zoom {self.zoom} outside of [{self.min_zoom}, {self.max_zoom}]."
            )

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))
