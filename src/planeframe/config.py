"""
Configuration & Global Constants
================================
This module serves as the central registry for the editor's tunable constants
and the application identity.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (zoom limits, pick tolerances,
   grid sizes) being scattered throughout the code.
2. Persistence: `load_settings` lets a user override the defaults through the
   application's INI settings file (QSettings).

Exports:
    EditorSettings: Frozen bundle of all tunables.
    DEFAULT_SETTINGS: The built-in defaults.
    load_settings: Defaults merged with QSettings overrides.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
import logging
import math

logger = logging.getLogger(__name__)

ORG_ID = "planeframe"
APP_ID = "planeframe"
ORG_DOMAIN = "planeframe.local"
VISIBLE_APP_NAME = "PlaneFrame"

# Zoom range wide enough for unit-agnostic models.
MIN_ZOOM: float = 1e-8
MAX_ZOOM: float = 1e8

NODE_TOLERANCE_PX: float = 15.0
ELEMENT_TOLERANCE_PX: float = 5.0

BASE_GRID_SIZE: float = 20.0
MAX_GRID_POINTS: int = 20_000

WHEEL_ZOOM_OUT: float = 0.9
WHEEL_ZOOM_IN: float = 1.1
TOOLBAR_ZOOM_STEP: float = 1.5
FIT_PADDING: float = 50.0

DEFAULT_VIEW_WIDTH: float = 800.0
DEFAULT_VIEW_HEIGHT: float = 600.0


@dataclass(frozen=True)
class EditorSettings:
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    node_tolerance: float = NODE_TOLERANCE_PX
    element_tolerance: float = ELEMENT_TOLERANCE_PX
    base_grid_size: float = BASE_GRID_SIZE
    max_grid_points: int = MAX_GRID_POINTS
    fit_padding: float = FIT_PADDING


DEFAULT_SETTINGS = EditorSettings()

# QSettings key -> EditorSettings field
_SETTINGS_KEYS: dict[str, str] = {
    "viewport/min_zoom": "min_zoom",
    "viewport/max_zoom": "max_zoom",
    "hit/node_tolerance": "node_tolerance",
    "hit/element_tolerance": "element_tolerance",
    "grid/base_size": "base_grid_size",
    "grid/max_points": "max_grid_points",
    "view/fit_padding": "fit_padding",
}

# everything else must be strictly positive
_NON_NEGATIVE = {"node_tolerance", "element_tolerance", "fit_padding"}


def load_settings() -> EditorSettings:
    """
    Read overrides from the application's QSettings.

    Requires the organization/application names to be set (see
    `planeframe.main.create_app`). Unparsable or out-of-range values, and a
    zoom range with min_zoom > max_zoom, fall back to the defaults.
    """
    from PySide6.QtCore import QSettings

    settings = QSettings()
    types = {f.name: f.type for f in fields(EditorSettings)}
    overrides: dict[str, float | int] = {}

    for key, name in _SETTINGS_KEYS.items():
        if not settings.contains(key):
            continue
        raw = settings.value(key)
        try:
            overrides[name] = int(raw) if types[name] in (int, "int") else float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid setting {key}={raw!r}")

    for name, value in list(overrides.items()):
        if not _in_range(name, value):
            logger.warning(f"Ignoring out-of-range setting {name}={value!r}")
            del overrides[name]

    min_zoom = overrides.get("min_zoom", DEFAULT_SETTINGS.min_zoom)
    max_zoom = overrides.get("max_zoom", DEFAULT_SETTINGS.max_zoom)
    if min_zoom > max_zoom:
        logger.warning(f"Ignoring zoom range [{min_zoom}, {max_zoom}]: min_zoom exceeds max_zoom")
        overrides.pop("min_zoom", None)
        overrides.pop("max_zoom", None)

    if overrides:
        logger.info(f"Settings overrides: {overrides}")
    return EditorSettings(**overrides)


def _in_range(name: str, value: float) -> bool:
    if not math.isfinite(value):
        return False
    if name in _NON_NEGATIVE:
        return value >= 0
    return value > 0
