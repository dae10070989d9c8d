"""
Toolkit independent input events.

The canvas widget converts Qt events into these before handing them to the
input dispatcher, so the dispatcher can be driven directly in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, IntEnum, StrEnum, auto

from planeframe.model.geometry_primitives import ScreenPoint


class PointerButton(IntEnum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


class Modifier(Flag):
    NONE = 0
    CTRL = auto()
    SHIFT = auto()
    ALT = auto()
    META = auto()


class Key(StrEnum):
    ESCAPE = "Escape"
    DIGIT_1 = "1"
    DIGIT_2 = "2"
    DIGIT_3 = "3"
    DIGIT_4 = "4"


@dataclass(frozen=True)
class PointerEvent:
    button: PointerButton
    screen_x: float
    screen_z: float
    modifiers: Modifier = Modifier.NONE

    def __post_init__(self) -> None:
        # rejects non-finite coordinates
        ScreenPoint(self.screen_x, self.screen_z)

    @property
    def point(self) -> ScreenPoint:
        return ScreenPoint(self.screen_x, self.screen_z)


@dataclass(frozen=True)
class WheelEvent:
    delta_y: float
    ctrl_pressed: bool
    screen_x: float
    screen_z: float

    def __post_init__(self) -> None:
        ScreenPoint(self.screen_x, self.screen_z)

    @property
    def point(self) -> ScreenPoint:
        return ScreenPoint(self.screen_x, self.screen_z)


@dataclass(frozen=True)
class KeyEvent:
    key: Key | str
    modifiers: Modifier = Modifier.NONE

    @property
    def accelerator(self) -> bool:
        return bool(self.modifiers & (Modifier.CTRL | Modifier.META))
