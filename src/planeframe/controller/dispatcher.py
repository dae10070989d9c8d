"""
Input Dispatcher
================
Routes pointer, wheel and keyboard events of one editing session to the
viewport functions, the hit tester and the interaction state machine, and
forwards the resulting intents to the model store.

Why is this file needed?
------------------------
1. Ownership: All per-gesture state (pan anchor, line-creation sub-state,
   preview point) lives in an explicit `EditorSession` instead of widget
   attributes, so the transition logic is testable without a window.
2. Decoupling: The dispatcher only emits intents; the store performs the
   mutations and notifies the views.

Every handler returns True when the session changed in a way that requires a
repaint.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
import logging
from typing import Optional, Protocol

from planeframe.config import DEFAULT_SETTINGS, DEFAULT_VIEW_HEIGHT, DEFAULT_VIEW_WIDTH, EditorSettings
from planeframe.controller.events import Key, KeyEvent, PointerButton, PointerEvent, WheelEvent
from planeframe.controller.hit_testing import hit_test_line_element, hit_test_node
from planeframe.controller.interaction import (
    CreateLineElementIntent, CreateNodeIntent, Intent, InteractionMode, InteractionStateMachine,
    TransitionResult
)
from planeframe.controller import viewport as vp
from planeframe.model.errors import InvalidArgumentError
from planeframe.model.geometry_primitives import ScreenPoint, ViewDimensions, Viewport, WorldPoint
from planeframe.model.geometry_utils import screen_to_world
from planeframe.model.structure import ElementKind, ModelSnapshot, model_bounds

logger = logging.getLogger(__name__)


class ModelStoreProtocol(Protocol):
    def create_node(self, position: WorldPoint) -> str: ...
    def create_line_element(self, start_id: str, end_id: str, kind: ElementKind = ...) -> str: ...
    def snapshot(self) -> ModelSnapshot: ...


class EntityKind(StrEnum):
    NODE = "node"
    ELEMENT = "element"


@dataclass(frozen=True)
class ContextTarget:
    """The entity a properties request refers to."""
    kind: EntityKind
    entity_id: str


# Ctrl/Meta + digit -> (mode, line kind)
ACCELERATORS: dict[str, tuple[InteractionMode, Optional[ElementKind]]] = {
    Key.DIGIT_1: (InteractionMode.SELECT, None),
    Key.DIGIT_2: (InteractionMode.PLACE_NODE, None),
    Key.DIGIT_3: (InteractionMode.PLACE_LINE_ELEMENT, ElementKind.TRUSS),
    Key.DIGIT_4: (InteractionMode.PLACE_LINE_ELEMENT, ElementKind.BEAM),
}


@dataclass
class EditorSession:
    """Everything one editing surface owns between events."""
    viewport: Viewport = field(default_factory=Viewport)
    dimensions: ViewDimensions = field(
        default_factory=lambda: ViewDimensions(DEFAULT_VIEW_WIDTH, DEFAULT_VIEW_HEIGHT)
    )
    interaction: InteractionStateMachine = field(default_factory=InteractionStateMachine)
    pan_gesture: Optional[vp.PanGesture] = None
    cursor: Optional[ScreenPoint] = None

    @property
    def is_panning(self) -> bool:
        return self.pan_gesture is not None

    def cursor_world(self) -> Optional[WorldPoint]:
        if self.cursor is None:
            return None
        return screen_to_world(self.cursor, self.viewport, self.dimensions)


class InputDispatcher:
    """Translate raw input of one session into viewport changes and intents."""

    def __init__(
        self,
        store: ModelStoreProtocol,
        session: Optional[EditorSession] = None,
        settings: EditorSettings = DEFAULT_SETTINGS
    ) -> None:
        self.store = store
        self.settings = settings
        self.session = session if session is not None else EditorSession(
            viewport=Viewport(
                zoom=min(max(1.0, settings.min_zoom), settings.max_zoom),
                min_zoom=settings.min_zoom,
                max_zoom=settings.max_zoom,
            )
        )
        # left press that may still complete as a click
        self._click_armed = False

    # ------------------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------------------

    def pointer_down(self, event: PointerEvent) -> bool:
        s = self.session
        if event.button == PointerButton.MIDDLE:
            s.pan_gesture = vp.begin_pan(s.viewport, event.point)
            self._click_armed = False
            return False
        if event.button == PointerButton.LEFT:
            self._click_armed = not s.is_panning
        return False

    def pointer_move(self, event: PointerEvent) -> bool:
        s = self.session
        s.cursor = event.point
        changed = False

        if s.pan_gesture is not None:
            s.viewport = vp.apply_pan(s.viewport, s.pan_gesture, event.point)
            changed = True

        if s.interaction.pointer_moved(event.point):
            changed = True
        return changed

    def pointer_up(self, event: PointerEvent) -> bool:
        s = self.session
        if event.button == PointerButton.MIDDLE:
            if s.pan_gesture is not None:
                s.pan_gesture = None
                return True
            return False

        if event.button != PointerButton.LEFT:
            return False

        armed, self._click_armed = self._click_armed, False
        if not armed or s.is_panning:
            return False
        return self._click(event.point)

    def context_request(self, event: PointerEvent) -> Optional[ContextTarget]:
        """
        Resolve an "open properties" request (right click) to a model entity.

        Nodes take priority over line elements. A hit switches the editor to
        SELECT mode.
        """
        target = None
        node_id = self.node_at(event.point)
        if node_id is not None:
            target = ContextTarget(EntityKind.NODE, node_id)
        else:
            element_id = self.element_at(event.point)
            if element_id is not None:
                target = ContextTarget(EntityKind.ELEMENT, element_id)

        if target is not None:
            self.set_mode(InteractionMode.SELECT)
        return target

    def node_at(self, point: ScreenPoint) -> Optional[str]:
        return hit_test_node(
            point, self.store.snapshot().nodes, self.session.viewport,
            self.session.dimensions, self.settings.node_tolerance
        )

    def element_at(self, point: ScreenPoint) -> Optional[str]:
        snapshot = self.store.snapshot()
        return hit_test_line_element(
            point, snapshot.elements, snapshot.nodes, self.session.viewport,
            self.session.dimensions, self.settings.element_tolerance
        )

    # ------------------------------------------------------------------------------
    # Wheel & keyboard
    # ------------------------------------------------------------------------------

    def wheel(self, event: WheelEvent) -> bool:
        """
        Ctrl + wheel zooms at the cursor. Returns True only when the event was
        claimed; plain wheel events are left to the caller.
        """
        if not event.ctrl_pressed:
            return False
        factor = vp.wheel_zoom_factor(event.delta_y)
        if factor is not None:
            s = self.session
            s.viewport = vp.zoom_at_screen_point(s.viewport, s.dimensions, event.point, factor)
        return True

    def key_down(self, event: KeyEvent) -> bool:
        if event.key == Key.ESCAPE:
            return self.cancel()

        if event.accelerator and event.key in ACCELERATORS:
            mode, kind = ACCELERATORS[event.key]
            self.set_mode(mode, kind)
            return True
        return False

    # ------------------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------------------

    def set_mode(self, mode: InteractionMode, line_kind: Optional[ElementKind] = None) -> bool:
        s = self.session
        had_pan = s.pan_gesture is not None
        s.pan_gesture = None
        self._click_armed = False
        result = s.interaction.set_mode(mode, line_kind)
        logger.debug(f"Mode -> {mode} ({s.interaction.line_kind})")
        return result.changed or had_pan

    def cancel(self) -> bool:
        """Abort a pending line element and any pan gesture."""
        s = self.session
        had_pan = s.pan_gesture is not None
        s.pan_gesture = None
        self._click_armed = False
        return s.interaction.cancel().changed or had_pan

    def resize(self, width: float, height: float) -> None:
        self.session.dimensions = ViewDimensions(width, height)

    def zoom_in(self) -> None:
        self.session.viewport = vp.zoom_in(self.session.viewport)

    def zoom_out(self) -> None:
        self.session.viewport = vp.zoom_out(self.session.viewport)

    def zoom_actual(self) -> None:
        self.session.viewport = vp.zoom_to_actual_size(self.session.viewport)

    def zoom_fit(self) -> None:
        s = self.session
        s.viewport = vp.zoom_to_fit_bounds(
            s.viewport, model_bounds(self.store.snapshot()), s.dimensions, self.settings.fit_padding
        )

    def reset_view(self) -> None:
        s = self.session
        s.viewport = replace(s.viewport, pan=WorldPoint(0.0, 0.0), zoom=s.viewport.clamp_zoom(1.0))

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _click(self, point: ScreenPoint) -> bool:
        s = self.session
        world = screen_to_world(point, s.viewport, s.dimensions)

        hit = self.node_at(point) if s.interaction.needs_node_hit else None

        result: TransitionResult = s.interaction.click(world, point, hit)
        if result.rejected is not None:
            logger.debug(f"Click rejected: {result.rejected}")
        if result.intent is not None:
            self._apply(result.intent)
            return True
        return result.changed

    def _apply(self, intent: Intent) -> Optional[str]:
        try:
            if isinstance(intent, CreateNodeIntent):
                return self.store.create_node(intent.position)
            if isinstance(intent, CreateLineElementIntent):
                return self.store.create_line_element(intent.start_node_id, intent.end_node_id, intent.kind)
        except InvalidArgumentError as e:
            # e.g. the start node was deleted while the element was pending
            logger.warning(f"Store rejected {type(intent).__name__}: {e}")
        return None
