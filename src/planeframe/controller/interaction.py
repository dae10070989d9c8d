"""
Interaction State Machine
=========================
Tracks the editing mode and the two-click creation of line elements.

States::

    SELECT
    PLACE_NODE
    PLACE_LINE_ELEMENT / AwaitingStart
    PLACE_LINE_ELEMENT / AwaitingEnd(start_node_id)

The machine never touches the model. A click yields a `TransitionResult`
that may carry an intent for the model store; rejected clicks are reported as
a `RejectReason`, not raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Optional, Union

from planeframe.model.geometry_primitives import ScreenPoint, WorldPoint
from planeframe.model.structure import ElementKind

logger = logging.getLogger(__name__)


class InteractionMode(StrEnum):
    SELECT = "select"
    PLACE_NODE = "placeNode"
    PLACE_LINE_ELEMENT = "placeLineElement"


@dataclass(frozen=True)
class AwaitingStart:
    pass


@dataclass(frozen=True)
class AwaitingEnd:
    start_node_id: str


LineCreationState = Union[AwaitingStart, AwaitingEnd]

AWAITING_START = AwaitingStart()


@dataclass(frozen=True)
class CreateNodeIntent:
    position: WorldPoint


@dataclass(frozen=True)
class CreateLineElementIntent:
    start_node_id: str
    end_node_id: str
    kind: ElementKind


Intent = Union[CreateNodeIntent, CreateLineElementIntent]


class RejectReason(StrEnum):
    NO_NODE_HIT = "noNodeHit"
    SAME_NODE = "sameNode"


@dataclass(frozen=True)
class TransitionResult:
    intent: Optional[Intent] = None
    changed: bool = False
    rejected: Optional[RejectReason] = None


NO_CHANGE = TransitionResult()


class InteractionStateMachine:
    """Editing mode plus the line-creation sub-state and its preview point."""

    def __init__(self, line_kind: ElementKind = ElementKind.TRUSS) -> None:
        self.mode: InteractionMode = InteractionMode.SELECT
        self.line_state: LineCreationState = AWAITING_START
        self.line_kind: ElementKind = line_kind
        self.preview_point: Optional[ScreenPoint] = None

    def __repr__(self) -> str:
        return f"InteractionStateMachine(mode={self.mode!s}, line_state={self.line_state!r})"

    @property
    def needs_node_hit(self) -> bool:
        """Whether a click has to be resolved against the nodes."""
        return self.mode == InteractionMode.PLACE_LINE_ELEMENT

    @property
    def pending_start_node(self) -> Optional[str]:
        if isinstance(self.line_state, AwaitingEnd):
            return self.line_state.start_node_id
        return None

    # ---- transitions ----

    def set_mode(self, mode: InteractionMode, line_kind: Optional[ElementKind] = None) -> TransitionResult:
        """
        Switch the top-level mode.

        Any pending line creation is abandoned, never committed.
        """
        changed = mode != self.mode or self.line_state != AWAITING_START
        if line_kind is not None and line_kind != self.line_kind:
            self.line_kind = line_kind
            changed = True

        if self.pending_start_node is not None:
            logger.debug(f"Abandoned line element starting at {self.pending_start_node}")
        self.mode = mode
        self._reset_line()
        return TransitionResult(changed=changed)

    def cancel(self) -> TransitionResult:
        """Explicit cancel (Escape): back to AwaitingStart."""
        changed = self.line_state != AWAITING_START or self.preview_point is not None
        self._reset_line()
        return TransitionResult(changed=changed)

    def click(self, world: WorldPoint, screen: ScreenPoint, hit_node_id: Optional[str] = None) -> TransitionResult:
        """
        Feed a completed click (not part of a pan gesture).

        Args:
            world: Click position in world coordinates.
            screen: Click position in pixels.
            hit_node_id: Node under the click, only consulted while placing
                line elements.

        Returns:
            The transition outcome.
        """
        if self.mode == InteractionMode.SELECT:
            return NO_CHANGE

        if self.mode == InteractionMode.PLACE_NODE:
            return TransitionResult(intent=CreateNodeIntent(world))

        # PLACE_LINE_ELEMENT
        if hit_node_id is None:
            return TransitionResult(rejected=RejectReason.NO_NODE_HIT)

        start = self.pending_start_node
        if start is None:
            self.line_state = AwaitingEnd(hit_node_id)
            self.preview_point = screen
            return TransitionResult(changed=True)

        if hit_node_id == start:
            return TransitionResult(rejected=RejectReason.SAME_NODE)

        intent = CreateLineElementIntent(start, hit_node_id, self.line_kind)
        self._reset_line()
        return TransitionResult(intent=intent, changed=True)

    def pointer_moved(self, screen: ScreenPoint) -> bool:
        """Track the rubber-band end point; True if the preview changed."""
        if self.pending_start_node is None:
            return False
        self.preview_point = screen
        return True

    def _reset_line(self) -> None:
        self.line_state = AWAITING_START
        self.preview_point = None
