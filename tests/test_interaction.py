from planeframe.controller.interaction import (
    AWAITING_START, AwaitingEnd, CreateLineElementIntent, CreateNodeIntent, InteractionMode,
    InteractionStateMachine, RejectReason
)
from planeframe.model.geometry_primitives import ScreenPoint, WorldPoint
from planeframe.model.structure import ElementKind

WORLD = WorldPoint(1.0, 2.0)
SCREEN = ScreenPoint(401.0, 302.0)


def line_machine(kind=None):
    machine = InteractionStateMachine()
    machine.set_mode(InteractionMode.PLACE_LINE_ELEMENT, kind)
    return machine


def test_starts_in_select_mode():
    machine = InteractionStateMachine()
    assert machine.mode == InteractionMode.SELECT
    assert machine.line_state == AWAITING_START
    assert machine.line_kind == ElementKind.TRUSS


def test_select_click_does_nothing():
    result = InteractionStateMachine().click(WORLD, SCREEN, "a")
    assert result.intent is None
    assert not result.changed


def test_place_node_click_emits_intent():
    machine = InteractionStateMachine()
    machine.set_mode(InteractionMode.PLACE_NODE)

    result = machine.click(WORLD, SCREEN)

    assert result.intent == CreateNodeIntent(WORLD)
    assert machine.mode == InteractionMode.PLACE_NODE


def test_line_click_without_node_is_rejected():
    machine = line_machine()

    result = machine.click(WORLD, SCREEN, None)

    assert result.rejected == RejectReason.NO_NODE_HIT
    assert result.intent is None
    assert machine.line_state == AWAITING_START


def test_line_creation_two_clicks():
    machine = line_machine()

    first = machine.click(WORLD, SCREEN, "a")
    assert first.changed and first.intent is None
    assert machine.line_state == AwaitingEnd("a")
    assert machine.preview_point == SCREEN

    second = machine.click(WORLD, SCREEN, "b")
    assert second.intent == CreateLineElementIntent("a", "b", ElementKind.TRUSS)
    assert machine.line_state == AWAITING_START
    assert machine.preview_point is None
    assert machine.mode == InteractionMode.PLACE_LINE_ELEMENT


def test_same_node_twice_keeps_waiting():
    machine = line_machine()
    machine.click(WORLD, SCREEN, "a")

    result = machine.click(WORLD, SCREEN, "a")

    assert result.rejected == RejectReason.SAME_NODE
    assert result.intent is None
    assert machine.line_state == AwaitingEnd("a")


def test_miss_while_awaiting_end_keeps_start():
    machine = line_machine()
    machine.click(WORLD, SCREEN, "a")

    result = machine.click(WORLD, SCREEN, None)

    assert result.rejected == RejectReason.NO_NODE_HIT
    assert machine.pending_start_node == "a"


def test_line_kind_follows_mode_selection():
    machine = line_machine(ElementKind.BEAM)
    machine.click(WORLD, SCREEN, "a")

    assert machine.click(WORLD, SCREEN, "b").intent.kind == ElementKind.BEAM


def test_mode_change_abandons_pending_line():
    machine = line_machine()
    machine.click(WORLD, SCREEN, "a")

    result = machine.set_mode(InteractionMode.SELECT)

    assert result.changed
    assert result.intent is None
    assert machine.line_state == AWAITING_START


def test_reentering_line_mode_resets_pending_line():
    machine = line_machine()
    machine.click(WORLD, SCREEN, "a")

    assert machine.set_mode(InteractionMode.PLACE_LINE_ELEMENT).changed
    assert machine.pending_start_node is None


def test_cancel():
    machine = line_machine()
    assert not machine.cancel().changed

    machine.click(WORLD, SCREEN, "a")
    assert machine.cancel().changed
    assert machine.line_state == AWAITING_START
    assert machine.mode == InteractionMode.PLACE_LINE_ELEMENT


def test_preview_only_tracks_while_awaiting_end():
    machine = line_machine()
    assert not machine.pointer_moved(ScreenPoint(10.0, 10.0))
    assert machine.preview_point is None

    machine.click(WORLD, SCREEN, "a")
    assert machine.pointer_moved(ScreenPoint(10.0, 10.0))
    assert machine.preview_point == ScreenPoint(10.0, 10.0)


def test_needs_node_hit_only_in_line_mode():
    machine = InteractionStateMachine()
    assert not machine.needs_node_hit
    machine.set_mode(InteractionMode.PLACE_LINE_ELEMENT)
    assert machine.needs_node_hit
