"""
Structure Canvas
Paints the grid, the model and the line preview, and forwards Qt input
events to the input dispatcher.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QPointF, QRectF, Signal
from PySide6.QtGui import QBrush, QColor, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPen, QPolygonF, \
    QResizeEvent, QWheelEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from planeframe.config import DEFAULT_SETTINGS, EditorSettings
from planeframe.controller import scene
from planeframe.controller.dispatcher import EntityKind, InputDispatcher
from planeframe.controller.events import Key, KeyEvent, Modifier, PointerButton, PointerEvent, WheelEvent
from planeframe.controller.interaction import InteractionMode
from planeframe.controller.store import ModelStore
from planeframe.model.geometry_primitives import ScreenPoint
from planeframe.model.structure import ElementKind, ModelSnapshot, Node

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = QColor("white")
GRID_COLOR = QColor("#808080")
NODE_COLOR = QColor("#1f5fbf")
BEAM_COLOR = QColor("black")
TRUSS_COLOR = QColor("#404040")
PREVIEW_COLOR = QColor("#1f5fbf")
PENDING_COLOR = QColor("#d9480f")
SUPPORT_COLOR = QColor("#2b8a3e")

NODE_RADIUS = 6.0
SUPPORT_SIZE = 12.0

_BUTTONS: dict[Qt.MouseButton, PointerButton] = {
    Qt.MouseButton.LeftButton: PointerButton.LEFT,
    Qt.MouseButton.MiddleButton: PointerButton.MIDDLE,
    Qt.MouseButton.RightButton: PointerButton.RIGHT,
}

_KEYS: dict[int, Key] = {
    int(Qt.Key.Key_Escape): Key.ESCAPE,
    int(Qt.Key.Key_1): Key.DIGIT_1,
    int(Qt.Key.Key_2): Key.DIGIT_2,
    int(Qt.Key.Key_3): Key.DIGIT_3,
    int(Qt.Key.Key_4): Key.DIGIT_4,
}


def _modifiers(qt_mods: Qt.KeyboardModifier) -> Modifier:
    mods = Modifier.NONE
    if qt_mods & Qt.KeyboardModifier.ControlModifier:
        mods |= Modifier.CTRL
    if qt_mods & Qt.KeyboardModifier.ShiftModifier:
        mods |= Modifier.SHIFT
    if qt_mods & Qt.KeyboardModifier.AltModifier:
        mods |= Modifier.ALT
    if qt_mods & Qt.KeyboardModifier.MetaModifier:
        mods |= Modifier.META
    return mods


class StructureCanvas(QWidget):
    """The editing surface. Holds no editing state of its own."""
    # node id of a right-clicked node
    properties_requested = Signal(str)
    # element id of a right-clicked beam or truss
    element_properties_requested = Signal(str)
    # WorldPoint under the cursor, or None when it left the canvas
    cursor_moved = Signal(object)
    mode_changed = Signal(str)

    def __init__(
        self,
        store: ModelStore,
        settings: EditorSettings = DEFAULT_SETTINGS,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.settings = settings
        self.dispatcher = InputDispatcher(store, settings=settings)
        self._snapshot: ModelSnapshot = store.snapshot()

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(200, 150)

        store.model_changed.connect(self._on_model_changed)
        self._update_cursor()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def mode(self) -> InteractionMode:
        return self.dispatcher.session.interaction.mode

    def set_mode(self, mode: InteractionMode, line_kind: Optional[ElementKind] = None) -> None:
        self.dispatcher.set_mode(mode, line_kind)
        self._after_mode_change()

    def zoom_in(self) -> None:
        self.dispatcher.zoom_in()
        self.update()

    def zoom_out(self) -> None:
        self.dispatcher.zoom_out()
        self.update()

    def zoom_fit(self) -> None:
        self.dispatcher.zoom_fit()
        self.update()

    def zoom_actual(self) -> None:
        self.dispatcher.zoom_actual()
        self.update()

    def reset_view(self) -> None:
        self.dispatcher.reset_view()
        self.update()

    # ------------------------------------------------------------------------------
    # Qt event handlers
    # ------------------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent) -> None:
        ev = self._pointer_event(event)
        if ev is None:
            return super().mousePressEvent(event)

        if ev.button == PointerButton.RIGHT:
            target = self.dispatcher.context_request(ev)
            if target is None:
                return
            self._after_mode_change()
            if target.kind == EntityKind.NODE:
                self.properties_requested.emit(target.entity_id)
            else:
                self.element_properties_requested.emit(target.entity_id)
            return

        if ev.button == PointerButton.MIDDLE:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        if self.dispatcher.pointer_down(ev):
            self.update()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        ev = PointerEvent(PointerButton.LEFT, pos.x(), pos.y(), _modifiers(event.modifiers()))
        if self.dispatcher.pointer_move(ev):
            self.update()
        self.cursor_moved.emit(self.dispatcher.session.cursor_world())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        ev = self._pointer_event(event)
        if ev is None:
            return super().mouseReleaseEvent(event)

        if ev.button == PointerButton.MIDDLE:
            self._update_cursor()
        if self.dispatcher.pointer_up(ev):
            self.update()
        event.accept()

    def wheelEvent(self, event: QWheelEvent) -> None:
        pos = event.position()
        ctrl = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
        # Qt reports wheel-up as positive angle delta
        ev = WheelEvent(
            delta_y=-float(event.angleDelta().y()), ctrl_pressed=ctrl, screen_x=pos.x(), screen_z=pos.y()
        )
        if self.dispatcher.wheel(ev):
            event.accept()
            self.update()
            self.cursor_moved.emit(self.dispatcher.session.cursor_world())
        else:
            event.ignore()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = _KEYS.get(int(event.key()))
        if key is None:
            return super().keyPressEvent(event)

        mode_before = self.mode
        if self.dispatcher.key_down(KeyEvent(key, _modifiers(event.modifiers()))):
            if self.mode != mode_before:
                self._after_mode_change()
            self.update()
            event.accept()
        else:
            super().keyPressEvent(event)

    def leaveEvent(self, event) -> None:
        self.dispatcher.session.cursor = None
        self.cursor_moved.emit(None)
        super().leaveEvent(event)

    def resizeEvent(self, event: QResizeEvent) -> None:
        size = event.size()
        self.dispatcher.resize(max(1, size.width()), max(1, size.height()))
        super().resizeEvent(event)

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            painter.fillRect(self.rect(), BACKGROUND_COLOR)
            self._draw_grid(painter)
            self._draw_elements(painter)
            self._draw_preview(painter)
            self._draw_nodes(painter)
        finally:
            painter.end()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _pointer_event(self, event: QMouseEvent) -> Optional[PointerEvent]:
        button = _BUTTONS.get(event.button())
        if button is None:
            return None
        pos = event.position()
        return PointerEvent(button, pos.x(), pos.y(), _modifiers(event.modifiers()))

    def _update_cursor(self) -> None:
        if self.mode == InteractionMode.SELECT:
            self.setCursor(Qt.CursorShape.ArrowCursor)
        else:
            self.setCursor(Qt.CursorShape.CrossCursor)

    def _after_mode_change(self) -> None:
        self._update_cursor()
        self.mode_changed.emit(str(self.mode))
        self.update()

    def _on_model_changed(self, snapshot: ModelSnapshot) -> None:
        self._snapshot = snapshot
        self.update()

    # ---- painting ----

    def _draw_grid(self, painter: QPainter) -> None:
        s = self.dispatcher.session
        pts = scene.grid_screen_points(
            s.viewport, s.dimensions, self.settings.base_grid_size, self.settings.max_grid_points
        )
        if pts.size == 0:
            return
        painter.setPen(QPen(GRID_COLOR, 1.5))
        painter.drawPoints(QPolygonF([QPointF(float(x), float(z)) for x, z in pts]))

    def _draw_elements(self, painter: QPainter) -> None:
        s = self.dispatcher.session
        for seg in scene.element_segments(self._snapshot.elements, self._snapshot.nodes, s.viewport, s.dimensions):
            if seg.kind == ElementKind.BEAM:
                painter.setPen(QPen(BEAM_COLOR, 3))
            else:
                painter.setPen(QPen(TRUSS_COLOR, 1.5))
            painter.drawLine(QPointF(seg.start.x, seg.start.z), QPointF(seg.end.x, seg.end.z))

    def _draw_preview(self, painter: QPainter) -> None:
        segment = scene.preview_segment(self.dispatcher.session, self._snapshot.nodes)
        if segment is None:
            return
        start, end = segment
        pen = QPen(PREVIEW_COLOR, 1.5)
        pen.setStyle(Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.drawLine(QPointF(start.x, start.z), QPointF(end.x, end.z))

    def _draw_nodes(self, painter: QPainter) -> None:
        s = self.dispatcher.session
        pending = s.interaction.pending_start_node
        painter.setBrush(Qt.BrushStyle.NoBrush)

        for node, pos in scene.node_screen_positions(self._snapshot.nodes, s.viewport, s.dimensions):
            self._draw_support(painter, node, pos)

            color = PENDING_COLOR if node.id == pending else NODE_COLOR
            painter.setPen(QPen(color, 2))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            rect = QRectF(pos.x - NODE_RADIUS, pos.z - NODE_RADIUS, 2 * NODE_RADIUS, 2 * NODE_RADIUS)
            # rotationally fixed nodes are drawn as squares
            if node.constraints.r:
                painter.drawRect(rect)
            else:
                painter.drawEllipse(rect)

            if node.label:
                painter.setPen(QPen(BEAM_COLOR))
                painter.drawText(QPointF(pos.x + NODE_RADIUS + 3, pos.z - NODE_RADIUS - 3), node.label)

    @staticmethod
    def _draw_support(painter: QPainter, node: Node, pos: ScreenPoint) -> None:
        c = node.constraints
        if not (c.x or c.z):
            return

        painter.setPen(QPen(SUPPORT_COLOR, 1.5))
        top = pos.z + NODE_RADIUS + 2
        half = SUPPORT_SIZE / 2

        if c.x and c.z and c.r:
            # clamped: post with a hatched base
            base = top + 14
            painter.drawLine(QPointF(pos.x, top), QPointF(pos.x, base))
            painter.drawLine(QPointF(pos.x - 10, base), QPointF(pos.x + 10, base))
            for dx in range(-8, 9, 4):
                painter.drawLine(QPointF(pos.x + dx, base + 2), QPointF(pos.x + dx - 4, base + 6))
            return

        # pinned (x and z) or roller (one direction): triangle
        triangle = QPolygonF([
            QPointF(pos.x, top),
            QPointF(pos.x - half, top + SUPPORT_SIZE),
            QPointF(pos.x + half, top + SUPPORT_SIZE),
        ])
        painter.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        painter.drawPolygon(triangle)
        base = top + SUPPORT_SIZE + 2
        painter.drawLine(QPointF(pos.x - half - 2, base), QPointF(pos.x + half + 2, base))
        if not (c.x and c.z):
            # roller: second base line
            painter.drawLine(QPointF(pos.x - half - 2, base + 3), QPointF(pos.x + half + 2, base + 3))
