"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, Toolbar, the Canvas and
the Status Bar.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (File -> Save, mode and zoom buttons)
   to the model store and the canvas.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QCloseEvent
from PySide6.QtWidgets import QFileDialog, QLabel, QMainWindow, QMessageBox, QToolBar

from planeframe.config import DEFAULT_SETTINGS, EditorSettings, VISIBLE_APP_NAME
from planeframe.controller.interaction import InteractionMode
from planeframe.controller.store import ModelStore
from planeframe.model.errors import PlaneFrameError
from planeframe.model.geometry_primitives import WorldPoint
from planeframe.model.io import IOManager
from planeframe.model.structure import ElementKind, ModelSnapshot, model_statistics
from planeframe.view.canvas import StructureCanvas
from planeframe.view.dialogs.element_dialog import ElementDialog
from planeframe.view.dialogs.node_dialog import NodeDialog

logger = logging.getLogger(__name__)

FILE_FILTER = "PlaneFrame Models (*.json)"

_MODE_LABELS = {
    (InteractionMode.SELECT, None): "Select",
    (InteractionMode.PLACE_NODE, None): "Add Node",
    (InteractionMode.PLACE_LINE_ELEMENT, ElementKind.TRUSS): "Add Truss",
    (InteractionMode.PLACE_LINE_ELEMENT, ElementKind.BEAM): "Add Beam",
}


class MainWindow(QMainWindow):
    def __init__(self, store: Optional[ModelStore] = None, settings: EditorSettings = DEFAULT_SETTINGS) -> None:
        super().__init__()
        self.store = store if store is not None else ModelStore()
        self.is_modified: bool = False

        self.resize(1200, 800)

        # --- CENTRAL CANVAS ---
        self.canvas = StructureCanvas(self.store, settings, self)
        self.setCentralWidget(self.canvas)

        # --- STATUS BAR ---
        self.lbl_mode = QLabel()
        self.lbl_cursor = QLabel()
        self.lbl_stats = QLabel()
        self.statusBar().addWidget(self.lbl_mode)
        self.statusBar().addWidget(self.lbl_cursor, 1)
        self.statusBar().addPermanentWidget(self.lbl_stats)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()
        self._create_toolbar()

        # --- SIGNAL CONNECTIONS ---
        self.store.model_changed.connect(self.on_model_changed)
        self.store.modified_changed.connect(self.set_modified)
        self.canvas.mode_changed.connect(self.on_mode_changed)
        self.canvas.cursor_moved.connect(self.on_cursor_moved)
        self.canvas.properties_requested.connect(self.on_properties_requested)
        self.canvas.element_properties_requested.connect(self.on_element_properties_requested)

        self.update_window_title()
        self.on_model_changed(self.store.snapshot())
        self.on_mode_changed(str(self.canvas.mode))
        self.on_cursor_moved(None)
        self.canvas.setFocus()

    def _create_actions(self) -> None:
        # File Actions
        self.act_new = QAction("New", self)
        self.act_new.setShortcut("Ctrl+N")
        self.act_new.triggered.connect(self.on_file_new)

        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_save = QAction("Save", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self.on_file_save)

        self.act_save_as = QAction("Save As...", self)
        self.act_save_as.setShortcut("Ctrl+Shift+S")
        self.act_save_as.triggered.connect(self.on_file_save_as)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        # Mode Actions (Ctrl+1..4 are handled by the canvas itself)
        self.mode_group = QActionGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_actions: dict[tuple[InteractionMode, Optional[ElementKind]], QAction] = {}
        for i, ((mode, kind), text) in enumerate(_MODE_LABELS.items(), start=1):
            act = QAction(text, self)
            act.setCheckable(True)
            act.setToolTip(f"{text} (Ctrl+{i})")
            act.triggered.connect(lambda _checked=False, m=mode, k=kind: self.canvas.set_mode(m, k))
            self.mode_group.addAction(act)
            self.mode_actions[(mode, kind)] = act

        # View Actions
        self.act_zoom_in = QAction("Zoom In", self)
        self.act_zoom_in.triggered.connect(self.canvas.zoom_in)
        self.act_zoom_out = QAction("Zoom Out", self)
        self.act_zoom_out.triggered.connect(self.canvas.zoom_out)
        self.act_zoom_fit = QAction("Zoom to Fit", self)
        self.act_zoom_fit.triggered.connect(self.canvas.zoom_fit)
        self.act_zoom_actual = QAction("Actual Size", self)
        self.act_zoom_actual.triggered.connect(self.canvas.zoom_actual)

        # Help
        self.act_about = QAction("About", self)
        self.act_about.triggered.connect(self.on_about)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addSeparator()
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_save)
        file_menu.addAction(self.act_save_as)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        for act in self.mode_actions.values():
            edit_menu.addAction(act)

        view_menu = menu_bar.addMenu("&View")
        for act in (self.act_zoom_in, self.act_zoom_out, self.act_zoom_fit, self.act_zoom_actual):
            view_menu.addAction(act)

        help_menu = menu_bar.addMenu("&?")
        help_menu.addAction(self.act_about)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Tools", self)
        toolbar.setMovable(False)
        toolbar.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        for act in self.mode_actions.values():
            toolbar.addAction(act)
        toolbar.addSeparator()
        for act in (self.act_zoom_in, self.act_zoom_out, self.act_zoom_fit, self.act_zoom_actual):
            toolbar.addAction(act)
        self.addToolBar(toolbar)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        """Updates the window title based on filename and dirty state."""
        filepath = self.store.project.filepath
        filename = os.path.basename(filepath) if filepath else "Untitled"
        title = f"{VISIBLE_APP_NAME} - [{filename}"
        if self.is_modified:
            title += "*"
        title += "]"
        self.setWindowTitle(title)

    def set_modified(self, modified: bool) -> None:
        """Sets the dirty flag and updates title if changed."""
        if self.is_modified != modified:
            self.is_modified = modified
        self.update_window_title()

    # --- SLOTS ---

    def on_model_changed(self, snapshot: ModelSnapshot) -> None:
        stats = model_statistics(snapshot)
        self.lbl_stats.setText(
            f"Nodes: {stats.node_count}  Beams: {stats.beam_count}  Trusses: {stats.truss_count}"
        )

    def on_mode_changed(self, mode: str) -> None:
        interaction = self.canvas.dispatcher.session.interaction
        kind = interaction.line_kind if interaction.mode == InteractionMode.PLACE_LINE_ELEMENT else None
        act = self.mode_actions.get((interaction.mode, kind))
        if act is not None:
            act.setChecked(True)
            self.lbl_mode.setText(f"Mode: {act.text()}")

    def on_cursor_moved(self, world: Optional[WorldPoint]) -> None:
        if world is None:
            self.lbl_cursor.setText("")
            return
        zoom = self.canvas.dispatcher.session.viewport.zoom
        self.lbl_cursor.setText(f"X: {world.x:.4g}  Z: {world.z:.4g}  Zoom: {zoom:.4g}")

    def on_properties_requested(self, node_id: str) -> None:
        try:
            node = self.store.node(node_id)
        except PlaneFrameError as e:
            logger.warning(f"Cannot open properties: {e}")
            return

        dialog = NodeDialog(node, self)
        if dialog.exec() != NodeDialog.DialogCode.Accepted:
            return

        try:
            if dialog.delete_requested:
                self.store.remove_node(node_id)
            else:
                self.store.update_node(
                    node_id,
                    coordinates=dialog.coordinates(),
                    constraints=dialog.constraints(),
                    loads=dialog.loads(),
                    label=dialog.label(),
                )
        except PlaneFrameError as e:
            QMessageBox.critical(self, "Error", f"Could not update node:\n{e}")

    def on_element_properties_requested(self, element_id: str) -> None:
        try:
            element = self.store.element(element_id)
        except PlaneFrameError as e:
            logger.warning(f"Cannot open properties: {e}")
            return

        dialog = ElementDialog(element, self)
        if dialog.exec() != ElementDialog.DialogCode.Accepted:
            return

        try:
            if dialog.delete_requested:
                self.store.remove_line_element(element_id)
            else:
                self.store.update_line_element(
                    element_id,
                    kind=dialog.kind(),
                    label=dialog.label(),
                    properties=dialog.properties(),
                )
        except PlaneFrameError as e:
            QMessageBox.critical(self, "Error", f"Could not update element:\n{e}")

    def on_about(self) -> None:
        QMessageBox.about(
            self,
            f"About {VISIBLE_APP_NAME}",
            f"{VISIBLE_APP_NAME} - Plane Frame and Truss Model Editor",
        )

    # --- FILE SLOTS ---

    def on_file_new(self) -> None:
        if not self._confirm_discard():
            return
        self.store.reset()
        self.canvas.set_mode(InteractionMode.SELECT)
        self.canvas.reset_view()
        self.update_window_title()

    def on_file_open(self) -> None:
        if not self._confirm_discard():
            return
        fname, _ = QFileDialog.getOpenFileName(self, "Open Model", "", FILE_FILTER)
        if fname:
            try:
                model = IOManager.load_model(fname)
            except (OSError, PlaneFrameError) as e:
                QMessageBox.critical(self, "Error", f"Could not open file:\n{e}")
                return
            self.store.set_model(model, fname)
            self.canvas.set_mode(InteractionMode.SELECT)
            self.canvas.zoom_fit()
            self.update_window_title()

    def on_file_save(self) -> bool:
        filepath = self.store.project.filepath
        if not filepath:
            return self.on_file_save_as()
        return self._save_to(filepath)

    def on_file_save_as(self) -> bool:
        fname, _ = QFileDialog.getSaveFileName(self, "Save Model", "", FILE_FILTER)
        if not fname:
            return False
        # Ensure extension
        if not fname.endswith(".json"):
            fname += ".json"
        return self._save_to(fname)

    def _save_to(self, filepath: str) -> bool:
        try:
            IOManager.save_model(self.store.model, filepath)
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Could not save file:\n{e}")
            return False
        self.store.mark_saved(filepath)
        self.update_window_title()
        return True

    def _confirm_discard(self) -> bool:
        """Ask to save pending changes. Returns False if the user cancelled."""
        if not self.is_modified:
            return True
        reply = QMessageBox.question(
            self,
            "Save changes?",
            "The model has been modified. Do you want to save your changes?",
            QMessageBox.StandardButton.Save | QMessageBox.StandardButton.Discard | QMessageBox.StandardButton.Cancel
        )
        if reply == QMessageBox.StandardButton.Save:
            return self.on_file_save()
        return reply == QMessageBox.StandardButton.Discard

    def closeEvent(self, event: QCloseEvent, /) -> None:
        """Handle window close event to prompt for saving if modified."""
        if self._confirm_discard():
            event.accept()
        else:
            event.ignore()
