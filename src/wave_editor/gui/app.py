"""PySide6 main window for waveform authoring."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QColor, QKeySequence, QPalette, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QDockWidget,
    QFileDialog,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QSplitter,
    QToolBar,
    QWidget,
)

from ..config import EditorConfig
from ..core.editor import WaveformEditor
from ..core.history import SessionStore
from ..core.normalize import export_normalized
from ..core.selection import SelectionSnapshot
from ..errors import CurveValidationError
from ..settings import fallback_wave_path, session_state_path
from .canvas import CurveCanvas, MonitorWidget, PreviewController
from .notifier import StatusBarNotifier

logger = logging.getLogger(__name__)

JSON_FILTER = "Wave files (*.json);;All files (*)"


class WaveEditorWindow(QMainWindow):
    def __init__(self, config: Optional[EditorConfig] = None, initial_wave: Optional[Path] = None):
        super().__init__()
        self.setWindowTitle("Waveform Editor")
        self.resize(1400, 720)

        self.config = config or EditorConfig()
        self.notifier = StatusBarNotifier(self.statusBar())
        self.editor = WaveformEditor(
            self.config,
            notifier=self.notifier,
            session=SessionStore(session_state_path()),
        )
        self._list_updating = False
        self._shortcuts: List[QShortcut] = []

        self._setup_ui()

        self.editor.subscribe(self._on_points_changed)
        self.editor.selection.subscribe(self._on_selection_changed)
        self.editor.bootstrap(fallback=fallback_wave_path())
        if initial_wave is not None:
            self.editor.load_wave(initial_wave)
        self.statusBar().showMessage("Ready", 2000)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _setup_ui(self) -> None:
        self.canvas = CurveCanvas(self.editor)
        self.canvas.points_moved.connect(self._refresh_point_list)
        self.preview_controller = PreviewController(self.editor, self.canvas, self)
        self.preview_controller.finished.connect(lambda: self.preview_action.setChecked(False))

        self.point_list = QListWidget()
        self.point_list.setMinimumWidth(220)
        self.point_list.itemSelectionChanged.connect(self._on_list_selection)
        self.point_list.itemChanged.connect(self._on_item_renamed)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.point_list)
        splitter.addWidget(self.canvas)
        splitter.setSizes([240, 1160])

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(splitter)
        self.setCentralWidget(central)

        self.monitor = MonitorWidget(self.config.playback)
        monitor_dock = QDockWidget("Monitor", self)
        monitor_dock.setWidget(self.monitor)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, monitor_dock)

        self._create_actions()
        self._build_toolbar()
        self._build_menu_bar(monitor_dock)
        self._register_shortcuts()

    def _action(self, text: str, handler: Callable[[], object], shortcut: Optional[QKeySequence] = None) -> QAction:
        action = QAction(text, self)
        if shortcut is not None:
            action.setShortcut(shortcut)
        action.triggered.connect(lambda _checked=False: self._run(handler))
        self.addAction(action)
        return action

    def _create_actions(self) -> None:
        self.add_action = self._action("Add Point", self.editor.add_point)
        self.delete_action = self._action("Delete Point", self.editor.delete_point)
        self.toggle_type_action = self._action("Toggle Type", self.editor.toggle_point_type)
        self.toggle_star_action = self._action("Toggle Star", self.editor.toggle_star)
        self.baseline_action = self._action("Move to Baseline", self.editor.move_to_baseline)
        self.transform_action = self._action("Transform", self.editor.toggle_transform_mode)
        self.undo_action = self._action("Undo", self.editor.undo, QKeySequence.StandardKey.Undo)
        self.redo_action = self._action("Redo", self.editor.redo)
        self.redo_action.setShortcuts([QKeySequence("Ctrl+Shift+Z"), QKeySequence("Ctrl+Y")])

        self.preview_action = QAction("Preview", self)
        self.preview_action.setCheckable(True)
        self.preview_action.triggered.connect(lambda _checked=False: self.toggle_preview())
        self.addAction(self.preview_action)

        self.open_action = QAction("Load Wave...", self)
        self.open_action.setShortcut(QKeySequence.StandardKey.Open)
        self.open_action.triggered.connect(self.open_wave_dialog)
        self.save_action = QAction("Save Wave...", self)
        self.save_action.setShortcut(QKeySequence.StandardKey.Save)
        self.save_action.triggered.connect(self.save_wave_dialog)
        self.export_action = QAction("Export for Monitor...", self)
        self.export_action.triggered.connect(self.export_dialog)

        self.labels_action = QAction("Show Labels", self)
        self.labels_action.setCheckable(True)
        self.labels_action.setChecked(True)
        self.labels_action.toggled.connect(self._on_labels_toggled)

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Edit", self)
        toolbar.setMovable(False)
        for action in (
            self.add_action,
            self.delete_action,
            self.toggle_type_action,
            self.toggle_star_action,
            self.baseline_action,
            self.transform_action,
        ):
            toolbar.addAction(action)
        toolbar.addSeparator()
        toolbar.addAction(self.undo_action)
        toolbar.addAction(self.redo_action)
        toolbar.addSeparator()
        toolbar.addAction(self.preview_action)
        self.addToolBar(toolbar)

    def _build_menu_bar(self, monitor_dock: QDockWidget) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("File")
        file_menu.addAction(self.open_action)
        file_menu.addAction(self.save_action)
        file_menu.addAction(self.export_action)
        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(QApplication.instance().quit)  # type: ignore[attr-defined]
        file_menu.addAction(quit_action)

        view_menu = menu_bar.addMenu("View")
        view_menu.addAction(self.labels_action)
        view_menu.addAction(monitor_dock.toggleViewAction())
        reset_view = QAction("Reset Zoom", self)
        reset_view.triggered.connect(self._reset_view)
        view_menu.addAction(reset_view)

    def _register_shortcuts(self) -> None:
        shortcuts: List[Tuple[QKeySequence, Callable[[], object]]] = [
            (QKeySequence(Qt.Key.Key_P), self.toggle_preview),
            (QKeySequence(Qt.Key.Key_T), self.editor.toggle_transform_mode),
            (QKeySequence(Qt.Key.Key_Delete), self.editor.delete_point),
        ]
        self._shortcuts.clear()
        for sequence, handler in shortcuts:
            shortcut = QShortcut(sequence, self)
            shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
            shortcut.activated.connect(lambda handler=handler: self._run_shortcut(handler))
            self._shortcuts.append(shortcut)

    # ------------------------------------------------------------------
    # Command plumbing
    # ------------------------------------------------------------------
    def _run(self, handler: Callable[[], object]) -> None:
        if self.editor.preview_active and handler != self.toggle_preview:
            self.notifier.advise("Leave preview mode to edit")
            return
        handler()
        self.canvas.update()

    def _run_shortcut(self, handler: Callable[[], object]) -> None:
        if isinstance(QApplication.focusWidget(), QLineEdit):
            return
        self._run(handler)

    def toggle_preview(self) -> None:
        active = self.preview_controller.toggle()
        self.preview_action.setChecked(active)

    def _reset_view(self) -> None:
        self.editor.view.reset()
        self.canvas.update()

    def _on_labels_toggled(self, checked: bool) -> None:
        self.canvas.show_labels = checked
        self.canvas.update()

    # ------------------------------------------------------------------
    # File dialogs
    # ------------------------------------------------------------------
    def open_wave_dialog(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Load Wave", str(Path.home()), JSON_FILTER)
        if file_path:
            self.editor.load_wave(Path(file_path))
            self.canvas.update()

    def save_wave_dialog(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(self, "Save Wave", str(Path.home() / "wave.json"), JSON_FILTER)
        if file_path:
            self.editor.save_wave(Path(file_path))

    def export_dialog(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(
            self, "Export for Monitor", str(Path.home() / "monitor_wave.json"), JSON_FILTER
        )
        if file_path:
            self.editor.export_for_monitor(Path(file_path))

    # ------------------------------------------------------------------
    # Editor callbacks
    # ------------------------------------------------------------------
    def _on_points_changed(self) -> None:
        self._refresh_point_list()
        self.canvas.update()
        try:
            curve = export_normalized(self.editor.points, self.editor.baseline_y, self.editor.store.canvas_height)
        except CurveValidationError as exc:
            logger.debug("Monitor not updated: %s", exc)
            return
        self.monitor.set_curve(curve)

    def _refresh_point_list(self) -> None:
        self._list_updating = True
        try:
            self.point_list.clear()
            selected = self.editor.selection.selected
            for point in self.editor.points:
                star = "★ " if point.starred else ""
                item = QListWidgetItem(f"{star}{point.name}")
                item.setData(Qt.ItemDataRole.UserRole, point.name)
                item.setToolTip(f"{point.type}  x={point.x:.1f}  y={point.y:.1f}")
                item.setFlags(item.flags() | Qt.ItemFlag.ItemIsEditable)
                self.point_list.addItem(item)
                item.setSelected(point.name in selected)
        finally:
            self._list_updating = False

    def _on_selection_changed(self, snapshot: SelectionSnapshot) -> None:
        self._list_updating = True
        try:
            for row in range(self.point_list.count()):
                item = self.point_list.item(row)
                item.setSelected(item.data(Qt.ItemDataRole.UserRole) in snapshot.selected)
        finally:
            self._list_updating = False
        self.canvas.update()

    def _on_list_selection(self) -> None:
        if self._list_updating:
            return
        names = [item.data(Qt.ItemDataRole.UserRole) for item in self.point_list.selectedItems()]
        current = self.point_list.currentItem()
        primary = current.data(Qt.ItemDataRole.UserRole) if current is not None else None
        self.editor.selection.replace(names, primary)

    def _on_item_renamed(self, item: QListWidgetItem) -> None:
        if self._list_updating:
            return
        old = item.data(Qt.ItemDataRole.UserRole)
        text = item.text()
        new = text[2:] if text.startswith("★ ") else text
        if not self.editor.rename_point(old, new):
            self._refresh_point_list()

    def closeEvent(self, event) -> None:  # noqa: N802
        self.preview_controller.stop()
        self.monitor.stop()
        super().closeEvent(event)


def run(initial_wave: Optional[Path] = None, config: Optional[EditorConfig] = None) -> int:
    app = QApplication.instance() or QApplication([])

    # Force dark mode regardless of system settings
    app.setStyle("Fusion")
    dark_palette = QPalette()
    dark_palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.WindowText, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Base, QColor(35, 35, 35))
    dark_palette.setColor(QPalette.ColorRole.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.Text, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ColorRole.ButtonText, QColor(255, 255, 255))
    dark_palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.ColorRole.HighlightedText, QColor(35, 35, 35))
    app.setPalette(dark_palette)

    window = WaveEditorWindow(config, initial_wave)
    window.show()
    return app.exec()
