"""Interactive canvas that renders the curve and forwards pointer/key input to the editor."""

from __future__ import annotations

import logging

from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPen, QWheelEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from ...core.editor import WaveformEditor
from ...core.geometry import Position
from ...core.gestures import GestureMode, Modifiers
from ...core.paths import trace_box, trace_curve, trace_handles
from ...errors import GestureError
from .painter_surface import PainterPathSurface

logger = logging.getLogger(__name__)

BACKGROUND = QColor(24, 24, 24)
PREVIEW_BACKGROUND = QColor(0, 17, 0)
BASELINE_COLOR = QColor(70, 70, 70)
CURVE_COLOR = QColor(230, 230, 230)
PREVIEW_COLOR = QColor(0, 255, 0)
HANDLE_COLOR = QColor(120, 160, 255)
SELECTED_COLOR = QColor(255, 200, 0)
STAR_COLOR = QColor(255, 215, 0)
BOX_FILL = QColor(42, 130, 218, 40)
BOX_PEN = QColor(42, 130, 218)

ANCHOR_RADIUS = 4.0
HANDLE_RADIUS = 3.0


def modifiers_from(event) -> Modifiers:
    shift = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
    return Modifiers(additive=shift, lock_horizontal=shift)


class CurveCanvas(QWidget):
    """Draws the editor state and routes input through :class:`WaveformEditor`."""

    points_moved = Signal()

    def __init__(self, editor: WaveformEditor, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.editor = editor
        self.show_labels = True
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(False)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.editor.selection.subscribe(lambda _snapshot: self.update())

    def sizeHint(self) -> QSize:
        width, height = self.editor.config.canvas.size
        return QSize(int(width), int(height))

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        try:
            if self.editor.preview_active:
                self._paint_preview(painter)
            else:
                self._paint_editing(painter)
        finally:
            painter.end()

    def _paint_baseline(self, painter: QPainter, transformed: bool) -> None:
        baseline = self.editor.baseline_y
        if transformed:
            y = self.editor.view.world_to_screen(Position(0.0, baseline)).y
        else:
            y = baseline
        painter.setPen(QPen(BASELINE_COLOR, 1))
        painter.drawLine(QPointF(0, y), QPointF(self.width(), y))

    def _paint_preview(self, painter: QPainter) -> None:
        painter.fillRect(self.rect(), PREVIEW_BACKGROUND)
        self._paint_baseline(painter, transformed=False)
        points = self.editor.points
        painter.setPen(QPen(PREVIEW_COLOR, 2, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap, Qt.PenJoinStyle.RoundJoin))
        surface = PainterPathSurface(painter)
        for offset in self.editor.preview_offsets(self.width()):
            trace_curve(surface, points, None, offset_x=offset)

    def _paint_editing(self, painter: QPainter) -> None:
        painter.fillRect(self.rect(), BACKGROUND)
        self._paint_baseline(painter, transformed=True)
        view = self.editor.view
        points = self.editor.points
        surface = PainterPathSurface(painter)

        painter.setPen(QPen(CURVE_COLOR, 2))
        trace_curve(surface, points, view)

        primary = self.editor.selected_point
        if primary is not None and primary.is_smooth:
            painter.setPen(QPen(HANDLE_COLOR, 1, Qt.PenStyle.DashLine))
            trace_handles(surface, [primary], view)
            painter.setPen(QPen(HANDLE_COLOR, 1))
            painter.setBrush(QBrush(HANDLE_COLOR))
            for handle in primary.active_handles():
                screen = view.world_to_screen(handle)
                painter.drawEllipse(QPointF(screen.x, screen.y), HANDLE_RADIUS, HANDLE_RADIUS)

        selected = self.editor.selection.selected
        painter.setFont(QFont(painter.font().family(), 8))
        for point in points:
            screen = view.world_to_screen(point.position)
            color = SELECTED_COLOR if point.name in selected else QColor(point.color)
            painter.setPen(QPen(color, 1))
            painter.setBrush(QBrush(color))
            painter.drawEllipse(QPointF(screen.x, screen.y), ANCHOR_RADIUS, ANCHOR_RADIUS)
            if self.show_labels or point.starred:
                painter.setPen(QPen(STAR_COLOR if point.starred else CURVE_COLOR))
                label = f"★ {point.name}" if point.starred else point.name
                painter.drawText(QPointF(screen.x + 6, screen.y - 6), label)

        rect = self.editor.gestures.box_rect()
        if rect is not None:
            painter.setPen(QPen(BOX_PEN, 1))
            painter.setBrush(QBrush(BOX_FILL))
            trace_box(surface, rect[0], rect[1], view)

        if self.editor.gestures.transform_armed:
            painter.setPen(QPen(SELECTED_COLOR))
            painter.drawText(QRectF(8, 8, 240, 20), "Transform mode (T to exit)")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        try:
            self.editor.pointer_press(pos.x(), pos.y(), modifiers_from(event))
        except GestureError as exc:
            logger.debug("Ignored press: %s", exc)
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        pos = event.position()
        mode = self.editor.gestures.mode
        self.editor.pointer_move(pos.x(), pos.y(), modifiers_from(event))
        if mode in (GestureMode.POINT_DRAG, GestureMode.TRANSFORM):
            self.points_moved.emit()
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        self.editor.pointer_release(pos.x(), pos.y(), modifiers_from(event))
        self.update()

    def leaveEvent(self, event) -> None:  # noqa: N802
        if not self.editor.gestures.is_idle and not self.editor.preview_active:
            self.editor.gestures.release()
            self.update()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802
        pos = event.position()
        # Qt reports a positive delta when scrolling away from the user
        self.editor.wheel(pos.x(), pos.y(), -event.angleDelta().y())
        self.update()
        event.accept()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.key() == Qt.Key.Key_Space and not event.isAutoRepeat():
            self.editor.set_pan_armed(True)
            self.setCursor(Qt.CursorShape.OpenHandCursor)
            return
        if event.key() == Qt.Key.Key_Escape:
            self.editor.escape()
            self.update()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.key() == Qt.Key.Key_Space and not event.isAutoRepeat():
            self.editor.set_pan_armed(False)
            self.unsetCursor()
            return
        super().keyReleaseEvent(event)
