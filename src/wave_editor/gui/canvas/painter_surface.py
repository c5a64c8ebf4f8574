"""``PathSurface`` implementation on top of ``QPainter``."""

from __future__ import annotations

from PySide6.QtGui import QPainter, QPainterPath


class PainterPathSurface:
    """Accumulates primitive calls into a ``QPainterPath``.

    ``fill`` paints the pending path with the painter's brush and keeps it;
    ``stroke`` outlines it with the painter's pen and starts a new path.
    """

    def __init__(self, painter: QPainter) -> None:
        self._painter = painter
        self._path = QPainterPath()

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(x, y)

    def curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None:
        self._path.cubicTo(c1x, c1y, c2x, c2y, x, y)

    def fill(self) -> None:
        self._painter.fillPath(self._path, self._painter.brush())

    def stroke(self) -> None:
        self._painter.strokePath(self._path, self._painter.pen())
        self._path = QPainterPath()
