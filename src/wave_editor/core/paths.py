"""Backend-independent path construction for the editing canvas."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .geometry import Position
from .points import AnchorPoint, segment_is_curved
from .view import ViewTransform


class PathSurface(Protocol):
    """Minimal drawing capability the core relies on."""

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...


def _project(position: Position, transform: Optional[ViewTransform], offset_x: float) -> Position:
    shifted = Position(position.x + offset_x, position.y)
    return transform.world_to_screen(shifted) if transform is not None else shifted


def trace_curve(
    surface: PathSurface,
    ordered_points: Sequence[AnchorPoint],
    transform: Optional[ViewTransform] = None,
    offset_x: float = 0.0,
) -> None:
    """Emit the open editing curve through ``ordered_points`` and stroke it.

    ``offset_x`` shifts the curve in author space (used by the scrolling preview).
    """
    if len(ordered_points) < 2:
        return

    start = _project(ordered_points[0].position, transform, offset_x)
    surface.move_to(start.x, start.y)
    for current, following in zip(ordered_points, ordered_points[1:]):
        end = _project(following.position, transform, offset_x)
        if segment_is_curved(current, following):
            c1 = _project(current.cp2, transform, offset_x)
            c2 = _project(following.cp1, transform, offset_x)
            surface.curve_to(c1.x, c1.y, c2.x, c2.y, end.x, end.y)
        else:
            surface.line_to(end.x, end.y)
    surface.stroke()


def trace_handles(
    surface: PathSurface,
    points: Iterable[AnchorPoint],
    transform: Optional[ViewTransform] = None,
) -> None:
    """Guide lines cp1 - anchor - cp2 for every smooth point."""
    drew = False
    for point in points:
        handles = point.active_handles()
        if handles is None:
            continue
        cp1, cp2 = (_project(handle, transform, 0.0) for handle in handles)
        anchor = _project(point.position, transform, 0.0)
        surface.move_to(cp1.x, cp1.y)
        surface.line_to(anchor.x, anchor.y)
        surface.line_to(cp2.x, cp2.y)
        drew = True
    if drew:
        surface.stroke()


def trace_box(
    surface: PathSurface,
    start: Position,
    end: Position,
    transform: Optional[ViewTransform] = None,
) -> None:
    """Filled and outlined selection rectangle between two world corners."""
    a = _project(start, transform, 0.0)
    b = _project(end, transform, 0.0)
    surface.move_to(a.x, a.y)
    surface.line_to(b.x, a.y)
    surface.line_to(b.x, b.y)
    surface.line_to(a.x, b.y)
    surface.line_to(a.x, a.y)
    surface.fill()
    surface.stroke()
