"""Anchor point data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .geometry import Position


SMOOTH = "smooth"
SHARP = "sharp"
POINT_TYPES = (SMOOTH, SHARP)

DEFAULT_POINT_COLOR = "#ff0000"
FIRST_HANDLE_OFFSET = 50.0


@dataclass
class AnchorPoint:
    """A named vertex of the waveform.

    Attributes:
        name: Unique, human-readable key of the point
        x: Horizontal position in author-space units
        y: Vertical position in author-space units (screen orientation, down is positive)
        type: ``"smooth"`` or ``"sharp"``
        color: Display color
        cp1: Handle shaping the curve arriving at this point
        cp2: Handle shaping the curve leaving this point
        starred: Emphasis flag with no geometric effect

    Note:
        Handles are kept when a point is switched to ``sharp`` so that toggling
        back restores the previous curve; they are only consulted for smooth points.
    """
    name: str
    x: float
    y: float
    type: str = SMOOTH
    color: str = DEFAULT_POINT_COLOR
    cp1: Optional[Position] = None
    cp2: Optional[Position] = None
    starred: bool = False

    def __post_init__(self) -> None:
        if self.type not in POINT_TYPES:
            raise ValueError(f"Unknown point type: {self.type!r}")
        if self.cp1 is None:
            self.cp1 = Position(self.x, self.y)
        if self.cp2 is None:
            self.cp2 = Position(self.x, self.y)

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @property
    def is_smooth(self) -> bool:
        return self.type == SMOOTH

    def active_handles(self) -> Optional[Tuple[Position, Position]]:
        """Return ``(cp1, cp2)`` for smooth points, ``None`` when the handles are inert."""
        if not self.is_smooth:
            return None
        return self.cp1, self.cp2

    def move_by(self, dx: float, dy: float) -> None:
        """Translate the anchor and both handles rigidly."""
        self.x += dx
        self.y += dy
        self.cp1.offset(dx, dy)
        self.cp2.offset(dx, dy)

    def clone(self) -> "AnchorPoint":
        return AnchorPoint(
            name=self.name,
            x=self.x,
            y=self.y,
            type=self.type,
            color=self.color,
            cp1=self.cp1.copy(),
            cp2=self.cp2.copy(),
            starred=self.starred,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "name": self.name,
            "color": self.color,
            "type": self.type,
            "starred": self.starred,
            "cp1": {"x": self.cp1.x, "y": self.cp1.y},
            "cp2": {"x": self.cp2.x, "y": self.cp2.y},
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AnchorPoint":
        cp1 = payload.get("cp1")
        cp2 = payload.get("cp2")
        return cls(
            name=payload["name"],
            x=float(payload["x"]),
            y=float(payload["y"]),
            type=payload.get("type", SMOOTH),
            color=payload.get("color", DEFAULT_POINT_COLOR),
            cp1=Position(float(cp1["x"]), float(cp1["y"])) if cp1 else None,
            cp2=Position(float(cp2["x"]), float(cp2["y"])) if cp2 else None,
            starred=bool(payload.get("starred", False)),
        )


def segment_is_curved(start: AnchorPoint, end: AnchorPoint) -> bool:
    """A segment is drawn as a cubic only when both endpoints are smooth."""
    return start.is_smooth and end.is_smooth


def sort_by_x(points: Sequence[AnchorPoint]) -> List[AnchorPoint]:
    return sorted(points, key=lambda point: point.x)


def init_control_handles(points: Sequence[AnchorPoint]) -> None:
    """Place handles for a freshly authored, x-ordered sequence of points.

    Between two smooth points the handles sit at 1/3 and 2/3 of the
    anchor-to-anchor vector; next to a sharp point they are pulled in to 1/6.
    """
    if not points:
        return

    first = points[0]
    first.cp1 = Position(first.x, first.y)
    first.cp2 = Position(first.x + FIRST_HANDLE_OFFSET, first.y)

    for prev_point, point in zip(points, points[1:]):
        dx = point.x - prev_point.x
        dy = point.y - prev_point.y
        divisor = 3.0 if segment_is_curved(prev_point, point) else 6.0
        prev_point.cp2 = Position(prev_point.x + dx / divisor, prev_point.y + dy / divisor)
        point.cp1 = Position(point.x - dx / divisor, point.y - dy / divisor)
