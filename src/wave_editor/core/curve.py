"""Curve store: owns the anchor points and every geometric edit applied to them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..config import PlacementConfig
from ..errors import CurveValidationError, LayoutAdvisory
from .geometry import Position
from .points import SHARP, SMOOTH, AnchorPoint, sort_by_x


logger = logging.getLogger(__name__)

MIN_POINTS = 2
CROWDED_MESSAGE = "Canvas is getting crowded"


@dataclass(frozen=True)
class Insertion:
    """Result of :meth:`CurveStore.add_point`."""

    point: AnchorPoint
    advisory: Optional[LayoutAdvisory] = None


@dataclass(frozen=True)
class PointGeometry:
    """Anchor and handle positions captured at the start of a gesture."""

    anchor: Position
    cp1: Position
    cp2: Position

    @classmethod
    def of(cls, point: AnchorPoint) -> "PointGeometry":
        return cls(point.position, point.cp1.copy(), point.cp2.copy())


class CurveStore:
    """Name-keyed collection of anchor points.

    Geometry never depends on insertion order: :meth:`ordered` recomputes the
    x-sorted sequence on demand.
    """

    def __init__(
        self,
        canvas_size: Tuple[int, int] = (1000, 400),
        baseline_y: Optional[float] = None,
        placement: Optional[PlacementConfig] = None,
    ) -> None:
        self.canvas_width, self.canvas_height = canvas_size
        self.baseline_y = float(baseline_y) if baseline_y is not None else self.canvas_height / 2.0
        self.placement = placement or PlacementConfig()
        self._points: Dict[str, AnchorPoint] = {}

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, name: object) -> bool:
        return name in self._points

    def __iter__(self) -> Iterator[AnchorPoint]:
        return iter(list(self._points.values()))

    @property
    def names(self) -> List[str]:
        return list(self._points.keys())

    def get(self, name: str) -> AnchorPoint:
        try:
            return self._points[name]
        except KeyError:
            raise KeyError(f"No point named {name!r}") from None

    def ordered(self) -> List[AnchorPoint]:
        """Points sorted by ascending x (segment adjacency order)."""
        return sort_by_x(list(self._points.values()))

    def clone_points(self) -> List[AnchorPoint]:
        return [point.clone() for point in self.ordered()]

    def bounds(self) -> Tuple[float, float]:
        xs = [point.x for point in self._points.values()]
        if not xs:
            raise CurveValidationError("Curve has no points")
        return min(xs), max(xs)

    def unique_name(self, prefix: str = "Point") -> str:
        """Smallest ``"<prefix> N"`` (N >= 1) not already in use."""
        index = 1
        while f"{prefix} {index}" in self._points:
            index += 1
        return f"{prefix} {index}"

    # ------------------------------------------------------------------
    # Whole-set replacement
    # ------------------------------------------------------------------
    def replace(self, points: Iterable[AnchorPoint]) -> None:
        """Swap in a new point set (undo/redo, import, bootstrap)."""
        incoming: Dict[str, AnchorPoint] = {}
        for point in points:
            if point.name in incoming:
                raise CurveValidationError(f"Duplicate point name: {point.name}")
            incoming[point.name] = point
        if len(incoming) < MIN_POINTS:
            raise CurveValidationError(f"A curve needs at least {MIN_POINTS} points")
        self._points = incoming

    # ------------------------------------------------------------------
    # Point lifecycle
    # ------------------------------------------------------------------
    def add_point(self, selected: Optional[AnchorPoint] = None) -> Insertion:
        """Create a sharp point on the baseline next to ``selected`` (or after the last point)."""
        x, advisory = self.plan_insertion_x(selected)
        point = AnchorPoint(name=self.unique_name(), x=x, y=self.baseline_y, type=SHARP)
        self._points[point.name] = point
        logger.debug("Added %s at x=%.1f", point.name, x)
        return Insertion(point=point, advisory=advisory)

    def plan_insertion_x(self, selected: Optional[AnchorPoint] = None) -> Tuple[float, Optional[LayoutAdvisory]]:
        spacing = self.placement.spacing
        margin = self.placement.margin
        right_edge = self.canvas_width - margin
        positions = sorted(point.x for point in self._points.values())

        if selected is not None:
            candidate = min(selected.x + spacing, right_edge)
            if candidate < right_edge:
                return candidate, None
            for left, right in zip(positions, positions[1:]):
                if left >= selected.x and right - left >= spacing:
                    return (left + right) / 2.0, None
        else:
            rightmost = max([margin] + positions)
            candidate = rightmost + spacing
            if candidate < right_edge:
                return candidate, None
            gap_start = margin
            for current in positions:
                if current - gap_start >= spacing:
                    return (gap_start + current) / 2.0, None
                gap_start = current

        logger.info("%s; pinning new point to x=%.1f", CROWDED_MESSAGE, right_edge)
        return right_edge, LayoutAdvisory(message=CROWDED_MESSAGE, x=right_edge)

    def delete_point(self, name: str) -> AnchorPoint:
        point = self.get(name)
        if len(self._points) <= MIN_POINTS:
            raise CurveValidationError(f"Cannot delete: minimum {MIN_POINTS} points required")
        del self._points[name]
        return point

    def rename_point(self, old: str, new: str) -> AnchorPoint:
        new = new.strip()
        point = self.get(old)
        if not new:
            raise CurveValidationError("Point name cannot be empty")
        if new == old:
            return point
        if new in self._points:
            raise CurveValidationError(f"A point named {new!r} already exists")
        # Rebuild to keep the mapping keyed by the current name
        self._points = {(new if key == old else key): value for key, value in self._points.items()}
        point.name = new
        return point

    # ------------------------------------------------------------------
    # Attribute edits
    # ------------------------------------------------------------------
    def toggle_point_type(self, name: str) -> str:
        point = self.get(name)
        point.type = SHARP if point.type == SMOOTH else SMOOTH
        return point.type

    def toggle_star(self, name: str) -> bool:
        point = self.get(name)
        point.starred = not point.starred
        return point.starred

    # ------------------------------------------------------------------
    # Geometric edits
    # ------------------------------------------------------------------
    def translate(self, names: Iterable[str], dx: float, dy: float) -> None:
        for name in names:
            if name in self._points:
                self._points[name].move_by(dx, dy)

    def set_handle(self, name: str, handle: str, position: Position) -> None:
        if handle not in ("cp1", "cp2"):
            raise ValueError(f"Unknown handle: {handle!r}")
        setattr(self.get(name), handle, position.copy())

    def capture(self, names: Iterable[str]) -> Dict[str, PointGeometry]:
        return {name: PointGeometry.of(self._points[name]) for name in names if name in self._points}

    def scale_around(
        self,
        names: Iterable[str],
        origin: Position,
        scale_x: float,
        scale_y: float,
        reference: Optional[Mapping[str, PointGeometry]] = None,
    ) -> None:
        """Scale anchors and handles about ``origin``.

        Positions are computed from ``reference`` (the gesture-start geometry),
        so repeated calls within one gesture never compound.
        """
        names = list(names)
        if reference is None:
            reference = self.capture(names)
        for name in names:
            start = reference.get(name)
            if start is None or name not in self._points:
                continue
            point = self._points[name]
            anchor = start.anchor.scaled_about(origin, scale_x, scale_y)
            point.x, point.y = anchor.x, anchor.y
            point.cp1 = start.cp1.scaled_about(origin, scale_x, scale_y)
            point.cp2 = start.cp2.scaled_about(origin, scale_x, scale_y)

    def snap_to_baseline(self, names: Iterable[str], baseline_y: Optional[float] = None) -> None:
        target = self.baseline_y if baseline_y is None else baseline_y
        for name in names:
            if name not in self._points:
                continue
            point = self._points[name]
            dy = target - point.y
            point.y = target
            point.cp1.offset(0.0, dy)
            point.cp2.offset(0.0, dy)
