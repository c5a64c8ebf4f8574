"""
Conversion of an authored curve into the resolution-independent playback form.

x is rescaled from the authored span onto ``[0, 1]``; y is measured from the
baseline in quarter-canvas-height units with "up" positive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from ..errors import CurveValidationError
from .points import SHARP, SMOOTH, AnchorPoint, sort_by_x


logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class NormalizedSmooth:
    x: float
    y: float
    cp1: Coordinate
    cp2: Coordinate

    type = SMOOTH

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "type": SMOOTH,
            "cp1": {"x": self.cp1[0], "y": self.cp1[1]},
            "cp2": {"x": self.cp2[0], "y": self.cp2[1]},
        }


@dataclass(frozen=True)
class NormalizedSharp:
    x: float
    y: float

    type = SHARP

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "type": SHARP, "cp1": None, "cp2": None}


NormalizedPoint = Union[NormalizedSmooth, NormalizedSharp]


@dataclass(frozen=True)
class NormalizedMetadata:
    """Provenance of a normalized curve.

    Attributes:
        original_width: Authored x-span the curve was rescaled from
        original_height: Canvas height at authoring time
        baseline_ratio: ``original_baseline / original_height``
        original_baseline: Authored baseline y
    """

    original_width: float
    original_height: float
    baseline_ratio: float
    original_baseline: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "originalWidth": self.original_width,
            "originalHeight": self.original_height,
            "baselineRatio": self.baseline_ratio,
            "originalBaseline": self.original_baseline,
        }


@dataclass(frozen=True)
class NormalizedCurve:
    points: Tuple[NormalizedPoint, ...]
    metadata: Optional[NormalizedMetadata] = None

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise CurveValidationError("A normalized curve needs at least two points")
        xs = [point.x for point in self.points]
        if any(later < earlier for earlier, later in zip(xs, xs[1:])):
            raise CurveValidationError("Normalized points must be sorted by ascending x")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"points": [point.to_dict() for point in self.points]}
        if self.metadata is not None:
            payload["metadata"] = self.metadata.to_dict()
        return payload


def export_normalized(
    points: Sequence[AnchorPoint],
    baseline_y: float,
    canvas_height: float,
) -> NormalizedCurve:
    """
    Map authored points to a :class:`NormalizedCurve`.

    Parameters
    ----------
    points:
        Authored points in any order.
    baseline_y:
        Author-space y treated as the zero line.
    canvas_height:
        Authoring canvas height; a quarter of it maps to one normalized unit.

    Raises
    ------
    CurveValidationError
        When fewer than two points are given or they span no width.
    """

    if canvas_height <= 0:
        raise CurveValidationError("Canvas height must be positive")
    ordered = sort_by_x(points)
    if len(ordered) < 2:
        raise CurveValidationError("A curve needs at least two points to export")

    start_x = ordered[0].x
    span = ordered[-1].x - start_x
    if span <= 0:
        raise CurveValidationError("Cannot export a curve with zero width")

    unit = canvas_height / 4.0

    def nx(value: float) -> float:
        return (value - start_x) / span

    def ny(value: float) -> float:
        return (baseline_y - value) / unit

    normalized = []
    for point in ordered:
        if point.is_smooth:
            normalized.append(
                NormalizedSmooth(
                    x=nx(point.x),
                    y=ny(point.y),
                    cp1=(nx(point.cp1.x), ny(point.cp1.y)),
                    cp2=(nx(point.cp2.x), ny(point.cp2.y)),
                )
            )
        else:
            normalized.append(NormalizedSharp(x=nx(point.x), y=ny(point.y)))

    metadata = NormalizedMetadata(
        original_width=span,
        original_height=float(canvas_height),
        baseline_ratio=baseline_y / canvas_height,
        original_baseline=float(baseline_y),
    )
    logger.debug("Normalized %d points over span %.1f", len(normalized), span)
    return NormalizedCurve(points=tuple(normalized), metadata=metadata)
