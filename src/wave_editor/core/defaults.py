"""Deterministic bootstrap curve used when no earlier session can be recovered."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .points import SHARP, SMOOTH, AnchorPoint, init_control_handles


EDGE_MARGIN = 50.0

# (name, fraction of the usable width, offset from the baseline, type); ``None``
# as the fraction pins the point to the right edge.
PQRST_LAYOUT: Tuple[Tuple[str, Optional[float], float, str], ...] = (
    ("Start", 0.0, 0.0, SMOOTH),
    ("P-start", 0.15, 0.0, SMOOTH),
    ("P", 0.2, -20.0, SMOOTH),
    ("P-end", 0.25, 0.0, SMOOTH),
    ("Q-start", 0.3, 0.0, SHARP),
    ("Q", 0.32, 30.0, SHARP),
    ("R", 0.35, -100.0, SHARP),
    ("S", 0.38, 40.0, SHARP),
    ("ST", 0.45, 0.0, SHARP),
    ("T-start", 0.6, 0.0, SMOOTH),
    ("T", 0.65, -30.0, SMOOTH),
    ("T-end", 0.7, 0.0, SMOOTH),
    ("End", None, 0.0, SMOOTH),
)


def build_default_points(width: float, height: float) -> List[AnchorPoint]:
    """
    Build the 13-point PQRST shape for a ``width`` x ``height`` canvas.

    The baseline sits at half the height; the first and last points rest on it
    at the left and right margins. Control handles are initialised for every
    point, so the result is ready for editing and export.
    """
    if width <= 2 * EDGE_MARGIN or height <= 0:
        raise ValueError(f"Canvas {width}x{height} is too small for the default curve")

    baseline = height / 2.0
    start_x = EDGE_MARGIN
    usable = width - 2 * EDGE_MARGIN

    points = []
    for name, fraction, dy, kind in PQRST_LAYOUT:
        x = width - EDGE_MARGIN if fraction is None else start_x + usable * fraction
        points.append(AnchorPoint(name=name, x=x, y=baseline + dy, type=kind))

    init_control_handles(points)
    return points
