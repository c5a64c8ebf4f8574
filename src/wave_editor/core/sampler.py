"""Cyclic sampler reconstructing a continuous signal from a normalized curve.

Both entry points are pure: the value depends only on the curve and the
phase. The caller owns any gain applied to the result.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .normalize import NormalizedCurve, NormalizedPoint, NormalizedSmooth


def cubic_bezier(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    """One-dimensional cubic Bezier with Bernstein weights."""
    u = 1.0 - t
    return u * u * u * p0 + 3.0 * u * u * t * p1 + 3.0 * u * t * t * p2 + t * t * t * p3


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def bracket(points: Sequence[NormalizedPoint], phase: float) -> Tuple[NormalizedPoint, NormalizedPoint, float]:
    """Return ``(start, end, t)`` for ``phase`` in ``[0, 1)``.

    The bracket wraps from the last point to the first when the phase lies
    after the last point or before the first one.
    """
    first, last = points[0], points[-1]
    for index, point in enumerate(points):
        if point.x > phase:
            if index == 0:
                start, end = last, first
                width = 1.0 - last.x + first.x
                local = phase + 1.0 - last.x
            else:
                start, end = points[index - 1], point
                width = point.x - start.x
                local = phase - start.x
            break
    else:
        start, end = last, first
        width = 1.0 - last.x + first.x
        local = phase - last.x

    t = local / width if width > 0 else 0.0
    return start, end, t


def sample(curve: NormalizedCurve, phase: float) -> float:
    """Curve value at ``phase`` (reduced modulo 1)."""
    phase = float(phase) % 1.0
    start, end, t = bracket(curve.points, phase)
    if isinstance(start, NormalizedSmooth) and isinstance(end, NormalizedSmooth):
        return cubic_bezier(start.y, start.cp2[1], end.cp1[1], end.y, t)
    return lerp(start.y, end.y, t)


def _columns(curve: NormalizedCurve):
    points = curve.points
    xs = np.array([point.x for point in points], dtype=float)
    ys = np.array([point.y for point in points], dtype=float)
    smooth = np.array([isinstance(point, NormalizedSmooth) for point in points], dtype=bool)
    cp1_y = np.array([point.cp1[1] if isinstance(point, NormalizedSmooth) else point.y for point in points])
    cp2_y = np.array([point.cp2[1] if isinstance(point, NormalizedSmooth) else point.y for point in points])
    return xs, ys, smooth, cp1_y, cp2_y


def sample_many(curve: NormalizedCurve, phases) -> np.ndarray:
    """Vectorised :func:`sample` over an array of phases."""
    phases = np.mod(np.asarray(phases, dtype=float), 1.0)
    xs, ys, smooth, cp1_y, cp2_y = _columns(curve)
    count = len(xs)

    after = np.searchsorted(xs, phases, side="right")
    before_first = after == 0
    wrapped = before_first | (after == count)

    start = np.where(wrapped, count - 1, after - 1)
    end = np.where(wrapped, 0, after)

    seam_width = 1.0 - xs[-1] + xs[0]
    width = np.where(wrapped, seam_width, xs[end] - xs[start])
    local = phases - xs[start] + np.where(before_first, 1.0, 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(width > 0, local / np.where(width > 0, width, 1.0), 0.0)

    u = 1.0 - t
    curved = (
        u ** 3 * ys[start]
        + 3.0 * u ** 2 * t * cp2_y[start]
        + 3.0 * u * t ** 2 * cp1_y[end]
        + t ** 3 * ys[end]
    )
    straight = ys[start] + t * (ys[end] - ys[start])
    return np.where(smooth[start] & smooth[end], curved, straight)
