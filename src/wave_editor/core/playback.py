"""Real-time playback primitives: phase clock, sweep trace and preview scrolling.

Nothing here touches the curve store. Timers live in the GUI; these classes
only turn elapsed time into values and screen geometry.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..config import PlaybackConfig
from .normalize import NormalizedCurve
from .sampler import sample


logger = logging.getLogger(__name__)

Polyline = Tuple[np.ndarray, np.ndarray]


class PhaseClock:
    """Maps wall-clock seconds onto a phase in ``[0, 1)``."""

    def __init__(self, cycles_per_minute: float = 12.0) -> None:
        if cycles_per_minute <= 0:
            raise ValueError("cycles_per_minute must be positive")
        self.cycles_per_minute = float(cycles_per_minute)

    @property
    def period_s(self) -> float:
        return 60.0 / self.cycles_per_minute

    def phase_at(self, seconds: float) -> float:
        return (seconds * self.cycles_per_minute / 60.0) % 1.0


class SweepTrace:
    """Print-head ring buffer of display values, one sample per column."""

    def __init__(self, width: int = 600) -> None:
        if width < 2:
            raise ValueError("Sweep width must be at least 2 samples")
        self.width = int(width)
        self.values = np.zeros(self.width, dtype=float)
        self.head = 0

    def reset(self) -> None:
        self.values.fill(0.0)
        self.head = 0

    def advance(self, value: float) -> int:
        """Write ``value`` at the head, move the head on and return the written column."""
        column = self.head
        self.values[column] = value
        self.head = (column + 1) % self.width
        return column

    def polylines(self, baseline_y: float, gap: int = 0) -> List[Polyline]:
        """Screen-space runs of the trace, split where the head wraps.

        ``gap`` columns directly ahead of the head are left blank so the
        newest sample is visually separated from the oldest.
        """
        ys = baseline_y - self.values
        columns = np.arange(self.width, dtype=float)
        runs: List[Polyline] = []
        if self.head > 0:
            runs.append((columns[: self.head], ys[: self.head]))
        tail_start = min(self.head + max(gap, 0), self.width)
        if tail_start < self.width:
            runs.append((columns[tail_start:], ys[tail_start:]))
        return runs


def monitor_baseline(curve: Optional[NormalizedCurve], height: float, default_ratio: float = 0.67) -> float:
    """Baseline y for a playback canvas of ``height`` honouring the curve's provenance."""
    if curve is not None and curve.metadata is not None:
        return height * curve.metadata.baseline_ratio
    return height * default_ratio


class PlaybackSession:
    """Samples a curve once per tick and feeds the sweep trace.

    Until a curve is set the ``fallback`` generator drives the trace; its
    values are already in display units and skip the gain.
    """

    def __init__(
        self,
        curve: Optional[NormalizedCurve] = None,
        clock: Optional[PhaseClock] = None,
        trace: Optional[SweepTrace] = None,
        gain: float = 840.0,
        fallback: Optional[Callable[[float], float]] = None,
    ) -> None:
        self.curve = curve
        self.fallback = fallback
        self.clock = clock or PhaseClock()
        self.trace = trace or SweepTrace()
        self.gain = float(gain)
        self.last_value = 0.0
        self.last_phase = 0.0

    @classmethod
    def from_config(
        cls,
        curve: Optional[NormalizedCurve],
        config: PlaybackConfig,
        fallback: Optional[Callable[[float], float]] = None,
    ) -> "PlaybackSession":
        return cls(
            curve,
            clock=PhaseClock(config.cycles_per_minute),
            trace=SweepTrace(config.sweep_width),
            gain=config.gain,
            fallback=fallback,
        )

    def set_curve(self, curve: Optional[NormalizedCurve]) -> None:
        self.curve = curve

    def tick(self, seconds: float) -> float:
        phase = self.clock.phase_at(seconds)
        if self.curve is not None:
            self.last_value = sample(self.curve, phase) * self.gain
        elif self.fallback is not None:
            self.last_value = self.fallback(phase)
        else:
            self.last_value = 0.0
        self.last_phase = phase
        self.trace.advance(self.last_value)
        return self.last_value


class PreviewScroller:
    """Horizontal offset of the scrolling preview of the authored curve."""

    def __init__(self, step: float = 2.0) -> None:
        self.step = float(step)
        self.offset = 0.0

    def reset(self) -> None:
        self.offset = 0.0

    def advance(self, wave_width: float) -> float:
        self.offset -= self.step
        if wave_width <= 0 or abs(self.offset) >= wave_width:
            self.offset = 0.0
        return self.offset

    def copy_offsets(self, canvas_width: float, wave_width: float) -> List[float]:
        """Offsets at which to draw copies of the curve so they fill ``canvas_width``."""
        if wave_width <= 0:
            return [self.offset]
        copies = math.ceil(canvas_width / wave_width) + 1
        return [self.offset + index * wave_width for index in range(copies)]
