"""Built-in respiratory waveforms shown beside the authored curve.

All generators take a breath phase in ``[0, 1)``; inspiration occupies the
first 30% of the cycle. Values are already in display units, so no gain is
applied to them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Tuple

import numpy as np

from .playback import SweepTrace

INSPIRATION = 0.3

Generator = Callable[[float], float]


def tidal_volume(phase: float) -> float:
    """Volume trace used when no authored curve has been exported yet."""
    if phase < INSPIRATION:
        return 40.0 * (phase / INSPIRATION) ** 2
    return 40.0 * (1.0 - (phase - INSPIRATION) / (1.0 - INSPIRATION)) ** 0.5


def airway_pressure(phase: float) -> float:
    """Square-ish pressure wave: ramp, plateau, release, then PEEP."""
    if phase < 0.2:
        return 30.0 * (phase / 0.2)
    if phase < 0.3:
        return 30.0
    if phase < 0.4:
        return 30.0 * (1.0 - (phase - 0.3) / 0.1)
    return 5.0


def end_tidal_co2(phase: float) -> float:
    """Capnogram: dead space, upstroke, alveolar plateau and washout."""
    if phase < 0.3:
        return 5.0
    if phase < 0.4:
        return 5.0 + 32.0 * ((phase - 0.3) / 0.1)
    if phase < 0.8:
        return 37.0
    return 37.0 * (1.0 - (phase - 0.8) / 0.2)


def pressure_volume(phase: float) -> Tuple[float, float]:
    """``(pressure, volume)`` on the P-V loop at ``phase``."""
    if phase < INSPIRATION:
        t = phase / INSPIRATION
        return 5.0 + 25.0 * t**2, 500.0 * t**1.5
    t = (phase - INSPIRATION) / (1.0 - INSPIRATION)
    return 30.0 * (1.0 - t) ** 0.5 + 5.0, 500.0 * (1.0 - t) ** 2


@dataclass(frozen=True)
class Channel:
    key: str
    label: str
    color: Tuple[int, int, int]
    generator: Generator


VTE = Channel("vte", "VTe", (0, 255, 0), tidal_volume)
PAW = Channel("paw", "Paw", (0, 255, 255), airway_pressure)
ETCO2 = Channel("etco2", "EtCO2", (255, 255, 255), end_tidal_co2)

COMPANION_CHANNELS: Tuple[Channel, ...] = (PAW, ETCO2)


class LoopTrail:
    """Bounded history of P-V loop points, oldest first."""

    def __init__(self, capacity: int = 500) -> None:
        if capacity < 2:
            raise ValueError("Loop trail needs room for at least 2 points")
        self.capacity = int(capacity)
        self._points: Deque[Tuple[float, float]] = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._points)

    def clear(self) -> None:
        self._points.clear()

    def append(self, phase: float) -> Tuple[float, float]:
        point = pressure_volume(phase)
        self._points.append(point)
        return point

    def arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        if not self._points:
            return np.zeros(0), np.zeros(0)
        pressures, volumes = zip(*self._points)
        return np.asarray(pressures, dtype=float), np.asarray(volumes, dtype=float)

    def opacities(self) -> np.ndarray:
        """Per-point alpha in ``[0.4, 1]``; newer points are more opaque."""
        count = len(self._points)
        return np.minimum(0.4 + 0.7 * np.arange(count, dtype=float) / max(count, 1), 1.0)


class CompanionTraces:
    """Sweep traces for the built-in channels plus the P-V loop trail."""

    def __init__(
        self,
        width: int = 600,
        trail_points: int = 500,
        channels: Tuple[Channel, ...] = COMPANION_CHANNELS,
    ) -> None:
        self.channels = channels
        self.traces: Dict[str, SweepTrace] = {channel.key: SweepTrace(width) for channel in channels}
        self.loop = LoopTrail(trail_points)
        self.last_values: Dict[str, float] = {channel.key: 0.0 for channel in channels}

    def reset(self) -> None:
        for trace in self.traces.values():
            trace.reset()
        self.loop.clear()

    def advance(self, phase: float) -> Dict[str, float]:
        for channel in self.channels:
            value = channel.generator(phase)
            self.traces[channel.key].advance(value)
            self.last_values[channel.key] = value
        self.loop.append(phase)
        return dict(self.last_values)

