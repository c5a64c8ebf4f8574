"""Live monitor dock: VTe, Paw and EtCO2 sweeps plus a P-V loop in pyqtgraph.

VTe follows the exported curve; until one is exported it shows the built-in
tidal volume wave.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pyqtgraph as pg
from PySide6.QtCore import QElapsedTimer, QObject, QTimer, Signal
from PySide6.QtWidgets import QGridLayout, QLabel, QVBoxLayout, QWidget

from ...config import PlaybackConfig
from ...core.normalize import NormalizedCurve
from ...core.playback import PlaybackSession, SweepTrace, monitor_baseline
from ...core.respiratory import COMPANION_CHANNELS, VTE, Channel, CompanionTraces, tidal_volume

logger = logging.getLogger(__name__)

MONITOR_HEIGHT = 200.0
HEAD_GAP = 15
LOOP_PRESSURE_MAX = 40.0
LOOP_VOLUME_MAX = 600.0
LOOP_COLOR = (255, 255, 255)


class PlaybackController(QObject):
    """Ticks the VTe session and the companion traces from one ``QTimer``."""

    ticked = Signal(object)  # {channel key: display value}

    def __init__(self, config: PlaybackConfig, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._config = config
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._clock = QElapsedTimer()
        self.session = PlaybackSession.from_config(None, config, fallback=tidal_volume)
        self.companions = CompanionTraces(config.sweep_width, config.loop_trail_points)

    def is_active(self) -> bool:
        return self._timer.isActive()

    def set_curve(self, curve: Optional[NormalizedCurve]) -> None:
        self.session.set_curve(curve)

    def start(self) -> None:
        if self.is_active():
            return
        self._clock.start()
        self._timer.start(self._config.tick_interval_ms)

    def stop(self) -> None:
        self._timer.stop()

    def _tick(self) -> None:
        seconds = self._clock.elapsed() / 1000.0
        values = {VTE.key: self.session.tick(seconds)}
        values.update(self.companions.advance(self.session.last_phase))
        self.ticked.emit(values)


class SweepPlot(QWidget):
    """One channel: a black sweep plot with its name and current value."""

    def __init__(self, channel: Channel, config: PlaybackConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.channel = channel
        self.baseline = MONITOR_HEIGHT * config.default_baseline_ratio
        color = pg.mkColor(channel.color).name()

        self.plot = pg.PlotWidget()
        self.plot.setBackground("k")
        self.plot.hideAxis("bottom")
        self.plot.hideAxis("left")
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.invertY(True)
        self.plot.setXRange(0, config.sweep_width, padding=0)
        self.plot.setYRange(0, MONITOR_HEIGHT, padding=0)
        self._runs: List[pg.PlotDataItem] = []

        self.value_label = QLabel(f"{channel.label} --")
        self.value_label.setStyleSheet(f"color: {color}; font-weight: bold;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.value_label)
        layout.addWidget(self.plot)

    def redraw(self, trace: SweepTrace, value: float) -> None:
        runs = trace.polylines(self.baseline, gap=HEAD_GAP)
        while len(self._runs) < len(runs):
            self._runs.append(self.plot.plot(pen=pg.mkPen(self.channel.color, width=2)))
        for item, (xs, ys) in zip(self._runs, runs):
            item.setData(xs, ys)
        for item in self._runs[len(runs):]:
            item.setData([], [])
        self.value_label.setText(f"{self.channel.label} {value:.0f}")


class MonitorWidget(QWidget):
    """Three sweep plots beside a fading pressure-volume loop."""

    def __init__(self, config: PlaybackConfig, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._config = config

        self.sweeps: Dict[str, SweepPlot] = {
            channel.key: SweepPlot(channel, config) for channel in (VTE, *COMPANION_CHANNELS)
        }

        self.loop_plot = pg.PlotWidget()
        self.loop_plot.setBackground("k")
        self.loop_plot.setMouseEnabled(x=False, y=False)
        self.loop_plot.setXRange(0, LOOP_PRESSURE_MAX, padding=0)
        self.loop_plot.setYRange(0, LOOP_VOLUME_MAX, padding=0)
        self.loop_plot.setLabel("bottom", "Paw")
        self.loop_plot.setLabel("left", "Volume")
        self.loop_scatter = pg.ScatterPlotItem(size=3, pen=None)
        self.loop_plot.addItem(self.loop_scatter)

        layout = QGridLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        for row, sweep in enumerate(self.sweeps.values()):
            layout.addWidget(sweep, row, 1)
        layout.addWidget(self.loop_plot, 0, 0, len(self.sweeps), 1)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 2)

        self.controller = PlaybackController(config, self)
        self.controller.ticked.connect(self._on_tick)
        self.controller.start()

    def set_curve(self, curve: NormalizedCurve) -> None:
        self.sweeps[VTE.key].baseline = monitor_baseline(
            curve, MONITOR_HEIGHT, self._config.default_baseline_ratio
        )
        self.controller.set_curve(curve)
        self.controller.start()

    def stop(self) -> None:
        self.controller.stop()

    def _on_tick(self, values: Dict[str, float]) -> None:
        self.sweeps[VTE.key].redraw(self.controller.session.trace, values[VTE.key])
        for channel in COMPANION_CHANNELS:
            self.sweeps[channel.key].redraw(self.controller.companions.traces[channel.key], values[channel.key])

        pressures, volumes = self.controller.companions.loop.arrays()
        brushes = [pg.mkBrush(*LOOP_COLOR, int(alpha * 255)) for alpha in self.controller.companions.loop.opacities()]
        self.loop_scatter.setData(x=pressures, y=volumes, brush=brushes)
