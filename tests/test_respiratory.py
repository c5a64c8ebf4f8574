import numpy as np
import pytest

from wave_editor.config import PlaybackConfig
from wave_editor.core.playback import PlaybackSession
from wave_editor.core.respiratory import (
    COMPANION_CHANNELS,
    ETCO2,
    PAW,
    CompanionTraces,
    LoopTrail,
    airway_pressure,
    end_tidal_co2,
    pressure_volume,
    tidal_volume,
)


@pytest.mark.parametrize("phase, expected", [(0.0, 0.0), (0.15, 10.0), (0.3, 40.0), (1.0 - 1e-12, 0.0)])
def test_tidal_volume(phase, expected):
    assert tidal_volume(phase) == pytest.approx(expected, abs=1e-4)


@pytest.mark.parametrize("phase, expected", [(0.1, 15.0), (0.25, 30.0), (0.35, 15.0), (0.5, 5.0)])
def test_airway_pressure(phase, expected):
    assert airway_pressure(phase) == pytest.approx(expected)


@pytest.mark.parametrize("phase, expected", [(0.1, 5.0), (0.35, 21.0), (0.5, 37.0), (0.9, 18.5)])
def test_end_tidal_co2(phase, expected):
    assert end_tidal_co2(phase) == pytest.approx(expected)


def test_pressure_volume_loop_closes_at_peep():
    assert pressure_volume(0.0) == pytest.approx((5.0, 0.0))
    assert pressure_volume(0.3) == pytest.approx((35.0, 500.0))
    assert pressure_volume(0.15) == pytest.approx((11.25, 176.7767), rel=1e-5)
    pressure, volume = pressure_volume(1.0 - 1e-9)
    assert pressure == pytest.approx(5.0, abs=1e-2)
    assert volume == pytest.approx(0.0, abs=1e-3)


def test_fallback_skips_the_gain():
    session = PlaybackSession.from_config(None, PlaybackConfig(), fallback=tidal_volume)
    # 12 cycles per minute: 0.75 s is phase 0.15
    assert session.tick(0.75) == pytest.approx(10.0)


def test_loop_trail_is_bounded_and_fades_oldest_first():
    trail = LoopTrail(capacity=4)
    for phase in (0.0, 0.1, 0.2, 0.3, 0.5):
        trail.append(phase)
    assert len(trail) == 4
    pressures, volumes = trail.arrays()
    assert pressures[0] == pytest.approx(pressure_volume(0.1)[0])
    assert volumes[-1] == pytest.approx(pressure_volume(0.5)[1])
    alphas = trail.opacities()
    assert alphas[0] == pytest.approx(0.4)
    assert np.all(np.diff(alphas) >= 0)
    assert alphas.max() <= 1.0
    trail.clear()
    assert trail.arrays()[0].size == 0
    with pytest.raises(ValueError):
        LoopTrail(capacity=1)


def test_companion_traces_advance_together():
    companions = CompanionTraces(width=5, trail_points=3)
    assert [channel.key for channel in COMPANION_CHANNELS] == [PAW.key, ETCO2.key]
    values = companions.advance(0.35)
    assert values == pytest.approx({PAW.key: 15.0, ETCO2.key: 21.0})
    for phase in (0.5, 0.6, 0.7):
        companions.advance(phase)
    assert companions.traces[PAW.key].head == 4
    assert companions.traces[ETCO2.key].values[0] == pytest.approx(21.0)
    assert len(companions.loop) == 3

    companions.reset()
    assert companions.traces[PAW.key].head == 0
    assert len(companions.loop) == 0


def test_loop_trail_points_config_is_validated():
    assert PlaybackConfig().loop_trail_points == 500
    with pytest.raises(ValueError):
        PlaybackConfig(loop_trail_points=1)
