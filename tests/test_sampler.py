import numpy as np
import pytest

from wave_editor.core.defaults import build_default_points
from wave_editor.core.normalize import NormalizedCurve, NormalizedSharp, NormalizedSmooth, export_normalized
from wave_editor.core.sampler import cubic_bezier, sample, sample_many


@pytest.fixture
def default_curve():
    return export_normalized(build_default_points(1000, 400), 200, 400)


def test_cubic_bezier_endpoints_and_midpoint():
    assert cubic_bezier(0, 1, 1, 0, 0.0) == 0
    assert cubic_bezier(0, 1, 1, 0, 1.0) == 0
    assert cubic_bezier(0, 1, 1, 0, 0.5) == pytest.approx(0.75)


@pytest.mark.parametrize("phase", [0.0, 0.5, 0.999])
def test_flat_smooth_curve_samples_zero(phase):
    curve = NormalizedCurve(
        points=(
            NormalizedSmooth(0.0, 0.0, (0.0, 0.0), (0.33, 0.0)),
            NormalizedSmooth(1.0, 0.0, (0.67, 0.0), (1.0, 0.0)),
        )
    )
    assert sample(curve, phase) == pytest.approx(0.0)


def test_linear_segments_and_seam_wrap():
    curve = NormalizedCurve(points=(NormalizedSharp(0.0, 0.0), NormalizedSharp(0.5, 1.0)))
    assert sample(curve, 0.25) == pytest.approx(0.5)
    # From the last point back to the first across the seam
    assert sample(curve, 0.75) == pytest.approx(0.5)


def test_phase_before_first_point_wraps_from_last():
    curve = NormalizedCurve(points=(NormalizedSharp(0.2, 0.0), NormalizedSharp(0.6, 1.0)))
    # seam spans 0.6 -> 1.2; phase 0.1 is 0.5 into it
    assert sample(curve, 0.1) == pytest.approx(1.0 - 0.5 / 0.6)


def test_phase_is_reduced_modulo_one(default_curve):
    assert sample(default_curve, 1.25) == pytest.approx(sample(default_curve, 0.25))
    assert sample(default_curve, -0.75) == pytest.approx(sample(default_curve, 0.25))


def test_default_curve_is_continuous_across_seam(default_curve):
    assert sample(default_curve, 0.0) == pytest.approx(0.0)
    assert sample(default_curve, 0.99999) == pytest.approx(0.0, abs=1e-3)


def test_peak_of_default_curve_hits_r(default_curve):
    assert sample(default_curve, 0.35) == pytest.approx(1.0)


def test_sample_many_matches_scalar_sampler(default_curve):
    phases = np.concatenate([np.linspace(0.0, 1.0, 97, endpoint=False), [-0.3, 1.7, 0.35]])
    expected = [sample(default_curve, phase) for phase in phases]
    assert np.allclose(sample_many(default_curve, phases), expected)


def test_sample_many_with_seam_gap():
    curve = NormalizedCurve(points=(NormalizedSharp(0.2, 0.0), NormalizedSharp(0.6, 1.0)))
    phases = np.array([0.1, 0.4, 0.8])
    expected = [sample(curve, phase) for phase in phases]
    assert np.allclose(sample_many(curve, phases), expected)
