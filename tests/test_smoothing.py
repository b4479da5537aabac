"""Tests for the single-pole low-pass filter in smoothing.py"""

import math

import numpy as np
import pandas as pd
import pytest

from flight_aero.smoothing import lowpass_alpha, lowpass_filter, smooth_coefficients


class TestLowpassAlpha:
    """Tests for the lowpass_alpha function."""

    def test_formula(self):
        assert lowpass_alpha(1.0, 100.0) == pytest.approx(math.exp(-2 * math.pi * 1.0 / 50.0))

    def test_higher_cutoff_less_smoothing(self):
        assert lowpass_alpha(5.0, 100.0) < lowpass_alpha(1.0, 100.0)

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            lowpass_alpha(0.0, 100.0)
        with pytest.raises(ValueError):
            lowpass_alpha(1.0, 0.0)


class TestLowpassFilter:
    """Tests for the lowpass_filter function."""

    def test_returns_same_length(self):
        x = np.array([1.0, 5.0, 2.0, 8.0])
        assert len(lowpass_filter(x, 0.5)) == len(x)

    def test_first_sample_passes_through(self):
        assert lowpass_filter(np.array([3.0, 0.0]), 0.9)[0] == 3.0

    def test_constant_signal_unchanged(self):
        """A constant series is a fixed point of the filter."""
        x = np.full(50, 4.2)
        np.testing.assert_allclose(lowpass_filter(x, 0.8), x, rtol=1e-12)

    def test_known_values(self):
        y = lowpass_filter(np.array([0.0, 1.0, 1.0]), 0.5)
        np.testing.assert_allclose(y, [0.0, 0.5, 0.75])

    def test_matches_recurrence(self):
        """Output follows y[i] = a*y[i-1] + (1-a)*x[i] with y[0] = x[0]."""
        rng = np.random.default_rng(3)
        x = rng.normal(5.0, 2.0, 40)
        a = 0.7
        expected = [x[0]]
        for xi in x[1:]:
            expected.append(a * expected[-1] + (1 - a) * xi)
        np.testing.assert_allclose(lowpass_filter(x, a), expected, rtol=1e-12)

    def test_smooths_noisy_signal(self):
        np.random.seed(42)
        x = np.random.randn(200) + 10
        assert np.var(lowpass_filter(x, 0.8)) < np.var(x)

    def test_empty(self):
        assert len(lowpass_filter(np.array([]), 0.5)) == 0


class TestSmoothCoefficients:
    """Tests for the smooth_coefficients function."""

    @pytest.fixture
    def coeffs(self):
        return pd.DataFrame({
            "timestamp": np.arange(5) * 0.01,
            "cl": [0.0, 1.0, 0.0, 1.0, 0.0],
            "cd": [0.2, 0.2, 0.2, 0.2, 0.2],
            "velocity": [1.0, 2.0, 3.0, 4.0, 5.0],
            "dynamic_pressure": [1.0, 2.0, 3.0, 4.0, 5.0],
        })

    def test_only_coefficients_filtered(self, coeffs):
        out = smooth_coefficients(coeffs, 2.0, 100.0)
        np.testing.assert_array_equal(out["velocity"], coeffs["velocity"])
        np.testing.assert_array_equal(out["dynamic_pressure"], coeffs["dynamic_pressure"])
        assert out["cl"].iloc[1] < 1.0
        np.testing.assert_allclose(out["cd"], 0.2)

    def test_input_not_modified(self, coeffs):
        before = coeffs.copy()
        smooth_coefficients(coeffs, 2.0, 100.0)
        pd.testing.assert_frame_equal(coeffs, before)

    def test_unknown_rate_is_passthrough(self, coeffs):
        out = smooth_coefficients(coeffs, 2.0, None)
        pd.testing.assert_frame_equal(out, coeffs)
