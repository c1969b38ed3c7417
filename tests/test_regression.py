"""
Unit Tests for Log-Log Regression
=================================

Run with: python -m pytest tests/test_regression.py -v
"""

import math

import numpy as np
import pytest

from heatmap_analysis import (
    InvalidInputError,
    Sample,
    fit_with_ci,
    linear_regression,
    log_log_regression,
)


class TestLinearRegression:
    """Test ordinary least squares."""

    def test_perfect_line(self):
        """Points on a line give its slope, intercept and R2 of one."""
        x = [0.0, 1.0, 2.0, 3.0, 4.0]
        y = [1.0, 3.0, 5.0, 7.0, 9.0]
        fit = linear_regression(x, y)
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(1.0)
        assert fit.r2 == pytest.approx(1.0)

    def test_noisy_line(self):
        """Noise lowers R2 below one but keeps the slope close."""
        rng = np.random.default_rng(3)
        x = np.linspace(0, 10, 50)
        y = 0.5 * x - 2 + rng.normal(0, 0.2, x.size)
        fit = linear_regression(x, y)
        assert fit.slope == pytest.approx(0.5, abs=0.05)
        assert 0.9 < fit.r2 < 1.0

    def test_empty(self):
        """No data gives NaN slope and intercept."""
        fit = linear_regression([], [])
        assert math.isnan(fit.slope)
        assert math.isnan(fit.intercept)
        assert fit.r2 == 0.0

    def test_single_point(self):
        """One point has zero slope and zero R2."""
        fit = linear_regression([2.0], [5.0])
        assert fit.slope == pytest.approx(0.0)
        assert fit.intercept == pytest.approx(5.0)
        assert fit.r2 == 0.0

    def test_constant_y(self):
        """Constant ordinates give R2 of zero."""
        assert linear_regression([1.0, 2.0, 3.0], [4.0, 4.0, 4.0]).r2 == 0.0

    def test_length_mismatch(self):
        """x and y must have the same length."""
        with pytest.raises(InvalidInputError):
            linear_regression([1.0, 2.0], [1.0])


class TestLogLog:
    """Test the log-log fit used by the estimators."""

    def test_power_law_slope(self):
        """Counts following s^-D recover D."""
        samples = [Sample(s, (256 / s) ** 1.5) for s in (128, 64, 32, 16, 8)]
        fit = log_log_regression(samples)
        assert fit.slope == pytest.approx(1.5)
        assert fit.r2 == pytest.approx(1.0)

    def test_confidence_interval_brackets_slope(self):
        """The interval contains the estimate for noisy counts."""
        samples = [
            Sample(256, 1),
            Sample(128, 3),
            Sample(64, 8),
            Sample(32, 22),
            Sample(16, 64),
            Sample(8, 181),
        ]
        fit = fit_with_ci(samples)
        assert fit["CI_low"] < fit["D"] < fit["CI_high"]
        assert fit["D"] == pytest.approx(1.5, abs=0.1)
        assert len(fit["residuals"]) == 6

    def test_confidence_interval_undefined_for_two_samples(self):
        """Two samples leave no degrees of freedom."""
        fit = fit_with_ci([Sample(8, 4), Sample(4, 16)])
        assert fit["D"] == pytest.approx(2.0)
        assert math.isnan(fit["CI_low"]) and math.isnan(fit["CI_high"])

    def test_confidence_level_checked(self):
        """Confidence must lie strictly between zero and one."""
        with pytest.raises(InvalidInputError):
            fit_with_ci([Sample(8, 4), Sample(4, 16)], confidence=1.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
