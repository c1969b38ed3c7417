"""
Validation Tests Against Known Dimensions
=========================================

Run with: python -m pytest tests/test_validation.py -v
"""

import numpy as np
import pytest

from heatmap_analysis import run_sanity_checks
from heatmap_analysis.validation import (
    generate_flat_raster,
    generate_noise_curve,
    generate_straight_line,
)


class TestGenerators:
    """Test the synthetic inputs."""

    def test_straight_line(self):
        """One point per grid unit on a horizontal line."""
        line = generate_straight_line(10, 3.0)
        assert line.shape == (10, 2)
        assert np.all(line[:, 1] == 3.0)

    def test_noise_curve_within_bounds(self):
        """The profile stays inside its bounding box and is reproducible."""
        curve = generate_noise_curve(128, 64, seed=2)
        assert curve[:, 1].min() >= 0
        assert curve[:, 1].max() <= 63
        np.testing.assert_array_equal(curve, generate_noise_curve(128, 64, seed=2))

    def test_flat_raster(self):
        """The flat raster is constant."""
        raster = generate_flat_raster(8, 4, 17)
        assert raster.shape == (4, 8)
        assert np.all(raster == 17)


class TestSanityChecks:
    """Test the estimator sanity table."""

    @pytest.fixture(scope="class")
    def table(self):
        return run_sanity_checks(256).set_index("case")

    def test_cases(self, table):
        """Every reference case is present."""
        assert list(table.index) == ["straight_line", "filled_square", "noise_curve", "flat_raster_dbc"]

    def test_straight_line(self, table):
        """A line measures one."""
        assert table.loc["straight_line", "D"] == pytest.approx(1.0, abs=1e-6)

    def test_filled_square(self, table):
        """A square measures two."""
        assert table.loc["filled_square", "D"] == pytest.approx(2.0, abs=1e-6)

    def test_noise_curve(self, table):
        """A random-walk profile lies between a line and the plane."""
        assert 1.0 < table.loc["noise_curve", "D"] < 2.0

    def test_flat_raster(self, table):
        """A constant raster measures close to two."""
        assert table.loc["flat_raster_dbc", "D"] == pytest.approx(2.0, abs=0.15)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
