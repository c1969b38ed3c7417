"""
Unit Tests for Box-Counting Estimators
======================================

Tests the scale ladder, point-set box counting and differential box counting.

Run with: python -m pytest tests/test_boxcount.py -v
"""

import math

import numpy as np
import pytest

from heatmap_analysis import (
    BoxCountingOptions,
    DBCOptions,
    FieldNotReadyError,
    GrayRaster,
    InvalidInputError,
    fractal_dimension_box_counting,
    fractal_dimension_dbc,
    samples_frame,
    scale_ladder,
)
from heatmap_analysis.boxcount import count_occupied_boxes
from heatmap_analysis.validation import generate_filled_square, generate_noise_curve


class TestScaleLadder:
    """Test the geometric ladder of box sizes."""

    def test_powers_of_two(self):
        """2..256 in eight steps halves at every step."""
        assert scale_ladder(2, 256, 8) == [256, 128, 64, 32, 16, 8, 4, 2]

    def test_duplicates_removed(self):
        """Rounded repeats are dropped, order kept."""
        assert scale_ladder(1, 4, 8) == [4, 3, 2, 1]

    def test_floor(self):
        """Sizes below the floor are dropped."""
        assert scale_ladder(1, 4, 8, floor=2) == [4, 3, 2]

    def test_too_few_steps(self):
        """At least two steps are needed."""
        with pytest.raises(InvalidInputError):
            scale_ladder(2, 64, 1)

    def test_non_positive_bounds(self):
        """Box sizes must be positive."""
        with pytest.raises(InvalidInputError):
            scale_ladder(0, 64, 4)


class TestPointBoxCounting:
    """Test box counting over point sets."""

    def test_count_occupied_boxes(self):
        """Points in the same cell count once."""
        points = np.array([[0.0, 0.0], [1.0, 1.0], [5.0, 0.0], [9.0, 9.0]])
        assert count_occupied_boxes(points, 10, 10, 4) == 3

    def test_points_clamped(self):
        """Points outside the grid are clamped to the border cells."""
        points = np.array([[-5.0, -5.0], [50.0, 50.0]])
        assert count_occupied_boxes(points, 8, 8, 4) == 2

    def test_straight_line(self):
        """A straight line has dimension one."""
        points = [(x, 32.0) for x in range(256)]
        result = fractal_dimension_box_counting(points, 256, 256)
        assert result.D == pytest.approx(1.0, abs=1e-6)
        assert result.R2 == pytest.approx(1.0)

    def test_filled_square(self):
        """A filled square has dimension two."""
        options = BoxCountingOptions(min_box=2, max_box=128, steps=7)
        result = fractal_dimension_box_counting(generate_filled_square(128), 128, 128, options)
        assert result.D == pytest.approx(2.0, abs=1e-6)

    def test_counts_non_increasing(self):
        """N(s) never grows with s on nested grids."""
        options = BoxCountingOptions(min_box=2, max_box=128, steps=7)
        result = fractal_dimension_box_counting(generate_noise_curve(256, 128), 256, 128, options)
        scales = [s.scale for s in result.samples]
        counts = [s.count for s in result.samples]
        assert scales == sorted(scales, reverse=True)
        assert counts == sorted(counts)

    def test_empty_points(self):
        """No points give NaN and no samples."""
        result = fractal_dimension_box_counting([], 64, 64)
        assert math.isnan(result.D)
        assert result.R2 == 0.0
        assert result.samples == []

    def test_missing_points(self):
        """Counting without a point set is an error."""
        with pytest.raises(FieldNotReadyError):
            fractal_dimension_box_counting(None, 64, 64)

    def test_custom_ladder(self):
        """Options control the ladder."""
        options = BoxCountingOptions(min_box=4, max_box=32, steps=4)
        result = fractal_dimension_box_counting([(1.0, 1.0)], 64, 64, options)
        assert [s.scale for s in result.samples] == [32, 16, 8, 4]
        assert all(s.count == 1 for s in result.samples)
        assert result.D == pytest.approx(0.0, abs=1e-9)

    def test_deterministic(self):
        """Repeated calls give identical results."""
        points = generate_noise_curve(128, 64)
        first = fractal_dimension_box_counting(points, 128, 64)
        second = fractal_dimension_box_counting(points, 128, 64)
        assert first == second


class TestDifferentialBoxCounting:
    """Test differential box counting over gray rasters."""

    def test_half_split(self):
        """Black and white halves need eight boxes at s=8 and one per cell at s=4."""
        values = np.zeros((8, 8), dtype=np.int64)
        values[:, 4:] = 255
        result = fractal_dimension_dbc(values, 8, 8, DBCOptions(min_box=4, steps=2))
        assert [(s.scale, s.count) for s in result.samples] == [(8, 8), (4, 4)]
        assert result.D == pytest.approx(-1.0)

    def test_flat_raster(self):
        """A constant raster has dimension two."""
        values = np.full((64, 64), 100, dtype=np.int64)
        result = fractal_dimension_dbc(values, 64, 64, DBCOptions(min_box=4, steps=5))
        assert [s.count for s in result.samples] == [1, 4, 16, 64, 256]
        assert result.D == pytest.approx(2.0)

    def test_callable_accessor(self):
        """A per-pixel callable gives the same counts as the array."""
        rng = np.random.default_rng(5)
        values = rng.integers(0, 256, size=(24, 32))
        options = DBCOptions(min_box=2, steps=4)
        from_array = fractal_dimension_dbc(values, 32, 24, options)
        from_callable = fractal_dimension_dbc(lambda x, y: values[y, x], 32, 24, options)
        assert from_array.samples == from_callable.samples

    def test_gray_raster_accessor(self):
        """A GrayRaster accessor is read through its value array."""
        rgb = np.zeros((16, 16, 3), dtype=np.uint8)
        rgb[::2, ::2] = 255
        raster = GrayRaster(rgb)
        result = fractal_dimension_dbc(raster, 16, 16, DBCOptions(min_box=2, steps=3))
        assert result.samples == fractal_dimension_dbc(raster.values, 16, 16, DBCOptions(min_box=2, steps=3)).samples

    def test_noise_raster(self):
        """White noise fills about s boxes per cell, so N(s) falls like 1/s."""
        rng = np.random.default_rng(11)
        values = rng.integers(0, 256, size=(128, 128))
        result = fractal_dimension_dbc(values, 128, 128)
        assert result.D == pytest.approx(1.0, abs=0.1)
        assert result.R2 > 0.99

    def test_missing_accessor(self):
        """DBC without a raster is an error."""
        with pytest.raises(FieldNotReadyError):
            fractal_dimension_dbc(None, 8, 8)

    def test_invalid_dimensions(self):
        """Raster dimensions must be positive."""
        with pytest.raises(InvalidInputError):
            fractal_dimension_dbc(np.zeros((4, 4)), 0, 4)


class TestSamplesFrame:
    """Test tabulation of samples."""

    def test_columns(self):
        """The frame carries the regression axes."""
        result = fractal_dimension_box_counting(generate_filled_square(32), 32, 32)
        df = samples_frame(result.samples)
        assert list(df.columns) == ["scale", "count", "log_inv_scale", "log_count"]
        assert len(df) == len(result.samples)
        np.testing.assert_allclose(df["log_inv_scale"], -np.log(df["scale"]))


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
