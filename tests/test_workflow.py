"""
Integration Tests for the Analysis Workflow
===========================================

Runs the full pipeline on a small scene and checks the report figures.

Run with: python -m pytest tests/test_workflow.py -v
"""

import math

import numpy as np
import pytest

from heatmap_analysis import (
    ContourOptions,
    FieldNotReadyError,
    contour_points,
    build_field,
    contour_dimension,
    heatmap_dimension,
    plot_loglog,
    run_analysis,
)
from heatmap_analysis.boxcount import FractalResult
from heatmap_analysis.workflow import summary_table


class TestRunAnalysis:
    """Test the end-to-end pipeline."""

    def test_outputs(self, small_scene):
        """The result carries the field, raster, contours and both estimates."""
        result = run_analysis(small_scene)
        assert result["field"].values.shape == (40 * 30,)
        assert result["rgb"].shape == (30, 40, 3)
        assert result["segments"].ndim == 3
        assert len(result["points"]) > 0
        assert math.isfinite(result["contour_fd"].D)
        assert math.isfinite(result["dbc_fd"].D)
        assert result["figures"] is None

    def test_points_from_segments(self, small_scene):
        """The point set is thinned from the returned segments."""
        result = run_analysis(small_scene)
        field = result["field"]
        options = ContourOptions()
        expected = contour_points(
            field, field.width, field.height, options.levels, options.step, options.max_points
        )
        np.testing.assert_array_equal(result["points"], expected)

    def test_summary_table(self, small_scene):
        """The table has one row per estimator."""
        table = run_analysis(small_scene)["table"]
        assert list(table["method"]) == ["contour_boxcount", "heatmap_dbc"]
        assert {"D", "R2", "intercept", "levels"} <= set(table.columns)

    def test_matches_individual_steps(self, small_scene):
        """The pipeline agrees with the standalone estimators."""
        result = run_analysis(small_scene)
        field = build_field(small_scene)
        assert contour_dimension(field).samples == result["contour_fd"].samples
        assert heatmap_dimension(field).samples == result["dbc_fd"].samples

    def test_reproducible(self, small_scene):
        """Two runs on the same scene give identical estimates."""
        first = run_analysis(small_scene)
        second = run_analysis(small_scene)
        assert first["contour_fd"] == second["contour_fd"]
        assert first["dbc_fd"] == second["dbc_fd"]
        np.testing.assert_array_equal(first["segments"], second["segments"])

    def test_custom_levels(self, small_scene):
        """Fewer contour levels give fewer segments."""
        full = run_analysis(small_scene)
        single = run_analysis(small_scene, contour=ContourOptions(levels=(-60.0,)))
        assert 0 < len(single["segments"]) < len(full["segments"])

    def test_figures_written(self, small_scene, tmp_path):
        """Report figures are written when an output directory is given."""
        figures = run_analysis(small_scene, output_dir=tmp_path / "report")["figures"]
        assert set(figures) == {"heatmap", "loglog1", "loglog2"}
        for path in figures.values():
            assert path.exists()
            assert path.stat().st_size > 0


class TestMissingField:
    """Test estimator calls before a field exists."""

    def test_contour_dimension(self):
        """Contour dimension needs a field."""
        with pytest.raises(FieldNotReadyError):
            contour_dimension(None)

    def test_heatmap_dimension(self):
        """Heatmap dimension needs a field."""
        with pytest.raises(FieldNotReadyError):
            heatmap_dimension(None)


class TestPlots:
    """Test standalone plotting helpers."""

    def test_loglog_without_samples(self, tmp_path):
        """An empty result still produces a figure."""
        path = tmp_path / "empty.png"
        plot_loglog(FractalResult(D=float("nan"), R2=0.0), save_path=path)
        assert path.exists()

    def test_summary_table_nan(self):
        """NaN estimates pass through the table."""
        empty = FractalResult(D=float("nan"), R2=0.0)
        table = summary_table(empty, empty)
        assert table["levels"].tolist() == [0, 0]
        assert table["D"].isna().all()


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
