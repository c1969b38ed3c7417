"""Exception hierarchy for the signal-field analysis package."""

from __future__ import annotations


__all__ = ["HeatmapAnalysisError", "InvalidInputError", "FieldNotReadyError"]


class HeatmapAnalysisError(Exception):
    """Base class for all errors raised by :mod:`heatmap_analysis`."""


class InvalidInputError(HeatmapAnalysisError, ValueError):
    """Degenerate or out-of-range input rejected at the package boundary.

    Raised for zero-length obstacle segments, a missing or non-positive
    pixels-per-meter scale, empty grid dimensions, unknown bands and invalid
    estimator parameters.
    """


class FieldNotReadyError(HeatmapAnalysisError, RuntimeError):
    """An analysis step was requested before its scalar field or raster exists."""
