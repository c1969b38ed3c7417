r"""Box-counting fractal dimension estimators.

Two estimators share a log-spaced ladder of integer box sizes and the
log-log regression of :mod:`heatmap_analysis.regression`:

* :func:`fractal_dimension_box_counting` counts the distinct grid cells of
  size \(s\) occupied by a planar point set (for example contour points).
* :func:`fractal_dimension_dbc` applies differential box counting to a
  grayscale raster, treating intensity as a third dimension: a cell whose
  intensities span \(\Delta I\) needs
  \(\max(1, \lceil(\Delta I + 1)/\Delta z\rceil)\) boxes of height
  \(\Delta z = \lceil Z/s \rceil\).

In both cases the reported dimension is the slope of
\(\log N(s)\) against \(\log(1/s)\).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import BoxCountingOptions, DBCOptions
from .errors import FieldNotReadyError, InvalidInputError
from .raster import GrayRaster
from .regression import Sample, log_log_regression


__all__ = [
    "FractalResult",
    "scale_ladder",
    "count_occupied_boxes",
    "fractal_dimension_box_counting",
    "fractal_dimension_dbc",
    "samples_frame",
]

logger = logging.getLogger(__name__)

PixelAccessor = Callable[[int, int], float]

POINT_MIN_BOX = 1
DBC_MIN_BOX = 2


@dataclass(frozen=True)
class FractalResult:
    """Outcome of one estimator call.

    Attributes:
        D: Estimated fractal dimension (regression slope), NaN without data.
        R2: Coefficient of determination of the log-log fit.
        samples: Measurements ``(scale, count)`` from coarse to fine.
        intercept: Intercept of the log-log fit.
    """

    D: float
    R2: float
    samples: List[Sample] = field(default_factory=list)
    intercept: float = float("nan")


def scale_ladder(
    min_box: float, max_box: float, steps: int, floor: int = POINT_MIN_BOX
) -> List[int]:
    r"""Integer box sizes geometrically spaced from ``max_box`` to ``min_box``.

    The \(i\)-th candidate is
    \(\operatorname{round}(\exp(\log s_{max} + (\log s_{min} - \log s_{max})
    \, i/(m-1)))\) for \(i = 0, \dots, m-1\). Candidates below ``floor`` and
    repeats are dropped, preserving the descending order.

    Args:
        min_box: Smallest box size.
        max_box: Largest box size.
        steps: Number of candidates ``m`` (at least 2).
        floor: Smallest valid box size for the estimator.

    Returns:
        Descending list of distinct integer box sizes.

    Raises:
        InvalidInputError: If ``steps < 2`` or a bound is not positive.
    """
    if steps < 2:
        raise InvalidInputError("steps must be at least 2")
    if min_box <= 0 or max_box <= 0:
        raise InvalidInputError("Box sizes must be positive")
    log_min, log_max = math.log(min_box), math.log(max_box)
    scales: List[int] = []
    for i in range(steps):
        s = math.floor(math.exp(log_max + (log_min - log_max) * (i / (steps - 1))) + 0.5)
        if s >= floor and s not in scales:
            scales.append(s)
    return scales


def count_occupied_boxes(points: np.ndarray, width: int, height: int, scale: int) -> int:
    """Number of distinct ``scale x scale`` cells containing at least one point.

    Coordinates are clamped into ``[0, width-1] x [0, height-1]`` first.
    """
    gx = math.ceil(width / scale)
    xs = np.clip(points[:, 0], 0, width - 1)
    ys = np.clip(points[:, 1], 0, height - 1)
    ix = np.floor(xs / scale).astype(np.int64)
    iy = np.floor(ys / scale).astype(np.int64)
    return int(np.unique(iy * gx + ix).size)


def _check_grid(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Grid dimensions must be positive, got {width}x{height}")


def _result(samples: List[Sample]) -> FractalResult:
    fit = log_log_regression(samples)
    return FractalResult(D=fit.slope, R2=fit.r2, samples=samples, intercept=fit.intercept)


def fractal_dimension_box_counting(
    points,
    width: int,
    height: int,
    options: Optional[BoxCountingOptions] = None,
) -> FractalResult:
    """Box-counting dimension of a planar point set.

    Args:
        points: Sequence or array of ``(x, y)`` points in field coordinates.
        width: Extent of the bounding rectangle.
        height: Extent of the bounding rectangle.
        options: Ladder options; defaults to ``steps=8, min_box=2`` and
            ``max_box=min(width, height)``.

    Returns:
        :class:`FractalResult`. An empty point set gives ``D=nan``, ``R2=0``
        and no samples.

    Raises:
        FieldNotReadyError: If ``points`` is ``None``.
    """
    options = options or BoxCountingOptions()
    _check_grid(width, height)
    if points is None:
        raise FieldNotReadyError("No contour points were provided")
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if pts.shape[0] == 0:
        return FractalResult(D=float("nan"), R2=0.0, samples=[])

    max_box = options.max_box if options.max_box is not None else min(width, height)
    samples: List[Sample] = []
    for s in scale_ladder(options.min_box, max_box, options.steps, POINT_MIN_BOX):
        n = count_occupied_boxes(pts, width, height, s)
        logger.debug("box counting: s=%d N=%d", s, n)
        if n > 0:
            samples.append(Sample(s, n))
    result = _result(samples)
    logger.info(
        "Box-counting over %d points: D=%.4f R2=%.4f", len(pts), result.D, result.R2
    )
    return result


def _gray_values(
    get_pixel: Union[PixelAccessor, GrayRaster, np.ndarray], width: int, height: int
) -> np.ndarray:
    if get_pixel is None:
        raise FieldNotReadyError("No grayscale raster accessor was provided")
    if isinstance(get_pixel, GrayRaster):
        source = get_pixel.values
    elif isinstance(get_pixel, np.ndarray):
        source = get_pixel
    else:
        values = np.empty((height, width), dtype=np.int64)
        for y in range(height):
            for x in range(width):
                values[y, x] = int(get_pixel(x, y))
        return values
    values = np.zeros((height, width), dtype=np.int64)
    h = min(height, source.shape[0])
    w = min(width, source.shape[1])
    values[:h, :w] = source[:h, :w].astype(np.int64)
    return values


def _dbc_count(values: np.ndarray, scale: int, z_levels: int) -> int:
    height, width = values.shape
    rows = np.arange(0, height, scale)
    cols = np.arange(0, width, scale)
    block_max = np.maximum.reduceat(np.maximum.reduceat(values, rows, axis=0), cols, axis=1)
    block_min = np.minimum.reduceat(np.minimum.reduceat(values, rows, axis=0), cols, axis=1)
    dz = -(-z_levels // scale)
    boxes = -(-(block_max - block_min + 1) // dz)
    return int(np.maximum(1, boxes).sum())


def fractal_dimension_dbc(
    get_pixel: Union[PixelAccessor, GrayRaster, np.ndarray],
    width: int,
    height: int,
    options: Optional[DBCOptions] = None,
) -> FractalResult:
    """Differential box-counting dimension of a grayscale raster.

    Args:
        get_pixel: Accessor ``(x, y) -> gray`` returning 0 outside the
            raster, a :class:`~heatmap_analysis.raster.GrayRaster`, or a
            ``(height, width)`` array of gray values.
        width: Raster width.
        height: Raster height.
        options: Ladder options; defaults to ``steps=6, min_box=4,
            z_levels=256``.

    Returns:
        :class:`FractalResult` with one sample per box size.

    Raises:
        FieldNotReadyError: If no accessor is given.
    """
    options = options or DBCOptions()
    _check_grid(width, height)
    values = _gray_values(get_pixel, width, height)
    max_box = options.max_box if options.max_box is not None else min(width, height)
    samples: List[Sample] = []
    for s in scale_ladder(options.min_box, max_box, options.steps, DBC_MIN_BOX):
        n = _dbc_count(values, s, options.z_levels)
        logger.debug("DBC: s=%d N=%d", s, n)
        samples.append(Sample(s, n))
    result = _result(samples)
    logger.info("DBC over %dx%d raster: D=%.4f R2=%.4f", width, height, result.D, result.R2)
    return result


def samples_frame(samples: Sequence[Sample]) -> pd.DataFrame:
    """Tabulate samples with the log-transformed regression axes.

    Columns: ``scale``, ``count``, ``log_inv_scale`` = log(1/s) and
    ``log_count`` = log N.
    """
    df = pd.DataFrame(
        {
            "scale": [s.scale for s in samples],
            "count": [s.count for s in samples],
        },
        dtype=np.float64,
    )
    df["log_inv_scale"] = np.log(1.0 / df["scale"].to_numpy())
    df["log_count"] = np.log(df["count"].to_numpy())
    return df
