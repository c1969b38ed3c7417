r"""Iso-level contour extraction with marching squares.

Each ``step x step`` cell of the field is sampled at its four corners
(top-left, top-right, bottom-right, bottom-left). A corner is "inside" when
its value is \(\ge L\), giving a 4-bit case code. The iso-line crosses every
edge whose corners disagree; crossings are placed by linear interpolation

\[
t = \frac{L - v_a}{v_b - v_a}, \qquad p = p_a + t\,(p_b - p_a).
\]

The saddle codes 5 and 10 always emit the same two diagonal segments; they
are not disambiguated, so contour topology (and the box-counting estimate
built on it) is reproducible.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

import numpy as np
from shapely.geometry import MultiLineString

from .errors import FieldNotReadyError, InvalidInputError


__all__ = [
    "extract_contours",
    "contour_points",
    "segment_points",
    "contours_to_geometry",
]

logger = logging.getLogger(__name__)

# Edge indices of the crossing points.
_T, _R, _B, _L = 0, 1, 2, 3

# Case code -> (start edge, end edge) of the first and second segment.
_FIRST = np.zeros((16, 2), dtype=np.intp)
_SECOND = np.zeros((16, 2), dtype=np.intp)
for _codes, _edges in (
    ((1, 14), (_L, _T)),
    ((2, 13), (_T, _R)),
    ((3, 12), (_L, _R)),
    ((4, 11), (_R, _B)),
    ((5,), (_L, _T)),
    ((6, 9), (_T, _B)),
    ((7, 8), (_L, _B)),
    ((10,), (_T, _R)),
):
    for _code in _codes:
        _FIRST[_code] = _edges
_SECOND[5] = (_R, _B)
_SECOND[10] = (_L, _B)


def _as_grid(field, width: int, height: int) -> np.ndarray:
    if field is None:
        raise FieldNotReadyError("No scalar field has been built yet")
    values = getattr(field, "values", field)
    values = np.asarray(values, dtype=np.float64)
    if values.size != width * height:
        raise InvalidInputError(
            f"Field has {values.size} values, expected {width}x{height}"
        )
    return values.reshape(height, width)


def _interp(xa, ya, xb, yb, va, vb, level):
    diff = vb - va
    t = (level - va) / np.where(diff == 0, 1e-9, diff)
    return np.stack([xa + (xb - xa) * t, ya + (yb - ya) * t], axis=-1)


def extract_contours(
    field,
    width: int,
    height: int,
    levels: Iterable[float],
    step: int = 2,
) -> np.ndarray:
    """Extract line segments approximating each iso-level.

    Args:
        field: :class:`~heatmap_analysis.propagation.ScalarField` or an
            array of ``width * height`` values in row-major order.
        width: Field width.
        height: Field height.
        levels: Iso-levels, processed in the given order.
        step: Cell size in grid units.

    Returns:
        Array of shape ``(n_segments, 2, 2)`` holding ``((x0, y0), (x1, y1))``
        in field coordinates, ordered by level, then row, then column.

    Raises:
        FieldNotReadyError: If ``field`` is ``None``.
        InvalidInputError: If ``step`` is not a positive integer or the field
            size does not match.
    """
    if int(step) != step or step < 1:
        raise InvalidInputError("step must be a positive integer")
    step = int(step)
    grid = _as_grid(field, width, height)
    nx = (width - 1) // step
    ny = (height - 1) // step
    empty = np.empty((0, 2, 2), dtype=np.float64)
    if nx <= 0 or ny <= 0:
        return empty

    ys0 = np.arange(ny) * step
    xs0 = np.arange(nx) * step
    v00 = grid[np.ix_(ys0, xs0)].ravel()
    v10 = grid[np.ix_(ys0, xs0 + step)].ravel()
    v11 = grid[np.ix_(ys0 + step, xs0 + step)].ravel()
    v01 = grid[np.ix_(ys0 + step, xs0)].ravel()
    x0, y0 = (a.astype(np.float64).ravel() for a in np.meshgrid(xs0, ys0))
    x1 = x0 + step
    y1 = y0 + step
    cells = np.arange(x0.size)

    chunks = []
    for level in levels:
        code = (
            (v00 >= level).astype(np.intp)
            | ((v10 >= level).astype(np.intp) << 1)
            | ((v11 >= level).astype(np.intp) << 2)
            | ((v01 >= level).astype(np.intp) << 3)
        )
        active = (code != 0) & (code != 15)
        if not active.any():
            continue
        edges = np.stack(
            [
                _interp(x0, y0, x1, y0, v00, v10, level),
                _interp(x1, y0, x1, y1, v10, v11, level),
                _interp(x0, y1, x1, y1, v01, v11, level),
                _interp(x0, y0, x0, y1, v00, v01, level),
            ]
        )
        first = np.stack(
            [edges[_FIRST[code, 0], cells], edges[_FIRST[code, 1], cells]], axis=1
        )
        second = np.stack(
            [edges[_SECOND[code, 0], cells], edges[_SECOND[code, 1], cells]], axis=1
        )
        segments = np.stack([first, second], axis=1)
        keep = np.stack([active, (code == 5) | (code == 10)], axis=1)
        chunks.append(segments[keep])

    if not chunks:
        return empty
    result = np.concatenate(chunks)
    logger.debug("Extracted %d contour segments (step=%d)", len(result), step)
    return result


def contour_points(
    field,
    width: int,
    height: int,
    levels: Iterable[float],
    step: int = 2,
    max_points: int = 12000,
) -> np.ndarray:
    """Contour endpoints as a point set for box counting.

    Segment endpoints are flattened in extraction order and thinned by a
    fixed stride ``max(1, n // max_points)``, so identical input always
    gives identical points.

    Returns:
        Array of shape ``(n_points, 2)``.
    """
    if max_points < 1:
        raise InvalidInputError("max_points must be positive")
    segments = extract_contours(field, width, height, levels, step)
    return segment_points(segments, max_points)


def segment_points(segments, max_points: int = 12000) -> np.ndarray:
    """Flatten already extracted segments into the thinned point set."""
    if max_points < 1:
        raise InvalidInputError("max_points must be positive")
    points = np.asarray(segments, dtype=np.float64).reshape(-1, 2)
    stride = max(1, len(points) // max_points)
    return points[::stride]


def contours_to_geometry(segments: Sequence) -> MultiLineString:
    """Wrap contour segments in a shapely ``MultiLineString``."""
    lines = [tuple(map(tuple, seg)) for seg in np.asarray(segments).reshape(-1, 2, 2)]
    return MultiLineString(lines)
