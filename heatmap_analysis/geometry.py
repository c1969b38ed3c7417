r"""Segment intersection predicates.

Obstacle loss depends only on whether the sight line between a sample point
and an access point crosses an obstacle segment. The predicate uses the sign
of the orientation determinant

\[
\operatorname{orient}(a, b, c) = (b_x - a_x)(c_y - a_y) - (b_y - a_y)(c_x - a_x)
\]

with a small tolerance so that touching and collinear-overlapping segments
count as intersecting and shared endpoints do not flicker between runs.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


__all__ = [
    "Point",
    "ORIENT_TOL",
    "BOUNDS_TOL",
    "orient",
    "on_segment",
    "segments_intersect",
    "segments_intersect_many",
]

Point = Tuple[float, float]

ORIENT_TOL = 1e-8
BOUNDS_TOL = 1e-6


def orient(a: Point, b: Point, c: Point) -> float:
    """Twice the signed area of triangle ``abc``."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def on_segment(a: Point, b: Point, c: Point) -> bool:
    """Return True if ``c`` lies in the bounding box of segment ``ab``.

    Only meaningful once ``c`` is known to be collinear with ``ab``.
    """
    return (
        min(a[0], b[0]) - BOUNDS_TOL <= c[0] <= max(a[0], b[0]) + BOUNDS_TOL
        and min(a[1], b[1]) - BOUNDS_TOL <= c[1] <= max(a[1], b[1]) + BOUNDS_TOL
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """Test whether segments ``p1p2`` and ``q1q2`` cross or touch.

    Args:
        p1: First endpoint of segment P.
        p2: Second endpoint of segment P.
        q1: First endpoint of segment Q.
        q2: Second endpoint of segment Q.

    Returns:
        True for a proper crossing, an endpoint touching the other segment,
        or a collinear overlap.
    """
    o1 = orient(p1, p2, q1)
    o2 = orient(p1, p2, q2)
    o3 = orient(q1, q2, p1)
    o4 = orient(q1, q2, p2)
    if o1 * o2 < 0 and o3 * o4 < 0:
        return True
    if abs(o1) < ORIENT_TOL and on_segment(p1, p2, q1):
        return True
    if abs(o2) < ORIENT_TOL and on_segment(p1, p2, q2):
        return True
    if abs(o3) < ORIENT_TOL and on_segment(q1, q2, p1):
        return True
    if abs(o4) < ORIENT_TOL and on_segment(q1, q2, p2):
        return True
    return False


def _within(ax, ay, bx, by, cx, cy) -> np.ndarray:
    return (
        (np.minimum(ax, bx) - BOUNDS_TOL <= cx)
        & (cx <= np.maximum(ax, bx) + BOUNDS_TOL)
        & (np.minimum(ay, by) - BOUNDS_TOL <= cy)
        & (cy <= np.maximum(ay, by) + BOUNDS_TOL)
    )


def segments_intersect_many(
    px: np.ndarray,
    py: np.ndarray,
    p2: Point,
    q1: Point,
    q2: Point,
) -> np.ndarray:
    r"""Vectorised :func:`segments_intersect` for many first endpoints.

    Evaluates the predicate for every segment \((p_k, p_2)\) against the
    fixed segment \(q_1 q_2\). The arithmetic is carried out in the same
    order as the scalar version, so the two agree element-wise on float64
    input.

    Args:
        px: Array of x coordinates of the varying endpoints.
        py: Array of y coordinates, same shape as ``px``.
        p2: Shared second endpoint (typically an access point).
        q1: First endpoint of the obstacle segment.
        q2: Second endpoint of the obstacle segment.

    Returns:
        Boolean array with the shape of ``px``.
    """
    px = np.asarray(px, dtype=float)
    py = np.asarray(py, dtype=float)
    bx, by = float(p2[0]), float(p2[1])
    q1x, q1y = float(q1[0]), float(q1[1])
    q2x, q2y = float(q2[0]), float(q2[1])

    o1 = (bx - px) * (q1y - py) - (by - py) * (q1x - px)
    o2 = (bx - px) * (q2y - py) - (by - py) * (q2x - px)
    o3 = (q2x - q1x) * (py - q1y) - (q2y - q1y) * (px - q1x)
    o4 = (q2x - q1x) * (by - q1y) - (q2y - q1y) * (bx - q1x)

    hit = (o1 * o2 < 0) & (o3 * o4 < 0)
    hit |= (np.abs(o1) < ORIENT_TOL) & _within(px, py, bx, by, q1x, q1y)
    hit |= (np.abs(o2) < ORIENT_TOL) & _within(px, py, bx, by, q2x, q2y)
    hit |= (np.abs(o3) < ORIENT_TOL) & _within(q1x, q1y, q2x, q2y, px, py)
    if abs(o4) < ORIENT_TOL and on_segment(q1, q2, p2):
        hit |= True
    return hit
