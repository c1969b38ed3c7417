r"""Validation helpers for the fractal estimators.

The generators below produce point sets and rasters with known box-counting
dimension so that the estimators can be checked against theory: a straight
line has \(D = 1\), a filled square \(D = 2\), a Gaussian random-walk
profile \(D \approx 1.5\) and a constant raster has DBC dimension 2.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .boxcount import fractal_dimension_box_counting, fractal_dimension_dbc
from .config import BoxCountingOptions, DBCOptions


__all__ = [
    "generate_straight_line",
    "generate_filled_square",
    "generate_noise_curve",
    "generate_flat_raster",
    "run_sanity_checks",
]


def generate_straight_line(length: int = 512, y: float = 100.0) -> np.ndarray:
    """Points on a horizontal line, one per grid unit."""
    xs = np.arange(length, dtype=np.float64)
    return np.column_stack([xs, np.full_like(xs, y)])


def generate_filled_square(size: int = 256) -> np.ndarray:
    """Every integer point of a ``size x size`` square."""
    ys, xs = np.mgrid[0:size, 0:size]
    return np.column_stack([xs.ravel(), ys.ravel()]).astype(np.float64)


def generate_noise_curve(length: int = 512, noise: float = 256.0, seed: int = 1234) -> np.ndarray:
    r"""Densely sampled Gaussian random-walk profile.

    Such profiles resemble fractional Brownian motion with \(H \approx 0.5\),
    so the expected dimension is \(2 - H \approx 1.5\).
    """
    rng = np.random.default_rng(seed)
    ys = rng.standard_normal(length).cumsum()
    ys = (ys - ys.min()) / (ys.max() - ys.min() + 1e-9) * (noise - 1)
    xs = np.arange(length, dtype=np.float64)
    # Fill vertical gaps so the profile is connected at unit resolution.
    dense_x, dense_y = [], []
    for (x0, y0), (x1, y1) in zip(zip(xs[:-1], ys[:-1]), zip(xs[1:], ys[1:])):
        n = int(max(abs(y1 - y0), 1))
        dense_x.append(np.linspace(x0, x1, n, endpoint=False))
        dense_y.append(np.linspace(y0, y1, n, endpoint=False))
    return np.column_stack([np.concatenate(dense_x), np.concatenate(dense_y)])


def generate_flat_raster(width: int = 256, height: int = 256, value: int = 128) -> np.ndarray:
    """Constant grayscale raster."""
    return np.full((height, width), value, dtype=np.int64)


def run_sanity_checks(size: int = 256) -> pd.DataFrame:
    """Run both estimators on synthetic inputs with known dimension.

    Returns:
        DataFrame with the case name, expected and estimated ``D`` and ``R2``.
    """
    box = BoxCountingOptions(min_box=2, steps=8)
    cases = [
        ("straight_line", 1.0, generate_straight_line(size, size / 2), size, size),
        ("filled_square", 2.0, generate_filled_square(size), size, size),
        ("noise_curve", 1.5, generate_noise_curve(2 * size, size), 2 * size, size),
    ]
    rows = []
    for name, expected, points, width, height in cases:
        result = fractal_dimension_box_counting(points, width, height, box)
        rows.append({"case": name, "expected_D": expected, "D": result.D, "R2": result.R2})

    flat = fractal_dimension_dbc(generate_flat_raster(size, size), size, size, DBCOptions())
    rows.append({"case": "flat_raster_dbc", "expected_D": 2.0, "D": flat.D, "R2": flat.R2})
    return pd.DataFrame(rows)
