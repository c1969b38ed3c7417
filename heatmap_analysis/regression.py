r"""Log-log least-squares regression for box-counting samples.

Box counts follow \(N(s) \propto s^{-D}\), so with \(X = \log(1/s)\) and
\(Y = \log N(s)\) the dimension \(D\) is the slope of the straight line
\(Y = D X + b\).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np
from scipy import stats

from .errors import InvalidInputError


__all__ = [
    "Sample",
    "RegressionResult",
    "linear_regression",
    "log_log_regression",
    "fit_with_ci",
]

# Added to the slope denominator so zero X-variance does not divide by zero.
DENOM_EPS = 1e-12


@dataclass(frozen=True)
class Sample:
    """One box-counting measurement ``N(scale) = count``."""

    scale: int
    count: int


@dataclass(frozen=True)
class RegressionResult:
    r"""Least-squares line \(Y = \text{slope}\,X + \text{intercept}\)."""

    slope: float
    intercept: float
    r2: float


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    r"""Ordinary least squares with coefficient of determination.

    The slope is computed from the normal equations

    \[
    \hat\beta = \frac{n\sum x_i y_i - \sum x_i \sum y_i}
                     {n \sum x_i^2 - (\sum x_i)^2 + 10^{-12}},
    \]

    and \(R^2 = 1 - SS_{res}/SS_{tot}\), taken as 0 for constant ``y``.

    Args:
        x: Abscissae.
        y: Ordinates, same length as ``x``.

    Returns:
        :class:`RegressionResult`; ``(nan, nan, 0)`` for empty input.

    Raises:
        InvalidInputError: If ``x`` and ``y`` differ in length.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise InvalidInputError("x and y must have the same length")
    n = x.size
    if n == 0:
        return RegressionResult(float("nan"), float("nan"), 0.0)
    sx, sy = x.sum(), y.sum()
    sxx, sxy = (x * x).sum(), (x * y).sum()
    slope = (n * sxy - sx * sy) / (n * sxx - sx * sx + DENOM_EPS)
    intercept = (sy - slope * sx) / n
    ss_tot = np.sum((y - sy / n) ** 2)
    ss_res = np.sum((y - (slope * x + intercept)) ** 2)
    r2 = 1 - ss_res / ss_tot if ss_tot else 0.0
    return RegressionResult(float(slope), float(intercept), float(r2))


def _log_axes(samples: Sequence[Sample]):
    scales = np.array([s.scale for s in samples], dtype=np.float64)
    counts = np.array([s.count for s in samples], dtype=np.float64)
    return np.log(1.0 / scales), np.log(counts)


def log_log_regression(samples: Sequence[Sample]) -> RegressionResult:
    """Fit ``log N`` against ``log(1/s)``; the slope is the fractal dimension."""
    x, y = _log_axes(samples)
    return linear_regression(x, y)


def fit_with_ci(samples: Sequence[Sample], confidence: float = 0.95) -> Dict[str, float]:
    r"""Fit the log-log relationship and a confidence interval for the slope.

    The residual variance \(\sigma^2 = SS_{res}/(n-2)\) gives the standard
    error of the slope, and the interval is
    \(\hat D \pm t_{(1+c)/2,\,n-2}\,\mathrm{se}(\hat D)\). With fewer than
    three samples the interval is undefined and reported as NaN.

    Args:
        samples: Box-counting samples.
        confidence: Two-sided confidence level.

    Returns:
        Dictionary with ``D``, ``intercept``, ``R2``, ``CI_low``, ``CI_high``
        and the ``residuals`` array.
    """
    if not 0 < confidence < 1:
        raise InvalidInputError("confidence must lie in (0, 1)")
    x, y = _log_axes(samples)
    fit = linear_regression(x, y)
    residuals = y - (fit.slope * x + fit.intercept)
    ci_low = ci_high = float("nan")
    dof = x.size - 2
    sxx = np.sum((x - x.mean()) ** 2) if x.size else 0.0
    if dof > 0 and sxx > 0:
        sigma2 = np.sum(residuals**2) / dof
        se_slope = np.sqrt(sigma2 / sxx)
        tcrit = stats.t.ppf(0.5 + confidence / 2, dof)
        ci_low = float(fit.slope - tcrit * se_slope)
        ci_high = float(fit.slope + tcrit * se_slope)
    return {
        "D": fit.slope,
        "intercept": fit.intercept,
        "R2": fit.r2,
        "CI_low": ci_low,
        "CI_high": ci_high,
        "residuals": residuals,
    }
