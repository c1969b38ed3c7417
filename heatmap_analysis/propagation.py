r"""Signal-field engine.

For a sample point \(P\) and access point \(A\) the received level is

\[
L_A(P) = P_0 - 10\,n_{band} \log_{10}\bigl(\max(d_{min}, |P - A| / s)\bigr)
         - \sum_{k \in \mathcal{O}(P, A)} a_{k,band},
\]

where \(s\) is the pixels-per-meter scale and \(\mathcal{O}(P, A)\) is the
set of obstacle segments crossed by the sight line \(PA\). Access points are
combined in the power domain,
\(L(P) = 10 \log_{10} \max(\varepsilon, \sum_A 10^{L_A(P)/10})\).

:func:`compute_level` evaluates a single point and :func:`build_field`
evaluates every integer cell of the scene grid with numpy.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional, Tuple

import numpy as np

from .config import PropagationModel
from .errors import InvalidInputError
from .geometry import segments_intersect, segments_intersect_many
from .scene import AccessPoint, Scene


__all__ = [
    "ScalarField",
    "obstacle_loss",
    "access_point_level",
    "compute_level",
    "iter_field_chunks",
    "build_field",
    "cached_build_field",
]

logger = logging.getLogger(__name__)

DEFAULT_MODEL = PropagationModel()


@dataclass(frozen=True, eq=False)
class ScalarField:
    """Dense grid of signal levels in dBm.

    ``values`` is a read-only flat array in row-major order, so the level of
    cell ``(x, y)`` is ``values[y * width + x]``.
    """

    width: int
    height: int
    values: np.ndarray

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64).reshape(-1)
        if values.size != self.width * self.height:
            raise InvalidInputError(
                f"Field has {values.size} values, expected "
                f"{self.width}x{self.height}={self.width * self.height}"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def grid(self) -> np.ndarray:
        """Read-only ``(height, width)`` view of the values."""
        return self.values.reshape(self.height, self.width)

    def at(self, x: int, y: int) -> float:
        return float(self.values[y * self.width + x])

    @property
    def range(self) -> Tuple[float, float]:
        return float(self.values.min()), float(self.values.max())


def _canonical_obstacles(scene: Scene):
    # A fixed summation order makes the field independent of list order.
    return sorted(scene.obstacles, key=lambda o: (o.a, o.b, o.type, o.att24, o.att5))


def obstacle_loss(scene: Scene, point: Tuple[float, float], ap: AccessPoint) -> float:
    """Sum the attenuation of every obstacle crossed by the line ``point``-``ap``."""
    loss = 0.0
    for obstacle in _canonical_obstacles(scene):
        if segments_intersect(point, ap.position, obstacle.a, obstacle.b):
            loss += obstacle.attenuation(ap.band)
    return loss


def access_point_level(
    scene: Scene,
    ap: AccessPoint,
    x: float,
    y: float,
    model: PropagationModel = DEFAULT_MODEL,
) -> float:
    """Level contributed by a single access point at ``(x, y)`` in dBm."""
    scale = scene.require_scale()
    d_px = math.hypot(x - ap.x, y - ap.y)
    d_m = max(model.min_distance_m, d_px / scale)
    n = model.exponent(ap.band)
    return ap.p0 - 10 * n * math.log10(d_m) - obstacle_loss(scene, (x, y), ap)


def compute_level(
    scene: Scene, x: float, y: float, model: PropagationModel = DEFAULT_MODEL
) -> float:
    """Combined level of all access points at an arbitrary point.

    Args:
        scene: Scene with access points, obstacles and scale.
        x: Sample x coordinate in grid units.
        y: Sample y coordinate in grid units.
        model: Path-loss policy.

    Returns:
        Level in dBm, or ``model.min_level`` when the scene has no access
        points.

    Raises:
        InvalidInputError: If access points exist but no scale is set.
    """
    if not scene.access_points:
        return model.min_level
    powers = sorted(
        10 ** (access_point_level(scene, ap, x, y, model) / 10)
        for ap in scene.access_points
    )
    total_mw = 0.0
    for power in powers:
        total_mw += power
    return 10 * math.log10(max(model.power_floor_mw, total_mw))


def _levels_for_rows(
    scene: Scene, y0: int, y1: int, model: PropagationModel
) -> np.ndarray:
    scale = scene.require_scale()
    ys, xs = np.mgrid[y0:y1, 0 : scene.width]
    xs = xs.astype(np.float64)
    ys = ys.astype(np.float64)
    obstacles = _canonical_obstacles(scene)
    powers = []
    for ap in scene.access_points:
        d_m = np.maximum(model.min_distance_m, np.hypot(xs - ap.x, ys - ap.y) / scale)
        loss = np.zeros(xs.shape, dtype=np.float64)
        for obstacle in obstacles:
            crossed = segments_intersect_many(xs, ys, ap.position, obstacle.a, obstacle.b)
            loss += np.where(crossed, obstacle.attenuation(ap.band), 0.0)
        level = ap.p0 - 10 * model.exponent(ap.band) * np.log10(d_m) - loss
        powers.append(10 ** (level / 10))
    total_mw = np.zeros(xs.shape, dtype=np.float64)
    for power in np.sort(np.stack(powers), axis=0):
        total_mw += power
    return 10 * np.log10(np.maximum(model.power_floor_mw, total_mw))


def iter_field_chunks(
    scene: Scene,
    model: PropagationModel = DEFAULT_MODEL,
    chunk_rows: int = 64,
) -> Iterator[Tuple[int, np.ndarray]]:
    """Yield ``(y0, levels)`` blocks of consecutive rows of the field.

    Lets a host interleave other work between row ranges; concatenating the
    blocks gives exactly the grid of :func:`build_field`.
    """
    if chunk_rows < 1:
        raise InvalidInputError("chunk_rows must be positive")
    if scene.access_points:
        scene.require_scale()
    for y0 in range(0, scene.height, chunk_rows):
        y1 = min(y0 + chunk_rows, scene.height)
        if not scene.access_points:
            yield y0, np.full((y1 - y0, scene.width), model.min_level)
        else:
            yield y0, _levels_for_rows(scene, y0, y1, model)


def build_field(
    scene: Scene,
    model: Optional[PropagationModel] = None,
    chunk_rows: int = 64,
) -> ScalarField:
    """Evaluate every integer cell ``[0, width) x [0, height)`` of the scene.

    Cost is ``O(width * height * n_aps * n_obstacles)``; use
    :func:`cached_build_field` to avoid rebuilding an unchanged scene.

    Args:
        scene: Scene to evaluate.
        model: Path-loss policy, defaults to :class:`PropagationModel`.
        chunk_rows: Rows evaluated per vectorised block.

    Returns:
        A :class:`ScalarField` with ``width * height`` levels.
    """
    model = model or DEFAULT_MODEL
    start = time.perf_counter()
    grid = np.empty((scene.height, scene.width), dtype=np.float64)
    for y0, block in iter_field_chunks(scene, model, chunk_rows):
        grid[y0 : y0 + block.shape[0]] = block
    logger.info(
        "Built %dx%d field from %d access points and %d obstacles in %.2fs",
        scene.width,
        scene.height,
        len(scene.access_points),
        len(scene.obstacles),
        time.perf_counter() - start,
    )
    return ScalarField(scene.width, scene.height, grid)


@lru_cache(maxsize=8)
def _cached_build(scene: Scene, model: PropagationModel) -> ScalarField:
    return build_field(scene, model)


def cached_build_field(
    scene: Scene, model: Optional[PropagationModel] = None
) -> ScalarField:
    """Memoised :func:`build_field` keyed by the scene and model values."""
    return _cached_build(scene, model or DEFAULT_MODEL)
