r"""Calibration constants and option structs.

The propagation exponents, colour thresholds and contour levels below are
calibration policy for indoor planning, not derived physical laws. They are
collected here so that callers can override them explicitly by constructing
new option values instead of mutating module state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidInputError


__all__ = [
    "BANDS",
    "CONTOUR_LEVELS",
    "DEFAULT_SCALE_PX_PER_METER",
    "RSSI_MIN",
    "RSSI_MAX",
    "P_GRAY",
    "P_YELLOW",
    "P_GREEN",
    "PropagationModel",
    "ContourOptions",
    "BoxCountingOptions",
    "DBCOptions",
    "setup_logging",
]

BANDS = ("2.4", "5")

# Iso-levels every 5 dBm.
CONTOUR_LEVELS: Tuple[float, ...] = tuple(float(v) for v in range(-20, -81, -5))

# Scale applied when an access point is placed before a ruler was drawn.
DEFAULT_SCALE_PX_PER_METER = 100.0

# Colour calibration points (dBm).
RSSI_MIN = -80.0
RSSI_MAX = -50.0
P_GRAY = -67.0
P_YELLOW = -60.0
P_GREEN = -30.0

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass(frozen=True)
class PropagationModel:
    r"""Log-distance path-loss policy.

    A single access point contributes
    \(L_i = P_0 - 10 n \log_{10}(d_m) - A_{obs}\) where the exponent \(n\)
    depends on the band. Contributions are summed in milliwatts and converted
    back to dBm.

    Attributes:
        exponent_24: Path-loss exponent for 2.4 GHz.
        exponent_5: Path-loss exponent for 5 GHz (decays faster).
        min_distance_m: Distance clamp that keeps ``log10`` finite. The
            default is the 1 m reference distance of ``p0``, so a single
            access point never contributes more than ``p0``.
        power_floor_mw: Lower bound on the summed power before ``log10``.
        min_level: Level reported when the scene has no access points.
    """

    exponent_24: float = 2.2
    exponent_5: float = 2.5
    min_distance_m: float = 1.0
    power_floor_mw: float = 1e-15
    min_level: float = RSSI_MIN

    def __post_init__(self):
        if self.min_distance_m <= 0:
            raise InvalidInputError("min_distance_m must be positive")
        if self.power_floor_mw <= 0:
            raise InvalidInputError("power_floor_mw must be positive")

    def exponent(self, band: str) -> float:
        """Return the path-loss exponent for ``band``."""
        if band == "2.4":
            return self.exponent_24
        if band == "5":
            return self.exponent_5
        raise InvalidInputError(f"Unknown band {band!r}; expected one of {BANDS}")


@dataclass(frozen=True)
class ContourOptions:
    """Marching-squares sampling options.

    Attributes:
        levels: Iso-levels in dBm, extracted in the given order.
        step: Cell size in grid units.
        max_points: Upper bound used when the contours feed box counting.
    """

    levels: Tuple[float, ...] = CONTOUR_LEVELS
    step: int = 2
    max_points: int = 12000

    def __post_init__(self):
        if int(self.step) != self.step or self.step < 1:
            raise InvalidInputError("step must be a positive integer")
        if self.max_points < 1:
            raise InvalidInputError("max_points must be positive")


@dataclass(frozen=True)
class BoxCountingOptions:
    """Options for box counting over a point set."""

    min_box: float = 2
    max_box: Optional[float] = None
    steps: int = 8


@dataclass(frozen=True)
class DBCOptions:
    """Options for differential box counting over a grayscale raster."""

    min_box: float = 4
    max_box: Optional[float] = None
    steps: int = 6
    z_levels: int = 256

    def __post_init__(self):
        if self.z_levels < 1:
            raise InvalidInputError("z_levels must be positive")


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts.

    The library itself never installs handlers; example scripts call this once.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt="%H:%M:%S")
