"""Colour mapping of signal levels and grayscale raster access."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .config import P_GRAY, P_GREEN, P_YELLOW, RSSI_MIN
from .errors import FieldNotReadyError, InvalidInputError


__all__ = [
    "GRAY_BASE",
    "GRAY_LIGHT",
    "YELLOW",
    "GREEN",
    "level_to_color",
    "field_to_rgb",
    "legend_gradient",
    "GrayRaster",
    "make_gray_getter",
]

RGB = Tuple[int, int, int]

GRAY_BASE: RGB = (128, 128, 128)
GRAY_LIGHT: RGB = (220, 220, 220)
YELLOW: RGB = (255, 255, 0)
GREEN: RGB = (0, 255, 0)

LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _round_half_up(values):
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def _mix(c1: RGB, c2: RGB, t: float) -> RGB:
    return tuple(int(_round_half_up(a + (b - a) * t)) for a, b in zip(c1, c2))


def level_to_color(level: float) -> RGB:
    """Map a level in dBm to an RGB triple.

    Three linear segments: light gray to gray below ``P_GRAY`` (saturating at
    ``RSSI_MIN``), gray to yellow up to ``P_YELLOW``, yellow to green up to
    ``P_GREEN``, and solid green above.

    Args:
        level: Signal level in dBm.

    Returns:
        Integer ``(r, g, b)`` in ``0..255``.
    """
    if level <= P_GRAY:
        t = min(1.0, max(0.0, (P_GRAY - level) / (P_GRAY - RSSI_MIN)))
        return _mix(GRAY_BASE, GRAY_LIGHT, t)
    if level <= P_YELLOW:
        return _mix(GRAY_BASE, YELLOW, (level - P_GRAY) / (P_YELLOW - P_GRAY))
    if level <= P_GREEN:
        return _mix(YELLOW, GREEN, (level - P_YELLOW) / (P_GREEN - P_YELLOW))
    return GREEN


def _mix_array(c1: RGB, c2: RGB, t: np.ndarray) -> np.ndarray:
    c1 = np.asarray(c1, dtype=np.float64)
    c2 = np.asarray(c2, dtype=np.float64)
    return _round_half_up(c1 + (c2 - c1) * t[..., None])


def field_to_rgb(field) -> np.ndarray:
    """Colour every cell of a :class:`~heatmap_analysis.propagation.ScalarField`.

    Returns:
        ``uint8`` array of shape ``(height, width, 3)``.

    Raises:
        FieldNotReadyError: If ``field`` is ``None``.
    """
    if field is None:
        raise FieldNotReadyError("No scalar field has been built yet")
    levels = field.grid
    rgb = np.empty(levels.shape + (3,), dtype=np.float64)

    gray = levels <= P_GRAY
    yellow = ~gray & (levels <= P_YELLOW)
    green = ~gray & ~yellow & (levels <= P_GREEN)
    solid = ~gray & ~yellow & ~green

    t_gray = np.clip((P_GRAY - levels) / (P_GRAY - RSSI_MIN), 0.0, 1.0)
    t_yellow = (levels - P_GRAY) / (P_YELLOW - P_GRAY)
    t_green = (levels - P_YELLOW) / (P_GREEN - P_YELLOW)

    rgb[gray] = _mix_array(GRAY_BASE, GRAY_LIGHT, t_gray)[gray]
    rgb[yellow] = _mix_array(GRAY_BASE, YELLOW, t_yellow)[yellow]
    rgb[green] = _mix_array(YELLOW, GREEN, t_green)[green]
    rgb[solid] = GREEN
    return rgb.astype(np.uint8)


def legend_gradient(width: int = 256, usable: int = 240) -> np.ndarray:
    """Fixed legend strip from ``RSSI_MIN`` to full green.

    The first ``usable`` pixels are split across the three segments in
    proportion to their dBm span; the rest is solid green.

    Returns:
        ``uint8`` array of shape ``(width, 3)``.
    """
    spans = (P_GRAY - RSSI_MIN, P_YELLOW - P_GRAY, P_GREEN - P_YELLOW)
    per_db = usable / sum(spans)
    widths = [int(_round_half_up(span * per_db)) for span in spans]
    stops = ((GRAY_LIGHT, GRAY_BASE), (GRAY_BASE, YELLOW), (YELLOW, GREEN))
    strip = []
    for n_px, (c1, c2) in zip(widths, stops):
        for i in range(n_px):
            strip.append(_mix(c1, c2, i / (n_px or 1)))
    while len(strip) < width:
        strip.append(GREEN)
    return np.asarray(strip[:width], dtype=np.uint8)


class GrayRaster:
    """Pixel accessor over the luma of an RGB raster.

    Calling ``raster(x, y)`` returns the 0..255 gray value of that pixel, or
    0 outside the raster. ``values`` exposes the whole ``(height, width)``
    array so estimators can skip per-pixel calls.
    """

    def __init__(self, rgb: np.ndarray):
        rgb = np.asarray(rgb)
        if rgb.ndim != 3 or rgb.shape[2] < 3:
            raise InvalidInputError("Expected an RGB raster of shape (height, width, 3)")
        weights = np.asarray(LUMA_WEIGHTS)
        luma = _round_half_up(rgb[..., :3].astype(np.float64) @ weights)
        self.values = np.clip(luma, 0, 255).astype(np.int64)
        self.height, self.width = self.values.shape

    def __call__(self, x: int, y: int) -> int:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return 0
        return int(self.values[y, x])


def make_gray_getter(rgb) -> GrayRaster:
    """Build a grayscale pixel accessor for differential box counting."""
    if rgb is None:
        raise FieldNotReadyError("No heatmap raster has been rendered yet")
    return GrayRaster(rgb)
