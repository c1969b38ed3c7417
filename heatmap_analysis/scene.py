r"""Scene description: access points, obstacle segments and materials.

A :class:`Scene` is an immutable, hashable value. Every analysis takes the
scene it works on as an argument, so there is no shared "current" set of
access points or obstacles; rebuilding after an edit means constructing a new
scene.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .config import BANDS, DEFAULT_SCALE_PX_PER_METER
from .errors import InvalidInputError
from .geometry import Point


__all__ = [
    "Material",
    "MATERIALS",
    "AccessPoint",
    "ObstacleSegment",
    "Scene",
    "derive_attenuation",
    "repair_obstacle",
    "make_obstacle",
]

logger = logging.getLogger(__name__)

LEGACY_DEFAULT_ATTENUATION = 8.0


@dataclass(frozen=True)
class Material:
    """Default per-band attenuation of a wall material (dB)."""

    name: str
    att24: float
    att5: float

    @property
    def ratio(self) -> float:
        """Ratio of 5 GHz to 2.4 GHz attenuation."""
        return self.att5 / self.att24


MATERIALS: Dict[str, Material] = {
    "drywall": Material("Drywall", 3.0, 4.0),
    "glass": Material("Glass", 4.0, 6.0),
    "wood": Material("Wood", 5.0, 7.0),
    "brick": Material("Brick / lightweight concrete", 8.0, 10.0),
    "concrete": Material("Reinforced concrete", 12.0, 15.0),
    "metal": Material("Sheet metal / steel door", 20.0, 24.0),
    "human": Material("Human body (average)", 3.0, 4.0),
}


def _round1(value: float) -> float:
    # Half away from zero to one decimal, matching toFixed(1) on saved data.
    scaled = abs(value) * 10.0
    return math.copysign(math.floor(scaled + 0.5) / 10.0, value)


def derive_attenuation(material_type: str, att24: float) -> Tuple[float, float]:
    r"""Derive both band attenuations from a known 2.4 GHz value.

    The 5 GHz value is \(a_{5} = a_{2.4} \cdot r\) where \(r\) is the
    default ratio of the material. Types missing from :data:`MATERIALS` use
    \(r = 1\); no ratio is inferred for them.

    Args:
        material_type: Key into :data:`MATERIALS`.
        att24: Attenuation at 2.4 GHz in dB.

    Returns:
        Tuple ``(att24, att5)`` rounded to one decimal.
    """
    material = MATERIALS.get(material_type)
    ratio = material.ratio if material is not None else 1.0
    return _round1(att24), _round1(att24 * ratio)


def repair_obstacle(record: Mapping[str, object]) -> Dict[str, object]:
    """Fill in per-band attenuation for a legacy obstacle record.

    Records that already carry ``att24`` or ``att5`` are returned unchanged
    (as a copy). Older records stored one ``att`` value that is kept as the
    2.4 GHz attenuation, with the 5 GHz value scaled by the
    material ratio; when it is absent as well, 8 dB is assumed.

    Args:
        record: Obstacle mapping with ``type`` and attenuation keys.

    Returns:
        New mapping that has both ``att24`` and ``att5``.
    """
    repaired = dict(record)
    att24 = repaired.get("att24")
    att5 = repaired.get("att5")
    if att24 is None and att5 is None:
        legacy = repaired.get("att")
        base24 = float(legacy) if legacy is not None else LEGACY_DEFAULT_ATTENUATION
        material = MATERIALS.get(str(repaired.get("type", "")))
        ratio = material.ratio if material is not None else 1.0
        # The saved value is kept as is; only the derived band is rounded.
        repaired["att24"] = base24
        repaired["att5"] = _round1(base24 * ratio)
        logger.warning(
            "Repaired legacy obstacle %r: att=%s -> att24=%s, att5=%s",
            repaired.get("type"),
            legacy,
            repaired["att24"],
            repaired["att5"],
        )
    elif att24 is None or att5 is None:
        # Only one band known: derive the other from the material ratio.
        material = MATERIALS.get(str(repaired.get("type", "")))
        ratio = material.ratio if material is not None else 1.0
        if att24 is None:
            repaired["att24"] = _round1(float(att5) / ratio)
        else:
            repaired["att5"] = _round1(float(att24) * ratio)
        logger.warning(
            "Derived missing band attenuation for obstacle %r", repaired.get("type")
        )
    return repaired


@dataclass(frozen=True)
class AccessPoint:
    """A placed access point.

    Attributes:
        x: Position in grid units.
        y: Position in grid units.
        p0: Reference power at 1 m in dBm.
        band: ``"2.4"`` or ``"5"``.
        label: Display label.
        preset: Optional preset name, display only.
    """

    x: float
    y: float
    p0: float = -40.0
    band: str = "5"
    label: str = "AP"
    preset: Optional[str] = None

    def __post_init__(self):
        if self.band not in BANDS:
            raise InvalidInputError(
                f"Unknown band {self.band!r}; expected one of {BANDS}"
            )

    @property
    def position(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class ObstacleSegment:
    """A wall segment with fixed per-band attenuation (dB)."""

    a: Point
    b: Point
    type: str
    att24: float
    att5: float

    def __post_init__(self):
        object.__setattr__(self, "a", (float(self.a[0]), float(self.a[1])))
        object.__setattr__(self, "b", (float(self.b[0]), float(self.b[1])))
        if self.a == self.b:
            raise InvalidInputError(f"Obstacle segment {self.a} has zero length")

    def attenuation(self, band: str) -> float:
        """Return the attenuation that applies to ``band``."""
        if band == "2.4":
            return self.att24
        if band == "5":
            return self.att5
        raise InvalidInputError(f"Unknown band {band!r}; expected one of {BANDS}")


def make_obstacle(
    a: Point, b: Point, material_type: str, att24: Optional[float] = None
) -> ObstacleSegment:
    """Create an obstacle from a material and an optional 2.4 GHz value.

    When ``att24`` is omitted the material default is used (8 dB for unknown
    types) and the 5 GHz value follows from the material ratio.
    """
    if att24 is None:
        material = MATERIALS.get(material_type)
        att24 = material.att24 if material is not None else LEGACY_DEFAULT_ATTENUATION
    att24, att5 = derive_attenuation(material_type, att24)
    return ObstacleSegment(a=a, b=b, type=material_type, att24=att24, att5=att5)


@dataclass(frozen=True)
class Scene:
    """Inputs of one field computation.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        access_points: Placed access points.
        obstacles: Obstacle segments; order does not affect results.
        scale_px_per_meter: Grid units per meter, ``None`` when unset.
    """

    width: int
    height: int
    access_points: Tuple[AccessPoint, ...] = field(default_factory=tuple)
    obstacles: Tuple[ObstacleSegment, ...] = field(default_factory=tuple)
    scale_px_per_meter: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "access_points", tuple(self.access_points))
        object.__setattr__(self, "obstacles", tuple(self.obstacles))
        if int(self.width) != self.width or int(self.height) != self.height:
            raise InvalidInputError("Grid dimensions must be integers")
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.scale_px_per_meter is not None and not self.scale_px_per_meter > 0:
            raise InvalidInputError("scale_px_per_meter must be positive")

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    def require_scale(self) -> float:
        """Return the scale, raising when access points exist without one."""
        if self.scale_px_per_meter is None:
            raise InvalidInputError(
                "scale_px_per_meter is not set; call with_default_scale() to "
                f"apply {DEFAULT_SCALE_PX_PER_METER:g} px/m"
            )
        return self.scale_px_per_meter

    def with_default_scale(self) -> "Scene":
        """Return this scene with the documented default scale if none is set."""
        if self.scale_px_per_meter is not None:
            return self
        logger.info("No scale set, using %g px/m", DEFAULT_SCALE_PX_PER_METER)
        return replace(self, scale_px_per_meter=DEFAULT_SCALE_PX_PER_METER)

    def add_access_points(self, access_points: Iterable[AccessPoint]) -> "Scene":
        return replace(self, access_points=self.access_points + tuple(access_points))

    def add_obstacles(self, obstacles: Iterable[ObstacleSegment]) -> "Scene":
        return replace(self, obstacles=self.obstacles + tuple(obstacles))
