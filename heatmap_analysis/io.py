"""Input helpers: project files and obstacle layers.

Both loaders repair legacy obstacle records that carry a single ``att``
value instead of per-band attenuation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Mapping, Union

import geopandas as gpd
from shapely.geometry import LineString, MultiLineString
from shapely.geometry.base import BaseGeometry

from .errors import InvalidInputError
from .scene import MATERIALS, AccessPoint, ObstacleSegment, Scene, repair_obstacle


__all__ = ["scene_from_dict", "load_project", "load_obstacles"]

logger = logging.getLogger(__name__)

DEFAULT_WORLD_SIZE = (1280, 800)


def _point(value: object, key: str):
    if isinstance(value, Mapping):
        return float(value["x"]), float(value["y"])
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return float(value[0]), float(value[1])
    raise InvalidInputError(f"Cannot read point {key!r} from {value!r}")


def _access_point(record: Mapping[str, object]) -> AccessPoint:
    preset = record.get("preset")
    if isinstance(preset, Mapping):
        preset = preset.get("presetName")
    return AccessPoint(
        x=float(record["x"]),
        y=float(record["y"]),
        p0=float(record.get("p0", -40.0)),
        band=str(record.get("band") or "5"),
        label=str(record.get("label") or "AP"),
        preset=preset,
    )


def _obstacle(record: Mapping[str, object]) -> ObstacleSegment:
    repaired = repair_obstacle(record)
    return ObstacleSegment(
        a=_point(repaired["a"], "a"),
        b=_point(repaired["b"], "b"),
        type=str(repaired.get("type", "")),
        att24=float(repaired["att24"]),
        att5=float(repaired["att5"]),
    )


def scene_from_dict(data: Mapping[str, object]) -> Scene:
    """Build a :class:`Scene` from a project mapping.

    Expected keys are ``aps``, ``segments``, ``scale``, ``worldW`` and
    ``worldH``; missing lists are treated as empty and a missing world size
    falls back to 1280x800.

    Args:
        data: Decoded project JSON.

    Returns:
        The scene, with every obstacle carrying both band attenuations.

    Raises:
        InvalidInputError: For malformed points, bands or dimensions.
    """
    try:
        access_points = [_access_point(r) for r in data.get("aps") or []]
        obstacles = [_obstacle(r) for r in data.get("segments") or []]
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Malformed project data: {exc}") from exc
    scale = data.get("scale") or None
    return Scene(
        width=int(data.get("worldW") or DEFAULT_WORLD_SIZE[0]),
        height=int(data.get("worldH") or DEFAULT_WORLD_SIZE[1]),
        access_points=tuple(access_points),
        obstacles=tuple(obstacles),
        scale_px_per_meter=float(scale) if scale is not None else None,
    )


def load_project(filepath: Union[str, Path]) -> Scene:
    """Load a saved planning project from JSON.

    Args:
        filepath: Path to the project file.

    Returns:
        The decoded :class:`Scene`.

    Raises:
        InvalidInputError: If the file is not valid project JSON.
    """
    path = Path(filepath)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"Invalid project JSON in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"Project file {path} does not contain an object")
    scene = scene_from_dict(data)
    logger.info(
        "Loaded %s: %d access points, %d obstacles, %dx%d",
        path.name,
        len(scene.access_points),
        len(scene.obstacles),
        scene.width,
        scene.height,
    )
    return scene


def _line_parts(geometry: BaseGeometry) -> List[LineString]:
    if geometry is None or geometry.is_empty:
        return []
    if isinstance(geometry, LineString):
        return [geometry]
    if isinstance(geometry, MultiLineString):
        return list(geometry.geoms)
    if hasattr(geometry, "boundary"):
        return _line_parts(geometry.boundary)
    return []


def load_obstacles(filepath: Union[str, Path], default_type: str = "brick") -> List[ObstacleSegment]:
    """Read obstacle segments from a vector file.

    Every consecutive vertex pair of each line feature (or polygon boundary)
    becomes one segment. Feature properties ``type``, ``att24``, ``att5``
    and legacy ``att`` are honoured. Features without any attenuation take
    the defaults of their material; partial or legacy values are repaired.

    Args:
        filepath: Any file GeoPandas can read (GeoJSON, Shapefile, ...).
        default_type: Material used for features without a ``type``.

    Returns:
        List of obstacle segments in file order.

    Raises:
        InvalidInputError: If the file contains no line geometry.
    """
    gdf = gpd.read_file(filepath)
    obstacles: List[ObstacleSegment] = []
    for _, row in gdf.iterrows():
        record = {
            key: row[key]
            for key in ("type", "att24", "att5", "att")
            if key in row.index and row[key] is not None and row[key] == row[key]
        }
        record.setdefault("type", default_type)
        material = MATERIALS.get(str(record["type"]))
        if material is not None and not record.keys() & {"att24", "att5", "att"}:
            record["att24"], record["att5"] = material.att24, material.att5
        for line in _line_parts(row.geometry):
            coords = list(line.coords)
            for a, b in zip(coords[:-1], coords[1:]):
                if tuple(a[:2]) == tuple(b[:2]):
                    continue
                obstacles.append(_obstacle({**record, "a": a[:2], "b": b[:2]}))
    if not obstacles:
        raise InvalidInputError("The provided file contains no obstacle lines")
    logger.info("Loaded %d obstacle segments from %s", len(obstacles), filepath)
    return obstacles
