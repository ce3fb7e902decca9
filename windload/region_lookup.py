"""Point-in-polygon lookup of the wind region for a site.

The boundaries come from a GeoJSON FeatureCollection whose features carry
the region label in a ``region`` property (e.g. ``"A4"``, ``"B1"``). The
file is read once per path and kept for the life of the process.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry

from windload.settings import Settings, get_settings

logger = logging.getLogger(__name__)

UNKNOWN_REGION = "Unknown"
_POLYGON_TYPES = {"Polygon", "MultiPolygon"}


@lru_cache(maxsize=4)
def load_regions(path: Path) -> tuple[tuple[str, BaseGeometry], ...]:
    """Read ``(region label, geometry)`` pairs from a GeoJSON file."""
    collection = json.loads(Path(path).read_text(encoding="utf-8"))
    regions = []
    for feature in collection.get("features", []):
        geometry = feature.get("geometry") or {}
        if geometry.get("type") not in _POLYGON_TYPES:
            continue
        label = (feature.get("properties") or {}).get("region") or UNKNOWN_REGION
        regions.append((str(label), shape(geometry)))
    logger.info("Loaded %d wind region polygons from %s", len(regions), path)
    return tuple(regions)


def find_region(lat: float, lon: float, regions: tuple[tuple[str, BaseGeometry], ...]) -> str:
    """Label of the first region whose polygon covers the point (boundary included)."""
    point = Point(lon, lat)
    for label, geometry in regions:
        if geometry.covers(point):
            return label
    return UNKNOWN_REGION


def lookup_region(lat: float, lon: float, settings: Optional[Settings] = None) -> str:
    """Region label at ``(lat, lon)`` or ``"Unknown"``.

    ``"Unknown"`` is also returned when no boundary file is configured or
    the configured file cannot be read.
    """
    settings = settings or get_settings()
    if settings.regions_geojson is None:
        logger.info("No WINDLOAD_REGIONS_GEOJSON configured; region is unknown")
        return UNKNOWN_REGION

    try:
        regions = load_regions(settings.regions_geojson)
    except (OSError, ValueError) as exc:
        logger.warning("Cannot read wind regions from %s: %s", settings.regions_geojson, exc)
        return UNKNOWN_REGION

    label = find_region(lat, lon, regions)
    if label == UNKNOWN_REGION:
        logger.info("No wind region contains (%.5f, %.5f)", lat, lon)
    return label


__all__ = ["UNKNOWN_REGION", "find_region", "load_regions", "lookup_region"]
