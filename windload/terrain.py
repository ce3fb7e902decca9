"""Automatic terrain category detection from OpenStreetMap features.

A single Overpass query returns buildings and urban landuse within
500 m of the site, plus water and coastline within 1000 m. The features
are reduced to a handful of signals (obstruction density, urban and
water coverage, distance to water) and an ordered rule list picks the
terrain category following the AS/NZS 1170.2 Clause 4.2.1 descriptions.

Rule order (first match wins)
-----------------------------
1. TC1   - near open water with few obstructions
2. TC4   - dense city/industrial cores, never within 400 m of water
3. TC3   - >= 10 obstructions per hectare
4. TC2.5 - between 2 and 10 obstructions per hectare
5. TC2   - everything else
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

import requests

from windload.settings import Settings, get_settings
from windload.tables import TerrainCategory

logger = logging.getLogger(__name__)

BUFFER_RADIUS_M = 500.0
WATER_RADIUS_M = 1000.0
BUFFER_AREA_M2 = math.pi * BUFFER_RADIUS_M**2
BUFFER_AREA_HA = BUFFER_AREA_M2 / 10_000.0
METRES_PER_DEG_LAT = 111_320.0

# Returned when the feature service cannot be reached or answers garbage.
FALLBACK_TERRAIN = TerrainCategory.TC2_5

_URBAN_LANDUSE = re.compile(r"^(residential|industrial|commercial)$", re.IGNORECASE)


# ── Planar geometry helpers ──────────────────────────────────────────
def _metres_per_deg_lon(lat_deg: float) -> float:
    return METRES_PER_DEG_LAT * math.cos(math.radians(lat_deg))


def planar_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Equirectangular distance; adequate over a kilometre or so."""
    dx = (lon2 - lon1) * _metres_per_deg_lon((lat1 + lat2) / 2.0)
    dy = (lat2 - lat1) * METRES_PER_DEG_LAT
    return math.hypot(dx, dy)


def _vertices(element: dict[str, Any]) -> list[tuple[float, float]]:
    geometry = element.get("geometry")
    if not isinstance(geometry, list):
        return []
    points = []
    for node in geometry:
        if isinstance(node, dict) and "lat" in node and "lon" in node:
            points.append((float(node["lat"]), float(node["lon"])))
    return points


def ring_area_m2(ring: Sequence[tuple[float, float]]) -> float:
    """Shoelace area of a (lat, lon) ring on a local tangent plane."""
    if len(ring) < 3:
        return 0.0
    m_per_lon = _metres_per_deg_lon(ring[0][0])
    pts = [(lon * m_per_lon, lat * METRES_PER_DEG_LAT) for lat, lon in ring]
    total = 0.0
    for i, (x0, y0) in enumerate(pts):
        x1, y1 = pts[(i + 1) % len(pts)]
        total += x0 * y1 - x1 * y0
    return abs(total) / 2.0


def closed_area_m2(elements: Iterable[dict[str, Any]]) -> float:
    """Sum the areas of closed rings; open ways (e.g. bare coastline) bound nothing."""
    total = 0.0
    for element in elements:
        ring = _vertices(element)
        if len(ring) < 3 or ring[0] != ring[-1]:
            continue
        total += ring_area_m2(ring)
    return total


def min_vertex_distance_m(lat: float, lon: float, elements: Iterable[dict[str, Any]]) -> float:
    best = math.inf
    for element in elements:
        for v_lat, v_lon in _vertices(element):
            best = min(best, planar_distance_m(lat, lon, v_lat, v_lon))
    return best


# ── Signals ──────────────────────────────────────────────────────────
@dataclass(frozen=True)
class TerrainSignals:
    """Roughness indicators derived from a feature snapshot."""

    buildings_per_ha: float
    urban_fraction: float = 0.0
    water_fraction: float = 0.0
    coast_distance_m: float = math.inf
    building_count: int = 0


def _tags(element: dict[str, Any]) -> dict[str, Any]:
    tags = element.get("tags")
    return tags if isinstance(tags, dict) else {}


def _is_urban(element: dict[str, Any]) -> bool:
    landuse = _tags(element).get("landuse")
    return isinstance(landuse, str) and bool(_URBAN_LANDUSE.match(landuse))


def _is_water(element: dict[str, Any]) -> bool:
    tags = _tags(element)
    return tags.get("natural") == "water" or bool(tags.get("water"))


def _is_coastline(element: dict[str, Any]) -> bool:
    return _tags(element).get("natural") == "coastline"


def _is_building(element: dict[str, Any]) -> bool:
    return bool(_tags(element).get("building"))


def derive_signals(lat: float, lon: float, elements: Sequence[dict[str, Any]]) -> TerrainSignals:
    """Reduce Overpass elements around ``(lat, lon)`` to classification signals."""
    urban = [el for el in elements if _is_urban(el)]
    water = [el for el in elements if _is_water(el)]
    coastline = [el for el in elements if _is_coastline(el)]
    building_count = sum(1 for el in elements if _is_building(el))

    return TerrainSignals(
        buildings_per_ha=building_count / BUFFER_AREA_HA,
        urban_fraction=min(closed_area_m2(urban) / BUFFER_AREA_M2, 1.0),
        water_fraction=min(closed_area_m2(water) / BUFFER_AREA_M2, 1.0),
        coast_distance_m=min(
            min_vertex_distance_m(lat, lon, coastline),
            min_vertex_distance_m(lat, lon, water),
        ),
        building_count=building_count,
    )


# ── Rules ────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class TerrainRule:
    name: str
    category: TerrainCategory
    applies: Callable[[TerrainSignals], bool]


def _open_water(sig: TerrainSignals) -> bool:
    near_coast = (
        sig.coast_distance_m <= 250
        and sig.buildings_per_ha <= 5
        and sig.urban_fraction <= 0.15
    )
    water_dominant = (
        sig.water_fraction >= 0.30
        and sig.buildings_per_ha <= 5
        and sig.urban_fraction <= 0.10
    )
    return near_coast or water_dominant


def _city_core(sig: TerrainSignals) -> bool:
    if sig.coast_distance_m <= 400:
        return False
    return sig.buildings_per_ha >= 25 or (
        sig.urban_fraction >= 0.65 and sig.buildings_per_ha >= 15
    )


TERRAIN_RULES: tuple[TerrainRule, ...] = (
    TerrainRule("open water / foreshore", TerrainCategory.TC1, _open_water),
    TerrainRule("city centre / industrial core", TerrainCategory.TC4, _city_core),
    TerrainRule("suburban", TerrainCategory.TC3, lambda sig: sig.buildings_per_ha >= 10),
    TerrainRule(
        "scattered obstructions",
        TerrainCategory.TC2_5,
        lambda sig: 2 < sig.buildings_per_ha < 10,
    ),
    TerrainRule("open terrain", TerrainCategory.TC2, lambda sig: True),
)


def matching_rule(signals: TerrainSignals) -> TerrainRule:
    """First rule in :data:`TERRAIN_RULES` that applies."""
    for rule in TERRAIN_RULES:
        if rule.applies(signals):
            return rule
    return TERRAIN_RULES[-1]  # pragma: no cover


def classify_signals(signals: TerrainSignals) -> TerrainCategory:
    return matching_rule(signals).category


def classify_snapshot(lat: float, lon: float, elements: Sequence[dict[str, Any]]) -> TerrainCategory:
    """Classify a feature snapshot. Identical snapshots give identical categories."""
    signals = derive_signals(lat, lon, elements)
    rule = matching_rule(signals)
    logger.debug(
        "Terrain at (%.5f, %.5f): %s via '%s' (%.1f bldg/ha, urban %.2f, water %.2f, coast %.0f m)",
        lat,
        lon,
        rule.category.value,
        rule.name,
        signals.buildings_per_ha,
        signals.urban_fraction,
        signals.water_fraction,
        signals.coast_distance_m,
    )
    return rule.category


# ── Overpass ─────────────────────────────────────────────────────────
def build_overpass_query(lat: float, lon: float) -> str:
    r, w = int(BUFFER_RADIUS_M), int(WATER_RADIUS_M)
    return f"""
    [out:json][timeout:35];
    (
      way(around:{r},{lat},{lon})["landuse"~"residential|industrial|commercial"];
      relation(around:{r},{lat},{lon})["landuse"~"residential|industrial|commercial"];
      way(around:{w},{lat},{lon})["natural"="water"];
      relation(around:{w},{lat},{lon})["natural"="water"];
      way(around:{w},{lat},{lon})["water"];
      relation(around:{w},{lat},{lon})["water"];
      way(around:{w},{lat},{lon})["natural"="coastline"];
      way(around:{r},{lat},{lon})["building"];
      relation(around:{r},{lat},{lon})["building"];
    );
    out body geom;
    """.strip()


def fetch_features(lat: float, lon: float, settings: Settings) -> list[dict[str, Any]]:
    """POST the query to Overpass and return its elements.

    Raises
    ------
    requests.RequestException
        On timeouts, connection errors and non-2xx responses.
    ValueError
        If the response body is not an Overpass JSON document.
    """
    response = requests.post(
        settings.overpass_url,
        data={"data": build_overpass_query(lat, lon)},
        headers={"User-Agent": settings.user_agent},
        timeout=settings.overpass_timeout_s,
    )
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError("Overpass payload is not a JSON object")
    elements = payload.get("elements", [])
    if not isinstance(elements, list):
        raise ValueError("Overpass 'elements' is not a list")
    return [el for el in elements if isinstance(el, dict)]


def detect_terrain_category(
    lat: float,
    lon: float,
    settings: Optional[Settings] = None,
) -> TerrainCategory:
    """Terrain category at a point; falls back to TC2.5 if the lookup fails."""
    settings = settings or get_settings()
    try:
        elements = fetch_features(lat, lon, settings)
        return classify_snapshot(lat, lon, elements)
    except (requests.RequestException, ValueError, TypeError) as exc:
        # TypeError/ValueError also cover vertices with non-numeric coordinates
        logger.warning(
            "Terrain lookup failed at (%.5f, %.5f), using %s: %s",
            lat,
            lon,
            FALLBACK_TERRAIN.value,
            exc,
        )
        return FALLBACK_TERRAIN


__all__ = [
    "BUFFER_AREA_HA",
    "BUFFER_AREA_M2",
    "FALLBACK_TERRAIN",
    "TERRAIN_RULES",
    "TerrainRule",
    "TerrainSignals",
    "build_overpass_query",
    "classify_signals",
    "classify_snapshot",
    "derive_signals",
    "detect_terrain_category",
    "fetch_features",
    "matching_rule",
]
