"""Static AS/NZS 1170.2 tables used by the wind load pipeline.

All tables are built once at import time and exposed as read-only
mappings so they can be shared freely between threads and requests.

References
----------
AS/NZS 1170.2:2021, *Structural design actions, Part 2: Wind actions*.
Tables 3.1, 3.2(A), 3.3, 4.1 and 6.1. AS/NZS 1170.0 Table F2 for the
annual probability of exceedance.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


# ── Enumerations ─────────────────────────────────────────────────────
class TerrainCategory(str, Enum):
    """Terrain categories in order of increasing ground roughness."""

    TC1 = "TC1"
    TC2 = "TC2"
    TC2_5 = "TC2.5"
    TC3 = "TC3"
    TC4 = "TC4"


class DesignLife(str, Enum):
    """Design working life of the structure."""

    TEMPORARY = "temporary"
    UNDER_6_MONTHS = "under-6-months"
    FIVE_YEARS = "5-years"
    TWENTY_FIVE_YEARS = "25-years"
    FIFTY_YEARS = "50-years"
    HUNDRED_YEARS = "100-years"

    @classmethod
    def _missing_(cls, value: object) -> Optional["DesignLife"]:
        if isinstance(value, str):
            return _DESIGN_LIFE_ALIASES.get(value.strip().lower())
        if isinstance(value, int):
            return _DESIGN_LIFE_ALIASES.get(str(value))
        return None


# Short codes used by the location form
_DESIGN_LIFE_ALIASES: dict[str, DesignLife] = {
    "temp": DesignLife.TEMPORARY,
    "lt6": DesignLife.UNDER_6_MONTHS,
    "5": DesignLife.FIVE_YEARS,
    "25": DesignLife.TWENTY_FIVE_YEARS,
    "50": DesignLife.FIFTY_YEARS,
    "100": DesignLife.HUNDRED_YEARS,
}


class CoreMaterial(str, Enum):
    """Structural archetype of the lateral load-resisting core."""

    STEEL_MRF = "steel_mrf"
    STEEL_EBR = "steel_ebr"
    CONCRETE_MRF = "concrete_mrf"
    TIMBER_OTHER = "timber_other"


REGIONS: tuple[str, ...] = ("A", "B1", "B2", "C", "D")

# ── Regional wind speed V_R in m/s (Table 3.1) ───────────────────────
RECURRENCES: tuple[str, ...] = (
    "V1", "V5", "V10", "V20", "V25", "V50", "V100", "V200",
    "V250", "V500", "V1000", "V2000", "V2500", "V5000", "V10000",
)

_NON_CYCLONIC_B = (26, 28, 33, 38, 39, 44, 48, 52, 53, 57, 60, 63, 64, 67, 69)

_WIND_SPEED_ROWS: dict[str, tuple[int, ...]] = {
    # Non-cyclonic
    "A": (30, 32, 34, 37, 37, 39, 41, 43, 43, 45, 46, 48, 48, 50, 51),
    "B1": _NON_CYCLONIC_B,
    "B2": _NON_CYCLONIC_B,
    # Cyclonic
    "C": (23, 33, 39, 45, 47, 52, 56, 61, 62, 66, 70, 73, 74, 78, 81),
    "D": (23, 35, 43, 51, 53, 60, 66, 72, 74, 80, 85, 90, 91, 95, 99),
}

WIND_SPEEDS: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        region: MappingProxyType(dict(zip(RECURRENCES, map(float, row))))
        for region, row in _WIND_SPEED_ROWS.items()
    }
)

# ── Annual probability of exceedance ─────────────────────────────────
#   design life -> {importance level: PoE}
ANNUAL_POE: Mapping[DesignLife, Mapping[int, str]] = MappingProxyType(
    {
        DesignLife.TEMPORARY: MappingProxyType({2: "1/100"}),
        DesignLife.UNDER_6_MONTHS: MappingProxyType(
            {1: "1/25", 2: "1/100", 3: "1/250", 4: "1/1000"}
        ),
        DesignLife.FIVE_YEARS: MappingProxyType(
            {1: "1/25", 2: "1/250", 3: "1/500", 4: "1/1000"}
        ),
        DesignLife.TWENTY_FIVE_YEARS: MappingProxyType(
            {1: "1/50", 2: "1/250", 3: "1/500", 4: "1/1000"}
        ),
        DesignLife.FIFTY_YEARS: MappingProxyType(
            {1: "1/100", 2: "1/500", 3: "1/1000", 4: "1/2500"}
        ),
        DesignLife.HUNDRED_YEARS: MappingProxyType(
            {1: "1/250", 2: "1/1000", 3: "1/2500", 4: "1/2500"}
        ),
    }
)

# Ordinary structures with a 50 year life are designed for V50.
_PINNED_POE: Mapping[tuple[DesignLife, int], str] = MappingProxyType(
    {(DesignLife.FIFTY_YEARS, 2): "1/50"}
)

POE_TO_RECURRENCE: Mapping[str, str] = MappingProxyType(
    {
        "1/25": "V25",
        "1/50": "V50",
        "1/100": "V100",
        "1/200": "V200",
        "1/250": "V250",
        "1/500": "V500",
        "1/1000": "V1000",
        "1/2000": "V2000",
        "1/2500": "V2500",
        "1/5000": "V5000",
        "1/10000": "V10000",
    }
)

# ── Climate change multiplier Mc (Table 3.3) ─────────────────────────
CLIMATE_CHANGE_MULTIPLIER: Mapping[str, float] = MappingProxyType(
    {
        "A": 1.0,
        "A0": 1.0,
        "A1": 1.0,
        "A2": 1.0,
        "A3": 1.0,
        "A4": 1.0,
        "A5": 1.0,
        "B1": 1.0,
        "B2": 1.05,
        "C": 1.05,
        "D": 1.05,
        "NZ": 1.0,
    }
)

# ── Wind direction multiplier Md (Table 3.2(A)) ──────────────────────
CARDINAL_DIRECTIONS: tuple[str, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

DIRECTION_MULTIPLIER_BY_DIRECTION: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        region: MappingProxyType(dict(zip(CARDINAL_DIRECTIONS, row)))
        for region, row in {
            "A": (0.90, 0.85, 0.85, 0.90, 0.90, 0.95, 1.00, 0.95),
            "B1": (0.75, 0.75, 0.85, 0.90, 0.95, 0.95, 0.95, 0.90),
            "B2": (0.90,) * 8,
            "C": (0.90,) * 8,
            "D": (0.90,) * 8,
        }.items()
    }
)

# Any-direction design uses the worst case of the directional values.
CONSERVATIVE_DIRECTION_MULTIPLIER: Mapping[str, float] = MappingProxyType(
    {
        region: max(by_dir.values())
        for region, by_dir in DIRECTION_MULTIPLIER_BY_DIRECTION.items()
    }
)

# ── Terrain/height multiplier Mz,cat (Table 4.1) ─────────────────────
#   All regions except A0; A0 is handled by ``A0_CONSTANT_ABOVE_100M``.
MZCAT_HEIGHTS: tuple[float, ...] = (3, 5, 10, 15, 20, 30, 40, 50, 75, 100, 150, 200)

MZCAT_TABLE: Mapping[TerrainCategory, tuple[float, ...]] = MappingProxyType(
    {
        TerrainCategory.TC1: (0.97, 1.01, 1.08, 1.12, 1.14, 1.18, 1.21, 1.23, 1.27, 1.31, 1.36, 1.39),
        TerrainCategory.TC2: (0.91, 0.91, 1.00, 1.05, 1.08, 1.12, 1.16, 1.18, 1.22, 1.24, 1.27, 1.29),
        TerrainCategory.TC2_5: (0.87, 0.87, 0.92, 0.97, 1.01, 1.06, 1.10, 1.13, 1.17, 1.20, 1.24, 1.27),
        TerrainCategory.TC3: (0.83, 0.83, 0.83, 0.89, 0.94, 1.00, 1.04, 1.07, 1.12, 1.16, 1.21, 1.24),
        TerrainCategory.TC4: (0.75, 0.75, 0.75, 0.75, 0.75, 0.80, 0.85, 0.90, 0.98, 1.03, 1.11, 1.16),
    }
)

A0_REGION_LABEL = "A0"
A0_TC2_LIMIT_M = 100.0
A0_CONSTANT_ABOVE_100M = 1.24

# ── Turbulence intensity Ih (Table 6.1) ──────────────────────────────
IH_HEIGHTS: tuple[float, ...] = (5, 10, 15, 20, 30, 40, 50, 75, 100, 150, 200)

IH_TABLE: Mapping[TerrainCategory, tuple[float, ...]] = MappingProxyType(
    {
        #                        <=5    10     15     20     30     40     50     75     100    150    200
        TerrainCategory.TC1: (0.128, 0.117, 0.112, 0.109, 0.104, 0.101, 0.099, 0.095, 0.092, 0.089, 0.087),
        TerrainCategory.TC2: (0.196, 0.183, 0.176, 0.171, 0.162, 0.156, 0.151, 0.140, 0.131, 0.117, 0.107),
        TerrainCategory.TC2_5: (0.234, 0.211, 0.201, 0.193, 0.183, 0.176, 0.170, 0.158, 0.149, 0.134, 0.123),
        TerrainCategory.TC3: (0.271, 0.239, 0.225, 0.215, 0.203, 0.195, 0.188, 0.176, 0.166, 0.150, 0.139),
        TerrainCategory.TC4: (0.342, 0.342, 0.342, 0.342, 0.305, 0.285, 0.270, 0.248, 0.233, 0.210, 0.196),
    }
)

DEFAULT_TERRAIN = TerrainCategory.TC2

# ── Core material: (Kt period coefficient, damping ratio) ────────────
CORE_MATERIAL_PROPERTIES: Mapping[CoreMaterial, tuple[float, float]] = MappingProxyType(
    {
        CoreMaterial.STEEL_MRF: (0.11, 0.02),
        CoreMaterial.STEEL_EBR: (0.06, 0.02),
        CoreMaterial.CONCRETE_MRF: (0.075, 0.03),
        CoreMaterial.TIMBER_OTHER: (0.05, 0.02),
    }
)
DEFAULT_DAMPING_RATIO = 0.02


# ── Normalisation helpers ────────────────────────────────────────────
_REGION_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "A": "A",
        "A0": "A",
        "A1": "A",
        "A2": "A",
        "A3": "A",
        "A4": "A",
        "A5": "A",
        "A(0TO5)": "A",
        "B1": "B1",
        "B2": "B2",
        "C": "C",
        "D": "D",
    }
)

_TERRAIN_ALIASES: Mapping[str, TerrainCategory] = MappingProxyType(
    {
        "TC1": TerrainCategory.TC1,
        "TERRAINCATEGORY1": TerrainCategory.TC1,
        "TC2": TerrainCategory.TC2,
        "TERRAINCATEGORY2": TerrainCategory.TC2,
        "TC2.5": TerrainCategory.TC2_5,
        "TC25": TerrainCategory.TC2_5,
        "TERRAINCATEGORY2.5": TerrainCategory.TC2_5,
        "TC3": TerrainCategory.TC3,
        "TERRAINCATEGORY3": TerrainCategory.TC3,
        "TC4": TerrainCategory.TC4,
        "TERRAINCATEGORY4": TerrainCategory.TC4,
    }
)


def _squash(raw: str) -> str:
    return "".join(raw.split()).upper()


def normalise_region(raw: Optional[str]) -> Optional[str]:
    """Map a free-form region label (e.g. ``"A4"``) to a canonical code.

    Returns ``None`` for anything unrecognised.
    """
    if not raw:
        return None
    return _REGION_ALIASES.get(_squash(raw))


def is_a0_region(raw: Optional[str]) -> bool:
    """True when the raw region label is the A0 sub-region."""
    return bool(raw) and raw.strip().upper() == A0_REGION_LABEL


def normalise_terrain(raw: object) -> Optional[TerrainCategory]:
    """Map free text such as ``"tc 2.5"`` or ``"Terrain Category 3"`` to a category."""
    if raw is None:
        return None
    if isinstance(raw, TerrainCategory):
        return raw
    return _TERRAIN_ALIASES.get(_squash(str(raw)))


# ── Lookups ──────────────────────────────────────────────────────────
def annual_poe(design_life: Optional[DesignLife], importance: Optional[int]) -> Optional[str]:
    """Annual probability of exceedance for a design life and importance level."""
    if design_life is None or importance is None:
        return None
    pinned = _PINNED_POE.get((design_life, importance))
    if pinned is not None:
        return pinned
    return ANNUAL_POE.get(design_life, {}).get(importance)


def poe_to_recurrence(poe: Optional[str]) -> Optional[str]:
    if not poe:
        return None
    return POE_TO_RECURRENCE.get(poe)


def regional_wind_speed(region: Optional[str], recurrence: Optional[str]) -> Optional[float]:
    """Regional wind speed V_R (m/s) for a canonical region and recurrence."""
    if not region or not recurrence:
        return None
    return WIND_SPEEDS.get(region, {}).get(recurrence)


def climate_change_multiplier(region: Optional[str]) -> Optional[float]:
    if not region:
        return None
    return CLIMATE_CHANGE_MULTIPLIER.get(region.strip().upper())


def conservative_direction_multiplier(region: Optional[str]) -> Optional[float]:
    if not region:
        return None
    return CONSERVATIVE_DIRECTION_MULTIPLIER.get(region.strip().upper())


def core_material_kt(core: Optional[CoreMaterial]) -> Optional[float]:
    """Period coefficient Kt, or ``None`` when the core material is unknown."""
    if core is None or core not in CORE_MATERIAL_PROPERTIES:
        return None
    return CORE_MATERIAL_PROPERTIES[core][0]


def damping_ratio(core: Optional[CoreMaterial]) -> float:
    if core is None or core not in CORE_MATERIAL_PROPERTIES:
        return DEFAULT_DAMPING_RATIO
    return CORE_MATERIAL_PROPERTIES[core][1]


__all__ = [
    "A0_CONSTANT_ABOVE_100M",
    "ANNUAL_POE",
    "CLIMATE_CHANGE_MULTIPLIER",
    "CONSERVATIVE_DIRECTION_MULTIPLIER",
    "CORE_MATERIAL_PROPERTIES",
    "DEFAULT_TERRAIN",
    "DIRECTION_MULTIPLIER_BY_DIRECTION",
    "IH_HEIGHTS",
    "IH_TABLE",
    "MZCAT_HEIGHTS",
    "MZCAT_TABLE",
    "POE_TO_RECURRENCE",
    "RECURRENCES",
    "REGIONS",
    "WIND_SPEEDS",
    "CoreMaterial",
    "DesignLife",
    "TerrainCategory",
    "annual_poe",
    "climate_change_multiplier",
    "conservative_direction_multiplier",
    "core_material_kt",
    "damping_ratio",
    "is_a0_region",
    "normalise_region",
    "normalise_terrain",
    "poe_to_recurrence",
    "regional_wind_speed",
]
