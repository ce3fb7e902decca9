"""Pydantic schemas for windload data models."""

from __future__ import annotations

import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from windload.tables import CoreMaterial, DesignLife, TerrainCategory, normalise_terrain

OverrideSource = Literal["override", "default"]


def _finite_or_none(value: Any) -> Any:
    """Treat blanks, NaN and infinities as "not supplied"."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            return value  # let pydantic report it
        return number if math.isfinite(number) else None
    if isinstance(value, (int, float)) and not math.isfinite(value):
        return None
    return value


class ShapeFactorOverride(BaseModel):
    """Optional aerodynamic shape factor components."""

    cpe: Optional[float] = Field(None, description="External pressure coefficient")

    @field_validator("cpe", mode="before")
    @classmethod
    def _drop_non_finite(cls, value: Any) -> Any:
        return _finite_or_none(value)


class BuildingInputs(BaseModel):
    """Building parameters and engineer overrides shared by all entry points."""

    design_life: DesignLife = Field(..., description="Design working life")
    importance: int = Field(..., ge=1, le=4, description="Importance level (1-4)")
    height_m: Optional[float] = Field(None, ge=0, description="Average roof height h in metres")

    terrain_override: Optional[TerrainCategory] = Field(
        None, description="Terrain category chosen by the engineer"
    )
    direction_override: Optional[float] = Field(None, description="Wind direction multiplier Md")
    shielding_override: Optional[float] = Field(None, description="Shielding multiplier Ms")
    topographic_override: Optional[float] = Field(None, description="Topographic multiplier Mt")
    shape_factor: ShapeFactorOverride = Field(default_factory=ShapeFactorOverride)

    core_material: Optional[CoreMaterial] = Field(
        None, description="Lateral core archetype (drives Kt and damping)"
    )
    natural_frequency_hz: Optional[float] = Field(
        None, description="First mode natural frequency if known"
    )
    width_override_m: Optional[float] = Field(
        None, description="Reference width b for size reduction (default 0.5h)"
    )
    level_override_m: Optional[float] = Field(
        None, description="Reference level s above ground (default 0.5h, 0 allowed)"
    )

    @field_validator(
        "height_m",
        "direction_override",
        "shielding_override",
        "topographic_override",
        "natural_frequency_hz",
        "width_override_m",
        "level_override_m",
        mode="before",
    )
    @classmethod
    def _drop_non_finite(cls, value: Any) -> Any:
        return _finite_or_none(value)

    @field_validator("design_life", mode="before")
    @classmethod
    def _accept_short_codes(cls, value: Any) -> Any:
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            try:
                return DesignLife(value)
            except ValueError:
                return value  # let pydantic report it
        return value

    @field_validator("terrain_override", mode="before")
    @classmethod
    def _normalise_terrain(cls, value: Any) -> Optional[TerrainCategory]:
        return normalise_terrain(value)

    @field_validator("core_material", mode="before")
    @classmethod
    def _unknown_core_is_absent(cls, value: Any) -> Any:
        if value is None or isinstance(value, CoreMaterial):
            return value
        try:
            return CoreMaterial(str(value).strip().lower())
        except ValueError:
            return None


class WindLoadRequest(BuildingInputs):
    """Inputs for a single wind load calculation."""

    region: Optional[str] = Field(None, description="Wind region label (e.g. 'B1', 'A4')")
    terrain: Optional[TerrainCategory] = Field(
        None, description="Terrain category from automatic classification"
    )

    @field_validator("terrain", mode="before")
    @classmethod
    def _normalise_detected_terrain(cls, value: Any) -> Optional[TerrainCategory]:
        return normalise_terrain(value)


class SiteRequest(BuildingInputs):
    """Inputs for a location-based calculation (region and terrain are looked up)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class TerrainRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class TerrainResponse(BaseModel):
    lat: float
    lon: float
    terrain: TerrainCategory


class CshpParts(BaseModel):
    """Components of the aerodynamic shape factor."""

    model_config = ConfigDict(frozen=True)

    cpe: float
    ka: float
    kce: float
    k1: float
    kp: float


# Quantities that can be individually unavailable.
RESULT_QUANTITIES: tuple[str, ...] = (
    "region",
    "annual_poe",
    "recurrence",
    "regional_wind_speed_ms",
    "mc",
    "md",
    "mzcat",
    "vsit_ms",
    "kt",
    "t1_s",
    "f_hz",
    "n_hz",
    "gr",
    "lh_m",
    "ih",
    "reduced_frequency",
    "et",
    "width_used_m",
    "size_reduction",
    "level_used_m",
    "bs",
    "hs",
    "cdyn",
    "p_pa",
    "p_kpa",
)

# Stage 7-8 quantities a static building never needs (Cdyn = 1).
STATIC_SKIPPED: frozenset[str] = frozenset(
    {"kt", "t1_s", "f_hz", "n_hz", "gr", "reduced_frequency", "et", "size_reduction"}
)


class WindLoadResult(BaseModel):
    """Every intermediate and final quantity of the wind load calculation.

    Each quantity is ``None`` when it could not be computed; see
    :attr:`unavailable`.
    """

    model_config = ConfigDict(frozen=True)

    # Site wind speed
    raw_region: Optional[str] = None
    region: Optional[str] = None
    annual_poe: Optional[str] = None
    recurrence: Optional[str] = None
    regional_wind_speed_ms: Optional[float] = Field(None, description="V_R in m/s")
    mc: Optional[float] = Field(None, description="Climate change multiplier")
    md: Optional[float] = Field(None, description="Wind direction multiplier")
    md_source: OverrideSource = "default"
    terrain: Optional[TerrainCategory] = Field(None, description="Terrain category used")
    mzcat: Optional[float] = Field(None, description="Terrain/height multiplier")
    ms: float = Field(1.0, description="Shielding multiplier")
    ms_source: OverrideSource = "default"
    mt: float = Field(1.0, description="Topographic multiplier")
    mt_source: OverrideSource = "default"
    cshp: float = Field(..., description="Aerodynamic shape factor")
    cshp_parts: CshpParts
    vsit_ms: Optional[float] = Field(None, description="Site design wind speed in m/s")

    # Dynamic response
    height_m: Optional[float] = None
    static: bool = Field(False, description="Height within the static limit, so Cdyn = 1")
    kt: Optional[float] = Field(None, description="Period coefficient for the core material")
    t1_s: Optional[float] = Field(None, description="First mode period in seconds")
    f_hz: Optional[float] = Field(None, description="Computed natural frequency")
    n_hz: Optional[float] = Field(None, description="Natural frequency used")
    gr: Optional[float] = Field(None, description="Gust response factor")
    lh_m: Optional[float] = Field(None, description="Turbulence length scale")
    ih: Optional[float] = Field(None, description="Turbulence intensity at h")
    reduced_frequency: Optional[float] = Field(None, description="Reduced frequency N")
    et: Optional[float] = Field(None, description="Spectrum of turbulence")
    width_used_m: Optional[float] = Field(None, description="Reference width b")
    size_reduction: Optional[float] = Field(None, description="Size reduction factor S")
    level_used_m: Optional[float] = Field(None, description="Reference level s")
    bs: Optional[float] = Field(None, description="Background factor")
    hs: Optional[float] = Field(None, description="Height factor for resonant response")
    damping_ratio: float = Field(..., description="Structural damping ratio")
    cdyn: Optional[float] = Field(None, description="Dynamic response factor")

    # Design pressure
    p_pa: Optional[float] = Field(None, description="Design wind pressure in Pa")
    p_kpa: Optional[float] = Field(None, description="Design wind pressure in kPa")

    @computed_field
    @property
    def unavailable(self) -> List[str]:
        """Names of quantities that could not be computed.

        Quantities skipped for a static building are not listed.
        """
        skipped = STATIC_SKIPPED if self.static else frozenset()
        return [
            name
            for name in RESULT_QUANTITIES
            if getattr(self, name) is None and name not in skipped
        ]


class SiteResult(BaseModel):
    """Location-based calculation with the looked-up region and terrain."""

    lat: float
    lon: float
    raw_region: str
    terrain_auto: TerrainCategory
    terrain_used: TerrainCategory
    result: WindLoadResult


__all__ = [
    "RESULT_QUANTITIES",
    "STATIC_SKIPPED",
    "BuildingInputs",
    "CshpParts",
    "ShapeFactorOverride",
    "SiteRequest",
    "SiteResult",
    "TerrainRequest",
    "TerrainResponse",
    "WindLoadRequest",
    "WindLoadResult",
]
