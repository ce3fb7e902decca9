"""Wind load calculation engine (AS/NZS 1170.2).

The calculation runs as a chain of immutable stages. Each stage takes the
layers produced before it and returns a new frozen layer; a quantity that
cannot be computed is ``None`` and every quantity depending on it is
``None`` too, while unrelated quantities still compute.

Stages
------
1-6   site wind speed  Vsit = V_R * Mc * Md * Mz,cat * Ms * Mt
7-8   structural period, natural frequency and gust factor gR
9-16  turbulence: Lh, Ih, N, Et, b, S, s, Bs, Hs
17-18 damping and dynamic response factor Cdyn (Eq. 6.2(1))
19    design pressure P = 0.5 * rho_air * Vsit^2 * Cshp * Cdyn
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from windload.interpolation import terrain_height_multiplier, turbulence_intensity
from windload.schemas import CshpParts, WindLoadRequest, WindLoadResult
from windload.tables import (
    TerrainCategory,
    annual_poe,
    climate_change_multiplier,
    conservative_direction_multiplier,
    core_material_kt,
    damping_ratio,
    normalise_region,
    poe_to_recurrence,
    regional_wind_speed,
)

logger = logging.getLogger(__name__)

RHO_AIR = 1.2  # kg/m^3
GV = 3.4  # peak factor for upwind velocity fluctuations
CPE_DEFAULT = 0.80
NEUTRAL_MULTIPLIER = 1.0
STATIC_HEIGHT_LIMIT_M = 25.0


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ── Stage layers ─────────────────────────────────────────────────────
@dataclass(frozen=True)
class SiteSpeed:
    """Stages 1-6."""

    raw_region: Optional[str]
    region: Optional[str]
    annual_poe: Optional[str]
    recurrence: Optional[str]
    v_r: Optional[float]
    mc: Optional[float]
    md: Optional[float]
    md_source: str
    terrain: Optional[TerrainCategory]
    mzcat: Optional[float]
    ms: float
    ms_source: str
    mt: float
    mt_source: str
    cshp: float
    cshp_parts: CshpParts
    vsit: Optional[float]


@dataclass(frozen=True)
class Structure:
    """Stages 7-8."""

    height: Optional[float]
    static: bool
    kt: Optional[float]
    t1: Optional[float]
    f: Optional[float]
    n: Optional[float]
    gr: Optional[float]


@dataclass(frozen=True)
class Turbulence:
    """Stages 9-16."""

    lh: Optional[float]
    ih: Optional[float]
    reduced_frequency: Optional[float]
    et: Optional[float]
    b: Optional[float]
    size_reduction: Optional[float]
    s: Optional[float]
    bs: Optional[float]
    hs: Optional[float]


@dataclass(frozen=True)
class Response:
    """Stages 17-19."""

    damping_ratio: float
    cdyn: Optional[float]
    p_pa: Optional[float]
    p_kpa: Optional[float]


# ── Stages 1-6: site wind speed ──────────────────────────────────────
def _override_if_not_neutral(value: Optional[float]) -> tuple[float, str]:
    value = _finite(value)
    if value is not None and value != NEUTRAL_MULTIPLIER:
        return value, "override"
    return NEUTRAL_MULTIPLIER, "default"


def compute_site_speed(request: WindLoadRequest) -> SiteSpeed:
    """Regional speed, multipliers, shape factor and Vsit."""
    raw_region = request.region
    region = normalise_region(raw_region)
    poe = annual_poe(request.design_life, request.importance)
    recurrence = poe_to_recurrence(poe)
    v_r = regional_wind_speed(region, recurrence)

    mc = climate_change_multiplier(region)
    md_override = _finite(request.direction_override)
    if md_override is not None:
        md, md_source = md_override, "override"
    else:
        md, md_source = conservative_direction_multiplier(region), "default"

    terrain = request.terrain_override or request.terrain
    mzcat = terrain_height_multiplier(raw_region, terrain, _finite(request.height_m))

    ms, ms_source = _override_if_not_neutral(request.shielding_override)
    mt, mt_source = _override_if_not_neutral(request.topographic_override)

    cpe = _finite(request.shape_factor.cpe)
    parts = CshpParts(
        cpe=CPE_DEFAULT if cpe is None else cpe,
        ka=1.0,
        kce=1.0,
        k1=1.0,
        kp=1.0,
    )
    cshp = round(parts.cpe * parts.ka * parts.kce * parts.k1 * parts.kp, 3)

    vsit = None
    if v_r is not None and mc is not None and md is not None and mzcat is not None:
        product = _finite(v_r * mc * md * mzcat * ms * mt)
        vsit = None if product is None else round(product, 2)

    return SiteSpeed(
        raw_region=raw_region,
        region=region,
        annual_poe=poe,
        recurrence=recurrence,
        v_r=v_r,
        mc=mc,
        md=md,
        md_source=md_source,
        terrain=terrain,
        mzcat=mzcat,
        ms=ms,
        ms_source=ms_source,
        mt=mt,
        mt_source=mt_source,
        cshp=cshp,
        cshp_parts=parts,
        vsit=vsit,
    )


# ── Stages 7-8: period, frequency, gust factor ───────────────────────
def gust_response_factor(n: Optional[float]) -> Optional[float]:
    """gR = sqrt(1.2 + 2 ln(600 n)); ``None`` for n <= 0 or a negative radicand."""
    if n is None or n <= 0:
        return None
    radicand = 1.2 + 2.0 * math.log(600.0 * n)
    if radicand <= 0:
        return None
    return math.sqrt(radicand)


def compute_structure(request: WindLoadRequest) -> Structure:
    h = _finite(request.height_m)
    static = h is not None and h <= STATIC_HEIGHT_LIMIT_M

    kt = t1 = f = None
    if h is not None and not static:
        kt = core_material_kt(request.core_material)
        if kt is not None:
            t1 = 1.25 * kt * h**0.75
            f = 1.0 / t1 if t1 > 0 else None

    n = f if f is not None else _finite(request.natural_frequency_hz)
    return Structure(
        height=h,
        static=static,
        kt=kt,
        t1=t1,
        f=f,
        n=n,
        gr=gust_response_factor(n),
    )


# ── Stages 9-16: turbulence ──────────────────────────────────────────
def compute_turbulence(
    request: WindLoadRequest,
    site: SiteSpeed,
    structure: Structure,
) -> Turbulence:
    h = structure.height
    n = structure.n
    vsit = site.vsit
    has_height = h is not None and h > 0
    has_speed = vsit is not None and vsit > 0

    lh = 85.0 * (h / 10.0) ** 0.25 if has_height else None
    ih = turbulence_intensity(site.terrain, h)

    reduced_frequency = None
    if n is not None and lh is not None and ih is not None and has_speed:
        reduced_frequency = _finite(n * lh * (1.0 + GV * ih) / vsit)

    et = None
    if reduced_frequency is not None:
        n_sq = reduced_frequency * reduced_frequency
        et = _finite(math.pi * reduced_frequency / (1.0 + 70.8 * n_sq) ** (5.0 / 6.0))

    width = _finite(request.width_override_m)
    if width is not None and width > 0:
        b = width
    else:
        b = 0.5 * h if has_height else None

    size_reduction = None
    if n is not None and has_height and b is not None and ih is not None and has_speed:
        factor = 1.0 + GV * ih
        size_reduction = 1.0 / (
            (1.0 + 3.5 * n * h * factor / vsit) * (1.0 + 4.0 * n * b * factor / vsit)
        )

    s = bs = hs = None
    if has_height:
        level = _finite(request.level_override_m)
        s = _clamp(level, 0.0, h) if level is not None else 0.5 * h
        hs = 1.0 + (s / h) ** 2
        if lh is not None and lh > 0:
            spread = math.sqrt(0.26 * (h - s) * (h - s) + 0.46 * (0.5 * h) * (0.5 * h))
            bs = 1.0 / (1.0 + spread / lh)

    return Turbulence(
        lh=lh,
        ih=ih,
        reduced_frequency=reduced_frequency,
        et=et,
        b=b,
        size_reduction=size_reduction,
        s=s,
        bs=bs,
        hs=hs,
    )


# ── Stages 17-19: dynamic response and pressure ──────────────────────
def dynamic_response_factor(
    ih: Optional[float],
    bs: Optional[float],
    hs: Optional[float],
    gr: Optional[float],
    size_reduction: Optional[float],
    et: Optional[float],
    zeta: float,
) -> Optional[float]:
    """Cdyn per AS/NZS 1170.2 Eq. 6.2(1)."""
    if None in (ih, bs, hs, gr, size_reduction, et) or zeta <= 0:
        return None
    resonant = hs * gr**2 * size_reduction * et / zeta
    numerator = 1.0 + 2.0 * ih * math.sqrt(GV**2 * bs + resonant)
    return _finite(numerator / (1.0 + 2.0 * GV * ih))


def compute_response(
    request: WindLoadRequest,
    site: SiteSpeed,
    structure: Structure,
    turbulence: Turbulence,
) -> Response:
    zeta = damping_ratio(request.core_material)

    if structure.static:
        cdyn: Optional[float] = 1.0
    elif structure.height is None:
        cdyn = None
    else:
        cdyn = dynamic_response_factor(
            turbulence.ih,
            turbulence.bs,
            turbulence.hs,
            structure.gr,
            turbulence.size_reduction,
            turbulence.et,
            zeta,
        )

    p_pa = p_kpa = None
    if site.vsit is not None and site.vsit > 0 and cdyn is not None and cdyn > 0:
        p_pa = _finite(0.5 * RHO_AIR * site.vsit * site.vsit * site.cshp * cdyn)
        p_kpa = None if p_pa is None else p_pa / 1000.0

    return Response(damping_ratio=zeta, cdyn=cdyn, p_pa=p_pa, p_kpa=p_kpa)


def calculate(request: WindLoadRequest) -> WindLoadResult:
    """Run every stage and collect the quantities into one result.

    Never raises for missing or unresolvable inputs; unavailable
    quantities are ``None`` and listed in ``result.unavailable``.
    """
    site = compute_site_speed(request)
    structure = compute_structure(request)
    turbulence = compute_turbulence(request, site, structure)
    response = compute_response(request, site, structure, turbulence)

    result = WindLoadResult(
        raw_region=site.raw_region,
        region=site.region,
        annual_poe=site.annual_poe,
        recurrence=site.recurrence,
        regional_wind_speed_ms=site.v_r,
        mc=site.mc,
        md=site.md,
        md_source=site.md_source,
        terrain=site.terrain,
        mzcat=site.mzcat,
        ms=site.ms,
        ms_source=site.ms_source,
        mt=site.mt,
        mt_source=site.mt_source,
        cshp=site.cshp,
        cshp_parts=site.cshp_parts,
        vsit_ms=site.vsit,
        height_m=structure.height,
        static=structure.static,
        kt=structure.kt,
        t1_s=structure.t1,
        f_hz=structure.f,
        n_hz=structure.n,
        gr=structure.gr,
        lh_m=turbulence.lh,
        ih=turbulence.ih,
        reduced_frequency=turbulence.reduced_frequency,
        et=turbulence.et,
        width_used_m=turbulence.b,
        size_reduction=turbulence.size_reduction,
        level_used_m=turbulence.s,
        bs=turbulence.bs,
        hs=turbulence.hs,
        damping_ratio=response.damping_ratio,
        cdyn=response.cdyn,
        p_pa=response.p_pa,
        p_kpa=response.p_kpa,
    )

    if result.unavailable:
        logger.debug("Unavailable quantities: %s", ", ".join(result.unavailable))
    return result


__all__ = [
    "CPE_DEFAULT",
    "GV",
    "RHO_AIR",
    "calculate",
    "compute_response",
    "compute_site_speed",
    "compute_structure",
    "compute_turbulence",
    "dynamic_response_factor",
    "gust_response_factor",
]
