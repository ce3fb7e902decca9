"""Piecewise-linear lookups over the height-keyed tables."""

from __future__ import annotations

from typing import Optional, Sequence

from windload.tables import (
    A0_CONSTANT_ABOVE_100M,
    A0_TC2_LIMIT_M,
    DEFAULT_TERRAIN,
    IH_HEIGHTS,
    IH_TABLE,
    MZCAT_HEIGHTS,
    MZCAT_TABLE,
    TerrainCategory,
    is_a0_region,
)


def interpolate(breakpoints: Sequence[float], values: Sequence[float], x: float) -> float:
    """Linear interpolation of *values* over ascending *breakpoints*.

    Values of *x* at or below the first breakpoint clamp to the first
    value; at or above the last breakpoint clamp to the last value.

    Parameters
    ----------
    breakpoints : sequence of float
        Strictly ascending x values (e.g. heights in metres).
    values : sequence of float
        Tabulated y value for each breakpoint.
    x : float
        Lookup point.

    Returns
    -------
    float
        Interpolated value.
    """
    if len(breakpoints) != len(values) or not breakpoints:
        raise ValueError("breakpoints and values must be non-empty and equal length")

    if x <= breakpoints[0]:
        return values[0]
    if x >= breakpoints[-1]:
        return values[-1]

    for i in range(len(breakpoints) - 1):
        x0, x1 = breakpoints[i], breakpoints[i + 1]
        if x == x0:
            return values[i]
        if x0 < x < x1:
            y0, y1 = values[i], values[i + 1]
            return y0 + (x - x0) * (y1 - y0) / (x1 - x0)

    return values[-1]  # pragma: no cover


def terrain_height_multiplier(
    raw_region: Optional[str],
    terrain: Optional[TerrainCategory],
    height_m: Optional[float],
) -> Optional[float]:
    """Terrain/height multiplier Mz,cat (AS/NZS 1170.2 Table 4.1).

    Region A0 ignores terrain: the TC2 column applies up to 100 m and a
    fixed 1.24 above that. A missing terrain uses TC2.
    """
    if height_m is None:
        return None
    z = max(height_m, 0.0)

    if is_a0_region(raw_region):
        if z <= A0_TC2_LIMIT_M:
            return interpolate(MZCAT_HEIGHTS, MZCAT_TABLE[TerrainCategory.TC2], z)
        return A0_CONSTANT_ABOVE_100M

    column = MZCAT_TABLE[terrain or DEFAULT_TERRAIN]
    return interpolate(MZCAT_HEIGHTS, column, z)


def turbulence_intensity(
    terrain: Optional[TerrainCategory],
    height_m: Optional[float],
) -> Optional[float]:
    """Turbulence intensity Ih (AS/NZS 1170.2 Table 6.1); missing terrain uses TC2."""
    if height_m is None:
        return None
    return interpolate(IH_HEIGHTS, IH_TABLE[terrain or DEFAULT_TERRAIN], height_m)


__all__ = ["interpolate", "terrain_height_multiplier", "turbulence_intensity"]
