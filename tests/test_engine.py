"""Tests for the wind load calculation engine.

Hand calculations follow AS/NZS 1170.2 so the values can be checked
against a spreadsheet.
"""

import math

import pytest

from windload.engine import (
    CPE_DEFAULT,
    GV,
    calculate,
    dynamic_response_factor,
    gust_response_factor,
)
from windload.tables import TerrainCategory

# ── Site wind speed ──────────────────────────────────────────────────


class TestSiteWindSpeed:
    def test_b1_ten_metre_building(self, make_request):
        """
        B1, 50 years, importance 2, h = 10 m, no overrides:
          PoE 1/50 -> V50 = 44 m/s
          Mc = 1.0, Md = 0.95, Mz,cat(TC2, 10 m) = 1.00
          Vsit = 44 * 1.0 * 0.95 * 1.00 = 41.80 m/s
          P = 0.5 * 1.2 * 41.8^2 * 0.80 * 1.0 = 838.68 Pa
        """
        result = calculate(make_request())

        assert result.region == "B1"
        assert result.annual_poe == "1/50"
        assert result.recurrence == "V50"
        assert result.regional_wind_speed_ms == 44
        assert result.mc == 1.0
        assert result.md == 0.95
        assert result.mzcat == 1.0
        assert result.vsit_ms == 41.8
        assert result.cshp == 0.8
        assert result.cdyn == 1.0
        assert result.p_pa == pytest.approx(838.6752)
        assert result.p_kpa == pytest.approx(0.8386752)

    def test_repeatable(self, make_request):
        first = calculate(make_request()).model_dump()
        for _ in range(3):
            assert calculate(make_request()).model_dump() == first

    def test_cyclonic_region_applies_climate_multiplier(self, make_request):
        """
        C, h = 10 m, TC2:
          V50 = 52, Mc = 1.05, Md = 0.90
          Vsit = 52 * 1.05 * 0.90 * 1.00 = 49.14
        """
        result = calculate(make_request(region="C"))
        assert result.vsit_ms == 49.14

    def test_terrain_override_beats_detected_terrain(self, make_request):
        result = calculate(make_request(terrain="TC1", terrain_override="TC3"))
        assert result.terrain is TerrainCategory.TC3
        assert result.mzcat == 0.83

    def test_detected_terrain_used_without_override(self, make_request):
        result = calculate(make_request(terrain="TC1"))
        assert result.terrain is TerrainCategory.TC1
        assert result.mzcat == 1.08

    def test_missing_terrain_uses_tc2_values(self, make_request):
        result = calculate(make_request())
        assert result.terrain is None
        assert result.mzcat == 1.0
        assert result.ih == 0.183

    def test_a0_region_ignores_terrain(self, make_request):
        result = calculate(make_request(region="A0", terrain="TC4", height_m=50))
        assert result.region == "A"
        assert result.raw_region == "A0"
        assert result.mzcat == 1.18

    def test_direction_override_used_even_when_neutral(self, make_request):
        result = calculate(make_request(direction_override=1.0))
        assert result.md == 1.0
        assert result.md_source == "override"
        assert result.vsit_ms == 44.0

    @pytest.mark.parametrize("field", ["shielding_override", "topographic_override"])
    def test_neutral_multiplier_override_is_default(self, make_request, field):
        result = calculate(make_request(**{field: 1.0}))
        baseline = calculate(make_request())
        assert result.ms == result.mt == 1.0
        assert result.ms_source == result.mt_source == "default"
        assert result.vsit_ms == baseline.vsit_ms

    def test_shielding_and_topographic_overrides(self, make_request):
        result = calculate(make_request(shielding_override=0.9, topographic_override=1.1))
        assert result.ms == 0.9
        assert result.ms_source == "override"
        assert result.mt == 1.1
        assert result.mt_source == "override"
        assert result.vsit_ms == round(44 * 0.95 * 0.9 * 1.1, 2)

    def test_cpe_override(self, make_request):
        result = calculate(make_request(shape_factor={"cpe": 0.12345}))
        assert result.cshp == 0.123
        assert result.cshp_parts.cpe == 0.12345
        assert result.cshp_parts.ka == 1.0

    def test_default_cpe(self, make_request):
        assert calculate(make_request()).cshp_parts.cpe == CPE_DEFAULT


# ── Partial failure ──────────────────────────────────────────────────


class TestUnavailableQuantities:
    def test_unknown_region_keeps_unrelated_quantities(self, make_request):
        result = calculate(make_request(region="Unknown"))

        assert result.region is None
        assert result.regional_wind_speed_ms is None
        assert result.mc is None
        assert result.md is None
        assert result.vsit_ms is None
        assert result.p_pa is None
        assert result.p_kpa is None
        # Independent of the region
        assert result.annual_poe == "1/50"
        assert result.mzcat == 1.0
        assert result.cshp == 0.8
        assert result.lh_m == pytest.approx(85.0)
        assert result.ih == 0.183
        assert result.hs == 1.25
        assert result.bs is not None
        assert result.cdyn == 1.0
        assert {"region", "vsit_ms", "p_pa", "p_kpa"} <= set(result.unavailable)

    def test_direction_override_without_region(self, make_request):
        result = calculate(make_request(region=None, direction_override=0.9))
        assert result.md == 0.9
        assert result.vsit_ms is None

    def test_unmapped_design_life_importance(self, make_request):
        result = calculate(make_request(design_life="temporary", importance=1))
        assert result.annual_poe is None
        assert result.recurrence is None
        assert result.regional_wind_speed_ms is None
        assert result.vsit_ms is None
        assert result.mc == 1.0

    def test_missing_height(self, make_request):
        result = calculate(make_request(height_m=None))
        assert result.mzcat is None
        assert result.vsit_ms is None
        assert result.cdyn is None
        assert result.lh_m is None
        assert result.hs is None
        assert result.p_pa is None
        assert result.regional_wind_speed_ms == 44

    def test_tall_building_without_core_material(self, make_request):
        result = calculate(make_request(tall=True, core_material=None))
        assert result.kt is None
        assert result.t1_s is None
        assert result.f_hz is None
        assert result.n_hz is None
        assert result.gr is None
        assert result.reduced_frequency is None
        assert result.cdyn is None
        assert result.p_pa is None
        assert result.vsit_ms is not None
        assert result.bs is not None

    def test_supplied_frequency_used_without_core_material(self, make_request):
        result = calculate(make_request(tall=True, core_material=None, natural_frequency_hz=0.8))
        assert result.f_hz is None
        assert result.n_hz == 0.8
        assert result.cdyn is not None
        assert result.p_pa is not None

    def test_non_finite_overrides_are_absent(self, make_request):
        result = calculate(
            make_request(
                direction_override=float("nan"),
                shielding_override=float("inf"),
                level_override_m=float("nan"),
                shape_factor={"cpe": float("-inf")},
            )
        )
        assert result.md == 0.95
        assert result.md_source == "default"
        assert result.ms == 1.0
        assert result.level_used_m == 5.0
        assert result.cshp == 0.8

    def test_non_finite_values_bypassing_validation(self, make_request):
        # model_copy(update=...) skips validation
        request = make_request().model_copy(
            update={"direction_override": float("nan"), "width_override_m": float("inf")}
        )
        result = calculate(request)
        assert result.md == 0.95
        assert result.width_used_m == 5.0


# ── Dynamic response ─────────────────────────────────────────────────


class TestDynamicResponse:
    @pytest.mark.parametrize("height", [0.0, 5.0, 12.0, 25.0])
    @pytest.mark.parametrize("core", [None, "steel_mrf", "concrete_mrf"])
    def test_cdyn_is_one_up_to_25m(self, make_request, height, core):
        result = calculate(
            make_request(height_m=height, core_material=core, natural_frequency_hz=0.3)
        )
        assert result.cdyn == 1.0
        assert result.t1_s is None
        assert result.f_hz is None

    def test_period_and_frequency(self, make_request):
        result = calculate(make_request(tall=True))
        expected_t1 = 1.25 * 0.075 * 50**0.75
        assert result.kt == 0.075
        assert result.t1_s == pytest.approx(expected_t1)
        assert result.f_hz == pytest.approx(1 / expected_t1)
        assert result.n_hz == result.f_hz

    def test_computed_frequency_preferred_over_supplied(self, make_request):
        result = calculate(make_request(tall=True, natural_frequency_hz=2.0))
        assert result.n_hz == result.f_hz
        assert result.n_hz != 2.0

    def test_tall_building_hand_calc(self, make_request):
        """
        C, 50 years, importance 2, h = 50 m, TC3, concrete core:
          Vsit = 52 * 1.05 * 0.90 * 1.07 = 52.58 m/s
          Lh = 85 * 5^0.25, Ih(TC3, 50 m) = 0.188
          zeta = 0.03
        """
        result = calculate(make_request(tall=True))
        h, vsit, ih, n = 50.0, 52.58, 0.188, result.n_hz

        assert result.vsit_ms == vsit
        assert result.ih == ih
        assert result.lh_m == pytest.approx(85 * 5**0.25)
        assert result.damping_ratio == 0.03

        reduced = n * result.lh_m * (1 + GV * ih) / vsit
        assert result.reduced_frequency == pytest.approx(reduced)
        assert result.et == pytest.approx(math.pi * reduced / (1 + 70.8 * reduced**2) ** (5 / 6))

        factor = 1 + GV * ih
        size_reduction = 1 / ((1 + 3.5 * n * h * factor / vsit) * (1 + 4.0 * n * 25.0 * factor / vsit))
        assert result.width_used_m == 25.0
        assert result.size_reduction == pytest.approx(size_reduction)

        assert result.level_used_m == 25.0
        assert result.hs == 1.25
        bs = 1 / (1 + math.sqrt(0.26 * 25.0**2 + 0.46 * 25.0**2) / result.lh_m)
        assert result.bs == pytest.approx(bs)

        gr = math.sqrt(1.2 + 2 * math.log(600 * n))
        assert result.gr == pytest.approx(gr)

        cdyn = (
            1 + 2 * ih * math.sqrt(GV**2 * bs + 1.25 * gr**2 * size_reduction * result.et / 0.03)
        ) / (1 + 2 * GV * ih)
        assert result.cdyn == pytest.approx(cdyn)
        assert result.cdyn > 0

        assert result.p_pa == pytest.approx(0.5 * 1.2 * vsit**2 * 0.8 * cdyn)
        assert result.unavailable == []

    def test_width_override(self, make_request):
        default = calculate(make_request(tall=True))
        wide = calculate(make_request(tall=True, width_override_m=60.0))
        assert wide.width_used_m == 60.0
        assert wide.size_reduction < default.size_reduction

    @pytest.mark.parametrize("width", [0.0, -5.0])
    def test_non_positive_width_uses_default(self, make_request, width):
        result = calculate(make_request(tall=True, width_override_m=width))
        assert result.width_used_m == 25.0

    def test_level_override_zero_is_data(self, make_request):
        default = calculate(make_request(height_m=20.0))
        ground = calculate(make_request(height_m=20.0, level_override_m=0.0))

        assert default.level_used_m == 10.0
        assert default.hs == 1.25
        assert ground.level_used_m == 0.0
        assert ground.hs == 1.0
        assert ground.bs != default.bs

    def test_level_override_clamped_to_height(self, make_request):
        above = calculate(make_request(height_m=20.0, level_override_m=35.0))
        below = calculate(make_request(height_m=20.0, level_override_m=-3.0))
        assert above.level_used_m == 20.0
        assert above.hs == 2.0
        assert below.level_used_m == 0.0

    def test_steel_damping(self, make_request):
        result = calculate(make_request(tall=True, core_material="steel_mrf"))
        assert result.damping_ratio == 0.02
        assert result.kt == 0.11


class TestGustResponseFactor:
    def test_value(self):
        assert gust_response_factor(1.0) == pytest.approx(math.sqrt(1.2 + 2 * math.log(600)))

    @pytest.mark.parametrize("n", [None, 0.0, -0.5])
    def test_non_positive_frequency(self, n):
        assert gust_response_factor(n) is None

    def test_negative_radicand(self):
        # 1.2 + 2 ln(600 n) <= 0 for n below about 0.000915 Hz
        assert gust_response_factor(0.0005) is None


class TestDynamicResponseFactor:
    def test_requires_all_inputs(self):
        args = dict(ih=0.2, bs=0.7, hs=1.25, gr=3.5, size_reduction=0.3, et=0.1, zeta=0.02)
        assert dynamic_response_factor(**args) > 0
        for name in ("ih", "bs", "hs", "gr", "size_reduction", "et"):
            assert dynamic_response_factor(**{**args, name: None}) is None

    def test_requires_positive_damping(self):
        assert (
            dynamic_response_factor(
                ih=0.2, bs=0.7, hs=1.25, gr=3.5, size_reduction=0.3, et=0.1, zeta=0.0
            )
            is None
        )


# ── Design pressure ──────────────────────────────────────────────────


class TestDesignPressure:
    @pytest.mark.parametrize("tall", [False, True])
    def test_kpa_is_pa_over_1000(self, make_request, tall):
        result = calculate(make_request(tall=tall))
        assert result.p_kpa == result.p_pa / 1000

    def test_unavailable_when_cdyn_unavailable(self, make_request):
        result = calculate(make_request(tall=True, core_material=None))
        assert result.cdyn is None
        assert result.p_pa is None
        assert result.p_kpa is None

    def test_pressure_scales_with_cpe(self, make_request):
        base = calculate(make_request())
        doubled = calculate(make_request(shape_factor={"cpe": 1.6}))
        assert doubled.p_pa == pytest.approx(2 * base.p_pa)

    def test_zero_cpe_gives_zero_pressure(self, make_request):
        result = calculate(make_request(shape_factor={"cpe": 0.0}))
        assert result.p_pa == 0.0


# ── Very large inputs ────────────────────────────────────────────────


class TestLargeInputs:
    """Finite but huge inputs make quantities unavailable instead of raising."""

    def test_huge_height(self, make_request):
        result = calculate(make_request(height_m=1e200))
        assert result.vsit_ms is not None
        assert result.hs == 1.25
        assert result.bs == 0.0
        assert result.cdyn is None
        assert result.p_pa is None
        assert "cdyn" in result.unavailable

    def test_huge_natural_frequency(self, make_request):
        result = calculate(make_request(height_m=50.0, natural_frequency_hz=1e200))
        assert result.n_hz == 1e200
        assert result.et == 0.0
        assert result.size_reduction == 0.0
        assert result.cdyn is not None and math.isfinite(result.cdyn)
        assert result.p_pa is not None and math.isfinite(result.p_pa)

    def test_overflowing_multipliers(self, make_request):
        result = calculate(make_request(shielding_override=1e200, topographic_override=1e200))
        assert result.ms == 1e200
        assert result.vsit_ms is None
        assert result.p_pa is None
        assert "vsit_ms" in result.unavailable
