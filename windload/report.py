"""PDF report generation module."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from windload.schemas import BuildingInputs, WindLoadResult

NA = "N/A"


def _fmt(value: Any, digits: int = 3, unit: str = "") -> str:
    if value is None:
        return NA
    if hasattr(value, "value"):  # enums
        value = value.value
    if isinstance(value, float):
        text = f"{value:.{digits}f}"
    else:
        text = str(value)
    return f"{text} {unit}".rstrip()


def generate_pdf_report(data: dict[str, Any], output_path: str) -> None:
    """Build a report from a saved JSON result (e.g. ``windload calculate --output``)."""

    result = WindLoadResult.model_validate(
        {k: v for k, v in data.items() if k != "unavailable"}
    )
    draw_pdf(Path(output_path), None, result)


def draw_pdf(
    output_path: Path,
    input_data: Optional[BuildingInputs],
    result: WindLoadResult,
    title: str = "Site Wind Load Calculation Report",
) -> None:
    """Generate a PDF report for wind load calculation results."""

    doc = SimpleDocTemplate(str(output_path), pagesize=A4)
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(title, styles["Title"]))
    story.append(Spacer(1, 0.25 * inch))

    if input_data:
        story.extend(_input_section(input_data, styles))

    story.extend(_site_speed_section(result, styles))
    story.extend(_dynamic_section(result, styles))
    story.extend(_pressure_section(result, styles))

    doc.build(story)


def _table(rows: list[list[str]], background=colors.lightgrey) -> Table:
    table = Table(rows)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), background),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ]
        )
    )
    return table


def _input_section(data: BuildingInputs, styles: dict[str, ParagraphStyle]):
    story = []
    story.append(Paragraph("<b>Inputs</b>", styles["Heading2"]))

    rows = [
        ["Design working life", data.design_life.value],
        ["Importance level", str(data.importance)],
        ["Roof height h", _fmt(data.height_m, 2, "m")],
        ["Core material", _fmt(data.core_material)],
        ["Terrain override", _fmt(data.terrain_override)],
        ["Md override", _fmt(data.direction_override, 2)],
        ["Ms override", _fmt(data.shielding_override, 2)],
        ["Mt override", _fmt(data.topographic_override, 2)],
        ["Cpe override", _fmt(data.shape_factor.cpe, 2)],
        ["Natural frequency", _fmt(data.natural_frequency_hz, 3, "Hz")],
        ["Reference width b", _fmt(data.width_override_m, 2, "m")],
        ["Reference level s", _fmt(data.level_override_m, 2, "m")],
    ]
    story.append(_table(rows))
    story.append(Spacer(1, 0.2 * inch))
    return story


def _site_speed_section(result: WindLoadResult, styles: dict[str, ParagraphStyle]):
    story = []
    story.append(Paragraph("<b>Site Wind Speed</b>", styles["Heading2"]))

    rows = [
        ["Region", f"{_fmt(result.raw_region)} ({_fmt(result.region)})"],
        ["Annual probability of exceedance", _fmt(result.annual_poe)],
        ["Regional wind speed V_R", _fmt(result.regional_wind_speed_ms, 1, "m/s")],
        ["Climate change multiplier Mc", _fmt(result.mc, 2)],
        ["Direction multiplier Md", f"{_fmt(result.md, 2)} ({result.md_source})"],
        ["Terrain category", _fmt(result.terrain)],
        ["Terrain/height multiplier Mz,cat", _fmt(result.mzcat, 3)],
        ["Shielding multiplier Ms", f"{_fmt(result.ms, 2)} ({result.ms_source})"],
        ["Topographic multiplier Mt", f"{_fmt(result.mt, 2)} ({result.mt_source})"],
        ["Site wind speed Vsit", _fmt(result.vsit_ms, 2, "m/s")],
    ]
    story.append(_table(rows))
    story.append(Spacer(1, 0.2 * inch))
    return story


def _dynamic_section(result: WindLoadResult, styles: dict[str, ParagraphStyle]):
    story = []
    story.append(Paragraph("<b>Dynamic Response</b>", styles["Heading2"]))

    rows = [
        ["Period coefficient Kt", _fmt(result.kt, 3)],
        ["Period T1", _fmt(result.t1_s, 3, "s")],
        ["Natural frequency n", _fmt(result.n_hz, 3, "Hz")],
        ["Gust response factor gR", _fmt(result.gr, 3)],
        ["Turbulence length scale Lh", _fmt(result.lh_m, 1, "m")],
        ["Turbulence intensity Ih", _fmt(result.ih, 3)],
        ["Reduced frequency N", _fmt(result.reduced_frequency, 3)],
        ["Turbulence spectrum Et", _fmt(result.et, 4)],
        ["Reference width b", _fmt(result.width_used_m, 2, "m")],
        ["Size reduction factor S", _fmt(result.size_reduction, 4)],
        ["Reference level s", _fmt(result.level_used_m, 2, "m")],
        ["Background factor Bs", _fmt(result.bs, 4)],
        ["Height factor Hs", _fmt(result.hs, 4)],
        ["Damping ratio", _fmt(result.damping_ratio, 3)],
        ["Dynamic response factor Cdyn", _fmt(result.cdyn, 3)],
    ]
    story.append(_table(rows))
    story.append(Spacer(1, 0.2 * inch))
    return story


def _pressure_section(result: WindLoadResult, styles: dict[str, ParagraphStyle]):
    story = []
    story.append(Paragraph("<b>Design Wind Pressure</b>", styles["Heading2"]))

    parts = result.cshp_parts
    rows = [
        [
            "Shape factor Cshp",
            f"{result.cshp:.3f} (Cpe {parts.cpe:.2f}, Ka {parts.ka}, Kce {parts.kce}, "
            f"K1 {parts.k1}, Kp {parts.kp})",
        ],
        ["Pressure P", _fmt(result.p_pa, 1, "Pa")],
        ["Pressure P", _fmt(result.p_kpa, 3, "kPa")],
    ]
    story.append(_table(rows, background=colors.beige))
    story.append(Spacer(1, 0.2 * inch))

    if result.unavailable:
        story.append(Paragraph("<b>Not computed</b>", styles["Heading3"]))
        story.append(Paragraph(", ".join(result.unavailable), styles["Normal"]))

    return story


__all__ = ["draw_pdf", "generate_pdf_report"]
