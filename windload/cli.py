"""CLI interface for windload."""

import json
import logging
from pathlib import Path

import click
import pandas as pd
from pydantic import ValidationError

from windload import __version__
from windload.batch import create_summary_table, export_to_csv, export_to_excel, run_batch
from windload.engine import calculate as run_calculation
from windload.report import draw_pdf, generate_pdf_report
from windload.schemas import WindLoadRequest
from windload.settings import get_settings
from windload.tables import CoreMaterial, DesignLife, TerrainCategory
from windload.terrain import detect_terrain_category

_TERRAIN_CHOICES = [t.value for t in TerrainCategory]


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
def main(verbose: bool):
    """Windload - site wind load calculator (AS/NZS 1170.2)."""
    level = logging.DEBUG if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@main.command()
@click.option("--region", type=str, help="Wind region label (e.g. B1, A4)")
@click.option(
    "--design-life",
    type=click.Choice([d.value for d in DesignLife]),
    default=DesignLife.FIFTY_YEARS.value,
    show_default=True,
)
@click.option("--importance", type=click.IntRange(1, 4), default=2, show_default=True)
@click.option("--height", type=float, required=True, help="Roof height in metres")
@click.option("--terrain", type=click.Choice(_TERRAIN_CHOICES), help="Terrain category")
@click.option("--core-material", type=click.Choice([c.value for c in CoreMaterial]))
@click.option("--natural-frequency", type=float, help="Natural frequency in Hz")
@click.option("--md", "direction_override", type=float, help="Direction multiplier override")
@click.option("--ms", "shielding_override", type=float, help="Shielding multiplier override")
@click.option("--mt", "topographic_override", type=float, help="Topographic multiplier override")
@click.option("--cpe", type=float, help="External pressure coefficient override")
@click.option("--width", type=float, help="Reference width b in metres")
@click.option("--level", type=float, help="Reference level s in metres (0 allowed)")
@click.option("--output", type=click.Path(), help="Output JSON file path")
@click.option("--pdf", type=click.Path(), help="Also write a PDF report")
def calculate(
    region: str | None,
    design_life: str,
    importance: int,
    height: float,
    terrain: str | None,
    core_material: str | None,
    natural_frequency: float | None,
    direction_override: float | None,
    shielding_override: float | None,
    topographic_override: float | None,
    cpe: float | None,
    width: float | None,
    level: float | None,
    output: str | None,
    pdf: str | None,
):
    """Calculate the design wind pressure for one building."""
    try:
        request = WindLoadRequest(
            region=region,
            design_life=design_life,
            importance=importance,
            height_m=height,
            terrain_override=terrain,
            core_material=core_material,
            natural_frequency_hz=natural_frequency,
            direction_override=direction_override,
            shielding_override=shielding_override,
            topographic_override=topographic_override,
            shape_factor={"cpe": cpe},
            width_override_m=width,
            level_override_m=level,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e))

    result = run_calculation(request)
    result_json = json.dumps(result.model_dump(mode="json"), indent=2)

    if output:
        Path(output).write_text(result_json)
        click.echo(f"Results saved to {output}")
    else:
        click.echo(result_json)

    if pdf:
        draw_pdf(Path(pdf), request, result)
        click.echo(f"Report generated: {pdf}")


@main.command()
@click.argument("lat", type=click.FloatRange(-90, 90))
@click.argument("lon", type=click.FloatRange(-180, 180))
def terrain(lat: float, lon: float):
    """Detect the terrain category around LAT LON."""
    click.echo(detect_terrain_category(lat, lon).value)


@main.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option("--output", type=click.Path(), required=True, help="Output .csv or .xlsx path")
@click.option("--summary", is_flag=True, help="Print a summary table")
def batch(input_file: str, output: str, summary: bool):
    """Run one calculation per row of a CSV file."""
    results = run_batch(pd.read_csv(input_file))

    if Path(output).suffix.lower() in {".xlsx", ".xls"}:
        export_to_excel(results, output)
    else:
        export_to_csv(results, output)
    click.echo(f"{len(results)} cases written to {output}")

    if summary:
        click.echo(create_summary_table(results).to_string(index=False))


@main.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option("--output", type=click.Path(), help="Output PDF file path")
def report(input_file: str, output: str | None):
    """Generate PDF report from a saved calculation result."""
    data = json.loads(Path(input_file).read_text())

    output_path = output or str(get_settings().report_dir / "wind_load_report.pdf")
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    generate_pdf_report(data, output_path)
    click.echo(f"Report generated: {output_path}")


@main.command()
def serve():
    """Start the FastAPI server (JSON API)."""
    import uvicorn

    settings = get_settings()
    click.echo(f"Starting Windload server on http://{settings.host}:{settings.port}")
    uvicorn.run("windload.api:app", host=settings.host, port=settings.port, reload=True)


if __name__ == "__main__":
    main()
