"""Tests for windload batch tables."""

import pandas as pd
import pytest

from windload.batch import (
    create_results_dataframe,
    create_summary_table,
    export_to_csv,
    run_batch,
)
from windload.engine import calculate


def test_create_results_dataframe_empty():
    """Test creating DataFrame from empty results."""
    df = create_results_dataframe([])
    assert df.empty


def test_create_results_dataframe_with_data(make_request):
    """Test creating DataFrame from results."""
    results = [calculate(make_request()), calculate(make_request(region="C"))]

    df = create_results_dataframe(results)
    assert len(df) == 2
    assert "vsit_ms" in df.columns
    assert "p_kpa" in df.columns
    assert "cshp_parts" not in df.columns
    assert df["vsit_ms"].iloc[0] == 41.8
    assert df["cpe"].iloc[0] == 0.8
    assert df["unavailable"].iloc[0] == ""


def test_create_summary_table_empty():
    """Test creating summary from empty DataFrame."""
    summary = create_summary_table(pd.DataFrame())
    assert summary.empty


def test_create_summary_table_with_data(make_request):
    """Test creating summary table."""
    results = [calculate(make_request()), calculate(make_request(region="C"))]
    summary = create_summary_table(create_results_dataframe(results))

    assert list(summary.columns) == ["metric", "value"]
    values = dict(zip(summary["metric"], summary["value"]))
    assert values["count"] == 2
    assert values["min_vsit_ms"] == 41.8
    assert values["max_vsit_ms"] == 49.14
    assert values["mean_cdyn"] == 1.0


def test_run_batch():
    cases = pd.DataFrame(
        [
            {"region": "B1", "design_life": "50", "importance": 2, "height_m": 10.0, "cpe": None},
            {"region": "B1", "design_life": "50", "importance": 2, "height_m": 10.0, "cpe": 0.4},
            {"region": "B1", "design_life": "50", "importance": 9, "height_m": 10.0, "cpe": None},
        ]
    )
    results = run_batch(cases)

    assert len(results) == 3
    assert results["error"].iloc[0] is None
    assert results["vsit_ms"].iloc[0] == 41.8
    assert results["p_kpa"].iloc[1] == pytest.approx(results["p_kpa"].iloc[0] / 2)
    assert isinstance(results["error"].iloc[2], str)
    assert pd.isna(results["vsit_ms"].iloc[2])


def test_run_batch_blank_cells_are_absent():
    cases = pd.DataFrame(
        [
            {"region": "B1", "design_life": "50", "importance": 2, "height_m": 20.0, "level_override_m": None},
            {"region": "B1", "design_life": "50", "importance": 2, "height_m": 20.0, "level_override_m": 0.0},
        ]
    )
    results = run_batch(cases)
    assert list(results["hs"]) == [1.25, 1.0]


def test_run_batch_empty():
    assert run_batch(pd.DataFrame()).empty


def test_export_to_csv(tmp_path, make_request):
    df = create_results_dataframe([calculate(make_request())])
    path = tmp_path / "results.csv"
    export_to_csv(df, path)

    reloaded = pd.read_csv(path)
    assert reloaded["vsit_ms"].iloc[0] == 41.8


def test_run_batch_successful_rows_have_no_error():
    cases = pd.DataFrame(
        [
            {"region": "B1", "design_life": "50", "importance": 2, "height_m": 10.0},
            {"region": "C", "design_life": "50", "importance": 2, "height_m": 10.0},
        ]
    )
    results = run_batch(cases)
    assert list(results["error"]) == [None, None]
