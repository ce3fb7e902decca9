"""Pandas-based batch runs and result tables for windload."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import pandas as pd
from pydantic import ValidationError

from windload.engine import calculate
from windload.schemas import WindLoadRequest, WindLoadResult

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ("vsit_ms", "cdyn", "p_kpa")


def create_results_dataframe(results: Iterable[WindLoadResult]) -> pd.DataFrame:
    """
    Create a pandas DataFrame with one row per calculation result.

    Args:
        results: Calculation results

    Returns:
        DataFrame with every result quantity as a column
    """
    rows = []
    for result in results:
        row = result.model_dump(mode="json", exclude={"cshp_parts"})
        row["cpe"] = result.cshp_parts.cpe
        row["unavailable"] = ", ".join(result.unavailable)
        rows.append(row)

    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows)


def create_summary_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Create a summary table from a results DataFrame.

    Args:
        df: DataFrame with calculation results

    Returns:
        Summary DataFrame with count, min, mean and max per key quantity
    """
    if df.empty:
        return pd.DataFrame()

    records = [{"metric": "count", "value": len(df)}]
    for column in SUMMARY_COLUMNS:
        if column not in df.columns:
            continue
        values = pd.to_numeric(df[column], errors="coerce")
        records.extend(
            [
                {"metric": f"min_{column}", "value": values.min()},
                {"metric": f"mean_{column}", "value": values.mean()},
                {"metric": f"max_{column}", "value": values.max()},
            ]
        )
    return pd.DataFrame(records)


def _row_to_request(row: dict[str, Any]) -> WindLoadRequest:
    data = {key: value for key, value in row.items() if value is not None}
    cpe = data.pop("cpe", None)
    if cpe is not None:
        data["shape_factor"] = {"cpe": cpe}
    return WindLoadRequest.model_validate(data)


def run_batch(cases: pd.DataFrame) -> pd.DataFrame:
    """
    Run the calculation for every row of *cases*.

    Columns are named after :class:`WindLoadRequest` fields, plus ``cpe``
    for the external pressure coefficient. Rows that fail validation are
    kept with an ``error`` message instead of results.

    Args:
        cases: One calculation per row

    Returns:
        DataFrame of the input columns followed by result columns
    """
    if cases.empty:
        return pd.DataFrame()

    clean = cases.astype(object).where(pd.notna(cases), None)
    rows = []
    for index, row in enumerate(clean.to_dict(orient="records")):
        try:
            result = calculate(_row_to_request(row))
        except ValidationError as exc:
            logger.warning("Skipping case %d: %s", index, exc.errors()[0]["msg"])
            rows.append({"case": index, "error": str(exc.errors()[0]["msg"])})
            continue
        out = create_results_dataframe([result]).iloc[0].to_dict()
        rows.append({"case": index, "error": None, **out})

    results = pd.DataFrame(rows)
    # successful rows keep error=None rather than NaN
    results["error"] = results["error"].astype(object).where(results["error"].notna(), None)
    return results


def export_to_csv(df: pd.DataFrame, filepath: str | Path) -> None:
    """
    Export DataFrame to CSV file.

    Args:
        df: DataFrame to export
        filepath: Path to save CSV file
    """
    df.to_csv(filepath, index=False)


def export_to_excel(df: pd.DataFrame, filepath: str | Path) -> None:
    """
    Export DataFrame to Excel file.

    Args:
        df: DataFrame to export
        filepath: Path to save Excel file
    """
    df.to_excel(filepath, index=False, engine="openpyxl")


__all__ = [
    "create_results_dataframe",
    "create_summary_table",
    "export_to_csv",
    "export_to_excel",
    "run_batch",
]
