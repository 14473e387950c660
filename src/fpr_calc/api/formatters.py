"""
Result formatting utilities for the FPR calculator API.

trail_to_frame: Audit trail of one result as a DataFrame
result_to_frame: One row per result (RESULT_SCHEMA)
format_results: Adds display columns via the fpr_audit namespace

Decimals are converted to Float64 for tabular display only; the
CalculationResult keeps the exact values.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import polars as pl

import fpr_calc.engine.audit  # noqa: F401  Registers fpr_audit namespace
from fpr_calc.data.schemas import RESULT_SCHEMA, TRAIL_SCHEMA

if TYPE_CHECKING:
    from decimal import Decimal

    from fpr_calc.contracts.bundles import CalculationResult


def _to_float(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


def trail_to_frame(result: CalculationResult) -> pl.DataFrame:
    """
    Render the audit trail of a result.

    Args:
        result: Calculation result

    Returns:
        DataFrame with columns: step (1-based), line
    """
    return pl.DataFrame(
        {
            "step": list(range(1, len(result.trail) + 1)),
            "line": list(result.trail),
        },
        schema=TRAIL_SCHEMA,
    )


def result_to_frame(results: CalculationResult | Sequence[CalculationResult]) -> pl.DataFrame:
    """
    Render one or more results as rows.

    Args:
        results: A result or a sequence of results

    Returns:
        DataFrame following RESULT_SCHEMA; amount columns are null for
        results calculated without amounts
    """
    if not isinstance(results, Sequence):
        results = [results]

    return pl.DataFrame(
        {
            "label": [r.label.value for r in results],
            "base_weight": [float(r.base_weight) for r in results],
            "final_weight": [float(r.final_weight) for r in results],
            "ead": [_to_float(r.ead) for r in results],
            "adjusted_ead": [_to_float(r.adjusted_ead) for r in results],
            "rwa": [_to_float(r.rwa) for r in results],
        },
        schema=RESULT_SCHEMA,
    )


def format_results(results_df: pl.DataFrame) -> pl.DataFrame:
    """
    Add formatted display columns to a results frame.

    Args:
        results_df: DataFrame following RESULT_SCHEMA

    Returns:
        DataFrame with *_fmt string columns appended
    """
    return results_df.with_columns(
        pl.col("base_weight").fpr_audit.format_percent().alias("base_weight_fmt"),
        pl.col("final_weight").fpr_audit.format_percent().alias("final_weight_fmt"),
        pl.col("ead").fpr_audit.format_amount().alias("ead_fmt"),
        pl.col("rwa").fpr_audit.format_amount().alias("rwa_fmt"),
    )
