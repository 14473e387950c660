"""
Audit trail formatting for the FPR calculator.

Provides the shared formatting used in trail lines and, for tabular
output, a Polars expression namespace:
- format_percent(value) - "67.5%" from a percent value
- format_fraction(value) - "10%" from a fraction (CCFs, haircuts)
- format_amount(value) - "10,500.00"
- nest_lines(lines, prefix) - indent a nested classification's trail
- `expr.fpr_audit.format_percent()` - same as format_percent, per column

Usage:
    import polars as pl
    import fpr_calc.engine.audit  # Register namespace

    df.with_columns(
        pl.col("final_weight").fpr_audit.format_percent().alias("final_weight_fmt"),
    )

Formatting is locale-independent so identical inputs always produce
byte-identical trails.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

import polars as pl


def format_number(value: Decimal) -> str:
    """Format a Decimal without trailing zeros or exponent (100, 67.5, 0.25)."""
    normalized = value.normalize()
    if normalized == 0:
        return "0"
    return f"{normalized:f}"


def format_percent(value: Decimal) -> str:
    """Format a percent value (e.g. Decimal("67.50") -> "67.5%")."""
    return f"{format_number(value)}%"


def format_fraction(value: Decimal) -> str:
    """Format a fraction as a percent (e.g. Decimal("0.10") -> "10%")."""
    return format_percent(value * 100)


def format_amount(value: Decimal) -> str:
    """Format a monetary amount with thousand separators and two decimals."""
    return f"{value:,.2f}"


def nest_lines(lines: Iterable[str], prefix: str) -> tuple[str, ...]:
    """Prefix each line of a nested classification's trail."""
    return tuple(f"{prefix}{line}" for line in lines)


# =============================================================================
# EXPRESSION NAMESPACE
# =============================================================================


@pl.api.register_expr_namespace("fpr_audit")
class AuditExpr:
    """
    Audit formatting namespace for Polars Expressions.

    Example:
        df.with_columns(
            pl.col("ead").fpr_audit.format_amount().alias("ead_formatted"),
        )
    """

    def __init__(self, expr: pl.Expr) -> None:
        self._expr = expr

    def format_percent(self, decimals: int = 1) -> pl.Expr:
        """
        Format a percent-valued column.

        Args:
            decimals: Number of decimal places

        Returns:
            Expression formatted as percentage string (e.g., "67.5%")
        """
        return pl.concat_str([
            self._expr.round(decimals).cast(pl.String),
            pl.lit("%"),
        ])

    def format_amount(self, decimals: int = 2) -> pl.Expr:
        """
        Format a monetary column.

        Args:
            decimals: Number of decimal places

        Returns:
            Expression formatted as string
        """
        return self._expr.round(decimals).cast(pl.String)
