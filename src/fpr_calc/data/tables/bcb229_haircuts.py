"""
Supervisory haircuts for the comprehensive approach (Circular BCB 3.809 Arts. 22-24).

Haircuts are fractions (Decimal("0.25") = 25%).

The comprehensive approach adjusts both the exposure and the collateral:
    E* = max(0, E x (1 + He) - C x (1 - Hc - Hfx))

Where:
    E = Exposure value (EAD)
    He = Exposure haircut (maturity mismatch)
    C = Collateral market value
    Hc = Collateral haircut by type
    Hfx = FX mismatch haircut

Reference:
    Circular BCB 3.809/2016 Art. 22: Collateral haircuts
    Circular BCB 3.809/2016 Art. 23: Exposure haircut
    Circular BCB 3.809/2016 Art. 24: Currency mismatch haircut
"""

from decimal import Decimal

import polars as pl

from fpr_calc.domain.enums import CollateralType, Currency


# =============================================================================
# COLLATERAL HAIRCUTS (Art. 22)
# =============================================================================

COLLATERAL_HAIRCUTS: dict[CollateralType, Decimal] = {
    # Deposits and gold held at the institution
    CollateralType.DEMAND_DEPOSIT: Decimal("0.00"),
    CollateralType.SAVINGS_DEPOSIT: Decimal("0.00"),
    CollateralType.GOLD: Decimal("0.00"),

    # Federal government bonds in local currency
    CollateralType.GOVERNMENT_BOND: Decimal("0.00"),

    # Senior private debt
    CollateralType.PRIVATE_BOND: Decimal("0.25"),

    # Conservative default
    CollateralType.OTHER: Decimal("0.30"),
}

# Collateral types recognised without further eligibility checks
ALWAYS_ELIGIBLE_COLLATERAL: frozenset[CollateralType] = frozenset({
    CollateralType.DEMAND_DEPOSIT,
    CollateralType.SAVINGS_DEPOSIT,
    CollateralType.GOLD,
    CollateralType.GOVERNMENT_BOND,
})


# =============================================================================
# EXPOSURE AND FX HAIRCUTS (Arts. 23-24)
# =============================================================================

MATURITY_MISMATCH_HAIRCUT: Decimal = Decimal("0.30")
FX_HAIRCUT: Decimal = Decimal("0.08")


def _create_haircut_df() -> pl.DataFrame:
    """Create collateral haircut lookup DataFrame."""
    return pl.DataFrame({
        "collateral_type": [ct.value for ct in COLLATERAL_HAIRCUTS],
        "haircut": [float(h) for h in COLLATERAL_HAIRCUTS.values()],
        "always_eligible": [ct in ALWAYS_ELIGIBLE_COLLATERAL for ct in COLLATERAL_HAIRCUTS],
    }).with_columns([
        pl.col("haircut").cast(pl.Float64),
    ])


def get_haircut_table() -> pl.DataFrame:
    """
    Get collateral haircut lookup table as DataFrame.

    Returns:
        DataFrame with columns: collateral_type, haircut, always_eligible
    """
    return _create_haircut_df()


def lookup_collateral_haircut(collateral_type: CollateralType | None) -> Decimal:
    """Look up Hc for a collateral type (unknown types take the OTHER haircut)."""
    return COLLATERAL_HAIRCUTS.get(collateral_type, COLLATERAL_HAIRCUTS[CollateralType.OTHER])


def lookup_fx_haircut(exposure_currency: Currency, collateral_currency: Currency) -> Decimal:
    """Look up Hfx: 8% when currencies differ, otherwise 0%."""
    if exposure_currency == collateral_currency:
        return Decimal("0.00")
    return FX_HAIRCUT


def lookup_exposure_haircut(maturity_mismatch: bool = False) -> Decimal:
    """Look up He: 30% when a maturity mismatch is flagged, otherwise 0%."""
    return MATURITY_MISMATCH_HAIRCUT if maturity_mismatch else Decimal("0.00")


def calculate_adjusted_collateral_value(
    collateral_value: Decimal,
    collateral_haircut: Decimal,
    fx_haircut: Decimal = Decimal("0.00"),
) -> Decimal:
    """
    Calculate collateral value after haircuts.

    Formula: C x (1 - Hc - Hfx)

    Args:
        collateral_value: Market value of collateral
        collateral_haircut: Collateral-specific haircut (Hc)
        fx_haircut: FX mismatch haircut (Hfx)

    Returns:
        Adjusted collateral value
    """
    return collateral_value * (Decimal("1") - collateral_haircut - fx_haircut)
