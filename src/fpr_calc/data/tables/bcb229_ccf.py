"""
Credit Conversion Factors (Circular BCB 3.809/2016 Arts. 13-17).

CCFs are fractions (Decimal("0.10") = 10%) that convert the undrawn
limit of an exposure into an on-balance equivalent for EAD purposes.

Reference:
    Circular BCB 3.809/2016 Arts. 13-17: Off-balance sheet items
    Res. BCB 229/2022 Art. 6: Exposure value
"""

from decimal import Decimal

import polars as pl

from fpr_calc.domain.enums import CCFDetailType, CCFType


# =============================================================================
# GENERIC CCF BY SELECTOR
# =============================================================================

CCF_TABLE: dict[CCFType, Decimal] = {
    CCFType.IRREVOCABLE_COMMITMENT: Decimal("0.50"),  # Cannot be cancelled unilaterally
    CCFType.REVOCABLE_COMMITMENT: Decimal("0.10"),
    CCFType.GUARANTEE_ISSUED: Decimal("1.00"),  # Aval, fiança
    CCFType.TRADE_FINANCE: Decimal("0.20"),  # Up to one year
    CCFType.OTHER: Decimal("1.00"),
}


# =============================================================================
# DETAILED CCF
# =============================================================================

DETAILED_CCF_TABLE: dict[CCFDetailType, Decimal] = {
    # Credit commitments
    CCFDetailType.IRREVOCABLE_UP_TO_1Y: Decimal("0.20"),
    CCFDetailType.IRREVOCABLE_OVER_1Y: Decimal("0.50"),
    CCFDetailType.REVOCABLE_UNCONDITIONAL: Decimal("0.10"),
    CCFDetailType.REVOCABLE_CONDITIONAL: Decimal("0.00"),

    # Guarantees
    CCFDetailType.SURETY: Decimal("1.00"),
    CCFDetailType.LETTER_OF_CREDIT: Decimal("0.20"),
    CCFDetailType.PERFORMANCE_GUARANTEE: Decimal("0.50"),

    # Securitisation
    CCFDetailType.SECURITISATION_LIQUIDITY: Decimal("0.50"),
    CCFDetailType.SECURITISATION_CREDIT_ENHANCEMENT: Decimal("1.00"),

    # Retail
    CCFDetailType.CARD_REVOCABLE: Decimal("0.10"),
    CCFDetailType.CARD_IRREVOCABLE: Decimal("0.50"),
    CCFDetailType.OVERDRAFT: Decimal("0.10"),
}


# =============================================================================
# RETAIL OVERRIDES
# =============================================================================

# Eligible retail revolving products take precedence over the generic table
RETAIL_CARD_CCF: Decimal = Decimal("0.10")
RETAIL_OVERDRAFT_CCF: Decimal = Decimal("0.10")

CCF_DESCRIPTIONS: dict[CCFType, str] = {
    CCFType.IRREVOCABLE_COMMITMENT: "Irrevocable credit line (cannot be cancelled unilaterally)",
    CCFType.REVOCABLE_COMMITMENT: "Revocable credit line (can be cancelled unilaterally)",
    CCFType.GUARANTEE_ISSUED: "Guarantee issued (aval, fiança)",
    CCFType.TRADE_FINANCE: "Trade finance with maturity up to one year",
    CCFType.OTHER: "Other off-balance sheet exposures (conservative)",
}


def _create_ccf_df() -> pl.DataFrame:
    """Create CCF lookup DataFrame covering generic and detailed selectors."""
    rows = []

    for ccf_type, ccf in CCF_TABLE.items():
        rows.append({
            "selector": ccf_type.value,
            "level": "generic",
            "ccf": float(ccf),
            "description": CCF_DESCRIPTIONS[ccf_type],
        })

    for detail_type, ccf in DETAILED_CCF_TABLE.items():
        rows.append({
            "selector": detail_type.value,
            "level": "detailed",
            "ccf": float(ccf),
            "description": detail_type.value.replace("_", " "),
        })

    return pl.DataFrame(rows).with_columns([
        pl.col("ccf").cast(pl.Float64),
    ])


def get_ccf_table() -> pl.DataFrame:
    """
    Get CCF lookup table as DataFrame.

    Returns:
        DataFrame with columns: selector, level, ccf, description
    """
    return _create_ccf_df()


def lookup_ccf(
    ccf_type: CCFType | None,
    detail_type: CCFDetailType | None = None,
) -> Decimal:
    """
    Look up the CCF for a selector.

    A detailed selector, when given, takes precedence over the generic one.
    An unknown generic selector falls back to OTHER (100%).

    Args:
        ccf_type: Generic CCF selector
        detail_type: Optional granular selector

    Returns:
        CCF as Decimal
    """
    if detail_type is not None:
        return DETAILED_CCF_TABLE[detail_type]

    return CCF_TABLE.get(ccf_type, CCF_TABLE[CCFType.OTHER])


def calculate_ead_off_balance_sheet(
    drawn_balance: Decimal,
    undrawn_limit: Decimal,
    ccf: Decimal,
    provision_percent: Decimal = Decimal("0"),
) -> tuple[Decimal, Decimal, Decimal]:
    """
    Calculate EAD from balances and a resolved CCF.

    EAD = max(0, drawn + CCF x undrawn - provision% / 100 x drawn)

    Args:
        drawn_balance: Outstanding balance
        undrawn_limit: Unused limit
        ccf: Credit conversion factor
        provision_percent: Provision as percent of the drawn balance

    Returns:
        Tuple of (gross_exposure, provision_amount, ead)
    """
    gross = drawn_balance + ccf * undrawn_limit
    provision = provision_percent / Decimal("100") * drawn_balance
    ead = max(Decimal("0"), gross - provision)
    return gross, provision, ead
