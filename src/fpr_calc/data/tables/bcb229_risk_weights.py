"""
Res. BCB 229/2022 standardised risk weight (FPR) tables.

Weights are expressed in percent (e.g. Decimal("67.5") = 67.5%), matching
the regulation's own presentation. Module-level dicts are the source of
truth for the classifier; the get_*_table() helpers render them as Polars
DataFrames for display and export.

References:
    - Res. BCB 229/2022 Art. 27: Foreign sovereigns
    - Res. BCB 229/2022 Art. 29: Multilateral organisations
    - Res. BCB 229/2022 Arts. 32-35: Financial institutions
    - Res. BCB 229/2022 Arts. 36-38: Corporates and specialised financing
    - Res. BCB 229/2022 Arts. 39-41: Retail
    - Res. BCB 229/2022 Arts. 42-46: Real estate
    - Res. BCB 229/2022 Arts. 47-53: Investment funds
    - Res. BCB 229/2022 Arts. 57-58: Public sector
    - Res. BCB 229/2022 Art. 64: Exposures in default
    - Res. BCB 229/2022 Art. 66: Other assets
    - Res. BCB 452/2025: Negative equity adjustment
"""

from decimal import Decimal
from typing import TypedDict

import polars as pl

from fpr_calc.domain.enums import (
    EquityTier,
    FundMandate,
    InstitutionCategory,
    MultilateralRatingBucket,
    OtherAssetType,
    OverrideTier,
    ProjectFinancePhase,
    PublicSectorType,
    RatingBucket,
)


# =============================================================================
# BOUNDS AND GENERIC WEIGHTS
# =============================================================================

MIN_RISK_WEIGHT: Decimal = Decimal("0")
MAX_RISK_WEIGHT: Decimal = Decimal("1250")
DEFAULT_RISK_WEIGHT: Decimal = Decimal("100")

# Cash held outside the institution's direct possession
CUSTODY_FLOOR_RISK_WEIGHT: Decimal = Decimal("20")

CURRENCY_MISMATCH_MULTIPLIER: Decimal = Decimal("1.5")
CURRENCY_MISMATCH_CAP: Decimal = Decimal("150")


# =============================================================================
# SOVEREIGN RISK WEIGHTS (Art. 27)
# =============================================================================

DOMESTIC_SOVEREIGN_RISK_WEIGHT: Decimal = Decimal("0")  # Treasury / BCB in BRL
LISTED_MULTILATERAL_RISK_WEIGHT: Decimal = Decimal("0")

SOVEREIGN_RISK_WEIGHTS: dict[RatingBucket, Decimal] = {
    RatingBucket.AAA_TO_AA_MINUS: Decimal("0"),
    RatingBucket.A_PLUS_TO_A_MINUS: Decimal("20"),
    RatingBucket.BBB_PLUS_TO_BBB_MINUS: Decimal("50"),
    RatingBucket.BB_PLUS_TO_B_MINUS: Decimal("100"),
    RatingBucket.BELOW_B_MINUS: Decimal("150"),
    RatingBucket.UNRATED: Decimal("100"),  # Not the below-B- bucket
}


def _create_sovereign_df() -> pl.DataFrame:
    """Create foreign sovereign risk weight lookup DataFrame."""
    return pl.DataFrame({
        "rating_bucket": [bucket.value for bucket in SOVEREIGN_RISK_WEIGHTS],
        "risk_weight": [float(rw) for rw in SOVEREIGN_RISK_WEIGHTS.values()],
        "exposure_class": ["FOREIGN_SOVEREIGN"] * len(SOVEREIGN_RISK_WEIGHTS),
    })


# =============================================================================
# MULTILATERAL RISK WEIGHTS (Art. 29)
# =============================================================================

MULTILATERAL_RISK_WEIGHTS: dict[MultilateralRatingBucket, Decimal] = {
    MultilateralRatingBucket.AAA_TO_AA_MINUS: Decimal("20"),
    MultilateralRatingBucket.A_PLUS_TO_A_MINUS: Decimal("30"),
    MultilateralRatingBucket.BBB_PLUS_TO_BBB_MINUS_OR_UNRATED: Decimal("50"),
    MultilateralRatingBucket.BB_PLUS_TO_B_MINUS: Decimal("100"),
    MultilateralRatingBucket.BELOW_B_MINUS: Decimal("150"),
}


def _create_multilateral_df() -> pl.DataFrame:
    """Create unlisted multilateral risk weight lookup DataFrame."""
    return pl.DataFrame({
        "rating_bucket": [bucket.value for bucket in MULTILATERAL_RISK_WEIGHTS],
        "risk_weight": [float(rw) for rw in MULTILATERAL_RISK_WEIGHTS.values()],
        "exposure_class": ["MULTILATERAL"] * len(MULTILATERAL_RISK_WEIGHTS),
    })


# =============================================================================
# FINANCIAL INSTITUTION RISK WEIGHTS (Arts. 32-35)
# =============================================================================

class InstitutionParams(TypedDict):
    """Candidate weights for a financial institution category."""
    tenor_up_to_90d: Decimal
    tenor_over_90d: Decimal
    strong_capital: Decimal | None  # Tier 1 >= 14% AND leverage ratio >= 5%
    trade_finance: Decimal
    netting: Decimal


INSTITUTION_RISK_WEIGHTS: dict[InstitutionCategory, InstitutionParams] = {
    InstitutionCategory.A: {
        "tenor_up_to_90d": Decimal("20"),
        "tenor_over_90d": Decimal("40"),
        "strong_capital": Decimal("30"),
        "trade_finance": Decimal("20"),
        "netting": Decimal("40"),
    },
    InstitutionCategory.B: {
        "tenor_up_to_90d": Decimal("50"),
        "tenor_over_90d": Decimal("75"),
        "strong_capital": None,  # No strong-capital treatment for B
        "trade_finance": Decimal("50"),
        "netting": Decimal("75"),
    },
}

INSTITUTION_CATEGORY_C_RISK_WEIGHT: Decimal = Decimal("150")


def _create_institution_df() -> pl.DataFrame:
    """Create financial institution candidate weight DataFrame."""
    rows = []
    for category, params in INSTITUTION_RISK_WEIGHTS.items():
        for treatment, rw in params.items():
            if rw is not None:
                rows.append((category.value, treatment, float(rw)))
    rows.append((InstitutionCategory.C.value, "fixed", float(INSTITUTION_CATEGORY_C_RISK_WEIGHT)))

    return pl.DataFrame(
        rows,
        schema=["category", "treatment", "risk_weight"],
        orient="row",
    )


# =============================================================================
# CORPORATE RISK WEIGHTS (Arts. 36-38)
# =============================================================================

class CorporateParams(TypedDict):
    """Corporate risk weights by counterparty characteristic."""
    large_low_risk: Decimal
    sme: Decimal
    specialised_financing: Decimal  # Object / commodities financing
    default: Decimal


CORPORATE_RISK_WEIGHTS: CorporateParams = {
    "large_low_risk": Decimal("65"),
    "sme": Decimal("85"),
    "specialised_financing": Decimal("100"),
    "default": Decimal("100"),
}

# Phased project finance treatment; a flat 130% equals the pre-operational phase
PROJECT_FINANCE_RISK_WEIGHTS: dict[ProjectFinancePhase, Decimal] = {
    ProjectFinancePhase.PRE_OPERATIONAL: Decimal("130"),
    ProjectFinancePhase.OPERATIONAL: Decimal("100"),
    ProjectFinancePhase.OPERATIONAL_HIGH_QUALITY: Decimal("80"),
}


def _create_corporate_df() -> pl.DataFrame:
    """Create corporate and project finance risk weight DataFrame."""
    treatments = list(CORPORATE_RISK_WEIGHTS.keys()) + [
        f"project_finance_{phase.value}" for phase in PROJECT_FINANCE_RISK_WEIGHTS
    ]
    weights = list(CORPORATE_RISK_WEIGHTS.values()) + list(PROJECT_FINANCE_RISK_WEIGHTS.values())
    return pl.DataFrame({
        "treatment": treatments,
        "risk_weight": [float(rw) for rw in weights],
        "exposure_class": ["CORPORATE"] * len(treatments),
    })


# =============================================================================
# RETAIL RISK WEIGHTS (Arts. 39-41)
# =============================================================================

class RetailParams(TypedDict):
    """Retail risk weights and thresholds."""
    transactor: Decimal  # Also lines without drawings in 360 days
    eligible: Decimal
    non_eligible: Decimal
    payroll_long_tenor: Decimal
    payroll_tenor_threshold_years: Decimal


RETAIL_PARAMS: RetailParams = {
    "transactor": Decimal("45"),
    "eligible": Decimal("75"),
    "non_eligible": Decimal("100"),
    "payroll_long_tenor": Decimal("150"),
    "payroll_tenor_threshold_years": Decimal("5"),
}

# Maximum aggregate exposure per retail client (R$ 5MM)
RETAIL_EXPOSURE_LIMIT: Decimal = Decimal("5000000")


def _create_retail_df() -> pl.DataFrame:
    """Create retail risk weight DataFrame."""
    params = RETAIL_PARAMS
    return pl.DataFrame({
        "treatment": ["transactor", "eligible", "non_eligible", "payroll_long_tenor"],
        "risk_weight": [
            float(params["transactor"]),
            float(params["eligible"]),
            float(params["non_eligible"]),
            float(params["payroll_long_tenor"]),
        ],
        "exposure_class": ["RETAIL"] * 4,
    })


# =============================================================================
# REAL ESTATE RISK WEIGHTS (Arts. 42-46)
# =============================================================================

# (LTV upper bound in percent, risk weight); None is the top band
LTVBand = tuple[Decimal | None, Decimal]

RESIDENTIAL_LTV_LADDER: tuple[LTVBand, ...] = (
    (Decimal("10"), Decimal("20")),
    (Decimal("20"), Decimal("25")),
    (Decimal("30"), Decimal("30")),
    (Decimal("40"), Decimal("35")),
    (Decimal("50"), Decimal("45")),
    (Decimal("60"), Decimal("60")),
    (Decimal("70"), Decimal("75")),
    (None, Decimal("105")),
)

RESIDENTIAL_DEPENDENT_LTV_LADDER: tuple[LTVBand, ...] = (
    (Decimal("10"), Decimal("30")),
    (Decimal("20"), Decimal("35")),
    (Decimal("30"), Decimal("45")),
    (Decimal("40"), Decimal("60")),
    (Decimal("50"), Decimal("75")),
    (Decimal("60"), Decimal("90")),
    (Decimal("70"), Decimal("105")),
    (None, Decimal("150")),
)


class NonResidentialParams(TypedDict):
    """Non-residential real estate parameters."""
    ltv_threshold: Decimal
    rw_cap_no_dependency: Decimal  # min(60, obligor weight) at or below threshold
    rw_dependent_low_ltv: Decimal
    rw_dependent_high_ltv: Decimal


NON_RESIDENTIAL_PARAMS: NonResidentialParams = {
    "ltv_threshold": Decimal("60"),
    "rw_cap_no_dependency": Decimal("60"),
    "rw_dependent_low_ltv": Decimal("70"),
    "rw_dependent_high_ltv": Decimal("90"),
}

UNDER_CONSTRUCTION_PRE_CUTOFF_RISK_WEIGHT: Decimal = Decimal("50")  # Contracts up to 2023
UNDER_CONSTRUCTION_POST_CUTOFF_RISK_WEIGHT: Decimal = Decimal("150")  # Contracts from 2024


def _create_residential_df() -> pl.DataFrame:
    """Create residential LTV ladder DataFrame (both dependency variants)."""
    rows = []
    for dependent, ladder in (
        (False, RESIDENTIAL_LTV_LADDER),
        (True, RESIDENTIAL_DEPENDENT_LTV_LADDER),
    ):
        for upper, rw in ladder:
            rows.append((dependent, None if upper is None else float(upper), float(rw)))

    return pl.DataFrame(
        rows,
        schema={"cash_flow_dependent": pl.Boolean, "ltv_upper": pl.Float64, "risk_weight": pl.Float64},
        orient="row",
    )


# =============================================================================
# FUND RISK WEIGHTS (Arts. 47-53)
# =============================================================================

FUND_MANDATE_RISK_WEIGHTS: dict[FundMandate, Decimal] = {
    FundMandate.EQUITY: Decimal("400"),
    FundMandate.FIXED_INCOME: Decimal("100"),
    FundMandate.MIXED: Decimal("150"),
    FundMandate.OTHER: Decimal("100"),
}

FUND_CONSERVATIVE_RISK_WEIGHT: Decimal = Decimal("100")


# =============================================================================
# PUBLIC SECTOR RISK WEIGHTS (Arts. 57-58)
# =============================================================================

# No rating-based differentiation for sub-national entities
PUBLIC_SECTOR_RISK_WEIGHTS: dict[PublicSectorType, Decimal] = {
    kind: Decimal("100") for kind in PublicSectorType
}


# =============================================================================
# DEFAULTED EXPOSURES (Art. 64)
# =============================================================================

class DefaultParams(TypedDict):
    """Provision thresholds (percent) and weights for defaulted exposures."""
    high_provision_threshold: Decimal
    medium_provision_threshold: Decimal
    rw_high_provision: Decimal
    rw_medium_provision: Decimal
    rw_low_provision: Decimal


DEFAULT_PARAMS: DefaultParams = {
    "high_provision_threshold": Decimal("50"),
    "medium_provision_threshold": Decimal("20"),
    "rw_high_provision": Decimal("50"),
    "rw_medium_provision": Decimal("100"),
    "rw_low_provision": Decimal("150"),
}


# =============================================================================
# OTHER ASSETS (Art. 66) AND SPECIAL OVERRIDES
# =============================================================================

OTHER_ASSET_RISK_WEIGHTS: dict[OtherAssetType, Decimal] = {
    OtherAssetType.CASH: Decimal("0"),
    OtherAssetType.GOLD: Decimal("0"),
    OtherAssetType.LISTED_EQUITY: Decimal("250"),
    OtherAssetType.UNLISTED_EQUITY: Decimal("400"),
    OtherAssetType.FIXED_ASSET: Decimal("100"),
    OtherAssetType.OTHER: Decimal("100"),
}

NEGATIVE_EQUITY_ADJUSTMENT_RISK_WEIGHT: Decimal = Decimal("100")
SUBORDINATED_RISK_WEIGHT: Decimal = Decimal("150")

EQUITY_RISK_WEIGHTS: dict[EquityTier, Decimal] = {
    EquityTier.RW_250: Decimal("250"),
    EquityTier.RW_1250: Decimal("1250"),
}

# Shared by tax credits and court-ordered receivables
OVERRIDE_TIER_RISK_WEIGHTS: dict[OverrideTier, Decimal] = {
    OverrideTier.RW_100: Decimal("100"),
    OverrideTier.RW_600: Decimal("600"),
    OverrideTier.RW_1250: Decimal("1250"),
}


def _create_other_assets_df() -> pl.DataFrame:
    """Create other asset carve-out DataFrame."""
    return pl.DataFrame({
        "asset_type": [asset.value for asset in OTHER_ASSET_RISK_WEIGHTS],
        "risk_weight": [float(rw) for rw in OTHER_ASSET_RISK_WEIGHTS.values()],
        "exposure_class": ["OTHER_ASSETS"] * len(OTHER_ASSET_RISK_WEIGHTS),
    })


# =============================================================================
# COMBINED TABLES AND LOOKUPS
# =============================================================================

def get_all_risk_weight_tables() -> dict[str, pl.DataFrame]:
    """
    Get all Res. BCB 229 risk weight tables.

    Returns:
        Dictionary of DataFrames keyed by table name
    """
    return {
        "foreign_sovereign": _create_sovereign_df(),
        "multilateral": _create_multilateral_df(),
        "financial_institution": _create_institution_df(),
        "corporate": _create_corporate_df(),
        "retail": _create_retail_df(),
        "residential": _create_residential_df(),
        "other_assets": _create_other_assets_df(),
    }


def lookup_sovereign_risk_weight(rating: RatingBucket | None) -> Decimal:
    """
    Look up a foreign sovereign risk weight.

    A missing rating is treated as unrated (100%).
    """
    if rating is None:
        return SOVEREIGN_RISK_WEIGHTS[RatingBucket.UNRATED]
    return SOVEREIGN_RISK_WEIGHTS[rating]


def lookup_multilateral_risk_weight(rating: MultilateralRatingBucket | None) -> Decimal:
    """Look up an unlisted multilateral risk weight (missing rating = unrated, 50%)."""
    if rating is None:
        return MULTILATERAL_RISK_WEIGHTS[MultilateralRatingBucket.BBB_PLUS_TO_BBB_MINUS_OR_UNRATED]
    return MULTILATERAL_RISK_WEIGHTS[rating]


def lookup_ltv_band(ltv: Decimal, dependent: bool = False) -> tuple[Decimal, str]:
    """
    Look up the residential risk weight for an LTV percentage.

    Bands are inclusive at their upper bound: LTV 60 falls in the
    "up to 60%" band.

    Args:
        ltv: Loan-to-value in percent
        dependent: Whether repayment depends on the property's cash flows

    Returns:
        Tuple of (risk_weight, band description)
    """
    ladder = RESIDENTIAL_DEPENDENT_LTV_LADDER if dependent else RESIDENTIAL_LTV_LADDER

    for upper, rw in ladder:
        if upper is not None and ltv <= upper:
            return rw, f"LTV <= {upper}%"

    last_upper = ladder[-2][0]
    return ladder[-1][1], f"LTV > {last_upper}%"


def lookup_default_risk_weight(provision_percent: Decimal) -> Decimal:
    """Look up the defaulted-exposure weight for a provision percentage."""
    params = DEFAULT_PARAMS
    if provision_percent >= params["high_provision_threshold"]:
        return params["rw_high_provision"]
    if provision_percent >= params["medium_provision_threshold"]:
        return params["rw_medium_provision"]
    return params["rw_low_provision"]


def calculate_non_residential_rw(
    ltv: Decimal,
    dependent: bool,
    obligor_rw: Decimal | None = None,
) -> tuple[Decimal | None, str]:
    """
    Calculate the risk weight for completed non-residential real estate.

    Treatment:
    - With dependency: 70% at LTV <= 60%, 90% above
    - Without dependency: min(60%, obligor weight) at LTV <= 60%,
      the obligor weight above

    Args:
        ltv: Loan-to-value in percent
        dependent: Whether repayment depends on the property's cash flows
        obligor_rw: The obligor's own (unsecured) weight; required when
            not dependent

    Returns:
        Tuple of (risk_weight, description); risk_weight is None when the
        obligor weight is required but was not supplied
    """
    params = NON_RESIDENTIAL_PARAMS
    threshold = params["ltv_threshold"]

    if dependent:
        if ltv <= threshold:
            return params["rw_dependent_low_ltv"], f"dependent, LTV <= {threshold}%"
        return params["rw_dependent_high_ltv"], f"dependent, LTV > {threshold}%"

    if obligor_rw is None:
        return None, "obligor weight required"

    if ltv <= threshold:
        cap = params["rw_cap_no_dependency"]
        return min(cap, obligor_rw), f"min({cap}%, obligor {obligor_rw}%)"

    return obligor_rw, f"LTV > {threshold}%, obligor weight"
