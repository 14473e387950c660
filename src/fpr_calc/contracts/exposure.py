"""
Exposure input record for the FPR calculator.

A single Exposure is the closed-schema input of one calculation. It is
composed of category-specific attribute bags, each a frozen dataclass
with conservative defaults so callers only populate what applies:

- SovereignInfo: Sovereign kind and rating buckets
- InstitutionInfo: Financial institution category and treatment flags
- CorporateInfo: Size flags and specialised financing
- RetailInfo: Retail eligibility, transactor and payroll tenor
- RealEstateInfo: Property, LTV, eligibility and construction flags
- FundInfo: Fund approach, look-through weight and mandate
- PublicSectorInfo: Public sector entity type
- DefaultInfo: Default flag and provision percent
- SpecialInfo: Regulatory overrides (subordination, equity, tax credit...)
- CRMInfo: Guarantor / insurer substitution, netting and collateral
- FloorInfo: Floor triggers
- ExposureAmounts: Balances and CCF selectors for the EAD engine

Percentages, numeric CRM weights and amounts are typed loosely (NumericInput) because
they arrive from a form layer; the engine coerces them and recovers from
values that are not numbers.

Records are never mutated. Second-pass classifications derive new
records via dataclasses.replace().
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from fpr_calc.domain.enums import (
    CCFDetailType,
    CCFType,
    CollateralType,
    CounterpartyType,
    Currency,
    EquityTier,
    FundApproach,
    FundMandate,
    InstitutionCategory,
    MultilateralRatingBucket,
    OtherAssetType,
    OverrideTier,
    ProductType,
    ProjectFinancePhase,
    PropertyType,
    PublicSectorType,
    RatingBucket,
    SovereignKind,
    SpecialisedFinancing,
)

# Values supplied by the caller that the engine coerces to Decimal
NumericInput = Decimal | int | float | str | None


def to_decimal(value: object) -> Decimal | None:
    """
    Coerce a caller-supplied value to a finite Decimal.

    Returns None for None, booleans, non-numeric strings, NaN and
    infinities, so callers can apply their own fallback.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None

    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None

    return None


@dataclass(frozen=True)
class SovereignInfo:
    """Sovereign / multilateral attributes."""

    kind: SovereignKind = SovereignKind.REGULAR
    rating: RatingBucket | None = None
    multilateral_rating: MultilateralRatingBucket | None = None


@dataclass(frozen=True)
class InstitutionInfo:
    """
    Financial institution attributes.

    Attributes:
        category: Prudential category A/B/C
        tenor_90d: Original tenor up to 90 days
        tier1_high: Tier 1 ratio >= 14%
        leverage_high: Leverage ratio >= 5% (joint with tier1_high)
        trade_finance_1y: Trade finance with tenor up to one year
        netting_eligible: Covered by an eligible netting agreement
    """

    category: InstitutionCategory = InstitutionCategory.C
    tenor_90d: bool = False
    tier1_high: bool = False
    leverage_high: bool = False
    trade_finance_1y: bool = False
    netting_eligible: bool = False


@dataclass(frozen=True)
class CorporateInfo:
    """Corporate attributes."""

    large_low_risk: bool = False
    sme: bool = False
    financing: SpecialisedFinancing = SpecialisedFinancing.NONE
    project_phase: ProjectFinancePhase | None = None
    annual_revenue: Decimal | None = None  # Validation only (SME limit)


@dataclass(frozen=True)
class RetailInfo:
    """Retail (individual) attributes."""

    eligible: bool = False
    transactor: bool = False
    no_draw_360d: bool = False
    payroll_tenor_years: Decimal | None = None


@dataclass(frozen=True)
class RealEstateInfo:
    """
    Real estate attributes.

    Attributes:
        property_type: Residential or non-residential
        cash_flow_dependent: Repayment depends on the property's cash flows
        ltv: Loan-to-value in percent
        guarantee_eligible: Real estate guarantee meets eligibility criteria
        completed: Construction completed
        contract_pre_cutoff: Under-construction contract signed up to 2023
        contract_post_cutoff: Under-construction contract signed from 2024
    """

    property_type: PropertyType = PropertyType.RESIDENTIAL
    cash_flow_dependent: bool = False
    ltv: NumericInput = Decimal("0")
    guarantee_eligible: bool = False
    completed: bool = True
    contract_pre_cutoff: bool = False
    contract_post_cutoff: bool = False


@dataclass(frozen=True)
class FundInfo:
    """Investment fund attributes."""

    approach: FundApproach = FundApproach.NO_INFORMATION
    look_through_weight: Decimal | None = None
    mandate: FundMandate | None = None


@dataclass(frozen=True)
class PublicSectorInfo:
    """Public sector attributes. The rating is informational only."""

    kind: PublicSectorType = PublicSectorType.STATE
    rating: RatingBucket | None = None


@dataclass(frozen=True)
class DefaultInfo:
    """Default / impairment attributes."""

    in_default: bool = False
    provision_percent: NumericInput = Decimal("0")


@dataclass(frozen=True)
class SpecialInfo:
    """Regulatory overrides checked before any counterparty rule."""

    negative_equity_adjustment: bool = False
    subordinated: bool = False
    equity: EquityTier = EquityTier.NONE
    tax_credit: OverrideTier = OverrideTier.NONE
    receivables: OverrideTier = OverrideTier.NONE


@dataclass(frozen=True)
class CollateralPosting:
    """A single financial collateral posting."""

    collateral_type: CollateralType
    currency: Currency
    value: NumericInput


@dataclass(frozen=True)
class CRMInfo:
    """
    Credit risk mitigation attributes.

    Guarantor substitution has priority over credit insurance when both
    are requested.
    A collateral maturity mismatch grosses the EAD up by the exposure
    haircut (He) before collateral is deducted.
    """

    guarantor_substitution: bool = False
    guarantor_weight: NumericInput = None
    credit_insurance: bool = False
    insurer_weight: NumericInput = None
    netting_agreement: bool = False
    collateral: tuple[CollateralPosting, ...] = field(default_factory=tuple)
    maturity_mismatch: bool = False  # Collateral maturity shorter than the exposure's


@dataclass(frozen=True)
class FloorInfo:
    """Floor triggers."""

    custody_risk: bool = False  # Cash held outside direct possession


@dataclass(frozen=True)
class ExposureAmounts:
    """Balances and CCF selectors for the EAD calculation."""

    drawn_balance: NumericInput = Decimal("0")
    undrawn_limit: NumericInput = Decimal("0")
    ccf_type: CCFType = CCFType.OTHER
    ccf_detail: CCFDetailType | None = None
    ccf_override: NumericInput = None


@dataclass(frozen=True)
class Exposure:
    """
    A single credit exposure.

    Attributes:
        product: Product category
        counterparty: Counterparty category
        exposure_currency: Currency of the exposure
        income_currency: Currency of the obligor's income
        hedged_90: Hedge covers at least 90% of the mismatch
        other_asset: Other asset sub-type (only read for OTHER products)
        amounts: Balances for EAD; None skips EAD, mitigation and RWA
    """

    product: ProductType
    counterparty: CounterpartyType
    exposure_currency: Currency = Currency.BRL
    income_currency: Currency = Currency.BRL
    hedged_90: bool = False
    sovereign: SovereignInfo = field(default_factory=SovereignInfo)
    institution: InstitutionInfo = field(default_factory=InstitutionInfo)
    corporate: CorporateInfo = field(default_factory=CorporateInfo)
    retail: RetailInfo = field(default_factory=RetailInfo)
    real_estate: RealEstateInfo = field(default_factory=RealEstateInfo)
    fund: FundInfo = field(default_factory=FundInfo)
    public_sector: PublicSectorInfo = field(default_factory=PublicSectorInfo)
    other_asset: OtherAssetType | None = None
    default: DefaultInfo = field(default_factory=DefaultInfo)
    special: SpecialInfo = field(default_factory=SpecialInfo)
    crm: CRMInfo = field(default_factory=CRMInfo)
    floors: FloorInfo = field(default_factory=FloorInfo)
    amounts: ExposureAmounts | None = None

    @property
    def has_currency_mismatch(self) -> bool:
        """Exposure and income currencies differ and the hedge is below 90%."""
        return self.exposure_currency != self.income_currency and not self.hedged_90
