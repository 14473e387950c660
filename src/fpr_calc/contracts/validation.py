"""
Input validation for FPR calculator exposure records.

Validation is advisory: the engine recovers from every finding reported
here (clamping, zero substitution or a conservative fallback), so the
findings explain to the caller why a result may be conservative.

Key functions:
- validate_exposure: Collect all findings for one exposure record
- is_valid_ltv: LTV within plausible bounds
- is_valid_weight: Risk weight within the regulatory bounds
- is_retail_eligible: Individual within the per-client retail limit
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.errors import (
    ERROR_INELIGIBLE_COLLATERAL,
    ERROR_INVALID_GUARANTEE,
    ERROR_INVALID_LTV,
    ERROR_INVALID_PROVISION,
    ERROR_MISSING_INSURER_WEIGHT,
    ERROR_MISSING_RATING,
    ERROR_NEGATIVE_AMOUNT,
    ERROR_RETAIL_LIMIT_EXCEEDED,
    ERROR_SME_REVENUE_EXCEEDED,
    CalculationError,
    business_rule_error,
    crm_warning,
    invalid_value_error,
)
from fpr_calc.contracts.exposure import to_decimal
from fpr_calc.data.tables.bcb229_haircuts import ALWAYS_ELIGIBLE_COLLATERAL
from fpr_calc.domain.enums import (
    CounterpartyType,
    ErrorSeverity,
    ProductType,
    SovereignKind,
)

if TYPE_CHECKING:
    from fpr_calc.contracts.exposure import Exposure


def is_valid_ltv(ltv: Decimal, config: CalculationConfig | None = None) -> bool:
    """Check an LTV percentage is within [0, max_ltv]."""
    config = config or CalculationConfig.bcb_229()
    return Decimal("0") <= ltv <= config.thresholds.max_ltv


def is_valid_weight(weight: Decimal, config: CalculationConfig | None = None) -> bool:
    """Check a risk weight is within the regulatory bounds."""
    config = config or CalculationConfig.bcb_229()
    return config.bounds.minimum <= weight <= config.bounds.maximum


def is_retail_eligible(
    total_exposure: Decimal,
    exposure: Exposure,
    config: CalculationConfig | None = None,
) -> bool:
    """
    Check whether an individual qualifies for eligible retail treatment.

    Requires an individual counterparty flagged as eligible whose total
    exposure with the institution does not exceed the retail limit.
    """
    config = config or CalculationConfig.bcb_229()
    if exposure.counterparty != CounterpartyType.INDIVIDUAL:
        return False
    if not exposure.retail.eligible:
        return False
    return total_exposure <= config.thresholds.retail_exposure_limit


def validate_exposure(
    exposure: Exposure,
    config: CalculationConfig | None = None,
) -> list[CalculationError]:
    """
    Validate an exposure record.

    Never raises; every finding is returned as a CalculationError.

    Args:
        exposure: Exposure record
        config: Optional calculation configuration

    Returns:
        List of findings (empty if the record is clean)
    """
    config = config or CalculationConfig.bcb_229()
    errors: list[CalculationError] = []

    errors.extend(_validate_real_estate(exposure, config))
    errors.extend(_validate_default(exposure))
    errors.extend(_validate_counterparty(exposure, config))
    errors.extend(_validate_crm(exposure, config))
    errors.extend(_validate_amounts(exposure, config))

    return errors


# =============================================================================
# Private validators
# =============================================================================


def _validate_real_estate(exposure: Exposure, config: CalculationConfig) -> list[CalculationError]:
    real_estate = exposure.real_estate
    if exposure.product != ProductType.REAL_ESTATE_LOAN and not real_estate.guarantee_eligible:
        return []

    ltv = to_decimal(real_estate.ltv)
    if ltv is not None and is_valid_ltv(ltv, config):
        return []

    return [
        invalid_value_error(
            field_name="real_estate.ltv",
            actual_value=str(real_estate.ltv),
            expected_value=f"0-{config.thresholds.max_ltv}%",
            regulatory_reference="Res. BCB 229 Arts. 42-46",
            code=ERROR_INVALID_LTV,
            severity=ErrorSeverity.WARNING,
        )
    ]


def _validate_default(exposure: Exposure) -> list[CalculationError]:
    provision = exposure.default.provision_percent
    value = to_decimal(provision)
    if value is not None and Decimal("0") <= value <= Decimal("100"):
        return []

    return [
        invalid_value_error(
            field_name="default.provision_percent",
            actual_value=str(provision),
            expected_value="0-100%",
            regulatory_reference="Res. BCB 229 Art. 6",
            code=ERROR_INVALID_PROVISION,
            severity=ErrorSeverity.WARNING,
        )
    ]


def _validate_counterparty(exposure: Exposure, config: CalculationConfig) -> list[CalculationError]:
    errors: list[CalculationError] = []

    sovereign = exposure.sovereign
    if (
        exposure.counterparty == CounterpartyType.FOREIGN_SOVEREIGN
        and sovereign.kind == SovereignKind.REGULAR
        and sovereign.rating is None
    ):
        errors.append(business_rule_error(
            code=ERROR_MISSING_RATING,
            message="Foreign sovereign without rating; conservative weight applies",
            regulatory_reference="Res. BCB 229 Art. 28",
            severity=ErrorSeverity.WARNING,
            field_name="sovereign.rating",
        ))

    corporate = exposure.corporate
    revenue = to_decimal(corporate.annual_revenue)
    limit = config.thresholds.sme_revenue_limit
    if (
        exposure.counterparty == CounterpartyType.CORPORATE
        and corporate.sme
        and revenue is not None
        and revenue > limit
    ):
        errors.append(business_rule_error(
            code=ERROR_SME_REVENUE_EXCEEDED,
            message=f"SME flag set but annual revenue {revenue} exceeds {limit}",
            regulatory_reference="Res. BCB 229 Art. 37",
            severity=ErrorSeverity.WARNING,
            field_name="corporate.annual_revenue",
        ))

    return errors


def _validate_crm(exposure: Exposure, config: CalculationConfig) -> list[CalculationError]:
    crm = exposure.crm
    errors: list[CalculationError] = []

    if crm.guarantor_substitution:
        guarantor_weight = to_decimal(crm.guarantor_weight)
        if guarantor_weight is None or not is_valid_weight(guarantor_weight, config):
            errors.append(crm_warning(
                code=ERROR_INVALID_GUARANTEE,
                message=(
                    f"Guarantor weight {crm.guarantor_weight!r} is not a weight within "
                    f"[{config.bounds.minimum}, {config.bounds.maximum}]"
                ),
                regulatory_reference="Circular BCB 3.809",
                field_name="crm.guarantor_weight",
            ))

    if crm.credit_insurance:
        insurer_weight = to_decimal(crm.insurer_weight)
        if insurer_weight is None:
            errors.append(crm_warning(
                code=ERROR_MISSING_INSURER_WEIGHT,
                message="Credit insurance active without a numeric insurer weight; no substitution applied",
                regulatory_reference="Res. BCB 324/2023",
                field_name="crm.insurer_weight",
            ))
        elif not is_valid_weight(insurer_weight, config):
            errors.append(crm_warning(
                code=ERROR_INVALID_GUARANTEE,
                message=(
                    f"Insurer weight {insurer_weight} outside "
                    f"[{config.bounds.minimum}, {config.bounds.maximum}]"
                ),
                regulatory_reference="Res. BCB 324/2023",
                field_name="crm.insurer_weight",
            ))

    for index, posting in enumerate(crm.collateral):
        if posting.collateral_type not in ALWAYS_ELIGIBLE_COLLATERAL:
            errors.append(crm_warning(
                code=ERROR_INELIGIBLE_COLLATERAL,
                message=(
                    f"Collateral {posting.collateral_type.value} is eligible only if it "
                    "meets the minimum requirements"
                ),
                regulatory_reference="Circular BCB 3.809",
                field_name=f"crm.collateral[{index}].collateral_type",
            ))

    return errors


def _validate_amounts(exposure: Exposure, config: CalculationConfig) -> list[CalculationError]:
    amounts = exposure.amounts
    if amounts is None:
        return []

    errors: list[CalculationError] = []
    values: dict[str, Decimal] = {}

    for field_name, raw in (
        ("amounts.drawn_balance", amounts.drawn_balance),
        ("amounts.undrawn_limit", amounts.undrawn_limit),
    ):
        value = to_decimal(raw)
        if value is None:
            errors.append(invalid_value_error(
                field_name=field_name,
                actual_value=repr(raw),
                expected_value="a number",
                severity=ErrorSeverity.WARNING,
            ))
            continue
        if value < 0:
            errors.append(invalid_value_error(
                field_name=field_name,
                actual_value=str(value),
                expected_value=">= 0",
                regulatory_reference="Res. BCB 229 Art. 6",
                code=ERROR_NEGATIVE_AMOUNT,
                severity=ErrorSeverity.WARNING,
            ))
        values[field_name] = value

    if (
        exposure.counterparty == CounterpartyType.INDIVIDUAL
        and exposure.retail.eligible
        and len(values) == 2
    ):
        total = sum(values.values(), Decimal("0"))
        if not is_retail_eligible(total, exposure, config):
            errors.append(business_rule_error(
                code=ERROR_RETAIL_LIMIT_EXCEEDED,
                message=(
                    f"Retail exposure {total} exceeds the per-client limit "
                    f"{config.thresholds.retail_exposure_limit}"
                ),
                regulatory_reference="Res. BCB 229 Art. 39",
                severity=ErrorSeverity.WARNING,
                field_name="amounts",
            ))

    return errors
