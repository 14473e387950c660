"""
Configuration contracts for the FPR calculator.

Provides immutable configuration dataclasses:
- WeightBounds: Regulatory floor/cap for risk weights and the custody floor
- CurrencyMismatchParams: Multiplier, cap and eligible classification labels
- ValidationThresholds: Limits checked by input validation
- CalculationConfig: Master configuration with factory method

The factory method .bcb_229() provides self-documenting configuration
with the values in force under Res. BCB 229/2022.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from fpr_calc.data.tables.bcb229_risk_weights import (
    CURRENCY_MISMATCH_CAP,
    CURRENCY_MISMATCH_MULTIPLIER,
    CUSTODY_FLOOR_RISK_WEIGHT,
    DEFAULT_RISK_WEIGHT,
    MAX_RISK_WEIGHT,
    MIN_RISK_WEIGHT,
    RETAIL_EXPOSURE_LIMIT,
)
from fpr_calc.domain.enums import ClassificationLabel


@dataclass(frozen=True)
class WeightBounds:
    """
    Bounds applied to risk weights (percent).

    Every final weight is clamped to [minimum, maximum]. The custody
    floor applies to cash held outside the institution's direct possession.
    """

    minimum: Decimal = MIN_RISK_WEIGHT
    maximum: Decimal = MAX_RISK_WEIGHT
    custody_floor: Decimal = CUSTODY_FLOOR_RISK_WEIGHT

    def clamp(self, weight: Decimal) -> Decimal:
        """Clamp a weight to [minimum, maximum]."""
        return min(max(weight, self.minimum), self.maximum)


@dataclass(frozen=True)
class CurrencyMismatchParams:
    """
    Currency mismatch adjustment (Res. BCB 229 Art. 41 and Art. 44).

    Applies only to retail and residential mortgage classifications:
    weight := min(multiplier x weight, cap).
    """

    multiplier: Decimal = CURRENCY_MISMATCH_MULTIPLIER
    cap: Decimal = CURRENCY_MISMATCH_CAP
    eligible_labels: frozenset[ClassificationLabel] = field(
        default_factory=lambda: frozenset({
            ClassificationLabel.RETAIL_ELIGIBLE,
            ClassificationLabel.RETAIL_TRANSACTOR,
            ClassificationLabel.RESIDENTIAL_MORTGAGE,
            ClassificationLabel.RESIDENTIAL_MORTGAGE_DEPENDENT,
        })
    )

    def applies_to(self, label: ClassificationLabel) -> bool:
        """Check if the adjustment applies to a classification label."""
        return label in self.eligible_labels


@dataclass(frozen=True)
class ValidationThresholds:
    """
    Thresholds checked by input validation.

    retail_exposure_limit: Maximum retail exposure per client (R$)
    sme_revenue_limit: Maximum annual revenue for SME treatment (R$)
    max_ltv: LTV above which an input is treated as implausible (percent)
    """

    retail_exposure_limit: Decimal = RETAIL_EXPOSURE_LIMIT
    sme_revenue_limit: Decimal = Decimal("300000000")
    max_ltv: Decimal = Decimal("200")


@dataclass(frozen=True)
class CalculationConfig:
    """
    Master configuration for FPR calculations.

    Attributes:
        bounds: Risk weight floor, cap and custody floor
        currency_mismatch: Currency mismatch adjustment parameters
        thresholds: Input validation thresholds
        default_weight: Conservative weight when no rule matches
        nested_trail_prefix: Prefix for trail lines of a nested classification

    Usage:
        config = CalculationConfig.bcb_229()
    """

    bounds: WeightBounds = field(default_factory=WeightBounds)
    currency_mismatch: CurrencyMismatchParams = field(default_factory=CurrencyMismatchParams)
    thresholds: ValidationThresholds = field(default_factory=ValidationThresholds)
    default_weight: Decimal = DEFAULT_RISK_WEIGHT
    nested_trail_prefix: str = "  └─ "

    @classmethod
    def bcb_229(cls) -> CalculationConfig:
        """
        Create configuration for Res. BCB 229/2022.

        Key settings:
        - Weights bounded to [0%, 1250%]
        - Custody floor 20%
        - Currency mismatch x1.5 capped at 150%
        - Retail limit R$ 5MM, SME revenue limit R$ 300MM
        """
        return cls(
            bounds=WeightBounds(),
            currency_mismatch=CurrencyMismatchParams(),
            thresholds=ValidationThresholds(),
            default_weight=DEFAULT_RISK_WEIGHT,
        )
