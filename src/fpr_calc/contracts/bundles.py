"""
Result bundles for the FPR calculator pipeline.

Defines immutable dataclass containers for passing results between
pipeline stages. Each bundle is the output of one stage:

    Exposure
        |
    Classifier -> ClassificationResult
                        |
                  RiskWeightAdjuster -> AdjustmentResult
                                              |
    EADCalculator -> EADResult                |
                        |                     |
                  CollateralMitigator -> MitigationResult
                                              |
                                    PipelineOrchestrator -> CalculationResult

Trails are tuples: each stage contributes its own lines and the
orchestrator concatenates them in execution order without rewriting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from fpr_calc.domain.enums import ClassificationLabel, CollateralType, Currency


@dataclass(frozen=True)
class ClassificationResult:
    """
    Output of the classification cascade.

    Attributes:
        weight: Base risk weight in percent, within [0, 1250]
        label: Classification tag of the rule that fired
        rule: Name of the rule group that fired
        trail: Explanatory lines in the order they were produced
    """

    weight: Decimal
    label: ClassificationLabel
    rule: str
    trail: tuple[str, ...] = ()


@dataclass(frozen=True)
class AdjustmentResult:
    """
    Output of the adjustment stages.

    Attributes:
        base_weight: Weight received from classification
        weight: Weight after currency mismatch, CRM, floors and clamp
        label: Classification label (unchanged by adjustments)
        trail: Lines added by the adjustment stages only
        currency_mismatch_applied: The x1.5 mismatch adjustment changed the weight path
        substitution: "guarantor", "insurer" or None
        floor_applied: A floor raised the weight
        clamped: The final clamp changed the weight
    """

    base_weight: Decimal
    weight: Decimal
    label: ClassificationLabel
    trail: tuple[str, ...] = ()
    currency_mismatch_applied: bool = False
    substitution: str | None = None
    floor_applied: bool = False
    clamped: bool = False


@dataclass(frozen=True)
class EADResult:
    """
    Output of the exposure-at-default calculation.

    Attributes:
        ead: Exposure at default, never negative
        drawn_balance: Drawn balance after coercion
        undrawn_limit: Undrawn limit after coercion
        ccf: Credit conversion factor applied to the undrawn limit
        ccf_source: Where the CCF came from (override, retail, detailed, generic)
        ccf_amount: CCF x undrawn limit
        gross_exposure: Drawn balance + CCF amount
        provision_percent: Provision percent deducted (clamped to [0, 100])
        provision_amount: Provision percent / 100 x drawn balance
        rejected: Inputs were negative and a zero EAD was returned
        trail: Explanatory lines
    """

    ead: Decimal
    drawn_balance: Decimal
    undrawn_limit: Decimal
    ccf: Decimal
    ccf_source: str
    ccf_amount: Decimal = Decimal("0")
    gross_exposure: Decimal = Decimal("0")
    provision_percent: Decimal = Decimal("0")
    provision_amount: Decimal = Decimal("0")
    rejected: bool = False
    trail: tuple[str, ...] = ()


@dataclass(frozen=True)
class HaircutResult:
    """Haircut outcome for a single collateral posting."""

    collateral_type: CollateralType
    currency: Currency
    original_value: Decimal
    collateral_haircut: Decimal
    fx_haircut: Decimal
    adjusted_value: Decimal
    description: str


@dataclass(frozen=True)
class MitigationResult:
    """
    Output of the collateral mitigation stage.

    Attributes:
        ead: EAD before mitigation
        adjusted_ead: max(0, EAD x (1 + He) - sum of haircut collateral)
        exposure_haircut: He applied to the exposure
        collateral_haircut: Largest Hc across postings (display only)
        fx_haircut: Largest Hfx across postings (display only)
        postings: Per-posting haircut results
        trail: Explanatory lines
    """

    ead: Decimal
    adjusted_ead: Decimal
    exposure_haircut: Decimal = Decimal("0")
    collateral_haircut: Decimal = Decimal("0")
    fx_haircut: Decimal = Decimal("0")
    postings: tuple[HaircutResult, ...] = ()
    trail: tuple[str, ...] = ()

    @property
    def has_collateral(self) -> bool:
        """Check if any collateral posting was applied."""
        return len(self.postings) > 0

    @property
    def mitigation_factor(self) -> Decimal:
        """Share of the EAD removed by collateral, within [0, 1]."""
        if self.ead <= 0:
            return Decimal("0")
        mitigated = (self.ead - self.adjusted_ead) / self.ead
        return min(Decimal("1"), max(Decimal("0"), mitigated))


@dataclass(frozen=True)
class CalculationResult:
    """
    Final output of one orchestrated calculation.

    ead, adjusted_ead and rwa are None when the exposure carried no
    amounts. The stage results are kept for inspection and display.

    Attributes:
        final_weight: Weight after all adjustments, within [0, 1250]
        base_weight: Weight from classification
        label: Classification label
        trail: Full audit trail in execution order
        ead: Exposure at default
        adjusted_ead: EAD after collateral mitigation
        rwa: adjusted_ead x final_weight / 100
    """

    final_weight: Decimal
    base_weight: Decimal
    label: ClassificationLabel
    trail: tuple[str, ...]
    ead: Decimal | None = None
    adjusted_ead: Decimal | None = None
    rwa: Decimal | None = None
    classification: ClassificationResult | None = field(default=None, compare=False)
    adjustment: AdjustmentResult | None = field(default=None, compare=False)
    ead_result: EADResult | None = field(default=None, compare=False)
    mitigation: MitigationResult | None = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """
        Convert to the external result record.

        Optional amounts are omitted when absent.
        """
        record: dict = {
            "finalWeight": self.final_weight,
            "baseWeight": self.base_weight,
            "label": self.label.value,
            "trail": list(self.trail),
        }
        if self.ead is not None:
            record["ead"] = self.ead
        if self.adjusted_ead is not None:
            record["adjustedEad"] = self.adjusted_ead
        if self.rwa is not None:
            record["rwa"] = self.rwa
        return record
