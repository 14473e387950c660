"""
Risk weight adjustments applied after classification.

Pipeline position:
    Classifier -> RiskWeightAdjuster -> EADCalculator

Stages run in a fixed order and every stage always runs (it may leave
the weight unchanged):
1. Currency mismatch: min(1.5 x weight, 150%) for retail and residential
   mortgage labels only (Res. BCB 229 Arts. 41 and 44)
2. CRM substitution: guarantor weight (Circular 3.809), else insurer
   weight (Res. BCB 324/2023); netting is noted only
3. Floors: custody floor for cash held outside direct possession
4. Final clamp to [0%, 1250%]

Classes:
    RiskWeightAdjuster: Implements AdjusterProtocol

Usage:
    from fpr_calc.engine.adjustments import RiskWeightAdjuster

    adjuster = RiskWeightAdjuster()
    adjusted = adjuster.adjust(classification, exposure)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.bundles import AdjustmentResult
from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.exposure import to_decimal
from fpr_calc.engine.audit import format_number, format_percent

if TYPE_CHECKING:
    from fpr_calc.contracts.bundles import ClassificationResult
    from fpr_calc.contracts.exposure import Exposure

logger = logging.getLogger(__name__)


@dataclass
class _AdjustmentState:
    """Mutable working state threaded through the stages of one adjust() call."""

    weight: Decimal
    trail: list[str] = field(default_factory=list)
    currency_mismatch_applied: bool = False
    substitution: str | None = None
    floor_applied: bool = False
    clamped: bool = False


class RiskWeightAdjuster:
    """
    Apply post-classification adjustments to a risk weight.

    The adjuster never changes the classification label; it only moves
    the weight and records each change in the trail.
    """

    def __init__(self, config: CalculationConfig | None = None) -> None:
        self._config = config or CalculationConfig.bcb_229()

    def adjust(
        self,
        classification: ClassificationResult,
        exposure: Exposure,
    ) -> AdjustmentResult:
        """
        Run all adjustment stages in order.

        Args:
            classification: Output of the classifier
            exposure: Exposure record

        Returns:
            AdjustmentResult with the adjusted weight and the added trail lines
        """
        state = _AdjustmentState(weight=classification.weight)

        self._apply_currency_mismatch(state, classification, exposure)
        self._apply_crm_substitution(state, exposure)
        self._apply_floors(state, exposure)
        self._apply_final_clamp(state)

        logger.debug(
            "Adjusted weight %s -> %s (%s)",
            classification.weight, state.weight, classification.label.value,
        )

        return AdjustmentResult(
            base_weight=classification.weight,
            weight=state.weight,
            label=classification.label,
            trail=tuple(state.trail),
            currency_mismatch_applied=state.currency_mismatch_applied,
            substitution=state.substitution,
            floor_applied=state.floor_applied,
            clamped=state.clamped,
        )

    # =========================================================================
    # Stages
    # =========================================================================

    def _apply_currency_mismatch(
        self,
        state: _AdjustmentState,
        classification: ClassificationResult,
        exposure: Exposure,
    ) -> None:
        """Scale the weight for unhedged currency mismatch on eligible labels."""
        if not exposure.has_currency_mismatch:
            return

        params = self._config.currency_mismatch
        if not params.applies_to(classification.label):
            state.trail.append(
                "Currency mismatch identified, but class is not retail/residential "
                "-> no FPR adjustment (assess risk impact)"
            )
            return

        before = state.weight
        state.weight = min(before * params.multiplier, params.cap)
        state.currency_mismatch_applied = True
        state.trail.append(
            f"Currency mismatch adjustment: min({format_percent(before)} x "
            f"{format_number(params.multiplier)}, {format_percent(params.cap)}) = "
            f"{format_percent(state.weight)}"
        )

    def _apply_crm_substitution(self, state: _AdjustmentState, exposure: Exposure) -> None:
        """
        Substitute the weight by a guarantor's or insurer's weight.

        Guarantor substitution takes precedence: when it applies, credit
        insurance and netting are not evaluated.
        """
        crm = exposure.crm
        bounds = self._config.bounds

        if crm.guarantor_substitution:
            guarantor_weight = to_decimal(crm.guarantor_weight)
            if guarantor_weight is not None:
                state.weight = bounds.clamp(guarantor_weight)
                state.substitution = "guarantor"
                state.trail.append(
                    "CRM - eligible guarantor substitution (Circ. 3.809) "
                    f"-> guarantor FPR: {format_percent(state.weight)}"
                )
                return
            logger.warning("Guarantor substitution requested without a numeric guarantor weight")

        if crm.credit_insurance:
            insurer_weight = to_decimal(crm.insurer_weight)
            if insurer_weight is not None:
                state.weight = bounds.clamp(insurer_weight)
                state.substitution = "insurer"
                state.trail.append(
                    "Credit insurance recognised (Res. BCB 324/2023) "
                    f"-> insurer FPR: {format_percent(state.weight)}"
                )
                return
            state.trail.append(
                "Warning: credit insurance active, but insurer FPR not informed -> no adjustment applied"
            )

        if crm.netting_agreement:
            state.trail.append(
                "Eligible netting agreement identified -> reduces exposure (calculated via SA-CCR/CEM)"
            )

    def _apply_floors(self, state: _AdjustmentState, exposure: Exposure) -> None:
        """Raise the weight to the custody floor when flagged."""
        if not exposure.floors.custody_risk:
            return

        floor = self._config.bounds.custody_floor
        floored = max(state.weight, floor)
        if floored != state.weight:
            state.weight = floored
            state.floor_applied = True
            state.trail.append(
                f"Floor: cash outside direct possession -> minimum FPR {format_percent(floor)} applied"
            )

    def _apply_final_clamp(self, state: _AdjustmentState) -> None:
        """Clamp to the regulatory bounds, noting only an actual change."""
        bounds = self._config.bounds
        clamped = bounds.clamp(state.weight)
        if clamped != state.weight:
            state.weight = clamped
            state.clamped = True
            state.trail.append(
                f"Sanitisation: FPR limited between {format_percent(bounds.minimum)} "
                f"and {format_percent(bounds.maximum)}"
            )


def create_risk_weight_adjuster(config: CalculationConfig | None = None) -> RiskWeightAdjuster:
    """
    Create a risk weight adjuster instance.

    Args:
        config: Optional calculation configuration

    Returns:
        RiskWeightAdjuster ready for use
    """
    return RiskWeightAdjuster(config)
