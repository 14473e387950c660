"""
Pipeline Orchestrator for the FPR calculator.

Orchestrates one calculation, wiring together:
    ExposureClassifier -> RiskWeightAdjuster
        -> EADCalculator -> CollateralMitigator -> RWA

Pipeline position:
    Entry point for full pipeline execution

Key responsibilities:
- Wire all pipeline components in correct order
- Concatenate stage trails in execution order
- Skip EAD, mitigation and RWA when the exposure carries no amounts
- Skip mitigation when no collateral is posted

Usage:
    from fpr_calc.engine.pipeline import create_pipeline

    pipeline = create_pipeline()
    result = pipeline.run(exposure)
    result.final_weight, result.rwa, result.trail
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.bundles import CalculationResult, MitigationResult
from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.engine.audit import format_amount, format_percent

if TYPE_CHECKING:
    from fpr_calc.contracts.bundles import (
        AdjustmentResult,
        ClassificationResult,
        EADResult,
    )
    from fpr_calc.contracts.exposure import Exposure
    from fpr_calc.contracts.protocols import (
        AdjusterProtocol,
        ClassifierProtocol,
        EADCalculatorProtocol,
        MitigatorProtocol,
    )

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline Orchestrator Implementation
# =============================================================================


class PipelineOrchestrator:
    """
    Orchestrate the complete FPR calculation for a single exposure.

    Pipeline stages:
    1. Classifier: Base risk weight and label
    2. Adjuster: Currency mismatch, CRM substitution, floors, clamp
    3. EADCalculator: EAD via CCF (only when amounts are supplied)
    4. CollateralMitigator: Haircut-adjusted EAD (only with postings)
    5. RWA = adjusted EAD x final weight / 100

    Every stage is pure, so one orchestrator may serve any number of
    calls, including concurrent ones.

    Usage:
        orchestrator = PipelineOrchestrator(
            classifier=ExposureClassifier(),
            adjuster=RiskWeightAdjuster(),
            ead_calculator=EADCalculator(),
            mitigator=CollateralMitigator(),
        )
        result = orchestrator.run(exposure)
    """

    def __init__(
        self,
        classifier: ClassifierProtocol | None = None,
        adjuster: AdjusterProtocol | None = None,
        ead_calculator: EADCalculatorProtocol | None = None,
        mitigator: MitigatorProtocol | None = None,
        config: CalculationConfig | None = None,
    ) -> None:
        """
        Initialize pipeline with components.

        Components can be injected for testing or customization.
        If not provided, defaults will be created on first use.

        Args:
            classifier: Exposure classifier
            adjuster: Risk weight adjuster
            ead_calculator: EAD calculator
            mitigator: Collateral mitigator
            config: Calculation configuration for default components
        """
        self._config = config or CalculationConfig.bcb_229()
        self._classifier = classifier
        self._adjuster = adjuster
        self._ead_calculator = ead_calculator
        self._mitigator = mitigator

    # =========================================================================
    # Public API
    # =========================================================================

    def run(self, exposure: Exposure) -> CalculationResult:
        """
        Execute the complete calculation for one exposure.

        Args:
            exposure: Exposure record

        Returns:
            CalculationResult with weights, amounts and the full trail
        """
        self._ensure_components_initialized()

        classification = self._run_classifier(exposure)
        adjustment = self._run_adjuster(classification, exposure)

        trail: list[str] = [*classification.trail, *adjustment.trail]

        ead_result = self._run_ead_calculator(exposure)
        if ead_result is None:
            logger.debug("No amounts supplied; weight-only result")
            return CalculationResult(
                final_weight=adjustment.weight,
                base_weight=classification.weight,
                label=classification.label,
                trail=tuple(trail),
                classification=classification,
                adjustment=adjustment,
            )

        trail.append("EAD calculation:")
        trail.extend(ead_result.trail)

        mitigation = self._run_mitigator(ead_result, exposure)
        if mitigation.has_collateral:
            trail.append("Collateral mitigation:")
            trail.extend(mitigation.trail)
            trail.append(f"Adjusted EAD: {format_amount(mitigation.adjusted_ead)}")

        rwa = mitigation.adjusted_ead * adjustment.weight / Decimal("100")
        trail.append("RWA:")
        trail.append(
            f"RWA = EAD x FPR = {format_amount(mitigation.adjusted_ead)} x "
            f"{format_percent(adjustment.weight)} = {format_amount(rwa)}"
        )

        return CalculationResult(
            final_weight=adjustment.weight,
            base_weight=classification.weight,
            label=classification.label,
            trail=tuple(trail),
            ead=ead_result.ead,
            adjusted_ead=mitigation.adjusted_ead,
            rwa=rwa,
            classification=classification,
            adjustment=adjustment,
            ead_result=ead_result,
            mitigation=mitigation,
        )

    # =========================================================================
    # Private Methods - Component Initialization
    # =========================================================================

    def _ensure_components_initialized(self) -> None:
        """Ensure all required components are initialized."""
        from fpr_calc.engine.adjustments import RiskWeightAdjuster
        from fpr_calc.engine.ccf import EADCalculator
        from fpr_calc.engine.classifier import ExposureClassifier
        from fpr_calc.engine.crm.haircuts import CollateralMitigator

        if self._classifier is None:
            self._classifier = ExposureClassifier(self._config)
        if self._adjuster is None:
            self._adjuster = RiskWeightAdjuster(self._config)
        if self._ead_calculator is None:
            self._ead_calculator = EADCalculator(self._config)
        if self._mitigator is None:
            self._mitigator = CollateralMitigator()

    # =========================================================================
    # Private Methods - Stage Execution
    # =========================================================================

    def _run_classifier(self, exposure: Exposure) -> ClassificationResult:
        """Run classification stage."""
        result = self._classifier.classify(exposure)
        logger.debug("Classified as %s at %s", result.label.value, result.weight)
        return result

    def _run_adjuster(
        self,
        classification: ClassificationResult,
        exposure: Exposure,
    ) -> AdjustmentResult:
        """Run adjustment stage."""
        return self._adjuster.adjust(classification, exposure)

    def _run_ead_calculator(self, exposure: Exposure) -> EADResult | None:
        """Run EAD stage (None when no amounts are supplied)."""
        return self._ead_calculator.calculate(exposure)

    def _run_mitigator(self, ead_result: EADResult, exposure: Exposure) -> MitigationResult:
        """Run collateral mitigation stage (pass-through without postings)."""
        postings = exposure.crm.collateral
        if not postings:
            return MitigationResult(ead=ead_result.ead, adjusted_ead=ead_result.ead)

        return self._mitigator.mitigate(
            ead_result.ead,
            postings,
            exposure.exposure_currency,
            maturity_mismatch=exposure.crm.maturity_mismatch,
        )


def create_pipeline(config: CalculationConfig | None = None) -> PipelineOrchestrator:
    """
    Create a pipeline orchestrator with default components.

    Args:
        config: Optional calculation configuration

    Returns:
        PipelineOrchestrator ready for use
    """
    from fpr_calc.engine.adjustments import RiskWeightAdjuster
    from fpr_calc.engine.ccf import EADCalculator
    from fpr_calc.engine.classifier import ExposureClassifier
    from fpr_calc.engine.crm.haircuts import CollateralMitigator

    config = config or CalculationConfig.bcb_229()
    return PipelineOrchestrator(
        classifier=ExposureClassifier(config),
        adjuster=RiskWeightAdjuster(config),
        ead_calculator=EADCalculator(config),
        mitigator=CollateralMitigator(),
        config=config,
    )
