"""
Protocol definitions for FPR calculator components.

Defines interfaces using Python's Protocol (PEP 544) for structural
typing. Components implementing these protocols can be:
- Easily mocked for unit testing
- Swapped for different implementations
- Injected into the PipelineOrchestrator

Each protocol represents a distinct pipeline stage:
    ClassifierProtocol -> AdjusterProtocol
        -> EADCalculatorProtocol -> MitigatorProtocol

All stages are pure: the same input always yields the same result.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fpr_calc.contracts.bundles import (
        AdjustmentResult,
        ClassificationResult,
        EADResult,
        MitigationResult,
    )
    from fpr_calc.contracts.exposure import CollateralPosting, Exposure
    from fpr_calc.domain.enums import Currency


@runtime_checkable
class ClassifierProtocol(Protocol):
    """
    Protocol for exposure classification components.

    Responsible for:
    - Evaluating the ordered rule groups (first match wins)
    - Assigning the base risk weight and classification label
    - Recording the rules that fired in the trail

    Input: Exposure
    Output: ClassificationResult
    """

    def classify(self, exposure: Exposure) -> ClassificationResult:
        """
        Classify a single exposure.

        Args:
            exposure: Exposure record

        Returns:
            ClassificationResult with base weight, label and trail
        """
        ...


@runtime_checkable
class AdjusterProtocol(Protocol):
    """
    Protocol for risk weight adjustment components.

    Responsible for (in fixed order):
    - Currency mismatch scaling
    - Guarantor / insurer substitution
    - Floors
    - Final clamp to the regulatory bounds
    """

    def adjust(
        self,
        classification: ClassificationResult,
        exposure: Exposure,
    ) -> AdjustmentResult:
        """
        Adjust a classified weight.

        Args:
            classification: Output of the classifier
            exposure: Exposure record

        Returns:
            AdjustmentResult with the final weight and added trail lines
        """
        ...


@runtime_checkable
class EADCalculatorProtocol(Protocol):
    """
    Protocol for exposure-at-default components.

    Returns None when the exposure carries no amounts.
    """

    def calculate(self, exposure: Exposure) -> EADResult | None:
        """
        Calculate EAD for an exposure.

        Args:
            exposure: Exposure record

        Returns:
            EADResult, or None if the exposure has no amounts
        """
        ...


@runtime_checkable
class MitigatorProtocol(Protocol):
    """Protocol for collateral mitigation components."""

    def mitigate(
        self,
        ead: Decimal,
        postings: tuple[CollateralPosting, ...],
        exposure_currency: Currency,
        maturity_mismatch: bool = False,
    ) -> MitigationResult:
        """
        Reduce EAD by haircut-adjusted collateral.

        Args:
            ead: Exposure at default
            postings: Collateral postings
            exposure_currency: Currency of the exposure
            maturity_mismatch: Whether the exposure haircut applies

        Returns:
            MitigationResult with adjusted EAD and haircut details
        """
        ...
