"""
FPR calculation engine components.

This package contains the production implementations of the calculator
pipeline stages:

    Classifier -> RiskWeightAdjuster -> EADCalculator
        -> CollateralMitigator -> RWA

Each component implements a protocol from fpr_calc.contracts.protocols.

Modules:
    classifier: Ordered rule groups assigning the base weight and label
    adjustments: Currency mismatch, CRM substitution, floors and clamp
    ccf: Exposure at default via credit conversion factors
    audit: Trail formatting and the fpr_audit expression namespace
    pipeline: Pipeline orchestration

Subpackages:
    crm: Collateral haircuts (comprehensive approach)

Polars Namespaces:
    Registered when fpr_calc.engine.audit is imported.
    - expr.fpr_audit: Audit formatting of weight and amount columns
"""

# Import namespace modules to register namespaces on module load
import fpr_calc.engine.audit  # noqa: F401

from fpr_calc.engine.adjustments import RiskWeightAdjuster, create_risk_weight_adjuster
from fpr_calc.engine.ccf import EADCalculator, create_ead_calculator
from fpr_calc.engine.classifier import (
    RULE_ORDER,
    ExposureClassifier,
    create_exposure_classifier,
)
from fpr_calc.engine.crm import CollateralMitigator, create_collateral_mitigator
from fpr_calc.engine.pipeline import PipelineOrchestrator, create_pipeline

__all__ = [
    "RULE_ORDER",
    "CollateralMitigator",
    "EADCalculator",
    "ExposureClassifier",
    "PipelineOrchestrator",
    "RiskWeightAdjuster",
    "create_collateral_mitigator",
    "create_ead_calculator",
    "create_exposure_classifier",
    "create_pipeline",
    "create_risk_weight_adjuster",
]
