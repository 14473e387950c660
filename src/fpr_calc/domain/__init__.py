"""
Domain module for the FPR calculator.

Contains the enumerations that close the exposure input schema and
the classification outputs used throughout the calculation pipeline.
"""

from fpr_calc.domain.enums import (
    CCFDetailType,
    CCFType,
    ClassificationLabel,
    CollateralType,
    CounterpartyType,
    Currency,
    EquityTier,
    ErrorCategory,
    ErrorSeverity,
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

__all__ = [
    "CCFDetailType",
    "CCFType",
    "ClassificationLabel",
    "CollateralType",
    "CounterpartyType",
    "Currency",
    "EquityTier",
    "ErrorCategory",
    "ErrorSeverity",
    "FundApproach",
    "FundMandate",
    "InstitutionCategory",
    "MultilateralRatingBucket",
    "OtherAssetType",
    "OverrideTier",
    "ProductType",
    "ProjectFinancePhase",
    "PropertyType",
    "PublicSectorType",
    "RatingBucket",
    "SovereignKind",
    "SpecialisedFinancing",
]
