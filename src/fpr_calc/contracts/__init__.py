"""
Contracts module for the FPR calculator.

Provides interfaces, data transfer objects, and validation utilities
for the FPR calculation pipeline. This module enables:
- Isolated unit testing of each component
- Clear data flow boundaries between stages

Submodules:
- exposure: The Exposure input record and its attribute bags
- bundles: Result dataclasses for pipeline stages
- config: CalculationConfig and related configuration classes
- errors: CalculationError, ExposureSchemaError and error codes
- protocols: Protocol definitions for component interfaces
- validation: Advisory input validation
"""

# Configuration contracts
from fpr_calc.contracts.config import (
    CalculationConfig,
    CurrencyMismatchParams,
    ValidationThresholds,
    WeightBounds,
)

# Error handling contracts
from fpr_calc.contracts.errors import (
    ERROR_INELIGIBLE_COLLATERAL,
    ERROR_INVALID_GUARANTEE,
    ERROR_INVALID_LTV,
    ERROR_INVALID_PROVISION,
    ERROR_INVALID_VALUE,
    ERROR_MISSING_INSURER_WEIGHT,
    ERROR_MISSING_RATING,
    ERROR_NEGATIVE_AMOUNT,
    ERROR_RETAIL_LIMIT_EXCEEDED,
    ERROR_SME_REVENUE_EXCEEDED,
    CalculationError,
    ExposureSchemaError,
    business_rule_error,
    crm_warning,
    invalid_value_error,
)

# Input record
from fpr_calc.contracts.exposure import (
    CollateralPosting,
    CorporateInfo,
    CRMInfo,
    DefaultInfo,
    Exposure,
    ExposureAmounts,
    FloorInfo,
    FundInfo,
    InstitutionInfo,
    PublicSectorInfo,
    RealEstateInfo,
    RetailInfo,
    SovereignInfo,
    SpecialInfo,
    to_decimal,
)

# Stage results
from fpr_calc.contracts.bundles import (
    AdjustmentResult,
    CalculationResult,
    ClassificationResult,
    EADResult,
    HaircutResult,
    MitigationResult,
)

# Protocols
from fpr_calc.contracts.protocols import (
    AdjusterProtocol,
    ClassifierProtocol,
    EADCalculatorProtocol,
    MitigatorProtocol,
)

# Validation
from fpr_calc.contracts.validation import (
    is_retail_eligible,
    is_valid_ltv,
    is_valid_weight,
    validate_exposure,
)

__all__ = [
    # Config
    "CalculationConfig",
    "CurrencyMismatchParams",
    "ValidationThresholds",
    "WeightBounds",
    # Errors
    "CalculationError",
    "ExposureSchemaError",
    "ERROR_INELIGIBLE_COLLATERAL",
    "ERROR_INVALID_GUARANTEE",
    "ERROR_INVALID_LTV",
    "ERROR_INVALID_PROVISION",
    "ERROR_INVALID_VALUE",
    "ERROR_MISSING_INSURER_WEIGHT",
    "ERROR_MISSING_RATING",
    "ERROR_NEGATIVE_AMOUNT",
    "ERROR_RETAIL_LIMIT_EXCEEDED",
    "ERROR_SME_REVENUE_EXCEEDED",
    "business_rule_error",
    "crm_warning",
    "invalid_value_error",
    # Exposure
    "CollateralPosting",
    "CorporateInfo",
    "CRMInfo",
    "DefaultInfo",
    "Exposure",
    "ExposureAmounts",
    "FloorInfo",
    "FundInfo",
    "InstitutionInfo",
    "PublicSectorInfo",
    "RealEstateInfo",
    "RetailInfo",
    "SovereignInfo",
    "SpecialInfo",
    "to_decimal",
    # Bundles
    "AdjustmentResult",
    "CalculationResult",
    "ClassificationResult",
    "EADResult",
    "HaircutResult",
    "MitigationResult",
    # Protocols
    "AdjusterProtocol",
    "ClassifierProtocol",
    "EADCalculatorProtocol",
    "MitigatorProtocol",
    # Validation
    "is_retail_eligible",
    "is_valid_ltv",
    "is_valid_weight",
    "validate_exposure",
]
