"""
Error handling contracts for the FPR calculator.

The engine never raises for control flow: numeric defects are recovered
locally and explained in the audit trail. Validation findings about the
input record are reported as CalculationError values:
- CalculationError: Immutable finding with code, severity and category
- ExposureSchemaError: Raised only when a record falls outside the
  closed input schema (malformed enum value or structure)

This approach enables:
- Every exposure to produce a result, however poor its data
- Severity-based filtering for display
- Regulatory reference tracking for each finding
"""

from __future__ import annotations

from dataclasses import dataclass

from fpr_calc.domain.enums import ErrorCategory, ErrorSeverity


@dataclass(frozen=True)
class CalculationError:
    """
    Immutable representation of a validation error or warning.

    Attributes:
        code: Unique error code (e.g., "CRM006", "SA003")
              Format: {COMPONENT}{NUMBER} where COMPONENT is 2-3 chars
        message: Human-readable description of the issue
        severity: Error severity level (WARNING, ERROR, CRITICAL)
        category: Error category for filtering (DATA_QUALITY, BUSINESS_RULE, etc.)
        regulatory_reference: Optional regulatory article (e.g., "Res. BCB 229 Art. 39")
        field_name: Optional name of the problematic field
        expected_value: Optional description of expected value/format
        actual_value: Optional actual value that caused the error
    """

    code: str
    message: str
    severity: ErrorSeverity
    category: ErrorCategory
    regulatory_reference: str | None = None
    field_name: str | None = None
    expected_value: str | None = None
    actual_value: str | None = None

    def __str__(self) -> str:
        """Human-readable error representation."""
        parts = [f"[{self.code}] {self.severity.value.upper()}: {self.message}"]

        if self.field_name:
            parts.append(f"Field: {self.field_name}")
        if self.regulatory_reference:
            parts.append(f"Ref: {self.regulatory_reference}")

        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "regulatory_reference": self.regulatory_reference,
            "field_name": self.field_name,
            "expected_value": self.expected_value,
            "actual_value": self.actual_value,
        }


class ExposureSchemaError(ValueError):
    """
    Raised when an exposure record falls outside the closed input schema.

    This is the only defect the calculator treats as fatal; callers
    validate records before invoking the engine.
    """

    def __init__(self, field_name: str, value: object, expected: str) -> None:
        self.field_name = field_name
        self.value = value
        self.expected = expected
        super().__init__(
            f"Invalid value for '{field_name}': expected {expected}, got {value!r}"
        )


# =============================================================================
# ERROR CODE CONSTANTS
# =============================================================================

# Data quality error codes
ERROR_INVALID_VALUE = "DQ002"
ERROR_NEGATIVE_AMOUNT = "DQ003"

# Classification error codes
ERROR_MISSING_RATING = "CLS003"
ERROR_RETAIL_LIMIT_EXCEEDED = "CLS004"
ERROR_SME_REVENUE_EXCEEDED = "CLS005"

# CRM error codes
ERROR_INELIGIBLE_COLLATERAL = "CRM001"
ERROR_INVALID_GUARANTEE = "CRM005"
ERROR_MISSING_INSURER_WEIGHT = "CRM006"

# SA error codes
ERROR_INVALID_LTV = "SA003"
ERROR_INVALID_PROVISION = "SA004"


# =============================================================================
# ERROR FACTORY FUNCTIONS
# =============================================================================


def invalid_value_error(
    field_name: str,
    actual_value: str,
    expected_value: str,
    regulatory_reference: str | None = None,
    code: str = ERROR_INVALID_VALUE,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
) -> CalculationError:
    """Create an invalid value error."""
    return CalculationError(
        code=code,
        message=f"Invalid value for '{field_name}': expected {expected_value}, got {actual_value}",
        severity=severity,
        category=ErrorCategory.DATA_QUALITY,
        regulatory_reference=regulatory_reference,
        field_name=field_name,
        expected_value=expected_value,
        actual_value=actual_value,
    )


def business_rule_error(
    code: str,
    message: str,
    regulatory_reference: str | None = None,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    field_name: str | None = None,
) -> CalculationError:
    """Create a business rule violation error."""
    return CalculationError(
        code=code,
        message=message,
        severity=severity,
        category=ErrorCategory.BUSINESS_RULE,
        regulatory_reference=regulatory_reference,
        field_name=field_name,
    )


def crm_warning(
    code: str,
    message: str,
    regulatory_reference: str | None = None,
    field_name: str | None = None,
) -> CalculationError:
    """Create a CRM-related warning."""
    return CalculationError(
        code=code,
        message=message,
        severity=ErrorSeverity.WARNING,
        category=ErrorCategory.CRM,
        regulatory_reference=regulatory_reference,
        field_name=field_name,
    )
