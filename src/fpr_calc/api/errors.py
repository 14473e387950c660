"""
Error conversion utilities for the FPR calculator API.

convert_to_api_error: Converts internal CalculationError to user-friendly APIError
convert_errors: Batch conversion of error lists
create_schema_error: APIError for a record outside the closed input schema

Provides user-friendly error messages and categorization for UI display.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fpr_calc.api.models import APIError

if TYPE_CHECKING:
    from fpr_calc.contracts.errors import CalculationError, ExposureSchemaError


# =============================================================================
# User-Friendly Error Messages
# =============================================================================


ERROR_MESSAGE_OVERRIDES: dict[str, str] = {
    "DQ002": "Field contains an invalid value",
    "DQ003": "Amounts cannot be negative; EAD is set to zero",
    "CLS003": "Foreign sovereign without rating; conservative weight applied",
    "CLS004": "Exposure exceeds the per-client eligible retail limit",
    "CLS005": "Annual revenue exceeds the SME limit",
    "CRM001": "Collateral is eligible only if it meets the minimum requirements",
    "CRM005": "Substitution weight is not a valid risk weight",
    "CRM006": "Credit insurance has no insurer weight; no substitution applied",
    "SA003": "Invalid LTV ratio for real estate exposure",
    "SA004": "Provision percent outside 0% - 100%",
}


CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "data_quality": "Data Quality",
    "business_rule": "Business Rule",
    "schema_validation": "Schema Validation",
    "crm": "Credit Risk Mitigation",
}


# =============================================================================
# Conversion Functions
# =============================================================================


def convert_to_api_error(error: CalculationError) -> APIError:
    """
    Convert internal CalculationError to user-friendly APIError.

    Args:
        error: Internal CalculationError from validation

    Returns:
        APIError with user-friendly message and details
    """
    category = error.category.value

    return APIError(
        code=error.code,
        message=_get_user_friendly_message(error),
        severity=error.severity.value,
        category=CATEGORY_DISPLAY_NAMES.get(category, category),
        details=_build_error_details(error),
    )


def convert_errors(errors: list[CalculationError]) -> list[APIError]:
    """
    Convert a list of CalculationErrors to APIErrors.

    Args:
        errors: List of internal CalculationError instances

    Returns:
        List of user-friendly APIError instances
    """
    return [convert_to_api_error(error) for error in errors]


def create_schema_error(error: ExposureSchemaError) -> APIError:
    """
    Create an error for a record outside the closed input schema.

    Args:
        error: Schema error raised while parsing the record

    Returns:
        APIError with critical severity
    """
    return APIError(
        code="DQ002",
        message=str(error),
        severity="critical",
        category=CATEGORY_DISPLAY_NAMES["schema_validation"],
        details={
            "field_name": error.field_name,
            "expected_value": error.expected,
            "actual_value": repr(error.value),
        },
    )


# =============================================================================
# Helper Functions
# =============================================================================


def _get_user_friendly_message(error: CalculationError) -> str:
    """
    Get user-friendly message for an error.

    Uses override if available, otherwise falls back to original message.
    """
    base_message = ERROR_MESSAGE_OVERRIDES.get(error.code, error.message)

    context_parts = []
    if error.field_name:
        context_parts.append(f"Field: {error.field_name}")
    if error.actual_value and error.expected_value:
        context_parts.append(f"Expected {error.expected_value}, got {error.actual_value}")

    if context_parts:
        return f"{base_message} ({', '.join(context_parts)})"
    return base_message


def _build_error_details(error: CalculationError) -> dict:
    """
    Build details dictionary from error attributes.

    Only includes non-None values to keep details clean.
    """
    details = {}

    if error.regulatory_reference:
        details["regulatory_reference"] = error.regulatory_reference
    if error.field_name:
        details["field_name"] = error.field_name
    if error.expected_value:
        details["expected_value"] = error.expected_value
    if error.actual_value:
        details["actual_value"] = error.actual_value

    return details
