"""
FPR Calculator API Service.

FPRService provides a clean facade for FPR calculations:
- calculate: Validate and calculate one Exposure
- calculate_from_dict: Parse a plain record, then calculate
- get_rule_order: Classification rule groups in evaluation order
- get_default_config: Configured bounds and thresholds

This is the main entry point for UI integration.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from fpr_calc.api.errors import convert_errors, create_schema_error
from fpr_calc.api.models import CalculationResponse, PerformanceMetrics
from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.errors import ExposureSchemaError
from fpr_calc.contracts.validation import validate_exposure
from fpr_calc.data.schemas import exposure_from_dict
from fpr_calc.engine.classifier import RULE_ORDER
from fpr_calc.engine.pipeline import create_pipeline

if TYPE_CHECKING:
    from fpr_calc.contracts.exposure import Exposure

logger = logging.getLogger(__name__)


# =============================================================================
# FPR Service
# =============================================================================


class FPRService:
    """
    High-level service for FPR calculations.

    Wraps the PipelineOrchestrator with validation and result formatting
    suitable for UI integration. Validation findings never block a
    calculation; only records outside the closed schema are rejected.

    Usage:
        from fpr_calc.api import FPRService

        service = FPRService()
        response = service.calculate_from_dict({
            "product": "loan",
            "counterparty": "domestic_sovereign",
        })

        if response.success:
            print(response.result.final_weight)
            print("\\n".join(response.result.trail))
        else:
            for error in response.errors:
                print(f"{error.code}: {error.message}")
    """

    def __init__(self, config: CalculationConfig | None = None) -> None:
        """Initialize FPRService with default components."""
        self._config = config or CalculationConfig.bcb_229()
        self._pipeline = create_pipeline(self._config)

    def calculate(self, exposure: Exposure) -> CalculationResponse:
        """
        Validate and calculate one exposure.

        Args:
            exposure: Exposure record

        Returns:
            CalculationResponse with the result and validation findings
        """
        started_at = datetime.now()

        errors = convert_errors(validate_exposure(exposure, self._config))
        result = self._pipeline.run(exposure)

        return CalculationResponse(
            success=True,
            result=result,
            errors=errors,
            performance=self._performance(started_at, 1),
        )

    def calculate_from_dict(self, record: Mapping[str, Any]) -> CalculationResponse:
        """
        Parse a plain record and calculate it.

        Args:
            record: Nested mapping (see fpr_calc.data.schemas)

        Returns:
            CalculationResponse; unsuccessful when the record is outside
            the closed schema
        """
        started_at = datetime.now()

        try:
            exposure = exposure_from_dict(record)
        except ExposureSchemaError as e:
            logger.warning("Exposure record rejected: %s", e)
            return CalculationResponse(
                success=False,
                errors=[create_schema_error(e)],
                performance=self._performance(started_at, 0),
            )

        return self.calculate(exposure)

    def get_rule_order(self) -> list[str]:
        """
        Get classification rule groups in evaluation order.

        Returns:
            Rule group names; the first matching group decides
        """
        return list(RULE_ORDER)

    def get_default_config(self) -> dict:
        """
        Get the configured bounds and thresholds.

        Returns:
            Dictionary of configuration values
        """
        config = self._config
        return {
            "min_weight": str(config.bounds.minimum),
            "max_weight": str(config.bounds.maximum),
            "custody_floor": str(config.bounds.custody_floor),
            "currency_mismatch_multiplier": str(config.currency_mismatch.multiplier),
            "currency_mismatch_cap": str(config.currency_mismatch.cap),
            "currency_mismatch_labels": sorted(
                label.value for label in config.currency_mismatch.eligible_labels
            ),
            "retail_exposure_limit": str(config.thresholds.retail_exposure_limit),
            "sme_revenue_limit": str(config.thresholds.sme_revenue_limit),
            "max_ltv": str(config.thresholds.max_ltv),
            "default_weight": str(config.default_weight),
        }

    @staticmethod
    def _performance(started_at: datetime, exposure_count: int) -> PerformanceMetrics:
        completed_at = datetime.now()
        return PerformanceMetrics(
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            exposure_count=exposure_count,
        )


# =============================================================================
# Convenience Functions
# =============================================================================


def create_service(config: CalculationConfig | None = None) -> FPRService:
    """
    Factory function to create FPRService instance.

    Returns:
        Configured FPRService
    """
    return FPRService(config)


def quick_calculate(record: Mapping[str, Any]) -> CalculationResponse:
    """
    Run a quick calculation with the default configuration.

    Args:
        record: Nested mapping (see fpr_calc.data.schemas)

    Returns:
        CalculationResponse with the result

    Example:
        response = quick_calculate({"product": "loan", "counterparty": "corporate"})
        print(response.result.final_weight)
    """
    return FPRService().calculate_from_dict(record)
