"""
FPR Calculator API Module.

Public API for FPR calculations providing:
- FPRService: Main service facade for calculations
- Response models: Clean interface contracts
- Formatters: Results and audit trails as Polars DataFrames

Usage:
    from fpr_calc.api import FPRService

    service = FPRService()
    response = service.calculate_from_dict({
        "product": "loan",
        "counterparty": "individual",
        "retail": {"eligible": True},
        "amounts": {"drawn_balance": "10000", "undrawn_limit": "5000",
                    "ccf_type": "revocable_commitment"},
    })

    if response.success:
        print(f"FPR: {response.result.final_weight}%")
        print(f"RWA: {response.result.rwa:,.2f}")
    else:
        for error in response.errors:
            print(f"{error.code}: {error.message}")
"""

from fpr_calc.api.formatters import (
    format_results,
    result_to_frame,
    trail_to_frame,
)
from fpr_calc.api.models import (
    APIError,
    CalculationResponse,
    PerformanceMetrics,
)
from fpr_calc.api.service import (
    FPRService,
    create_service,
    quick_calculate,
)

__all__ = [
    # Service
    "FPRService",
    "create_service",
    "quick_calculate",
    # Response models
    "APIError",
    "CalculationResponse",
    "PerformanceMetrics",
    # Formatters
    "format_results",
    "result_to_frame",
    "trail_to_frame",
]
