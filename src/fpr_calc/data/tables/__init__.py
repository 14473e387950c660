"""
Res. BCB 229/2022 regulatory lookup tables for FPR calculations.

Tables are immutable module-level mappings built once at import; each
module also exposes Polars DataFrame renderings for display and export.

Modules:
    bcb229_risk_weights: Risk weights by counterparty, asset class and bucket
    bcb229_ccf: Credit conversion factors (Circular 3.809)
    bcb229_haircuts: Comprehensive approach haircuts (Circular 3.809)
"""

from .bcb229_risk_weights import (
    CORPORATE_RISK_WEIGHTS,
    INSTITUTION_RISK_WEIGHTS,
    MAX_RISK_WEIGHT,
    MIN_RISK_WEIGHT,
    MULTILATERAL_RISK_WEIGHTS,
    RESIDENTIAL_DEPENDENT_LTV_LADDER,
    RESIDENTIAL_LTV_LADDER,
    RETAIL_PARAMS,
    SOVEREIGN_RISK_WEIGHTS,
    get_all_risk_weight_tables,
)
from .bcb229_ccf import (
    CCF_TABLE,
    DETAILED_CCF_TABLE,
    get_ccf_table,
)
from .bcb229_haircuts import (
    COLLATERAL_HAIRCUTS,
    FX_HAIRCUT,
    get_haircut_table,
)

__all__ = [
    # Risk weights
    "CORPORATE_RISK_WEIGHTS",
    "INSTITUTION_RISK_WEIGHTS",
    "MAX_RISK_WEIGHT",
    "MIN_RISK_WEIGHT",
    "MULTILATERAL_RISK_WEIGHTS",
    "RESIDENTIAL_DEPENDENT_LTV_LADDER",
    "RESIDENTIAL_LTV_LADDER",
    "RETAIL_PARAMS",
    "SOVEREIGN_RISK_WEIGHTS",
    "get_all_risk_weight_tables",
    # CCF
    "CCF_TABLE",
    "DETAILED_CCF_TABLE",
    "get_ccf_table",
    # Haircuts
    "COLLATERAL_HAIRCUTS",
    "FX_HAIRCUT",
    "get_haircut_table",
]
