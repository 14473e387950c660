"""Credit Risk Mitigation components.

Provides:
- CollateralMitigator: Comprehensive approach haircuts on financial collateral

Note: CCF (Credit Conversion Factors) is in engine/ccf.py as it's
part of exposure measurement, not credit risk mitigation. Guarantor and
insurer substitution change the risk weight and live in
engine/adjustments.py.
"""

from fpr_calc.engine.crm.haircuts import CollateralMitigator, create_collateral_mitigator

__all__ = [
    "CollateralMitigator",
    "create_collateral_mitigator",
]
