"""
Standardised Credit Risk Weight (FPR) Calculator.

Computes the regulatory risk weight ("fator de ponderação de risco", FPR)
for a single credit exposure under Brazilian Res. BCB 229/2022, and
optionally its exposure-at-default (EAD), collateral-adjusted EAD and
risk-weighted amount.

Basic usage:
    >>> from fpr_calc.contracts.exposure import Exposure
    >>> from fpr_calc.domain.enums import CounterpartyType, ProductType
    >>> from fpr_calc.engine.pipeline import create_pipeline
    >>>
    >>> exposure = Exposure(
    ...     product=ProductType.LOAN,
    ...     counterparty=CounterpartyType.DOMESTIC_SOVEREIGN,
    ... )
    >>> result = create_pipeline().run(exposure)
    >>> result.final_weight
    Decimal('0')
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
