"""
Exposure at default (EAD) calculator.

Converts balances into EAD using credit conversion factors
(Res. BCB 229/2022 Art. 6, Circular BCB 3.809/2016 Arts. 13-17):

    gross = drawn balance + CCF x undrawn limit
    provision = provision% / 100 x drawn balance
    EAD = max(0, gross - provision)

CCF resolution order:
1. Manual override supplied with the amounts (clamped to [0%, 100%])
2. Retail override: eligible individual on a card or credit line product
3. Detailed CCF selector
4. Generic CCF selector (unknown selectors take OTHER, 100%)

Numeric defects are recovered locally: values that are not numbers are
treated as zero and negative balances yield a zero EAD, both with a
trail entry.

Classes:
    EADCalculator: Implements EADCalculatorProtocol

Usage:
    from fpr_calc.engine.ccf import EADCalculator

    calculator = EADCalculator()
    ead_result = calculator.calculate(exposure)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.bundles import EADResult
from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.exposure import to_decimal
from fpr_calc.data.tables.bcb229_ccf import (
    RETAIL_CARD_CCF,
    RETAIL_OVERDRAFT_CCF,
    calculate_ead_off_balance_sheet,
    lookup_ccf,
)
from fpr_calc.domain.enums import CounterpartyType, ProductType
from fpr_calc.engine.audit import format_amount, format_fraction, format_percent

if TYPE_CHECKING:
    from fpr_calc.contracts.exposure import Exposure, ExposureAmounts

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CCFResolution:
    """Resolved CCF for an exposure."""

    ccf: Decimal
    source: str
    description: str


class EADCalculator:
    """
    Calculate exposure at default for exposures carrying amounts.

    Returns None for exposures without amounts so the orchestrator can
    skip EAD, mitigation and RWA entirely.
    """

    def __init__(self, config: CalculationConfig | None = None) -> None:
        self._config = config or CalculationConfig.bcb_229()

    def calculate(self, exposure: Exposure) -> EADResult | None:
        """
        Calculate EAD for an exposure.

        Args:
            exposure: Exposure record

        Returns:
            EADResult, or None if the exposure has no amounts
        """
        amounts = exposure.amounts
        if amounts is None:
            return None

        trail: list[str] = []
        drawn = self._coerce_amount(amounts.drawn_balance, "Drawn balance", trail)
        undrawn = self._coerce_amount(amounts.undrawn_limit, "Undrawn limit", trail)

        if drawn < 0 or undrawn < 0:
            logger.warning("Negative EAD inputs rejected: drawn=%s undrawn=%s", drawn, undrawn)
            trail.append("Warning: negative values are not allowed for EAD -> EAD 0.00")
            return EADResult(
                ead=_ZERO,
                drawn_balance=drawn,
                undrawn_limit=undrawn,
                ccf=_ZERO,
                ccf_source="rejected",
                rejected=True,
                trail=tuple(trail),
            )

        resolution = self.resolve_ccf(exposure, trail)
        provision_percent = self._provision_percent(exposure, trail)

        gross, provision, ead = calculate_ead_off_balance_sheet(
            drawn_balance=drawn,
            undrawn_limit=undrawn,
            ccf=resolution.ccf,
            provision_percent=provision_percent,
        )
        ccf_amount = resolution.ccf * undrawn

        trail.append(f"Drawn balance: {format_amount(drawn)}")
        trail.append(f"Undrawn limit: {format_amount(undrawn)}")
        trail.append(f"CCF ({resolution.description}): {format_fraction(resolution.ccf)}")
        trail.append(f"CCF applied to limit: {format_amount(ccf_amount)}")
        trail.append(f"Gross exposure = drawn + (CCF x limit) = {format_amount(gross)}")

        if provision > 0:
            trail.append(
                f"Provision ({format_percent(provision_percent)} x {format_amount(drawn)}) "
                f"= {format_amount(provision)}"
            )
            trail.append(
                f"EAD = max(0, exposure - provision) = max(0, {format_amount(gross)} - "
                f"{format_amount(provision)}) = {format_amount(ead)}"
            )
        else:
            trail.append(f"EAD = {format_amount(ead)} (no deductible provision)")

        logger.debug("EAD %s (CCF %s from %s)", ead, resolution.ccf, resolution.source)

        return EADResult(
            ead=ead,
            drawn_balance=drawn,
            undrawn_limit=undrawn,
            ccf=resolution.ccf,
            ccf_source=resolution.source,
            ccf_amount=ccf_amount,
            gross_exposure=gross,
            provision_percent=provision_percent,
            provision_amount=provision,
            trail=tuple(trail),
        )

    def resolve_ccf(self, exposure: Exposure, trail: list[str] | None = None) -> CCFResolution:
        """
        Resolve the CCF for an exposure with amounts.

        Args:
            exposure: Exposure record (amounts must be present)
            trail: Optional list receiving notes about clamped overrides

        Returns:
            CCFResolution with the factor, its source and a description
        """
        amounts: ExposureAmounts | None = exposure.amounts
        if amounts is None:
            raise ValueError("exposure has no amounts")

        override = to_decimal(amounts.ccf_override)
        if override is not None:
            ccf = min(max(override, _ZERO), _ONE)
            if ccf != override and trail is not None:
                trail.append(
                    f"Manual CCF ({format_fraction(override)}) outside [0%, 100%], "
                    f"adjusted to {format_fraction(ccf)}"
                )
            return CCFResolution(ccf=ccf, source="override", description="manual override")

        if exposure.counterparty == CounterpartyType.INDIVIDUAL and exposure.retail.eligible:
            if exposure.product == ProductType.CARD:
                return CCFResolution(ccf=RETAIL_CARD_CCF, source="retail", description="retail card")
            if exposure.product == ProductType.CREDIT_LINE:
                return CCFResolution(
                    ccf=RETAIL_OVERDRAFT_CCF, source="retail", description="retail overdraft",
                )

        if amounts.ccf_detail is not None:
            return CCFResolution(
                ccf=lookup_ccf(amounts.ccf_type, amounts.ccf_detail),
                source="detailed",
                description=amounts.ccf_detail.value,
            )

        return CCFResolution(
            ccf=lookup_ccf(amounts.ccf_type),
            source="generic",
            description=amounts.ccf_type.value,
        )

    # =========================================================================
    # Private Methods
    # =========================================================================

    @staticmethod
    def _coerce_amount(value: object, name: str, trail: list[str]) -> Decimal:
        """Convert an amount to Decimal, substituting zero for non-numbers."""
        amount = to_decimal(value)
        if amount is None:
            logger.warning("%s is not numeric (%r); zero assumed", name, value)
            trail.append(f"{name} not numeric ({value!r}) -> 0.00 assumed")
            return _ZERO
        return amount

    @staticmethod
    def _provision_percent(exposure: Exposure, trail: list[str]) -> Decimal:
        """Provision percent from the default attributes, clamped to [0, 100]."""
        raw = to_decimal(exposure.default.provision_percent)
        if raw is None:
            trail.append("Provision percent not numeric -> 0% assumed")
            return _ZERO

        provision = min(max(raw, _ZERO), _HUNDRED)
        if provision != raw:
            trail.append(
                f"Provision percent ({format_percent(raw)}) outside [0%, 100%], "
                f"adjusted to {format_percent(provision)}"
            )
        return provision


def create_ead_calculator(config: CalculationConfig | None = None) -> EADCalculator:
    """
    Create an EAD calculator instance.

    Args:
        config: Optional calculation configuration

    Returns:
        EADCalculator ready for use
    """
    return EADCalculator(config)
