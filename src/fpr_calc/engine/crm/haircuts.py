"""
Collateral mitigation using the comprehensive approach.

Applies supervisory haircuts to financial collateral per Circular BCB
3.809/2016:

    E* = max(0, E x (1 + He) - sum(C_i x (1 - Hc_i - Hfx_i)))

Where:
    He: Exposure haircut (30% on maturity mismatch, otherwise 0%)
    Hc_i: Collateral haircut by collateral type
    Hfx_i: 8% when the posting currency differs from the exposure's

The reported Hc and Hfx are the largest values across postings and are
for display only; the sum uses each posting's own haircuts.

Classes:
    CollateralMitigator: Implements MitigatorProtocol

Usage:
    from fpr_calc.engine.crm.haircuts import CollateralMitigator

    mitigator = CollateralMitigator()
    mitigation = mitigator.mitigate(ead, exposure.crm.collateral, exposure.exposure_currency)
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.bundles import HaircutResult, MitigationResult
from fpr_calc.contracts.exposure import to_decimal
from fpr_calc.data.tables.bcb229_haircuts import (
    ALWAYS_ELIGIBLE_COLLATERAL,
    calculate_adjusted_collateral_value,
    lookup_collateral_haircut,
    lookup_exposure_haircut,
    lookup_fx_haircut,
)
from fpr_calc.engine.audit import format_amount, format_fraction

if TYPE_CHECKING:
    from fpr_calc.contracts.exposure import CollateralPosting
    from fpr_calc.domain.enums import CollateralType, Currency

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


class CollateralMitigator:
    """
    Reduce EAD by haircut-adjusted financial collateral.

    Without postings the EAD passes through unchanged with zero haircuts.
    Posting values that are negative or not numbers count as zero.
    """

    def mitigate(
        self,
        ead: Decimal,
        postings: tuple[CollateralPosting, ...],
        exposure_currency: Currency,
        maturity_mismatch: bool = False,
    ) -> MitigationResult:
        """
        Apply collateral postings to an EAD.

        Args:
            ead: Exposure at default
            postings: Collateral postings
            exposure_currency: Currency of the exposure
            maturity_mismatch: Whether the exposure haircut applies

        Returns:
            MitigationResult with adjusted EAD and haircut details
        """
        if not postings:
            return MitigationResult(ead=ead, adjusted_ead=ead)

        trail: list[str] = []
        exposure_haircut = lookup_exposure_haircut(maturity_mismatch)

        results: list[HaircutResult] = []
        for posting in postings:
            value = to_decimal(posting.value)
            if value is None or value < 0:
                logger.warning(
                    "Collateral posting value %r (%s) treated as zero",
                    posting.value, posting.collateral_type.value,
                )
                trail.append(
                    f"Collateral {posting.collateral_type.value} with invalid value "
                    f"({posting.value!r}) -> 0.00 considered"
                )
                value = _ZERO

            results.append(
                self.calculate_single_haircut(
                    collateral_type=posting.collateral_type,
                    market_value=value,
                    collateral_currency=posting.currency,
                    exposure_currency=exposure_currency,
                )
            )

        total_collateral = sum((r.adjusted_value for r in results), _ZERO)
        collateral_haircut = max(r.collateral_haircut for r in results)
        fx_haircut = max(r.fx_haircut for r in results)

        adjusted_exposure = ead * (Decimal("1") + exposure_haircut)
        adjusted_ead = max(_ZERO, adjusted_exposure - total_collateral)

        if exposure_haircut > 0:
            trail.append(f"Exposure haircut (He): {format_fraction(exposure_haircut)}")
        if collateral_haircut > 0:
            trail.append(f"Collateral haircut (Hc): {format_fraction(collateral_haircut)}")
        if fx_haircut > 0:
            trail.append(f"FX haircut (Hfx): {format_fraction(fx_haircut)}")
        trail.append(
            f"E* = max(0, {format_amount(ead)} x (1 + He) - {format_amount(total_collateral)}) "
            f"= {format_amount(adjusted_ead)}"
        )

        logger.debug("Mitigated EAD %s -> %s over %d postings", ead, adjusted_ead, len(results))

        return MitigationResult(
            ead=ead,
            adjusted_ead=adjusted_ead,
            exposure_haircut=exposure_haircut,
            collateral_haircut=collateral_haircut,
            fx_haircut=fx_haircut,
            postings=tuple(results),
            trail=tuple(trail),
        )

    def calculate_single_haircut(
        self,
        collateral_type: CollateralType,
        market_value: Decimal,
        collateral_currency: Currency,
        exposure_currency: Currency,
    ) -> HaircutResult:
        """
        Calculate haircuts for a single collateral posting (convenience method).

        Args:
            collateral_type: Type of collateral
            market_value: Market value of collateral
            collateral_currency: Currency of collateral
            exposure_currency: Currency of exposure

        Returns:
            HaircutResult with all haircut details
        """
        coll_haircut = lookup_collateral_haircut(collateral_type)
        fx_haircut = lookup_fx_haircut(exposure_currency, collateral_currency)

        adjusted = calculate_adjusted_collateral_value(
            collateral_value=market_value,
            collateral_haircut=coll_haircut,
            fx_haircut=fx_haircut,
        )

        description = (
            f"MV={format_amount(market_value)}; Hc={format_fraction(coll_haircut)}; "
            f"Hfx={format_fraction(fx_haircut)}; Adj={format_amount(adjusted)}"
        )
        if collateral_type not in ALWAYS_ELIGIBLE_COLLATERAL:
            description += "; eligibility subject to minimum requirements"

        return HaircutResult(
            collateral_type=collateral_type,
            currency=collateral_currency,
            original_value=market_value,
            collateral_haircut=coll_haircut,
            fx_haircut=fx_haircut,
            adjusted_value=adjusted,
            description=description,
        )


def create_collateral_mitigator() -> CollateralMitigator:
    """
    Create a collateral mitigator instance.

    Returns:
        CollateralMitigator ready for use
    """
    return CollateralMitigator()
