"""Unit tests for the risk weight adjuster.

Tests cover:
- Currency mismatch scaling for retail and residential labels only
- Guarantor substitution precedence over credit insurance
- Insurer weight missing / not numeric recovery
- Netting note, custody floor and final clamp
- Stage ordering and trail content
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from fpr_calc.contracts.bundles import ClassificationResult
from fpr_calc.contracts.exposure import CRMInfo, Exposure, FloorInfo
from fpr_calc.domain.enums import ClassificationLabel, CounterpartyType, Currency, ProductType
from fpr_calc.engine.adjustments import RiskWeightAdjuster, create_risk_weight_adjuster


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def adjuster() -> RiskWeightAdjuster:
    """Return a RiskWeightAdjuster with the default configuration."""
    return create_risk_weight_adjuster()


@pytest.fixture
def retail_transactor() -> ClassificationResult:
    return ClassificationResult(
        weight=Decimal("45"),
        label=ClassificationLabel.RETAIL_TRANSACTOR,
        rule="retail",
    )


@pytest.fixture
def corporate() -> ClassificationResult:
    return ClassificationResult(
        weight=Decimal("100"),
        label=ClassificationLabel.CORPORATE,
        rule="corporate",
    )


def _exposure(**kwargs) -> Exposure:
    defaults = {"product": ProductType.LOAN, "counterparty": CounterpartyType.CORPORATE}
    defaults.update(kwargs)
    return Exposure(**defaults)


def _unhedged_usd(**kwargs) -> Exposure:
    return _exposure(exposure_currency=Currency.USD, income_currency=Currency.BRL, **kwargs)


# =============================================================================
# Currency Mismatch Tests
# =============================================================================


class TestCurrencyMismatch:
    """Tests for the currency mismatch adjustment (Arts. 41 and 44)."""

    def test_retail_transactor_scaled(
        self,
        adjuster: RiskWeightAdjuster,
        retail_transactor: ClassificationResult,
    ) -> None:
        result = adjuster.adjust(retail_transactor, _unhedged_usd(counterparty=CounterpartyType.INDIVIDUAL))

        assert result.weight == Decimal("67.5")
        assert result.base_weight == Decimal("45")
        assert result.currency_mismatch_applied is True
        assert result.trail == ("Currency mismatch adjustment: min(45% x 1.5, 150%) = 67.5%",)

    def test_residential_scaled_and_capped(self, adjuster: RiskWeightAdjuster) -> None:
        """x1.5 never exceeds the 150% cap."""
        classification = ClassificationResult(
            weight=Decimal("105"),
            label=ClassificationLabel.RESIDENTIAL_MORTGAGE,
            rule="real_estate",
        )

        result = adjuster.adjust(classification, _unhedged_usd())

        assert result.weight == Decimal("150")

    def test_ineligible_label_only_noted(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        result = adjuster.adjust(corporate, _unhedged_usd())

        assert result.weight == Decimal("100")
        assert result.currency_mismatch_applied is False
        assert result.trail == (
            "Currency mismatch identified, but class is not retail/residential "
            "-> no FPR adjustment (assess risk impact)",
        )

    def test_hedged_exposure_not_adjusted(
        self,
        adjuster: RiskWeightAdjuster,
        retail_transactor: ClassificationResult,
    ) -> None:
        """A hedge covering at least 90% removes the mismatch."""
        result = adjuster.adjust(retail_transactor, _unhedged_usd(hedged_90=True))

        assert result.weight == Decimal("45")
        assert result.trail == ()

    def test_label_unchanged(
        self,
        adjuster: RiskWeightAdjuster,
        retail_transactor: ClassificationResult,
    ) -> None:
        result = adjuster.adjust(retail_transactor, _unhedged_usd())

        assert result.label == ClassificationLabel.RETAIL_TRANSACTOR


# =============================================================================
# CRM Substitution Tests
# =============================================================================


class TestCRMSubstitution:
    """Tests for guarantor and insurer substitution."""

    def test_guarantor_substitution(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        exposure = _exposure(crm=CRMInfo(guarantor_substitution=True, guarantor_weight=Decimal("20")))

        result = adjuster.adjust(corporate, exposure)

        assert result.weight == Decimal("20")
        assert result.substitution == "guarantor"
        assert result.trail == (
            "CRM - eligible guarantor substitution (Circ. 3.809) -> guarantor FPR: 20%",
        )

    def test_guarantor_wins_over_insurer(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        """When both are requested the guarantor applies and insurance is not evaluated."""
        exposure = _exposure(crm=CRMInfo(
            guarantor_substitution=True,
            guarantor_weight="50",
            credit_insurance=True,
            insurer_weight="20",
            netting_agreement=True,
        ))

        result = adjuster.adjust(corporate, exposure)

        assert result.weight == Decimal("50")
        assert result.substitution == "guarantor"
        assert len(result.trail) == 1

    def test_non_numeric_guarantor_falls_through_to_insurer(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        exposure = _exposure(crm=CRMInfo(
            guarantor_substitution=True,
            guarantor_weight="n/a",
            credit_insurance=True,
            insurer_weight=30,
        ))

        result = adjuster.adjust(corporate, exposure)

        assert result.weight == Decimal("30")
        assert result.substitution == "insurer"

    def test_substitute_weight_clamped(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        exposure = _exposure(crm=CRMInfo(guarantor_substitution=True, guarantor_weight="2000"))

        result = adjuster.adjust(corporate, exposure)

        assert result.weight == Decimal("1250")

    @pytest.mark.parametrize("insurer_weight", [None, "", "abc", float("nan")])
    def test_insurer_weight_missing(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
        insurer_weight: object,
    ) -> None:
        """Missing insurer weight leaves the weight unchanged with a warning line."""
        exposure = _exposure(crm=CRMInfo(credit_insurance=True, insurer_weight=insurer_weight))

        result = adjuster.adjust(corporate, exposure)

        assert result.weight == Decimal("100")
        assert result.substitution is None
        assert result.trail == (
            "Warning: credit insurance active, but insurer FPR not informed -> no adjustment applied",
        )

    def test_netting_is_noted_only(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        result = adjuster.adjust(corporate, _exposure(crm=CRMInfo(netting_agreement=True)))

        assert result.weight == Decimal("100")
        assert "netting" in result.trail[0]

    def test_substitution_replaces_mismatch_adjusted_weight(
        self,
        adjuster: RiskWeightAdjuster,
        retail_transactor: ClassificationResult,
    ) -> None:
        """Substitution runs after the currency mismatch stage."""
        exposure = _unhedged_usd(crm=CRMInfo(guarantor_substitution=True, guarantor_weight="20"))

        result = adjuster.adjust(retail_transactor, exposure)

        assert result.weight == Decimal("20")
        assert result.currency_mismatch_applied is True
        assert result.trail[0].startswith("Currency mismatch adjustment")
        assert result.trail[1].startswith("CRM - eligible guarantor substitution")


# =============================================================================
# Floor and Clamp Tests
# =============================================================================


class TestFloorsAndClamp:
    """Tests for the custody floor and the final clamp."""

    def test_custody_floor_raises_weight(self, adjuster: RiskWeightAdjuster) -> None:
        classification = ClassificationResult(
            weight=Decimal("0"), label=ClassificationLabel.CASH, rule="other_assets",
        )
        exposure = _exposure(product=ProductType.OTHER, floors=FloorInfo(custody_risk=True))

        result = adjuster.adjust(classification, exposure)

        assert result.weight == Decimal("20")
        assert result.floor_applied is True
        assert result.trail == (
            "Floor: cash outside direct possession -> minimum FPR 20% applied",
        )

    def test_custody_floor_silent_when_not_binding(
        self,
        adjuster: RiskWeightAdjuster,
        corporate: ClassificationResult,
    ) -> None:
        result = adjuster.adjust(corporate, _exposure(floors=FloorInfo(custody_risk=True)))

        assert result.weight == Decimal("100")
        assert result.floor_applied is False
        assert result.trail == ()

    def test_out_of_range_weight_clamped(self, adjuster: RiskWeightAdjuster) -> None:
        classification = ClassificationResult(
            weight=Decimal("1500"), label=ClassificationLabel.UNMAPPED, rule="fallback",
        )

        result = adjuster.adjust(classification, _exposure())

        assert result.weight == Decimal("1250")
        assert result.clamped is True
        assert result.trail == ("Sanitisation: FPR limited between 0% and 1250%",)

    def test_clamp_is_idempotent(self, adjuster: RiskWeightAdjuster) -> None:
        """A weight already at the cap passes without a sanitisation line."""
        classification = ClassificationResult(
            weight=Decimal("1250"), label=ClassificationLabel.EQUITY, rule="special",
        )

        result = adjuster.adjust(classification, _exposure())

        assert result.weight == Decimal("1250")
        assert result.clamped is False
        assert result.trail == ()
