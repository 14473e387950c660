"""Tests for exposure input validation.

Tests cover:
- Validation helpers (LTV, weight, retail eligibility)
- validate_exposure findings by error code
- Validation never blocks classification
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from fpr_calc.contracts.errors import (
    ERROR_INELIGIBLE_COLLATERAL,
    ERROR_INVALID_GUARANTEE,
    ERROR_INVALID_LTV,
    ERROR_INVALID_PROVISION,
    ERROR_INVALID_VALUE,
    ERROR_MISSING_INSURER_WEIGHT,
    ERROR_MISSING_RATING,
    ERROR_NEGATIVE_AMOUNT,
    ERROR_RETAIL_LIMIT_EXCEEDED,
    ERROR_SME_REVENUE_EXCEEDED,
)
from fpr_calc.contracts.exposure import (
    CollateralPosting,
    CorporateInfo,
    CRMInfo,
    DefaultInfo,
    Exposure,
    ExposureAmounts,
    RealEstateInfo,
    RetailInfo,
    SovereignInfo,
)
from fpr_calc.contracts.validation import (
    is_retail_eligible,
    is_valid_ltv,
    is_valid_weight,
    validate_exposure,
)
from fpr_calc.domain.enums import (
    CollateralType,
    CounterpartyType,
    Currency,
    ErrorSeverity,
    ProductType,
    SovereignKind,
)
from fpr_calc.engine.classifier import ExposureClassifier


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def corporate_loan() -> Exposure:
    return Exposure(product=ProductType.LOAN, counterparty=CounterpartyType.CORPORATE)


@pytest.fixture
def retail_loan() -> Exposure:
    return Exposure(
        product=ProductType.LOAN,
        counterparty=CounterpartyType.INDIVIDUAL,
        retail=RetailInfo(eligible=True),
    )


def _codes(exposure: Exposure) -> list[str]:
    return [error.code for error in validate_exposure(exposure)]


# =============================================================================
# Helper Tests
# =============================================================================


class TestValidationHelpers:
    """Tests for the validation helper functions."""

    @pytest.mark.parametrize(
        ("ltv", "expected"),
        [("0", True), ("85", True), ("200", True), ("200.01", False), ("-1", False)],
    )
    def test_is_valid_ltv(self, ltv: str, expected: bool) -> None:
        assert is_valid_ltv(Decimal(ltv)) is expected

    @pytest.mark.parametrize(
        ("weight", "expected"),
        [("0", True), ("1250", True), ("1250.5", False), ("-0.1", False)],
    )
    def test_is_valid_weight(self, weight: str, expected: bool) -> None:
        assert is_valid_weight(Decimal(weight)) is expected

    def test_is_retail_eligible(self, retail_loan: Exposure, corporate_loan: Exposure) -> None:
        assert is_retail_eligible(Decimal("5000000"), retail_loan) is True
        assert is_retail_eligible(Decimal("5000000.01"), retail_loan) is False
        assert is_retail_eligible(Decimal("1000"), corporate_loan) is False


# =============================================================================
# validate_exposure Tests
# =============================================================================


class TestValidateExposure:
    """Tests for validate_exposure()."""

    def test_clean_record(self, corporate_loan: Exposure) -> None:
        assert validate_exposure(corporate_loan) == []

    def test_invalid_ltv_on_real_estate(self) -> None:
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            real_estate=RealEstateInfo(ltv=Decimal("250"), guarantee_eligible=True),
        )

        errors = validate_exposure(exposure)

        assert [e.code for e in errors] == [ERROR_INVALID_LTV]
        assert errors[0].severity == ErrorSeverity.WARNING

    def test_ltv_ignored_without_real_estate(self, corporate_loan: Exposure) -> None:
        exposure = replace(corporate_loan, real_estate=RealEstateInfo(ltv=Decimal("250")))

        assert _codes(exposure) == []

    def test_plain_int_percentages_are_clean(self, corporate_loan: Exposure) -> None:
        exposure = replace(
            corporate_loan,
            real_estate=RealEstateInfo(ltv=55, guarantee_eligible=True),
            default=DefaultInfo(in_default=True, provision_percent=30),
        )

        assert _codes(exposure) == []

    def test_non_numeric_percentages_flagged(self, corporate_loan: Exposure) -> None:
        exposure = replace(
            corporate_loan,
            real_estate=RealEstateInfo(ltv="n/a", guarantee_eligible=True),
            default=DefaultInfo(in_default=True, provision_percent="abc"),
        )

        errors = validate_exposure(exposure)

        assert [e.code for e in errors] == [ERROR_INVALID_LTV, ERROR_INVALID_PROVISION]
        assert errors[0].actual_value == "n/a"

    def test_provision_out_of_range(self, corporate_loan: Exposure) -> None:
        exposure = replace(corporate_loan, default=DefaultInfo(provision_percent=Decimal("120")))

        assert _codes(exposure) == [ERROR_INVALID_PROVISION]

    def test_unrated_foreign_sovereign(self) -> None:
        exposure = Exposure(product=ProductType.LOAN, counterparty=CounterpartyType.FOREIGN_SOVEREIGN)

        assert _codes(exposure) == [ERROR_MISSING_RATING]

    def test_unrated_multilateral_not_flagged(self) -> None:
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.FOREIGN_SOVEREIGN,
            sovereign=SovereignInfo(kind=SovereignKind.MULTILATERAL_UNLISTED),
        )

        assert _codes(exposure) == []

    def test_sme_revenue_above_limit_is_advisory(self, corporate_loan: Exposure) -> None:
        """The finding is reported but the SME weight still applies."""
        exposure = replace(
            corporate_loan,
            corporate=CorporateInfo(sme=True, annual_revenue=Decimal("400000000")),
        )

        assert _codes(exposure) == [ERROR_SME_REVENUE_EXCEEDED]
        assert ExposureClassifier().classify(exposure).weight == Decimal("85")

    @pytest.mark.parametrize("guarantor_weight", ["abc", None, Decimal("2000")])
    def test_invalid_guarantor_weight(self, corporate_loan: Exposure, guarantor_weight: object) -> None:
        exposure = replace(
            corporate_loan,
            crm=CRMInfo(guarantor_substitution=True, guarantor_weight=guarantor_weight),
        )

        assert _codes(exposure) == [ERROR_INVALID_GUARANTEE]

    def test_missing_insurer_weight(self, corporate_loan: Exposure) -> None:
        exposure = replace(corporate_loan, crm=CRMInfo(credit_insurance=True))

        assert _codes(exposure) == [ERROR_MISSING_INSURER_WEIGHT]

    def test_insurer_weight_out_of_range(self, corporate_loan: Exposure) -> None:
        exposure = replace(corporate_loan, crm=CRMInfo(credit_insurance=True, insurer_weight="-5"))

        assert _codes(exposure) == [ERROR_INVALID_GUARANTEE]

    def test_conditionally_eligible_collateral(self, corporate_loan: Exposure) -> None:
        exposure = replace(corporate_loan, crm=CRMInfo(collateral=(
            CollateralPosting(CollateralType.GOLD, Currency.BRL, Decimal("100")),
            CollateralPosting(CollateralType.PRIVATE_BOND, Currency.BRL, Decimal("100")),
        )))

        errors = validate_exposure(exposure)

        assert [e.code for e in errors] == [ERROR_INELIGIBLE_COLLATERAL]
        assert errors[0].field_name == "crm.collateral[1].collateral_type"

    def test_non_numeric_and_negative_amounts(self, corporate_loan: Exposure) -> None:
        exposure = replace(
            corporate_loan,
            amounts=ExposureAmounts(drawn_balance="abc", undrawn_limit=Decimal("-10")),
        )

        assert _codes(exposure) == [ERROR_INVALID_VALUE, ERROR_NEGATIVE_AMOUNT]

    def test_retail_limit_exceeded(self, retail_loan: Exposure) -> None:
        exposure = replace(
            retail_loan,
            amounts=ExposureAmounts(drawn_balance=Decimal("4000000"), undrawn_limit=Decimal("2000000")),
        )

        assert _codes(exposure) == [ERROR_RETAIL_LIMIT_EXCEEDED]

    def test_retail_within_limit(self, retail_loan: Exposure) -> None:
        exposure = replace(
            retail_loan,
            amounts=ExposureAmounts(drawn_balance=Decimal("10000"), undrawn_limit=Decimal("5000")),
        )

        assert _codes(exposure) == []
