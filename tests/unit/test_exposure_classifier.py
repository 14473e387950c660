"""Unit tests for the exposure classifier.

Tests cover:
- Rule group precedence (default > other assets > special > counterparty)
- Sovereign, multilateral and public sector weights
- Financial institution candidate selection (Arts. 32-35)
- Retail, payroll and corporate treatments
- Real estate LTV ladders and obligor fallbacks (Arts. 42-46)
- Fund look-through / mandate and derivative counterparty pricing
- Trail content and immutability of the input record
- Plain int, float and non-numeric percentages in the record
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from unittest.mock import patch

import pytest

from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.exposure import (
    CorporateInfo,
    DefaultInfo,
    Exposure,
    FundInfo,
    InstitutionInfo,
    PublicSectorInfo,
    RealEstateInfo,
    RetailInfo,
    SovereignInfo,
    SpecialInfo,
)
from fpr_calc.domain.enums import (
    ClassificationLabel,
    CounterpartyType,
    EquityTier,
    FundApproach,
    FundMandate,
    InstitutionCategory,
    MultilateralRatingBucket,
    OtherAssetType,
    OverrideTier,
    ProductType,
    ProjectFinancePhase,
    PropertyType,
    PublicSectorType,
    RatingBucket,
    SovereignKind,
    SpecialisedFinancing,
)
from fpr_calc.engine.classifier import (
    RULE_ORDER,
    ExposureClassifier,
    create_exposure_classifier,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def classifier() -> ExposureClassifier:
    """Return an ExposureClassifier with the default configuration."""
    return ExposureClassifier()


@pytest.fixture
def corporate_loan() -> Exposure:
    """Plain corporate loan without any special attributes."""
    return Exposure(product=ProductType.LOAN, counterparty=CounterpartyType.CORPORATE)


def _institution(**kwargs) -> Exposure:
    return Exposure(
        product=ProductType.LOAN,
        counterparty=CounterpartyType.FINANCIAL_INSTITUTION,
        institution=InstitutionInfo(**kwargs),
    )


def _non_residential(ltv: str, dependent: bool = False, **kwargs) -> Exposure:
    return Exposure(
        product=ProductType.REAL_ESTATE_LOAN,
        real_estate=RealEstateInfo(
            property_type=PropertyType.NON_RESIDENTIAL,
            cash_flow_dependent=dependent,
            ltv=Decimal(ltv),
            guarantee_eligible=True,
        ),
        **kwargs,
    )


# =============================================================================
# Rule Order Tests
# =============================================================================


class TestRuleOrder:
    """Tests for the evaluation order of the rule groups."""

    def test_rule_order_is_fixed(self) -> None:
        """Rule groups should run from default down to fallback."""
        assert RULE_ORDER == (
            "default",
            "other_assets",
            "special",
            "sovereign",
            "public_sector",
            "financial_institution",
            "real_estate",
            "retail",
            "corporate",
            "fund",
            "derivative",
            "fallback",
        )

    def test_default_beats_special_override(self, classifier: ExposureClassifier) -> None:
        """A defaulted exposure ignores the equity override."""
        exposure = Exposure(
            product=ProductType.OTHER,
            counterparty=CounterpartyType.CORPORATE,
            default=DefaultInfo(in_default=True, provision_percent=Decimal("60")),
            special=SpecialInfo(equity=EquityTier.RW_1250),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("50")
        assert result.rule == "default"
        assert result.label == ClassificationLabel.DEFAULT_HIGH_PROVISION

    def test_special_beats_domestic_sovereign(self, classifier: ExposureClassifier) -> None:
        """Subordination applies before any counterparty rule."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.DOMESTIC_SOVEREIGN,
            special=SpecialInfo(subordinated=True),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("150")
        assert result.label == ClassificationLabel.SUBORDINATED

    def test_other_asset_ignored_for_non_other_product(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        """The other asset carve-out is read only for the OTHER product."""
        exposure = replace(corporate_loan, other_asset=OtherAssetType.CASH)

        result = classifier.classify(exposure)

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.CORPORATE

    def test_fund_product_not_captured_by_counterparty(self, classifier: ExposureClassifier) -> None:
        """A fund held against a sovereign is priced by the fund rule."""
        exposure = Exposure(product=ProductType.FUND, counterparty=CounterpartyType.DOMESTIC_SOVEREIGN)

        result = classifier.classify(exposure)

        assert result.rule == "fund"
        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.FUND

    def test_evaluate_rule_returns_none_when_group_does_not_match(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        """A single group can be evaluated in isolation."""
        assert classifier.evaluate_rule("sovereign", corporate_loan) is None
        assert classifier.evaluate_rule("corporate", corporate_loan).weight == Decimal("100")

    def test_evaluate_rule_unknown_name_raises(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        """Unknown rule group names raise KeyError."""
        with pytest.raises(KeyError):
            classifier.evaluate_rule("securitisation", corporate_loan)

    def test_fallback_uses_configured_default_weight(self, corporate_loan: Exposure) -> None:
        """The fallback group returns the configured conservative weight."""
        config = replace(CalculationConfig.bcb_229(), default_weight=Decimal("150"))
        classifier = create_exposure_classifier(config)

        result = classifier.evaluate_rule("fallback", corporate_loan)

        assert result.weight == Decimal("150")
        assert result.label == ClassificationLabel.UNMAPPED
        assert result.trail == ("Class not mapped -> conservative FPR 150%",)

    def test_no_matching_group_falls_back(self, corporate_loan: Exposure) -> None:
        """When every group declines, classify() returns the fallback result."""
        with patch.object(ExposureClassifier, "_classify_corporate", return_value=None):
            classifier = ExposureClassifier()

        result = classifier.classify(corporate_loan)

        assert result.rule == "fallback"
        assert result.weight == Decimal("100")
        assert result.trail == ("Class not mapped -> conservative FPR 100%",)


# =============================================================================
# Default, Other Assets and Special Tests
# =============================================================================


class TestOverrides:
    """Tests for default, other asset and special override groups."""

    @pytest.mark.parametrize(
        ("provision", "expected_weight", "expected_label"),
        [
            ("0", "150", ClassificationLabel.DEFAULT_LOW_PROVISION),
            ("19.99", "150", ClassificationLabel.DEFAULT_LOW_PROVISION),
            ("20", "100", ClassificationLabel.DEFAULT_MEDIUM_PROVISION),
            ("49.99", "100", ClassificationLabel.DEFAULT_MEDIUM_PROVISION),
            ("50", "50", ClassificationLabel.DEFAULT_HIGH_PROVISION),
            ("100", "50", ClassificationLabel.DEFAULT_HIGH_PROVISION),
        ],
    )
    def test_default_provision_tiers(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
        provision: str,
        expected_weight: str,
        expected_label: ClassificationLabel,
    ) -> None:
        """Provision tiers are inclusive at their lower threshold."""
        exposure = replace(
            corporate_loan,
            default=DefaultInfo(in_default=True, provision_percent=Decimal(provision)),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.label == expected_label

    def test_default_trail_names_tier(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        exposure = replace(
            corporate_loan,
            default=DefaultInfo(in_default=True, provision_percent=Decimal("15")),
        )

        result = classifier.classify(exposure)

        assert result.trail == ("Exposure in default, provision < 20% (15%) -> FPR 150%",)

    @pytest.mark.parametrize(
        ("provision", "expected_weight"),
        [(30, "100"), (60, "50"), (15.5, "150"), ("25", "100")],
    )
    def test_default_provision_plain_numbers(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
        provision: object,
        expected_weight: str,
    ) -> None:
        exposure = replace(
            corporate_loan,
            default=DefaultInfo(in_default=True, provision_percent=provision),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)

    def test_default_provision_not_numeric(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        """An unreadable provision counts as 0%, the most conservative tier."""
        exposure = replace(
            corporate_loan,
            default=DefaultInfo(in_default=True, provision_percent="abc"),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("150")
        assert result.trail == (
            "Provision percent not numeric ('abc') -> 0% assumed",
            "Exposure in default, provision < 20% (0%) -> FPR 150%",
        )

    @pytest.mark.parametrize(
        ("asset", "expected_weight"),
        [
            (OtherAssetType.CASH, "0"),
            (OtherAssetType.GOLD, "0"),
            (OtherAssetType.LISTED_EQUITY, "250"),
            (OtherAssetType.UNLISTED_EQUITY, "400"),
            (OtherAssetType.FIXED_ASSET, "100"),
            (OtherAssetType.OTHER, "100"),
        ],
    )
    def test_other_assets(
        self,
        classifier: ExposureClassifier,
        asset: OtherAssetType,
        expected_weight: str,
    ) -> None:
        """Other asset carve-outs per Art. 66."""
        exposure = Exposure(
            product=ProductType.OTHER,
            counterparty=CounterpartyType.CORPORATE,
            other_asset=asset,
        )

        result = classifier.classify(exposure)

        assert result.rule == "other_assets"
        assert result.weight == Decimal(expected_weight)

    def test_special_precedence_negative_equity_first(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        """Negative equity adjustment wins over the other special flags."""
        exposure = replace(
            corporate_loan,
            special=SpecialInfo(
                negative_equity_adjustment=True,
                subordinated=True,
                tax_credit=OverrideTier.RW_1250,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.NEGATIVE_EQUITY_ADJUSTMENT

    @pytest.mark.parametrize(
        ("special", "expected_weight", "expected_label"),
        [
            (SpecialInfo(equity=EquityTier.RW_250), "250", ClassificationLabel.EQUITY),
            (SpecialInfo(equity=EquityTier.RW_1250), "1250", ClassificationLabel.EQUITY),
            (SpecialInfo(tax_credit=OverrideTier.RW_600), "600", ClassificationLabel.TAX_CREDIT),
            (SpecialInfo(receivables=OverrideTier.RW_100), "100", ClassificationLabel.RECEIVABLES),
        ],
    )
    def test_special_overrides(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
        special: SpecialInfo,
        expected_weight: str,
        expected_label: ClassificationLabel,
    ) -> None:
        result = classifier.classify(replace(corporate_loan, special=special))

        assert result.weight == Decimal(expected_weight)
        assert result.label == expected_label


# =============================================================================
# Counterparty Tests
# =============================================================================


class TestSovereignAndPublicSector:
    """Tests for sovereigns, multilaterals and public sector entities."""

    def test_domestic_sovereign(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(product=ProductType.LOAN, counterparty=CounterpartyType.DOMESTIC_SOVEREIGN)

        result = classifier.classify(exposure)

        assert result.weight == Decimal("0")
        assert result.label == ClassificationLabel.SOVEREIGN
        assert result.trail == ("Domestic sovereign (National Treasury / BCB) -> FPR 0%",)

    @pytest.mark.parametrize(
        ("rating", "expected_weight"),
        [
            (RatingBucket.AAA_TO_AA_MINUS, "0"),
            (RatingBucket.A_PLUS_TO_A_MINUS, "20"),
            (RatingBucket.BBB_PLUS_TO_BBB_MINUS, "50"),
            (RatingBucket.BB_PLUS_TO_B_MINUS, "100"),
            (RatingBucket.BELOW_B_MINUS, "150"),
        ],
    )
    def test_rated_foreign_sovereign(
        self,
        classifier: ExposureClassifier,
        rating: RatingBucket,
        expected_weight: str,
    ) -> None:
        """Foreign sovereign weights by rating bucket (Art. 27)."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.FOREIGN_SOVEREIGN,
            sovereign=SovereignInfo(rating=rating),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.label == ClassificationLabel.FOREIGN_SOVEREIGN

    def test_unrated_foreign_sovereign_is_100(self, classifier: ExposureClassifier) -> None:
        """A missing rating takes 100%, not the below-B- weight."""
        exposure = Exposure(product=ProductType.LOAN, counterparty=CounterpartyType.FOREIGN_SOVEREIGN)

        result = classifier.classify(exposure)

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.FOREIGN_SOVEREIGN_UNRATED

    def test_listed_multilateral(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.FOREIGN_SOVEREIGN,
            sovereign=SovereignInfo(kind=SovereignKind.MULTILATERAL_LISTED),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("0")
        assert result.label == ClassificationLabel.MULTILATERAL

    @pytest.mark.parametrize(
        ("rating", "expected_weight"),
        [
            (MultilateralRatingBucket.AAA_TO_AA_MINUS, "20"),
            (MultilateralRatingBucket.A_PLUS_TO_A_MINUS, "30"),
            (None, "50"),
            (MultilateralRatingBucket.BELOW_B_MINUS, "150"),
        ],
    )
    def test_unlisted_multilateral(
        self,
        classifier: ExposureClassifier,
        rating: MultilateralRatingBucket | None,
        expected_weight: str,
    ) -> None:
        """Unlisted multilaterals use their own table (Art. 29)."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.FOREIGN_SOVEREIGN,
            sovereign=SovereignInfo(
                kind=SovereignKind.MULTILATERAL_UNLISTED,
                multilateral_rating=rating,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.label == ClassificationLabel.MULTILATERAL_RATED

    def test_public_sector_rating_is_informational(self, classifier: ExposureClassifier) -> None:
        """Public sector weight is fixed; the rating only adds a trail line."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.PUBLIC_SECTOR,
            public_sector=PublicSectorInfo(
                kind=PublicSectorType.MUNICIPALITY,
                rating=RatingBucket.AAA_TO_AA_MINUS,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.PUBLIC_SECTOR_MUNICIPALITY
        assert len(result.trail) == 2
        assert "reference only" in result.trail[1]


class TestFinancialInstitution:
    """Tests for financial institution weights (Arts. 32-35)."""

    def test_category_c_is_150(self, classifier: ExposureClassifier) -> None:
        """Category C ignores every favourable flag."""
        result = classifier.classify(_institution(
            category=InstitutionCategory.C,
            tenor_90d=True,
            trade_finance_1y=True,
        ))

        assert result.weight == Decimal("150")

    def test_trade_finance_short_circuits(self, classifier: ExposureClassifier) -> None:
        result = classifier.classify(_institution(
            category=InstitutionCategory.B,
            trade_finance_1y=True,
            netting_eligible=True,
        ))

        assert result.weight == Decimal("50")
        assert "trade finance" in result.trail[0]

    @pytest.mark.parametrize(
        ("flags", "expected_weight"),
        [
            ({"category": InstitutionCategory.A}, "40"),
            ({"category": InstitutionCategory.A, "tenor_90d": True}, "20"),
            ({"category": InstitutionCategory.A, "tier1_high": True, "leverage_high": True}, "30"),
            ({"category": InstitutionCategory.A, "tier1_high": True}, "40"),
            ({"category": InstitutionCategory.B}, "75"),
            ({"category": InstitutionCategory.B, "tenor_90d": True}, "50"),
            (
                {"category": InstitutionCategory.B, "tier1_high": True, "leverage_high": True},
                "75",
            ),
            ({"category": InstitutionCategory.B, "tenor_90d": True, "netting_eligible": True}, "50"),
        ],
    )
    def test_lowest_applicable_candidate(
        self,
        classifier: ExposureClassifier,
        flags: dict,
        expected_weight: str,
    ) -> None:
        """The most favourable applicable candidate wins."""
        result = classifier.classify(_institution(**flags))

        assert result.weight == Decimal(expected_weight)
        assert result.label == ClassificationLabel.FINANCIAL_INSTITUTION

    def test_candidates_described_in_trail(self, classifier: ExposureClassifier) -> None:
        result = classifier.classify(_institution(
            category=InstitutionCategory.A,
            tenor_90d=True,
            tier1_high=True,
            leverage_high=True,
        ))

        assert result.trail == (
            "Financial institution category A -> tenor <= 90d (20%) + "
            "Tier 1 >= 14% and leverage ratio >= 5% (30%) -> lowest FPR 20%",
        )


class TestRetailAndCorporate:
    """Tests for retail, payroll and corporate treatments."""

    @pytest.mark.parametrize(
        ("retail", "expected_weight", "expected_label"),
        [
            (RetailInfo(eligible=True, transactor=True), "45", ClassificationLabel.RETAIL_TRANSACTOR),
            (RetailInfo(eligible=True, no_draw_360d=True), "45", ClassificationLabel.RETAIL_TRANSACTOR),
            (RetailInfo(eligible=True), "75", ClassificationLabel.RETAIL_ELIGIBLE),
            (RetailInfo(transactor=True), "100", ClassificationLabel.INDIVIDUAL_NON_RETAIL),
            (
                RetailInfo(eligible=True, transactor=True, payroll_tenor_years=Decimal("6")),
                "150",
                ClassificationLabel.PAYROLL_LONG_TENOR,
            ),
            (
                RetailInfo(eligible=True, payroll_tenor_years=Decimal("5")),
                "75",
                ClassificationLabel.RETAIL_ELIGIBLE,
            ),
        ],
    )
    def test_retail(
        self,
        classifier: ExposureClassifier,
        retail: RetailInfo,
        expected_weight: str,
        expected_label: ClassificationLabel,
    ) -> None:
        """Payroll tenor above five years takes precedence over retail treatment."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            retail=retail,
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.label == expected_label

    @pytest.mark.parametrize(
        ("corporate", "expected_weight", "expected_label"),
        [
            (CorporateInfo(), "100", ClassificationLabel.CORPORATE),
            (CorporateInfo(sme=True), "85", ClassificationLabel.CORPORATE_SME),
            (CorporateInfo(large_low_risk=True, sme=True), "65", ClassificationLabel.CORPORATE_LARGE_LOW_RISK),
            (
                CorporateInfo(large_low_risk=True, financing=SpecialisedFinancing.OBJECT),
                "100",
                ClassificationLabel.CORPORATE_SPECIALISED_FINANCING,
            ),
            (
                CorporateInfo(financing=SpecialisedFinancing.PROJECT,
                              project_phase=ProjectFinancePhase.OPERATIONAL),
                "100",
                ClassificationLabel.CORPORATE_PROJECT_FINANCE,
            ),
            (
                CorporateInfo(financing=SpecialisedFinancing.PROJECT,
                              project_phase=ProjectFinancePhase.OPERATIONAL_HIGH_QUALITY),
                "80",
                ClassificationLabel.CORPORATE_PROJECT_FINANCE,
            ),
        ],
    )
    def test_corporate(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
        corporate: CorporateInfo,
        expected_weight: str,
        expected_label: ClassificationLabel,
    ) -> None:
        """Specialised financing takes precedence over size-based discounts."""
        result = classifier.classify(replace(corporate_loan, corporate=corporate))

        assert result.weight == Decimal(expected_weight)
        assert result.label == expected_label

    def test_project_finance_without_phase_is_pre_operational(
        self,
        classifier: ExposureClassifier,
        corporate_loan: Exposure,
    ) -> None:
        exposure = replace(
            corporate_loan,
            corporate=CorporateInfo(financing=SpecialisedFinancing.PROJECT),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("130")
        assert result.trail[0] == "Project finance phase not informed -> pre-operational assumed"


# =============================================================================
# Real Estate Tests
# =============================================================================


class TestRealEstate:
    """Tests for real estate secured exposures (Arts. 42-46)."""

    @pytest.mark.parametrize(
        ("ltv", "dependent", "expected_weight"),
        [
            ("10", False, "20"),
            ("25", False, "30"),
            ("60", False, "60"),
            ("60.01", False, "75"),
            ("80", False, "105"),
            ("25", True, "45"),
            ("60", True, "90"),
            ("80", True, "150"),
        ],
    )
    def test_residential_ladder(
        self,
        classifier: ExposureClassifier,
        ltv: str,
        dependent: bool,
        expected_weight: str,
    ) -> None:
        """Bands are inclusive at their upper bound."""
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            real_estate=RealEstateInfo(
                cash_flow_dependent=dependent,
                ltv=Decimal(ltv),
                guarantee_eligible=True,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.rule == "real_estate"

    @pytest.mark.parametrize(("ltv", "expected_weight"), [(55, "60"), (25.0, "30"), ("45", "45")])
    def test_residential_plain_number_ltv(
        self,
        classifier: ExposureClassifier,
        ltv: object,
        expected_weight: str,
    ) -> None:
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            real_estate=RealEstateInfo(ltv=ltv, guarantee_eligible=True),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected_weight)
        assert result.label == ClassificationLabel.RESIDENTIAL_MORTGAGE

    def test_residential_ltv_not_numeric_takes_top_band(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            real_estate=RealEstateInfo(ltv="n/a", guarantee_eligible=True),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("105")
        assert result.trail[0] == "LTV not numeric ('n/a') -> 200% assumed"
        assert result.trail[1] == (
            "Residential real estate (without dependency), LTV 200% (LTV > 70%) -> FPR 105%"
        )

    def test_non_residential_int_ltv(self, classifier: ExposureClassifier) -> None:
        exposure = replace(
            _non_residential("0", counterparty=CounterpartyType.CORPORATE),
            real_estate=RealEstateInfo(
                property_type=PropertyType.NON_RESIDENTIAL,
                ltv=50,
                guarantee_eligible=True,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("60")
        assert result.label == ClassificationLabel.NON_RESIDENTIAL

    def test_eligible_guarantee_on_plain_loan(self, classifier: ExposureClassifier) -> None:
        """An eligible real estate guarantee brings any product into the group."""
        exposure = Exposure(
            product=ProductType.LOAN,
            counterparty=CounterpartyType.CORPORATE,
            real_estate=RealEstateInfo(ltv=Decimal("40"), guarantee_eligible=True),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("35")
        assert result.label == ClassificationLabel.RESIDENTIAL_MORTGAGE

    def test_ineligible_guarantee_takes_obligor_weight(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.INDIVIDUAL,
            retail=RetailInfo(eligible=True),
            real_estate=RealEstateInfo(ltv=Decimal("40"), guarantee_eligible=False),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("75")
        assert result.label == ClassificationLabel.RETAIL_ELIGIBLE
        assert result.rule == "real_estate"
        assert result.trail[0] == "Real estate without eligible guarantee -> obligor FPR applies"
        assert result.trail[1].startswith("  └─ ")

    def test_under_construction_without_contract_flag(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.REAL_ESTATE_LOAN,
            counterparty=CounterpartyType.CORPORATE,
            corporate=CorporateInfo(sme=True),
            real_estate=RealEstateInfo(guarantee_eligible=True, completed=False),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("85")
        assert result.label == ClassificationLabel.CORPORATE_SME

    @pytest.mark.parametrize(("ltv", "expected_weight"), [("60", "70"), ("61", "90")])
    def test_non_residential_dependent(
        self,
        classifier: ExposureClassifier,
        ltv: str,
        expected_weight: str,
    ) -> None:
        result = classifier.classify(
            _non_residential(ltv, dependent=True, counterparty=CounterpartyType.CORPORATE)
        )

        assert result.weight == Decimal(expected_weight)
        assert result.label == ClassificationLabel.NON_RESIDENTIAL_DEPENDENT

    def test_non_residential_caps_obligor_at_60(self, classifier: ExposureClassifier) -> None:
        result = classifier.classify(
            _non_residential("50", counterparty=CounterpartyType.CORPORATE)
        )

        assert result.weight == Decimal("60")
        assert result.label == ClassificationLabel.NON_RESIDENTIAL
        assert result.trail[-2] == "Obligor FPR: 100%"
        assert result.trail[-1] == "Final FPR = min(60%, 100%) = 60%"
        assert result.trail[1] == "  └─ Other non-financial corporate -> FPR 100%"

    def test_non_residential_keeps_lower_obligor_weight(self, classifier: ExposureClassifier) -> None:
        result = classifier.classify(_non_residential(
            "50",
            counterparty=CounterpartyType.INDIVIDUAL,
            retail=RetailInfo(eligible=True, transactor=True),
        ))

        assert result.weight == Decimal("45")
        assert result.label == ClassificationLabel.NON_RESIDENTIAL

    def test_non_residential_high_ltv_takes_obligor(self, classifier: ExposureClassifier) -> None:
        result = classifier.classify(
            _non_residential("70", counterparty=CounterpartyType.CORPORATE)
        )

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.CORPORATE

    def test_obligor_pass_does_not_modify_input(self, classifier: ExposureClassifier) -> None:
        exposure = _non_residential("50", counterparty=CounterpartyType.CORPORATE)
        snapshot = replace(exposure)

        classifier.classify(exposure)

        assert exposure == snapshot
        assert exposure.real_estate.guarantee_eligible is True
        assert exposure.product == ProductType.REAL_ESTATE_LOAN

    def test_classify_obligor_strips_guarantee(self, classifier: ExposureClassifier) -> None:
        exposure = _non_residential("50", counterparty=CounterpartyType.CORPORATE)

        result = classifier.classify_obligor(exposure)

        assert result.rule == "corporate"
        assert result.weight == Decimal("100")


# =============================================================================
# Fund and Derivative Tests
# =============================================================================


class TestFundAndDerivative:
    """Tests for product-priced rule groups."""

    def test_look_through_takes_precedence(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.FUND,
            counterparty=CounterpartyType.CORPORATE,
            fund=FundInfo(
                approach=FundApproach.LOOK_THROUGH,
                look_through_weight=Decimal("37.5"),
                mandate=FundMandate.EQUITY,
            ),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("37.5")
        assert result.label == ClassificationLabel.FUND_LOOK_THROUGH

    @pytest.mark.parametrize(("informed", "expected"), [("1500", "1250"), ("-10", "0")])
    def test_look_through_clamped(
        self,
        classifier: ExposureClassifier,
        informed: str,
        expected: str,
    ) -> None:
        exposure = Exposure(
            product=ProductType.FUND,
            counterparty=CounterpartyType.CORPORATE,
            fund=FundInfo(approach=FundApproach.LOOK_THROUGH, look_through_weight=Decimal(informed)),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal(expected)
        assert "outside [0%, 1250%]" in result.trail[0]

    def test_look_through_without_weight_falls_to_conservative(
        self,
        classifier: ExposureClassifier,
    ) -> None:
        exposure = Exposure(
            product=ProductType.FUND,
            counterparty=CounterpartyType.CORPORATE,
            fund=FundInfo(approach=FundApproach.LOOK_THROUGH),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("100")
        assert result.label == ClassificationLabel.FUND

    def test_mixed_mandate(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.FUND,
            counterparty=CounterpartyType.CORPORATE,
            fund=FundInfo(approach=FundApproach.MANDATE, mandate=FundMandate.MIXED),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("150")
        assert result.label == ClassificationLabel.FUND_MIXED

    def test_derivative_nests_counterparty_trail(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.DERIVATIVE,
            counterparty=CounterpartyType.FINANCIAL_INSTITUTION,
            institution=InstitutionInfo(category=InstitutionCategory.A),
        )

        result = classifier.classify(exposure)

        assert result.rule == "derivative"
        assert result.weight == Decimal("40")
        assert result.label == ClassificationLabel.FINANCIAL_INSTITUTION
        assert result.trail == (
            "Derivative (CCR) -> counterparty FPR applies",
            "  └─ Financial institution category A -> tenor > 90d (40%) -> lowest FPR 40%",
        )

    def test_derivative_against_retail(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(
            product=ProductType.DERIVATIVE,
            counterparty=CounterpartyType.INDIVIDUAL,
            retail=RetailInfo(eligible=True),
        )

        result = classifier.classify(exposure)

        assert result.weight == Decimal("75")
        assert result.label == ClassificationLabel.RETAIL_ELIGIBLE

    def test_classify_counterparty_ignores_product(self, classifier: ExposureClassifier) -> None:
        exposure = Exposure(product=ProductType.FUND, counterparty=CounterpartyType.DOMESTIC_SOVEREIGN)

        result = classifier.classify_counterparty(exposure)

        assert result.rule == "sovereign"
        assert result.weight == Decimal("0")
