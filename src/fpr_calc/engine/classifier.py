"""
Exposure classification for the FPR calculator.

Assigns the base risk weight and classification label of a single
exposure by evaluating an ordered list of rule groups. The first group
that matches returns immediately:

    default -> other_assets -> special -> sovereign -> public_sector
        -> financial_institution -> real_estate -> retail -> corporate
        -> fund -> derivative -> fallback

Counterparty-based groups (sovereign through corporate) do not capture
products priced by their own rule (funds and derivatives). Derivatives
are priced through classify_counterparty(), which evaluates only the
counterparty-based groups, so no product dispatch is re-entered.

Real estate exposures that need the obligor's own weight run an explicit
second pass over a copy of the exposure with the real estate guarantee
removed (classify_obligor()).

Classes:
    ExposureClassifier: Main classifier implementing ClassifierProtocol

Usage:
    from fpr_calc.engine.classifier import ExposureClassifier

    classifier = ExposureClassifier()
    result = classifier.classify(exposure)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING

from fpr_calc.contracts.bundles import ClassificationResult
from fpr_calc.contracts.config import CalculationConfig
from fpr_calc.contracts.exposure import to_decimal
from fpr_calc.data.tables.bcb229_risk_weights import (
    CORPORATE_RISK_WEIGHTS,
    DOMESTIC_SOVEREIGN_RISK_WEIGHT,
    EQUITY_RISK_WEIGHTS,
    FUND_CONSERVATIVE_RISK_WEIGHT,
    FUND_MANDATE_RISK_WEIGHTS,
    INSTITUTION_CATEGORY_C_RISK_WEIGHT,
    INSTITUTION_RISK_WEIGHTS,
    LISTED_MULTILATERAL_RISK_WEIGHT,
    NEGATIVE_EQUITY_ADJUSTMENT_RISK_WEIGHT,
    NON_RESIDENTIAL_PARAMS,
    OTHER_ASSET_RISK_WEIGHTS,
    OVERRIDE_TIER_RISK_WEIGHTS,
    PROJECT_FINANCE_RISK_WEIGHTS,
    PUBLIC_SECTOR_RISK_WEIGHTS,
    RETAIL_PARAMS,
    SUBORDINATED_RISK_WEIGHT,
    UNDER_CONSTRUCTION_POST_CUTOFF_RISK_WEIGHT,
    UNDER_CONSTRUCTION_PRE_CUTOFF_RISK_WEIGHT,
    calculate_non_residential_rw,
    lookup_default_risk_weight,
    lookup_ltv_band,
    lookup_multilateral_risk_weight,
    lookup_sovereign_risk_weight,
)
from fpr_calc.domain.enums import (
    ClassificationLabel,
    CounterpartyType,
    EquityTier,
    FundApproach,
    FundMandate,
    InstitutionCategory,
    OtherAssetType,
    OverrideTier,
    ProductType,
    ProjectFinancePhase,
    PropertyType,
    PublicSectorType,
    SovereignKind,
    SpecialisedFinancing,
)
from fpr_calc.engine.audit import format_percent, nest_lines

if TYPE_CHECKING:
    from fpr_calc.contracts.exposure import Exposure

logger = logging.getLogger(__name__)

RuleGroup = Callable[["Exposure"], "ClassificationResult | None"]

# Evaluation order of the rule groups; first match wins
RULE_ORDER: tuple[str, ...] = (
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

# Counterparty-only evaluation used to price derivatives
COUNTERPARTY_RULE_ORDER: tuple[str, ...] = (
    "sovereign",
    "public_sector",
    "financial_institution",
    "retail",
    "corporate",
    "fallback",
)

# Products priced by their own rule group rather than by the counterparty
PRODUCT_PRICED: frozenset[ProductType] = frozenset({
    ProductType.FUND,
    ProductType.DERIVATIVE,
})

_OTHER_ASSET_LABELS: dict[OtherAssetType, tuple[ClassificationLabel, str]] = {
    OtherAssetType.CASH: (ClassificationLabel.CASH, "Cash"),
    OtherAssetType.GOLD: (ClassificationLabel.GOLD, "Gold"),
    OtherAssetType.LISTED_EQUITY: (ClassificationLabel.LISTED_EQUITY, "Listed equity"),
    OtherAssetType.UNLISTED_EQUITY: (ClassificationLabel.UNLISTED_EQUITY, "Unlisted equity"),
    OtherAssetType.FIXED_ASSET: (ClassificationLabel.FIXED_ASSET, "Fixed asset"),
    OtherAssetType.OTHER: (ClassificationLabel.OTHER_ASSETS, "Other assets"),
}

_PUBLIC_SECTOR_LABELS: dict[PublicSectorType, tuple[ClassificationLabel, str]] = {
    PublicSectorType.STATE: (ClassificationLabel.PUBLIC_SECTOR_STATE, "State"),
    PublicSectorType.MUNICIPALITY: (ClassificationLabel.PUBLIC_SECTOR_MUNICIPALITY, "Municipality"),
    PublicSectorType.FEDERAL_DISTRICT: (
        ClassificationLabel.PUBLIC_SECTOR_FEDERAL_DISTRICT, "Federal District",
    ),
    PublicSectorType.PUBLIC_SERVICE_PROVIDER: (
        ClassificationLabel.PUBLIC_SECTOR_SERVICE_PROVIDER, "Public service provider",
    ),
    PublicSectorType.STATE_OWNED_COMPANY: (
        ClassificationLabel.PUBLIC_SECTOR_STATE_OWNED, "State-owned company",
    ),
}

_FUND_MANDATE_LABELS: dict[FundMandate, ClassificationLabel] = {
    FundMandate.EQUITY: ClassificationLabel.FUND_EQUITY,
    FundMandate.FIXED_INCOME: ClassificationLabel.FUND_FIXED_INCOME,
    FundMandate.MIXED: ClassificationLabel.FUND_MIXED,
    FundMandate.OTHER: ClassificationLabel.FUND_OTHER,
}


class ExposureClassifier:
    """
    Classify a single exposure into a base risk weight and label.

    Implements ClassifierProtocol for:
    - Default / impairment override by provision tier
    - Other asset carve-outs and special regulatory overrides
    - Counterparty-based weights (sovereign, public sector,
      institution, retail, corporate)
    - Real estate LTV ladders with obligor fallbacks
    - Fund look-through / mandate and derivative counterparty pricing

    Each rule group is a method returning a ClassificationResult when it
    matches, or None to let the next group run. Groups are pure and can
    be exercised in isolation through evaluate_rule().
    """

    def __init__(self, config: CalculationConfig | None = None) -> None:
        """
        Initialize classifier.

        Args:
            config: Calculation configuration (defaults to Res. BCB 229)
        """
        self._config = config or CalculationConfig.bcb_229()
        self._rules: dict[str, RuleGroup] = {
            "default": self._classify_default,
            "other_assets": self._classify_other_assets,
            "special": self._classify_special,
            "sovereign": self._classify_sovereign,
            "public_sector": self._classify_public_sector,
            "financial_institution": self._classify_financial_institution,
            "real_estate": self._classify_real_estate,
            "retail": self._classify_retail,
            "corporate": self._classify_corporate,
            "fund": self._classify_fund,
            "derivative": self._classify_derivative,
            "fallback": self._classify_fallback,
        }

    # =========================================================================
    # Public API
    # =========================================================================

    def classify(self, exposure: Exposure) -> ClassificationResult:
        """
        Classify an exposure through the full rule cascade.

        Args:
            exposure: Exposure record

        Returns:
            ClassificationResult from the first matching rule group
        """
        return self._evaluate(exposure, RULE_ORDER)

    def classify_counterparty(self, exposure: Exposure) -> ClassificationResult:
        """
        Classify an exposure by its counterparty alone.

        Skips every product-based group, so it never re-enters the
        derivative rule.

        Args:
            exposure: Exposure record

        Returns:
            ClassificationResult from the first matching counterparty group
        """
        return self._evaluate(exposure, COUNTERPARTY_RULE_ORDER, by_counterparty=True)

    def classify_obligor(self, exposure: Exposure) -> ClassificationResult:
        """
        Classify the obligor as if the exposure were unsecured.

        Runs a second, independent pass over a copy of the exposure with
        the real estate guarantee removed. The input is not modified.

        Args:
            exposure: Exposure record

        Returns:
            ClassificationResult of the unsecured exposure
        """
        product = exposure.product
        if product == ProductType.REAL_ESTATE_LOAN:
            product = ProductType.LOAN

        unsecured = replace(
            exposure,
            product=product,
            real_estate=replace(exposure.real_estate, guarantee_eligible=False),
        )
        return self.classify(unsecured)

    def evaluate_rule(self, name: str, exposure: Exposure) -> ClassificationResult | None:
        """
        Evaluate a single rule group in isolation.

        Args:
            name: Rule group name (see RULE_ORDER)
            exposure: Exposure record

        Returns:
            ClassificationResult if the group matches, otherwise None

        Raises:
            KeyError: If the rule group name is unknown
        """
        return self._rules[name](exposure)

    # =========================================================================
    # Private Methods - Cascade
    # =========================================================================

    def _evaluate(
        self,
        exposure: Exposure,
        order: tuple[str, ...],
        by_counterparty: bool = False,
    ) -> ClassificationResult:
        """Run rule groups in order; the trailing fallback group answers when none match."""
        target = replace(exposure, product=ProductType.LOAN) if by_counterparty else exposure

        for name in order:
            if name == "fallback":
                break

            result = self._rules[name](target)
            if result is not None:
                logger.debug(
                    "Rule group '%s' matched: %s at %s",
                    name, result.label.value, format_percent(result.weight),
                )
                return result

        logger.debug("No rule group matched; conservative fallback applies")
        return self._classify_fallback(exposure)

    def _nested(self, lines: tuple[str, ...]) -> tuple[str, ...]:
        return nest_lines(lines, self._config.nested_trail_prefix)

    @staticmethod
    def _counterparty_priced(exposure: Exposure) -> bool:
        return exposure.product not in PRODUCT_PRICED

    # =========================================================================
    # Rule Groups - Overrides
    # =========================================================================

    def _classify_default(self, exposure: Exposure) -> ClassificationResult | None:
        """Defaulted exposures (Art. 64): weight by provision tier, overrides all."""
        default = exposure.default
        if not default.in_default:
            return None

        notes: tuple[str, ...] = ()
        provision = to_decimal(default.provision_percent)
        if provision is None:
            logger.warning("Provision percent is not numeric (%r); 0%% assumed", default.provision_percent)
            notes = (f"Provision percent not numeric ({default.provision_percent!r}) -> 0% assumed",)
            provision = Decimal("0")

        weight = lookup_default_risk_weight(provision)

        if weight == Decimal("50"):
            label = ClassificationLabel.DEFAULT_HIGH_PROVISION
            tier = ">= 50%"
        elif weight == Decimal("100"):
            label = ClassificationLabel.DEFAULT_MEDIUM_PROVISION
            tier = "20-50%"
        else:
            label = ClassificationLabel.DEFAULT_LOW_PROVISION
            tier = "< 20%"

        line = (
            f"Exposure in default, provision {tier} ({format_percent(provision)}) "
            f"-> FPR {format_percent(weight)}"
        )
        return ClassificationResult(weight=weight, label=label, rule="default", trail=(*notes, line))

    def _classify_other_assets(self, exposure: Exposure) -> ClassificationResult | None:
        """Other asset carve-outs (Art. 66), only for the generic OTHER product."""
        if exposure.product != ProductType.OTHER or exposure.other_asset is None:
            return None

        weight = OTHER_ASSET_RISK_WEIGHTS[exposure.other_asset]
        label, name = _OTHER_ASSET_LABELS[exposure.other_asset]
        line = f"{name} (Art. 66) -> FPR {format_percent(weight)}"
        return ClassificationResult(weight=weight, label=label, rule="other_assets", trail=(line,))

    def _classify_special(self, exposure: Exposure) -> ClassificationResult | None:
        """Special regulatory overrides, checked before any counterparty rule."""
        special = exposure.special

        if special.negative_equity_adjustment:
            weight = NEGATIVE_EQUITY_ADJUSTMENT_RISK_WEIGHT
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.NEGATIVE_EQUITY_ADJUSTMENT,
                rule="special",
                trail=(f"Negative equity adjustment (Res. BCB 452/2025) -> FPR {format_percent(weight)}",),
            )

        if special.subordinated:
            weight = SUBORDINATED_RISK_WEIGHT
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.SUBORDINATED,
                rule="special",
                trail=(f"Subordinated instrument -> FPR {format_percent(weight)}",),
            )

        if special.equity != EquityTier.NONE:
            weight = EQUITY_RISK_WEIGHTS[special.equity]
            if special.equity == EquityTier.RW_250:
                line = f"Significant equity participation not deducted -> FPR {format_percent(weight)}"
            else:
                line = f"Equity participation above deduction thresholds -> FPR {format_percent(weight)}"
            return ClassificationResult(
                weight=weight, label=ClassificationLabel.EQUITY, rule="special", trail=(line,),
            )

        if special.tax_credit != OverrideTier.NONE:
            weight = OVERRIDE_TIER_RISK_WEIGHTS[special.tax_credit]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.TAX_CREDIT,
                rule="special",
                trail=(f"Tax credit -> FPR {format_percent(weight)}",),
            )

        if special.receivables != OverrideTier.NONE:
            weight = OVERRIDE_TIER_RISK_WEIGHTS[special.receivables]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.RECEIVABLES,
                rule="special",
                trail=(f"Court-ordered receivables -> FPR {format_percent(weight)}",),
            )

        return None

    # =========================================================================
    # Rule Groups - Counterparty
    # =========================================================================

    def _classify_sovereign(self, exposure: Exposure) -> ClassificationResult | None:
        """Sovereigns and multilaterals (Arts. 27-29)."""
        if not self._counterparty_priced(exposure):
            return None

        if exposure.counterparty == CounterpartyType.DOMESTIC_SOVEREIGN:
            weight = DOMESTIC_SOVEREIGN_RISK_WEIGHT
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.SOVEREIGN,
                rule="sovereign",
                trail=(f"Domestic sovereign (National Treasury / BCB) -> FPR {format_percent(weight)}",),
            )

        if exposure.counterparty != CounterpartyType.FOREIGN_SOVEREIGN:
            return None

        sovereign = exposure.sovereign

        if sovereign.kind == SovereignKind.MULTILATERAL_LISTED:
            weight = LISTED_MULTILATERAL_RISK_WEIGHT
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.MULTILATERAL,
                rule="sovereign",
                trail=(f"Listed multilateral organisation -> FPR {format_percent(weight)}",),
            )

        if sovereign.kind == SovereignKind.MULTILATERAL_UNLISTED:
            weight = lookup_multilateral_risk_weight(sovereign.multilateral_rating)
            bucket = (
                sovereign.multilateral_rating.value
                if sovereign.multilateral_rating is not None
                else "unrated"
            )
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.MULTILATERAL_RATED,
                rule="sovereign",
                trail=(f"Unlisted multilateral organisation (bucket {bucket}) -> FPR {format_percent(weight)}",),
            )

        if sovereign.rating is None:
            weight = lookup_sovereign_risk_weight(None)
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.FOREIGN_SOVEREIGN_UNRATED,
                rule="sovereign",
                trail=(f"Foreign sovereign without rating -> conservative FPR {format_percent(weight)}",),
            )

        weight = lookup_sovereign_risk_weight(sovereign.rating)
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.FOREIGN_SOVEREIGN,
            rule="sovereign",
            trail=(f"Foreign sovereign (bucket {sovereign.rating.value}) -> FPR {format_percent(weight)}",),
        )

    def _classify_public_sector(self, exposure: Exposure) -> ClassificationResult | None:
        """Public sector entities (Arts. 57-58): fixed weight, no rating differentiation."""
        if not self._counterparty_priced(exposure):
            return None
        if exposure.counterparty != CounterpartyType.PUBLIC_SECTOR:
            return None

        public_sector = exposure.public_sector
        weight = PUBLIC_SECTOR_RISK_WEIGHTS[public_sector.kind]
        label, name = _PUBLIC_SECTOR_LABELS[public_sector.kind]

        trail = [f"Public sector ({name}) -> fixed FPR {format_percent(weight)} (Arts. 57-58)"]
        if public_sector.rating is not None:
            trail.append(
                f"Rating {public_sector.rating.value} informed for reference only; "
                "no rating differentiation for public sector entities"
            )

        return ClassificationResult(
            weight=weight, label=label, rule="public_sector", trail=tuple(trail),
        )

    def _classify_financial_institution(self, exposure: Exposure) -> ClassificationResult | None:
        """
        Financial institutions (Arts. 32-35).

        Trade finance up to one year short-circuits. Otherwise the most
        favourable applicable candidate wins: the tenor-based weight,
        the strong-capital weight (category A, both conditions) and the
        netting weight.
        """
        if not self._counterparty_priced(exposure):
            return None
        if exposure.counterparty != CounterpartyType.FINANCIAL_INSTITUTION:
            return None

        info = exposure.institution
        category = info.category

        if category == InstitutionCategory.C:
            weight = INSTITUTION_CATEGORY_C_RISK_WEIGHT
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.FINANCIAL_INSTITUTION,
                rule="financial_institution",
                trail=(f"Financial institution category C -> FPR {format_percent(weight)}",),
            )

        params = INSTITUTION_RISK_WEIGHTS[category]

        if info.trade_finance_1y:
            weight = params["trade_finance"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.FINANCIAL_INSTITUTION,
                rule="financial_institution",
                trail=(
                    f"Financial institution category {category.value} -> trade finance up to 1 year: "
                    f"FPR {format_percent(weight)}",
                ),
            )

        candidates: list[tuple[Decimal, str]] = []
        if info.tenor_90d:
            candidates.append((params["tenor_up_to_90d"], "tenor <= 90d"))
        else:
            candidates.append((params["tenor_over_90d"], "tenor > 90d"))

        strong_capital = params["strong_capital"]
        if strong_capital is not None and info.tier1_high and info.leverage_high:
            candidates.append((strong_capital, "Tier 1 >= 14% and leverage ratio >= 5%"))

        if info.netting_eligible:
            candidates.append((params["netting"], "eligible netting"))

        weight = min(rw for rw, _ in candidates)
        described = " + ".join(f"{name} ({format_percent(rw)})" for rw, name in candidates)
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.FINANCIAL_INSTITUTION,
            rule="financial_institution",
            trail=(
                f"Financial institution category {category.value} -> {described} "
                f"-> lowest FPR {format_percent(weight)}",
            ),
        )

    def _classify_retail(self, exposure: Exposure) -> ClassificationResult | None:
        """Retail / individuals (Arts. 39-41), including long payroll loans."""
        if not self._counterparty_priced(exposure):
            return None
        if exposure.counterparty != CounterpartyType.INDIVIDUAL:
            return None

        retail = exposure.retail
        params = RETAIL_PARAMS

        tenor = to_decimal(retail.payroll_tenor_years)
        if tenor is not None and tenor > params["payroll_tenor_threshold_years"]:
            weight = params["payroll_long_tenor"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.PAYROLL_LONG_TENOR,
                rule="retail",
                trail=(f"Payroll loan with tenor > 5 years ({tenor} years) -> FPR {format_percent(weight)}",),
            )

        if retail.eligible:
            if retail.transactor or retail.no_draw_360d:
                weight = params["transactor"]
                return ClassificationResult(
                    weight=weight,
                    label=ClassificationLabel.RETAIL_TRANSACTOR,
                    rule="retail",
                    trail=(f"Retail transactor / line without drawings in 360 days -> FPR {format_percent(weight)}",),
                )

            weight = params["eligible"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.RETAIL_ELIGIBLE,
                rule="retail",
                trail=(f"Eligible retail (up to R$ 5MM per client) -> FPR {format_percent(weight)}",),
            )

        weight = params["non_eligible"]
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.INDIVIDUAL_NON_RETAIL,
            rule="retail",
            trail=(f"Individual outside eligible retail -> FPR {format_percent(weight)}",),
        )

    def _classify_corporate(self, exposure: Exposure) -> ClassificationResult | None:
        """
        Corporates (Arts. 36-38).

        Specialised financing takes precedence over size-based discounts.
        """
        if not self._counterparty_priced(exposure):
            return None
        if exposure.counterparty != CounterpartyType.CORPORATE:
            return None

        corporate = exposure.corporate
        params = CORPORATE_RISK_WEIGHTS

        if corporate.financing == SpecialisedFinancing.PROJECT:
            phase = corporate.project_phase
            trail: list[str] = []
            if phase is None:
                phase = ProjectFinancePhase.PRE_OPERATIONAL
                trail.append("Project finance phase not informed -> pre-operational assumed")
            weight = PROJECT_FINANCE_RISK_WEIGHTS[phase]
            trail.append(f"Project finance ({phase.value.replace('_', ' ')}) -> FPR {format_percent(weight)}")
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.CORPORATE_PROJECT_FINANCE,
                rule="corporate",
                trail=tuple(trail),
            )

        if corporate.financing in (SpecialisedFinancing.OBJECT, SpecialisedFinancing.COMMODITIES):
            weight = params["specialised_financing"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.CORPORATE_SPECIALISED_FINANCING,
                rule="corporate",
                trail=(
                    f"Specialised financing ({corporate.financing.value}) -> FPR {format_percent(weight)}",
                ),
            )

        if corporate.large_low_risk:
            weight = params["large_low_risk"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.CORPORATE_LARGE_LOW_RISK,
                rule="corporate",
                trail=(f"Large low-risk corporate (Art. 37) -> FPR {format_percent(weight)}",),
            )

        if corporate.sme:
            weight = params["sme"]
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.CORPORATE_SME,
                rule="corporate",
                trail=(f"SME (revenue up to R$ 300MM) -> FPR {format_percent(weight)}",),
            )

        weight = params["default"]
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.CORPORATE,
            rule="corporate",
            trail=(f"Other non-financial corporate -> FPR {format_percent(weight)}",),
        )

    # =========================================================================
    # Rule Groups - Product
    # =========================================================================

    def _classify_real_estate(self, exposure: Exposure) -> ClassificationResult | None:
        """
        Real estate secured exposures (Arts. 42-46).

        Applies to real estate loans and to any exposure with an eligible
        real estate guarantee. Under-construction property without a
        contract date flag, and exposures without an eligible guarantee,
        take the obligor's own classification.
        """
        real_estate = exposure.real_estate
        if exposure.product != ProductType.REAL_ESTATE_LOAN and not real_estate.guarantee_eligible:
            return None

        if not real_estate.completed:
            if real_estate.contract_pre_cutoff:
                weight = UNDER_CONSTRUCTION_PRE_CUTOFF_RISK_WEIGHT
                return ClassificationResult(
                    weight=weight,
                    label=ClassificationLabel.UNDER_CONSTRUCTION_PRE_CUTOFF,
                    rule="real_estate",
                    trail=(
                        f"Real estate under construction (contract up to 2023) -> FPR {format_percent(weight)}",
                    ),
                )

            if real_estate.contract_post_cutoff:
                weight = UNDER_CONSTRUCTION_POST_CUTOFF_RISK_WEIGHT
                return ClassificationResult(
                    weight=weight,
                    label=ClassificationLabel.UNDER_CONSTRUCTION_POST_CUTOFF,
                    rule="real_estate",
                    trail=(
                        f"Real estate under construction (contract from 2024) -> FPR {format_percent(weight)}",
                    ),
                )

            return self._obligor_fallback(
                exposure, "Real estate under construction without contract date -> obligor FPR applies",
            )

        if not real_estate.guarantee_eligible:
            return self._obligor_fallback(
                exposure, "Real estate without eligible guarantee -> obligor FPR applies",
            )

        ltv = to_decimal(real_estate.ltv)
        if ltv is None:
            # Unreadable LTV falls in the top band of every ladder
            ltv = self._config.thresholds.max_ltv
            logger.warning("LTV is not numeric (%r); %s%% assumed", real_estate.ltv, ltv)
            result = self._classify_by_ltv(exposure, ltv)
            note = f"LTV not numeric ({real_estate.ltv!r}) -> {format_percent(ltv)} assumed"
            return replace(result, trail=(note, *result.trail))

        return self._classify_by_ltv(exposure, ltv)

    def _classify_by_ltv(self, exposure: Exposure, ltv: Decimal) -> ClassificationResult:
        real_estate = exposure.real_estate

        if real_estate.property_type == PropertyType.RESIDENTIAL:
            dependent = real_estate.cash_flow_dependent
            weight, band = lookup_ltv_band(ltv, dependent=dependent)
            dependency = "with dependency" if dependent else "without dependency"
            return ClassificationResult(
                weight=weight,
                label=(
                    ClassificationLabel.RESIDENTIAL_MORTGAGE_DEPENDENT
                    if dependent
                    else ClassificationLabel.RESIDENTIAL_MORTGAGE
                ),
                rule="real_estate",
                trail=(
                    f"Residential real estate ({dependency}), LTV {format_percent(ltv)} "
                    f"({band}) -> FPR {format_percent(weight)}",
                ),
            )

        if real_estate.cash_flow_dependent:
            weight, _ = calculate_non_residential_rw(ltv, dependent=True)
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.NON_RESIDENTIAL_DEPENDENT,
                rule="real_estate",
                trail=(
                    f"Non-residential real estate (with dependency), LTV {format_percent(ltv)} "
                    f"-> FPR {format_percent(weight)}",
                ),
            )

        threshold = NON_RESIDENTIAL_PARAMS["ltv_threshold"]
        if ltv > threshold:
            return self._obligor_fallback(
                exposure,
                f"Non-residential real estate (without dependency), LTV > {format_percent(threshold)} "
                "-> obligor FPR applies",
            )

        obligor = self.classify_obligor(exposure)
        weight, _ = calculate_non_residential_rw(ltv, dependent=False, obligor_rw=obligor.weight)
        cap = NON_RESIDENTIAL_PARAMS["rw_cap_no_dependency"]
        trail = (
            f"Non-residential real estate (without dependency), LTV <= {format_percent(threshold)} "
            f"-> min({format_percent(cap)}, obligor FPR)",
            *self._nested(obligor.trail),
            f"Obligor FPR: {format_percent(obligor.weight)}",
            f"Final FPR = min({format_percent(cap)}, {format_percent(obligor.weight)}) = {format_percent(weight)}",
        )
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.NON_RESIDENTIAL,
            rule="real_estate",
            trail=trail,
        )

    def _obligor_fallback(self, exposure: Exposure, reason: str) -> ClassificationResult:
        """Classify the obligor and return its result under the real estate rule."""
        obligor = self.classify_obligor(exposure)
        return ClassificationResult(
            weight=obligor.weight,
            label=obligor.label,
            rule="real_estate",
            trail=(reason, *self._nested(obligor.trail)),
        )

    def _classify_fund(self, exposure: Exposure) -> ClassificationResult | None:
        """
        Investment funds (Arts. 47-53).

        Look-through takes precedence over mandate, which takes precedence
        over the conservative weight.
        """
        if exposure.product != ProductType.FUND:
            return None

        fund = exposure.fund
        bounds = self._config.bounds

        look_through = to_decimal(fund.look_through_weight)
        if fund.approach == FundApproach.LOOK_THROUGH and look_through is not None:
            weight = bounds.clamp(look_through)
            trail: list[str] = []
            if weight != look_through:
                trail.append(
                    f"Look-through FPR ({format_percent(look_through)}) outside "
                    f"[{format_percent(bounds.minimum)}, {format_percent(bounds.maximum)}], "
                    f"adjusted to {format_percent(weight)}"
                )
                logger.warning("Fund look-through weight %s clamped to %s", look_through, weight)
            trail.append(f"Fund (look-through) -> informed average FPR {format_percent(weight)}")
            return ClassificationResult(
                weight=weight,
                label=ClassificationLabel.FUND_LOOK_THROUGH,
                rule="fund",
                trail=tuple(trail),
            )

        if fund.approach == FundApproach.MANDATE and fund.mandate is not None:
            weight = FUND_MANDATE_RISK_WEIGHTS[fund.mandate]
            return ClassificationResult(
                weight=weight,
                label=_FUND_MANDATE_LABELS[fund.mandate],
                rule="fund",
                trail=(
                    f"Fund (mandate {fund.mandate.value.replace('_', ' ')}) -> FPR {format_percent(weight)}",
                ),
            )

        weight = FUND_CONSERVATIVE_RISK_WEIGHT
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.FUND,
            rule="fund",
            trail=(f"Fund without look-through or mandate -> conservative FPR {format_percent(weight)}",),
        )

    def _classify_derivative(self, exposure: Exposure) -> ClassificationResult | None:
        """Derivatives (counterparty credit risk): the counterparty's weight applies."""
        if exposure.product != ProductType.DERIVATIVE:
            return None

        counterparty = self.classify_counterparty(exposure)
        return ClassificationResult(
            weight=counterparty.weight,
            label=counterparty.label,
            rule="derivative",
            trail=(
                "Derivative (CCR) -> counterparty FPR applies",
                *self._nested(counterparty.trail),
            ),
        )

    def _classify_fallback(self, exposure: Exposure) -> ClassificationResult:
        """Conservative weight when no rule group matched."""
        weight = self._config.default_weight
        return ClassificationResult(
            weight=weight,
            label=ClassificationLabel.UNMAPPED,
            rule="fallback",
            trail=(f"Class not mapped -> conservative FPR {format_percent(weight)}",),
        )


def create_exposure_classifier(config: CalculationConfig | None = None) -> ExposureClassifier:
    """
    Create an exposure classifier instance.

    Args:
        config: Optional calculation configuration

    Returns:
        ExposureClassifier ready for use
    """
    return ExposureClassifier(config)
