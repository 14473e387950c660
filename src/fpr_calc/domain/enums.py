"""
Domain enums for the FPR calculator.

Defines the closed input schema for a single exposure and the enumerated
outputs of the classification cascade:
- ProductType / CounterpartyType: Top-level dispatch attributes
- Currency: Exposure and obligor-income currencies
- RatingBucket / MultilateralRatingBucket: External rating buckets
- InstitutionCategory: Financial institution categories A/B/C (Arts. 32-35)
- CCFType / CCFDetailType: Credit conversion factor selectors
- CollateralType: Financial collateral eligible for haircuts
- ClassificationLabel: Tag assigned by the rule that fired
- ErrorSeverity / ErrorCategory: Validation finding classification

Every value outside these enumerations is a malformed input; the record
parser rejects it before the engine runs.
"""

from enum import Enum


class ProductType(Enum):
    """Product category of the exposure."""

    LOAN = "loan"
    CREDIT_LINE = "credit_line"  # Overdraft / revolving limit
    CARD = "card"
    DERIVATIVE = "derivative"
    GUARANTEE = "guarantee"
    REAL_ESTATE_LOAN = "real_estate_loan"
    FUND = "fund"
    OTHER = "other"  # Other assets (Art. 66)


class CounterpartyType(Enum):
    """
    Counterparty category of the exposure.

    Drives the counterparty-based rule groups of the classifier
    (sovereign, public sector, institution, retail, corporate).
    """

    DOMESTIC_SOVEREIGN = "domestic_sovereign"  # Brazilian Treasury / BCB
    FOREIGN_SOVEREIGN = "foreign_sovereign"
    FINANCIAL_INSTITUTION = "financial_institution"
    CORPORATE = "corporate"
    INDIVIDUAL = "individual"
    PUBLIC_SECTOR = "public_sector"


class Currency(Enum):
    """Currencies of the exposure, the obligor's income and collateral."""

    BRL = "BRL"
    USD = "USD"
    EUR = "EUR"
    OTHER = "OTHER"


class SovereignKind(Enum):
    """
    Kind of sovereign counterparty.

    Listed multilateral development banks receive 0%; unlisted ones use
    their own rating table, distinct from sovereigns.
    """

    REGULAR = "regular"
    MULTILATERAL_LISTED = "multilateral_listed"
    MULTILATERAL_UNLISTED = "multilateral_unlisted"


class RatingBucket(Enum):
    """
    External rating buckets for foreign sovereigns (Art. 27).

    UNRATED maps to the 100% bucket, never to BELOW_B_MINUS.
    """

    AAA_TO_AA_MINUS = "AAA_AA-"
    A_PLUS_TO_A_MINUS = "A+_A-"
    BBB_PLUS_TO_BBB_MINUS = "BBB+_BBB-"
    BB_PLUS_TO_B_MINUS = "BB+_B-"
    BELOW_B_MINUS = "below_B-"
    UNRATED = "unrated"


class MultilateralRatingBucket(Enum):
    """External rating buckets for unlisted multilateral organisations (Art. 29)."""

    AAA_TO_AA_MINUS = "AAA_AA-"
    A_PLUS_TO_A_MINUS = "A+_A-"
    BBB_PLUS_TO_BBB_MINUS_OR_UNRATED = "BBB+_BBB-_unrated"
    BB_PLUS_TO_B_MINUS = "BB+_B-"
    BELOW_B_MINUS = "below_B-"


class InstitutionCategory(Enum):
    """
    Financial institution categories (Arts. 32-35).

    A: Meets minimum requirements and buffers
    B: Meets minimum requirements only
    C: Does not meet minimum requirements
    """

    A = "A"
    B = "B"
    C = "C"


class SpecialisedFinancing(Enum):
    """Specialised financing kinds for corporate exposures (Art. 38)."""

    NONE = "none"
    OBJECT = "object"
    COMMODITIES = "commodities"
    PROJECT = "project"


class ProjectFinancePhase(Enum):
    """Project finance phases (Art. 38, phased treatment)."""

    PRE_OPERATIONAL = "pre_operational"  # 130%
    OPERATIONAL = "operational"  # 100%
    OPERATIONAL_HIGH_QUALITY = "operational_high_quality"  # 80%


class PropertyType(Enum):
    """Property types for real estate secured exposures."""

    RESIDENTIAL = "residential"
    NON_RESIDENTIAL = "non_residential"


class FundApproach(Enum):
    """Approach used to weight an investment fund (Arts. 47-53)."""

    NO_INFORMATION = "no_information"
    LOOK_THROUGH = "look_through"
    REGULATION = "regulation"
    MANDATE = "mandate"


class FundMandate(Enum):
    """Investment mandate style of a fund."""

    EQUITY = "equity"
    FIXED_INCOME = "fixed_income"
    MIXED = "mixed"
    OTHER = "other"


class PublicSectorType(Enum):
    """Public sector entity types (Arts. 57-58)."""

    STATE = "state"
    MUNICIPALITY = "municipality"
    FEDERAL_DISTRICT = "federal_district"
    PUBLIC_SERVICE_PROVIDER = "public_service_provider"
    STATE_OWNED_COMPANY = "state_owned_company"


class OtherAssetType(Enum):
    """Other asset carve-outs (Art. 66)."""

    CASH = "cash"
    GOLD = "gold"
    LISTED_EQUITY = "listed_equity"
    UNLISTED_EQUITY = "unlisted_equity"
    FIXED_ASSET = "fixed_asset"
    OTHER = "other"


class EquityTier(Enum):
    """Equity participation override tiers."""

    NONE = "none"
    RW_250 = "250"
    RW_1250 = "1250"


class OverrideTier(Enum):
    """Tax credit and court-ordered receivable override tiers."""

    NONE = "none"
    RW_100 = "100"
    RW_600 = "600"
    RW_1250 = "1250"


class CCFType(Enum):
    """
    Generic credit conversion factor selectors (Circular 3.809, Arts. 13-17).

    Used to convert the undrawn limit into an on-balance equivalent.
    """

    IRREVOCABLE_COMMITMENT = "irrevocable_commitment"  # 50%
    REVOCABLE_COMMITMENT = "revocable_commitment"  # 10%
    GUARANTEE_ISSUED = "guarantee_issued"  # 100%
    TRADE_FINANCE = "trade_finance"  # 20% (up to one year)
    OTHER = "other"  # 100%


class CCFDetailType(Enum):
    """Granular credit conversion factor selectors."""

    # Credit commitments
    IRREVOCABLE_UP_TO_1Y = "irrevocable_up_to_1y"
    IRREVOCABLE_OVER_1Y = "irrevocable_over_1y"
    REVOCABLE_UNCONDITIONAL = "revocable_unconditional"
    REVOCABLE_CONDITIONAL = "revocable_conditional"

    # Guarantees
    SURETY = "surety"  # Aval / fiança
    LETTER_OF_CREDIT = "letter_of_credit"
    PERFORMANCE_GUARANTEE = "performance_guarantee"

    # Securitisation
    SECURITISATION_LIQUIDITY = "securitisation_liquidity"
    SECURITISATION_CREDIT_ENHANCEMENT = "securitisation_credit_enhancement"

    # Retail
    CARD_REVOCABLE = "card_revocable"
    CARD_IRREVOCABLE = "card_irrevocable"
    OVERDRAFT = "overdraft"


class CollateralType(Enum):
    """Financial collateral types for the comprehensive approach."""

    DEMAND_DEPOSIT = "demand_deposit"
    SAVINGS_DEPOSIT = "savings_deposit"
    GOLD = "gold"
    GOVERNMENT_BOND = "government_bond"
    PRIVATE_BOND = "private_bond"  # Senior private debt
    OTHER = "other"


class ClassificationLabel(Enum):
    """
    Classification tag assigned by the rule group that fired.

    The value is the externally visible label of the result record.
    """

    # Default / impairment (Art. 64)
    DEFAULT_HIGH_PROVISION = "default_high_provision"
    DEFAULT_MEDIUM_PROVISION = "default_medium_provision"
    DEFAULT_LOW_PROVISION = "default_low_provision"

    # Other assets (Art. 66)
    CASH = "cash"
    GOLD = "gold"
    LISTED_EQUITY = "listed_equity"
    UNLISTED_EQUITY = "unlisted_equity"
    FIXED_ASSET = "fixed_asset"
    OTHER_ASSETS = "other_assets"

    # Special overrides
    NEGATIVE_EQUITY_ADJUSTMENT = "negative_equity_adjustment"
    SUBORDINATED = "subordinated"
    EQUITY = "equity"
    TAX_CREDIT = "tax_credit"
    RECEIVABLES = "receivables"

    # Sovereigns and multilaterals
    SOVEREIGN = "sovereign"
    MULTILATERAL = "multilateral"
    MULTILATERAL_RATED = "multilateral_rated"
    FOREIGN_SOVEREIGN = "foreign_sovereign"
    FOREIGN_SOVEREIGN_UNRATED = "foreign_sovereign_unrated"

    # Public sector (Arts. 57-58)
    PUBLIC_SECTOR_STATE = "public_sector_state"
    PUBLIC_SECTOR_MUNICIPALITY = "public_sector_municipality"
    PUBLIC_SECTOR_FEDERAL_DISTRICT = "public_sector_federal_district"
    PUBLIC_SECTOR_SERVICE_PROVIDER = "public_sector_public_service_provider"
    PUBLIC_SECTOR_STATE_OWNED = "public_sector_state_owned_company"

    # Financial institutions
    FINANCIAL_INSTITUTION = "financial_institution"

    # Real estate
    UNDER_CONSTRUCTION_PRE_CUTOFF = "under_construction_pre_cutoff"
    UNDER_CONSTRUCTION_POST_CUTOFF = "under_construction_post_cutoff"
    RESIDENTIAL_MORTGAGE = "residential_mortgage"
    RESIDENTIAL_MORTGAGE_DEPENDENT = "residential_mortgage_dependent"
    NON_RESIDENTIAL = "non_residential"
    NON_RESIDENTIAL_DEPENDENT = "non_residential_dependent"

    # Retail / individuals
    PAYROLL_LONG_TENOR = "payroll_long_tenor"
    RETAIL_TRANSACTOR = "retail_transactor"
    RETAIL_ELIGIBLE = "retail_eligible"
    INDIVIDUAL_NON_RETAIL = "individual_non_retail"

    # Corporates
    CORPORATE_PROJECT_FINANCE = "corporate_project_finance"
    CORPORATE_SPECIALISED_FINANCING = "corporate_specialised_financing"
    CORPORATE_LARGE_LOW_RISK = "corporate_large_low_risk"
    CORPORATE_SME = "corporate_sme"
    CORPORATE = "corporate"

    # Funds
    FUND_LOOK_THROUGH = "fund_look_through"
    FUND_EQUITY = "fund_equity"
    FUND_FIXED_INCOME = "fund_fixed_income"
    FUND_MIXED = "fund_mixed"
    FUND_OTHER = "fund_other"
    FUND = "fund"

    # Nothing matched
    UNMAPPED = "unmapped"


class ErrorSeverity(Enum):
    """
    Severity levels for validation findings.

    WARNING: Data accepted but a conservative fallback or clamp applies
    ERROR: Value violates a regulatory limit; result may be misleading
    CRITICAL: Record cannot be calculated
    """

    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of validation findings for filtering and reporting."""

    # Missing or invalid data
    DATA_QUALITY = "data_quality"

    # Violation of regulatory business rules
    BUSINESS_RULE = "business_rule"

    # Schema validation failures
    SCHEMA_VALIDATION = "schema_validation"

    # CRM application issues
    CRM = "crm"
