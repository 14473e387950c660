"""
This module contains the record schemas for the fpr_calc inputs and outputs.

Key Data Inputs:
- Exposure                  # One exposure record as a nested plain mapping
  - sovereign / institution / corporate / retail / real_estate / fund
    / public_sector / default / special / crm / floors / amounts
  - crm.collateral          # List of collateral postings

Output Schemas (Polars):
- RESULT_SCHEMA             # One row per calculation
- TRAIL_SCHEMA              # One row per audit trail line

Mapping records use the same field names as the dataclasses in
fpr_calc.contracts.exposure; enum fields carry the enum's value
(e.g. "foreign_sovereign"). Missing keys take the dataclass defaults.
Unknown keys and values outside the closed enumerations raise
ExposureSchemaError.

Usage:
    from fpr_calc.data.schemas import exposure_from_dict

    exposure = exposure_from_dict({
        "product": "loan",
        "counterparty": "individual",
        "retail": {"eligible": True, "transactor": True},
        "amounts": {"drawn_balance": "10000", "undrawn_limit": "5000"},
    })
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict
from decimal import Decimal
from enum import Enum
from typing import Any

import polars as pl

from fpr_calc.contracts.errors import ExposureSchemaError
from fpr_calc.contracts.exposure import (
    CollateralPosting,
    CorporateInfo,
    CRMInfo,
    DefaultInfo,
    Exposure,
    ExposureAmounts,
    FloorInfo,
    FundInfo,
    InstitutionInfo,
    PublicSectorInfo,
    RealEstateInfo,
    RetailInfo,
    SovereignInfo,
    SpecialInfo,
    to_decimal,
)
from fpr_calc.domain.enums import (
    CCFDetailType,
    CCFType,
    CollateralType,
    CounterpartyType,
    Currency,
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

Converter = Callable[[str, Any], Any]


# =============================================================================
# OUTPUT SCHEMAS
# =============================================================================

RESULT_SCHEMA = {
    "label": pl.String,
    "base_weight": pl.Float64,
    "final_weight": pl.Float64,
    "ead": pl.Float64,  # Null when no amounts were supplied
    "adjusted_ead": pl.Float64,
    "rwa": pl.Float64,
}

TRAIL_SCHEMA = {
    "step": pl.Int32,  # 1-based position in execution order
    "line": pl.String,
}


# =============================================================================
# FIELD CONVERTERS
# =============================================================================


def _enum(enum_cls: type[Enum], optional: bool = False) -> Converter:
    """Converter accepting an enum member or its value."""

    def convert(field_name: str, value: Any) -> Any:
        if value is None and optional:
            return None
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            expected = ", ".join(member.value for member in enum_cls)
            raise ExposureSchemaError(field_name, value, f"one of [{expected}]") from None

    return convert


def _bool(field_name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ExposureSchemaError(field_name, value, "a boolean")
    return value


def _decimal(optional: bool = False) -> Converter:
    """Converter for percentage fields the classifier reads directly."""

    def convert(field_name: str, value: Any) -> Decimal | None:
        if value is None and optional:
            return None
        number = to_decimal(value)
        if number is None:
            raise ExposureSchemaError(field_name, value, "a finite number")
        return number

    return convert


def _raw(field_name: str, value: Any) -> Any:
    """Numeric inputs the engine recovers from are passed through untouched."""
    return value


def _collateral(field_name: str, value: Any) -> tuple[CollateralPosting, ...]:
    if isinstance(value, Mapping) or not isinstance(value, (list, tuple)):
        raise ExposureSchemaError(field_name, value, "a list of collateral postings")
    return tuple(
        _build(CollateralPosting, _COLLATERAL_FIELDS, posting, f"{field_name}[{index}]")
        for index, posting in enumerate(value)
    )


# =============================================================================
# RECORD LAYOUT
# =============================================================================

_COLLATERAL_FIELDS: dict[str, Converter] = {
    "collateral_type": _enum(CollateralType),
    "currency": _enum(Currency),
    "value": _raw,
}

_BAGS: dict[str, tuple[type, dict[str, Converter]]] = {
    "sovereign": (SovereignInfo, {
        "kind": _enum(SovereignKind),
        "rating": _enum(RatingBucket, optional=True),
        "multilateral_rating": _enum(MultilateralRatingBucket, optional=True),
    }),
    "institution": (InstitutionInfo, {
        "category": _enum(InstitutionCategory),
        "tenor_90d": _bool,
        "tier1_high": _bool,
        "leverage_high": _bool,
        "trade_finance_1y": _bool,
        "netting_eligible": _bool,
    }),
    "corporate": (CorporateInfo, {
        "large_low_risk": _bool,
        "sme": _bool,
        "financing": _enum(SpecialisedFinancing),
        "project_phase": _enum(ProjectFinancePhase, optional=True),
        "annual_revenue": _decimal(optional=True),
    }),
    "retail": (RetailInfo, {
        "eligible": _bool,
        "transactor": _bool,
        "no_draw_360d": _bool,
        "payroll_tenor_years": _decimal(optional=True),
    }),
    "real_estate": (RealEstateInfo, {
        "property_type": _enum(PropertyType),
        "cash_flow_dependent": _bool,
        "ltv": _decimal(),
        "guarantee_eligible": _bool,
        "completed": _bool,
        "contract_pre_cutoff": _bool,
        "contract_post_cutoff": _bool,
    }),
    "fund": (FundInfo, {
        "approach": _enum(FundApproach),
        "look_through_weight": _decimal(optional=True),
        "mandate": _enum(FundMandate, optional=True),
    }),
    "public_sector": (PublicSectorInfo, {
        "kind": _enum(PublicSectorType),
        "rating": _enum(RatingBucket, optional=True),
    }),
    "default": (DefaultInfo, {
        "in_default": _bool,
        "provision_percent": _decimal(),
    }),
    "special": (SpecialInfo, {
        "negative_equity_adjustment": _bool,
        "subordinated": _bool,
        "equity": _enum(EquityTier),
        "tax_credit": _enum(OverrideTier),
        "receivables": _enum(OverrideTier),
    }),
    "crm": (CRMInfo, {
        "guarantor_substitution": _bool,
        "guarantor_weight": _raw,
        "credit_insurance": _bool,
        "insurer_weight": _raw,
        "netting_agreement": _bool,
        "collateral": _collateral,
        "maturity_mismatch": _bool,
    }),
    "floors": (FloorInfo, {
        "custody_risk": _bool,
    }),
    "amounts": (ExposureAmounts, {
        "drawn_balance": _raw,
        "undrawn_limit": _raw,
        "ccf_type": _enum(CCFType),
        "ccf_detail": _enum(CCFDetailType, optional=True),
        "ccf_override": _raw,
    }),
}

_TOP_LEVEL_FIELDS: dict[str, Converter] = {
    "product": _enum(ProductType),
    "counterparty": _enum(CounterpartyType),
    "exposure_currency": _enum(Currency),
    "income_currency": _enum(Currency),
    "hedged_90": _bool,
    "other_asset": _enum(OtherAssetType, optional=True),
}

_REQUIRED_FIELDS = ("product", "counterparty")


def _build(cls: type, layout: dict[str, Converter], record: Any, path: str) -> Any:
    """Build one dataclass from a mapping following its field layout."""
    if not isinstance(record, Mapping):
        raise ExposureSchemaError(path, record, "a mapping")

    unknown = sorted(set(record) - set(layout))
    if unknown:
        raise ExposureSchemaError(f"{path}.{unknown[0]}", record[unknown[0]], "no such field")

    kwargs = {
        name: layout[name](f"{path}.{name}", value)
        for name, value in record.items()
    }
    return cls(**kwargs)


# =============================================================================
# PUBLIC API
# =============================================================================


def exposure_from_dict(record: Mapping[str, Any]) -> Exposure:
    """
    Build an Exposure from a nested plain mapping.

    Args:
        record: Exposure record with dataclass field names as keys

    Returns:
        Exposure

    Raises:
        ExposureSchemaError: Unknown field, missing product/counterparty,
            or a value outside the closed schema
    """
    if not isinstance(record, Mapping):
        raise ExposureSchemaError("exposure", record, "a mapping")

    for name in _REQUIRED_FIELDS:
        if name not in record:
            raise ExposureSchemaError(name, None, "a required field")

    kwargs: dict[str, Any] = {}
    for name, value in record.items():
        if name in _TOP_LEVEL_FIELDS:
            kwargs[name] = _TOP_LEVEL_FIELDS[name](name, value)
        elif name in _BAGS:
            if name == "amounts" and value is None:
                kwargs[name] = None
                continue
            cls, layout = _BAGS[name]
            kwargs[name] = _build(cls, layout, value, name)
        else:
            raise ExposureSchemaError(name, value, "no such field")

    return Exposure(**kwargs)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def exposure_to_dict(exposure: Exposure) -> dict[str, Any]:
    """
    Render an Exposure as a nested plain mapping.

    Enums become their values and Decimals become strings, so the result
    serializes to JSON unchanged and exposure_from_dict() accepts it back.
    """
    return _to_plain(asdict(exposure))
