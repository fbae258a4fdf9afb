"""Pydantic schemas for the configuration document.

The document is the wizard's working state and the published artifact:
top-level keys ``basics``, ``earn``, ``redeem``, ``eligibility``, ``expiry``
with camelCase field names, plain numbers and booleans, enums as their
string ids and lists of strings for sets.

Schemas check shape and types only. Business rules (positive point value,
complete category maps, ...) belong to ``loyalty.rules_engine`` so that they
are reported as violations rather than parse failures.
"""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from loyalty.catalog import CategoryId
from loyalty.domain_config import (
    BasicsSection,
    CategoryMap,
    Channels,
    Configuration,
    EarnCaps,
    EarnSection,
    EligibilityScope,
    EligibilitySection,
    ExpiryPolicy,
    ExpirySection,
    RedeemMode,
    RedeemSection,
    Section,
    SectionName,
    WelcomeBonus,
    parse_section_name,
)
from loyalty.errors import ValidationError
from loyalty.rules_engine import Violation


class DocumentModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _ids(values) -> list[str]:
    return [getattr(v, "value", v) for v in values]


# ---------------------------------------------------------------------------
# Section documents
# ---------------------------------------------------------------------------

class BasicsDocument(DocumentModel):
    name: str
    venues: list[str] = Field(default_factory=list)
    currency: str
    point_value: float
    rounding: int
    timezone: str

    @classmethod
    def from_section(cls, section: BasicsSection) -> "BasicsDocument":
        return cls(
            name=section.name,
            venues=list(section.venues),
            currency=section.currency,
            point_value=section.point_value,
            rounding=section.rounding,
            timezone=section.timezone,
        )

    def to_section(self) -> BasicsSection:
        return BasicsSection(
            name=self.name,
            venues=tuple(self.venues),
            currency=self.currency,
            point_value=self.point_value,
            rounding=self.rounding,
            timezone=self.timezone,
        )


class ChannelsDocument(DocumentModel):
    pos: bool
    online: bool
    ssk: bool
    api: bool


class CapsDocument(DocumentModel):
    per_txn: int
    per_day: int


class WelcomeDocument(DocumentModel):
    enabled: bool
    bonus_points: int


class EarnDocument(DocumentModel):
    pts_per_dollar: float
    earn_on_tax: bool
    min_spend: float
    channels: ChannelsDocument
    item_overrides: dict[str, float]
    caps: CapsDocument
    exclude_tenders: list[str] = Field(default_factory=list)
    welcome: WelcomeDocument

    @classmethod
    def from_section(cls, section: EarnSection) -> "EarnDocument":
        return cls(
            pts_per_dollar=section.pts_per_dollar,
            earn_on_tax=section.earn_on_tax,
            min_spend=section.min_spend,
            channels=ChannelsDocument(
                pos=section.channels.pos,
                online=section.channels.online,
                ssk=section.channels.ssk,
                api=section.channels.api,
            ),
            item_overrides=section.item_overrides.to_dict(),
            caps=CapsDocument(per_txn=section.caps.per_txn, per_day=section.caps.per_day),
            exclude_tenders=list(section.exclude_tenders),
            welcome=WelcomeDocument(
                enabled=section.welcome.enabled,
                bonus_points=section.welcome.bonus_points,
            ),
        )

    def to_section(self) -> EarnSection:
        return EarnSection(
            pts_per_dollar=self.pts_per_dollar,
            earn_on_tax=self.earn_on_tax,
            min_spend=self.min_spend,
            channels=Channels(**self.channels.model_dump()),
            item_overrides=CategoryMap(self.item_overrides),
            caps=EarnCaps(per_txn=self.caps.per_txn, per_day=self.caps.per_day),
            exclude_tenders=tuple(self.exclude_tenders),
            welcome=WelcomeBonus(
                enabled=self.welcome.enabled,
                bonus_points=self.welcome.bonus_points,
            ),
        )


class RedeemDocument(DocumentModel):
    mode: RedeemMode
    allow_partial: bool
    allow_split_tender: bool
    increment: int
    multipliers: dict[str, float]
    exclusions: list[str] = Field(default_factory=list)
    off_peak_only: bool

    @classmethod
    def from_section(cls, section: RedeemSection) -> "RedeemDocument":
        return cls(
            mode=section.mode,
            allow_partial=section.allow_partial,
            allow_split_tender=section.allow_split_tender,
            increment=section.increment,
            multipliers=section.multipliers.to_dict(),
            exclusions=list(section.exclusions),
            off_peak_only=section.off_peak_only,
        )

    def to_section(self) -> RedeemSection:
        return RedeemSection(
            mode=self.mode,
            allow_partial=self.allow_partial,
            allow_split_tender=self.allow_split_tender,
            increment=self.increment,
            multipliers=CategoryMap(self.multipliers),
            exclusions=tuple(self.exclusions),
            off_peak_only=self.off_peak_only,
        )


class EligibilityDocument(DocumentModel):
    scope: EligibilityScope
    categories: list[str] = Field(default_factory=list)
    products: list[str] = Field(default_factory=list)

    @classmethod
    def from_section(cls, section: EligibilitySection) -> "EligibilityDocument":
        return cls(
            scope=section.scope,
            categories=_ids(section.categories),
            products=list(section.products),
        )

    def to_section(self) -> EligibilitySection:
        return EligibilitySection(
            scope=self.scope,
            categories=tuple(CategoryId.parse(c) or c for c in self.categories),
            products=tuple(self.products),
        )


class ExpiryDocument(DocumentModel):
    policy: ExpiryPolicy
    months: int
    grace_email_days: int
    auto_extend: bool

    @classmethod
    def from_section(cls, section: ExpirySection) -> "ExpiryDocument":
        return cls(
            policy=section.policy,
            months=section.months,
            grace_email_days=section.grace_email_days,
            auto_extend=section.auto_extend,
        )

    def to_section(self) -> ExpirySection:
        return ExpirySection(
            policy=self.policy,
            months=self.months,
            grace_email_days=self.grace_email_days,
            auto_extend=self.auto_extend,
        )


class ConfigurationDocument(DocumentModel):
    basics: BasicsDocument
    earn: EarnDocument
    redeem: RedeemDocument
    eligibility: EligibilityDocument
    expiry: ExpiryDocument

    @classmethod
    def from_configuration(cls, config: Configuration) -> "ConfigurationDocument":
        return cls(
            basics=BasicsDocument.from_section(config.basics),
            earn=EarnDocument.from_section(config.earn),
            redeem=RedeemDocument.from_section(config.redeem),
            eligibility=EligibilityDocument.from_section(config.eligibility),
            expiry=ExpiryDocument.from_section(config.expiry),
        )

    def to_configuration(self) -> Configuration:
        return Configuration(
            basics=self.basics.to_section(),
            earn=self.earn.to_section(),
            redeem=self.redeem.to_section(),
            eligibility=self.eligibility.to_section(),
            expiry=self.expiry.to_section(),
        )


SECTION_DOCUMENTS: dict[SectionName, type[DocumentModel]] = {
    SectionName.BASICS: BasicsDocument,
    SectionName.EARN: EarnDocument,
    SectionName.REDEEM: RedeemDocument,
    SectionName.ELIGIBILITY: EligibilityDocument,
    SectionName.EXPIRY: ExpiryDocument,
}


# ---------------------------------------------------------------------------
# Conversion entry points
# ---------------------------------------------------------------------------

def _parse_failure(exc: PydanticValidationError, section: str | None = None) -> ValidationError:
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        if section:
            loc.insert(0, section)
        path = ".".join(loc)
        violations.append(
            Violation(
                section=loc[0] if loc else (section or ""),
                field=path,
                code=error["type"],
                message=f"{path}: {error['msg']}",
            )
        )
    return ValidationError(violations, section=section)


def to_document(config: Configuration) -> dict[str, Any]:
    """Serialize a configuration to the camelCase document."""
    return ConfigurationDocument.from_configuration(config).to_document()


def to_json(config: Configuration, indent: int = 2) -> str:
    return ConfigurationDocument.from_configuration(config).model_dump_json(
        by_alias=True, indent=indent
    )


def from_document(document: Mapping[str, Any]) -> Configuration:
    """Parse a full document. Shape/type errors raise ``ValidationError``."""
    try:
        parsed = ConfigurationDocument.model_validate(document)
    except PydanticValidationError as exc:
        raise _parse_failure(exc) from exc
    return parsed.to_configuration()


def section_to_document(name: Union[SectionName, str], value: Section) -> dict[str, Any]:
    section_name = parse_section_name(name)
    return SECTION_DOCUMENTS[section_name].from_section(value).to_document()


def section_from_document(name: Union[SectionName, str], document: Mapping[str, Any]) -> Section:
    """Parse one section document into its dataclass."""
    section_name = parse_section_name(name)
    try:
        parsed = SECTION_DOCUMENTS[section_name].model_validate(document)
    except PydanticValidationError as exc:
        raise _parse_failure(exc, section=section_name.value) from exc
    return parsed.to_section()


# ---------------------------------------------------------------------------
# Type checks for in-memory sections
# ---------------------------------------------------------------------------

def _plain(value: Any) -> Any:
    """Section value as camelCase JSON-compatible data, without coercion."""
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {_plain(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def section_type_violations(name: Union[SectionName, str], value: Section) -> list[Violation]:
    """Blocking violations for fields whose type the document cannot carry.

    Checked strictly: ``None`` for a string, ``1`` for a flag or ``123`` for a
    name are reported instead of being coerced.
    """
    section_name = parse_section_name(name)
    try:
        payload = json.dumps(_plain(value))
    except (TypeError, ValueError) as exc:
        return [
            Violation(
                section=section_name.value,
                field=section_name.value,
                code="not_serializable",
                message=f"{section_name.value}: {exc}",
            )
        ]
    try:
        SECTION_DOCUMENTS[section_name].model_validate_json(payload, strict=True)
    except PydanticValidationError as exc:
        return list(_parse_failure(exc, section=section_name.value).violations)
    return []
