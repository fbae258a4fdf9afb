"""Pure-function validation rules for program sections.

Validators are stateless functions: (section[, catalog]) -> list[Violation].
They never raise for bad values; every problem found is returned so the
operator sees all of them at once. Each violation is either:
- blocking: the section cannot be committed (e.g. non-positive point value)
- warning: the section can be committed, the operator should be told

Field paths use the document (camelCase) names, e.g. ``earn.caps.perTxn``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Union

from loyalty.catalog import DEFAULT_CATALOG, Catalog, CategoryId
from loyalty.domain_config import (
    BasicsSection,
    CategoryMap,
    Configuration,
    EarnSection,
    EligibilityScope,
    EligibilitySection,
    ExpiryPolicy,
    ExpirySection,
    RedeemMode,
    RedeemSection,
    SectionName,
    parse_section_name,
)

DAYS_PER_MONTH = 30


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class Severity(str, Enum):
    BLOCKING = "blocking"
    WARNING = "warning"


@dataclass(frozen=True)
class Violation:
    """A single problem found in a section."""

    section: str
    field: str
    code: str
    message: str
    severity: Severity = Severity.BLOCKING

    @property
    def is_blocking(self) -> bool:
        return self.severity == Severity.BLOCKING

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "field": self.field,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass
class ValidationReport:
    """Aggregate outcome of validating one or more sections."""

    violations: list[Violation] = field(default_factory=list)
    blocking: list[Violation] = field(default_factory=list)
    warnings: list[Violation] = field(default_factory=list)

    def __post_init__(self):
        self.blocking = [v for v in self.violations if v.is_blocking]
        self.warnings = [v for v in self.violations if not v.is_blocking]

    @property
    def ok(self) -> bool:
        """True when nothing blocks a commit."""
        return not self.blocking

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


class _Collector:
    """Accumulates violations for one section."""

    def __init__(self, section: SectionName):
        self.section = section.value
        self.items: list[Violation] = []

    def block(self, path: str, code: str, message: str) -> None:
        self.items.append(Violation(self.section, f"{self.section}.{path}", code, message))

    def warn(self, path: str, code: str, message: str) -> None:
        self.items.append(
            Violation(self.section, f"{self.section}.{path}", code, message, Severity.WARNING)
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_whole(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer()


def _check_category_map(out: _Collector, path: str, values: CategoryMap, label: str) -> None:
    for category in values.missing():
        out.block(
            f"{path}.{category.value}",
            "missing_category",
            f"{label} is missing category '{category.value}'",
        )
    for key in values.extra():
        out.block(f"{path}.{key}", "unknown_category", f"{label} has unknown category '{key}'")
    for key, value in values.items():
        if not _is_number(value):
            name = getattr(key, "value", key)
            out.block(f"{path}.{name}", "not_a_number", f"{label} for '{name}' must be a number")


def _check_names(out: _Collector, path: str, names: Iterable[str], label: str) -> None:
    if any(not str(n).strip() for n in names):
        out.warn(path, "blank_name", f"{label} contains a blank entry")


# ---------------------------------------------------------------------------
# Section rules
# ---------------------------------------------------------------------------

def validate_basics(section: BasicsSection) -> list[Violation]:
    """Program name, point value and display rounding."""
    out = _Collector(SectionName.BASICS)

    if not section.name or not section.name.strip():
        out.block("name", "empty_name", "Program name is required")
    if not _is_number(section.point_value) or section.point_value <= 0:
        out.block(
            "pointValue",
            "non_positive_point_value",
            f"Point value must be greater than 0 (got {section.point_value})",
        )
    if not _is_whole(section.rounding) or section.rounding <= 0:
        out.block(
            "rounding",
            "non_positive_rounding",
            f"Rounding must be a positive whole number of points (got {section.rounding})",
        )
    if not section.currency or not section.currency.strip():
        out.block("currency", "empty_currency", "Currency code is required")
    elif not (len(section.currency) == 3 and section.currency.isalpha() and section.currency.isupper()):
        out.warn(
            "currency",
            "unusual_currency",
            f"Currency '{section.currency}' is not a 3-letter ISO code",
        )
    if not section.venues:
        out.warn("venues", "no_venues", "Program is not assigned to any venue")
    else:
        _check_names(out, "venues", section.venues, "Venues")

    return out.items


def validate_earn(section: EarnSection) -> list[Violation]:
    """Earn rate, threshold, caps, overrides and welcome bonus."""
    out = _Collector(SectionName.EARN)

    if not _is_number(section.pts_per_dollar) or section.pts_per_dollar < 0:
        out.block(
            "ptsPerDollar",
            "negative_earn_rate",
            f"Points per $ cannot be negative (got {section.pts_per_dollar})",
        )
    if not _is_number(section.min_spend) or section.min_spend < 0:
        out.block(
            "minSpend",
            "negative_min_spend",
            f"Minimum qualifying spend cannot be negative (got {section.min_spend})",
        )

    caps = section.caps
    for path, label, value in (
        ("caps.perTxn", "Per transaction cap", caps.per_txn),
        ("caps.perDay", "Per day cap", caps.per_day),
    ):
        if not _is_whole(value) or value < 0:
            out.block(path, "negative_cap", f"{label} must be a whole number >= 0 (got {value})")
    if (
        _is_number(caps.per_txn) and _is_number(caps.per_day)
        and caps.per_txn > 0 and 0 < caps.per_day < caps.per_txn
    ):
        out.warn(
            "caps.perDay",
            "day_cap_below_txn_cap",
            f"Per day cap ({caps.per_day}) is lower than the per transaction cap ({caps.per_txn})",
        )

    _check_category_map(out, "itemOverrides", section.item_overrides, "Item overrides")
    for key, value in section.item_overrides.items():
        if isinstance(key, CategoryId) and _is_number(value) and value < -100:
            out.warn(
                f"itemOverrides.{key.value}",
                "override_below_floor",
                f"Override {value}% for '{key.value}' is below -100%; earn is floored at zero",
            )

    if not section.channels.enabled():
        out.warn("channels", "no_channels", "Every accrual channel is disabled; nothing will earn")

    welcome = section.welcome
    if not _is_whole(welcome.bonus_points) or welcome.bonus_points < 0:
        out.block(
            "welcome.bonusPoints",
            "negative_bonus",
            f"Welcome bonus must be a whole number >= 0 (got {welcome.bonus_points})",
        )
    elif welcome.enabled and welcome.bonus_points == 0:
        out.warn("welcome.bonusPoints", "empty_bonus", "Welcome bonus is enabled with 0 points")

    _check_names(out, "excludeTenders", section.exclude_tenders, "Excluded tenders")
    return out.items


def validate_redeem(section: RedeemSection) -> list[Violation]:
    """Redemption mode, increment, multipliers and exclusions."""
    out = _Collector(SectionName.REDEEM)

    if section.mode not in [m.value for m in RedeemMode]:
        out.block("mode", "unknown_mode", f"Unknown redemption mode '{section.mode}'")
    if not _is_whole(section.increment) or section.increment <= 0:
        out.block(
            "increment",
            "non_positive_increment",
            f"Redemption increment must be a positive whole number (got {section.increment})",
        )

    _check_category_map(out, "multipliers", section.multipliers, "Multipliers")
    for key, value in section.multipliers.items():
        if not isinstance(key, CategoryId) or not _is_number(value):
            continue
        if value < 0:
            out.block(
                f"multipliers.{key.value}",
                "negative_multiplier",
                f"Multiplier for '{key.value}' cannot be negative (got {value})",
            )
        elif value == 0:
            out.warn(
                f"multipliers.{key.value}",
                "free_redemption",
                f"Multiplier 0 makes '{key.value}' items free to redeem",
            )

    _check_names(out, "exclusions", section.exclusions, "Exclusions")
    return out.items


def validate_eligibility(
    section: EligibilitySection,
    catalog: Optional[Catalog] = None,
) -> list[Violation]:
    """Scope and the selected categories/products, checked against ``catalog``."""
    catalog = catalog or DEFAULT_CATALOG
    out = _Collector(SectionName.ELIGIBILITY)

    scope = None
    if section.scope in [s.value for s in EligibilityScope]:
        scope = EligibilityScope(section.scope)
    else:
        out.block("scope", "unknown_scope", f"Unknown eligibility scope '{section.scope}'")

    for category in section.categories:
        if CategoryId.parse(category) is None:
            out.block(
                "categories", "unknown_category", f"Unknown category '{category}'"
            )
    for product_id in section.products:
        if not catalog.is_product(product_id):
            out.block("products", "unknown_product", f"Unknown product '{product_id}'")
    for path, selected in (("categories", section.categories), ("products", section.products)):
        repeated = sorted({str(getattr(v, "value", v)) for v in selected if selected.count(v) > 1})
        if repeated:
            out.warn(
                path,
                "duplicate_selection",
                f"Selected more than once: {', '.join(repeated)}",
            )

    if scope == EligibilityScope.CATEGORIES and not section.categories:
        out.warn("categories", "empty_selection", "No categories selected; nothing is eligible")
    if scope == EligibilityScope.PRODUCTS:
        if not section.products:
            out.warn("products", "empty_selection", "No products selected; nothing is eligible")
        listed = {CategoryId.parse(c) for c in section.categories} - {None}
        for product_id in section.products:
            product = catalog.product(product_id)
            if product and listed and product.category not in listed:
                out.warn(
                    "products",
                    "product_outside_coverage",
                    f"Product '{product_id}' is in category '{product.category.value}', "
                    "which is outside the program's listed categories",
                )

    return out.items


def validate_expiry(section: ExpirySection) -> list[Violation]:
    """Rolling inactivity window and warning notice."""
    out = _Collector(SectionName.EXPIRY)

    if section.policy not in [p.value for p in ExpiryPolicy]:
        out.block("policy", "unknown_policy", f"Unknown expiry policy '{section.policy}'")
    if not _is_whole(section.months) or section.months <= 0:
        out.block(
            "months",
            "non_positive_months",
            f"Expiry window must be a positive whole number of months (got {section.months})",
        )
    if not _is_whole(section.grace_email_days) or section.grace_email_days < 0:
        out.block(
            "graceEmailDays",
            "negative_grace",
            f"Grace email lead time cannot be negative (got {section.grace_email_days})",
        )
    elif _is_whole(section.months) and section.months > 0:
        window = section.months * DAYS_PER_MONTH
        if section.grace_email_days >= window:
            out.warn(
                "graceEmailDays",
                "grace_exceeds_window",
                f"Grace email lead time ({section.grace_email_days} days) is not shorter "
                f"than the {section.months}-month expiry window",
            )

    return out.items


# ---------------------------------------------------------------------------
# Dispatch and composition
# ---------------------------------------------------------------------------

_VALIDATORS: dict[SectionName, Callable[..., list[Violation]]] = {
    SectionName.BASICS: validate_basics,
    SectionName.EARN: validate_earn,
    SectionName.REDEEM: validate_redeem,
    SectionName.EXPIRY: validate_expiry,
}


def validate_section(
    name: Union[SectionName, str],
    value: Any,
    catalog: Optional[Catalog] = None,
) -> ValidationReport:
    """Validate one section value by section name."""
    section_name = parse_section_name(name)
    if section_name == SectionName.ELIGIBILITY:
        return ValidationReport(validate_eligibility(value, catalog))
    return ValidationReport(_VALIDATORS[section_name](value))


def validate_configuration(
    config: Configuration,
    catalog: Optional[Catalog] = None,
) -> ValidationReport:
    """Validate every section of a configuration.

    Example::

        report = validate_configuration(store.get())
        if not report.ok:
            show(report.messages)
    """
    violations: list[Violation] = []
    for name in SectionName:
        violations.extend(validate_section(name, config.section(name), catalog).violations)
    return ValidationReport(violations)
