"""Dataclass-based loyalty program configuration.

A program configuration is five independently committed sections
(basics, earn, redeem, eligibility, expiry), each a frozen dataclass.
This gives you:
- Default values (the documented session-start program)
- Immutability (frozen=True; sequences are stored as tuples)
- Whole-section replacement via ``Configuration.replace_section``

Per-category numbers live in a ``CategoryMap`` keyed by ``CategoryId``
rather than a free-form dict, so completeness can be checked at every
commit boundary.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Union

from loyalty.catalog import CATEGORY_IDS, CategoryId, Product
from loyalty.errors import UnknownSectionError


# ---------------------------------------------------------------------------
# Per-category values
# ---------------------------------------------------------------------------

class CategoryMap(Mapping):
    """Immutable mapping of category id -> number.

    Keys matching a ``CategoryId`` are normalised to the enum member; any
    other key is kept as a plain string so validation can report it as extra.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Union[Mapping, Iterable[tuple[Any, float]]] = ()):
        normalized: dict[Union[CategoryId, str], float] = {}
        for key, value in dict(values).items():
            parsed = CategoryId.parse(key)
            normalized[parsed if parsed else str(key)] = value
        self._values = normalized

    @classmethod
    def uniform(cls, value: float) -> "CategoryMap":
        return cls({category: value for category in CATEGORY_IDS})

    def __getitem__(self, key: Union[CategoryId, str]) -> float:
        parsed = CategoryId.parse(key)
        return self._values[parsed if parsed else key]

    def __iter__(self) -> Iterator[Union[CategoryId, str]]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"CategoryMap({self.to_dict()!r})"

    def missing(self) -> list[CategoryId]:
        """Fixed categories without a value."""
        return [c for c in CATEGORY_IDS if c not in self._values]

    def extra(self) -> list[str]:
        """Keys outside the fixed category set."""
        return [k for k in self._values if not isinstance(k, CategoryId)]

    @property
    def is_complete(self) -> bool:
        return not self.missing() and not self.extra()

    def with_value(self, category: Union[CategoryId, str], value: float) -> "CategoryMap":
        updated = dict(self._values)
        parsed = CategoryId.parse(category)
        updated[parsed if parsed else str(category)] = value
        return CategoryMap(updated)

    def to_dict(self) -> dict[str, float]:
        """Plain dict in fixed category order, extras last."""
        ordered = {c.value: self._values[c] for c in CATEGORY_IDS if c in self._values}
        for key in self.extra():
            ordered[key] = self._values[key]
        return ordered


def _freeze(instance: Any, *names: str) -> None:
    """Coerce sequence fields of a frozen dataclass into tuples."""
    for name in names:
        value = getattr(instance, name)
        if not isinstance(value, tuple):
            object.__setattr__(instance, name, tuple(value))


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class SectionName(str, Enum):
    BASICS = "basics"
    EARN = "earn"
    REDEEM = "redeem"
    ELIGIBILITY = "eligibility"
    EXPIRY = "expiry"


class RedeemMode(str, Enum):
    PRICE_FOR_POINTS = "priceForPoints"


class EligibilityScope(str, Enum):
    CATEGORIES = "categories"
    PRODUCTS = "products"


class ExpiryPolicy(str, Enum):
    ROLLING_INACTIVITY = "rollingInactivity"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BasicsSection:
    """Program identity and point value."""

    name: str = "ROLLER Rewards"
    venues: tuple[str, ...] = ("Main venue",)
    currency: str = "USD"
    point_value: float = 0.01  # dollars per point
    rounding: int = 10  # points
    timezone: str = "Auto"

    def __post_init__(self):
        _freeze(self, "venues")


@dataclass(frozen=True)
class Channels:
    """Accrual channels: point-of-sale, online, self-service kiosk, API."""

    pos: bool = True
    online: bool = True
    ssk: bool = True
    api: bool = True

    def enabled(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]


@dataclass(frozen=True)
class EarnCaps:
    per_txn: int = 5000
    per_day: int = 15000


@dataclass(frozen=True)
class WelcomeBonus:
    """One-time points on enrollment; no spend threshold."""

    enabled: bool = True
    bonus_points: int = 1000


def _default_overrides() -> CategoryMap:
    return CategoryMap({
        CategoryId.SESSION: 0,
        CategoryId.STANDARD: 0,
        CategoryId.STOCK: -50,
        CategoryId.PARTY: 0,
        CategoryId.MEMBERSHIP: 0,
    })


@dataclass(frozen=True)
class EarnSection:
    """How points are issued."""

    pts_per_dollar: float = 9.5
    earn_on_tax: bool = False
    min_spend: float = 5.0
    channels: Channels = field(default_factory=Channels)
    item_overrides: CategoryMap = field(default_factory=_default_overrides)  # % vs base
    caps: EarnCaps = field(default_factory=EarnCaps)
    exclude_tenders: tuple[str, ...] = ("Gift cards", "Store credit")
    welcome: WelcomeBonus = field(default_factory=WelcomeBonus)

    def __post_init__(self):
        if not isinstance(self.item_overrides, CategoryMap):
            object.__setattr__(self, "item_overrides", CategoryMap(self.item_overrides))
        _freeze(self, "exclude_tenders")


def _default_multipliers() -> CategoryMap:
    return CategoryMap({
        CategoryId.SESSION: 0.6,
        CategoryId.STANDARD: 0.6,
        CategoryId.STOCK: 1.5,
        CategoryId.PARTY: 1.0,
        CategoryId.MEMBERSHIP: 1.0,
    })


@dataclass(frozen=True)
class RedeemSection:
    """How points are spent."""

    mode: RedeemMode = RedeemMode.PRICE_FOR_POINTS
    allow_partial: bool = True
    allow_split_tender: bool = True
    increment: int = 10  # points per redemption block
    multipliers: CategoryMap = field(default_factory=_default_multipliers)
    exclusions: tuple[str, ...] = ("Gift cards", "3rd-party vouchers")
    off_peak_only: bool = False

    def __post_init__(self):
        if not isinstance(self.multipliers, CategoryMap):
            object.__setattr__(self, "multipliers", CategoryMap(self.multipliers))
        _freeze(self, "exclusions")


@dataclass(frozen=True)
class EligibilitySection:
    """Which items earn and redeem.

    Only the list matching ``scope`` governs eligibility; the other may be
    stored (so switching scope back keeps the operator's picks) but is
    ignored by every computation.
    """

    scope: EligibilityScope = EligibilityScope.CATEGORIES
    categories: tuple[CategoryId, ...] = (
        CategoryId.SESSION,
        CategoryId.STANDARD,
        CategoryId.STOCK,
    )
    products: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "categories", tuple(CategoryId.parse(c) or c for c in self.categories)
        )
        _freeze(self, "products")

    def active_selection(self) -> tuple[str, ...]:
        if self.scope == EligibilityScope.PRODUCTS:
            return self.products
        return tuple(getattr(c, "value", c) for c in self.categories)

    def is_eligible(self, product: Product) -> bool:
        if self.scope == EligibilityScope.PRODUCTS:
            return product.id in self.products
        return product.category in self.categories


@dataclass(frozen=True)
class ExpirySection:
    """Rolling-inactivity expiry."""

    policy: ExpiryPolicy = ExpiryPolicy.ROLLING_INACTIVITY
    months: int = 12
    grace_email_days: int = 14
    auto_extend: bool = True


Section = Union[BasicsSection, EarnSection, RedeemSection, EligibilitySection, ExpirySection]

SECTION_TYPES: dict[SectionName, type] = {
    SectionName.BASICS: BasicsSection,
    SectionName.EARN: EarnSection,
    SectionName.REDEEM: RedeemSection,
    SectionName.ELIGIBILITY: EligibilitySection,
    SectionName.EXPIRY: ExpirySection,
}


def parse_section_name(name: Union[SectionName, str]) -> SectionName:
    """Resolve a section name, raising ``UnknownSectionError`` when invalid."""
    try:
        return SectionName(name)
    except ValueError:
        raise UnknownSectionError(name) from None


# ---------------------------------------------------------------------------
# Root aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Configuration:
    """Complete loyalty program configuration.

    Usage::

        config = Configuration.default()
        config = config.replace_section("earn", replace(config.earn, pts_per_dollar=10))
    """

    basics: BasicsSection = field(default_factory=BasicsSection)
    earn: EarnSection = field(default_factory=EarnSection)
    redeem: RedeemSection = field(default_factory=RedeemSection)
    eligibility: EligibilitySection = field(default_factory=EligibilitySection)
    expiry: ExpirySection = field(default_factory=ExpirySection)

    @classmethod
    def default(cls) -> "Configuration":
        """Create config with all defaults."""
        return cls()

    def section(self, name: Union[SectionName, str]) -> Section:
        return getattr(self, parse_section_name(name).value)

    def replace_section(self, name: Union[SectionName, str], value: Section) -> "Configuration":
        """Return a new configuration with exactly one section swapped."""
        section_name = parse_section_name(name)
        expected = SECTION_TYPES[section_name]
        if not isinstance(value, expected):
            raise TypeError(
                f"Section {section_name.value} expects {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        return replace(self, **{section_name.value: value})


def default_configuration() -> Configuration:
    """The program every editing session starts from."""
    return Configuration.default()
