"""Pure derivations over point value, rates, multipliers and increments.

Every function here is side-effect free: numbers (or a committed
``Configuration``) in, numbers out. Callers are expected to hand in values
that already passed commit-time validation; a non-positive point value or
increment is a programming error and raises ``ValueError``.

Rounding is round-half-away-from-zero on the decimal representation of the
value, so ``2.5 -> 3`` and ``-2.5 -> -3`` regardless of float noise such as
``1500 * 0.6 == 900.0000000000001``.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from loyalty.catalog import CategoryId
from loyalty.domain_config import Configuration


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be > 0, got {value!r}")


# ---------------------------------------------------------------------------
# Point arithmetic
# ---------------------------------------------------------------------------

def points_for_price(price: float, point_value: float) -> int:
    """Points equivalent of a dollar price at face value.

    ``points_for_price(15, 0.01) == 1500``
    """
    _require_positive("point_value", point_value)
    return round_half_away(price / point_value)


def apply_category_multiplier(base_points: float, multiplier: float, increment: int) -> int:
    """Scale a points cost by a category multiplier and snap to the increment.

    The result is always a multiple of ``increment``:
    ``apply_category_multiplier(1500, 0.6, 10) == 900``
    """
    _require_positive("increment", increment)
    return round_half_away(base_points * multiplier / increment) * increment


def effective_earn_rate(base_rate: float, override_pct: float) -> float:
    """Earn rate after a per-category percentage override.

    -50 halves the rate; -100 or below floors it at zero.
    """
    return base_rate * max(0.0, 1 + override_pct / 100)


def value_of_points(points: float, point_value: float) -> float:
    """Dollar value of a points balance (1,000 pts at $0.01 -> $10.00)."""
    return points * point_value


def increment_credit(increment: int, point_value: float) -> float:
    """Dollar credit one redemption block is worth."""
    return increment * point_value


def points_preview(point_value: float, price: float = 10.0) -> int:
    """Points a ``price`` item costs at face value, shown next to the point value."""
    return points_for_price(price, point_value)


# ---------------------------------------------------------------------------
# Configuration-aware derivations
# ---------------------------------------------------------------------------

def earn_rate_for(config: Configuration, category: CategoryId | str) -> float:
    """Points per dollar for items in ``category``."""
    return effective_earn_rate(config.earn.pts_per_dollar, config.earn.item_overrides[category])


def redemption_cost(config: Configuration, price: float, category: CategoryId | str) -> int:
    """Points needed to redeem a ``price`` item of ``category``."""
    base = points_for_price(price, config.basics.point_value)
    return apply_category_multiplier(
        base, config.redeem.multipliers[category], config.redeem.increment
    )


@dataclass(frozen=True)
class RedemptionExample:
    """Worked example shown on the review pane."""

    price: float
    category: CategoryId
    multiplier: float
    base_points: int
    points_with_multiplier: int

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "category": self.category.value,
            "multiplier": self.multiplier,
            "basePoints": self.base_points,
            "pointsWithMultiplier": self.points_with_multiplier,
        }


def redemption_example(
    config: Configuration,
    price: float = 15.0,
    category: CategoryId | str = CategoryId.SESSION,
) -> RedemptionExample:
    """A ``price`` item of ``category`` at face value and after its multiplier."""
    category_id = CategoryId(category)
    multiplier = config.redeem.multipliers[category_id]
    base = points_for_price(price, config.basics.point_value)
    return RedemptionExample(
        price=price,
        category=category_id,
        multiplier=multiplier,
        base_points=base,
        points_with_multiplier=apply_category_multiplier(
            base, multiplier, config.redeem.increment
        ),
    )
