"""Review pane renderer for the setup wizard.

Turns a committed configuration snapshot into the operator-facing summary:
earn rules, redemption and expiry, eligible items, a worked redemption
example and the cost estimate. Deterministic text, no UI dependencies.
"""

from typing import Dict, List, Optional

from core.engine.template_engine import (
    fmt_int,
    fmt_list,
    fmt_money,
    fmt_number,
    render_cards,
)
from loyalty.catalog import DEFAULT_CATALOG, Catalog, CategoryId
from loyalty.derivations import (
    increment_credit,
    points_preview,
    redemption_example,
    value_of_points,
)
from loyalty.domain_config import Configuration, EligibilityScope
from loyalty.estimator import estimate_for_configuration
from loyalty.settings import WizardSettings


def parse_name_list(raw: str) -> List[str]:
    """Split comma-separated operator input into trimmed, non-empty names.

    ``parse_name_list("Gift cards, ,Vouchers") == ["Gift cards", "Vouchers"]``
    """
    return [part.strip() for part in raw.split(",") if part.strip()]


def review_summary(
    config: Configuration,
    catalog: Optional[Catalog] = None,
) -> Dict[str, List[str]]:
    """Ordered summary cards (title -> lines) for the review pane."""
    catalog = catalog or DEFAULT_CATALOG
    basics, earn, redeem = config.basics, config.earn, config.redeem
    eligibility, expiry = config.eligibility, config.expiry
    currency = basics.currency

    welcome = (
        f"Welcome bonus: {fmt_int(earn.welcome.bonus_points)} pts"
        if earn.welcome.enabled
        else "Welcome bonus: OFF"
    )
    earn_lines = [
        f"Base: {fmt_number(earn.pts_per_dollar)} pts/$",
        f"Min spend: {fmt_money(earn.min_spend, currency)}",
        f"Caps: {fmt_int(earn.caps.per_txn)} / {fmt_int(earn.caps.per_day)} pts",
        f"Channels: {fmt_list(earn.channels.enabled())}",
        welcome,
    ]

    on_off = "on" if expiry.auto_extend else "off"
    redeem_lines = [
        f"Point value: {fmt_money(basics.point_value, currency)}/pt "
        f"(1,000 pts = {fmt_money(value_of_points(1000, basics.point_value), currency)})",
        f"Price preview: a {fmt_money(10, currency)} item costs "
        f"{fmt_int(points_preview(basics.point_value))} pts",
        f"Increment: {fmt_int(redeem.increment)} pts "
        f"(≈ {fmt_money(increment_credit(redeem.increment, basics.point_value), currency)} credit)",
        f"Multipliers: session {fmt_number(redeem.multipliers[CategoryId.SESSION])}×, "
        f"stock {fmt_number(redeem.multipliers[CategoryId.STOCK])}×",
        f"Exclusions: {fmt_list(redeem.exclusions)}",
        f"Expiry: {expiry.months} months; grace {expiry.grace_email_days} days; "
        f"auto-extend {on_off}",
    ]

    if eligibility.scope == EligibilityScope.CATEGORIES:
        names = [catalog.category_name(c) for c in eligibility.categories]
        eligible_lines = [f"Categories: {fmt_list(names)}"]
    else:
        eligible_lines = [f"Products: {len(eligibility.products)} selected"]

    return {
        "Program rules — Earn": earn_lines,
        "Program rules — Redeem & expiry": redeem_lines,
        "Eligible items": eligible_lines,
    }


def render_review(
    config: Configuration,
    catalog: Optional[Catalog] = None,
    settings: Optional[WizardSettings] = None,
) -> str:
    """Markdown review: summary cards, redemption example and cost estimate."""
    settings = settings or WizardSettings.default()
    catalog = catalog or DEFAULT_CATALOG

    example = redemption_example(config, settings.example_price, settings.example_category)
    category_name = catalog.category_name(example.category)
    example_line = (
        f"Example: A {fmt_money(example.price, config.basics.currency)} "
        f"{category_name.lower()} item costs **{fmt_int(example.base_points)}** pts at face "
        f"value; with a **{fmt_number(example.multiplier)}×** multiplier it becomes "
        f"**{fmt_int(example.points_with_multiplier)}** pts."
    )
    estimate = estimate_for_configuration(config, settings=settings)

    return render_cards(
        f"Review & publish — {config.basics.name}",
        review_summary(config, catalog),
        footer=[example_line, "", estimate.summary()],
    )
