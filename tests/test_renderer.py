"""Test review pane rendering."""
from dataclasses import replace
from loyalty.domain_config import Configuration, EligibilityScope, WelcomeBonus
from loyalty.renderer import parse_name_list, render_review, review_summary
from loyalty.settings import WizardSettings


def test_parse_name_list():
    assert parse_name_list("Gift cards, 3rd-party vouchers") == ["Gift cards", "3rd-party vouchers"]
    assert parse_name_list(" a, ,b,, ") == ["a", "b"]
    assert parse_name_list("") == []


def test_review_summary_defaults():
    cards = review_summary(Configuration.default())
    assert list(cards) == [
        "Program rules — Earn",
        "Program rules — Redeem & expiry",
        "Eligible items",
    ]
    assert cards["Program rules — Earn"] == [
        "Base: 9.5 pts/$",
        "Min spend: $5.00",
        "Caps: 5,000 / 15,000 pts",
        "Channels: pos, online, ssk, api",
        "Welcome bonus: 1,000 pts",
    ]
    assert cards["Program rules — Redeem & expiry"] == [
        "Point value: $0.01/pt (1,000 pts = $10.00)",
        "Price preview: a $10.00 item costs 1,000 pts",
        "Increment: 10 pts (≈ $0.10 credit)",
        "Multipliers: session 0.6×, stock 1.5×",
        "Exclusions: Gift cards, 3rd-party vouchers",
        "Expiry: 12 months; grace 14 days; auto-extend on",
    ]
    assert cards["Eligible items"] == [
        "Categories: Session passes, Standard passes, Stock (F&B & Merch)"
    ]


def test_review_summary_product_scope_and_welcome_off():
    config = Configuration.default()
    config = replace(
        config,
        earn=replace(config.earn, welcome=WelcomeBonus(enabled=False, bonus_points=1000)),
        eligibility=replace(
            config.eligibility, scope=EligibilityScope.PRODUCTS, products=("jump1h", "burger")
        ),
    )
    cards = review_summary(config)
    assert cards["Program rules — Earn"][-1] == "Welcome bonus: OFF"
    assert cards["Eligible items"] == ["Products: 2 selected"]


def test_render_review_markdown():
    text = render_review(Configuration.default())
    assert text.startswith("## Review & publish — ROLLER Rewards")
    assert "### Program rules — Earn" in text
    assert "- Base: 9.5 pts/$" in text
    assert "**1,500** pts at face value" in text
    assert "**0.6×** multiplier it becomes **900** pts" in text
    assert "4.6%" in text


def test_render_review_follows_settings():
    settings = WizardSettings(example_price=20, example_category="stock", assumed_breakage_pct=0)
    text = render_review(Configuration.default(), settings=settings)
    assert "**2,000** pts at face value" in text
    assert "**3,000** pts" in text
    assert "5.7%" in text


def test_redeem_card_previews_follow_point_value():
    config = Configuration.default()
    config = replace(
        config,
        basics=replace(config.basics, point_value=0.02),
        redeem=replace(config.redeem, increment=25),
    )
    lines = review_summary(config)["Program rules — Redeem & expiry"]
    assert lines[:3] == [
        "Point value: $0.02/pt (1,000 pts = $20.00)",
        "Price preview: a $10.00 item costs 500 pts",
        "Increment: 25 pts (≈ $0.50 credit)",
    ]
