"""Test point derivations."""
import pytest
from loyalty.catalog import CategoryId
from loyalty.derivations import (
    apply_category_multiplier,
    earn_rate_for,
    effective_earn_rate,
    increment_credit,
    points_for_price,
    points_preview,
    redemption_cost,
    redemption_example,
    round_half_away,
    value_of_points,
)
from loyalty.domain_config import Configuration


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(0.5) == 1
    assert round_half_away(1.49) == 1
    assert round_half_away(90.00000000000001) == 90


def test_points_for_fifteen_dollar_item():
    assert points_for_price(15, 0.01) == 1500


def test_points_for_price_rounds():
    assert points_for_price(5, 2) == 3
    assert points_for_price(0.004, 0.01) == 0
    assert points_for_price(10, 0.03) == 333


def test_points_for_price_monotonic():
    prices = [0, 0.004, 0.005, 0.5, 1, 1.5, 14.99, 15, 15.01, 100, 2500]
    for point_value in (0.001, 0.01, 0.05, 1.0):
        points = [points_for_price(p, point_value) for p in prices]
        assert points == sorted(points)


def test_points_for_price_rejects_non_positive_point_value():
    with pytest.raises(ValueError, match="point_value"):
        points_for_price(15, 0)
    with pytest.raises(ValueError):
        points_for_price(15, -0.01)


def test_session_multiplier_example():
    assert apply_category_multiplier(1500, 0.6, 10) == 900


def test_multiplier_result_is_multiple_of_increment():
    for base in (0, 1, 7, 99, 1500, 2333):
        for multiplier in (0, 0.25, 0.6, 1.0, 1.5, 3.3):
            for increment in (1, 5, 10, 25, 100):
                assert apply_category_multiplier(base, multiplier, increment) % increment == 0


def test_multiplier_snaps_half_blocks_up():
    # 1500 * 0.5 / 100 = 7.5 blocks -> 8 blocks
    assert apply_category_multiplier(1500, 0.5, 100) == 800


def test_multiplier_rejects_non_positive_increment():
    with pytest.raises(ValueError, match="increment"):
        apply_category_multiplier(1500, 0.6, 0)


def test_effective_earn_rate():
    assert effective_earn_rate(10, 0) == 10
    assert effective_earn_rate(10, -50) == pytest.approx(5)
    assert effective_earn_rate(10, 25) == pytest.approx(12.5)
    assert effective_earn_rate(10, -100) == 0
    assert effective_earn_rate(10, -150) == 0


def test_value_helpers():
    assert value_of_points(1000, 0.01) == pytest.approx(10.0)
    assert increment_credit(10, 0.01) == pytest.approx(0.10)
    assert points_preview(0.01) == 1000


def test_earn_rate_for_default_stock_override():
    config = Configuration.default()
    assert earn_rate_for(config, CategoryId.STOCK) == pytest.approx(4.75)
    assert earn_rate_for(config, "session") == pytest.approx(9.5)


def test_redemption_cost_uses_category_multiplier():
    config = Configuration.default()
    assert redemption_cost(config, 15, CategoryId.SESSION) == 900
    assert redemption_cost(config, 15, CategoryId.STOCK) == 2250
    assert redemption_cost(config, 15, CategoryId.PARTY) == 1500


def test_redemption_example_defaults():
    example = redemption_example(Configuration.default())
    assert example.price == 15.0
    assert example.category == CategoryId.SESSION
    assert example.multiplier == 0.6
    assert example.base_points == 1500
    assert example.points_with_multiplier == 900
    assert example.to_dict()["pointsWithMultiplier"] == 900
