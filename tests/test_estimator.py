"""Test program cost estimator."""
import pytest
from dataclasses import replace
from loyalty.domain_config import Configuration
from loyalty.estimator import estimate_for_configuration, estimate_program_cost_percent
from loyalty.settings import WizardSettings


def test_default_program_cost():
    assert estimate_program_cost_percent(9.5, 0.01, 60, 20) == pytest.approx(4.56)


def test_assumptions_are_clamped():
    assert estimate_program_cost_percent(9.5, 0.01, 150, -10) == pytest.approx(
        estimate_program_cost_percent(9.5, 0.01, 100, 0)
    )
    assert estimate_program_cost_percent(9.5, 0.01, 60, 100) == 0
    assert estimate_program_cost_percent(9.5, 0.01, -5, 20) == 0


def test_cost_never_negative():
    assert estimate_program_cost_percent(-3, 0.01, 60, 20) == 0


def test_monotonic_in_earn_rate_point_value_and_redemption():
    rates = [0, 1, 5, 9.5, 20]
    costs = [estimate_program_cost_percent(r, 0.01, 60, 20) for r in rates]
    assert costs == sorted(costs)

    values = [0, 0.001, 0.01, 0.05]
    costs = [estimate_program_cost_percent(9.5, v, 60, 20) for v in values]
    assert costs == sorted(costs)

    redemptions = [-10, 0, 30, 60, 100, 120]
    costs = [estimate_program_cost_percent(9.5, 0.01, r, 20) for r in redemptions]
    assert costs == sorted(costs)


def test_non_increasing_in_breakage():
    breakages = [-10, 0, 20, 50, 100, 130]
    costs = [estimate_program_cost_percent(9.5, 0.01, 60, b) for b in breakages]
    assert costs == sorted(costs, reverse=True)


def test_estimate_for_configuration_uses_settings():
    estimate = estimate_for_configuration(Configuration.default())
    assert estimate.cost_pct == pytest.approx(4.56)
    assert estimate.assumed_redemption_pct == 60
    assert estimate.assumed_breakage_pct == 20

    settings = WizardSettings(assumed_redemption_pct=100, assumed_breakage_pct=0)
    estimate = estimate_for_configuration(Configuration.default(), settings=settings)
    assert estimate.cost_pct == pytest.approx(9.5)


def test_explicit_assumptions_override_settings():
    config = Configuration.default()
    config = replace(config, earn=replace(config.earn, pts_per_dollar=10))
    estimate = estimate_for_configuration(config, assumed_redemption_pct=50, assumed_breakage_pct=0)
    assert estimate.cost_pct == pytest.approx(5.0)
    assert estimate.to_dict()["ptsPerDollar"] == 10


def test_summary_carries_caveat():
    summary = estimate_for_configuration(Configuration.default()).summary()
    assert "4.6%" in summary
    assert "Budgeting aid" in summary
