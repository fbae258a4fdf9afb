"""Program cost estimator.

Approximation, not a forecast. The estimate answers "roughly what share of
qualifying sales will this program give back?" from four inputs only:

    cost % = pts_per_dollar * dollars_per_point * r * (1 - b) * 100

where ``r`` is the assumed redemption rate and ``b`` the assumed breakage,
both clamped into [0, 100] percent. Breakage is applied to the redeemed
portion. Category multipliers, caps, exclusions, increments and actual
guest behaviour are all ignored.
"""

from dataclasses import dataclass
from typing import Optional

from core.engine.template_engine import fmt_pct
from loyalty.domain_config import Configuration
from loyalty.settings import WizardSettings

CAVEAT = (
    "Budgeting aid only. Actuals vary with category multipliers, exclusions, "
    "increments, and guest behavior."
)


def _clamp_fraction(pct: float) -> float:
    return max(0.0, min(1.0, pct / 100))


def estimate_program_cost_percent(
    pts_per_dollar: float,
    dollars_per_point: float,
    assumed_redemption_pct: float,
    assumed_breakage_pct: float,
) -> float:
    """Estimated program cost as a percentage of qualifying sales.

    ``estimate_program_cost_percent(9.5, 0.01, 60, 20) == 4.56``
    """
    r = _clamp_fraction(assumed_redemption_pct)
    b = _clamp_fraction(assumed_breakage_pct)
    base_value_per_dollar = pts_per_dollar * dollars_per_point  # $ accrued per $ of sales
    return max(0.0, base_value_per_dollar * r * (1 - b) * 100)


@dataclass(frozen=True)
class CostEstimate:
    """Inputs and result of one estimator run."""

    pts_per_dollar: float
    dollars_per_point: float
    assumed_redemption_pct: float
    assumed_breakage_pct: float
    cost_pct: float

    def summary(self) -> str:
        return (
            f"Estimated program cost ≈ {fmt_pct(self.cost_pct)} of sales "
            f"(based on points per $ and $/pt). {CAVEAT}"
        )

    def to_dict(self) -> dict:
        return {
            "ptsPerDollar": self.pts_per_dollar,
            "dollarsPerPoint": self.dollars_per_point,
            "assumedRedemptionPct": self.assumed_redemption_pct,
            "assumedBreakagePct": self.assumed_breakage_pct,
            "costPct": self.cost_pct,
        }


def estimate_for_configuration(
    config: Configuration,
    assumed_redemption_pct: Optional[float] = None,
    assumed_breakage_pct: Optional[float] = None,
    settings: Optional[WizardSettings] = None,
) -> CostEstimate:
    """Run the estimator against a committed snapshot.

    Assumptions not given explicitly come from ``settings`` (or defaults).
    """
    settings = settings or WizardSettings.default()
    redemption = (
        settings.assumed_redemption_pct
        if assumed_redemption_pct is None
        else assumed_redemption_pct
    )
    breakage = (
        settings.assumed_breakage_pct
        if assumed_breakage_pct is None
        else assumed_breakage_pct
    )
    return CostEstimate(
        pts_per_dollar=config.earn.pts_per_dollar,
        dollars_per_point=config.basics.point_value,
        assumed_redemption_pct=redemption,
        assumed_breakage_pct=breakage,
        cost_pct=estimate_program_cost_percent(
            config.earn.pts_per_dollar, config.basics.point_value, redemption, breakage
        ),
    )
