"""Runtime settings for the setup wizard core.

These are operator-facing assumptions and process settings that are not
part of the program document itself: estimator assumptions, the worked
redemption example, and logging.
"""

import os
from dataclasses import dataclass

from loyalty.catalog import CategoryId

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class WizardSettings:
    """Settings with sensible out-of-the-box defaults.

    Usage::

        settings = WizardSettings.from_env()
        estimate = estimate_for_configuration(store.get(), settings=settings)
    """

    assumed_redemption_pct: float = 60.0  # % of issued points redeemed
    assumed_breakage_pct: float = 20.0  # % of redeemed value that lapses
    example_price: float = 15.0
    example_category: CategoryId = CategoryId.SESSION
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def default(cls) -> "WizardSettings":
        """Create settings with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "LOYALTY_") -> "WizardSettings":
        """Create settings from environment variables.

        Example: LOYALTY_ASSUMED_REDEMPTION_PCT=55
        """
        overrides = {}

        for attr in ("assumed_redemption_pct", "assumed_breakage_pct", "example_price"):
            name = f"{prefix}{attr.upper()}"
            raw = os.getenv(name)
            if raw:
                try:
                    overrides[attr] = float(raw)
                except ValueError:
                    raise ValueError(f"{name} must be a number, got {raw!r}") from None

        category = os.getenv(f"{prefix}EXAMPLE_CATEGORY")
        if category:
            parsed = CategoryId.parse(category.strip().lower())
            if parsed is None:
                raise ValueError(f"{prefix}EXAMPLE_CATEGORY: unknown category {category!r}")
            overrides["example_category"] = parsed

        level = os.getenv(f"{prefix}LOG_LEVEL")
        if level:
            overrides["log_level"] = level.strip().upper()

        log_json = os.getenv(f"{prefix}LOG_JSON")
        if log_json:
            overrides["log_json"] = _parse_bool(f"{prefix}LOG_JSON", log_json)

        return cls(**overrides)
