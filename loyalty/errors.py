"""Exception taxonomy for the loyalty configuration core.

- ``ValidationError``: a commit (or document parse) hit at least one blocking
  violation; the committed configuration is unchanged.
- ``PreconditionError``: publication was attempted without confirmation.
- ``UnknownSectionError``: a section name outside the five known sections.

Non-blocking problems are never raised; they come back as warning-severity
``Violation`` records on ``CommitResult.warnings``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from loyalty.rules_engine import Violation


class LoyaltyConfigError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(LoyaltyConfigError, ValueError):
    """Blocking violations prevented a commit."""

    def __init__(
        self,
        violations: Sequence["Violation"],
        warnings: Sequence["Violation"] = (),
        section: str | None = None,
    ):
        self.violations = tuple(violations)
        self.warnings = tuple(warnings)
        self.section = section
        where = f"Section {section}" if section else "Configuration"
        details = "; ".join(v.message for v in self.violations) or "invalid value"
        super().__init__(f"{where} rejected: {details}")

    @property
    def codes(self) -> list[str]:
        return [v.code for v in self.violations]

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class PreconditionError(LoyaltyConfigError):
    """An operation's precondition (e.g. finance confirmation) was not met."""


class UnknownSectionError(LoyaltyConfigError, KeyError):
    """Raised for a section name outside basics/earn/redeem/eligibility/expiry."""

    def __init__(self, name: object):
        self.name = name
        super().__init__(f"Unknown configuration section: {name!r}")

    def __str__(self) -> str:
        return self.args[0]
