"""Loyalty program setup core.

The configuration domain behind the setup wizard, one module per concern:
reference catalog, section dataclasses, validation rules, point
derivations, the cost estimator, the draft/commit configuration store and
the publication workflow.
"""

from loyalty.catalog import DEFAULT_CATALOG, Catalog, Category, CategoryId, Product
from loyalty.errors import (
    LoyaltyConfigError,
    PreconditionError,
    UnknownSectionError,
    ValidationError,
)
from loyalty.domain_config import (
    BasicsSection,
    CategoryMap,
    Channels,
    Configuration,
    EarnCaps,
    EarnSection,
    EligibilityScope,
    EligibilitySection,
    ExpiryPolicy,
    ExpirySection,
    RedeemMode,
    RedeemSection,
    SectionName,
    WelcomeBonus,
    default_configuration,
)
from loyalty.rules_engine import (
    Severity,
    ValidationReport,
    Violation,
    validate_configuration,
    validate_section,
)
from loyalty.derivations import (
    RedemptionExample,
    apply_category_multiplier,
    effective_earn_rate,
    points_for_price,
    redemption_example,
)
from loyalty.settings import WizardSettings
from loyalty.estimator import CostEstimate, estimate_for_configuration, estimate_program_cost_percent
from loyalty.models.schemas import from_document, to_document
from loyalty.repository import CommitResult, ConfigurationStore, SectionDraft
from loyalty.workflow_states import PublicationState, PublicationWorkflow, PublishedProgram

__all__ = [
    # Catalog
    "DEFAULT_CATALOG",
    "Catalog",
    "Category",
    "CategoryId",
    "Product",
    # Errors
    "LoyaltyConfigError",
    "PreconditionError",
    "UnknownSectionError",
    "ValidationError",
    # Domain
    "BasicsSection",
    "CategoryMap",
    "Channels",
    "Configuration",
    "EarnCaps",
    "EarnSection",
    "EligibilityScope",
    "EligibilitySection",
    "ExpiryPolicy",
    "ExpirySection",
    "RedeemMode",
    "RedeemSection",
    "SectionName",
    "WelcomeBonus",
    "default_configuration",
    # Rules
    "Severity",
    "ValidationReport",
    "Violation",
    "validate_configuration",
    "validate_section",
    # Derivations
    "RedemptionExample",
    "apply_category_multiplier",
    "effective_earn_rate",
    "points_for_price",
    "redemption_example",
    # Estimator & settings
    "CostEstimate",
    "WizardSettings",
    "estimate_for_configuration",
    "estimate_program_cost_percent",
    # Documents
    "from_document",
    "to_document",
    # Store & publication
    "CommitResult",
    "ConfigurationStore",
    "PublicationState",
    "PublicationWorkflow",
    "PublishedProgram",
    "SectionDraft",
]
