"""Configuration store with draft/commit semantics.

Holds the single committed ``Configuration`` for one editing session and is
the only place it changes. Each wizard step edits a ``SectionDraft`` (a
transient working copy) and commits it as a whole section; readers of the
store never see half-edited state.

Single-writer: commits are not guarded against concurrent callers. A host
that shares a store across threads must serialize ``commit_section`` itself.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional, Union

from loguru import logger

from loyalty.catalog import DEFAULT_CATALOG, Catalog
from loyalty.domain_config import (
    Configuration,
    Section,
    SectionName,
    parse_section_name,
)
from loyalty.errors import ValidationError
from loyalty.models.schemas import section_from_document, section_type_violations
from loyalty.rules_engine import (
    ValidationReport,
    Violation,
    validate_configuration,
    validate_section,
)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def _check_section(name: SectionName, value: Section, catalog: Catalog) -> ValidationReport:
    """Field types first; business rules only run on well-typed sections."""
    problems = section_type_violations(name, value)
    if problems:
        return ValidationReport(problems)
    return validate_section(name, value, catalog)


def _check_configuration(config: Configuration, catalog: Catalog) -> ValidationReport:
    problems = [
        violation
        for name in SectionName
        for violation in section_type_violations(name, config.section(name))
    ]
    if problems:
        return ValidationReport(problems)
    return validate_configuration(config, catalog)


# ---------------------------------------------------------------------------
# Commit result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CommitResult:
    """Outcome of a successful commit; warnings are surfaced, not raised."""

    section: SectionName
    revision: int
    warnings: tuple[Violation, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ConfigurationStore:
    """Owns the committed configuration for one editing session.

    Usage::

        store = ConfigurationStore()
        result = store.commit_section("earn", replace(store.get().earn, pts_per_dollar=10))
        for warning in result.warnings:
            prompt_operator(warning.message)
    """

    def __init__(
        self,
        initial: Optional[Configuration] = None,
        catalog: Optional[Catalog] = None,
    ):
        self.catalog = catalog or DEFAULT_CATALOG
        config = initial or Configuration.default()
        report = _check_configuration(config, self.catalog)
        if not report.ok:
            raise ValidationError(report.blocking, report.warnings)
        self._config = config
        self._revision = 0

    # -- Read --

    def get(self) -> Configuration:
        """Current committed snapshot (frozen; safe to hand out)."""
        return self._config

    @property
    def revision(self) -> int:
        """Number of successful commits since the session started."""
        return self._revision

    def validate(self) -> ValidationReport:
        """Re-validate the whole committed configuration."""
        return _check_configuration(self._config, self.catalog)

    # -- Write --

    def commit_section(self, name: Union[SectionName, str], value: Section) -> CommitResult:
        """Replace exactly one section, all-or-nothing.

        Field types are checked strictly before the rules run. Raises
        ``ValidationError`` on any blocking violation (the committed
        configuration is left untouched) and ``TypeError`` when ``value`` is
        not the section's type.
        """
        section_name = parse_section_name(name)
        candidate = self._config.replace_section(section_name, value)

        report = _check_section(section_name, value, self.catalog)
        if not report.ok:
            logger.bind(
                section=section_name.value,
                codes=[v.code for v in report.blocking],
            ).warning("Rejected loyalty section commit")
            raise ValidationError(report.blocking, report.warnings, section=section_name.value)

        self._config = candidate
        self._revision += 1
        logger.bind(
            section=section_name.value,
            revision=self._revision,
            warnings=len(report.warnings),
        ).info("Committed loyalty section")
        return CommitResult(section_name, self._revision, tuple(report.warnings))

    def commit_document_section(
        self, name: Union[SectionName, str], document: Mapping[str, Any]
    ) -> CommitResult:
        """Parse a camelCase section document, then commit it."""
        section_name = parse_section_name(name)
        return self.commit_section(section_name, section_from_document(section_name, document))

    def draft(self, name: Union[SectionName, str]) -> "SectionDraft":
        """Start a working copy of one section."""
        return SectionDraft(self, parse_section_name(name))


# ---------------------------------------------------------------------------
# Draft
# ---------------------------------------------------------------------------

@dataclass
class SectionDraft:
    """Transient working copy of one section.

    Edits accumulate on the draft only; the store changes on ``commit()``.

    Example::

        draft = store.draft("redeem")
        draft.update(increment=25, allow_partial=False)
        draft.validate().warnings   # preview
        draft.commit()
    """

    store: ConfigurationStore
    section: SectionName
    value: Any = field(init=False)

    def __post_init__(self):
        self.value = self.store.get().section(self.section)

    def update(self, **changes: Any) -> Section:
        """Replace fields on the draft. Unknown field names raise ``TypeError``."""
        known = {f.name for f in fields(self.value)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise TypeError(f"{self.section.value} has no fields {unknown}")
        self.value = replace(self.value, **changes)
        return self.value

    @property
    def is_dirty(self) -> bool:
        return self.value != self.store.get().section(self.section)

    def validate(self) -> ValidationReport:
        return _check_section(self.section, self.value, self.store.catalog)

    def commit(self) -> CommitResult:
        return self.store.commit_section(self.section, self.value)

    def discard(self) -> Section:
        """Reset to the committed value."""
        self.value = self.store.get().section(self.section)
        return self.value
