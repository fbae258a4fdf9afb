"""Enum-based publication workflow.

A program moves from ``draft`` to ``published`` only when the operator
confirms the terms were reviewed with finance. Each publish freezes the
committed configuration as a versioned artifact:
- unchanged configuration since the last publish -> the same artifact again
- changed configuration -> a new version; earlier versions are kept

Durable history is the job of an external ledger; pass a ``ledger`` callable
to receive every newly emitted artifact.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from loguru import logger

from core.resilience.snapshots import SnapshotRecord, fingerprint_document
from loyalty.domain_config import Configuration
from loyalty.errors import PreconditionError, ValidationError
from loyalty.models.schemas import to_document
from loyalty.repository import ConfigurationStore


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class PublicationState(str, Enum):
    """Program publication states."""

    DRAFT = "draft"
    PUBLISHED = "published"


# Allowed transitions: {current_state: [allowed_next_states]}
_PUBLICATION_TRANSITIONS: dict[PublicationState, list[PublicationState]] = {
    PublicationState.DRAFT: [PublicationState.PUBLISHED],
    PublicationState.PUBLISHED: [PublicationState.PUBLISHED],  # republish
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class WorkflowTransition:
    """Record of a single state transition."""

    from_state: str
    to_state: str
    timestamp: datetime
    actor: str = "operator"
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PublishedProgram:
    """Frozen, versioned program artifact."""

    version: int
    version_id: str  # configuration fingerprint
    published_at: datetime
    configuration: Configuration
    snapshot: SnapshotRecord
    actor: str = "operator"

    def to_document(self) -> dict[str, Any]:
        """Flat document: the configuration plus version stamp."""
        document = self.snapshot.load()
        document.update({
            "version": self.version,
            "versionId": self.version_id,
            "publishedAt": self.published_at.isoformat(),
        })
        return document


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

class PublicationWorkflow:
    """Publication gate over a ``ConfigurationStore``.

    Usage::

        wf = PublicationWorkflow(store, ledger=history.append)
        artifact = wf.publish(confirmed=operator_ticked_box)
        export(artifact.to_document())
    """

    def __init__(
        self,
        store: ConfigurationStore,
        ledger: Optional[Callable[[PublishedProgram], None]] = None,
    ):
        self.store = store
        self.ledger = ledger
        self.state = PublicationState.DRAFT
        self.history: list[WorkflowTransition] = []
        self._versions: list[PublishedProgram] = []

    def can_transition(self, to_state: PublicationState) -> bool:
        """Check if a transition is allowed from the current state."""
        return to_state in _PUBLICATION_TRANSITIONS.get(self.state, [])

    def _transition(self, to_state: PublicationState, actor: str, metadata: dict) -> None:
        if not self.can_transition(to_state):
            allowed = [s.value for s in _PUBLICATION_TRANSITIONS.get(self.state, [])]
            raise ValueError(
                f"Cannot transition from {self.state.value} to {to_state.value}. "
                f"Allowed: {allowed}"
            )
        self.history.append(WorkflowTransition(
            from_state=self.state.value,
            to_state=to_state.value,
            timestamp=datetime.now(timezone.utc),
            actor=actor,
            metadata=metadata,
        ))
        self.state = to_state

    # -- Queries --

    @property
    def current(self) -> Optional[PublishedProgram]:
        """The latest published artifact, if any."""
        return self._versions[-1] if self._versions else None

    @property
    def versions(self) -> tuple[PublishedProgram, ...]:
        return tuple(self._versions)

    @property
    def has_unpublished_changes(self) -> bool:
        current = self.current
        if current is None:
            return True
        return current.version_id != fingerprint_document(to_document(self.store.get()))

    # -- Publish --

    def publish(
        self,
        confirmed: bool,
        published_at: Optional[datetime] = None,
        actor: str = "operator",
    ) -> PublishedProgram:
        """Freeze the committed configuration as a published artifact.

        Raises ``PreconditionError`` when ``confirmed`` is not true and
        ``ValidationError`` when the committed configuration has blocking
        violations. Neither changes state. An exception from ``ledger``
        propagates and also leaves the workflow unchanged, so publishing again
        re-sends the same configuration.
        """
        if confirmed is not True:
            logger.bind(state=self.state.value, actor=actor).warning(
                "Publish refused: finance review not confirmed"
            )
            raise PreconditionError(
                "Confirm the program terms were reviewed with finance before publishing"
            )

        report = self.store.validate()
        if not report.ok:
            raise ValidationError(report.blocking, report.warnings)

        config = self.store.get()
        document = to_document(config)
        version_id = fingerprint_document(document)

        current = self.current
        if current is not None and current.version_id == version_id:
            logger.bind(version=current.version, version_id=version_id).debug(
                "Republish of unchanged program; returning existing version"
            )
            return current

        stamp = published_at or datetime.now(timezone.utc)
        artifact = PublishedProgram(
            version=len(self._versions) + 1,
            version_id=version_id,
            published_at=stamp,
            configuration=config,
            snapshot=SnapshotRecord.capture(document, captured_at=stamp),
            actor=actor,
        )
        # Ledger first; a raising ledger leaves no version recorded.
        if self.ledger is not None:
            self.ledger(artifact)
        self._transition(
            PublicationState.PUBLISHED,
            actor=actor,
            metadata={"version": artifact.version, "version_id": version_id},
        )
        self._versions.append(artifact)
        logger.bind(version=artifact.version, version_id=version_id, actor=actor).info(
            "Published loyalty program"
        )
        return artifact

    @property
    def transition_count(self) -> int:
        """Number of transitions that have occurred."""
        return len(self.history)
