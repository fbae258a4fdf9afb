"""Test publication workflow."""
import pytest
from dataclasses import replace
from datetime import datetime, timezone
from loyalty.errors import PreconditionError, ValidationError
from loyalty.repository import ConfigurationStore
from loyalty.workflow_states import PublicationState, PublicationWorkflow


def test_publish_without_confirmation_fails():
    wf = PublicationWorkflow(ConfigurationStore())
    with pytest.raises(PreconditionError, match="finance"):
        wf.publish(confirmed=False)
    assert wf.state == PublicationState.DRAFT
    assert wf.current is None
    assert wf.versions == ()
    assert wf.transition_count == 0


def test_publish_with_confirmation():
    wf = PublicationWorkflow(ConfigurationStore())
    stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)

    artifact = wf.publish(confirmed=True, published_at=stamp, actor="ops@venue")

    assert wf.state == PublicationState.PUBLISHED
    assert artifact.version == 1
    assert len(artifact.version_id) == 32
    assert artifact.actor == "ops@venue"
    assert wf.history[0].from_state == "draft"
    assert wf.history[0].to_state == "published"

    document = artifact.to_document()
    assert set(document) == {
        "basics", "earn", "redeem", "eligibility", "expiry",
        "version", "versionId", "publishedAt",
    }
    assert document["publishedAt"] == "2026-01-01T00:00:00+00:00"
    assert document["basics"]["pointValue"] == 0.01


def test_republish_unchanged_returns_same_artifact():
    received = []
    wf = PublicationWorkflow(ConfigurationStore(), ledger=received.append)
    first = wf.publish(confirmed=True)
    second = wf.publish(confirmed=True)
    assert second is first
    assert len(wf.versions) == 1
    assert received == [first]
    assert not wf.has_unpublished_changes


def test_publish_after_change_creates_new_version():
    store = ConfigurationStore()
    received = []
    wf = PublicationWorkflow(store, ledger=received.append)
    first = wf.publish(confirmed=True)

    store.commit_section("earn", replace(store.get().earn, pts_per_dollar=12))
    assert wf.has_unpublished_changes

    second = wf.publish(confirmed=True)
    assert second.version == 2
    assert second.version_id != first.version_id
    assert [a.version for a in wf.versions] == [1, 2]
    assert received == [first, second]

    # the earlier version is untouched
    assert first.configuration.earn.pts_per_dollar == 9.5
    assert first.to_document()["earn"]["ptsPerDollar"] == 9.5
    assert second.to_document()["earn"]["ptsPerDollar"] == 12


def test_reverting_to_published_configuration_is_unchanged():
    store = ConfigurationStore()
    wf = PublicationWorkflow(store)
    first = wf.publish(confirmed=True)

    original = store.get().earn
    store.commit_section("earn", replace(original, pts_per_dollar=12))
    store.commit_section("earn", original)

    assert not wf.has_unpublished_changes
    assert wf.publish(confirmed=True) is first


def test_refused_publish_after_publish_keeps_state():
    wf = PublicationWorkflow(ConfigurationStore())
    wf.publish(confirmed=True)
    with pytest.raises(PreconditionError):
        wf.publish(confirmed=False)
    assert wf.state == PublicationState.PUBLISHED
    assert len(wf.versions) == 1


def test_artifact_document_is_a_copy():
    wf = PublicationWorkflow(ConfigurationStore())
    artifact = wf.publish(confirmed=True)
    document = artifact.to_document()
    document["basics"]["name"] = "Changed"
    assert artifact.to_document()["basics"]["name"] == "ROLLER Rewards"


def test_transition_rules():
    wf = PublicationWorkflow(ConfigurationStore())
    assert wf.can_transition(PublicationState.PUBLISHED)
    assert not wf.can_transition(PublicationState.DRAFT)
    assert wf.has_unpublished_changes


def test_failed_ledger_handoff_is_retried():
    calls = []

    def flaky_ledger(artifact):
        calls.append(artifact)
        if len(calls) == 1:
            raise ConnectionError("ledger unavailable")

    wf = PublicationWorkflow(ConfigurationStore(), ledger=flaky_ledger)
    with pytest.raises(ConnectionError):
        wf.publish(confirmed=True)
    assert wf.state == PublicationState.DRAFT
    assert wf.versions == ()
    assert wf.has_unpublished_changes

    artifact = wf.publish(confirmed=True)
    assert len(calls) == 2
    assert calls[1] is artifact
    assert calls[0].version_id == artifact.version_id
    assert artifact.version == 1
    assert wf.state == PublicationState.PUBLISHED


def test_publish_after_rejected_bad_type_commit():
    store = ConfigurationStore()
    with pytest.raises(ValidationError):
        store.commit_section("basics", replace(store.get().basics, timezone=None))
    wf = PublicationWorkflow(store)
    assert wf.publish(confirmed=True).to_document()["basics"]["timezone"] == "Auto"
