"""Test shared formatting, snapshot and logging helpers."""
import sys
import pytest
from loguru import logger
from dataclasses import replace
from datetime import datetime, timezone
from core.engine.template_engine import (
    fmt_int,
    fmt_list,
    fmt_money,
    fmt_number,
    fmt_pct,
    render_card,
    render_cards,
)
from core.observability import logging_setup
from core.observability.logging_setup import setup_logging
from core.resilience import SnapshotRecord, canonical_json, fingerprint_document
from loyalty.repository import ConfigurationStore
from loyalty.settings import WizardSettings
from loyalty.workflow_states import PublicationWorkflow


# -- Formatting --

def test_money_formatting():
    assert fmt_money(1234.5) == "$1,234.50"
    assert fmt_money(1, "EUR") == "€1.00"
    assert fmt_money(1, "jpy") == "JPY 1.00"
    assert fmt_money(None) == "N/A"


def test_number_formatting():
    assert fmt_pct(4.56) == "4.6%"
    assert fmt_pct(4.56, places=2) == "4.56%"
    assert fmt_int(15000) == "15,000"
    assert fmt_number(9.5) == "9.5"
    assert fmt_number(1.0) == "1"
    assert fmt_list([]) == "—"
    assert fmt_list(["a", "", "b"]) == "a, b"


def test_render_cards_layout():
    assert render_card("Empty", []) == "### Empty\n\n_Nothing configured._"
    text = render_cards("Title", {"Card": ["one", "two"]}, footer=["Done."])
    assert text == "## Title\n\n### Card\n\n- one\n- two\n\nDone."


# -- Snapshots --

def test_fingerprint_ignores_key_order():
    a = {"basics": {"name": "X", "pointValue": 0.01}, "earn": {"ptsPerDollar": 9.5}}
    b = {"earn": {"ptsPerDollar": 9.5}, "basics": {"pointValue": 0.01, "name": "X"}}
    assert canonical_json(a) == canonical_json(b)
    assert fingerprint_document(a) == fingerprint_document(b)
    assert len(fingerprint_document(a)) == 32


def test_fingerprint_changes_with_content():
    assert fingerprint_document({"a": 1}) != fingerprint_document({"a": 2})


def test_snapshot_record_is_detached_from_source():
    source = {"basics": {"name": "Rewards"}}
    stamp = datetime(2026, 3, 1, tzinfo=timezone.utc)
    record = SnapshotRecord.capture(source, captured_at=stamp)

    source["basics"]["name"] = "Changed"
    loaded = record.load()
    loaded["basics"]["name"] = "Also changed"

    assert record.load() == {"basics": {"name": "Rewards"}}
    assert not record.matches(source)
    assert record.to_dict() == {
        "fingerprint": record.fingerprint,
        "captured_at": "2026-03-01T00:00:00+00:00",
    }


# -- Logging --

@pytest.fixture
def captured_logs():
    messages = []
    handler_id = setup_logging(level="DEBUG", sink=messages.append)
    yield messages
    logger.remove(handler_id)
    logger.add(sys.stderr)


def test_commit_and_publish_are_logged(captured_logs):
    store = ConfigurationStore()
    store.commit_section("earn", replace(store.get().earn, pts_per_dollar=10))
    PublicationWorkflow(store).publish(confirmed=True)

    assert any("Committed loyalty section" in m for m in captured_logs)
    assert any("Published loyalty program" in m for m in captured_logs)


def test_rejected_commit_is_logged(captured_logs):
    store = ConfigurationStore()
    with pytest.raises(ValueError):
        store.commit_section("basics", replace(store.get().basics, point_value=0))
    rejected = [m for m in captured_logs if "Rejected loyalty section commit" in m]
    assert len(rejected) == 1
    assert "WARNING" in rejected[0]
    assert "non_positive_point_value" in rejected[0]


def test_serialized_logs_are_json():
    messages = []
    handler_id = setup_logging(sink=messages.append, serialize=True)
    try:
        logger.bind(section="earn").info("hello")
    finally:
        logger.remove(handler_id)
        logger.add(sys.stderr)
    assert '"section": "earn"' in messages[0]


def test_logging_from_settings_passes_level_and_format(monkeypatch):
    calls = []
    monkeypatch.setattr(
        logging_setup, "setup_logging", lambda **kwargs: calls.append(kwargs) or 7
    )
    settings = WizardSettings(log_level="ERROR", log_json=True)
    assert logging_setup.setup_logging_from_settings(settings) == 7
    assert calls == [{"level": "ERROR", "serialize": True}]
