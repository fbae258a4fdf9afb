"""
Loyalty setup core resilience — snapshot primitives.

Provides the content-addressing used by publication:
- fingerprint_document: deterministic key for a JSON document
- SnapshotRecord: frozen, fingerprinted copy of a document
"""
from core.resilience.snapshots import (
    SnapshotRecord,
    canonical_json,
    fingerprint_document,
)

__all__ = [
    "SnapshotRecord",
    "canonical_json",
    "fingerprint_document",
]
