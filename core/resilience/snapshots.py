"""
Snapshot fingerprints — detect unchanged documents.

Publishing the same configuration twice must yield the same artifact, and a
changed configuration must yield a new one. Both decisions come down to a
deterministic key derived from the document content: same content always
produces the same key, regardless of dict ordering.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
import hashlib
import json


def canonical_json(document: Any) -> str:
    """Serialize with sorted keys and no whitespace variance."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"), default=str)


def fingerprint_document(document: Any) -> str:
    """
    Generate a deterministic fingerprint for a JSON-compatible document.
    Same inputs always produce the same key.
    """
    return hashlib.sha256(canonical_json(document).encode()).hexdigest()[:32]


@dataclass(frozen=True)
class SnapshotRecord:
    """A fingerprinted, timestamped document snapshot."""
    fingerprint: str
    document: str  # canonical JSON, immune to later mutation of the source
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def capture(cls, document: Any, captured_at: datetime | None = None) -> "SnapshotRecord":
        return cls(
            fingerprint=fingerprint_document(document),
            document=canonical_json(document),
            captured_at=captured_at or datetime.now(timezone.utc),
        )

    def load(self) -> Any:
        """Return a fresh copy of the captured document."""
        return json.loads(self.document)

    def matches(self, document: Any) -> bool:
        return self.fingerprint == fingerprint_document(document)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fingerprint": self.fingerprint,
            "captured_at": self.captured_at.isoformat(),
        }
