"""Canonical JSON serialization, fingerprints and generated document URIs."""

from __future__ import annotations

import hashlib
import json
import uuid
from typing import Any


def canonical_json(value: Any) -> str:
    """Serialize *value* with sorted keys and no insignificant whitespace."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def fingerprint(value: Any) -> str:
    """Return a stable sha256 hex digest of the canonical form of *value*."""
    return hashlib.sha256(canonical_json(value).encode("utf-8")).hexdigest()


def generate_document_uri() -> str:
    """Generate a unique base URI for a schema document that declares no ``$id``."""
    return f"urn:uuid:{uuid.uuid4()}"
