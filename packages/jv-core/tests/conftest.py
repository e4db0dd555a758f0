"""Shared test fixtures — contexts, remote stores and the person_record example."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from jv.runner.context import Context, InMemorySchemaStore

EXAMPLES_DIR = Path(__file__).resolve().parents[3] / "examples" / "person_record"

TREE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://example.com/tree",
    "$dynamicAnchor": "node",
    "type": "object",
    "properties": {
        "data": True,
        "children": {
            "type": "array",
            "items": {"$dynamicRef": "#node"},
        },
    },
}

STRICT_TREE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://example.com/strict-tree",
    "$dynamicAnchor": "node",
    "$ref": "tree",
    "unevaluatedProperties": False,
}


def load_example(name: str) -> Any:
    with open(EXAMPLES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def context():
    """Return a fresh Context with an empty remote store."""
    return Context()


@pytest.fixture
def remote_store():
    """Return an in-memory store holding the tree schema."""
    return InMemorySchemaStore({"https://example.com/tree": TREE_SCHEMA})


@pytest.fixture
def examples_dir():
    return EXAMPLES_DIR
