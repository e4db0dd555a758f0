"""JSON/YAML document loading for schemas and instances."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


def load_yaml(path: Path) -> Any:
    """Load a YAML file and return the parsed value."""
    with open(path) as f:
        return yaml.safe_load(f)


def load_json(path: Path) -> Any:
    with open(path) as f:
        return json.load(f)


def load_document(path: Path) -> Any:
    """Load a schema or instance document; ``.yaml``/``.yml`` go through PyYAML, anything else is JSON."""
    path = Path(path)
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(path)
    return load_json(path)

