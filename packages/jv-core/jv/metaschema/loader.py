"""Meta-schema loading and validation of schemas against the Draft 2020-12 meta-schema."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib.resources import files
from typing import Any

from jv.compiler.compile_schema import Schema, compile_schema
from jv.compiler.dialect import Dialect
from jv.models.results import ValidationResult
from jv.runner.context import Context
from jv.runner.engine import validate

logger = logging.getLogger(__name__)

META_SCHEMA_PREFIX = "https://json-schema.org/draft/2020-12/"

# Relative to META_SCHEMA_PREFIX; each is shipped as resources/draft2020-12/<name>.json
BUNDLED_DOCUMENTS = (
    "schema",
    "meta/core",
    "meta/applicator",
    "meta/unevaluated",
    "meta/validation",
    "meta/meta-data",
    "meta/format-annotation",
    "meta/content",
)


@lru_cache(maxsize=None)
def _read_resource(name: str) -> Any:
    *folders, leaf = name.split("/")
    resource = files("jv.metaschema") / "resources" / "draft2020-12"
    for folder in folders:
        resource = resource / folder
    return json.loads((resource / f"{leaf}.json").read_text(encoding="utf-8"))


def bundled_document(uri: str) -> Any | None:
    """Return the bundled meta-schema document published at *uri*, if there is one."""
    if not uri.startswith(META_SCHEMA_PREFIX):
        return None
    name = uri[len(META_SCHEMA_PREFIX):]
    if name not in BUNDLED_DOCUMENTS:
        return None
    return _read_resource(name)


def load_meta_schema(context: Context) -> Schema:
    """Compile the dialect's meta-schema into *context* (once) and return it."""
    uri = context.dialect.value
    cached = context.schema_cache.get(uri)
    if cached is not None:
        return cached
    logger.debug("loading bundled meta-schema %s", uri)
    return compile_schema(bundled_document(uri), context=context, base_uri=uri)


def validate_raw_against_meta_schema(raw: Any, dialect: Dialect = Dialect.draft2020_12) -> ValidationResult:
    """Validate a raw schema document against the meta-schema of *dialect*."""
    context = Context(dialect=dialect)
    return validate(load_meta_schema(context), raw)


def validate_against_meta_schema(schema: Schema) -> ValidationResult:
    dialect = getattr(getattr(schema, "context", None), "dialect", Dialect.draft2020_12)
    return validate_raw_against_meta_schema(schema.to_json(), dialect)
