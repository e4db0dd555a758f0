"""Schema compiler — turn raw JSON Schema documents into validating Schema trees."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from jv.keywords.base import Keyword, KeywordContext
from jv.models.issues import SchemaIssue, SchemaIssueKind
from jv.models.pointer import JSONPointer
from jv.models.results import ValidationResult
from jv.runner import engine
from jv.runner.annotations import AnnotationContainer
from jv.runner.context import Context, IdentifierLocation
from jv.utils.hashing import fingerprint, generate_document_uri
from jv.utils.uris import normalize_uri, resolve_uri, strip_fragment

if TYPE_CHECKING:
    from jv.compiler.dialect import Dialect

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _keyword_classes() -> dict[str, type[Keyword]]:
    from jv.keywords.registry import KEYWORD_CLASSES

    return KEYWORD_CLASSES


class Schema:
    """A compiled schema: ``BooleanSchema`` or ``ObjectSchema``.

    Two schemas are equal when their serialized documents are equal.
    """

    location: JSONPointer
    document: str

    def validate(
        self,
        instance: Any,
        location: JSONPointer | None = None,
        annotations: AnnotationContainer | None = None,
    ) -> ValidationResult:
        raise NotImplementedError

    def to_json(self) -> Any:
        raise NotImplementedError

    @property
    def absolute_location(self) -> str:
        return strip_fragment(self.document) + self.location.fragment

    def validate_against_meta_schema(self) -> ValidationResult:
        """Validate this schema's document against the Draft 2020-12 meta-schema."""
        from jv.metaschema.loader import validate_against_meta_schema

        return validate_against_meta_schema(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return fingerprint(self.to_json()) == fingerprint(other.to_json())

    def __hash__(self) -> int:
        return hash(fingerprint(self.to_json()))


class BooleanSchema(Schema):
    """``true`` accepts every instance; ``false`` rejects every instance."""

    def __init__(self, value: bool, location: JSONPointer | None = None, document: str = ""):
        self.value = value
        self.location = location if location is not None else JSONPointer()
        self.document = document

    def validate(self, instance, location=None, annotations=None):
        return engine.evaluate_boolean_schema(self, location if location is not None else JSONPointer())

    def to_json(self) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"BooleanSchema({self.value})"


class ObjectSchema(Schema):
    """An object schema: its keywords in evaluation order plus retained unknown members."""

    def __init__(
        self,
        keywords: list[Keyword],
        extras: dict[str, Any],
        order: list[str],
        location: JSONPointer,
        uri: str,
        document: str,
        context: Context,
    ):
        self.keywords = keywords
        self.extras = extras
        self._order = order
        self.location = location
        self.uri = uri
        self.document = document
        self.context = context
        self._by_name = {keyword.name: keyword for keyword in keywords}

    @property
    def resource_uri(self) -> str:
        return strip_fragment(self.uri)

    def keyword(self, name: str) -> Keyword | None:
        return self._by_name.get(name)

    def validate(self, instance, location=None, annotations=None):
        return engine.evaluate_object_schema(
            self,
            instance,
            location if location is not None else JSONPointer(),
            annotations if annotations is not None else AnnotationContainer(),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            name: self._by_name[name].to_json() if name in self._by_name else self.extras[name]
            for name in self._order
        }

    def __repr__(self) -> str:
        return f"ObjectSchema({self.uri!r}, {str(self.location)!r}, {[k.name for k in self.keywords]})"


def build_schema(
    raw: Any,
    location: JSONPointer,
    context: Context,
    base_uri: str,
    document: str,
) -> Schema:
    """Compile *raw*, found at *location* inside *document*, with *base_uri* in effect.

    Raises:
        SchemaIssue: If *raw* is neither a boolean nor an object, or its
            ``$vocabulary`` is malformed or requires an unsupported vocabulary.
    """
    if isinstance(raw, bool):
        return BooleanSchema(raw, location=location, document=document)
    if not isinstance(raw, dict):
        raise SchemaIssue(
            SchemaIssueKind.schema_should_be_boolean_or_object,
            f"found {type(raw).__name__} at {location.fragment}",
        )

    parent_base = base_uri
    identifier = raw.get("$id")
    if isinstance(identifier, str):
        base_uri = strip_fragment(resolve_uri(base_uri, identifier))

    dialect: Dialect = context.dialect
    classes = _keyword_classes()
    active = set(dialect.keywords(context.active_vocabularies))
    keywords: list[Keyword] = []
    extras: dict[str, Any] = {}
    for name in dialect.keywords():
        if name not in raw:
            continue
        if name not in active or name not in classes:
            extras[name] = raw[name]
            continue
        keyword_context = KeywordContext(
            location.append(name), base_uri, document, context,
            siblings=raw, parent_base=parent_base,
        )
        keywords.append(classes[name](raw[name], keyword_context))
    for name, value in raw.items():
        if name not in classes:
            extras[name] = value

    return ObjectSchema(keywords, extras, list(raw), location, base_uri, document, context)


def compile_schema(
    raw: Any,
    context: Context | None = None,
    base_uri: str | None = None,
) -> Schema:
    """Compile a root schema document.

    The document is registered under *base_uri* (a generated ``urn:uuid:`` URI
    when omitted) and, if it declares one, under its ``$id``; the compiled
    root is cached under both so ``$ref`` can reach it.
    """
    from jv.keywords.identifier import resolve_active_vocabularies

    context = context if context is not None else Context()
    document = normalize_uri(strip_fragment(base_uri)) if base_uri else generate_document_uri()
    context.register_document(document, raw)
    if context.root_raw_schema is None:
        context.root_raw_schema = raw
    if isinstance(raw, dict) and context.active_vocabularies is None:
        context.active_vocabularies = resolve_active_vocabularies(raw, context)

    root = JSONPointer()
    context.register_identifier(document, IdentifierLocation(document, root, document))
    schema = build_schema(raw, root, context, base_uri=document, document=document)
    context.schema_cache.setdefault(document, schema)
    if isinstance(schema, ObjectSchema) and schema.resource_uri != document:
        context.schema_cache.setdefault(schema.resource_uri, schema)
    logger.debug("compiled schema document %s", document)
    return schema
