"""Dialect — Draft 2020-12 vocabularies and the canonical keyword order."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jv.models.results import ValidationResult

_VOCAB = "https://json-schema.org/draft/2020-12/vocab/"

CORE = _VOCAB + "core"
APPLICATOR = _VOCAB + "applicator"
UNEVALUATED = _VOCAB + "unevaluated"
VALIDATION = _VOCAB + "validation"
META_DATA = _VOCAB + "meta-data"
FORMAT_ANNOTATION = _VOCAB + "format-annotation"
CONTENT = _VOCAB + "content"

SUPPORTED_VOCABULARIES = frozenset({
    CORE, APPLICATOR, UNEVALUATED, VALIDATION, META_DATA, FORMAT_ANNOTATION, CONTENT,
})

# Evaluation order. Annotation producers run before their consumers.
DRAFT_2020_12_KEYWORDS: tuple[str, ...] = (
    # core
    "$schema", "$vocabulary", "$id", "$ref", "$defs", "$anchor",
    "$dynamicRef", "$dynamicAnchor", "$comment",
    # meta-data
    "title", "description", "default", "deprecated", "readOnly", "writeOnly", "examples",
    # content
    "contentEncoding", "contentMediaType", "contentSchema",
    # applicator
    "prefixItems", "items", "contains",
    "properties", "patternProperties", "additionalProperties", "propertyNames",
    "allOf", "anyOf", "oneOf", "not",
    "if", "then", "else",
    "dependentSchemas",
    # validation
    "type", "enum", "const",
    "multipleOf", "maximum", "exclusiveMaximum", "minimum", "exclusiveMinimum",
    "maxLength", "minLength", "pattern",
    "format",
    "maxItems", "minItems", "uniqueItems", "maxContains", "minContains",
    "maxProperties", "minProperties", "required", "dependentRequired",
    # unevaluated
    "unevaluatedItems", "unevaluatedProperties",
    # reserved
    "definitions", "dependencies", "$recursiveAnchor", "$recursiveRef",
)

KEYWORD_VOCABULARIES: dict[str, str] = {
    **dict.fromkeys(
        ("$schema", "$vocabulary", "$id", "$ref", "$defs", "$anchor",
         "$dynamicRef", "$dynamicAnchor", "$comment"),
        CORE,
    ),
    **dict.fromkeys(
        ("prefixItems", "items", "contains", "properties", "patternProperties",
         "additionalProperties", "propertyNames", "allOf", "anyOf", "oneOf", "not",
         "if", "then", "else", "dependentSchemas"),
        APPLICATOR,
    ),
    **dict.fromkeys(("unevaluatedItems", "unevaluatedProperties"), UNEVALUATED),
    **dict.fromkeys(
        ("type", "enum", "const", "multipleOf", "maximum", "exclusiveMaximum",
         "minimum", "exclusiveMinimum", "maxLength", "minLength", "pattern",
         "maxItems", "minItems", "uniqueItems", "maxContains", "minContains",
         "maxProperties", "minProperties", "required", "dependentRequired"),
        VALIDATION,
    ),
    **dict.fromkeys(
        ("title", "description", "default", "deprecated", "readOnly", "writeOnly", "examples"),
        META_DATA,
    ),
    "format": FORMAT_ANNOTATION,
    **dict.fromkeys(("contentEncoding", "contentMediaType", "contentSchema"), CONTENT),
}


class Dialect(str, Enum):
    draft2020_12 = "https://json-schema.org/draft/2020-12/schema"

    @property
    def supported_vocabularies(self) -> frozenset[str]:
        return SUPPORTED_VOCABULARIES

    def keywords(self, active_vocabularies: set[str] | frozenset[str] | None = None) -> tuple[str, ...]:
        """Return the keywords in evaluation order, restricted to *active_vocabularies*.

        Keywords without a vocabulary (the reserved ones) are always kept.
        """
        if active_vocabularies is None:
            return DRAFT_2020_12_KEYWORDS
        return tuple(
            name for name in DRAFT_2020_12_KEYWORDS
            if name not in KEYWORD_VOCABULARIES or KEYWORD_VOCABULARIES[name] in active_vocabularies
        )

    def validate_schema(self, raw: Any) -> ValidationResult:
        """Validate a raw schema document against this dialect's meta-schema."""
        from jv.metaschema.loader import validate_raw_against_meta_schema

        return validate_raw_against_meta_schema(raw, self)

    @classmethod
    def from_uri(cls, uri: str) -> Dialect | None:
        normalized = uri.rstrip("#")
        for dialect in cls:
            if dialect.value == normalized:
                return dialect
        return None
