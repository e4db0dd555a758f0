"""Validation engine — evaluate compiled schemas against instances."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

from jv.keywords.base import EvaluationScope, Keyword, KeywordKind
from jv.models.issues import IssueKind, ValidationIssue
from jv.models.pointer import JSONPointer
from jv.models.results import ValidationError, ValidationResult
from jv.runner.annotations import AnnotationContainer
from jv.runner.messages import render_message

if TYPE_CHECKING:
    from jv.compiler.compile_schema import BooleanSchema, ObjectSchema, Schema
    from jv.runner.context import Context

logger = logging.getLogger(__name__)

# Keywords that were fully handled at compile time.
_INERT_KINDS = frozenset({KeywordKind.identifier, KeywordKind.reserved})

# Python frames one schema entry may stack (schema, keyword and subschema calls).
FRAMES_PER_ENTRY = 8
_BASE_RECURSION_LIMIT = 1000


def validate(
    schema: Schema | Any,
    instance: Any,
    context: Context | None = None,
    base_uri: str | None = None,
) -> ValidationResult:
    """Validate a decoded JSON *instance*.

    *schema* may be a compiled ``Schema`` or a raw schema document, which is
    compiled first (into *context* under *base_uri* when given).
    """
    from jv.compiler.compile_schema import ObjectSchema, Schema, compile_schema

    if not isinstance(schema, Schema):
        schema = compile_schema(schema, context=context, base_uri=base_uri)
    lock = schema.context.lock if isinstance(schema, ObjectSchema) else nullcontext()
    with lock:
        return schema.validate(instance)


def validate_text(
    schema: Schema | Any,
    text: str,
    context: Context | None = None,
    base_uri: str | None = None,
) -> ValidationResult:
    """Validate a JSON text; decoding errors propagate as ``json.JSONDecodeError``."""
    return validate(schema, json.loads(text), context=context, base_uri=base_uri)


def evaluate_boolean_schema(schema: BooleanSchema, location: JSONPointer) -> ValidationResult:
    if schema.value:
        return ValidationResult(
            valid=True,
            keyword_location=schema.location,
            absolute_keyword_location=schema.absolute_location,
            instance_location=location,
        )
    error = ValidationError(
        keyword="false",
        kind=IssueKind.false_schema,
        message=render_message(IssueKind.false_schema, {}),
        keyword_location=schema.location,
        absolute_keyword_location=schema.absolute_location,
        instance_location=location,
    )
    return ValidationResult(
        valid=False,
        keyword_location=schema.location,
        absolute_keyword_location=schema.absolute_location,
        instance_location=location,
        errors=[error],
    )


def evaluate_object_schema(
    schema: ObjectSchema,
    instance: Any,
    location: JSONPointer,
    annotations: AnnotationContainer,
) -> ValidationResult:
    """Run every keyword of *schema* in order, collecting failures.

    Keywords share *annotations* (so later keywords see earlier siblings'
    annotations) and one ``EvaluationScope``. Annotations are rendered into
    the result only for the outermost call.
    """
    context = schema.context
    if context.depth == 0:
        ensure_recursion_headroom(context)
    try:
        with context.enter(schema.resource_uri, location):
            errors = _evaluate_keywords(schema, instance, location, annotations)
    except ValidationIssue as issue:
        logger.debug("evaluation stopped at %s: %s", schema.absolute_location, issue.kind.value)
        errors = [ValidationError(
            keyword="",
            kind=issue.kind,
            message=render_message(issue.kind, issue.details, context.message_templates),
            details=issue.details,
            keyword_location=schema.location,
            absolute_keyword_location=schema.absolute_location,
            instance_location=location,
        )]

    valid = not errors
    return ValidationResult(
        valid=valid,
        keyword_location=schema.location,
        absolute_keyword_location=schema.absolute_location,
        instance_location=location,
        errors=errors or None,
        annotations=annotations.records() if valid and context.depth == 0 else None,
    )


def _evaluate_keywords(
    schema: ObjectSchema,
    instance: Any,
    location: JSONPointer,
    annotations: AnnotationContainer,
) -> list[ValidationError]:
    scope = EvaluationScope()
    errors: list[ValidationError] = []
    for keyword in schema.keywords:
        if keyword.kind in _INERT_KINDS:
            continue
        try:
            keyword.validate(instance, location, annotations, scope)
        except ValidationIssue as issue:
            errors.append(issue_to_error(issue, keyword, location))
    return errors


def issue_to_error(issue: ValidationIssue, keyword: Keyword, location: JSONPointer) -> ValidationError:
    """Turn a keyword's issue into a located ``ValidationError``."""
    keyword_context = keyword.context
    return ValidationError(
        keyword=keyword.name,
        kind=issue.kind,
        message=render_message(issue.kind, issue.details, keyword_context.context.message_templates),
        details=issue.details,
        keyword_location=keyword_context.location,
        absolute_keyword_location=keyword_context.absolute_location,
        instance_location=location,
        errors=issue.errors,
    )


def ensure_recursion_headroom(context: Context) -> None:
    """Raise the interpreter recursion limit so ``context.max_nesting`` entries fit.

    The limit is only ever raised, never lowered, since other threads may be
    validating at the same time.
    """
    needed = FRAMES_PER_ENTRY * context.max_nesting + _BASE_RECURSION_LIMIT
    if sys.getrecursionlimit() < needed:
        logger.debug("raising recursion limit to %d", needed)
        sys.setrecursionlimit(needed)
