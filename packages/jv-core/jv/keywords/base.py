"""Keyword taxonomy, per-keyword compile context and subschema helpers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from jv.models.issues import IssueKind, SchemaIssue, SchemaIssueKind, ValidationIssue
from jv.models.pointer import JSONPointer
from jv.models.results import ValidationError, ValidationResult
from jv.runner.annotations import AnnotationContainer, ContainsMatches, PrefixItemsCoverage
from jv.utils.json_values import merge_json
from jv.utils.uris import strip_fragment

if TYPE_CHECKING:
    from jv.compiler.compile_schema import Schema
    from jv.runner.context import Context

logger = logging.getLogger(__name__)


class KeywordKind(str, Enum):
    assertion = "assertion"
    applicator = "applicator"
    reference = "reference"
    identifier = "identifier"
    metadata = "metadata"
    reserved = "reserved"


class KeywordContext:
    """Where a keyword sits: its document location, base URI and owning Context.

    ``siblings`` is the raw schema object the keyword belongs to, for keywords
    whose compiled state depends on a neighbour (``contains`` / ``minContains``).
    ``parent_base`` is the base URI before the owning object applied its ``$id``.
    """

    __slots__ = ("location", "uri", "document", "context", "siblings", "parent_base")

    def __init__(
        self,
        location: JSONPointer,
        uri: str,
        document: str,
        context: Context,
        siblings: dict[str, Any] | None = None,
        parent_base: str | None = None,
    ):
        self.location = location
        self.uri = uri
        self.document = document
        self.context = context
        self.siblings = siblings or {}
        self.parent_base = parent_base if parent_base is not None else uri

    @property
    def absolute_location(self) -> str:
        return strip_fragment(self.document) + self.location.fragment


class EvaluationScope:
    """Scratch shared by the keywords of one schema object during one evaluation.

    Holds what adjacent keywords hand each other (``if`` to ``then``/``else``,
    ``prefixItems`` to ``items``, ``contains`` to ``minContains``/``maxContains``).
    Annotations merged in from ``$ref`` or in-place applicators never land here.
    """

    __slots__ = ("if_result", "prefix_items", "contains")

    def __init__(self) -> None:
        self.if_result: bool | None = None
        self.prefix_items: PrefixItemsCoverage | None = None
        self.contains: ContainsMatches | None = None


class Keyword:
    """Base class of every keyword.

    Subclasses set ``name`` and ``kind`` and override ``validate``, which raises
    ``ValidationIssue`` when the instance fails. Identifier, metadata and
    reserved keywords never fail.
    """

    name: ClassVar[str]
    kind: ClassVar[KeywordKind]

    def __init__(self, value: Any, context: KeywordContext):
        self.value = value
        self.context = context

    def validate(
        self,
        instance: Any,
        location: JSONPointer,
        annotations: AnnotationContainer,
        scope: EvaluationScope,
    ) -> None:
        return None

    @staticmethod
    def merge_annotations(existing: Any, new: Any) -> Any:
        return merge_json(existing, new)

    def to_json(self) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.context.location)!r})"


# --- Subschema helpers ---

def compile_subschema(raw: Any, context: KeywordContext, *path: str | int) -> Schema:
    """Compile *raw* found at ``context.location/path``.

    A subschema that is neither boolean nor object degrades to ``true``;
    vocabulary failures propagate.
    """
    from jv.compiler.compile_schema import BooleanSchema, build_schema

    location = context.location.append(*path)
    try:
        return build_schema(
            raw, location, context.context, base_uri=context.uri, document=context.document,
        )
    except SchemaIssue as issue:
        if issue.kind is not SchemaIssueKind.schema_should_be_boolean_or_object:
            raise
        logger.debug("subschema at %s is not a schema (%s); treating it as true", location, issue)
        return BooleanSchema(True, location=location, document=context.document)


def compile_subschema_list(raw: Any, context: KeywordContext) -> list[Schema]:
    if not isinstance(raw, list):
        logger.debug("expected an array of schemas at %s", context.location)
        return []
    return [compile_subschema(item, context, index) for index, item in enumerate(raw)]


def compile_subschema_map(raw: Any, context: KeywordContext) -> dict[str, Schema]:
    if not isinstance(raw, dict):
        logger.debug("expected an object of schemas at %s", context.location)
        return {}
    return {key: compile_subschema(item, context, key) for key, item in raw.items()}


def evaluate_subschema(
    schema: Schema,
    instance: Any,
    location: JSONPointer,
    annotations: AnnotationContainer,
) -> ValidationResult:
    """Validate against *schema*; keep its annotations only when it succeeded."""
    collected = AnnotationContainer()
    result = schema.validate(instance, location, collected)
    if result.valid:
        annotations.merge(collected)
    return result


class ValidationResultBuilder:
    """Collects the failures of many subschema evaluations, then raises once."""

    def __init__(self, keyword: Keyword, instance_location: JSONPointer):
        self.keyword = keyword
        self.instance_location = instance_location
        self.errors: list[ValidationError] = []

    def add(self, result: ValidationResult) -> None:
        if result.valid:
            return
        if result.errors:
            self.errors.extend(result.errors)
            return
        self.errors.append(ValidationError(
            keyword=self.keyword.name,
            kind=IssueKind.keyword_failure,
            message="Validation failed",
            keyword_location=result.keyword_location,
            instance_location=result.instance_location,
        ))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_if_errors(self, kind: IssueKind = IssueKind.keyword_failure, **details: Any) -> None:
        if self.errors:
            details.setdefault("keyword", self.keyword.name)
            raise ValidationIssue(kind, self.errors, **details)
