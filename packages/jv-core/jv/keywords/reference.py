"""Reference keywords — ``$ref`` and ``$dynamicRef``."""

from __future__ import annotations

from typing import Any

from jv.keywords.base import Keyword, KeywordContext, KeywordKind
from jv.models.issues import IssueKind, ValidationIssue
from jv.runner.annotations import AnnotationContainer
from jv.runner.resolver import ReferenceResolutionError, ReferenceResolver


class Ref(Keyword):
    """Validates the instance against the referenced schema.

    The referenced schema is resolved lazily on first use and cached in the
    Context, so recursive schemas compile in finite time.
    """

    name = "$ref"
    kind = KeywordKind.reference
    dynamic = False

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.resolver = ReferenceResolver(context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(self.value, str):
            return
        try:
            schema = self.resolver.resolve(self.value, dynamic=self.dynamic)
        except ReferenceResolutionError as exc:
            raise ValidationIssue(IssueKind.invalid_reference, reference=self.value, reason=str(exc)) from exc
        collected = AnnotationContainer()
        result = schema.validate(instance, location, collected)
        if not result.valid:
            errors = [e.rebased(schema.location, self.context.location) for e in result.errors or []]
            raise ValidationIssue(IssueKind.reference_validation_failure, errors, reference=self.value)
        annotations.merge(collected)


class DynamicRef(Ref):
    name = "$dynamicRef"
    dynamic = True


REFERENCES: tuple[type[Keyword], ...] = (Ref, DynamicRef)
