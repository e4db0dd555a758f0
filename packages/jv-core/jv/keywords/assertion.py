"""Assertion keywords — predicates over the instance (validation and format vocabularies)."""

from __future__ import annotations

import math
import re
from typing import Any

from jv.keywords.base import EvaluationScope, Keyword, KeywordContext, KeywordKind
from jv.models.issues import IssueKind, ValidationIssue
from jv.utils.json_values import hashable_key, is_number, json_equal, json_type_of, matches_type

MULTIPLE_OF_TOLERANCE = 1e-10


class Assertion(Keyword):
    kind = KeywordKind.assertion


class Type(Assertion):
    name = "type"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        if isinstance(value, str):
            self.types = [value]
        else:
            self.types = [t for t in value if isinstance(t, str)] if isinstance(value, list) else []

    def validate(self, instance, location, annotations, scope):
        if not self.types or any(matches_type(instance, t) for t in self.types):
            return
        raise ValidationIssue(IssueKind.type_mismatch, expected=self.types, actual=json_type_of(instance))


class Enumeration(Assertion):
    name = "enum"

    def validate(self, instance, location, annotations, scope):
        cases = self.value if isinstance(self.value, list) else []
        if not any(json_equal(instance, case) for case in cases):
            raise ValidationIssue(IssueKind.not_enum_case, value=instance, cases=cases)


class Const(Assertion):
    name = "const"

    def validate(self, instance, location, annotations, scope):
        if not json_equal(instance, self.value):
            raise ValidationIssue(IssueKind.constant_mismatch, expected=self.value, value=instance)


# --- Numbers ---

class _NumericBound(Assertion):
    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.limit = value if is_number(value) else None

    def validate(self, instance, location, annotations, scope):
        if self.limit is None or not is_number(instance):
            return
        if not self.holds(instance, self.limit):
            raise self.failure(instance)

    def holds(self, number: int | float, limit: int | float) -> bool:
        raise NotImplementedError

    def failure(self, number: int | float) -> ValidationIssue:
        raise NotImplementedError


class MultipleOf(_NumericBound):
    name = "multipleOf"

    def holds(self, number, limit):
        if limit <= 0:
            return True
        if isinstance(number, int) and isinstance(limit, int):
            return number % limit == 0
        # integers always satisfy a fractional divisor
        if isinstance(number, int) and limit < 1:
            return True
        try:
            quotient = number / limit
        except OverflowError:
            return False
        if not math.isfinite(quotient):
            return False
        if quotient.is_integer():
            return True
        return abs(math.remainder(number, limit)) <= MULTIPLE_OF_TOLERANCE

    def failure(self, number):
        return ValidationIssue(IssueKind.not_multiple_of, number=number, multiple_of=self.limit)


class Maximum(_NumericBound):
    name = "maximum"

    def holds(self, number, limit):
        return number <= limit

    def failure(self, number):
        return ValidationIssue(IssueKind.exceeds_maximum, number=number, maximum=self.limit)


class ExclusiveMaximum(_NumericBound):
    name = "exclusiveMaximum"

    def holds(self, number, limit):
        return number < limit

    def failure(self, number):
        return ValidationIssue(IssueKind.exceeds_exclusive_maximum, number=number, maximum=self.limit)


class Minimum(_NumericBound):
    name = "minimum"

    def holds(self, number, limit):
        return number >= limit

    def failure(self, number):
        return ValidationIssue(IssueKind.below_minimum, number=number, minimum=self.limit)


class ExclusiveMinimum(_NumericBound):
    name = "exclusiveMinimum"

    def holds(self, number, limit):
        return number > limit

    def failure(self, number):
        return ValidationIssue(IssueKind.below_exclusive_minimum, number=number, minimum=self.limit)


# --- Strings ---

def _count(value: Any) -> int | None:
    if is_number(value) and float(value).is_integer():
        return int(value)
    return None


class MaxLength(Assertion):
    name = "maxLength"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, str):
            return
        if len(instance) > limit:
            raise ValidationIssue(IssueKind.exceeds_max_length, length=len(instance), max_length=limit)


class MinLength(Assertion):
    name = "minLength"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, str):
            return
        if len(instance) < limit:
            raise ValidationIssue(IssueKind.below_min_length, length=len(instance), min_length=limit)


def compile_pattern(source: Any) -> re.Pattern[str] | None:
    if not isinstance(source, str):
        return None
    try:
        return re.compile(source)
    except re.error:
        return None


class Pattern(Assertion):
    name = "pattern"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.regex = compile_pattern(value)

    def validate(self, instance, location, annotations, scope):
        if self.regex is None or not isinstance(instance, str):
            return
        if self.regex.search(instance) is None:
            raise ValidationIssue(IssueKind.pattern_mismatch, value=instance, pattern=self.value)


class Format(Assertion):
    """Annotates the format name; asserts only when the Context has a validator for it."""

    name = "format"

    def validate(self, instance, location, annotations, scope):
        if not isinstance(self.value, str):
            return
        annotations.insert(self, location, self.value)
        formats = self.context.context.formats
        if not isinstance(instance, str) or not formats.has(self.value):
            return
        if not formats.check(self.value, instance):
            raise ValidationIssue(IssueKind.invalid_format, format=self.value, value=instance)


# --- Arrays ---

class MaxItems(Assertion):
    name = "maxItems"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, list):
            return
        if len(instance) > limit:
            raise ValidationIssue(IssueKind.exceeds_max_items, count=len(instance), max_items=limit)


class MinItems(Assertion):
    name = "minItems"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, list):
            return
        if len(instance) < limit:
            raise ValidationIssue(IssueKind.below_min_items, count=len(instance), min_items=limit)


class UniqueItems(Assertion):
    name = "uniqueItems"

    def validate(self, instance, location, annotations, scope):
        if self.value is not True or not isinstance(instance, list):
            return
        seen: dict[Any, int] = {}
        for index, item in enumerate(instance):
            key = hashable_key(item)
            if key in seen:
                raise ValidationIssue(IssueKind.items_not_unique, indices=[seen[key], index])
            seen[key] = index


def _contains_count(scope: EvaluationScope, instance: list[Any]) -> int | None:
    if scope.contains is None:
        return None
    return scope.contains.count(len(instance))


class MaxContains(Assertion):
    name = "maxContains"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, list):
            return
        count = _contains_count(scope, instance)
        if count is not None and count > limit:
            raise ValidationIssue(IssueKind.contains_excessive_matches, count=count, max_allowed=limit)


class MinContains(Assertion):
    name = "minContains"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, list):
            return
        count = _contains_count(scope, instance)
        if count is not None and count < limit:
            raise ValidationIssue(IssueKind.contains_insufficient_matches, count=count, required=limit)


# --- Objects ---

class MaxProperties(Assertion):
    name = "maxProperties"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, dict):
            return
        if len(instance) > limit:
            raise ValidationIssue(IssueKind.exceeds_max_properties, count=len(instance), max_properties=limit)


class MinProperties(Assertion):
    name = "minProperties"

    def validate(self, instance, location, annotations, scope):
        limit = _count(self.value)
        if limit is None or not isinstance(instance, dict):
            return
        if len(instance) < limit:
            raise ValidationIssue(IssueKind.below_min_properties, count=len(instance), min_properties=limit)


class Required(Assertion):
    name = "required"

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict) or not isinstance(self.value, list):
            return
        missing = [key for key in self.value if isinstance(key, str) and key not in instance]
        if missing:
            raise ValidationIssue(IssueKind.missing_required_property, key=missing[0], missing=missing)


class DependentRequired(Assertion):
    name = "dependentRequired"

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict) or not isinstance(self.value, dict):
            return
        for trigger, dependents in self.value.items():
            if trigger not in instance or not isinstance(dependents, list):
                continue
            missing = [key for key in dependents if isinstance(key, str) and key not in instance]
            if missing:
                raise ValidationIssue(
                    IssueKind.missing_dependent_property,
                    key=missing[0], dependent_on=trigger, missing=missing,
                )


ASSERTIONS: tuple[type[Keyword], ...] = (
    Type, Enumeration, Const,
    MultipleOf, Maximum, ExclusiveMaximum, Minimum, ExclusiveMinimum,
    MaxLength, MinLength, Pattern, Format,
    MaxItems, MinItems, UniqueItems, MaxContains, MinContains,
    MaxProperties, MinProperties, Required, DependentRequired,
)
