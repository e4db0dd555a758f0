"""Applicator keywords — apply subschemas to the instance or its parts and combine the results."""

from __future__ import annotations

from typing import Any

from jv.keywords.assertion import compile_pattern
from jv.keywords.base import (
    Keyword,
    KeywordContext,
    KeywordKind,
    ValidationResultBuilder,
    compile_subschema,
    compile_subschema_list,
    compile_subschema_map,
    evaluate_subschema,
)
from jv.models.issues import IssueKind, ValidationIssue
from jv.runner.annotations import AnnotationContainer, ContainsMatches, PrefixItemsCoverage
from jv.utils.json_values import is_number


class Applicator(Keyword):
    kind = KeywordKind.applicator


def _union(existing: frozenset[str], new: frozenset[str]) -> frozenset[str]:
    return existing | new


def _either(existing: bool, new: bool) -> bool:
    return bool(existing or new)


def _merge_tracked(existing: Any, new: Any) -> Any:
    return existing.merge(new)


# --- Arrays ---

class PrefixItems(Applicator):
    name = "prefixItems"
    merge_annotations = staticmethod(_merge_tracked)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_list(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, list):
            return
        covered = min(len(instance), len(self.schemas))
        builder = ValidationResultBuilder(self, location)
        for index in range(covered):
            builder.add(evaluate_subschema(self.schemas[index], instance[index], location.append(index), annotations))
        if covered == len(instance):
            scope.prefix_items = PrefixItemsCoverage.every_index()
        elif covered:
            scope.prefix_items = PrefixItemsCoverage(largest_index=covered - 1)
        builder.raise_if_errors(IssueKind.invalid_item)
        if scope.prefix_items is not None:
            annotations.insert(self, location, scope.prefix_items)


class Items(Applicator):
    """Applies to the items ``prefixItems`` did not cover."""

    name = "items"
    merge_annotations = staticmethod(_either)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, list):
            return
        coverage = scope.prefix_items
        if coverage is None:
            start = 0
        elif coverage.every:
            start = len(instance)
        else:
            start = coverage.largest_index + 1
        builder = ValidationResultBuilder(self, location)
        for index in range(start, len(instance)):
            builder.add(evaluate_subschema(self.schema, instance[index], location.append(index), annotations))
        builder.raise_if_errors(IssueKind.invalid_item)
        if start < len(instance):
            annotations.insert(self, location, True)


class Contains(Applicator):
    name = "contains"
    merge_annotations = staticmethod(_merge_tracked)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)
        min_contains = context.siblings.get("minContains")
        self.min_contains_is_zero = is_number(min_contains) and min_contains == 0

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, list):
            return
        matched = [
            index for index, item in enumerate(instance)
            if evaluate_subschema(self.schema, item, location.append(index), annotations).valid
        ]
        if not matched and not self.min_contains_is_zero:
            raise ValidationIssue(IssueKind.contains_insufficient_matches, count=0, required=1)
        if len(matched) == len(instance):
            scope.contains = ContainsMatches(every=True)
        else:
            scope.contains = ContainsMatches(tuple(matched))
        annotations.insert(self, location, scope.contains)


# --- Objects ---

class Properties(Applicator):
    name = "properties"
    merge_annotations = staticmethod(_union)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_map(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict):
            return
        builder = ValidationResultBuilder(self, location)
        evaluated = set()
        for name, schema in self.schemas.items():
            if name not in instance:
                continue
            builder.add(evaluate_subschema(schema, instance[name], location.append(name), annotations))
            evaluated.add(name)
        builder.raise_if_errors(IssueKind.invalid_property)
        annotations.insert(self, location, frozenset(evaluated))


class PatternProperties(Applicator):
    name = "patternProperties"
    merge_annotations = staticmethod(_union)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        schemas = compile_subschema_map(value, context)
        self.patterns = [
            (regex, schema) for regex, schema in
            ((compile_pattern(source), schema) for source, schema in schemas.items())
            if regex is not None
        ]

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict):
            return
        builder = ValidationResultBuilder(self, location)
        matched = set()
        for name, value in instance.items():
            for regex, schema in self.patterns:
                if regex.search(name) is None:
                    continue
                builder.add(evaluate_subschema(schema, value, location.append(name), annotations))
                matched.add(name)
        builder.raise_if_errors(IssueKind.invalid_pattern_property)
        annotations.insert(self, location, frozenset(matched))


class AdditionalProperties(Applicator):
    """Applies to keys matched by neither sibling ``properties`` nor ``patternProperties``."""

    name = "additionalProperties"
    merge_annotations = staticmethod(_union)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)
        properties = context.siblings.get("properties")
        self.known = set(properties) if isinstance(properties, dict) else set()
        patterns = context.siblings.get("patternProperties")
        compiled = (compile_pattern(p) for p in patterns) if isinstance(patterns, dict) else ()
        self.patterns = [regex for regex in compiled if regex is not None]

    def _is_additional(self, name: str) -> bool:
        if name in self.known:
            return False
        return not any(regex.search(name) for regex in self.patterns)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict):
            return
        builder = ValidationResultBuilder(self, location)
        validated = set()
        for name, value in instance.items():
            if not self._is_additional(name):
                continue
            builder.add(evaluate_subschema(self.schema, value, location.append(name), annotations))
            validated.add(name)
        builder.raise_if_errors(IssueKind.invalid_additional_property)
        annotations.insert(self, location, frozenset(validated))


class PropertyNames(Applicator):
    name = "propertyNames"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict):
            return
        builder = ValidationResultBuilder(self, location)
        invalid: list[str] = []
        for name in instance:
            result = self.schema.validate(name, location, AnnotationContainer())
            if not result.valid:
                invalid.append(name)
                builder.add(result)
        builder.raise_if_errors(IssueKind.invalid_property_name, names=invalid)


class DependentSchemas(Applicator):
    name = "dependentSchemas"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_map(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict):
            return
        builder = ValidationResultBuilder(self, location)
        failed: list[str] = []
        for name, schema in self.schemas.items():
            if name not in instance:
                continue
            result = evaluate_subschema(schema, instance, location, annotations)
            if not result.valid:
                failed.append(name)
                builder.add(result)
        if failed:
            builder.raise_if_errors(IssueKind.invalid_dependent_schema, key=failed[0], failed=failed)


# --- Composition ---

class AllOf(Applicator):
    name = "allOf"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_list(value, context)

    def validate(self, instance, location, annotations, scope):
        builder = ValidationResultBuilder(self, location)
        for schema in self.schemas:
            builder.add(evaluate_subschema(schema, instance, location, annotations))
        builder.raise_if_errors(IssueKind.all_of_failed)


class AnyOf(Applicator):
    """Every branch is evaluated so that all successful branches contribute annotations."""

    name = "anyOf"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_list(value, context)

    def validate(self, instance, location, annotations, scope):
        builder = ValidationResultBuilder(self, location)
        matched = 0
        for schema in self.schemas:
            result = evaluate_subschema(schema, instance, location, annotations)
            if result.valid:
                matched += 1
            else:
                builder.add(result)
        if not matched:
            builder.raise_if_errors(IssueKind.any_of_failed)
            raise ValidationIssue(IssueKind.any_of_failed)


class OneOf(Applicator):
    name = "oneOf"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schemas = compile_subschema_list(value, context)

    def validate(self, instance, location, annotations, scope):
        builder = ValidationResultBuilder(self, location)
        winners: list[AnnotationContainer] = []
        for schema in self.schemas:
            collected = AnnotationContainer()
            result = schema.validate(instance, location, collected)
            if result.valid:
                winners.append(collected)
            else:
                builder.add(result)
        if len(winners) == 1:
            annotations.merge(winners[0])
            return
        errors = builder.errors if not winners else []
        raise ValidationIssue(IssueKind.one_of_failed, errors, matched=len(winners))


class Not(Applicator):
    name = "not"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        if self.schema.validate(instance, location, AnnotationContainer()).valid:
            raise ValidationIssue(IssueKind.not_failed)


# --- Conditionals ---

class If(Applicator):
    """Never fails on its own; records its outcome for ``then``/``else``."""

    name = "if"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        scope.if_result = evaluate_subschema(self.schema, instance, location, annotations).valid


class _Branch(Applicator):
    applies_when: bool

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        if scope.if_result is not self.applies_when:
            return
        result = evaluate_subschema(self.schema, instance, location, annotations)
        if not result.valid:
            raise ValidationIssue(IssueKind.conditional_failed, result.errors, condition=self.name)


class Then(_Branch):
    name = "then"
    applies_when = True


class Else(_Branch):
    name = "else"
    applies_when = False


# --- Unevaluated ---

class UnevaluatedItems(Applicator):
    """Applies to array items no adjacent or nested keyword evaluated."""

    name = "unevaluatedItems"
    merge_annotations = staticmethod(_either)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def _evaluated(self, instance: list[Any], location, annotations) -> set[int] | None:
        """Return evaluated indices, or None when every item was evaluated."""
        if annotations.value("items", location) is True:
            return None
        evaluated: set[int] = set()
        coverage = annotations.value("prefixItems", location)
        if coverage is not None:
            if coverage.every:
                return None
            evaluated.update(range(coverage.largest_index + 1))
        matches = annotations.value("contains", location)
        if matches is not None:
            if matches.every:
                return None
            evaluated.update(matches.indices)
        return evaluated

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, list) or annotations.has(self.name, location):
            return
        evaluated = self._evaluated(instance, location, annotations)
        if evaluated is None:
            return
        remaining = [index for index in range(len(instance)) if index not in evaluated]
        builder = ValidationResultBuilder(self, location)
        for index in remaining:
            builder.add(evaluate_subschema(self.schema, instance[index], location.append(index), annotations))
        builder.raise_if_errors(IssueKind.unevaluated_items_failed)
        if remaining:
            annotations.insert(self, location, True)


class UnevaluatedProperties(Applicator):
    """Applies to object members no adjacent or nested keyword evaluated."""

    name = "unevaluatedProperties"
    merge_annotations = staticmethod(_union)

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.schema = compile_subschema(value, context)

    def validate(self, instance, location, annotations, scope):
        if not isinstance(instance, dict) or annotations.has(self.name, location):
            return
        evaluated: set[str] = set()
        for keyword in ("properties", "patternProperties", "additionalProperties"):
            evaluated.update(annotations.value(keyword, location, frozenset()))
        remaining = [name for name in instance if name not in evaluated]
        builder = ValidationResultBuilder(self, location)
        for name in remaining:
            builder.add(evaluate_subschema(self.schema, instance[name], location.append(name), annotations))
        builder.raise_if_errors(IssueKind.unevaluated_property_failed)
        annotations.insert(self, location, frozenset(remaining))


APPLICATORS: tuple[type[Keyword], ...] = (
    PrefixItems, Items, Contains,
    Properties, PatternProperties, AdditionalProperties, PropertyNames,
    AllOf, AnyOf, OneOf, Not,
    If, Then, Else,
    DependentSchemas,
    UnevaluatedItems, UnevaluatedProperties,
)
