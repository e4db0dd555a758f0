"""Issue kinds — compile-time schema issues and validation-time keyword issues."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jv.models.results import ValidationError


class SchemaIssueKind(str, Enum):
    schema_should_be_boolean_or_object = "schemaShouldBeBooleanOrObject"
    unsupported_required_vocabulary = "unsupportedRequiredVocabulary"
    invalid_vocabulary_format = "invalidVocabularyFormat"


class SchemaIssue(Exception):
    """A schema document cannot be compiled."""

    def __init__(self, kind: SchemaIssueKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)


class IssueKind(str, Enum):
    # type / equality
    type_mismatch = "typeMismatch"
    not_enum_case = "notEnumCase"
    constant_mismatch = "constantMismatch"
    # numbers
    not_multiple_of = "notMultipleOf"
    exceeds_maximum = "exceedsMaximum"
    exceeds_exclusive_maximum = "exceedsExclusiveMaximum"
    below_minimum = "belowMinimum"
    below_exclusive_minimum = "belowExclusiveMinimum"
    # strings
    exceeds_max_length = "exceedsMaxLength"
    below_min_length = "belowMinLength"
    pattern_mismatch = "patternMismatch"
    invalid_format = "invalidFormat"
    # arrays
    exceeds_max_items = "exceedsMaxItems"
    below_min_items = "belowMinItems"
    items_not_unique = "itemsNotUnique"
    contains_insufficient_matches = "containsInsufficientMatches"
    contains_excessive_matches = "containsExcessiveMatches"
    invalid_item = "invalidItem"
    # objects
    exceeds_max_properties = "exceedsMaxProperties"
    below_min_properties = "belowMinProperties"
    missing_required_property = "missingRequiredProperty"
    missing_dependent_property = "missingDependentProperty"
    invalid_property = "invalidProperty"
    invalid_pattern_property = "invalidPatternProperty"
    invalid_additional_property = "invalidAdditionalProperty"
    invalid_property_name = "invalidPropertyName"
    # composition / conditionals
    all_of_failed = "allOfFailed"
    any_of_failed = "anyOfFailed"
    one_of_failed = "oneOfFailed"
    not_failed = "notFailed"
    conditional_failed = "conditionalFailed"
    invalid_dependent_schema = "invalidDependentSchema"
    unevaluated_items_failed = "unevaluatedItemsFailed"
    unevaluated_property_failed = "unevaluatedPropertyFailed"
    # references
    invalid_reference = "invalidReference"
    reference_validation_failure = "referenceValidationFailure"
    # generic
    keyword_failure = "keywordFailure"
    false_schema = "falseSchema"
    maximum_depth_exceeded = "maximumDepthExceeded"


class ValidationIssue(Exception):
    """Raised by a keyword when the instance does not satisfy it.

    ``details`` holds the kind-specific data (expected/actual values, limits,
    offending keys); ``errors`` holds the nested failures of an applicator.
    """

    def __init__(
        self,
        kind: IssueKind,
        errors: list[ValidationError] | None = None,
        **details: Any,
    ):
        self.kind = kind
        self.errors = list(errors or [])
        self.details = details
        super().__init__(kind.value)
