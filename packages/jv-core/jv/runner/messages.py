"""Jinja2 message templates for validation issues.

Only the issue kind and its details are stable; the text is a default that a
Context can override per kind via ``message_templates``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jinja2

from jv.models.issues import IssueKind

DEFAULT_TEMPLATES: dict[IssueKind, str] = {
    IssueKind.type_mismatch: "Expected type {{ expected | join(' or ') }} but found {{ actual }}",
    IssueKind.not_enum_case: "Value is not one of the allowed enum values",
    IssueKind.constant_mismatch: "Value does not match the constant {{ expected | tojson }}",
    IssueKind.not_multiple_of: "{{ number }} is not a multiple of {{ multiple_of }}",
    IssueKind.exceeds_maximum: "{{ number }} exceeds maximum value of {{ maximum }}",
    IssueKind.exceeds_exclusive_maximum: "{{ number }} must be less than {{ maximum }}",
    IssueKind.below_minimum: "{{ number }} is below minimum value of {{ minimum }}",
    IssueKind.below_exclusive_minimum: "{{ number }} must be greater than {{ minimum }}",
    IssueKind.exceeds_max_length: "String length {{ length }} exceeds maximum length of {{ max_length }}",
    IssueKind.below_min_length: "String length {{ length }} is below minimum length of {{ min_length }}",
    IssueKind.pattern_mismatch: "String does not match pattern {{ pattern }}",
    IssueKind.invalid_format: "{{ value | tojson }} is not a valid {{ format }}",
    IssueKind.exceeds_max_items: "Array has {{ count }} items, more than the maximum of {{ max_items }}",
    IssueKind.below_min_items: "Array has {{ count }} items, fewer than the minimum of {{ min_items }}",
    IssueKind.items_not_unique: "Array items are not unique",
    IssueKind.contains_insufficient_matches: (
        "Array contains {{ count }} matching items, at least {{ required }} required"
    ),
    IssueKind.contains_excessive_matches: (
        "Array contains {{ count }} matching items, at most {{ max_allowed }} allowed"
    ),
    IssueKind.invalid_item: "Array item is invalid",
    IssueKind.exceeds_max_properties: (
        "Object has {{ count }} properties, more than the maximum of {{ max_properties }}"
    ),
    IssueKind.below_min_properties: (
        "Object has {{ count }} properties, fewer than the minimum of {{ min_properties }}"
    ),
    IssueKind.missing_required_property: "Missing required property '{{ key }}'",
    IssueKind.missing_dependent_property: (
        "Property '{{ key }}' is required when '{{ dependent_on }}' is present"
    ),
    IssueKind.invalid_property: "Property is invalid",
    IssueKind.invalid_pattern_property: "Pattern property is invalid",
    IssueKind.invalid_additional_property: "Additional property is invalid",
    IssueKind.invalid_property_name: "Invalid property names: {{ names | join(', ') }}",
    IssueKind.all_of_failed: "Value does not match all schemas in allOf",
    IssueKind.any_of_failed: "Value does not match any schema in anyOf",
    IssueKind.one_of_failed: "Value matches {{ matched }} schemas in oneOf, exactly one required",
    IssueKind.not_failed: "Value must not match the schema in not",
    IssueKind.conditional_failed: "Value does not match the '{{ condition }}' schema",
    IssueKind.invalid_dependent_schema: "Value does not match the dependent schema for '{{ key }}'",
    IssueKind.unevaluated_items_failed: "Unevaluated items are invalid",
    IssueKind.unevaluated_property_failed: "Unevaluated properties are invalid",
    IssueKind.invalid_reference: "Could not resolve reference {{ reference }}",
    IssueKind.reference_validation_failure: "Value does not match the schema at {{ reference }}",
    IssueKind.keyword_failure: "Validation failed for keyword {{ keyword }}",
    IssueKind.false_schema: "Schema 'false' allows no value",
    IssueKind.maximum_depth_exceeded: "Evaluation exceeded the maximum depth of {{ depth }}",
}

_env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)


@lru_cache(maxsize=256)
def _compile(source: str) -> jinja2.Template:
    return _env.from_string(source)


def render_message(
    kind: IssueKind,
    details: dict[str, Any],
    overrides: dict[str, str] | None = None,
) -> str:
    """Render the message for an issue of *kind*.

    *overrides* maps an issue kind value (``"belowMinimum"``) to a template
    source; templates see the issue details as variables.
    """
    source = (overrides or {}).get(kind.value) or DEFAULT_TEMPLATES[kind]
    return _compile(source).render(**details)
