"""Tests for JSON pointers, issues, results and message rendering."""

import pytest

from jv.models import (
    IssueKind,
    JSONPointer,
    SchemaIssue,
    SchemaIssueKind,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)
from jv.runner.messages import render_message


class TestJSONPointer:
    def test_root(self):
        root = JSONPointer()
        assert str(root) == ""
        assert root.fragment == "#"
        assert not root
        assert len(root) == 0

    def test_append_and_str(self):
        pointer = JSONPointer().append("properties", "a/b", 0)
        assert str(pointer) == "/properties/a~1b/0"
        assert pointer.last == 0

    def test_escaping_round_trip(self):
        pointer = JSONPointer.from_string("/a~0b/c~1d")
        assert pointer.tokens == ("a~b", "c/d")
        assert str(pointer) == "/a~0b/c~1d"

    def test_from_string_accepts_fragment(self):
        assert JSONPointer.from_string("#/items/2") == JSONPointer(["items", 2])
        assert JSONPointer.from_string("#") == JSONPointer()

    def test_from_string_rejects_relative(self):
        with pytest.raises(ValueError):
            JSONPointer.from_string("items")

    def test_string_and_int_tokens_compare_equal(self):
        assert JSONPointer(["items", "0"]) == JSONPointer(["items", 0])
        assert hash(JSONPointer(["items", "0"])) == hash(JSONPointer(["items", 0]))

    def test_resolve(self):
        doc = {"a": [{"b": 1}, {"b": 2}]}
        assert JSONPointer.from_string("/a/1/b").resolve(doc) == 2
        assert JSONPointer().resolve(doc) is doc

    def test_digit_keys_stay_strings(self):
        pointer = JSONPointer.from_string("/properties/01")
        assert pointer.tokens == ("properties", "01")
        doc = {"properties": {"01": "zero-one", "1": "one"}}
        assert pointer.resolve(doc) == "zero-one"

    def test_array_index_rejects_leading_zero(self):
        assert JSONPointer.from_string("/a/0").resolve({"a": [7]}) == 7
        with pytest.raises(KeyError):
            JSONPointer.from_string("/a/01").resolve({"a": [7, 8]})
        with pytest.raises(KeyError):
            JSONPointer.from_string("/a/-").resolve({"a": [7]})

    def test_resolve_missing(self):
        with pytest.raises(KeyError):
            JSONPointer.from_string("/a/5").resolve({"a": [1]})
        with pytest.raises(KeyError):
            JSONPointer.from_string("/a/b").resolve({"a": 1})

    def test_prefix_helpers(self):
        base = JSONPointer(["$defs", "x"])
        pointer = base.append("minimum")
        assert pointer.starts_with(base)
        assert pointer.relative_to(base) == JSONPointer(["minimum"])
        assert pointer.drop_last() == base
        assert JSONPointer(["a"]).concat(JSONPointer(["b"])) == JSONPointer(["a", "b"])


class TestIssues:
    def test_schema_issue_message(self):
        issue = SchemaIssue(SchemaIssueKind.unsupported_required_vocabulary, "https://x/vocab")
        assert issue.kind == SchemaIssueKind.unsupported_required_vocabulary
        assert "unsupportedRequiredVocabulary" in str(issue)
        assert "https://x/vocab" in str(issue)

    def test_validation_issue_details(self):
        issue = ValidationIssue(IssueKind.below_minimum, number=0, minimum=1)
        assert issue.details == {"number": 0, "minimum": 1}
        assert issue.errors == []

    def test_issue_kind_values_are_camel_case(self):
        assert IssueKind.missing_required_property.value == "missingRequiredProperty"
        assert IssueKind("falseSchema") is IssueKind.false_schema


class TestResults:
    def _error(self, location, kind=IssueKind.type_mismatch, children=()):
        return ValidationError(
            keyword="type",
            kind=kind,
            message="bad",
            keyword_location=JSONPointer.from_string(location),
            errors=list(children),
        )

    def test_walk_and_leaves(self):
        leaf_a = self._error("/properties/a/type")
        leaf_b = self._error("/properties/b/minimum", kind=IssueKind.below_minimum)
        parent = self._error("/properties", kind=IssueKind.invalid_property, children=[leaf_a, leaf_b])
        result = ValidationResult(valid=False, errors=[parent])

        assert [e.kind for e in result.iter_errors()] == [
            IssueKind.invalid_property, IssueKind.type_mismatch, IssueKind.below_minimum,
        ]
        assert result.leaf_errors() == [leaf_a, leaf_b]
        assert result.find("belowMinimum") == [leaf_b]
        assert not result.is_valid

    def test_rebased(self):
        error = self._error("/$defs/positive/minimum")
        moved = error.rebased(JSONPointer.from_string("/$defs/positive"), JSONPointer.from_string("/properties/age/$ref"))
        assert str(moved.keyword_location) == "/properties/age/$ref/minimum"
        assert str(error.keyword_location) == "/$defs/positive/minimum"

    def test_serializes_pointers_as_strings(self):
        error = self._error("/type")
        data = error.model_dump()
        assert data["keyword_location"] == "/type"
        assert data["kind"] == IssueKind.type_mismatch


class TestMessages:
    def test_default_template(self):
        message = render_message(IssueKind.below_minimum, {"number": 0, "minimum": 1})
        assert message == "0 is below minimum value of 1"

    def test_type_mismatch_joins_types(self):
        message = render_message(IssueKind.type_mismatch, {"expected": ["string", "null"], "actual": "integer"})
        assert message == "Expected type string or null but found integer"

    def test_override_by_kind_value(self):
        overrides = {"belowMinimum": "too small: {{ number }}"}
        assert render_message(IssueKind.below_minimum, {"number": 3}, overrides) == "too small: 3"

    def test_missing_detail_is_an_error(self):
        import jinja2

        with pytest.raises(jinja2.UndefinedError):
            render_message(IssueKind.below_minimum, {"number": 0})
