"""Tests for applicator keywords and annotation-driven evaluation."""

from jv.models.issues import IssueKind
from jv.runner.engine import validate


def _kinds(result):
    return [e.kind for e in result.iter_errors()]


class TestArrays:
    def test_prefix_items_then_items(self):
        schema = {
            "prefixItems": [{"type": "integer"}, {"type": "string"}],
            "items": {"type": "integer"},
        }
        assert validate(schema, [1, "x", 2, 3]).valid
        result = validate(schema, [1, "x", True])
        assert not result.valid
        leaves = result.leaf_errors()
        assert len(leaves) == 1
        assert str(leaves[0].instance_location) == "/2"
        assert str(leaves[0].keyword_location) == "/items/type"
        assert result.errors[0].kind == IssueKind.invalid_item

    def test_prefix_items_failure(self):
        result = validate({"prefixItems": [{"type": "string"}]}, [1, 2])
        assert _kinds(result) == [IssueKind.invalid_item, IssueKind.type_mismatch]
        assert str(result.leaf_errors()[0].instance_location) == "/0"

    def test_items_false_after_prefix(self):
        schema = {"prefixItems": [True, True], "items": False}
        assert validate(schema, [1, 2]).valid
        assert not validate(schema, [1, 2, 3]).valid

    def test_contains(self):
        schema = {"contains": {"type": "integer"}}
        assert validate(schema, ["a", 1]).valid
        result = validate(schema, ["a", "b"])
        assert _kinds(result) == [IssueKind.contains_insufficient_matches]
        assert result.errors[0].details == {"count": 0, "required": 1}

    def test_min_contains_zero(self):
        schema = {"contains": {"type": "integer"}, "minContains": 0}
        assert validate(schema, ["a"]).valid
        assert validate(schema, []).valid

    def test_min_and_max_contains(self):
        schema = {"contains": {"type": "integer"}, "minContains": 2, "maxContains": 3}
        assert validate(schema, [1, "a", 2]).valid
        assert _kinds(validate(schema, [1, "a"])) == [IssueKind.contains_insufficient_matches]
        assert _kinds(validate(schema, [1, 2, 3, 4])) == [IssueKind.contains_excessive_matches]

    def test_contains_bounds_without_contains_are_ignored(self):
        assert validate({"minContains": 5}, [1]).valid

    def test_items_ignores_prefix_items_behind_ref(self):
        schema = {"$defs": {"p": {"prefixItems": [True]}}, "$ref": "#/$defs/p", "items": False}
        result = validate(schema, [1])
        assert not result.valid
        assert str(result.leaf_errors()[0].keyword_location) == "/items"
        assert validate(schema, []).valid

    def test_contains_bounds_ignore_contains_behind_ref(self):
        defs = {"$defs": {"c": {"contains": {"const": 1}}}, "$ref": "#/$defs/c"}
        assert validate({**defs, "maxContains": 1}, [1, 1]).valid
        assert validate({**defs, "minContains": 3}, [1, 1]).valid

    def test_items_skips_failed_prefix_positions(self):
        schema = {"prefixItems": [{"type": "string"}], "items": {"type": "integer"}}
        result = validate(schema, [1, 2])
        assert [str(e.instance_location) for e in result.leaf_errors()] == ["/0"]


class TestObjects:
    SCHEMA = {
        "properties": {"a": {"type": "integer"}},
        "patternProperties": {"^x-": {"type": "string"}},
        "additionalProperties": False,
    }

    def test_properties_family(self):
        assert validate(self.SCHEMA, {"a": 1, "x-note": "s"}).valid
        assert _kinds(validate(self.SCHEMA, {"a": "1"})) == [IssueKind.invalid_property, IssueKind.type_mismatch]
        assert _kinds(validate(self.SCHEMA, {"x-note": 1})) == [
            IssueKind.invalid_pattern_property, IssueKind.type_mismatch,
        ]

    def test_additional_property_location(self):
        result = validate(self.SCHEMA, {"other": 1})
        assert result.errors[0].kind == IssueKind.invalid_additional_property
        leaf = result.leaf_errors()[0]
        assert leaf.kind == IssueKind.false_schema
        assert str(leaf.instance_location) == "/other"
        assert str(leaf.keyword_location) == "/additionalProperties"

    def test_property_names(self):
        schema = {"propertyNames": {"maxLength": 3}}
        assert validate(schema, {"abc": 1}).valid
        result = validate(schema, {"abcd": 1, "ok": 2, "efghi": 3})
        [error] = result.errors
        assert error.kind == IssueKind.invalid_property_name
        assert error.details["names"] == ["abcd", "efghi"]
        assert error.message == "Invalid property names: abcd, efghi"
        assert [str(leaf.instance_location) for leaf in result.leaf_errors()] == ["", ""]

    def test_dependent_schemas(self):
        schema = {"dependentSchemas": {"a": {"required": ["b"]}}}
        assert validate(schema, {"b": 1}).valid
        result = validate(schema, {"a": 1})
        assert result.errors[0].kind == IssueKind.invalid_dependent_schema
        assert result.errors[0].details["key"] == "a"


class TestComposition:
    def test_all_of(self):
        schema = {"allOf": [{"type": "integer"}, {"minimum": 2}]}
        assert validate(schema, 3).valid
        assert _kinds(validate(schema, 1)) == [IssueKind.all_of_failed, IssueKind.below_minimum]

    def test_any_of(self):
        schema = {"anyOf": [{"type": "string"}, {"minimum": 2}]}
        assert validate(schema, "x").valid
        assert validate(schema, 3).valid
        result = validate(schema, 1.5)
        assert result.errors[0].kind == IssueKind.any_of_failed
        assert len(result.errors[0].errors) == 2

    def test_one_of(self):
        schema = {"oneOf": [{"type": "integer"}, {"minimum": 2}]}
        assert validate(schema, 1).valid
        assert validate(schema, "x").valid
        too_many = validate(schema, 3)
        assert too_many.errors[0].kind == IssueKind.one_of_failed
        assert too_many.errors[0].details == {"matched": 2}
        assert too_many.errors[0].errors == []
        none = validate(schema, 1.5)
        assert none.errors[0].details == {"matched": 0}
        assert len(none.errors[0].errors) == 2

    def test_not(self):
        assert validate({"not": {"type": "string"}}, 1).valid
        assert _kinds(validate({"not": {"type": "string"}}, "x")) == [IssueKind.not_failed]

    def test_if_then_else(self):
        schema = {
            "if": {"properties": {"kind": {"const": "card"}}},
            "then": {"required": ["number"]},
            "else": {"required": ["iban"]},
        }
        assert validate(schema, {"kind": "card", "number": "4111"}).valid
        assert validate(schema, {"kind": "bank", "iban": "FI00"}).valid
        result = validate(schema, {"kind": "card"})
        assert result.errors[0].kind == IssueKind.conditional_failed
        assert result.errors[0].details == {"condition": "then"}
        assert validate(schema, {"kind": "bank"}).errors[0].details == {"condition": "else"}

    def test_then_without_if_is_ignored(self):
        assert validate({"then": False, "else": False}, 1).valid


class TestUnevaluated:
    def test_properties_through_all_of(self):
        schema = {
            "properties": {"a": True},
            "allOf": [{"properties": {"b": True}}],
            "unevaluatedProperties": False,
        }
        assert validate(schema, {"a": 1, "b": 2}).valid
        result = validate(schema, {"a": 1, "b": 2, "c": 3})
        assert result.errors[0].kind == IssueKind.unevaluated_property_failed
        assert [str(e.instance_location) for e in result.leaf_errors()] == ["/c"]

    def test_any_of_merges_every_successful_branch(self):
        schema = {
            "anyOf": [{"properties": {"a": True}}, {"properties": {"b": True}}],
            "unevaluatedProperties": False,
        }
        assert validate(schema, {"a": 1, "b": 2}).valid

    def test_one_of_merges_only_the_winner(self):
        schema = {
            "oneOf": [
                {"properties": {"a": {"type": "integer"}}, "required": ["a"]},
                {"properties": {"b": {"type": "integer"}}, "required": ["b"]},
            ],
            "unevaluatedProperties": False,
        }
        assert validate(schema, {"a": 1}).valid
        assert not validate(schema, {"a": 1, "c": 2}).valid

    def test_not_discards_annotations(self):
        schema = {"not": {"not": {"properties": {"a": True}}}, "unevaluatedProperties": False}
        assert not validate(schema, {"a": 1}).valid

    def test_if_annotations_count(self):
        schema = {"if": {"properties": {"a": True}}, "unevaluatedProperties": False}
        assert validate(schema, {"a": 1}).valid

    def test_failed_branch_annotations_are_dropped(self):
        schema = {
            "anyOf": [{"properties": {"a": True}, "required": ["missing"]}, True],
            "unevaluatedProperties": False,
        }
        assert not validate(schema, {"a": 1}).valid

    def test_nested_unevaluated_properties(self):
        schema = {
            "properties": {"inner": {"properties": {"x": True}, "unevaluatedProperties": False}},
            "unevaluatedProperties": False,
        }
        assert validate(schema, {"inner": {"x": 1}}).valid
        result = validate(schema, {"inner": {"x": 1, "y": 2}})
        assert "/inner/y" in [str(e.instance_location) for e in result.leaf_errors()]

    def test_items(self):
        schema = {"prefixItems": [{"type": "integer"}], "unevaluatedItems": False}
        assert validate(schema, [1]).valid
        result = validate(schema, [1, 2])
        assert result.errors[0].kind == IssueKind.unevaluated_items_failed
        assert str(result.leaf_errors()[0].instance_location) == "/1"

    def test_items_after_contains(self):
        schema = {"contains": {"type": "string"}, "unevaluatedItems": {"type": "integer"}}
        assert validate(schema, ["a", 1]).valid
        assert not validate(schema, ["a", 1.5]).valid

    def test_items_keyword_evaluates_everything(self):
        schema = {"allOf": [{"items": True}], "unevaluatedItems": False}
        assert validate(schema, [1, 2, 3]).valid
