"""Tests for JSON value helpers, URIs, hashing, YAML I/O and annotation merging."""

import pytest

from jv.runner.annotations import AnnotationContainer, ContainsMatches, PrefixItemsCoverage
from jv.utils.hashing import canonical_json, fingerprint, generate_document_uri
from jv.utils.json_values import hashable_key, json_equal, json_type_of, merge_json
from jv.utils.uris import decode_fragment, normalize_uri, resolve_uri, split_fragment
from jv.utils.yaml_io import load_document


class TestJsonValues:
    @pytest.mark.parametrize("value, expected", [
        (None, "null"), (True, "boolean"), (3, "integer"), (3.0, "integer"),
        (3.5, "number"), ("s", "string"), ([], "array"), ({}, "object"),
    ])
    def test_json_type_of(self, value, expected):
        assert json_type_of(value) == expected

    def test_json_type_of_rejects_non_json(self):
        with pytest.raises(TypeError):
            json_type_of(object())

    def test_json_equal(self):
        assert json_equal({"a": [1, 2.0]}, {"a": [1.0, 2]})
        assert not json_equal(True, 1)
        assert not json_equal([1], [1, 1])
        assert not json_equal("1", 1)

    def test_hashable_key(self):
        assert hashable_key(1) == hashable_key(1.0)
        assert hashable_key({"a": 1, "b": 2}) == hashable_key({"b": 2, "a": 1})
        assert hashable_key(True) != hashable_key(1)

    def test_merge_json(self):
        assert merge_json([1], [2]) == [1, 2]
        assert merge_json({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}
        assert merge_json("old", "new") == "new"


class TestUris:
    def test_resolve(self):
        assert resolve_uri("https://example.com/a/b.json", "c.json") == "https://example.com/a/c.json"
        assert resolve_uri("https://example.com/a/b.json", "#/x") == "https://example.com/a/b.json#/x"
        assert resolve_uri("urn:uuid:1234", "#foo") == "urn:uuid:1234#foo"
        assert resolve_uri("urn:uuid:1234", "https://x.example/s") == "https://x.example/s"
        assert resolve_uri(None, "#") == ""

    def test_fragments(self):
        assert split_fragment("https://example.com/a#/b") == ("https://example.com/a", "/b")
        assert normalize_uri("https://example.com/a#") == "https://example.com/a"
        assert decode_fragment("/a%25b") == "/a%b"


class TestHashing:
    def test_canonical_json_sorts_keys(self):
        assert canonical_json({"b": 1, "a": [True, None]}) == '{"a":[true,null],"b":1}'

    def test_fingerprint_is_order_independent(self):
        assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
        assert fingerprint({"a": 1}) != fingerprint({"a": 2})

    def test_generated_uris_are_unique(self):
        first, second = generate_document_uri(), generate_document_uri()
        assert first.startswith("urn:uuid:")
        assert first != second


class TestYamlIO:
    def test_yaml_by_suffix(self, tmp_path):
        for name in ("schema.yaml", "schema.YML"):
            path = tmp_path / name
            path.write_text("type: object\nrequired:\n  - a\n")
            assert load_document(path) == {"type": "object", "required": ["a"]}

    def test_anything_else_is_json(self, tmp_path):
        path = tmp_path / "instance.txt"
        path.write_text('{"a": [1, 2.5, null]}')
        assert load_document(path) == {"a": [1, 2.5, None]}


class TestAnnotationMerging:
    def test_prefix_items_coverage(self):
        assert PrefixItemsCoverage(largest_index=1).merge(PrefixItemsCoverage(largest_index=3)).largest_index == 3
        assert PrefixItemsCoverage(largest_index=1).merge(PrefixItemsCoverage.every_index()).every
        assert PrefixItemsCoverage.every_index().to_json() is True

    def test_contains_matches(self):
        merged = ContainsMatches((0, 2)).merge(ContainsMatches((2, 3)))
        assert merged.count(10) == 3
        assert ContainsMatches(every=True).count(4) == 4
        assert merged.to_json() == [0, 2, 2, 3]

    def test_container_merge_uses_keyword_rule(self):
        from jv.compiler.compile_schema import compile_schema
        from jv.models.pointer import JSONPointer

        schema = compile_schema({"properties": {"a": True}, "title": "t"})
        properties, title = schema.keyword("properties"), schema.keyword("title")
        root = JSONPointer()

        first, second = AnnotationContainer(), AnnotationContainer()
        first.insert(properties, root, frozenset({"a"}))
        second.insert(properties, root, frozenset({"b"}))
        second.insert(title, root, "t")
        first.merge(second)

        assert first.value("properties", root) == frozenset({"a", "b"})
        assert first.has("title", root)
        assert len(first) == 2
        assert not first.has("title", root.append("x"))
