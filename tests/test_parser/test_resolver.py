"""Tests for specval.parser.resolver."""

from __future__ import annotations

import copy
from typing import Any

from specval.parser.resolver import resolve_refs


class TestResolveRefs:
    """Test resolve_refs inlines internal references and collects errors."""

    def test_resolves_simple_ref(self) -> None:
        document = {
            "paths": {"/a": {"get": {"schema": {"$ref": "#/components/schemas/A"}}}},
            "components": {"schemas": {"A": {"type": "string"}}},
        }
        result = resolve_refs(document)
        assert result.ok
        assert result.document["paths"]["/a"]["get"]["schema"] == {"type": "string"}

    def test_does_not_mutate_original(self) -> None:
        document = {
            "x": {"$ref": "#/components/A"},
            "components": {"A": {"type": "integer"}},
        }
        original = copy.deepcopy(document)
        resolve_refs(document)
        assert document == original

    def test_resolves_nested_refs(self) -> None:
        document = {
            "x": {"$ref": "#/components/Outer"},
            "components": {
                "Outer": {"type": "object", "properties": {"inner": {"$ref": "#/components/Inner"}}},
                "Inner": {"type": "boolean"},
            },
        }
        result = resolve_refs(document)
        assert result.ok
        assert result.document["x"]["properties"]["inner"] == {"type": "boolean"}

    def test_resolves_refs_inside_lists(self) -> None:
        document = {
            "params": [{"$ref": "#/components/parameters/Id"}],
            "components": {"parameters": {"Id": {"name": "id", "in": "path"}}},
        }
        result = resolve_refs(document)
        assert result.document["params"] == [{"name": "id", "in": "path"}]

    def test_json_pointer_escaping(self) -> None:
        document: dict[str, Any] = {
            "x": {"$ref": "#/paths/~1users~1{id}/get"},
            "paths": {"/users/{id}": {"get": {"operationId": "getUser"}}},
        }
        result = resolve_refs(document)
        assert result.ok
        assert result.document["x"] == {"operationId": "getUser"}

    def test_array_index_pointer(self) -> None:
        document = {"x": {"$ref": "#/items/1"}, "items": ["a", "b"]}
        assert resolve_refs(document).document["x"] == "b"

    def test_same_ref_in_parallel_branches_is_not_a_cycle(self) -> None:
        document = {
            "a": {"$ref": "#/components/S"},
            "b": {"$ref": "#/components/S"},
            "components": {"S": {"type": "string"}},
        }
        result = resolve_refs(document)
        assert result.ok
        assert result.document["a"] == result.document["b"] == {"type": "string"}

    def test_petstore_fixture_resolves(self, petstore_raw: dict[str, Any]) -> None:
        result = resolve_refs(petstore_raw)
        assert result.ok
        schema = result.document["paths"]["/pets"]["post"]["requestBody"]["content"][
            "application/json"
        ]["schema"]
        assert schema["required"] == ["name"]


class TestResolutionErrors:
    """Problems are collected as error strings, never raised."""

    def test_missing_target(self) -> None:
        result = resolve_refs({"x": {"$ref": "#/components/Missing"}})
        assert not result.ok
        assert len(result.errors) == 1
        assert "'components'" in result.errors[0]
        assert "at #/x" in result.errors[0]

    def test_external_ref(self) -> None:
        result = resolve_refs({"x": {"$ref": "other.yaml#/A"}})
        assert not result.ok
        assert "external reference" in result.errors[0]

    def test_invalid_array_index(self) -> None:
        result = resolve_refs({"x": {"$ref": "#/items/7"}, "items": []})
        assert "invalid array index" in result.errors[0]

    def test_cycle_detected(self) -> None:
        document = {
            "components": {
                "Node": {
                    "type": "object",
                    "properties": {"next": {"$ref": "#/components/Node"}},
                },
            },
            "x": {"$ref": "#/components/Node"},
        }
        result = resolve_refs(document)
        assert not result.ok
        assert all("circular reference" in e for e in result.errors)

    def test_every_error_is_reported(self) -> None:
        document = {
            "a": {"$ref": "#/nope/1"},
            "b": {"$ref": "#/nope/2"},
        }
        result = resolve_refs(document)
        assert len(result.errors) == 2

    def test_location_escapes_slashes(self) -> None:
        document = {"paths": {"/a/b": {"get": {"$ref": "#/missing"}}}}
        result = resolve_refs(document)
        assert "at #/paths/~1a~1b/get" in result.errors[0]
