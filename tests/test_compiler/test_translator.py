"""Tests for specval.compiler.translator.

Most tests evaluate the produced expression with the names a generated
module defines (taken from a rendered module), then validate sample values
through a ``TypeAdapter``.
"""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import TypeAdapter, ValidationError

from specval.compiler.modules import render_responses_module
from specval.compiler.responses import CompiledResponses
from specval.compiler.translator import PydanticTranslator, SchemaTranslator
from specval.models import HTTPMethod, OperationSelector


def _module_namespace() -> dict[str, Any]:
    # create_model reads the caller's module name from its globals.
    namespace: dict[str, Any] = {"__name__": __name__}
    selector = OperationSelector(path="/", method=HTTPMethod.GET)
    exec(render_responses_module(selector, CompiledResponses()), namespace)  # noqa: S102
    return namespace


_NAMESPACE = _module_namespace()


def _adapter(schema: Any) -> TypeAdapter:
    expr = PydanticTranslator().translate(schema, "Sample")
    return TypeAdapter(eval(expr, dict(_NAMESPACE)))  # noqa: S307


def _accepts(schema: Any, value: Any) -> bool:
    try:
        _adapter(schema).validate_python(value)
    except ValidationError:
        return False
    return True


class TestProtocol:
    def test_pydantic_translator_satisfies_protocol(self) -> None:
        translator: SchemaTranslator = PydanticTranslator()
        assert translator.translate({"type": "string"}) == "StrictStr"


class TestPermissiveSchemas:
    @pytest.mark.parametrize("schema", [None, {}, True, "string", []])
    def test_any(self, schema: Any) -> None:
        assert PydanticTranslator().translate(schema) == "Any"

    def test_unknown_type(self) -> None:
        assert PydanticTranslator().translate({"type": "file"}) == "Any"


class TestScalars:
    def test_string_is_strict(self) -> None:
        assert _accepts({"type": "string"}, "a")
        assert not _accepts({"type": "string"}, 1)

    def test_integer_is_strict(self) -> None:
        assert _accepts({"type": "integer"}, 3)
        assert not _accepts({"type": "integer"}, "3")
        assert not _accepts({"type": "integer"}, True)

    def test_number_accepts_integers(self) -> None:
        assert _accepts({"type": "number"}, 1.5)
        assert _accepts({"type": "number"}, 2)
        assert not _accepts({"type": "number"}, "2")

    def test_boolean(self) -> None:
        assert _accepts({"type": "boolean"}, False)
        assert not _accepts({"type": "boolean"}, 0)

    def test_null(self) -> None:
        assert PydanticTranslator().translate({"type": "null"}) == "None"
        assert _accepts({"type": "null"}, None)

    def test_string_constraints(self) -> None:
        schema = {"type": "string", "minLength": 2, "maxLength": 3, "pattern": "^[a-z]+$"}
        assert _accepts(schema, "ab")
        assert not _accepts(schema, "a")
        assert not _accepts(schema, "abcd")
        assert not _accepts(schema, "AB")

    def test_look_ahead_pattern_in_object(self) -> None:
        schema = {
            "type": "object",
            "properties": {"code": {"type": "string", "pattern": "^(?!foo).*$"}},
        }
        assert 'regex_engine="python-re"' in PydanticTranslator().translate(schema)
        assert _accepts(schema, {"code": "bar"})
        assert not _accepts(schema, {"code": "foo1"})

    def test_inclusive_bounds(self) -> None:
        schema = {"type": "integer", "minimum": 1, "maximum": 10}
        assert _accepts(schema, 1)
        assert _accepts(schema, 10)
        assert not _accepts(schema, 0)
        assert not _accepts(schema, 11)

    def test_boolean_exclusive_bounds(self) -> None:
        schema = {"type": "integer", "minimum": 1, "exclusiveMinimum": True}
        assert not _accepts(schema, 1)
        assert _accepts(schema, 2)

    def test_numeric_exclusive_bounds(self) -> None:
        schema = {"type": "number", "exclusiveMaximum": 5}
        assert _accepts(schema, 4.9)
        assert not _accepts(schema, 5)

    def test_multiple_of(self) -> None:
        schema = {"type": "integer", "multipleOf": 5}
        assert _accepts(schema, 10)
        assert not _accepts(schema, 7)


class TestEnumsAndUnions:
    def test_enum(self) -> None:
        expr = PydanticTranslator().translate({"type": "string", "enum": ["a", "b"]})
        assert expr == 'Literal["a", "b"]'
        assert not _accepts({"enum": ["a", "b"]}, "c")

    def test_const(self) -> None:
        expr = PydanticTranslator().translate({"const": 3})
        assert expr == "Annotated[Literal[3], _one_of(3)]"
        assert _accepts({"const": 3}, 3)
        assert not _accepts({"const": 3}, 4)

    @pytest.mark.parametrize("schema", [{"const": 1}, {"type": "integer", "enum": [1, 2]}])
    def test_booleans_are_not_integers(self, schema: dict[str, Any]) -> None:
        assert _accepts(schema, 1)
        assert not _accepts(schema, True)

    def test_boolean_const(self) -> None:
        assert _accepts({"const": True}, True)
        assert not _accepts({"const": True}, 1)

    def test_float_const(self) -> None:
        schema = {"const": 1.5}
        assert PydanticTranslator().translate(schema) == "Annotated[Any, _one_of(1.5)]"
        assert _accepts(schema, 1.5)
        assert not _accepts(schema, "nope")
        assert not _accepts(schema, 2.5)

    def test_number_enum(self) -> None:
        schema = {"type": "number", "enum": [0.5, 1.5]}
        assert _accepts(schema, 0.5)
        assert not _accepts(schema, 2.5)

    def test_object_enum(self) -> None:
        schema = {"enum": [{"a": [1, None]}, "b"]}
        assert PydanticTranslator().translate(schema) == (
            'Annotated[Any, _one_of({"a": [1, None]}, "b")]'
        )
        assert _accepts(schema, {"a": [1, None]})
        assert _accepts(schema, "b")
        assert not _accepts(schema, {"a": [1]})

    def test_nullable_enum(self) -> None:
        schema = {"type": "number", "enum": [0.5], "nullable": True}
        assert _accepts(schema, None)
        assert not _accepts(schema, 1.0)

    def test_one_of(self) -> None:
        schema = {"oneOf": [{"type": "string"}, {"type": "integer"}]}
        assert PydanticTranslator().translate(schema) == "Union[StrictStr, StrictInt]"
        assert _accepts(schema, "x")
        assert _accepts(schema, 1)
        assert not _accepts(schema, 1.5)

    def test_type_list(self) -> None:
        schema = {"type": ["string", "null"]}
        assert PydanticTranslator().translate(schema) == "Optional[StrictStr]"

    def test_nullable(self) -> None:
        schema = {"type": "integer", "nullable": True}
        assert _accepts(schema, None)
        assert _accepts(schema, 1)


class TestArraysAndObjects:
    def test_array(self) -> None:
        schema = {"type": "array", "items": {"type": "integer"}, "minItems": 1}
        assert _accepts(schema, [1, 2])
        assert not _accepts(schema, [])
        assert not _accepts(schema, ["1"])

    def test_array_without_items(self) -> None:
        assert PydanticTranslator().translate({"type": "array"}) == "List[Any]"

    def test_object_required_and_optional(self) -> None:
        schema = {
            "type": "object",
            "required": ["id"],
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
        }
        assert _accepts(schema, {"id": 1})
        assert _accepts(schema, {"id": 1, "name": "x"})
        assert not _accepts(schema, {"name": "x"})

    def test_object_is_open_by_default(self) -> None:
        schema = {"type": "object", "properties": {"id": {"type": "integer"}}}
        assert _accepts(schema, {"id": 1, "other": True})

    def test_additional_properties_false_closes_object(self) -> None:
        schema = {
            "type": "object",
            "properties": {"id": {"type": "integer"}},
            "additionalProperties": False,
        }
        assert _accepts(schema, {"id": 1})
        assert not _accepts(schema, {"id": 1, "other": True})

    def test_object_without_properties(self) -> None:
        assert PydanticTranslator().translate({"type": "object"}) == "Dict[str, Any]"

    def test_map_of_values(self) -> None:
        schema = {"type": "object", "additionalProperties": {"type": "integer"}}
        assert _accepts(schema, {"a": 1})
        assert not _accepts(schema, {"a": "1"})

    def test_closed_empty_object(self) -> None:
        schema = {"type": "object", "additionalProperties": False}
        assert _accepts(schema, {})
        assert not _accepts(schema, {"a": 1})

    def test_inferred_object(self) -> None:
        assert _accepts({"properties": {"a": {"type": "string"}}, "required": ["a"]}, {"a": "x"})

    def test_title_names_the_model(self) -> None:
        expr = PydanticTranslator().translate(
            {"title": "pet owner", "properties": {"a": {}}}, "Ignored"
        )
        assert expr.startswith('create_model(\n    "PetOwner",')

    def test_aliased_property(self) -> None:
        schema = {
            "type": "object",
            "required": ["x-id"],
            "properties": {"x-id": {"type": "string"}},
            "additionalProperties": False,
        }
        assert _accepts(schema, {"x-id": "a"})
        assert not _accepts(schema, {"x_id": "a"})

    def test_all_of_is_merged(self) -> None:
        schema = {
            "allOf": [
                {"type": "object", "required": ["a"], "properties": {"a": {"type": "string"}}},
                {"required": ["b"], "properties": {"b": {"type": "integer"}}},
            ]
        }
        assert _accepts(schema, {"a": "x", "b": 1})
        assert not _accepts(schema, {"a": "x"})

    def test_all_of_keeps_closed_object_closed(self) -> None:
        schema = {
            "allOf": [
                {"properties": {"a": {"type": "string"}}, "additionalProperties": False},
                {"properties": {"b": {"type": "string"}}, "additionalProperties": True},
            ]
        }
        assert _accepts(schema, {"a": "x", "b": "y"})
        assert not _accepts(schema, {"c": "z"})
