"""Translate JSON-Schema fragments into pydantic type expressions.

The compilers never look inside a schema themselves: they hand every schema
to a :class:`SchemaTranslator` and splice the returned source text into the
generated module. Any object implementing the protocol can be passed to
:func:`~specval.pipeline.generate` to target another validator backend.

:class:`PydanticTranslator` is the default backend. Its output only uses
names imported by the generated module header (``Annotated``, ``Any``,
``Dict``, ``List``, ``Literal``, ``Optional``, ``Union``, ``ConfigDict``,
``Field``, ``Strict*`` types, ``create_model`` and the ``_one_of`` helper).

Mapping rules:

* Missing, empty, or non-mapping schemas accept anything (``Any``).
* ``const`` and ``enum`` become ``Literal[...]`` when every value is a
  string or null. Other values are checked by the module's ``_one_of``
  helper, which keeps ``True`` apart from ``1``.
* ``oneOf``/``anyOf`` become ``Union[...]``; ``oneOf`` exclusivity is not
  enforced.
* ``allOf`` is flattened: properties and ``required`` lists are merged, other
  keywords are shallow-merged with later members winning.
* Scalars map to the pydantic strict types, so ``"1"`` is not an integer and
  ``1`` is not a string, matching JSON-Schema typing.
* ``pattern`` is matched with Python's ``re`` module, since every generated
  model sets ``regex_engine="python-re"``; look-around assertions work.
* Objects with ``properties`` become inline ``create_model(...)`` calls;
  ``additionalProperties: false`` closes them, anything else keeps unknown
  keys. Objects without properties become ``Dict[str, ...]``.
* OpenAPI 3.1 ``type`` arrays and OpenAPI 3.0 ``nullable: true`` produce
  ``Optional``/``Union`` types.
"""

from __future__ import annotations

from typing import Any, Protocol

from specval.compiler.source import (
    FieldSource,
    constrained,
    model_expression,
    model_name,
    python_literal,
    union,
)

_SCALAR_BASES = {
    "string": "StrictStr",
    "integer": "StrictInt",
    "number": "StrictFloat",
    "boolean": "StrictBool",
    "null": "None",
}

_STRING_CONSTRAINTS = {"minLength": "min_length", "maxLength": "max_length", "pattern": "pattern"}
_ARRAY_CONSTRAINTS = {"minItems": "min_length", "maxItems": "max_length"}


class SchemaTranslator(Protocol):
    """Converts a JSON-Schema-shaped value into validator source text."""

    def translate(self, schema: Any, name: str = "Model") -> str:
        """Return a type expression validating *schema*.

        Args:
            schema: Any JSON-Schema-shaped value; must be handled totally.
            name: Suggested model name for object schemas without a title.
        """
        ...


class PydanticTranslator:
    """Default :class:`SchemaTranslator` producing pydantic v2 type expressions."""

    def translate(self, schema: Any, name: str = "Model") -> str:
        if not isinstance(schema, dict) or not schema:
            return "Any"

        expr = self._translate_keywords(schema, name)
        if schema.get("nullable") is True:
            expr = union([expr, "None"])
        return expr

    def _translate_keywords(self, schema: dict[str, Any], name: str) -> str:
        if "const" in schema:
            return _enumeration([schema["const"]])

        enum = schema.get("enum")
        if isinstance(enum, list) and enum:
            return _enumeration(enum)

        for keyword in ("oneOf", "anyOf"):
            members = schema.get(keyword)
            if isinstance(members, list) and members:
                return union(self.translate(member, name) for member in members)

        if isinstance(schema.get("allOf"), list):
            return self.translate(_merge_all_of(schema), name)

        type_ = schema.get("type")
        if isinstance(type_, list):
            return union(self._translate_type(schema, t, name) for t in type_)
        if type_ is None:
            if "properties" in schema or "additionalProperties" in schema:
                type_ = "object"
            elif "items" in schema:
                type_ = "array"
        return self._translate_type(schema, type_, name)

    def _translate_type(self, schema: dict[str, Any], type_: Any, name: str) -> str:
        if type_ == "string":
            return constrained("StrictStr", _pick(schema, _STRING_CONSTRAINTS))
        if type_ in ("integer", "number"):
            return constrained(_SCALAR_BASES[type_], _numeric_constraints(schema))
        if type_ in ("boolean", "null"):
            return _SCALAR_BASES[type_]
        if type_ == "array":
            item = self.translate(schema.get("items"), f"{name}Item")
            return constrained(f"List[{item}]", _pick(schema, _ARRAY_CONSTRAINTS))
        if type_ == "object":
            return self._translate_object(schema, name)
        return "Any"

    def _translate_object(self, schema: dict[str, Any], name: str) -> str:
        title = schema.get("title")
        if isinstance(title, str) and title.strip():
            name = model_name(title)

        properties = schema.get("properties")
        additional = schema.get("additionalProperties", True)

        if not isinstance(properties, dict) or not properties:
            if isinstance(additional, dict):
                return f"Dict[str, {self.translate(additional, f'{name}Value')}]"
            if additional is False:
                return model_expression(name, [], "forbid")
            return "Dict[str, Any]"

        required = schema.get("required")
        required = set(required) if isinstance(required, list) else set()
        fields = [
            FieldSource(
                name=prop,
                type_expr=self.translate(prop_schema, model_name(prop)),
                required=prop in required,
            )
            for prop, prop_schema in properties.items()
        ]
        extra = "forbid" if additional is False else "allow"
        return model_expression(name, fields, extra)


def _enumeration(values: list[Any]) -> str:
    """Restrict a value to *values*, the members of ``enum`` or the ``const``.

    Strings and null need nothing but ``Literal``. Numbers, booleans and
    containers also go through the generated ``_one_of`` check, which compares
    by value but never lets ``True`` stand in for ``1``.
    """
    rendered = ", ".join(dict.fromkeys(python_literal(value) for value in values))
    if all(value is None or isinstance(value, str) for value in values):
        return f"Literal[{rendered}]"
    if all(value is None or isinstance(value, (str, int)) for value in values):
        return f"Annotated[Literal[{rendered}], _one_of({rendered})]"
    return f"Annotated[Any, _one_of({rendered})]"


def _pick(schema: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    return {target: schema[source] for source, target in mapping.items() if source in schema}


def _numeric_constraints(schema: dict[str, Any]) -> dict[str, Any]:
    """Collect bounds, supporting both 3.0 boolean and 3.1 numeric exclusivity."""
    constraints: dict[str, Any] = {}
    for bound, flag_key, inclusive, exclusive in (
        ("minimum", "exclusiveMinimum", "ge", "gt"),
        ("maximum", "exclusiveMaximum", "le", "lt"),
    ):
        flag = schema.get(flag_key)
        if bound in schema:
            key = exclusive if flag is True else inclusive
            constraints[key] = schema[bound]
        if isinstance(flag, (int, float)) and not isinstance(flag, bool):
            constraints[exclusive] = flag
    if "multipleOf" in schema:
        constraints["multiple_of"] = schema["multipleOf"]
    return constraints


def _merge_all_of(schema: dict[str, Any]) -> dict[str, Any]:
    """Flatten ``allOf`` into one schema (nested ``allOf`` is merged recursively)."""
    merged: dict[str, Any] = {}
    properties: dict[str, Any] = {}
    required: list[str] = []

    members = [m for m in schema["allOf"] if isinstance(m, dict)]
    base = {k: v for k, v in schema.items() if k != "allOf"}
    for member in members + [base]:
        if isinstance(member.get("allOf"), list):
            member = _merge_all_of(member)
        for key, value in member.items():
            if key == "properties" and isinstance(value, dict):
                properties.update(value)
            elif key == "required" and isinstance(value, list):
                required.extend(r for r in value if r not in required)
            elif key == "additionalProperties" and merged.get(key) is False:
                continue
            else:
                merged[key] = value

    if properties:
        merged["properties"] = properties
        merged.setdefault("type", "object")
    if required:
        merged["required"] = required
    return merged
