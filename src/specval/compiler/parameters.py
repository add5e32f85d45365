"""Compile an operation's path or query parameters into an object validator.

The generated object is closed: it requires the declared required
parameters, allows the optional ones, and rejects every other key. An
operation that declares no ``parameters`` at all (neither on itself nor on its
path item) compiles to the closed empty object, which accepts ``{}`` only.

Path-item level parameters apply to every operation under the path;
operation-level parameters override them when they share ``name`` and ``in``.
Within one location, a duplicated name silently replaces the earlier field.
"""

from __future__ import annotations

from typing import Any, Optional

from specval.compiler.shapes import ParameterListShape, ParameterShape
from specval.compiler.source import FieldSource, model_expression, model_name
from specval.compiler.translator import SchemaTranslator
from specval.models import OperationSelector, ParameterLocation, ParameterSpec
from specval.parser.enumerator import validate_shape
from specval.parser.selector import format_query, select_one

MODEL_NAMES = {
    ParameterLocation.PATH: "PathParameters",
    ParameterLocation.QUERY: "QueryParameters",
}


def collect_parameters(
    document: dict[str, Any], selector: OperationSelector
) -> Optional[list[ParameterSpec]]:
    """Return the effective parameters of an operation.

    Returns:
        ``None`` when neither the operation nor its path item has a
        ``parameters`` field, otherwise the merged list (possibly empty).

    Raises:
        CountMismatchError: If the operation lookup does not match exactly once.
        SpecShapeError: If a parameter list is malformed.
    """
    operation = select_one(document, selector)
    path_item = document["paths"][selector.path]

    if "parameters" not in operation and "parameters" not in path_item:
        return None

    shared = validate_shape(
        ParameterListShape,
        path_item.get("parameters", []),
        f"paths.{selector.path}.parameters",
        "request parameters",
    ).root
    own = validate_shape(
        ParameterListShape,
        operation.get("parameters", []),
        format_query(selector, "parameters"),
        "request parameters",
    ).root

    return [
        ParameterSpec(
            name=p.name,
            location=p.location,
            required=p.required,
            schema=p.schema_,
        )
        for p in _merge_parameters(shared, own)
    ]


def _merge_parameters(
    shared: list[ParameterShape], own: list[ParameterShape]
) -> list[ParameterShape]:
    """Merge path-item and operation parameters; operation entries win on ``(name, in)``."""
    overridden = {(p.name, p.location) for p in own}
    merged = [p for p in shared if (p.name, p.location) not in overridden]
    merged.extend(own)
    return merged


def compile_parameters(
    document: dict[str, Any],
    selector: OperationSelector,
    location: ParameterLocation,
    translator: SchemaTranslator,
) -> str:
    """Compile the *location* parameters of an operation into a model expression.

    Args:
        document: The resolved API document.
        selector: The operation to compile.
        location: :attr:`ParameterLocation.PATH` or :attr:`ParameterLocation.QUERY`.
        translator: Backend used for every parameter schema.

    Returns:
        A ``create_model(...)`` expression with ``extra="forbid"``.
    """
    name = MODEL_NAMES[location]
    specs = collect_parameters(document, selector)
    if specs is None:
        return model_expression(name, [], "forbid")

    fields: dict[str, FieldSource] = {}
    for spec in specs:
        if spec.location != location:
            continue
        fields[spec.name] = FieldSource(
            name=spec.name,
            type_expr=translator.translate(spec.schema_, model_name(spec.name)),
            required=spec.required,
        )

    return model_expression(name, list(fields.values()), "forbid")
