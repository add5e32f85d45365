"""Compile an operation's declared responses into one response validator.

Each status key becomes a closed object validator over
``{statusCode, contentType, body}``:

* ``statusCode`` -- ``Literal[<code>]`` for an exact key such as ``"404"``,
  or an inclusive integer range for a wildcard key such as ``"2XX"``
  (``X -> 0`` gives the lower bound, ``X -> 9`` the upper one). The OpenAPI
  ``default`` key covers every status from 100 to 599.
* ``contentType`` -- ``Literal["<media type>"]``; the status must declare
  exactly one media type.
* ``body`` -- the translated schema of that media type.

The operation-level validator is ``Any`` without responses, the single
per-status validator for one response, and the ``Union`` of all of them
otherwise. Union members follow document order and carry no priority: a
value is valid if it matches at least one of them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from specval.compiler.shapes import ResponsesShape, single_content
from specval.compiler.source import FieldSource, constrained, model_expression, python_literal
from specval.compiler.translator import SchemaTranslator
from specval.exceptions import SpecShapeError
from specval.models import (
    ExactStatusCode,
    OperationSelector,
    ResponseVariant,
    StatusCodePattern,
    StatusCodeRange,
)
from specval.parser.enumerator import validate_shape
from specval.parser.selector import format_query, select_one

_STATUS_KEY_RE = re.compile(r"^[1-5][0-9X]{2}$")

DEFAULT_STATUS_RANGE = StatusCodeRange(low=100, high=599)


@dataclass
class CompiledResponses:
    """Source fragments of a responses module.

    Attributes:
        models: ``(class name, create_model expression)`` per declared status,
            in document order.
        validator: Type expression combining every per-status model.
    """

    models: list[tuple[str, str]] = field(default_factory=list)
    validator: str = "Any"


def parse_status_key(key: str) -> StatusCodePattern:
    """Parse a ``responses`` key into a status-code pattern.

    Raises:
        SpecShapeError: If *key* is neither ``default`` nor a three-character
            code whose digits may be replaced by ``X``.
    """
    if key == "default":
        return DEFAULT_STATUS_RANGE
    if not _STATUS_KEY_RE.match(key):
        raise SpecShapeError(
            f"invalid response status {key!r}: expected a code such as '200', "
            "a range such as '2XX', or 'default'"
        )
    if "X" in key:
        return StatusCodeRange(low=int(key.replace("X", "0")), high=int(key.replace("X", "9")))
    return ExactStatusCode(code=int(key))


def status_validator(pattern: StatusCodePattern) -> str:
    """Render the ``statusCode`` type expression for *pattern*."""
    if isinstance(pattern, StatusCodeRange):
        return constrained("StrictInt", {"ge": pattern.low, "le": pattern.high})
    if isinstance(pattern, ExactStatusCode):
        return f"Literal[{pattern.code}]"
    raise TypeError(f"unknown status pattern {pattern!r}")


def collect_responses(document: dict[str, Any], selector: OperationSelector) -> list[ResponseVariant]:
    """Return one :class:`ResponseVariant` per declared status, in document order.

    Raises:
        CountMismatchError: If ``responses`` does not resolve to exactly one node.
        SpecShapeError: If the responses map or a status key is malformed.
        MultiContentTypeError: If a status has zero or several media types.
    """
    where = format_query(selector, "responses")
    raw = select_one(document, selector, "responses")
    if isinstance(raw, dict):
        # YAML reads unquoted status codes as integers.
        raw = {str(key): value for key, value in raw.items()}
    responses = validate_shape(ResponsesShape, raw, where, "responses").root

    variants = []
    for key, response in responses.items():
        content_type, media = single_content(response.content, f"{where}.{key}.content")
        variants.append(
            ResponseVariant(
                status_key=key,
                status=parse_status_key(key),
                content_type=content_type,
                schema=media.schema_,
            )
        )
    return variants


def compile_responses(
    document: dict[str, Any],
    selector: OperationSelector,
    translator: SchemaTranslator,
) -> CompiledResponses:
    """Compile every declared response of an operation.

    Args:
        document: The resolved API document.
        selector: The operation to compile.
        translator: Backend used for every body schema.

    Returns:
        The per-status model expressions and the combined validator.
    """
    compiled = CompiledResponses()
    for variant in collect_responses(document, selector):
        class_name = f"Response{variant.status_key.capitalize()}"
        body = translator.translate(variant.schema_, f"{class_name}Body")
        fields = [
            FieldSource("statusCode", status_validator(variant.status), True),
            FieldSource("contentType", f"Literal[{python_literal(variant.content_type)}]", True),
            FieldSource("body", body, body != "Any"),
        ]
        compiled.models.append((class_name, model_expression(class_name, fields, "forbid")))

    names = [name for name, _ in compiled.models]
    if len(names) > 1:
        compiled.validator = f"Union[{', '.join(names)}]"
    elif names:
        compiled.validator = names[0]
    return compiled
