"""Compile an operation's request body into the ``body`` field of the request validator.

Without a ``requestBody`` the body accepts any value and may be omitted.
Otherwise the ``content`` map must hold exactly one media type, whose schema
is translated and required as ``body``.

The body's own ``required`` flag is parsed into
:class:`~specval.models.RequestBodySpec` but does not relax the validator: a
declared body is always required.
"""

from __future__ import annotations

from typing import Any, Optional

from specval.compiler.shapes import RequestBodyShape, single_content
from specval.compiler.source import FieldSource
from specval.compiler.translator import SchemaTranslator
from specval.models import OperationSelector, RequestBodySpec
from specval.parser.enumerator import validate_shape
from specval.parser.selector import format_query, select_one


def collect_request_body(
    document: dict[str, Any], selector: OperationSelector
) -> Optional[RequestBodySpec]:
    """Return the request body of an operation, or ``None`` when it declares none.

    Raises:
        CountMismatchError: If the operation lookup does not match exactly once.
        SpecShapeError: If ``requestBody`` is malformed.
        MultiContentTypeError: If ``content`` has zero or several media types.
    """
    operation = select_one(document, selector)
    if "requestBody" not in operation:
        return None

    where = format_query(selector, "requestBody")
    body = validate_shape(RequestBodyShape, operation["requestBody"], where, "request body")
    content_type, media = single_content(body.content, f"{where}.content")
    return RequestBodySpec(required=body.required, content_type=content_type, schema=media.schema_)


def compile_request_body(
    document: dict[str, Any],
    selector: OperationSelector,
    translator: SchemaTranslator,
) -> FieldSource:
    """Compile the ``body`` field of the request validator."""
    spec = collect_request_body(document, selector)
    if spec is None:
        return FieldSource(name="body", type_expr="Any", required=False)

    type_expr = translator.translate(spec.schema_, "Body")
    return FieldSource(name="body", type_expr=type_expr, required=type_expr != "Any")
