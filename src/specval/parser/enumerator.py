"""Enumerate the operations declared by a resolved API document.

The ``paths`` object is validated against a Pydantic shape (path ->
method -> operation object) before anything is compiled, so that a malformed
document fails with one :class:`~specval.exceptions.SpecShapeError` naming the
offending node instead of a ``KeyError`` deep inside a compiler.

The single public entry point is :func:`enumerate_operations`. The shape
helpers :func:`validate_shape` and :func:`format_issues` are shared with the
compilers, which validate their own slices of the document the same way.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from specval.exceptions import SpecShapeError
from specval.models import HTTPMethod, OperationSelector

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

# Path-item keys that may sit next to the method keys.
_PATH_ITEM_FIELDS = frozenset({"summary", "description", "servers", "parameters"})

_Shape = TypeVar("_Shape", bound=BaseModel)


class _OperationShape(BaseModel):
    model_config = ConfigDict(extra="allow")

    operationId: Optional[str] = None


def format_issues(exc: ValidationError, prefix: str) -> str:
    """Render Pydantic validation issues as ``<node>: <message>`` joined by ``; ``."""
    lines = []
    for issue in exc.errors():
        node = prefix
        for part in issue["loc"]:
            node += f"[{part}]" if isinstance(part, int) else f".{part}"
        lines.append(f"{node}: {issue['msg']}")
    return "; ".join(lines)


def validate_shape(shape: type[_Shape], value: Any, where: str, what: str) -> _Shape:
    """Validate *value* against *shape*, raising :class:`SpecShapeError` on mismatch.

    Args:
        shape: The Pydantic model describing the expected structure.
        value: The document node to check.
        where: Location of the node, used as prefix of every issue.
        what: Short description of the node for the error headline.
    """
    try:
        return shape.model_validate(value)
    except ValidationError as exc:
        raise SpecShapeError(
            f"unexpected values in {what} specification: " + format_issues(exc, where)
        ) from None


def enumerate_operations(document: dict[str, Any]) -> list[OperationSelector]:
    """List one :class:`OperationSelector` per declared ``(path, method)`` pair.

    Order follows the document's own iteration order; artifact identity comes
    from naming, not from this order.

    Args:
        document: The fully resolved API document.

    Returns:
        The selectors, never empty.

    Raises:
        SpecShapeError: If ``paths`` is missing, is not a mapping, contains a
            malformed path item or operation, or declares no operation at all.
    """
    if "paths" not in document:
        raise SpecShapeError("no requests found in API document: 'paths' is missing")

    paths = document["paths"]
    if not isinstance(paths, dict):
        raise SpecShapeError(
            f"paths: expected a mapping of path to path item, got {type(paths).__name__}"
        )

    selectors: list[OperationSelector] = []
    for path, path_item in paths.items():
        where = f"paths.{path}"
        if not isinstance(path_item, dict):
            raise SpecShapeError(
                f"{where}: expected a mapping of method to operation, "
                f"got {type(path_item).__name__}"
            )

        for key, operation in path_item.items():
            if key not in _HTTP_METHODS:
                if key in _PATH_ITEM_FIELDS or str(key).startswith("x-"):
                    continue
                if isinstance(key, str) and key.lower() in _HTTP_METHODS:
                    raise SpecShapeError(f"{where}.{key}: HTTP method keys must be lower case")
                raise SpecShapeError(
                    f"{where}.{key}: not an HTTP method "
                    f"(expected one of {', '.join(sorted(_HTTP_METHODS))})"
                )

            op = validate_shape(_OperationShape, operation, f"{where}.{key}", "request")
            selectors.append(
                OperationSelector(
                    path=path,
                    method=HTTPMethod(key),
                    operation_id=op.operationId,
                )
            )

    if not selectors:
        raise SpecShapeError("no requests found in API document: 'paths' declares no operation")

    return selectors
