"""JSONPath-style lookups of operation nodes inside a resolved document.

A query such as ``paths[/users/{id}].get.responses`` is evaluated against the
document and returns *every* node that matches. Path keys match exactly and
method keys match case-insensitively, so a document declaring both ``get``
and ``GET`` under one path yields two matches. The compilers require exactly
one match and use :func:`select_one`, which turns any other count into
:class:`~specval.exceptions.CountMismatchError`.
"""

from __future__ import annotations

from typing import Any

from specval.exceptions import CountMismatchError
from specval.models import OperationSelector


def format_query(selector: OperationSelector, *tail: str) -> str:
    """Render the query for *selector* and *tail* keys, for use in messages."""
    query = f"paths[{selector.path}].{selector.method.value}"
    for key in tail:
        query += f".{key}"
    return query


def select(document: dict[str, Any], selector: OperationSelector, *tail: str) -> list[Any]:
    """Return every node matching ``paths[<path>].<method>[.<tail>...]``.

    Args:
        document: The resolved API document.
        selector: The operation to look up.
        *tail: Further keys to follow below the operation object, e.g.
            ``"responses"``.

    Returns:
        All matching nodes in document order; empty when nothing matches.
    """
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return []

    matches: list[Any] = []
    for path, path_item in paths.items():
        if path != selector.path or not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if not isinstance(method, str) or method.lower() != selector.method.value:
                continue
            matches.append(operation)

    for key in tail:
        matches = [node[key] for node in matches if isinstance(node, dict) and key in node]

    return matches


def select_one(document: dict[str, Any], selector: OperationSelector, *tail: str) -> Any:
    """Like :func:`select`, but require exactly one match.

    Raises:
        CountMismatchError: If the query resolves to zero or several nodes.
    """
    matches = select(document, selector, *tail)
    if len(matches) != 1:
        raise CountMismatchError(format_query(selector, *tail), len(matches))
    return matches[0]
