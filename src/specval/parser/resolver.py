"""Resolve ``$ref`` JSON Reference pointers in API documents.

OpenAPI documents use ``$ref`` pointers (e.g.
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. The compilers
only ever see a fully inlined document, so this module performs a recursive
deep-copy traversal replacing every ``$ref`` with the referenced object.

Problems do not raise here. Every unresolvable pointer, external reference
and reference cycle is recorded in :attr:`ResolutionResult.errors` and the
offending ``$ref`` dict is left in place; the pipeline turns a non-empty
error list into :class:`~specval.exceptions.ReferenceResolutionError`.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ResolutionResult:
    """The inlined document plus every problem met while resolving it."""

    document: dict[str, Any]
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class _Unresolvable(Exception):
    pass


def resolve_refs(document: dict[str, Any]) -> ResolutionResult:
    """Resolve all ``$ref`` pointers in *document*.

    Creates a deep copy of the input and recursively replaces every
    ``{"$ref": "#/..."}`` dict with the object it points to. Sibling keys
    next to a ``$ref`` are dropped, as OpenAPI 3.0 prescribes.

    Args:
        document: The raw API document, as returned by
            :func:`~specval.parser.loader.load_document`.

    Returns:
        A :class:`ResolutionResult`. Its ``errors`` list names each pointer
        that was external, dangling, or part of a cycle, together with the
        document location where it was found.

    Example::

        result = resolve_refs(load_document("petstore.yaml"))
        if not result.ok:
            raise ReferenceResolutionError(result.errors)
    """
    root = copy.deepcopy(document)
    errors: list[str] = []
    resolved = _deep_resolve(root, root, (), "#", errors)
    return ResolutionResult(document=resolved, errors=errors)


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single internal JSON Pointer (RFC 6901) through *root*.

    Raises:
        _Unresolvable: With a description of why the pointer does not resolve.
    """
    if not ref.startswith("#/"):
        raise _Unresolvable(f"external reference {ref!r} is not supported")

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise _Unresolvable(f"{ref!r}: key {segment!r} not found")
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                raise _Unresolvable(f"{ref!r}: invalid array index {segment!r}") from None
        else:
            raise _Unresolvable(
                f"{ref!r}: cannot navigate into {type(current).__name__}"
            )

    return current


def _escape(key: Any) -> str:
    return str(key).replace("~", "~0").replace("/", "~1")


def _deep_resolve(
    obj: Any,
    root: dict[str, Any],
    stack: tuple[str, ...],
    location: str,
    errors: list[str],
) -> Any:
    """Recursively resolve every ``$ref`` within *obj*.

    ``stack`` holds the pointers currently being expanded on this branch; a
    pointer that reappears on its own stack is a cycle. Each branch extends
    its own tuple so sibling references do not interfere.
    """
    if isinstance(obj, dict):
        ref = obj.get("$ref")
        if isinstance(ref, str):
            if ref in stack:
                errors.append(f"circular reference {ref!r} at {location}")
                return obj
            try:
                target = _resolve_ref(ref, root)
            except _Unresolvable as exc:
                errors.append(f"unresolved reference {exc} at {location}")
                return obj
            return _deep_resolve(target, root, stack + (ref,), location, errors)

        return {
            key: _deep_resolve(value, root, stack, f"{location}/{_escape(key)}", errors)
            for key, value in obj.items()
        }

    if isinstance(obj, list):
        return [
            _deep_resolve(item, root, stack, f"{location}/{index}", errors)
            for index, item in enumerate(obj)
        ]

    return obj
