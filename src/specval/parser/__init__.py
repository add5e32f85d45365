"""API document parser -- load, resolve ``$ref`` pointers, and enumerate operations.

This sub-package is the first half of the specval pipeline: turning a raw
OpenAPI 3.x document (JSON or YAML, local file, URL or stdin) into a fully
inlined dictionary plus the ordered list of operations to compile.

Typical usage::

    from specval.parser import enumerate_operations, load_document, resolve_refs

    result = resolve_refs(load_document("openapi.json"))
    selectors = enumerate_operations(result.document)

Sub-modules:

* :mod:`~specval.parser.loader` -- I/O layer plus format detection.
* :mod:`~specval.parser.resolver` -- Recursive ``$ref`` resolution collecting
  dangling, external and circular references as errors.
* :mod:`~specval.parser.selector` -- JSONPath-style operation lookups.
* :mod:`~specval.parser.enumerator` -- ``paths`` shape validation and
  :class:`~specval.models.OperationSelector` extraction.
"""

from specval.parser.enumerator import enumerate_operations
from specval.parser.loader import load_document, reject_swagger2
from specval.parser.resolver import ResolutionResult, resolve_refs
from specval.parser.selector import select, select_one

__all__ = [
    "enumerate_operations",
    "load_document",
    "reject_swagger2",
    "ResolutionResult",
    "resolve_refs",
    "select",
    "select_one",
]
