"""Compile operations of a resolved API document into validator source.

Typical usage::

    from specval.compiler import PydanticTranslator, compile_operation

    modules = compile_operation(document, selector, PydanticTranslator())

Sub-modules:

* :mod:`~specval.compiler.translator` -- JSON Schema to pydantic type
  expressions, behind the :class:`SchemaTranslator` protocol.
* :mod:`~specval.compiler.parameters` -- Path and query parameter objects.
* :mod:`~specval.compiler.request_body` -- The single-content-type body.
* :mod:`~specval.compiler.responses` -- Per-status variants and their union.
* :mod:`~specval.compiler.modules` -- Jinja2 rendering of complete modules.
"""

from specval.compiler.modules import compile_operation, types_module
from specval.compiler.translator import PydanticTranslator, SchemaTranslator

__all__ = [
    "compile_operation",
    "PydanticTranslator",
    "SchemaTranslator",
    "types_module",
]
