"""Render generated validator modules from compiled source fragments.

The compilers in this package return Python source fragments; this module
assembles them into complete files with the Jinja2 templates shipped under
``specval/templates``:

* ``request_validator.py.j2`` -- ``PathParameters``, ``QueryParameters`` and
  the closed ``Request`` envelope.
* ``responses_validator.py.j2`` -- one model per declared status and the
  combined validator.
* ``validator_types.py.j2`` -- ``TypedDict`` shapes shared by every
  operation, written once per run.

Every generated module exposes ``validator`` (a ``pydantic.TypeAdapter``)
and ``validate(value)``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from specval.compiler.parameters import compile_parameters
from specval.compiler.request_body import compile_request_body
from specval.compiler.responses import CompiledResponses, compile_responses
from specval.compiler.source import FieldSource, model_expression, python_literal
from specval.compiler.translator import SchemaTranslator
from specval.models import GeneratedModule, OperationSelector, ParameterLocation
from specval.naming import TYPES_FILE_NAME, request_file_name, responses_file_name

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
"""Path to the Jinja2 template directory (``specval/templates/``)."""

DISCLAIMER = "This file has been generated by specval, do not modify it"


@lru_cache(maxsize=1)
def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for module templates.

    Autoescape stays off since the templates produce Python source, not HTML.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def _docstring_text(text: str) -> str:
    """Escape *text* for use inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _render(template: str, **context: Any) -> str:
    return _create_jinja_env().get_template(template).render(disclaimer=DISCLAIMER, **context)


def render_request_module(
    selector: OperationSelector,
    path_parameters: str,
    query_parameters: str,
    body: FieldSource,
) -> str:
    """Render the request validator module of one operation.

    Args:
        selector: The operation, named in the module docstring.
        path_parameters: Model expression validating ``pathParameters``.
        query_parameters: Model expression validating ``queryParameters``.
        body: The ``body`` field of the envelope.
    """
    request = model_expression(
        "Request",
        [
            FieldSource("pathParameters", "PathParameters", True),
            FieldSource("queryParameters", "QueryParameters", True),
            body,
        ],
        "forbid",
    )
    return _render(
        "request_validator.py.j2",
        operation_doc=_docstring_text(selector.describe()),
        operation_literal=python_literal(selector.describe()),
        path_parameters=path_parameters,
        query_parameters=query_parameters,
        request=request,
    )


def render_responses_module(selector: OperationSelector, compiled: CompiledResponses) -> str:
    """Render the responses validator module of one operation."""
    return _render(
        "responses_validator.py.j2",
        operation_doc=_docstring_text(selector.describe()),
        operation_literal=python_literal(selector.describe()),
        models=compiled.models,
        validator=compiled.validator,
    )


def types_module() -> GeneratedModule:
    """Return the shared type-declaration module, identical for every run."""
    return GeneratedModule(
        file_name=TYPES_FILE_NAME,
        source_text=_render("validator_types.py.j2"),
    )


def compile_operation(
    document: dict[str, Any],
    selector: OperationSelector,
    translator: SchemaTranslator,
) -> list[GeneratedModule]:
    """Compile one operation into its request and responses modules.

    Args:
        document: The resolved API document.
        selector: The operation to compile.
        translator: Backend used for every embedded schema.

    Returns:
        ``[request module, responses module]``.

    Raises:
        SpecvalError: Any compiler error; nothing is rendered for the
            operation in that case.
    """
    logger.debug("Compiling %s", selector.describe())

    request_source = render_request_module(
        selector,
        compile_parameters(document, selector, ParameterLocation.PATH, translator),
        compile_parameters(document, selector, ParameterLocation.QUERY, translator),
        compile_request_body(document, selector, translator),
    )
    responses_source = render_responses_module(
        selector, compile_responses(document, selector, translator)
    )

    return [
        GeneratedModule(file_name=request_file_name(selector), source_text=request_source),
        GeneratedModule(file_name=responses_file_name(selector), source_text=responses_source),
    ]
