"""Orchestrate a generation run: load, resolve, enumerate, compile, emit.

Every step either succeeds for the whole document or raises; no file is
written before every operation compiled. Compilation runs per operation in a
thread pool. Results are collected in enumeration order and the first failure
is re-raised after the pool has joined.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from specval.compiler import PydanticTranslator, SchemaTranslator, compile_operation, types_module
from specval.emitter import check_collisions, emit
from specval.exceptions import ReferenceResolutionError
from specval.models import GeneratedModule, GenerationResult, GeneratorConfig, OperationSelector
from specval.parser import enumerate_operations, load_document, reject_swagger2, resolve_refs

logger = logging.getLogger(__name__)


def compile_document(
    document: dict[str, Any],
    translator: Optional[SchemaTranslator] = None,
    workers: int = 4,
) -> tuple[list[OperationSelector], list[GeneratedModule]]:
    """Compile every operation of a resolved document.

    Args:
        document: The fully resolved API document.
        translator: Schema backend, :class:`PydanticTranslator` by default.
        workers: Number of compiler threads.

    Returns:
        The selectors in enumeration order and the generated modules: two per
        operation, followed by the shared types module.

    Raises:
        SpecvalError: The first error raised while compiling, in enumeration
            order.
    """
    translator = translator or PydanticTranslator()
    selectors = enumerate_operations(document)
    logger.debug("Found %d operation(s)", len(selectors))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(compile_operation, document, selector, translator)
            for selector in selectors
        ]

    modules: list[GeneratedModule] = []
    for future in futures:
        modules.extend(future.result())
    modules.append(types_module())

    check_collisions(modules)
    return selectors, modules


def generate(
    config: GeneratorConfig,
    translator: Optional[SchemaTranslator] = None,
) -> GenerationResult:
    """Run the whole pipeline for *config*.

    Raises:
        FileSystemError: If the input is unreadable or an output write fails.
        SpecParseError: If the document cannot be decoded.
        SpecShapeError: If the document is not a usable OpenAPI 3.x document.
        ReferenceResolutionError: If any ``$ref`` cannot be inlined.
        CountMismatchError, MultiContentTypeError, NameCollisionError: From
            compilation.
        FileExistsError_: If an output file exists without ``overwrite``.
    """
    logger.debug("Loading %s", config.input)
    raw = load_document(config.input)
    reject_swagger2(raw)

    resolution = resolve_refs(raw)
    if not resolution.ok:
        raise ReferenceResolutionError(resolution.errors)

    selectors, modules = compile_document(resolution.document, translator, config.workers)

    written = []
    if not config.dry_run:
        written = emit(modules, config.output, config.overwrite, config.workers)

    return GenerationResult(
        output_dir=config.output,
        operations=selectors,
        modules=modules,
        written=written,
    )
