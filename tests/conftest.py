"""Shared test fixtures for specval.

Provides reusable fixtures for loading document fixtures, building small
in-memory documents, loading generated modules, and managing output state.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Optional

import pytest

from specval.compiler import PydanticTranslator
from specval.models import GeneratedModule
from specval.output import reset_output
from specval.parser import resolve_refs
from specval.runtime import load_generated_module


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stderr at creation time.
    When Typer's CliRunner redirects those streams during a test and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``SPECVAL_*`` variables of the developer's shell out of the tests."""
    for name in ("SPECVAL_INPUT", "SPECVAL_OUTPUT", "SPECVAL_OVERWRITE", "SPECVAL_WORKERS"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def petstore_raw(petstore_path: Path) -> dict[str, Any]:
    """Load the raw petstore document, ``$ref`` pointers included."""
    with open(petstore_path) as f:
        return json.load(f)


@pytest.fixture
def petstore(petstore_raw: dict[str, Any]) -> dict[str, Any]:
    """The petstore document with every ``$ref`` inlined."""
    result = resolve_refs(petstore_raw)
    assert result.ok, result.errors
    return result.document


@pytest.fixture
def translator() -> PydanticTranslator:
    return PydanticTranslator()


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a document as JSON under ``tmp_path``."""

    def _write(document: dict[str, Any], name: str = "openapi.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def load_module(tmp_path: Path) -> Callable[..., ModuleType]:
    """Return a helper writing a generated module to disk and importing it."""

    def _load(module: GeneratedModule, directory: Optional[Path] = None) -> ModuleType:
        target = (directory or tmp_path / "generated") / module.file_name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(module.source_text, encoding="utf-8")
        return load_generated_module(target)

    return _load
