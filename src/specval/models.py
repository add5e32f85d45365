"""Canonical Pydantic models shared across all specval modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration** -- :class:`GeneratorConfig`, the effective settings of one
run after :func:`~specval.config.resolve_config` merged CLI flags,
environment variables and ``specval.json``.

**Pipeline entities** -- derived once per run from the resolved document and
never mutated afterwards (all are frozen):
    :class:`HTTPMethod`, :class:`ParameterLocation`,
    :class:`OperationSelector`, :class:`ParameterSpec`,
    :class:`RequestBodySpec`, :class:`ExactStatusCode`,
    :class:`StatusCodeRange`, :class:`ResponseVariant` and
    :class:`GeneratedModule`.

**Results** -- :class:`GenerationResult`, returned by
:func:`~specval.pipeline.generate`.

Status-code patterns are a discriminated union on ``kind`` so that the
response compiler handles every variant explicitly.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class GeneratorConfig(BaseModel):
    """Effective settings for one generation run.

    ``input`` may be a file path, an ``http(s)://`` URL or ``-`` for stdin.
    ``output`` is always an absolute directory path once resolved.
    """

    input: str
    output: Path
    overwrite: bool = False
    workers: int = Field(default=4, ge=1, description="Threads used to compile and write")
    dry_run: bool = False


# --- Pipeline entities ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field.

    Only :attr:`PATH` and :attr:`QUERY` are compiled into validators.
    """

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class OperationSelector(BaseModel):
    """Identifies exactly one operation of the resolved document.

    ``operation_id`` is carried along for diagnostics only; artifact names
    are derived from ``path`` and ``method``.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None

    def describe(self) -> str:
        """Return ``"GET /users/{id}"`` for messages."""
        return f"{self.method.value.upper()} {self.path}"


class ParameterSpec(BaseModel):
    """A single path or query parameter of an operation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    schema_: Any = Field(default=None, alias="schema")


class RequestBodySpec(BaseModel):
    """The single media type accepted by an operation's request body.

    ``required`` is recorded but the generated request validator always
    requires the body once a ``requestBody`` is declared.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    required: bool = False
    content_type: str
    schema_: Any = Field(default=None, alias="schema")


class ExactStatusCode(BaseModel):
    """A status key such as ``"404"``: matches that code only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exact"] = "exact"
    code: int


class StatusCodeRange(BaseModel):
    """A wildcard status key such as ``"2XX"``: inclusive ``[low, high]``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    low: int
    high: int

    def __contains__(self, code: int) -> bool:
        return self.low <= code <= self.high


StatusCodePattern = Annotated[
    Union[ExactStatusCode, StatusCodeRange], Field(discriminator="kind")
]


class ResponseVariant(BaseModel):
    """One declared response of an operation: status pattern, media type, body."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_key: str = Field(description="Status key as written in the document")
    status: StatusCodePattern
    content_type: str
    schema_: Any = Field(default=None, alias="schema")


class GeneratedModule(BaseModel):
    """A unit of generated source, written by the emitter under ``file_name``."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    source_text: str


# --- Results ---


class GenerationResult(BaseModel):
    """Summary of a finished run, returned by :func:`~specval.pipeline.generate`."""

    output_dir: Path
    operations: list[OperationSelector] = Field(default_factory=list)
    modules: list[GeneratedModule] = Field(default_factory=list)
    written: list[Path] = Field(
        default_factory=list, description="Paths written, empty on a dry run"
    )
