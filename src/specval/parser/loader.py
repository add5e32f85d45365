"""Read the raw API document.

:func:`load_document` accepts a local path, an ``http(s)://`` URL or ``-``
for stdin and returns the decoded mapping. The text is read first, then
decoded by :func:`parse_document`. The format is taken from the file suffix
or the response ``Content-Type``. Without either, JSON is tried before YAML.

:func:`reject_swagger2` refuses Swagger 2.x documents, whose parameter and
body layout the compilers do not understand.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from specval.exceptions import FileSystemError, SpecParseError, SpecShapeError

FETCH_TIMEOUT = 30.0

_URL_SCHEMES = ("http://", "https://")
_SUFFIX_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_document(source: str) -> dict[str, Any]:
    """Load the API document named by *source*.

    Raises:
        FileSystemError: If a local file is missing or unreadable, or stdin
            cannot be read.
        SpecParseError: If a URL cannot be fetched, or the text is empty or
            not a JSON/YAML mapping.
    """
    if source == "-":
        text, fmt = _read_stdin(), None
        if not text.strip():
            raise SpecParseError("No input received from stdin")
    else:
        if source.startswith(_URL_SCHEMES):
            text, fmt = _fetch(source)
        else:
            path = Path(source)
            text, fmt = _read_file(path), _SUFFIX_FORMATS.get(path.suffix.lower())
        if not text.strip():
            raise SpecParseError(f"API document is empty: {source}")

    return parse_document(text, fmt)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise FileSystemError(f"Failed to read from stdin: {exc}") from exc


def _read_file(path: Path) -> str:
    if not path.is_file():
        raise FileSystemError(f"file {path} does not exist")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(f"cannot access file {path}, check your permissions") from exc


def _fetch(url: str) -> tuple[str, Optional[str]]:
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    return response.text, _format_from_media_type(response.headers.get("content-type", ""))


def _format_from_media_type(value: str) -> Optional[str]:
    media_type = value.split(";", 1)[0].strip().lower()
    if media_type.endswith("json"):
        return "json"
    if "yaml" in media_type or "yml" in media_type:
        return "yaml"
    return None


def parse_document(text: str, fmt: Optional[str] = None) -> dict[str, Any]:
    """Decode *text* as ``fmt`` (``"json"``, ``"yaml"`` or ``None`` to guess).

    A guess tries JSON first since its errors are clearer for JSON input.

    Raises:
        SpecParseError: If the text cannot be decoded or its root is not a
            mapping.
    """
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SpecParseError(f"Invalid JSON: {exc}") from exc
    elif fmt == "yaml":
        data = _load_yaml(text)
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            data = _load_yaml(text, json_error=exc)

    if not isinstance(data, dict):
        kind = "empty document" if data is None else type(data).__name__
        raise SpecParseError(f"API document must be a JSON/YAML object (got {kind})")
    return data


def _load_yaml(text: str, json_error: Optional[Exception] = None) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        details = [f"JSON error: {json_error}"] if json_error else []
        details.append("YAML error: " + " ".join(str(exc).split()))
        raise SpecParseError(
            "Failed to parse API document as JSON or YAML: " + "; ".join(details)
        ) from exc


def reject_swagger2(document: dict[str, Any]) -> None:
    """Raise :class:`SpecShapeError` for Swagger 2.x documents.

    Documents without an ``openapi`` field are accepted as long as they are
    not Swagger 2.x; the enumerator validates the parts that matter.
    """
    if "swagger" in document:
        raise SpecShapeError(
            f"Swagger {document['swagger']} is not supported, "
            "only OpenAPI 3.x documents are"
        )
