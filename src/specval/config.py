"""Configuration resolution with a project file and environment overrides.

A run needs an input document and an output directory, plus a few flags.
Each setting is resolved independently, highest precedence first:

1. CLI flags.
2. Environment variables (``SPECVAL_INPUT``, ``SPECVAL_OUTPUT``,
   ``SPECVAL_OVERWRITE``, ``SPECVAL_WORKERS``).
3. Project-local config (``./specval.json``).
4. Defaults.

Relative paths are resolved against the current working directory, so the
effective :class:`~specval.models.GeneratorConfig` always holds an absolute
output directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from specval.exceptions import ConfigError, InvalidUsageError
from specval.models import GeneratorConfig
from specval.parser.enumerator import format_issues

_PROJECT_CONFIG_FILENAME = "specval.json"

ENV_INPUT = "SPECVAL_INPUT"
ENV_OUTPUT = "SPECVAL_OUTPUT"
ENV_OVERWRITE = "SPECVAL_OVERWRITE"
ENV_WORKERS = "SPECVAL_WORKERS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ProjectConfig(BaseModel):
    """Contents of ``./specval.json``; every key is optional."""

    model_config = ConfigDict(extra="forbid")

    input: Optional[str] = None
    output: Optional[str] = None
    overwrite: Optional[bool] = None
    workers: Optional[int] = Field(default=None, ge=1)


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load project-local configuration from ``specval.json``.

    Args:
        directory: Directory holding the file, the working directory by default.

    Returns:
        The validated config, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or values.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        return ProjectConfig.model_validate(json.loads(text))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid project config at {path}: {format_issues(exc, _PROJECT_CONFIG_FILENAME)}"
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read project config at {path}: {exc}") from exc


# --- Environment ---


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid value for {name}: {value!r} (expected true or false)")


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r} (expected an integer)") from exc


def normalize_path(path: str) -> Path:
    """Return *path* as an absolute path, relative ones taken from the working directory."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return Path.cwd() / candidate


def _normalize_input(source: str) -> str:
    if source == "-" or source.startswith(("http://", "https://")):
        return source
    return str(normalize_path(source))


# --- Precedence resolution ---


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def resolve_config(
    cli_input: Optional[str] = None,
    cli_output: Optional[str] = None,
    cli_overwrite: Optional[bool] = None,
    cli_workers: Optional[int] = None,
    dry_run: bool = False,
) -> GeneratorConfig:
    """Resolve the effective configuration of a run.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments; ``None`` means not given)
        2. Environment variables (``SPECVAL_*``)
        3. Project config (``./specval.json``)
        4. Defaults

    Raises:
        InvalidUsageError: If no input document or output directory is set
            anywhere.
        ConfigError: If the project file or an environment value is invalid.
    """
    project = load_project_config() or ProjectConfig()

    env_input = os.environ.get(ENV_INPUT) or None
    env_output = os.environ.get(ENV_OUTPUT) or None

    source = _first(cli_input, env_input, project.input)
    if source is None:
        raise InvalidUsageError(
            f"no API document given, use --input or set {ENV_INPUT}"
        )
    output = _first(cli_output, env_output, project.output)
    if output is None:
        raise InvalidUsageError(
            f"no output directory given, use --output or set {ENV_OUTPUT}"
        )

    try:
        return GeneratorConfig(
            input=_normalize_input(source),
            output=normalize_path(output),
            overwrite=_first(cli_overwrite, _env_bool(ENV_OVERWRITE), project.overwrite, False),
            workers=_first(cli_workers, _env_int(ENV_WORKERS), project.workers, 4),
            dry_run=dry_run,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {format_issues(exc, 'config')}") from exc
