"""Typer application and CLI entry point for specval.

The application has a single command: read an OpenAPI 3.x document and write
one request validator and one responses validator per operation, plus the
shared ``validator_types.py``, into the output directory.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Errors raised by the pipeline are
:class:`~specval.exceptions.SpecvalError` instances; each is reported as one
``Error:`` line on stderr and mapped to its exit code.

See Also:
    :mod:`specval.config`: Resolution of flags, environment and ``specval.json``.
    :mod:`specval.output`: Output formatting initialised by the command.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from specval import __version__
from specval.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specval",
    help="Generate pydantic request/response validators from OpenAPI 3.x documents.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Handle ``--version`` before any other option is processed."""
    if value:
        typer.echo(f"specval {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send ``specval.*`` log records to stderr when ``--verbose`` is active."""
    logger = logging.getLogger("specval")
    if not verbose:
        return
    if not any(getattr(h, "_specval", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
        handler._specval = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _display_path(path: Path) -> str:
    """Return *path* relative to the working directory when possible."""
    try:
        relative = os.path.relpath(path, Path.cwd())
    except ValueError:
        # Different drives on Windows.
        return str(path)
    return relative


@app.command()
def generate_command(
    input: Optional[str] = typer.Option(
        None, "--input", "-i", help="API document: file path, http(s) URL, or '-' for stdin."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory receiving the generated validators."
    ),
    overwrite: bool = typer.Option(
        False, "--overwrite", help="Replace existing validator files."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", min=1, help="Threads used to compile and write. [default: 4]"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Compile and list file names without writing."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug lines on stderr."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print warnings and errors."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Never colour diagnostics."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the specval version and exit.",
    ),
) -> None:
    """Generate validator modules for every operation of an API document."""
    from specval.config import resolve_config
    from specval.exceptions import SpecvalError
    from specval.output import OutputManager, debug, error, print_data, set_output, success
    from specval.pipeline import generate

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    try:
        config = resolve_config(
            cli_input=input,
            cli_output=output,
            cli_overwrite=True if overwrite else None,
            cli_workers=workers,
            dry_run=dry_run,
        )
        debug(f"Input: {config.input}")
        debug(f"Output: {config.output}")
        result = generate(config)
    except SpecvalError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)

    if config.dry_run:
        for module in result.modules:
            print_data(module.file_name)
        success(
            f"OK: {len(result.modules)} file(s) would be generated in "
            f"{_display_path(result.output_dir)}"
        )
    else:
        success(f"OK: everything was generated in {_display_path(result.output_dir)}")


def _setup_signal_handlers() -> None:
    """Exit with status 130 and no traceback on Ctrl-C."""

    def _on_interrupt(signum: int, frame: Any) -> None:
        sys.stderr.write("\nInterrupted.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _on_interrupt)


def main() -> None:
    """CLI entry point invoked by the ``specval`` console script."""
    _setup_signal_handlers()
    app()
