"""Terminal output for the ``specval`` command.

Two streams, following `clig.dev <https://clig.dev/>`_:

* **stdout** carries data only: the file names listed by ``--dry-run``.
* **stderr** carries every diagnostic line (``OK: ...``, ``Error: ...``,
  ``[debug] ...``).

Colour is off when ``NO_COLOR`` is set, when ``TERM=dumb`` or with
``--no-color``; the plain rendering is then written with :func:`print`.
Messages quote document locations such as ``paths[/users].get``, so they are
escaped before Rich renders them.

The command installs one :class:`OutputManager` with :func:`set_output`;
library code calls the module-level helpers (:func:`error`, :func:`debug`,
...) which delegate to it.
"""

from __future__ import annotations

import os
import sys
from typing import NamedTuple, Optional

from rich.console import Console
from rich.markup import escape


class _Level(NamedTuple):
    prefix: str
    style: Optional[str]
    quiet: bool  # shown in quiet mode
    verbose_only: bool


_LEVELS = {
    "success": _Level("", "green", quiet=False, verbose_only=False),
    "error": _Level("Error: ", "bold red", quiet=True, verbose_only=False),
    "debug": _Level("[debug] ", "dim", quiet=True, verbose_only=True),
}


class OutputManager:
    """Route data to stdout and diagnostics to stderr.

    Args:
        no_color: Render diagnostics without Rich styling.
        quiet: Hide the success line. Errors still show.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        # Generated file names and locations are long; never wrap them.
        self._stderr = Console(
            file=sys.stderr,
            stderr=True,
            no_color=self._no_color,
            soft_wrap=True,
        )

    def print_data(self, text: str) -> None:
        """Write one line of data to stdout, whatever the quiet flag says."""
        print(text, file=sys.stdout, flush=True)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        self._diagnostic("debug", message)

    def _diagnostic(self, name: str, message: str) -> None:
        level = _LEVELS[name]
        if self._quiet and not level.quiet:
            return
        if level.verbose_only and not self._verbose:
            return

        if self._no_color:
            print(level.prefix + message, file=sys.stderr, flush=True)
            return

        text = escape(level.prefix) + escape(message)
        if level.style:
            text = f"[{level.style}]{text}[/{level.style}]"
        self._stderr.print(text)


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between cases."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
