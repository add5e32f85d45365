"""Exception hierarchy for specval.

All exceptions inherit from :class:`SpecvalError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specval.exit_codes`.
The command in :mod:`specval.app` catches ``SpecvalError`` uniformly, prints
one error line and exits with the error's code. Every error is fatal for the
run; none is retried or downgraded to a warning.

Subclass hierarchy::

    SpecvalError               (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 1)
    +-- FileSystemError        (exit 3)
    +-- SpecParseError         (exit 7)
    +-- SpecShapeError         (exit 8)
    +-- ReferenceResolutionError (exit 9)
    +-- CountMismatchError     (exit 10)
    +-- MultiContentTypeError  (exit 11)
    +-- FileExistsError_       (exit 12)
    +-- NameCollisionError     (exit 13)
"""

from __future__ import annotations

from specval.exit_codes import (
    EXIT_COUNT_MISMATCH,
    EXIT_FILE_EXISTS,
    EXIT_FILESYSTEM_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MULTI_CONTENT_TYPE,
    EXIT_NAME_COLLISION,
    EXIT_REFERENCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_SPEC_SHAPE_ERROR,
)


class SpecvalError(Exception):
    """Base exception for all specval errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specval.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecvalError):
    """Raised when ``--input`` or ``--output`` cannot be resolved from any source."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecvalError):
    """Raised for an unreadable or invalid ``specval.json`` / environment value."""

    exit_code = EXIT_GENERIC_FAILURE


class FileSystemError(SpecvalError):
    """Raised when the input is unreadable or the output directory is not writable."""

    exit_code = EXIT_FILESYSTEM_ERROR


class SpecParseError(SpecvalError):
    """Raised when the API document cannot be fetched or decoded."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SpecShapeError(SpecvalError):
    """Raised when a document node fails structural validation against its expected shape."""

    exit_code = EXIT_SPEC_SHAPE_ERROR


class ReferenceResolutionError(SpecvalError):
    """Raised when the resolver reports unresolved, external or cyclic references.

    Args:
        errors: Every problem reported by the resolver, in discovery order.
    """

    exit_code = EXIT_REFERENCE_ERROR

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            "unable to resolve references in API document: " + "; ".join(self.errors)
        )


class CountMismatchError(SpecvalError):
    """Raised when a selector query expected exactly one match and found another count."""

    exit_code = EXIT_COUNT_MISMATCH

    def __init__(self, query: str, found: int):
        self.query = query
        self.found = found
        super().__init__(
            f"found {found} element(s) at {query} in API document, expected 1"
        )


class MultiContentTypeError(SpecvalError):
    """Raised when a content map has other than exactly one media type."""

    exit_code = EXIT_MULTI_CONTENT_TYPE

    def __init__(self, where: str, content_types: list[str]):
        self.where = where
        self.content_types = list(content_types)
        listed = ", ".join(self.content_types) if self.content_types else "none"
        super().__init__(
            f"{where} must declare exactly one content type, "
            f"found {len(self.content_types)} ({listed})"
        )


class FileExistsError_(SpecvalError):
    """Raised when a destination artifact exists and overwrite was not requested.

    Named with a trailing underscore to avoid shadowing the built-in
    ``FileExistsError``.
    """

    exit_code = EXIT_FILE_EXISTS

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"file {path} already exists, please use flag --overwrite "
            "if that's your intention"
        )


class NameCollisionError(SpecvalError):
    """Raised when two operations normalise to the same artifact file name."""

    exit_code = EXIT_NAME_COLLISION
