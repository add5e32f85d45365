"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specval.exceptions.SpecvalError` subclass.
Build scripts and CI jobs can inspect the exit code to tell a broken API
document apart from an output-directory problem without parsing stderr.

Example::

    $ specval -i openapi.json -o validators/
    $ echo $?
    12  # EXIT_FILE_EXISTS -- rerun with --overwrite
"""

EXIT_SUCCESS = 0
"""Every artifact was generated and written."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or missing arguments."""

EXIT_FILESYSTEM_ERROR = 3
"""The input could not be read or the output directory is not writable."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API document could not be decoded as JSON or YAML."""

EXIT_SPEC_SHAPE_ERROR = 8
"""A node of the API document does not have the expected structure."""

EXIT_REFERENCE_ERROR = 9
"""One or more ``$ref`` pointers could not be resolved."""

EXIT_COUNT_MISMATCH = 10
"""A selector query did not resolve to exactly one node."""

EXIT_MULTI_CONTENT_TYPE = 11
"""A content map declares zero or several media types where one is required."""

EXIT_FILE_EXISTS = 12
"""A destination file already exists and ``--overwrite`` was not given."""

EXIT_NAME_COLLISION = 13
"""Two operations normalise to the same artifact file name."""
