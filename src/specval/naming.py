"""Deterministic artifact names derived from an operation's path and method.

``operationId`` is never consulted: two runs over the same paths always
produce the same file names, whatever the operation ids say.
"""

from __future__ import annotations

import re
from typing import Union

from specval.models import HTTPMethod, OperationSelector

REQUEST_SUFFIX = ".requestValidator"
RESPONSES_SUFFIX = ".responsesValidator"
EXTENSION = ".py"
TYPES_FILE_NAME = "validator_types.py"

_PLACEHOLDER_RE = re.compile(r"^\{(.*)\}$")


def normalize_name(path: str, method: Union[HTTPMethod, str]) -> str:
    """Derive the artifact identifier of an operation.

    The leading ``/`` is dropped and the path split on ``/``. The first
    segment is kept verbatim; every later ``{name}`` segment becomes
    ``NAME`` and any other segment gets its first character upper-cased.
    Segments are joined without separator and ``.<method>`` is appended.

    Examples::

        >>> normalize_name("/users/{id}/orders", "GET")
        'usersIDOrders.get'
        >>> normalize_name("/", "post")
        '.post'
    """
    tokens = path[1:].split("/")
    parts = tokens[:1]
    for token in tokens[1:]:
        match = _PLACEHOLDER_RE.match(token)
        if match:
            parts.append(match.group(1).upper())
        else:
            parts.append(token[:1].upper() + token[1:])
    method_name = getattr(method, "value", method)
    return "".join(parts) + "." + method_name.lower()


def request_file_name(selector: OperationSelector) -> str:
    return normalize_name(selector.path, selector.method) + REQUEST_SUFFIX + EXTENSION


def responses_file_name(selector: OperationSelector) -> str:
    return normalize_name(selector.path, selector.method) + RESPONSES_SUFFIX + EXTENSION
