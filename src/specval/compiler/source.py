"""Helpers that build Python source fragments for generated validator modules.

Every compiler returns *source text* rather than live objects, so these
helpers are the only place that knows how a literal, a call, or a
``create_model(...)`` expression is laid out. Output is deterministic:
identical inputs always render byte-identical text.

Field names that are not safe Python identifiers are bound through
``Field(alias=...)`` so the generated model still validates the original key.
"""

from __future__ import annotations

import json
import keyword
import math
import re
import textwrap
from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import BaseModel

_INDENT = "    "

# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


@dataclass(frozen=True)
class FieldSource:
    """One field of a generated object validator.

    Attributes:
        name: The key as it appears in validated data.
        type_expr: Python type expression produced by a translator.
        required: Whether the key must be present.
    """

    name: str
    type_expr: str
    required: bool


def python_literal(value: Any) -> str:
    """Render a JSON value as Python source.

    Strings use double quotes (JSON escaping is valid Python escaping).

    Raises:
        TypeError: For values that are not JSON data.
    """
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float) and not math.isfinite(value):
        return f'float("{value}")'
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return "[" + ", ".join(python_literal(item) for item in value) + "]"
    if isinstance(value, dict):
        items = (f"{python_literal(str(k))}: {python_literal(v)}" for k, v in value.items())
        return "{" + ", ".join(items) + "}"
    raise TypeError(f"no Python literal for {type(value).__name__}")


def call(func: str, args: Iterable[str]) -> str:
    """Render ``func(arg, ...)`` with one argument per line and a trailing comma."""
    args = list(args)
    if not args:
        return f"{func}()"
    body = "".join(textwrap.indent(f"{arg},", _INDENT) + "\n" for arg in args)
    return f"{func}(\n{body})"


def constrained(base: str, constraints: dict[str, Any]) -> str:
    """Wrap *base* in ``Annotated[..., Field(...)]`` when *constraints* is non-empty."""
    if not constraints:
        return base
    rendered = ", ".join(f"{key}={python_literal(value)}" for key, value in constraints.items())
    return f"Annotated[{base}, Field({rendered})]"


def union(members: Iterable[str]) -> str:
    """Combine type expressions into the narrowest ``Union``/``Optional`` form."""
    unique: list[str] = []
    for member in members:
        if member not in unique:
            unique.append(member)
    if not unique or "Any" in unique:
        return "Any"
    if len(unique) == 1:
        return unique[0]
    if len(unique) == 2 and "None" in unique:
        other = unique[0] if unique[1] == "None" else unique[1]
        return f"Optional[{other}]"
    return f"Union[{', '.join(unique)}]"


def model_name(raw: str) -> str:
    """Derive a PascalCase model name from a property or parameter name."""
    parts = [p for p in re.split(r"[^a-zA-Z0-9]+", raw) if p]
    name = "".join(p[:1].upper() + p[1:] for p in parts)
    if not name or name[0].isdigit():
        name = f"Model{name}"
    return name


def _is_safe_name(name: str) -> bool:
    return (
        name.isascii()
        and name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not name.startswith("model_")
        and not hasattr(BaseModel, name)
    )


def _python_name(raw: str) -> str:
    """Sanitise *raw* into an identifier usable as a pydantic field name."""
    name = _INVALID_IDENT_RE.sub("_", raw).strip("_") or "field"
    if name[0].isdigit() or name.startswith("model_") or hasattr(BaseModel, name):
        name = f"field_{name}"
    if keyword.iskeyword(name):
        name += "_"
    return name


def _field_names(fields: list[FieldSource]) -> list[str]:
    """Pick a unique Python name per field; safe names are kept verbatim."""
    taken = {f.name for f in fields if _is_safe_name(f.name)}
    names = []
    for f in fields:
        if _is_safe_name(f.name):
            names.append(f.name)
            continue
        base = candidate = _python_name(f.name)
        counter = 2
        while candidate in taken:
            candidate = f"{base}_{counter}"
            counter += 1
        taken.add(candidate)
        names.append(candidate)
    return names


def model_expression(name: str, fields: list[FieldSource], extra: str) -> str:
    """Render a ``create_model(...)`` call validating an object with *fields*.

    Args:
        name: Model class name.
        fields: Fields in declaration order; names must be unique.
        extra: Pydantic ``extra`` policy: ``"forbid"`` closes the object,
            ``"allow"`` accepts and keeps unknown keys.
    """
    config = f'ConfigDict(extra={python_literal(extra)}, regex_engine="python-re")'
    args = [python_literal(name), f"__config__={config}"]
    for python_name, f in zip(_field_names(fields), fields):
        default = "..." if f.required else "None"
        if python_name == f.name:
            args.append(f"{python_name}=({f.type_expr}, {default})")
        else:
            args.append(
                f"{python_name}=({f.type_expr}, "
                f"Field({default}, alias={python_literal(f.name)}))"
            )
    return call("create_model", args)
