"""Expected shapes of the document slices the compilers read.

Each compiler validates its slice with these models through
:func:`~specval.parser.enumerator.validate_shape` before compiling anything,
so a malformed node surfaces as a :class:`~specval.exceptions.SpecShapeError`
naming its location. Unknown keys (``description``, ``examples``, ``x-*``...)
are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel

from specval.exceptions import MultiContentTypeError
from specval.models import ParameterLocation


class ParameterShape(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    schema_: Any = Field(default=None, alias="schema")


class ParameterListShape(RootModel[list[ParameterShape]]):
    pass


class MediaTypeShape(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: Any = Field(default=None, alias="schema")


class RequestBodyShape(BaseModel):
    required: bool = False
    content: dict[str, MediaTypeShape] = Field(default_factory=dict)


class ResponseShape(BaseModel):
    content: dict[str, MediaTypeShape] = Field(default_factory=dict)


class ResponsesShape(RootModel[dict[str, ResponseShape]]):
    pass


def single_content(content: dict[str, MediaTypeShape], where: str) -> tuple[str, MediaTypeShape]:
    """Return the only ``(content_type, media_type)`` pair of *content*.

    Raises:
        MultiContentTypeError: If *content* has zero or several entries.
    """
    if len(content) != 1:
        raise MultiContentTypeError(where, list(content))
    return next(iter(content.items()))
