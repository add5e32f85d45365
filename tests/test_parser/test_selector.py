"""Tests for specval.parser.selector."""

from __future__ import annotations

from typing import Any

import pytest

from specval.exceptions import CountMismatchError
from specval.models import HTTPMethod, OperationSelector
from specval.parser.selector import format_query, select, select_one


def _selector(path: str = "/users", method: HTTPMethod = HTTPMethod.GET) -> OperationSelector:
    return OperationSelector(path=path, method=method)


DOCUMENT: dict[str, Any] = {
    "paths": {
        "/users": {
            "get": {"responses": {"200": {}}},
            "post": {"requestBody": {}},
        },
        "/users/{id}": {"get": {}},
    }
}


class TestFormatQuery:
    def test_operation_only(self) -> None:
        assert format_query(_selector()) == "paths[/users].get"

    def test_with_tail(self) -> None:
        assert format_query(_selector(), "responses", "200") == "paths[/users].get.responses.200"


class TestSelect:
    def test_operation(self) -> None:
        assert select(DOCUMENT, _selector()) == [{"responses": {"200": {}}}]

    def test_tail(self) -> None:
        assert select(DOCUMENT, _selector(), "responses") == [{"200": {}}]

    def test_missing_tail_returns_empty(self) -> None:
        assert select(DOCUMENT, _selector("/users/{id}"), "responses") == []

    def test_path_matches_exactly(self) -> None:
        assert select(DOCUMENT, _selector("/users/")) == []

    def test_method_matches_case_insensitively(self) -> None:
        document = {"paths": {"/a": {"GET": {"x": 1}}}}
        assert select(document, _selector("/a")) == [{"x": 1}]

    def test_returns_every_match(self) -> None:
        document = {"paths": {"/a": {"get": {"x": 1}, "GET": {"x": 2}}}}
        assert select(document, _selector("/a")) == [{"x": 1}, {"x": 2}]

    def test_document_without_paths(self) -> None:
        assert select({}, _selector()) == []


class TestSelectOne:
    def test_single_match(self) -> None:
        assert select_one(DOCUMENT, _selector(), "responses") == {"200": {}}

    def test_zero_matches(self) -> None:
        with pytest.raises(CountMismatchError) as exc_info:
            select_one(DOCUMENT, _selector(method=HTTPMethod.DELETE))
        assert exc_info.value.found == 0
        assert "found 0 element(s) at paths[/users].delete" in str(exc_info.value)

    def test_several_matches(self) -> None:
        document = {"paths": {"/a": {"get": {}, "Get": {}}}}
        with pytest.raises(CountMismatchError, match="found 2 element"):
            select_one(document, _selector("/a"))
