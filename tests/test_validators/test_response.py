"""Tests for specguard.validators.response."""

from __future__ import annotations

import pytest

from specguard.exceptions import ResponseRejectedError, UnsupportedFeatureError
from specguard.models import Operation
from specguard.validators.response import status_range, validate_status_code


def _responses(*keys: object) -> dict:
    return Operation.model_validate({"responses": {k: {} for k in keys}}).responses


class TestStatusRange:
    @pytest.mark.parametrize(
        "code, expected",
        [(100, "1XX"), (199, "1XX"), (200, "2XX"), (250, "2XX"), (404, "4XX"), (599, "5XX")],
    )
    def test_ranges(self, code: int, expected: str) -> None:
        assert status_range(code) == expected

    @pytest.mark.parametrize("code", [0, 99, 600, 999])
    def test_out_of_range(self, code: int) -> None:
        with pytest.raises(UnsupportedFeatureError):
            status_range(code)


class TestValidateStatusCode:
    def test_exact(self) -> None:
        validate_status_code(_responses(200), 200)

    def test_exact_string_key(self) -> None:
        validate_status_code(_responses("201"), 201)

    def test_range_accepts_unlisted_code(self) -> None:
        validate_status_code(_responses("2XX"), 250)

    def test_lower_case_range_key(self) -> None:
        validate_status_code(_responses("2xx"), 204)

    def test_range_rejects_other_class(self) -> None:
        with pytest.raises(ResponseRejectedError) as exc_info:
            validate_status_code(_responses("2XX"), 404)
        assert exc_info.value.status_code == 404
        assert exc_info.value.http_status == 502

    def test_undeclared_exact(self) -> None:
        with pytest.raises(ResponseRejectedError):
            validate_status_code(_responses(200), 201)

    def test_default_not_consulted(self) -> None:
        with pytest.raises(ResponseRejectedError):
            validate_status_code(_responses("default"), 500)

    def test_declared_out_of_range_code_accepted(self) -> None:
        validate_status_code(_responses(999), 999)

    def test_undeclared_out_of_range_code_unsupported(self) -> None:
        with pytest.raises(UnsupportedFeatureError):
            validate_status_code(_responses(200), 600)

    @pytest.mark.parametrize("code", range(100, 600, 7))
    def test_range_wildcard_law(self, code: int) -> None:
        validate_status_code(_responses(f"{code // 100}XX"), code)
