"""Tests for specguard.validators.body, driven through the full pipeline."""

from __future__ import annotations

from typing import Callable

import pytest

from specguard.exceptions import BodyRejectedError, ContentTypeRejectedError
from specguard.models import RequestBody
from specguard.validators.body import BodyMode, BodyValidator
from specguard.validators.request import Validator

from conftest import json_request, make_request

MakeValidator = Callable[..., Validator]

TEXT = {"Content-Type": "text/plain; charset=utf-8"}


# ---------------------------------------------------------------------------
# Requiredness
# ---------------------------------------------------------------------------


class TestRequiredness:
    def test_required_body_empty_rejected(self, validator: Validator) -> None:
        with pytest.raises(BodyRejectedError):
            validator.validate_request(make_request("/required/body", method="post"))

    def test_body_without_content_type_rejected(self, validator: Validator) -> None:
        with pytest.raises(BodyRejectedError, match="Content-Type"):
            validator.validate_request(
                make_request("/required/body", method="post", body=b"babe")
            )

    def test_optional_body_empty_accepted(self, validator: Validator) -> None:
        validator.validate_request(make_request("/not/required/body", method="post"))

    def test_optional_body_without_content_type_rejected(self, validator: Validator) -> None:
        assert not validator.is_valid_request(
            make_request("/not/required/body", method="post", body=b"babe")
        )

    @pytest.mark.parametrize(
        "path, headers",
        [
            ("/required/json/body", {"Content-Type": "application/json"}),
            ("/required/utf8/body", TEXT),
            ("/json/against/schema", {"Content-Type": "application/json"}),
        ],
    )
    def test_required_body_empty_rejected_in_every_mode(
        self, validator: Validator, path: str, headers: dict[str, str]
    ) -> None:
        with pytest.raises(BodyRejectedError, match="required"):
            validator.validate_request(make_request(path, method="post", headers=headers))

    @pytest.mark.parametrize(
        "content_type", ["application/json", "text/plain; charset=utf-8"]
    )
    def test_optional_body_empty_accepted_in_every_mode(
        self, make_validator: MakeValidator, content_type: str
    ) -> None:
        validator = make_validator(
            """\
            paths:
              /optional:
                post:
                  requestBody:
                    required: false
                    content:
                      application/json:
                        schema:
                          type: object
                          required: [id]
                      text/plain; charset=utf-8:
                  responses:
                    200:
                      description: ok
            """
        )
        validator.validate_request(
            make_request("/optional", method="post", headers={"Content-Type": content_type})
        )

    def test_no_request_body_accepts_anything(self, validator: Validator) -> None:
        validator.validate_request(
            make_request(
                "/multiple/allowed/operations",
                method="post",
                body=b"\xff\xfe",
                headers={"Content-Type": "application/octet-stream"},
            )
        )


# ---------------------------------------------------------------------------
# JSON and UTF-8 bodies
# ---------------------------------------------------------------------------


class TestJsonBody:
    def test_valid_json_without_schema(self, validator: Validator) -> None:
        validator.validate_request(json_request("/required/json/body", b'{"anything": [1, 2]}'))

    @pytest.mark.parametrize("body", [b"{", b"not json", b"NaN", b"\xff"])
    def test_invalid_json(self, validator: Validator, body: bytes) -> None:
        with pytest.raises(BodyRejectedError, match="not valid JSON"):
            validator.validate_request(json_request("/required/json/body", body))

    def test_deeply_nested_json(self, validator: Validator) -> None:
        body = b"[" * 100000 + b"]" * 100000
        with pytest.raises(BodyRejectedError, match="nested too deeply"):
            validator.validate_request(json_request("/required/json/body", body))
        assert not validator.is_valid_request(json_request("/required/json/body", body))

    def test_matches_schema(self, validator: Validator) -> None:
        validator.validate_request(
            json_request(
                "/json/against/schema",
                b'{"name": "laurence", "count": 10, "date": "2023-05-11"}',
            )
        )

    @pytest.mark.parametrize(
        "body",
        [
            b'{"name": "laurence", "count": 10}',
            b'{"name": "laurence", "count": "10", "date": "2023-05-11"}',
            b'{"name": "laurence", "count": 10, "date": "11/05/2023"}',
            b"[]",
        ],
    )
    def test_does_not_match_schema(self, validator: Validator, body: bytes) -> None:
        with pytest.raises(BodyRejectedError, match="schema"):
            validator.validate_request(json_request("/json/against/schema", body))

    def test_missing_required_key(self, make_validator: MakeValidator) -> None:
        validator = make_validator(
            """\
            paths:
              /keyed:
                post:
                  requestBody:
                    required: true
                    content:
                      application/json:
                        schema:
                          type: object
                          required: [key]
                          properties:
                            key:
                              type: string
                  responses:
                    200:
                      description: ok
            """
        )
        assert not validator.is_valid_request(json_request("/keyed", b'{"not key": "value"}'))
        assert validator.is_valid_request(json_request("/keyed", b'{"key": "value"}'))


class TestUtf8Body:
    def test_valid(self, validator: Validator) -> None:
        validator.validate_request(
            make_request(
                "/required/utf8/body", method="post", body="héllo".encode(), headers=TEXT
            )
        )

    def test_invalid_utf8(self, validator: Validator) -> None:
        with pytest.raises(BodyRejectedError, match="UTF-8"):
            validator.validate_request(
                make_request("/required/utf8/body", method="post", body=b"\xc3\x28", headers=TEXT)
            )

    def test_either_type_accepted(self, validator: Validator) -> None:
        assert validator.is_valid_request(
            json_request("/allows/utf8/or/json/body", b'"json string"')
        )
        assert validator.is_valid_request(
            make_request(
                "/allows/utf8/or/json/body", method="post", body=b"plain text", headers=TEXT
            )
        )

    def test_undeclared_type_rejected(self, validator: Validator) -> None:
        with pytest.raises(ContentTypeRejectedError):
            validator.validate_request(
                make_request("/required/json/body", method="post", body=b"x", headers=TEXT)
            )


# ---------------------------------------------------------------------------
# Reference transparency
# ---------------------------------------------------------------------------

_PERSON = """\
                          type: object
                          required: [name, age]
                          properties:
                            name:
                              type: string
                              minLength: 1
                            age:
                              type: integer
                              minimum: 0
"""

INLINE = """\
            paths:
              /people:
                post:
                  requestBody:
                    required: true
                    content:
                      application/json:
                        schema:
""" + _PERSON + """\
                  responses:
                    200:
                      description: ok
            """

ONE_LEVEL = """\
            paths:
              /people:
                post:
                  requestBody:
                    required: true
                    content:
                      application/json:
                        schema:
                          $ref: '#/components/schemas/Person'
                  responses:
                    200:
                      description: ok
            components:
              schemas:
                Person:
""" + _PERSON.replace(" " * 26, " " * 18)

TWO_LEVELS = """\
            paths:
              /people:
                post:
                  requestBody:
                    $ref: '#/components/requestBodies/PersonBody'
                  responses:
                    200:
                      description: ok
            components:
              requestBodies:
                PersonBody:
                  required: true
                  content:
                    application/json:
                      schema:
                        $ref: '#/components/schemas/Alias'
              schemas:
                Alias:
                  $ref: '#/components/schemas/Person'
                Person:
""" + _PERSON.replace(" " * 26, " " * 18)


class TestReferenceTransparency:
    @pytest.mark.parametrize(
        "body, accepted",
        [
            (b'{"name": "ada", "age": 36}', True),
            (b'{"name": "", "age": 36}', False),
            (b'{"name": "ada", "age": -1}', False),
            (b'{"name": "ada"}', False),
            (b'{"name": "ada", "age": 36, "extra": true}', True),
        ],
    )
    def test_same_outcome(
        self, make_validator: MakeValidator, body: bytes, accepted: bool
    ) -> None:
        outcomes = [
            make_validator(spec).is_valid_request(json_request("/people", body))
            for spec in (INLINE, ONE_LEVEL, TWO_LEVELS)
        ]
        assert outcomes == [accepted] * 3


# ---------------------------------------------------------------------------
# BodyValidator directly
# ---------------------------------------------------------------------------


class TestBodyValidator:
    def test_no_specification(self) -> None:
        BodyValidator(mode=BodyMode.NO_SPECIFICATION).validate(b"anything")

    def test_json_without_media_type_schema(self) -> None:
        body_spec = RequestBody.model_validate(
            {"required": True, "content": {"application/json": {}}}
        )
        BodyValidator(mode=BodyMode.JSON_BODY, body_spec=body_spec).validate(b"42")

    def test_empty_content_type_optional_empty(self) -> None:
        body_spec = RequestBody.model_validate({"required": False})
        BodyValidator(mode=BodyMode.EMPTY_CONTENT_TYPE, body_spec=body_spec).validate(b"")

    def test_rejections_carry_status(self) -> None:
        body_spec = RequestBody.model_validate({"required": True})
        with pytest.raises(BodyRejectedError) as exc_info:
            BodyValidator(mode=BodyMode.EMPTY_CONTENT_TYPE, body_spec=body_spec).validate(b"")
        assert exc_info.value.http_status == 400
