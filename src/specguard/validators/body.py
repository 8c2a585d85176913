"""Validate a raw request body in the mode chosen by content negotiation.

:func:`~specguard.validators.content_type.negotiate` picks a
:class:`BodyMode`; :meth:`BodyValidator.validate` then checks the body:

* ``NO_SPECIFICATION`` -- the operation declares no request body; anything
  goes.
* ``EMPTY_CONTENT_TYPE`` -- a body is declared but no ``Content-Type`` was
  sent; only an empty body for an optional request body passes.
* ``JSON_BODY`` -- the body must parse as JSON and, when a schema is
  declared for ``application/json``, satisfy it.
* ``PLAIN_UTF8_BODY`` -- the body must be valid UTF-8.

In the two content modes an empty body is rejected up front when the
request body is required, and accepted when it is optional.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Optional

from specguard.exceptions import BodyRejectedError
from specguard.models import Components, RequestBody, ValidatorConfig
from specguard.schema.evaluator import parse_json, schema_accepts

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
PLAIN_UTF8_CONTENT_TYPE = "text/plain; charset=utf-8"


class BodyMode(str, enum.Enum):
    """How a request body is validated."""

    NO_SPECIFICATION = "no_specification"
    EMPTY_CONTENT_TYPE = "empty_content_type"
    JSON_BODY = "json_body"
    PLAIN_UTF8_BODY = "plain_utf8_body"


@dataclass(frozen=True)
class BodyValidator:
    """A negotiated body mode plus what it needs to validate a body.

    Attributes:
        mode: The negotiated mode.
        body_spec: The operation's request body, absent only in
            ``NO_SPECIFICATION`` mode.
        components: The component table for schema references.
        config: Engine options.
    """

    mode: BodyMode
    body_spec: Optional[RequestBody] = None
    components: Optional[Components] = None
    config: ValidatorConfig = field(default_factory=ValidatorConfig)

    def validate(self, body: bytes) -> None:
        """Validate *body* in this mode.

        Raises:
            BodyRejectedError: If the body does not conform.
            SpecificationDefect: If the declared schema cannot be translated
                or compiled.
        """
        if self.mode is BodyMode.NO_SPECIFICATION:
            return

        assert self.body_spec is not None  # every other mode carries one
        required = self.body_spec.required

        if self.mode is BodyMode.EMPTY_CONTENT_TYPE:
            if body or required:
                logger.debug("Body present or required but no Content-Type given")
                raise BodyRejectedError(
                    "A Content-Type header is required for this request body"
                )
            return

        if not body:
            if required:
                logger.debug("Required request body is empty")
                raise BodyRejectedError("Request body is required")
            return

        if self.mode is BodyMode.PLAIN_UTF8_BODY:
            self._validate_utf8(body)
        else:
            self._validate_json(body)

    def _validate_utf8(self, body: bytes) -> None:
        try:
            body.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.debug("Plain text body is not UTF-8: %s", exc)
            raise BodyRejectedError("Request body is not valid UTF-8") from exc

    def _validate_json(self, body: bytes) -> None:
        try:
            value = parse_json(body)
        except ValueError as exc:
            logger.debug("JSON body does not parse: %s", exc)
            raise BodyRejectedError(f"Request body is not valid JSON: {exc}") from exc

        media_type = self.body_spec.content.get(JSON_CONTENT_TYPE)
        if media_type is None or media_type.schema_ is None:
            return

        if not schema_accepts(media_type.schema_, value, self.components, self.config):
            logger.debug("JSON body does not match its schema")
            raise BodyRejectedError("Request body does not match its schema")
