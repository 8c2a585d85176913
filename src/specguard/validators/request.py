"""The request validation pipeline.

:class:`Validator` owns a :class:`~specguard.models.Specification` and runs
every request through the same stages, stopping at the first failure:

1. parse the URL (scheme and host required);
2. match the path against the templates (:mod:`~specguard.validators.paths`);
3. select the operation for the method (:mod:`~specguard.validators.operation`);
4. check parameters (:mod:`~specguard.validators.parameters`);
5. negotiate the content type (:mod:`~specguard.validators.content_type`);
6. check the body (:mod:`~specguard.validators.body`).

Each stage takes the specification plus what the previous stage narrowed
down, and either returns the next, narrower context or raises a
:class:`~specguard.exceptions.RequestRejected`. Specification defects
propagate unchanged as :class:`~specguard.exceptions.SpecificationDefect`.

A successful validation returns a :class:`ValidatedRequest`, through which
the eventual response can be checked against the same operation.

The validator keeps no per-request state, so one instance can serve
concurrent validations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx

from specguard.config import resolve_config
from specguard.exceptions import InvalidURLError, RequestRejected
from specguard.models import HTTPMethod, Operation, Specification, ValidatorConfig
from specguard.request import Request, Response
from specguard.validators.content_type import negotiate
from specguard.validators.operation import select_operation
from specguard.validators.parameters import declared_parameters, validate_parameters
from specguard.validators.paths import PathMatch, match_path
from specguard.validators.response import validate_status_code

logger = logging.getLogger(__name__)


class ValidatedRequest:
    """A request that passed validation, and the operation it matched.

    Attributes:
        request: The validated request.
        template: The matching path template, e.g. ``/users/{id}``.
        method: The request method.
        operation: The operation the request was validated against.
        bindings: Path variable bindings.
    """

    def __init__(self, request: Request, match: PathMatch, method: HTTPMethod, operation: Operation):
        self.request = request
        self.template = match.template
        self.bindings = match.bindings
        self.method = method
        self.operation = operation

    def validate_response(self, response: Response) -> None:
        """Check *response*'s status code against the operation's responses.

        Raises:
            ResponseRejectedError: If the status code is not declared.
            UnsupportedFeatureError: If the status code is outside 100-599.
        """
        validate_status_code(self.operation.responses, response.status_code)

    def __repr__(self) -> str:
        return f"ValidatedRequest({self.method.value.upper()} {self.template})"


class Validator:
    """Validate requests against an OpenAPI 3.0 specification.

    Args:
        spec: The specification, as a model or as an already-deserialised
            document dict.
        config: Engine options. Resolved from the environment when omitted
            (see :func:`~specguard.config.resolve_config`).

    Example::

        validator = Validator(yaml.safe_load(openapi_text))
        validated = validator.validate_request(
            SimpleRequest(url="http://api.example.com/ping", method="get")
        )
        validated.validate_response(SimpleResponse(status_code=200))
    """

    def __init__(
        self,
        spec: Union[Specification, dict[str, Any]],
        config: Optional[ValidatorConfig] = None,
    ):
        if not isinstance(spec, Specification):
            spec = Specification.model_validate(spec)
        self.spec = spec
        self.config = config if config is not None else resolve_config()
        logger.info(
            "Validator ready for '%s' with %d path template(s)",
            spec.info.title,
            len(spec.paths),
        )

    def validate_request(self, request: Request) -> ValidatedRequest:
        """Run *request* through every validation stage.

        Returns:
            A :class:`ValidatedRequest` for checking the eventual response.

        Raises:
            RequestRejected: At the first stage the request fails.
            SpecificationDefect: If the specification cannot be used to
                validate this request.
        """
        components = self.spec.components
        url = self._parse_url(request.url)

        match = match_path(self.spec, _encoded_path(url))
        method, operation = select_operation(match.path_item, request.method)

        path_item = match.path_item if self.config.merge_path_parameters else None
        parameters = declared_parameters(operation, components, path_item)
        validate_parameters(
            parameters, request, url, match.bindings, components, self.config
        )

        body_validator = negotiate(
            operation, request.get_header("Content-Type"), components, self.config
        )
        body_validator.validate(request.body)

        logger.debug("Accepted %s %s", method.value.upper(), match.template)
        return ValidatedRequest(request, match, method, operation)

    def is_valid_request(self, request: Request) -> bool:
        """Return whether *request* passes validation.

        Only rejections map to ``False``; specification defects still raise.
        """
        try:
            self.validate_request(request)
        except RequestRejected:
            return False
        return True

    @staticmethod
    def _parse_url(raw_url: str) -> httpx.URL:
        """Parse the request URL, requiring a scheme and a host.

        Raises:
            InvalidURLError: If the URL is malformed or not absolute.
        """
        try:
            url = httpx.URL(raw_url)
        except httpx.InvalidURL as exc:
            logger.debug("Malformed URL '%s': %s", raw_url, exc)
            raise InvalidURLError(f"Malformed URL: {raw_url}") from exc

        if not url.scheme or not url.host:
            logger.debug("URL '%s' lacks a scheme or host", raw_url)
            raise InvalidURLError(f"URL must be absolute: {raw_url}")
        return url


def _encoded_path(url: httpx.URL) -> str:
    """Return the path of *url* without decoding percent-escapes."""
    raw_path, _, _ = url.raw_path.partition(b"?")
    return raw_path.decode("ascii")
