"""Choose how to validate a request body from the ``Content-Type`` header.

Case analysis on the operation's request body and the header:

* no request body declared -> ``NO_SPECIFICATION``, whatever the header;
* body declared, no header -> ``EMPTY_CONTENT_TYPE``;
* header names a media type the body does not declare -> rejected;
* ``application/json`` -> ``JSON_BODY``;
* ``text/plain; charset=utf-8`` -> ``PLAIN_UTF8_BODY``;
* any other declared media type -> rejected as unsupported.

Media types are compared as exact strings, parameters included.
"""

from __future__ import annotations

import logging
from typing import Optional

from specguard.exceptions import ContentTypeRejectedError
from specguard.models import Components, Operation, ValidatorConfig
from specguard.resolver import resolve_request_body
from specguard.validators.body import (
    JSON_CONTENT_TYPE,
    PLAIN_UTF8_CONTENT_TYPE,
    BodyMode,
    BodyValidator,
)

logger = logging.getLogger(__name__)

_SUPPORTED_MODES = {
    JSON_CONTENT_TYPE: BodyMode.JSON_BODY,
    PLAIN_UTF8_CONTENT_TYPE: BodyMode.PLAIN_UTF8_BODY,
}


def negotiate(
    operation: Operation,
    content_type: Optional[str],
    components: Optional[Components],
    config: Optional[ValidatorConfig] = None,
) -> BodyValidator:
    """Select the body validation mode for *operation*.

    Args:
        operation: The selected operation.
        content_type: The request's ``Content-Type`` header, if any.
        components: The component table, for request body references.
        config: Engine options handed on to the body validator.

    Returns:
        A :class:`~specguard.validators.body.BodyValidator` for the request
        body.

    Raises:
        ContentTypeRejectedError: If the header names a media type the
            operation does not declare, or one the engine cannot validate.
        SpecificationDefect: If the request body reference does not resolve.
    """
    if config is None:
        config = ValidatorConfig()

    if operation.request_body is None:
        return BodyValidator(mode=BodyMode.NO_SPECIFICATION, config=config)

    body_spec = resolve_request_body(operation.request_body, components)

    if content_type is None:
        return BodyValidator(
            mode=BodyMode.EMPTY_CONTENT_TYPE,
            body_spec=body_spec,
            components=components,
            config=config,
        )

    if content_type not in body_spec.content:
        logger.debug("Content-Type '%s' is not declared for this body", content_type)
        raise ContentTypeRejectedError(
            f"Content-Type '{content_type}' is not declared for this request body"
        )

    mode = _SUPPORTED_MODES.get(content_type)
    if mode is None:
        logger.debug("Content-Type '%s' is declared but not supported", content_type)
        raise ContentTypeRejectedError(
            f"Content-Type '{content_type}' is not supported"
        )

    return BodyValidator(
        mode=mode, body_spec=body_spec, components=components, config=config
    )
