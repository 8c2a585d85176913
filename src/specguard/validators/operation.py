"""Select the operation declared for the request method on a path item."""

from __future__ import annotations

import logging

from specguard.exceptions import OperationNotAllowedError
from specguard.models import HTTPMethod, Operation, PathItem

logger = logging.getLogger(__name__)


def select_operation(path_item: PathItem, method: str) -> tuple[HTTPMethod, Operation]:
    """Return the operation for *method* on *path_item*.

    The method token is lower-cased and must be one of ``get``, ``put``,
    ``post`` or ``delete``.

    Returns:
        A ``(method, operation)`` tuple.

    Raises:
        OperationNotAllowedError: If the method is not recognised, or the
            path item declares no operation for it.
    """
    try:
        http_method = HTTPMethod(method.lower())
    except ValueError:
        logger.debug("Method '%s' is not supported", method)
        raise OperationNotAllowedError(f"Unsupported method: {method}") from None

    operation = path_item.operation(http_method)
    if operation is None:
        logger.debug("No '%s' operation declared on matched path", http_method.value)
        raise OperationNotAllowedError(
            f"Method {http_method.value.upper()} is not declared for this path"
        )
    return http_method, operation
