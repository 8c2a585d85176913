"""Validate a response status code against an operation's ``responses``.

A status code is accepted when it is declared exactly (``"404"``) or when
the range wildcard for its leading digit is declared (``"4XX"``). The
``default`` entry is not consulted. Codes outside ``100``-``599`` have no
range and are reported as unsupported rather than rejected.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from specguard.exceptions import ResponseRejectedError, UnsupportedFeatureError

logger = logging.getLogger(__name__)


def status_range(status_code: int) -> str:
    """Return the range wildcard key for *status_code*, e.g. ``"2XX"`` for ``250``.

    Raises:
        UnsupportedFeatureError: If the code is outside ``100``-``599``.
    """
    if not 100 <= status_code <= 599:
        raise UnsupportedFeatureError(
            f"Status code {status_code} is outside the supported 100-599 range"
        )
    return f"{status_code // 100}XX"


def validate_status_code(responses: Mapping[str, Any], status_code: int) -> None:
    """Check *status_code* against an operation's ``responses`` map.

    Args:
        responses: The operation's responses, keyed by normalised status
            strings (see :class:`~specguard.models.Operation`).
        status_code: The actual response status code.

    Raises:
        ResponseRejectedError: If neither the code nor its range is declared.
        UnsupportedFeatureError: If the code has no range (outside 100-599).
    """
    if str(status_code) in responses:
        return

    wildcard = status_range(status_code)
    if wildcard in responses:
        return

    logger.debug("Status code %s is not declared", status_code)
    raise ResponseRejectedError(
        f"Status code {status_code} is not declared for this operation",
        status_code=status_code,
    )
