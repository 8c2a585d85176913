"""Adapters from :mod:`httpx` objects to the validator's interfaces.

:class:`HttpxRequest` wraps an :class:`httpx.Request` so it can be passed to
:meth:`~specguard.validators.request.Validator.validate_request`. Responses
need no wrapper: :class:`httpx.Response` already exposes ``status_code``.

Typical use with an httpx event hook::

    def check_request(request: httpx.Request) -> None:
        validator.validate_request(HttpxRequest(request))

    client = httpx.Client(event_hooks={"request": [check_request]})
"""

from __future__ import annotations

from typing import Optional

import httpx


class HttpxRequest:
    """Expose an :class:`httpx.Request` as a :class:`~specguard.request.Request`.

    Header lookup follows httpx and is case-insensitive. A streaming body
    that has not been read yet is read on first access.

    Args:
        request: The request to wrap.
    """

    def __init__(self, request: httpx.Request):
        self._request = request

    @property
    def url(self) -> str:
        return str(self._request.url)

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def body(self) -> bytes:
        try:
            return self._request.content
        except httpx.RequestNotRead:
            return self._request.read()

    def get_header(self, name: str) -> Optional[str]:
        return self._request.headers.get(name)

    def __repr__(self) -> str:
        return f"HttpxRequest({self._request!r})"
