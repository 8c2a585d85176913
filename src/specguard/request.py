"""The request and response interfaces the validator reads from.

The engine never talks to a transport directly. Anything that exposes the
attributes of :class:`Request` (or :class:`Response`) can be validated:
wrap your framework's request object, use :class:`SimpleRequest`, or use
the httpx adapters in :mod:`specguard.adapters`.

Requests are read, never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class Request(Protocol):
    """An inbound HTTP request as seen by the validator.

    ``url`` must be absolute (scheme and host); the path and query string
    are taken from it.
    """

    @property
    def url(self) -> str: ...

    @property
    def method(self) -> str: ...

    @property
    def body(self) -> bytes: ...

    def get_header(self, name: str) -> Optional[str]:
        """Return the value of header *name*, or ``None`` when absent."""
        ...


@runtime_checkable
class Response(Protocol):
    """An HTTP response as seen by the validator.

    :class:`httpx.Response` satisfies this protocol as is.
    """

    @property
    def status_code(self) -> int: ...


@dataclass(frozen=True)
class SimpleRequest:
    """A plain in-memory :class:`Request`.

    Header lookup is case-sensitive: ``get_header("content-type")`` does not
    find a ``"Content-Type"`` entry.

    Example::

        SimpleRequest(
            url="http://api.example.com/users/42",
            method="get",
            headers={"Accept": "application/json"},
        )
    """

    url: str
    method: str
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name)


@dataclass(frozen=True)
class SimpleResponse:
    """A plain in-memory :class:`Response`."""

    status_code: int
