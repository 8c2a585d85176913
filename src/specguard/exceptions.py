"""Exception hierarchy for specguard.

Two disjoint families hang off :class:`SpecguardError`:

* :class:`RequestRejected` -- an expected, request-dependent outcome. The
  request (or response) does not conform to the specification. Every
  subclass carries a :class:`RejectionReason` and an ``http_status``
  suggestion from :mod:`specguard.status_codes`.
* :class:`SpecificationDefect` -- the specification itself is broken in a
  way the engine cannot work with (unresolved ``$ref``, unsupported shape,
  a generated JSON Schema the evaluator refuses). These are never turned
  into rejections.

Subclass hierarchy::

    SpecguardError
    +-- RequestRejected              (400)
    |   +-- InvalidURLError          (400)
    |   +-- PathNotFoundError        (404)
    |   +-- OperationNotAllowedError (405)
    |   +-- ParameterRejectedError   (400)
    |   +-- ContentTypeRejectedError (415)
    |   +-- BodyRejectedError        (400)
    |   +-- ResponseRejectedError    (502)
    +-- SpecificationDefect
    |   +-- UnresolvedReferenceError
    |   +-- ReferenceCycleError
    |   +-- UnsupportedFeatureError
    |   +-- SchemaCompileError
    +-- ConfigError
"""

from __future__ import annotations

import enum

from specguard.status_codes import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_METHOD_NOT_ALLOWED,
    HTTP_NOT_FOUND,
    HTTP_UNSUPPORTED_MEDIA_TYPE,
)


class RejectionReason(str, enum.Enum):
    """The pipeline stage at which a request or response was rejected.

    ``UNSPECIFIED`` is reported only by a bare :class:`RequestRejected`.
    """

    UNSPECIFIED = "unspecified"
    INVALID_URL = "invalid_url"
    PATH_NOT_FOUND = "path_not_found"
    OPERATION_NOT_ALLOWED = "operation_not_allowed"
    PARAMETER = "parameter"
    CONTENT_TYPE = "content_type"
    BODY = "body"
    RESPONSE_STATUS = "response_status"


class SpecguardError(Exception):
    """Base exception for all specguard errors."""


# --- Rejections ---


class RequestRejected(SpecguardError):
    """Base class for validation rejections.

    Args:
        message: Human-readable description of why the request was rejected.
        http_status: Optional override for the class-level status suggestion.
    """

    reason: RejectionReason = RejectionReason.UNSPECIFIED
    http_status: int = HTTP_BAD_REQUEST

    def __init__(self, message: str, http_status: int | None = None):
        super().__init__(message)
        if http_status is not None:
            self.http_status = http_status


class InvalidURLError(RequestRejected):
    """Raised when the request URL cannot be parsed or lacks a scheme or host."""

    reason = RejectionReason.INVALID_URL
    http_status = HTTP_BAD_REQUEST


class PathNotFoundError(RequestRejected):
    """Raised when no path template matches the request path."""

    reason = RejectionReason.PATH_NOT_FOUND
    http_status = HTTP_NOT_FOUND


class OperationNotAllowedError(RequestRejected):
    """Raised for unknown methods or methods the matched path does not declare."""

    reason = RejectionReason.OPERATION_NOT_ALLOWED
    http_status = HTTP_METHOD_NOT_ALLOWED


class ParameterRejectedError(RequestRejected):
    """Raised when a declared parameter is missing, not JSON, or fails its schema.

    Args:
        message: Human-readable description.
        name: The parameter name.
        location: Where the parameter was looked up (``header``, ``query``, ``path``).
    """

    reason = RejectionReason.PARAMETER
    http_status = HTTP_BAD_REQUEST

    def __init__(self, message: str, name: str, location: str):
        super().__init__(message)
        self.name = name
        self.location = location


class ContentTypeRejectedError(RequestRejected):
    """Raised when the ``Content-Type`` header is undeclared or unsupported."""

    reason = RejectionReason.CONTENT_TYPE
    http_status = HTTP_UNSUPPORTED_MEDIA_TYPE


class BodyRejectedError(RequestRejected):
    """Raised for missing, malformed, or schema-nonconforming request bodies."""

    reason = RejectionReason.BODY
    http_status = HTTP_BAD_REQUEST


class ResponseRejectedError(RequestRejected):
    """Raised when a response status code is not declared by the operation."""

    reason = RejectionReason.RESPONSE_STATUS
    http_status = HTTP_BAD_GATEWAY

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


# --- Specification defects ---


class SpecificationDefect(SpecguardError):
    """Base class for specification-authoring defects.

    Raised when the specification breaks the contract the engine relies on.
    Callers should treat these as bugs in the specification, not in the
    request being validated.
    """


class UnresolvedReferenceError(SpecificationDefect):
    """Raised when a ``$ref`` cannot be followed to a component."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference


class ReferenceCycleError(SpecificationDefect):
    """Raised when following ``$ref`` pointers revisits a reference."""

    def __init__(self, message: str, chain: list[str]):
        super().__init__(message)
        self.chain = chain


class UnsupportedFeatureError(SpecificationDefect):
    """Raised when the engine reaches a shape it does not implement yet."""


class SchemaCompileError(SpecificationDefect):
    """Raised when the evaluator refuses a generated JSON Schema document."""


# --- Configuration ---


class ConfigError(SpecguardError):
    """Raised for invalid configuration values (bad environment variables)."""
