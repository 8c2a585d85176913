"""Suggested HTTP status codes for each class of request rejection.

Each constant maps to a specific rejection category and is referenced by the
corresponding :class:`~specguard.exceptions.RequestRejected` subclass.
A server wrapping the validator can answer with ``exc.http_status`` without
inspecting the exception type.

Example::

    try:
        validator.validate_request(request)
    except RequestRejected as exc:
        return Response(status_code=exc.http_status)
"""

HTTP_BAD_REQUEST = 400
"""The request is malformed: bad URL, parameter, or body."""

HTTP_NOT_FOUND = 404
"""No path template in the specification matches the request path."""

HTTP_METHOD_NOT_ALLOWED = 405
"""The matched path does not declare an operation for the request method."""

HTTP_UNSUPPORTED_MEDIA_TYPE = 415
"""The request ``Content-Type`` is not declared for the operation's body."""

HTTP_BAD_GATEWAY = 502
"""The upstream response status code is not declared by the operation."""
