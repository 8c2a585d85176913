"""Validate header, query and path parameters declared on an operation.

For each declared parameter a raw string value is looked up according to
its location:

* ``header`` -- :meth:`Request.get_header` (case sensitivity is up to the
  request implementation);
* ``query`` -- the first pair in the URL query string whose key equals the
  parameter name;
* ``path`` -- the binding produced by the path matcher.

A missing value fails a required parameter and passes an optional one. A
present value is parsed as a JSON literal (``true``, ``10``, ``"text"``...)
and must satisfy the parameter's schema. Cookie parameters and
``content``-based parameters are not supported.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from specguard.exceptions import ParameterRejectedError, UnsupportedFeatureError
from specguard.models import (
    Components,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    ValidatorConfig,
)
from specguard.request import Request
from specguard.resolver import resolve_parameter
from specguard.schema.evaluator import parse_json, schema_accepts

logger = logging.getLogger(__name__)


def declared_parameters(
    operation: Operation,
    components: Optional[Components],
    path_item: Optional[PathItem] = None,
) -> list[Parameter]:
    """Resolve the parameters that apply to *operation*.

    When *path_item* is given, its parameters are included too; an
    operation-level parameter overrides a path-level one with the same
    ``name`` and ``in`` values.

    Returns:
        Concrete parameters, path-level ones first.

    Raises:
        SpecificationDefect: If a parameter reference does not resolve.
    """
    op_params = [resolve_parameter(param, components) for param in operation.parameters]
    if path_item is None or not path_item.parameters:
        return op_params

    overridden = {(param.name, param.location) for param in op_params}
    merged: list[Parameter] = []
    for param in path_item.parameters:
        param = resolve_parameter(param, components)
        if (param.name, param.location) not in overridden:
            merged.append(param)
    merged.extend(op_params)
    return merged


def validate_parameters(
    parameters: list[Parameter],
    request: Request,
    url: httpx.URL,
    bindings: dict[str, str],
    components: Optional[Components],
    config: ValidatorConfig,
) -> None:
    """Check every parameter in *parameters* against the request.

    Args:
        parameters: Concrete parameters, from :func:`declared_parameters`.
        request: The request being validated.
        url: The request URL, already parsed.
        bindings: Path variable bindings from the path matcher.
        components: The component table for schema references.
        config: Engine options.

    Raises:
        ParameterRejectedError: On the first parameter that is missing,
            not valid JSON, or does not satisfy its schema.
        UnsupportedFeatureError: For cookie or ``content``-based parameters.
    """
    for parameter in parameters:
        _validate_parameter(parameter, request, url, bindings, components, config)


def _validate_parameter(
    parameter: Parameter,
    request: Request,
    url: httpx.URL,
    bindings: dict[str, str],
    components: Optional[Components],
    config: ValidatorConfig,
) -> None:
    name = parameter.name
    location = parameter.location.value

    if parameter.location is ParameterLocation.COOKIE:
        raise UnsupportedFeatureError(
            f"Cookie parameters are not supported (parameter '{name}')"
        )
    if parameter.schema_ is None:
        raise UnsupportedFeatureError(
            f"Parameters without a schema are not supported (parameter '{name}')"
        )

    raw = _raw_value(parameter, request, url, bindings)
    if raw is None:
        if parameter.required:
            logger.debug("Required %s parameter '%s' is missing", location, name)
            raise ParameterRejectedError(
                f"Missing required {location} parameter '{name}'",
                name=name,
                location=location,
            )
        return

    try:
        value = parse_json(raw)
    except ValueError as exc:
        logger.debug("%s parameter '%s' is not JSON: %s", location, name, exc)
        raise ParameterRejectedError(
            f"{location.capitalize()} parameter '{name}' is not a JSON value: {raw!r}",
            name=name,
            location=location,
        ) from exc

    if not schema_accepts(parameter.schema_, value, components, config):
        logger.debug("%s parameter '%s' does not match its schema", location, name)
        raise ParameterRejectedError(
            f"{location.capitalize()} parameter '{name}' does not match its schema",
            name=name,
            location=location,
        )


def _raw_value(
    parameter: Parameter,
    request: Request,
    url: httpx.URL,
    bindings: dict[str, str],
) -> Optional[str]:
    """Look up the raw string value for *parameter*, or ``None`` when absent."""
    if parameter.location is ParameterLocation.HEADER:
        return request.get_header(parameter.name)
    if parameter.location is ParameterLocation.QUERY:
        return url.params.get(parameter.name)
    return bindings.get(parameter.name)
