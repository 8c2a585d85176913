"""Match a concrete request path against the specification's path templates.

Both the request path and every template are split on ``/`` with empty
components discarded, so ``/users/42``, ``/users/42/`` and ``//users/42``
are the same path. Request components are percent-decoded only after
splitting, so an encoded ``%2F`` stays inside its component. A template
component of the form ``{name}`` is a variable segment and matches any
(non-empty) request component; every other component must match the
decoded request component exactly.

The first template in document order that matches wins. Templates are not
ranked by specificity: with both ``/users/{id}`` and ``/users/me``
declared, ``/users/me`` matches whichever comes first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import unquote

from specguard.exceptions import PathNotFoundError
from specguard.models import PathItem, Specification

logger = logging.getLogger(__name__)

_VARIABLE_RE = re.compile(r"^\{[^}]*\}$")


@dataclass(frozen=True)
class Segment:
    """One component of a path template: a fixed literal or a named variable."""

    value: str
    is_variable: bool = False

    @classmethod
    def from_component(cls, component: str) -> Segment:
        if _VARIABLE_RE.match(component):
            return cls(value=component[1:-1], is_variable=True)
        return cls(value=component)

    def matches(self, request_segment: str) -> bool:
        return self.is_variable or self.value == request_segment


@dataclass(frozen=True)
class PathMatch:
    """The result of a successful match.

    Attributes:
        template: The matching path key, e.g. ``/users/{id}``.
        path_item: The path item declared under that key.
        bindings: Variable name to the literal request segment it matched.
    """

    template: str
    path_item: PathItem
    bindings: dict[str, str] = field(default_factory=dict)


def split_path(path: str) -> list[str]:
    """Split *path* on ``/``, dropping empty components."""
    return [component for component in path.split("/") if component]


def parse_template(template: str) -> list[Segment]:
    """Classify every component of *template* as fixed or variable."""
    return [Segment.from_component(component) for component in split_path(template)]


def segments_match(template_segments: list[Segment], request_segments: list[str]) -> bool:
    """Return whether a parsed template matches the split request path."""
    if len(template_segments) != len(request_segments):
        return False
    return all(
        segment.matches(request_segment)
        for segment, request_segment in zip(template_segments, request_segments)
    )


def extract_bindings(
    template_segments: list[Segment], request_segments: list[str]
) -> dict[str, str]:
    """Map each variable segment name to the request component at its position."""
    return {
        segment.value: request_segment
        for segment, request_segment in zip(template_segments, request_segments)
        if segment.is_variable
    }


def match_path(spec: Specification, request_path: str) -> PathMatch:
    """Find the first path template in *spec* matching *request_path*.

    Args:
        spec: The specification whose ``paths`` are searched.
        request_path: The path component of the request URL, still
            percent-encoded.

    Returns:
        The matching template, its path item and the variable bindings.

    Raises:
        PathNotFoundError: If no template matches.
    """
    request_segments = [unquote(component) for component in split_path(request_path)]

    for template, path_item in spec.paths.items():
        template_segments = parse_template(template)
        if segments_match(template_segments, request_segments):
            bindings = extract_bindings(template_segments, request_segments)
            logger.debug("Path '%s' matched template '%s'", request_path, template)
            return PathMatch(template=template, path_item=path_item, bindings=bindings)

    logger.debug("Path '%s' matched no template", request_path)
    raise PathNotFoundError(f"No path template matches '{request_path}'")
