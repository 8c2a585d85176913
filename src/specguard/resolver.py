"""Resolve ``$ref`` pointers into the specification's component table.

OpenAPI documents use ``$ref`` pointers (e.g.
``{"$ref": "#/components/schemas/Pet"}``) to share schemas, parameters and
request bodies. Unlike a whole-document inliner, the engine resolves lazily:
each stage asks for the one item it is about to use, and the pointer is
followed -- through any number of further pointers -- until a concrete item
is reached.

Only pointers of the form ``#/components/<section>/<name>`` are supported,
where ``<section>`` is the section the caller expects (a schema reference
must point into ``schemas``). ``<name>`` is unescaped per RFC 6901 (``~1``
for ``/``, ``~0`` for ``~``).

Cycles are detected with the set of pointers already followed on the
current chain; revisiting one raises
:class:`~specguard.exceptions.ReferenceCycleError` instead of recursing
forever.

Every failure here is a :class:`~specguard.exceptions.SpecificationDefect`,
never a request rejection.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specguard.exceptions import ReferenceCycleError, UnresolvedReferenceError
from specguard.models import Components, Parameter, Reference, RequestBody, Schema

logger = logging.getLogger(__name__)

SCHEMAS = "schemas"
PARAMETERS = "parameters"
REQUEST_BODIES = "requestBodies"

# section name in a $ref -> attribute on Components
_SECTION_ATTRIBUTES = {
    SCHEMAS: "schemas",
    PARAMETERS: "parameters",
    REQUEST_BODIES: "request_bodies",
}


def resolve(
    item: Any,
    components: Optional[Components],
    section: str,
) -> Any:
    """Follow *item* to a concrete component.

    Args:
        item: A concrete model, or a :class:`~specguard.models.Reference`.
        components: The specification's component table, if it has one.
        section: The section references are expected to point into
            (:data:`SCHEMAS`, :data:`PARAMETERS` or :data:`REQUEST_BODIES`).

    Returns:
        *item* itself when it is already concrete, otherwise the concrete
        item at the end of the reference chain.

    Raises:
        UnresolvedReferenceError: If the component table, the section or
            the name is missing, or the pointer has an unsupported form.
        ReferenceCycleError: If the chain revisits a pointer.
    """
    resolved, _ = follow_refs(item, components, section)
    return resolved


def follow_refs(
    item: Any,
    components: Optional[Components],
    section: str,
    seen: Optional[frozenset[str]] = None,
) -> tuple[Any, frozenset[str]]:
    """Follow *item* to a concrete component, tracking visited pointers.

    The returned set contains *seen* plus every pointer followed on the
    way. Callers that recurse into the resolved item (the schema
    translator) pass it back in so that cycles spanning several hops are
    caught too.

    Returns:
        A ``(concrete_item, seen)`` tuple.
    """
    if seen is None:
        seen = frozenset()

    if not isinstance(item, Reference):
        return item, seen

    ref = item.ref
    if ref in seen:
        raise ReferenceCycleError(
            f"Circular $ref detected at '{ref}'", chain=sorted(seen | {ref})
        )

    logger.debug("Following $ref '%s'", ref)
    target = _lookup(ref, components, section)
    return follow_refs(target, components, section, seen | {ref})


def resolve_schema(item: Any, components: Optional[Components]) -> Schema:
    """Resolve a schema-or-reference into a :class:`~specguard.models.Schema`."""
    return resolve(item, components, SCHEMAS)


def resolve_parameter(item: Any, components: Optional[Components]) -> Parameter:
    """Resolve a parameter-or-reference into a :class:`~specguard.models.Parameter`."""
    return resolve(item, components, PARAMETERS)


def resolve_request_body(item: Any, components: Optional[Components]) -> RequestBody:
    """Resolve a request-body-or-reference into a :class:`~specguard.models.RequestBody`."""
    return resolve(item, components, REQUEST_BODIES)


def _lookup(ref: str, components: Optional[Components], section: str) -> Any:
    """Look up a single ``#/components/<section>/<name>`` pointer.

    Returns:
        The value stored under the name, which may itself be a reference.

    Raises:
        UnresolvedReferenceError: If the pointer cannot be followed.
    """
    if not ref.startswith("#/"):
        raise UnresolvedReferenceError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/components/...) are handled.",
            reference=ref,
        )

    prefix = f"#/components/{section}/"
    if not ref.startswith(prefix) or len(ref) == len(prefix):
        raise UnresolvedReferenceError(
            f"Cannot resolve $ref '{ref}': expected a reference of the form "
            f"'{prefix}<name>'",
            reference=ref,
        )

    name = ref[len(prefix):].replace("~1", "/").replace("~0", "~")

    if components is None:
        raise UnresolvedReferenceError(
            f"Cannot resolve $ref '{ref}': the specification has no components",
            reference=ref,
        )

    table = getattr(components, _SECTION_ATTRIBUTES[section])
    if table is None:
        raise UnresolvedReferenceError(
            f"Cannot resolve $ref '{ref}': components has no '{section}' section",
            reference=ref,
        )

    if name not in table:
        raise UnresolvedReferenceError(
            f"Cannot resolve $ref '{ref}': '{name}' not found in components/{section}",
            reference=ref,
        )

    return table[name]
