"""Translate OpenAPI 3.0 schema nodes into JSON Schema documents.

OpenAPI 3.0 schemas are *almost* JSON Schema (Draft 4 flavoured), but the
parsed :class:`~specguard.models.Schema` model carries OpenAPI-only
keywords, pydantic field names and ``$ref`` pointers into the component
table. :func:`to_json_schema` produces a plain ``dict`` that an ordinary
JSON Schema evaluator can consume:

* ``boolean`` -> ``{"type": "boolean"}``
* ``string`` -> ``type`` plus ``minLength``, ``maxLength``, ``pattern``,
  ``enum`` and a ``format`` from the known set (``date-time``, ``date``,
  ``password``, ``byte``, ``binary``). Other formats are dropped.
* ``number`` / ``integer`` -> ``type`` plus ``minimum``, ``maximum``,
  ``multipleOf``, ``enum``. ``exclusiveMinimum``/``exclusiveMaximum`` are
  written only when true, as Draft 4 booleans.
* ``array`` -> ``type`` plus ``minItems``, ``maxItems``, ``uniqueItems``
  (only when true) and the translated ``items``.
* ``object`` -> ``type`` plus ``minProperties``, ``maxProperties``,
  ``additionalProperties`` (boolean or translated schema), ``properties``
  and ``required`` (both omitted when empty).
* ``oneOf`` / ``allOf`` / ``anyOf`` -> list of translated members.
* ``not`` -> translated inner schema.

References are resolved through :mod:`specguard.resolver` before
translation. An ``items`` or ``additionalProperties`` reference that does
not resolve is left out of the document rather than failing; any other
unresolved reference is a defect. Recursive schemas are reported as
:class:`~specguard.exceptions.ReferenceCycleError`, since the output has no
``$ref`` of its own to close the loop with.

Keys are inserted in a fixed order so that output is stable for golden
comparisons.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specguard.exceptions import UnresolvedReferenceError
from specguard.models import Components, Schema, SchemaKind
from specguard.resolver import SCHEMAS, follow_refs

logger = logging.getLogger(__name__)

STRING_FORMATS = frozenset({"date-time", "date", "password", "byte", "binary"})

_COMBINATORS = {
    SchemaKind.ONE_OF: ("oneOf", "one_of"),
    SchemaKind.ALL_OF: ("allOf", "all_of"),
    SchemaKind.ANY_OF: ("anyOf", "any_of"),
}


def to_json_schema(
    schema: Any,
    components: Optional[Components] = None,
    seen: Optional[frozenset[str]] = None,
) -> dict[str, Any]:
    """Translate a schema (or a reference to one) into a JSON Schema document.

    Args:
        schema: A :class:`~specguard.models.Schema` or a
            :class:`~specguard.models.Reference` into ``components/schemas``.
        components: The component table references are resolved against.
        seen: Pointers already followed on the current chain. Internal;
            callers leave it unset.

    Returns:
        A new JSON Schema document as a plain ``dict``.

    Raises:
        UnresolvedReferenceError: If a reference outside ``items`` /
            ``additionalProperties`` does not resolve.
        ReferenceCycleError: If the schema refers back to itself.
        UnsupportedFeatureError: If a node has a shape the translator does
            not model (multi-typed, untyped, ``null``).

    Example::

        to_json_schema(Schema(type="string", minLength=5))
        # {"type": "string", "minLength": 5}
    """
    node, seen = follow_refs(schema, components, SCHEMAS, seen)
    kind = node.kind

    if kind is SchemaKind.BOOLEAN:
        return {"type": "boolean"}
    if kind is SchemaKind.STRING:
        return _string(node)
    if kind in (SchemaKind.NUMBER, SchemaKind.INTEGER):
        return _numeric(node, kind.value)
    if kind is SchemaKind.ARRAY:
        return _array(node, components, seen)
    if kind is SchemaKind.OBJECT:
        return _object(node, components, seen)
    if kind is SchemaKind.NOT:
        return {"not": to_json_schema(node.not_, components, seen)}

    keyword, attribute = _COMBINATORS[kind]
    return {
        keyword: [
            to_json_schema(member, components, seen)
            for member in getattr(node, attribute)
        ]
    }


def _string(node: Schema) -> dict[str, Any]:
    document: dict[str, Any] = {"type": "string"}
    _insert_if_some(document, "minLength", node.min_length)
    _insert_if_some(document, "maxLength", node.max_length)
    _insert_if_not_empty(document, "enum", node.enum_)
    _insert_if_some(document, "pattern", node.pattern)
    if node.format in STRING_FORMATS:
        document["format"] = node.format
    elif node.format is not None:
        logger.debug("Dropping unrecognised string format '%s'", node.format)
    return document


def _numeric(node: Schema, type_name: str) -> dict[str, Any]:
    document: dict[str, Any] = {"type": type_name}
    _insert_if_some(document, "minimum", node.minimum)
    _insert_if_some(document, "maximum", node.maximum)
    _insert_if_true(document, "exclusiveMinimum", node.exclusive_minimum)
    _insert_if_true(document, "exclusiveMaximum", node.exclusive_maximum)
    _insert_if_some(document, "multipleOf", node.multiple_of)
    _insert_if_not_empty(document, "enum", node.enum_)
    return document


def _array(
    node: Schema, components: Optional[Components], seen: frozenset[str]
) -> dict[str, Any]:
    document: dict[str, Any] = {"type": "array"}
    _insert_if_some(document, "minItems", node.min_items)
    _insert_if_some(document, "maxItems", node.max_items)
    _insert_if_true(document, "uniqueItems", node.unique_items)
    if node.items is not None:
        _insert_if_some(document, "items", _lenient(node.items, components, seen))
    return document


def _object(
    node: Schema, components: Optional[Components], seen: frozenset[str]
) -> dict[str, Any]:
    document: dict[str, Any] = {"type": "object"}
    _insert_if_some(document, "minProperties", node.min_properties)
    _insert_if_some(document, "maxProperties", node.max_properties)

    additional = node.additional_properties
    if isinstance(additional, bool):
        document["additionalProperties"] = additional
    elif additional is not None:
        _insert_if_some(
            document, "additionalProperties", _lenient(additional, components, seen)
        )

    if node.properties:
        document["properties"] = {
            name: to_json_schema(prop, components, seen)
            for name, prop in node.properties.items()
        }
    _insert_if_not_empty(document, "required", node.required)
    return document


def _lenient(
    schema: Any, components: Optional[Components], seen: frozenset[str]
) -> Optional[dict[str, Any]]:
    """Translate *schema*, returning ``None`` if its own reference does not resolve.

    Only the pointer at this position is treated leniently; failures further
    down the resolved schema still propagate.
    """
    try:
        node, seen = follow_refs(schema, components, SCHEMAS, seen)
    except UnresolvedReferenceError as exc:
        logger.debug("Omitting unresolvable sub-schema: %s", exc)
        return None
    return to_json_schema(node, components, seen)


def _insert_if_some(document: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        document[key] = value


def _insert_if_true(document: dict[str, Any], key: str, value: bool) -> None:
    if value:
        document[key] = True


def _insert_if_not_empty(
    document: dict[str, Any], key: str, value: Optional[list[Any]]
) -> None:
    if value:
        document[key] = list(value)
