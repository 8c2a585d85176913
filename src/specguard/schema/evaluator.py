"""JSON Schema evaluation backed by :mod:`jsonschema`.

The engine builds JSON Schema documents (see
:mod:`specguard.schema.translator`) and hands them to this thin adapter:

* :func:`compile_schema` -- check a document and return an :class:`Evaluator`.
* :meth:`Evaluator.is_valid` -- test one JSON value against it.
* :func:`parse_json` -- strict JSON parsing of parameter values and bodies.
* :func:`schema_accepts` -- translate, compile and evaluate in one call.

Documents are evaluated with the Draft 4 dialect, which is the one
OpenAPI 3.0 schemas are written against (``exclusiveMinimum`` and
``exclusiveMaximum`` are booleans modifying ``minimum``/``maximum``).
``format`` keywords are enforced through :class:`jsonschema.FormatChecker`
when format checking is enabled.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from jsonschema import Draft4Validator, FormatChecker
from jsonschema.exceptions import SchemaError

from specguard.exceptions import SchemaCompileError
from specguard.models import Components, ValidatorConfig
from specguard.schema.translator import to_json_schema


class Evaluator:
    """A compiled JSON Schema document.

    Args:
        document: The JSON Schema document.
        format_checking: Enforce ``format`` keywords.
    """

    def __init__(self, document: dict[str, Any], format_checking: bool = True):
        self.document = document
        format_checker = FormatChecker() if format_checking else None
        self._validator = Draft4Validator(document, format_checker=format_checker)

    def is_valid(self, value: Any) -> bool:
        """Return whether *value* conforms to the document."""
        return self._validator.is_valid(value)

    def __repr__(self) -> str:
        return f"Evaluator({self.document!r})"


def compile_schema(
    document: dict[str, Any],
    format_checking: bool = True,
    check_schema: bool = True,
) -> Evaluator:
    """Compile a JSON Schema document into an :class:`Evaluator`.

    Args:
        document: The JSON Schema document to compile.
        format_checking: Enforce ``format`` keywords during evaluation.
        check_schema: Check *document* against the Draft 4 meta-schema first.

    Returns:
        An evaluator for *document*.

    Raises:
        SchemaCompileError: If the document is not a valid Draft 4 schema.
    """
    if check_schema:
        try:
            Draft4Validator.check_schema(document)
        except SchemaError as exc:
            raise SchemaCompileError(
                f"Generated JSON Schema is invalid: {exc.message}"
            ) from exc
    return Evaluator(document, format_checking=format_checking)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json(text: str | bytes) -> Any:
    """Parse *text* as strict JSON.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected, as are bytes that
    are not valid UTF-8 and values nested deeper than the decoder can recurse.

    Raises:
        ValueError: If *text* is not a single valid JSON value.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON value is nested too deeply") from exc


def schema_accepts(
    schema: Any,
    value: Any,
    components: Optional[Components] = None,
    config: Optional[ValidatorConfig] = None,
) -> bool:
    """Translate *schema*, compile it and test *value* against it.

    Args:
        schema: A :class:`~specguard.models.Schema` or a reference to one.
        value: An already-parsed JSON value.
        components: The component table references are resolved against.
        config: Engine options; defaults apply when omitted.

    Raises:
        SpecificationDefect: If the schema cannot be translated or compiled.
    """
    if config is None:
        config = ValidatorConfig()
    document = to_json_schema(schema, components)
    evaluator = compile_schema(
        document,
        format_checking=config.format_checking,
        check_schema=config.check_schemas,
    )
    return evaluator.is_valid(value)
