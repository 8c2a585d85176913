"""Schema handling -- translate OpenAPI schemas and evaluate JSON values.

Sub-modules:

* :mod:`~specguard.schema.translator` -- OpenAPI schema node to JSON Schema
  document.
* :mod:`~specguard.schema.evaluator` -- compile a JSON Schema document and
  test values against it.
"""

from specguard.schema.evaluator import Evaluator, compile_schema, parse_json, schema_accepts
from specguard.schema.translator import to_json_schema

__all__ = [
    "Evaluator",
    "compile_schema",
    "parse_json",
    "schema_accepts",
    "to_json_schema",
]
