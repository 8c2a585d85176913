"""Shared test fixtures for specguard.

Specifications are written as YAML snippets and deserialised with PyYAML,
the way a real caller would hand the engine an already-parsed document.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
import yaml

from specguard.models import Specification, ValidatorConfig
from specguard.request import SimpleRequest
from specguard.validators.request import Validator


FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "http://test.com"

_PREAMBLE = """\
openapi: 3.0.0
info:
  description: API to handle generic two-way HTTP requests
  version: "1.0.0"
  title: Swagger ReST Article
"""


def load_document(path_spec: str) -> dict[str, Any]:
    """Prefix a ``paths:``/``components:`` YAML snippet with a preamble and parse it."""
    return yaml.safe_load(_PREAMBLE + textwrap.dedent(path_spec))


def make_request(
    path: str,
    method: str = "get",
    body: bytes = b"",
    headers: Optional[dict[str, str]] = None,
) -> SimpleRequest:
    """Build a request against :data:`BASE_URL`."""
    return SimpleRequest(
        url=BASE_URL + path,
        method=method,
        body=body,
        headers=headers or {},
    )


def json_request(path: str, body: bytes, method: str = "post") -> SimpleRequest:
    """Build a request carrying a JSON body."""
    return make_request(
        path, method=method, body=body, headers={"Content-Type": "application/json"}
    )


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_specguard_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SPECGUARD_* variables from the developer's shell out of tests."""
    for var in [
        "SPECGUARD_FORMAT_CHECKING",
        "SPECGUARD_CHECK_SCHEMAS",
        "SPECGUARD_MERGE_PATH_PARAMETERS",
    ]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Specification fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def openapi_raw() -> dict[str, Any]:
    """Load the raw shared fixture document."""
    with open(FIXTURES_DIR / "openapi.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def openapi_spec(openapi_raw: dict[str, Any]) -> Specification:
    """The shared fixture document as a model."""
    return Specification.model_validate(openapi_raw)


@pytest.fixture
def validator(openapi_spec: Specification) -> Validator:
    """A validator over the shared fixture document with default options."""
    return Validator(openapi_spec, ValidatorConfig())


@pytest.fixture
def make_validator() -> Callable[..., Validator]:
    """Factory building a validator from a YAML ``paths:`` snippet.

    Keyword arguments are passed to :class:`ValidatorConfig`.
    """

    def _make(path_spec: str, **options: bool) -> Validator:
        return Validator(load_document(path_spec), ValidatorConfig(**options))

    return _make
