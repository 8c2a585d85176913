"""Canonical Pydantic models shared across all specguard modules.

The models fall into two groups:

**Specification models** -- a read-only, in-memory view of the subset of an
OpenAPI 3.0 document that the validation engine reads:
    :class:`Specification`, :class:`Components`, :class:`PathItem`,
    :class:`Operation`, :class:`Parameter`, :class:`RequestBody`,
    :class:`MediaType`, :class:`Response`, :class:`Schema`, and
    :class:`Reference`.

**Configuration models** -- engine options resolved by
:func:`~specguard.config.resolve_config`:
    :class:`ValidatorConfig`.

The document itself is parsed elsewhere (JSON, YAML, whatever the caller
uses); :meth:`Specification.model_validate` turns the resulting plain dict
into this model. Every specification model is frozen so that a single
instance can be shared by any number of validations.

Wherever OpenAPI allows ``{"$ref": ...}`` in place of an object the field is
typed as ``<Name>Ref`` -- a union of :class:`Reference` and the concrete
model, told apart by the presence of a ``$ref`` key.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

from specguard.exceptions import UnsupportedFeatureError


# --- Enums ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the engine recognises on a path item.

    Any other method token is rejected outright, even if the document
    declares an operation for it.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class SchemaKind(str, enum.Enum):
    """The shapes of :class:`Schema` that can be translated to JSON Schema."""

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    ARRAY = "array"
    OBJECT = "object"
    ONE_OF = "oneOf"
    ALL_OF = "allOf"
    ANY_OF = "anyOf"
    NOT = "not"


_TYPE_KINDS = {
    "boolean": SchemaKind.BOOLEAN,
    "string": SchemaKind.STRING,
    "number": SchemaKind.NUMBER,
    "integer": SchemaKind.INTEGER,
    "array": SchemaKind.ARRAY,
    "object": SchemaKind.OBJECT,
}

_SPEC_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


def _reference_or_item(value: Any) -> str:
    """Discriminate a ``$ref`` mapping from an inline object."""
    if isinstance(value, dict):
        return "reference" if "$ref" in value else "item"
    if isinstance(value, Reference):
        return "reference"
    return "item"


# --- Specification models ---


class Reference(BaseModel):
    """An indirect ``{"$ref": "#/components/<section>/<name>"}`` pointer."""

    model_config = _SPEC_MODEL_CONFIG

    ref: str = Field(alias="$ref")


class Schema(BaseModel):
    """An OpenAPI 3.0 *Schema Object*.

    One model covers every shape; :attr:`kind` says which one a given node
    is. Fields that do not apply to that shape are simply left unset.
    Unknown keywords (``description``, ``example``, ``nullable``...) are kept
    in ``model_extra`` and ignored by the translator.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    type: Optional[Union[str, list[str]]] = None
    format: Optional[str] = None

    # string
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    pattern: Optional[str] = None
    enum_: Optional[list[Any]] = Field(default=None, alias="enum")

    # number / integer
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    exclusive_minimum: bool = Field(default=False, alias="exclusiveMinimum")
    exclusive_maximum: bool = Field(default=False, alias="exclusiveMaximum")
    multiple_of: Optional[Union[int, float]] = Field(default=None, alias="multipleOf")

    # array
    items: Optional[SchemaRef] = None
    min_items: Optional[int] = Field(default=None, alias="minItems")
    max_items: Optional[int] = Field(default=None, alias="maxItems")
    unique_items: bool = Field(default=False, alias="uniqueItems")

    # object
    properties: dict[str, SchemaRef] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: Optional[Union[bool, SchemaRef]] = Field(
        default=None, alias="additionalProperties"
    )
    min_properties: Optional[int] = Field(default=None, alias="minProperties")
    max_properties: Optional[int] = Field(default=None, alias="maxProperties")

    # combinators
    one_of: Optional[list[SchemaRef]] = Field(default=None, alias="oneOf")
    all_of: Optional[list[SchemaRef]] = Field(default=None, alias="allOf")
    any_of: Optional[list[SchemaRef]] = Field(default=None, alias="anyOf")
    not_: Optional[SchemaRef] = Field(default=None, alias="not")

    @property
    def kind(self) -> SchemaKind:
        """Classify this node.

        A declared ``type`` takes precedence over combinators, matching how
        OpenAPI tooling reads a schema that carries both.

        Raises:
            UnsupportedFeatureError: For multi-typed schemas, ``type: null``,
                and schemas with neither a type nor a combinator.
        """
        if isinstance(self.type, list):
            raise UnsupportedFeatureError(
                f"Multi-typed schemas are not supported: {self.type}"
            )
        if self.type is not None:
            try:
                return _TYPE_KINDS[self.type]
            except KeyError:
                raise UnsupportedFeatureError(
                    f"Unsupported schema type: {self.type!r}"
                ) from None
        if self.one_of is not None:
            return SchemaKind.ONE_OF
        if self.all_of is not None:
            return SchemaKind.ALL_OF
        if self.any_of is not None:
            return SchemaKind.ANY_OF
        if self.not_ is not None:
            return SchemaKind.NOT
        raise UnsupportedFeatureError(
            "Schemas without a type or combinator are not supported"
        )


SchemaRef = Annotated[
    Union[Annotated[Reference, Tag("reference")], Annotated[Schema, Tag("item")]],
    Discriminator(_reference_or_item),
]

Schema.model_rebuild()


class MediaType(BaseModel):
    """One entry of a ``content`` map, keyed by media-type string."""

    model_config = _SPEC_MODEL_CONFIG

    schema_: Optional[SchemaRef] = Field(default=None, alias="schema")


def _null_media_types(value: Any) -> Any:
    # ``application/json:`` with nothing under it deserialises to None
    if isinstance(value, dict):
        return {key: ({} if item is None else item) for key, item in value.items()}
    return value


class Parameter(BaseModel):
    """An OpenAPI *Parameter Object*.

    Only ``schema``-based parameters are validated; ``content``-based ones
    and cookie parameters are reported as unsupported when reached.
    """

    model_config = _SPEC_MODEL_CONFIG

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[SchemaRef] = Field(default=None, alias="schema")
    content: Optional[dict[str, MediaType]] = None

    @field_validator("content", mode="before")
    @classmethod
    def _normalise_content(cls, value: Any) -> Any:
        return _null_media_types(value)


ParameterRef = Annotated[
    Union[Annotated[Reference, Tag("reference")], Annotated[Parameter, Tag("item")]],
    Discriminator(_reference_or_item),
]


class RequestBody(BaseModel):
    """An OpenAPI *Request Body Object*: a required flag and a content map."""

    model_config = _SPEC_MODEL_CONFIG

    required: bool = False
    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)

    @field_validator("content", mode="before")
    @classmethod
    def _normalise_content(cls, value: Any) -> Any:
        if value is None:
            return {}
        return _null_media_types(value)


RequestBodyRef = Annotated[
    Union[Annotated[Reference, Tag("reference")], Annotated[RequestBody, Tag("item")]],
    Discriminator(_reference_or_item),
]


class Response(BaseModel):
    """An OpenAPI *Response Object*. Only its presence matters to the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    description: Optional[str] = None


ResponseRef = Annotated[
    Union[Annotated[Reference, Tag("reference")], Annotated[Response, Tag("item")]],
    Discriminator(_reference_or_item),
]


class Operation(BaseModel):
    """A single operation (one HTTP method on one path template).

    ``responses`` keys are normalised to strings: ``"200"`` for exact codes,
    upper-cased ``"2XX"`` for ranges, ``"default"`` left as is.
    """

    model_config = _SPEC_MODEL_CONFIG

    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    parameters: list[ParameterRef] = Field(default_factory=list)
    request_body: Optional[RequestBodyRef] = Field(default=None, alias="requestBody")
    responses: dict[str, ResponseRef] = Field(default_factory=dict)

    @field_validator("responses", mode="before")
    @classmethod
    def _normalise_status_keys(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        normalised = {}
        for key, response in value.items():
            key = str(key)
            if key.lower() != "default":
                key = key.upper()
            normalised[key] = {} if response is None else response
        return normalised


class PathItem(BaseModel):
    """An OpenAPI *Path Item Object* restricted to the recognised methods."""

    model_config = _SPEC_MODEL_CONFIG

    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    parameters: list[ParameterRef] = Field(default_factory=list)

    def operation(self, method: HTTPMethod) -> Optional[Operation]:
        """Return the operation declared for *method*, if any."""
        return getattr(self, method.value)


class Components(BaseModel):
    """The shared component table that ``$ref`` pointers index into.

    A section that the document omits stays ``None`` so that the resolver
    can tell "no such section" apart from "no such name".
    """

    model_config = _SPEC_MODEL_CONFIG

    schemas: Optional[dict[str, SchemaRef]] = None
    parameters: Optional[dict[str, ParameterRef]] = None
    request_bodies: Optional[dict[str, RequestBodyRef]] = Field(
        default=None, alias="requestBodies"
    )


class Info(BaseModel):
    """API metadata from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str = "Untitled API"
    version: str = "0.0.0"
    description: Optional[str] = None


class Specification(BaseModel):
    """The root of an OpenAPI 3.0 document.

    ``paths`` keeps document order; the path matcher relies on it to pick
    the first matching template.

    Example::

        spec = Specification.model_validate(yaml.safe_load(text))
        validator = Validator(spec)
    """

    model_config = _SPEC_MODEL_CONFIG

    openapi: str = "3.0.0"
    info: Info = Field(default_factory=Info)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None

    @field_validator("paths", mode="before")
    @classmethod
    def _null_path_items(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {path: ({} if item is None else item) for path, item in value.items()}
        return value


# --- Configuration models ---


class ValidatorConfig(BaseModel):
    """Engine options for a :class:`~specguard.validators.request.Validator`.

    Built by :func:`~specguard.config.resolve_config`, which layers explicit
    arguments over ``SPECGUARD_*`` environment variables over these defaults.
    """

    format_checking: bool = Field(
        default=True,
        description="Enforce JSON Schema 'format' keywords such as date and date-time",
    )
    check_schemas: bool = Field(
        default=True,
        description="Check generated JSON Schema documents against the meta-schema",
    )
    merge_path_parameters: bool = Field(
        default=True,
        description="Apply path-item level parameters to every operation under it",
    )
