"""specguard -- Validate HTTP requests and responses against OpenAPI 3.0.

Give the engine an already-deserialised OpenAPI document and ask it, per
request, whether the request conforms to the contract:

    from specguard import SimpleRequest, SimpleResponse, Validator

    validator = Validator(yaml.safe_load(openapi_text))
    validated = validator.validate_request(
        SimpleRequest(
            url="http://api.example.com/users/42",
            method="post",
            body=b'{"name": "laurence"}',
            headers={"Content-Type": "application/json"},
        )
    )
    validated.validate_response(SimpleResponse(status_code=201))

Rejections raise :class:`~specguard.exceptions.RequestRejected` subclasses;
problems with the document itself raise
:class:`~specguard.exceptions.SpecificationDefect` subclasses.

Modules:
    models: Pydantic models of the specification and engine options.
    config: Option resolution from arguments and environment.
    exceptions: Rejection and defect hierarchies.
    status_codes: Suggested HTTP status codes per rejection.
    resolver: ``$ref`` resolution into the component table.
    schema: OpenAPI schema to JSON Schema translation and evaluation.
    validators: The validation pipeline.
    request: Request/response protocols and in-memory implementations.
    adapters: httpx request adapter.
"""

from specguard.exceptions import RequestRejected, SpecificationDefect
from specguard.models import Specification, ValidatorConfig
from specguard.request import SimpleRequest, SimpleResponse
from specguard.validators import ValidatedRequest, Validator

__version__ = "0.1.0"

__all__ = [
    "RequestRejected",
    "SimpleRequest",
    "SimpleResponse",
    "Specification",
    "SpecificationDefect",
    "ValidatedRequest",
    "Validator",
    "ValidatorConfig",
]
