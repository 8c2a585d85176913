"""The validation pipeline, one module per stage.

Typical usage::

    from specguard.validators import Validator

    validator = Validator(spec)
    validated = validator.validate_request(request)
    validated.validate_response(response)

Sub-modules:

* :mod:`~specguard.validators.request` -- :class:`Validator`, the pipeline
  orchestrator, and :class:`ValidatedRequest`.
* :mod:`~specguard.validators.paths` -- path template matching.
* :mod:`~specguard.validators.operation` -- method to operation selection.
* :mod:`~specguard.validators.parameters` -- header, query and path
  parameters.
* :mod:`~specguard.validators.content_type` -- content negotiation.
* :mod:`~specguard.validators.body` -- request body validation.
* :mod:`~specguard.validators.response` -- response status codes.
"""

from specguard.validators.request import ValidatedRequest, Validator

__all__ = ["ValidatedRequest", "Validator"]
