"""
Envelope validator.

Wraps Pydantic validation (:class:`RawEnvelope`) and converts validation
errors into a flat error list the normaliser can log before degrading to a
``None`` document.
"""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import ValidationError

from shipmail.models.envelope import RawEnvelope


class EnvelopeValidationError(ValueError):
    """Raised when the raw envelope does not have the mailbox message shape."""

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        self.validation_errors = errors
        messages = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Envelope validation failed: {messages}")


def validate_envelope(raw: Any) -> RawEnvelope:
    """
    Validate a raw mailbox message against :class:`RawEnvelope`.

    Raises:
        :class:`EnvelopeValidationError` if *raw* is not a mapping or the
        ``payload`` structure is missing or malformed.
    """
    if isinstance(raw, RawEnvelope):
        return raw
    if not isinstance(raw, dict):
        raise EnvelopeValidationError(
            [{"field": "<root>", "message": f"expected an object, got {type(raw).__name__}", "type": "type_error"}]
        )

    try:
        return RawEnvelope.model_validate(raw)
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]) or "<root>",
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise EnvelopeValidationError(errors) from exc
