"""Validation of decoded LLM output for the interpretation worker.

The completion gateway returns free text with no structural guarantee, so
the decoded value is checked here before anything downstream trusts it.
Validation never raises: a failure is returned as a ``ValidationResult``
carrying the violated constraint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import INTERPRETATION_MAX_LENGTH, INTERPRETATION_MIN_LENGTH

NOT_AN_OBJECT = "not_an_object"
MISSING_FIELD = "missing_field"
WRONG_TYPE = "wrong_type"
TOO_SHORT = "too_short"
TOO_LONG = "too_long"


class InterpretationOutput(BaseModel):
    """The validated interpretation document returned by the model."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    interpretation: str = Field(
        strict=True,
        min_length=INTERPRETATION_MIN_LENGTH,
        max_length=INTERPRETATION_MAX_LENGTH,
    )


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Either a validated document or the constraint it violated."""

    ok: bool
    document: Optional[InterpretationOutput] = None
    violation: Optional[str] = None
    message: Optional[str] = None


def validate_interpretation_output(value: Any) -> ValidationResult:
    """Check *value* against ``{"interpretation": str}`` with length bounds."""
    if not isinstance(value, dict):
        return ValidationResult(
            ok=False,
            violation=NOT_AN_OBJECT,
            message=f"Expected a JSON object, got {type(value).__name__}",
        )

    try:
        document = InterpretationOutput.model_validate(value)
    except ValidationError as exc:
        violation, message = _map_validation_error(exc)
        return ValidationResult(ok=False, violation=violation, message=message)

    return ValidationResult(ok=True, document=document)


def _map_validation_error(error: ValidationError) -> tuple[str, str]:
    """Map the first pydantic error to a stable violation kind and message."""
    first_error = error.errors()[0]
    error_type = first_error.get("type", "")

    if error_type == "missing":
        return MISSING_FIELD, "interpretation is required"
    if error_type == "string_too_short":
        return (
            TOO_SHORT,
            f"Interpretation must be at least {INTERPRETATION_MIN_LENGTH} characters",
        )
    if error_type == "string_too_long":
        return (
            TOO_LONG,
            f"Interpretation must not exceed {INTERPRETATION_MAX_LENGTH} characters",
        )
    return WRONG_TYPE, "interpretation must be a string"

__all__ = [
    "InterpretationOutput",
    "ValidationResult",
    "validate_interpretation_output",
    "NOT_AN_OBJECT",
    "MISSING_FIELD",
    "WRONG_TYPE",
    "TOO_SHORT",
    "TOO_LONG",
]
