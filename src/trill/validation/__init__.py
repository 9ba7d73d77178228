"""Input validation — composable rules, clean results.

Usage::

    from trill.validation import validate, required, max_length

    @app.event("save")
    def save(exchange):
        result = validate(exchange.locals, {
            "title": [required, max_length(200)],
        })
        if not result:
            exchange.reject(result)
"""

from collections.abc import Mapping
from typing import Any

from trill.validation.result import ValidationResult
from trill.validation.rules import (
    Validator,
    integer,
    max_length,
    min_length,
    one_of,
    required,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "integer",
    "max_length",
    "min_length",
    "one_of",
    "required",
    "validate",
]


def validate(
    data: Mapping[str, Any],
    rules: dict[str, list[Validator]],
) -> ValidationResult:
    """Validate data against a set of rules.

    Values are read as strings; a missing or ``None`` value reads as ``""``.
    Validation of a field stops at a failing ``required``.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, str] = {}

    for field_name, validators in rules.items():
        raw = data.get(field_name)
        value = "" if raw is None else str(raw)

        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is not None:
                field_errors.append(error)
                if validator is required:
                    break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
