"""Validation result — immutable container for validated data or errors."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating bound inputs against a set of rules.

    The result is falsy when invalid::

        result = validate(exchange.locals, rules)
        if not result:
            exchange.reject(result)

    ``errors`` maps field names to lists of error messages::

        {"title": ["This field is required"]}
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid
