"""Built-in validation rules.

Each validator is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

Parameterized validators are factory functions that return a validator.
"""

from collections.abc import Callable, Iterable

type Validator = Callable[[str], str | None]


def required(value: str) -> str | None:
    """Field must be present and non-empty."""
    if not value or not value.strip():
        return "This field is required"
    return None


def max_length(n: int) -> Validator:
    """String must be at most *n* characters."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Validator:
    """String must be at least *n* characters."""

    def check(value: str) -> str | None:
        if len(value) < n:
            return f"Must be at least {n} characters"
        return None

    return check


def integer(value: str) -> str | None:
    """Value must parse as an integer. Empty values pass (pair with ``required``)."""
    if not value:
        return None
    try:
        int(value)
    except ValueError:
        return "Must be a whole number"
    return None


def one_of(choices: Iterable[str]) -> Validator:
    """Value must be one of *choices*."""
    allowed = frozenset(choices)

    def check(value: str) -> str | None:
        if value and value not in allowed:
            return f"Must be one of: {', '.join(sorted(allowed))}"
        return None

    return check
