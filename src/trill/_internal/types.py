"""Shared type aliases used across trill modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route and event handler — user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]
