"""Bindable variables for two-way tag binding.

A ``Var`` is the external mutable cell a tag's ``value`` reads through.
``LocalVar`` keeps its value in an exchange's locals so it survives the
round-trip to the client and back.
"""

from collections.abc import MutableMapping
from typing import Any

from trill.state import LocalValue, coerce_local


class Var:
    """A mutable value cell."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = None) -> None:
        self._value = value

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"Var({self._value!r})"


class LocalVar(Var):
    """A variable stored under *name* in a locals mapping.

    Reads fall back to *default* until the name is first written.
    Writes are coerced like every other local.
    """

    __slots__ = ("_default", "_locals", "name")

    def __init__(
        self,
        locals_: MutableMapping[str, LocalValue],
        name: str,
        default: Any = None,
    ) -> None:
        self._locals = locals_
        self._default = default
        self.name = name

    def get(self) -> Any:
        return self._locals.get(self.name, self._default)

    def set(self, value: Any) -> None:
        self._locals[self.name] = coerce_local(value)

    def __repr__(self) -> str:
        return f"LocalVar({self.name!r}, {self.get()!r})"
