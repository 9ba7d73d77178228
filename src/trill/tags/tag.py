"""Immutable UI tags with copy-on-write transformations.

A ``Tag`` never changes after construction. Every ``with_*()`` call
returns a new Tag built with ``dataclasses.replace``; the original stays
valid and untouched, so a tree built once can be shared by any number of
concurrent requests without locking.

Content passed to ``create()`` and the content mutators is flattened
recursively: ``create("ul", [[a, b], c])`` has the same children as
``create("ul", a, b, c)``.

Usage::

    from trill.tags import button, div, input_

    name = exchange.var("name", "")
    page = div(
        input_().with_attr("type", "text").bind(name),
        button("Save").with_command("save"),
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from trill.tags.var import Var

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def flatten(content: Iterable[Any]) -> tuple[Any, ...]:
    """Flatten nested iterables into one ordered tuple of leaves.

    Tags, strings, bytes and mappings are leaves; any other iterable (lists,
    tuples, generators) is expanded. ``None`` is dropped.
    """
    out: list[Any] = []

    def walk(items: Iterable[Any]) -> None:
        for item in items:
            if item is None:
                continue
            if isinstance(item, Iterable) and not isinstance(item, (str, bytes, Tag, Mapping)):
                walk(item)
            else:
                out.append(item)

    walk(content)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class Command:
    """A server action a client event can invoke, with its arguments."""

    name: str
    args: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class Tag:
    """An immutable UI node.

    Attributes:
        kind: Element type, e.g. ``"div"``.
        contents: Children — Tags or plain leaf values (text, numbers).
        attrs: Markup attributes, name to string value.
        flags: Boolean attributes present on the element.
        extras: Out-of-band metadata, never rendered as markup.
        binding: Variable the ``value`` attribute reads through.
        command: Server action triggered by client events on this node.

    Tags compare by structure but are unhashable: attribute and extra
    maps are read-only views, and children may be any value.
    """

    __hash__ = None  # type: ignore[assignment]

    kind: str
    contents: tuple[Any, ...] = ()
    attrs: Mapping[str, str] = field(default=_EMPTY)
    flags: frozenset[str] = frozenset()
    extras: Mapping[str, Any] = field(default=_EMPTY)
    binding: Var | None = field(default=None, compare=False)
    command: Command | None = None

    # -- Children --

    @property
    def size(self) -> int:
        return len(self.contents)

    def child(self, index: int) -> Any:
        return self.contents[index]

    def with_child(self, index: int, child: Any) -> Tag:
        """Replace the child at *index*. Other children are kept as-is."""
        if not 0 <= index < len(self.contents):
            msg = f"Child index {index} out of range for <{self.kind}>"
            raise IndexError(msg)
        contents = (*self.contents[:index], child, *self.contents[index + 1 :])
        return replace(self, contents=contents)

    def with_contents(self, *content: Any) -> Tag:
        """Replace all children."""
        return replace(self, contents=flatten(content))

    def prepend(self, *content: Any) -> Tag:
        return replace(self, contents=(*flatten(content), *self.contents))

    def append(self, *content: Any) -> Tag:
        return replace(self, contents=(*self.contents, *flatten(content)))

    # -- Attributes --

    def attr(self, name: str) -> str | None:
        """Read an attribute. A bound ``value`` reads the variable."""
        if name == "value" and self.binding is not None:
            current = self.binding.get()
            return None if current is None else str(current)
        return self.attrs.get(name)

    def with_attr(self, name: str, value: str) -> Tag:
        return replace(self, attrs=MappingProxyType({**self.attrs, name: value}))

    def is_on(self, name: str) -> bool:
        """True if boolean attribute *name* is set."""
        return name in self.flags

    def with_flag(self, name: str, on: bool = True) -> Tag:
        flags = self.flags | {name} if on else self.flags - {name}
        return replace(self, flags=flags)

    def extra(self, name: str, default: Any = None) -> Any:
        return self.extras.get(name, default)

    def with_extra(self, name: str, value: Any) -> Tag:
        return replace(self, extras=MappingProxyType({**self.extras, name: value}))

    # -- Binding and commands --

    def bind(self, var: Var) -> Tag:
        """Bind to *var*. The displayed value is taken from it now.

        Checkboxes and radios reflect truthiness in ``checked``; a
        ``textarea`` shows the value as its content; everything else
        sets the ``value`` attribute.
        """
        current = var.get()
        if self.kind == "input" and self.attrs.get("type") in ("checkbox", "radio"):
            bound = self.with_flag("checked", bool(current))
        elif self.kind == "textarea":
            bound = self.with_contents("" if current is None else str(current))
        else:
            bound = self.with_attr("value", "" if current is None else str(current))
        return replace(bound, binding=var)

    def with_command(self, name: str | None, *args: Any) -> Tag:
        """Attach a command; ``None`` clears it."""
        command = Command(name, args) if name is not None else None
        return replace(self, command=command)

    def copy(self) -> Tag:
        """A structurally independent duplicate (binding and command kept)."""
        return replace(
            self,
            attrs=MappingProxyType(dict(self.attrs)),
            extras=MappingProxyType(dict(self.extras)),
        )


def create(kind: str, *content: Any) -> Tag:
    """Build a tag of *kind* with flattened *content*."""
    return Tag(kind, flatten(content))


def _factory(kind: str) -> Any:
    def make(*content: Any) -> Tag:
        return create(kind, *content)

    make.__name__ = make.__qualname__ = kind
    make.__doc__ = f"Create a ``<{kind}>`` tag."
    return make


a = _factory("a")
button = _factory("button")
div = _factory("div")
form = _factory("form")
h1 = _factory("h1")
h2 = _factory("h2")
input_ = _factory("input")
label = _factory("label")
li = _factory("li")
p = _factory("p")
span = _factory("span")
textarea = _factory("textarea")
ul = _factory("ul")
