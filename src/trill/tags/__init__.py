"""Immutable UI tag trees.

Build with ``create()`` or the element shorthands, transform with the
``with_*()`` methods, bind inputs to ``Var`` cells, and attach commands
that client events invoke.
"""

from trill.tags.render import render_tag, to_markup
from trill.tags.tag import (
    Command,
    Tag,
    a,
    button,
    create,
    div,
    flatten,
    form,
    h1,
    h2,
    input_,
    label,
    li,
    p,
    span,
    textarea,
    ul,
)
from trill.tags.var import LocalVar, Var

__all__ = [
    "Command",
    "LocalVar",
    "Tag",
    "Var",
    "a",
    "button",
    "create",
    "div",
    "flatten",
    "form",
    "h1",
    "h2",
    "input_",
    "label",
    "li",
    "p",
    "render_tag",
    "span",
    "textarea",
    "to_markup",
    "ul",
]
