"""Render tag trees to HTML.

Text and attribute values are escaped. Extras are never rendered. A
command becomes ``data-event`` plus a JSON ``data-args`` attribute, which
the client script reads to emit the event back to the server.
"""

import html
import json
from typing import Any

from kida.template import Markup

from trill.tags.tag import Tag

VOID_ELEMENTS = frozenset(
    {"area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)


def render_tag(tag: Tag) -> str:
    """Render *tag* and its subtree to an HTML string."""
    parts: list[str] = [f"<{tag.kind}"]

    attrs = dict(tag.attrs)
    if tag.binding is not None:
        value = tag.attr("value")
        if value is not None and tag.kind != "textarea":
            attrs["value"] = value
    for name, value in attrs.items():
        parts.append(f' {name}="{html.escape(value)}"')
    for name in sorted(tag.flags):
        parts.append(f" {name}")
    if tag.command is not None:
        parts.append(f' data-event="{html.escape(tag.command.name)}"')
        if tag.command.args:
            args = json.dumps(list(tag.command.args), default=str)
            parts.append(f' data-args="{html.escape(args)}"')
    parts.append(">")

    if tag.kind in VOID_ELEMENTS:
        return "".join(parts)

    parts.extend(render_content(child) for child in tag.contents)
    parts.append(f"</{tag.kind}>")
    return "".join(parts)


def render_content(value: Any) -> str:
    """Render one child: tags recursively, safe markup as-is, the rest escaped."""
    if isinstance(value, Tag):
        return render_tag(value)
    if isinstance(value, Markup):
        return str(value)
    return html.escape(str(value))


def to_markup(value: Any) -> Markup:
    """Turn page content into ``Markup`` a template can emit unescaped.

    Strings are treated as already-rendered HTML (the output of a page
    template). Tags are rendered. Anything else is escaped text.
    """
    if isinstance(value, Markup):
        return value
    if isinstance(value, Tag):
        return Markup(render_tag(value))
    if isinstance(value, str):
        return Markup(value)
    if isinstance(value, (list, tuple)):
        return Markup("".join(render_content(v) for v in value))
    return Markup(html.escape(str(value)))
