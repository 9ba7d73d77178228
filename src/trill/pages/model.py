"""Page render models built from directive-annotated templates.

A page template may start with a directive line that toggles boolean
flags in the render model::

    <!-- +navbar, -footer -->
    <div>...</div>

``+name`` sets ``name`` to ``True``, ``-name`` to ``False``. The line is
removed before the template body is rendered. Unprefixed tokens are
logged and ignored.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trill.pages.resources import ResourceLoader
    from trill.templating.integration import TemplateEngine

logger = logging.getLogger("trill.pages")

DIRECTIVE = re.compile(r"\s*<!--\s+([\w+\-, ]+)\s+-->\s*")


def parse_directives(template: str, *, source: str = "<string>") -> tuple[dict[str, bool], str]:
    """Split a template into its directive flags and the remaining body.

    Only the first line is examined, and only when a body follows it.
    Returns ``({}, template)`` unchanged when there is no directive.
    """
    first, newline, rest = template.partition("\n")
    if not newline:
        return {}, template

    m = DIRECTIVE.fullmatch(first)
    if m is None:
        return {}, template

    flags: dict[str, bool] = {}
    for token in m.group(1).split(","):
        token = token.strip()
        if not token:
            continue
        if token.startswith("+"):
            flags[token[1:]] = True
        elif token.startswith("-"):
            flags[token[1:]] = False
        else:
            logger.warning("Unknown directive %r in %s", token, source)
    return flags, rest


def page_model(
    name: str,
    result: Any,
    resources: ResourceLoader,
    engine: TemplateEngine,
) -> dict[str, Any]:
    """Build the render model for page template *name*.

    The model holds ``result``, the directive flags, and ``content``:
    the template body rendered against the model and the result.
    """
    template = resources.get_content(name) or ""
    flags, body = parse_directives(template, source=name)

    model: dict[str, Any] = {"result": result, **flags}
    model["content"] = engine.render(body, model, result)
    return model
