"""Kida environment setup and page rendering.

Creates a kida Environment from trill's AppConfig. The environment is
created once during ``App._freeze()`` and shared by every request; page
templates and the layout are rendered through it.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from trill.config import AppConfig
from trill.tags.render import to_markup
from trill.tags.tag import Tag


class TemplateEngine(Protocol):
    """Renders a template string against a model and a result."""

    def render(self, template: str, model: Mapping[str, Any], result: Any) -> str: ...


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    The app's template directory comes first; trill's built-in
    ``page.html`` layout is the fallback when the app ships none.
    """
    loader = ChoiceLoader(
        [
            FileSystemLoader(str(config.template_dir)),
            PackageLoader("trill.templating", "layouts"),
        ]
    )
    return Environment(
        loader=loader,
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )


def _template_value(value: Any) -> Any:
    return to_markup(value) if isinstance(value, Tag) else value


class PageRenderer:
    """Render page bodies and wrap them in the layout.

    Page bodies see the model's keys, plus the result's keys when the
    result is a mapping (model keys win). Tags render as markup.
    """

    __slots__ = ("_env", "_layout")

    def __init__(self, env: Environment, layout: str = "page.html") -> None:
        self._env = env
        self._layout = layout

    @property
    def env(self) -> Environment:
        return self._env

    def render(self, template: str, model: Mapping[str, Any], result: Any) -> str:
        context: dict[str, Any] = dict(result) if isinstance(result, Mapping) else {}
        context.update(model)
        context = {k: _template_value(v) for k, v in context.items()}
        return self._env.from_string(template).render(context)

    def render_page(self, model: Mapping[str, Any]) -> str:
        """Render the layout around ``model["content"]``.

        ``navbar`` and ``title`` default to off and empty.
        """
        context: dict[str, Any] = {"navbar": False, "title": "", "embedded": False}
        context.update(model)
        context["content"] = to_markup(model.get("content", ""))
        context["result"] = _template_value(context.get("result"))
        return self._env.get_template(self._layout).render(context)
