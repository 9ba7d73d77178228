"""Route, RouteMatch, and path segment frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``service`` routes return raw API results that bypass page
    rendering; the others return view models merged into a page.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    service: bool = False


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match, with converted path params."""

    route: Route
    path_params: dict[str, Any]
