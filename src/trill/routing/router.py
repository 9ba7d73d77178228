"""Compiled router with trie-based path matching.

Routes are registered during setup and frozen when the app freezes.
"""

import re
from dataclasses import dataclass
from typing import Any

from trill.routing.route import CONVERTERS, PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id:int}" -> [PathSegment("users"), PathSegment("{id:int}", is_param=True, ...)]
        "/files/{rest:path}" -> [..., PathSegment("{rest:path}", param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            name, _, param_type = part[1:-1].partition(":")
            segments.append(
                PathSegment(part, is_param=True, param_name=name, param_type=param_type or "str")
            )
        else:
            segments.append(PathSegment(part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during registration only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.param_child: _ParamEdge | None = None
        self.catch_all: _CatchAllEdge | None = None
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """Consumes the remaining path."""

    param_name: str
    routes_by_method: dict[str, Route]


class Router:
    """Trie-based router.

    Usage::

        router = Router()
        router.add(Route("/users/{id:int}", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")  # RouteMatch or None
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(seg.param_name or "path", {})
                for method in route.methods:
                    node.catch_all.routes_by_method[method] = route
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            node.routes_by_method[method] = route

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Match a method and path. ``None`` when nothing matches both."""
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._match_node(self._root, parts, 0, {}, method)
        if found is None:
            return None
        route, params = found
        return RouteMatch(route=route, path_params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, Any],
        method: str,
    ) -> tuple[Route, dict[str, Any]] | None:
        if index == len(parts):
            route = node.routes_by_method.get(method)
            return (route, params) if route is not None else None

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params, method)
            if result is not None:
                return result

        # 2. Parameter child, converted to its declared type
        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            _, target_type = CONVERTERS[edge.param_type]
            new_params = {**params, edge.param_name: target_type(part)}
            result = self._match_node(edge.node, parts, index + 1, new_params, method)
            if result is not None:
                return result

        # 3. Catch-all
        if node.catch_all is not None:
            route = node.catch_all.routes_by_method.get(method)
            if route is not None:
                remaining = "/".join(parts[index:])
                return route, {**params, node.catch_all.param_name: remaining}

        return None
