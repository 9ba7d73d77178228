"""Generic screens — fallback views when no handler produced a result.

Screens are looked up without any type introspection: fixed paths map
to factories, and conventional entity routes map a string type tag to a
registered factory.

Conventional routes (checked only when the query string is empty)::

    /{kind}/{ident}/edit   -> factory(exchange=..., action="edit", ident=...)
    /{kind}/new            -> factory(exchange=..., action="new", ident=None)
    /{kind}/{ident}        -> factory(exchange=..., action="view", ident=...)
    /{kinds}               -> factory(exchange=..., action="list", ident=None)

A list route tries the singular tag first (``/books`` → ``book``), then
the path segment as written. Factories may return ``None``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from trill._internal.invoke import invoke

if TYPE_CHECKING:
    from trill.exchange import Exchange

type ScreenFactory = Callable[..., Any]

_ENTITY_EDIT = re.compile(r"/(\w+)/(\w+)/edit/?")
_ENTITY_NEW = re.compile(r"/(\w+)/new/?")
_ENTITY_VIEW = re.compile(r"/(\w+)/(\w+)/?")
_ENTITY_LIST = re.compile(r"/(\w+)/?")


class ScreenRegistry:
    """Screen factories keyed by path and by entity type tag."""

    __slots__ = ("_kinds", "_paths")

    def __init__(self) -> None:
        self._paths: dict[str, ScreenFactory] = {}
        self._kinds: dict[str, ScreenFactory] = {}

    def at(self, path: str, factory: ScreenFactory) -> None:
        """Serve *factory*'s screen at a fixed *path*."""
        self._paths[path] = factory

    def register(self, kind: str, factory: ScreenFactory) -> None:
        """Serve the conventional entity routes for type tag *kind*."""
        self._kinds[kind] = factory

    def __len__(self) -> int:
        return len(self._paths) + len(self._kinds)

    async def resolve(self, exchange: Exchange) -> Any:
        """Return a fallback view for the exchange's path, or ``None``."""
        path = exchange.path

        factory = self._paths.get(path)
        if factory is not None:
            return await invoke(factory, exchange=exchange, action="view", ident=None)

        if len(exchange.query):
            return None

        if m := _ENTITY_EDIT.fullmatch(path):
            return await self._call(m.group(1), exchange, "edit", m.group(2))
        if m := _ENTITY_NEW.fullmatch(path):
            return await self._call(m.group(1), exchange, "new", None)
        if m := _ENTITY_VIEW.fullmatch(path):
            return await self._call(m.group(1), exchange, "view", m.group(2))
        if m := _ENTITY_LIST.fullmatch(path):
            plural = m.group(1)
            singular = plural.removesuffix("s")
            kind = singular if singular in self._kinds else plural
            return await self._call(kind, exchange, "list", None)
        return None

    async def _call(
        self,
        kind: str,
        exchange: Exchange,
        action: str,
        ident: str | None,
    ) -> Any:
        factory = self._kinds.get(kind)
        if factory is None:
            return None
        return await invoke(factory, exchange=exchange, action=action, ident=ident)
