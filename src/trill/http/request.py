"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change. Per-request mutable
state lives on the ``Exchange`` built from it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from trill._internal.asgi import Receive, Scope
from trill.http.headers import Headers
from trill.http.params import Params


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: Params

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(await self.body())

    async def form(self) -> Params:
        """Parse a URL-encoded body. Cached like ``body()``."""
        if "_form" not in self._cache:
            self._cache["_form"] = Params.parse(await self.body())
        return self._cache["_form"]

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=Params.parse(scope.get("query_string", b"")),
            _receive=receive,
        )
