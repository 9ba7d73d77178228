"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(cls, payload: Any, *, status: int = 200) -> Response:
        """Build a JSON response. Unknown types are stringified."""
        return cls(
            body=json.dumps(payload, default=str),
            status=status,
            content_type=JSON_CONTENT_TYPE,
        )

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    @property
    def body_bytes(self) -> bytes:
        """The body encoded as bytes."""
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")

    def header(self, name: str) -> str | None:
        """The first header named *name* (case-insensitive), or None."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    @property
    def json_body(self) -> Any:
        """The body parsed as JSON."""
        return json.loads(self.body_bytes)

    @property
    def text(self) -> str:
        """The body decoded as text."""
        if isinstance(self.body, str):
            return self.body
        return self.body.decode("utf-8")


@dataclass(frozen=True, slots=True)
class Redirect:
    """A handler return value that redirects the client.

    Usage::

        return Redirect("/login")
    """

    url: str
    status: int = 302
