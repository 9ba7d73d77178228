"""The per-request exchange.

``Request`` is frozen; everything a request accumulates while it moves
through the pipeline lives here instead: the restored UI locals, bound
input values, validation errors, the redirect target, and the response
written so far. An Exchange is created at request start, used by exactly
one request, and discarded when the response is sent.
"""

from __future__ import annotations

import json
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from trill.errors import BadRequest
from trill.http.params import Params
from trill.http.request import Request
from trill.http.response import HTML_CONTENT_TYPE, JSON_CONTENT_TYPE, Response
from trill.state import LocalValue, coerce_local
from trill.tags.var import LocalVar

if TYPE_CHECKING:
    from trill.state import StateCodec
    from trill.validation import ValidationResult

STATE_FIELD = "__state"


@dataclass(slots=True)
class Exchange:
    """Mutable per-request context.

    Built with ``await Exchange.from_request(request)`` so the posted
    body is parsed once up front; after that every accessor is sync.
    """

    request: Request
    posted_data: Mapping[str, Any] = field(default_factory=dict)
    locals: dict[str, LocalValue] = field(default_factory=dict)
    errors: list[dict[str, Any]] = field(default_factory=list)
    redirect_url: str | None = None

    # Response written so far (None body = nothing written)
    status: int = 200
    content_type: str = HTML_CONTENT_TYPE
    body: str | bytes | None = None
    headers: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    async def from_request(cls, request: Request) -> Exchange:
        """Build an exchange, reading the posted body for POST requests.

        URL-encoded forms and JSON objects are accepted. Any other body
        is left unread.
        """
        posted: Mapping[str, Any] = {}
        if request.method == "POST":
            ct = (request.content_type or "application/x-www-form-urlencoded").lower()
            if "json" in ct:
                try:
                    data = await request.json()
                except ValueError:
                    raise BadRequest("Malformed JSON body") from None
                if not isinstance(data, dict):
                    raise BadRequest("JSON body must be an object")
                posted = data
            elif ct.startswith("application/x-www-form-urlencoded"):
                posted = await request.form()
        return cls(request=request, posted_data=posted)

    # -- Request view --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def query(self) -> Params:
        return self.request.query

    @property
    def is_get(self) -> bool:
        return self.request.method in ("GET", "HEAD")

    @property
    def is_post(self) -> bool:
        return self.request.method == "POST"

    @property
    def resource_name(self) -> str:
        """The path as a page name: ``/`` → ``index``, ``/a/b.html`` → ``a/b``."""
        name = self.request.path.strip("/")
        name = name.removesuffix(".html")
        return name or "index"

    def posted(self, name: str, default: Any = None) -> Any:
        """A posted field, or *default*."""
        return self.posted_data.get(name, default)

    def param(self, name: str, default: Any = None) -> Any:
        """A query parameter, falling back to a posted field."""
        value = self.request.query.get(name)
        if value is not None:
            return value
        return self.posted_data.get(name, default)

    # -- Locals --

    def put_local(self, name: str, value: Any) -> None:
        self.locals[name] = coerce_local(value)

    def var(self, name: str, default: Any = None) -> LocalVar:
        """A bindable variable backed by local *name*."""
        return LocalVar(self.locals, name, default)

    def load_state(self, codec: StateCodec) -> None:
        """Restore locals from the posted state token."""
        self.locals.update(codec.loads(self.posted(STATE_FIELD)))

    def serialize_locals(self, codec: StateCodec) -> str:
        return codec.dumps(self.locals)

    # -- Errors --

    def add_error(self, message: str, field: str | None = None) -> None:
        self.errors.append({"field": field, "message": message})

    def reject(self, result: ValidationResult) -> None:
        """Record every message of a failed validation."""
        for name, messages in result.errors.items():
            for message in messages:
                self.add_error(message, field=name)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    # -- Redirect --

    def redirect(self, url: str) -> None:
        self.redirect_url = url

    # -- Response writing --

    @property
    def is_written(self) -> bool:
        return self.body is not None

    def write_html(self, html: str, *, status: int = 200) -> None:
        self.status = status
        self.content_type = HTML_CONTENT_TYPE
        self.body = html

    def write_json(self, payload: Any, *, status: int = 200) -> None:
        self.status = status
        self.content_type = JSON_CONTENT_TYPE
        self.body = json.dumps(payload, default=str)

    def serve_file(self, file_path: Path) -> None:
        """Write a static file as the response body."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        self.status = 200
        self.content_type = content_type or "application/octet-stream"
        self.body = file_path.read_bytes()

    def to_response(self) -> Response:
        return Response(
            body=self.body if self.body is not None else "",
            status=self.status,
            content_type=self.content_type,
            headers=tuple(self.headers),
        )
