"""Trill exception hierarchy.

Shared across the pipeline, dispatcher, and server so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class TrillError(Exception):
    """Base for all trill-specific errors."""


class ConfigurationError(TrillError):
    """Raised when app configuration is invalid.

    Typically caught during ``App._freeze()`` at startup.
    """


class DispatchError(TrillError):
    """A dispatcher failed while invoking a handler.

    Fatal to the current request. The pipeline re-raises it with
    context; the original failure stays available as ``__cause__``.
    """


class EventError(TrillError):
    """An event dispatch produced no view.

    Events always resolve to a view handler. Reaching this means an
    event name has no handler, or its handler is registered as a service.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(TrillError):
    """An error that maps directly to an HTTP status code.

    Raised by the pipeline or handlers. The ASGI handler catches these
    and turns them into a response with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no static file, handler, screen, or page matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the request is malformed."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class MissingInput(BadRequest):  # noqa: N818
    """A required posted field is absent (e.g. ``_inputs`` on an event)."""

    def __init__(self, name: str) -> None:
        super().__init__(detail=f"Missing required input: {name!r}")
