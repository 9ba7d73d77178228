"""Dispatchers — resolve a request to a handler invocation.

``Dispatcher`` is the contract the pipeline consumes. ``RouteDispatcher``
is the built-in implementation: page and service routes live in a trie
``Router``, event handlers in a name-keyed table.

Handler parameters are resolved by name, in order:

1. ``exchange`` — the current Exchange
2. ``request`` — the immutable Request
3. ``event`` / ``args`` — the event Command and its arguments
4. Path parameters — already converted by the router
5. Locals — bound input values, restored UI state
6. Remaining event arguments, positionally
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from trill._internal.invoke import invoke
from trill.dispatch.result import (
    DispatchRequest,
    DispatchResult,
    Failed,
    Found,
    Missing,
    Outcome,
)
from trill.errors import HTTPError
from trill.routing.router import Router


class Dispatcher(Protocol):
    """Resolve a request to a handler result."""

    async def dispatch(self, request: DispatchRequest) -> Outcome: ...


class RouteDispatcher:
    """Dispatch to routes registered on a ``Router`` and to event handlers."""

    __slots__ = ("_events", "_router")

    def __init__(
        self,
        router: Router,
        events: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._router = router
        self._events = dict(events or {})

    async def dispatch(self, request: DispatchRequest) -> Outcome:
        exchange = request.exchange
        if request.event is not None:
            handler = self._events.get(request.event.name)
            if handler is None:
                return Missing()
            service = False
            path_params: dict[str, Any] = {}
        else:
            match = self._router.match(exchange.method, exchange.path)
            if match is None:
                return Missing()
            handler = match.route.handler
            service = match.route.service
            path_params = match.path_params

        name = getattr(handler, "__qualname__", repr(handler))
        try:
            kwargs = bind_arguments(handler, request, path_params)
        except TypeError as exc:
            return Failed(f"Cannot bind arguments for {name}", exc)

        try:
            value = await invoke(handler, **kwargs)
        except HTTPError:
            raise
        except Exception as exc:
            return Failed(f"Handler {name} raised {type(exc).__name__}", exc)

        return Found(DispatchResult(value, is_service=service))


def bind_arguments(
    handler: Callable[..., Any],
    request: DispatchRequest,
    path_params: Mapping[str, Any],
) -> dict[str, Any]:
    """Build call arguments for *handler*.

    Raises ``TypeError`` if a required parameter cannot be resolved.
    """
    exchange = request.exchange
    event = request.event
    extra = list(event.args) if event is not None else []

    sig = inspect.signature(handler)
    kwargs: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if name == "exchange":
            kwargs[name] = exchange
        elif name == "request":
            kwargs[name] = exchange.request
        elif name == "event":
            kwargs[name] = event
        elif name == "args":
            kwargs[name] = tuple(extra)
        elif name in path_params:
            kwargs[name] = path_params[name]
        elif name in exchange.locals:
            kwargs[name] = exchange.locals[name]
        elif extra:
            kwargs[name] = extra.pop(0)

    sig.bind(**kwargs)
    return kwargs
