"""Trill application class.

Mutable during setup (routes, events, screens). Frozen at runtime when
app.run() or __call__() is first invoked.
"""

import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import Environment

from trill._internal.asgi import Receive, Scope, Send
from trill._internal.types import Handler
from trill.config import AppConfig
from trill.dispatch.dispatcher import RouteDispatcher
from trill.dispatch.screens import ScreenFactory, ScreenRegistry
from trill.errors import ConfigurationError
from trill.pages.resources import FileResources
from trill.pipeline import PipelineContext
from trill.routing.route import Route
from trill.routing.router import Router
from trill.server.handler import handle_request
from trill.state import StateCodec
from trill.static import StaticFiles
from trill.templating.integration import PageRenderer, create_environment


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: list[str] | None
    service: bool


class App:
    """The trill application.

    Mutable during setup (route, event, and screen registration).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the app.
    """

    __slots__ = (
        "_context",
        "_custom_kida_env",
        "_events",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_screens",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._events: dict[str, Handler] = {}
        self._screens = ScreenRegistry()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._custom_kida_env = kida_env
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._context: PipelineContext | None = None

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        service: bool = False,
    ) -> Callable[[Handler], Handler]:
        """Register a handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` or ``{param:int}``.
            methods: HTTP methods. Defaults to ``["GET", "POST"]`` so the
                same view answers page loads and event posts.
            service: The handler returns a raw API result (JSON, text,
                a Response) that is sent as-is, never wrapped in a page.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, service))
            return func

        return decorator

    def event(self, name: str) -> Callable[[Handler], Handler]:
        """Register the handler for client event *name*.

        Event handlers receive the event args (by parameter name
        ``args`` or positionally) and may read bound inputs by name.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            if name in self._events:
                msg = f"Event {name!r} already has a handler"
                raise ConfigurationError(msg)
            self._events[name] = func
            return func

        return decorator

    def screen(self, kind: str) -> Callable[[ScreenFactory], ScreenFactory]:
        """Register a generic screen factory for entity type tag *kind*."""

        def decorator(func: ScreenFactory) -> ScreenFactory:
            self._check_not_frozen()
            self._screens.register(kind, func)
            return func

        return decorator

    def screen_at(self, path: str) -> Callable[[ScreenFactory], ScreenFactory]:
        """Register a generic screen factory for a fixed *path*."""

        def decorator(func: ScreenFactory) -> ScreenFactory:
            self._check_not_frozen()
            self._screens.at(path, func)
            return func

        return decorator

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start a pounce server for this app (single worker, reload in debug)."""
        from pounce.config import ServerConfig
        from pounce.server import Server

        self._ensure_frozen()
        config = ServerConfig(
            host=host or self.config.host,
            port=port or self.config.port,
            workers=1,
            reload=self.config.debug,
        )
        Server(config, self).run()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._context is not None

        await handle_request(
            scope,
            receive,
            send,
            context=self._context,
            debug=self.config.debug,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol and the registered hooks."""
        self._ensure_frozen()

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self._run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
        for hook in hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Freeze --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise RuntimeError(msg)

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Compile routes and build the pipeline context."""
        router = Router()
        for pending in self._pending_routes:
            methods = frozenset(m.upper() for m in (pending.methods or ["GET", "POST"]))
            router.add(Route(pending.path, pending.handler, methods, service=pending.service))
        router.compile()

        config = self.config
        env = self._custom_kida_env or create_environment(config)
        static = None
        if config.static_dir is not None and Path(config.static_dir).is_dir():
            static = StaticFiles(config.static_dir, prefix=config.static_url)

        self._context = PipelineContext(
            dispatcher=RouteDispatcher(router, self._events),
            renderer=PageRenderer(env, layout=config.layout),
            resources=FileResources(config.template_dir, cache=not config.debug),
            state=StateCodec(config.secret_key),
            screens=self._screens if len(self._screens) else None,
            static=static,
            pages_prefix=config.pages_prefix,
        )
        self._frozen = True
