"""Trill — request dispatch and view rendering for interactive web apps.

Pages are templates plus immutable tag trees; client UI events post back
to the server and receive a JSON patch of the page body.

Basic usage::

    from trill import App
    from trill.tags import button, div

    app = App()

    @app.route("/counter")
    def counter(exchange):
        n = exchange.var("n", 0)
        return div(f"Count: {n.get()}", button("+1").with_command("inc"))

    @app.event("inc")
    def inc(exchange):
        n = exchange.var("n", 0)
        n.set(n.get() + 1)

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BadRequest",
    "ConfigurationError",
    "DispatchError",
    "EventError",
    "Exchange",
    "HTTPError",
    "MissingInput",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "TrillError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import trill`` fast while providing a clean top-level API.
    """
    if name == "App":
        from trill.app import App

        return App

    if name == "AppConfig":
        from trill.config import AppConfig

        return AppConfig

    if name == "Exchange":
        from trill.exchange import Exchange

        return Exchange

    if name == "Request":
        from trill.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from trill.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "DispatchError",
        "EventError",
        "HTTPError",
        "MissingInput",
        "NotFound",
        "TrillError",
    ):
        from trill import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
