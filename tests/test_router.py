"""Tests for trill.routing.router — trie-based route matching."""

import pytest

from trill.routing.route import Route
from trill.routing.router import Router, parse_path


def _handler() -> str:
    return "ok"


def _route(path: str, methods: frozenset[str] | None = None, **kwargs) -> Route:
    return Route(path=path, handler=_handler, methods=methods or frozenset({"GET"}), **kwargs)


def _router(*routes: Route) -> Router:
    router = Router()
    for route in routes:
        router.add(route)
    router.compile()
    return router


class TestParsePath:
    def test_static(self) -> None:
        assert [s.value for s in parse_path("/api/v2/users")] == ["api", "v2", "users"]

    def test_param(self) -> None:
        seg = parse_path("/users/{id}")[1]
        assert seg.is_param is True
        assert seg.param_name == "id"
        assert seg.param_type == "str"

    def test_typed_param(self) -> None:
        assert parse_path("/users/{id:int}")[1].param_type == "int"

    def test_root(self) -> None:
        assert parse_path("/") == []


class TestMatching:
    def test_root(self) -> None:
        match = _router(_route("/")).match("GET", "/")
        assert match is not None
        assert match.path_params == {}

    def test_trailing_slash(self) -> None:
        assert _router(_route("/users")).match("GET", "/users/") is not None

    def test_no_match(self) -> None:
        assert _router(_route("/users")).match("GET", "/posts") is None

    def test_method_mismatch(self) -> None:
        assert _router(_route("/users")).match("POST", "/users") is None

    def test_int_param_converted(self) -> None:
        match = _router(_route("/users/{id:int}")).match("GET", "/users/42")
        assert match.path_params == {"id": 42}

    def test_int_param_rejects_text(self) -> None:
        assert _router(_route("/users/{id:int}")).match("GET", "/users/abc") is None

    def test_float_param(self) -> None:
        match = _router(_route("/price/{amount:float}")).match("GET", "/price/9.5")
        assert match.path_params == {"amount": 9.5}

    def test_static_beats_param(self) -> None:
        new = _route("/users/new")
        router = _router(_route("/users/{name}"), new)
        assert router.match("GET", "/users/new").route is new
        assert router.match("GET", "/users/ada").path_params == {"name": "ada"}

    def test_catch_all(self) -> None:
        match = _router(_route("/files/{rest:path}")).match("GET", "/files/a/b/c.txt")
        assert match.path_params == {"rest": "a/b/c.txt"}

    def test_service_flag_kept(self) -> None:
        route = _route("/api", service=True)
        assert _router(route).match("GET", "/api").route.service is True

    def test_methods_share_path(self) -> None:
        get = _route("/items")
        post = _route("/items", frozenset({"POST"}))
        router = _router(get, post)
        assert router.match("GET", "/items").route is get
        assert router.match("POST", "/items").route is post


class TestCompile:
    def test_add_after_compile(self) -> None:
        router = _router()
        with pytest.raises(RuntimeError):
            router.add(_route("/late"))
