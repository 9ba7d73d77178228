"""Tests for trill.pipeline — strategy order and short-circuits."""

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

import pytest

from trill.dispatch import (
    DispatchRequest,
    DispatchResult,
    Failed,
    Found,
    Missing,
    Outcome,
    ScreenRegistry,
)
from trill.errors import BadRequest, DispatchError, EventError, MissingInput, NotFound
from trill.exchange import Exchange
from trill.http.request import Request
from trill.http.response import Redirect
from trill.pipeline import PipelineContext, dispatch_request, process_request
from trill.state import StateCodec
from trill.static import StaticFiles
from trill.tags import Command

# -- Fakes --


class StubDispatcher:
    """Answers every request through *answer* and records what it was asked."""

    def __init__(self, answer: Callable[[DispatchRequest], Outcome] | None = None) -> None:
        self.answer = answer or (lambda request: Missing())
        self.requests: list[DispatchRequest] = []

    async def dispatch(self, request: DispatchRequest) -> Outcome:
        self.requests.append(request)
        return self.answer(request)


class DictResources:
    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}

    def exists(self, name: str) -> bool:
        return name in self.pages

    def get_content(self, name: str) -> str | None:
        return self.pages.get(name)


class SpyRenderer:
    """Renders bodies verbatim and pages as ``PAGE(<content>)``."""

    def __init__(self) -> None:
        self.pages: list[dict[str, Any]] = []

    def render(self, template: str, model: Mapping[str, Any], result: Any) -> str:
        return template

    def render_page(self, model: Mapping[str, Any]) -> str:
        self.pages.append(dict(model))
        return f"PAGE({model['content']})"


def found(value: Any, *, service: bool = False) -> Outcome:
    return Found(DispatchResult(value, is_service=service))


CODEC = StateCodec("test-secret")


def make_context(
    dispatcher: StubDispatcher | None = None,
    *,
    pages: dict[str, str] | None = None,
    screens: ScreenRegistry | None = None,
    static: StaticFiles | None = None,
) -> tuple[PipelineContext, SpyRenderer]:
    renderer = SpyRenderer()
    ctx = PipelineContext(
        dispatcher=dispatcher,
        renderer=renderer,
        resources=DictResources(pages),
        state=CODEC,
        screens=screens,
        static=static,
    )
    return ctx, renderer


async def make_exchange(
    path: str = "/",
    *,
    method: str = "GET",
    query_string: bytes = b"",
    form: dict[str, str] | None = None,
) -> Exchange:
    body = urlencode(form).encode() if form is not None else b""
    headers = [(b"content-type", b"application/x-www-form-urlencoded")] if form else []
    scope = {
        "type": "http",
        "method": "POST" if form is not None else method,
        "path": path,
        "query_string": query_string,
        "headers": headers,
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return await Exchange.from_request(Request.from_asgi(scope, receive))


def event_form(name: str, *, args: str | None = None, inputs: str | None = "{}", **extra: str):
    form = {"_event": name, **extra}
    if args is not None:
        form["_args"] = args
    if inputs is not None:
        form["_inputs"] = inputs
    return form


# -- Tests --


class TestStaticFiles:
    async def test_static_file_wins(self, tmp_path) -> None:
        (tmp_path / "site.css").write_text("body {}")
        dispatcher = StubDispatcher(lambda r: found("never"))
        ctx, _ = make_context(dispatcher, static=StaticFiles(tmp_path))
        x = await make_exchange("/site.css")

        assert await dispatch_request(x, ctx) is x
        assert x.to_response().text == "body {}"
        assert dispatcher.requests == []

    async def test_static_ignored_for_post(self, tmp_path) -> None:
        (tmp_path / "a.txt").write_text("a")
        ctx, _ = make_context(StubDispatcher(), static=StaticFiles(tmp_path))
        x = await make_exchange("/a.txt", form={})
        with pytest.raises(NotFound):
            await dispatch_request(x, ctx)


class TestNotFound:
    async def test_nothing_answers(self) -> None:
        ctx, _ = make_context(StubDispatcher())
        with pytest.raises(NotFound):
            await process_request(await make_exchange("/nope"), ctx)

    async def test_no_dispatcher_no_page(self) -> None:
        ctx, _ = make_context(None)
        with pytest.raises(NotFound):
            await process_request(await make_exchange("/nope"), ctx)


class TestPrimaryDispatch:
    async def test_service_result_returned_verbatim(self) -> None:
        payload = {"items": [1, 2]}
        ctx, renderer = make_context(
            StubDispatcher(lambda r: found(payload, service=True)),
            pages={"dynamic/api.html": "<p>never</p>"},
        )
        x = await make_exchange("/api")

        assert await process_request(x, ctx) is payload
        assert renderer.pages == []
        assert not x.is_written

    async def test_view_result_without_page_is_wrapped(self) -> None:
        ctx, renderer = make_context(StubDispatcher(lambda r: found("hello")))
        x = await make_exchange("/greet")

        assert await process_request(x, ctx) is x
        assert x.to_response().text == "PAGE(hello)"
        model = renderer.pages[0]
        assert model["result"] == "hello"
        assert model["navbar"] is True
        assert model["embedded"] is False

    async def test_page_template_rendered(self) -> None:
        ctx, renderer = make_context(
            StubDispatcher(lambda r: found({"n": 1})),
            pages={"dynamic/items.html": "<!-- -navbar -->\n<ul></ul>"},
        )
        x = await make_exchange("/items")

        await process_request(x, ctx)
        assert x.to_response().text == "PAGE(<ul></ul>)"
        model = renderer.pages[0]
        assert model["navbar"] is False
        assert model["result"] == {"n": 1}

    async def test_page_without_handler(self) -> None:
        ctx, _ = make_context(StubDispatcher(), pages={"dynamic/index.html": "<h1>Home</h1>"})
        x = await make_exchange("/")
        await process_request(x, ctx)
        assert x.to_response().text == "PAGE(<h1>Home</h1>)"

    async def test_embedded_query_param(self) -> None:
        ctx, renderer = make_context(StubDispatcher(lambda r: found("x")))
        x = await make_exchange("/", query_string=b"embedded=1")
        await process_request(x, ctx)
        assert renderer.pages[0]["embedded"] is True

    async def test_primary_request_has_no_event(self) -> None:
        dispatcher = StubDispatcher(lambda r: found("x"))
        ctx, _ = make_context(dispatcher)
        await process_request(await make_exchange("/"), ctx)
        assert len(dispatcher.requests) == 1
        assert dispatcher.requests[0].event is None


class TestDispatchFailure:
    async def test_failure_raises_with_cause(self) -> None:
        cause = ValueError("boom")
        ctx, _ = make_context(StubDispatcher(lambda r: Failed("handler exploded", cause)))

        with pytest.raises(DispatchError, match="handler exploded") as info:
            await process_request(await make_exchange("/"), ctx)
        assert info.value.__cause__ is cause


class TestScreens:
    async def test_screen_used_when_dispatch_misses(self) -> None:
        screens = ScreenRegistry()
        screens.at("/dash", lambda exchange, action, ident: "dashboard")
        ctx, renderer = make_context(StubDispatcher(), screens=screens)
        x = await make_exchange("/dash")

        await process_request(x, ctx)
        assert renderer.pages[0]["result"] == "dashboard"

    async def test_handler_result_beats_screen(self) -> None:
        screens = ScreenRegistry()
        screens.at("/dash", lambda exchange, action, ident: "screen")
        ctx, renderer = make_context(StubDispatcher(lambda r: found("handler")), screens=screens)
        await process_request(await make_exchange("/dash"), ctx)
        assert renderer.pages[0]["result"] == "handler"

    async def test_screen_returning_none(self) -> None:
        screens = ScreenRegistry()
        screens.register("book", lambda exchange, action, ident: None)
        ctx, _ = make_context(StubDispatcher(), screens=screens)
        with pytest.raises(NotFound):
            await process_request(await make_exchange("/books"), ctx)


class TestRedirects:
    async def test_redirect_result(self) -> None:
        ctx, renderer = make_context(
            StubDispatcher(lambda r: found(Redirect("/next"))),
            pages={"dynamic/index.html": "<p>never</p>"},
        )
        x = await make_exchange("/")

        await process_request(x, ctx)
        response = x.to_response()
        assert response.status == 303
        assert response.header("Location") == "/next"
        assert renderer.pages == []

    async def test_redirect_set_on_exchange(self) -> None:
        def answer(request: DispatchRequest) -> Outcome:
            request.exchange.redirect("/login")
            return found("ignored")

        ctx, _ = make_context(StubDispatcher(answer))
        x = await make_exchange("/")
        await process_request(x, ctx)
        assert x.to_response().header("Location") == "/login"

    async def test_event_redirect_is_json(self) -> None:
        def answer(request: DispatchRequest) -> Outcome:
            if request.event is not None:
                request.exchange.redirect("/done")
            return found(None)

        ctx, _ = make_context(StubDispatcher(answer))
        x = await make_exchange("/", form=event_form("save"))
        await process_request(x, ctx)
        assert x.to_response().json_body == {"_redirect_": "/done"}

    async def test_event_handler_returning_redirect(self) -> None:
        def answer(request: DispatchRequest) -> Outcome:
            if request.event is not None:
                return found(Redirect("/done"))
            return found("view")

        ctx, renderer = make_context(StubDispatcher(answer))
        x = await make_exchange("/", form=event_form("save"))
        await process_request(x, ctx)
        assert x.to_response().json_body == {"_redirect_": "/done"}
        assert renderer.pages == []


class TestEvents:
    async def test_event_dispatched_before_primary(self) -> None:
        dispatcher = StubDispatcher(lambda r: found("view"))
        ctx, _ = make_context(dispatcher)
        x = await make_exchange("/", form=event_form("inc", args="[1, \"a\"]"))

        await process_request(x, ctx)
        first, second = dispatcher.requests
        assert first.event == Command("inc", (1, "a"))
        assert second.event is None

    async def test_inputs_bound_into_locals(self) -> None:
        seen: dict[str, Any] = {}

        def answer(request: DispatchRequest) -> Outcome:
            if request.event is not None:
                seen.update(request.exchange.locals)
            return found("view")

        ctx, _ = make_context(StubDispatcher(answer))
        x = await make_exchange("/", form=event_form("save", inputs='{"title": "Hi", "n": 2}'))
        await process_request(x, ctx)
        assert seen == {"title": "Hi", "n": 2}

    async def test_event_response_is_partial_json(self) -> None:
        ctx, renderer = make_context(StubDispatcher(lambda r: found("view")))
        x = await make_exchange("/", form=event_form("go", inputs='{"name": "ada"}'))

        await process_request(x, ctx)
        payload = x.to_response().json_body
        assert payload["_sel_"] == {"body": "PAGE(view)"}
        assert CODEC.loads(payload["_state_"]) == {"name": "ada"}
        assert renderer.pages[0]["embedded"] is True

    async def test_state_restored_before_event(self) -> None:
        seen: dict[str, Any] = {}

        def answer(request: DispatchRequest) -> Outcome:
            if request.event is not None:
                seen.update(request.exchange.locals)
            return found("view")

        ctx, _ = make_context(StubDispatcher(answer))
        token = CODEC.dumps({"count": 3})
        x = await make_exchange("/", form=event_form("inc", **{"__state": token}))
        await process_request(x, ctx)
        assert seen == {"count": 3}

    async def test_errors_short_circuit(self) -> None:
        def answer(request: DispatchRequest) -> Outcome:
            request.exchange.add_error("Title is required", field="title")
            return found(None)

        dispatcher = StubDispatcher(answer)
        ctx, renderer = make_context(dispatcher, pages={"dynamic/index.html": "<p></p>"})
        x = await make_exchange("/", form=event_form("save"))

        await process_request(x, ctx)
        assert x.to_response().json_body == {
            "!errors": [{"field": "title", "message": "Title is required"}]
        }
        assert len(dispatcher.requests) == 1
        assert renderer.pages == []

    async def test_missing_inputs(self) -> None:
        ctx, _ = make_context(StubDispatcher(lambda r: found("view")))
        x = await make_exchange("/", form=event_form("save", inputs=None))
        with pytest.raises(MissingInput, match="_inputs"):
            await process_request(x, ctx)

    @pytest.mark.parametrize("args", ["{nope", '{"a": 1}'])
    async def test_malformed_args(self, args: str) -> None:
        ctx, _ = make_context(StubDispatcher(lambda r: found("view")))
        x = await make_exchange("/", form=event_form("save", args=args))
        with pytest.raises(BadRequest):
            await process_request(x, ctx)

    async def test_malformed_inputs(self) -> None:
        ctx, _ = make_context(StubDispatcher(lambda r: found("view")))
        x = await make_exchange("/", form=event_form("save", inputs="[1]"))
        with pytest.raises(BadRequest):
            await process_request(x, ctx)

    async def test_unhandled_event(self) -> None:
        ctx, _ = make_context(StubDispatcher())
        x = await make_exchange("/", form=event_form("nobody"))
        with pytest.raises(EventError):
            await process_request(x, ctx)

    async def test_event_handled_by_service(self) -> None:
        ctx, _ = make_context(StubDispatcher(lambda r: found({}, service=True)))
        x = await make_exchange("/", form=event_form("svc"))
        with pytest.raises(EventError):
            await process_request(x, ctx)

    async def test_post_without_event_is_primary_only(self) -> None:
        dispatcher = StubDispatcher(lambda r: found("view"))
        ctx, _ = make_context(dispatcher)
        x = await make_exchange("/", form={"title": "x"})
        await process_request(x, ctx)
        assert len(dispatcher.requests) == 1
        assert x.to_response().text == "PAGE(view)"
