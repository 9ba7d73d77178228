"""The dispatch pipeline.

Decides, for one exchange, which of several strategies answers it. The
strategies are tried in a fixed order and the first that applies wins:

1. **Static file** — GET requests for an existing file are served as-is.
2. **State restore** — the posted UI state token is loaded into locals.
3. **Event** — a POST carrying ``_event`` binds ``_inputs`` into locals
   and dispatches the event. Recorded errors answer immediately with
   ``{"!errors": [...]}``.
4. **Primary dispatch** — the request is dispatched to a page or service
   handler. Service results are returned verbatim; no page is rendered.
5. **Generic screen** — with no result, a registered screen may supply one.
6. **Page** — ``<pages_prefix>/<resource>.html`` is rendered, or the
   result alone is wrapped in the layout. Event requests get a JSON
   partial instead of a full page.
7. Nothing produced anything: ``NotFound``.

Every collaborator comes in through ``PipelineContext``; the pipeline
never looks up an active app.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from trill.dispatch.result import (
    DispatchRequest,
    DispatchResult,
    Failed,
    Found,
    Missing,
)
from trill.errors import BadRequest, DispatchError, EventError, MissingInput, NotFound
from trill.http.response import Redirect
from trill.pages.model import page_model
from trill.tags.tag import Command

if TYPE_CHECKING:
    from trill.dispatch.dispatcher import Dispatcher
    from trill.dispatch.screens import ScreenRegistry
    from trill.exchange import Exchange
    from trill.pages.resources import ResourceLoader
    from trill.state import StateCodec
    from trill.static import StaticFiles
    from trill.templating.integration import PageRenderer

logger = logging.getLogger("trill.pipeline")


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """Everything the pipeline needs, handed in by the caller."""

    dispatcher: Dispatcher | None
    renderer: PageRenderer
    resources: ResourceLoader
    state: StateCodec
    screens: ScreenRegistry | None = None
    static: StaticFiles | None = None
    pages_prefix: str = "dynamic"


async def process_request(exchange: Exchange, ctx: PipelineContext) -> Any:
    """Run the pipeline; a missing result is ``NotFound``."""
    result = await dispatch_request(exchange, ctx)
    if result is None:
        raise NotFound(f"No resource for {exchange.method} {exchange.path!r}")
    return result


async def dispatch_request(exchange: Exchange, ctx: PipelineContext) -> Any:
    """Answer *exchange*.

    Returns the exchange itself once a response was written into it,
    or a service handler's raw result.

    Raises:
        NotFound: No strategy produced a response.
        MissingInput: An event request without ``_inputs``.
        BadRequest: Malformed ``_args`` or ``_inputs``.
        DispatchError: A handler failed; the failure is the ``__cause__``.
        EventError: An event had no view handler.
    """
    if exchange.is_get and ctx.static is not None:
        file_path = ctx.static.resolve(exchange.path)
        if file_path is not None:
            exchange.serve_file(file_path)
            return exchange

    exchange.load_state(ctx.state)

    has_event = False
    if exchange.is_post:
        event = exchange.posted("_event")
        if event:
            has_event = True
            logger.debug("Event %r on %s", event, exchange.path)
            command = Command(event, _parse_args(exchange.posted("_args")))
            for input_id, value in _parse_inputs(exchange.posted("_inputs")).items():
                exchange.put_local(input_id, value)

            outcome = await _dispatch(ctx, DispatchRequest(exchange, command))
            if outcome is None or outcome.is_service:
                msg = f"Event {event!r} must be handled by a view handler"
                raise EventError(msg)
            if isinstance(outcome.value, Redirect):
                exchange.redirect(outcome.value.url)

            if exchange.has_errors:
                exchange.write_json({"!errors": exchange.errors})
                return exchange

    result: Any = None
    outcome = await _dispatch(ctx, DispatchRequest(exchange))
    if outcome is not None:
        result = outcome.value
        if outcome.is_service:
            return result
        if isinstance(result, Redirect):
            exchange.redirect(result.url)
            result = None

    if result is None and ctx.screens is not None:
        result = await ctx.screens.resolve(exchange)

    if exchange.redirect_url is not None:
        _serve_redirect(exchange, has_event)
        return exchange

    if _serve_dynamic_page(exchange, ctx, result, has_event):
        return exchange

    raise NotFound(f"No resource for {exchange.method} {exchange.path!r}")


async def _dispatch(ctx: PipelineContext, request: DispatchRequest) -> DispatchResult | None:
    if ctx.dispatcher is None:
        return None
    match await ctx.dispatcher.dispatch(request):
        case Found(result):
            return result
        case Missing():
            return None
        case Failed(detail, cause):
            raise DispatchError(f"Dispatch error: {detail}") from cause


def _parse_args(raw: Any) -> tuple[Any, ...]:
    if raw is None:
        return ()
    if isinstance(raw, list):
        return tuple(raw)
    try:
        args = json.loads(raw)
    except (TypeError, ValueError):
        raise BadRequest("Malformed _args: expected a JSON array") from None
    if not isinstance(args, list):
        raise BadRequest("Malformed _args: expected a JSON array")
    return tuple(args)


def _parse_inputs(raw: Any) -> dict[str, Any]:
    if raw is None:
        raise MissingInput("_inputs")
    if isinstance(raw, dict):
        return raw
    try:
        inputs = json.loads(raw)
    except (TypeError, ValueError):
        raise BadRequest("Malformed _inputs: expected a JSON object") from None
    if not isinstance(inputs, dict):
        raise BadRequest("Malformed _inputs: expected a JSON object")
    return inputs


def _serve_redirect(exchange: Exchange, has_event: bool) -> None:
    url = exchange.redirect_url
    if has_event:
        exchange.write_json({"_redirect_": url})
    else:
        exchange.write_html("", status=303)
        exchange.headers.append(("Location", url))


def _serve_dynamic_page(
    exchange: Exchange,
    ctx: PipelineContext,
    result: Any,
    has_event: bool,
) -> bool:
    name = f"{ctx.pages_prefix}/{exchange.resource_name}.html"
    if ctx.resources.exists(name):
        model = page_model(name, result, ctx.resources, ctx.renderer)
    elif result is not None:
        model = {"result": result, "content": result, "navbar": True}
    else:
        return False

    model["embedded"] = has_event or exchange.param("embedded") is not None
    html = ctx.renderer.render_page(model)

    if has_event:
        exchange.write_json(
            {"_sel_": {"body": html}, "_state_": exchange.serialize_locals(ctx.state)}
        )
    else:
        exchange.write_html(html)
    return True
