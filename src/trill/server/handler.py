"""ASGI handler — translates ASGI scope/messages to trill types.

The only component that touches raw ASGI directly. Builds a Request and
its Exchange, runs the dispatch pipeline, and sends the Response back
through ASGI send().
"""

from trill._internal.asgi import Receive, Scope, Send
from trill.errors import HTTPError
from trill.exchange import Exchange
from trill.http.request import Request
from trill.http.response import Response
from trill.pipeline import PipelineContext, process_request
from trill.server.client_js import CLIENT_JS, CLIENT_JS_PATH
from trill.server.errors import handle_http_error, handle_internal_error
from trill.server.negotiation import negotiate
from trill.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    context: PipelineContext,
    debug: bool,
    max_content_length: int,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = await _respond(request, context, debug=debug, max_content_length=max_content_length)
    await send_response(response, send, head=request.method == "HEAD")


async def _respond(
    request: Request,
    context: PipelineContext,
    *,
    debug: bool,
    max_content_length: int,
) -> Response:
    if request.method in ("GET", "HEAD") and request.path == CLIENT_JS_PATH:
        return Response(body=CLIENT_JS, content_type="application/javascript; charset=utf-8")

    as_json = False
    try:
        length = int(request.headers.get("content-length") or 0)
    except ValueError:
        length = 0
    if length > max_content_length:
        return handle_http_error(
            HTTPError(413, "Request body too large"), request, as_json=False, debug=debug
        )

    try:
        exchange = await Exchange.from_request(request)
        as_json = bool(exchange.is_post and exchange.posted("_event"))
        result = await process_request(exchange, context)
        return negotiate(result)
    except HTTPError as exc:
        return handle_http_error(exc, request, as_json=as_json, debug=debug)
    except Exception as exc:
        return handle_internal_error(exc, request, as_json=as_json, debug=debug)
