"""Error responses for trill requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
Event requests (those posting ``_event``) get JSON bodies so the client
runtime can read them; everything else gets plain text.
"""

import logging
import traceback

from trill.errors import HTTPError
from trill.http.request import Request
from trill.http.response import Response

logger = logging.getLogger("trill.server")


def _error_response(status: int, detail: str, *, as_json: bool) -> Response:
    if as_json:
        return Response.json({"error": detail}, status=status)
    return Response(body=detail, status=status, content_type="text/plain; charset=utf-8")


def handle_http_error(exc: HTTPError, request: Request, *, as_json: bool, debug: bool) -> Response:
    """Map an HTTPError to a Response with its status."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = _error_response(exc.status, detail, as_json=as_json)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(
    exc: Exception,
    request: Request,
    *,
    as_json: bool,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        detail = "".join(traceback.format_exception(exc))
    else:
        detail = "Internal Server Error"
    return _error_response(500, detail, as_json=as_json)
