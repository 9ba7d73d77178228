"""Content negotiation — maps pipeline results to Response objects.

The pipeline either writes into the exchange or hands back a service
handler's raw value. isinstance-based dispatch, no magic, fully
predictable.
"""

import json
from typing import Any

from trill.exchange import Exchange
from trill.http.response import JSON_CONTENT_TYPE, Redirect, Response
from trill.tags.render import render_tag
from trill.tags.tag import Tag


def negotiate(value: Any) -> Response:
    """Convert a pipeline result to a Response.

    Dispatch order:

    1. ``Exchange``         -> the response written into it
    2. ``Response``         -> pass through
    3. ``Redirect``         -> 3xx with Location header
    4. ``Tag``              -> rendered HTML
    5. ``str``              -> 200, text/html
    6. ``bytes``            -> 200, application/octet-stream
    7. ``(value, int)``     -> negotiate value, override status
    8. anything else        -> 200, application/json
    """
    match value:
        case Exchange():
            return value.to_response()
        case Response():
            return value
        case Redirect():
            return Response(body="", status=value.status).with_header("Location", value.url)
        case Tag():
            return Response(body=render_tag(value))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case (inner, int() as status) if isinstance(value, tuple):
            return negotiate(inner).with_status(status)
        case _:
            return Response(
                body=json.dumps(value, default=str),
                content_type=JSON_CONTENT_TYPE,
            )
