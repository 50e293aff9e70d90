"""Content negotiation — maps handler return values to responses.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from wren.http.response import AnyResponse, FileResponse, Response, WebSocketUpgrade


def negotiate(value: Any) -> AnyResponse:
    """Convert a route handler's return value to a response.

    Dispatch order:

    1. ``Response`` / ``FileResponse`` / ``WebSocketUpgrade`` -> pass through
    2. ``str``              -> 200, text/html
    3. ``bytes``            -> 200, application/octet-stream
    4. ``dict`` / ``list``  -> 200, application/json
    5. ``(value, int)``     -> negotiate value, override status
    """
    match value:
        case Response() | FileResponse() | WebSocketUpgrade():
            return value
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json",
            )
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case _:
            msg = (
                f"Route handler returned {type(value).__name__}, which wren cannot "
                "turn into a response. Return a Response, str, bytes, dict, or list."
            )
            raise TypeError(msg)
