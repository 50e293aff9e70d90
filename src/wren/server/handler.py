"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly.  Converts the scope
into a ``Request`` (with a fresh ``ServerTiming``), runs the composed
pipeline, merges the timing spans into the response headers, and sends
the result back through ASGI ``send()``.
"""

import inspect
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.errors import NotFound, UpgradeRequired
from wren.http.request import Request
from wren.http.response import AnyResponse, FileResponse, WebSocketUpgrade
from wren.middleware.protocol import Next
from wren.routing.route import RouteMatch
from wren.routing.router import Router
from wren.server.negotiation import negotiate
from wren.server.sender import (
    accept_websocket,
    reject_websocket,
    send_file_response,
    send_response,
)
from wren.timing import SERVER_TIMING_HEADER


def make_dispatch(router: Router) -> Next:
    """Innermost pipeline step: match the route and call its handler.

    WebSocket handshakes only reach routes registered with
    ``websocket=True``; anywhere else they fail as ``NotFound`` before a
    handler runs, and the handler layer closes the socket.
    """

    async def dispatch(request: Request) -> AnyResponse:
        match = router.match(request.method, request.path)
        if request.websocket and not match.route.websocket:
            raise NotFound(f"No WebSocket endpoint at {request.path!r}")
        return await invoke_handler(match, request)

    return dispatch


async def handle_request(scope: Scope, receive: Receive, send: Send, *, pipeline: Next) -> None:
    """Process a single HTTP or WebSocket request through the full pipeline."""
    if scope["type"] not in ("http", "websocket"):
        return

    request = Request.from_asgi(scope)
    response = await pipeline(request)

    timing_value = request.timing.header_value()
    if timing_value:
        response = response.with_header(SERVER_TIMING_HEADER, timing_value)

    if isinstance(response, WebSocketUpgrade) and request.websocket:
        await accept_websocket(response, receive, send)
    elif request.websocket:
        await reject_websocket(receive, send)
    elif isinstance(response, FileResponse):
        await send_file_response(response, send)
    else:
        await send_response(response, send, head_only=request.method == "HEAD")


async def invoke_handler(match: RouteMatch, request: Request) -> AnyResponse:
    """Call the matched route handler and negotiate its return value."""
    handler = match.route.handler
    request = request.with_path_params(match.path_params)
    kwargs = _build_handler_kwargs(handler, request, match.path_params)
    result = await invoke(handler, **kwargs)
    response = negotiate(result)
    if isinstance(response, WebSocketUpgrade) and not request.websocket:
        raise UpgradeRequired()
    return response


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, str],
) -> dict[str, Any]:
    """Inspect the handler signature and build kwargs.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, converted to the annotated type)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            value = path_params[name]
            if param.annotation is not inspect.Parameter.empty:
                try:
                    kwargs[name] = param.annotation(value)
                except (ValueError, TypeError):
                    kwargs[name] = value
            else:
                kwargs[name] = value

    return kwargs
