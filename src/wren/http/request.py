"""Immutable HTTP request.

Frozen metadata plus the request's own ``ServerTiming`` recorder.  The
recorder is mutable, but the reference to it is not, so each request
carries exactly one for its whole trip through the pipeline.
"""

from dataclasses import dataclass, field, replace

from wren._internal.asgi import Scope
from wren.http.headers import Headers
from wren.timing import ServerTiming


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP (or WebSocket handshake) request."""

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    websocket: bool = False
    path_params: dict[str, str] = field(default_factory=dict)
    timing: ServerTiming = field(default_factory=ServerTiming, compare=False)

    def with_path_params(self, params: dict[str, str]) -> "Request":
        """Return a copy carrying the router's captured path parameters."""
        return replace(self, path_params=params)

    @classmethod
    def from_asgi(cls, scope: Scope) -> "Request":
        """Create a Request from an ASGI ``http`` or ``websocket`` scope."""
        client = scope.get("client")
        is_websocket = scope["type"] == "websocket"
        return cls(
            # websocket scopes carry no method; the handshake is always a GET
            method="GET" if is_websocket else scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            websocket=is_websocket,
        )

