"""HTTP responses with a chainable ``.with_*()`` API.

Each transformation returns a new object, so a middleware stage can
decorate whatever the inner pipeline produced without mutating it.
Three shapes share the API:

- ``Response``          in-memory body
- ``FileResponse``      file contents, chunked by the sender
- ``WebSocketUpgrade``  protocol switch (101), no body
"""

from dataclasses import dataclass, replace
from pathlib import Path


def _find_header(headers: tuple[tuple[str, str], ...], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        return _find_header(self.headers, name)

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A file read from disk, sent by the sender in fixed-size chunks.

    The bytes are read by the stage that builds the response, inside the
    error boundary; the sender does no file I/O.  ``size`` is the full
    file length, which ``HEAD`` responses (``head_only``, empty
    ``content``) still report as ``Content-Length``.
    """

    path: Path
    size: int
    content: bytes = b""
    status: int = 200
    content_type: str = "application/octet-stream"
    headers: tuple[tuple[str, str], ...] = ()
    head_only: bool = False

    def with_status(self, status: int) -> "FileResponse":
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "FileResponse":
        return replace(self, headers=(*self.headers, (name, value)))

    def header(self, name: str) -> str | None:
        return _find_header(self.headers, name)


@dataclass(frozen=True, slots=True)
class WebSocketUpgrade:
    """Accept the WebSocket handshake for this request.

    The sender answers with ``websocket.accept`` (status 101 on the wire),
    passing along any headers added by middleware, then holds the socket
    open until the client goes away.  No body is ever produced.
    """

    status: int = 101
    headers: tuple[tuple[str, str], ...] = ()
    subprotocol: str | None = None

    def with_status(self, status: int) -> "WebSocketUpgrade":  # noqa: ARG002
        """No-op: an accepted upgrade is always 101."""
        return self

    def with_header(self, name: str, value: str) -> "WebSocketUpgrade":
        return replace(self, headers=(*self.headers, (name, value)))

    def header(self, name: str) -> str | None:
        return _find_header(self.headers, name)


# Any response type the pipeline can produce
type AnyResponse = Response | FileResponse | WebSocketUpgrade
