"""ASGI response sending — translates wren responses to ASGI messages.

Three paths, one per response shape:

- ``send_response``       single in-memory body
- ``send_file_response``  file contents in fixed-size chunks
- ``accept_websocket``    handshake accept, then hold until disconnect
"""

import logging

from wren._internal.asgi import Receive, Send
from wren.http.response import FileResponse, Response, WebSocketUpgrade

logger = logging.getLogger("wren.server")

FILE_CHUNK_SIZE = 64 * 1024


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(content_type: str, headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    raw = [(b"content-type", content_type.encode("latin-1"))]
    raw.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers
    )
    return raw


async def send_response(response: Response, send: Send, *, head_only: bool = False) -> None:
    """Translate a Response into ASGI send() calls.

    ``head_only`` keeps the ``Content-Length`` of the full body but sends
    none of it.
    """
    raw_headers = _raw_headers(response.content_type, response.headers)
    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send({"type": "http.response.start", "status": response.status, "headers": raw_headers})
    await send({"type": "http.response.body", "body": b"" if head_only else body})


async def send_file_response(response: FileResponse, send: Send) -> None:
    """Send file contents as one response body split over several ASGI messages.

    ``HEAD`` responses send the headers and an empty body.
    """
    raw_headers = _raw_headers(response.content_type, response.headers)
    raw_headers.append((b"content-length", str(response.size).encode("latin-1")))
    await send({"type": "http.response.start", "status": response.status, "headers": raw_headers})

    if response.head_only or not _body_allowed(response.status):
        await send({"type": "http.response.body", "body": b""})
        return

    content = response.content
    for offset in range(0, len(content), FILE_CHUNK_SIZE):
        chunk = content[offset : offset + FILE_CHUNK_SIZE]
        await send({"type": "http.response.body", "body": chunk, "more_body": True})
    await send({"type": "http.response.body", "body": b"", "more_body": False})


async def accept_websocket(upgrade: WebSocketUpgrade, receive: Receive, send: Send) -> None:
    """Accept the handshake and park until the client disconnects.

    The socket only exists so the browser notices when the server goes
    away; incoming frames are read and dropped.
    """
    message = await receive()
    if message["type"] != "websocket.connect":
        logger.debug("websocket closed before handshake: %s", message["type"])
        return

    accept: dict[str, object] = {
        "type": "websocket.accept",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in upgrade.headers
        ],
    }
    if upgrade.subprotocol is not None:
        accept["subprotocol"] = upgrade.subprotocol
    await send(accept)

    while True:
        message = await receive()
        if message["type"] == "websocket.disconnect":
            return


async def reject_websocket(receive: Receive, send: Send, *, code: int = 1008) -> None:
    """Refuse a websocket handshake the pipeline did not upgrade."""
    message = await receive()
    if message["type"] == "websocket.connect":
        await send({"type": "websocket.close", "code": code})
