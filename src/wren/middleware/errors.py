"""Error boundary — the outermost stage and the only recovery point.

Every exception raised further down the pipeline ends up here.  It is
reduced to a tagged ``Fault`` and turned into a minimal HTML error page,
so the transport layer always receives a well-formed response.
"""

import html
import logging

from wren.errors import Fault, FaultKind, HTTPError, classify
from wren.http.request import Request
from wren.http.response import AnyResponse, Response
from wren.middleware.protocol import Next
from wren.middleware.response_time import stamp
from wren.server.terminal_errors import log_error

logger = logging.getLogger("wren.server")

_ERROR_PAGE = """<!DOCTYPE html>
<html>
  <body>
    <h1>{status} - {text}</h1>
  </body>
</html>
"""


def error_page(status: int, text: str) -> str:
    """Self-contained HTML document for an error response."""
    return _ERROR_PAGE.format(status=status, text=html.escape(text))


def fault_response(fault: Fault) -> Response:
    """Build the client-facing response for *fault*.

    Only exposable faults show their message; all others show the
    standard reason phrase for the status.
    """
    match fault.kind:
        case FaultKind.RUNTIME:
            return Response(body=error_page(500, "Internal Server Error"), status=500)
        case FaultKind.HTTP | FaultKind.RESOURCE_UNAVAILABLE | FaultKind.UPSTREAM_UNAVAILABLE:
            if fault.exposable and fault.message:
                text = fault.message
            else:
                text = fault.reason or "Error"
            return Response(body=error_page(fault.status, text), status=fault.status)


class ErrorBoundary:
    """Catch everything below, answer with an HTML error page.

    Server faults (5xx, declared or not) are logged with diagnostics on
    ``wren.server``; client faults only at DEBUG.  ``CancelledError`` is a
    ``BaseException`` and passes through untouched so a disconnected
    client's task is abandoned.

    The error page carries the ``X-Response-Time`` measured by the
    stamper further in, when one ran.
    """

    __slots__ = ()

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        try:
            return await next(request)
        except Exception as exc:
            fault = classify(exc)
            if fault.status >= 500:
                log_error(exc, request, status=fault.status)
            else:
                logger.debug(
                    "%d %s %s - %s", fault.status, request.method, request.path, fault.message
                )

            response = fault_response(fault)
            if isinstance(exc, HTTPError):
                for name, value in exc.headers:
                    response = response.with_header(name, value)
            return stamp(response, request.timing.total_ms)
