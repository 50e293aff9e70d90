"""Access logger — one line per completed request.

Runs outside the response-time stamper, so by the time its post-``next``
code runs the ``X-Response-Time`` header is already on the response::

    200 GET / - 14ms
    404 GET /missing-asset.png - 1ms

A failure on its way to the error boundary is logged with the status the
boundary will answer with, then re-raised untouched.
"""

import logging

from wren.errors import classify
from wren.http.request import Request
from wren.http.response import AnyResponse
from wren.middleware.protocol import Next
from wren.middleware.response_time import RESPONSE_TIME_HEADER, format_response_time

logger = logging.getLogger("wren.access")


class AccessLog:
    """Log status, method, path, and elapsed time after each request."""

    __slots__ = ("_logger",)

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        try:
            response = await next(request)
        except Exception as exc:
            total = request.timing.total_ms
            elapsed = format_response_time(total) if total is not None else None
            self._log(classify(exc).status, request, elapsed)
            raise
        self._log(response.status, request, response.header(RESPONSE_TIME_HEADER))
        return response

    def _log(self, status: int, request: Request, elapsed: str | None) -> None:
        self._logger.info("%d %s %s - %s", status, request.method, request.path, elapsed)
