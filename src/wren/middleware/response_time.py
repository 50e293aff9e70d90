"""Response-time stamper.

Measures the wall-clock time of everything inside it and reports it as
``X-Response-Time: <n>ms``.  Milliseconds are rounded up so the header
never undercuts the sum of the ``Server-Timing`` spans measured inside.

The measurement is also kept on ``request.timing.total_ms``.  When the
inner pipeline raises there is no response to stamp yet; the error
boundary reads the value from there and stamps its error page instead.
"""

import math
import time
from collections.abc import Callable

from wren.http.request import Request
from wren.http.response import AnyResponse
from wren.middleware.protocol import Next

RESPONSE_TIME_HEADER = "X-Response-Time"


def format_response_time(ms: int) -> str:
    return f"{ms}ms"


def stamp(response: AnyResponse, ms: int | None) -> AnyResponse:
    """Add the ``X-Response-Time`` header unless *ms* is unknown or already set."""
    if ms is None or response.header(RESPONSE_TIME_HEADER) is not None:
        return response
    return response.with_header(RESPONSE_TIME_HEADER, format_response_time(ms))


class ResponseTime:
    """Stamp the inner pipeline's latency onto the response."""

    __slots__ = ("_clock",)

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        started = self._clock()
        try:
            response = await next(request)
        finally:
            request.timing.total_ms = math.ceil(max(self._clock() - started, 0.0) * 1000)
        return stamp(response, request.timing.total_ms)
