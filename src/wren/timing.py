"""Per-request Server-Timing recorder.

One ``ServerTiming`` instance is created for each request and attached to
it (``request.timing``).  Handlers open and close named spans; the ASGI
handler serializes the completed spans into a ``Server-Timing`` header
right before the response is sent::

    timing = request.timing
    timing.start("markdown")
    html = md.render(source)
    timing.end("markdown")

    with timing.span("render"):
        body = render(data)

Nothing here is process-wide, so concurrent requests never see each
other's spans.
"""

import logging
import math
import time
from collections.abc import Callable
from types import TracebackType

from wren.errors import UndefinedSpanError

logger = logging.getLogger("wren.server")

SERVER_TIMING_HEADER = "Server-Timing"


def _floor_ms(seconds: float) -> float:
    """Seconds to milliseconds, floored to three decimals."""
    return math.floor(seconds * 1_000_000) / 1000


class ServerTiming:
    """Named interval measurements for a single request.

    Any number of spans may be open at once as long as their names
    differ.  Completed spans keep their completion order.
    """

    __slots__ = ("_clock", "_durations", "_open", "total_ms")

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._open: dict[str, float] = {}
        self._durations: dict[str, float] = {}
        # Whole-pipeline latency in whole ms, set by the response-time stamper
        self.total_ms: int | None = None

    def start(self, name: str) -> None:
        """Open the span *name*."""
        if name in self._open:
            msg = f"Timing span {name!r} is already open"
            raise ValueError(msg)
        self._open[name] = self._clock()

    def end(self, name: str) -> float:
        """Close the span *name* and return its duration in milliseconds.

        Raises ``UndefinedSpanError`` when *name* was never started.
        """
        try:
            started = self._open.pop(name)
        except KeyError:
            msg = f"Timing span {name!r} was ended without a matching start()"
            raise UndefinedSpanError(msg) from None
        duration = _floor_ms(max(self._clock() - started, 0.0))
        self._durations[name] = duration
        return duration

    def span(self, name: str) -> "_Span":
        """Time the enclosed block, closing the span even if it raises."""
        return _Span(self, name)

    @property
    def durations(self) -> dict[str, float]:
        """Completed spans in completion order (milliseconds)."""
        return dict(self._durations)

    @property
    def open_spans(self) -> tuple[str, ...]:
        return tuple(self._open)

    def header_value(self) -> str:
        """Render completed spans as ``name;dur=<ms>`` joined by commas.

        Spans still open are a caller bug; they are logged as a warning and
        left out.
        """
        if self._open:
            names = ", ".join(sorted(self._open))
            logger.warning("Timing spans never ended: %s", names)
        return ", ".join(f"{name};dur={dur:.3f}" for name, dur in self._durations.items())


class _Span:
    """Context manager returned by ``ServerTiming.span``.

    Not a ``@contextmanager`` generator: that form assigns
    ``__traceback__`` on the propagating exception, and frozen
    ``HTTPError`` instances reject the assignment.
    """

    __slots__ = ("_name", "_timing")

    def __init__(self, timing: ServerTiming, name: str) -> None:
        self._timing = timing
        self._name = name

    def __enter__(self) -> None:
        self._timing.start(self._name)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._timing.end(self._name)
