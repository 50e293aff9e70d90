"""Terminal error formatting for the operational log.

Turns an unexpected exception into readable diagnostics on the
``wren.server`` logger instead of a raw ``logger.exception()`` dump.

For kida template errors (raised while rendering the page)::

    -- Template Error -----------------------------------------------
    K-RUN-001: Undefined variable 'coments' in page.html:12
      Route: GET /
    -----------------------------------------------------------------

For everything else the traceback verbosity is chosen by the
``WREN_TRACEBACK`` environment variable: ``compact`` (default, app
frames only), ``full``, or ``minimal``.
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.http.request import Request

logger = logging.getLogger("wren.server")

# Width of the terminal error banner
_BANNER_WIDTH = 65

_STDLIB_PREFIX = os.path.dirname(os.__file__)


def _is_kida_error(exc: BaseException) -> bool:
    """Check if an exception originates from the kida template engine."""
    module = type(exc).__module__ or ""
    return module.split(".")[0] == "kida"


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename or filename.startswith("<"):
        return False
    return not filename.startswith(_STDLIB_PREFIX)


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    """Wrap a kida error's compact description in a banner with route context."""
    parts = [f"-- Template Error {'-' * (_BANNER_WIDTH - 18)}"]
    if hasattr(exc, "format_compact"):
        parts.append(exc.format_compact())
    else:
        parts.append(str(exc))
    if request is not None:
        parts.append(f"  Route: {request.method} {request.path}")
    parts.append("-" * _BANNER_WIDTH)
    return "\n".join(parts)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus up to five application frames.

    Falls back to the last three frames when none belong to the app.
    A chained cause (``raise ... from err``) is summarized on its own line.
    """
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames or frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    cause = exc.__cause__
    if cause is not None:
        parts.append(f"  Caused by: {type(cause).__name__}: {cause}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary with the innermost location."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, request: Request | None = None, *, status: int = 500) -> None:
    """Log a server-side failure with the configured verbosity."""
    prefix = f"{status} {request.method} {request.path}" if request is not None else "Server error"

    if _is_kida_error(exc):
        logger.error("%s\n%s", prefix, format_template_error(exc, request))
        return

    traceback_style = os.environ.get("WREN_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        logger.error(prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s - %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
