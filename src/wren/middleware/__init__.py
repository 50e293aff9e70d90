"""Middleware — Protocol-based, no inheritance required.

A middleware stage is any callable matching:
    async def stage(request: Request, next: Next) -> AnyResponse

Built-in stages, outermost first as the app installs them:
    ErrorBoundary -- Turn any failure into an HTML error page
    AccessLog -- One log line per request
    ResponseTime -- X-Response-Time header

Terminal handler:
    StaticFiles -- Serve files for unmatched paths (router catch-all)
"""

from wren.middleware.access_log import AccessLog
from wren.middleware.errors import ErrorBoundary
from wren.middleware.protocol import Middleware, Next
from wren.middleware.response_time import ResponseTime
from wren.middleware.static import StaticFiles

__all__ = [
    "AccessLog",
    "ErrorBoundary",
    "Middleware",
    "Next",
    "ResponseTime",
    "StaticFiles",
]
