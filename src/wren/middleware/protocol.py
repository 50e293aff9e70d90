"""Middleware protocol and Next type alias.

A middleware stage is any callable matching::

    async def my_stage(request: Request, next: Next) -> AnyResponse: ...

No base class required.  A stage may act before and/or after awaiting
``next(request)``; it must not call ``next`` more than once.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.http.request import Request
from wren.http.response import AnyResponse

# The remainder of the pipeline, as seen from inside a stage
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        async def powered_by(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            return response.with_header("X-Powered-By", "wren")

        class Stamp:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
