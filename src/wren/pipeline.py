"""Pipeline builder — folds an ordered list of stages around an endpoint.

``build_pipeline((a, b, c), endpoint)`` returns a single ``Next`` that
runs ``a`` first; ``a``'s continuation runs ``b``, and so on until
``endpoint`` (the router dispatch) is reached::

    a -> b -> c -> endpoint

The fold happens once, when the app freezes.  Per request, calling the
result costs one closure call per stage.
"""

from collections.abc import Sequence

from wren.http.request import Request
from wren.http.response import AnyResponse
from wren.middleware.protocol import Middleware, Next


def _link(stage: Middleware, inner: Next) -> Next:
    async def run(request: Request) -> AnyResponse:
        return await stage(request, inner)

    return run


def build_pipeline(stages: Sequence[Middleware], endpoint: Next) -> Next:
    """Compose *stages* (outermost first) around *endpoint*."""
    handler = endpoint
    for stage in reversed(stages):
        handler = _link(stage, handler)
    return handler
