"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``pattern`` is filled in by the router when the route is added.
    A ``catch_all`` route answers every path and method that no other
    route claimed.  Only ``websocket`` routes take WebSocket handshakes.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    catch_all: bool = False
    websocket: bool = False
    pattern: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    def allows(self, method: str) -> bool:
        """True if this route answers *method* (``HEAD`` rides on ``GET``)."""
        if self.catch_all or method in self.methods:
            return True
        return method == "HEAD" and "GET" in self.methods


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
