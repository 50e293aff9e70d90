"""Ordered router with an explicit catch-all entry.

Routes are scanned in registration order and the first one whose
pattern and method both match wins.  The table is small by design, so a
linear scan over precompiled regexes is all the matching there is.
"""

import re
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from wren.errors import MethodNotAllowed, NotFound
from wren.routing.params import CONVERTERS
from wren.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/"               -> []
        "/users/{id:int}" -> [PathSegment("users"), PathSegment("{id:int}", is_param=True, ...)]
        "/files/{rest:path}" -> [PathSegment("files"), PathSegment(..., param_type="path")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            param_name, _, param_type = part[1:-1].partition(":")
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type or "str",
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def compile_path(path: str) -> re.Pattern[str]:
    """Compile a route path into an anchored regex over normalized paths.

    Raises ``ValueError`` for unknown converters or a ``path`` converter
    that is not the last segment.
    """
    segments = parse_path(path)
    pieces: list[str] = []
    for i, seg in enumerate(segments):
        if not seg.is_param:
            pieces.append(re.escape(seg.value))
            continue
        if seg.param_type not in CONVERTERS:
            msg = f"Unknown path converter {seg.param_type!r} in route {path!r}"
            raise ValueError(msg)
        if seg.param_type == "path" and i != len(segments) - 1:
            msg = f"A path converter must be the last segment in route {path!r}"
            raise ValueError(msg)
        pattern, _ = CONVERTERS[seg.param_type]
        pieces.append(f"(?P<{seg.param_name}>{pattern})")
    return re.compile("^/" + "/".join(pieces) + "$")


def normalize_path(path: str) -> str:
    """Collapse empty segments so ``/a//b/`` matches like ``/a/b``."""
    return "/" + "/".join(p for p in path.split("/") if p)


class Router:
    """Ordered route table.

    Usage::

        router = Router()
        router.add(Route("/", index, frozenset({"GET"})))
        router.add(Route("/users/{id:int}", user, frozenset({"GET"})))
        router.set_catch_all(static_files)
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_catch_all", "_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._catch_all: Route | None = None
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route. Must be called before compile()."""
        self._check_not_compiled()
        self._routes.append(replace(route, pattern=compile_path(route.path)))

    def set_catch_all(self, handler: Callable[..., Any]) -> None:
        """Register the handler that answers when no route matched."""
        self._check_not_compiled()
        self._catch_all = Route(
            path="/{path:path}",
            handler=handler,
            methods=frozenset(),
            name="catch_all",
            catch_all=True,
        )

    @property
    def routes(self) -> list[Route]:
        """Registered routes in match order, catch-all last."""
        if self._catch_all is None:
            return list(self._routes)
        return [*self._routes, self._catch_all]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Returns a ``RouteMatch`` on success.
        Raises ``MethodNotAllowed`` if a route pattern matched but none
        of the matching routes accept *method*.
        Raises ``NotFound`` if nothing matched and there is no catch-all.
        """
        normalized = normalize_path(path)
        allowed: set[str] = set()

        for route in self._routes:
            assert route.pattern is not None
            found = route.pattern.match(normalized)
            if found is None:
                continue
            if route.allows(method):
                return RouteMatch(route=route, path_params=found.groupdict())
            allowed.update(route.methods)
            if "GET" in route.methods:
                allowed.add("HEAD")

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))

        if self._catch_all is not None:
            return RouteMatch(route=self._catch_all, path_params={"path": normalized.lstrip("/")})

        raise NotFound(f"No route matches {method} {path!r}")

    def _check_not_compiled(self) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
