"""Wren exception hierarchy.

Shared across the router, the middleware stages, and the site handlers so
every module raises and catches the same types.  The error boundary never
inspects exception classes directly: it calls ``classify()`` and matches
on the resulting ``Fault.kind``.
"""

from dataclasses import dataclass
from enum import StrEnum
from http import HTTPStatus


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid."""


class UndefinedSpanError(WrenError):
    """Raised when a timing span is closed without having been opened."""


class MarkdownError(WrenError):
    """Raised when the markdown converter fails on its input."""


class FaultKind(StrEnum):
    """Category tag carried by every classified failure."""

    HTTP = "http"
    RESOURCE_UNAVAILABLE = "resource_unavailable"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    RUNTIME = "runtime"


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    ``expose`` controls whether ``detail`` may be shown to the client.
    Left unset, client errors (4xx) are exposable and server errors are not.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    expose: bool | None = None

    kind = FaultKind.HTTP

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    @property
    def exposable(self) -> bool:
        if self.expose is None:
            return self.status < 500
        return self.expose


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing (route or file) answers the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail, expose=False)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods and embeds
    the allowed methods in the detail string.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
            expose=True,
        )


class UpgradeRequired(HTTPError):  # noqa: N818
    """426 — the endpoint only speaks WebSocket."""

    def __init__(self, detail: str = "This endpoint requires a WebSocket upgrade") -> None:
        super().__init__(
            status=426,
            detail=detail,
            headers=(("Upgrade", "websocket"),),
            expose=True,
        )


class ResourceUnavailable(HTTPError):  # noqa: N818
    """A local resource (file on disk) could not be read or parsed."""

    kind = FaultKind.RESOURCE_UNAVAILABLE

    def __init__(self, detail: str, status: int = 500) -> None:
        super().__init__(status=status, detail=detail, expose=False)


class UpstreamUnavailable(HTTPError):  # noqa: N818
    """A remote dependency failed, timed out, or answered garbage."""

    kind = FaultKind.UPSTREAM_UNAVAILABLE

    def __init__(self, detail: str, status: int = 502) -> None:
        super().__init__(status=status, detail=detail, expose=False)


@dataclass(frozen=True, slots=True)
class Fault:
    """A failure reduced to what the error boundary needs to respond."""

    kind: FaultKind
    status: int
    exposable: bool
    message: str

    @property
    def reason(self) -> str:
        """Standard reason phrase for ``status`` (empty for unknown codes)."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""


def classify(exc: BaseException) -> Fault:
    """Reduce any exception to a tagged ``Fault``.

    ``HTTPError`` subclasses keep their declared status and exposability.
    Everything else is a generic runtime fault: 500, never exposed.
    """
    if isinstance(exc, HTTPError):
        return Fault(
            kind=exc.kind,
            status=exc.status,
            exposable=exc.exposable,
            message=exc.detail,
        )
    return Fault(
        kind=FaultKind.RUNTIME,
        status=500,
        exposable=False,
        message=str(exc),
    )
