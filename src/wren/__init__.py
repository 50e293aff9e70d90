"""Wren — a small ASGI server built around an explicit request pipeline.

Every request runs the same ordered chain of stages: error boundary,
access log, response-time stamper, then the router with its static-file
fallback.  Handlers record named timing spans that reach the client as a
``Server-Timing`` header.

Basic usage::

    from wren import App

    app = App()

    @app.route("/")
    def index():
        return "Hello, World!"

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "FileResponse",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "ResourceUnavailable",
    "Response",
    "ServerTiming",
    "UpgradeRequired",
    "UpstreamUnavailable",
    "WebSocketUpgrade",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("AnyResponse", "FileResponse", "Response", "WebSocketUpgrade"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "ServerTiming":
        from wren.timing import ServerTiming

        return ServerTiming

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ResourceUnavailable",
        "UpgradeRequired",
        "UpstreamUnavailable",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
