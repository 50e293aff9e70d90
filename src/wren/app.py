"""Wren application class.

Mutable during setup (route registration, fallback, middleware, hooks).
Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

Every request runs the same fixed chain::

    ErrorBoundary -> AccessLog -> ResponseTime -> [added middleware] -> router
"""

import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.middleware.access_log import AccessLog
from wren.middleware.errors import ErrorBoundary
from wren.middleware.protocol import Middleware, Next
from wren.middleware.response_time import ResponseTime
from wren.pipeline import build_pipeline
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.handler import handle_request, make_dispatch

type Handler = Callable[..., Any]


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Handler
    methods: list[str] | None
    name: str | None
    websocket: bool = False


class App:
    """The wren application.

    Thread safety:
        Setup is single-threaded (decorators at import time).  The freeze
        transition uses a Lock + double-check so exactly one caller
        compiles the app even if several workers hit ``__call__()`` at once.
    """

    __slots__ = (
        "_fallback",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_pending_routes",
        "_pipeline",
        "_router",
        "_shutdown_hooks",
        "_stages",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._fallback: Handler | None = None
        self._middleware_list: list[Middleware] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._stages: tuple[Middleware, ...] = ()
        self._pipeline: Next | None = None

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
        websocket: bool = False,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.
            websocket: Accept WebSocket handshakes on this path.  Other
                routes refuse them before the handler runs.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, name, websocket))
            return func

        return decorator

    def fallback(self, handler: Handler) -> Handler:
        """Register the catch-all handler for requests no route matched.

        Usable as a decorator or a plain call::

            app.fallback(StaticFiles("public"))
        """
        self._check_not_frozen()
        self._fallback = handler
        return handler

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a stage between the response-time stamper and the router."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def router(self) -> Router:
        """The compiled router (freezes the app if needed)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    @property
    def stages(self) -> tuple[Middleware, ...]:
        """The middleware stages in execution order (freezes the app if needed)."""
        self._ensure_frozen()
        return self._stages

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce.

        ``debug=True`` enables auto-reload on source and content changes.
        """
        from wren.logs import configure_logging
        from wren.server.dev import run_server

        self._ensure_frozen()
        configure_logging(self.config.log_level)
        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
            reload_include=self.config.reload_include,
            reload_dirs=self.config.reload_dirs,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None
        await handle_request(scope, receive, send, pipeline=self._pipeline)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol."""
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            methods = frozenset(m.upper() for m in (pending.methods or ["GET"]))
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=methods,
                    name=pending.name,
                    websocket=pending.websocket,
                )
            )
        if self._fallback is not None:
            router.set_catch_all(self._fallback)
        router.compile()
        self._router = router

        self._stages = (
            ErrorBoundary(),
            AccessLog(),
            ResponseTime(),
            *self._middleware_list,
        )
        self._pipeline = build_pipeline(self._stages, make_dispatch(router))
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
