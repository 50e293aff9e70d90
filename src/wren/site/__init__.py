"""The demo site: one dynamic page, a live-reload socket, static assets.

Routes, in match order::

    GET /_r    live-reload WebSocket (426 for plain HTTP)
    GET /      page assembled from markdown, remote JSON, and a template
    *          static files under ``public_dir``

Usage::

    from wren.site import create_app

    app = create_app()          # ASGI callable
    app.run()                   # or serve it with pounce directly
"""

from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

from wren.app import App
from wren.config import AppConfig
from wren.http.response import WebSocketUpgrade
from wren.middleware.static import StaticFiles
from wren.site.api import RemoteData
from wren.site.page import COMMENTS, PageAssembler, PageData

__all__ = ["COMMENTS", "PageData", "create_app", "live_reload"]


def live_reload() -> WebSocketUpgrade:
    """Hold a socket open so the browser notices when the server restarts."""
    return WebSocketUpgrade()


def create_app(
    config: AppConfig | None = None,
    *,
    fetch: Callable[[], Awaitable[Any]] | None = None,
    renderer: Callable[[PageData], str] | None = None,
    parse_markdown: Callable[[str], str] | None = None,
) -> App:
    """Build the site app.

    Args:
        config: App configuration (defaults to ``AppConfig()``).
        fetch: Zero-argument coroutine returning the remote data.  When
            omitted, an httpx-backed fetcher for ``config.api_url`` is
            opened on startup and closed on shutdown.
        renderer: ``PageData -> str`` render collaborator (defaults to the
            kida page template).
        parse_markdown: ``str -> str`` markdown converter (defaults to
            patitas via ``MarkdownRenderer``).
    """
    config = config or AppConfig()
    app = App(config=config)

    if fetch is None:
        remote = RemoteData(config.api_url, timeout=config.fetch_timeout)
        app.on_startup(remote.open)
        app.on_shutdown(remote.close)
        fetch = remote

    if renderer is None:
        from wren.site.components import render

        renderer = partial(render, live_reload_path=config.live_reload_path)

    if parse_markdown is None:
        from wren.markdown import MarkdownRenderer

        parse_markdown = MarkdownRenderer()

    app.route(config.live_reload_path, name="live_reload", websocket=True)(live_reload)
    app.route("/", name="page")(
        PageAssembler(
            config.markdown_file,
            fetch=fetch,
            parse=parse_markdown,
            render=renderer,
        )
    )
    app.fallback(
        StaticFiles(config.public_dir, cache_control=config.static_cache_control)
    )
    return app
