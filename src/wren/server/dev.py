"""Serve a live wren App with pounce.

Pounce's ``run()`` takes an import string (e.g. ``"site:app"``), but
here there is a live ``App`` object, so ``pounce.Server`` is driven
directly with the ASGI callable.
"""

from __future__ import annotations


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    reload_include: tuple[str, ...] = (),
    reload_dirs: tuple[str, ...] = (),
) -> None:
    """Start a single-worker pounce server for *app*.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes.  Open pages reconnect to the
            live-reload socket and refresh themselves.
        reload_include: Extra file extensions to watch when reload is
            active (e.g. ``(".md", ".css")``).
        reload_dirs: Extra directories to watch alongside cwd.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=reload_include,
        reload_dirs=reload_dirs,
    )
    Server(config, app).run()
