"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, read once at
startup, no string-key dict lookups at request time.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from wren.errors import ConfigurationError

DEFAULT_API_URL = "https://jsonplaceholder.typicode.com/todos/1"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, public_dir="site/public")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    # Reload (development mode, requires debug=True)
    reload_include: tuple[str, ...] = (".md", ".html", ".css")
    reload_dirs: tuple[str, ...] = ()

    # Static assets and page sources
    public_dir: str | Path = "public"
    markdown_path: str | Path | None = None  # None -> <public_dir>/markdown/test.md
    static_cache_control: str = "no-cache"

    # Remote data
    api_url: str = DEFAULT_API_URL
    fetch_timeout: float = 5.0

    # Live reload
    live_reload_path: str = "/_r"

    # Logging
    log_level: str = "info"

    @property
    def markdown_file(self) -> Path:
        """Resolved markdown source path."""
        if self.markdown_path is not None:
            return Path(self.markdown_path)
        return Path(self.public_dir) / "markdown" / "test.md"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_file: str | Path | None = ".env",
    ) -> "AppConfig":
        """Build a config from environment variables.

        ``PORT`` and ``HOST`` keep their conventional names; everything
        else is ``WREN_``-prefixed.  Unset variables keep the defaults.

        Values from *env_file* (a dotenv file, skipped when absent) fill in
        whatever the environment leaves unset.  Pass ``env_file=None`` to
        ignore it.
        """
        env = _load_env(os.environ if environ is None else environ, env_file)
        defaults = cls()
        markdown = env.get("WREN_MARKDOWN_PATH")
        return cls(
            host=env.get("HOST", defaults.host),
            port=_parse_int(env, "PORT", defaults.port),
            debug=_parse_bool(env, "WREN_DEBUG", defaults.debug),
            public_dir=env.get("WREN_PUBLIC_DIR", str(defaults.public_dir)),
            markdown_path=markdown or None,
            api_url=env.get("WREN_API_URL", defaults.api_url),
            fetch_timeout=_parse_float(env, "WREN_FETCH_TIMEOUT", defaults.fetch_timeout),
            log_level=env.get("WREN_LOG_LEVEL", defaults.log_level),
        )


def _load_env(environ: Mapping[str, str], env_file: str | Path | None) -> Mapping[str, str]:
    if env_file is None or not Path(env_file).is_file():
        return environ
    from_file = {
        key: value for key, value in dotenv_values(env_file).items() if value is not None
    }
    return {**from_file, **environ}


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        msg = f"{key} must be an integer, got {raw!r}"
        raise ConfigurationError(msg) from None
    if key == "PORT" and not 0 <= value <= 65535:
        msg = f"PORT must be between 0 and 65535, got {value}"
        raise ConfigurationError(msg)
    return value


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        msg = f"{key} must be a number, got {raw!r}"
        raise ConfigurationError(msg) from None


def _parse_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    msg = f"{key} must be a boolean, got {raw!r}"
    raise ConfigurationError(msg)
