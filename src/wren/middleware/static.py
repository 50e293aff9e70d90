"""Static file fallback.

The router's catch-all entry: when no route claims a request, the
request path is looked up under the asset root and the file is read
back.  Anything missing becomes ``NotFound``, which the error boundary
renders as a plain 404 page.
"""

import logging
import mimetypes
from pathlib import Path

import anyio

from wren.errors import HTTPError, MethodNotAllowed, NotFound, ResourceUnavailable
from wren.http.request import Request
from wren.http.response import AnyResponse, FileResponse, Response

logger = logging.getLogger("wren.server")

_READ_METHODS = frozenset({"GET", "HEAD"})


class StaticFiles:
    """Serve files from a directory for otherwise unmatched paths.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Usage::

        app.fallback(StaticFiles("./public", cache_control="no-cache"))
    """

    __slots__ = ("_cache_control", "_directory", "_index")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control

    async def __call__(self, request: Request) -> AnyResponse:
        """Serve the file at ``request.path`` or raise ``NotFound``."""
        if request.method not in _READ_METHODS:
            raise MethodNotAllowed(_READ_METHODS)

        path = request.path
        relative = path.lstrip("/")
        logger.debug("static lookup %s -> %s", path, relative or ".")

        try:
            file_path = (self._directory / relative).resolve() if relative else self._directory
        except (OSError, ValueError) as exc:
            # NUL bytes, over-long names, symlink loops
            raise NotFound(f"Unusable path {path!r}") from exc
        if not file_path.is_relative_to(self._directory):
            raise HTTPError(status=403, detail="Forbidden")

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                raise NotFound(f"No index for {path!r}")
            # Redirect so relative links inside the index resolve correctly
            if relative and not path.endswith("/"):
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            raise NotFound(f"No file for {path!r}")

        return await self._file_response(file_path, head_only=request.method == "HEAD")

    async def _file_response(self, file_path: Path, *, head_only: bool) -> FileResponse:
        """Read the whole file; I/O errors become ``NotFound`` or ``ResourceUnavailable``."""
        content_type, _ = mimetypes.guess_type(file_path.name)
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/"):
            content_type = f"{content_type}; charset=utf-8"

        source = anyio.Path(file_path)
        try:
            if head_only:
                content = b""
                size = (await source.stat()).st_size
            else:
                content = await source.read_bytes()
                size = len(content)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFound(f"File vanished: {file_path.name!r}") from exc
        except OSError as exc:
            msg = f"Cannot read static file {file_path}: {exc}"
            raise ResourceUnavailable(msg) from exc

        return FileResponse(
            path=file_path,
            size=size,
            content=content,
            content_type=content_type,
            head_only=head_only,
        ).with_header("Cache-Control", self._cache_control)
