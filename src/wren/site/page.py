"""The dynamic page at ``/``.

Three steps, each inside its own Server-Timing span:

- ``markdown``  read the source file and convert it to HTML
- ``fetch``     call the remote data source
- ``render``    hand everything to the template

The first two run one after the other.  A failure in either is raised
as a declared fault chained from the original error, so the error
boundary can log the cause while the client only sees a generic page.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio

from wren.errors import MarkdownError, ResourceUnavailable, UpstreamUnavailable
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")

COMMENTS: tuple[str, ...] = (
    "Hey! This is the first comment.",
    "Hi, from another comment!",
    "Wow",
)


@dataclass(frozen=True, slots=True)
class PageData:
    """Everything the page template needs for one render."""

    remote: Any
    comments: tuple[str, ...]
    markdown_html: str


class PageAssembler:
    """Route handler that builds the page from its three sources."""

    __slots__ = ("_fetch", "_parse", "_render", "markdown_file")

    def __init__(
        self,
        markdown_file: str | Path,
        *,
        fetch: Callable[[], Awaitable[Any]],
        parse: Callable[[str], str],
        render: Callable[[PageData], str],
    ) -> None:
        self.markdown_file = Path(markdown_file)
        self._fetch = fetch
        self._parse = parse
        self._render = render

    async def __call__(self, request: Request) -> Response:
        timing = request.timing
        logger.debug("assembling page for %s", request.path)

        with timing.span("markdown"):
            markdown_html = await self.load_markdown()

        with timing.span("fetch"):
            try:
                remote = await self._fetch()
            except Exception as exc:
                msg = f"Remote data source failed: {exc!r}"
                raise UpstreamUnavailable(msg) from exc

        with timing.span("render"):
            markup = self._render(
                PageData(remote=remote, comments=COMMENTS, markdown_html=markdown_html)
            )

        return Response(markup)

    async def load_markdown(self) -> str:
        """Read the markdown source as UTF-8 and convert it to HTML."""
        try:
            source = await anyio.Path(self.markdown_file).read_text(encoding="utf-8")
            return self._parse(source)
        except (OSError, UnicodeDecodeError, MarkdownError) as exc:
            msg = f"Cannot load markdown source {self.markdown_file}: {exc}"
            raise ResourceUnavailable(msg) from exc
