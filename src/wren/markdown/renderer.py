"""Markdown to HTML via patitas.

The page assembler only needs ``parse(text) -> html``; this module keeps
that contract stable whatever patitas does underneath.
"""

from patitas import Markdown

from wren.errors import MarkdownError


class MarkdownRenderer:
    """Callable ``str -> str`` converter backed by a single ``patitas.Markdown``.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Syntax-highlight fenced code blocks.
    """

    def __init__(
        self,
        *,
        plugins: list[str] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md = Markdown(plugins=plugins or ["all"], highlight=highlight)

    def render(self, source: str) -> str:
        """Render *source* to HTML; empty input gives an empty string.

        Raises ``MarkdownError`` if patitas fails on the input.
        """
        if not source:
            return ""
        try:
            return self._md(source)
        except Exception as exc:
            msg = f"Markdown rendering failed: {exc}"
            raise MarkdownError(msg) from exc

    __call__ = render
