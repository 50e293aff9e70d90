"""Markdown rendering for wren via patitas.

Basic usage::

    from wren.markdown import MarkdownRenderer

    to_html = MarkdownRenderer()
    html = to_html("# Hello")
"""

from wren.errors import MarkdownError
from wren.markdown.renderer import MarkdownRenderer

__all__ = [
    "MarkdownError",
    "MarkdownRenderer",
]
