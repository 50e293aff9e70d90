"""Server-side render of the page.

One kida template (``templates/page.html``) loaded through a
``PackageLoader``.  The environment is built on first use and shared
afterwards; kida templates are safe to render concurrently.

Output depends only on the ``PageData`` passed in: the remote value is
serialized with sorted keys, so equal inputs give byte-identical pages.
"""

import json
from functools import cache

from kida import Environment, PackageLoader
from kida.template import Markup

from wren.site.page import PageData

PAGE_TEMPLATE = "page.html"


@cache
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("wren.site", "templates"),
        autoescape=True,
    )


def render(
    data: PageData,
    *,
    title: str = "wren",
    live_reload_path: str = "/_r",
) -> str:
    """Render *data* into a full HTML document.

    ``markdown_html`` is trusted parser output and is inserted as-is;
    comments and the remote JSON are escaped.
    """
    template = _environment().get_template(PAGE_TEMPLATE)
    return template.render(
        {
            "title": title,
            "markdown_html": Markup(data.markdown_html),
            "remote_json": json.dumps(data.remote, indent=2, sort_keys=True, ensure_ascii=False),
            "comments": data.comments,
            "live_reload_path": live_reload_path,
        }
    )
