"""Page rendering — wraps a document's HTML in the site template."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from thoughts._errors import RenderError

if TYPE_CHECKING:
    from pathlib import Path

    from thoughts.content.document import Document

PAGE_TEMPLATE = "page.html"


class PageRenderer:
    """Renders documents into full HTML pages through a Kida template.

    The template receives ``title`` (already HTML-escaped) and ``content``
    (the document's HTML).  Autoescaping is off because ``content`` is
    trusted HTML produced by the Markdown transform.

    Args:
        title: Site title shown in every page.
        template_dirs: Template directories in priority order.

    """

    def __init__(self, title: str, template_dirs: list[Path]) -> None:
        from kida import Environment, FileSystemLoader

        self._title = title
        self._env = Environment(
            loader=FileSystemLoader(template_dirs),
            autoescape=False,
        )

    @property
    def title(self) -> str:
        return self._title

    def render(self, document: Document) -> str:
        """Return the full page for *document*.

        Raises:
            RenderError: If the document or the template fails to render.

        """
        body = document.render().decode("utf-8")
        try:
            template = self._env.get_template(PAGE_TEMPLATE)
            page = template.render(title=html.escape(self._title), content=body)
        except Exception as exc:
            msg = f"failed to render page for {document.path!r}: {exc}"
            raise RenderError(msg) from exc
        return page
