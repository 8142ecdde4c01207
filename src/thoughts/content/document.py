"""Documents — one Markdown file and its memoized HTML.

A Document is logically immutable: its path and raw bytes are fixed at
extraction time. The only state it ever gains is the rendered HTML, computed
on first ``render()`` and kept for the Document's lifetime.

Thread Safety:
    The memo is a relaxed write-once slot, not a lock. Two requests racing
    on the first render may both run the transform. The transform is pure,
    so both produce identical bytes and whichever write lands last is
    indistinguishable from the other.

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from thoughts._errors import RenderError

if TYPE_CHECKING:
    from thoughts._types import Transform

# [text](target.md), [text](target.md#anchor) and [text](target.md "title")
# where target has no scheme and is not protocol-relative. The suffix is
# dropped so same-tree links hit the routed path.
_LINK_RE = re.compile(
    r"(\[[^\]]*\]\((?![A-Za-z][A-Za-z0-9+.-]*:|//)[^)\s#]+?)\.md"
    r'((?:#[^)\s]*)?(?:\s+"[^"]*")?\))'
)

_markdown = None


def rewrite_links(source: str) -> str:
    """Strip the ``.md`` suffix from relative Markdown link targets.

    External links (anything with a URI scheme) are left untouched.

    """
    return _LINK_RE.sub(r"\1\2", source)


def render_markdown(raw: bytes) -> bytes:
    """Transform raw Markdown bytes into an HTML fragment.

    Pure: identical input always yields identical output.

    """
    global _markdown  # noqa: PLW0603
    if _markdown is None:
        from patitas import Markdown

        _markdown = Markdown(plugins=["table"])

    source = raw.decode("utf-8")
    return _markdown(rewrite_links(source)).encode("utf-8")


class Document:
    """A single text document within a snapshot.

    Args:
        path: Logical path inside the tree, e.g. ``notes/today.md``.
        raw: File contents captured at extraction time.
        transform: Raw-to-HTML transform; ``render_markdown`` by default.

    """

    __slots__ = ("_rendered", "_transform", "path", "raw")

    def __init__(
        self,
        path: str,
        raw: bytes,
        transform: Transform = render_markdown,
    ) -> None:
        self.path = path
        self.raw = bytes(raw)
        self._transform = transform
        self._rendered: bytes | None = None

    @property
    def rendered(self) -> bool:
        """Whether the HTML has already been computed."""
        return self._rendered is not None

    def render(self) -> bytes:
        """Return the document's HTML, computing it on first call.

        Raises:
            RenderError: If the transform fails. The memo stays empty, so
                a later call retries.

        """
        cached = self._rendered
        if cached is not None:
            return cached
        try:
            output = self._transform(self.raw)
        except Exception as exc:
            msg = f"failed to render document {self.path!r}: {exc}"
            raise RenderError(msg) from exc
        self._rendered = output
        return output

    def __repr__(self) -> str:
        return f"Document({self.path!r}, {len(self.raw)} bytes)"
