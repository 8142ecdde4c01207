"""Content layer — documents and the snapshots that index them."""

from thoughts.content.document import Document, render_markdown, rewrite_links
from thoughts.content.snapshot import (
    DOCUMENT_SUFFIX,
    INDEX_NAME,
    Snapshot,
    build_snapshot,
    extract_documents,
    index_documents,
    route_for,
)

__all__ = [
    "DOCUMENT_SUFFIX",
    "INDEX_NAME",
    "Document",
    "Snapshot",
    "build_snapshot",
    "extract_documents",
    "index_documents",
    "render_markdown",
    "rewrite_links",
    "route_for",
]
