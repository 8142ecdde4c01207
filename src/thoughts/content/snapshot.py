"""Snapshots — an immutable index of the documents in one pull.

Extraction walks a pulled tree, drops the wrapper directory that archive
formats add, and keeps only Markdown files. Indexing then promotes the
top-level ``README.md`` to the index document and keys everything else by
its routed path (suffix stripped).

A Snapshot is never exposed half-built: ``build_snapshot`` either returns a
complete Snapshot or raises.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from thoughts._errors import ArchiveError, ContentError, MissingIndexError
from thoughts.content.document import Document
from thoughts.source.tree import walk_files

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from importlib.resources.abc import Traversable

    from thoughts._types import Fingerprint, RoutePath, Transform

INDEX_NAME = "README.md"
DOCUMENT_SUFFIX = ".md"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A fully built, read-only set of documents.

    Attributes:
        fingerprint: Remote state the snapshot was built from.
        index: Document served at the site root.
        documents: Routed path -> Document, index excluded.

    """

    fingerprint: Fingerprint
    index: Document
    documents: Mapping[RoutePath, Document]

    def resolve(self, route: str) -> Document | None:
        """Return the document routed at *route*, or None.

        Leading and trailing slashes are ignored; the empty route is the
        index document.

        """
        key = route.strip("/")
        if not key:
            return self.index
        return self.documents.get(key)

    def routes(self) -> list[RoutePath]:
        """All routed paths (index excluded), sorted."""
        return sorted(self.documents)

    def __len__(self) -> int:
        return len(self.documents) + 1


def route_for(path: str) -> RoutePath:
    """Routed path of a document: its logical path without the suffix."""
    return path.removesuffix(DOCUMENT_SUFFIX)


def extract_documents(
    tree: Traversable,
    *,
    transform: Transform | None = None,
) -> list[Document]:
    """Collect every Markdown document in *tree*, in walk order.

    The first path segment (the archive's wrapper directory) is removed to
    form each document's logical path. Files directly at the top of the
    tree have no logical path and are skipped.

    Raises:
        ContentError: If a matching file cannot be read.
        ArchiveError: If the tree contains an unsafe entry name.

    """
    extra = {} if transform is None else {"transform": transform}
    documents: list[Document] = []
    for parts, node in walk_files(tree):
        if not parts[-1].endswith(DOCUMENT_SUFFIX):
            continue
        logical = parts[1:]
        if not logical:
            continue
        path = "/".join(logical)
        try:
            raw = node.read_bytes()
        except OSError as exc:
            msg = f"failed to read file {'/'.join(parts)!r}: {exc}"
            raise ContentError(msg) from exc
        except zipfile.BadZipFile as exc:
            msg = f"corrupt archive entry {'/'.join(parts)!r}: {exc}"
            raise ArchiveError(msg) from exc
        documents.append(Document(path, raw, **extra))
    return documents


def index_documents(fingerprint: Fingerprint, documents: Iterable[Document]) -> Snapshot:
    """Build a Snapshot from extracted documents.

    A later document with the same routed path replaces an earlier one.

    Raises:
        MissingIndexError: If no document sits at ``README.md``.

    """
    index: Document | None = None
    by_route: dict[RoutePath, Document] = {}
    for doc in documents:
        if doc.path == INDEX_NAME:
            index = doc
            continue
        by_route[route_for(doc.path)] = doc

    if index is None:
        msg = "no index document found"
        raise MissingIndexError(msg)

    return Snapshot(
        fingerprint=fingerprint,
        index=index,
        documents=MappingProxyType(by_route),
    )


def build_snapshot(
    fingerprint: Fingerprint,
    tree: Traversable,
    *,
    transform: Transform | None = None,
) -> Snapshot:
    """Extract and index *tree* into a complete Snapshot."""
    return index_documents(fingerprint, extract_documents(tree, transform=transform))
