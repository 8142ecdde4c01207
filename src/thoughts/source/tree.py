"""Walking read-only file trees.

Both tree flavours (``zipfile.Path`` and ``pathlib.Path``) implement the
``Traversable`` interface, so one walker serves the archive, the disk cache,
and the snapshot extractor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from thoughts._errors import ArchiveError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from importlib.resources.abc import Traversable


def walk_files(root: Traversable) -> Iterator[tuple[tuple[str, ...], Traversable]]:
    """Yield ``(parts, node)`` for every file under *root*, depth-first.

    Siblings are visited in lexical order of their names, so the walk order
    is deterministic for a given tree. ``parts`` is the path relative to
    *root*, one segment per element.

    Raises:
        ArchiveError: If an entry name would escape the tree.

    """
    yield from _walk(root, ())


def _walk(
    node: Traversable, prefix: tuple[str, ...],
) -> Iterator[tuple[tuple[str, ...], Traversable]]:
    for child in sorted(node.iterdir(), key=lambda c: c.name):
        name = child.name
        if name in ("", ".", "..") or "/" in name or "\\" in name:
            msg = f"unsafe entry name {name!r} under {'/'.join(prefix) or '.'}"
            raise ArchiveError(msg)
        parts = (*prefix, name)
        if child.is_dir():
            yield from _walk(child, parts)
        elif child.is_file():
            yield parts, child
