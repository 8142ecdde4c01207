"""Disk-backed caching decorator for a content source.

Once a cache directory exists, every call is answered locally: a stable
sentinel fingerprint and a filesystem view of the persisted copy. Until
then, calls are delegated and the first successful pull is written to disk.

The cache is create-only. Files that already exist are never overwritten,
so a reader of a cached file always sees a complete earlier write. A pull
is staged beside the cache directory and renamed into place only when
fully written; a failed copy leaves no cache behind.
"""

from __future__ import annotations

import asyncio
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from thoughts._errors import SourceError
from thoughts.source.base import Contents
from thoughts.source.tree import walk_files

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

    from thoughts.source.base import ContentSource

CACHED_FINGERPRINT = "cached-hash"


class CachedSource:
    """Wraps a ``ContentSource`` with a persistent local copy.

    Args:
        inner: The source to delegate to while no cache exists.
        cache_dir: Directory holding the persisted tree.

    """

    def __init__(self, inner: ContentSource, cache_dir: Path) -> None:
        self._inner = inner
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        """Directory holding the persisted tree."""
        return self._cache_dir

    def cache_exists(self) -> bool:
        """Whether a cache is present. Its contents are not inspected."""
        return self._cache_dir.is_dir()

    async def last_hash(self) -> str:
        if self.cache_exists():
            print("  cache exists", file=sys.stderr)
            return CACHED_FINGERPRINT
        return await self._inner.last_hash()

    async def contents(self) -> Contents:
        if self.cache_exists():
            print("  using cache for contents", file=sys.stderr)
            return Contents(tree=self._cache_dir)

        pulled = await self._inner.contents()

        print("  caching contents", file=sys.stderr)
        try:
            await asyncio.to_thread(commit_tree, pulled.tree, self._cache_dir)
        except BaseException:
            pulled.release()
            raise
        return pulled


def persist_tree(tree: Traversable, dest: Path) -> int:
    """Copy every file of *tree* under *dest*, preserving structure.

    Existing files are left untouched. Returns the number of files written.

    Raises:
        SourceError: If the copy fails part-way.

    """
    written = 0
    try:
        dest.mkdir(parents=True, exist_ok=True)
        for parts, node in walk_files(tree):
            target = dest.joinpath(*parts)
            target.parent.mkdir(parents=True, exist_ok=True)
            try:
                with node.open("rb") as src, target.open("xb") as dst:
                    shutil.copyfileobj(src, dst)
            except FileExistsError:
                continue
            written += 1
    except OSError as exc:
        msg = f"failed to cache contents in {dest}: {exc}"
        raise SourceError(msg) from exc
    return written


def commit_tree(tree: Traversable, dest: Path) -> int:
    """Persist *tree* as a complete cache at *dest*, or not at all.

    Files are written to a ``.partial`` sibling first and the directory is
    renamed onto *dest* only once every file is on disk, so ``dest``
    existing always means a whole copy. The staging directory is removed
    whatever the outcome.

    Raises:
        SourceError: If the copy or the final rename fails.

    """
    staging = dest.with_name(dest.name + ".partial")
    shutil.rmtree(staging, ignore_errors=True)
    try:
        written = persist_tree(tree, staging)
        try:
            staging.rename(dest)
        except OSError as exc:
            if not dest.is_dir():
                msg = f"failed to move cache into place at {dest}: {exc}"
                raise SourceError(msg) from exc
            # Another writer completed the cache first; theirs stands.
    finally:
        shutil.rmtree(staging, ignore_errors=True)
    return written
