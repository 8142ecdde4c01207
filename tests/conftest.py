"""Shared test fixtures for thoughts."""

from __future__ import annotations

import io
import zipfile
from typing import TYPE_CHECKING

import pytest

from thoughts.source.base import Contents

if TYPE_CHECKING:
    from pathlib import Path

WRAPPER = "josebalius-thoughts-4f2a9c1"


def make_zipball(files: dict[str, str | bytes], *, wrapper: str = WRAPPER) -> bytes:
    """Build a zip archive shaped like a GitHub zipball.

    Every file is placed under a single top-level *wrapper* directory, with
    explicit directory entries as GitHub writes them.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        dirs: set[str] = {f"{wrapper}/"}
        for name in files:
            parts = name.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                dirs.add(f"{wrapper}/{'/'.join(parts[:i])}/")
        for d in sorted(dirs):
            zf.writestr(d, "")
        for name, data in files.items():
            zf.writestr(f"{wrapper}/{name}", data)
    return buf.getvalue()


def write_tree(root: Path, files: dict[str, str | bytes], *, wrapper: str = WRAPPER) -> Path:
    """Lay *files* out on disk under ``root/wrapper`` (the disk cache layout)."""
    for name, data in files.items():
        target = root / wrapper / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            data = data.encode("utf-8")
        target.write_bytes(data)
    return root


class FakeSource:
    """In-memory ContentSource with call counting.

    ``fingerprints`` is consumed one per ``last_hash()`` call; the last value
    repeats once exhausted.  ``files`` may be reassigned between syncs to
    simulate a push.
    """

    def __init__(
        self,
        files: dict[str, str | bytes],
        fingerprints: tuple[str, ...] = ("sha-1",),
    ) -> None:
        self.files = dict(files)
        self._fingerprints = list(fingerprints)
        self.hash_calls = 0
        self.contents_calls = 0
        self.releases = 0
        self.hash_error: Exception | None = None
        self.contents_error: Exception | None = None
        self.contents_body: bytes | None = None

    async def last_hash(self) -> str:
        self.hash_calls += 1
        if self.hash_error is not None:
            raise self.hash_error
        if len(self._fingerprints) > 1:
            return self._fingerprints.pop(0)
        return self._fingerprints[0]

    async def contents(self) -> Contents:
        self.contents_calls += 1
        if self.contents_error is not None:
            raise self.contents_error
        body = self.contents_body or make_zipball(self.files)
        archive = zipfile.ZipFile(io.BytesIO(body))

        def release() -> None:
            self.releases += 1
            archive.close()

        return Contents(tree=zipfile.Path(archive), release=release)


@pytest.fixture
def notes_files() -> dict[str, str]:
    """A small notes repository: an index and two linked notes."""
    return {
        "README.md": "# Hello\n\nWelcome to my notes.\n",
        "notes/today.md": "See [link](./other.md)\n",
        "notes/other.md": "# Other\n\nBack to [today](./today.md).\n",
        "assets/logo.png": b"\x89PNG\r\n",
        "LICENSE": "MIT\n",
    }


@pytest.fixture
def fake_source(notes_files: dict[str, str]) -> FakeSource:
    return FakeSource(notes_files)
