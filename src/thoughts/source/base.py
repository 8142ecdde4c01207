"""Content source protocol — what the sync engine consumes.

A content source answers two questions about one remote project: "what
state is it in now?" (a cheap fingerprint) and "give me all of it" (a
read-only file tree plus a release callback). Live and cached sources
share this protocol and compose by decoration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

    from thoughts._types import Fingerprint, ReleaseFunc


def _noop() -> None:
    return None


@dataclass(frozen=True, slots=True)
class Contents:
    """A full pull of the remote tree.

    Attributes:
        tree: Read-only root of the pulled tree. A ``zipfile.Path`` for a
            fresh archive, a ``pathlib.Path`` for the disk cache.
        release: Frees whatever the pull holds open. The consumer calls
            it exactly once when it has finished reading ``tree``.

    """

    tree: Traversable
    release: ReleaseFunc = _noop


@runtime_checkable
class ContentSource(Protocol):
    """A remote content tree that can be fingerprinted and pulled."""

    async def last_hash(self) -> Fingerprint:
        """Return a token identifying the remote state as of now.

        Raises:
            SourceError: The remote is unreachable or has no history.

        """
        ...

    async def contents(self) -> Contents:
        """Pull the full tree.

        Raises:
            SourceError: The remote is unreachable or answered with a failure.
            ArchiveError: The pulled archive is malformed.

        """
        ...
