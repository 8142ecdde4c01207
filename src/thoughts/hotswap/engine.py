"""Sync engine — two snapshot slots and an atomically flipped selector.

Readers never wait on a sync and never see a half-built snapshot:

    refresh():  inactive slot  ── last_hash ──▶ unchanged? done
                               ── contents ──▶ extract + index (worker thread)
                               ── install snapshot in the inactive slot
                active selector ◀── one assignment ── inactive slot

A slot moves ``empty -> building -> ready``. Only the inactive slot is ever
rebuilt while serving; the active one is only synced by ``prime()`` before
the server accepts requests.

Thread Safety:
    The active selector is a single attribute; reading it needs no lock and
    assigning it is atomic.  Snapshots are immutable, so a request holding
    the previous one keeps a consistent view until it finishes.  A
    non-blocking ``threading.Lock`` keeps syncs strictly one at a time.

"""

from __future__ import annotations

import asyncio
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from thoughts._errors import ContentError, SyncInProgressError
from thoughts.content.snapshot import build_snapshot

if TYPE_CHECKING:
    from collections.abc import Iterator

    from thoughts._types import Fingerprint, SlotName, SlotState, Transform
    from thoughts.content.snapshot import Snapshot
    from thoughts.observability.collector import StackCollector
    from thoughts.source.base import Contents, ContentSource


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one successful slot sync.

    Attributes:
        slot: Slot that was synced.
        fingerprint: Remote fingerprint observed by the sync.
        pulled: False when the slot was already current and nothing was pulled.
        snapshot: The slot's snapshot after the sync.

    """

    slot: SlotName
    fingerprint: Fingerprint
    pulled: bool
    snapshot: Snapshot


def _build_and_release(
    fingerprint: Fingerprint,
    contents: Contents,
    transform: Transform | None,
) -> Snapshot:
    """Build a snapshot from a pull, releasing the pull in every case.

    Runs in a worker thread.  Releasing here rather than in the awaiting
    coroutine keeps the tree open until reading is really over, even if
    that coroutine is cancelled first.

    """
    try:
        return build_snapshot(fingerprint, contents.tree, transform=transform)
    finally:
        contents.release()


class Slot:
    """One of the two snapshot holders.

    Args:
        name: ``"A"`` or ``"B"``.
        source: Content source to pull from.
        transform: Document transform override (tests count renders with it).

    """

    __slots__ = ("_snapshot", "_source", "_state", "_transform", "name")

    def __init__(
        self,
        name: SlotName,
        source: ContentSource,
        *,
        transform: Transform | None = None,
    ) -> None:
        self.name = name
        self._source = source
        self._transform = transform
        self._snapshot: Snapshot | None = None
        self._state: SlotState = "empty"

    @property
    def state(self) -> SlotState:
        return self._state

    @property
    def snapshot(self) -> Snapshot | None:
        """The last successfully built snapshot, if any."""
        return self._snapshot

    @property
    def fingerprint(self) -> Fingerprint | None:
        """Fingerprint the current snapshot was built from."""
        snapshot = self._snapshot
        return snapshot.fingerprint if snapshot is not None else None

    async def sync(self) -> SyncResult:
        """Bring this slot up to the remote's current state.

        Pulls only when the remote fingerprint differs from the one this
        slot was built from.  On any failure the previous snapshot stays
        installed and the error propagates.

        """
        fingerprint = await self._source.last_hash()
        current = self._snapshot
        if current is not None and current.fingerprint == fingerprint:
            return SyncResult(self.name, fingerprint, pulled=False, snapshot=current)

        self._state = "building"
        try:
            contents = await self._source.contents()
            snapshot = await asyncio.to_thread(
                _build_and_release, fingerprint, contents, self._transform,
            )
        except BaseException:
            self._state = "ready" if self._snapshot is not None else "empty"
            raise

        self._snapshot = snapshot
        self._state = "ready"
        return SyncResult(self.name, fingerprint, pulled=True, snapshot=snapshot)

    def __repr__(self) -> str:
        return f"Slot({self.name!r}, state={self._state!r}, fingerprint={self.fingerprint!r})"


class SyncEngine:
    """Owns slots ``A`` and ``B`` and the selector readers follow.

    Args:
        source: Content source shared by both slots.
        collector: Optional event sink for sync and swap events.
        transform: Document transform override passed to both slots.

    """

    def __init__(
        self,
        source: ContentSource,
        *,
        collector: StackCollector | None = None,
        transform: Transform | None = None,
    ) -> None:
        self._slots: dict[SlotName, Slot] = {
            "A": Slot("A", source, transform=transform),
            "B": Slot("B", source, transform=transform),
        }
        self._active = self._slots["A"]
        self._collector = collector
        self._lock = threading.Lock()

    @property
    def active(self) -> Slot:
        """The slot readers resolve against."""
        return self._active

    @property
    def inactive(self) -> Slot:
        """The slot the next refresh rebuilds."""
        return self._slots["B"] if self._active is self._slots["A"] else self._slots["A"]

    def slot(self, name: SlotName) -> Slot:
        return self._slots[name]

    @property
    def syncing(self) -> bool:
        """Whether a sync is running right now."""
        return self._lock.locked()

    def current(self) -> Snapshot:
        """The snapshot requests should be answered from.

        Raises:
            ContentError: Before the first successful sync.

        """
        snapshot = self._active.snapshot
        if snapshot is None:
            msg = "no snapshot has been synced yet"
            raise ContentError(msg)
        return snapshot

    async def prime(self) -> SyncResult:
        """Sync the active slot. Used once, before serving starts."""
        with self._exclusive():
            return await self._sync(self._active)

    async def refresh(self) -> SyncResult:
        """Sync the inactive slot and, on success, make it active.

        On failure the selector is left where it was and the error
        propagates.

        """
        with self._exclusive():
            target = self.inactive
            result = await self._sync(target)
            previous = self._active
            self._active = target
        print(
            f"  swapped slot {previous.name} -> {target.name} ({result.fingerprint})",
            file=sys.stderr,
        )
        if self._collector is not None:
            self._collector.record_swap(previous.name, target.name, result.fingerprint)
        return result

    async def run(self, interval: float) -> None:
        """Refresh every *interval* seconds until cancelled.

        Failures are reported and never end the loop; the last good
        snapshot keeps serving until a later refresh succeeds.

        """
        while True:
            await asyncio.sleep(interval)
            try:
                await self.refresh()
            except Exception as exc:
                print(f"  Sync error: {exc}", file=sys.stderr)

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            msg = "a sync is already running"
            raise SyncInProgressError(msg)
        try:
            yield
        finally:
            self._lock.release()

    async def _sync(self, slot: Slot) -> SyncResult:
        print(f"  syncing slot {slot.name}", file=sys.stderr)
        t0 = time.perf_counter()
        try:
            result = await slot.sync()
        except Exception as exc:
            if self._collector is not None:
                self._collector.record_sync_failure(slot.name, exc)
            raise

        if not result.pulled:
            print(f"  slot {slot.name} is current ({result.fingerprint})", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_sync_skipped(slot.name, result.fingerprint)
            return result

        elapsed = (time.perf_counter() - t0) * 1000
        print(
            f"  slot {slot.name} built {len(result.snapshot)} documents "
            f"from {result.fingerprint} in {elapsed:.0f}ms",
            file=sys.stderr,
        )
        if self._collector is not None:
            self._collector.record_sync(
                slot.name,
                result.fingerprint,
                documents=len(result.snapshot),
                duration_ms=elapsed,
            )
        return result
