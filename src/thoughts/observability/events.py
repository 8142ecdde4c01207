"""Event model for sync and serving observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Pounce lifecycle events are recorded as-is alongside these.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


def now_ns() -> int:
    """Monotonic nanosecond timestamp for event ordering."""
    return time.monotonic_ns()


# ---------------------------------------------------------------------------
# Sync events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SyncCompleted:
    """A slot was rebuilt from a fresh pull.

    Attributes:
        slot: Slot that was rebuilt.
        fingerprint: Remote state the new snapshot was built from.
        documents: Number of documents in the new snapshot (index included).
        duration_ms: Time from fingerprint check to snapshot installed.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slot: str
    fingerprint: str
    documents: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SyncSkipped:
    """A slot's fingerprint matched the remote; no pull happened.

    Attributes:
        slot: Slot that was checked.
        fingerprint: Fingerprint shared by the slot and the remote.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slot: str
    fingerprint: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SyncFailed:
    """A sync attempt failed; the slot kept its previous snapshot.

    Attributes:
        slot: Slot whose sync failed.
        error_type: Exception class name.
        message: Exception message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    slot: str
    error_type: str
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SnapshotSwapped:
    """The active selector moved to another slot.

    Attributes:
        from_slot: Previously active slot.
        to_slot: Newly active slot.
        fingerprint: Fingerprint of the snapshot now served.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    from_slot: str
    to_slot: str
    fingerprint: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Serving events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageServed:
    """A document request was answered.

    Attributes:
        path: Request path.
        status: HTTP status returned.
        fingerprint: Fingerprint of the snapshot that answered.
        duration_ms: Time spent resolving and rendering.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    status: Literal[200, 404, 500]
    fingerprint: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = SyncCompleted | SyncSkipped | SyncFailed | SnapshotSwapped | PageServed
