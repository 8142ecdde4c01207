"""Stack collector — one sink for sync, serving, and Pounce events.

Implements Pounce's ``LifecycleCollector`` protocol so it can be passed
directly to the server.  Also provides explicit methods for the sync engine
and the site router.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import Any

from thoughts.observability.events import (
    PageServed,
    SnapshotSwapped,
    SyncCompleted,
    SyncFailed,
    SyncSkipped,
    now_ns,
)
from thoughts.observability.log import EventLog


class StackCollector:
    """Unified event collector.

    Sync and page events go to ``log``; Pounce lifecycle events go to
    ``lifecycle_log``, so connection churn never evicts sync history.

    Args:
        log: EventLog for sync, swap, and page events.
        lifecycle_log: EventLog for Pounce lifecycle events.

    """

    __slots__ = ("_lifecycle_log", "_log")

    def __init__(
        self,
        log: EventLog | None = None,
        *,
        lifecycle_log: EventLog | None = None,
    ) -> None:
        self._log = log if log is not None else EventLog()
        self._lifecycle_log = lifecycle_log if lifecycle_log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """Sync, swap, and page events."""
        return self._log

    @property
    def lifecycle_log(self) -> EventLog:
        """Pounce connection lifecycle events."""
        return self._lifecycle_log

    # ----- Pounce LifecycleCollector protocol -----

    def record(self, event: Any) -> None:
        """Record a Pounce lifecycle event (frozen dataclass, stored as-is)."""
        self._lifecycle_log.append(event)

    # ----- Sync events -----

    def record_sync(
        self,
        slot: str,
        fingerprint: str,
        *,
        documents: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a completed rebuild of a slot."""
        self._log.append(
            SyncCompleted(
                slot=slot,
                fingerprint=fingerprint,
                documents=documents,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_sync_skipped(self, slot: str, fingerprint: str) -> None:
        """Record a sync that found the slot already current."""
        self._log.append(
            SyncSkipped(slot=slot, fingerprint=fingerprint, timestamp_ns=now_ns())
        )

    def record_sync_failure(self, slot: str, exc: BaseException) -> None:
        """Record a failed sync attempt."""
        self._log.append(
            SyncFailed(
                slot=slot,
                error_type=type(exc).__name__,
                message=str(exc),
                timestamp_ns=now_ns(),
            )
        )

    def record_swap(self, from_slot: str, to_slot: str, fingerprint: str) -> None:
        """Record a flip of the active selector."""
        self._log.append(
            SnapshotSwapped(
                from_slot=from_slot,
                to_slot=to_slot,
                fingerprint=fingerprint,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Serving events -----

    def record_page(
        self,
        path: str,
        status: int,
        *,
        fingerprint: str = "",
        duration_ms: float = 0.0,
    ) -> None:
        """Record an answered document request."""
        self._log.append(
            PageServed(
                path=path,
                status=status,  # type: ignore[arg-type]
                fingerprint=fingerprint,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
