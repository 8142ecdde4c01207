"""Observability — structured events for syncs, swaps, and requests.

Quick Start:
    >>> from thoughts.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to Pounce as lifecycle_collector and to SyncEngine

"""

from thoughts.observability.collector import StackCollector
from thoughts.observability.events import (
    PageServed,
    SnapshotSwapped,
    StackEvent,
    SyncCompleted,
    SyncFailed,
    SyncSkipped,
    now_ns,
)
from thoughts.observability.log import EventLog
from thoughts.observability.stats import compute_aggregate_stats

__all__ = [
    "EventLog",
    "PageServed",
    "SnapshotSwapped",
    "StackCollector",
    "StackEvent",
    "SyncCompleted",
    "SyncFailed",
    "SyncSkipped",
    "compute_aggregate_stats",
    "now_ns",
]
