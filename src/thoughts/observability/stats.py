"""Aggregate statistics over the event log for the stats endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from thoughts.observability.events import (
    PageServed,
    SnapshotSwapped,
    SyncCompleted,
    SyncFailed,
    SyncSkipped,
)

if TYPE_CHECKING:
    from thoughts.observability.log import EventLog


def _percentile(data: list[float], pct: float) -> float:
    idx = int(len(data) * pct / 100)
    return data[min(idx, len(data) - 1)]


def compute_aggregate_stats(log: EventLog, *, limit: int = 1000) -> dict[str, Any]:
    """Summarise recent syncs and page requests.

    Returns a dict with sync outcome counts, the last swap, and request
    latency percentiles (p50, p95, p99) with a per-status breakdown.

    """
    completed = log.query(event_type=SyncCompleted, limit=limit)
    skipped = log.query(event_type=SyncSkipped, limit=limit)
    failed = log.query(event_type=SyncFailed, limit=limit)
    swaps = log.query(event_type=SnapshotSwapped, limit=1)

    syncs: dict[str, Any] = {
        "completed": len(completed),
        "skipped": len(skipped),
        "failed": len(failed),
    }
    if completed:
        syncs["avg_duration_ms"] = round(
            sum(e.duration_ms for e in completed) / len(completed), 1,
        )
    if failed:
        syncs["last_error"] = f"{failed[0].error_type}: {failed[0].message}"
    if swaps:
        syncs["last_swap"] = {
            "from": swaps[0].from_slot,
            "to": swaps[0].to_slot,
            "fingerprint": swaps[0].fingerprint,
        }

    pages = log.query(event_type=PageServed, limit=limit)
    if not pages:
        return {"syncs": syncs, "requests": {"count": 0}}

    totals = sorted(p.duration_ms for p in pages)
    by_status: dict[str, int] = {}
    for p in pages:
        key = str(p.status)
        by_status[key] = by_status.get(key, 0) + 1

    requests = {
        "count": len(totals),
        "by_status": by_status,
        "duration_ms": {
            "p50": round(_percentile(totals, 50), 1),
            "p95": round(_percentile(totals, 95), 1),
            "p99": round(_percentile(totals, 99), 1),
            "min": round(totals[0], 1),
            "max": round(totals[-1], 1),
        },
    }
    return {"syncs": syncs, "requests": requests}
