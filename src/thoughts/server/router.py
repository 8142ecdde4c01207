"""Site router — answers document requests from the active snapshot.

The route table of a Chirp app is frozen at startup, but the set of
documents changes with every swap.  Documents are therefore served by a
middleware that resolves each request path against the snapshot current at
the start of that request.  Paths under ``/__thoughts/`` are left to the
regular Chirp routes (health and stats).
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
from typing import TYPE_CHECKING, Any

from thoughts._errors import RenderError

if TYPE_CHECKING:
    from chirp import App, Request
    from chirp.http.response import Response
    from chirp.middleware.protocol import Next

    from thoughts.hotswap.engine import SyncEngine
    from thoughts.observability.collector import StackCollector
    from thoughts.server.page import PageRenderer


RESERVED_PREFIX = "/__thoughts/"
HEALTH_ENDPOINT = "/__thoughts/health"
STATS_ENDPOINT = "/__thoughts/stats"

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"
_JSON = "application/json"


class SiteRouter:
    """Chirp middleware serving rendered documents.

    Args:
        engine: Sync engine whose active snapshot answers requests.
        pages: Renderer wrapping documents in the site template.
        collector: Optional sink for ``PageServed`` events.

    """

    def __init__(
        self,
        engine: SyncEngine,
        pages: PageRenderer,
        collector: StackCollector | None = None,
    ) -> None:
        self._engine = engine
        self._pages = pages
        self._collector = collector

    async def __call__(self, request: Request, next: Next) -> Any:
        path = request.path
        if request.method not in ("GET", "HEAD") or path.startswith(RESERVED_PREFIX):
            return await next(request)
        return await self.serve(path)

    async def serve(self, path: str) -> Response:
        """Resolve *path* against the active snapshot and render it.

        The snapshot is read once; a swap landing mid-request does not
        affect this response. A document's first render (the Markdown
        parse) runs in a worker thread; later requests reuse the memo.

        """
        from chirp.http.response import Response

        t0 = time.perf_counter()
        snapshot = self._engine.current()
        document = snapshot.resolve(path)

        if document is None:
            response = Response(body="not found", status=404, content_type=_TEXT)
        else:
            try:
                if document.rendered:
                    body = self._pages.render(document)
                else:
                    body = await asyncio.to_thread(self._pages.render, document)
            except RenderError as exc:
                print(f"  Render error: {exc}", file=sys.stderr)
                response = Response(
                    body="internal server error", status=500, content_type=_TEXT,
                )
            else:
                response = Response(body=body, status=200, content_type=_HTML)

        if self._collector is not None:
            self._collector.record_page(
                path,
                response.status,
                fingerprint=snapshot.fingerprint,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return response

    def register_health_endpoint(self, app: App) -> None:
        """Register ``/__thoughts/health``: which slot and fingerprint are live."""
        from chirp.http.response import Response

        engine = self._engine

        async def health_handler(request: Request) -> Any:
            active = engine.active
            snapshot = active.snapshot
            payload = {
                "status": "ok" if snapshot is not None else "starting",
                "active_slot": active.name,
                "fingerprint": snapshot.fingerprint if snapshot is not None else None,
                "documents": len(snapshot) if snapshot is not None else 0,
                "syncing": engine.syncing,
            }
            return Response(body=json.dumps(payload), status=200, content_type=_JSON)

        health_handler.__name__ = "thoughts_health"
        health_handler.__qualname__ = "SiteRouter.thoughts_health"

        app.route(HEALTH_ENDPOINT, name="thoughts:health")(health_handler)

    def register_stats_endpoint(self, app: App, collector: StackCollector) -> None:
        """Register ``/__thoughts/stats``: aggregate sync and request stats."""
        from chirp.http.response import Response

        from thoughts.observability.stats import compute_aggregate_stats

        async def stats_handler(request: Request) -> Any:
            payload = json.dumps(
                {
                    **compute_aggregate_stats(collector.log),
                    "event_log": collector.log.stats(),
                    "lifecycle_log": collector.lifecycle_log.stats(),
                },
                indent=2,
            )
            return Response(body=payload, status=200, content_type=_JSON)

        stats_handler.__name__ = "thoughts_stats"
        stats_handler.__qualname__ = "SiteRouter.thoughts_stats"

        app.route(STATS_ENDPOINT, name="thoughts:stats")(stats_handler)
