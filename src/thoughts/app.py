"""Thoughts application — source chain, sync engine, Chirp app, Pounce server.

The two public functions (serve, sync) are the primary entry points.
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from thoughts._errors import ConfigError
from thoughts.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from thoughts.config import ThoughtsConfig
    from thoughts.hotswap.engine import SyncEngine
    from thoughts.observability.collector import StackCollector
    from thoughts.source.base import ContentSource


def _create_source(config: ThoughtsConfig) -> ContentSource:
    """Build the content source chain: GitHub, optionally behind the disk cache.

    Raises:
        ConfigError: If no repository is configured or its URL is malformed.

    """
    from thoughts.source.cache import CachedSource
    from thoughts.source.github import GitHubSource

    if not config.repo:
        msg = "repo url is required"
        raise ConfigError(msg)

    print(f"  creating site for {config.repo}", file=sys.stderr)
    source: ContentSource = GitHubSource(
        config.repo,
        api_url=config.api_url,
        branch=config.branch,
        timeout=config.request_timeout,
        user_agent=config.user_agent,
    )
    if config.use_cache:
        print(f"  using cache at {config.cache_path}", file=sys.stderr)
        source = CachedSource(source, config.cache_path)
    return source


def _create_chirp_app(
    config: ThoughtsConfig,
    engine: SyncEngine,
    collector: StackCollector,
) -> App:
    """Create a Chirp App that serves the engine's active snapshot.

    Documents are answered by the ``SiteRouter`` middleware; the health and
    stats endpoints are regular routes.

    """
    from chirp import App, AppConfig

    from thoughts.server.page import PageRenderer
    from thoughts.server.router import SiteRouter
    from thoughts.theme import get_template_dirs

    template_dirs = get_template_dirs(config)
    app = App(
        config=AppConfig(
            template_dir=template_dirs[0],
            debug=False,
            host=config.host,
            port=config.port,
        )
    )

    router = SiteRouter(engine, PageRenderer(config.title, template_dirs), collector)
    router.register_health_endpoint(app)
    router.register_stats_endpoint(app, collector)
    app.add_middleware(router)
    return app


def _start_sync_loop(config: ThoughtsConfig, engine: SyncEngine, app: App) -> None:
    """Run the engine's refresh loop for the lifetime of the server.

    Registers ``on_startup`` / ``on_shutdown`` hooks on *app* so that the
    loop task lives inside the event loop managed by Pounce.

    Flow:
        on_startup  → spawn ``engine.run(interval)`` task
        on_shutdown → cancel it, waiting at most ``shutdown_grace`` seconds

    """
    _task: asyncio.Task[None] | None = None

    @app.on_startup
    async def _start_refresh_loop() -> None:
        nonlocal _task
        _task = asyncio.create_task(engine.run(config.sync_interval))

    @app.on_shutdown
    async def _stop_refresh_loop() -> None:
        if _task is None or _task.done():
            return
        _task.cancel()
        try:
            await asyncio.wait_for(_task, timeout=config.shutdown_grace)
        except asyncio.CancelledError:
            pass
        except TimeoutError:
            print("  refresh loop did not stop within the grace period", file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Mirror the configured repository and serve it until interrupted.

    Syncs slot A before accepting any request; a failure there is fatal.
    Afterwards the inactive slot is refreshed every ``sync_interval``
    seconds and swapped in on success.

    Args:
        root: Site root (holds the disk cache and user templates).
        **kwargs: Override ThoughtsConfig fields.

    Raises:
        ThoughtsError: If the configuration is invalid or the first sync fails.

    """
    from thoughts.banner import print_banner
    from thoughts.hotswap.engine import SyncEngine
    from thoughts.observability import EventLog, StackCollector

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    collector = StackCollector(EventLog(), lifecycle_log=EventLog())
    engine = SyncEngine(_create_source(config), collector=collector)

    print("  syncing active repo", file=sys.stderr)
    asyncio.run(engine.prime())

    app = _create_chirp_app(config, engine, collector)
    _start_sync_loop(config, engine, app)

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(config, engine.current(), mode="serve", load_ms=load_ms)

    # One worker: exactly one refresh loop may own the slots.
    from pounce.config import ServerConfig
    from pounce.server import Server

    server_config = ServerConfig(
        host=config.host,
        port=config.port,
        workers=1,
        shutdown_timeout=config.shutdown_grace,
    )
    server = Server(server_config, app, lifecycle_collector=collector)
    server.run()


def sync(root: str | Path = ".", **kwargs: object) -> None:
    """Pull and index the repository once, print what would be served, exit.

    With ``use_cache`` this also populates the disk cache.

    Args:
        root: Site root.
        **kwargs: Override ThoughtsConfig fields.

    Raises:
        ThoughtsError: If the pull or indexing fails.

    """
    from thoughts.banner import print_banner
    from thoughts.hotswap.engine import SyncEngine

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    engine = SyncEngine(_create_source(config))
    result = asyncio.run(engine.prime())

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(config, result.snapshot, mode="sync", load_ms=load_ms)
    for route in ["/", *(f"/{r}" for r in result.snapshot.routes())]:
        print(route)
