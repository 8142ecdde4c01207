"""Startup banner — mode-aware status output.

Prints a short status block with the mirrored repo, the live snapshot, and
timing.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thoughts.config import ThoughtsConfig
    from thoughts.content.snapshot import Snapshot


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "serve": (_CYAN, "serve"),
    "sync": (_YELLOW, "sync"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _format_interval(seconds: float) -> str:
    if seconds >= 60 and seconds % 60 == 0:
        return f"{seconds / 60:.0f}m"
    return f"{seconds:g}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: ThoughtsConfig,
    snapshot: Snapshot,
    mode: str,
    *,
    load_ms: float = 0.0,
) -> None:
    """Print the Thoughts startup banner to stderr.

    Args:
        config: Resolved ThoughtsConfig.
        snapshot: Snapshot loaded by the first sync.
        mode: ``"serve"`` or ``"sync"``.
        load_ms: Time spent on the first sync in milliseconds.

    """
    from thoughts import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}{config.title}{_RESET}  {_DIM}thoughts v{__version__}{_RESET}  "
        f"{_mode_badge(mode)}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} repo: {config.repo}",
    ]

    count = len(snapshot)
    docs_label = "document" if count == 1 else "documents"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {count} {docs_label} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} fingerprint: {_DIM}{snapshot.fingerprint}{_RESET}")

    if config.use_cache:
        lines.append(f"  {_DIM}├─{_RESET} cache: {_DIM}{config.cache_path}{_RESET}")

    if mode == "serve":
        lines.append(
            f"  {_DIM}└─{_RESET} refresh every {_format_interval(config.sync_interval)}"
        )
        lines.append("")
        lines.append(f"  {_BOLD}{_CYAN}http://{config.host}:{config.port}{_RESET}")

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
