"""Thoughts theme loader — fallback chain for the page template.

User templates (``templates/`` under the site root) take priority.  When a
template is not found there, Kida falls through to the bundled default
theme.

Thread Safety:
    All returned values are read-only path lists.

"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from thoughts.config import ThoughtsConfig


def bundled_templates_path() -> Path:
    """Return the absolute path to the bundled default templates."""
    return Path(__file__).parent / "default" / "templates"


def get_template_dirs(config: ThoughtsConfig) -> list[Path]:
    """Return template directories in priority order.

    Returns:
        ``[user_templates_dir, bundled_default_templates]``, the user
        directory only when it exists.

    """
    bundled = bundled_templates_path()
    user_dir = config.templates_path

    dirs: list[Path] = []
    if user_dir != bundled and user_dir.is_dir():
        dirs.append(user_dir)
    dirs.append(bundled)
    return dirs
