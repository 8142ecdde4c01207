"""Content sources — where the mirrored tree comes from.

``GitHubSource`` talks to the network; ``CachedSource`` decorates any
source with a persistent local copy.
"""

from thoughts.source.base import Contents, ContentSource
from thoughts.source.cache import CACHED_FINGERPRINT, CachedSource
from thoughts.source.github import GitHubSource, parse_repo_url
from thoughts.source.tree import walk_files

__all__ = [
    "CACHED_FINGERPRINT",
    "CachedSource",
    "ContentSource",
    "Contents",
    "GitHubSource",
    "parse_repo_url",
    "walk_files",
]
