"""Thoughts — a Markdown site mirrored from GitHub, hot-swapped on change.

Pulls a repository's Markdown tree, indexes it into an immutable snapshot,
and serves it over HTTP.  A background loop rebuilds the *other* of two
snapshot slots whenever the repository changes and flips readers over in a
single step, so a refresh never interrupts a request.

Quick start::

    import thoughts

    thoughts.serve(repo="https://github.com/owner/notes")

Two modes::

    thoughts.serve(repo=...)     # Serve and refresh in the background
    thoughts.sync(repo=...)      # Pull + index once (fills the cache)

Layers:

    source         GitHub fetcher, disk cache decorator
    content        Documents, snapshot extraction and indexing
    hotswap        Two-slot hot-swap engine
    server         Chirp middleware, page template (Kida)
    observability  Sync / request events and stats

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "ThoughtsConfig",
    "__version__",
    "serve",
    "sync",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import thoughts`` fast; Chirp and Pounce load only when serving.
    """
    if name == "ThoughtsConfig":
        from thoughts.config import ThoughtsConfig

        return ThoughtsConfig

    if name == "serve":
        from thoughts.app import serve

        return serve

    if name == "sync":
        from thoughts.app import sync

        return sync

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
