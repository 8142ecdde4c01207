"""Thoughts CLI — thoughts serve / thoughts sync.

Entry point for the ``thoughts`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the thoughts CLI."""
    parser = argparse.ArgumentParser(
        prog="thoughts",
        description="Serve a Markdown tree mirrored from a GitHub repository.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # thoughts serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Mirror the repository and serve it, refreshing in the background",
    )
    _add_source_arguments(serve_parser)
    serve_parser.add_argument("--site-title", dest="title", help="Title of the site")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")
    serve_parser.add_argument(
        "--interval", dest="sync_interval", type=float,
        help="Seconds between background refreshes",
    )

    # thoughts sync
    sync_parser = subparsers.add_parser(
        "sync",
        help="Pull and index the repository once, then exit",
    )
    _add_source_arguments(sync_parser)

    return parser


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    parser.add_argument("--repo", help="Repository URL, https://github.com/{owner}/{name}")
    parser.add_argument(
        "--use-cache", dest="use_cache", action="store_true", default=None,
        help="Persist the first pull to disk and serve from it afterwards",
    )


def _get_version() -> str:
    """Get the package version."""
    from thoughts import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from thoughts._errors import ThoughtsError
    from thoughts.app import serve, sync

    try:
        if args.command == "serve":
            serve(
                root=args.root,
                repo=args.repo,
                use_cache=args.use_cache,
                title=args.title,
                host=args.host,
                port=args.port,
                sync_interval=args.sync_interval,
            )
        elif args.command == "sync":
            sync(root=args.root, repo=args.repo, use_cache=args.use_cache)
    except ThoughtsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
