"""Burrow CLI — burrow collect.

Entry point for the ``burrow`` command-line interface.
"""

from __future__ import annotations

import argparse
import json
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the burrow CLI."""
    parser = argparse.ArgumentParser(
        prog="burrow",
        description="Content discovery and canonical URLs for sitemaps.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # burrow collect
    collect_parser = subparsers.add_parser(
        "collect",
        help="Collect canonical URLs from every source",
    )
    collect_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    collect_parser.add_argument(
        "--base-url", default=None, help="Absolute site URL (overrides site_url)",
    )
    collect_parser.add_argument(
        "--language", default=None, help="Language to collect (default: install default)",
    )
    collect_parser.add_argument(
        "--all-languages", action="store_true", help="Collect every language with hreflang links",
    )
    collect_parser.add_argument(
        "--format", choices=("json", "xml"), default="json", help="Output format",
    )
    collect_parser.add_argument(
        "--timeout", type=float, default=None, help="Per-source timeout in seconds",
    )
    collect_parser.add_argument(
        "--quiet", action="store_true", help="Do not print warnings",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from burrow import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from burrow._errors import BurrowError
    from burrow.app import collect
    from burrow.observability import EventRecorder

    if args.command == "collect":
        if args.all_languages and args.language:
            parser.error("--language and --all-languages are mutually exclusive")
        try:
            entries = collect(
                args.root,
                language=args.language,
                all_languages=args.all_languages,
                recorder=EventRecorder(quiet=args.quiet),
                base_url=args.base_url,
                source_timeout=args.timeout,
            )
        except BurrowError as exc:
            print(f"  Error: {exc}", file=sys.stderr)
            sys.exit(1)

        if args.format == "xml":
            from burrow.export.sitemap import render_sitemap

            sys.stdout.write(render_sitemap(entries))
        else:
            json.dump([entry.to_dict() for entry in entries], sys.stdout, indent=2)
            sys.stdout.write("\n")


if __name__ == "__main__":
    main()
