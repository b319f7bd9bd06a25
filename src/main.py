# src/main.py — v1
"""CLI entry point — list, resolve, validate commands.

Usage:
    reviewref list [--manifest PATH]
    reviewref resolve HINT... [--paths FILE...] [--json] [--limit N]
    reviewref validate MANIFEST
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from reviewref.core.errors import ConfigurationError
from reviewref.version import __version__

if TYPE_CHECKING:
    from reviewref.config.settings import Settings
    from reviewref.core.models import ResolutionResult

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DIAGNOSTICS = 2


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    try:
        settings = _load_settings(args)
        _setup_logging(args.verbose, settings)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_ERROR
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_ERROR


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="reviewref",
        description=f"reviewref v{__version__} - on-demand code review guidelines",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-m", "--manifest", type=Path, default=None,
        help="Manifest file (default: MANIFEST_PATH from .env)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- list ---
    p_list = subparsers.add_parser("list", help="List reference documents")
    p_list.add_argument("--json", action="store_true", help="Emit JSON")
    p_list.set_defaults(func=_cmd_list)

    # --- resolve ---
    p_resolve = subparsers.add_parser(
        "resolve", help="Resolve hints to reference documents",
    )
    p_resolve.add_argument(
        "hints", nargs="*", help="Context hints in priority order (e.g. rust qt)",
    )
    p_resolve.add_argument(
        "--paths", nargs="+", default=[], metavar="FILE",
        help="Changed file paths to derive extra hints from",
    )
    p_resolve.add_argument(
        "--limit", type=int, default=None,
        help="Maximum number of documents to return",
    )
    p_resolve.add_argument(
        "--partial", action="store_true",
        help="Also match triggers sharing a token with a hint",
    )
    p_resolve.add_argument(
        "--no-fallback", action="store_true",
        help="Do not fall back to DEFAULT_KEYS when nothing matches",
    )
    p_resolve.add_argument(
        "--metadata-only", action="store_true",
        help="Print titles and summaries, not bodies",
    )
    p_resolve.add_argument("--json", action="store_true", help="Emit JSON")
    p_resolve.set_defaults(func=_cmd_resolve)

    # --- validate ---
    p_validate = subparsers.add_parser(
        "validate", help="Validate a manifest file",
    )
    p_validate.add_argument("manifest_file", type=Path, help="Manifest to check")
    p_validate.set_defaults(func=_cmd_validate)

    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    from reviewref.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.manifest is not None:
        overrides["manifest_path"] = args.manifest
    return load_settings(**overrides)


async def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """Print manifest entries."""
    from reviewref.api.facade import build_store

    store = build_store(settings)
    try:
        documents = store.list()
    finally:
        await store.close()

    if args.json:
        print(json.dumps(
            [d.model_dump(exclude={"body"}) for d in documents], indent=2,
        ))
        return EXIT_OK

    for doc in documents:
        print(f"{doc.key:20s} {', '.join(doc.triggers):30s} {doc.title}")
    return EXIT_OK


async def _cmd_resolve(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve hints and print the selected documents."""
    from reviewref.api.facade import resolve_references
    from reviewref.core.models import ResolveOptions

    if args.limit is not None and args.limit < 1:
        logger.error("--limit must be >= 1")
        return EXIT_ERROR

    options = ResolveOptions(
        match_policy="partial" if args.partial else None,
        use_fallback=not args.no_fallback,
        limit=args.limit,
    )
    result = await resolve_references(
        hints=args.hints,
        paths=args.paths,
        settings=settings,
        options=options,
    )

    if args.json:
        exclude = {"documents": {"__all__": {"body"}}} if args.metadata_only else None
        print(result.model_dump_json(indent=2, exclude=exclude))
    else:
        _print_result(result, show_body=not args.metadata_only)

    for diag in result.diagnostics:
        print(f"warning: {diag.key}: {diag.message}", file=sys.stderr)

    return EXIT_DIAGNOSTICS if result.has_diagnostics else EXIT_OK


async def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Validate a manifest; ConfigurationError details go to stderr."""
    from reviewref.store.manifest import load_manifest_file

    try:
        descriptors = load_manifest_file(args.manifest_file)
    except ConfigurationError as exc:
        print(f"{args.manifest_file}: invalid", file=sys.stderr)
        for error in exc.errors:
            print(f"  - {error}", file=sys.stderr)
        return EXIT_ERROR

    print(f"{args.manifest_file}: {len(descriptors)} document(s) OK")
    return EXIT_OK


def _print_result(result: ResolutionResult, show_body: bool = True) -> None:
    """Print a human-readable ResolutionResult."""
    if not result.documents:
        print("No reference documents matched.")
        return
    if result.used_fallback:
        print("(no hint matched; showing default guidance)\n")
    for doc in result.documents:
        print(f"# {doc.title or doc.key}")
        if doc.summary:
            print(f"_{doc.summary}_")
        if show_body and doc.body:
            print()
            print(doc.body.rstrip())
        print()


def _setup_logging(verbose: bool, settings: Settings | None = None) -> None:
    """Configure logging for CLI usage.

    Before settings are loaded only a console handler at WARNING is set up.
    Afterwards LOG_* settings apply; --verbose still forces DEBUG.
    """
    from reviewref.logging.logger import setup_logging

    if settings is None:
        setup_logging(level="DEBUG" if verbose else "WARNING", log_format="text")
        return

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
