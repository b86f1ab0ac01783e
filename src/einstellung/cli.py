"""Command line entry point for einstellung.

Modes:
    read   pull edits from every search location into the canonical files
    write  push the canonical files out to their search locations
    init   create a starter manifest
"""

import argparse
import json
import logging
import sys

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import load_config
from .config_loader import load_hierarchical_config
from .config_schema import build_settings
from .exceptions import ManifestError, ManifestNotFoundError, SyncAborted
from .logger import setup_logging
from .manifest import ensure_manifest, load_manifest
from .prompt import TerminalPrompter
from .sync import (
    SyncEngine,
    SyncMode,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="einstellung",
        description="Einstellung - synchronize configuration files with their copies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Review edits made to the copies and fold them into the canonical files
  einstellung read

  # Offer to overwrite every differing copy with its canonical file
  einstellung write

  # Use another manifest and ignore copies that do not exist
  einstellung read --manifest ~/dotfiles/.einstellung --skip-missing

  # Show what would be reviewed without asking anything
  einstellung write --dry-run

Manifest format: one entry per line, canonical file first, then its copies.
Blank lines and lines starting with # are ignored.
        """,
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["read", "write", "init"],
        default="read",
        help="read (default), write, or init",
    )
    parser.add_argument(
        "--manifest",
        help="Manifest path (takes precedence over EINSTELLUNG_MANIFEST and settings files; default: .einstellung)",
    )
    parser.add_argument(
        "--skip-missing",
        action="store_true",
        help="Ignore search locations that do not exist instead of treating them as empty",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report what would be reviewed; never prompt or write",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final report as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--log-file",
        help="Also append log records to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log record format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"einstellung version {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run einstellung and return the process exit status."""
    args = build_parser().parse_args(argv)

    load_dotenv()

    try:
        settings = build_settings(load_hierarchical_config())
    except (yaml.YAMLError, ValidationError, OSError) as exc:
        print(f"Error: invalid settings file: {exc}", file=sys.stderr)
        return 1

    try:
        config = load_config(
            manifest=args.manifest,
            skip_missing=args.skip_missing,
            debug=args.debug,
            log_file=args.log_file,
            settings=settings,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        debug=config.debug,
        log_file=config.log_file,
        log_format=args.log_format,
        level=settings.logging.level,
    )

    if args.mode == "init":
        path, created = ensure_manifest(config.manifest)
        if created:
            print(f"Created {path}")
        else:
            print(f"{path} already exists")
        return 0

    try:
        entries = load_manifest(config.manifest)
    except ManifestNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("Run 'einstellung init' to create one.", file=sys.stderr)
        return 1
    except ManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    engine = SyncEngine(
        entries,
        TerminalPrompter(),
        skip_missing=config.skip_missing,
        diff_context=config.diff_context,
    )

    try:
        report = engine.run(SyncMode(args.mode), dry_run=args.dry_run)
    except SyncAborted as exc:
        logger.info("Session aborted: %s", exc)
        print(
            "\nAborted. Files of the current entry were not modified.",
            file=sys.stderr,
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    elif args.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))

    return 1 if report.errors else 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
