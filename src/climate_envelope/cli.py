"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from climate_envelope import __version__
from climate_envelope.config import get_settings
from climate_envelope.datasources import worldclim
from climate_envelope.errors import EnvelopeError
from climate_envelope.flows.envelope import envelope_flow
from climate_envelope.schemas import OutputMode
from climate_envelope.store import DataStore


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="climate-envelope",
        description="Species climate envelopes from GBIF occurrences and WorldClim normals",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    download_parser = subparsers.add_parser("download", help="Download WorldClim layers")
    download_parser.add_argument(
        "--variables",
        nargs="+",
        default=None,
        help="WorldClim variables (default: from settings)",
    )
    download_parser.add_argument(
        "--resolution",
        choices=list(worldclim.RESOLUTIONS),
        default=None,
        help="Grid resolution (default: from settings)",
    )
    download_parser.add_argument(
        "--force",
        action="store_true",
        help="Re-download even if cached",
    )

    envelope_parser = subparsers.add_parser("envelope", help="Compute species climate envelopes")
    envelope_parser.add_argument("species", nargs="+", help="Scientific name(s)")
    envelope_parser.add_argument(
        "--mode",
        choices=[m.value for m in OutputMode],
        default=OutputMode.SUMMARY.value,
        help="Per-cell records or one summary per species (default: summary)",
    )
    envelope_parser.add_argument(
        "--variables",
        nargs="+",
        default=None,
        help="Climate variables to join (default: from settings)",
    )
    envelope_parser.add_argument(
        "--quantiles",
        nargs="+",
        type=float,
        default=None,
        help="Quantile levels for summary mode (default: from settings)",
    )
    envelope_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON results to this file instead of stdout",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Data directory: {settings.data_dir}")
    print(f"WorldClim resolution: {settings.worldclim_resolution}")
    print(f"Variables: {', '.join(settings.variables)}")
    return 0


def cmd_download(args: argparse.Namespace) -> int:
    """Handle the 'download' command."""
    settings = get_settings()
    store = DataStore(settings.data_dir)
    resolution = args.resolution or settings.worldclim_resolution
    for variable in args.variables or settings.variables:
        paths = worldclim.download_variable(variable, resolution, store, force=args.force)
        print(f"{variable}: {len(paths)} monthly layers in {paths[0].parent}")
    return 0


def cmd_envelope(args: argparse.Namespace) -> int:
    """Handle the 'envelope' command."""
    settings = get_settings()
    result = envelope_flow(
        args.species,
        mode=args.mode,
        variables=args.variables or settings.variables,
        quantiles=args.quantiles or settings.quantiles,
        resolution=settings.worldclim_resolution,
        max_records=settings.gbif_max_records,
        data_dir=settings.data_dir,
    )

    text = json.dumps(result, indent=2)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
        print(f"Wrote {args.output}")
    else:
        print(text)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug or get_settings().debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "download": cmd_download,
        "envelope": cmd_envelope,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (EnvelopeError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
