"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from mushroom_map import __version__
from mushroom_map.config import get_settings
from mushroom_map.exceptions import ObservationNotFoundError
from mushroom_map.flows.consensus import recalculate_all
from mushroom_map.reference.roles import Role
from mushroom_map.services.observations import view_observation
from mushroom_map.store import ObservationStore


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="mushroom-map",
        description="Weighted identification consensus and location privacy for mushroom sightings",
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
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'consensus' command - recalculate every open observation
    subparsers.add_parser("consensus", help="Recalculate consensus for all open observations")

    # 'show' command - masked view of one observation
    show_parser = subparsers.add_parser("show", help="Show an observation as a viewer would see it")
    show_parser.add_argument("observation_id", help="Observation id")
    show_parser.add_argument(
        "--role",
        type=str.upper,
        choices=[r.value for r in Role],
        default=None,
        help="Viewer role (default: anonymous)",
    )

    return parser


def configure_logging(debug: bool) -> None:
    """Route library loggers to stderr at the configured level."""
    level = "DEBUG" if debug else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Data dir: {settings.data_dir}")
    print(f"Consensus: threshold={settings.consensus_threshold} margin={settings.consensus_margin}")
    return 0


def cmd_consensus(_args: argparse.Namespace) -> int:
    """Handle the 'consensus' command: run the recalculation flow."""
    settings = get_settings()
    print(f"Recalculating consensus in {settings.data_dir}...")
    result = recalculate_all()
    print(f"Processed {result['processed']}, updated {result['updated']}, errors {result['errors']}")
    return 1 if result["errors"] else 0


def cmd_show(args: argparse.Namespace) -> int:
    """Handle the 'show' command: print the privacy-masked observation."""
    store = ObservationStore(get_settings().data_dir)
    try:
        observation = store.load(args.observation_id)
        if observation is None:
            raise ObservationNotFoundError(args.observation_id)
    except (ObservationNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    view = view_observation(observation, store.load_species(), args.role)
    print(json.dumps(view, indent=2))
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(getattr(args, "debug", False))

    commands = {
        "info": cmd_info,
        "consensus": cmd_consensus,
        "show": cmd_show,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
