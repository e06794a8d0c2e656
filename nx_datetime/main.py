"""Command-line entry point."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .codegen.cli_integration import create_generate_subparser
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="nx-datetime",
        description="Generate date/time accessors for annotated classes",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")
    create_generate_subparser(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level)
    if getattr(args, "verbose", False):
        level = min(level, logging.INFO)
    configure_logging(level)
    logger.debug("Arguments: %s", args)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
