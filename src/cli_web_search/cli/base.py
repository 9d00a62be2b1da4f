"""Base utilities and shared imports for the CLI module."""

from __future__ import annotations

import argparse
import sys

from ..core import SearchConfig, get_logger, load_config, setup_logging, verbosity_to_level

logger = get_logger("cli")


def load_cli_config(args: argparse.Namespace) -> SearchConfig:
    """Load configuration for a command and configure logging from its flags.

    ``-q`` limits logging to errors; each ``-v`` raises the level above the
    configured one.
    """
    config = load_config(getattr(args, "config", None))

    level = config.logging.level
    verbose = getattr(args, "verbose", 0) or 0
    if getattr(args, "quiet", False):
        level = "ERROR"
    elif verbose:
        level = verbosity_to_level(verbose)

    setup_logging(config.logging.model_copy(update={"level": level}))
    return config


def print_error(message: str) -> None:
    """Print an error line to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def split_list(value: str | None) -> tuple[str, ...] | None:
    """Split a comma-separated option into a tuple, dropping empty items."""
    if not value:
        return None
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or None


__all__ = [
    "load_cli_config",
    "logger",
    "print_error",
    "split_list",
]
