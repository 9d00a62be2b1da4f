"""Cache CLI commands.

The result cache lives in memory for the duration of one process, so these
commands operate on a fresh cache built from the ``cache`` config section.
"""

from __future__ import annotations

import argparse

from ...search import SearchCache
from ..base import load_cli_config


def cmd_cache(args: argparse.Namespace) -> int:
    """Handle cache commands."""
    if not args.cache_command:
        print("Usage: cli-web-search cache <subcommand>")
        print("Subcommands: clear, stats")
        return 1

    cache = SearchCache(load_cli_config(args).cache)

    if args.cache_command == "clear":
        cache.clear()
        print("Cache cleared.")
        return 0
    if args.cache_command == "stats":
        print(cache.stats())
        return 0

    print(f"Unknown cache subcommand: {args.cache_command}")
    return 1
