"""CLI module for cli-web-search.

This module provides the command-line interface: searching, configuration,
provider and cache inspection, page fetching and the MCP tool server.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from ..exceptions import SearchError
from .base import load_cli_config, logger, print_error
from .commands import (
    cmd_cache,
    cmd_config,
    cmd_fetch,
    cmd_mcp,
    cmd_providers,
    cmd_search,
)
from .parser import build_parser, normalize_argv


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Optional sequence of CLI arguments (without the program name).

    Returns:
        Process exit code. 0 for success, 1 on any search or configuration error.
    """
    parser = build_parser()
    arguments = list(sys.argv[1:] if argv is None else argv)

    # Handle no arguments: print help and exit
    if not arguments:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(normalize_argv(arguments))

    handlers = {
        "search": cmd_search,
        "config": cmd_config,
        "providers": cmd_providers,
        "cache": cmd_cache,
        "fetch": cmd_fetch,
        "mcp": cmd_mcp,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except SearchError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print_error(str(exc))
        return 1


__all__ = [
    "build_parser",
    "cmd_cache",
    "cmd_config",
    "cmd_fetch",
    "cmd_mcp",
    "cmd_providers",
    "cmd_search",
    "load_cli_config",
    "main",
    "normalize_argv",
]
