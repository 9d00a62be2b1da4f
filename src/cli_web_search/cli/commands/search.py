"""Search CLI command."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from ...core import SearchConfig
from ...output import get_formatter
from ...search import SearchManager, SearchOptions, build_registry
from ...search.base import DateRange, SafeSearch, SearchResponse
from ..base import load_cli_config, logger, print_error, split_list


def build_search_options(args: argparse.Namespace, config: SearchConfig) -> SearchOptions:
    """Combine command-line flags with the ``defaults`` config section."""
    defaults = config.defaults
    return SearchOptions(
        num_results=args.num_results or defaults.num_results,
        safe_search=SafeSearch(args.safe_search or defaults.safe_search),
        date_range=DateRange(args.date_range) if args.date_range else None,
        include_domains=split_list(args.include_domains),
        exclude_domains=split_list(args.exclude_domains),
        timeout=float(args.timeout or defaults.timeout),
    )


async def _run_search(
    config: SearchConfig,
    query: str,
    options: SearchOptions,
    provider: str | None,
    use_cache: bool,
) -> SearchResponse:
    manager = SearchManager(build_registry(config), cache_config=config.cache)
    try:
        return await manager.search(query, options, provider=provider, use_cache=use_cache)
    finally:
        await manager.aclose()


def cmd_search(args: argparse.Namespace) -> int:
    """Handle the search command."""
    config = load_cli_config(args)
    query = " ".join(args.query)
    options = build_search_options(args, config)

    response = asyncio.run(
        _run_search(config, query, options, args.provider, use_cache=not args.no_cache)
    )

    output = get_formatter(args.format or config.defaults.format).format(response)
    if args.output:
        try:
            Path(args.output).write_text(output, encoding="utf-8")
        except OSError as exc:
            print_error(f"Cannot write {args.output}: {exc}")
            return 1
        logger.debug("Wrote %d results to %s", response.total_results, args.output)
        if not args.quiet:
            print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0
