"""Fetch CLI command."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from ...core import cache_dir
from ...fetch import ContentFormat, Fetcher, FetchOptions, generate_filename_from_url
from ..base import load_cli_config, logger, print_error


def cmd_fetch(args: argparse.Namespace) -> int:
    """Fetch a page and save it to a file, or print it with ``--stdout``."""
    load_cli_config(args)
    content_format = ContentFormat(args.format)
    options = FetchOptions(
        timeout=float(args.timeout),
        format=content_format,
        max_length=max(args.max_length, 0),
    )

    if not args.quiet and not args.stdout:
        print(f"Fetching: {args.url}", file=sys.stderr)

    response = asyncio.run(Fetcher(options).fetch(args.url))

    output = response.model_dump_json(indent=2) if args.json else response.content

    if args.stdout:
        print(output)
        return 0

    if args.output:
        output_path = Path(args.output)
    else:
        filename = generate_filename_from_url(args.url, content_format, as_json=args.json)
        output_path = cache_dir() / "fetch" / filename
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
    except OSError as exc:
        print_error(f"Cannot write {output_path}: {exc}")
        return 1
    logger.debug("Saved %s to %s", response.final_url, output_path)

    if args.json:
        summary = {
            "status": "success",
            "file": str(output_path),
            "url": response.url,
            "final_url": response.final_url,
        }
        if response.title:
            summary["title"] = response.title
        summary["content_length"] = response.content_length
        summary["format"] = content_format.value
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    else:
        title_info = f" ({response.title})" if response.title else ""
        print(f"Fetched: {response.final_url}{title_info}")
        print(f"Content saved to: {output_path}")
        print(f"Size: {response.content_length} bytes")
    return 0
