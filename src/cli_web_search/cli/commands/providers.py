"""Providers CLI command."""

from __future__ import annotations

import argparse

from ...core import PROVIDER_NAMES
from ...search import build_registry
from ..base import load_cli_config


def cmd_providers(args: argparse.Namespace) -> int:
    """List registered providers and whether each one is ready to use."""
    config = load_cli_config(args)
    registry = build_registry(config)

    print("Available Search Providers:\n")

    statuses = registry.list_providers()
    if not statuses:
        print("  No providers registered.")
        print("\n  Set up a provider with:")
        print("    cli-web-search config set providers.brave.api_key YOUR_KEY")
    for status in statuses:
        indicator = "[x]" if status.configured else "[ ]"
        print(f"  {indicator} {status.name}")

    registered = {status.name for status in statuses}
    unregistered = [name for name in PROVIDER_NAMES if name not in registered]
    if unregistered:
        print("\n  Not configured:")
        for name in unregistered:
            print(f"  [ ] {name}")

    print("\n  Legend: [x] = configured, [ ] = not configured")
    return 0
