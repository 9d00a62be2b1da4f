"""Config CLI commands."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ...core import (
    SearchConfig,
    config_path,
    get_config_value,
    init_config,
    load_config,
    set_config_value,
)
from ...exceptions import SearchError
from ...search import build_registry
from ..base import load_cli_config


def cmd_config(args: argparse.Namespace) -> int:
    """Handle configuration commands."""
    if not args.config_command:
        print("Usage: cli-web-search config <subcommand>")
        print("Subcommands: init, set, get, list, validate, path")
        return 1

    handlers = {
        "init": _cmd_config_init,
        "set": _cmd_config_set,
        "get": _cmd_config_get,
        "list": _cmd_config_list,
        "validate": _cmd_config_validate,
        "path": _cmd_config_path,
    }

    handler = handlers.get(args.config_command)
    if handler:
        return handler(args)

    print(f"Unknown config subcommand: {args.config_command}")
    return 1


def _target_path(args: argparse.Namespace) -> str | Path:
    return args.config or config_path()


def _cmd_config_init(args: argparse.Namespace) -> int:
    """Handle config init command."""
    path = _target_path(args)
    init_config(path, force=args.force)
    print(f"Configuration initialized at: {path}")
    return 0


def _cmd_config_set(args: argparse.Namespace) -> int:
    """Handle config set command."""
    set_config_value(args.key, args.value, _target_path(args))
    print(f"Set {args.key} = {args.value}")
    return 0


def _cmd_config_get(args: argparse.Namespace) -> int:
    """Handle config get command."""
    value = get_config_value(args.key, args.config)
    print(f"{args.key}: {value if value is not None else '(not set)'}")
    return 0


def _cmd_config_list(args: argparse.Namespace) -> int:
    """Handle config list command."""
    flat = load_config(args.config).to_flat_map()
    for key in sorted(flat):
        print(f"{key}: {flat[key]}")
    return 0


async def _validate_providers(
    config: SearchConfig,
) -> tuple[dict[str, bool | SearchError], set[str]]:
    registry = build_registry(config)
    try:
        configured = {provider.name for provider in registry.configured_providers()}
        return await registry.validate_all(), configured
    finally:
        await registry.aclose()


def _cmd_config_validate(args: argparse.Namespace) -> int:
    """Handle config validate command."""
    config = load_cli_config(args)
    console = Console()

    console.print("Validating API keys...\n")
    results, configured = asyncio.run(_validate_providers(config))
    if not results:
        console.print("  [yellow]No providers configured.[/]")
        return 0

    for name, outcome in results.items():
        if isinstance(outcome, SearchError):
            console.print(f"  {name}: [red]Invalid[/] - {escape(str(outcome))}")
        elif outcome:
            console.print(f"  {name}: [green]Valid[/]")
        elif name in configured:
            console.print(f"  {name}: [red]Invalid[/] - key rejected by the provider")
        else:
            console.print(f"  {name}: [yellow]Not configured[/]")
    return 0


def _cmd_config_path(args: argparse.Namespace) -> int:
    """Handle config path command."""
    print(_target_path(args))
    return 0
