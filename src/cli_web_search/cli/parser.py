"""CLI argument parser."""

from __future__ import annotations

import argparse

from .. import __version__
from ..core import PROVIDER_NAMES

COMMANDS = ("search", "config", "providers", "cache", "fetch", "mcp")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to configuration file (default: ~/.config/cli-web-search/config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress status messages and warnings"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="cli-web-search",
        description="Search the web from the command line through multiple providers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search with the default provider
  cli-web-search "rust async runtime"

  # Pick a provider and output format
  cli-web-search search "python packaging" -p brave -f markdown -n 5

  # Configure an API key
  cli-web-search config set providers.brave.api_key YOUR_KEY

  # Save a page as Markdown
  cli-web-search fetch https://example.com -f markdown

  # Run as an MCP tool server
  cli-web-search mcp
        """,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s v{__version__}",
        help="Show program's version number and exit",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search the web")
    search_parser.add_argument("query", nargs="+", help="Search query")
    search_parser.add_argument(
        "-p", "--provider", choices=PROVIDER_NAMES, help="Provider to try first"
    )
    search_parser.add_argument(
        "-f",
        "--format",
        choices=("json", "markdown", "text"),
        default=None,
        help="Output format (default: from config, usually text)",
    )
    search_parser.add_argument(
        "-n", "--num-results", type=int, default=None, help="Number of results to return"
    )
    search_parser.add_argument("-o", "--output", help="Write results to a file instead of stdout")
    search_parser.add_argument(
        "--date-range", choices=("day", "week", "month", "year"), help="Limit results by age"
    )
    search_parser.add_argument(
        "--include-domains", help="Only return results from these domains (comma-separated)"
    )
    search_parser.add_argument(
        "--exclude-domains", help="Exclude results from these domains (comma-separated)"
    )
    search_parser.add_argument(
        "--safe-search", choices=("off", "moderate", "strict"), help="Safe search level"
    )
    search_parser.add_argument("--no-cache", action="store_true", help="Bypass the result cache")
    search_parser.add_argument(
        "--timeout", type=int, default=None, help="Request timeout in seconds"
    )
    _add_common_arguments(search_parser)

    # Config command with subcommands
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_subparsers = config_parser.add_subparsers(
        dest="config_command", help="Config subcommands"
    )

    config_init_parser = config_subparsers.add_parser("init", help="Create a config file")
    config_init_parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing config file"
    )
    _add_common_arguments(config_init_parser)

    config_set_parser = config_subparsers.add_parser("set", help="Set a configuration value")
    config_set_parser.add_argument("key", help="Dotted key, e.g. providers.brave.api_key")
    config_set_parser.add_argument("value", help="Value to set")
    _add_common_arguments(config_set_parser)

    config_get_parser = config_subparsers.add_parser("get", help="Get a configuration value")
    config_get_parser.add_argument("key", help="Dotted key, e.g. defaults.num_results")
    _add_common_arguments(config_get_parser)

    for name, help_text in (
        ("list", "List all configuration values"),
        ("validate", "Check provider API keys"),
        ("path", "Show the config file path"),
    ):
        _add_common_arguments(config_subparsers.add_parser(name, help=help_text))

    # Providers command
    providers_parser = subparsers.add_parser("providers", help="List search providers")
    _add_common_arguments(providers_parser)

    # Cache command with subcommands
    cache_parser = subparsers.add_parser("cache", help="Manage the result cache")
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command", help="Cache subcommands")
    _add_common_arguments(cache_subparsers.add_parser("clear", help="Clear cached results"))
    _add_common_arguments(cache_subparsers.add_parser("stats", help="Show cache statistics"))

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch a web page")
    fetch_parser.add_argument("url", help="URL to fetch")
    fetch_parser.add_argument(
        "-f",
        "--format",
        choices=("text", "html", "markdown"),
        default="text",
        help="Content format (default: text)",
    )
    fetch_parser.add_argument(
        "--timeout", type=int, default=30, help="Request timeout in seconds (default: 30)"
    )
    fetch_parser.add_argument("-o", "--output", help="File to write the content to")
    fetch_parser.add_argument(
        "--max-length",
        type=int,
        default=0,
        help="Truncate the page to this many characters before conversion (0 = no limit)",
    )
    fetch_parser.add_argument(
        "--json", action="store_true", help="Save the full response as JSON"
    )
    fetch_parser.add_argument(
        "--stdout", action="store_true", help="Print the content instead of saving it"
    )
    _add_common_arguments(fetch_parser)

    # MCP command
    mcp_parser = subparsers.add_parser("mcp", help="Run the MCP tool server on stdio")
    _add_common_arguments(mcp_parser)

    return parser


def normalize_argv(argv: list[str]) -> list[str]:
    """Treat ``cli-web-search QUERY ...`` as ``cli-web-search search QUERY ...``."""
    if not argv:
        return argv
    first = argv[0]
    if first in COMMANDS or first in ("-h", "--help", "-V", "--version"):
        return argv
    return ["search", *argv]
