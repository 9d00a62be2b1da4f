"""CLI command handlers package."""

from .cache import cmd_cache
from .config_cmd import cmd_config
from .fetch import cmd_fetch
from .mcp import cmd_mcp
from .providers import cmd_providers
from .search import cmd_search

__all__ = [
    "cmd_cache",
    "cmd_config",
    "cmd_fetch",
    "cmd_mcp",
    "cmd_providers",
    "cmd_search",
]
