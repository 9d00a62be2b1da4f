"""MCP server CLI command."""

from __future__ import annotations

import argparse
import asyncio

from ...mcp import McpServer, run_mcp_server
from ..base import load_cli_config


def cmd_mcp(args: argparse.Namespace) -> int:
    """Serve MCP requests on stdin/stdout until the client disconnects."""
    config = load_cli_config(args)
    asyncio.run(run_mcp_server(McpServer(config=config)))
    return 0
