"""Model Context Protocol tool server over stdio."""

from __future__ import annotations

from .server import (
    TOOLS,
    FetchUrlInput,
    McpServer,
    WebSearchInput,
    run_mcp_server,
)

__all__ = [
    "TOOLS",
    "FetchUrlInput",
    "McpServer",
    "WebSearchInput",
    "run_mcp_server",
]
