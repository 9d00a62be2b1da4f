"""MCP tool server exposing web search and page fetching.

The protocol (stdio framing, initialize, tools/list, tools/call) is handled by
the ``mcp`` SDK's low-level :class:`~mcp.server.lowlevel.Server`. This module
only declares the tools and runs them. Logging goes to stderr so it never
corrupts the stdout stream.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import BaseModel, Field, ValidationError

from .. import __version__
from ..core.config import APP_NAME, SearchConfig, load_config
from ..core.logger import get_logger
from ..exceptions import SearchError, SearchProviderError
from ..fetch import ContentFormat, Fetcher, FetchOptions
from ..search.base import SafeSearch, SearchOptions
from ..search.manager import SearchManager
from ..search.registry import build_registry

logger = get_logger("mcp.server")


class WebSearchInput(BaseModel):
    """Input parameters for the web_search tool."""

    query: str = Field(description="The search query string")
    num_results: int = Field(default=10, ge=1, description="Number of results to return")
    provider: str | None = Field(default=None, description="Preferred search provider")


class FetchUrlInput(BaseModel):
    """Input parameters for the fetch_url tool."""

    url: str = Field(description="The URL to fetch")
    format: str = Field(
        default="text", description='Output format: "text", "html", or "markdown"'
    )
    max_length: int | None = Field(
        default=None, ge=0, description="Maximum content length in characters (0 = no limit)"
    )


TOOLS: list[types.Tool] = [
    types.Tool(
        name="web_search",
        description=(
            "Search the web using configured search providers. Returns a list of "
            "search results with titles, URLs, and snippets."
        ),
        inputSchema=WebSearchInput.model_json_schema(),
    ),
    types.Tool(
        name="fetch_url",
        description=(
            "Fetch the content of a web page and convert it to text or markdown. "
            "Useful for reading web pages."
        ),
        inputSchema=FetchUrlInput.model_json_schema(),
    ),
]


def _parse_content_format(value: str) -> ContentFormat:
    value = value.lower()
    if value == "html":
        return ContentFormat.HTML
    if value in ("markdown", "md"):
        return ContentFormat.MARKDOWN
    return ContentFormat.TEXT


def _validate(model: type[BaseModel], arguments: dict[str, Any]) -> Any:
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise SearchProviderError(f"Invalid arguments: {exc}", provider="mcp") from exc


class McpServer:
    """Runs the MCP tools against the search manager and the page fetcher.

    One :class:`SearchManager` is kept for the life of the server, so a query
    repeated within the cache TTL is answered from memory. The manager's
    provider clients are closed when the MCP session ends.
    """

    def __init__(
        self,
        manager: SearchManager | None = None,
        config: SearchConfig | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            manager: Search manager to use; built from the config on first search if None
            config: Configuration (loaded from disk when needed and not given)
        """
        self._manager = manager
        self._config = config
        self._tools: dict[str, Callable[[dict[str, Any]], Awaitable[str]]] = {
            "web_search": self.execute_web_search,
            "fetch_url": self.execute_fetch_url,
        }

    @property
    def config(self) -> SearchConfig:
        if self._config is None:
            self._config = load_config()
        return self._config

    def _get_manager(self) -> SearchManager:
        if self._manager is None:
            config = self.config
            self._manager = SearchManager(build_registry(config), cache_config=config.cache)
        return self._manager

    def build(self) -> Server:
        """Create the SDK server with this instance's tools registered."""
        app: Server = Server(APP_NAME, version=__version__, lifespan=self._lifespan)

        @app.list_tools()
        async def list_tools() -> list[types.Tool]:
            return list(TOOLS)

        @app.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
            return await self.call_tool(name, arguments)

        return app

    @asynccontextmanager
    async def _lifespan(self, _app: Server) -> AsyncIterator[McpServer]:
        try:
            yield self
        finally:
            await self.aclose()

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        """Run a tool by name.

        Raises:
            ValueError: If the tool does not exist
            SearchError: If the tool fails; the SDK reports it as an ``isError`` result
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")

        logger.info("Calling tool %s", name)
        try:
            text = await tool(arguments or {})
        except SearchError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            raise
        return [types.TextContent(type="text", text=text)]

    async def execute_web_search(self, arguments: dict[str, Any]) -> str:
        """Run the web_search tool and render the results for a language model."""
        params: WebSearchInput = _validate(WebSearchInput, arguments)

        defaults = self.config.defaults
        options = SearchOptions(
            num_results=params.num_results,
            safe_search=SafeSearch(defaults.safe_search),
            timeout=float(defaults.timeout),
        )
        response = await self._get_manager().search(
            params.query, options, provider=params.provider
        )

        output = (
            f'Search results for: "{response.query}"\n'
            f"Provider: {response.provider} | Results: {len(response.results)}"
            f" | Time: {response.search_time_ms}ms\n\n"
        )
        for index, result in enumerate(response.results, start=1):
            snippet = result.snippet or "No description available"
            output += f"{index}. {result.title}\n   URL: {result.url}\n   {snippet}\n\n"
        return output

    async def execute_fetch_url(self, arguments: dict[str, Any]) -> str:
        """Run the fetch_url tool and return the page with a metadata header."""
        params: FetchUrlInput = _validate(FetchUrlInput, arguments)

        options = FetchOptions(
            format=_parse_content_format(params.format),
            max_length=params.max_length or 0,
        )
        response = await Fetcher(options).fetch(params.url)

        output = ""
        if response.title:
            output += f"Title: {response.title}\n"
        output += f"URL: {response.final_url}\n"
        output += f"Content Length: {response.content_length} bytes\n"
        output += "---\n\n"
        output += response.content
        return output

    async def aclose(self) -> None:
        if self._manager is not None:
            await self._manager.aclose()


async def run_mcp_server(server: McpServer | None = None) -> None:
    """Serve MCP requests on stdin/stdout until the client disconnects."""
    server = server or McpServer()
    app = server.build()

    logger.info("MCP server started")
    async with stdio_server() as (read_stream, write_stream):
        await app.run(read_stream, write_stream, app.create_initialization_options())
    logger.info("MCP server stopped")
