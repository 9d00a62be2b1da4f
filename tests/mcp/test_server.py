"""Tests for the MCP tool server.

Tests cover:
- Server registration (name, version, advertised tools)
- The web_search and fetch_url tools
- Tool errors reported as ``isError`` results
- Search defaults taken from the config file
"""

from __future__ import annotations

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from cli_web_search import __version__
from cli_web_search.core.config import CacheConfig, set_config_value
from cli_web_search.exceptions import SearchProviderError
from cli_web_search.mcp import McpServer
from cli_web_search.search.base import SafeSearch, SearchResult
from cli_web_search.search.manager import SearchManager
from cli_web_search.search.registry import ProviderRegistry
from cli_web_search.search.retry import RetryPolicy

from ..search.fakes import FakeProvider, RecordingSleep


def make_server(*providers: FakeProvider) -> McpServer:
    registry = ProviderRegistry(RetryPolicy(max_attempts=1), sleep=RecordingSleep())
    for provider in providers:
        registry.register(provider)
    return McpServer(manager=SearchManager(registry, cache_config=CacheConfig()))


@pytest.fixture
def provider() -> FakeProvider:
    """Provider returning two results, the second without a snippet."""
    return FakeProvider(
        "brave",
        default=[
            SearchResult(
                title="Tokio", url="https://tokio.rs/", snippet="Async runtime", position=1
            ),
            SearchResult(title="Smol", url="https://smol.rs/", position=2),
        ],
    )


# ==============================================================================
# Server Registration Tests
# ==============================================================================


class TestServerRegistration:
    """Tests for the SDK server built by McpServer."""

    def test_initialization_options(self) -> None:
        """Test the advertised server name, version and tool capability."""
        options = make_server().build().create_initialization_options()

        assert options.server_name == "cli-web-search"
        assert options.server_version == __version__
        assert options.capabilities.tools is not None

    @pytest.mark.asyncio
    async def test_tools_list(self) -> None:
        """Test that both tools are advertised with input schemas."""
        app = make_server().build()
        async with create_connected_server_and_client_session(app) as session:
            result = await session.list_tools()

        tools = {tool.name: tool for tool in result.tools}
        assert set(tools) == {"web_search", "fetch_url"}
        assert tools["web_search"].inputSchema["required"] == ["query"]
        assert tools["fetch_url"].inputSchema["required"] == ["url"]

    @pytest.mark.asyncio
    async def test_unknown_tool_is_error(self) -> None:
        """Test calling a tool that does not exist."""
        app = make_server().build()
        async with create_connected_server_and_client_session(app) as session:
            result = await session.call_tool("translate", {})

        assert result.isError is True
        assert "Unknown tool: translate" in result.content[0].text


# ==============================================================================
# Tool Tests
# ==============================================================================


class TestWebSearchTool:
    """Tests for the web_search tool."""

    @pytest.mark.asyncio
    async def test_renders_results(self, provider: FakeProvider) -> None:
        """Test the text rendering of search results."""
        server = make_server(provider)

        async with create_connected_server_and_client_session(server.build()) as session:
            result = await session.call_tool(
                "web_search", {"query": "rust async", "num_results": 2}
            )

        assert result.isError is False
        assert result.content[0].type == "text"
        text = result.content[0].text
        assert text.startswith('Search results for: "rust async"\nProvider: brave | Results: 2')
        assert "1. Tokio\n   URL: https://tokio.rs/\n   Async runtime\n" in text
        assert "2. Smol\n   URL: https://smol.rs/\n   No description available\n" in text
        assert provider.calls[0][1].num_results == 2

    @pytest.mark.asyncio
    async def test_repeated_query_uses_cache(self, provider: FakeProvider) -> None:
        """Test that calls in one session share the manager and its cache."""
        server = make_server(provider)

        async with create_connected_server_and_client_session(server.build()) as session:
            await session.call_tool("web_search", {"query": "rust"})
            await session.call_tool("web_search", {"query": "Rust"})

        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_search_failure_is_tool_error(self) -> None:
        """Test that a search error becomes an error result, not a protocol error."""
        failing = FakeProvider("brave", outcomes=[SearchProviderError("HTTP 500", "brave")])

        app = make_server(failing).build()
        async with create_connected_server_and_client_session(app) as session:
            result = await session.call_tool("web_search", {"query": "rust"})

        assert result.isError is True
        assert "All providers failed" in result.content[0].text

    @pytest.mark.asyncio
    async def test_missing_query_is_tool_error(self, provider: FakeProvider) -> None:
        """Test argument validation."""
        app = make_server(provider).build()
        async with create_connected_server_and_client_session(app) as session:
            result = await session.call_tool("web_search", {})

        assert result.isError is True
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_defaults_come_from_config_file(self, provider: FakeProvider) -> None:
        """Test that safe search and timeout follow the config file's defaults."""
        set_config_value("defaults.safe_search", "strict")
        set_config_value("defaults.timeout", "12")

        await make_server(provider).execute_web_search({"query": "rust"})

        options = provider.calls[0][1]
        assert options.safe_search is SafeSearch.STRICT
        assert options.timeout == 12.0


class TestFetchUrlTool:
    """Tests for the fetch_url tool."""

    @pytest.mark.asyncio
    async def test_fetch_page(self, httpx_mock) -> None:
        """Test the metadata header and converted content."""
        httpx_mock.add_response(
            url="https://example.com/",
            text="<html><head><title>Example</title></head><body><p>Hello</p></body></html>",
        )

        text = await make_server().execute_fetch_url({"url": "https://example.com/"})

        assert text.startswith("Title: Example\nURL: https://example.com/\nContent Length: ")
        body = text.split("---\n\n", 1)[1]
        assert "Hello" in body

    @pytest.mark.asyncio
    async def test_fetch_html_format(self, httpx_mock) -> None:
        """Test that the raw HTML is returned for the html format."""
        httpx_mock.add_response(url="https://example.com/", text="<p>Hi</p>")

        text = await make_server().execute_fetch_url(
            {"url": "https://example.com/", "format": "html"}
        )

        assert text.endswith("---\n\n<p>Hi</p>")

    @pytest.mark.asyncio
    async def test_fetch_error_is_tool_error(self, httpx_mock) -> None:
        """Test an HTTP error status through the MCP session."""
        httpx_mock.add_response(url="https://example.com/missing", status_code=404)

        app = make_server().build()
        async with create_connected_server_and_client_session(app) as session:
            result = await session.call_tool("fetch_url", {"url": "https://example.com/missing"})

        assert result.isError is True
        assert "HTTP 404" in result.content[0].text
