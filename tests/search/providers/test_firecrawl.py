"""Tests for FirecrawlSearchProvider."""

from __future__ import annotations

import json

import pytest
from pytest_httpx import HTTPXMock

from cli_web_search.exceptions import SearchProviderError, SearchTimeoutError
from cli_web_search.search.base import DateRange, SearchOptions
from cli_web_search.search.providers import FirecrawlSearchProvider


class TestFirecrawlProvider:
    """Tests for FirecrawlSearchProvider."""

    @pytest.mark.asyncio
    async def test_search_maps_results(self, httpx_mock: HTTPXMock) -> None:
        """Test result mapping and the request payload."""
        httpx_mock.add_response(
            json={
                "success": True,
                "data": {
                    "web": [
                        {
                            "title": "Firecrawl",
                            "url": "https://firecrawl.dev/",
                            "description": "Turn websites into LLM-ready data",
                            "metadata": {"sourceURL": "https://firecrawl.dev/"},
                        }
                    ]
                },
            }
        )

        results = await FirecrawlSearchProvider(api_key="fc-key").search(
            "scraping", SearchOptions(num_results=4, timeout=90, date_range=DateRange.DAY)
        )

        assert results[0].snippet == "Turn websites into LLM-ready data"
        assert results[0].source == "https://firecrawl.dev/"

        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "Bearer fc-key"
        assert json.loads(request.content) == {
            "query": "scraping",
            "limit": 4,
            "sources": ["web"],
            "country": "US",
            "timeout": 60000,
            "tbs": "qdr:d",
        }

    @pytest.mark.asyncio
    async def test_unsuccessful_body(self, httpx_mock: HTTPXMock) -> None:
        """Test that success=false is an API error carrying the warning."""
        httpx_mock.add_response(json={"success": False, "warning": "Query blocked"})

        with pytest.raises(SearchProviderError, match="Query blocked"):
            await FirecrawlSearchProvider(api_key="k").search("q")

    @pytest.mark.asyncio
    async def test_request_timeout_status(self, httpx_mock: HTTPXMock) -> None:
        """Test that HTTP 408 maps to a timeout error."""
        httpx_mock.add_response(status_code=408)

        with pytest.raises(SearchTimeoutError, match="timed out after 12 seconds"):
            await FirecrawlSearchProvider(api_key="k").search("q", SearchOptions(timeout=12))
