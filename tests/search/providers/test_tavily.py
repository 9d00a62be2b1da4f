"""Tests for TavilySearchProvider."""

from __future__ import annotations

import json

import pytest
from pytest_httpx import HTTPXMock

from cli_web_search.exceptions import SearchAuthenticationError
from cli_web_search.search.base import SearchOptions
from cli_web_search.search.providers import TavilySearchProvider


class TestTavilyProvider:
    """Tests for TavilySearchProvider."""

    def test_provider_properties(self) -> None:
        """Test provider properties."""
        provider = TavilySearchProvider(api_key="tvly-key")
        assert provider.name == "tavily"
        assert provider.is_configured is True

    @pytest.mark.asyncio
    async def test_search_sends_json_body(self, httpx_mock: HTTPXMock) -> None:
        """Test the request body including native domain filters."""
        httpx_mock.add_response(
            json={
                "results": [
                    {
                        "title": "FastAPI",
                        "url": "https://fastapi.tiangolo.com/",
                        "content": "FastAPI framework",
                        "published_date": "2024-01-02",
                    }
                ]
            }
        )

        results = await TavilySearchProvider(api_key="tvly-key").search(
            "fastapi",
            SearchOptions(
                num_results=30, include_domains=("tiangolo.com",), exclude_domains=("x.com",)
            ),
        )

        assert results[0].snippet == "FastAPI framework"
        assert results[0].published_date == "2024-01-02"
        assert results[0].source == "fastapi.tiangolo.com"

        request = httpx_mock.get_request()
        assert request.method == "POST"
        body = json.loads(request.content)
        assert body == {
            "api_key": "tvly-key",
            "query": "fastapi",
            "max_results": 20,
            "search_depth": "basic",
            "include_domains": ["tiangolo.com"],
            "exclude_domains": ["x.com"],
        }

    @pytest.mark.asyncio
    async def test_invalid_key(self, httpx_mock: HTTPXMock) -> None:
        """Test 401 handling."""
        httpx_mock.add_response(status_code=401, json={"detail": "Unauthorized"})
        with pytest.raises(SearchAuthenticationError):
            await TavilySearchProvider(api_key="bad").search("q")
