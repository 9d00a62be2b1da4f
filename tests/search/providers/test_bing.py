"""Tests for BingSearchProvider."""

from __future__ import annotations

import pytest
from pytest_httpx import HTTPXMock

from cli_web_search.exceptions import SearchRateLimitError
from cli_web_search.search.base import DateRange, SafeSearch, SearchOptions
from cli_web_search.search.providers import BingSearchProvider


class TestBingProvider:
    """Tests for BingSearchProvider."""

    def test_provider_properties(self) -> None:
        """Test provider properties."""
        provider = BingSearchProvider(api_key="test-key")
        assert provider.name == "bing"
        assert provider.is_configured is True
        assert BingSearchProvider().is_configured is False

    @pytest.mark.asyncio
    async def test_search_maps_results(self, httpx_mock: HTTPXMock) -> None:
        """Test result mapping, parameters and the subscription header."""
        httpx_mock.add_response(
            json={
                "webPages": {
                    "value": [
                        {
                            "name": "Rich",
                            "url": "https://rich.readthedocs.io/",
                            "snippet": "Rich text in the terminal",
                            "dateLastCrawled": "2024-05-01T00:00:00Z",
                            "displayUrl": "rich.readthedocs.io",
                        }
                    ]
                }
            }
        )

        results = await BingSearchProvider(api_key="bing-key").search(
            "rich", SearchOptions(safe_search=SafeSearch.OFF, date_range=DateRange.MONTH)
        )

        assert results[0].title == "Rich"
        assert results[0].published_date == "2024-05-01T00:00:00Z"
        assert results[0].source == "rich.readthedocs.io"

        request = httpx_mock.get_request()
        assert request.headers["Ocp-Apim-Subscription-Key"] == "bing-key"
        assert request.url.params["safeSearch"] == "Off"
        assert request.url.params["freshness"] == "Month"
        assert request.url.params["textFormat"] == "Raw"

    @pytest.mark.asyncio
    async def test_rate_limit_retry_after(self, httpx_mock: HTTPXMock) -> None:
        """Test the Retry-After header is carried on the error."""
        httpx_mock.add_response(status_code=429, headers={"Retry-After": "2"})

        with pytest.raises(SearchRateLimitError) as exc_info:
            await BingSearchProvider(api_key="k").search("q")

        assert exc_info.value.retry_after == 2.0
