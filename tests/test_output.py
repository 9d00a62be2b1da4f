"""Tests for the JSON, Markdown and text formatters."""

from __future__ import annotations

import json

import pytest

from cli_web_search.output import (
    JsonFormatter,
    MarkdownFormatter,
    OutputFormat,
    TextFormatter,
    get_formatter,
    truncate_snippet,
)
from cli_web_search.search.base import SearchResponse, SearchResult


@pytest.fixture
def response() -> SearchResponse:
    """A two-result response from Brave."""
    return SearchResponse.build(
        "rust async",
        "brave",
        [
            SearchResult(
                title="Tokio",
                url="https://tokio.rs/",
                snippet="An asynchronous runtime",
                position=1,
                source="tokio.rs",
                published_date="2024-01-01",
            ),
            SearchResult(title="async-std", url="https://async.rs/", position=2),
        ],
        search_time_ms=42,
    )


@pytest.fixture
def empty_response() -> SearchResponse:
    """A response without results."""
    return SearchResponse.build("nothing", "duckduckgo", [], search_time_ms=3)


# ==============================================================================
# Factory Tests
# ==============================================================================


class TestGetFormatter:
    """Tests for get_formatter."""

    @pytest.mark.parametrize(
        ("name", "cls"),
        [("json", JsonFormatter), ("markdown", MarkdownFormatter), ("text", TextFormatter)],
    )
    def test_by_name(self, name: str, cls: type) -> None:
        """Test lookup by string name."""
        assert isinstance(get_formatter(name), cls)

    def test_by_enum(self) -> None:
        """Test lookup by enum member."""
        assert isinstance(get_formatter(OutputFormat.MARKDOWN), MarkdownFormatter)

    def test_unknown_format(self) -> None:
        """Test an unsupported format."""
        with pytest.raises(ValueError):
            get_formatter("yaml")


# ==============================================================================
# JSON Tests
# ==============================================================================


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_document_fields(self, response: SearchResponse) -> None:
        """Test the JSON document structure."""
        data = json.loads(JsonFormatter().format(response))

        assert data["query"] == "rust async"
        assert data["provider"] == "brave"
        assert data["total_results"] == 2
        assert data["search_time_ms"] == 42
        assert data["cached"] is False
        assert data["results"][0]["source"] == "tokio.rs"
        assert "source" not in data["results"][1]

    def test_pretty_and_compact(self, response: SearchResponse) -> None:
        """Test indentation control."""
        assert "\n" in JsonFormatter(pretty=True).format(response)
        assert "\n" not in JsonFormatter(pretty=False).format(response)


# ==============================================================================
# Markdown Tests
# ==============================================================================


class TestMarkdownFormatter:
    """Tests for MarkdownFormatter."""

    def test_layout(self, response: SearchResponse) -> None:
        """Test headings, metadata and per-result sections."""
        output = MarkdownFormatter().format(response)

        assert output.startswith("# Search Results: rust async\n")
        assert "*Provider: brave | Results: 2 | Time: 42ms*" in output
        assert "## 1. Tokio" in output
        assert "**URL:** https://tokio.rs/" in output
        assert "**Source:** tokio.rs" in output
        assert "**Published:** 2024-01-01" in output
        assert "An asynchronous runtime" in output
        assert "## 2. async-std" in output

    def test_optional_fields_omitted(self, response: SearchResponse) -> None:
        """Test that missing source and date lines are skipped."""
        second = MarkdownFormatter().format(response).split("## 2. async-std")[1]
        assert "**Source:**" not in second
        assert "**Published:**" not in second

    def test_empty(self, empty_response: SearchResponse) -> None:
        """Test the no-results message."""
        assert "*No results found.*" in MarkdownFormatter().format(empty_response)


# ==============================================================================
# Text Tests
# ==============================================================================


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_layout(self, response: SearchResponse) -> None:
        """Test the header rule and numbered entries."""
        lines = TextFormatter().format(response).splitlines()

        assert lines[0] == 'Search: "rust async" (2 results from brave in 42ms)'
        assert lines[1] == "=" * 60
        assert "1. Tokio" in lines
        assert "   https://tokio.rs/" in lines
        assert "   An asynchronous runtime" in lines
        assert "2. async-std" in lines

    def test_empty(self, empty_response: SearchResponse) -> None:
        """Test the no-results message."""
        assert "No results found." in TextFormatter().format(empty_response)

    def test_long_snippet_is_truncated(self) -> None:
        """Test that long snippets are shortened in text output."""
        long_snippet = "word " * 100
        response = SearchResponse.build(
            "q", "brave", [SearchResult(title="T", url="https://t.test", snippet=long_snippet)]
        )

        snippet_line = TextFormatter().format(response).splitlines()[5]

        assert snippet_line.endswith("...")
        assert len(snippet_line) <= 3 + 200 + 3


class TestTruncateSnippet:
    """Tests for truncate_snippet."""

    def test_short_text_unchanged(self) -> None:
        """Test text under the limit."""
        assert truncate_snippet("short text") == "short text"

    def test_whitespace_collapsed(self) -> None:
        """Test whitespace normalization."""
        assert truncate_snippet("a\n  b\t c") == "a b c"

    def test_cut_at_word_boundary(self) -> None:
        """Test truncation at the last space before the limit."""
        assert truncate_snippet("hello wonderful world", max_len=12) == "hello..."

    def test_cut_without_spaces(self) -> None:
        """Test truncation of a single long word."""
        assert truncate_snippet("a" * 20, max_len=10) == "a" * 10 + "..."
