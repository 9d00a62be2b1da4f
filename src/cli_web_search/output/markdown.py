"""Markdown output."""

from __future__ import annotations

from ..search.base import SearchResponse
from .base import OutputFormatter


class MarkdownFormatter(OutputFormatter):
    """Renders results as a Markdown document with one section per result."""

    def format(self, response: SearchResponse) -> str:
        lines = [
            f"# Search Results: {response.query}",
            "",
            f"*Provider: {response.provider} | Results: {response.total_results}"
            f" | Time: {response.search_time_ms}ms*",
            "",
            "---",
            "",
        ]

        if not response.results:
            lines.append("*No results found.*")
            lines.append("")
            return "\n".join(lines)

        for result in response.results:
            lines += [f"## {result.position}. {result.title}", "", f"**URL:** {result.url}", ""]
            if result.source:
                lines += [f"**Source:** {result.source}", ""]
            if result.published_date:
                lines += [f"**Published:** {result.published_date}", ""]
            if result.snippet:
                lines += [result.snippet, ""]
            lines += ["---", ""]

        return "\n".join(lines)
