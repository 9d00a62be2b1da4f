"""Plain text output."""

from __future__ import annotations

from ..search.base import SearchResponse
from .base import OutputFormatter

SNIPPET_MAX_LENGTH = 200


def truncate_snippet(text: str, max_len: int = SNIPPET_MAX_LENGTH) -> str:
    """Collapse whitespace and cut at a word boundary, appending ``...``."""
    cleaned = " ".join(text.split())
    if len(cleaned) <= max_len:
        return cleaned

    truncated = cleaned[:max_len]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return f"{truncated}..."


class TextFormatter(OutputFormatter):
    """Compact, terminal-friendly listing."""

    def format(self, response: SearchResponse) -> str:
        lines = [
            f'Search: "{response.query}" ({response.total_results} results from '
            f"{response.provider} in {response.search_time_ms}ms)",
            "=" * 60,
            "",
        ]

        if not response.results:
            lines.append("No results found.")
            lines.append("")
            return "\n".join(lines)

        for result in response.results:
            lines.append(f"{result.position}. {result.title}")
            lines.append(f"   {result.url}")
            if result.snippet:
                lines.append(f"   {truncate_snippet(result.snippet)}")
            lines.append("")

        return "\n".join(lines)
