"""Output formatters for search responses."""

from __future__ import annotations

from .base import OutputFormat, OutputFormatter
from .json_format import JsonFormatter
from .markdown import MarkdownFormatter
from .text import TextFormatter, truncate_snippet

_FORMATTERS: dict[OutputFormat, type[OutputFormatter]] = {
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.MARKDOWN: MarkdownFormatter,
    OutputFormat.TEXT: TextFormatter,
}


def get_formatter(output_format: OutputFormat | str) -> OutputFormatter:
    """Return a formatter instance for ``output_format``.

    Raises:
        ValueError: If the format is not one of json, markdown or text
    """
    return _FORMATTERS[OutputFormat(output_format)]()


__all__ = [
    "JsonFormatter",
    "MarkdownFormatter",
    "OutputFormat",
    "OutputFormatter",
    "TextFormatter",
    "get_formatter",
    "truncate_snippet",
]
