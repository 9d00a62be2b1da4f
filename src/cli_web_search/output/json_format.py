"""JSON output for programmatic consumption."""

from __future__ import annotations

from ..search.base import SearchResponse
from .base import OutputFormatter


class JsonFormatter(OutputFormatter):
    """Serializes the response, omitting unset optional result fields."""

    def __init__(self, pretty: bool = True) -> None:
        self.pretty = pretty

    def format(self, response: SearchResponse) -> str:
        return response.model_dump_json(indent=2 if self.pretty else None, exclude_none=True)
