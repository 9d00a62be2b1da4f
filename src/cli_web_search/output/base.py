"""Formatter interface for search responses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ..search.base import SearchResponse


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    MARKDOWN = "markdown"
    TEXT = "text"


class OutputFormatter(ABC):
    """Renders a :class:`SearchResponse` as a string."""

    @abstractmethod
    def format(self, response: SearchResponse) -> str:
        """Render ``response``."""
