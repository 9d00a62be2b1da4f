"""Test configuration hooks."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cli_web_search.core import config as config_module
from cli_web_search.search.base import SearchResult


# Configure anyio to only use asyncio backend (skip trio tests)
@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and cache directories at a temp dir and drop real credentials."""
    for key in list(os.environ):
        if key.startswith(config_module.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)

    config_home = tmp_path / "config"
    monkeypatch.setenv("CLI_WEB_SEARCH_CONFIG_DIR", str(config_home))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    # Never pick up a developer's .env file
    monkeypatch.setattr(config_module, "_DOTENV_LOADED", True)
    return config_home


@pytest.fixture
def make_results():
    """Factory for lists of numbered search results."""

    def _make(count: int = 3, prefix: str = "Result") -> list[SearchResult]:
        return [
            SearchResult(
                title=f"{prefix} {i}",
                url=f"https://example.com/{prefix.lower()}/{i}",
                snippet=f"Snippet for {prefix.lower()} {i}",
                position=i,
            )
            for i in range(1, count + 1)
        ]

    return _make
