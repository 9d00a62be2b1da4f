"""cli-web-search.

A multi-provider web search tool for humans and AI agents with:
- Eight interchangeable search backends behind one provider interface
- Ordered fallback with retry and exponential backoff
- In-memory result caching with TTL and bounded size
- JSON, Markdown and plain text output
- Web page fetching with text/Markdown conversion
- A JSON-RPC (MCP) tool server over stdio

Example:
    ```python
    import asyncio

    from cli_web_search import SearchManager, build_registry, load_config

    config = load_config()
    manager = SearchManager(build_registry(config), cache_config=config.cache)
    response = asyncio.run(manager.search("python asyncio"))
    for result in response.results:
        print(result.position, result.title, result.url)
    ```
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - best-effort during development
    __version__ = version("cli-web-search")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Submodules read __version__, so it is defined before they are imported.
from .core import SearchConfig, get_logger, load_config, setup_logging  # noqa: E402
from .search import (  # noqa: E402
    ProviderRegistry,
    SearchCache,
    SearchError,
    SearchManager,
    SearchOptions,
    SearchProvider,
    SearchResult,
    build_registry,
)

__all__ = [
    "ProviderRegistry",
    "SearchCache",
    "SearchConfig",
    "SearchError",
    "SearchManager",
    "SearchOptions",
    "SearchProvider",
    "SearchResult",
    "build_registry",
    "get_logger",
    "load_config",
    "setup_logging",
    "__version__",
]
