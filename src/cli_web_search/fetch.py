"""Fetch a web page and convert it to text, Markdown or raw HTML."""

from __future__ import annotations

import html
import re
import time
from enum import Enum
from urllib.parse import urlparse

import html2text
import httpx
from pydantic import BaseModel, Field

from . import __version__
from .core.logger import get_logger
from .exceptions import SearchNetworkError, SearchProviderError, SearchTimeoutError

logger = get_logger("fetch")

FETCH_PROVIDER = "fetch"
MAX_REDIRECTS = 10

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title", re.IGNORECASE | re.DOTALL)
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_FILENAME_CHARS_RE = re.compile(r"[^\w-]")


class ContentFormat(str, Enum):
    """Output format for fetched pages."""

    TEXT = "text"
    HTML = "html"
    MARKDOWN = "markdown"


_EXTENSIONS = {
    ContentFormat.TEXT: "txt",
    ContentFormat.HTML: "html",
    ContentFormat.MARKDOWN: "md",
}


class FetchOptions(BaseModel):
    """Options for fetching URLs."""

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    format: ContentFormat = Field(default=ContentFormat.TEXT)
    follow_redirects: bool = Field(default=True)
    max_length: int = Field(
        default=0, ge=0, description="Truncate the raw HTML to this many characters (0 = no limit)"
    )
    user_agent: str = Field(default=f"cli-web-search/{__version__}")


class FetchResponse(BaseModel):
    """A fetched page after conversion."""

    url: str
    final_url: str
    status: int
    content_type: str | None = None
    content: str
    content_length: int = Field(description="Size of the converted content in bytes")
    title: str | None = None


def extract_title(document: str) -> str | None:
    """Return the decoded ``<title>`` text of an HTML document, if any."""
    match = _TITLE_RE.search(document)
    if not match:
        return None
    title = " ".join(html.unescape(match.group(1)).split())
    return title or None


def html_to_text(document: str) -> str:
    """Convert HTML to plain text without links, images or emphasis markers."""
    converter = html2text.HTML2Text()
    converter.ignore_links = True
    converter.ignore_images = True
    converter.ignore_emphasis = True
    converter.body_width = 0
    text = converter.handle(document)
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def html_to_markdown(document: str) -> str:
    """Convert HTML to Markdown, keeping links."""
    converter = html2text.HTML2Text()
    converter.ignore_links = False
    converter.body_width = 0
    return _BLANK_LINES_RE.sub("\n\n", converter.handle(document)).strip()


def convert_content(document: str, content_format: ContentFormat) -> str:
    if content_format is ContentFormat.HTML:
        return document
    if content_format is ContentFormat.MARKDOWN:
        return html_to_markdown(document)
    return html_to_text(document)


class Fetcher:
    """Downloads a single page and converts it according to :class:`FetchOptions`."""

    def __init__(
        self,
        options: FetchOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            options: Fetch options (defaults when omitted)
            client: HTTP client to use instead of a per-call one
        """
        self.options = options or FetchOptions()
        self._client = client

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"User-Agent": self.options.user_agent},
            follow_redirects=self.options.follow_redirects,
            max_redirects=MAX_REDIRECTS,
            timeout=self.options.timeout,
        )

    async def fetch(self, url: str) -> FetchResponse:
        """Fetch ``url`` and return its converted content.

        Args:
            url: Absolute ``http`` or ``https`` URL

        Returns:
            FetchResponse with the converted content

        Raises:
            SearchProviderError: For invalid URLs and non-2xx responses
            SearchTimeoutError: If the request exceeds ``options.timeout``
            SearchNetworkError: For other transport failures
        """
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise SearchProviderError(f"Invalid URL: {url}", provider=FETCH_PROVIDER)
        if parsed.scheme not in ("http", "https"):
            raise SearchProviderError(
                f"Unsupported URL scheme: {parsed.scheme}", provider=FETCH_PROVIDER
            )

        logger.info("Fetching %s", url)
        if self._client is not None:
            response = await self._get(self._client, url)
        else:
            async with self._new_client() as client:
                response = await self._get(client, url)

        if not response.is_success:
            reason = response.reason_phrase or "Unknown"
            raise SearchProviderError(
                f"HTTP {response.status_code}: {reason}", provider=FETCH_PROVIDER
            )

        document = response.text
        if self.options.max_length and len(document) > self.options.max_length:
            document = document[: self.options.max_length]

        content = convert_content(document, self.options.format)
        logger.debug("Fetched %s (%d bytes after conversion)", response.url, len(content))

        return FetchResponse(
            url=url,
            final_url=str(response.url),
            status=response.status_code,
            content_type=response.headers.get("content-type"),
            content=content,
            content_length=len(content.encode("utf-8")),
            title=extract_title(document),
        )

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            return await client.get(
                url,
                follow_redirects=self.options.follow_redirects,
                timeout=self.options.timeout,
            )
        except httpx.TimeoutException as exc:
            raise SearchTimeoutError(self.options.timeout, provider=FETCH_PROVIDER) from exc
        except httpx.RequestError as exc:
            raise SearchNetworkError(str(exc) or type(exc).__name__, provider=FETCH_PROVIDER) from exc


def generate_filename_from_url(
    url: str,
    content_format: ContentFormat = ContentFormat.TEXT,
    as_json: bool = False,
) -> str:
    """Build a unique file name for a fetched page.

    The name is the host, then the path with ``/`` turned into ``_`` and other
    unsafe characters removed (at most 50 characters), then a Unix timestamp.

    Example:
        ``https://example.com/docs/page`` fetched as Markdown gives
        ``example.com_docs_page_1700000000.md``.
    """
    parsed = urlparse(url)
    host = parsed.hostname or "unknown"
    path_part = _FILENAME_CHARS_RE.sub("", parsed.path.replace("/", "_"))[:50]
    extension = "json" if as_json else _EXTENSIONS[ContentFormat(content_format)]
    return f"{host}{path_part}_{int(time.time())}.{extension}"
