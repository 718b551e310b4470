import asyncio
import logging
from typing import Optional

import httpx

from app.features.evaluation.schemas.content import ExtractedContent
from app.features.evaluation.services.extraction.parsers import (
    ContentParser,
    HtmlContentParser,
    MarkdownContentParser,
)
from app.platform.config import Settings

logger = logging.getLogger(__name__)

_REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36 ProductEvaluator/1.0"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9",
}


class ContentExtractor:
    """
    Fetches a product page and turns it into ExtractedContent.

    Strategy 1 renders the page through Firecrawl (handles client-side apps)
    when an API key is configured. Strategy 2 is a plain GET bounded by
    `fetch_timeout`. Failures never raise: the caller gets
    `ExtractedContent.empty(error)`. No retries happen here.
    """

    def __init__(
        self,
        firecrawl_api_key: Optional[str] = None,
        firecrawl_api_url: str = "https://api.firecrawl.dev/v1/scrape",
        fetch_timeout: float = 15.0,
        render_timeout: float = 30.0,
        html_parser: Optional[ContentParser] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.firecrawl_api_key = firecrawl_api_key
        self.firecrawl_api_url = firecrawl_api_url
        self.fetch_timeout = fetch_timeout
        self.render_timeout = render_timeout
        self.html_parser = html_parser or HtmlContentParser()
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ContentExtractor":
        return cls(
            firecrawl_api_key=settings.FIRECRAWL_API_KEY,
            firecrawl_api_url=settings.FIRECRAWL_API_URL,
            fetch_timeout=settings.FETCH_TIMEOUT_SECONDS,
            render_timeout=settings.RENDER_TIMEOUT_SECONDS,
            **kwargs,
        )

    async def extract(self, url: str) -> ExtractedContent:
        rendered = await self.scrape_rendered(url)
        if rendered is not None:
            return rendered

        return await self.scrape_direct(url)

    async def scrape_rendered(self, url: str) -> Optional[ExtractedContent]:
        """JS-rendering scrape. None means "unavailable, use the fallback"."""
        if not self.firecrawl_api_key:
            logger.info("FIRECRAWL_API_KEY not set, skipping rendered scrape")
            return None

        payload = {
            "url": url,
            "formats": ["markdown", "html"],
            "timeout": int(self.render_timeout * 1000),
        }
        headers = {"Authorization": f"Bearer {self.firecrawl_api_key}"}

        try:
            # Leave headroom over the render timeout for the API round trip
            async with httpx.AsyncClient(
                timeout=self.render_timeout + 10, transport=self.transport
            ) as client:
                response = await client.post(self.firecrawl_api_url, json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning(f"Rendered scrape failed for {url}: {e}")
            return None

        if not isinstance(body, dict) or not body.get("success", True) or not isinstance(body.get("data"), dict):
            logger.warning(f"Rendered scrape returned no document for {url}")
            return None

        document = body["data"]
        markdown = document.get("markdown") or ""
        html = document.get("html") or ""
        metadata = document.get("metadata") or {}

        if not markdown and not html:
            logger.warning(f"Rendered scrape returned empty content for {url}")
            return None

        logger.info(f"Rendered scrape returned {len(markdown)} chars of markdown for {url}")

        if not markdown:
            parser = self.html_parser
            markup = html
        else:
            parser = MarkdownContentParser(
                html=html,
                title=metadata.get("title"),
                description=metadata.get("description"),
            )
            markup = markdown

        try:
            return parser.extract(markup)
        except Exception as e:
            logger.warning(f"Parsing rendered content for {url} failed: {e}")
            return None

    async def scrape_direct(self, url: str) -> ExtractedContent:
        """Plain fetch without JS rendering, cancelled once `fetch_timeout` elapses."""
        try:
            response = await asyncio.wait_for(self._get(url), timeout=self.fetch_timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning(f"Fetching {url} timed out after {self.fetch_timeout:g}s")
            return ExtractedContent.empty(f"Request timed out after {self.fetch_timeout:g} seconds")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Fetching {url} failed: {e}")
            return ExtractedContent.empty(str(e) or "Failed to fetch website")

        if not response.is_success:
            logger.warning(f"Fetching {url} returned HTTP {response.status_code}")
            return ExtractedContent.empty(f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            return self.html_parser.extract(response.text)
        except Exception as e:
            logger.warning(f"Parsing {url} failed: {e}")
            return ExtractedContent.empty(f"Failed to parse page: {e}")

    async def _get(self, url: str) -> httpx.Response:
        # Per-operation timeouts alone do not bound a body that trickles in
        async with httpx.AsyncClient(
            timeout=self.fetch_timeout,
            follow_redirects=True,
            headers=_REQUEST_HEADERS,
            transport=self.transport,
        ) as client:
            return await client.get(url)
