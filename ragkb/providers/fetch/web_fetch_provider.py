"""Web fetch provider using httpx, trafilatura and BeautifulSoup.

Fetches raw HTML via httpx and extracts the main text with trafilatura's
content extraction engine.  Pages trafilatura cannot make sense of (very
short pages, unusual markup) fall back to BeautifulSoup: ``<script>`` and
``<style>`` are dropped and the remaining body text is used as-is.

The title comes from trafilatura's metadata, then ``<title>``, then the
URL itself, so a stored document always has a non-empty title.
"""

from __future__ import annotations

import json

import httpx
import structlog
import trafilatura
from bs4 import BeautifulSoup

from ragkb.interfaces.fetch_provider import FetchedPage, IFetchProvider
from ragkb.utils.errors import FetchError
from ragkb.utils.text_normalizer import clean_content

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; ragkb/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


class WebFetchProvider(IFetchProvider):
    """Page fetcher backed by httpx + trafilatura with a BeautifulSoup fallback."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ) -> None:
        headers = dict(_DEFAULT_HEADERS)
        if user_agent:
            headers["User-Agent"] = user_agent
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # IFetchProvider implementation
    # ------------------------------------------------------------------

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch *url* and extract its title and readable text."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        html = response.text
        soup = BeautifulSoup(html, "html.parser")

        text = trafilatura.extract(html, include_comments=False, include_tables=True)
        if not text:
            logger.debug("trafilatura_extraction_empty", url=url)
            text = self._soup_body_text(soup)

        content = clean_content(text or "")
        if not content:
            raise FetchError(
                message=f"No readable content at {url}",
                provider_name=self.get_provider_name(),
            )

        title = self._extract_title(html, soup) or url

        logger.info(
            "page_fetched",
            url=url,
            title=title,
            status=response.status_code,
            text_length=len(content),
        )
        return FetchedPage(url=url, title=title, content=content)

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    def is_available(self) -> bool:
        """Always available — no external credentials required."""
        return True

    def get_provider_name(self) -> str:
        return "web_fetch"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _soup_body_text(soup: BeautifulSoup) -> str:
        for tag in soup(["script", "style"]):
            tag.decompose()
        root = soup.body or soup
        return root.get_text(separator="\n", strip=True)

    @staticmethod
    def _extract_title(html: str, soup: BeautifulSoup) -> str:
        metadata = trafilatura.extract(
            html,
            include_comments=False,
            output_format="json",
            with_metadata=True,
        )
        if metadata:
            try:
                title = (json.loads(metadata).get("title") or "").strip()
            except (json.JSONDecodeError, AttributeError):
                title = ""
            if title:
                return title

        if soup.title and soup.title.string:
            return soup.title.string.strip()
        return ""
