"""Page fetch providers.

One implementation of IFetchProvider:
    WebFetchProvider — httpx GET, trafilatura main-text extraction, and a
    BeautifulSoup body-text fallback for pages trafilatura rejects.
"""

from ragkb.providers.fetch.web_fetch_provider import WebFetchProvider

__all__ = ["WebFetchProvider"]
