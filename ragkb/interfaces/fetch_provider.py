"""Abstract base class for remote page fetchers.

Defines the contract for retrieving a URL and reducing it to a title and
plain text.  The queue-driven ingestion path calls the fetcher once per
claimed URL; tests substitute a stub that returns canned text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedPage:
    """Readable content extracted from a remote page.

    Attributes
    ----------
    url:
        The URL that was requested.
    title:
        The page title, or the URL itself when the page has none.
    content:
        The main body text with markup stripped.  Never empty: a fetcher
        raises ``FetchError`` rather than returning a blank page.
    """

    url: str
    title: str
    content: str


class IFetchProvider(ABC):
    """Contract for services that turn a URL into title + body text."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedPage:
        """Retrieve *url* and extract its readable text.

        Parameters
        ----------
        url:
            The page to fetch.

        Returns
        -------
        FetchedPage
            The extracted title and content.

        Raises
        ------
        ragkb.utils.errors.FetchError
            On network failure, non-2xx status, or a page with no text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this fetcher."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the fetcher's dependencies are usable."""

    async def close(self) -> None:  # noqa: B027
        """Release any network resources held by the fetcher."""
