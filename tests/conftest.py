"""Shared pytest fixtures for the ragkb test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio

from ragkb.interfaces.fetch_provider import FetchedPage, IFetchProvider
from ragkb.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from ragkb.providers.store.sqlite_knowledge_store import SQLiteKnowledgeStore
from ragkb.services.extraction.entity_extractor import EntityExtractor
from ragkb.services.extraction.lexical_classifier import LexicalClassifier
from ragkb.services.ingestion.chunker import TextChunker
from ragkb.services.ingestion.ingestion_service import IngestionService
from ragkb.utils.errors import FetchError

ALICE_TEXT = "Alice Smith works at Acme Corp. She lives in Paris."

# Small dimension keeps vector tests fast; the algorithm is dimension-agnostic.
TEST_DIMENSION = 64


# ---------------------------------------------------------------------------
# Stub collaborators
# ---------------------------------------------------------------------------


class StubFetcher(IFetchProvider):
    """Returns canned pages keyed by URL; unknown URLs raise FetchError."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages: dict[str, str] = dict(pages or {})
        self.calls: list[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(message=f"HTTP 404 for {url}", provider_name="stub")
        return FetchedPage(url=url, title=f"Title of {url}", content=self.pages[url])

    def get_provider_name(self) -> str:
        return "stub"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def classifier() -> LexicalClassifier:
    return LexicalClassifier.default()


@pytest.fixture
def embedding_provider() -> HashEmbeddingProvider:
    return HashEmbeddingProvider(dimension=TEST_DIMENSION)


@pytest.fixture
def extractor(classifier: LexicalClassifier) -> EntityExtractor:
    return EntityExtractor(classifier)


@pytest.fixture
def alice_text() -> str:
    return ALICE_TEXT


@pytest.fixture
def fetcher_factory() -> type[StubFetcher]:
    """The stub fetcher class, for tests that need their own canned pages."""
    return StubFetcher


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher({"https://x/a": ALICE_TEXT})


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> SQLiteKnowledgeStore:
    """An initialized store backed by a temp SQLite file."""
    knowledge_store = SQLiteKnowledgeStore(db_path=tmp_path / "ragkb_test.db", busy_timeout=5.0)
    await knowledge_store.initialize()
    return knowledge_store


@pytest.fixture
def ingestion_service(
    store: SQLiteKnowledgeStore,
    embedding_provider: HashEmbeddingProvider,
    extractor: EntityExtractor,
    stub_fetcher: StubFetcher,
) -> IngestionService:
    """A real ingestion service over the temp store and the stub fetcher."""
    return IngestionService(
        chunker=TextChunker(max_chunk_chars=200),
        extractor=extractor,
        embedding_provider=embedding_provider,
        store=store,
        fetcher=stub_fetcher,
    )
