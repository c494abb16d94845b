"""ragkb composition root.

Wires every provider and service together via constructor injection.
Configuration comes from ``config/config.yaml`` merged with ``RAGKB_*``
environment variables (see :mod:`ragkb.config.loader`); callers that
already hold a :class:`Settings` (tests, the CLI) pass it directly.

Nothing else in the package constructs concrete providers, so swapping
the hash vectorizer or the SQLite store is a change to this file only.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ragkb.config.loader import load_config, settings_from_config
from ragkb.config.settings import Settings
from ragkb.interfaces.fetch_provider import IFetchProvider
from ragkb.interfaces.knowledge_store import IKnowledgeStore
from ragkb.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from ragkb.providers.fetch.web_fetch_provider import WebFetchProvider
from ragkb.providers.store.sqlite_knowledge_store import SQLiteKnowledgeStore
from ragkb.services.extraction.entity_extractor import EntityExtractor
from ragkb.services.extraction.lexical_classifier import LexicalClassifier
from ragkb.services.ingestion.chunker import TextChunker
from ragkb.services.ingestion.ingestion_service import IngestionService
from ragkb.services.knowledge_service import KnowledgeService
from ragkb.services.lifecycle_service import LifecycleService
from ragkb.services.query_service import QueryService
from ragkb.services.queue.worker_pool import WorkerPool

logger = structlog.get_logger(logger_name=__name__)


@dataclass
class Application:
    """Everything a process needs, built once at startup."""

    settings: Settings
    store: IKnowledgeStore
    fetcher: IFetchProvider
    ingestion: IngestionService
    knowledge: KnowledgeService
    worker_pool: WorkerPool

    async def close(self) -> None:
        """Wait for detached extraction work, then release the HTTP client."""
        await self.ingestion.drain_background_tasks()
        await self.fetcher.close()


def load_settings(config_path: str = "config/config.yaml") -> Settings:
    """YAML defaults overlaid with explicitly set environment variables."""
    return settings_from_config(load_config(config_path))


async def build_application(
    settings: Settings | None = None,
    fetcher: IFetchProvider | None = None,
) -> Application:
    """Construct and initialize all services with injected dependencies.

    Parameters
    ----------
    settings:
        Application settings.  Loaded from config + environment if omitted.
    fetcher:
        Override for the web fetcher (tests pass a canned one).
    """
    s = settings or load_settings()

    store = SQLiteKnowledgeStore(db_path=s.database_path, busy_timeout=s.database_busy_timeout)
    await store.initialize()

    embedding_provider = HashEmbeddingProvider(dimension=s.embedding_dimension)
    classifier = LexicalClassifier.default()
    if fetcher is None:
        fetcher = WebFetchProvider(timeout=s.fetch_timeout_seconds, user_agent=s.fetch_user_agent)

    ingestion = IngestionService(
        chunker=TextChunker(max_chunk_chars=s.max_chunk_chars),
        extractor=EntityExtractor(classifier),
        embedding_provider=embedding_provider,
        store=store,
        fetcher=fetcher,
    )
    query = QueryService(
        store=store,
        embedding_provider=embedding_provider,
        classifier=classifier,
        max_distance=s.similarity_threshold,
        result_limit=s.query_result_limit,
    )
    lifecycle = LifecycleService(store=store, ingestion_service=ingestion)
    knowledge = KnowledgeService(
        store=store,
        ingestion_service=ingestion,
        query_service=query,
        lifecycle_service=lifecycle,
    )
    worker_pool = WorkerPool(
        store=store,
        ingestion_service=ingestion,
        worker_count=s.worker_count,
        poll_interval=s.poll_interval_seconds,
    )

    logger.info(
        "application_built",
        store=store.get_provider_name(),
        embedding=embedding_provider.get_provider_name(),
        fetcher=fetcher.get_provider_name(),
        app_env=s.app_env,
    )
    return Application(
        settings=s,
        store=store,
        fetcher=fetcher,
        ingestion=ingestion,
        knowledge=knowledge,
        worker_pool=worker_pool,
    )
