"""Facade over the pipeline: the operations downstream tools call.

An HTTP router or protocol adapter (neither lives in this package) talks
to :class:`KnowledgeService` only.  Every method is a thin delegation to
one of the collaborating services plus input validation, so the facade
is the one place where "what can a caller ask for" is spelled out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ragkb.models import (
    Chunk,
    ChunkVector,
    Document,
    KnowledgeGraph,
    QueryResult,
    QueueItem,
    StoreStats,
    SubmissionOutcome,
    SubmissionStatus,
)
from ragkb.utils.errors import InvalidInputError

if TYPE_CHECKING:
    from ragkb.interfaces.knowledge_store import IKnowledgeStore
    from ragkb.services.ingestion.ingestion_service import IngestionService
    from ragkb.services.lifecycle_service import LifecycleService
    from ragkb.services.query_service import QueryService

logger = structlog.get_logger(logger_name=__name__)


def _require_url(url: str | None) -> str:
    if not url or not url.strip():
        raise InvalidInputError(message="URL is required")
    return url.strip()


class KnowledgeService:
    """Single entry point for submissions, queries, queue and document reads."""

    def __init__(
        self,
        store: IKnowledgeStore,
        ingestion_service: IngestionService,
        query_service: QueryService,
        lifecycle_service: LifecycleService,
    ) -> None:
        self._store = store
        self._ingestion = ingestion_service
        self._query = query_service
        self._lifecycle = lifecycle_service

    # -- Submissions -------------------------------------------------------

    async def submit_document(
        self,
        url: str,
        title: str | None = None,
        content: str | None = None,
    ) -> SubmissionOutcome:
        """Ingest *content* inline, or queue *url* when no content is given."""
        url = _require_url(url)
        if not content:
            return await self.enqueue_url(url)

        result = await self._ingestion.ingest_inline(url, title, content)
        logger.info("document_submitted", url=url, document_id=result.document_id)
        return SubmissionOutcome(
            status=SubmissionStatus.CREATED,
            url=url,
            document_id=result.document_id,
        )

    async def enqueue_url(self, url: str) -> SubmissionOutcome:
        url = _require_url(url)
        item = await self._store.enqueue(url)
        return SubmissionOutcome(status=SubmissionStatus.ACCEPTED, url=url, queue_id=item.id)

    # -- Retrieval ---------------------------------------------------------

    async def query(self, text: str, limit: int | None = None) -> list[QueryResult]:
        return await self._query.query(text, limit=limit)

    async def get_graph(self, query: str = "") -> KnowledgeGraph:
        return await self._query.get_graph(query)

    # -- Queue and lifecycle -----------------------------------------------

    async def list_queue(self) -> list[QueueItem]:
        return await self._store.list_queue()

    async def delete_by_id(self, queue_id: int) -> dict[str, int]:
        return await self._lifecycle.delete_by_id(queue_id)

    async def reindex_by_id(self, queue_id: int) -> dict[str, int]:
        return await self._lifecycle.reindex_by_id(queue_id)

    # -- Document reads ----------------------------------------------------

    async def get_document(self, document_id: int) -> Document:
        return await self._store.get_document(document_id)

    async def get_chunks(self, document_id: int) -> list[Chunk]:
        await self._store.get_document(document_id)
        return await self._store.get_chunks(document_id)

    async def get_vectors(self, document_id: int) -> list[ChunkVector]:
        await self._store.get_document(document_id)
        return await self._store.get_chunk_vectors(document_id)

    async def get_graph_for_document(self, document_id: int) -> KnowledgeGraph:
        await self._store.get_document(document_id)
        return await self._store.get_document_graph(document_id)

    async def get_stats(self) -> StoreStats:
        return await self._store.get_stats()
