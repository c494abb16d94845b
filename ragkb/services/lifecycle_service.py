"""Delete and reindex workflows for ingested URLs.

Deletion never relies on database-level cascades.  The store removes a
document's dependents in a fixed order (edges, nodes, chunks, then the
document) and the queue row is only *soft*-deleted, so the queue keeps
an audit trail of every URL it has seen.

Two reindex variants exist and must not run concurrently for the same URL:

- :meth:`LifecycleService.reindex_url` deletes and re-ingests right away,
  claiming the queue row itself so no worker picks it up meanwhile.
- :meth:`LifecycleService.reindex_by_id` deletes and puts the row back
  to ``pending``; a worker does the fetch later.

Node and edge ids are not preserved across a reindex.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ragkb.models import IngestionResult, QueueStatus
from ragkb.utils.errors import InvalidInputError, InvalidStateTransitionError, NotFoundError

if TYPE_CHECKING:
    from ragkb.interfaces.knowledge_store import IKnowledgeStore
    from ragkb.services.ingestion.ingestion_service import IngestionService

logger = structlog.get_logger(logger_name=__name__)


class LifecycleService:
    """Cascading delete and reindex for queued URLs."""

    def __init__(self, store: IKnowledgeStore, ingestion_service: IngestionService) -> None:
        self._store = store
        self._ingestion = ingestion_service

    async def delete_url(self, url: str) -> dict[str, int]:
        """Soft-delete the queue row for *url* and remove its document.

        Returns
        -------
        dict[str, int]
            Rows removed per step (``edges``, ``nodes``, ``chunks``,
            ``documents``).  Zero counts are normal.

        Raises
        ------
        NotFoundError
            If *url* was never queued.
        """
        if not url or not url.strip():
            raise InvalidInputError(message="URL is required")

        item = await self._store.get_queue_item_by_url(url)
        if item is None:
            raise NotFoundError(message=f"No queue entry for {url}")

        if item.status is not QueueStatus.DELETED:
            await self._store.soft_delete_queue_item(item.id)
        counts = await self._store.delete_document_cascade(url)

        logger.info("url_deleted", url=url, queue_id=item.id, **counts)
        return counts

    async def delete_by_id(self, queue_id: int) -> dict[str, int]:
        """Resolve *queue_id* to its URL and delete it."""
        item = await self._store.get_queue_item(queue_id)
        return await self.delete_url(item.url)

    async def reindex_url(self, url: str) -> IngestionResult | None:
        """Delete *url* and immediately ingest it again.

        Returns ``None`` if a worker claimed the re-queued row first; that
        worker then performs the ingestion.
        """
        await self.delete_url(url)

        item = await self._store.get_queue_item_by_url(url)
        await self._store.reset_queue_item(item.id)
        if not await self._store.claim_item(item.id):
            logger.info("reindex_claimed_by_worker", url=url, queue_id=item.id)
            return None

        return await self._ingestion.ingest_from_url(url, queue_id=item.id)

    async def reindex_by_id(self, queue_id: int) -> dict[str, int]:
        """Remove the document for *queue_id* and re-queue the row as ``pending``.

        Raises
        ------
        NotFoundError
            If *queue_id* does not exist.
        InvalidStateTransitionError
            If a worker is processing the item right now.
        """
        item = await self._store.get_queue_item(queue_id)
        if item.status is QueueStatus.PROCESSING:
            raise InvalidStateTransitionError(
                message=f"Queue item {queue_id} is being processed; retry once it finishes"
            )

        counts = await self._store.delete_document_cascade(item.url)
        if item.status is not QueueStatus.PENDING:
            await self._store.reset_queue_item(queue_id)

        logger.info("url_requeued", url=item.url, queue_id=queue_id, **counts)
        return counts
