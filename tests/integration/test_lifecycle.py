"""Integration tests for delete and reindex over a real store and ingestion path."""

from __future__ import annotations

import pytest

from ragkb.models import QueueStatus
from ragkb.providers.store.sqlite_knowledge_store import SQLiteKnowledgeStore
from ragkb.services.ingestion.ingestion_service import IngestionService
from ragkb.services.lifecycle_service import LifecycleService
from ragkb.utils.errors import InvalidInputError, InvalidStateTransitionError, NotFoundError

URL = "https://x/a"


@pytest.fixture
def lifecycle(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> LifecycleService:
    return LifecycleService(store=store, ingestion_service=ingestion_service)


async def _ingest_queued(store: SQLiteKnowledgeStore, ingestion: IngestionService) -> int:
    """Queue URL, claim it and ingest it the way a worker would."""
    item = await store.enqueue(URL)
    claimed = await store.claim_next()
    assert claimed is not None and claimed.id == item.id
    await ingestion.ingest_from_url(URL, queue_id=item.id)
    await ingestion.drain_background_tasks()
    return item.id


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_document_and_soft_deletes_row(
        self,
        store: SQLiteKnowledgeStore,
        ingestion_service: IngestionService,
        lifecycle: LifecycleService,
    ) -> None:
        queue_id = await _ingest_queued(store, ingestion_service)

        counts = await lifecycle.delete_url(URL)

        assert counts["documents"] == 1
        assert counts["chunks"] >= 1
        assert counts["nodes"] == 3
        assert counts["edges"] == 1
        assert (await store.get_queue_item(queue_id)).status is QueueStatus.DELETED
        assert await store.list_queue() == []
        assert await store.get_document_by_url(URL) is None
        stats = await store.get_stats()
        assert (stats.documents, stats.chunks, stats.nodes, stats.edges) == (0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_second_delete_is_harmless(
        self,
        store: SQLiteKnowledgeStore,
        ingestion_service: IngestionService,
        lifecycle: LifecycleService,
    ) -> None:
        await _ingest_queued(store, ingestion_service)
        await lifecycle.delete_url(URL)
        counts = await lifecycle.delete_url(URL)
        assert counts == {"edges": 0, "nodes": 0, "chunks": 0, "documents": 0}

    @pytest.mark.asyncio
    async def test_delete_pending_item_without_document(
        self, store: SQLiteKnowledgeStore, lifecycle: LifecycleService
    ) -> None:
        item = await store.enqueue(URL)
        counts = await lifecycle.delete_by_id(item.id)
        assert counts["documents"] == 0
        assert (await store.get_queue_item(item.id)).status is QueueStatus.DELETED

    @pytest.mark.asyncio
    async def test_unknown_targets(self, lifecycle: LifecycleService) -> None:
        with pytest.raises(NotFoundError):
            await lifecycle.delete_url("https://never/queued")
        with pytest.raises(NotFoundError):
            await lifecycle.delete_by_id(12345)
        with pytest.raises(InvalidInputError):
            await lifecycle.delete_url("  ")


class TestReindex:
    @pytest.mark.asyncio
    async def test_reindex_url_ingests_again(
        self,
        store: SQLiteKnowledgeStore,
        ingestion_service: IngestionService,
        lifecycle: LifecycleService,
    ) -> None:
        queue_id = await _ingest_queued(store, ingestion_service)
        old_doc = await store.get_document_by_url(URL)

        result = await lifecycle.reindex_url(URL)
        await ingestion_service.drain_background_tasks()

        assert result is not None
        assert result.document_id != old_doc.id
        assert (await store.get_queue_item(queue_id)).status is QueueStatus.COMPLETED
        graph = await store.get_knowledge_graph("")
        assert graph.node_names() == {"Alice Smith", "Acme Corp", "Paris"}
        assert {n.document_id for n in graph.nodes} == {result.document_id}

    @pytest.mark.asyncio
    async def test_reindex_by_id_requeues_finished_item(
        self,
        store: SQLiteKnowledgeStore,
        ingestion_service: IngestionService,
        lifecycle: LifecycleService,
    ) -> None:
        queue_id = await _ingest_queued(store, ingestion_service)

        counts = await lifecycle.reindex_by_id(queue_id)

        assert counts["documents"] == 1
        item = await store.get_queue_item(queue_id)
        assert item.status is QueueStatus.PENDING
        assert item.document_id is None
        claimed = await store.claim_next()
        assert claimed is not None and claimed.id == queue_id

    @pytest.mark.asyncio
    async def test_reindex_by_id_of_failed_item_clears_error(
        self, store: SQLiteKnowledgeStore, lifecycle: LifecycleService
    ) -> None:
        item = await store.enqueue(URL)
        await store.claim_next()
        await store.mark_failed(item.id, "HTTP 503")

        await lifecycle.reindex_by_id(item.id)

        requeued = await store.get_queue_item(item.id)
        assert requeued.status is QueueStatus.PENDING
        assert requeued.error is None
        assert requeued.retry_count == 0

    @pytest.mark.asyncio
    async def test_reindex_by_id_leaves_pending_item_pending(
        self, store: SQLiteKnowledgeStore, lifecycle: LifecycleService
    ) -> None:
        item = await store.enqueue(URL)
        await lifecycle.reindex_by_id(item.id)
        assert (await store.get_queue_item(item.id)).status is QueueStatus.PENDING

    @pytest.mark.asyncio
    async def test_reindex_by_id_refuses_processing_item(
        self, store: SQLiteKnowledgeStore, lifecycle: LifecycleService
    ) -> None:
        item = await store.enqueue(URL)
        await store.claim_next()
        with pytest.raises(InvalidStateTransitionError):
            await lifecycle.reindex_by_id(item.id)
        assert (await store.get_queue_item(item.id)).status is QueueStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_reindex_unknown_id(self, lifecycle: LifecycleService) -> None:
        with pytest.raises(NotFoundError):
            await lifecycle.reindex_by_id(999)
