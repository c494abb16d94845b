"""End-to-end tests for the worker pool draining the URL queue."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from ragkb.models import ClaimedItem, QueueStatus
from ragkb.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from ragkb.providers.store.sqlite_knowledge_store import SQLiteKnowledgeStore
from ragkb.services.extraction.entity_extractor import EntityExtractor
from ragkb.services.ingestion.chunker import TextChunker
from ragkb.services.ingestion.ingestion_service import IngestionService
from ragkb.services.queue.worker_pool import WorkerPool
from ragkb.utils.errors import PersistenceError

POLL = 0.02


async def _wait_until_finished(
    store: SQLiteKnowledgeStore, queue_ids: list[int], timeout: float = 10.0
) -> None:
    """Poll until every item has left pending/processing."""

    async def _poll() -> None:
        while True:
            items = [await store.get_queue_item(i) for i in queue_ids]
            if all(item.status.is_terminal for item in items):
                return
            await asyncio.sleep(POLL)

    await asyncio.wait_for(_poll(), timeout=timeout)


class CountingStore(SQLiteKnowledgeStore):
    """Records every successful claim."""

    def __init__(self, *args, **kwargs) -> None:  # noqa: ANN002, ANN003
        super().__init__(*args, **kwargs)
        self.claims: list[ClaimedItem] = []

    async def claim_next(self) -> ClaimedItem | None:
        item = await super().claim_next()
        if item is not None:
            self.claims.append(item)
        return item


@pytest_asyncio.fixture
async def counting_store(tmp_path: Path) -> CountingStore:
    counting = CountingStore(db_path=tmp_path / "counting.db", busy_timeout=5.0)
    await counting.initialize()
    return counting


@pytest.mark.asyncio
async def test_queued_url_reaches_the_graph(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> None:
    item = await store.enqueue("https://x/a")
    pool = WorkerPool(store, ingestion_service, worker_count=2, poll_interval=POLL)
    cancel = asyncio.Event()
    run = asyncio.create_task(pool.run_until_cancelled(cancel))

    await _wait_until_finished(store, [item.id])
    cancel.set()
    await run

    assert (await store.get_queue_item(item.id)).status is QueueStatus.COMPLETED
    assert pool.completed_count == 1
    assert pool.failed_count == 0
    # run_until_cancelled waits for the detached extraction.
    assert ingestion_service.pending_extractions == 0

    graph = await store.get_knowledge_graph("")
    assert graph.node_names("person") == {"Alice Smith"}
    assert graph.node_names("organization") == {"Acme Corp"}
    assert graph.node_names("location") == {"Paris"}
    assert [e.relationship_type for e in graph.edges] == ["works_at"]


@pytest.mark.asyncio
async def test_fetch_failure_marks_item_failed(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> None:
    item = await store.enqueue("https://x/missing")
    pool = WorkerPool(store, ingestion_service, worker_count=1, poll_interval=POLL)
    cancel = asyncio.Event()
    run = asyncio.create_task(pool.run_until_cancelled(cancel))

    await _wait_until_finished(store, [item.id])
    cancel.set()
    await run

    failed = await store.get_queue_item(item.id)
    assert failed.status is QueueStatus.FAILED
    assert failed.retry_count == 1
    assert "404" in failed.error
    assert pool.failed_count == 1
    assert await store.get_document_by_url("https://x/missing") is None


@pytest.mark.asyncio
async def test_completion_error_does_not_strand_item(
    store: SQLiteKnowledgeStore,
    ingestion_service: IngestionService,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    item = await store.enqueue("https://x/a")
    monkeypatch.setattr(
        store,
        "mark_completed",
        AsyncMock(side_effect=PersistenceError(message="database is locked", provider_name="sqlite")),
    )
    pool = WorkerPool(store, ingestion_service, worker_count=1, poll_interval=POLL)
    cancel = asyncio.Event()
    run = asyncio.create_task(pool.run_until_cancelled(cancel))

    await _wait_until_finished(store, [item.id])
    cancel.set()
    await run

    failed = await store.get_queue_item(item.id)
    assert failed.status is QueueStatus.FAILED
    assert failed.retry_count == 1
    assert "database is locked" in failed.error
    assert pool.failed_count == 1


@pytest.mark.asyncio
async def test_cancel_lets_claimed_item_finish(
    store: SQLiteKnowledgeStore,
    embedding_provider: HashEmbeddingProvider,
    extractor: EntityExtractor,
    fetcher_factory,  # noqa: ANN001
    alice_text: str,
) -> None:
    first, second = "https://x/first", "https://x/second"
    fetcher = fetcher_factory({first: alice_text, second: alice_text})
    started = asyncio.Event()
    release = asyncio.Event()
    plain_fetch = fetcher.fetch

    async def gated_fetch(url: str):  # noqa: ANN202
        started.set()
        await release.wait()
        return await plain_fetch(url)

    fetcher.fetch = gated_fetch
    ingestion = IngestionService(
        chunker=TextChunker(max_chunk_chars=200),
        extractor=extractor,
        embedding_provider=embedding_provider,
        store=store,
        fetcher=fetcher,
    )
    first_id = (await store.enqueue(first)).id
    second_id = (await store.enqueue(second)).id
    pool = WorkerPool(store, ingestion, worker_count=1, poll_interval=POLL)
    cancel = asyncio.Event()
    run = asyncio.create_task(pool.run_until_cancelled(cancel))

    await asyncio.wait_for(started.wait(), timeout=5.0)
    cancel.set()
    release.set()
    await asyncio.wait_for(run, timeout=5.0)

    assert run.done()
    assert (await store.get_queue_item(first_id)).status is QueueStatus.COMPLETED
    assert (await store.get_queue_item(second_id)).status is QueueStatus.PENDING
    assert fetcher.calls == [first]
    assert pool.completed_count == 1


@pytest.mark.asyncio
async def test_more_workers_than_items_claims_each_once(
    counting_store: CountingStore,
    embedding_provider: HashEmbeddingProvider,
    extractor: EntityExtractor,
    fetcher_factory,  # noqa: ANN001
) -> None:
    urls = [f"https://x/{i}" for i in range(3)]
    fetcher = fetcher_factory({url: f"Page {url} mentions Research." for url in urls})
    ingestion = IngestionService(
        chunker=TextChunker(max_chunk_chars=200),
        extractor=extractor,
        embedding_provider=embedding_provider,
        store=counting_store,
        fetcher=fetcher,
    )
    ids = [(await counting_store.enqueue(url)).id for url in urls]
    pool = WorkerPool(counting_store, ingestion, worker_count=5, poll_interval=POLL)

    pool.start()
    await _wait_until_finished(counting_store, ids)
    await pool.stop()

    claimed_ids = [c.id for c in counting_store.claims]
    assert sorted(claimed_ids) == sorted(ids)
    assert sorted(fetcher.calls) == sorted(urls)
    assert pool.completed_count == 3
    for queue_id in ids:
        assert (await counting_store.get_queue_item(queue_id)).status is QueueStatus.COMPLETED


@pytest.mark.asyncio
async def test_stop_on_idle_pool_returns_promptly(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> None:
    pool = WorkerPool(store, ingestion_service, worker_count=3, poll_interval=5.0)
    task = pool.start()
    await asyncio.sleep(POLL)

    # Idle workers wake on the cancel event rather than sleeping out the poll interval.
    await asyncio.wait_for(pool.stop(), timeout=2.0)
    assert task.done()


@pytest.mark.asyncio
async def test_start_twice_is_rejected(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> None:
    pool = WorkerPool(store, ingestion_service, worker_count=1, poll_interval=POLL)
    pool.start()
    try:
        with pytest.raises(RuntimeError):
            pool.start()
    finally:
        await pool.stop()


@pytest.mark.asyncio
async def test_stop_without_start_is_noop(
    store: SQLiteKnowledgeStore, ingestion_service: IngestionService
) -> None:
    pool = WorkerPool(store, ingestion_service)
    await pool.stop()


def test_worker_count_must_be_positive() -> None:
    with pytest.raises(ValueError, match="worker_count"):
        WorkerPool(MagicMock(spec=SQLiteKnowledgeStore), MagicMock(spec=IngestionService), worker_count=0)
