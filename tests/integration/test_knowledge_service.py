"""Integration tests for the composed application and its KnowledgeService facade."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio

from ragkb.config.settings import Settings
from ragkb.main import Application, build_application
from ragkb.models import QueueStatus, SubmissionStatus
from ragkb.utils.errors import InvalidInputError, InvalidStateTransitionError, NotFoundError

ALICE = "Alice Smith works at Acme Corp. She lives in Paris."


@pytest_asyncio.fixture
async def app(tmp_path: Path, fetcher_factory) -> Application:  # noqa: ANN001
    settings = Settings(
        _env_file=None,
        database_path=str(tmp_path / "app.db"),
        database_busy_timeout=5.0,
        embedding_dimension=64,
        max_chunk_chars=40,
        similarity_threshold=2.0,
        worker_count=2,
        poll_interval_seconds=0.02,
    )
    fetcher = fetcher_factory({"https://x/remote": "Bob Stone studied at Stanford University."})
    application = await build_application(settings, fetcher=fetcher)
    yield application
    await application.close()


class TestSubmission:
    @pytest.mark.asyncio
    async def test_inline_submission_is_created_and_extracted(self, app: Application) -> None:
        outcome = await app.knowledge.submit_document("https://x/a", content=ALICE)

        assert outcome.status is SubmissionStatus.CREATED
        assert outcome.document_id is not None
        doc = await app.knowledge.get_document(outcome.document_id)
        assert doc.title == "https://x/a"
        graph = await app.knowledge.get_graph_for_document(outcome.document_id)
        assert graph.node_names() == {"Alice Smith", "Acme Corp", "Paris"}

    @pytest.mark.asyncio
    async def test_submission_without_content_is_queued(self, app: Application) -> None:
        outcome = await app.knowledge.submit_document("https://x/remote")

        assert outcome.status is SubmissionStatus.ACCEPTED
        [item] = await app.knowledge.list_queue()
        assert (item.id, item.status) == (outcome.queue_id, QueueStatus.PENDING)

    @pytest.mark.asyncio
    async def test_url_is_required(self, app: Application) -> None:
        with pytest.raises(InvalidInputError):
            await app.knowledge.submit_document("", content=ALICE)
        with pytest.raises(InvalidInputError):
            await app.knowledge.enqueue_url("   ")

    @pytest.mark.asyncio
    async def test_queued_url_is_processed_by_the_pool(self, app: Application) -> None:
        outcome = await app.knowledge.enqueue_url("https://x/remote")

        app.worker_pool.start()
        for _ in range(500):
            item = await app.store.get_queue_item(outcome.queue_id)
            if item.status.is_terminal:
                break
            await asyncio.sleep(0.02)
        await app.worker_pool.stop()

        assert item.status is QueueStatus.COMPLETED
        graph = await app.knowledge.get_graph("stan")
        assert graph.node_names() == {"Stanford University"}


class TestReads:
    @pytest.mark.asyncio
    async def test_query_ranks_matching_chunk_first(self, app: Application) -> None:
        await app.knowledge.submit_document(
            "https://x/a",
            content="The river runs north. Acme Corp opened an office in Paris. Bread is baked daily.",
        )
        results = await app.knowledge.query("acme paris")

        assert results
        assert "Acme Corp" in results[0].content
        assert results[0].keyword_score == 1.0
        assert results[0].url == "https://x/a"

    @pytest.mark.asyncio
    async def test_empty_query_rejected(self, app: Application) -> None:
        with pytest.raises(InvalidInputError):
            await app.knowledge.query("  ")

    @pytest.mark.asyncio
    async def test_document_reads(self, app: Application) -> None:
        outcome = await app.knowledge.submit_document("https://x/a", "Alice", ALICE)

        chunks = await app.knowledge.get_chunks(outcome.document_id)
        vectors = await app.knowledge.get_vectors(outcome.document_id)
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        assert [v.content for v in vectors] == [c.content for c in chunks]
        assert all(len(v.embedding) == 64 for v in vectors)

        for read in (
            app.knowledge.get_document,
            app.knowledge.get_chunks,
            app.knowledge.get_vectors,
            app.knowledge.get_graph_for_document,
        ):
            with pytest.raises(NotFoundError):
                await read(999)

    @pytest.mark.asyncio
    async def test_stats(self, app: Application) -> None:
        await app.knowledge.submit_document("https://x/a", content=ALICE)
        await app.knowledge.enqueue_url("https://x/remote")

        stats = await app.knowledge.get_stats()
        assert stats.documents == 1
        assert stats.nodes == 3
        assert stats.edges == 1
        assert stats.queue == {"pending": 1}


class TestLifecycleThroughFacade:
    @pytest.mark.asyncio
    async def test_delete_and_reindex_by_queue_id(self, app: Application) -> None:
        outcome = await app.knowledge.enqueue_url("https://x/remote")
        claimed = await app.store.claim_next()
        with pytest.raises(InvalidStateTransitionError):
            await app.knowledge.reindex_by_id(claimed.id)

        await app.ingestion.ingest_from_url(claimed.url, queue_id=claimed.id)
        await app.ingestion.drain_background_tasks()

        counts = await app.knowledge.reindex_by_id(outcome.queue_id)
        assert counts["documents"] == 1
        assert (await app.store.get_queue_item(outcome.queue_id)).status is QueueStatus.PENDING

        await app.knowledge.delete_by_id(outcome.queue_id)
        assert await app.knowledge.list_queue() == []
