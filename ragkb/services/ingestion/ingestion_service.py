"""Orchestrator for the document ingestion pipeline.

Pipeline stages: **clean -> embed -> upsert -> chunk -> embed chunks -> extract**.

The :class:`IngestionService` implements the **Orchestrator pattern**: it
coordinates five collaborators (fetcher, chunker, entity extractor,
embedding provider, knowledge store) without any of them knowing about
each other.  Both entry points share one persistence path:

    ingest_inline(url, title, content)  -- caller already has the text
    ingest_from_url(url, queue_id)      -- fetch first; used by the workers

An ingestion is *successful* once the document and its chunks are
durable.  Entity extraction runs afterwards and is best-effort:

- inline ingestion awaits it before returning;
- URL ingestion spawns it as a detached task and returns immediately.
  The task is tracked so shutdown (and tests) can wait for it with
  :meth:`drain_background_tasks`.

Either way an extraction failure is logged and never rolls back the
document.  Failed extractions are not retried.

All dependencies are injected via constructor, so the hash vectorizer
can be swapped for a learned model without changing this class.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from ragkb.models import ChunkSpan, ExtractionResult, IngestionResult
from ragkb.services.extraction.entity_extractor import EntityExtractor
from ragkb.services.ingestion.chunker import TextChunker
from ragkb.utils.errors import (
    ConfigurationError,
    EmptyContentError,
    ExtractionError,
    RagKBError,
)
from ragkb.utils.text_normalizer import clean_content

if TYPE_CHECKING:
    from ragkb.interfaces.embedding_provider import IEmbeddingProvider
    from ragkb.interfaces.fetch_provider import IFetchProvider
    from ragkb.interfaces.knowledge_store import IKnowledgeStore

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Orchestrates ingestion: clean -> embed -> store -> chunk -> extract.

    Parameters
    ----------
    chunker:
        Splits cleaned text into sentence-aligned chunks with offsets.
    extractor:
        Finds entities and relationships for the knowledge graph.
    embedding_provider:
        Generates vectors for documents, chunks and entity names.
    store:
        Persists everything the pipeline produces.
    fetcher:
        Retrieves remote pages; required only by :meth:`ingest_from_url`.
    """

    def __init__(
        self,
        chunker: TextChunker,
        extractor: EntityExtractor,
        embedding_provider: IEmbeddingProvider,
        store: IKnowledgeStore,
        fetcher: IFetchProvider | None = None,
    ) -> None:
        self._chunker = chunker
        self._extractor = extractor
        self._embedding_provider = embedding_provider
        self._store = store
        self._fetcher = fetcher
        # Strong references keep detached extraction tasks alive until done.
        self._background_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest_inline(
        self,
        url: str | None,
        title: str | None,
        content: str,
    ) -> IngestionResult:
        """Ingest caller-supplied content, then extract entities before returning.

        Raises
        ------
        EmptyContentError
            If *content* is empty once cleaned.
        PersistenceError
            If the document or its chunks cannot be stored.
        """
        result, cleaned = await self._persist(url, title, content)
        await self._run_extraction(result.document_id, cleaned)
        return result

    async def ingest_from_url(self, url: str, queue_id: int | None = None) -> IngestionResult:
        """Fetch *url* and ingest it; extraction continues in the background.

        When *queue_id* is given the queue item (already ``processing``) is
        moved to ``completed`` on success or ``failed`` -- with the error
        recorded and the retry count bumped -- before the error propagates.
        A store error while recording completion counts as a failure too,
        so the item never stays stuck in ``processing``.

        Raises
        ------
        FetchError
            If the page cannot be retrieved or has no readable text.
        EmptyContentError
            If the fetched text is empty once cleaned.
        PersistenceError
            If the document or its chunks cannot be stored.
        """
        if self._fetcher is None:
            raise ConfigurationError(message="URL ingestion requires a fetch provider")

        try:
            page = await self._fetcher.fetch(url)
            result, cleaned = await self._persist(url, page.title, page.content)
            self._spawn_extraction(result.document_id, cleaned)
            if queue_id is not None:
                await self._store.mark_completed(queue_id)
        except Exception as exc:
            if queue_id is not None:
                await self._record_failure(queue_id, exc)
            logger.warning("url_ingestion_failed", url=url, queue_id=queue_id, error=str(exc))
            raise

        return result

    async def extract_and_store(self, document_id: int, text: str) -> tuple[int, int]:
        """Extract entities/relationships from *text* and persist them.

        Individual node or edge failures are logged and skipped.

        Returns
        -------
        tuple[int, int]
            Number of nodes and edges written.

        Raises
        ------
        ExtractionError
            If the extractor itself fails.
        """
        try:
            extraction: ExtractionResult = self._extractor.extract(text)
        except Exception as exc:
            raise ExtractionError(message=f"Extraction failed for document {document_id}: {exc}") from exc

        node_ids: dict[str, int] = {}
        for entity in extraction.entities:
            try:
                node_ids[entity.name] = await self._persist_node(
                    entity.name, entity.type.value, entity.properties, document_id
                )
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "entity_persist_failed",
                    document_id=document_id,
                    name=entity.name,
                    type=entity.type.value,
                    error=str(exc),
                )

        edge_count = 0
        for rel in extraction.relationships:
            source_id = node_ids.get(rel.source)
            target_id = node_ids.get(rel.target)
            if source_id is None or target_id is None:
                continue
            try:
                await self._store.upsert_edge(
                    source_id,
                    target_id,
                    rel.relationship_type.value,
                    rel.properties,
                    document_id,
                )
                edge_count += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "edge_persist_failed",
                    document_id=document_id,
                    source=rel.source,
                    target=rel.target,
                    relationship_type=rel.relationship_type.value,
                    error=str(exc),
                )

        logger.info(
            "knowledge_graph_updated",
            document_id=document_id,
            nodes=len(node_ids),
            edges=edge_count,
        )
        return len(node_ids), edge_count

    async def drain_background_tasks(self) -> None:
        """Wait for every detached extraction task spawned so far."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    @property
    def pending_extractions(self) -> int:
        return len(self._background_tasks)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _persist(
        self,
        url: str | None,
        title: str | None,
        content: str,
    ) -> tuple[IngestionResult, str]:
        """Clean, embed and store a document and its chunks."""
        start_time = time.monotonic()

        cleaned = clean_content(content)
        if not cleaned:
            raise EmptyContentError(message=f"No content to ingest for {url or 'inline document'}")

        resolved_title = title or url or ""
        embedding = await self._embedding_provider.embed_single(cleaned)
        document_id = await self._store.upsert_document(url, resolved_title, cleaned, embedding)

        spans: list[ChunkSpan] = self._chunker.chunk(cleaned)
        vectors = await self._embedding_provider.embed([span.text for span in spans])
        chunk_count = await self._store.replace_chunks(document_id, list(zip(spans, vectors)))

        elapsed = time.monotonic() - start_time
        logger.info(
            "document_ingested",
            document_id=document_id,
            url=url,
            chunk_count=chunk_count,
            content_length=len(cleaned),
            ingestion_time=round(elapsed, 3),
        )
        result = IngestionResult(
            document_id=document_id,
            url=url,
            title=resolved_title,
            chunk_count=chunk_count,
            ingestion_time=elapsed,
        )
        return result, cleaned

    async def _record_failure(self, queue_id: int, exc: Exception) -> None:
        """Move the item to ``failed``; the original error still propagates."""
        try:
            await self._store.mark_failed(queue_id, str(exc))
        except RagKBError as mark_exc:
            # e.g. the item was deleted mid-flight, or the store is still locked.
            logger.error(
                "queue_item_not_marked_failed",
                queue_id=queue_id,
                error=str(exc),
                mark_error=str(mark_exc),
            )

    async def _persist_node(
        self,
        name: str,
        node_type: str,
        properties: dict[str, object],
        document_id: int,
    ) -> int:
        # A known node keeps its vector; the upsert still moves provenance
        # to this document.
        existing_id = await self._store.find_node_id(name, node_type)
        embedding = None
        if existing_id is None:
            embedding = await self._embedding_provider.embed_single(name)
        return await self._store.upsert_node(name, node_type, properties, embedding, document_id)

    async def _run_extraction(self, document_id: int, text: str) -> None:
        """Best-effort wrapper: log any extraction failure and return."""
        try:
            await self.extract_and_store(document_id, text)
        except ExtractionError as exc:
            logger.warning("extraction_failed", document_id=document_id, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.warning("extraction_crashed", document_id=document_id, error=str(exc))

    def _spawn_extraction(self, document_id: int, text: str) -> None:
        task = asyncio.create_task(
            self._run_extraction(document_id, text),
            name=f"ragkb-extract-{document_id}",
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
