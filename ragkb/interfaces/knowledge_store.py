"""Abstract base class for the knowledge store gateway.

The knowledge store owns every persistence operation in ragkb: documents
and their chunks, knowledge-graph nodes and edges, the URL work queue,
the hybrid (vector + keyword) chunk query, and the cascading delete.

Implementations must provide three capabilities of the underlying engine:

1. **Keyed upsert-on-conflict** -- documents on ``url``, nodes on
   ``(name, type)``, edges on ``(source_id, target_id, relationship_type)``.
   Concurrent writers extracting the same entity must converge on one row.
2. **Vector-distance ranking** -- chunks are filtered and ordered by cosine
   distance to a query vector.
3. **Atomic leasing** -- :meth:`claim_next` must hand each pending queue
   item to at most one caller, however many workers poll concurrently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ragkb.models import (
    Chunk,
    ChunkSpan,
    ChunkVector,
    ClaimedItem,
    Document,
    KnowledgeGraph,
    QueryResult,
    QueueItem,
    StoreStats,
)


# Concrete implementations:
#   SQLiteKnowledgeStore - aiosqlite + numpy cosine distance
# Located in: ragkb/providers/store/
class IKnowledgeStore(ABC):
    """Contract for the relational + vector store behind the pipeline."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indexes if they do not already exist."""

    # -- Documents and chunks --------------------------------------------

    @abstractmethod
    async def upsert_document(
        self,
        url: str | None,
        title: str,
        content: str,
        embedding: list[float],
    ) -> int:
        """Insert or update a document keyed by *url*; return its id.

        A ``None`` url always inserts a new document.
        """

    @abstractmethod
    async def replace_chunks(
        self,
        document_id: int,
        chunks: list[tuple[ChunkSpan, list[float]]],
    ) -> int:
        """Atomically replace a document's chunks; return the number written."""

    @abstractmethod
    async def get_document(self, document_id: int) -> Document:
        """Return a document (without its vector).

        Raises
        ------
        ragkb.utils.errors.NotFoundError
            If no document has this id.
        """

    @abstractmethod
    async def get_document_by_url(self, url: str) -> Document | None:
        """Return the document ingested from *url*, or ``None``."""

    @abstractmethod
    async def get_chunks(self, document_id: int) -> list[Chunk]:
        """Return a document's chunks ordered by ``chunk_index``."""

    @abstractmethod
    async def get_chunk_vectors(self, document_id: int) -> list[ChunkVector]:
        """Return a document's chunk texts with their embeddings."""

    # -- Knowledge graph -------------------------------------------------

    @abstractmethod
    async def find_node_id(self, name: str, node_type: str) -> int | None:
        """Return the id of the node keyed by ``(name, node_type)``, if any."""

    @abstractmethod
    async def upsert_node(
        self,
        name: str,
        node_type: str,
        properties: dict[str, Any],
        embedding: list[float] | None,
        document_id: int | None,
    ) -> int:
        """Insert or update a node keyed by ``(name, node_type)``; return its id.

        A ``None`` embedding leaves an existing node's vector in place.
        """

    @abstractmethod
    async def upsert_edge(
        self,
        source_id: int,
        target_id: int,
        relationship_type: str,
        properties: dict[str, Any],
        document_id: int | None,
    ) -> int:
        """Insert or update an edge keyed by its endpoints and type; return its id."""

    @abstractmethod
    async def get_knowledge_graph(self, query: str = "") -> KnowledgeGraph:
        """Return nodes matching *query* (all when empty) and the edges among them."""

    @abstractmethod
    async def get_document_graph(self, document_id: int) -> KnowledgeGraph:
        """Return the nodes and edges whose provenance is *document_id*."""

    # -- Retrieval -------------------------------------------------------

    @abstractmethod
    async def search_chunks(
        self,
        query_embedding: list[float],
        keywords: list[str],
        max_distance: float,
        limit: int,
    ) -> list[QueryResult]:
        """Hybrid chunk search.

        Keeps chunks within *max_distance* of the query vector, scores each
        by the fraction of *keywords* it contains, and orders by keyword
        score descending then distance ascending.
        """

    # -- URL queue -------------------------------------------------------

    @abstractmethod
    async def enqueue(self, url: str) -> QueueItem:
        """Add *url* as ``pending``; a finished or deleted URL is re-queued."""

    @abstractmethod
    async def claim_next(self) -> ClaimedItem | None:
        """Atomically move the oldest pending item to ``processing``."""

    @abstractmethod
    async def claim_item(self, queue_id: int) -> bool:
        """Atomically move one specific pending item to ``processing``."""

    @abstractmethod
    async def mark_completed(self, queue_id: int) -> None:
        """Move a processing item to ``completed``."""

    @abstractmethod
    async def mark_failed(self, queue_id: int, error: str) -> None:
        """Move a processing item to ``failed``, recording *error*."""

    @abstractmethod
    async def soft_delete_queue_item(self, queue_id: int) -> None:
        """Mark an item ``deleted`` without removing its row."""

    @abstractmethod
    async def reset_queue_item(self, queue_id: int) -> None:
        """Return an item to ``pending`` with error and retry count cleared."""

    @abstractmethod
    async def get_queue_item(self, queue_id: int) -> QueueItem:
        """Return one queue item.

        Raises
        ------
        ragkb.utils.errors.NotFoundError
            If no queue item has this id.
        """

    @abstractmethod
    async def get_queue_item_by_url(self, url: str) -> QueueItem | None:
        """Return the queue item for *url*, or ``None``."""

    @abstractmethod
    async def list_queue(self) -> list[QueueItem]:
        """Return non-deleted items, newest first, with their document ids."""

    # -- Lifecycle -------------------------------------------------------

    @abstractmethod
    async def delete_document_cascade(self, url: str) -> dict[str, int]:
        """Delete the document at *url* and everything derived from it.

        Order: edges, nodes, chunks, document.  Returns the row count of
        each step; zero counts are not errors.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""

    @abstractmethod
    async def get_stats(self) -> StoreStats:
        """Return row counts per table and queue items per status."""
