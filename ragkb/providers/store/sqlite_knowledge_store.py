"""SQLite-backed knowledge store.

Persists documents, chunks, knowledge-graph nodes/edges and the URL work
queue to a local SQLite database (default ``data/ragkb.db``).  Uses
``aiosqlite`` for async I/O and ``numpy`` for cosine distance.

Concurrency model:
    Every public method opens its own connection, so any number of
    workers, inline ingestions and queries can call the store at once.
    The database runs in WAL mode (readers never block the single
    writer) and each connection waits up to ``busy_timeout`` seconds for
    the write lock instead of failing immediately.

    The queue claim is a single ``UPDATE ... RETURNING`` statement.  SQLite
    takes the write lock before evaluating the sub-select, so two workers
    can never both see the same row as ``pending``; the extra
    ``AND status = 'pending'`` guard keeps the statement correct even on
    engines without that guarantee.

Vectors are stored as raw float64 blobs and compared in Python.  That
keeps the store dependency-free beyond the standard SQLite build at the
cost of a full scan per query.  The path must be a real file: every
connection to ``:memory:`` would see a different, empty database.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite
import numpy as np
import structlog

from ragkb.interfaces.knowledge_store import IKnowledgeStore
from ragkb.models import (
    Chunk,
    ChunkSpan,
    ChunkVector,
    ClaimedItem,
    Document,
    KnowledgeEdge,
    KnowledgeGraph,
    KnowledgeNode,
    QueryResult,
    QueueItem,
    QueueStatus,
    StoreStats,
    source_states_for,
)
from ragkb.utils.errors import (
    InvalidInputError,
    InvalidStateTransitionError,
    NotFoundError,
    PersistenceError,
)

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/ragkb.db")
_DEFAULT_BUSY_TIMEOUT = 30.0

# Hybrid score weights: keyword overlap counts for more than similarity
# because the default vectorizer carries no semantic signal.
_VECTOR_WEIGHT = 0.3
_KEYWORD_WEIGHT = 0.7

_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_CREATE_TABLES_SQL = [
    f"""\
CREATE TABLE IF NOT EXISTS documents (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    url         TEXT    UNIQUE,
    title       TEXT    NOT NULL DEFAULT '',
    content     TEXT    NOT NULL,
    embedding   BLOB,
    created_at  TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at  TEXT    NOT NULL DEFAULT ({_NOW})
);
""",
    f"""\
CREATE TABLE IF NOT EXISTS chunks (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id     INTEGER NOT NULL REFERENCES documents(id),
    content         TEXT    NOT NULL,
    embedding       BLOB,
    chunk_index     INTEGER NOT NULL,
    start_position  INTEGER NOT NULL,
    end_position    INTEGER NOT NULL,
    created_at      TEXT    NOT NULL DEFAULT ({_NOW})
);
""",
    f"""\
CREATE TABLE IF NOT EXISTS knowledge_nodes (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    name         TEXT    NOT NULL,
    type         TEXT    NOT NULL,
    properties   TEXT    NOT NULL DEFAULT '{{}}',
    embedding    BLOB,
    document_id  INTEGER REFERENCES documents(id),
    created_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    UNIQUE(name, type)
);
""",
    f"""\
CREATE TABLE IF NOT EXISTS knowledge_edges (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    source_id          INTEGER NOT NULL REFERENCES knowledge_nodes(id),
    target_id          INTEGER NOT NULL REFERENCES knowledge_nodes(id),
    relationship_type  TEXT    NOT NULL,
    properties         TEXT    NOT NULL DEFAULT '{{}}',
    document_id        INTEGER REFERENCES documents(id),
    created_at         TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at         TEXT    NOT NULL DEFAULT ({_NOW}),
    UNIQUE(source_id, target_id, relationship_type)
);
""",
    f"""\
CREATE TABLE IF NOT EXISTS url_queue (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    url          TEXT    NOT NULL UNIQUE,
    status       TEXT    NOT NULL DEFAULT 'pending',
    error        TEXT,
    retry_count  INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT    NOT NULL DEFAULT ({_NOW}),
    updated_at   TEXT    NOT NULL DEFAULT ({_NOW})
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_chunks_document ON chunks(document_id, chunk_index);",
    "CREATE INDEX IF NOT EXISTS idx_nodes_document ON knowledge_nodes(document_id);",
    "CREATE INDEX IF NOT EXISTS idx_edges_document ON knowledge_edges(document_id);",
    "CREATE INDEX IF NOT EXISTS idx_edges_source ON knowledge_edges(source_id);",
    "CREATE INDEX IF NOT EXISTS idx_edges_target ON knowledge_edges(target_id);",
    "CREATE INDEX IF NOT EXISTS idx_queue_status ON url_queue(status, created_at);",
]

# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

_UPSERT_DOCUMENT_SQL = f"""\
INSERT INTO documents (url, title, content, embedding)
VALUES (?, ?, ?, ?)
ON CONFLICT(url)
DO UPDATE SET title      = excluded.title,
              content    = excluded.content,
              embedding  = excluded.embedding,
              updated_at = {_NOW}
RETURNING id;
"""

_INSERT_DOCUMENT_SQL = """\
INSERT INTO documents (url, title, content, embedding)
VALUES (NULL, ?, ?, ?)
RETURNING id;
"""

_INSERT_CHUNK_SQL = """\
INSERT INTO chunks (document_id, content, embedding, chunk_index, start_position, end_position)
VALUES (?, ?, ?, ?, ?, ?);
"""

_UPSERT_NODE_SQL = f"""\
INSERT INTO knowledge_nodes (name, type, properties, embedding, document_id)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(name, type)
DO UPDATE SET properties  = excluded.properties,
              embedding   = COALESCE(excluded.embedding, knowledge_nodes.embedding),
              document_id = excluded.document_id,
              updated_at  = {_NOW}
RETURNING id;
"""

_UPSERT_EDGE_SQL = f"""\
INSERT INTO knowledge_edges (source_id, target_id, relationship_type, properties, document_id)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(source_id, target_id, relationship_type)
DO UPDATE SET properties  = excluded.properties,
              document_id = excluded.document_id,
              updated_at  = {_NOW}
RETURNING id;
"""

_SELECT_NODES_SQL = """\
SELECT n.id, n.name, n.type, n.properties, n.document_id, n.created_at,
       d.url, d.title
FROM knowledge_nodes n
LEFT JOIN documents d ON d.id = n.document_id
"""

_SELECT_EDGES_SQL = """\
SELECT id, source_id, target_id, relationship_type, properties, document_id, created_at
FROM knowledge_edges
"""

_CLAIM_NEXT_SQL = f"""\
UPDATE url_queue
SET status = 'processing', updated_at = {_NOW}
WHERE id = (
    SELECT id FROM url_queue
    WHERE status = 'pending'
    ORDER BY created_at, id
    LIMIT 1
)
AND status = 'pending'
RETURNING id, url;
"""

_SELECT_QUEUE_SQL = """\
SELECT q.id, q.url, q.status, q.error, q.retry_count, q.created_at, q.updated_at,
       d.id AS document_id
FROM url_queue q
LEFT JOIN documents d ON d.url = q.url
"""

# Edges go first, including edges from other documents that point at a
# node about to be removed, so no edge is left dangling.
_CASCADE_STEPS: list[tuple[str, str]] = [
    (
        "edges",
        "DELETE FROM knowledge_edges WHERE document_id = :doc "
        "OR source_id IN (SELECT id FROM knowledge_nodes WHERE document_id = :doc) "
        "OR target_id IN (SELECT id FROM knowledge_nodes WHERE document_id = :doc)",
    ),
    ("nodes", "DELETE FROM knowledge_nodes WHERE document_id = :doc"),
    ("chunks", "DELETE FROM chunks WHERE document_id = :doc"),
    ("documents", "DELETE FROM documents WHERE id = :doc"),
]


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------

def _to_blob(vector: list[float] | None) -> bytes | None:
    if vector is None:
        return None
    return np.asarray(vector, dtype=np.float64).tobytes()


def _from_blob(blob: bytes | None) -> np.ndarray | None:
    if blob is None:
        return None
    return np.frombuffer(blob, dtype=np.float64)


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Return ``1 - cos(row, query)`` for every row of *matrix*.

    Rows (or a query) with zero norm get distance 1.0 rather than NaN.
    """
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    with np.errstate(divide="ignore", invalid="ignore"):
        similarity = np.where(norms > 0, dots / norms, 0.0)
    return 1.0 - similarity


class SQLiteKnowledgeStore(IKnowledgeStore):
    """SQLite-backed persistence for the whole ingestion/retrieval pipeline."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        busy_timeout: float = _DEFAULT_BUSY_TIMEOUT,
    ) -> None:
        self._db_path = Path(db_path)
        self._busy_timeout = busy_timeout

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection; translate driver errors into PersistenceError."""
        try:
            async with aiosqlite.connect(str(self._db_path), timeout=self._busy_timeout) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            logger.error("knowledge_store_error", path=str(self._db_path), error=str(exc))
            raise PersistenceError(
                message=str(exc),
                provider_name=self.get_provider_name(),
            ) from exc

    async def initialize(self) -> None:
        """Create the tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("knowledge_store_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Documents and chunks
    # ------------------------------------------------------------------

    async def upsert_document(
        self,
        url: str | None,
        title: str,
        content: str,
        embedding: list[float],
    ) -> int:
        async with self._connect() as db:
            if url is None:
                cursor = await db.execute(
                    _INSERT_DOCUMENT_SQL, (title, content, _to_blob(embedding))
                )
            else:
                cursor = await db.execute(
                    _UPSERT_DOCUMENT_SQL, (url, title, content, _to_blob(embedding))
                )
            row = await cursor.fetchone()
            await db.commit()

        document_id = int(row["id"])
        logger.info("document_upserted", document_id=document_id, url=url, title=title)
        return document_id

    async def replace_chunks(
        self,
        document_id: int,
        chunks: list[tuple[ChunkSpan, list[float]]],
    ) -> int:
        rows = [
            (document_id, span.text, _to_blob(vector), span.index, span.start, span.end)
            for span, vector in chunks
        ]
        async with self._connect() as db:
            cursor = await db.execute("DELETE FROM chunks WHERE document_id = ?", (document_id,))
            replaced = cursor.rowcount
            await db.executemany(_INSERT_CHUNK_SQL, rows)
            await db.commit()

        logger.info(
            "chunks_persisted",
            document_id=document_id,
            chunk_count=len(rows),
            replaced=replaced,
        )
        return len(rows)

    async def get_document(self, document_id: int) -> Document:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT id, url, title, content, created_at, updated_at "
                "FROM documents WHERE id = ?",
                (document_id,),
            )
            row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(
                message=f"Document {document_id} not found",
                provider_name=self.get_provider_name(),
            )
        return Document(**dict(row))

    async def get_document_by_url(self, url: str) -> Document | None:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT id, url, title, content, created_at, updated_at "
                "FROM documents WHERE url = ?",
                (url,),
            )
            row = await cursor.fetchone()
        return Document(**dict(row)) if row else None

    async def get_chunks(self, document_id: int) -> list[Chunk]:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT id, document_id, content, chunk_index, start_position, "
                "end_position, created_at "
                "FROM chunks WHERE document_id = ? ORDER BY chunk_index",
                (document_id,),
            )
            rows = await cursor.fetchall()
        return [Chunk(**dict(r)) for r in rows]

    async def get_chunk_vectors(self, document_id: int) -> list[ChunkVector]:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT chunk_index, content, embedding "
                "FROM chunks WHERE document_id = ? ORDER BY chunk_index",
                (document_id,),
            )
            rows = await cursor.fetchall()
        return [
            ChunkVector(
                chunk_index=r["chunk_index"],
                content=r["content"],
                embedding=_from_blob(r["embedding"]).tolist() if r["embedding"] else [],
            )
            for r in rows
        ]

    # ------------------------------------------------------------------
    # Knowledge graph
    # ------------------------------------------------------------------

    async def find_node_id(self, name: str, node_type: str) -> int | None:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT id FROM knowledge_nodes WHERE name = ? AND type = ?",
                (name, node_type),
            )
            row = await cursor.fetchone()
        return int(row["id"]) if row else None

    async def upsert_node(
        self,
        name: str,
        node_type: str,
        properties: dict[str, Any],
        embedding: list[float] | None,
        document_id: int | None,
    ) -> int:
        async with self._connect() as db:
            cursor = await db.execute(
                _UPSERT_NODE_SQL,
                (
                    name,
                    node_type,
                    json.dumps(properties, sort_keys=True),
                    _to_blob(embedding),
                    document_id,
                ),
            )
            row = await cursor.fetchone()
            await db.commit()
        return int(row["id"])

    async def upsert_edge(
        self,
        source_id: int,
        target_id: int,
        relationship_type: str,
        properties: dict[str, Any],
        document_id: int | None,
    ) -> int:
        async with self._connect() as db:
            cursor = await db.execute(
                _UPSERT_EDGE_SQL,
                (
                    source_id,
                    target_id,
                    relationship_type,
                    json.dumps(properties, sort_keys=True),
                    document_id,
                ),
            )
            row = await cursor.fetchone()
            await db.commit()
        return int(row["id"])

    async def get_knowledge_graph(self, query: str = "") -> KnowledgeGraph:
        needle = query.strip().casefold()
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_NODES_SQL + "ORDER BY n.id")
            node_rows = await cursor.fetchall()
            cursor = await db.execute(_SELECT_EDGES_SQL + "ORDER BY id")
            edge_rows = await cursor.fetchall()

        # Case-insensitive substring match in Python: SQLite's LIKE and
        # lower() only fold ASCII.
        nodes = [
            self._row_to_node(r)
            for r in node_rows
            if not needle or needle in r["name"].casefold()
        ]
        if needle and not nodes:
            return KnowledgeGraph()

        node_ids = {n.id for n in nodes}
        edges = [
            self._row_to_edge(r)
            for r in edge_rows
            if r["source_id"] in node_ids and r["target_id"] in node_ids
        ]
        return KnowledgeGraph(nodes=nodes, edges=edges)

    async def get_document_graph(self, document_id: int) -> KnowledgeGraph:
        async with self._connect() as db:
            cursor = await db.execute(
                _SELECT_NODES_SQL + "WHERE n.document_id = ? ORDER BY n.id",
                (document_id,),
            )
            node_rows = await cursor.fetchall()
            cursor = await db.execute(
                _SELECT_EDGES_SQL + "WHERE document_id = ? ORDER BY id",
                (document_id,),
            )
            edge_rows = await cursor.fetchall()

        # A node re-extracted from a later document now belongs to that
        # document; its edges from this one are left out.
        nodes = [self._row_to_node(r) for r in node_rows]
        node_ids = {n.id for n in nodes}
        edges = [
            self._row_to_edge(r)
            for r in edge_rows
            if r["source_id"] in node_ids and r["target_id"] in node_ids
        ]
        return KnowledgeGraph(nodes=nodes, edges=edges)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def search_chunks(
        self,
        query_embedding: list[float],
        keywords: list[str],
        max_distance: float,
        limit: int,
    ) -> list[QueryResult]:
        query_vec = np.asarray(query_embedding, dtype=np.float64)

        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT c.id, c.content, c.embedding, c.document_id, d.url, d.title "
                "FROM chunks c JOIN documents d ON d.id = c.document_id "
                "WHERE c.embedding IS NOT NULL"
            )
            rows = await cursor.fetchall()

        rows = [r for r in rows if len(r["embedding"]) == query_vec.nbytes]
        if not rows:
            return []

        matrix = np.vstack([_from_blob(r["embedding"]) for r in rows])
        distances = cosine_distances(matrix, query_vec)

        scored: list[tuple[float, float, int, Any]] = []
        for row, distance in zip(rows, distances.tolist()):
            if distance >= max_distance:
                continue
            scored.append((self._keyword_score(row["content"], keywords), distance, row["id"], row))

        # Keyword score desc, then distance asc; chunk id breaks exact ties.
        scored.sort(key=lambda item: (-item[0], item[1], item[2]))

        return [
            QueryResult(
                content=row["content"],
                score=_VECTOR_WEIGHT * (1.0 - distance) + _KEYWORD_WEIGHT * keyword_score,
                keyword_score=keyword_score,
                distance=distance,
                document_id=row["document_id"],
                url=row["url"],
                title=row["title"],
            )
            for keyword_score, distance, _, row in scored[:limit]
        ]

    @staticmethod
    def _keyword_score(content: str, keywords: list[str]) -> float:
        if not keywords:
            return 0.0
        haystack = content.lower()
        hits = sum(1 for kw in keywords if kw in haystack)
        return hits / len(keywords)

    # ------------------------------------------------------------------
    # URL queue
    # ------------------------------------------------------------------

    async def enqueue(self, url: str) -> QueueItem:
        if not url or not url.strip():
            raise InvalidInputError(message="URL is required")
        url = url.strip()
        requeue_from = source_states_for(QueueStatus.PENDING)
        placeholders = ", ".join("?" for _ in requeue_from)
        async with self._connect() as db:
            await db.execute(
                "INSERT INTO url_queue (url) VALUES (?) "
                "ON CONFLICT(url) DO UPDATE SET status = 'pending', error = NULL, "
                f"retry_count = 0, updated_at = {_NOW} "
                f"WHERE url_queue.status IN ({placeholders})",
                (url, *(s.value for s in requeue_from)),
            )
            await db.commit()
            cursor = await db.execute(_SELECT_QUEUE_SQL + "WHERE q.url = ?", (url,))
            row = await cursor.fetchone()

        item = QueueItem(**dict(row))
        logger.info("url_enqueued", queue_id=item.id, url=url, status=item.status.value)
        return item

    async def claim_next(self) -> ClaimedItem | None:
        async with self._connect() as db:
            cursor = await db.execute(_CLAIM_NEXT_SQL)
            rows = await cursor.fetchall()
            await db.commit()
        if not rows:
            return None
        return ClaimedItem(id=rows[0]["id"], url=rows[0]["url"])

    async def claim_item(self, queue_id: int) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(
                f"UPDATE url_queue SET status = 'processing', updated_at = {_NOW} "
                "WHERE id = ? AND status = 'pending'",
                (queue_id,),
            )
            claimed = cursor.rowcount == 1
            await db.commit()
        return claimed

    async def mark_completed(self, queue_id: int) -> None:
        await self._transition(queue_id, QueueStatus.COMPLETED)

    async def mark_failed(self, queue_id: int, error: str) -> None:
        await self._transition(
            queue_id,
            QueueStatus.FAILED,
            extra_set="error = ?, retry_count = retry_count + 1,",
            extra_params=(error,),
        )

    async def soft_delete_queue_item(self, queue_id: int) -> None:
        await self._transition(queue_id, QueueStatus.DELETED)

    async def reset_queue_item(self, queue_id: int) -> None:
        await self._transition(
            queue_id,
            QueueStatus.PENDING,
            extra_set="error = NULL, retry_count = 0,",
        )

    async def _transition(
        self,
        queue_id: int,
        target: QueueStatus,
        extra_set: str = "",
        extra_params: tuple[Any, ...] = (),
    ) -> None:
        """Move an item to *target*, guarded by the allowed-transition table."""
        sources = source_states_for(target)
        placeholders = ", ".join("?" for _ in sources)
        async with self._connect() as db:
            cursor = await db.execute(
                f"UPDATE url_queue SET status = ?, {extra_set} updated_at = {_NOW} "
                f"WHERE id = ? AND status IN ({placeholders})",
                (target.value, *extra_params, queue_id, *(s.value for s in sources)),
            )
            changed = cursor.rowcount
            await db.commit()

        if changed == 0:
            current = await self.get_queue_item(queue_id)
            raise InvalidStateTransitionError(
                message=(
                    f"Queue item {queue_id} cannot move from "
                    f"{current.status.value} to {target.value}"
                ),
                provider_name=self.get_provider_name(),
            )
        logger.debug("queue_item_transitioned", queue_id=queue_id, status=target.value)

    async def get_queue_item(self, queue_id: int) -> QueueItem:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_QUEUE_SQL + "WHERE q.id = ?", (queue_id,))
            row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(
                message=f"Queue item {queue_id} not found",
                provider_name=self.get_provider_name(),
            )
        return QueueItem(**dict(row))

    async def get_queue_item_by_url(self, url: str) -> QueueItem | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_QUEUE_SQL + "WHERE q.url = ?", (url,))
            row = await cursor.fetchone()
        return QueueItem(**dict(row)) if row else None

    async def list_queue(self) -> list[QueueItem]:
        async with self._connect() as db:
            cursor = await db.execute(
                _SELECT_QUEUE_SQL + "WHERE q.status != ? ORDER BY q.created_at DESC, q.id DESC",
                (QueueStatus.DELETED.value,),
            )
            rows = await cursor.fetchall()
        return [QueueItem(**dict(r)) for r in rows]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def delete_document_cascade(self, url: str) -> dict[str, int]:
        counts = {step: 0 for step, _ in _CASCADE_STEPS}
        async with self._connect() as db:
            cursor = await db.execute("SELECT id FROM documents WHERE url = ?", (url,))
            row = await cursor.fetchone()
            if row is None:
                logger.info("cascade_delete_no_document", url=url)
                return counts

            document_id = int(row["id"])
            for step, sql in _CASCADE_STEPS:
                cursor = await db.execute(sql, {"doc": document_id})
                counts[step] = cursor.rowcount
                logger.info(
                    "cascade_delete_step",
                    url=url,
                    document_id=document_id,
                    step=step,
                    rows=cursor.rowcount,
                )
            await db.commit()
        return counts

    async def get_stats(self) -> StoreStats:
        async with self._connect() as db:
            totals: dict[str, int] = {}
            for table in ("documents", "chunks", "knowledge_nodes", "knowledge_edges"):
                cursor = await db.execute(f"SELECT COUNT(*) AS n FROM {table}")  # noqa: S608
                totals[table] = (await cursor.fetchone())["n"]
            cursor = await db.execute(
                "SELECT status, COUNT(*) AS n FROM url_queue GROUP BY status ORDER BY status"
            )
            queue = {r["status"]: r["n"] for r in await cursor.fetchall()}
        return StoreStats(
            documents=totals["documents"],
            chunks=totals["chunks"],
            nodes=totals["knowledge_nodes"],
            edges=totals["knowledge_edges"],
            queue=queue,
        )

    def get_provider_name(self) -> str:
        return "sqlite"

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_node(row: aiosqlite.Row) -> KnowledgeNode:
        data = dict(row)
        data["properties"] = json.loads(data["properties"] or "{}")
        return KnowledgeNode(**data)

    @staticmethod
    def _row_to_edge(row: aiosqlite.Row) -> KnowledgeEdge:
        data = dict(row)
        data["properties"] = json.loads(data["properties"] or "{}")
        return KnowledgeEdge(**data)
