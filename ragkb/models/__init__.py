"""ragkb domain models — re-exports all public model classes.

Other parts of the codebase import from ``ragkb.models`` directly
(e.g. ``from ragkb.models import QueueStatus``) instead of the submodules.

The models are organized across four submodules by domain concern:
    - document.py   — Documents, chunks, and chunk vectors
    - knowledge.py  — Extraction candidates and the persisted knowledge graph
    - queue.py      — URL queue items and the status state machine
    - retrieval.py  — Query results, ingestion summaries, submission outcomes

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from ragkb.models.document import Chunk, ChunkSpan, ChunkVector, Document
from ragkb.models.knowledge import (
    ExtractedEntity,
    ExtractedRelationship,
    ExtractionResult,
    KnowledgeEdge,
    KnowledgeGraph,
    KnowledgeNode,
    NodeType,
    RelationshipType,
)
from ragkb.models.queue import (
    ALLOWED_TRANSITIONS,
    ClaimedItem,
    QueueItem,
    QueueStatus,
    source_states_for,
)
from ragkb.models.retrieval import (
    IngestionResult,
    QueryResult,
    StoreStats,
    SubmissionOutcome,
    SubmissionStatus,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Chunk",
    "ChunkSpan",
    "ChunkVector",
    "ClaimedItem",
    "Document",
    "ExtractedEntity",
    "ExtractedRelationship",
    "ExtractionResult",
    "IngestionResult",
    "KnowledgeEdge",
    "KnowledgeGraph",
    "KnowledgeNode",
    "NodeType",
    "QueryResult",
    "QueueItem",
    "QueueStatus",
    "RelationshipType",
    "StoreStats",
    "SubmissionOutcome",
    "SubmissionStatus",
    "source_states_for",
]
