"""Result models returned by ingestion and retrieval operations.

These are the shapes handed to callers of
:class:`~ragkb.services.knowledge_service.KnowledgeService` (the CLI today,
an HTTP or protocol adapter tomorrow).  All are frozen.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QueryResult(BaseModel):
    """One chunk returned by the hybrid query, with its blended score."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Chunk text.")
    score: float = Field(description="0.3 * vector score + 0.7 * keyword score.")
    keyword_score: float = Field(
        ge=0.0, le=1.0, description="Fraction of query keywords found in the chunk."
    )
    distance: float = Field(description="Cosine distance from the query vector.")
    document_id: int
    url: str | None = None
    title: str | None = None


class IngestionResult(BaseModel):
    """Summary of a single document ingestion."""

    model_config = ConfigDict(frozen=True)

    document_id: int
    url: str | None = None
    title: str = ""
    chunk_count: int = Field(ge=0)
    ingestion_time: float = Field(ge=0.0, description="Wall-clock seconds spent ingesting.")


class SubmissionStatus(str, Enum):  # noqa: UP042
    """How a submission was handled."""

    ACCEPTED = "accepted"  # Queued for a worker
    CREATED = "created"    # Ingested inline


class SubmissionOutcome(BaseModel):
    """Acknowledgement for ``submit_document`` / ``enqueue_url``."""

    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus
    url: str
    queue_id: int | None = None
    document_id: int | None = None


class StoreStats(BaseModel):
    """Row counts across the knowledge store, for operator dashboards."""

    model_config = ConfigDict(frozen=True)

    documents: int = Field(ge=0)
    chunks: int = Field(ge=0)
    nodes: int = Field(ge=0)
    edges: int = Field(ge=0)
    # Queue item count per status value.
    queue: dict[str, int] = Field(default_factory=dict)
