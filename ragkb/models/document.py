"""Document and chunk models for the ragkb knowledge base.

A Document is one ingested page or inline submission; it owns an ordered
list of Chunks.  Chunk offsets are ``[start_position, end_position)``
indices into the document's *normalized* content, so
``document.content[chunk.start_position:chunk.end_position]`` reproduces
the chunk text (modulo the whitespace and "." separators the chunker
re-joins sentences with).

All models use frozen config: rows read from the store are immutable
snapshots, and updates go back through the knowledge store.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """An ingested document, keyed by URL when one is present."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Store-assigned document id.")
    url: str | None = Field(default=None, description="Source URL; unique when present.")
    title: str = Field(default="", description="Page title or caller-supplied title.")
    content: str = Field(description="Normalized document text.")
    # Omitted on plain reads; populated only when a caller asks for vectors.
    embedding: list[float] | None = Field(
        default=None, description="Whole-document embedding vector."
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Chunk(BaseModel):
    """A sentence-aligned segment of a document."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Store-assigned chunk id.")
    document_id: int = Field(description="Owning document id.")
    content: str = Field(description="Chunk text (sentences joined by '. ').")
    chunk_index: int = Field(ge=0, description="Zero-based ordinal within the document.")
    start_position: int = Field(ge=0, description="Inclusive start offset into the document.")
    end_position: int = Field(ge=0, description="Exclusive end offset into the document.")
    embedding: list[float] | None = None
    created_at: datetime | None = None


class ChunkVector(BaseModel):
    """A chunk's text paired with its embedding, as returned by vector reads."""

    model_config = ConfigDict(frozen=True)

    chunk_index: int
    content: str
    embedding: list[float]


class ChunkSpan(BaseModel):
    """A chunk as produced by the chunker, before it has an id or vector."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    text: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)
