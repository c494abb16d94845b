"""Ingestion pipeline: chunking and the orchestrating IngestionService."""

from ragkb.services.ingestion.chunker import TextChunker
from ragkb.services.ingestion.ingestion_service import IngestionService

__all__ = ["IngestionService", "TextChunker"]
