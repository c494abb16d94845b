"""Hybrid retrieval: vector similarity blended with keyword overlap.

The query is embedded with the same provider used at ingestion time and
tokenized into keywords (lower-case, punctuation-trimmed, longer than two
characters, not a stop word).  The knowledge store keeps chunks within
the distance threshold and ranks them by keyword score, then distance.
The blended ``score`` on each result is

    0.3 * (1 - distance) + 0.7 * keyword_score

The default hash vectorizer carries no meaning, so similarity alone
would rank noise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ragkb.models import KnowledgeGraph, QueryResult
from ragkb.utils.errors import InvalidInputError

if TYPE_CHECKING:
    from ragkb.interfaces.embedding_provider import IEmbeddingProvider
    from ragkb.interfaces.knowledge_store import IKnowledgeStore
    from ragkb.services.extraction.lexical_classifier import LexicalClassifier

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MAX_DISTANCE = 0.5
_DEFAULT_RESULT_LIMIT = 5


class QueryService:
    """Answers ranked chunk queries and knowledge-graph lookups."""

    def __init__(
        self,
        store: IKnowledgeStore,
        embedding_provider: IEmbeddingProvider,
        classifier: LexicalClassifier,
        max_distance: float = _DEFAULT_MAX_DISTANCE,
        result_limit: int = _DEFAULT_RESULT_LIMIT,
    ) -> None:
        self._store = store
        self._embedding_provider = embedding_provider
        self._classifier = classifier
        self._max_distance = max_distance
        self._result_limit = result_limit

    async def query(self, text: str, limit: int | None = None) -> list[QueryResult]:
        """Return the best-matching chunks for *text*.

        Raises
        ------
        InvalidInputError
            If *text* is empty or whitespace.
        """
        if not text or not text.strip():
            raise InvalidInputError(message="Query text is required")

        keywords = self._classifier.extract_keywords(text)
        query_embedding = await self._embedding_provider.embed_single(text)
        results = await self._store.search_chunks(
            query_embedding,
            keywords,
            max_distance=self._max_distance,
            limit=limit or self._result_limit,
        )

        logger.info(
            "query_executed",
            query=text,
            keyword_count=len(keywords),
            result_count=len(results),
        )
        return results

    async def get_graph(self, query: str = "") -> KnowledgeGraph:
        """Nodes whose name contains *query* (all when empty), plus edges among them."""
        graph = await self._store.get_knowledge_graph(query)
        logger.debug(
            "graph_fetched",
            query=query,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
        )
        return graph
