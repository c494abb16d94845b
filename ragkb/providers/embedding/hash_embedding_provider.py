"""Deterministic hash-based embedding provider.

A stand-in for a learned embedding model: it needs no weights, no network
and no GPU, and it returns the *same* vector for the same text every time,
which is what makes re-ingestion idempotent.  It carries no semantic
signal, which is why the hybrid query weights keyword overlap above
vector similarity.

Algorithm:

1. Lower-case, strip and whitespace-split the text.
2. Build a position-weighted frequency table: the word at index ``i`` of
   ``n`` contributes ``n - i``, so earlier words weigh more.
3. Fold the table into one seed (iterating words in first-occurrence
   order): a base-31 rolling hash of each word, multiplied by its weight,
   all modulo 1,000,000.
4. Drive a linear congruential generator from the seed, one step per
   dimension, and add a small positional bias ``(i / dim) * 0.1`` so
   components are not interchangeable.
"""

from __future__ import annotations

import numpy as np
import structlog

from ragkb.interfaces.embedding_provider import IEmbeddingProvider

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DIMENSION = 1536
_HASH_MODULUS = 1_000_000
_HASH_BASE = 31

# glibc-style LCG constants, masked to 31 bits.
_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF

_POSITIONAL_BIAS = 0.1


class HashEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider that derives vectors from a text hash."""

    def __init__(self, dimension: int = _DEFAULT_DIMENSION) -> None:
        if dimension < 1:
            msg = f"dimension must be positive, got {dimension}"
            raise ValueError(msg)
        self._dimension = dimension
        self._bias = np.arange(dimension, dtype=np.float64) / dimension * _POSITIONAL_BIAS

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts."""
        return [self.vectorize(text) for text in texts]

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        return self.vectorize(text)

    def vectorize(self, text: str) -> list[float]:
        """Synchronous core of :meth:`embed_single`."""
        seed = self._seed_for(text)

        samples = np.empty(self._dimension, dtype=np.float64)
        for i in range(self._dimension):
            seed = (seed * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
            samples[i] = (seed % 1000) / 1000.0

        return (samples + self._bias).tolist()

    @staticmethod
    def _seed_for(text: str) -> int:
        words = text.lower().strip().split()
        total = len(words)

        # dicts preserve insertion order, so the fold below is deterministic.
        weights: dict[str, int] = {}
        for i, word in enumerate(words):
            weights[word] = weights.get(word, 0) + (total - i)

        combined = 0
        for word, weight in weights.items():
            for ch in word:
                combined = (combined * _HASH_BASE + ord(ch)) % _HASH_MODULUS
            combined = (combined * weight) % _HASH_MODULUS
        return combined

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "hash_embedding"

    def is_available(self) -> bool:
        """Always available — pure computation, no external dependencies."""
        return True
