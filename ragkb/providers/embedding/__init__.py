"""Embedding providers.

One implementation of IEmbeddingProvider:
    HashEmbeddingProvider — deterministic, dependency-free stand-in for a
    learned embedding model (position-weighted hash seeding an LCG).
"""

from ragkb.providers.embedding.hash_embedding_provider import HashEmbeddingProvider

__all__ = ["HashEmbeddingProvider"]
