"""Abstract base class for text-embedding providers.

Defines the contract for turning text into a fixed-dimension vector.  The
shipped implementation is a deterministic hash-based vectorizer; a learned
embedding model can replace it behind this same interface without any
change to the ingestion service or the knowledge store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   HashEmbeddingProvider - deterministic position-weighted hash + LCG
# Located in: ragkb/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the ingestion pipeline.

    Vectors are stored next to documents, chunks and knowledge nodes, and
    compared by cosine distance at query time, so every vector a provider
    returns must have length :meth:`get_dimension`.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Convenience wrapper around :meth:`embed` for the common single-text
        case (a document body, an entity name, a search query).
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Must remain constant for the lifetime of the provider instance:
        vectors of different lengths cannot be compared.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and usable."""
