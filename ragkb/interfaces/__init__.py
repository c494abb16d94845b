"""Abstract interfaces for ragkb's external collaborators.

Each interface is an ABC; concrete implementations live under
``ragkb/providers/``.  Services depend only on these contracts, which is
what lets tests swap in stubs (a canned fetcher, a mocked store) and what
lets a learned embedding model replace the hash vectorizer.
"""

from ragkb.interfaces.embedding_provider import IEmbeddingProvider
from ragkb.interfaces.fetch_provider import FetchedPage, IFetchProvider
from ragkb.interfaces.knowledge_store import IKnowledgeStore

__all__ = [
    "FetchedPage",
    "IEmbeddingProvider",
    "IFetchProvider",
    "IKnowledgeStore",
]
