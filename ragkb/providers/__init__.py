"""Concrete implementations of the interfaces in ``ragkb.interfaces``.

    embedding/  — IEmbeddingProvider (hash vectorizer)
    fetch/      — IFetchProvider (httpx + trafilatura, BeautifulSoup fallback)
    store/      — IKnowledgeStore (aiosqlite + numpy)
"""
