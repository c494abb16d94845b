"""Knowledge store providers.

One implementation of IKnowledgeStore:
    SQLiteKnowledgeStore — aiosqlite persistence with upsert-on-conflict
    keys, an atomic UPDATE ... RETURNING queue claim, and numpy cosine
    distance for the hybrid chunk query.
"""

from ragkb.providers.store.sqlite_knowledge_store import SQLiteKnowledgeStore

__all__ = ["SQLiteKnowledgeStore"]
