"""ragkb: knowledge-base ingestion and retrieval pipeline.

Documents arrive inline or as queued URLs, are cleaned, chunked with
exact character offsets, embedded, mined for entities, and served back
through a hybrid vector + keyword query.  Start at :mod:`ragkb.main`.
"""

__version__ = "0.1.0"
