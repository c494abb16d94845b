"""Service layer: ingestion, extraction, queue workers, query and lifecycle.

Services depend on the ABCs in ``ragkb.interfaces`` and never on a
concrete provider; ``ragkb.main`` does the wiring.
"""
