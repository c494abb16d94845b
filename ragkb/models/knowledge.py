"""Knowledge-graph models: extracted candidates and persisted nodes/edges.

Two layers live here:

- **Extraction output** (``ExtractedEntity``, ``ExtractedRelationship``,
  ``ExtractionResult``) -- what the rule-based extractor finds in a single
  pass over one document.  Relationships refer to entities by *name*,
  since nothing has ids yet.
- **Persisted graph** (``KnowledgeNode``, ``KnowledgeEdge``,
  ``KnowledgeGraph``) -- rows read back from the knowledge store.  Nodes
  are unique on ``(name, type)`` and edges on
  ``(source_id, target_id, relationship_type)``; re-extraction updates a
  row in place rather than adding a duplicate.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):  # noqa: UP042
    """Entity categories produced by the extractor."""

    PERSON = "person"
    ORGANIZATION = "organization"
    LOCATION = "location"
    CONCEPT = "concept"


class RelationshipType(str, Enum):  # noqa: UP042
    """Edge labels produced by the relationship patterns."""

    IS_A = "is_a"
    WORKS_AT = "works_at"
    LOCATED_IN = "located_in"


# ---------------------------------------------------------------------------
# Extraction output
# ---------------------------------------------------------------------------
class ExtractedEntity(BaseModel):
    """A candidate entity found by one of the extraction rules."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: NodeType
    # Always carries "source": the rule that produced the candidate.
    properties: dict[str, Any] = Field(default_factory=dict)


class ExtractedRelationship(BaseModel):
    """A candidate edge between two entities of the same extraction pass."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="Name of the source entity.")
    target: str = Field(description="Name of the target entity.")
    relationship_type: RelationshipType
    properties: dict[str, Any] = Field(default_factory=dict)


class ExtractionResult(BaseModel):
    """Everything one extraction pass produced, in discovery order."""

    model_config = ConfigDict(frozen=True)

    entities: list[ExtractedEntity] = Field(default_factory=list)
    relationships: list[ExtractedRelationship] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Persisted graph
# ---------------------------------------------------------------------------
class KnowledgeNode(BaseModel):
    """A persisted entity.  ``url``/``title`` come from the provenance document."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    type: str
    properties: dict[str, Any] = Field(default_factory=dict)
    document_id: int | None = None
    url: str | None = None
    title: str | None = None
    created_at: datetime | None = None


class KnowledgeEdge(BaseModel):
    """A persisted relationship between two nodes."""

    model_config = ConfigDict(frozen=True)

    id: int
    source_id: int
    target_id: int
    relationship_type: str
    properties: dict[str, Any] = Field(default_factory=dict)
    document_id: int | None = None
    created_at: datetime | None = None


class KnowledgeGraph(BaseModel):
    """A node set plus the edges whose endpoints both lie inside it."""

    model_config = ConfigDict(frozen=True)

    nodes: list[KnowledgeNode] = Field(default_factory=list)
    edges: list[KnowledgeEdge] = Field(default_factory=list)

    def node_names(self, node_type: NodeType | str | None = None) -> set[str]:
        """Return node names, optionally restricted to one type."""
        wanted = node_type.value if isinstance(node_type, NodeType) else node_type
        return {n.name for n in self.nodes if wanted is None or n.type == wanted}
