"""Rule-based entity and relationship extraction.

Runs a fixed, ordered battery of regular-expression scans over normalized
text.  Each rule proposes typed candidates; a shared ``seen`` set makes
the first rule to claim a name win, so "Acme Corp" found as an
organization is not found again as a concept.

Entity rules, in order:

    1. person        two capitalized words ("Alice Smith")
    2. organization  capitalized words ending in an org suffix ("Acme Corp")
    3. location      a word plus a place suffix ("Central Park"), or a
                     capitalized name right after "in" ("in Paris")
    4. concept       a short quoted phrase that is not reported speech
    5. concept       two to four capitalized words
    6. concept       a lone capitalized word on the significant-word list

Relationship rules (``is_a``, ``works_at``, ``located_in``) only link two
names that are *both* entities of the same pass; anything else is dropped.
The ``is_a`` rule is intentionally narrow: it links only when the first
capitalized content word of the description is itself a known entity.

The extractor is pure (no I/O).  Persisting what it finds is the job of
:class:`~ragkb.services.ingestion.ingestion_service.IngestionService`.
"""

from __future__ import annotations

import re

import structlog

from ragkb.config.lexicon import (
    FILLER_PHRASES,
    LOCATION_SUFFIXES,
    ORGANIZATION_SUFFIXES,
    SENTENCE_OPENERS,
)
from ragkb.models import (
    ExtractedEntity,
    ExtractedRelationship,
    ExtractionResult,
    NodeType,
    RelationshipType,
)
from ragkb.services.extraction.lexical_classifier import LexicalClassifier

logger = structlog.get_logger(logger_name=__name__)

# Provenance tags stored as properties["source"].
SOURCE_PATTERN = "pattern_matching"
SOURCE_QUOTED = "quoted_text"
SOURCE_SIGNIFICANT = "significant_word"

_ORG_ALTERNATION = "|".join(ORGANIZATION_SUFFIXES)
_LOCATION_ALTERNATION = "|".join(LOCATION_SUFFIXES)
_NAME_SUFFIXES = frozenset(ORGANIZATION_SUFFIXES) | frozenset(LOCATION_SUFFIXES)

# -- Entity patterns --------------------------------------------------------
_PERSON_RE = re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b")
# A run of capitalized words ("&" allowed between them) closed by a suffix.
_ORGANIZATION_RE = re.compile(
    rf"\b[A-Z][a-zA-Z]*(?:\s+(?:[A-Z][a-zA-Z]*|&))*\s+(?:{_ORG_ALTERNATION})\b"
)
_LOCATION_SUFFIX_RE = re.compile(rf"\b[A-Z][a-z]+ (?:{_LOCATION_ALTERNATION})\b")
_LOCATION_AFTER_IN_RE = re.compile(r"\b[Ii]n\s+([A-Z][a-z]+(?: [A-Z][a-z]+)?)\b")
_QUOTED_RE = re.compile(r"[\"“]([^\"“”]{3,50})[\"”]")
_MULTI_WORD_RE = re.compile(r"\b[A-Z][a-z]+(?: [A-Z][a-z]+){1,3}\b")
_SINGLE_WORD_RE = re.compile(r"\b[A-Z][a-z]{3,}\b")

# -- Relationship patterns --------------------------------------------------
_IS_A_RE = re.compile(r"(\b[A-Z][a-z]+ [A-Z][a-z]+\b)\s+(?:is|was|are|were)\s+([^.!?]+)")
_WORKS_AT_RE = re.compile(
    r"(\b[A-Z][a-z]+ [A-Z][a-z]+\b)\s+(?:works at|worked at|studied at|attended)\s+([^.!?]+)"
)
_LOCATED_IN_RE = re.compile(r"(\b[A-Z][a-z]+ [A-Z][a-z]+\b)\s+in\s+([^.!?]+)")

_SENTENCE_PUNCTUATION = frozenset(".!?")
_WORD_PUNCTUATION = ".,!?;:()[]{}'\""

# Quoted phrases longer than this read as sentences, not names.
_MAX_QUOTED_CONCEPT_CHARS = 30


class EntityExtractor:
    """Finds candidate entities and relationships with lexical patterns.

    Parameters
    ----------
    classifier:
        Shared, immutable stop/generic/significant word lookups.
    """

    def __init__(self, classifier: LexicalClassifier) -> None:
        self._classifier = classifier

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, text: str) -> ExtractionResult:
        """Run every entity rule, then every relationship rule, over *text*."""
        if not text or not text.strip():
            return ExtractionResult()

        entities = self.extract_entities(text)
        relationships = self.extract_relationships(text, entities)

        logger.debug(
            "extraction_complete",
            entity_count=len(entities),
            relationship_count=len(relationships),
        )
        return ExtractionResult(entities=entities, relationships=relationships)

    def extract_entities(self, text: str) -> list[ExtractedEntity]:
        """Return entities in rule order, each name at most once."""
        seen: set[str] = set()
        entities: list[ExtractedEntity] = []

        def add(name: str, node_type: NodeType, source: str = SOURCE_PATTERN) -> None:
            if name in seen:
                return
            seen.add(name)
            entities.append(
                ExtractedEntity(name=name, type=node_type, properties={"source": source})
            )

        for name in self._people(text):
            add(name, NodeType.PERSON)
        for name in self._organizations(text):
            add(name, NodeType.ORGANIZATION)
        for name in self._locations(text):
            add(name, NodeType.LOCATION)
        for name in self._quoted_concepts(text):
            add(name, NodeType.CONCEPT, SOURCE_QUOTED)
        for name in self._multi_word_concepts(text):
            add(name, NodeType.CONCEPT)
        for name in self._significant_words(text):
            add(name, NodeType.CONCEPT, SOURCE_SIGNIFICANT)

        return entities

    def extract_relationships(
        self,
        text: str,
        entities: list[ExtractedEntity],
    ) -> list[ExtractedRelationship]:
        """Return relationships whose endpoints are both in *entities*."""
        known = {e.name for e in entities}
        seen: set[tuple[str, str, RelationshipType]] = set()
        relationships: list[ExtractedRelationship] = []

        def add(source: str, target: str, rel_type: RelationshipType, **props: str) -> None:
            key = (source, target, rel_type)
            if source not in known or target not in known or key in seen:
                return
            seen.add(key)
            relationships.append(
                ExtractedRelationship(
                    source=source,
                    target=target,
                    relationship_type=rel_type,
                    properties={**props, "source": SOURCE_PATTERN},
                )
            )

        for match in _IS_A_RE.finditer(text):
            description = match.group(2).strip()
            concept = self._main_concept(description)
            if concept:
                add(match.group(1), concept, RelationshipType.IS_A, description=description)

        for match in _WORKS_AT_RE.finditer(text):
            add(match.group(1), match.group(2).strip(), RelationshipType.WORKS_AT)

        for match in _LOCATED_IN_RE.finditer(text):
            add(match.group(1), match.group(2).strip(), RelationshipType.LOCATED_IN)

        return relationships

    # ------------------------------------------------------------------
    # Entity rules
    # ------------------------------------------------------------------

    def _people(self, text: str) -> list[str]:
        names = []
        for match in _PERSON_RE.finditer(text):
            name = match.group(0)
            # "Acme Corp" / "Central Park" belong to the later rules.
            if name.split()[-1] in _NAME_SUFFIXES:
                continue
            if len(name) > 3 and not self._classifier.is_generic_term(name):
                names.append(name)
        return names

    @staticmethod
    def _organizations(text: str) -> list[str]:
        names = []
        for match in _ORGANIZATION_RE.finditer(text):
            name = " ".join(match.group(0).split())
            if len(name) > 5:
                names.append(name)
        return names

    def _locations(self, text: str) -> list[str]:
        names = [m.group(0) for m in _LOCATION_SUFFIX_RE.finditer(text) if len(m.group(0)) > 4]
        for match in _LOCATION_AFTER_IN_RE.finditer(text):
            name = match.group(1)
            first_word = name.split()[0]
            if (
                len(name) > 2
                and not self._classifier.is_filler(first_word)
                and not self._classifier.is_temporal_name(first_word)
            ):
                names.append(name)
        return names

    def _quoted_concepts(self, text: str) -> list[str]:
        names = []
        for match in _QUOTED_RE.finditer(text):
            concept = match.group(1).strip()
            if self._is_quoted_concept(concept):
                names.append(concept)
        return names

    def _is_quoted_concept(self, concept: str) -> bool:
        if len(concept) <= 2 or len(concept) > _MAX_QUOTED_CONCEPT_CHARS:
            return False
        if any(ch in _SENTENCE_PUNCTUATION for ch in concept):
            return False
        lowered = concept.lower()
        if lowered.startswith(SENTENCE_OPENERS):
            return False
        if any(phrase in lowered for phrase in FILLER_PHRASES):
            return False
        return not self._classifier.is_filler(concept)

    def _multi_word_concepts(self, text: str) -> list[str]:
        return [
            m.group(0)
            for m in _MULTI_WORD_RE.finditer(text)
            if len(m.group(0)) > 4 and not self._classifier.is_filler(m.group(0))
        ]

    def _significant_words(self, text: str) -> list[str]:
        return [
            m.group(0)
            for m in _SINGLE_WORD_RE.finditer(text)
            if not self._classifier.is_filler(m.group(0))
            and self._classifier.is_significant_word(m.group(0))
        ]

    # ------------------------------------------------------------------
    # Relationship helpers
    # ------------------------------------------------------------------

    def _main_concept(self, description: str) -> str | None:
        """First capitalized content word of *description*, or ``None``."""
        for raw in description.split():
            word = raw.strip(_WORD_PUNCTUATION)
            if len(word) > 3 and not self._classifier.is_stop_word(word) and word[0].isupper():
                return word
        return None
