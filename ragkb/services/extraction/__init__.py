"""Pattern-based entity and relationship extraction."""

from ragkb.services.extraction.entity_extractor import EntityExtractor
from ragkb.services.extraction.lexical_classifier import LexicalClassifier

__all__ = ["EntityExtractor", "LexicalClassifier"]
