"""Immutable word classifier over the static lexical tables.

The extractor and the hybrid query both need to ask "is this a stop
word?".  Rather than have them reach into module-level sets, the
composition root builds one :class:`LexicalClassifier` at startup and
passes it to every consumer.  The classifier is a frozen dataclass of
frozensets, so sharing it across concurrent tasks is safe.

All lookups are case-insensitive.
"""

from __future__ import annotations

from dataclasses import dataclass

from ragkb.config import lexicon


@dataclass(frozen=True)
class LexicalClassifier:
    """Stop / generic / significant word lookups.

    Attributes
    ----------
    stop_words:
        Function words that never form an entity or a query keyword.
    generic_terms:
        Content words too vague to stand as an entity.
    significant_words:
        Allow-list for single-word concepts.
    temporal_names:
        Month and weekday names, which look like place names after "in".
    """

    stop_words: frozenset[str]
    generic_terms: frozenset[str]
    significant_words: frozenset[str]
    temporal_names: frozenset[str] = frozenset()

    @classmethod
    def default(cls) -> LexicalClassifier:
        """Build a classifier from the tables in :mod:`ragkb.config.lexicon`."""
        return cls(
            stop_words=lexicon.STOP_WORDS,
            generic_terms=lexicon.GENERIC_TERMS,
            significant_words=lexicon.SIGNIFICANT_WORDS,
            temporal_names=lexicon.TEMPORAL_NAMES,
        )

    def is_stop_word(self, word: str) -> bool:
        return word.lower() in self.stop_words

    def is_generic_term(self, term: str) -> bool:
        return term.lower() in self.generic_terms

    def is_significant_word(self, word: str) -> bool:
        return word.lower() in self.significant_words

    def is_temporal_name(self, word: str) -> bool:
        return word.lower() in self.temporal_names

    def is_filler(self, term: str) -> bool:
        """True for a stop word or a generic term."""
        lowered = term.lower()
        return lowered in self.stop_words or lowered in self.generic_terms

    def extract_keywords(self, text: str) -> list[str]:
        """Return the query keywords in *text*, in order of appearance.

        Words are lower-cased, trimmed of surrounding punctuation, and kept
        only if longer than two characters and not a stop word.  Repeats
        are kept, so a repeated word weighs more in the keyword score.
        """
        keywords: list[str] = []
        for raw in text.lower().split():
            word = raw.strip(lexicon.KEYWORD_STRIP_CHARS)
            if len(word) > 2 and word not in self.stop_words:
                keywords.append(word)
        return keywords
