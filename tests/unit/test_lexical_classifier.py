"""Unit tests for the immutable LexicalClassifier."""

from __future__ import annotations

import dataclasses

import pytest

from ragkb.services.extraction.lexical_classifier import LexicalClassifier


class TestLookups:
    def test_stop_words_case_insensitive(self, classifier: LexicalClassifier) -> None:
        assert classifier.is_stop_word("the")
        assert classifier.is_stop_word("The")
        assert not classifier.is_stop_word("paris")

    def test_generic_terms(self, classifier: LexicalClassifier) -> None:
        assert classifier.is_generic_term("Something")
        assert not classifier.is_generic_term("algorithm")

    def test_significant_words(self, classifier: LexicalClassifier) -> None:
        assert classifier.is_significant_word("Research")
        assert classifier.is_significant_word("computer")
        assert not classifier.is_significant_word("banana")

    def test_temporal_names(self, classifier: LexicalClassifier) -> None:
        assert classifier.is_temporal_name("March")
        assert classifier.is_temporal_name("friday")
        assert not classifier.is_temporal_name("Paris")

    def test_filler_covers_both_tables(self, classifier: LexicalClassifier) -> None:
        assert classifier.is_filler("they")
        assert classifier.is_filler("however")
        assert not classifier.is_filler("acme")


class TestKeywords:
    def test_lowercases_and_strips_punctuation(self, classifier: LexicalClassifier) -> None:
        assert classifier.extract_keywords("The Acme Corp in Paris!") == ["acme", "corp", "paris"]

    def test_drops_short_words_and_stop_words(self, classifier: LexicalClassifier) -> None:
        assert classifier.extract_keywords("it is an ox of this") == []

    def test_keeps_repeats_in_order(self, classifier: LexicalClassifier) -> None:
        assert classifier.extract_keywords("data (data) science") == ["data", "data", "science"]

    def test_empty_query(self, classifier: LexicalClassifier) -> None:
        assert classifier.extract_keywords("   ") == []


class TestImmutability:
    def test_frozen(self, classifier: LexicalClassifier) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            classifier.stop_words = frozenset()  # type: ignore[misc]

    def test_custom_tables(self) -> None:
        custom = LexicalClassifier(
            stop_words=frozenset({"foo"}),
            generic_terms=frozenset(),
            significant_words=frozenset({"bar"}),
        )
        assert custom.extract_keywords("foo bar baz") == ["bar", "baz"]
        assert custom.is_significant_word("BAR")
        assert not custom.is_temporal_name("may")
