"""Static lexical tables for entity extraction and keyword scoring.

# ─── PURPOSE (Junior Developer Guide) ──────────────────────────────────
#
# The entity extractor is deliberately rule-based: it finds capitalized
# phrases with regular expressions and then asks "is this phrase worth
# keeping?".  The answer comes from the word lists in this module:
#
#   - STOP_WORDS        -- function words that never make an entity and
#                          never count as a query keyword ("the", "with").
#   - GENERIC_TERMS     -- content words too vague to be an entity on their
#                          own ("something", "however", "better").
#   - SIGNIFICANT_WORDS -- an allow-list for single-word concepts; a lone
#                          capitalized word only becomes a concept if it
#                          is on this list ("Technology", "Research").
#
# The remaining tables describe phrase shapes used by the extraction rules
# (organizational suffixes, place suffixes, filler phrases that mark a
# quotation as speech rather than a named concept).
#
# Everything is a frozenset built once at import time.  Nothing here is
# mutated at runtime; the LexicalClassifier wraps these tables and is the
# object the rest of the code receives by injection.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations


# ═════════════════════════════════════════════════════════════════════════
# 1. STOP WORDS
# ═════════════════════════════════════════════════════════════════════════

STOP_WORDS: frozenset[str] = frozenset({
    # Articles
    "the", "a", "an",
    # Conjunctions
    "and", "or", "but", "nor", "yet", "so",
    # Prepositions
    "in", "on", "at", "to", "for", "of", "with", "by",
    "from", "up", "about", "into", "through", "during",
    "before", "after", "above", "below", "between", "among",
    # Common verbs
    "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can",
    # Pronouns
    "i", "you", "he", "she", "it", "we", "they",
    "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their",
    "mine", "yours", "hers", "ours", "theirs",
    # Demonstratives
    "this", "that", "these", "those",
    # Common adverbs
    "very", "really", "quite", "rather", "too",
    "just", "only", "even", "still", "already",
    "now", "then", "here", "there", "where", "when",
    # Common adjectives
    "good", "bad", "big", "small", "new", "old",
    "high", "low", "long", "short", "right", "wrong",
    "same", "different", "other", "another", "some", "any",
    # Numbers and time words
    "one", "two", "three", "first", "second", "third",
    "today", "yesterday", "tomorrow",
    # Nouns that add no value on their own
    "thing", "things", "way", "ways", "time", "times",
    "people", "person", "man", "woman", "child", "children",
    "work", "works", "life", "lives", "world", "worlds",
    "day", "days", "year", "years", "month", "months",
    "week", "weeks", "hour", "hours", "minute", "minutes",
})


# ═════════════════════════════════════════════════════════════════════════
# 2. GENERIC TERMS
# ═════════════════════════════════════════════════════════════════════════

GENERIC_TERMS: frozenset[str] = frozenset({
    # Common actions
    "having", "being", "doing", "going", "coming", "getting",
    "making", "taking", "giving", "saying", "telling",
    "knowing", "thinking", "feeling", "seeing", "hearing",
    # Concepts that are too broad
    "something", "anything", "everything", "nothing",
    "someone", "anyone", "everyone", "noone",
    "somewhere", "anywhere", "everywhere", "nowhere",
    # Modifiers
    "especially", "particularly", "specifically", "generally",
    "usually", "normally", "typically", "sometimes",
    "often", "always", "never", "rarely",
    # Connectors
    "however", "therefore", "moreover", "furthermore",
    "meanwhile", "otherwise", "nevertheless", "nonetheless",
    # Responses
    "yes", "no", "maybe", "perhaps", "probably",
    "definitely", "certainly", "surely", "obviously",
    # Fillers
    "well", "okay", "right", "sure", "fine",
    "thanks", "thank", "please", "sorry",
    # Time words
    "whenever", "wherever", "whatever", "whoever",
    "before", "after", "during", "while",
    "once", "twice", "again", "still",
    # Quantity words
    "many", "much", "few", "little", "several",
    "some", "any", "all", "none", "both",
    # Comparison words
    "better", "worse", "best", "worst",
    "more", "less", "most", "least",
})


# ═════════════════════════════════════════════════════════════════════════
# 3. SIGNIFICANT WORDS
# ═════════════════════════════════════════════════════════════════════════
# Single capitalized words are noisy (every sentence starts with one), so
# rule 6 of the extractor only promotes a lone word to a concept when it
# appears here.

SIGNIFICANT_WORDS: frozenset[str] = frozenset({
    # Technology
    "technology", "software", "hardware", "computer", "internet",
    "programming", "coding", "development", "engineering",
    "algorithm", "database", "network", "system",
    # Business
    "business", "company", "startup", "entrepreneur", "investor",
    "funding", "venture", "capital", "market", "product",
    "service", "customer", "revenue", "profit",
    # Academic
    "research", "study", "analysis", "theory", "method",
    "experiment", "data", "result", "conclusion",
    "education", "learning", "teaching", "knowledge",
    # Social
    "community", "society", "culture", "tradition", "custom",
    "relationship", "family", "friendship", "marriage",
    "parenting", "childhood", "adulthood", "aging",
    # Creative
    "art", "music", "literature", "writing", "design",
    "creativity", "innovation", "invention", "discovery",
    # Health
    "health", "medicine", "treatment", "therapy", "disease",
    "patient", "doctor", "hospital", "clinic",
    # Environment
    "environment", "nature", "climate", "weather", "pollution",
    "conservation", "sustainability", "renewable", "energy",
})


# ═════════════════════════════════════════════════════════════════════════
# 4. PHRASE-SHAPE TABLES
# ═════════════════════════════════════════════════════════════════════════
# Ordered tuples: they are interpolated into regex alternations.

ORGANIZATION_SUFFIXES: tuple[str, ...] = (
    "Inc", "Corp", "Company", "University", "Institute", "Foundation",
    "Organization", "School", "College", "Hospital", "Museum", "Gallery",
    "Library",
)

LOCATION_SUFFIXES: tuple[str, ...] = (
    "City", "State", "Country", "University", "Museum", "Gallery", "Park",
    "Street", "Avenue", "Road", "Airport", "Station",
)

# A quotation opening with one of these is speech, not a named concept.
SENTENCE_OPENERS: tuple[str, ...] = (
    "i ", "we ", "you ", "he ", "she ", "they ", "it ",
    "this ", "that ", "there ", "here ",
)

FILLER_PHRASES: tuple[str, ...] = (
    "better you than me", "i have to be really careful", "whenever i'd noticed",
    "i think", "i believe", "i know", "i feel", "i want", "i need",
    "we should", "we can", "we will", "we have", "we are",
    "you can", "you should", "you will", "you have", "you are",
    "it is", "it was", "it will", "it can", "it should",
    "this is", "this was", "this will", "this can",
    "that is", "that was", "that will", "that can",
)

# Characters stripped from both ends of a query token before keyword checks.
KEYWORD_STRIP_CHARS = ".,!?;:()[]{}'\""

# Capitalized words that follow "in" without naming a place ("in March").
TEMPORAL_NAMES: frozenset[str] = frozenset({
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
})
