"""Sentence-aligned text chunking with exact character offsets.

Splits normalized document text into :class:`~ragkb.models.ChunkSpan`
objects.  A chunk is sealed before the sentence that would take its
length to ``max_chunk_chars``; the ``". "`` joiners are not counted, so a
chunk can run slightly past the limit.  A single over-long sentence
becomes a chunk of its own, since sentences are never split.

The chunking strategy has two key design goals:

1. **Sentence-preserving** -- chunk boundaries fall on "." so no chunk
   starts or ends mid-sentence.  Sentences inside a chunk are re-joined
   with ``". "``.

2. **Exact offsets** -- every chunk records ``[start, end)`` into the
   original text.  Offsets are taken from the split positions themselves
   and only ever move forward, so a sentence that repeats verbatim later
   in the document still maps to *its own* occurrence, never the first.
   ``text[start:end]`` reproduces the chunk once whitespace and the "."
   separators are ignored.
"""

from __future__ import annotations

import structlog

from ragkb.models import ChunkSpan

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MAX_CHUNK_CHARS = 1000
_SENTENCE_TERMINATOR = "."
_SENTENCE_JOINER = ". "


class TextChunker:
    """Splits text into sentence-aligned chunks with character offsets.

    The chunking algorithm works in two phases:
    1. Split text on "." and record each trimmed sentence's offsets
    2. Accumulate sentences into a chunk until the next one would reach
       the size limit, then seal the chunk and start a new one

    Parameters
    ----------
    max_chunk_chars:
        Size limit for a chunk's joined text (default 1000).
    """

    def __init__(self, max_chunk_chars: int = _DEFAULT_MAX_CHUNK_CHARS) -> None:
        if max_chunk_chars < 1:
            msg = f"max_chunk_chars must be positive, got {max_chunk_chars}"
            raise ValueError(msg)
        self._max_chunk_chars = max_chunk_chars

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, text: str) -> list[ChunkSpan]:
        """Split *text* into ordered :class:`ChunkSpan` objects.

        Parameters
        ----------
        text:
            Normalized document text.  Offsets in the result index into
            exactly this string.

        Returns
        -------
        list[ChunkSpan]
            Chunks in document order with ``index`` 0..n-1.  Empty or
            whitespace-only input returns an empty list.
        """
        if not text or not text.strip():
            return []

        sentences = self._split_sentences(text)
        chunks = self._accumulate_chunks(sentences)

        logger.debug(
            "chunking_complete",
            sentence_count=len(sentences),
            chunk_count=len(chunks),
            text_length=len(text),
        )
        return chunks

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _split_sentences(text: str) -> list[tuple[str, int, int]]:
        """Return ``(sentence, start, end)`` for every non-empty sentence.

        ``start``/``end`` bound the *trimmed* sentence inside *text*.
        """
        sentences: list[tuple[str, int, int]] = []
        position = 0
        for raw in text.split(_SENTENCE_TERMINATOR):
            sentence = raw.strip()
            if sentence:
                start = position + (len(raw) - len(raw.lstrip()))
                sentences.append((sentence, start, start + len(sentence)))
            position += len(raw) + len(_SENTENCE_TERMINATOR)
        return sentences

    def _accumulate_chunks(self, sentences: list[tuple[str, int, int]]) -> list[ChunkSpan]:
        """Greedily pack sentences into chunks below the size limit."""
        chunks: list[ChunkSpan] = []
        parts: list[str] = []
        length = 0
        chunk_start = 0
        chunk_end = 0

        for sentence, start, end in sentences:
            if parts and length + len(sentence) >= self._max_chunk_chars:
                chunks.append(self._seal(len(chunks), parts, chunk_start, chunk_end))
                parts = []
                length = 0

            if not parts:
                chunk_start = start
            else:
                length += len(_SENTENCE_JOINER)
            parts.append(sentence)
            length += len(sentence)
            chunk_end = end

        if parts:
            chunks.append(self._seal(len(chunks), parts, chunk_start, chunk_end))
        return chunks

    @staticmethod
    def _seal(index: int, parts: list[str], start: int, end: int) -> ChunkSpan:
        return ChunkSpan(index=index, text=_SENTENCE_JOINER.join(parts), start=start, end=end)
