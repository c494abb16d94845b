"""Text normalization applied to every document before it is stored.

Two concerns live here:

1. **Content cleaning** -- drops bytes that are not valid UTF-8 and any
   control characters other than newline and tab, then trims surrounding
   whitespace.  Every downstream offset (chunk ``start``/``end``) is an
   index into the *cleaned* string, so the cleaner must run exactly once,
   before chunking.

2. **Whitespace-insensitive comparison** -- a helper used to check that a
   chunk's recorded ``[start, end)`` span reproduces its text once
   whitespace and sentence separators are ignored.
"""

from __future__ import annotations

import re

# Characters kept below the printable range.
_ALLOWED_CONTROL_CHARS = frozenset("\n\t")

# DEL is printable by code point but is still a control character.
_DELETE_CHAR = "\x7f"

# Whitespace runs and the "." sentence separator the chunker re-joins on.
_COMPARISON_NOISE = re.compile(r"[\s.]+")


def clean_content(content: str | bytes) -> str:
    """Return *content* with invalid encoding and control characters removed.

    Bytes input is decoded as UTF-8, silently discarding invalid sequences.
    String input is round-tripped through UTF-8 so that lone surrogates
    (left behind by ``surrogateescape`` decoding) are discarded too.

    Args:
        content: Raw document text or raw response bytes.

    Returns:
        The cleaned, stripped text.  May be the empty string.
    """
    if isinstance(content, bytes):
        text = content.decode("utf-8", errors="ignore")
    else:
        text = content.encode("utf-8", errors="ignore").decode("utf-8", errors="ignore")

    kept = [
        ch
        for ch in text
        if ch in _ALLOWED_CONTROL_CHARS or (ord(ch) >= 32 and ch != _DELETE_CHAR)
    ]
    return "".join(kept).strip()


def squash_for_comparison(text: str) -> str:
    """Remove whitespace and periods so two renderings of a span compare equal."""
    return _COMPARISON_NOISE.sub("", text)
