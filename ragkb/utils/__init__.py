"""Utility modules for ragkb.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at RagKBError;
  each pipeline concern raises its own subclass so callers can handle
  failures granularly without broad ``except Exception`` blocks.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- content cleaning (invalid UTF-8, control
  characters) and whitespace-insensitive span comparison.
"""

# -- Domain exception hierarchy --------------------------------------------
from ragkb.utils.errors import (
    ConfigurationError,
    EmptyContentError,
    ExtractionError,
    FetchError,
    InvalidInputError,
    InvalidStateTransitionError,
    NotFoundError,
    PersistenceError,
    RagKBError,
)

# -- Structured logging setup ----------------------------------------------
from ragkb.utils.logging import configure_logging, get_logger

# -- Content cleaning ------------------------------------------------------
from ragkb.utils.text_normalizer import clean_content, squash_for_comparison

__all__ = [
    "ConfigurationError",
    "EmptyContentError",
    "ExtractionError",
    "FetchError",
    "InvalidInputError",
    "InvalidStateTransitionError",
    "NotFoundError",
    "PersistenceError",
    "RagKBError",
    "clean_content",
    "configure_logging",
    "get_logger",
    "squash_for_comparison",
]
