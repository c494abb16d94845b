"""Custom exception hierarchy for ragkb.

All application exceptions inherit from :class:`RagKBError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "sqlite", "web_fetch", "hash_embedding") caused the
failure.

The hierarchy is organized by pipeline concern:

    RagKBError  (base -- catch-all for any ragkb error)
    +-- InvalidInputError            (empty URL / query, malformed id)
    |   +-- InvalidStateTransitionError (queue item moved along a forbidden edge)
    +-- EmptyContentError            (normalization produced no text)
    +-- FetchError                   (remote retrieval or HTML parse failure)
    +-- NotFoundError                (unknown document / queue id)
    +-- PersistenceError             (knowledge store operation failed)
    +-- ExtractionError              (best-effort entity extraction failure)
    +-- ConfigurationError           (startup / missing config)

Everything on the primary write path (document and chunk persistence)
propagates to the caller.  ``ExtractionError`` is the exception: the
ingestion service logs and swallows it so that a bad entity never rolls
back a durable document.
"""


class RagKBError(Exception):
    """Base exception for all ragkb errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which collaborator triggered the error.
    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite] database is locked``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class InvalidInputError(RagKBError):
    """Raised when a caller supplies an empty URL, empty query, or bad id."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidStateTransitionError(InvalidInputError):
    """Raised when a queue item is asked to move to a status it cannot reach."""

    def __init__(
        self,
        message: str = "Queue item cannot make this status transition",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(RagKBError):
    """Raised when a document or queue item id does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class EmptyContentError(RagKBError):
    """Raised when a document normalizes to an empty string."""

    def __init__(
        self,
        message: str = "Document content is empty after normalization",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class FetchError(RagKBError):
    """Raised when a remote page cannot be retrieved or yields no text."""

    def __init__(
        self,
        message: str = "Failed to fetch remote content",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ExtractionError(RagKBError):
    """Raised when entity/relationship extraction fails.

    Never surfaced as a pipeline failure -- the ingestion service catches
    it, logs a warning, and carries on.
    """

    def __init__(
        self,
        message: str = "Entity extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------

class PersistenceError(RagKBError):
    """Raised when a knowledge store read or write fails."""

    def __init__(
        self,
        message: str = "Knowledge store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(RagKBError):
    """Raised when required configuration is missing or invalid at startup."""

    def __init__(
        self,
        message: str = "Configuration error",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
