"""URL work-queue models and the queue-item state machine.

Architecture note:
    A queue item's ``status`` is a closed set of states with explicit
    allowed transitions.  The knowledge store uses
    :func:`source_states_for` to build the ``WHERE status IN (...)``
    guard of every status-changing UPDATE, so an illegal move simply
    matches zero rows and is reported as
    :class:`~ragkb.utils.errors.InvalidStateTransitionError`.

    The normal lifecycle of a URL::

        pending ──claim──> processing ──ok──> completed
                                     └─err──> failed

    ``deleted`` is a soft-delete marker reachable from every live state;
    reindexing moves a finished (or deleted) item back to ``pending``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QueueStatus(str, Enum):  # noqa: UP042
    """Lifecycle states of a queued URL."""

    PENDING = "pending"         # Waiting for a worker
    PROCESSING = "processing"   # Claimed by exactly one worker
    COMPLETED = "completed"     # Ingested successfully
    FAILED = "failed"           # Last attempt failed; see ``error``
    DELETED = "deleted"         # Soft-deleted; row kept for audit history

    def can_transition_to(self, target: QueueStatus) -> bool:
        """Return ``True`` if ``self -> target`` is an allowed move."""
        return target in ALLOWED_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        """Completed and failed items are finished until someone reindexes them."""
        return self in (QueueStatus.COMPLETED, QueueStatus.FAILED)


ALLOWED_TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.PENDING: frozenset({QueueStatus.PROCESSING, QueueStatus.DELETED}),
    QueueStatus.PROCESSING: frozenset(
        {QueueStatus.COMPLETED, QueueStatus.FAILED, QueueStatus.DELETED}
    ),
    QueueStatus.COMPLETED: frozenset({QueueStatus.PENDING, QueueStatus.DELETED}),
    QueueStatus.FAILED: frozenset({QueueStatus.PENDING, QueueStatus.DELETED}),
    QueueStatus.DELETED: frozenset({QueueStatus.PENDING}),
}


def source_states_for(target: QueueStatus) -> tuple[QueueStatus, ...]:
    """Return every status from which *target* may be entered, in enum order."""
    return tuple(s for s in QueueStatus if target in ALLOWED_TRANSITIONS[s])


class QueueItem(BaseModel):
    """A URL waiting for, undergoing, or finished with ingestion."""

    model_config = ConfigDict(frozen=True)

    id: int
    url: str
    status: QueueStatus = QueueStatus.PENDING
    error: str | None = Field(default=None, description="Last failure message, if any.")
    retry_count: int = Field(default=0, ge=0, description="Number of failed attempts.")
    # Populated by queue listings when the URL has an ingested document.
    document_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClaimedItem(BaseModel):
    """The (id, url) pair a worker receives from a successful claim."""

    model_config = ConfigDict(frozen=True)

    id: int
    url: str
