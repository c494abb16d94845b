"""Unit tests for the queue-item state machine."""

from __future__ import annotations

import pytest

from ragkb.models import ALLOWED_TRANSITIONS, QueueItem, QueueStatus, source_states_for


class TestTransitions:
    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (QueueStatus.PENDING, QueueStatus.PROCESSING),
            (QueueStatus.PROCESSING, QueueStatus.COMPLETED),
            (QueueStatus.PROCESSING, QueueStatus.FAILED),
            (QueueStatus.COMPLETED, QueueStatus.PENDING),
            (QueueStatus.FAILED, QueueStatus.PENDING),
            (QueueStatus.DELETED, QueueStatus.PENDING),
            (QueueStatus.PENDING, QueueStatus.DELETED),
        ],
    )
    def test_allowed(self, source: QueueStatus, target: QueueStatus) -> None:
        assert source.can_transition_to(target)

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (QueueStatus.PENDING, QueueStatus.COMPLETED),
            (QueueStatus.COMPLETED, QueueStatus.PROCESSING),
            (QueueStatus.FAILED, QueueStatus.COMPLETED),
            (QueueStatus.DELETED, QueueStatus.PROCESSING),
            (QueueStatus.PROCESSING, QueueStatus.PENDING),
        ],
    )
    def test_forbidden(self, source: QueueStatus, target: QueueStatus) -> None:
        assert not source.can_transition_to(target)

    def test_every_state_has_an_entry(self) -> None:
        assert set(ALLOWED_TRANSITIONS) == set(QueueStatus)

    def test_only_pending_can_be_claimed(self) -> None:
        assert source_states_for(QueueStatus.PROCESSING) == (QueueStatus.PENDING,)

    def test_sources_for_pending(self) -> None:
        assert source_states_for(QueueStatus.PENDING) == (
            QueueStatus.COMPLETED,
            QueueStatus.FAILED,
            QueueStatus.DELETED,
        )

    def test_terminal_states(self) -> None:
        assert {s for s in QueueStatus if s.is_terminal} == {
            QueueStatus.COMPLETED,
            QueueStatus.FAILED,
        }


class TestQueueItem:
    def test_status_parsed_from_string(self) -> None:
        item = QueueItem(id=1, url="https://x/a", status="failed", error="boom", retry_count=2)
        assert item.status is QueueStatus.FAILED
        assert item.status == "failed"

    def test_defaults(self) -> None:
        item = QueueItem(id=1, url="https://x/a")
        assert item.status is QueueStatus.PENDING
        assert item.retry_count == 0
        assert item.document_id is None
