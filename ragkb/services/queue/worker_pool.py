"""Fixed-size asyncio worker pool draining the durable URL queue.

Each worker loops: claim the oldest ``pending`` URL, ingest it, repeat.
The knowledge store's claim is the only coordination point -- it is a
single atomic UPDATE, so however many workers poll, each item moves to
``processing`` exactly once.  When nothing is claimable a worker sleeps
for ``poll_interval`` seconds (waking early on shutdown) and polls again.

Shutdown is cooperative: setting the shared cancel event stops new
claims, an item already claimed runs to completion, and
:meth:`WorkerPool.run_until_cancelled` returns only after every worker
has exited and any detached extraction task has finished.

Failed items are *not* re-queued here; reindexing is the recovery path.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from ragkb.models import ClaimedItem
from ragkb.utils.errors import PersistenceError, RagKBError

if TYPE_CHECKING:
    from ragkb.interfaces.knowledge_store import IKnowledgeStore
    from ragkb.services.ingestion.ingestion_service import IngestionService

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_WORKER_COUNT = 5
_DEFAULT_POLL_INTERVAL = 1.0


class WorkerPool:
    """Runs N concurrent queue workers over one ingestion service.

    Parameters
    ----------
    store:
        Knowledge store providing the atomic claim.
    ingestion_service:
        Performs fetch + ingest and records completed / failed status.
    worker_count:
        Number of concurrent workers.
    poll_interval:
        Seconds a worker waits after finding the queue empty.
    """

    def __init__(
        self,
        store: IKnowledgeStore,
        ingestion_service: IngestionService,
        worker_count: int = _DEFAULT_WORKER_COUNT,
        poll_interval: float = _DEFAULT_POLL_INTERVAL,
    ) -> None:
        if worker_count < 1:
            msg = f"worker_count must be at least 1, got {worker_count}"
            raise ValueError(msg)
        self._store = store
        self._ingestion = ingestion_service
        self._worker_count = worker_count
        self._poll_interval = poll_interval
        self._cancel_event: asyncio.Event | None = None
        self._run_task: asyncio.Task[None] | None = None
        self.completed_count = 0
        self.failed_count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run_until_cancelled(self, cancel_event: asyncio.Event) -> None:
        """Run the workers until *cancel_event* is set, then drain."""
        workers = [
            asyncio.create_task(self._worker_loop(i, cancel_event), name=f"ragkb-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info(
            "worker_pool_started",
            worker_count=self._worker_count,
            poll_interval=self._poll_interval,
        )
        try:
            await asyncio.gather(*workers)
        finally:
            await self._ingestion.drain_background_tasks()
            logger.info(
                "worker_pool_stopped",
                completed=self.completed_count,
                failed=self.failed_count,
            )

    def start(self) -> asyncio.Task[None]:
        """Run the pool in the background; pair with :meth:`stop`."""
        if self._run_task is not None and not self._run_task.done():
            msg = "worker pool is already running"
            raise RuntimeError(msg)
        self._cancel_event = asyncio.Event()
        self._run_task = asyncio.create_task(
            self.run_until_cancelled(self._cancel_event), name="ragkb-worker-pool"
        )
        return self._run_task

    async def stop(self) -> None:
        """Signal shutdown and wait for every worker to exit."""
        if self._cancel_event is None or self._run_task is None:
            return
        self._cancel_event.set()
        await self._run_task

    # ------------------------------------------------------------------
    # Worker loop
    # ------------------------------------------------------------------

    async def _worker_loop(self, worker_id: int, cancel_event: asyncio.Event) -> None:
        while not cancel_event.is_set():
            try:
                item = await self._store.claim_next()
            except PersistenceError as exc:
                logger.warning("queue_claim_failed", worker_id=worker_id, error=str(exc))
                item = None

            if item is None:
                await self._backoff(cancel_event)
                continue

            await self._process(worker_id, item)
        logger.debug("worker_exited", worker_id=worker_id)

    async def _process(self, worker_id: int, item: ClaimedItem) -> None:
        with structlog.contextvars.bound_contextvars(worker_id=worker_id, queue_id=item.id):
            logger.info("queue_item_claimed", url=item.url)
            try:
                result = await self._ingestion.ingest_from_url(item.url, queue_id=item.id)
            except RagKBError as exc:
                self.failed_count += 1
                logger.warning("queue_item_failed", url=item.url, error=str(exc))
            except Exception as exc:  # noqa: BLE001
                self.failed_count += 1
                logger.exception("queue_item_crashed", url=item.url, error=str(exc))
            else:
                self.completed_count += 1
                logger.info(
                    "queue_item_completed",
                    url=item.url,
                    document_id=result.document_id,
                    chunk_count=result.chunk_count,
                )

    async def _backoff(self, cancel_event: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self._poll_interval)
        except asyncio.TimeoutError:
            pass
