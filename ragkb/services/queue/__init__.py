"""Queue consumers."""

from ragkb.services.queue.worker_pool import WorkerPool

__all__ = ["WorkerPool"]
