"""Bounded worker pool for webhook event processing."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]


class WorkerPool:
    """
    Runs submitted jobs on a fixed number of asyncio workers.

    Jobs wait in a bounded queue; when it is full new jobs are dropped
    and counted rather than queued without limit.
    """

    def __init__(self, workers: int = 4, maxsize: int = 100) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.workers = workers
        self._queue: asyncio.Queue[Job] = asyncio.Queue(maxsize=maxsize)
        self._tasks: list[asyncio.Task[None]] = []
        self._counters = {"submitted": 0, "completed": 0, "failed": 0, "dropped": 0}

    @property
    def running(self) -> bool:
        """Whether the worker tasks have been started."""
        return bool(self._tasks)

    def start(self) -> None:
        """Spawn the worker tasks on the running event loop."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._worker(i), name=f"webhook-worker-{i}")
            for i in range(self.workers)
        ]
        logger.info(f"Started {self.workers} webhook workers")

    async def stop(self) -> None:
        """Wait for queued jobs to finish, then stop the workers."""
        if not self._tasks:
            return
        await self._queue.join()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Stopped webhook workers")

    def submit(self, job: Job) -> bool:
        """Queue a job; returns False if it was dropped because the queue is full."""
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            self._counters["dropped"] += 1
            logger.warning(f"Worker queue full ({self._queue.maxsize}), dropping event")
            return False
        self._counters["submitted"] += 1
        return True

    async def join(self) -> None:
        """Block until every queued job has been processed."""
        await self._queue.join()

    def stats(self) -> dict[str, Any]:
        """Counters for submitted, completed, failed and dropped jobs plus queue depth."""
        return {**self._counters, "pending": self._queue.qsize()}

    async def _worker(self, index: int) -> None:
        while True:
            job = await self._queue.get()
            try:
                await job()
                self._counters["completed"] += 1
            except Exception:
                self._counters["failed"] += 1
                logger.exception(f"Worker {index} failed processing event")
            finally:
                self._queue.task_done()
