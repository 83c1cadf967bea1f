"""
=============================================================================
WORKER THREAD POOL
=============================================================================

Every accepted connection becomes one task. Tasks wait in a bounded queue
and are run by worker threads; the pool starts with ``min_workers`` and
adds threads, up to ``max_workers``, when all of them are busy and work is
queued.

    accept thread                      workers
    ─────────────                      ───────
    submit(task) ──► [ queue (bounded) ] ──► Worker-0  task()
                                         ──► Worker-1  task()
                                         ──► ...

    queue full  →  submit() returns False  →  caller answers 503

Request handling shares nothing between tasks except the user store,
which does its own locking.

=============================================================================
SHUTDOWN
=============================================================================

    1. refuse new tasks
    2. wait (bounded) for the queue to drain
    3. one None ("poison pill") per worker; a worker exits when it gets one
    4. join the workers

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """A deferred call, ``func(*args, **kwargs)``."""

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """Runs tasks from the shared queue until it receives None."""

    def __init__(self, task_queue: queue.Queue, worker_id: int):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")
        while True:
            task = self.task_queue.get()
            try:
                if task is None:
                    break
                self._execute(task)
            finally:
                self.task_queue.task_done()
        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()
        try:
            task.func(*task.args, **task.kwargs)
            self.tasks_completed += 1
        except Exception as e:
            # The task's own error handling failed; keep the worker alive.
            logger.exception(
                f"Worker {self.worker_id} task failed after "
                f"{time.time() - start_time:.3f}s: {e}"
            )
            self.tasks_failed += 1
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Bounded-queue thread pool.

    Usage:
        pool = ThreadPool(min_workers=4, max_workers=16)
        pool.start()
        if not pool.submit(handle, args=(conn,)):
            reject(conn)
        pool.shutdown(timeout=30.0)
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 16,
        queue_size: int = 100,
    ):
        self.min_workers = min_workers
        self.max_workers = max_workers
        self._task_queue: queue.Queue = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._lock = threading.Lock()
        self._started = False
        self._shutdown = False

    def start(self):
        """Start ``min_workers`` threads. No-op when already started."""
        if self._started:
            return
        logger.info(f"Starting thread pool with {self.min_workers} workers")
        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()
        self._started = True
        self._shutdown = False

    def _add_worker(self) -> Worker:
        # Caller holds self._lock.
        worker = Worker(self._task_queue, worker_id=len(self._workers))
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> bool:
        """
        Queue ``func(*args, **kwargs)`` without blocking.

        Returns:
            True if queued, False if the queue is full.

        Raises:
            RuntimeError: If the pool is not running.
        """
        if not self._started or self._shutdown:
            raise RuntimeError("Thread pool is not running")

        try:
            self._task_queue.put_nowait(Task(func, args, kwargs or {}))
        except queue.Full:
            return False

        self._maybe_scale_up()
        return True

    def _maybe_scale_up(self):
        with self._lock:
            all_busy = all(w.state == WorkerState.BUSY for w in self._workers)
            if all_busy and len(self._workers) < self.max_workers and self._task_queue.qsize():
                logger.debug(f"Scaling up to {len(self._workers) + 1} workers")
                self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop all workers.

        Args:
            wait: Let queued tasks run before stopping.
            timeout: Upper bound, in seconds, for draining the queue.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Thread pool shutdown timed out, abandoning queued tasks")
                    break
                time.sleep(0.05)

        for _ in self._workers:
            self._task_queue.put(None)
        for worker in self._workers:
            worker.join(timeout=2.0)

        self._workers.clear()
        self._started = False
        logger.info("Thread pool stopped")

    # =========================================================================
    # STATS
    # =========================================================================

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def queued(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        return {
            "workers": {"total": self.worker_count, "busy": self.busy_workers},
            "tasks": {
                "queued": self.queued,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
