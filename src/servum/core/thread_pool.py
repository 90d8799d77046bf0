"""
=============================================================================
THREAD POOL IMPLEMENTATION
=============================================================================

A fixed set of worker threads pulling jobs from one shared queue. Every
accepted connection becomes one job.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           ThreadPool                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   submit(job) ──►  ┌──────────────────────────────┐                 │
    │                    │  queue.Queue (unbounded)     │                 │
    │                    │  [Job][Job][Job][None][None] │                 │
    │                    └──────────────┬───────────────┘                 │
    │                                   │ get()  (one message per call)   │
    │                 ┌─────────────────┼─────────────────┐               │
    │                 ▼                 ▼                 ▼               │
    │            Worker-0          Worker-1          Worker-2             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Messages on the queue are either a Job (run it) or None (the "poison
pill": stop). Shutdown puts exactly one None per worker BEHIND everything
already queued, so pending jobs are drained before the workers exit.

=============================================================================
GUARANTEES
=============================================================================

    - The worker count is fixed at construction; it never grows or shrinks.
    - submit() never blocks: the queue has no size limit.
    - Each job runs exactly once, on exactly one worker.
    - A job that is running when shutdown starts is never interrupted.
    - shutdown() returns only after every worker thread has exited.

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
    """
    Worker thread states.

    Used for monitoring and debugging the thread pool.
    """
    IDLE = "idle"        # Waiting for a message
    BUSY = "busy"        # Executing a job
    STOPPED = "stopped"  # Thread exited


@dataclass
class Job:
    """
    A deferred function call: "call this function with these arguments later".

    For the file server this is always one connection's handling closure.
    A job is owned by the queue until a worker takes it, and is executed
    exactly once.

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        kwargs: Keyword arguments for the function.
        submitted_at: Time the job was submitted (for queue-wait logging).
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.monotonic)

    def __call__(self) -> Any:
        return self.func(*self.args, **self.kwargs)


# The termination message. Anything else on the queue is a Job.
TERMINATE = None


class Worker(threading.Thread):
    """
    Worker thread that processes jobs from the shared queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Worker Loop                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. get() one message (blocks; the queue's lock is held only      │
    │      while the message is taken off)                                │
    │          │                                                           │
    │          ├── None → exit loop, thread terminates                    │
    │          │                                                           │
    │          └── Job  → run it here, outside the queue lock             │
    │                                                                      │
    │   2. task_done(), back to step 1                                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, job_queue: "queue.Queue[Optional[Job]]", worker_id: int):
        """
        Initialize the worker.

        Args:
            job_queue: Queue shared by every worker of the pool.
            worker_id: Identifier for this worker (for logging).
        """
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.job_queue = job_queue
        self.worker_id = worker_id

        self.state = WorkerState.IDLE

        # Metrics (owned by this thread only)
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            message = self.job_queue.get()

            try:
                if message is TERMINATE:
                    break
                self._execute(message)
            finally:
                self.job_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} was terminated")

    def _execute(self, job: Job):
        """
        Execute a single job synchronously.

        An exception escaping the job is a defect of the job. It is logged
        with its traceback and counted; the worker itself stays alive so the
        pool keeps its size.
        """
        self.state = WorkerState.BUSY
        start_time = time.monotonic()

        try:
            job()
            self.tasks_completed += 1
            logger.debug(
                f"Worker {self.worker_id} finished job in "
                f"{time.monotonic() - start_time:.3f}s "
                f"(queued {start_time - job.submitted_at:.3f}s)"
            )
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(f"Worker {self.worker_id} job failed: {e}")
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size thread pool.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      ThreadPool Usage                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   pool = ThreadPool(4)            # 4 workers start immediately    │
    │                                                                      │
    │   pool.submit(handle, conn)       # never blocks                    │
    │                                                                      │
    │   pool.shutdown()                 # drain queue, join workers      │
    │                                                                      │
    │   with ThreadPool(4) as pool:     # shutdown() on exit             │
    │       ...                                                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, size: int):
        """
        Create the pool and start its workers.

        Args:
            size: Number of worker threads. Must be at least 1; a pool with
                  no workers would accept jobs and never run them.

        Raises:
            ValueError: If size is less than 1.
        """
        if size < 1:
            raise ValueError(f"Thread pool size must be >= 1, got {size}")

        self.size = size

        # Unbounded FIFO; queue.Queue does its own locking on get()/put().
        self._queue: "queue.Queue[Optional[Job]]" = queue.Queue()

        self._lock = threading.Lock()  # Guards _shutdown
        self._shutdown = False

        logger.info(f"Starting thread pool with {size} workers")
        self._workers = [Worker(self._queue, worker_id) for worker_id in range(size)]
        for worker in self._workers:
            worker.start()

    def submit(self, func: Callable[..., Any], *args, **kwargs) -> None:
        """
        Queue a job for execution by exactly one worker.

        Jobs are handed out in FIFO order. With several idle workers racing
        for the queue, FIFO submission does not mean FIFO completion.

        Raises:
            RuntimeError: If the pool has been shut down.
        """
        with self._lock:
            if self._shutdown:
                raise RuntimeError("Thread pool is shut down")
            self._queue.put(Job(func=func, args=args, kwargs=kwargs))

    def shutdown(self) -> None:
        """
        Stop the pool gracefully.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    shutdown() Flow                               │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   1. Reject further submissions                                 │
        │   2. Put one None per worker behind the queued jobs             │
        │   3. join() every worker: each finishes its current job,        │
        │      drains what is ahead of its None, then exits               │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Safe to call more than once.
        """
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True

            logger.info("Sending terminate message to all workers")
            for _ in self._workers:
                self._queue.put(TERMINATE)

        logger.info("Shutting down all workers")
        for worker in self._workers:
            worker.join()

        logger.info("Thread pool shutdown complete")

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    # =========================================================================
    # MONITORING: Check pool status
    # =========================================================================

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    @property
    def worker_count(self) -> int:
        """Get count of live (non-stopped) workers."""
        return sum(1 for w in self._workers if w.is_alive())

    @property
    def busy_workers(self) -> int:
        """Get count of busy workers."""
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        """Get count of idle workers."""
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queue_size(self) -> int:
        """Get current number of queued messages."""
        return self._queue.qsize()

    @property
    def stats(self) -> dict:
        """
        Get thread pool statistics.

        Returns a dict with worker and job counts for logging and tests.
        """
        return {
            "workers": {
                "total": len(self._workers),
                "alive": self.worker_count,
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self.queue_size,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
