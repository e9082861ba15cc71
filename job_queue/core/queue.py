"""
Job queue: admission, dispatch and shutdown.

Jobs are dequeued strictly in submission order whenever the concurrency
gate has room. Each dequeued job then passes the rate limiter and runs
under its deadline in its own task; when it settles, the freed slot is
immediately offered to the next pending job.
"""

import asyncio
import itertools
import logging
import time
from collections.abc import Callable
from typing import Any

from job_queue.config import Settings, get_settings
from job_queue.constants import REJECT_DISPOSED, SPAN_EXECUTE_JOB, JobStatus
from job_queue.core.gate import ConcurrencyGate
from job_queue.core.pending import PendingQueue
from job_queue.core.rate_limit import SlidingWindowRateLimiter
from job_queue.core.timeout import run_with_deadline
from job_queue.exceptions import DisposedError, JobTimeoutError
from job_queue.observability.logging import bind_job_context
from job_queue.observability.metrics import MetricsCollector, get_metrics
from job_queue.observability.tracing import get_tracer
from job_queue.types.job import JobResult, PendingJobEntry, QueueConfig, QueueStats

logger = logging.getLogger(__name__)


class JobQueue:
    """
    In-process asynchronous job queue.

    Features:
    - At most ``concurrency_limit`` jobs executing at once
    - At most ``rate_limit`` job starts per sliding window
    - Each job fails with JobTimeoutError after ``timeout_limit`` seconds
    - FIFO dequeue order, no head-of-line bypass
    - Disposal rejects queued jobs and lets running jobs finish

    All state lives on one event loop; ``schedule`` must be called from a
    coroutine running on it.
    """

    def __init__(
        self,
        concurrency_limit: int | None = None,
        rate_limit: int | None = None,
        timeout_limit: float | None = None,
        *,
        name: str | None = None,
        rate_window: float | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the queue.

        Args:
            concurrency_limit: Maximum simultaneously executing jobs.
            rate_limit: Maximum job starts per window. None means unlimited
                unless JOB_QUEUE_RATE_LIMIT is set.
            timeout_limit: Maximum execution time per job in seconds.
            name: Queue name used in logs and metric labels.
            rate_window: Rate limit window in seconds.
            metrics: Metrics collector. Defaults to the process-wide one.

        Omitted values fall back to ``Settings``.

        Raises:
            InvalidConfigError: If any limit is not positive.
        """
        settings = get_settings()

        self.config = QueueConfig.create(
            concurrency_limit=(
                settings.concurrency_limit if concurrency_limit is None else concurrency_limit
            ),
            rate_limit=settings.rate_limit if rate_limit is None else rate_limit,
            timeout_limit=settings.timeout_limit if timeout_limit is None else timeout_limit,
            rate_window=settings.rate_window if rate_window is None else rate_window,
        )
        self.name = name or settings.queue_name

        self._pending = PendingQueue()
        self._gate = ConcurrencyGate(self.config.concurrency_limit)
        self._rate_limiter = SlidingWindowRateLimiter(
            self.config.rate_limit,
            window=self.config.rate_window,
        )
        self._running: set[asyncio.Task] = set()
        self._job_ids = itertools.count(1)
        self._disposed = False
        self._metrics = metrics or get_metrics()

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> "JobQueue":
        """
        Build a queue from settings.

        Args:
            settings: Settings to use. Defaults to environment settings.
            **overrides: Constructor arguments taking precedence over settings.

        Returns:
            JobQueue: The configured queue.
        """
        settings = settings or get_settings()
        options: dict[str, Any] = {
            "concurrency_limit": settings.concurrency_limit,
            "rate_limit": settings.rate_limit,
            "timeout_limit": settings.timeout_limit,
            "rate_window": settings.rate_window,
            "name": settings.queue_name,
        }
        options.update(overrides)
        return cls(**options)

    async def __aenter__(self) -> "JobQueue":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def size(self) -> int:
        """Number of jobs waiting to start."""
        return len(self._pending)

    def active(self) -> int:
        """Number of jobs currently executing."""
        return self._gate.active

    def stats(self) -> QueueStats:
        """Snapshot of the queue's state and limits."""
        return QueueStats(
            name=self.name,
            pending=self.size(),
            active=self.active(),
            disposed=self._disposed,
            concurrency_limit=self.config.concurrency_limit,
            rate_limit=self.config.rate_limit,
            timeout_limit=self.config.timeout_limit,
        )

    def schedule(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> asyncio.Future:
        """
        Submit a job.

        Returns immediately. The returned future resolves with a JobResult,
        or fails with the task's own error, JobTimeoutError, or
        DisposedError (already failed if the queue is disposed).

        Args:
            task: Async callable to run.
            *args: Positional arguments for the task.
            **kwargs: Keyword arguments for the task.

        Returns:
            asyncio.Future: Settled exactly once with the job's outcome.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        if self._disposed:
            self._metrics.record_job_rejected(self.name, REJECT_DISPOSED)
            future.set_exception(DisposedError())
            return future

        entry = PendingJobEntry(
            task=task,
            args=args,
            kwargs=kwargs,
            enqueued_at=time.monotonic(),
            future=future,
            job_id=next(self._job_ids),
        )
        self._pending.push(entry)
        self._metrics.record_job_submitted(self.name)

        logger.debug(
            "Job submitted",
            extra={"queue": self.name, "job_id": entry.job_id, "pending": len(self._pending)},
        )

        self._dispatch()
        return future

    def dispose(self) -> None:
        """
        Shut the queue down.

        Rejects every job still waiting with DisposedError and every later
        submission. Running jobs are left to finish. Safe to call repeatedly.
        """
        first_call = not self._disposed
        self._disposed = True

        rejected = 0
        for entry in self._pending.drain():
            if entry.fail(DisposedError()):
                rejected += 1

        if rejected:
            self._metrics.record_job_rejected(self.name, REJECT_DISPOSED, rejected)
        self._update_gauges()

        if first_call:
            logger.info(
                "Queue disposed",
                extra={"queue": self.name, "rejected": rejected, "active": self.active()},
            )

    async def aclose(self) -> None:
        """Dispose the queue and wait for running jobs to settle."""
        self.dispose()

        if self._running:
            logger.info(
                f"Waiting for {len(self._running)} jobs to complete",
                extra={"queue": self.name},
            )
            await asyncio.gather(*self._running, return_exceptions=True)

    def _dispatch(self) -> None:
        """Start pending jobs, front first, while the gate has room."""
        while self._pending and self._gate.has_capacity():
            entry = self._pending.pop()

            if entry.is_settled:
                # Cancelled by the caller while waiting
                logger.debug("Skipping cancelled job", extra={"queue": self.name})
                continue

            self._gate.acquire()
            job = asyncio.create_task(self._run_job(entry, time.monotonic()))
            self._running.add(job)
            job.add_done_callback(self._running.discard)

        self._update_gauges()

    async def _run_job(self, entry: PendingJobEntry, dequeued_at: float) -> None:
        """
        Execute one dequeued job and settle its future.

        Any failure, including one inside the queue itself, is delivered to
        the job's future; the slot is always released and handed on. Only
        cancellation of this task itself (loop teardown) stops the hand-on.
        """
        queue_time = max(0.0, dequeued_at - entry.enqueued_at)
        status = JobStatus.FAILED
        execution_time = 0.0
        task_cancelled = False

        try:
            bind_job_context(queue=self.name, job_id=entry.job_id)
            self._metrics.record_queue_wait(self.name, queue_time)
            waited = await self._rate_limiter.acquire()
            if waited > 0:
                self._metrics.record_rate_limit_wait(self.name, waited)
                logger.info(
                    "Job delayed by rate limit",
                    extra={"waited": f"{waited:.3f}s"},
                )

            with get_tracer().start_as_current_span(SPAN_EXECUTE_JOB) as span:
                span.set_attribute("job.queue", self.name)
                span.set_attribute("job.id", entry.job_id)
                span.set_attribute("job.queue_time_ms", queue_time * 1000)

                started_at = time.monotonic()
                try:
                    result = await run_with_deadline(
                        entry.task,
                        entry.args,
                        entry.kwargs,
                        self.config.timeout_limit,
                    )
                except JobTimeoutError as e:
                    execution_time = time.monotonic() - started_at
                    status = JobStatus.TIMED_OUT
                    logger.warning(
                        "Job timed out",
                        extra={"timeout": self.config.timeout_limit},
                    )
                    entry.fail(e)
                except asyncio.CancelledError:
                    execution_time = time.monotonic() - started_at
                    status = JobStatus.CANCELLED
                    if asyncio.current_task().cancelling():
                        raise
                    # The body itself ended cancelled; this task was not
                    logger.info("Job body was cancelled")
                    entry.future.cancel()
                except Exception as e:
                    execution_time = time.monotonic() - started_at
                    logger.info("Job failed", extra={"error": repr(e)})
                    entry.fail(e)
                else:
                    execution_time = time.monotonic() - started_at
                    status = JobStatus.SUCCEEDED
                    entry.fulfill(
                        JobResult(
                            result=result,
                            queue_time_ms=queue_time * 1000,
                            execution_time_ms=execution_time * 1000,
                        )
                    )

                span.set_attribute("job.status", str(status))

            logger.debug(
                "Job finished",
                extra={"status": str(status), "duration": f"{execution_time:.3f}s"},
            )

        except asyncio.CancelledError:
            task_cancelled = True
            status = JobStatus.CANCELLED
            entry.future.cancel()
            raise

        except Exception as e:
            logger.exception("Exception executing job", extra={"error": str(e)})
            entry.fail(e)

        finally:
            self._metrics.record_job_completed(
                self.name,
                str(status),
                execution_time,
            )
            self._gate.release()
            if task_cancelled:
                self._update_gauges()
            else:
                self._dispatch()

    def _update_gauges(self) -> None:
        self._metrics.update_queue_depth(self.name, len(self._pending))
        self._metrics.update_active_jobs(self.name, self._gate.active)
