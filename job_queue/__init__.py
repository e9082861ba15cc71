"""
In-process Async Job Queue

Runs caller-supplied coroutines under a concurrency limit, a sliding-window
start rate limit and a per-job timeout, preserving FIFO admission order.
"""

__version__ = "1.0.0"

from job_queue.core.queue import JobQueue
from job_queue.exceptions import (
    DisposedError,
    InvalidConfigError,
    JobQueueError,
    JobTimeoutError,
)
from job_queue.types.job import JobResult, QueueConfig, QueueStats

__all__ = [
    "JobQueue",
    "JobResult",
    "QueueConfig",
    "QueueStats",
    "JobQueueError",
    "InvalidConfigError",
    "DisposedError",
    "JobTimeoutError",
]
