"""
Type definitions for the job queue.
"""

from job_queue.types.job import (
    JobResult,
    PendingJobEntry,
    QueueConfig,
    QueueStats,
)

__all__ = [
    "JobResult",
    "PendingJobEntry",
    "QueueConfig",
    "QueueStats",
]
