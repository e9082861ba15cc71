"""
Exceptions raised by the job queue.

Errors raised by a job's own task are never wrapped; they reach the caller
unchanged through the future returned by ``JobQueue.schedule``.
"""

from job_queue.constants import DISPOSED_MESSAGE, TIMEOUT_MESSAGE


class JobQueueError(Exception):
    """Base class for all job queue errors."""


class InvalidConfigError(JobQueueError, ValueError):
    """A limit passed at construction time was not positive."""


class DisposedError(JobQueueError):
    """The queue was disposed before the job could start."""

    def __init__(self, message: str = DISPOSED_MESSAGE):
        super().__init__(message)


class JobTimeoutError(JobQueueError, TimeoutError):
    """A job ran longer than the queue's timeout limit."""

    def __init__(self, message: str = TIMEOUT_MESSAGE, timeout: float | None = None):
        super().__init__(message)
        self.timeout = timeout
