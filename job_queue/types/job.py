"""
Job-related type definitions.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from job_queue.constants import (
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_RATE_WINDOW_SECONDS,
    DEFAULT_TIMEOUT_LIMIT_SECONDS,
)
from job_queue.exceptions import InvalidConfigError


class QueueConfig(BaseModel):
    """
    Admission limits for a queue. Immutable after construction.

    ``rate_limit`` of None means job starts are not rate limited.
    """

    model_config = ConfigDict(frozen=True)

    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    rate_limit: int | None = None
    timeout_limit: float = DEFAULT_TIMEOUT_LIMIT_SECONDS
    rate_window: float = DEFAULT_RATE_WINDOW_SECONDS

    @classmethod
    def create(cls, **options: Any) -> "QueueConfig":
        """
        Build a config, rejecting non-positive limits.

        Options passed as None fall back to their defaults.

        Raises:
            InvalidConfigError: If any provided limit is <= 0 or not a number.
        """
        provided = {key: value for key, value in options.items() if value is not None}

        for key, value in provided.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigError(f"{key} must be a number")
            if value <= 0:
                raise InvalidConfigError(f"{key} must be greater than 0")

        try:
            return cls(**provided)
        except ValidationError as e:
            raise InvalidConfigError(str(e)) from e

    @property
    def is_rate_limited(self) -> bool:
        """Check if job starts are rate limited."""
        return self.rate_limit is not None


class JobResult(BaseModel):
    """
    Result delivered to the caller of ``JobQueue.schedule``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    result: Any = None
    queue_time_ms: float = Field(ge=0)
    execution_time_ms: float = Field(ge=0)


class QueueStats(BaseModel):
    """Point-in-time snapshot of a queue."""

    name: str
    pending: int
    active: int
    disposed: bool
    concurrency_limit: int
    rate_limit: int | None
    timeout_limit: float


@dataclass
class PendingJobEntry:
    """
    A submitted job that has not started yet.

    ``future`` is settled exactly once: with a JobResult, the task's own
    error, a timeout, or a disposal rejection.
    """

    task: Callable[..., Any]
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    enqueued_at: float
    future: asyncio.Future = field(repr=False)
    job_id: int = 0

    @property
    def is_settled(self) -> bool:
        """Check if the caller's future already holds an outcome."""
        return self.future.done()

    def fulfill(self, result: JobResult) -> bool:
        """Resolve the caller's future. Returns False if already settled."""
        if self.future.done():
            return False
        self.future.set_result(result)
        return True

    def fail(self, error: BaseException) -> bool:
        """Fail the caller's future. Returns False if already settled."""
        if self.future.done():
            return False
        self.future.set_exception(error)
        return True
