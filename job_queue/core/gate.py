"""
Concurrency gate: counts executing jobs against a fixed limit.
"""


class ConcurrencyGate:
    """
    Tracks how many jobs are executing.

    Not a semaphore: the dispatcher checks ``has_capacity`` and acquires in
    the same synchronous step, so nothing ever waits on the gate.
    """

    def __init__(self, limit: int):
        if limit <= 0:
            raise ValueError("limit must be greater than 0")
        self._limit = limit
        self._active = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._active

    def has_capacity(self) -> bool:
        """Check if another job may start now."""
        return self._active < self._limit

    def acquire(self) -> None:
        """
        Count a job as executing.

        Raises:
            RuntimeError: If the gate is already full.
        """
        if self._active >= self._limit:
            raise RuntimeError(f"Concurrency limit of {self._limit} already reached")
        self._active += 1

    def release(self) -> None:
        """
        Count a job as settled.

        Raises:
            RuntimeError: If no job is executing.
        """
        if self._active <= 0:
            raise RuntimeError("release() called with no active jobs")
        self._active -= 1
