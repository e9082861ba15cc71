"""
FIFO queue of jobs waiting to start.
"""

from collections import deque
from collections.abc import Iterator

from job_queue.types.job import PendingJobEntry


class PendingQueue:
    """Submitted jobs in submission order. Entries leave only from the front."""

    def __init__(self) -> None:
        self._entries: deque[PendingJobEntry] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def push(self, entry: PendingJobEntry) -> None:
        """Append an entry at the back."""
        self._entries.append(entry)

    def pop(self) -> PendingJobEntry:
        """
        Remove and return the front entry.

        Raises:
            IndexError: If the queue is empty.
        """
        return self._entries.popleft()

    def drain(self) -> Iterator[PendingJobEntry]:
        """Remove entries front to back, yielding each one."""
        while self._entries:
            yield self._entries.popleft()
