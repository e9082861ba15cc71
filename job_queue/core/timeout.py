"""
Race a job against its deadline.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from job_queue.exceptions import JobTimeoutError

logger = logging.getLogger(__name__)


def _discard_late_outcome(future: asyncio.Future) -> None:
    """Consume the outcome of a job that already lost to its deadline."""
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.debug(
            "Timed out job finished with error after deadline",
            extra={"error": repr(error)},
        )


async def run_with_deadline(
    task: Callable[..., Any],
    args: tuple[Any, ...] = (),
    kwargs: dict[str, Any] | None = None,
    limit: float | None = None,
) -> Any:
    """
    Run ``task(*args, **kwargs)`` and race it against ``limit`` seconds.

    Whichever settles first wins. If the task wins, its result is returned
    or its own exception re-raised unchanged. If the deadline wins,
    JobTimeoutError is raised and the task keeps running in the
    background; its eventual outcome is discarded.

    A callable returning a plain value rather than an awaitable is treated
    as having settled immediately.

    Args:
        task: The job callable.
        args: Positional arguments for the task.
        kwargs: Keyword arguments for the task.
        limit: Deadline in seconds. None disables the deadline.

    Returns:
        The task's result.

    Raises:
        JobTimeoutError: If the deadline fires before the task settles.
    """
    outcome = task(*args, **(kwargs or {}))
    if not inspect.isawaitable(outcome):
        return outcome

    future = asyncio.ensure_future(outcome)
    if limit is None:
        return await future

    try:
        done, _ = await asyncio.wait({future}, timeout=limit)
    except asyncio.CancelledError:
        future.cancel()
        raise

    if future in done:
        return future.result()

    future.add_done_callback(_discard_late_outcome)
    raise JobTimeoutError(timeout=limit)
