"""
Admission and dispatch engine.
"""

from job_queue.core.gate import ConcurrencyGate
from job_queue.core.pending import PendingQueue
from job_queue.core.queue import JobQueue
from job_queue.core.rate_limit import SlidingWindowRateLimiter
from job_queue.core.timeout import run_with_deadline

__all__ = [
    "ConcurrencyGate",
    "JobQueue",
    "PendingQueue",
    "SlidingWindowRateLimiter",
    "run_with_deadline",
]
