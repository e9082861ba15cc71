"""
Application constants.
Centralized location for all constant values used across the package.
"""

from enum import StrEnum


class JobStatus(StrEnum):
    """
    Job lifecycle states.

    Terminal states of a dequeued job:
    - SUCCEEDED: the task returned before its deadline
    - FAILED: the task raised, or the queue failed while running it
    - TIMED_OUT: the deadline fired first
    - CANCELLED: the task ended cancelled, or the job task was cancelled
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


# Default values
DEFAULT_CONCURRENCY_LIMIT = 1000
DEFAULT_TIMEOUT_LIMIT_SECONDS = 1200.0
DEFAULT_RATE_WINDOW_SECONDS = 60.0
DEFAULT_QUEUE_NAME = "default"

# Error messages
DISPOSED_MESSAGE = "Queue has been disposed"
TIMEOUT_MESSAGE = "Job timed out"

# Rejection reasons
REJECT_DISPOSED = "disposed"

# Metrics names
METRIC_QUEUE_DEPTH = "job_queue_depth"
METRIC_ACTIVE_JOBS = "job_queue_active_jobs"
METRIC_JOBS_SUBMITTED = "jobs_submitted_total"
METRIC_JOBS_COMPLETED = "jobs_completed_total"
METRIC_JOBS_REJECTED = "jobs_rejected_total"
METRIC_JOB_DURATION = "job_duration_seconds"
METRIC_QUEUE_WAIT = "job_queue_wait_seconds"
METRIC_RATE_LIMIT_WAIT = "job_rate_limit_wait_seconds"

# Trace span names
SPAN_EXECUTE_JOB = "execute_job"
