"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from job_queue.constants import (
    METRIC_ACTIVE_JOBS,
    METRIC_JOB_DURATION,
    METRIC_JOBS_COMPLETED,
    METRIC_JOBS_REJECTED,
    METRIC_JOBS_SUBMITTED,
    METRIC_QUEUE_DEPTH,
    METRIC_QUEUE_WAIT,
    METRIC_RATE_LIMIT_WAIT,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for job queues.

    Collects metrics for:
    - Queue depth and active jobs
    - Job submissions, completions and rejections
    - Execution duration, queue wait and rate limit wait
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of jobs waiting to start",
            ["queue"],
            registry=self._registry,
        )

        self.active_jobs = Gauge(
            METRIC_ACTIVE_JOBS,
            "Number of jobs currently executing",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_submitted = Counter(
            METRIC_JOBS_SUBMITTED,
            "Total number of jobs submitted",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_completed = Counter(
            METRIC_JOBS_COMPLETED,
            "Total number of jobs that finished executing",
            ["queue", "status"],
            registry=self._registry,
        )

        self.jobs_rejected = Counter(
            METRIC_JOBS_REJECTED,
            "Total number of jobs rejected without running",
            ["queue", "reason"],
            registry=self._registry,
        )

        self.job_duration = Histogram(
            METRIC_JOB_DURATION,
            "Job execution duration in seconds",
            ["queue", "status"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0, 1200.0),
            registry=self._registry,
        )

        self.queue_wait = Histogram(
            METRIC_QUEUE_WAIT,
            "Time jobs spent queued before dequeue in seconds",
            ["queue"],
            buckets=(0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
            registry=self._registry,
        )

        self.rate_limit_wait = Histogram(
            METRIC_RATE_LIMIT_WAIT,
            "Time jobs were held back by the rate limiter in seconds",
            ["queue"],
            buckets=(0.1, 1.0, 5.0, 15.0, 30.0, 45.0, 60.0),
            registry=self._registry,
        )

    def record_job_submitted(self, queue: str) -> None:
        """Record a job submission."""
        self.jobs_submitted.labels(queue=queue).inc()

    def record_job_completed(
        self,
        queue: str,
        status: str,
        duration_seconds: float,
    ) -> None:
        """Record a job completion."""
        self.jobs_completed.labels(queue=queue, status=status).inc()
        self.job_duration.labels(queue=queue, status=status).observe(
            duration_seconds
        )

    def record_job_rejected(self, queue: str, reason: str, count: int = 1) -> None:
        """Record jobs rejected without running."""
        self.jobs_rejected.labels(queue=queue, reason=reason).inc(count)

    def record_queue_wait(self, queue: str, wait_seconds: float) -> None:
        """Record how long a job waited before dequeue."""
        self.queue_wait.labels(queue=queue).observe(wait_seconds)

    def record_rate_limit_wait(self, queue: str, wait_seconds: float) -> None:
        """Record how long the rate limiter held a job back."""
        self.rate_limit_wait.labels(queue=queue).observe(wait_seconds)

    def update_queue_depth(self, queue: str, depth: int) -> None:
        """Update the pending job count for a queue."""
        self.queue_depth.labels(queue=queue).set(depth)

    def update_active_jobs(self, queue: str, active: int) -> None:
        """Update the executing job count for a queue."""
        self.active_jobs.labels(queue=queue).set(active)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for a metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics(registry: CollectorRegistry | None = None) -> MetricsCollector:
    """
    Set up and return the process-wide metrics collector.

    Args:
        registry: Optional custom registry, used only on first setup.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(registry)
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
