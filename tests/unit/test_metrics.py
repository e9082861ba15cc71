"""
Unit tests for metrics collection.
"""

from prometheus_client import CollectorRegistry

from job_queue.observability.metrics import MetricsCollector, get_metrics


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_record_job_lifecycle(self, metrics: MetricsCollector, registry: CollectorRegistry):
        """Test submission and completion counters."""
        metrics.record_job_submitted("q")
        metrics.record_job_submitted("q")
        metrics.record_job_completed("q", "succeeded", 0.2)

        assert registry.get_sample_value("jobs_submitted_total", {"queue": "q"}) == 2
        assert registry.get_sample_value(
            "jobs_completed_total", {"queue": "q", "status": "succeeded"}
        ) == 1
        assert registry.get_sample_value(
            "job_duration_seconds_count", {"queue": "q", "status": "succeeded"}
        ) == 1

    def test_gauges(self, metrics: MetricsCollector, registry: CollectorRegistry):
        """Test depth and active gauges."""
        metrics.update_queue_depth("q", 3)
        metrics.update_active_jobs("q", 2)

        assert registry.get_sample_value("job_queue_depth", {"queue": "q"}) == 3
        assert registry.get_sample_value("job_queue_active_jobs", {"queue": "q"}) == 2

    def test_rejections_and_waits(self, metrics: MetricsCollector, registry: CollectorRegistry):
        """Test rejection counter and wait histograms."""
        metrics.record_job_rejected("q", "disposed", 4)
        metrics.record_queue_wait("q", 0.5)
        metrics.record_rate_limit_wait("q", 12.0)

        assert registry.get_sample_value(
            "jobs_rejected_total", {"queue": "q", "reason": "disposed"}
        ) == 4
        assert registry.get_sample_value("job_queue_wait_seconds_sum", {"queue": "q"}) == 0.5
        assert registry.get_sample_value("job_rate_limit_wait_seconds_sum", {"queue": "q"}) == 12.0

    def test_exposition(self, metrics: MetricsCollector):
        """Test metrics render in Prometheus text format."""
        metrics.record_job_submitted("q")

        body = metrics.get_metrics()

        assert b"jobs_submitted_total" in body
        assert metrics.get_content_type().startswith("text/plain")

    def test_global_collector_is_shared(self):
        """Test get_metrics returns one process-wide collector."""
        assert get_metrics() is get_metrics()
