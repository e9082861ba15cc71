"""
Unit tests for configuration and queue construction.
"""

import pytest

from job_queue.config import Settings, get_settings
from job_queue.constants import (
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_QUEUE_NAME,
    DEFAULT_RATE_WINDOW_SECONDS,
    DEFAULT_TIMEOUT_LIMIT_SECONDS,
    JobStatus,
)
from job_queue.core.queue import JobQueue
from job_queue.exceptions import InvalidConfigError
from job_queue.types.job import QueueConfig


class TestQueueConfig:
    """Tests for QueueConfig."""

    def test_defaults(self):
        """Test default limits."""
        config = QueueConfig.create()

        assert config.concurrency_limit == 1000
        assert config.rate_limit is None
        assert config.timeout_limit == 1200
        assert config.rate_window == 60
        assert config.is_rate_limited is False

    def test_none_means_default(self):
        """Test options passed as None fall back to defaults."""
        config = QueueConfig.create(concurrency_limit=None, rate_limit=None)

        assert config.concurrency_limit == 1000
        assert config.rate_limit is None

    @pytest.mark.parametrize(
        "option",
        ["concurrency_limit", "rate_limit", "timeout_limit", "rate_window"],
    )
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, option: str, value: int):
        """Test non-positive limits raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError, match=f"{option} must be greater than 0"):
            QueueConfig.create(**{option: value})

    def test_non_numeric_rejected(self):
        """Test non-numeric limits raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError):
            QueueConfig.create(concurrency_limit="ten")

    def test_fractional_concurrency_rejected(self):
        """Test a fractional concurrency limit is rejected."""
        with pytest.raises(InvalidConfigError):
            QueueConfig.create(concurrency_limit=2.5)

    def test_invalid_config_is_value_error(self):
        """Test InvalidConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            QueueConfig.create(timeout_limit=-5)

    def test_immutable(self):
        """Test the config cannot change after construction."""
        config = QueueConfig.create(concurrency_limit=3)

        with pytest.raises(Exception):
            config.concurrency_limit = 4


class TestSettings:
    """Tests for environment settings."""

    def test_defaults(self):
        """Test settings defaults match queue defaults."""
        settings = Settings()

        assert settings.concurrency_limit == 1000
        assert settings.rate_limit is None
        assert settings.timeout_limit == 1200.0
        assert settings.rate_window == 60.0

    def test_defaults_come_from_constants(self):
        """Test settings and queue config share one set of defaults."""
        settings = Settings()
        config = QueueConfig.create()

        assert settings.concurrency_limit == config.concurrency_limit == DEFAULT_CONCURRENCY_LIMIT
        assert settings.timeout_limit == config.timeout_limit == DEFAULT_TIMEOUT_LIMIT_SECONDS
        assert settings.rate_window == config.rate_window == DEFAULT_RATE_WINDOW_SECONDS
        assert settings.queue_name == DEFAULT_QUEUE_NAME

    def test_job_statuses_are_terminal(self):
        """Test only outcome statuses exist, as used for metric labels."""
        assert [str(s) for s in JobStatus] == ["succeeded", "failed", "timed_out", "cancelled"]

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test settings are read from JOB_QUEUE_ variables."""
        monkeypatch.setenv("JOB_QUEUE_CONCURRENCY_LIMIT", "7")
        monkeypatch.setenv("JOB_QUEUE_RATE_LIMIT", "30")
        monkeypatch.setenv("JOB_QUEUE_QUEUE_NAME", "imports")

        settings = get_settings()

        assert settings.concurrency_limit == 7
        assert settings.rate_limit == 30
        assert settings.queue_name == "imports"

    def test_cached(self):
        """Test get_settings returns the same instance."""
        assert get_settings() is get_settings()


class TestJobQueueConstruction:
    """Tests for JobQueue construction."""

    def test_invalid_limits(self, metrics):
        """Test the queue rejects non-positive limits."""
        with pytest.raises(InvalidConfigError, match="concurrency_limit"):
            JobQueue(concurrency_limit=0, metrics=metrics)
        with pytest.raises(InvalidConfigError, match="rate_limit"):
            JobQueue(rate_limit=-1, metrics=metrics)
        with pytest.raises(InvalidConfigError, match="timeout_limit"):
            JobQueue(timeout_limit=0, metrics=metrics)

    def test_defaults_from_environment(self, monkeypatch: pytest.MonkeyPatch, metrics):
        """Test omitted arguments come from settings."""
        monkeypatch.setenv("JOB_QUEUE_CONCURRENCY_LIMIT", "3")
        monkeypatch.setenv("JOB_QUEUE_TIMEOUT_LIMIT", "2.5")

        queue = JobQueue(metrics=metrics)

        assert queue.config.concurrency_limit == 3
        assert queue.config.timeout_limit == 2.5
        assert queue.config.rate_limit is None

    def test_explicit_arguments_win(self, monkeypatch: pytest.MonkeyPatch, metrics):
        """Test constructor arguments override the environment."""
        monkeypatch.setenv("JOB_QUEUE_CONCURRENCY_LIMIT", "3")

        queue = JobQueue(concurrency_limit=9, metrics=metrics)

        assert queue.config.concurrency_limit == 9

    def test_from_settings(self, test_settings: Settings, metrics):
        """Test building a queue from a settings object."""
        queue = JobQueue.from_settings(test_settings, metrics=metrics, rate_limit=10)

        stats = queue.stats()
        assert stats.name == "test-queue"
        assert stats.concurrency_limit == 4
        assert stats.rate_limit == 10
        assert stats.timeout_limit == 5.0
        assert stats.pending == 0
        assert stats.active == 0
        assert stats.disposed is False
