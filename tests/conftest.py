"""
Pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import pytest
import pytest_asyncio
from prometheus_client import CollectorRegistry

from job_queue.config import Settings, get_settings
from job_queue.core.queue import JobQueue
from job_queue.observability.metrics import MetricsCollector


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Make every test read a fresh environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry() -> CollectorRegistry:
    """Create an isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricsCollector:
    """Create a metrics collector bound to an isolated registry."""
    return MetricsCollector(registry)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        concurrency_limit=4,
        rate_limit=None,
        timeout_limit=5.0,
        queue_name="test-queue",
        log_level="DEBUG",
        log_format="console",
    )


@pytest_asyncio.fixture
async def make_queue(
    metrics: MetricsCollector,
) -> AsyncGenerator[Callable[..., JobQueue]]:
    """Build queues that are closed when the test ends."""
    queues: list[JobQueue] = []

    def factory(**options: Any) -> JobQueue:
        options.setdefault("metrics", metrics)
        queue = JobQueue(**options)
        queues.append(queue)
        return queue

    yield factory

    for queue in queues:
        await queue.aclose()
