"""
Structured logging setup using structlog.

The queue logs through the standard library; ``setup_logging`` routes those
records through structlog. Records logged while a job runs, by the queue or
by the job body, carry the job's ``queue`` and ``job_id`` from contextvars.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace

from job_queue.config import Settings, get_settings

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("opentelemetry", "grpc")


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add OpenTelemetry trace context to log records.

    Records logged inside the ``execute_job`` span get its trace and span ids.
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def bind_job_context(queue: str, job_id: int) -> None:
    """
    Stamp the queue name and job id on every record logged from the
    current job task.

    Each job runs in its own task with its own context copy, so bindings
    never leak between jobs. The job body's task inherits them.
    """
    structlog.contextvars.bind_contextvars(queue=queue, job_id=job_id)


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging for the embedding application.

    Args:
        settings: Optional settings. Uses cached environment settings if omitted.
            ``log_format`` selects JSON or console output, ``log_level`` the
            root level.
    """
    settings = settings or get_settings()
    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings.log_format),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
