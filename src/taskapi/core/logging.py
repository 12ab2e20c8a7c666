"""Structured logging configuration with JSON output and correlation IDs.

Uses python-json-logger for structured JSON logging suitable for
log aggregation systems like Loki, ELK, or CloudWatch.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

from taskapi.config import get_settings

# Context variable for correlation ID (request-scoped)
correlation_id_ctx: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    """Log filter that adds correlation_id and trace ids to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get()
        try:
            from taskapi.observability.tracing import get_trace_ids

            trace_id, span_id = get_trace_ids()
            record.trace_id = trace_id
            record.span_id = span_id
        except Exception:
            record.trace_id = None
            record.span_id = None
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        if getattr(record, "correlation_id", None):
            log_record["correlation_id"] = record.correlation_id
        if getattr(record, "trace_id", None):
            log_record["trace_id"] = record.trace_id
        if getattr(record, "span_id", None):
            log_record["span_id"] = record.span_id

        # Source location for debugging
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)

    # Use JSON format in production, text format in dev
    if settings.log_format == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    # The service writes its own access log line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    logging.getLogger("taskapi").info(
        "Task API logging configured",
        extra={
            "environment": settings.environment,
            "mongodb_database": settings.mongodb_database,
            "mongodb_collection": settings.mongodb_collection,
            "log_level": settings.log_level,
            "log_format": settings.log_format,
        },
    )
