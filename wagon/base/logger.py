"""
Structured logging for Wagon.

Provides a pre-configured logger that emits JSON-structured log records
with transfer context (provider, repository, operation, resource) for easy
filtering in build logs and log aggregation tools.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any


_CONTEXT_FIELDS = ("request_id", "provider", "repository", "operation", "resource")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via WagonLogger.log_operation
        for key in _CONTEXT_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class WagonLogger:
    """Convenience wrapper around :mod:`logging` for transport operations."""

    def __init__(self, name: str = "wagon") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        provider: str | None = None,
        repository: str | None = None,
        operation: str | None = None,
        resource: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with transfer context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            provider: Storage provider scheme ('s3', 'gs').
            repository: Repository URL the session is bound to.
            operation: Transport operation (e.g. 'put').
            resource: Resource name relative to the repository base.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "provider": provider,
            "repository": repository,
            "operation": operation,
            "resource": resource,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
wg_logger = WagonLogger()
