"""Utility modules for the CV Studio backend."""

from backend.utils.logging import (
    get_logger,
    get_log_buffer,
    configure_logging,
    LogLevel,
    LogEntry,
    LogBuffer,
    AppLogger,
    queue_logger,
    worker_logger,
    ai_logger,
    db_logger,
    api_logger,
)

__all__ = [
    "get_logger",
    "get_log_buffer",
    "configure_logging",
    "LogLevel",
    "LogEntry",
    "LogBuffer",
    "AppLogger",
    "queue_logger",
    "worker_logger",
    "ai_logger",
    "db_logger",
    "api_logger",
]
