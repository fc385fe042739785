"""
Centralized logging for the CV Studio backend.

All backend loggers live under the ``backend`` namespace. A LogBuffer handler
is attached to that namespace, so the admin back-office can read recent queue
and worker activity through /api/admin/logs. Records still propagate to the
root handlers installed by configure_logging().

Usage:
    from backend.utils.logging import get_logger

    logger = get_logger("ai_worker")
    logger.info("Job completed", job_id=job.id, chars=1200)

Keyword arguments other than the standard logging ones are kept as the
entry's metadata.
"""

import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

ROOT_LOGGER_NAME = "backend"

_STANDARD_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @classmethod
    def from_levelno(cls, levelno: int) -> "LogLevel":
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


@dataclass(frozen=True)
class LogEntry:
    level: LogLevel
    message: str
    source: str = "system"
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        return cls(
            level=LogLevel.from_levelno(record.levelno),
            message=record.getMessage(),
            source=getattr(record, "source", record.name),
            metadata=dict(getattr(record, "metadata", None) or {}),
            timestamp=datetime.fromtimestamp(record.created, timezone.utc),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "message": self.message,
            "source": self.source,
            "metadata": self.metadata,
        }


class LogBuffer(logging.Handler):
    """Handler keeping the newest records in memory."""

    def __init__(self, max_size: int = 1000):
        super().__init__(level=logging.DEBUG)
        self._entries: deque = deque(maxlen=max_size)
        self._level_totals: Counter = Counter()

    def emit(self, record: logging.LogRecord):
        # Handler.handle() already holds self.lock here
        entry = LogEntry.from_record(record)
        self._entries.append(entry)
        self._level_totals[entry.level] += 1

    def get_recent(
        self,
        limit: int = 100,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Newest entries first, optionally filtered by level and source."""
        with self.lock:
            entries = list(self._entries)

        matching = [
            entry for entry in reversed(entries)
            if (level is None or entry.level == level)
            and (source is None or entry.source == source)
        ]
        return [entry.to_dict() for entry in matching[:limit]]

    def get_stats(self) -> Dict[str, Any]:
        with self.lock:
            by_source = Counter(entry.source for entry in self._entries)
            return {
                "total": len(self._entries),
                "by_source": dict(by_source),
                "error_count": self._level_totals[LogLevel.ERROR] + self._level_totals[LogLevel.CRITICAL],
                "warning_count": self._level_totals[LogLevel.WARNING],
            }

    def clear(self):
        with self.lock:
            self._entries.clear()
            self._level_totals.clear()


class MetadataFormatter(logging.Formatter):
    """Appends a record's metadata to the formatted line."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        metadata = getattr(record, "metadata", None)
        return f"{line} | {metadata}" if metadata else line


class AppLogger(logging.LoggerAdapter):
    """
    Adapter tagging records with a source name and keyword metadata.

    ``logger.error("Job failed", job_id=...)`` logs the message with
    ``{"job_id": ...}`` as metadata, visible in the buffer and on stdout.
    """

    def __init__(self, source: str):
        super().__init__(logging.getLogger(f"{ROOT_LOGGER_NAME}.{source}"), {"source": source})
        self.source = source

    def process(self, msg, kwargs):
        metadata = {key: kwargs.pop(key) for key in list(kwargs) if key not in _STANDARD_KWARGS}
        kwargs["extra"] = {**kwargs.get("extra", {}), "source": self.source, "metadata": metadata}
        return msg, kwargs


_log_buffer = LogBuffer()

_backend_logger = logging.getLogger(ROOT_LOGGER_NAME)
_backend_logger.setLevel(logging.DEBUG)
_backend_logger.addHandler(_log_buffer)


def get_log_buffer() -> LogBuffer:
    return _log_buffer


def get_logger(source: str) -> AppLogger:
    return AppLogger(source)


def configure_logging(level: str = "INFO"):
    """Install the stdout handler; called once by the API entrypoint."""
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler.setFormatter(MetadataFormatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logging.basicConfig(level=handler.level, handlers=[handler])


queue_logger = AppLogger("ai_queue")
worker_logger = AppLogger("ai_worker")
ai_logger = AppLogger("ai_service")
db_logger = AppLogger("database")
api_logger = AppLogger("api")
