"""
Structured JSON Logging Module.

Every component receives an injectable ``StructuredLogger`` whose records
are written as one JSON object per line, to stdout and (unless disabled)
to a size-rotated log file.

Credentials never reach a sink: bearer tokens are masked in messages
and ``extra`` fields named like a secret are replaced before
formatting.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, TextIO

from expense_tracker.config import get_config

REDACTED: str = "[redacted]"

_SECRET_FIELDS: frozenset[str] = frozenset(
    {"token", "password", "authorization", "access_token"}
)
_BEARER_RE: re.Pattern[str] = re.compile(r"(Bearer\s+)[^\s'\"]+", re.IGNORECASE)

# Attributes every LogRecord carries; anything else came in via ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
    ).__dict__.keys()
) | {"message", "asctime", "taskName"}


class RedactingFilter(logging.Filter):
    """Masks credentials on a record before any handler formats it."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _BEARER_RE.sub(rf"\1{REDACTED}", message)
        if masked != message:
            record.msg, record.args = masked, None
        for key in _SECRET_FIELDS & record.__dict__.keys():
            setattr(record, key, REDACTED)
        return True


class JSONFormatter(logging.Formatter):
    """Formats log records as structured JSON objects.

    Each entry holds ``timestamp`` (ISO-8601, UTC), ``level``,
    ``logger_name`` and ``message``; caller context passed through
    ``extra`` lands under ``"extra"`` with its JSON types preserved, and
    a traceback under ``"exception"``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if context:
            entry["extra"] = context

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False, default=str)


class StructuredLogger:
    """Injectable JSON logger.

    Usage::

        log = StructuredLogger(name="expense_tracker.api")
        log.info("Request sent", extra={"path": "/api/categories/"})

    Unset sizing and file options fall back to ``AppConfig``.  Pass
    ``log_file=""`` to log to the stream only.  Handlers are attached
    once per logger name, so reusing a name reuses its sinks.
    """

    def __init__(
        self,
        name: str = "expense_tracker",
        level: int = logging.INFO,
        stream: Optional[TextIO] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(level)
        if self._logger.handlers:
            return

        formatter = JSONFormatter()
        redactor = RedactingFilter()

        stream_handler = logging.StreamHandler(stream or sys.stdout)
        stream_handler.addFilter(redactor)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        file_handler = self._open_file_handler(log_file, max_bytes, backup_count)
        if file_handler is not None:
            file_handler.addFilter(redactor)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

    def _open_file_handler(
        self,
        log_file: Optional[str],
        max_bytes: Optional[int],
        backup_count: Optional[int],
    ) -> Optional[RotatingFileHandler]:
        """Rotating file sink, or ``None`` when disabled or unwritable."""
        if log_file == "":
            return None
        if log_file is None or max_bytes is None or backup_count is None:
            cfg = get_config()
            log_file = cfg.LOG_FILE if log_file is None else log_file
            max_bytes = cfg.LOG_MAX_BYTES if max_bytes is None else max_bytes
            backup_count = cfg.LOG_BACKUP_COUNT if backup_count is None else backup_count

        if not log_file:
            return None
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            return RotatingFileHandler(
                filename=str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            self._logger.warning(
                "Could not open log file '%s' (%s); logging to the console only.",
                log_file,
                exc,
            )
            return None

    @property
    def logger(self) -> logging.Logger:
        """The underlying ``logging.Logger``."""
        return self._logger

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.exception(msg, *args, **kwargs)


def get_logger(name: str = "expense_tracker") -> StructuredLogger:
    """Thin convenience factory for a configured ``StructuredLogger``."""
    return StructuredLogger(name=name)
