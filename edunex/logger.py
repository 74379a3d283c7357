"""
Structured JSON Logging.

``StructuredLogger`` wraps a ``logging.Logger`` whose handlers emit one
JSON object per line, both to stdout and to a size-rotated log file.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO, Union


class JSONFormatter(logging.Formatter):
    """Render a ``LogRecord`` as a single JSON object.

    Keys: ``timestamp`` (ISO-8601, UTC), ``level``, ``logger_name``,
    ``message``, plus ``extra`` for caller-supplied fields and
    ``exception`` when the record carries a traceback.
    """

    _STANDARD_ATTRS: frozenset[str] = frozenset(
        logging.LogRecord(
            name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
        ).__dict__.keys()
    ) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Union[str, dict[str, str]]] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, str] = {
            key: str(value)
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            entry["extra"] = extra_fields

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


class StructuredLogger:
    """Injectable logger.

    Construct one per subsystem and pass it to the classes that need
    it::

        log = StructuredLogger(name="auth")
        log.info("Signed in", extra={"user_id": "42"})

    Handlers are attached only the first time a given *name* is used,
    so re-creating a logger with the same name does not duplicate
    output.
    """

    def __init__(
        self,
        name: str = "edunex",
        level: Optional[int] = None,
        stream: Union[TextIO, None] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        # Lazy import: config itself logs through the stdlib at import time.
        from edunex.config import get_config
        _cfg = get_config()

        resolved_level: int = level if level is not None else _cfg.log_level_value
        self._logger: logging.Logger = logging.getLogger(f"edunex.{name}")
        self._logger.setLevel(resolved_level)
        self._logger.propagate = False

        if not self._logger.handlers:
            formatter = JSONFormatter()

            stream_handler = logging.StreamHandler(stream or sys.stdout)
            stream_handler.setLevel(resolved_level)
            stream_handler.setFormatter(formatter)
            self._logger.addHandler(stream_handler)

            resolved_log_file: str = log_file or _cfg.LOG_FILE
            try:
                log_path = Path(resolved_log_file)
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    filename=str(log_path),
                    maxBytes=max_bytes if max_bytes is not None else _cfg.LOG_MAX_BYTES,
                    backupCount=(
                        backup_count if backup_count is not None else _cfg.LOG_BACKUP_COUNT
                    ),
                    encoding="utf-8",
                )
                file_handler.setLevel(resolved_level)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)
            except OSError as exc:
                self._logger.warning(
                    "Could not open log file '%s': %s. Logging to console only.",
                    resolved_log_file,
                    exc,
                )

    @property
    def logger(self) -> logging.Logger:
        """The underlying ``logging.Logger``."""
        return self._logger

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.exception(msg, *args, **kwargs)


def get_logger(name: str = "edunex") -> StructuredLogger:
    """Return a ``StructuredLogger`` for *name*."""
    return StructuredLogger(name=name)
