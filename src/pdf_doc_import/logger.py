"""Structured JSON logger in Go slog layout.

Each record is one JSON object:
{"time":"2026-02-03T14:06:20.829529-05:00","level":"INFO","source":{"function":"analyze","file":"analyzer.py","line":43},"msg":"content analyzed","pages":3}
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator

# Fields attached to every record emitted in the current import
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class StructuredFormatter(logging.Formatter):
    """Render records as slog-compatible JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc).astimezone()

        log_entry: dict[str, Any] = {
            "time": now.isoformat(),
            "level": record.levelname,
            "source": {
                "function": record.funcName,
                "file": os.path.basename(record.pathname),
                "line": record.lineno,
            },
            "msg": record.getMessage(),
        }

        ctx_fields = _log_context.get()
        if ctx_fields:
            log_entry.update(ctx_fields)

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """Logger taking a message plus keyword fields."""

    def __init__(self, name: str, level: str | None = None):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(
            (level or os.getenv("PDF_IMPORT_LOG_LEVEL", "INFO")).upper()
        )

        self._logger.handlers.clear()
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter())
        self._logger.addHandler(handler)
        self._logger.propagate = False

    def _log(self, level: int, msg: str, exc_info: bool = False, **fields: Any) -> None:
        extra = {"extra_fields": fields} if fields else {}
        # stacklevel 3 attributes the record to the caller of debug()/info()/...
        self._logger.log(level, msg, stacklevel=3, extra=extra, exc_info=exc_info)

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def warn(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: str, exc_info: bool = False, **fields: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=exc_info, **fields)


def get_context() -> dict[str, Any]:
    return _log_context.get().copy()


@contextmanager
def import_context(**fields: Any) -> Iterator[None]:
    """Scope context fields to a block, restoring the previous ones on exit."""
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


logger = StructuredLogger("pdf_doc_import")
