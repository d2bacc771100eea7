"""JSON-lines logging for the CLI and the colour library, plus crash capture."""

from __future__ import annotations

import atexit
import faulthandler
import json
import logging
import logging.handlers
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO

from .config import config_root


_LOGGER_NAME = "systheme"
# library modules log under their own package names
_LIBRARY_LOGGERS = ("systheme_colors",)
# structured fields lifted from ``extra=`` into the JSON record
_EXTRA_FIELDS = ("event", "crash_id", "role", "backend")

_fault_stream: TextIO | None = None


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(keep_files: int = 7, verbose: bool = False) -> logging.Logger:
    """File logging always; ``verbose`` adds stderr output and debug records."""
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = []

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir() / "systheme.log"),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())
    handlers.append(file_handler)

    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        handlers.append(stream_handler)

    for name in (_LOGGER_NAME, *_LIBRARY_LOGGERS):
        target = logging.getLogger(name)
        target.setLevel(level)
        for handler in handlers:
            target.addHandler(handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def install_crash_hooks() -> None:
    """Log uncaught exceptions with a crash id and dump native faults to fault.log."""
    global _fault_stream
    logger = get_logger()

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        crash_id = str(uuid.uuid4())
        extra: dict[str, Any] = {"event": "uncaught_exception", "crash_id": crash_id}
        # a lookup failure names the role and backend that produced it
        for name in ("role", "backend"):
            if hasattr(exc_value, name):
                extra[name] = getattr(exc_value, name)
        logger.critical(f"uncaught exception crash_id={crash_id}", exc_info=(exc_type, exc_value, exc_tb), extra=extra)

    sys.excepthook = _log_uncaught

    if _fault_stream is None:
        _fault_stream = (log_dir() / "fault.log").open("a", encoding="utf-8")
        faulthandler.enable(file=_fault_stream)
        atexit.register(remove_crash_hooks)
        logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})


def remove_crash_hooks() -> None:
    global _fault_stream
    sys.excepthook = sys.__excepthook__
    if _fault_stream is not None:
        faulthandler.disable()
        _fault_stream.close()
        _fault_stream = None
