"""Structured logging configuration for Readall"""

import inspect
import json
import logging
import time
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import Settings, get_settings


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Structured fields passed as ``extra={"extra_data": {...}}``."""
    return dict(getattr(record, "extra_data", None) or {})


class JSONFormatter(logging.Formatter):
    """One JSON object per line for the rotating log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        entry.update(_extra_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output; playback timings are appended in ms."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        duration = _extra_fields(record).get("duration_ms")
        if duration is None:
            return line

        # Exception text, if any, follows the first line
        head, sep, tail = line.partition("\n")
        return f"{head} ({duration:.2f}ms){sep}{tail}"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Setup logging configuration for the application.

    Args:
        settings: Application settings. Uses the cached settings when omitted.
    """
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    console_handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if settings.enable_file_logging:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        app_handler = RotatingFileHandler(
            log_dir / "readall.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        app_handler.setLevel(logging.DEBUG)
        app_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(app_handler)

        error_handler = RotatingFileHandler(
            log_dir / "errors.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(error_handler)

    # Frame-rate code paths are chatty at DEBUG
    logging.getLogger("readall.services.scheduler").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_performance(operation_name: str):
    """
    Decorator to log function execution time.

    Args:
        operation_name: Name of the operation for logging
    """

    def decorator(func: Callable) -> Callable:
        def _log_success(logger: logging.Logger, start_time: float) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                f"{operation_name} completed",
                extra={
                    "extra_data": {
                        "operation": operation_name,
                        "duration_ms": duration_ms,
                        "success": True,
                    }
                },
            )

        def _log_failure(logger: logging.Logger, start_time: float, error: Exception) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"{operation_name} failed: {error}",
                exc_info=True,
                extra={
                    "extra_data": {
                        "operation": operation_name,
                        "duration_ms": duration_ms,
                        "success": False,
                        "error_type": type(error).__name__,
                    }
                },
            )

        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(func.__module__)
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_failure(logger, start_time, e)
                raise
            _log_success(logger, start_time)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(func.__module__)
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_failure(logger, start_time, e)
                raise
            _log_success(logger, start_time)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator

