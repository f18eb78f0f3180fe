"""
Structured logging for quranlife.

Loggers take keyword fields instead of preformatted strings, and every record
emitted inside a ``LogContext`` carries that goal's request id and theme, so
one ``match_goal`` call can be followed through search, the thematic
collection and the guidance build.

Usage:
    from quranlife.logging_config import LogContext, configure_logging, get_logger

    configure_logging(level="INFO", json_output=True)

    logger = get_logger(__name__)
    with LogContext(request_id="r123", theme="patience"):
        logger.info("Verse fetched", chapter=2, verse=255)
"""

import functools
import inspect
import json
import logging
import logging.handlers
import os
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

_log_context: ContextVar[Dict[str, Any]] = ContextVar("quranlife_log_context", default={})

LOG_LEVEL = os.environ.get("QURANLIFE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("QURANLIFE_LOG_FORMAT", "text")  # "json" or "text"
LOG_FILE = os.environ.get("QURANLIFE_LOG_FILE", "")
LOG_MAX_BYTES = int(os.environ.get("QURANLIFE_LOG_MAX_BYTES", 5 * 1024 * 1024))
LOG_BACKUP_COUNT = int(os.environ.get("QURANLIFE_LOG_BACKUP_COUNT", 3))

# Context keys promoted out of the free-form fields
CONTEXT_KEYS = ("request_id", "theme")


def _collect_fields(record: logging.LogRecord) -> tuple[Dict[str, Any], Dict[str, Any]]:
    """Split a record's context and keyword fields into (context, fields)."""
    merged = {**_log_context.get(), **getattr(record, "structured_fields", {})}
    context = {key: merged.pop(key) for key in CONTEXT_KEYS if merged.get(key)}
    return context, merged


class JSONFormatter(logging.Formatter):
    """One JSON object per line; Arabic text is left unescaped."""

    def format(self, record: logging.LogRecord) -> str:
        context, fields = _collect_fields(record)
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **context,
            **fields,
        }
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """``time [LEVEL] [module] [request theme] message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        context, fields = _collect_fields(record)
        stamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        parts = [stamp, f"[{record.levelname}]", f"[{record.name.rsplit('.', 1)[-1]}]"]
        if context:
            parts.append("[" + " ".join(str(context[k]) for k in CONTEXT_KEYS if k in context) + "]")
        parts.append(record.getMessage())
        parts.extend(f"{key}={value}" for key, value in fields.items())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger:
    """Thin wrapper over ``logging.Logger`` that accepts keyword fields."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, exc_info=exc_info, extra={"structured_fields": fields})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **fields)


class LogContext:
    """
    Attach fields (usually ``request_id`` and ``theme``) to every record
    logged inside the block. Nested contexts merge and unwind in order.
    """

    def __init__(self, **fields: Any):
        self._fields = fields
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set({**_log_context.get(), **self._fields})
        return self

    def __exit__(self, *exc: Any) -> None:
        _log_context.reset(self._token)


@functools.lru_cache(maxsize=None)
def get_logger(name: str) -> StructuredLogger:
    """Return the shared StructuredLogger for ``name`` (typically ``__name__``)."""
    return StructuredLogger(name)


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Install the console (and optional rotating file) handler on the root logger.

    Called once by the CLI. Unset arguments fall back to the
    ``QURANLIFE_LOG_LEVEL``, ``QURANLIFE_LOG_FORMAT`` and ``QURANLIFE_LOG_FILE``
    environment variables.
    """
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    use_json = json_output if json_output is not None else LOG_FORMAT == "json"
    formatter = JSONFormatter() if use_json else TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file or LOG_FILE:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file or LOG_FILE,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        root.addHandler(handler)
    root.setLevel(log_level)
    logging.getLogger("quranlife").setLevel(log_level)


def log_function(level: str = "DEBUG") -> Callable[[Callable], Callable]:
    """
    Log completion time of a plain or ``async def`` callable.

    Failures are logged at ERROR with the traceback and re-raised.
    """
    log_level = getattr(logging, level.upper(), logging.DEBUG)

    def decorator(func: Callable) -> Callable:
        logger = get_logger(func.__module__)

        def _done(start: float, error: Optional[BaseException] = None) -> None:
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            if error is None:
                logger._log(
                    log_level, f"{func.__qualname__} completed", duration_ms=duration_ms
                )
            else:
                logger.error(
                    f"{func.__qualname__} failed",
                    exc_info=True,
                    duration_ms=duration_ms,
                    error=str(error),
                )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.monotonic()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _done(start, e)
                    raise
                _done(start)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _done(start, e)
                raise
            _done(start)
            return result

        return wrapper

    return decorator
