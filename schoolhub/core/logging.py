import json
import logging
import os
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Iterable, Optional

from schoolhub.core.config import get_logging_config

# Request attributes copied from ``extra={...}`` into JSON log lines
CONTEXT_FIELDS = ("request_id", "user_id", "role", "resource", "ip")

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024


class CustomJsonFormatter(logging.Formatter):
    """One JSON object per line, with request context and timing when present"""

    def __init__(self, fields: Iterable[str] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        for field in self.fields:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if hasattr(record, "duration"):
            entry["duration_ms"] = record.duration

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": traceback.format_exception(exc_type, exc, tb),
            }
        return json.dumps(entry, default=str)


class LoggerFactory:
    """Builds the application loggers.

    The console always gets plain text. With a log directory, ``app.log`` and ``error.log``
    receive JSON lines, and the ``.access`` child logger writes ``access.log`` rotated daily.
    """

    @staticmethod
    def _file_handler(handler: logging.Handler, level: int) -> logging.Handler:
        handler.setLevel(level)
        handler.setFormatter(CustomJsonFormatter())
        return handler

    @classmethod
    def create_logger(cls, name: str, log_dir: Optional[str] = None, level: str = "INFO") -> logging.Logger:
        level_no = getattr(logging, level.upper(), logging.INFO)
        logger = logging.getLogger(name)
        logger.setLevel(level_no)
        logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(level_no)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)

        access = logging.getLogger(f"{name}.access")
        access.handlers.clear()

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            logger.addHandler(cls._file_handler(
                RotatingFileHandler(os.path.join(log_dir, "app.log"), maxBytes=MAX_LOG_BYTES, backupCount=5),
                level_no
            ))
            logger.addHandler(cls._file_handler(
                RotatingFileHandler(os.path.join(log_dir, "error.log"), maxBytes=MAX_LOG_BYTES, backupCount=5),
                logging.ERROR
            ))
            access.addHandler(cls._file_handler(
                TimedRotatingFileHandler(os.path.join(log_dir, "access.log"), when="midnight", backupCount=30),
                logging.DEBUG
            ))
        return logger


def log_function_call(logger: logging.Logger):
    """Time a coroutine and log its failures"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception:
                logger.error(f"{func.__qualname__} failed", exc_info=True)
                raise
            logger.debug(
                f"{func.__qualname__} completed",
                extra={"duration": round((time.perf_counter() - started) * 1000, 2)}
            )
            return result
        return wrapper
    return decorator


_config = get_logging_config()

logger = LoggerFactory.create_logger(
    "schoolhub",
    log_dir=_config["log_dir"],
    level=_config["log_level"]
)
access_logger = logging.getLogger("schoolhub.access")
