"""
Centralized logging configuration with file and console output.
Logs are stored per date with size-based rotation within each day.
"""
import logging
import sys
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler

from api.core import config

ROOT_LOGGER_NAME = "vision2page"

# Correlation id of the conversion currently running (CLI run or HTTP request)
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_ctx.get()
        if request_id:
            log_entry["request_id"] = request_id

        if hasattr(record, "extra_data"):
            log_entry["data"] = record.extra_data

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        request_id = request_id_ctx.get()
        req_str = f"[{request_id}] " if request_id else ""

        msg = f"{timestamp} | {record.levelname:8} | {req_str}{record.name} | {record.getMessage()}"

        if hasattr(record, "extra_data") and record.extra_data:
            pairs = " ".join(f"{k}={v}" for k, v in record.extra_data.items())
            msg += f" | {pairs}"

        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"

        return msg


class DailyRotatingFileHandler(RotatingFileHandler):
    """
    Size-rotating handler whose base file carries the current date.

    Files are named: app_2024-12-19.log, app_2024-12-19.log.1, etc.
    The date is fixed when the handler opens; a CLI run or server process
    that crosses midnight keeps writing to the file it started with.
    """

    def __init__(self, log_dir: str, base_name: str = "app",
                 max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        super().__init__(
            filename=str(log_path / f"{base_name}_{current_date}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )


def setup_logging(name: str = ROOT_LOGGER_NAME, level: Optional[str] = None) -> logging.Logger:
    """
    Configure application logging with console and daily file handlers.

    Falls back to console-only if file logging fails. Calling it again on an
    already configured logger only adjusts the level.
    """
    logger = logging.getLogger(name)
    level_value = getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO)

    if logger.handlers:
        logger.setLevel(level_value)
        for handler in logger.handlers:
            handler.setLevel(level_value)
        return logger

    logger.setLevel(level_value)

    # Choose formatter
    if config.LOG_FORMAT == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    # Console handler (always enabled); stderr keeps stdout free for CLI output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_value)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.LOG_FILE_ENABLED:
        try:
            file_handler = DailyRotatingFileHandler(
                log_dir=str(Path(config.LOG_FILE_PATH).parent),
                base_name=Path(config.LOG_FILE_PATH).stem,
                max_bytes=config.LOG_MAX_BYTES,
                backup_count=config.LOG_BACKUP_COUNT
            )
            file_handler.setLevel(level_value)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"File logging disabled: {e}. Using console only.")

    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger below the application namespace, e.g. get_logger("vision2page.mapper")."""
    return logging.getLogger(name)


def generate_request_id() -> str:
    """Generate unique correlation ID."""
    return str(uuid.uuid4())[:8]


def set_request_id(request_id: str) -> None:
    """Set correlation ID in context."""
    request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    """Get current correlation ID from context."""
    return request_id_ctx.get()


_default_logger: Optional[logging.Logger] = None


def init_logger(level: Optional[str] = None) -> logging.Logger:
    """Initialize and return the application logger; entry points call this once."""
    global _default_logger
    if _default_logger is None or level is not None:
        _default_logger = setup_logging(ROOT_LOGGER_NAME, level=level)
    return _default_logger
