"""
Structured Logging Configuration for the Watch Together backend

Uses loguru for production-ready logging with:
- Human-readable console output
- File rotation with compression
- Optional JSON (serialized) file logs
- Standard logging interception for SQLAlchemy / uvicorn
"""

import sys
import logging
from pathlib import Path

from loguru import logger as loguru_logger

from watchroom.config import settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages and redirect to Loguru.
    This allows compatibility with third-party libraries using standard logging.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """
    Configure Loguru for production use.
    Call this once at application startup.
    """
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    loguru_logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )
    loguru_logger.configure(extra={"name": "watchroom"})

    loguru_logger.add(
        sys.stdout,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=settings.DEBUG,
    )

    # File handler - All logs (INFO and above)
    loguru_logger.add(
        log_dir / "app.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}",
        level="INFO",
        rotation="00:00",  # New file at midnight
        retention="30 days",
        compression="zip",
        serialize=settings.LOG_JSON,
        backtrace=True,
        diagnose=settings.DEBUG,
        encoding="utf-8",
    )

    # File handler - Error logs only
    loguru_logger.add(
        log_dir / "error.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}",
        level="ERROR",
        rotation="00:00",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=True,
        encoding="utf-8",
    )

    # File handler - chat traffic (separate file for moderation/debugging)
    loguru_logger.add(
        log_dir / "chat.log",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}",
        level="DEBUG",
        rotation="500 MB",
        retention="7 days",
        compression="zip",
        filter=lambda record: record["extra"].get("name") == "chat",
        encoding="utf-8",
    )

    # Intercept standard logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def get_logger(name: str):
    """
    Get a logger for a specific module.

    Usage:
        from watchroom.utils.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return loguru_logger.bind(name=name)


fastapi_logger = loguru_logger.bind(name="fastapi")
database_logger = loguru_logger.bind(name="database")
room_logger = loguru_logger.bind(name="room")
chat_logger = loguru_logger.bind(name="chat")
user_logger = loguru_logger.bind(name="user")


__all__ = [
    "setup_logging",
    "get_logger",
    "loguru_logger",
    "fastapi_logger",
    "database_logger",
    "room_logger",
    "chat_logger",
    "user_logger",
]
