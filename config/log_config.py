"""Loguru logging configuration for the news RSS scraper.

Application diagnostics go through Loguru. These are separate from the
operational log entries shown on the dashboard, which are LogEntry records
written to the record store.

Call configure_logging() once at process startup (server or CLI script).
"""
import logging
import os
import sys

from loguru import logger


VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncpg", "uvicorn.access")


class InterceptHandler(logging.Handler):
    """
    Redirect standard library logging records to Loguru.

    Captures logs from httpx, asyncpg, uvicorn and FastAPI so every
    message ends up in the same sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(
    log_level: str | None = None,
    enable_json: bool = False,
    enable_file_logging: bool = False,
    log_file_path: str = "logs/news_rss.log",
) -> None:
    """
    Configure Loguru logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to LOG_LEVEL env var or INFO.
        enable_json: Emit JSON structured records instead of the console format
        enable_file_logging: Also write to a rotating log file
        log_file_path: Path for log file (default: logs/news_rss.log)

    Example:
        from config.log_config import configure_logging

        configure_logging()
        configure_logging(log_level="DEBUG", enable_file_logging=True)
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")
    log_level = log_level.upper()
    if log_level not in VALID_LEVELS:
        log_level = "INFO"

    logger.remove()

    if enable_json:
        logger.add(sys.stderr, level=log_level, serialize=True)
    else:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
        logger.add(sys.stderr, format=log_format, level=log_level, colorize=True)

    if enable_file_logging:
        logger.add(
            log_file_path,
            rotation="50 MB",
            retention="14 days",
            compression="zip",
            level=log_level,
            serialize=enable_json,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(
        f"Logging configured: level={log_level}, json={enable_json}, "
        f"file={enable_file_logging}"
    )


__all__ = ["logger", "configure_logging"]
