"""
Structured logging configuration
"""
import sys
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from possessao.utils.config import settings

# Chatty third-party loggers: remove.bg transport, upload parsing, overlay
# decoding, SQL echo, and uvicorn's access log (LoggingMiddleware covers it)
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "python_multipart",
    "multipart",
    "PIL",
    "sqlalchemy.engine",
    "uvicorn.access",
)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        # Add timestamp
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

        # Add level and logger name
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Add environment
        log_record["environment"] = settings.ENVIRONMENT

        # Add application info
        log_record["app_name"] = settings.APP_NAME
        log_record["app_version"] = settings.APP_VERSION


def setup_logging():
    """Setup application logging"""

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)

    if settings.LOG_FORMAT == "json":
        # JSON formatter for production
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s"
        )
    else:
        # Text formatter for development
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (if configured)
    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Silence noisy libraries, unless we are debugging at DEBUG level
    noisy_level = logging.DEBUG if settings.LOG_LEVEL.upper() == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# Initialize logging on import
setup_logging()
