"""Logging setup: console on stderr plus a daily rotating file under ~/.asum/logs."""

import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
LOG_FILENAME = "asum.log"


def default_log_dir() -> Path:
    return Path.home() / ".asum" / "logs"


def configure_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure logging for a CLI run.

    Safe to call more than once; existing handlers are replaced. Console
    output goes to stderr so stdout carries only the commit message. When
    ``log_dir`` is given, a file handler rotating at midnight is added there.

    Returns the log file path, if any.
    """
    normalized_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": normalized_level,
            "stream": "ext://sys.stderr",
        }
    }

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILENAME
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": "file",
            "level": normalized_level,
            "filename": str(log_file),
            "when": "midnight",
            "encoding": "utf-8",
        }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": CONSOLE_FORMAT},
                "file": {"format": FILE_FORMAT, "datefmt": DEFAULT_DATE_FORMAT},
            },
            "handlers": handlers,
            "root": {
                "handlers": list(handlers),
                "level": normalized_level,
            },
        }
    )

    logging.captureWarnings(True)
    return log_file
