"""Logging infrastructure setup.

The ``briefing`` logger owns its file and console handlers and does not
propagate to the root logger.

Environment:
    BRIEFING_LOG_FILE: log file path, default ``output/briefing.log``.
    BRIEFING_LOG_LEVEL: level name such as ``DEBUG``, default ``INFO``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s.%(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or ``$BRIEFING_LOG_LEVEL``) to a logging level; INFO if unknown."""
    name = (level or os.getenv("BRIEFING_LOG_LEVEL") or "INFO").strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def setup_logger(name: str = "briefing", log_file: str = "",
                 level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger that writes to a log file and the console.

    Args:
        name (str): The name of the logger.
        log_file (str): Path to the log file. Defaults to ``$BRIEFING_LOG_FILE``
            or ``output/briefing.log``.
        level (str): Level name. Defaults to ``$BRIEFING_LOG_LEVEL`` or INFO.

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    # Only this logger's own handlers count; ancestors may already have some
    if logger.handlers:
        return logger

    log_path = Path(log_file or os.getenv("BRIEFING_LOG_FILE", "output/briefing.log"))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.propagate = False
    return logger

# Create a default logger instance
logger = setup_logger()
