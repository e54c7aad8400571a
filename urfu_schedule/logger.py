import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "aiogram.event")


def setup_logger(
    name: str, level: str = "INFO", stream: Optional[TextIO] = None
) -> logging.Logger:
    logger = logging.getLogger(name)

    if not logger.handlers:
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(numeric_level)

        # stdout is reserved for schedule lines
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger


def quiet_library_loggers(level: str = "WARNING") -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)
