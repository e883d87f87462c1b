import logging
import os
import sys

"""
NOTE: To create a logger for each file, we do this:
from customer_service.logger import get_logger
logger = get_logger(__name__) # __name__ is the name of the current module
NOTE: Log lines carry key=value fields separated by |, e.g. "Inquiry classified | customer=CUST-001 | category=order"
NOTE: LOG_LEVEL env var controls verbosity (default INFO)
"""

# HTTP client libraries log request headers at DEBUG, which would leak the API token
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def _resolve_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with a specific name."""
    logger = logging.getLogger(name)

    # Prevent adding duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_resolve_level())

    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
