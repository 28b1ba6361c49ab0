"""
Logging helpers for pgrequest.

Library modules only ask for loggers here and never install handlers.
Applications and scripts that want pgrequest's records on the console call
``setup_logging()``, which configures the ``pgrequest`` logger and quiets the
HTTP stack underneath it without touching the root logger.
"""

import functools
import inspect
import logging
import logging.config
import os
import sys
import time
from typing import Any, Dict, Optional, Tuple, Type

ROOT_LOGGER = "pgrequest"

FORMATS = {
    "development": "%(asctime)s | %(name)-24s | %(levelname)-8s | %(message)s",
    "production": "%(asctime)s | %(name)s | %(levelname)s | %(message)s | %(pathname)s:%(lineno)d",
}


def get_log_level() -> str:
    return os.getenv("PGREQUEST_LOG_LEVEL", "INFO").upper()


def get_log_format() -> str:
    """Record format for ``PGREQUEST_ENV``; unknown environments use the development one."""
    env = os.getenv("PGREQUEST_ENV", "development").lower()
    return FORMATS.get(env, FORMATS["development"])


def get_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the ``dictConfig`` mapping used by ``setup_logging``.

    Args:
        level: Level for the ``pgrequest`` logger, defaults to ``PGREQUEST_LOG_LEVEL``

    Returns:
        A configuration that owns only ``pgrequest``, ``httpx`` and ``httpcore``
    """
    level = (level or get_log_level()).upper()

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "pgrequest": {
                "format": get_log_format(),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "pgrequest_console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "pgrequest",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            ROOT_LOGGER: {
                "level": level,
                "handlers": ["pgrequest_console"],
                "propagate": False,
            },
            # The HTTP stack logs every request at INFO
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }

    log_file = os.getenv("PGREQUEST_LOG_FILE")
    if log_file:
        config["handlers"]["pgrequest_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "pgrequest",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
        }
        config["loggers"][ROOT_LOGGER]["handlers"].append("pgrequest_file")

    return config


def setup_logging(level: Optional[str] = None) -> None:
    """Install pgrequest's console (and optional file) handler."""
    config = get_logging_config(level)
    logging.config.dictConfig(config)

    logger = get_logger("logging")
    logger.info("Logging configured with level: %s", config["loggers"][ROOT_LOGGER]["level"])
    if "pgrequest_file" in config["handlers"]:
        logger.info("File logging enabled: %s", config["handlers"]["pgrequest_file"]["filename"])


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` under the ``pgrequest`` hierarchy."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_performance(logger: logging.Logger, operation: str, expected: Tuple[Type[BaseException], ...] = ()):
    """
    Decorator timing ``operation`` at DEBUG, for plain functions and coroutines.

    Failures are re-raised. Exceptions of an ``expected`` type have already
    been reported where they were raised, so they are only noted at DEBUG;
    anything else is logged at ERROR.

    Args:
        logger: Logger instance to use
        operation: Description of the operation being timed
        expected: Exception types that are not logged at ERROR
    """

    def report_failure(start: float, error: BaseException) -> None:
        duration = time.perf_counter() - start
        level = logging.DEBUG if isinstance(error, expected) else logging.ERROR
        logger.log(level, "Operation '%s' failed after %.3fs: %s", operation, duration, error)

    def report_success(start: float) -> None:
        logger.debug("Operation '%s' completed in %.3fs", operation, time.perf_counter() - start)

    def decorator(func):
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    report_failure(start, e)
                    raise
                report_success(start)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                report_failure(start, e)
                raise
            report_success(start)
            return result

        return sync_wrapper

    return decorator
