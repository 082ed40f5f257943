"""
Logging configuration for the application.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger.  The AWS SDK loggers are very chatty at
DEBUG, so they are capped at WARNING unless ``verbose_sdk`` is set.
Logging is configured at most once per process.
"""

import logging
from pathlib import Path
from typing import Optional

SDK_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, verbose_sdk: bool = False) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    verbose_sdk : bool
        Leave the ``boto3``/``botocore`` loggers at the root level
        instead of capping them at WARNING.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (tests, or create_app called twice).
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not verbose_sdk:
        for name in SDK_LOGGERS:
            logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
