"""Logging setup for the ``twinpane`` logger hierarchy.

The interactive pager owns the terminal, so records go to a rotating file in
the user log directory; one-shot ``--nopager`` runs also echo warnings to
stderr.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

LOGGER_NAME = "twinpane"
LOG_FILENAME = "twinpane.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def default_log_dir() -> Path:
    return Path(user_log_dir(LOGGER_NAME, appauthor=False))


def setup_logging(
    verbose: bool = False,
    log_to_stderr: bool = False,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Configure the package logger, replacing handlers from earlier calls.

    The file handler is skipped when the log directory cannot be created.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
    target_dir = log_dir if log_dir is not None else default_log_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            target_dir / LOG_FILENAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"twinpane: file logging disabled: {exc}", file=sys.stderr)
    else:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if log_to_stderr:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        stderr_handler.setFormatter(logging.Formatter("twinpane: %(levelname)s: %(message)s"))
        logger.addHandler(stderr_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
