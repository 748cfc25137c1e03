"""Logging helpers shared by every command."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "aitools"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def attach_file_log(logger: logging.Logger, log_dir: str, run_id: str) -> str:
    """Add a UTF-8 `<run_id>_oplog.log` DEBUG handler under `log_dir` (created here)."""

    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f"{run_id}_oplog.log")
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    logger.debug("Operational log file: %s", log_file)
    return log_file


def setup_operational_logger(
    log_dir: str | None,
    run_id: str,
    *,
    level: int | str = logging.INFO,
) -> tuple[logging.Logger, str | None]:
    """
    Configure the `aitools` logger for one command invocation.

    Records go to stderr (stdout carries artifact paths) and, when `log_dir`
    is set, to a UTF-8 `<run_id>_oplog.log` file with DEBUG detail. Pass
    `log_dir=None` and call `attach_file_log` later to keep the filesystem
    untouched until the command is known to proceed.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
    logger.propagate = False

    logger.debug("Operational logging initialized for run %s", run_id)

    log_file: str | None = None
    if log_dir:
        log_file = attach_file_log(logger, log_dir, run_id)

    return logger, log_file
