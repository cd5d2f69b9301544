"""Logging setup for the obraledger CLI.

Console output goes to stderr so that report output on stdout stays clean.
A daily rotating log file is added when a path is configured.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7
HANDLER_TAG = "_obraledger_handler"

# Loggers that are too chatty below WARNING
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "sqlalchemy.pool",
]


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the root logger.

    Args:
        level: Level for the console handler (name or number)
        log_file: Optional log file; rotated at midnight, INFO and above

    Returns:
        The configured root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier call, leave anyone else's alone
    for handler in [h for h in root_logger.handlers if getattr(h, HANDLER_TAG, False)]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    setattr(console_handler, HANDLER_TAG, True)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_path,
            when="midnight",
            interval=1,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(min(level, logging.INFO))
        file_handler.setFormatter(formatter)
        setattr(file_handler, HANDLER_TAG, True)
        root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured: console %s, file %s",
        logging.getLevelName(level),
        log_file or "disabled",
    )
    return root_logger
