"""Logging setup for running EdgeDrag as a standalone process"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(name)s] [%(threadName)-12.12s] [%(levelname)-5.5s]  %(message)s"
DEFAULT_LOGGING_PATH = os.path.join(
    os.getenv("XDG_STATE_HOME")
    or os.path.join(os.path.expanduser("~"), ".local", "state"),
    "edgedrag",
    "edgedrag.log",
)


def setup_logging(logging_path: Optional[str] = None) -> logging.Logger:
    """Log to a file and the console.

    The file defaults to $EDGEDRAG_LOGGING_PATH. $DEBUG_EDGEDRAG turns on debug
    logging: "*" for everything, otherwise a comma separated list of logger names
    whose debug records are wanted.
    """
    log_formatter = logging.Formatter(LOG_FORMAT)
    logging_path = logging_path or os.getenv("EDGEDRAG_LOGGING_PATH") or DEFAULT_LOGGING_PATH
    logging_dir = os.path.dirname(logging_path)
    if logging_dir:
        os.makedirs(logging_dir, exist_ok=True)
    file_handler = logging.FileHandler(logging_path, mode="w+", encoding="utf-8")
    file_handler.setFormatter(log_formatter)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    debugging = os.environ.get("DEBUG_EDGEDRAG")
    if debugging:
        root_logger.setLevel(logging.DEBUG)
        if debugging != "*":
            loggers = set(debugging.split(","))

            def f(record: logging.LogRecord) -> bool:
                return (
                    any(record.name.startswith(logger) for logger in loggers)
                    or record.levelno >= logging.INFO
                )

            console_handler.addFilter(f)
            file_handler.addFilter(f)
    else:
        root_logger.setLevel(logging.INFO)
    return root_logger
