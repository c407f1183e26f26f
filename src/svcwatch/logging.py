# src/svcwatch/logging.py
"""Console and per-run log file setup."""

import logging
from logging.config import dictConfig

from .config import WatchdogConfig

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s: %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: WatchdogConfig, unattended: bool = False) -> None:
    """
    Configure the root logger for the application.

    Console output always goes to stderr. Unattended runs (the scheduled task)
    also write `<timestamp>: <message>` lines to config.log_file, which is
    truncated at the start of every such run.
    """
    log_level = config.logging.level.upper()

    if config.logging.json_format:
        console_formatter = {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }
    else:
        console_formatter = {"format": CONSOLE_FORMAT}

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    }
    if unattended:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "file",
            "filename": str(config.log_file),
            "mode": "w",
            "encoding": "utf-8",
        }

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": console_formatter,
            "file": {"format": FILE_FORMAT, "datefmt": FILE_DATEFMT},
        },
        "handlers": handlers,
        "loggers": {
            "svcwatch": {
                "handlers": list(handlers),
                "level": log_level,
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": logging.WARNING,
        },
    })
