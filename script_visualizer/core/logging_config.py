"""Logging setup for ScriptVisualizer.

Everything under the ``script_visualizer`` logger goes to two places: a
console handler on stderr (plain text, or JSON with ``--json-logs``) and a
rotating JSON file under ``logs/``. Modules pass context as ``extra`` fields,
e.g. the id of a dropped card or the template being rendered, and the JSON
formatter keeps them as top-level keys.
"""

import copy
import logging
import logging.config
import os
from typing import Any


PACKAGE_LOGGER = "script_visualizer"
LOG_DIR = "logs"
LOG_FILE = f"{LOG_DIR}/script_visualizer.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "console": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
        "json_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": LOG_FILE,
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
        },
    },
    "loggers": {
        PACKAGE_LOGGER: {
            "level": "DEBUG",
            "handlers": ["console", "json_file"],
            "propagate": False,
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> dict[str, Any]:
    """Apply a copy of ``LOGGING_CONFIG`` adjusted for the CLI flags.

    ``json_output`` switches the console to the JSON formatter; ``log_level``
    (case-insensitive) sets both the console threshold and the package logger.
    The file handler always records DEBUG and above.

    Returns:
        The configuration passed to ``dictConfig``
    """
    os.makedirs(LOG_DIR, exist_ok=True)

    config = copy.deepcopy(LOGGING_CONFIG)
    if json_output:
        config["handlers"]["console"]["formatter"] = "json"
    if log_level:
        level = log_level.upper()
        config["handlers"]["console"]["level"] = level
        config["loggers"][PACKAGE_LOGGER]["level"] = level

    logging.config.dictConfig(config)
    return config


def get_logger(name: str) -> logging.Logger:
    """Module logger; call as ``get_logger(__name__)``."""
    return logging.getLogger(name)
