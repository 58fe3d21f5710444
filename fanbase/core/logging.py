# fanbase/core/logging.py

import logging.config
import os
import sys

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 5 * 1024 * 1024


def _rotating_file(
    log_dir: str, filename: str, formatter: str, level: str, backups: int
) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(log_dir, filename),
        "formatter": formatter,
        "level": level,
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": backups,
        "encoding": "utf-8",
    }


def build_logging_config(log_dir: str) -> dict:
    """
    dictConfig for the API.

    - root: console plus ``app.log``
    - ``audit``: one line per account action (registration, login,
      profile edit, revert, favorites) in ``audit.log``
    - ``fanbase.security``: auth failures, mirrored into ``app.log``
    """
    formats = {
        "console": "[%(asctime)s] %(levelname)s | %(name)s | %(message)s",
        "file": "%(asctime)s | %(levelname)s | %(process)d | %(name)s | %(message)s",
        "audit": "%(asctime)s | AUDIT | %(message)s",
        "security": "%(asctime)s | SECURITY | %(levelname)s | %(name)s | %(message)s",
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": DATE_FORMAT}
            for name, fmt in formats.items()
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "console",
                "level": "DEBUG",
            },
            "file": _rotating_file(log_dir, "app.log", "file", "INFO", 5),
            "audit": _rotating_file(log_dir, "audit.log", "audit", "INFO", 3),
            "security": _rotating_file(
                log_dir, "security.log", "security", "WARNING", 3
            ),
        },
        "loggers": {
            "": {"handlers": ["console", "file"], "level": "INFO"},
            "audit": {"handlers": ["audit"], "level": "INFO", "propagate": False},
            "fanbase.security": {
                "handlers": ["file", "security"],
                "level": "WARNING",
                "propagate": False,
            },
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def init_logging(log_dir: str = "logs") -> None:
    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_dir))
    logging.getLogger(__name__).info("Logging configured, files in %s", log_dir)
