#!/usr/bin/env python3

import logging
import logging.config
from pythonjsonlogger import jsonlogger

from .env_utils import getenv_clean

# Fields every thesaurus log line carries, even when empty
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s %(vocabulary_type)s"


def setup_logging():
    """Setup JSON logging for the thesaurus service.

    LOG_LEVEL applies to this service's own loggers; libraries stay at INFO.
    """
    level = getenv_clean("LOG_LEVEL", "INFO").upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": LOG_FORMAT,
                "rename_fields": {"levelname": "level", "name": "logger"},
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"handlers": ["console"], "level": "INFO"},
        "loggers": {
            "thesaurus_api": {"level": level},
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
        },
    })
