"""
Structured JSON logging for driveguard.

Each record carries timestamp, level, logger, message, a static ``service``
field and any ``extra={...}`` fields passed by the caller.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "driveguard"


class DriveGuardJsonFormatter(JsonFormatter):
    """Adds the service name and renames standard fields."""

    def add_fields(
        self,
        log_record: dict,
        record: logging.LogRecord,
        message_dict: dict,
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = SERVICE_NAME
        log_record["level"] = log_record.pop("levelname", record.levelname)
        log_record["logger"] = log_record.pop("name", record.name)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger with JSON output on stdout. Call once at startup."""
    log_level = (level or "INFO").upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": DriveGuardJsonFormatter,
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "rename_fields": {"asctime": "timestamp"},
                },
            },
            "handlers": {
                "json": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["json"], "level": log_level},
            "loggers": {
                "googleapiclient.discovery_cache": {"level": "ERROR"},
            },
        }
    )
