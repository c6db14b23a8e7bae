import json
import logging
import os
import sys
from logging.config import dictConfig

from app.core.config import (
    APP_ENV,
    LOG_DIR,
    AUDIT_LOG_MAX_BYTES,
    AUDIT_LOG_BACKUPS,
)

LOG_LEVEL = "DEBUG" if APP_ENV == "development" else "INFO"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line: timestamp, event and the record's extras."""

    RESERVED = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in self.RESERVED:
                payload[key] = value
        return json.dumps(payload, default=str)


def setup_logging():
    os.makedirs(LOG_DIR, exist_ok=True)

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,

            # -----------------
            # FORMATTERS
            # -----------------
            "formatters": {
                "default": {
                    "format": (
                        "%(asctime)s | %(levelname)s | "
                        "%(name)s | %(message)s"
                    ),
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | "
                        "%(client_addr)s | %(username)s | %(method)s | "
                        "%(path)s | %(status_code)s | "
                        "%(process_time_ms)sms"
                    ),
                },
                "audit": {
                    "()": JsonLineFormatter,
                },
            },

            # -----------------
            # HANDLERS
            # -----------------
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                },
                "audit_file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": os.path.join(LOG_DIR, "audit.log"),
                    "maxBytes": AUDIT_LOG_MAX_BYTES,
                    "backupCount": AUDIT_LOG_BACKUPS,
                    "encoding": "utf-8",
                    "delay": True,
                    "formatter": "audit",
                },
            },

            # -----------------
            # LOGGERS
            # -----------------
            "loggers": {
                # Used by request_logging_middleware
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # Movement commits and product (de)activation trail
                "audit": {
                    "handlers": ["audit_file"],
                    "level": "INFO",
                    "propagate": False,
                },
            },

            # -----------------
            # ROOT LOGGER
            # -----------------
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
