"""Logging setup driven by application settings."""

import json
import logging
import logging.config
from datetime import datetime, timezone

from app.core.config import LogFormatEnum, settings


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            payload["request_id"] = request_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging() -> None:
    """Configure the root logger from ``settings.log_level`` and ``settings.log_format``."""
    formatter = "json" if settings.log_format == LogFormatEnum.json else "simple"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
                "json": {"()": JsonLineFormatter},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": formatter},
            },
            "root": {"level": settings.log_level.value, "handlers": ["console"]},
        }
    )
