"""Logging setup driven by ``log_level`` / ``log_format`` in the config."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.logging import RichHandler

from hotpotato.config.models import HotPotatoConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(config: HotPotatoConfig) -> logging.Logger:
    """Configure the ``hotpotato`` logger and return it."""
    level = _LEVELS[config.log_level]

    if config.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=config.log_level == "debug",
        )

    logger = logging.getLogger("hotpotato")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
