"""Logging configuration for permanent_record.

Provides a JSON formatted logger named ``permanent_record``. Handlers are only
attached when :func:`get_logger` is first called, never at import time.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover - import for type checkers only
    from permanent_record.config.settings import Settings

LOG_NAME = "permanent_record"
# Marks handlers attached by get_logger, as opposed to ones added by the host or test tools
HANDLER_MARKER = "_permanent_record"

# Attributes present on every LogRecord. Anything else is considered an extra field.
DEFAULT_LOG_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Formatter returning log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short description
        base: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in DEFAULT_LOG_RECORD_ATTRS
        }
        if extras:
            base["extra"] = extras
        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def get_logger(cfg: Optional[Settings] = None) -> logging.Logger:
    """Return the package logger, configuring it on first use.

    ``cfg`` defaults to the environment-derived settings. A rotating file
    handler is added only when a log file is configured.
    """
    logger = logging.getLogger(LOG_NAME)
    if any(getattr(h, HANDLER_MARKER, False) for h in logger.handlers):
        return logger

    if cfg is None:
        from permanent_record.config.settings import settings as cfg

    logger.setLevel(cfg.log_level)

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    setattr(stream_handler, HANDLER_MARKER, True)
    logger.addHandler(stream_handler)

    if cfg.log_file is not None:
        cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            cfg.log_file,
            maxBytes=cfg.log_max_bytes,
            backupCount=cfg.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, HANDLER_MARKER, True)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
