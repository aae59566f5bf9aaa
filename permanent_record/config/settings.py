"""Runtime settings for permanent_record.

Environment variables are loaded from a ``.env`` file using ``python-dotenv``
and exposed through an immutable Pydantic settings object. Only logging is
configurable; record data is always supplied by the host application.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
ENV_PREFIX = "PERMANENT_RECORD_"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5


class Settings(BaseModel):
    """Immutable settings object used across the package."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = None
    log_max_bytes: int = DEFAULT_LOG_MAX_BYTES
    log_backup_count: int = DEFAULT_LOG_BACKUP_COUNT

    model_config = ConfigDict(frozen=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    log_file = _env("LOG_FILE")
    try:
        return Settings(
            log_level=_env("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
            log_file=Path(log_file) if log_file else None,
            log_max_bytes=_env_int("LOG_MAX_BYTES", DEFAULT_LOG_MAX_BYTES),
            log_backup_count=_env_int("LOG_BACKUP_COUNT", DEFAULT_LOG_BACKUP_COUNT),
        )
    except ValueError as exc:
        raise RuntimeError(f"Invalid permanent_record settings: {exc}") from exc


# Public settings instance
settings = _build_settings()
