"""Read-only, finder-style models over static lists of records."""

from .domain.errors import (
    ConfigurationError,
    EmptySourceError,
    PermanentRecordError,
    SourceNotFoundError,
    UnknownAttributeError,
)
from .domain.normalize import format_data
from .domain.record import PermanentRecord
from .domain.store import RecordStore
from .repositories.sources import SourceRegistry, register_source, sources

__all__ = [
    "ConfigurationError",
    "EmptySourceError",
    "PermanentRecord",
    "PermanentRecordError",
    "RecordStore",
    "SourceNotFoundError",
    "SourceRegistry",
    "UnknownAttributeError",
    "format_data",
    "register_source",
    "sources",
]
