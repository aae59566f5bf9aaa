from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigurationError, EmptySourceError

ID_KEY = "id"

RawRecord = Mapping[Any, Any]
CanonicalRecord = Mapping[str, Any]

_RAW_SOURCE = TypeAdapter(list[dict[Any, Any]])


def canonical_key(key: object) -> str:
    return key if isinstance(key, str) else str(key)


def canonical_value(value: object) -> str:
    """String form used by the id and attribute finders (``1`` matches ``"1"``)."""
    return "" if value is None else str(value)


def format_data(raw: Sequence[RawRecord]) -> tuple[CanonicalRecord, ...]:
    """Return canonical, read-only copies of ``raw``.

    Every key becomes a string and ``id`` is placed first. Records without an
    ``id`` get their 1-based position; a supplied ``id`` is kept as is, so
    uniqueness is up to the caller.

    >>> [dict(r) for r in format_data([{"title": "A"}, {"id": "X", "title": "B"}])]
    [{'id': 1, 'title': 'A'}, {'id': 'X', 'title': 'B'}]
    """
    try:
        records = _RAW_SOURCE.validate_python(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Record source must be a sequence of mappings: {exc.error_count()} invalid item(s)"
        ) from exc

    data: list[CanonicalRecord] = []
    for position, record in enumerate(records, start=1):
        canonical: dict[str, Any] = {ID_KEY: position}
        canonical.update((canonical_key(k), v) for k, v in record.items())
        data.append(MappingProxyType(canonical))
    return tuple(data)


def attributes_from_data(data: Sequence[CanonicalRecord]) -> tuple[str, ...]:
    """Return the attribute names of a model, read from its first record."""
    if not data:
        raise EmptySourceError("Cannot discover attributes from an empty record source")
    return tuple(data[0].keys())
