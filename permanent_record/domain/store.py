from __future__ import annotations

import re
from functools import partial
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from permanent_record.infrastructure.once import Once
from permanent_record.logging_config import get_logger
from permanent_record.repositories.sources import SourceRegistry, sources

from .errors import ConfigurationError, EmptySourceError, UnknownAttributeError
from .naming import constant_name_for, underscore
from .normalize import (
    ID_KEY,
    CanonicalRecord,
    RawRecord,
    attributes_from_data,
    canonical_key,
    canonical_value,
    format_data,
)

R = TypeVar("R")

FINDER_PATTERN = re.compile(r"^find_by_(?P<attribute>.+)$")


class RecordStore(Generic[R]):
    """Read-only query engine over one model's records.

    - The raw source is either declared (``source=``) or resolved from ``registry``
      under the model's conventional name (``Book`` -> ``BOOKS``).
    - Canonical data and the attribute names are computed once, on first access.
    - Every query builds fresh instances through ``factory``.

    ``on_attributes`` is called once with the discovered attribute names, before
    any instance is built; models use it to install their read accessors.
    """

    def __init__(
        self,
        model_name: str,
        factory: Callable[[CanonicalRecord], R],
        *,
        source: Optional[Sequence[RawRecord]] = None,
        registry: Optional[SourceRegistry] = None,
        on_attributes: Optional[Callable[[tuple[str, ...]], None]] = None,
    ) -> None:
        self.model_name = model_name
        self._factory = factory
        self._source = source
        self._registry = registry if registry is not None else sources
        self._on_attributes = on_attributes
        self._data: Once[tuple[CanonicalRecord, ...]] = Once(self._load_data)
        self._attributes: Once[tuple[str, ...]] = Once(self._load_attributes)
        self._logger = get_logger()

    # ------------------------------------------------------------------
    # Source and cached state
    # ------------------------------------------------------------------
    @property
    def source_name(self) -> str:
        """Registry name used when no source is declared."""
        return constant_name_for(self.model_name)

    def declare_source(self, source: Sequence[RawRecord]) -> None:
        """Declare the raw records explicitly; allowed once, before data is loaded."""
        if self._source is not None or self._data.is_set:
            raise ConfigurationError(f"{self.model_name} already has a record source")
        self._source = source

    def _load_data(self) -> tuple[CanonicalRecord, ...]:
        origin = "declared" if self._source is not None else self.source_name
        try:
            raw = self._source if self._source is not None else self._registry.resolve(origin)
            data = format_data(raw)
            if not data:
                raise EmptySourceError(f"{self.model_name} record source {origin!r} is empty")
        except ConfigurationError as exc:
            self._logger.error(
                "Cannot load record data",
                extra={"model": self.model_name, "source": origin, "reason": str(exc)},
            )
            raise
        self._logger.info(
            "Loaded record data",
            extra={"model": self.model_name, "source": origin, "records": len(data)},
        )
        return data

    def _load_attributes(self) -> tuple[str, ...]:
        attributes = attributes_from_data(self.data())
        if self._on_attributes is not None:
            self._on_attributes(attributes)
        return attributes

    def data(self) -> tuple[CanonicalRecord, ...]:
        """Canonical records, in source order."""
        return self._data.get()

    def attributes(self) -> tuple[str, ...]:
        """Attribute names, in the key order of the first record."""
        return self._attributes.get()

    def is_valid_attribute(self, name: object) -> bool:
        return canonical_key(name) in self.attributes()

    # ------------------------------------------------------------------
    # Finders
    # ------------------------------------------------------------------
    def build(self, record: CanonicalRecord) -> R:
        self.attributes()
        return self._factory(record)

    def all(self) -> list[R]:
        return [self.build(record) for record in self.data()]

    def find(self, record_id: Any) -> Optional[R]:
        """Return the record whose id matches ``record_id`` (``2`` and ``"2"`` alike)."""
        return self.find_by_attribute(ID_KEY, record_id)

    def find_by_attribute(self, name: Any, value: Any) -> Optional[R]:
        """Return the first record whose ``name`` attribute matches ``value``, or None.

        Values are compared by their string form. Raises
        :class:`UnknownAttributeError` when ``name`` is not an attribute.
        """
        key = canonical_key(name)
        if not self.is_valid_attribute(key):
            raise UnknownAttributeError(self.model_name, key)
        expected = canonical_value(value)
        for record in self.data():
            if canonical_value(record.get(key)) == expected:
                return self.build(record)
        return None

    def where(
        self, criteria: Optional[Mapping[Any, Any]] = None, /, **kwargs: Any
    ) -> list[R]:
        """Return every record whose values equal all of ``criteria``.

        Unlike :meth:`find_by_attribute`, values are compared as is. Keyword
        arguments are merged into ``criteria``; no criteria matches everything.
        """
        wanted = {canonical_key(k): v for k, v in (criteria or {}).items()}
        wanted.update(kwargs)
        return [
            self.build(record)
            for record in self.data()
            if {k: record[k] for k in wanted if k in record} == wanted
        ]

    # ------------------------------------------------------------------
    # Dynamic ``find_by_<attribute>`` finders
    # ------------------------------------------------------------------
    def resolve_finder_attribute(self, suffix: str) -> Optional[str]:
        """Map the ``<attribute>`` part of a finder name onto a known attribute."""
        attributes = self.attributes()
        if suffix in attributes:
            return suffix
        normalized = underscore(suffix)
        for attribute in attributes:
            if underscore(attribute) == normalized:
                return attribute
        return None

    def finder(self, method_name: str) -> Callable[[Any], Optional[R]]:
        """Return the ``find_by_<attribute>`` finder called ``method_name``.

        Raises ``AttributeError`` when the name is not a finder for a known
        attribute, the same failure as for any other undefined operation.
        """
        match = FINDER_PATTERN.match(method_name)
        attribute = self.resolve_finder_attribute(match["attribute"]) if match else None
        if attribute is None:
            self._logger.debug(
                "Rejected dynamic finder", extra={"model": self.model_name, "finder": method_name}
            )
            raise AttributeError(f"{self.model_name!r} has no attribute {method_name!r}")
        return partial(self.find_by_attribute, attribute)
