from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping, Optional, Sequence, TypeVar

from permanent_record.repositories.sources import SourceRegistry

from .errors import ConfigurationError
from .normalize import ID_KEY, CanonicalRecord, RawRecord, canonical_key
from .store import FINDER_PATTERN, RecordStore

M = TypeVar("M", bound="PermanentRecord")

_MISSING = object()


class RecordMeta(type):
    """Metaclass resolving ``Model.find_by_<attribute>`` on first use."""

    def __getattr__(cls, name: str) -> Callable[[Any], Any]:
        if FINDER_PATTERN.match(name) is None:
            raise AttributeError(f"type object {cls.__name__!r} has no attribute {name!r}")
        try:
            return cls.store().finder(name)
        except ConfigurationError as exc:
            # Keeps hasattr() usable; the configuration error stays attached as the cause
            raise AttributeError(
                f"type object {cls.__name__!r} has no attribute {name!r}: {exc}"
            ) from exc


class _AttributeAccessor(property):
    """Read accessor generated for a record attribute."""


def _accessor(name: str) -> _AttributeAccessor:
    def read(self: PermanentRecord) -> Any:
        # Accessors are shared along the class hierarchy; each model exposes only its own
        if name not in type(self).attributes():
            raise AttributeError(f"{type(self).__name__!r} record has no attribute {name!r}")
        return self._values.get(name)

    return _AttributeAccessor(read, doc=f"The {name!r} attribute.")


class PermanentRecord(metaclass=RecordMeta):
    """Base class for read-only models over a fixed list of records.

    The records come from ``source=`` or, when omitted, from the source
    registered under the model's pluralised, upper-cased name:

    >>> from permanent_record import register_source
    >>> _ = register_source("PLANETS", [{"name": "Mercury"}, {"name": "Venus"}])
    >>> class Planet(PermanentRecord):
    ...     pass
    >>> Planet.find(2).name
    'Venus'
    >>> Planet.find_by_name("Mercury").id
    1
    """

    _store: ClassVar[Optional[RecordStore[Any]]] = None

    _values: Mapping[str, Any]

    def __init_subclass__(
        cls,
        *,
        source: Optional[Sequence[RawRecord]] = None,
        registry: Optional[SourceRegistry] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        cls._store = RecordStore(
            cls.__qualname__,
            cls,
            source=source,
            registry=registry,
            on_attributes=cls._install_accessors,
        )

    def __init__(self, attrs: Optional[Mapping[Any, Any]] = None, **kwargs: Any) -> None:
        given = {canonical_key(k): v for k, v in (attrs or {}).items()}
        given.update(kwargs)
        attributes = type(self).attributes()
        values = {name: given[name] for name in attributes if name in given}
        object.__setattr__(self, "_values", MappingProxyType(values))

    # ------------------------------------------------------------------
    # Model level
    # ------------------------------------------------------------------
    @classmethod
    def store(cls: type[M]) -> RecordStore[M]:
        store = cls.__dict__.get("_store")
        if store is None:
            raise ConfigurationError(f"{cls.__name__} is not a model; subclass it to declare one")
        return store

    @classmethod
    def _install_accessors(cls, attributes: tuple[str, ...]) -> None:
        for name in attributes:
            # Private names and class members such as ``where`` keep priority; use record[name]
            if name.startswith("_") or any(
                name in klass.__dict__ and not isinstance(klass.__dict__[name], _AttributeAccessor)
                for klass in cls.__mro__
            ):
                continue
            setattr(cls, name, _accessor(name))

    @classmethod
    def source(cls, data: Sequence[RawRecord]) -> None:
        """Declare the model's records after the class was created."""
        cls.store().declare_source(data)

    @classmethod
    def data(cls) -> tuple[CanonicalRecord, ...]:
        return cls.store().data()

    @classmethod
    def attributes(cls) -> tuple[str, ...]:
        return cls.store().attributes()

    @classmethod
    def is_valid_attribute(cls, name: Any) -> bool:
        return cls.store().is_valid_attribute(name)

    @classmethod
    def all(cls: type[M]) -> list[M]:
        """Return every record, in source order."""
        return cls.store().all()

    @classmethod
    def find(cls: type[M], record_id: Any) -> Optional[M]:
        """Find a record by id, or return None."""
        return cls.store().find(record_id)

    @classmethod
    def find_by_attribute(cls: type[M], name: Any, value: Any) -> Optional[M]:
        """Find the first record whose ``name`` attribute equals ``value``, or return None.

        Example::

            Book.find_by_attribute("author", "Stephen Hawking")
        """
        return cls.store().find_by_attribute(name, value)

    @classmethod
    def where(
        cls: type[M], criteria: Optional[Mapping[Any, Any]] = None, /, **kwargs: Any
    ) -> list[M]:
        """Return all records matching every given attribute value.

        Example::

            Book.where(author="Stephen Hawking", title="A Brief History of Time")
        """
        return cls.store().where(criteria, **kwargs)

    # ------------------------------------------------------------------
    # Instance level
    # ------------------------------------------------------------------
    @property
    def id(self) -> Any:
        return self._values.get(ID_KEY)

    def to_param(self) -> Any:
        """Identifier used by URL generators; override to change it."""
        return self.id

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (dict(self._values),))

    def __eq__(self, other: object) -> bool:
        other_id = getattr(other, "id", _MISSING)
        if other_id is _MISSING:
            return False
        return bool(self.id == other_id)

    def __hash__(self) -> int:
        return hash(self.id)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} records are read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} records are read-only")

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{type(self).__name__}({fields})"
