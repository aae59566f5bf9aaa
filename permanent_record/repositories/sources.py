from __future__ import annotations

import threading
from types import ModuleType
from typing import Any, Mapping, Sequence, TypeVar, Union

from permanent_record.domain.errors import ConfigurationError, SourceNotFoundError

S = TypeVar("S", bound=Sequence[Mapping[Any, Any]])


def _is_constant_name(name: str) -> bool:
    return not name.startswith("_") and name.isupper()


class SourceRegistry:
    """Named record sources shared by models in a process.

    ``BOOKS = register_source("BOOKS", [...])`` makes the records available to a
    ``Book`` model that declares no source of its own.
    """

    def __init__(self) -> None:
        self._sources: dict[str, Sequence[Mapping[Any, Any]]] = {}
        self._lock = threading.Lock()

    def register(self, name: str, records: S, *, replace: bool = False) -> S:
        """Register ``records`` under ``name`` and return them unchanged."""
        with self._lock:
            if name in self._sources and not replace:
                raise ConfigurationError(f"A record source named {name!r} is already registered")
            self._sources[name] = records
        return records

    def register_module(self, namespace: Union[ModuleType, Mapping[str, Any]]) -> list[str]:
        """Register every public UPPER_CASE list or tuple constant of ``namespace``.

        Accepts a module (e.g. a project's ``constants.py``) or a mapping such as
        ``globals()``. Returns the registered names.
        """
        items = vars(namespace) if isinstance(namespace, ModuleType) else namespace
        registered: list[str] = []
        for name, value in list(items.items()):
            if _is_constant_name(name) and isinstance(value, (list, tuple)):
                self.register(name, value, replace=True)
                registered.append(name)
        return registered

    def resolve(self, name: str) -> Sequence[Mapping[Any, Any]]:
        with self._lock:
            try:
                return self._sources[name]
            except KeyError:
                raise SourceNotFoundError(name) from None

    def unregister(self, name: str) -> None:
        with self._lock:
            self._sources.pop(name, None)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._sources)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._sources


# Process-wide default registry
sources = SourceRegistry()


def register_source(name: str, records: S, *, replace: bool = False) -> S:
    """Register ``records`` in the default registry."""
    return sources.register(name, records, replace=replace)
