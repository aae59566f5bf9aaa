from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar, cast

T = TypeVar("T")

_UNSET = object()


class Once(Generic[T]):
    """Lazily computed value, initialised at most once.

    - ``get()`` runs ``factory`` on first access and returns the cached value afterwards.
    - Concurrent first access is serialised by a lock, so every caller sees the same object.
    - A factory that raises leaves the holder empty; the next ``get()`` tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: object = _UNSET
        self._lock = threading.Lock()

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        value = self._value
        if value is _UNSET:
            with self._lock:
                value = self._value
                if value is _UNSET:
                    value = self._factory()
                    self._value = value
        return cast(T, value)
