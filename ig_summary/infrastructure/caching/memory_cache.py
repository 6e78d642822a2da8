from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses


class MemoryCache[T]:
    """Keyed store for values that are expensive to build.

    Used to parse each StructureDefinition JSON once, however many
    profiles end up referring to it.
    """

    def __init__(self) -> None:
        super().__init__()
        self._store: dict[str, T] = {}
        self.stats = CacheStats()

    def get(self, key: str) -> T | None:
        value = self._store.get(key)
        if value is None:
            self.stats.misses += 1
        else:
            self.stats.hits += 1
        return value

    def set(self, key: str, value: T) -> None:
        self._store[key] = value

    def get_or_create(self, key: str, factory: Callable[[], T]) -> T:
        value = self.get(key)
        if value is None:
            value = factory()
            self._store[key] = value
        return value

    def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
