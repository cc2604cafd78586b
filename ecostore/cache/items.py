"""Cached documents and the per-kind collections that hold them."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

from ..storage.base import CacheKey

Clock = Callable[[], float]


class EntityKind(str, Enum):
    BALANCE = "balance"
    BANK = "bank"
    COOLDOWNS = "cooldowns"
    CURRENCIES = "currencies"
    GUILDS = "guilds"
    HISTORY = "history"
    INVENTORY = "inventory"
    SETTINGS = "settings"
    SHOP = "shop"
    USERS = "users"


@dataclass(slots=True)
class CacheEntry:
    """Last known value of one remote document."""

    key: CacheKey
    data: Any
    fetched_at: float

    def is_stale(self, max_age: float, now: float | None = None) -> bool:
        if now is None:
            now = time.monotonic()
        return now - self.fetched_at > max_age


class CacheCollection:
    """Composite key -> :class:`CacheEntry` mapping for one entity kind."""

    def __init__(self, kind: EntityKind, *, clock: Clock = time.monotonic) -> None:
        self.kind = kind
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}

    def get(self, key: CacheKey) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: CacheKey, data: Any) -> CacheEntry:
        entry = CacheEntry(key=key, data=data, fetched_at=self._clock())
        self._entries[key] = entry
        return entry

    def delete(self, key: CacheKey) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self) -> tuple[CacheKey, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CacheCollection(kind={self.kind.value!r}, entries={len(self)})"


class CacheCollections:
    """One independent :class:`CacheCollection` per :class:`EntityKind`."""

    def __init__(self, *, clock: Clock = time.monotonic) -> None:
        self._collections = {kind: CacheCollection(kind, clock=clock) for kind in EntityKind}

    def __getitem__(self, kind: EntityKind | str) -> CacheCollection:
        return self._collections[EntityKind(kind)]

    def __getattr__(self, name: str) -> CacheCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._collections[EntityKind(name)]
        except ValueError as exc:
            raise AttributeError(name) from exc

    def __iter__(self) -> Iterator[CacheCollection]:
        return iter(self._collections.values())

    def clear(self) -> None:
        for collection in self:
            collection.clear()
