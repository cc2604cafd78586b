"""Path-addressed store backed by the remote database and its cache.

Dot-paths are split into a composite key (the first two segments) and an
inner path inside that document. The entity kind, and therefore the cache
collection and remote document, is picked from the path:

* ``<guild>`` alone addresses the whole guild, merged from every remote
  document of that guild and cached under ``GUILDS``;
* ``<guild>.shop``, ``<guild>.currencies`` and ``<guild>.settings`` (and
  anything below them) live in the matching guild-scoped kind;
* ``<guild>.<member>.<field>...`` lives in the kind registered for
  ``field`` in :data:`FIELD_KINDS`, or in ``USERS`` for other fields;
* ``<guild>.<member>`` alone addresses the member's whole record, spread
  over the kinds above.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable

from ..domain.exceptions import InvalidTypeError
from ..storage.base import CacheKey, RemoteDocuments
from ..storage.operations import Operation, ensure_amount, ensure_serializable
from ..storage.paths import NOT_FOUND, resolve_read, split_path
from .items import EntityKind
from .manager import CacheManager

logger = logging.getLogger(__name__)

FIELD_KINDS: dict[str, EntityKind] = {
    "money": EntityKind.BALANCE,
    "bank": EntityKind.BANK,
    "inventory": EntityKind.INVENTORY,
    "history": EntityKind.HISTORY,
    "cooldowns": EntityKind.COOLDOWNS,
}

SCOPE_KINDS: dict[str, EntityKind] = {
    "shop": EntityKind.SHOP,
    "currencies": EntityKind.CURRENCIES,
    "settings": EntityKind.SETTINGS,
}

SCOPE_KIND_VALUES = frozenset(kind.value for kind in SCOPE_KINDS.values())

Row = tuple[str, CacheKey, Any]


def route(path: str) -> tuple[EntityKind | None, CacheKey, str | None]:
    """Return ``(kind, key, inner_path)`` for ``path``.

    ``kind`` is ``None`` when the path addresses a member's whole record.
    A single segment routes to ``GUILDS`` with an empty member id, which no
    split path can produce.
    """
    segments = split_path(path)
    if len(segments) == 1:
        return EntityKind.GUILDS, (segments[0], ""), None
    key = (segments[0], segments[1])
    inner = ".".join(segments[2:]) or None
    if segments[1] in SCOPE_KINDS:
        return SCOPE_KINDS[segments[1]], key, inner
    if inner is None:
        return None, key, None
    return FIELD_KINDS.get(segments[2], EntityKind.USERS), key, inner


def merge_rows(rows: Iterable[Row]) -> dict[str, Any]:
    """Fold remote rows back into the ``guild -> key -> value`` tree."""
    tree: dict[str, Any] = {}
    for kind, (guild_id, member_id), data in rows:
        guild = tree.setdefault(guild_id, {})
        if kind in SCOPE_KIND_VALUES:
            guild[member_id] = copy.deepcopy(data)
        elif isinstance(data, dict):
            guild.setdefault(member_id, {}).update(copy.deepcopy(data))
    return tree


class CachedDocumentStore:
    """``DocumentStore`` over a :class:`RemoteDocuments` with a write-through cache."""

    def __init__(self, remote: RemoteDocuments, cache: CacheManager) -> None:
        self._remote = remote
        self._cache = cache

    @property
    def cache(self) -> CacheManager:
        return self._cache

    async def fetch(self, path: str) -> Any:
        kind, key, inner = route(path)
        if kind is None:
            return await self._fetch_member(key)
        if kind is EntityKind.GUILDS:
            document = await self._cache.read(kind, key, loader=lambda: self._load_guild(key[0]))
        else:
            document = await self._cache.read(kind, key)
        value = document if inner is None else resolve_read(document, inner)
        if value is NOT_FOUND or value is None:
            return None
        return copy.deepcopy(value)

    async def get(self, path: str) -> Any:
        return await self.fetch(path)

    async def set(self, path: str, value: Any) -> Any:
        value = ensure_serializable(value)
        kind, key, inner = route(path)
        if kind is None:
            return await self._set_member(path, key, value)
        if kind is EntityKind.GUILDS:
            return await self._set_guild(path, key[0], value)
        return await self._write(kind, key, inner, Operation.SET, value)

    async def add(self, path: str, amount: int | float) -> int | float:
        amount = ensure_amount(amount)
        kind, key, inner = self._route_value(path)
        return await self._write(kind, key, inner, Operation.ADD, amount)

    async def subtract(self, path: str, amount: int | float) -> int | float:
        amount = ensure_amount(amount)
        kind, key, inner = self._route_value(path)
        return await self._write(kind, key, inner, Operation.SUBTRACT, amount)

    async def push(self, path: str, item: Any) -> list[Any]:
        item = ensure_serializable(item)
        kind, key, inner = self._route_value(path)
        return await self._write(kind, key, inner, Operation.PUSH, item)

    async def pull(self, path: str, matcher: Any) -> list[Any]:
        kind, key, inner = self._route_value(path)
        return await self._write(kind, key, inner, Operation.PULL, matcher)

    async def delete(self, path: str) -> bool:
        kind, key, inner = route(path)
        if kind is None:
            removed = False
            for member_kind in (*FIELD_KINDS.values(), EntityKind.USERS):
                removed = await self._write(member_kind, key, None, Operation.DELETE) or removed
            return removed
        if kind is EntityKind.GUILDS:
            return await self._delete_guild(key[0])
        return await self._write(kind, key, inner, Operation.DELETE)

    async def all(self) -> dict[str, Any]:
        """Build a fresh tree from every remote document, bypassing the cache."""
        rows = await self._cache.call_remote("dump", self._remote.dump())
        return merge_rows(rows)

    def invalidate(self, path: str) -> None:
        """Drop cached documents addressed by ``path`` so the next read refetches them."""
        kind, key, _ = route(path)
        if kind is EntityKind.GUILDS:
            for collection in self._cache.collections:
                for cached in collection.keys():
                    if cached[0] == key[0]:
                        collection.delete(cached)
            return
        kinds = [kind] if kind is not None else [*FIELD_KINDS.values(), EntityKind.USERS]
        for member_kind in kinds:
            self._cache.invalidate(member_kind, key)

    def _route_value(self, path: str) -> tuple[EntityKind, CacheKey, str | None]:
        kind, key, inner = route(path)
        if kind is None:
            raise InvalidTypeError(f"Value at '{path}' is a member record, not a value")
        if kind is EntityKind.GUILDS:
            raise InvalidTypeError(f"Value at '{path}' is a guild record, not a value")
        return kind, key, inner

    async def _write(
        self,
        kind: EntityKind,
        key: CacheKey,
        inner: str | None,
        operation: Operation,
        operand: Any = None,
    ) -> Any:
        async def mutator():
            return await self._remote.mutate_document(kind.value, key, inner, operation, operand)

        try:
            return await self._cache.write(kind, key, mutator)
        finally:
            self._cache.invalidate(EntityKind.GUILDS, (key[0], ""))

    async def _load_guild(self, guild_id: str) -> dict[str, Any] | None:
        rows = await self._remote.dump(guild_id)
        return merge_rows(rows).get(guild_id)

    async def _delete_guild(self, guild_id: str) -> bool:
        rows = await self._cache.call_remote(f"dump {guild_id}", self._remote.dump(guild_id))
        removed = False
        for kind, key, _ in rows:
            removed = await self._write(EntityKind(kind), key, None, Operation.DELETE) or removed
        return removed

    async def _set_guild(self, path: str, guild_id: str, value: Any) -> Any:
        if not isinstance(value, dict):
            raise InvalidTypeError(f"Guild record at '{path}' must be an object")
        for name, data in value.items():
            if name not in SCOPE_KINDS and not isinstance(data, dict):
                raise InvalidTypeError(f"Member record at '{path}.{name}' must be an object")
        await self._delete_guild(guild_id)
        for name, data in value.items():
            await self.set(f"{guild_id}.{name}", data)
        logger.debug("Replaced guild %s with %d entries", guild_id, len(value))
        return copy.deepcopy(value)

    async def _fetch_member(self, key: CacheKey) -> dict[str, Any] | None:
        record: dict[str, Any] = {}
        found = False
        for kind in (EntityKind.USERS, *FIELD_KINDS.values()):
            document = await self._cache.read(kind, key)
            if isinstance(document, dict):
                found = True
                record.update(copy.deepcopy(document))
        return record if found else None

    async def _set_member(self, path: str, key: CacheKey, value: Any) -> Any:
        if not isinstance(value, dict):
            raise InvalidTypeError(f"Member record at '{path}' must be an object")
        rest = {name: data for name, data in value.items() if name not in FIELD_KINDS}
        for name, kind in FIELD_KINDS.items():
            if name in value:
                await self._write(kind, key, name, Operation.SET, value[name])
            else:
                await self._write(kind, key, None, Operation.DELETE)
        await self._write(EntityKind.USERS, key, None, Operation.SET, rest)
        logger.debug("Replaced member record %s across %d kinds", key, len(FIELD_KINDS) + 1)
        return copy.deepcopy(value)
