"""Write-through cache mirroring a remote document database.

The remote store is the source of truth. Reads are answered from the
per-kind collections while an entry is younger than ``max_age`` and trigger
one remote fetch otherwise. Writes go to the remote store first; the cache
then stores the document the remote store acknowledged, never a locally
computed value. Calls touching the same ``(kind, key)`` run one at a time in
issue order, and every remote call is bounded by ``timeout``.

This mirroring is best effort: it gives read-your-own-write within one
process, nothing across processes sharing the same database.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from ..domain.exceptions import StorageIOError
from ..storage.base import CacheKey, Mutation, RemoteDocuments
from ..storage.locks import KeyedLock
from .items import CacheCollections, Clock, EntityKind

logger = logging.getLogger(__name__)

Mutator = Callable[[], Awaitable[Mutation]]
Loader = Callable[[], Awaitable[Any]]


class CacheManager:
    def __init__(
        self,
        remote: RemoteDocuments,
        *,
        max_age: float = 60.0,
        timeout: float | None = 10.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self._remote = remote
        self._max_age = max_age
        self._timeout = timeout
        self._clock = clock
        self._locks = KeyedLock()
        self.collections = CacheCollections(clock=clock)

    @property
    def max_age(self) -> float:
        return self._max_age

    async def read(
        self, kind: EntityKind | str, key: CacheKey, *, loader: Loader | None = None
    ) -> Any:
        """Return the document for ``key``, fetching it when missing or stale.

        ``loader`` replaces the remote ``fetch_document`` call for kinds that
        are assembled from several remote documents.
        """
        kind = EntityKind(kind)
        collection = self.collections[kind]
        async with self._locks.hold((kind, key)):
            entry = collection.get(key)
            if entry is not None and not entry.is_stale(self._max_age, self._clock()):
                logger.debug("Cache hit for %s %s", kind.value, key)
                return entry.data
            logger.debug(
                "Cache %s for %s %s", "refresh" if entry else "miss", kind.value, key
            )
            call = loader() if loader is not None else self._remote.fetch_document(kind.value, key)
            data = await self.call_remote(f"fetch {kind.value}", call)
            collection.set(key, data)
            return data

    async def write(self, kind: EntityKind | str, key: CacheKey, mutator: Mutator) -> Any:
        """Run ``mutator`` against the remote store and mirror what it acknowledged.

        ``mutator`` returns a :class:`~ecostore.storage.base.Mutation`; its
        ``document`` replaces the cache entry and its ``result`` is returned.
        Nothing is cached when the remote call fails.
        """
        kind = EntityKind(kind)
        collection = self.collections[kind]
        async with self._locks.hold((kind, key)):
            mutation = await self.call_remote(f"write {kind.value}", mutator())
            collection.set(key, mutation.document)
            logger.debug("Cache updated for %s %s after remote write", kind.value, key)
            return mutation.result

    def invalidate(self, kind: EntityKind | str, key: CacheKey) -> bool:
        """Force the next :meth:`read` of ``key`` to go to the remote store."""
        return self.collections[EntityKind(kind)].delete(key)

    def invalidate_all(self, kind: EntityKind | str | None = None) -> None:
        if kind is None:
            self.collections.clear()
        else:
            self.collections[EntityKind(kind)].clear()

    async def call_remote(self, label: str, call: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(call, self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Remote call '%s' timed out after %ss", label, self._timeout)
            raise StorageIOError(
                f"Remote call '{label}' timed out after {self._timeout}s"
            ) from exc
