"""Top level application object for EcoStore."""

from __future__ import annotations

import logging
from typing import Any

from .cache.manager import CacheManager
from .cache.store import CachedDocumentStore
from .config import EcoStoreConfig
from .domain.balance import BalanceManager, BankManager
from .domain.cooldowns import CooldownManager
from .domain.currencies import CurrencyManager
from .domain.events import EventBus
from .domain.history import HistoryManager
from .domain.inventory import InventoryManager
from .storage.base import DocumentStore
from .storage.json_file import AsyncJsonStore, JsonStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage

logger = logging.getLogger(__name__)


class Economy:
    """Central dependency container wiring a store to the feature managers."""

    def __init__(
        self,
        config: EcoStoreConfig | None = None,
        *,
        store: DocumentStore | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or EcoStoreConfig()
        self.event_bus = event_bus or EventBus()

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self.cache: CacheManager | None = None
        self.store = store or self._wire_storage()

        self.currencies = CurrencyManager(self.store, self.event_bus)
        self.balance = BalanceManager(self.store, self.event_bus, currencies=self.currencies)
        self.bank = BankManager(self.store, self.event_bus)
        self.inventory = InventoryManager(self.store, self.event_bus)
        self.history = HistoryManager(self.store)
        self.cooldowns = CooldownManager(self.store)

    def _wire_storage(self) -> DocumentStore:
        storage = self.config.storage
        if storage.backend == "json":
            logger.info("Using JSON storage at %s", storage.path)
            return AsyncJsonStore(JsonStore(storage.path, check_storage=storage.check_storage))
        if storage.backend == "sqlalchemy":
            dsn = storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            self._sqlalchemy_storage = AsyncSQLAlchemyStorage(dsn, echo=storage.echo_sql)
            remote = self._sqlalchemy_storage.document_store()
            self.cache = CacheManager(
                remote,
                max_age=self.config.cache.max_age,
                timeout=self.config.cache.remote_timeout,
            )
            logger.info("Using database storage with cache max age %.1fs", self.cache.max_age)
            return CachedDocumentStore(remote, self.cache)
        raise ValueError(f"Unsupported storage backend {storage.backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "path": self.config.storage.path if self.config.storage.backend == "json" else None,
            "cache_max_age": self.config.cache.max_age if self.cache else None,
            "remote_timeout": self.config.cache.remote_timeout if self.cache else None,
            "debug": self.config.debug,
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
