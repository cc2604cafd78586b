"""EcoStore: storage and cache layer for a guild-scoped economy."""

from .app import Economy
from .config import CacheConfig, EcoStoreConfig, StorageConfig
from .domain.exceptions import (
    CurrencyNotFoundError,
    EconomyError,
    InvalidInputError,
    InvalidPathError,
    InvalidTypeError,
    ItemNotFoundError,
    StorageIOError,
)
from .storage import AsyncJsonStore, DocumentStore, JsonStore

__all__ = [
    "Economy",
    "CacheConfig",
    "EcoStoreConfig",
    "StorageConfig",
    "CurrencyNotFoundError",
    "EconomyError",
    "InvalidInputError",
    "InvalidPathError",
    "InvalidTypeError",
    "ItemNotFoundError",
    "StorageIOError",
    "AsyncJsonStore",
    "DocumentStore",
    "JsonStore",
]
