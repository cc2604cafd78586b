"""Configuration models for EcoStore."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

StorageBackend = Literal["json", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure where economy data is persisted."""

    backend: StorageBackend = "json"
    path: str = "./storage.json"
    check_storage: bool = True
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./ecostore.db"
        return None


@dataclass(slots=True)
class CacheConfig:
    """Cache behaviour for the database backend; times are in seconds."""

    max_age: float = 60.0
    remote_timeout: float = 10.0


@dataclass(slots=True)
class EcoStoreConfig:
    """Top-level configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "EcoStoreConfig":
        """Create config from environment variables prefixed with ECOSTORE_."""
        prefix = "ECOSTORE_"
        storage = StorageConfig(
            backend=os.getenv(f"{prefix}STORAGE_BACKEND", "json"),  # type: ignore[arg-type]
            path=os.getenv(f"{prefix}STORAGE_PATH", "./storage.json") or "./storage.json",
            check_storage=os.getenv(f"{prefix}STORAGE_CHECK", "true").lower() in _TRUTHY,
            dsn=os.getenv(f"{prefix}STORAGE_DSN") or None,
            echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
        )
        cache = CacheConfig(
            max_age=_parse_seconds(prefix + "CACHE_MAX_AGE", "60"),
            remote_timeout=_parse_seconds(prefix + "CACHE_REMOTE_TIMEOUT", "10"),
        )
        return cls(
            storage=storage,
            cache=cache,
            debug=os.getenv(f"{prefix}DEBUG", "false").lower() in _TRUTHY,
        )


def _parse_seconds(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from exc
