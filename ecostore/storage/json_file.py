"""Flat-file JSON document store.

The whole dataset lives in memory as one JSON tree and is rewritten to a
single file after every mutating call, before the call returns. Reads are
served from memory.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..domain.exceptions import StorageIOError
from . import operations
from .locks import KeyedLock
from .operations import Operation
from .paths import NOT_FOUND, resolve_read, scope_of

logger = logging.getLogger(__name__)


class JsonStore:
    """Synchronous path-addressed store persisted to one JSON file."""

    def __init__(self, path: str | Path, *, check_storage: bool = True) -> None:
        self._path = Path(path)
        self._check_storage = check_storage
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def fetch(self, path: str) -> Any:
        value = resolve_read(self._data, path)
        if value is NOT_FOUND:
            return None
        return copy.deepcopy(value)

    def get(self, path: str) -> Any:
        return self.fetch(path)

    def set(self, path: str, value: Any) -> Any:
        return self._mutate(path, Operation.SET, value)

    def add(self, path: str, amount: int | float) -> int | float:
        return self._mutate(path, Operation.ADD, amount)

    def subtract(self, path: str, amount: int | float) -> int | float:
        return self._mutate(path, Operation.SUBTRACT, amount)

    def push(self, path: str, item: Any) -> list[Any]:
        return self._mutate(path, Operation.PUSH, item)

    def pull(self, path: str, matcher: Any) -> list[Any]:
        return self._mutate(path, Operation.PULL, matcher)

    def delete(self, path: str) -> bool:
        data = copy.deepcopy(self._data)
        removed = operations.apply_delete(data, path)
        if removed:
            self._commit(data)
        return removed

    def all(self) -> dict[str, Any]:
        """Return a deep copy of the whole tree; editing it never touches the store."""
        return copy.deepcopy(self._data)

    def reload(self) -> None:
        """Re-read the backing file, dropping the in-memory tree."""
        self._data = self._load()

    def _mutate(self, path: str, operation: Operation, operand: Any) -> Any:
        data = copy.deepcopy(self._data)
        result = operations.apply(data, path, operation, operand)
        self._commit(data)
        logger.debug("JSON store %s %s at '%s'", self._path.name, operation.value, path)
        return result

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            logger.info("Creating storage file %s", self._path)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write({})
            return {}
        raw = self._path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            return self._repair(f"invalid JSON ({exc})")
        if not isinstance(data, dict):
            return self._repair(f"top level is a {type(data).__name__}, expected an object")
        return data

    def _repair(self, problem: str) -> dict[str, Any]:
        if not self._check_storage:
            raise StorageIOError(f"Storage file {self._path} is corrupt: {problem}")
        logger.warning("Storage file %s is corrupt (%s); resetting it", self._path, problem)
        self._write({})
        return {}

    def _commit(self, data: dict[str, Any]) -> None:
        """Write ``data`` to disk, then adopt it; a failed write keeps the old tree."""
        self._write(data)
        self._data = data

    def _write(self, data: dict[str, Any]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)


class AsyncJsonStore:
    """Expose a :class:`JsonStore` through the async ``DocumentStore`` contract.

    Calls addressing the same owner/entity scope run one after another in
    issue order; the file I/O itself stays synchronous.
    """

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._locks = KeyedLock()

    @property
    def store(self) -> JsonStore:
        return self._store

    async def fetch(self, path: str) -> Any:
        async with self._locks.hold(scope_of(path)):
            return self._store.fetch(path)

    async def set(self, path: str, value: Any) -> Any:
        async with self._locks.hold(scope_of(path)):
            return self._store.set(path, value)

    async def add(self, path: str, amount: int | float) -> int | float:
        async with self._locks.hold(scope_of(path)):
            return self._store.add(path, amount)

    async def subtract(self, path: str, amount: int | float) -> int | float:
        async with self._locks.hold(scope_of(path)):
            return self._store.subtract(path, amount)

    async def push(self, path: str, item: Any) -> list[Any]:
        async with self._locks.hold(scope_of(path)):
            return self._store.push(path, item)

    async def pull(self, path: str, matcher: Any) -> list[Any]:
        async with self._locks.hold(scope_of(path)):
            return self._store.pull(path, matcher)

    async def delete(self, path: str) -> bool:
        async with self._locks.hold(scope_of(path)):
            return self._store.delete(path)

    async def all(self) -> dict[str, Any]:
        return self._store.all()
