"""Storage abstractions used by the EcoStore managers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from .operations import Operation

CacheKey = tuple[str, str]


@dataclass(slots=True)
class Mutation:
    """Outcome of a remote write: the stored document and the operator result."""

    document: Any
    result: Any


class DocumentStore(Protocol):
    """Path-addressed document store consumed by every feature manager."""

    async def fetch(self, path: str) -> Any:
        ...

    async def set(self, path: str, value: Any) -> Any:
        ...

    async def add(self, path: str, amount: int | float) -> int | float:
        ...

    async def subtract(self, path: str, amount: int | float) -> int | float:
        ...

    async def push(self, path: str, item: Any) -> list[Any]:
        ...

    async def pull(self, path: str, matcher: Any) -> list[Any]:
        ...

    async def delete(self, path: str) -> bool:
        ...

    async def all(self) -> dict[str, Any]:
        ...


class RemoteDocuments(Protocol):
    """Remote database holding one document per entity kind and composite key."""

    async def fetch_document(self, kind: str, key: CacheKey) -> Any:
        ...

    async def mutate_document(
        self,
        kind: str,
        key: CacheKey,
        inner_path: str | None,
        operation: Operation,
        operand: Any = None,
    ) -> Mutation:
        ...

    async def dump(self, guild_id: str | None = None) -> Sequence[tuple[str, CacheKey, Any]]:
        ...
