"""Purchase history stored at ``<guild>.<member>.history``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .checks import ensure_amount, ensure_positive_int, ensure_scope
from .exceptions import ItemNotFoundError
from .models import HistoryItem

if TYPE_CHECKING:
    from ..storage.base import DocumentStore


class HistoryManager:
    def __init__(self, store: "DocumentStore") -> None:
        self._store = store

    @staticmethod
    def _path(member_id: str, guild_id: str) -> str:
        return f"{guild_id}.{member_id}.history"

    async def fetch(self, member_id: str, guild_id: str) -> list[HistoryItem]:
        ensure_scope(member_id, guild_id)
        raw = await self._store.fetch(self._path(member_id, guild_id))
        if not isinstance(raw, list):
            return []
        return [HistoryItem.from_dict(entry) for entry in raw if isinstance(entry, dict)]

    async def add(
        self,
        name: str,
        price: int | float,
        member_id: str,
        guild_id: str,
        *,
        quantity: int = 1,
        role: str | None = None,
        custom: dict[str, Any] | None = None,
    ) -> HistoryItem:
        """Record a purchase; ids continue from the highest existing id."""
        ensure_amount(price, "price")
        ensure_positive_int(quantity, "quantity")
        existing = await self.fetch(member_id, guild_id)
        record = HistoryItem(
            id=max((entry.id for entry in existing), default=0) + 1,
            member_id=member_id,
            guild_id=guild_id,
            name=name,
            price=price,
            quantity=quantity,
            role=role,
            custom=dict(custom or {}),
        )
        await self._store.push(self._path(member_id, guild_id), record.to_dict())
        return record

    async def find(self, item_id: int, member_id: str, guild_id: str) -> HistoryItem | None:
        for entry in await self.fetch(member_id, guild_id):
            if entry.id == item_id:
                return entry
        return None

    async def remove(self, item_id: int, member_id: str, guild_id: str) -> HistoryItem:
        entry = await self.find(item_id, member_id, guild_id)
        if entry is None:
            raise ItemNotFoundError(f"No history entry {item_id} for member {member_id}")
        await self._store.pull(
            self._path(member_id, guild_id),
            lambda raw: isinstance(raw, dict) and raw.get("id") == item_id,
        )
        return entry

    async def clear(self, member_id: str, guild_id: str) -> bool:
        if not await self.fetch(member_id, guild_id):
            return False
        await self._store.set(self._path(member_id, guild_id), [])
        return True
