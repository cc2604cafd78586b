"""Member inventories stored at ``<guild>.<member>.inventory``."""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Awaitable, Callable

from .checks import ensure_id, ensure_positive_int, ensure_scope
from .events import EventBus
from .exceptions import InvalidInputError, ItemNotFoundError
from .models import InventoryItem, StackedInventoryItem

if TYPE_CHECKING:
    from ..storage.base import DocumentStore

RoleGranter = Callable[[str, str, str], Awaitable[None]]
"""Called as ``granter(guild_id, member_id, role_id)`` when a role item is used."""

DEFAULT_USE_MESSAGE = "You have used this item!"


def _matches(item: InventoryItem, item_ref: int | str) -> bool:
    if isinstance(item_ref, str):
        return item.name == item_ref or str(item.id) == item_ref
    return item.id == item_ref


class InventoryManager:
    """Operate on the list of item units a member owns."""

    def __init__(self, store: "DocumentStore", events: EventBus | None = None) -> None:
        self._store = store
        self._events = events or EventBus()

    @staticmethod
    def _path(member_id: str, guild_id: str) -> str:
        return f"{guild_id}.{member_id}.inventory"

    async def fetch(self, member_id: str, guild_id: str) -> list[InventoryItem]:
        ensure_scope(member_id, guild_id)
        raw = await self._store.fetch(self._path(member_id, guild_id))
        if not isinstance(raw, list):
            return []
        return [InventoryItem.from_dict(entry) for entry in raw if isinstance(entry, dict)]

    async def find_item(
        self, item_ref: int | str, member_id: str, guild_id: str
    ) -> InventoryItem | None:
        """Return the first unit matching an item id or name."""
        for item in await self.fetch(member_id, guild_id):
            if _matches(item, item_ref):
                return item
        return None

    async def add_item(
        self, item: InventoryItem, member_id: str, guild_id: str, quantity: int = 1
    ) -> list[InventoryItem]:
        ensure_scope(member_id, guild_id)
        ensure_positive_int(quantity, "quantity")
        if item.max_amount is not None:
            owned = sum(1 for unit in await self.fetch(member_id, guild_id) if unit.id == item.id)
            if owned + quantity > item.max_amount:
                raise InvalidInputError(
                    f"Item {item.id} is limited to {item.max_amount} per member "
                    f"({owned} owned, {quantity} requested)"
                )

        path = self._path(member_id, guild_id)
        raw: list = []
        for _ in range(quantity):
            raw = await self._store.push(path, item.to_dict())

        await self._events.publish(
            "inventory.item.added",
            {
                "guild_id": guild_id,
                "member_id": member_id,
                "item_id": item.id,
                "quantity": quantity,
            },
        )
        return [InventoryItem.from_dict(entry) for entry in raw]

    async def remove_item(
        self, item_ref: int | str, member_id: str, guild_id: str, quantity: int = 1
    ) -> int:
        """Remove up to ``quantity`` matching units and return how many were removed."""
        ensure_scope(member_id, guild_id)
        ensure_positive_int(quantity, "quantity")
        path = self._path(member_id, guild_id)
        raw = await self._store.fetch(path)
        if not isinstance(raw, list):
            raise ItemNotFoundError(f"Member {member_id} has no item {item_ref!r}")

        units = [
            entry
            for entry in raw
            if isinstance(entry, dict) and _matches(InventoryItem.from_dict(entry), item_ref)
        ][:quantity]
        if not units:
            raise ItemNotFoundError(f"Member {member_id} has no item {item_ref!r}")

        for unit in units:
            await self._store.pull(path, unit)

        await self._events.publish(
            "inventory.item.removed",
            {
                "guild_id": guild_id,
                "member_id": member_id,
                "item_id": units[0]["id"],
                "quantity": len(units),
            },
        )
        return len(units)

    async def clear(self, member_id: str, guild_id: str) -> bool:
        """Empty the inventory; returns ``False`` if it was already empty."""
        items = await self.fetch(member_id, guild_id)
        if not items:
            return False
        await self._store.set(self._path(member_id, guild_id), [])
        return True

    async def stacked(self, member_id: str, guild_id: str) -> list[StackedInventoryItem]:
        """Group units by item id, preserving first-seen order."""
        groups: OrderedDict[int, list[InventoryItem]] = OrderedDict()
        for item in await self.fetch(member_id, guild_id):
            groups.setdefault(item.id, []).append(item)
        return [
            StackedInventoryItem(
                item=units[0],
                quantity=len(units),
                total_price=sum(unit.price for unit in units),
            )
            for units in groups.values()
        ]

    async def use_item(
        self,
        item_ref: int | str,
        member_id: str,
        guild_id: str,
        *,
        role_granter: RoleGranter | None = None,
    ) -> str:
        """Consume one unit and return its use message.

        Items carrying a role require ``role_granter``; the role is granted
        before the unit is removed.
        """
        item = await self.find_item(item_ref, member_id, guild_id)
        if item is None:
            raise ItemNotFoundError(f"Member {member_id} has no item {item_ref!r}")

        if item.role is not None:
            ensure_id(item.role, "role")
            if role_granter is None:
                raise InvalidInputError(f"Item {item.id} grants a role but no role granter was given")
            await role_granter(guild_id, member_id, item.role)

        await self.remove_item(item.id, member_id, guild_id)
        await self._events.publish(
            "inventory.item.used",
            {
                "guild_id": guild_id,
                "member_id": member_id,
                "item_id": item.id,
                "role": item.role,
            },
        )
        return item.message or DEFAULT_USE_MESSAGE
