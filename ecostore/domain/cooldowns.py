"""Reward cooldowns stored at ``<guild>.<member>.cooldowns``."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Literal

from .checks import ensure_scope
from .exceptions import InvalidInputError
from .models import CooldownState

if TYPE_CHECKING:
    from ..storage.base import DocumentStore

CooldownName = Literal["daily", "work", "weekly"]
COOLDOWN_NAMES: tuple[str, ...] = ("daily", "work", "weekly")


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class CooldownManager:
    def __init__(
        self, store: "DocumentStore", *, clock: Callable[[], int] = _epoch_ms
    ) -> None:
        self._store = store
        self._clock = clock

    @staticmethod
    def _path(member_id: str, guild_id: str, name: str | None = None) -> str:
        path = f"{guild_id}.{member_id}.cooldowns"
        return path if name is None else f"{path}.{name}"

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in COOLDOWN_NAMES:
            raise InvalidInputError(
                f"Unknown cooldown '{name}', expected one of {', '.join(COOLDOWN_NAMES)}"
            )

    async def fetch(self, member_id: str, guild_id: str) -> CooldownState:
        ensure_scope(member_id, guild_id)
        raw = await self._store.fetch(self._path(member_id, guild_id))
        return CooldownState.from_dict(raw if isinstance(raw, dict) else None)

    async def set_cooldown(
        self,
        name: CooldownName,
        member_id: str,
        guild_id: str,
        timestamp: int | None = None,
    ) -> int:
        """Mark ``name`` as claimed at ``timestamp`` (defaults to now)."""
        ensure_scope(member_id, guild_id)
        self._check_name(name)
        claimed_at = self._clock() if timestamp is None else int(timestamp)
        await self._store.set(self._path(member_id, guild_id, name), claimed_at)
        return claimed_at

    async def clear(self, name: CooldownName, member_id: str, guild_id: str) -> bool:
        ensure_scope(member_id, guild_id)
        self._check_name(name)
        return await self._store.delete(self._path(member_id, guild_id, name))

    async def clear_daily(self, member_id: str, guild_id: str) -> bool:
        return await self.clear("daily", member_id, guild_id)

    async def clear_work(self, member_id: str, guild_id: str) -> bool:
        return await self.clear("work", member_id, guild_id)

    async def clear_weekly(self, member_id: str, guild_id: str) -> bool:
        return await self.clear("weekly", member_id, guild_id)

    async def clear_all(self, member_id: str, guild_id: str) -> bool:
        """Reset every cooldown; returns ``False`` if none was set."""
        ensure_scope(member_id, guild_id)
        return await self._store.delete(self._path(member_id, guild_id))
