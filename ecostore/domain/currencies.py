"""Guild-defined currencies stored as a list at ``<guild>.currencies``.

Each record carries its own ``balances`` mapping of member id to amount, so
a currency and everything held in it live in one document.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ..storage.locks import KeyedLock
from .checks import ensure_amount, ensure_id, ensure_scope
from .events import BalanceEvent, BalanceOperationType, EventBus
from .exceptions import CurrencyNotFoundError, InvalidInputError, InvalidTypeError
from .models import Currency

if TYPE_CHECKING:
    from ..storage.base import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

EDITABLE_PROPERTIES = ("name", "symbol", "custom")


def _matches(currency: Currency, currency_ref: int | str) -> bool:
    if isinstance(currency_ref, str):
        return currency.name == currency_ref or str(currency.id) == currency_ref
    return currency.id == currency_ref


def _check_ref(currency_ref: Any) -> int | str:
    if isinstance(currency_ref, bool) or not isinstance(currency_ref, (int, str)):
        raise InvalidTypeError(
            f"currency must be an id or a name, received {type(currency_ref).__name__}"
        )
    return currency_ref


def _check_property(name: str, value: Any) -> Any:
    if name not in EDITABLE_PROPERTIES:
        allowed = ", ".join(EDITABLE_PROPERTIES)
        raise InvalidInputError(
            f"Cannot edit currency property {name!r}; expected one of {allowed}",
            code="INVALID_PROPERTY",
        )
    if name == "custom":
        if not isinstance(value, dict):
            raise InvalidTypeError(f"custom must be an object, received {type(value).__name__}")
        return dict(value)
    if not isinstance(value, str):
        raise InvalidTypeError(f"{name} must be a string, received {type(value).__name__}")
    if name == "name" and not value.strip():
        raise InvalidInputError("Currency name cannot be empty")
    return value


class CurrencyManager:
    """Create, edit and hold balances in a guild's custom currencies."""

    def __init__(self, store: "DocumentStore", events: EventBus | None = None) -> None:
        self._store = store
        self._events = events or EventBus()
        self._locks = KeyedLock()

    @staticmethod
    def _path(guild_id: str) -> str:
        return f"{guild_id}.currencies"

    async def all(self, guild_id: str) -> list[Currency]:
        ensure_id(guild_id, "guild_id")
        raw = await self._store.fetch(self._path(guild_id))
        if not isinstance(raw, list):
            return []
        return [Currency.from_dict(entry) for entry in raw if isinstance(entry, dict)]

    async def get(self, currency_ref: int | str, guild_id: str) -> Currency | None:
        """Return the currency matching an id or name."""
        _check_ref(currency_ref)
        for currency in await self.all(guild_id):
            if _matches(currency, currency_ref):
                return currency
        return None

    async def create(self, name: str, guild_id: str, symbol: str = "") -> Currency:
        ensure_id(guild_id, "guild_id")
        name = _check_property("name", name)
        symbol = _check_property("symbol", symbol)
        async with self._locks.hold(guild_id):
            existing = await self.all(guild_id)
            currency = Currency(
                id=max((entry.id for entry in existing), default=0) + 1,
                name=name,
                symbol=symbol,
            )
            await self._store.push(self._path(guild_id), currency.to_dict())
        logger.info("Created currency %s (#%d) in guild %s", name, currency.id, guild_id)
        return currency

    async def delete(self, currency_ref: int | str, guild_id: str) -> bool:
        """Remove a currency and every balance held in it."""
        _check_ref(currency_ref)
        async with self._locks.hold(guild_id):
            currencies = await self.all(guild_id)
            for index, currency in enumerate(currencies):
                if _matches(currency, currency_ref):
                    del currencies[index]
                    await self._save(guild_id, currencies)
                    logger.info("Deleted currency #%d from guild %s", currency.id, guild_id)
                    return True
        return False

    async def edit(
        self, currency_ref: int | str, property_name: str, value: Any, guild_id: str
    ) -> Currency:
        """Change ``name``, ``symbol`` or ``custom`` of a currency."""
        value = _check_property(property_name, value)

        def change(currency: Currency) -> None:
            setattr(currency, property_name, value)

        currency, _ = await self._update(currency_ref, guild_id, change)
        return currency

    async def set_custom(
        self, currency_ref: int | str, custom: dict[str, Any], guild_id: str
    ) -> Currency:
        return await self.edit(currency_ref, "custom", custom, guild_id)

    async def get_balance(
        self, currency_ref: int | str, member_id: str, guild_id: str
    ) -> int | float:
        ensure_scope(member_id, guild_id)
        currency = await self.get(currency_ref, guild_id)
        if currency is None:
            raise CurrencyNotFoundError(f"Guild {guild_id} has no currency {currency_ref!r}")
        return currency.balance_of(member_id)

    async def set_balance(
        self,
        currency_ref: int | str,
        amount: int | float,
        member_id: str,
        guild_id: str,
        reason: str | None = None,
    ) -> int | float:
        return await self._change_balance("set", currency_ref, amount, member_id, guild_id, reason)

    async def add_balance(
        self,
        currency_ref: int | str,
        amount: int | float,
        member_id: str,
        guild_id: str,
        reason: str | None = None,
    ) -> int | float:
        """Add ``amount`` and return the resulting balance."""
        return await self._change_balance("add", currency_ref, amount, member_id, guild_id, reason)

    async def subtract_balance(
        self,
        currency_ref: int | str,
        amount: int | float,
        member_id: str,
        guild_id: str,
        reason: str | None = None,
    ) -> int | float:
        """Subtract ``amount`` and return the resulting balance."""
        return await self._change_balance(
            "subtract", currency_ref, amount, member_id, guild_id, reason
        )

    async def _change_balance(
        self,
        operation: BalanceOperationType,
        currency_ref: int | str,
        amount: int | float,
        member_id: str,
        guild_id: str,
        reason: str | None,
    ) -> int | float:
        ensure_amount(amount)
        ensure_scope(member_id, guild_id)

        def change(currency: Currency) -> int | float:
            if operation == "set":
                balance = amount
            elif operation == "add":
                balance = currency.balance_of(member_id) + amount
            else:
                balance = currency.balance_of(member_id) - amount
            currency.balances[member_id] = balance
            return balance

        currency, balance = await self._update(currency_ref, guild_id, change)
        await self._events.publish(
            f"currency.{operation}",
            BalanceEvent(
                type=operation,
                guild_id=guild_id,
                member_id=member_id,
                amount=amount,
                balance=balance,
                reason=reason,
                currency_id=currency.id,
            ),
        )
        return balance

    async def _update(
        self, currency_ref: int | str, guild_id: str, change: Callable[[Currency], T]
    ) -> tuple[Currency, T]:
        _check_ref(currency_ref)
        ensure_id(guild_id, "guild_id")
        async with self._locks.hold(guild_id):
            currencies = await self.all(guild_id)
            for currency in currencies:
                if _matches(currency, currency_ref):
                    result = change(currency)
                    await self._save(guild_id, currencies)
                    return currency, result
        raise CurrencyNotFoundError(f"Guild {guild_id} has no currency {currency_ref!r}")

    async def _save(self, guild_id: str, currencies: list[Currency]) -> None:
        await self._store.set(self._path(guild_id), [entry.to_dict() for entry in currencies])


class CurrencyBalance:
    """One member's balance in one currency, bound for repeated use."""

    def __init__(
        self, manager: CurrencyManager, currency_ref: int | str, member_id: str, guild_id: str
    ) -> None:
        ensure_scope(member_id, guild_id)
        self._manager = manager
        self.currency_ref = _check_ref(currency_ref)
        self.member_id = member_id
        self.guild_id = guild_id

    async def get(self) -> int | float:
        return await self._manager.get_balance(self.currency_ref, self.member_id, self.guild_id)

    async def set(self, amount: int | float, reason: str | None = None) -> int | float:
        return await self._manager.set_balance(
            self.currency_ref, amount, self.member_id, self.guild_id, reason
        )

    async def add(self, amount: int | float, reason: str | None = None) -> int | float:
        return await self._manager.add_balance(
            self.currency_ref, amount, self.member_id, self.guild_id, reason
        )

    async def subtract(self, amount: int | float, reason: str | None = None) -> int | float:
        return await self._manager.subtract_balance(
            self.currency_ref, amount, self.member_id, self.guild_id, reason
        )
