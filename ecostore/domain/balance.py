"""Wallet and bank balances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .checks import ensure_amount, ensure_id, ensure_scope, is_number
from .currencies import CurrencyBalance, CurrencyManager
from .events import BalanceEvent, BalanceOperationType, EventBus
from .exceptions import InvalidInputError
from .models import LeaderboardEntry, TransferOptions, TransferResult

if TYPE_CHECKING:
    from ..storage.base import DocumentStore


def balance_path(member_id: str, guild_id: str, field: str) -> str:
    return f"{guild_id}.{member_id}.{field}"


class _AccountManager:
    """Numeric account stored at ``<guild>.<member>.<field>``.

    Balances may go below zero; floors belong to callers.
    """

    field = ""
    event_prefix = ""

    def __init__(self, store: "DocumentStore", events: EventBus | None = None) -> None:
        self._store = store
        self._events = events or EventBus()

    async def fetch(self, member_id: str, guild_id: str) -> int | float:
        ensure_scope(member_id, guild_id)
        value = await self._store.fetch(balance_path(member_id, guild_id, self.field))
        return value if is_number(value) else 0

    async def get(self, member_id: str, guild_id: str) -> int | float:
        return await self.fetch(member_id, guild_id)

    async def set(
        self, amount: int | float, member_id: str, guild_id: str, reason: str | None = None
    ) -> int | float:
        ensure_amount(amount)
        ensure_scope(member_id, guild_id)
        balance = await self._store.set(balance_path(member_id, guild_id, self.field), amount)
        await self._emit("set", guild_id, member_id, amount, balance, reason)
        return balance

    async def add(
        self, amount: int | float, member_id: str, guild_id: str, reason: str | None = None
    ) -> int | float:
        """Add ``amount`` and return the resulting balance."""
        ensure_amount(amount)
        ensure_scope(member_id, guild_id)
        balance = await self._store.add(balance_path(member_id, guild_id, self.field), amount)
        await self._emit("add", guild_id, member_id, amount, balance, reason)
        return balance

    async def subtract(
        self, amount: int | float, member_id: str, guild_id: str, reason: str | None = None
    ) -> int | float:
        """Subtract ``amount`` and return the resulting balance."""
        ensure_amount(amount)
        ensure_scope(member_id, guild_id)
        balance = await self._store.subtract(
            balance_path(member_id, guild_id, self.field), amount
        )
        await self._emit("subtract", guild_id, member_id, amount, balance, reason)
        return balance

    async def leaderboard(self, guild_id: str) -> list[LeaderboardEntry]:
        """Members of ``guild_id`` sorted by balance, highest first."""
        ensure_id(guild_id, "guild_id")
        guild = (await self._store.all()).get(guild_id)
        if not isinstance(guild, dict):
            return []
        ranked = sorted(
            (
                (member_id, record[self.field])
                for member_id, record in guild.items()
                if isinstance(record, dict) and is_number(record.get(self.field))
            ),
            key=lambda pair: pair[1],
            reverse=True,
        )
        return [
            LeaderboardEntry(index=index, user_id=member_id, money=money)
            for index, (member_id, money) in enumerate(ranked, start=1)
        ]

    async def _emit(
        self,
        operation: BalanceOperationType,
        guild_id: str,
        member_id: str,
        amount: int | float,
        balance: int | float,
        reason: str | None,
    ) -> None:
        await self._events.publish(
            f"{self.event_prefix}.{operation}",
            BalanceEvent(
                type=operation,
                guild_id=guild_id,
                member_id=member_id,
                amount=amount,
                balance=balance,
                reason=reason,
            ),
        )


class BankManager(_AccountManager):
    field = "bank"
    event_prefix = "bank"

    async def withdraw(
        self, amount: int | float, member_id: str, guild_id: str, reason: str | None = None
    ) -> int | float:
        """Move ``amount`` from the bank to the wallet; returns the amount moved."""
        ensure_amount(amount)
        if amount < 0:
            raise InvalidInputError(f"Cannot withdraw a negative amount ({amount})")
        ensure_scope(member_id, guild_id)
        await self.subtract(amount, member_id, guild_id, reason)
        wallet = BalanceManager(self._store, self._events)
        await wallet.add(amount, member_id, guild_id, reason)
        return amount


class BalanceManager(_AccountManager):
    field = "money"
    event_prefix = "balance"

    def __init__(
        self,
        store: "DocumentStore",
        events: EventBus | None = None,
        *,
        currencies: CurrencyManager | None = None,
    ) -> None:
        super().__init__(store, events)
        self._currencies = currencies or CurrencyManager(store, self._events)

    def currency(
        self, currency_ref: int | str, member_id: str, guild_id: str
    ) -> CurrencyBalance:
        """Balance of ``member_id`` in the guild currency matching ``currency_ref``."""
        return CurrencyBalance(self._currencies, currency_ref, member_id, guild_id)

    async def deposit(
        self, amount: int | float, member_id: str, guild_id: str, reason: str | None = None
    ) -> int | float:
        """Move ``amount`` from the wallet to the bank; returns the amount moved."""
        ensure_amount(amount)
        if amount < 0:
            raise InvalidInputError(f"Cannot deposit a negative amount ({amount})")
        ensure_scope(member_id, guild_id)
        await self.subtract(amount, member_id, guild_id, reason)
        bank = BankManager(self._store, self._events)
        await bank.add(amount, member_id, guild_id, reason)
        return amount

    async def transfer(self, guild_id: str, options: TransferOptions) -> TransferResult:
        ensure_id(guild_id, "guild_id")
        ensure_amount(options.amount)
        ensure_id(options.sender_member_id, "sender_member_id")
        ensure_id(options.receiver_member_id, "receiver_member_id")

        receiver_balance = await self.add(
            options.amount, options.receiver_member_id, guild_id, options.receiving_reason
        )
        sender_balance = await self.subtract(
            options.amount, options.sender_member_id, guild_id, options.sending_reason
        )
        if options.sender_member_id == options.receiver_member_id:
            receiver_balance = sender_balance
        return TransferResult(
            success=True,
            guild_id=guild_id,
            amount=options.amount,
            sender_member_id=options.sender_member_id,
            receiver_member_id=options.receiver_member_id,
            sender_balance=sender_balance,
            receiver_balance=receiver_balance,
            sending_reason=options.sending_reason,
            receiving_reason=options.receiving_reason,
        )
