"""Records returned by the feature managers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class InventoryItem:
    """One unit of an item held in a member's inventory."""

    id: int
    name: str
    price: int | float = 0
    message: str = ""
    description: str = ""
    role: str | None = None
    max_amount: int | None = None
    date: str = field(default_factory=_now_iso)
    custom: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            price=data.get("price", 0),
            message=data.get("message", ""),
            description=data.get("description", ""),
            role=data.get("role"),
            max_amount=data.get("max_amount"),
            date=data.get("date") or _now_iso(),
            custom=dict(data.get("custom") or {}),
        )


@dataclass(slots=True)
class StackedInventoryItem:
    item: InventoryItem
    quantity: int
    total_price: int | float


@dataclass(slots=True)
class HistoryItem:
    """A purchase recorded in a member's history."""

    id: int
    member_id: str
    guild_id: str
    name: str
    price: int | float
    quantity: int = 1
    role: str | None = None
    date: str = field(default_factory=_now_iso)
    custom: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryItem":
        return cls(
            id=int(data["id"]),
            member_id=str(data["member_id"]),
            guild_id=str(data["guild_id"]),
            name=str(data.get("name", "")),
            price=data.get("price", 0),
            quantity=int(data.get("quantity", 1)),
            role=data.get("role"),
            date=data.get("date") or _now_iso(),
            custom=dict(data.get("custom") or {}),
        )


@dataclass(slots=True)
class CooldownState:
    """Timestamps (epoch milliseconds) of the last claimed rewards; 0 means never."""

    daily: int = 0
    work: int = 0
    weekly: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "CooldownState":
        data = data or {}
        return cls(
            daily=int(data.get("daily") or 0),
            work=int(data.get("work") or 0),
            weekly=int(data.get("weekly") or 0),
        )


@dataclass(slots=True)
class LeaderboardEntry:
    index: int
    user_id: str
    money: int | float


@dataclass(slots=True)
class TransferOptions:
    amount: int | float
    sender_member_id: str
    receiver_member_id: str
    sending_reason: str = "sending money to user"
    receiving_reason: str = "receiving money from user"


@dataclass(slots=True)
class TransferResult:
    success: bool
    guild_id: str
    amount: int | float
    sender_member_id: str
    receiver_member_id: str
    sender_balance: int | float
    receiver_balance: int | float
    sending_reason: str
    receiving_reason: str


@dataclass(slots=True)
class Currency:
    """A guild-defined currency with its own per-member balances."""

    id: int
    name: str
    symbol: str = ""
    balances: dict[str, int | float] = field(default_factory=dict)
    custom: dict[str, Any] = field(default_factory=dict)

    def balance_of(self, member_id: str) -> int | float:
        return self.balances.get(member_id, 0)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Currency":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            symbol=str(data.get("symbol") or ""),
            balances=dict(data.get("balances") or {}),
            custom=dict(data.get("custom") or {}),
        )

    def __str__(self) -> str:
        return f"{self.symbol} {self.name}".strip()
