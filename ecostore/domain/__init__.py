"""Economy features built on a path-addressed document store."""

from .balance import BalanceManager, BankManager
from .cooldowns import COOLDOWN_NAMES, CooldownManager
from .currencies import CurrencyBalance, CurrencyManager
from .events import BalanceEvent, EventBus
from .exceptions import (
    CurrencyNotFoundError,
    EconomyError,
    InvalidInputError,
    InvalidPathError,
    InvalidTypeError,
    ItemNotFoundError,
    StorageIOError,
)
from .history import HistoryManager
from .inventory import InventoryManager, RoleGranter
from .models import (
    CooldownState,
    Currency,
    HistoryItem,
    InventoryItem,
    LeaderboardEntry,
    StackedInventoryItem,
    TransferOptions,
    TransferResult,
)

__all__ = [
    "BalanceManager",
    "BankManager",
    "COOLDOWN_NAMES",
    "CooldownManager",
    "CurrencyBalance",
    "CurrencyManager",
    "BalanceEvent",
    "EventBus",
    "CurrencyNotFoundError",
    "EconomyError",
    "InvalidInputError",
    "InvalidPathError",
    "InvalidTypeError",
    "ItemNotFoundError",
    "StorageIOError",
    "HistoryManager",
    "InventoryManager",
    "RoleGranter",
    "CooldownState",
    "Currency",
    "HistoryItem",
    "InventoryItem",
    "LeaderboardEntry",
    "StackedInventoryItem",
    "TransferOptions",
    "TransferResult",
]
