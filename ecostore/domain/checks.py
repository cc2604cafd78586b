"""Argument checks shared by the stores and the managers."""

from __future__ import annotations

import math
from typing import Any

from .exceptions import InvalidInputError, InvalidTypeError


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def ensure_amount(amount: Any, name: str = "amount") -> int | float:
    if not is_number(amount) or not math.isfinite(amount):
        raise InvalidTypeError(f"{name} must be a finite number, received {amount!r}")
    return amount


def ensure_id(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidTypeError(f"{name} must be a string, received {type(value).__name__}")
    return value


def ensure_scope(member_id: Any, guild_id: Any) -> None:
    ensure_id(member_id, "member_id")
    ensure_id(guild_id, "guild_id")


def ensure_positive_int(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidTypeError(f"{name} must be an integer, received {value!r}")
    if value <= 0:
        raise InvalidInputError(f"{name} must be positive, received {value}")
    return value
