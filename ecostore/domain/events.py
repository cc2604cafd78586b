"""Notification events emitted by the feature managers."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, DefaultDict, Iterable, Literal

logger = logging.getLogger(__name__)

EventListener = Callable[[Any], Awaitable[None]]

BalanceOperationType = Literal["set", "add", "subtract"]


@dataclass(slots=True)
class BalanceEvent:
    """Payload of ``balance.*``, ``bank.*`` and ``currency.*`` events.

    ``currency_id`` is only set for custom currency balances.
    """

    type: BalanceOperationType
    guild_id: str
    member_id: str
    amount: int | float
    balance: int | float
    reason: str | None = None
    currency_id: int | None = None


class EventBus:
    """Async listener registry; listeners run in subscription order."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    def unsubscribe(self, event_name: str, listener: EventListener) -> bool:
        listeners = self._listeners.get(event_name, [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def on(self, event_name: str) -> Callable[[EventListener], EventListener]:
        """Decorator form of :meth:`subscribe`."""

        def decorator(listener: EventListener) -> EventListener:
            self.subscribe(event_name, listener)
            return listener

        return decorator

    async def publish(self, event_name: str, payload: Any) -> None:
        listeners = list(self._listeners.get(event_name, ()))
        logger.debug("Publishing %s to %d listener(s)", event_name, len(listeners))
        for listener in listeners:
            await listener(payload)

    def clear(self) -> None:
        self._listeners.clear()

    def listeners(self, event_name: str) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_name, ()))
