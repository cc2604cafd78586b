"""Factories for tests and prototyping."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Iterable

from faker import Faker

from ..domain.models import InventoryItem


@dataclass(slots=True)
class IdentityFactory:
    """Discord-like snowflake ids for guilds and members."""

    faker: Faker = field(default_factory=Faker)

    def snowflake(self) -> str:
        return self.faker.unique.numerify(text="1##################")

    def guild_id(self) -> str:
        return self.snowflake()

    def member_id(self) -> str:
        return self.snowflake()

    def scope(self) -> tuple[str, str]:
        """Return ``(member_id, guild_id)`` in manager argument order."""
        return self.member_id(), self.guild_id()


@dataclass(slots=True)
class ItemFactory:
    faker: Faker = field(default_factory=Faker)
    rng: Random = field(default_factory=Random)

    def build(
        self,
        item_id: int | None = None,
        *,
        role: str | None = None,
        max_amount: int | None = None,
    ) -> InventoryItem:
        return InventoryItem(
            id=item_id if item_id is not None else self.rng.randint(1, 10_000),
            name=self.faker.word().title(),
            price=self.rng.randint(1, 500),
            message=self.faker.sentence(),
            description=self.faker.sentence(),
            role=role,
            max_amount=max_amount,
        )

    def batch(self, count: int) -> Iterable[InventoryItem]:
        for idx in range(1, count + 1):
            yield self.build(item_id=idx)
