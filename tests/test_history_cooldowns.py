import pytest

from ecostore.domain.cooldowns import CooldownManager
from ecostore.domain.exceptions import InvalidInputError, ItemNotFoundError
from ecostore.domain.models import CooldownState


@pytest.mark.asyncio()
async def test_history_ids_increase(json_economy):
    history = json_economy.history
    first = await history.add("Sword", 100, "u1", "g1")
    second = await history.add("Shield", 50, "u1", "g1", quantity=2, role="r1")
    assert (first.id, second.id) == (1, 2)
    entries = await history.fetch("u1", "g1")
    assert [entry.name for entry in entries] == ["Sword", "Shield"]
    assert entries[1].quantity == 2
    assert entries[1].member_id == "u1"


@pytest.mark.asyncio()
async def test_history_find_and_remove(json_economy):
    history = json_economy.history
    await history.add("Sword", 100, "u1", "g1")
    await history.add("Shield", 50, "u1", "g1")
    assert (await history.find(2, "u1", "g1")).name == "Shield"

    removed = await history.remove(1, "u1", "g1")
    assert removed.name == "Sword"
    assert [entry.id for entry in await history.fetch("u1", "g1")] == [2]
    with pytest.raises(ItemNotFoundError):
        await history.remove(1, "u1", "g1")


@pytest.mark.asyncio()
async def test_history_clear(json_economy):
    assert await json_economy.history.clear("u1", "g1") is False
    await json_economy.history.add("Sword", 100, "u1", "g1")
    assert await json_economy.history.clear("u1", "g1") is True
    assert await json_economy.history.fetch("u1", "g1") == []


@pytest.mark.asyncio()
async def test_cooldowns_default_to_zero(json_economy):
    assert await json_economy.cooldowns.fetch("u1", "g1") == CooldownState()


@pytest.mark.asyncio()
async def test_set_and_clear_cooldowns(json_economy):
    cooldowns = CooldownManager(json_economy.store, clock=lambda: 1_700_000_000_000)
    assert await cooldowns.set_cooldown("daily", "u1", "g1") == 1_700_000_000_000
    await cooldowns.set_cooldown("work", "u1", "g1", timestamp=5)
    assert await cooldowns.fetch("u1", "g1") == CooldownState(
        daily=1_700_000_000_000, work=5, weekly=0
    )

    assert await cooldowns.clear_daily("u1", "g1") is True
    assert await cooldowns.clear_daily("u1", "g1") is False
    assert await cooldowns.clear_weekly("u1", "g1") is False
    assert (await cooldowns.fetch("u1", "g1")).work == 5

    assert await cooldowns.clear_all("u1", "g1") is True
    assert await cooldowns.fetch("u1", "g1") == CooldownState()


@pytest.mark.asyncio()
async def test_unknown_cooldown_is_rejected(json_economy):
    with pytest.raises(InvalidInputError):
        await json_economy.cooldowns.set_cooldown("hourly", "u1", "g1")  # type: ignore[arg-type]
