import asyncio

import pytest

from ecostore.storage.locks import KeyedLock


@pytest.mark.asyncio()
async def test_same_key_runs_in_issue_order():
    locks = KeyedLock()
    order: list[int] = []

    async def job(idx: int, delay: float) -> None:
        async with locks.hold("g1.u1"):
            await asyncio.sleep(delay)
            order.append(idx)

    await asyncio.gather(job(1, 0.02), job(2, 0.0), job(3, 0.01))
    assert order == [1, 2, 3]
    assert len(locks) == 0


@pytest.mark.asyncio()
async def test_different_keys_do_not_wait():
    locks = KeyedLock()
    release = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("a"):
            await release.wait()

    task = asyncio.create_task(holder())
    await asyncio.sleep(0)
    assert locks.locked("a")
    async with locks.hold("b"):
        assert locks.locked("b")
    release.set()
    await task
    assert not locks.locked("a")
