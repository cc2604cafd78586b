import pytest

from ecostore.cache.items import CacheCollection, CacheCollections, CacheEntry, EntityKind


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_entry_staleness():
    entry = CacheEntry(key=("g1", "u1"), data=1, fetched_at=10.0)
    assert not entry.is_stale(5.0, now=15.0)
    assert entry.is_stale(5.0, now=15.5)


def test_collection_set_overwrites_and_refreshes_timestamp():
    clock = FakeClock(1.0)
    collection = CacheCollection(EntityKind.BALANCE, clock=clock)
    collection.set(("g1", "u1"), {"money": 1})
    clock.now = 4.0
    entry = collection.set(("g1", "u1"), {"money": 2})
    assert entry.fetched_at == 4.0
    assert collection.get(("g1", "u1")).data == {"money": 2}
    assert len(collection) == 1


def test_collection_delete_and_keys_snapshot():
    collection = CacheCollection(EntityKind.BANK)
    collection.set(("g1", "u1"), None)
    collection.set(("g1", "u2"), None)
    keys = collection.keys()
    assert collection.delete(("g1", "u1")) is True
    assert collection.delete(("g1", "u1")) is False
    assert keys == (("g1", "u1"), ("g1", "u2"))
    assert ("g1", "u1") not in collection
    assert collection.get(("g1", "u1")) is None


def test_collections_are_independent_per_kind():
    collections = CacheCollections()
    collections[EntityKind.BALANCE].set(("g1", "u1"), {"money": 1})
    assert len(collections.balance) == 1
    assert len(collections.bank) == 0
    assert collections["inventory"] is collections.inventory


def test_collections_unknown_attribute():
    collections = CacheCollections()
    with pytest.raises(AttributeError):
        collections.wallets  # noqa: B018


def test_collections_clear():
    collections = CacheCollections()
    for collection in collections:
        collection.set(("g1", "u1"), 0)
    collections.clear()
    assert all(len(collection) == 0 for collection in collections)
