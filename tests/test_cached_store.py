import pytest
import pytest_asyncio

from ecostore.cache.items import EntityKind
from ecostore.cache.manager import CacheManager
from ecostore.cache.store import CachedDocumentStore, route
from ecostore.domain.exceptions import InvalidPathError, InvalidTypeError
from ecostore.storage.operations import Operation
from ecostore.storage.sqlalchemy import AsyncSQLAlchemyStorage


@pytest_asyncio.fixture()
async def storage(tmp_path):
    storage = AsyncSQLAlchemyStorage(f"sqlite+aiosqlite:///{tmp_path / 'eco.db'}")
    await storage.init_models()
    yield storage
    await storage.dispose()


@pytest.fixture()
def remote(storage):
    return storage.document_store()


@pytest.fixture()
def store(remote):
    return CachedDocumentStore(remote, CacheManager(remote, max_age=60.0))


def test_route_field_kinds():
    assert route("g1.u1.money") == (EntityKind.BALANCE, ("g1", "u1"), "money")
    assert route("g1.u1.inventory") == (EntityKind.INVENTORY, ("g1", "u1"), "inventory")
    assert route("g1.u1.nickname") == (EntityKind.USERS, ("g1", "u1"), "nickname")
    assert route("g1.shop") == (EntityKind.SHOP, ("g1", "shop"), None)
    assert route("g1.u1") == (None, ("g1", "u1"), None)


def test_route_single_segment_addresses_guild():
    assert route("g1") == (EntityKind.GUILDS, ("g1", ""), None)
    with pytest.raises(InvalidPathError):
        route("g1..u1")


@pytest.mark.asyncio()
async def test_balance_scenario(store):
    await store.set("g1.u1.money", 100)
    await store.add("g1.u1.money", 50)
    assert await store.fetch("g1.u1.money") == 150
    assert await store.subtract("g1.u1.money", 200) == -50
    assert await store.fetch("g1.u1.money") == -50


@pytest.mark.asyncio()
async def test_inventory_scenario(store):
    await store.push("g1.u1.inventory", {"id": 1})
    await store.push("g1.u1.inventory", {"id": 2})
    await store.pull("g1.u1.inventory", lambda item: item["id"] == 1)
    assert await store.fetch("g1.u1.inventory") == [{"id": 2}]


@pytest.mark.asyncio()
async def test_writes_reach_the_database(store, remote):
    await store.add("g1.u1.money", 5)
    assert await remote.fetch_document("balance", ("g1", "u1")) == {"money": 5}


@pytest.mark.asyncio()
async def test_numeric_operator_on_string_is_rejected(store):
    await store.set("g1.u1.money", "lots")
    with pytest.raises(InvalidTypeError):
        await store.add("g1.u1.money", 1)
    assert await store.fetch("g1.u1.money") == "lots"


@pytest.mark.asyncio()
async def test_invalid_amount_never_reaches_remote(store, remote):
    with pytest.raises(InvalidTypeError):
        await store.add("g1.u1.money", "10")
    assert await remote.dump() == []


@pytest.mark.asyncio()
async def test_member_record_round_trip(store):
    record = {"money": 10, "bank": 3, "inventory": [{"id": 1}], "nickname": "neo"}
    await store.set("g1.u1", record)
    assert await store.fetch("g1.u1") == record
    assert await store.fetch("g1.u1.nickname") == "neo"
    assert await store.fetch("g1.u2") is None


@pytest.mark.asyncio()
async def test_member_record_rejects_numeric_operator(store):
    with pytest.raises(InvalidTypeError):
        await store.add("g1.u1", 5)


@pytest.mark.asyncio()
async def test_delete(store):
    await store.set("g1.u1.money", 1)
    await store.set("g1.u1.bank", 2)
    assert await store.delete("g1.u1.money") is True
    assert await store.delete("g1.u1.money") is False
    assert await store.delete("g1.u1") is True
    assert await store.fetch("g1.u1") is None


@pytest.mark.asyncio()
async def test_guild_scoped_documents(store):
    await store.set("g1.shop", [{"id": 1, "name": "Sword"}])
    await store.push("g1.shop", {"id": 2, "name": "Shield"})
    assert [item["id"] for item in await store.fetch("g1.shop")] == [1, 2]


@pytest.mark.asyncio()
async def test_all_merges_documents_into_snapshot(store):
    await store.set("g1.u1.money", 10)
    await store.set("g1.u1.bank", 4)
    await store.set("g1.settings", {"prefix": "!"})
    snapshot = await store.all()
    assert snapshot == {"g1": {"u1": {"money": 10, "bank": 4}, "settings": {"prefix": "!"}}}
    snapshot["g1"]["u1"]["money"] = 0
    assert await store.fetch("g1.u1.money") == 10


@pytest.mark.asyncio()
async def test_invalidate_sees_external_changes(store, remote):
    await store.set("g1.u1.money", 10)
    await remote.mutate_document("balance", ("g1", "u1"), "money", Operation.SET, 77)
    assert await store.fetch("g1.u1.money") == 10
    store.invalidate("g1.u1.money")
    assert await store.fetch("g1.u1.money") == 77


@pytest.mark.asyncio()
async def test_returned_values_are_copies(store):
    await store.set("g1.u1.inventory", [{"id": 1}])
    items = await store.fetch("g1.u1.inventory")
    items.append({"id": 2})
    assert await store.fetch("g1.u1.inventory") == [{"id": 1}]


@pytest.mark.asyncio()
async def test_fetch_guild_merges_its_documents(store):
    assert await store.fetch("g1") is None
    await store.set("g1.u1.money", 5)
    await store.set("g1.settings", {"prefix": "!"})
    await store.set("g2.u9.money", 1)
    assert await store.fetch("g1") == {"u1": {"money": 5}, "settings": {"prefix": "!"}}


@pytest.mark.asyncio()
async def test_guild_view_follows_later_writes(store):
    await store.set("g1.u1.money", 5)
    assert await store.fetch("g1") == {"u1": {"money": 5}}
    await store.add("g1.u1.money", 2)
    assert await store.fetch("g1") == {"u1": {"money": 7}}


@pytest.mark.asyncio()
async def test_set_guild_replaces_every_document(store, remote):
    await store.set("g1.u1.money", 5)
    await store.set("g1.u2.bank", 9)
    guild = {"u1": {"money": 1, "nickname": "neo"}, "shop": [{"id": 1}]}
    assert await store.set("g1", guild) == guild
    assert await store.fetch("g1") == guild
    assert await store.fetch("g1.u2") is None
    assert await remote.fetch_document("bank", ("g1", "u2")) is None


@pytest.mark.asyncio()
async def test_set_guild_rejects_scalar_members(store):
    await store.set("g1.u1.money", 5)
    with pytest.raises(InvalidTypeError):
        await store.set("g1", {"u1": 3})
    with pytest.raises(InvalidTypeError):
        await store.set("g1", [1, 2])
    assert await store.fetch("g1.u1.money") == 5


@pytest.mark.asyncio()
async def test_delete_guild_removes_only_its_rows(store, remote):
    await store.set("g1.u1.money", 5)
    await store.set("g1.shop", [{"id": 1}])
    await store.set("g2.u1.money", 3)
    assert await store.delete("g1") is True
    assert await store.delete("g1") is False
    assert await store.fetch("g1") is None
    assert await store.fetch("g1.u1.money") is None
    assert await remote.dump() == [("balance", ("g2", "u1"), {"money": 3})]


@pytest.mark.asyncio()
async def test_guild_rejects_value_operators(store):
    with pytest.raises(InvalidTypeError):
        await store.add("g1", 5)
    with pytest.raises(InvalidTypeError):
        await store.push("g1", {"id": 1})


@pytest.mark.asyncio()
async def test_invalidate_guild_drops_its_cached_documents(store, remote):
    await store.set("g1.u1.money", 10)
    await store.set("g2.u1.money", 20)
    assert await store.fetch("g1") == {"u1": {"money": 10}}
    await remote.mutate_document("balance", ("g1", "u1"), "money", Operation.SET, 77)
    await remote.mutate_document("balance", ("g2", "u1"), "money", Operation.SET, 88)
    store.invalidate("g1")
    assert await store.fetch("g1") == {"u1": {"money": 77}}
    assert await store.fetch("g1.u1.money") == 77
    assert await store.fetch("g2.u1.money") == 20


@pytest.mark.asyncio()
async def test_remote_dump_filters_by_guild(store, remote):
    await store.set("g1.u1.money", 5)
    await store.set("g2.u1.money", 6)
    assert await remote.dump("g2") == [("balance", ("g2", "u1"), {"money": 6})]
    assert await remote.dump("g3") == []


@pytest.mark.asyncio()
async def test_cached_value_matches_database_value(store):
    await store.set("g1.settings", {1: "x"})
    assert await store.fetch("g1.settings.1") == "x"
    store.invalidate("g1.settings")
    assert await store.fetch("g1.settings") == {"1": "x"}
