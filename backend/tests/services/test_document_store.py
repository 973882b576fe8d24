"""SQL Record Store — document semantics and transaction boundaries.

Tests cover:
    - insert/find/find_many round trip with "_id" exposure
    - update modified_count semantics (no-op patch modifies nothing)
    - delete counts
    - transaction commit, rollback (cancellation included) and nesting
    - reads are detached copies
"""

import asyncio

import pytest

from app.core.domain_types import Collection
from app.infrastructure.document_store import SqlRecordStore


async def test_insert_assigns_hex_id(store):
    result = await store.insert(Collection.DRINKS, {"name": "Chai"})
    assert result.acknowledged
    assert len(result.inserted_id) == 32
    doc = await store.find(Collection.DRINKS, {"_id": result.inserted_id})
    assert doc == {"_id": result.inserted_id, "name": "Chai"}


async def test_collections_are_isolated(store):
    result = await store.insert(Collection.DRINKS, {"name": "Chai"})
    assert await store.find(Collection.USERS, {"_id": result.inserted_id}) is None


async def test_find_by_field_and_find_many(store):
    await store.insert(Collection.REVIEWS, {"drinkId": "d1", "rating": 5})
    await store.insert(Collection.REVIEWS, {"drinkId": "d1", "rating": 2})
    await store.insert(Collection.REVIEWS, {"drinkId": "d2", "rating": 4})

    found = await store.find_many(Collection.REVIEWS, {"drinkId": "d1"})
    first = await store.find(Collection.REVIEWS, {"drinkId": "d1"})

    assert [r["rating"] for r in found] == [5, 2]
    assert first["rating"] == 5
    assert len(await store.find_many(Collection.REVIEWS)) == 3


async def test_update_reports_modified_only_on_change(store):
    result = await store.insert(Collection.DRINKS, {"reservedCounts": 0})
    doc_filter = {"_id": result.inserted_id}

    changed = await store.update(Collection.DRINKS, doc_filter, {"$inc": {"reservedCounts": 1}})
    unchanged = await store.update(Collection.DRINKS, doc_filter, {"$set": {"reservedCounts": 1}})
    missing = await store.update(Collection.DRINKS, {"_id": "f" * 32}, {"$set": {"x": 1}})

    assert (changed.matched_count, changed.modified_count) == (1, 1)
    assert (unchanged.matched_count, unchanged.modified_count) == (1, 0)
    assert (missing.matched_count, missing.modified_count) == (0, 0)


async def test_delete_counts(store):
    result = await store.insert(Collection.REVIEWS, {"rating": 3})
    first = await store.delete(Collection.REVIEWS, {"_id": result.inserted_id})
    second = await store.delete(Collection.REVIEWS, {"_id": result.inserted_id})
    assert first.deleted_count == 1
    assert second.deleted_count == 0


async def test_reads_are_detached_copies(store):
    result = await store.insert(Collection.USERS, {"reviewIds": ["r1"]})
    doc = await store.find(Collection.USERS, {"_id": result.inserted_id})
    doc["reviewIds"].append("r2")

    again = await store.find(Collection.USERS, {"_id": result.inserted_id})

    assert again["reviewIds"] == ["r1"]


async def test_transaction_commits_all_writes(store, test_session_factory):
    async with store.transaction():
        user = await store.insert(Collection.USERS, {"drinkReserved": []})
        await store.update(
            Collection.USERS, {"_id": user.inserted_id},
            {"$push": {"drinkReserved": {"drinkId": "d", "timestamp": "t"}}},
        )

    async with test_session_factory() as other_session:
        doc = await SqlRecordStore(other_session).find(
            Collection.USERS, {"_id": user.inserted_id},
        )
    assert len(doc["drinkReserved"]) == 1


async def test_transaction_rolls_back_on_error(store):
    drink = await store.insert(Collection.DRINKS, {"reservedCounts": 0})
    review = await store.insert(Collection.REVIEWS, {"rating": 1})

    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.update(
                Collection.DRINKS, {"_id": drink.inserted_id},
                {"$inc": {"reservedCounts": 1}},
            )
            await store.delete(Collection.REVIEWS, {"_id": review.inserted_id})
            raise RuntimeError("crash between writes")

    restored = await store.find(Collection.DRINKS, {"_id": drink.inserted_id})
    assert restored["reservedCounts"] == 0
    assert await store.find(Collection.REVIEWS, {"_id": review.inserted_id})


async def test_nested_transaction_joins_outer(store):
    drink = await store.insert(Collection.DRINKS, {"reservedCounts": 0})

    with pytest.raises(RuntimeError):
        async with store.transaction():
            async with store.transaction():
                await store.update(
                    Collection.DRINKS, {"_id": drink.inserted_id},
                    {"$inc": {"reservedCounts": 1}},
                )
            raise RuntimeError("outer fails after inner finished")

    restored = await store.find(Collection.DRINKS, {"_id": drink.inserted_id})
    assert restored["reservedCounts"] == 0


async def test_unsupported_operator_rejected(store):
    drink = await store.insert(Collection.DRINKS, {"name": "Chai"})
    with pytest.raises(ValueError):
        await store.update(
            Collection.DRINKS, {"_id": drink.inserted_id}, {"$rename": {"name": "title"}},
        )


async def test_cancelled_transaction_rolls_back_and_later_writes_commit(
    store, test_session_factory,
):
    drink = await store.insert(Collection.DRINKS, {"reservedCounts": 0})
    doc_filter = {"_id": drink.inserted_id}

    with pytest.raises(asyncio.CancelledError):
        async with store.transaction():
            await store.update(
                Collection.DRINKS, doc_filter, {"$inc": {"reservedCounts": 1}},
            )
            raise asyncio.CancelledError()

    assert store._transaction_depth == 0
    await store.update(Collection.DRINKS, doc_filter, {"$set": {"name": "Chai"}})

    async with test_session_factory() as other_session:
        doc = await SqlRecordStore(other_session).find(Collection.DRINKS, doc_filter)
    assert doc["reservedCounts"] == 0
    assert doc["name"] == "Chai"
