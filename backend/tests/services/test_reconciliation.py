"""Consistency Reconciler — check() reports drift, repair() fixes it in one transaction."""

from app.core.domain_types import Collection
from app.services.reconciliation import ConsistencyReconciler

from tests.services.factories import MISSING_ID


async def _seed_clean(users, reviews, make_user, make_drink):
    user_id = await make_user()
    drink_id = await make_drink()
    await users.reserve_drink(user_id, drink_id)
    created = await reviews.create_review(drink_id, user_id, "Nice", 4)
    await users.add_review_id_to_user(created["reviewId"], user_id)
    return user_id, drink_id, created["reviewId"]


async def test_clean_store_is_consistent(store, users, reviews, make_user, make_drink):
    await _seed_clean(users, reviews, make_user, make_drink)

    report = await ConsistencyReconciler(store).check()

    assert report.is_consistent
    assert report.to_dict()["consistent"] is True


async def test_check_reports_without_writing(store, users, reviews, make_user, make_drink):
    _, drink_id, _ = await _seed_clean(users, reviews, make_user, make_drink)
    await store.update(
        Collection.DRINKS, {"_id": drink_id}, {"$set": {"reservedCounts": 7}},
    )

    report = await ConsistencyReconciler(store).check()

    assert [(d.recorded, d.actual) for d in report.counter_drift] == [(7, 1)]
    drink = await store.find(Collection.DRINKS, {"_id": drink_id})
    assert drink["reservedCounts"] == 7


async def test_repair_fixes_counters_and_review_lists(
    store, users, reviews, make_user, make_drink,
):
    user_id, drink_id, review_id = await _seed_clean(
        users, reviews, make_user, make_drink,
    )
    unlisted = await reviews.create_review(drink_id, user_id, "Forgot to list", 2)
    await store.update(
        Collection.USERS, {"_id": user_id},
        {"$set": {"reviewIds": [review_id, MISSING_ID, review_id]}},
    )
    await store.update(
        Collection.DRINKS, {"_id": drink_id}, {"$set": {"reservedCounts": 0}},
    )

    reconciler = ConsistencyReconciler(store)
    report = await reconciler.repair()

    assert not report.is_consistent
    assert report.dangling_review_ids == {user_id: [MISSING_ID]}
    assert report.duplicate_review_ids == {user_id: [review_id]}
    assert report.unlisted_reviews == {user_id: [unlisted["reviewId"]]}
    assert await users.get_all_reviews_by_user_id(user_id) == [
        review_id, unlisted["reviewId"],
    ]
    drink = await store.find(Collection.DRINKS, {"_id": drink_id})
    assert drink["reservedCounts"] == 1
    assert (await reconciler.check()).is_consistent


async def test_orphan_reservations_reported_not_removed(
    store, users, make_user, make_drink,
):
    user_id = await make_user()
    drink_id = await make_drink()
    await users.reserve_drink(user_id, drink_id)
    await store.delete(Collection.DRINKS, {"_id": drink_id})

    report = await ConsistencyReconciler(store).repair()

    assert report.orphan_reservations == {user_id: [drink_id]}
    reservations = await users.get_all_drink_reserved_by_user_id(user_id)
    assert [r["drinkId"] for r in reservations] == [drink_id]


async def test_review_without_owner_reported_and_removed_on_repair(
    store, reviews, make_drink,
):
    drink_id = await make_drink()
    created = await reviews.create_review(drink_id, MISSING_ID, "No author", 3)
    reconciler = ConsistencyReconciler(store)

    report = await reconciler.check()
    assert report.orphan_reviews == [created["reviewId"]]
    assert not report.is_consistent

    await reconciler.repair()

    assert await store.find(Collection.REVIEWS, {"_id": created["reviewId"]}) is None
    assert (await reconciler.check()).is_consistent
