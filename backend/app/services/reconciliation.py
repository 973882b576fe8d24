"""Consistency Reconciler — detects and repairs drift between the three collections.

Invariants:
    - check() never writes
    - repair() writes inside one store transaction and returns the report it acted on
    - reservedCounts is set to the number of reservation entries naming the drink
    - reviewIds keeps its order: dangling ids dropped, duplicates collapsed to the
      first occurrence, unlisted reviews appended
    - Reservations pointing at missing drinks are reported, never removed
      (reservation entries are append-only)
    - Reviews whose owner no longer exists are deleted: no reviewIds list can hold
      them and delete_review would keep failing on the cascade
"""

import logging

from app.core.consistency import ConsistencyReport, check_consistency
from app.core.domain_types import Collection
from app.core.repository_protocols import RecordStore

logger = logging.getLogger(__name__)


class ConsistencyReconciler:

    def __init__(self, store: RecordStore):
        self.store = store

    async def check(self) -> ConsistencyReport:
        users, reviews, drinks = await self._load()
        return check_consistency(users, reviews, drinks)

    async def repair(self) -> ConsistencyReport:
        users, reviews, drinks = await self._load()
        report = check_consistency(users, reviews, drinks)
        if report.is_consistent:
            return report

        users_by_id = {u["_id"]: u for u in users}
        affected_users = (
            set(report.dangling_review_ids)
            | set(report.duplicate_review_ids)
            | set(report.unlisted_reviews)
        )
        async with self.store.transaction():
            for drift in report.counter_drift:
                await self.store.update(
                    Collection.DRINKS, {"_id": drift.drink_id},
                    {"$set": {"reservedCounts": drift.actual}},
                )
                logger.warning(
                    f"reservedCounts {drift.recorded} -> {drift.actual}",
                    extra={"drink_id": drift.drink_id},
                )
            for user_id in sorted(affected_users):
                review_ids = _repaired_review_ids(
                    users_by_id[user_id].get("reviewIds", []),
                    drop=set(report.dangling_review_ids.get(user_id, [])),
                    append=report.unlisted_reviews.get(user_id, []),
                )
                await self.store.update(
                    Collection.USERS, {"_id": user_id},
                    {"$set": {"reviewIds": review_ids}},
                )
                logger.warning("Repaired reviewIds", extra={"user_id": user_id})
            for review_id in report.orphan_reviews:
                await self.store.delete(Collection.REVIEWS, {"_id": review_id})
                logger.warning("Deleted orphan review", extra={"review_id": review_id})
        return report

    async def _load(self) -> tuple[list[dict], list[dict], list[dict]]:
        users = await self.store.find_many(Collection.USERS)
        reviews = await self.store.find_many(Collection.REVIEWS)
        drinks = await self.store.find_many(Collection.DRINKS)
        return users, reviews, drinks


def _repaired_review_ids(
    review_ids: list[str], drop: set[str], append: list[str],
) -> list[str]:
    seen: set[str] = set()
    repaired = []
    for review_id in [*review_ids, *append]:
        if review_id in drop or review_id in seen:
            continue
        seen.add(review_id)
        repaired.append(review_id)
    return repaired
