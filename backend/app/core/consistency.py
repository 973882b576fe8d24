"""Consistency Checks — pure detection of drift between users, reviews and drinks.

Invariants:
    - check_consistency reads its inputs only; repair is the reconciler's job
    - A drink's expected reservedCounts is the number of drinkReserved entries
      naming it, summed over all users
    - A review id belongs in exactly one reviewIds list: its owner's, once
    - A review whose userId names no user is an orphan: it can never be listed,
      and its cascade delete can never succeed

Design Decisions:
    - Report keyed by user id / drink id so a repair pass can issue one update
      per document
"""

from collections import Counter
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CounterDrift:
    drink_id: str
    recorded: int
    actual: int


@dataclass
class ConsistencyReport:
    """Everything check_consistency found. Empty report == consistent store."""
    counter_drift: list[CounterDrift] = field(default_factory=list)
    orphan_reservations: dict[str, list[str]] = field(default_factory=dict)
    dangling_review_ids: dict[str, list[str]] = field(default_factory=dict)
    duplicate_review_ids: dict[str, list[str]] = field(default_factory=dict)
    unlisted_reviews: dict[str, list[str]] = field(default_factory=dict)
    orphan_reviews: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not (
            self.counter_drift or self.orphan_reservations
            or self.dangling_review_ids or self.duplicate_review_ids
            or self.unlisted_reviews or self.orphan_reviews
        )

    def to_dict(self) -> dict:
        return {
            "consistent": self.is_consistent,
            "counter_drift": [
                {"drinkId": d.drink_id, "recorded": d.recorded, "actual": d.actual}
                for d in self.counter_drift
            ],
            "orphan_reservations": self.orphan_reservations,
            "dangling_review_ids": self.dangling_review_ids,
            "duplicate_review_ids": self.duplicate_review_ids,
            "unlisted_reviews": self.unlisted_reviews,
            "orphan_reviews": self.orphan_reviews,
        }


def check_consistency(
    users: list[dict], reviews: list[dict], drinks: list[dict],
) -> ConsistencyReport:
    """Compare the three collections and report every broken cross-reference."""
    report = ConsistencyReport()
    drink_ids = {d["_id"] for d in drinks}
    review_owner = {r["_id"]: r.get("userId") for r in reviews}

    reserved = Counter()
    for user in users:
        missing = []
        for entry in user.get("drinkReserved", []):
            drink_id = entry.get("drinkId")
            if drink_id in drink_ids:
                reserved[drink_id] += 1
            else:
                missing.append(drink_id)
        if missing:
            report.orphan_reservations[user["_id"]] = missing

    for drink in drinks:
        recorded = drink.get("reservedCounts", 0)
        actual = reserved[drink["_id"]]
        if recorded != actual:
            report.counter_drift.append(
                CounterDrift(drink_id=drink["_id"], recorded=recorded, actual=actual),
            )

    listed: dict[str, set[str]] = {}
    for user in users:
        user_id = user["_id"]
        review_ids = user.get("reviewIds", [])
        listed[user_id] = set(review_ids)
        dangling = [rid for rid in review_ids if review_owner.get(rid) != user_id]
        if dangling:
            report.dangling_review_ids[user_id] = dangling
        dupes = sorted(
            rid for rid, n in Counter(review_ids).items()
            if n > 1 and review_owner.get(rid) == user_id
        )
        if dupes:
            report.duplicate_review_ids[user_id] = dupes

    for review_id, owner in review_owner.items():
        if owner not in listed:
            report.orphan_reviews.append(review_id)
        elif review_id not in listed[owner]:
            report.unlisted_reviews.setdefault(owner, []).append(review_id)

    return report
