"""Document Patch — pure filter matching and update-operator application.

Invariants:
    - apply_patch never mutates its input; it returns a new document
    - Supported operators: $set, $inc, $push, $pull (top-level fields only)
    - $pull removes every element equal to the value, like the document stores it mimics
    - Unknown operators raise ValueError before anything is applied

Design Decisions:
    - Pure functions so SqlRecordStore stays a thin IO shell around them
    - "modified" is decided by comparing before/after documents, which gives the
      same modifiedCount semantics as a document database ($set to an equal value
      modifies nothing)
"""

import copy
from typing import Any

SUPPORTED_OPERATORS = frozenset({"$set", "$inc", "$push", "$pull"})


def matches(document: dict, filter_: dict | None) -> bool:
    """Equality match on every filter key. Missing keys never match."""
    if not filter_:
        return True
    for key, expected in filter_.items():
        if key not in document or document[key] != expected:
            return False
    return True


def apply_patch(document: dict, patch: dict[str, dict[str, Any]]) -> dict:
    """Return a copy of document with the update operators applied."""
    unknown = set(patch) - SUPPORTED_OPERATORS
    if unknown:
        raise ValueError(f"Unsupported update operators: {sorted(unknown)}")

    updated = copy.deepcopy(document)
    for field, value in patch.get("$set", {}).items():
        _check_field(field)
        updated[field] = copy.deepcopy(value)

    for field, amount in patch.get("$inc", {}).items():
        _check_field(field)
        current = updated.get(field, 0)
        if not isinstance(current, (int, float)) or isinstance(current, bool):
            raise ValueError(f"Cannot $inc non-numeric field '{field}'")
        updated[field] = current + amount

    for field, value in patch.get("$push", {}).items():
        _check_field(field)
        current = updated.setdefault(field, [])
        if not isinstance(current, list):
            raise ValueError(f"Cannot $push to non-array field '{field}'")
        current.append(copy.deepcopy(value))

    for field, value in patch.get("$pull", {}).items():
        _check_field(field)
        current = updated.get(field)
        if isinstance(current, list):
            updated[field] = [item for item in current if item != value]

    return updated


def _check_field(field: str) -> None:
    if field == "_id":
        raise ValueError("_id is immutable")
