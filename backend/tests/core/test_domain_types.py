"""Domain Types — identity aliases, collection names and enumerated fields.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to string
    - Profile projection never lists the password field
"""

from uuid import uuid4

from app.core.domain_types import (
    UserId, ReviewId, DrinkId, Collection, Role, Reservation,
    USER_PROFILE_FIELDS, REVIEW_FIELDS,
)


def test_identity_types_wrap_hex_strings():
    raw = uuid4().hex
    assert UserId(raw) == raw
    assert ReviewId(raw) == raw
    assert DrinkId(raw) == raw


def test_collections_are_exactly_three():
    assert {c.value for c in Collection} == {"users", "reviews", "drinks"}


def test_role_has_two_members():
    assert set(Role) == {Role.USER, Role.ADMIN}
    assert Role("admin") is Role.ADMIN


def test_enums_are_string_subclasses():
    assert isinstance(Collection.USERS, str)
    assert Role.USER == "user"


def test_reservation_is_plain_dict():
    entry = Reservation(drinkId="d", timestamp="2026-01-01T00:00:00.000+00:00")
    assert entry == {"drinkId": "d", "timestamp": "2026-01-01T00:00:00.000+00:00"}


def test_profile_fields_exclude_password():
    assert "password" not in USER_PROFILE_FIELDS
    assert "phoneNumber" in USER_PROFILE_FIELDS


def test_review_fields_cover_document_shape():
    assert set(REVIEW_FIELDS) == {
        "timeStamp", "drinkId", "userId", "reviewText", "rating",
        "reviewPictureLocation",
    }
