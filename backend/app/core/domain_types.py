"""Domain Types — identity aliases, collection names and enumerated fields.

Invariants:
    - UserId, ReviewId, DrinkId wrap 32-char hex strings assigned by the store
    - Collection names are exactly users, reviews, drinks
    - Role has exactly two members: user and admin

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: stored in documents and serialized to JSON as plain strings
"""

from enum import Enum
from typing import NewType, TypedDict


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
ReviewId = NewType("ReviewId", str)
DrinkId = NewType("DrinkId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Collection(str, Enum):
    """Named collections of the record store."""
    USERS = "users"
    REVIEWS = "reviews"
    DRINKS = "drinks"


class Role(str, Enum):
    """Account role stored on every user document."""
    USER = "user"
    ADMIN = "admin"


# ─── Document Shapes ─────────────────────────────────────────────

class Reservation(TypedDict):
    """One entry of a user's drinkReserved list."""
    drinkId: str
    timestamp: str


# Fields returned by profile projections (password hash never included)
USER_PROFILE_FIELDS = (
    "firstName", "lastName", "email", "phoneNumber", "reviewIds",
    "profilePictureLocation", "drinkReserved", "role",
)

REVIEW_FIELDS = (
    "timeStamp", "drinkId", "userId", "reviewText", "rating",
    "reviewPictureLocation",
)
