"""User Repository — CRUD and cross-entity operations on user documents.

Invariants:
    - email is unique across users (checked before every insert)
    - Only this repository mutates reviewIds and drinkReserved
    - Projections never include the password hash (get_user_password_by_id is the one exception)
    - reserve_drink appends the reservation and increments the drink's
      reservedCounts by exactly 1 inside one store transaction
    - An unavailable drink is rejected before any write
    - update_user deletes the replaced picture only after the record update is persisted
    - An upload stored for a failed insert or update is removed again

Design Decisions:
    - Store, hasher and picture manager injected: no process-wide collection handles
    - bcrypt runs in a worker thread (CPU-bound, would stall the event loop)
    - delete_one_review_from_user fails on a zero modified count, so it is not
      idempotent: a second call for the same id raises PersistenceError
"""

import asyncio
import logging

from app.core.domain_types import Collection, Reservation, USER_PROFILE_FIELDS
from app.core.errors import (
    DrinkUnavailableError, DuplicateEmailError, ErrorContext,
    InvalidCredentialsError, PersistenceError, ResourceNotFoundError,
)
from app.core.repository_protocols import PasswordHasher, RecordStore
from app.core.reservations import new_reservation, sort_reservations
from app.core.validation import (
    validate_array_of_ids, validate_email, validate_id, validate_name,
    validate_password, validate_phone_number, validate_reservations,
    validate_role,
)
from app.services.picture_assets import PictureAssetManager, PictureSource

logger = logging.getLogger(__name__)


def user_profile(user: dict) -> dict:
    """Public projection of a user document."""
    profile = {"userId": user["_id"]}
    profile.update({key: user.get(key) for key in USER_PROFILE_FIELDS})
    return profile


class UserRepository:
    """User persistence plus the reservation and review-list coordination."""

    def __init__(
        self,
        store: RecordStore,
        hasher: PasswordHasher,
        pictures: PictureAssetManager,
    ):
        self.store = store
        self.hasher = hasher
        self.pictures = pictures

    # ── Registration & login ──────────────────────────────────

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        password: str,
        profile_picture: PictureSource = "",
        role: str = "user",
    ) -> dict:
        """Register a new account. Returns {"insertedUser": True, "userId": ...}."""
        first_name = validate_name(first_name, "firstName")
        last_name = validate_name(last_name, "lastName")
        email = validate_email(email)
        phone_number = validate_phone_number(phone_number)
        password = validate_password(password)
        role = validate_role(role)

        if await self.store.find(Collection.USERS, {"email": email}):
            raise DuplicateEmailError(email)

        hashed = await asyncio.to_thread(self.hasher.hash, password)
        location = await self.pictures.resolve(
            profile_picture, "profilePictureLocation",
        )
        user = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phoneNumber": phone_number,
            "password": hashed,
            "reviewIds": [],
            "profilePictureLocation": location,
            "drinkReserved": [],
            "role": role,
        }
        try:
            result = await self.store.insert(Collection.USERS, user)
            if not result.acknowledged or not result.inserted_id:
                raise PersistenceError(
                    f"Couldn't register the account: {email}", "insert",
                )
        except Exception:
            await self.pictures.release_upload(profile_picture, location)
            raise
        logger.info(
            "Registered user", extra={"user_id": result.inserted_id},
        )
        return {"insertedUser": True, "userId": result.inserted_id}

    async def login_user(self, email: str, password: str) -> dict:
        """Return the profile iff the password verifies.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        email = validate_email(email)
        password = validate_password(password)

        user = await self.store.find(Collection.USERS, {"email": email})
        if not user:
            raise InvalidCredentialsError()
        verified = await asyncio.to_thread(
            self.hasher.verify, password, user.get("password", ""),
        )
        if not verified:
            logger.warning(
                "Password mismatch on login", extra={"user_id": user["_id"]},
            )
            raise InvalidCredentialsError()
        return user_profile(user)

    # ── Full replacement ──────────────────────────────────────

    async def update_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str,
        password: str,
        review_ids: list[str],
        profile_picture: PictureSource,
        drink_reserved: list[Reservation],
        role: str,
    ) -> dict:
        """Replace every field of the user found by email."""
        first_name = validate_name(first_name, "firstName")
        last_name = validate_name(last_name, "lastName")
        email = validate_email(email)
        phone_number = validate_phone_number(phone_number)
        password = validate_password(password)
        review_ids = validate_array_of_ids(review_ids, "reviewIds")
        drink_reserved = validate_reservations(drink_reserved)
        role = validate_role(role)

        user = await self.store.find(Collection.USERS, {"email": email})
        if not user:
            raise ResourceNotFoundError("User", email)
        context = ErrorContext(user_id=user["_id"])
        old_location = user.get("profilePictureLocation", "")
        hashed = await asyncio.to_thread(self.hasher.hash, password)
        location = await self.pictures.resolve(
            profile_picture, "profilePictureLocation",
        )

        updated = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phoneNumber": phone_number,
            "password": hashed,
            "reviewIds": review_ids,
            "profilePictureLocation": location,
            "drinkReserved": drink_reserved,
            "role": role,
        }
        try:
            result = await self.store.update(
                Collection.USERS, {"_id": user["_id"]}, {"$set": updated},
            )
            if result.modified_count == 0:
                raise PersistenceError(
                    f"Failed to update user with email {email}", "update", context,
                )
        except Exception:
            if location != old_location:
                await self.pictures.release_upload(profile_picture, location)
            raise

        if old_location and old_location != location:
            await self.pictures.discard(old_location, context)
        logger.info("Updated user", extra={"user_id": user["_id"]})
        return {"updatedUser": True}

    # ── Lookups ───────────────────────────────────────────────

    async def get_user_info_by_user_id(self, user_id: str) -> dict:
        return user_profile(await self._get_user(user_id))

    async def get_user_info_by_email(self, email: str) -> dict:
        email = validate_email(email)
        user = await self.store.find(Collection.USERS, {"email": email})
        if not user:
            raise ResourceNotFoundError("User", email)
        return user_profile(user)

    async def get_user_id_by_email(self, email: str) -> dict:
        profile = await self.get_user_info_by_email(email)
        return {"id": profile["userId"]}

    async def get_user_password_by_id(self, user_id: str) -> dict:
        """Stored hash only. For authentication collaborators."""
        user = await self._get_user(user_id)
        return {"password": user["password"]}

    async def get_all_users(self) -> list[dict]:
        users = await self.store.find_many(Collection.USERS)
        return [user_profile(u) for u in users]

    async def get_all_reviews_by_user_id(self, user_id: str) -> list[str]:
        user = await self._get_user(user_id)
        return list(user.get("reviewIds") or [])

    # ── Review list maintenance ───────────────────────────────

    async def add_review_id_to_user(self, review_id: str, user_id: str) -> bool:
        """Append a review id to its owner's reviewIds."""
        review_id = validate_id(review_id, "reviewId")
        user = await self._get_user(user_id)
        result = await self.store.update(
            Collection.USERS, {"_id": user["_id"]},
            {"$push": {"reviewIds": review_id}},
        )
        if result.modified_count == 0:
            raise PersistenceError(
                f"Could not add reviewId {review_id} to user", "update",
                ErrorContext(user_id=user["_id"], review_id=review_id),
            )
        return True

    async def delete_one_review_from_user(self, review_id: str, user_id: str) -> bool:
        """Remove the first occurrence of review_id from the user's reviewIds."""
        review_id = validate_id(review_id, "reviewId")
        user = await self._get_user(user_id)
        context = ErrorContext(user_id=user["_id"], review_id=review_id)

        review_ids = list(user.get("reviewIds") or [])
        if review_id in review_ids:
            review_ids.remove(review_id)
        result = await self.store.update(
            Collection.USERS, {"_id": user["_id"]},
            {"$set": {"reviewIds": review_ids}},
        )
        if result.modified_count == 0:
            raise PersistenceError(
                f"Could not delete reviewId {review_id} from user!", "update", context,
            )
        return True

    # ── Reservations ──────────────────────────────────────────

    async def reserve_drink(self, user_id: str, drink_id: str) -> dict:
        """Record a reservation on the user and bump the drink's counter."""
        drink_id = validate_id(drink_id, "drinkId")
        user = await self._get_user(user_id)
        context = ErrorContext(user_id=user["_id"], drink_id=drink_id)

        drink = await self.store.find(Collection.DRINKS, {"_id": drink_id})
        if not drink:
            raise ResourceNotFoundError("Drink", drink_id, context)
        if not drink.get("available", False):
            raise DrinkUnavailableError(drink_id, context)

        reservation = new_reservation(drink_id)
        async with self.store.transaction():
            appended = await self.store.update(
                Collection.USERS, {"_id": user["_id"]},
                {"$push": {"drinkReserved": reservation}},
            )
            if appended.modified_count == 0:
                raise PersistenceError(
                    f"Failed to reserve drink for user with ID {user['_id']}",
                    "update", context,
                )
            counted = await self.store.update(
                Collection.DRINKS, {"_id": drink_id},
                {"$inc": {"reservedCounts": 1}},
            )
            if counted.modified_count == 0:
                raise PersistenceError(
                    f"Failed to update reserved count of drink {drink_id}",
                    "update", context,
                )

        logger.info(
            "Reserved drink",
            extra={"user_id": user["_id"], "drink_id": drink_id},
        )
        return {"reservedDrink": dict(reservation), "userId": user["_id"]}

    async def get_all_drink_reserved_by_user_id(self, user_id: str) -> list[Reservation]:
        user = await self._get_user(user_id)
        return sort_reservations(list(user.get("drinkReserved") or []))

    # ── Internals ─────────────────────────────────────────────

    async def _get_user(self, user_id: str) -> dict:
        user_id = validate_id(user_id, "userId")
        user = await self.store.find(Collection.USERS, {"_id": user_id})
        if not user:
            raise ResourceNotFoundError(
                "User", user_id, ErrorContext(user_id=user_id),
            )
        return user
