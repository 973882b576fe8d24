"""Review Repository — CRUD on review documents with cascade delete into users.

Invariants:
    - create_review does NOT append the new id to the author's reviewIds;
      the caller does that through UserRepository.add_review_id_to_user
    - delete_review removes the review and its id from the owner's reviewIds
      inside one store transaction; a failed cascade raises CascadeError and
      the review deletion is rolled back with it
    - users must share this repository's store, or the cascade escapes the transaction

Design Decisions:
    - Cascade goes through UserRepository.delete_one_review_from_user: only the
      user repository writes reviewIds
"""

import logging

from app.core.domain_types import Collection, REVIEW_FIELDS
from app.core.errors import (
    CascadeError, DrinkReviewError, ErrorContext, PersistenceError,
    ResourceNotFoundError,
)
from app.core.repository_protocols import RecordStore
from app.core.validation import (
    generate_current_date, validate_date_time, validate_id, validate_rating,
    validate_review_text,
)
from app.services.picture_assets import PictureAssetManager, PictureSource
from app.services.user_repository import UserRepository

logger = logging.getLogger(__name__)


def review_info(review: dict) -> dict:
    info = {"_id": review["_id"]}
    info.update({key: review.get(key) for key in REVIEW_FIELDS})
    return info


class ReviewRepository:
    """Review persistence; delegates reviewIds maintenance to UserRepository."""

    def __init__(
        self,
        store: RecordStore,
        users: UserRepository,
        pictures: PictureAssetManager,
    ):
        self.store = store
        self.users = users
        self.pictures = pictures

    async def create_review(
        self,
        drink_id: str,
        user_id: str,
        review_text: str,
        rating: int,
        review_picture_location: PictureSource = "",
    ) -> dict:
        drink_id = validate_id(drink_id, "drinkId")
        user_id = validate_id(user_id, "userId")
        review_text = validate_review_text(review_text)
        rating = validate_rating(rating)
        location = await self.pictures.resolve(
            review_picture_location, "reviewPictureLocation",
        )

        review = {
            "timeStamp": generate_current_date(),
            "drinkId": drink_id,
            "userId": user_id,
            "reviewText": review_text,
            "rating": rating,
            "reviewPictureLocation": location,
        }
        try:
            result = await self.store.insert(Collection.REVIEWS, review)
            if not result.acknowledged or not result.inserted_id:
                raise PersistenceError(
                    "Couldn't add review", "insert",
                    ErrorContext(user_id=user_id, drink_id=drink_id),
                )
        except Exception:
            await self.pictures.release_upload(review_picture_location, location)
            raise
        logger.info(
            "Created review",
            extra={"review_id": result.inserted_id, "user_id": user_id},
        )
        return {"insertedReview": True, "reviewId": result.inserted_id}

    async def update_review(
        self,
        review_id: str,
        time_stamp: str,
        drink_id: str,
        user_id: str,
        review_text: str,
        rating: int,
        review_picture_location: PictureSource,
    ) -> dict:
        review_id = validate_id(review_id, "reviewId")
        time_stamp = validate_date_time(time_stamp)
        drink_id = validate_id(drink_id, "drinkId")
        user_id = validate_id(user_id, "userId")
        review_text = validate_review_text(review_text)
        rating = validate_rating(rating)

        review = await self.store.find(Collection.REVIEWS, {"_id": review_id})
        if not review:
            raise ResourceNotFoundError(
                "Review", review_id, ErrorContext(review_id=review_id),
            )
        old_location = review.get("reviewPictureLocation", "")
        location = await self.pictures.resolve(
            review_picture_location, "reviewPictureLocation",
        )
        try:
            result = await self.store.update(
                Collection.REVIEWS, {"_id": review_id},
                {"$set": {
                    "timeStamp": time_stamp,
                    "drinkId": drink_id,
                    "userId": user_id,
                    "reviewText": review_text,
                    "rating": rating,
                    "reviewPictureLocation": location,
                }},
            )
            if result.modified_count == 0:
                raise PersistenceError(
                    f"Failed to update review with reviewId {review_id}", "update",
                    ErrorContext(review_id=review_id),
                )
        except Exception:
            if location != old_location:
                await self.pictures.release_upload(review_picture_location, location)
            raise
        return {"updatedReview": True}

    async def delete_review(self, review_id: str) -> dict:
        """Delete a review and remove its id from the owner's reviewIds."""
        review_id = validate_id(review_id, "reviewId")
        review = await self.store.find(Collection.REVIEWS, {"_id": review_id})
        if not review:
            raise ResourceNotFoundError(
                "Review", review_id, ErrorContext(review_id=review_id),
            )
        owner_id = review["userId"]
        context = ErrorContext(user_id=owner_id, review_id=review_id)

        async with self.store.transaction():
            deleted = await self.store.delete(Collection.REVIEWS, {"_id": review_id})
            if deleted.deleted_count == 0:
                raise PersistenceError(
                    f"Could not delete review with reviewId: {review_id}",
                    "delete", context,
                )
            try:
                await self.users.delete_one_review_from_user(review_id, owner_id)
            except DrinkReviewError as e:
                logger.error(
                    f"Cascade failed: {e.message}",
                    extra={"review_id": review_id, "user_id": owner_id,
                           "error_code": e.code},
                )
                raise CascadeError(
                    f"Some error happened when deleting reviewId: {review_id}",
                    context,
                ) from e

        logger.info(
            "Deleted review", extra={"review_id": review_id, "user_id": owner_id},
        )
        return {
            "deletedReview": True,
            "message": (
                f"The review {review_id} has been deleted in reviews "
                f"collections and user collections!"
            ),
        }

    async def get_review_info_by_review_id(self, review_id: str) -> dict:
        review_id = validate_id(review_id, "reviewId")
        review = await self.store.find(Collection.REVIEWS, {"_id": review_id})
        if not review:
            raise ResourceNotFoundError(
                "Review", review_id, ErrorContext(review_id=review_id),
            )
        return review_info(review)

    async def get_all_reviews_by_drink_id(self, drink_id: str) -> list[dict]:
        drink_id = validate_id(drink_id, "drinkId")
        reviews = await self.store.find_many(
            Collection.REVIEWS, {"drinkId": drink_id},
        )
        return [review_info(r) for r in reviews]
