"""Review Routes — review CRUD plus the author's reviewIds bookkeeping.

Invariants:
    - POST creates the review AND appends its id to the author's reviewIds,
      both inside one store transaction (the repository leaves the append to callers)
    - DELETE cascades through ReviewRepository.delete_review
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_review_repository, get_store
from app.infrastructure.document_store import SqlRecordStore
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services.review_repository import ReviewRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    reviews: ReviewRepository = Depends(get_review_repository),
    store: SqlRecordStore = Depends(get_store),
):
    async with store.transaction():
        created = await reviews.create_review(
            body.drink_id, body.user_id, body.review_text, body.rating,
            body.review_picture_location,
        )
        await reviews.users.add_review_id_to_user(
            created["reviewId"], body.user_id,
        )
    return created


@router.get("")
async def list_reviews_for_drink(
    drink_id: str = Query(..., alias="drinkId"),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    return {"reviews": await reviews.get_all_reviews_by_drink_id(drink_id)}


@router.get("/{review_id}")
async def get_review(
    review_id: str, reviews: ReviewRepository = Depends(get_review_repository),
):
    return await reviews.get_review_info_by_review_id(review_id)


@router.put("/{review_id}")
async def update_review(
    review_id: str,
    body: ReviewUpdate,
    reviews: ReviewRepository = Depends(get_review_repository),
):
    return await reviews.update_review(
        review_id, body.time_stamp, body.drink_id, body.user_id,
        body.review_text, body.rating, body.review_picture_location,
    )


@router.delete("/{review_id}")
async def delete_review(
    review_id: str, reviews: ReviewRepository = Depends(get_review_repository),
):
    return await reviews.delete_review(review_id)
