"""User Routes — registration, login, profile, review list and reservations.

Invariants:
    - Every handler is a single repository call; errors propagate to the global
      DrinkReviewError handler
    - No authentication: callers are trusted (session protocol lives elsewhere)
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_user_repository
from app.schemas.user import ReservationCreate, UserCreate, UserLogin, UserUpdate
from app.services.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate, users: UserRepository = Depends(get_user_repository),
):
    """Register a new account."""
    return await users.create_user(
        body.first_name, body.last_name, body.email, body.phone_number,
        body.password, body.profile_picture_location, body.role,
    )


@router.post("/login")
async def login(
    body: UserLogin, users: UserRepository = Depends(get_user_repository),
):
    return await users.login_user(body.email, body.password)


@router.get("")
async def list_users(
    email: str | None = Query(None),
    users: UserRepository = Depends(get_user_repository),
):
    """All users, or the single user owning ?email=."""
    if email is not None:
        return await users.get_user_info_by_email(email)
    return {"users": await users.get_all_users()}


@router.put("")
async def update_user(
    body: UserUpdate, users: UserRepository = Depends(get_user_repository),
):
    """Full replacement of the user identified by body.email."""
    return await users.update_user(
        body.first_name, body.last_name, body.email, body.phone_number,
        body.password, body.review_ids, body.profile_picture_location,
        [entry.model_dump(by_alias=True) for entry in body.drink_reserved],
        body.role,
    )


@router.get("/{user_id}")
async def get_user(
    user_id: str, users: UserRepository = Depends(get_user_repository),
):
    return await users.get_user_info_by_user_id(user_id)


@router.get("/{user_id}/reviews")
async def get_user_reviews(
    user_id: str, users: UserRepository = Depends(get_user_repository),
):
    return {"reviewIds": await users.get_all_reviews_by_user_id(user_id)}


@router.post("/{user_id}/reservations", status_code=status.HTTP_201_CREATED)
async def reserve_drink(
    user_id: str,
    body: ReservationCreate,
    users: UserRepository = Depends(get_user_repository),
):
    return await users.reserve_drink(user_id, body.drink_id)


@router.get("/{user_id}/reservations")
async def get_reservations(
    user_id: str, users: UserRepository = Depends(get_user_repository),
):
    """Reservations, oldest first."""
    return {
        "drinkReserved": await users.get_all_drink_reserved_by_user_id(user_id),
    }
