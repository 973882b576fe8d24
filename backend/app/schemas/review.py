"""Review Schemas — request bodies for the review endpoints."""

from app.schemas.user import CamelModel


class ReviewCreate(CamelModel):
    drink_id: str
    user_id: str
    review_text: str
    rating: int
    review_picture_location: str = ""


class ReviewUpdate(CamelModel):
    time_stamp: str
    drink_id: str
    user_id: str
    review_text: str
    rating: int
    review_picture_location: str = ""
