"""Request/response schemas for ratings."""

from datetime import datetime

from pydantic import Field

from store_ratings.models.rating import RATING_MAX, RATING_MIN
from store_ratings.schemas.common import CamelModel
from store_ratings.schemas.stores import Customer


class RatingUpdate(CamelModel):
    # Strict: JSON true or "4" are not ratings.
    rating: int = Field(..., strict=True, ge=RATING_MIN, le=RATING_MAX, description="Whole stars, 1-5")


class RatingCreate(RatingUpdate):
    store_id: str = Field(..., min_length=1, description="Store ID")


class RatedStore(CamelModel):
    id: str
    name: str
    address: str


class RatingOut(CamelModel):
    id: str
    rating: int
    user_id: str
    store_id: str
    created_at: datetime
    updated_at: datetime
    store: RatedStore | None = None


class ReceivedRating(CamelModel):
    """A rating on the caller's store, with the customer who left it."""

    id: str
    rating: int
    created_at: datetime
    updated_at: datetime
    user: Customer


class StoreRatings(CamelModel):
    ratings: list[ReceivedRating]
    average_rating: float
    total_ratings: int


class ReceivedRatingFilter(CamelModel):
    """Query string for GET /ratings/my-store: inclusive star bounds and creation dates."""

    min_rating: int | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    max_rating: int | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    created_from: datetime | None = None
    created_to: datetime | None = None
