"""Rating endpoints: submit/update (normal users) and rating lookups."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from store_ratings.api.v1.auth import require
from store_ratings.api.v1.params import parse_query
from store_ratings.core.database import get_db
from store_ratings.schemas.auth import CurrentUser
from store_ratings.schemas.common import ApiResponse
from store_ratings.schemas.ratings import (
    RatingCreate,
    RatingOut,
    RatingUpdate,
    ReceivedRatingFilter,
    StoreRatings,
)
from store_ratings.services import ratings

router = APIRouter()


@router.post("/submit", response_model=ApiResponse[RatingOut], status_code=status.HTTP_201_CREATED)
def submit_rating(
    body: RatingCreate,
    user: Annotated[CurrentUser, Depends(require("ratings.submit"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RatingOut]:
    """Rate a store 1-5. A second rating for the same store is 409; use PUT /ratings/{ratingId}."""
    rating = ratings.submit_rating(db, user.id, body)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=RatingOut.model_validate(rating),
        message="Rating submitted successfully",
    )


@router.get("/my-ratings", response_model=ApiResponse[list[RatingOut]])
def get_my_ratings(
    user: Annotated[CurrentUser, Depends(require("ratings.mine"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[RatingOut]]:
    rows = ratings.list_user_ratings(db, user.id)
    return ApiResponse(
        data=[RatingOut.model_validate(r) for r in rows],
        message="User ratings retrieved successfully",
    )


@router.get("/my-store", response_model=ApiResponse[StoreRatings])
def get_my_store_ratings(
    request: Request,
    owner: Annotated[CurrentUser, Depends(require("ratings.store"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreRatings]:
    """
    Ratings of the caller's store with average and count.

    Query: minRating, maxRating (1-5), createdFrom, createdTo (ISO dates), all inclusive.
    """
    filters = parse_query(ReceivedRatingFilter, request)
    return ApiResponse(
        data=ratings.list_owner_store_ratings(db, owner.id, filters),
        message="Store ratings retrieved successfully",
    )


@router.get("/store/{store_id}/my-rating", response_model=ApiResponse[RatingOut | None])
def get_my_store_rating(
    store_id: str,
    user: Annotated[CurrentUser, Depends(require("ratings.my_store_rating"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RatingOut | None]:
    """The caller's rating of one store; data is null when they have not rated it."""
    rating = ratings.get_user_store_rating(db, user.id, store_id)
    return ApiResponse(
        data=RatingOut.model_validate(rating) if rating is not None else None,
        message="User store rating retrieved successfully",
    )


@router.put("/{rating_id}", response_model=ApiResponse[RatingOut])
def update_rating(
    rating_id: str,
    body: RatingUpdate,
    user: Annotated[CurrentUser, Depends(require("ratings.update"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RatingOut]:
    """Change a rating you submitted."""
    rating = ratings.update_rating(db, user.id, rating_id, body.rating)
    return ApiResponse(data=RatingOut.model_validate(rating), message="Rating updated successfully")
