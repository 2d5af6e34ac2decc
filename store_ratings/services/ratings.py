"""Rating submission and updates (one rating per user per store) and rating lookups."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from store_ratings.core.database import transaction
from store_ratings.core.errors import AuthorizationError, ConflictError, NotFoundError
from store_ratings.models import Rating, Store
from store_ratings.schemas.ratings import (
    RatingCreate,
    ReceivedRating,
    ReceivedRatingFilter,
    StoreRatings,
)
from store_ratings.services.aggregation import rating_summary
from store_ratings.services.query_builder import combine_and, date_range, numeric_range
from store_ratings.services.stores import get_owned_store

logger = logging.getLogger(__name__)

ALREADY_RATED = "You have already rated this store. Use update instead."


def _find(db: Session, user_id: str, store_id: str) -> Rating | None:
    return (
        db.query(Rating)
        .options(selectinload(Rating.store))
        .filter(Rating.user_id == user_id, Rating.store_id == store_id)
        .first()
    )


def submit_rating(db: Session, user_id: str, body: RatingCreate) -> Rating:
    """
    Record the user's first rating of a store.

    A second submission for the same store is a ConflictError and leaves the
    existing rating untouched; changes go through update_rating.
    """
    store = db.query(Store).filter(Store.id == body.store_id).first()
    if store is None:
        raise NotFoundError("Store not found")
    if _find(db, user_id, store.id) is not None:
        raise ConflictError(ALREADY_RATED)

    rating = Rating(rating=body.rating, user_id=user_id, store_id=store.id)
    try:
        with transaction(db):
            db.add(rating)
    except IntegrityError as e:
        # A concurrent submission won the unique (user_id, store_id) constraint.
        raise ConflictError(ALREADY_RATED) from e
    db.refresh(rating)
    logger.info("Rating submitted", extra={"store_id": store.id, "user_id": user_id})
    return rating


def update_rating(db: Session, user_id: str, rating_id: str, value: int) -> Rating:
    """Change the value of a rating the user submitted."""
    rating = db.query(Rating).filter(Rating.id == rating_id).first()
    if rating is None:
        raise NotFoundError("Rating not found")
    if rating.user_id != user_id:
        raise AuthorizationError("You can only update your own ratings")
    with transaction(db):
        rating.rating = value
    db.refresh(rating)
    return rating


def list_user_ratings(db: Session, user_id: str) -> list[Rating]:
    return (
        db.query(Rating)
        .options(selectinload(Rating.store))
        .filter(Rating.user_id == user_id)
        .order_by(Rating.created_at.desc(), Rating.id)
        .all()
    )


def get_user_store_rating(db: Session, user_id: str, store_id: str) -> Rating | None:
    """The user's rating of store_id, or None when they have not rated it."""
    return _find(db, user_id, store_id)


def list_owner_store_ratings(
    db: Session, owner_id: str, filters: ReceivedRatingFilter | None = None
) -> StoreRatings:
    """
    Ratings on the owner's store, newest first.

    filters narrows the listed ratings by stars and creation date; average and count
    always cover every rating of the store.
    """
    store = get_owned_store(db, owner_id)
    ratings = (
        db.query(Rating)
        .options(selectinload(Rating.user))
        .filter(Rating.store_id == store.id)
        .order_by(Rating.created_at.desc(), Rating.id)
        .all()
    )
    average, total = rating_summary(ratings)
    listed = ratings
    if filters is not None:
        where = combine_and(
            [
                Rating.store_id == store.id,
                numeric_range(Rating.rating, filters.min_rating, filters.max_rating),
                date_range(Rating.created_at, filters.created_from, filters.created_to),
            ]
        )
        listed = (
            db.query(Rating)
            .options(selectinload(Rating.user))
            .filter(where)
            .order_by(Rating.created_at.desc(), Rating.id)
            .all()
        )
    return StoreRatings(
        ratings=[ReceivedRating.model_validate(r) for r in listed],
        average_rating=average,
        total_ratings=total,
    )
