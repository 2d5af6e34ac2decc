"""SQLAlchemy ORM models."""

from store_ratings.models.base import Base
from store_ratings.models.rating import Rating
from store_ratings.models.store import Store
from store_ratings.models.user import User

__all__ = ["Base", "Rating", "Store", "User"]
