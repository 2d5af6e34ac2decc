"""Core app configuration, database, security and authorization."""

from store_ratings.core.config import get_settings, settings
from store_ratings.core.database import get_db, transaction
from store_ratings.core.permissions import Role

__all__ = ["get_settings", "settings", "get_db", "transaction", "Role"]
