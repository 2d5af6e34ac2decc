"""Platform administration: dashboard, user listing, user creation, role changes and deletion."""

import logging

from sqlalchemy.orm import Session, selectinload

from store_ratings.core.database import transaction
from store_ratings.core.errors import BadRequestError, NotFoundError
from store_ratings.core.permissions import Role
from store_ratings.models import Rating, Store, User
from store_ratings.schemas.auth import UserOut
from store_ratings.schemas.common import PaginationMeta
from store_ratings.schemas.users import (
    AdminCreateUserRequest,
    AdminDashboard,
    AdminStatistics,
    UserFilter,
    UserListItem,
    UsersPage,
)
from store_ratings.services import accounts
from store_ratings.services.aggregation import count_by_role
from store_ratings.services.query_builder import paginate, sort, where_from_filters

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 5

USER_SORT_COLUMNS = {
    "name": User.name,
    "email": User.email,
    "createdAt": User.created_at,
}


def get_dashboard(db: Session) -> AdminDashboard:
    """Platform totals, users per role and the newest users."""
    total_users = db.query(User).count()
    total_stores = db.query(Store).count()
    total_ratings = db.query(Rating).count()
    roles = [role for (role,) in db.query(User.role).all()]
    recent = (
        db.query(User)
        .order_by(User.created_at.desc())
        .limit(RECENT_USERS_LIMIT)
        .all()
    )
    return AdminDashboard(
        statistics=AdminStatistics(
            total_users=total_users,
            total_stores=total_stores,
            total_ratings=total_ratings,
            users_by_role=count_by_role(roles),
        ),
        recent_users=[UserOut.model_validate(u) for u in recent],
    )


def list_users(db: Session, filters: UserFilter) -> UsersPage:
    """Filtered, sorted page of users with the store each one owns."""
    where = where_from_filters(
        User,
        filters.model_dump(mode="json"),
        text_fields=("name", "email", "address"),
        exact_fields=("role",),
    )
    window = paginate(filters.page, filters.limit)
    query = (
        db.query(User)
        .options(selectinload(User.store))
        .filter(where)
        .order_by(*sort(USER_SORT_COLUMNS, filters.sort_by, filters.sort_order), User.id)
    )
    total = db.query(User).filter(where).count()
    users = window.apply(query).all()
    return UsersPage(
        users=[UserListItem.model_validate(u) for u in users],
        pagination=PaginationMeta.build(filters.page, filters.limit, total),
    )


def create_user(db: Session, body: AdminCreateUserRequest) -> User:
    return accounts.register_user(db, body, body.role)


def update_user_role(db: Session, user_id: str, role: Role) -> User:
    user = accounts.get_user(db, user_id)
    previous = user.role
    with transaction(db):
        user.role = role.value
    db.refresh(user)
    logger.info(
        "User role updated",
        extra={"user_id": user.id, "previous_role": previous, "new_role": role.value},
    )
    return user


def delete_user(db: Session, acting_user_id: str, user_id: str) -> None:
    """
    Delete a user, their ratings and their store (with that store's ratings).

    All rows go in one transaction; admins cannot delete themselves.
    """
    if user_id == acting_user_id:
        raise BadRequestError("Cannot delete your own account")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")

    with transaction(db):
        db.query(Rating).filter(Rating.user_id == user_id).delete(synchronize_session="fetch")
        if user.store is not None:
            db.delete(user.store)
            db.flush()
        db.delete(user)
    logger.info("User deleted", extra={"user_id": user_id, "deleted_by": acting_user_id})
