"""Schemas for admin user management and the admin dashboard."""

from typing import Literal

from pydantic import Field

from store_ratings.core.permissions import Role
from store_ratings.schemas.auth import SignupRequest, UserOut
from store_ratings.schemas.common import CamelModel, ListQuery, PaginationMeta


class AdminCreateUserRequest(SignupRequest):
    """Admin-created account; role defaults to NORMAL_USER."""

    role: Role = Role.NORMAL_USER


class RoleUpdateRequest(CamelModel):
    role: Role


class UserFilter(ListQuery):
    """Query string for GET /admin/users. Newest first unless told otherwise."""

    name: str | None = None
    email: str | None = None
    address: str | None = None
    role: Role | None = None
    sort_by: Literal["name", "email", "createdAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class StoreRef(CamelModel):
    id: str
    name: str


class UserListItem(UserOut):
    """User entry for admin list (no password), with the owned store if any."""

    store: StoreRef | None = None


class UsersPage(CamelModel):
    users: list[UserListItem]
    pagination: PaginationMeta


class AdminStatistics(CamelModel):
    total_users: int
    total_stores: int
    total_ratings: int
    users_by_role: dict[str, int] = Field(default_factory=dict)


class AdminDashboard(CamelModel):
    statistics: AdminStatistics
    recent_users: list[UserOut]


class OwnedStore(CamelModel):
    id: str
    name: str
    email: str
    address: str


class StoreOwnerProfile(UserOut):
    """Store owner's profile including the store they own, if any."""

    store: OwnedStore | None = None
