"""System administrator endpoints: registration/login, dashboard and user management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from store_ratings.api.v1.auth import require, set_refresh_cookie
from store_ratings.api.v1.params import parse_query
from store_ratings.core.config import settings
from store_ratings.core.database import get_db
from store_ratings.core.errors import AuthorizationError
from store_ratings.core.permissions import Role
from store_ratings.schemas.auth import AuthResponse, CurrentUser, LoginRequest, SignupRequest, UserOut
from store_ratings.schemas.common import ApiResponse
from store_ratings.schemas.users import (
    AdminCreateUserRequest,
    AdminDashboard,
    RoleUpdateRequest,
    UserFilter,
    UsersPage,
)
from store_ratings.services import accounts, admin

router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register_admin(
    body: SignupRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthResponse]:
    """Create a SYSTEM_ADMIN account and sign it in. Disabled when ADMIN_REGISTRATION_ENABLED is false."""
    if not settings.ADMIN_REGISTRATION_ENABLED:
        raise AuthorizationError("Admin registration is disabled")
    user = accounts.register_user(db, body, Role.SYSTEM_ADMIN)
    access_token, refresh_token = accounts.issue_tokens(db, user)
    set_refresh_cookie(response, refresh_token)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=AuthResponse(
            user=UserOut.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="Admin registered successfully",
    )


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login_admin(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthResponse]:
    """Login restricted to SYSTEM_ADMIN accounts; other roles get the generic invalid-credentials error."""
    user = accounts.authenticate(db, str(body.email), body.password, role=Role.SYSTEM_ADMIN)
    access_token, refresh_token = accounts.issue_tokens(db, user)
    set_refresh_cookie(response, refresh_token)
    return ApiResponse(
        data=AuthResponse(
            user=UserOut.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="Login successful",
    )


@router.get("/dashboard", response_model=ApiResponse[AdminDashboard])
def get_dashboard(
    _admin: Annotated[CurrentUser, Depends(require("admin.dashboard"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AdminDashboard]:
    """Totals of users, stores and ratings, users per role, and the five newest users."""
    return ApiResponse(
        data=admin.get_dashboard(db),
        message="Admin dashboard data retrieved successfully",
    )


@router.get("/users", response_model=ApiResponse[UsersPage])
def list_users(
    request: Request,
    _admin: Annotated[CurrentUser, Depends(require("admin.list_users"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UsersPage]:
    """
    List users (admin only).

    Query: name, email, address (substring, case-insensitive), role (exact),
    sortBy (name|email|createdAt, default createdAt), sortOrder (default desc), page, limit.
    """
    filters = parse_query(UserFilter, request)
    return ApiResponse(data=admin.list_users(db, filters), message="Users retrieved successfully")


@router.post("/users", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminCreateUserRequest,
    _admin: Annotated[CurrentUser, Depends(require("admin.create_user"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserOut]:
    """Create a user with any role (NORMAL_USER by default)."""
    user = admin.create_user(db, body)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=UserOut.model_validate(user),
        message="User created successfully",
    )


@router.put("/users/{user_id}/role", response_model=ApiResponse[UserOut])
def update_user_role(
    user_id: str,
    body: RoleUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require("admin.update_user_role"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserOut]:
    user = admin.update_user_role(db, user_id, body.role)
    return ApiResponse(data=UserOut.model_validate(user), message="User role updated successfully")


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: str,
    current_admin: Annotated[CurrentUser, Depends(require("admin.delete_user"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Delete a user with their ratings and store. Admins cannot delete themselves."""
    admin.delete_user(db, current_admin.id, user_id)
    return ApiResponse(data=None, message="User deleted successfully")
