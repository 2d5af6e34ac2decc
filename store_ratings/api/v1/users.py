"""Normal user endpoints: signup, login, profile and password change."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from store_ratings.api.v1.auth import get_current_user, set_refresh_cookie
from store_ratings.core.database import get_db
from store_ratings.core.permissions import Role
from store_ratings.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdate,
    SignupRequest,
    UserOut,
    UserPayload,
)
from store_ratings.schemas.common import ApiResponse
from store_ratings.services import accounts

router = APIRouter()


@router.post("/signup", response_model=ApiResponse[UserPayload], status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserPayload]:
    """Register a NORMAL_USER account. The response never includes the password."""
    user = accounts.register_user(db, body, Role.NORMAL_USER)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=UserPayload(user=UserOut.model_validate(user)),
        message="User registered successfully",
    )


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthResponse]:
    """
    Authenticate with email and password (any role).
    Returns an access token for the Authorization header (Bearer <accessToken>) and a
    refresh token, which is also set as an HTTP-only cookie.
    """
    user = accounts.authenticate(db, str(body.email), body.password)
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


@router.get("/profile", response_model=ApiResponse[UserPayload])
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserPayload]:
    user = accounts.get_user(db, current_user.id)
    return ApiResponse(
        data=UserPayload(user=UserOut.model_validate(user)),
        message="Profile retrieved successfully",
    )


@router.put("/profile", response_model=ApiResponse[UserPayload])
def update_profile(
    body: ProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserPayload]:
    """Update name and/or address. Email and role cannot be changed here."""
    user = accounts.update_profile(db, current_user.id, body)
    return ApiResponse(
        data=UserPayload(user=UserOut.model_validate(user)),
        message="Profile updated successfully",
    )


@router.put("/update-password", response_model=ApiResponse[None])
def update_password(
    body: PasswordChangeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Change password after confirming the current one. Signs out other sessions."""
    accounts.change_password(db, current_user.id, body)
    return ApiResponse(data=None, message="Password updated successfully")
