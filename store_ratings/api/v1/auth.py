"""Bearer-token auth dependencies (get_current_user, require), cookie helpers, refresh and logout."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Cookie, Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from store_ratings.core.config import settings
from store_ratings.core.database import get_db
from store_ratings.core.errors import AuthenticationError
from store_ratings.core.permissions import authorize
from store_ratings.core.security import decode_access_token, refresh_token_max_age
from store_ratings.models import User
from store_ratings.schemas.auth import CurrentUser, RefreshRequest, TokenResponse
from store_ratings.schemas.common import ApiResponse
from store_ratings.services import accounts

router = APIRouter()
security = HTTPBearer(auto_error=False)

MISSING_CREDENTIALS = "Authorization header is required"
# Bad signature, expired token and deleted user all read the same from outside.
INVALID_TOKEN = "Invalid or expired access token"


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationError(MISSING_CREDENTIALS)
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise AuthenticationError(INVALID_TOKEN) from None
    sub = payload.get("sub")
    if not sub:
        raise AuthenticationError(INVALID_TOKEN)
    user = db.query(User).filter(User.id == str(sub)).first()
    if user is None:
        raise AuthenticationError(INVALID_TOKEN)
    return CurrentUser.model_validate(user)


def require(action: str) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user whose role is allowed to perform action (else 403)."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        authorize(current_user.role, action)
        return current_user

    return dependency


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=refresh_token_max_age(),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )


def clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
    )


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
def refresh(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    body: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=settings.REFRESH_COOKIE_NAME)] = None,
) -> ApiResponse[TokenResponse]:
    """
    Exchange a refresh token for a new access token.
    The token is read from the refresh cookie, or from the body when no cookie is sent.
    The refresh token is rotated: the one presented stops working.
    """
    token = refresh_cookie or (body.refresh_token if body else None)
    _, access_token, refresh_token = accounts.refresh_tokens(db, token)
    set_refresh_cookie(response, refresh_token)
    return ApiResponse(
        data=TokenResponse(access_token=access_token, refresh_token=refresh_token),
        message="Access token refreshed",
    )


@router.post("/logout", response_model=ApiResponse[None])
def logout(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    body: RefreshRequest | None = None,
    refresh_cookie: Annotated[str | None, Cookie(alias=settings.REFRESH_COOKIE_NAME)] = None,
) -> ApiResponse[None]:
    """Revoke the presented refresh token and clear the cookie."""
    accounts.revoke_refresh_token(db, refresh_cookie or (body.refresh_token if body else None))
    clear_refresh_cookie(response)
    return ApiResponse(data=None, message="Logged out successfully")
