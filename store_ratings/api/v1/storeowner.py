"""Store owner endpoints: registration/login, profile, and the owner's single store."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from store_ratings.api.v1.auth import require, set_refresh_cookie
from store_ratings.core.database import get_db
from store_ratings.core.permissions import Role
from store_ratings.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    ProfileUpdate,
    SignupRequest,
    UserOut,
)
from store_ratings.schemas.common import ApiResponse
from store_ratings.schemas.stores import OwnStoreCreate, StoreOut, StoreUpdate
from store_ratings.schemas.users import StoreOwnerProfile
from store_ratings.services import accounts, stores

router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register_store_owner(
    body: SignupRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthResponse]:
    """Create a STORE_OWNER account (without a store yet) and sign it in."""
    user = accounts.register_user(db, body, Role.STORE_OWNER)
    access_token, refresh_token = accounts.issue_tokens(db, user)
    set_refresh_cookie(response, refresh_token)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=AuthResponse(
            user=UserOut.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="Store owner registered successfully",
    )


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login_store_owner(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[AuthResponse]:
    user = accounts.authenticate(db, str(body.email), body.password, role=Role.STORE_OWNER)
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


@router.get("/profile", response_model=ApiResponse[StoreOwnerProfile])
def get_profile(
    owner: Annotated[CurrentUser, Depends(require("storeowner.profile"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreOwnerProfile]:
    user = accounts.get_user(db, owner.id)
    return ApiResponse(
        data=StoreOwnerProfile.model_validate(user),
        message="Store owner profile retrieved successfully",
    )


@router.put("/profile", response_model=ApiResponse[UserOut])
def update_profile(
    body: ProfileUpdate,
    owner: Annotated[CurrentUser, Depends(require("storeowner.update_profile"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserOut]:
    user = accounts.update_profile(db, owner.id, body)
    return ApiResponse(data=UserOut.model_validate(user), message="Profile updated successfully")


@router.post("/store", response_model=ApiResponse[StoreOut], status_code=status.HTTP_201_CREATED)
def create_own_store(
    body: OwnStoreCreate,
    owner: Annotated[CurrentUser, Depends(require("storeowner.create_store"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreOut]:
    """Open the caller's store. Each owner can have only one."""
    store = stores.create_own_store(db, owner.id, body)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=StoreOut.model_validate(store),
        message="Store created successfully",
    )


@router.put("/store", response_model=ApiResponse[StoreOut])
def update_own_store(
    body: StoreUpdate,
    owner: Annotated[CurrentUser, Depends(require("storeowner.update_store"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreOut]:
    store = stores.update_own_store(db, owner.id, body)
    return ApiResponse(data=StoreOut.model_validate(store), message="Store updated successfully")
