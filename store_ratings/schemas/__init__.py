"""Pydantic request/response schemas."""

from store_ratings.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    UserOut,
    UserPayload,
)
from store_ratings.schemas.common import (
    ApiResponse,
    FieldError,
    PaginationMeta,
    validate_payload,
)
from store_ratings.schemas.health import HealthResponse
from store_ratings.schemas.ratings import RatingCreate, RatingOut, RatingUpdate, StoreRatings
from store_ratings.schemas.stores import (
    OwnerDashboard,
    OwnStoreCreate,
    StoreCreate,
    StoreDetail,
    StoreFilter,
    StoreOut,
    StoreSearch,
    StoresPage,
    StoreSummary,
    StoreUpdate,
)
from store_ratings.schemas.users import (
    AdminCreateUserRequest,
    AdminDashboard,
    RoleUpdateRequest,
    StoreOwnerProfile,
    UserFilter,
    UsersPage,
)

__all__ = [
    "AdminCreateUserRequest",
    "AdminDashboard",
    "ApiResponse",
    "AuthResponse",
    "CurrentUser",
    "FieldError",
    "HealthResponse",
    "LoginRequest",
    "OwnStoreCreate",
    "OwnerDashboard",
    "PaginationMeta",
    "PasswordChangeRequest",
    "ProfileUpdate",
    "RatingCreate",
    "RatingOut",
    "RatingUpdate",
    "RoleUpdateRequest",
    "SignupRequest",
    "StoreCreate",
    "StoreDetail",
    "StoreFilter",
    "StoreOut",
    "StoreOwnerProfile",
    "StoreRatings",
    "StoreSearch",
    "StoreSummary",
    "StoreUpdate",
    "StoresPage",
    "TokenResponse",
    "UserFilter",
    "UserOut",
    "UserPayload",
    "UsersPage",
    "validate_payload",
]
