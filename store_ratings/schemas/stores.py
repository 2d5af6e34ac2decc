"""Request/response schemas for stores, store search and the store owner dashboard."""

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from store_ratings.schemas.common import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    CamelModel,
    ListQuery,
    PaginationMeta,
)

STORE_NAME_MAX_LEN = 100
STORE_ADDRESS_MAX_LEN = 400
SEARCH_QUERY_MIN_LEN = 2


class OwnStoreCreate(CamelModel):
    """Store created by its owner; the owner is the caller."""

    name: str = Field(..., min_length=1, max_length=STORE_NAME_MAX_LEN)
    email: EmailStr
    address: str = Field(..., min_length=1, max_length=STORE_ADDRESS_MAX_LEN)


class StoreCreate(OwnStoreCreate):
    """Admin store creation; the designated owner is promoted to STORE_OWNER."""

    owner_id: str = Field(..., min_length=1, description="Owner user ID")


class StoreUpdate(CamelModel):
    """Partial update; absent fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=STORE_NAME_MAX_LEN)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1, max_length=STORE_ADDRESS_MAX_LEN)


class StoreFilter(ListQuery):
    """Query string for GET /stores/all."""

    name: str | None = None
    address: str | None = None
    email: str | None = None
    sort_by: Literal["name", "email", "createdAt", "rating"] | None = None


class StoreSearch(CamelModel):
    """Query string for GET /stores/search: free text matched against name or address."""

    query: str
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = v.strip()
        if len(v) < SEARCH_QUERY_MIN_LEN:
            raise ValueError(f"Search query must be at least {SEARCH_QUERY_MIN_LEN} characters")
        return v


class OwnerRef(CamelModel):
    id: str
    name: str
    email: str


class StoreOut(CamelModel):
    id: str
    name: str
    email: str
    address: str
    owner_id: str
    created_at: datetime
    owner: OwnerRef | None = None


class StoreSummary(StoreOut):
    """Store with its derived rating figures."""

    average_rating: float = Field(default=0, description="Mean rating rounded to one decimal; 0 when unrated")
    total_ratings: int = 0


class RaterRef(CamelModel):
    id: str
    name: str


class StoreRatingEntry(CamelModel):
    id: str
    rating: int
    created_at: datetime
    user: RaterRef


class StoreDetail(StoreSummary):
    ratings: list[StoreRatingEntry] = Field(default_factory=list)


class StoresPage(CamelModel):
    stores: list[StoreSummary]
    pagination: PaginationMeta
    search_query: str | None = None


class StoreBasic(CamelModel):
    id: str
    name: str
    email: str
    address: str
    created_at: datetime


class Customer(CamelModel):
    id: str
    name: str
    email: str


class CustomerRating(CamelModel):
    id: str
    rating: int
    created_at: datetime
    user: Customer


class OwnerStatistics(CamelModel):
    average_rating: float
    total_ratings: int
    rating_distribution: dict[int, int] = Field(
        ..., description="Number of ratings per star value, 5 down to 1"
    )


class OwnerDashboard(CamelModel):
    store: StoreBasic
    statistics: OwnerStatistics
    recent_ratings: list[CustomerRating]
    customers: list[Customer]
