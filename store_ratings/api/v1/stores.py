"""Store endpoints: public browsing/search, admin management, and the owner dashboard."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from store_ratings.api.v1.auth import require
from store_ratings.api.v1.params import parse_query
from store_ratings.core.database import get_db
from store_ratings.schemas.auth import CurrentUser
from store_ratings.schemas.common import ApiResponse
from store_ratings.schemas.stores import (
    OwnerDashboard,
    StoreCreate,
    StoreDetail,
    StoreFilter,
    StoreOut,
    StoreSearch,
    StoresPage,
    StoreUpdate,
)
from store_ratings.services import stores

router = APIRouter()

# Static paths are declared before /{store_id} so they are not captured as IDs.


@router.get("/search", response_model=ApiResponse[StoresPage])
def search_stores(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoresPage]:
    """Search stores by name or address. Query: query (min 2 chars), page, limit."""
    params = parse_query(StoreSearch, request)
    return ApiResponse(
        data=stores.search_stores(db, params),
        message="Store search completed successfully",
    )


@router.get("/all", response_model=ApiResponse[StoresPage])
def get_all_stores(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoresPage]:
    """
    List stores with average rating and rating count.

    Query: name, address, email (substring, case-insensitive),
    sortBy (name|email|createdAt|rating), sortOrder (asc|desc), page, limit.
    """
    filters = parse_query(StoreFilter, request)
    return ApiResponse(data=stores.list_stores(db, filters), message="Stores retrieved successfully")


@router.get("/dashboard/owner", response_model=ApiResponse[OwnerDashboard])
def get_owner_dashboard(
    owner: Annotated[CurrentUser, Depends(require("stores.owner_dashboard"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[OwnerDashboard]:
    return ApiResponse(
        data=stores.get_owner_dashboard(db, owner.id),
        message="Store dashboard data retrieved successfully",
    )


@router.post("/create", response_model=ApiResponse[StoreOut], status_code=status.HTTP_201_CREATED)
def create_store(
    body: StoreCreate,
    _admin: Annotated[CurrentUser, Depends(require("stores.create"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreOut]:
    """Create a store for ownerId; the owner becomes a STORE_OWNER in the same transaction."""
    store = stores.create_store(db, body)
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=StoreOut.model_validate(store),
        message="Store created successfully",
    )


@router.get("/{store_id}", response_model=ApiResponse[StoreDetail])
def get_store(
    store_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreDetail]:
    return ApiResponse(
        data=stores.get_store_detail(db, store_id),
        message="Store retrieved successfully",
    )


@router.put("/{store_id}", response_model=ApiResponse[StoreOut])
def update_store(
    store_id: str,
    body: StoreUpdate,
    _admin: Annotated[CurrentUser, Depends(require("stores.update"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[StoreOut]:
    store = stores.update_store(db, store_id, body)
    return ApiResponse(data=StoreOut.model_validate(store), message="Store updated successfully")


@router.delete("/{store_id}", response_model=ApiResponse[None])
def delete_store(
    store_id: str,
    _admin: Annotated[CurrentUser, Depends(require("stores.delete"))],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Delete a store and its ratings; its owner goes back to NORMAL_USER."""
    stores.delete_store(db, store_id)
    return ApiResponse(data=None, message="Store deleted successfully")
