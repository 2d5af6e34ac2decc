"""API v1 routes, mounted under role-prefixed namespaces."""

from fastapi import APIRouter, status

from store_ratings.api.v1 import admin, auth, health, ratings, storeowner, stores, users
from store_ratings.schemas.common import ValidationErrorResponse

# Every v1 route answers schema violations with 400 {error: [{field, message}]}.
router = APIRouter(responses={status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse}})
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(storeowner.router, prefix="/storeowner", tags=["storeowner"])
router.include_router(stores.router, prefix="/stores", tags=["stores"])
router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
