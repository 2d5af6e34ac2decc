"""Store management, listing/search with derived ratings, and the store owner dashboard."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from store_ratings.core.database import transaction
from store_ratings.core.errors import ConflictError, NotFoundError
from store_ratings.core.permissions import Role
from store_ratings.models import Rating, Store, User
from store_ratings.schemas.common import PaginationMeta
from store_ratings.schemas.stores import (
    Customer,
    CustomerRating,
    OwnerDashboard,
    OwnerStatistics,
    OwnStoreCreate,
    StoreBasic,
    StoreCreate,
    StoreDetail,
    StoreFilter,
    StoreSearch,
    StoresPage,
    StoreSummary,
    StoreUpdate,
)
from store_ratings.services.aggregation import rating_distribution, rating_summary
from store_ratings.services.query_builder import (
    paginate,
    search_clause,
    sort,
    where_from_filters,
)

logger = logging.getLogger(__name__)

RECENT_RATINGS_LIMIT = 10

# Database-sortable keys; "rating" is derived and sorted in memory.
STORE_SORT_COLUMNS = {
    "name": Store.name,
    "email": Store.email,
    "createdAt": Store.created_at,
}

STORE_TEXT_FILTERS = ("name", "address", "email")
STORE_SEARCH_FIELDS = ("name", "address")


def _summarize(store: Store) -> StoreSummary:
    average, total = rating_summary(store.ratings)
    return StoreSummary.model_validate(store).model_copy(
        update={"average_rating": average, "total_ratings": total}
    )


def _get_store(db: Session, store_id: str) -> Store:
    store = db.query(Store).filter(Store.id == store_id).first()
    if store is None:
        raise NotFoundError("Store not found")
    return store


def _ensure_email_free(db: Session, email: str, current_email: str | None = None) -> None:
    if email == current_email:
        return
    if db.query(Store).filter(Store.email == email).first() is not None:
        raise ConflictError("A store with this email already exists")


def _apply_update(store: Store, body: StoreUpdate) -> None:
    if body.name:
        store.name = body.name
    if body.email:
        store.email = str(body.email)
    if body.address:
        store.address = body.address


def _save_update(db: Session, store: Store, body: StoreUpdate) -> Store:
    """Apply body in one transaction; losing an email race to another store becomes 409."""
    try:
        with transaction(db):
            _apply_update(store, body)
    except IntegrityError as e:
        raise ConflictError("A store with this email already exists") from e
    db.refresh(store)
    return store


def _promote_owner(owner: User) -> None:
    if owner.role != Role.STORE_OWNER.value:
        owner.role = Role.STORE_OWNER.value


def _demote_owner(db: Session, owner_id: str) -> None:
    owner = db.query(User).filter(User.id == owner_id).first()
    if owner is not None:
        owner.role = Role.NORMAL_USER.value
        db.flush()


def _persist_new_store(db: Session, store: Store, owner: User | None = None) -> Store:
    """Insert store (promoting owner when given) in one transaction; unique races become 409."""
    try:
        with transaction(db):
            db.add(store)
            db.flush()
            if owner is not None:
                _promote_owner(owner)
    except IntegrityError as e:
        raise ConflictError("A store with this email or owner already exists") from e
    db.refresh(store)
    return store


def create_store(db: Session, body: StoreCreate) -> Store:
    """
    Admin store creation.

    Rejects a duplicate store email, a missing owner, or an owner who already has a
    store. The store insert and the owner's promotion to STORE_OWNER commit together.
    """
    email = str(body.email)
    existing = db.query(Store).filter(Store.email == email).first()
    owner = db.query(User).filter(User.id == body.owner_id).first()

    if existing is not None:
        raise ConflictError(f'A store with email "{email}" already exists (Store: {existing.name})')
    if owner is None:
        raise NotFoundError("Selected owner not found in database")
    if owner.store is not None:
        raise ConflictError(f'User "{owner.name}" already owns a store: "{owner.store.name}"')

    store = Store(name=body.name, email=email, address=body.address, owner_id=owner.id)
    store = _persist_new_store(db, store, owner=owner)
    logger.info("Store created", extra={"store_id": store.id, "owner_id": owner.id})
    return store


def update_store(db: Session, store_id: str, body: StoreUpdate) -> Store:
    store = _get_store(db, store_id)
    if body.email:
        _ensure_email_free(db, str(body.email), store.email)
    return _save_update(db, store, body)


def delete_store(db: Session, store_id: str) -> None:
    """Delete the store with its ratings and demote its owner to NORMAL_USER, atomically."""
    store = _get_store(db, store_id)
    owner_id = store.owner_id
    with transaction(db):
        db.delete(store)
        db.flush()
        _demote_owner(db, owner_id)
    logger.info("Store deleted", extra={"store_id": store_id, "owner_id": owner_id})


def list_stores(db: Session, filters: StoreFilter) -> StoresPage:
    """
    Filtered, sorted, paginated stores with average rating and rating count.

    Sorting by rating happens in memory over every matching store, then the page is cut,
    so the order holds across pages.
    """
    where = where_from_filters(Store, filters.model_dump(), text_fields=STORE_TEXT_FILTERS)
    window = paginate(filters.page, filters.limit)
    query = (
        db.query(Store)
        .options(selectinload(Store.owner), selectinload(Store.ratings))
        .filter(where)
    )
    total = db.query(Store).filter(where).count()

    if filters.sort_by == "rating":
        summaries = [_summarize(s) for s in query.order_by(Store.name, Store.id).all()]
        summaries.sort(key=lambda s: s.average_rating, reverse=filters.sort_order == "desc")
        stores = window.slice(summaries)
    else:
        query = query.order_by(*sort(STORE_SORT_COLUMNS, filters.sort_by, filters.sort_order), Store.id)
        stores = [_summarize(s) for s in window.apply(query).all()]

    return StoresPage(
        stores=stores,
        pagination=PaginationMeta.build(filters.page, filters.limit, total),
    )


def search_stores(db: Session, params: StoreSearch) -> StoresPage:
    """Stores whose name or address contains the query, by name."""
    where = search_clause(Store, params.query, STORE_SEARCH_FIELDS)
    window = paginate(params.page, params.limit)
    query = (
        db.query(Store)
        .options(selectinload(Store.owner), selectinload(Store.ratings))
        .filter(where)
        .order_by(Store.name.asc(), Store.id)
    )
    total = db.query(Store).filter(where).count()
    return StoresPage(
        stores=[_summarize(s) for s in window.apply(query).all()],
        pagination=PaginationMeta.build(params.page, params.limit, total),
        search_query=params.query,
    )


def get_store_detail(db: Session, store_id: str) -> StoreDetail:
    store = (
        db.query(Store)
        .options(selectinload(Store.owner), selectinload(Store.ratings).selectinload(Rating.user))
        .filter(Store.id == store_id)
        .first()
    )
    if store is None:
        raise NotFoundError("Store not found")
    average, total = rating_summary(store.ratings)
    return StoreDetail.model_validate(store).model_copy(
        update={"average_rating": average, "total_ratings": total}
    )


def get_owned_store(db: Session, owner_id: str) -> Store:
    store = db.query(Store).filter(Store.owner_id == owner_id).first()
    if store is None:
        raise NotFoundError("No store found for this user")
    return store


def get_owner_dashboard(db: Session, owner_id: str) -> OwnerDashboard:
    """Summary of the caller's store: rating figures, star histogram, recent ratings, customers."""
    store = get_owned_store(db, owner_id)
    ratings = (
        db.query(Rating)
        .options(selectinload(Rating.user))
        .filter(Rating.store_id == store.id)
        .order_by(Rating.created_at.desc(), Rating.id)
        .all()
    )
    average, total = rating_summary(ratings)
    return OwnerDashboard(
        store=StoreBasic.model_validate(store),
        statistics=OwnerStatistics(
            average_rating=average,
            total_ratings=total,
            rating_distribution=rating_distribution(r.rating for r in ratings),
        ),
        recent_ratings=[CustomerRating.model_validate(r) for r in ratings[:RECENT_RATINGS_LIMIT]],
        customers=[Customer.model_validate(r.user) for r in ratings],
    )


def create_own_store(db: Session, owner_id: str, body: OwnStoreCreate) -> Store:
    """A store owner opens their one store."""
    if db.query(Store).filter(Store.owner_id == owner_id).first() is not None:
        raise ConflictError("You already have a store. Each store owner can only have one store.")
    email = str(body.email)
    _ensure_email_free(db, email)
    store = Store(name=body.name, email=email, address=body.address, owner_id=owner_id)
    store = _persist_new_store(db, store)
    logger.info("Store created by owner", extra={"store_id": store.id, "owner_id": owner_id})
    return store


def update_own_store(db: Session, owner_id: str, body: StoreUpdate) -> Store:
    store = db.query(Store).filter(Store.owner_id == owner_id).first()
    if store is None:
        raise NotFoundError("You don't have a store to update")
    if body.email:
        _ensure_email_free(db, str(body.email), store.email)
    return _save_update(db, store, body)
