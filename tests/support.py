"""Shared fixtures: an in-memory SQLite database and a TestClient wired to it."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from store_ratings.core.config import settings
from store_ratings.core.database import get_db
from store_ratings.core.permissions import Role
from store_ratings.core.security import create_access_token, hash_password
from store_ratings.main import app
from store_ratings.models import Base, Rating, Store, User

# Satisfies the canonical policy: 8-16 chars, uppercase, special character.
PASSWORD = "Secret#Pass1"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test plus helpers to insert rows directly."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = TestingSessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def make_user(
        self,
        email: str,
        role: Role = Role.NORMAL_USER,
        name: str = "Test User",
        password: str = PASSWORD,
    ) -> User:
        user = User(
            name=name,
            email=email,
            address="12 Market Street",
            password_hash=hash_password(password),
            role=role.value,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def make_store(self, owner: User, name: str = "Corner Shop", email: str | None = None) -> Store:
        store = Store(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@shops.dev",
            address="1 High Street",
            owner_id=owner.id,
        )
        self.db.add(store)
        self.db.commit()
        self.db.refresh(store)
        return store

    def make_rating(self, user: User, store: Store, value: int) -> Rating:
        rating = Rating(rating=value, user_id=user.id, store_id=store.id)
        self.db.add(rating)
        self.db.commit()
        self.db.refresh(rating)
        return rating

    def reload(self) -> Session:
        """Drop cached state so assertions see what other sessions committed."""
        self.db.rollback()
        self.db.expire_all()
        return self.db


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose requests use the same database."""

    def setUp(self) -> None:
        super().setUp()
        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    @staticmethod
    def url(path: str) -> str:
        return f"{settings.API_V1_PREFIX}{path}"

    @staticmethod
    def auth(user: User) -> dict[str, str]:
        token = create_access_token(sub=user.id, role=user.role)
        return {"Authorization": f"Bearer {token}"}
