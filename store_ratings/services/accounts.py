"""Account lifecycle: registration, login, token issue/rotation, profile and password changes."""

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from store_ratings.core.database import transaction
from store_ratings.core.errors import AuthenticationError, ConflictError, NotFoundError
from store_ratings.core.permissions import Role
from store_ratings.core.security import (
    create_access_token,
    generate_refresh_token,
    hash_password,
    verify_password,
)
from store_ratings.models import User
from store_ratings.schemas.auth import PasswordChangeRequest, ProfileUpdate, SignupRequest

logger = logging.getLogger(__name__)

# One message for unknown email, wrong role and wrong password.
INVALID_CREDENTIALS = "Invalid email or password"
DUPLICATE_EMAIL = "User with this email already exists"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


@lru_cache
def _placeholder_hash() -> str:
    """Hash checked when there is no matching account, so every failed login costs one bcrypt check."""
    return hash_password(generate_refresh_token())


def register_user(db: Session, body: SignupRequest, role: Role) -> User:
    """Create a user with a bcrypt-hashed password. Raises ConflictError if the email is taken."""
    email = str(body.email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError(DUPLICATE_EMAIL)

    user = User(
        name=body.name,
        email=email,
        address=body.address,
        password_hash=hash_password(body.password),
        role=role.value,
    )
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email.
        raise ConflictError(DUPLICATE_EMAIL) from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate(db: Session, email: str, password: str, role: Role | None = None) -> User:
    """
    Return the user for valid credentials.

    When role is given (role-scoped login endpoints) a user with any other role is
    rejected exactly like an unknown email or a wrong password.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None or (role is not None and user.role != role.value):
        verify_password(password, _placeholder_hash())
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def issue_tokens(db: Session, user: User) -> tuple[str, str]:
    """Create an access token and a fresh refresh token, persisting the latter on the user row."""
    access_token = create_access_token(sub=user.id, role=user.role)
    refresh_token = generate_refresh_token()
    with transaction(db):
        user.refresh_token = refresh_token
    return access_token, refresh_token


def refresh_tokens(db: Session, refresh_token: str | None) -> tuple[User, str, str]:
    """Exchange a stored refresh token for new credentials; the old refresh token stops working."""
    if not refresh_token:
        raise AuthenticationError(INVALID_REFRESH_TOKEN)
    user = db.query(User).filter(User.refresh_token == refresh_token).first()
    if user is None:
        raise AuthenticationError(INVALID_REFRESH_TOKEN)
    access_token, new_refresh_token = issue_tokens(db, user)
    return user, access_token, new_refresh_token


def revoke_refresh_token(db: Session, refresh_token: str | None) -> None:
    """Forget the refresh token if it belongs to someone. Unknown tokens are ignored."""
    if not refresh_token:
        return
    user = db.query(User).filter(User.refresh_token == refresh_token).first()
    if user is None:
        return
    with transaction(db):
        user.refresh_token = None


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, user_id: str, body: ProfileUpdate) -> User:
    """Apply the non-empty name/address fields from body."""
    user = get_user(db, user_id)
    with transaction(db):
        if body.name:
            user.name = body.name
        if body.address:
            user.address = body.address
    db.refresh(user)
    return user


def change_password(db: Session, user_id: str, body: PasswordChangeRequest) -> None:
    """Replace the password after checking the current one; existing refresh tokens are revoked."""
    user = get_user(db, user_id)
    if not verify_password(body.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    with transaction(db):
        user.password_hash = hash_password(body.new_password)
        user.refresh_token = None
    logger.info("Password changed", extra={"user_id": user.id})
