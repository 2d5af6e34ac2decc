"""Password hashing, password policy, and access/refresh token handling."""

import re
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from store_ratings.core.config import settings

# Canonical password policy, shared by every schema that sets a password.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 16
_UPPERCASE_RE = re.compile(r"[A-Z]")
_SPECIAL_RE = re.compile(r"[^A-Za-z0-9]")

# Opaque refresh tokens: 48 random bytes, url-safe base64 (64 chars).
REFRESH_TOKEN_BYTES = 48


def password_policy_errors(password: str) -> list[str]:
    """Return every policy rule the password breaks (empty list when it is acceptable)."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LEN:
        errors.append(f"Password must be at least {PASSWORD_MIN_LEN} characters")
    if len(password) > PASSWORD_MAX_LEN:
        errors.append(f"Password must be at most {PASSWORD_MAX_LEN} characters")
    if not _UPPERCASE_RE.search(password):
        errors.append("Password must contain at least one uppercase letter")
    if not _SPECIAL_RE.search(password):
        errors.append("Password must contain at least one special character")
    return errors


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(sub: str | int, role: str) -> str:
    """Create a JWT access token with sub (user id), role, and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )


def generate_refresh_token() -> str:
    """New opaque refresh credential; only meaningful when stored against a user row."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def refresh_token_max_age() -> int:
    """Cookie lifetime in seconds."""
    return settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
