"""Password hashing and JWT creation/verification for access and refresh tokens."""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from app.core.config import Settings

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"

# Bcrypt cost used when no settings are at hand.
BCRYPT_ROUNDS = 12

# Max password length accepted at the API layer; bcrypt itself reads 72 bytes.
PASSWORD_MAX_LEN = 128


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued together for one subject."""

    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def dummy_password_hash(rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash checked against when the email is unknown, so login timing does not reveal it."""
    return hash_password("turnstile-timing-dummy", rounds=rounds)


def _encode(
    sub: str,
    role: str,
    token_type: str,
    expires_in: timedelta,
    secret: str,
    algorithm: str,
) -> tuple[str, datetime]:
    now = datetime.now(UTC)
    expire = now + expires_in
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "type": token_type,
        # Unique per token: two pairs issued within the same second must still differ
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, secret, algorithm=algorithm), expire


def create_access_token(sub: str, role: str, settings: Settings) -> str:
    """Create a JWT access token with sub (user id), role, and exp, signed with JWT_SECRET."""
    token, _ = _encode(
        sub,
        role,
        TOKEN_TYPE_ACCESS,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings.JWT_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
    )
    return token


def create_refresh_token(sub: str, role: str, settings: Settings) -> tuple[str, datetime]:
    """Create a JWT refresh token signed with JWT_REFRESH_SECRET; returns (token, expires_at)."""
    return _encode(
        sub,
        role,
        TOKEN_TYPE_REFRESH,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
    )


def issue_token_pair(user_id: str, role: str, settings: Settings) -> TokenPair:
    """Build an independently signed access/refresh pair. No side effects."""
    access_token = create_access_token(user_id, role, settings)
    refresh_token, refresh_expires_at = create_refresh_token(user_id, role, settings)
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        refresh_expires_at=refresh_expires_at,
    )


def _decode(token: str, secret: str, algorithm: str, token_type: str) -> dict[str, Any]:
    payload = jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        options={"require": ["exp", "sub"]},
    )
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Expected a {token_type} token")
    return payload


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate an access JWT; return payload (sub, role, type, jti, iat, exp).
    Raises jwt.PyJWTError on invalid, expired, or wrong-type token.
    """
    return _decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
        TOKEN_TYPE_ACCESS,
    )


def decode_refresh_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate a refresh JWT with the refresh secret.
    Raises jwt.PyJWTError on invalid, expired, or wrong-type token.
    """
    return _decode(
        token,
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        settings.JWT_ALGORITHM,
        TOKEN_TYPE_REFRESH,
    )
